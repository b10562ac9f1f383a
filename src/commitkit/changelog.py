# Copyright 2026 Google LLC
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.
#
# SPDX-License-Identifier: Apache-2.0


"""Changelog assembly: commits grouped into sections and highlights.

Key Concepts (ELI5)::

    ┌─────────────────────────┬─────────────────────────────────────────────┐
    │ Concept                 │ Plain-English                               │
    ├─────────────────────────┼─────────────────────────────────────────────┤
    │ ChangelogSection        │ Commits under one heading ("Features"),     │
    │                         │ oldest first.                               │
    ├─────────────────────────┼─────────────────────────────────────────────┤
    │ Highlight               │ Notes grouped by title, e.g. every          │
    │                         │ "BREAKING CHANGE" note in this release.     │
    ├─────────────────────────┼─────────────────────────────────────────────┤
    │ Render context          │ The dict handed to the templates: version,  │
    │                         │ host/owner/repository, sections and         │
    │                         │ highlights plus anything the caller adds.   │
    └─────────────────────────┴─────────────────────────────────────────────┘

Changelog generation flow::

    vcs.commits(since=tag)          newest first
         │
         ▼
    CommitParser.parse → skip_reverted
         │
         ├── notes    → highlights (by note title)
         └── type     → sections   (non-hidden types, table order)
         │
         ▼
    ChangelogRenderer(context) → markdown
         │
         ▼
    write_changelog_file(file)      optional

Usage::

    writer = ChangelogWriter(GitCLIBackend(Path('.')), file=Path('CHANGELOG.md'))
    markdown = await writer.write('1.2.0', since='v1.1.0')
"""

from __future__ import annotations

import re
from collections.abc import AsyncIterable, Mapping, Sequence
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from commitkit.advisor import DEFAULT_COMMIT_TYPES, CommitType
from commitkit.backends.vcs import VCS
from commitkit.commit_parsing import Commit, CommitParser
from commitkit.history import parse_commits
from commitkit.logging import get_logger
from commitkit.output import DEFAULT_HEADER, write_changelog_file
from commitkit.render import ChangelogRenderer
from commitkit.reverts import skip_reverted

logger = get_logger(__name__)

MATCH_REPOSITORY_URL: re.Pattern[str] = re.compile(r'^(?:https?://|git@)([^:/]+)[:/]([^/]+)/([^/.]+)(?:\.git)?$')


@dataclass(frozen=True)
class ChangelogSection:
    """Commits of one section, oldest first."""

    title: str
    commits: tuple[Commit, ...]


@dataclass(frozen=True)
class HighlightNote:
    """One note and the commit that carried it."""

    commit: Commit
    text: str


@dataclass(frozen=True)
class Highlight:
    """All notes sharing a title, in stream order."""

    title: str
    notes: tuple[HighlightNote, ...]


def url_to_context(url: str) -> dict[str, str]:
    """Extract ``host``, ``owner`` and ``repository`` from a remote URL.

    GitHub remotes map to ``https://github.com``; other hosts are kept
    as the bare host name. Unrecognized URLs give an empty dict.

    >>> url_to_context('git@github.com:owner/repo.git')
    {'host': 'https://github.com', 'owner': 'owner', 'repository': 'repo'}
    """
    match = MATCH_REPOSITORY_URL.match(url.strip())
    if match is None:
        return {}
    host, owner, repository = match.groups()
    return {
        'host': 'https://github.com' if 'github.com' in host else host,
        'owner': owner,
        'repository': repository,
    }


async def build_changelog_context(
    commits: AsyncIterable[Commit],
    *,
    types: Sequence[CommitType] = DEFAULT_COMMIT_TYPES,
    version: str = '0.0.0',
    remote: Mapping[str, Any] | None = None,
    context: Mapping[str, Any] | None = None,
    ignore_reverted: bool = True,
) -> dict[str, Any]:
    """Group a newest-first commit stream into the render context.

    Args:
        commits: Parsed commits, newest first.
        types: Commit type table; hidden types get no section.
        version: Release version shown in the heading.
        remote: ``host``/``owner``/``repository`` for links.
        context: Extra keys; they override ``version`` and ``remote``.
        ignore_reverted: Drop commits undone by a later revert.

    Returns:
        A dict with ``version``, the remote and caller keys, and
        ``highlights``/``sections`` lists without empty groups.
    """
    by_type: dict[str, CommitType] = {}
    for commit_type in types:
        by_type.setdefault(commit_type.type, commit_type)

    sections: dict[str, list[Commit]] = {}
    for commit_type in types:
        if not commit_type.hidden:
            sections.setdefault(commit_type.section, [])

    highlights: dict[str, list[HighlightNote]] = {}
    count = 0

    async for commit in skip_reverted(commits, ignore_reverted=ignore_reverted):
        count += 1
        for note in commit.notes:
            highlights.setdefault(note.title, []).append(HighlightNote(commit=commit, text=note.text))

        commit_type = by_type.get(commit.type or '')
        if commit_type is not None and commit_type.section in sections:
            sections[commit_type.section].append(commit)

    logger.debug('changelog_grouped', commits=count, highlights=len(highlights))

    return {
        'version': version,
        **(remote or {}),
        **(context or {}),
        'highlights': [Highlight(title=t, notes=tuple(n)) for t, n in highlights.items() if n],
        'sections': [ChangelogSection(title=t, commits=tuple(reversed(c))) for t, c in sections.items() if c],
    }


class ChangelogWriter:
    """Render release notes from repository history.

    Args:
        vcs: Source of raw commits and the remote URL.
        parser: Commit parser; defaults to :class:`CommitParser`.
        types: Commit type table.
        renderer: Template renderer; defaults to the built-in templates.
        header: Heading kept at the top of ``file``.
        file: Changelog to prepend the release to; ``None`` only renders.
        context: Extra render context (``link_compare``, ``title``...).
        ignore_reverted: Leave out commits undone by a later revert.
    """

    def __init__(
        self,
        vcs: VCS,
        *,
        parser: CommitParser | None = None,
        types: Sequence[CommitType] = DEFAULT_COMMIT_TYPES,
        renderer: ChangelogRenderer | None = None,
        header: str = DEFAULT_HEADER,
        file: Path | str | None = None,
        context: Mapping[str, Any] | None = None,
        ignore_reverted: bool = True,
    ) -> None:
        """Store collaborators."""
        self.vcs = vcs
        self.parser = parser or CommitParser()
        self.types = tuple(types)
        self.renderer = renderer or ChangelogRenderer()
        self.header = header
        self.file = Path(file) if file else None
        self.context = dict(context or {})
        self.ignore_reverted = ignore_reverted

    async def write(self, version: str = '0.0.0', *, since: str | None = None) -> str:
        """Render the release and prepend it to :attr:`file` when set.

        Args:
            version: Release version for the heading.
            since: Only commits after this revision; ``None`` reads the
                whole history.

        Returns:
            The rendered markdown for this release.
        """
        remote = url_to_context(await self.vcs.remote_url())
        context = await build_changelog_context(
            parse_commits(self.vcs, self.parser, since=since),
            types=self.types,
            version=version,
            remote=remote,
            context=self.context,
            ignore_reverted=self.ignore_reverted,
        )
        changes = self.renderer(context)

        if self.file is not None:
            await write_changelog_file(self.file, changes, self.header)
        return changes


__all__ = [
    'MATCH_REPOSITORY_URL',
    'ChangelogSection',
    'ChangelogWriter',
    'Highlight',
    'HighlightNote',
    'build_changelog_context',
    'url_to_context',
]
