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

"""Recommend a semver bump from the commits since the last release.

Key Concepts (ELI5)::

    ┌─────────────────────────┬─────────────────────────────────────────────┐
    │ Concept                 │ Plain-English                               │
    ├─────────────────────────┼─────────────────────────────────────────────┤
    │ CommitType              │ Maps ``feat`` to "Features". ``hidden``     │
    │                         │ types (chore, docs...) are not user-facing. │
    ├─────────────────────────┼─────────────────────────────────────────────┤
    │ level                   │ 0 = major, 1 = minor, 2 = patch. Starts at  │
    │                         │ patch and only ever goes down.              │
    ├─────────────────────────┼─────────────────────────────────────────────┤
    │ pre_major               │ Before 1.0.0 everything shifts down one     │
    │                         │ step: breaking → minor, feature → patch.    │
    ├─────────────────────────┼─────────────────────────────────────────────┤
    │ strict                  │ Return ``None`` when only hidden types      │
    │                         │ changed: nothing worth releasing.           │
    └─────────────────────────┴─────────────────────────────────────────────┘

Classification rules, per surviving commit::

    notes present          → breaking += len(notes), level = major
    type feat / feature    → features += 1, level = min(level, minor)
    strict and not hidden  → fixes += 1

Usage::

    from commitkit.advisor import ReleaseAdvisor

    advisor = ReleaseAdvisor(GitCLIBackend(Path('.')))
    rec = await advisor.advise(strict=True)
    if rec:
        print(rec.type, rec.reason)  # minor There are 0 BREAKING CHANGES and 2 features
"""

from __future__ import annotations

from collections.abc import AsyncIterable, Callable, Sequence
from dataclasses import dataclass

from commitkit.backends.vcs import VCS
from commitkit.commit_parsing import Commit, CommitParser
from commitkit.history import TagPrefix, latest_version_tag, parse_commits
from commitkit.logging import get_logger
from commitkit.reverts import skip_reverted

logger = get_logger(__name__)

RELEASE_TYPES: tuple[str, ...] = ('major', 'minor', 'patch')


@dataclass(frozen=True)
class CommitType:
    """How a commit type is presented.

    Attributes:
        type: The conventional type token, e.g. ``"feat"``.
        section: Changelog section heading.
        hidden: Not user-facing; ignored by strict classification and
            left out of the changelog.
    """

    type: str
    section: str
    hidden: bool = False


DEFAULT_COMMIT_TYPES: tuple[CommitType, ...] = (
    CommitType('feat', 'Features'),
    CommitType('feature', 'Features'),
    CommitType('fix', 'Bug Fixes'),
    CommitType('perf', 'Performance Improvements'),
    CommitType('revert', 'Reverts'),
    CommitType('docs', 'Documentation', hidden=True),
    CommitType('style', 'Styles', hidden=True),
    CommitType('chore', 'Miscellaneous Chores', hidden=True),
    CommitType('refactor', 'Code Refactoring', hidden=True),
    CommitType('test', 'Tests', hidden=True),
    CommitType('build', 'Build System', hidden=True),
    CommitType('ci', 'Continuous Integration', hidden=True),
)


@dataclass(frozen=True)
class ReleaseRecommendation:
    """A recommended bump.

    Attributes:
        type: ``"major"``, ``"minor"`` or ``"patch"``.
        reason: Human-readable summary of what was counted.
    """

    type: str
    reason: str


def _reason(breaking: int, features: int) -> str:
    if breaking == 1:
        return f'There is {breaking} BREAKING CHANGE and {features} features'
    return f'There are {breaking} BREAKING CHANGES and {features} features'


async def classify_commits(
    commits: AsyncIterable[Commit],
    *,
    ignore: Callable[[Commit], bool] | None = None,
    ignore_reverted: bool = True,
    pre_major: bool = False,
    strict: bool = False,
    types: Sequence[CommitType] = DEFAULT_COMMIT_TYPES,
) -> ReleaseRecommendation | None:
    """Fold a newest-first commit stream into a bump recommendation.

    The stream is drained completely. Reverted commits are dropped first
    (see :mod:`commitkit.reverts`); ``ignore`` then skips individual
    commits without affecting revert tracking.

    Args:
        commits: Parsed commits, newest first.
        ignore: Predicate for commits to leave out.
        ignore_reverted: Drop commits undone by a later revert.
        pre_major: Shift the result down one level (pre-1.0 releases).
        strict: Count non-hidden types as fixes and return ``None``
            when nothing was counted.
        types: Commit type table; only ``hidden`` matters here.

    Returns:
        The recommendation, or ``None`` in strict mode when there is
        nothing to release.
    """
    hidden = {t.type for t in types if t.hidden} if strict else set()

    level = 2
    breaking = 0
    features = 0
    fixes = 0

    async for commit in skip_reverted(commits, ignore_reverted=ignore_reverted):
        if ignore is not None and ignore(commit):
            continue

        if commit.notes:
            breaking += len(commit.notes)
            level = 0
        elif commit.type in ('feat', 'feature'):
            features += 1
            if level == 2:
                level = 1
        elif strict and commit.type not in hidden:
            fixes += 1

    if pre_major and level < 2:
        level += 1
    elif strict and level == 2 and not breaking and not features and not fixes:
        logger.debug('nothing_to_release', strict=strict)
        return None

    recommendation = ReleaseRecommendation(type=RELEASE_TYPES[level], reason=_reason(breaking, features))
    logger.debug(
        'commits_classified',
        type=recommendation.type,
        breaking=breaking,
        features=features,
        fixes=fixes,
    )
    return recommendation


class ReleaseAdvisor:
    """Recommend the next release from repository history.

    Args:
        vcs: Source of tags and raw commits.
        parser: Commit parser; defaults to :class:`CommitParser`.
        types: Commit type table.
        tag_prefix: Only consider tags with this prefix (e.g. ``pkg@``).
    """

    def __init__(
        self,
        vcs: VCS,
        *,
        parser: CommitParser | None = None,
        types: Sequence[CommitType] = DEFAULT_COMMIT_TYPES,
        tag_prefix: TagPrefix | None = None,
    ) -> None:
        """Store collaborators."""
        self.vcs = vcs
        self.parser = parser or CommitParser()
        self.types = tuple(types)
        self.tag_prefix = tag_prefix

    async def advise(
        self,
        *,
        ignore: Callable[[Commit], bool] | None = None,
        ignore_reverted: bool = True,
        pre_major: bool = False,
        strict: bool = False,
    ) -> ReleaseRecommendation | None:
        """Classify every commit after the latest semver tag.

        Without a tag the whole history is classified.
        """
        since = await latest_version_tag(self.vcs, prefix=self.tag_prefix)
        logger.debug('advise', since=since, strict=strict, pre_major=pre_major)
        return await classify_commits(
            parse_commits(self.vcs, self.parser, since=since),
            ignore=ignore,
            ignore_reverted=ignore_reverted,
            pre_major=pre_major,
            strict=strict,
            types=self.types,
        )


__all__ = [
    'DEFAULT_COMMIT_TYPES',
    'RELEASE_TYPES',
    'CommitType',
    'ReleaseAdvisor',
    'ReleaseRecommendation',
    'classify_commits',
]
