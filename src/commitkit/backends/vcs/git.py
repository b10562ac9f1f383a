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


"""Git VCS backend for commitkit.

The :class:`GitCLIBackend` implements the :class:`VCS` protocol by
delegating to ``git`` via :func:`run_command`. Blocking subprocess calls
are dispatched to ``asyncio.to_thread()``.

Commit records are read with ``git log -z --format=%H%n%B`` so messages
containing blank lines survive intact; ``-z`` separates records with NUL.
"""

from __future__ import annotations

import asyncio
import re
from collections.abc import AsyncIterator
from pathlib import Path

from commitkit.backends._run import CommandResult, run_command
from commitkit.errors import CommitKitError, E
from commitkit.logging import get_logger

log = get_logger('commitkit.backends.git')

LOG_FORMAT = '%H%n%B'


class GitCLIBackend:
    """Default :class:`~commitkit.backends.vcs.VCS` implementation using ``git``.

    Args:
        repo_root: Path to the git repository root.
    """

    def __init__(self, repo_root: Path) -> None:
        """Initialize with the git repository root path."""
        self._root = repo_root

    def _git(self, *args: str) -> CommandResult:
        """Run a git command synchronously (called via to_thread)."""
        return run_command(['git', *args], cwd=self._root)

    async def _checked(self, *args: str) -> CommandResult:
        result = await asyncio.to_thread(self._git, *args)
        if not result.ok:
            raise CommitKitError(
                code=E.VCS_COMMAND_FAILED,
                message=f'{result.command_str} exited with status {result.return_code}: {result.stderr.strip()}',
                hint='Run commitkit inside a git repository; a --since tag must exist.',
            )
        return result

    async def commits(
        self,
        *,
        since: str | None = None,
        ignore: re.Pattern[str] | None = None,
    ) -> AsyncIterator[str]:
        """Yield ``<hash>\\n<message>`` records, newest first."""
        cmd_parts = ['log', '-z', f'--format={LOG_FORMAT}']
        if since:
            cmd_parts.append(f'{since}..HEAD')
        result = await self._checked(*cmd_parts)

        count = 0
        for record in result.stdout.split('\0'):
            record = record.strip()
            if not record:
                continue
            if ignore is not None and ignore.search(record):
                log.debug('commit_ignored', hash=record.split('\n', 1)[0])
                continue
            count += 1
            yield record
        log.debug('commits_read', since=since, count=count)

    async def tags(self) -> AsyncIterator[str]:
        """Yield tag names in git's version sort order."""
        result = await self._checked('tag', '--list', '--sort=version:refname')
        for line in result.stdout.splitlines():
            if line.strip():
                yield line.strip()

    async def remote_url(self) -> str:
        """Return ``remote.origin.url``; an unset remote is ``''``."""
        result = await asyncio.to_thread(self._git, 'config', '--get', 'remote.origin.url')
        return result.stdout.strip() if result.ok else ''


__all__ = [
    'LOG_FORMAT',
    'GitCLIBackend',
]
