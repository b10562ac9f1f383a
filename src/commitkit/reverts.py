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

"""Drop reverted commits from a newest-first commit stream.

``git log`` yields the newest commit first, so a revert is always seen
before the commit it undoes. Each revert leaves a *marker* behind; a later
(older) commit matching a marker is cancelled.

Key Concepts (ELI5)::

    ┌─────────────────────┬────────────────────────────────────────────────┐
    │ Concept             │ ELI5 Explanation                               │
    ├─────────────────────┼────────────────────────────────────────────────┤
    │ Marker              │ A sticky note "commit X was undone", taken     │
    │                     │ from :attr:`Commit.revert`.                    │
    ├─────────────────────┼────────────────────────────────────────────────┤
    │ Cancelled commit    │ A commit matching a sticky note. It is skipped │
    │                     │ and its own sticky note is thrown away.        │
    ├─────────────────────┼────────────────────────────────────────────────┤
    │ Revert of a revert  │ Its note cancels the first revert, so the      │
    │                     │ original commit never gets a note and survives.│
    └─────────────────────┴────────────────────────────────────────────────┘

Walkthrough (newest first)::

    Revert "Revert "feat: B""   → kept,      marker → R
    Revert "feat: B"    (R)     → cancelled, its marker → F is never added
    feat: B             (F)     → kept

Markers are only ever appended. Removing one would let a second revert
of the same commit slip through.
"""

from __future__ import annotations

from collections.abc import AsyncIterable, AsyncIterator, Mapping

from commitkit.commit_parsing import MATCH_HASH, Commit
from commitkit.logging import get_logger

logger = get_logger(__name__)


def _same_hash(a: str, b: str) -> bool:
    a, b = a.lower(), b.lower()
    return a.startswith(b) or b.startswith(a)


class RevertTracker:
    """Append-only set of open revert markers for one commit stream."""

    def __init__(self) -> None:
        """Start with no markers."""
        self._markers: list[Mapping[str, str | None]] = []

    @property
    def markers(self) -> tuple[Mapping[str, str | None], ...]:
        """Markers recorded so far, oldest first."""
        return tuple(self._markers)

    def matches(self, commit: Commit) -> bool:
        """Return whether ``commit`` is undone by a recorded marker.

        When both the marker and the commit carry an object id of at least
        seven hex digits, a prefix match in either direction decides (short
        and full hashes mix freely). Otherwise the marker's header must
        equal the commit's header exactly.
        """
        for marker in self._markers:
            marker_hash = marker.get('hash') or ''
            commit_hash = commit.hash or ''
            if MATCH_HASH.search(marker_hash) and MATCH_HASH.search(commit_hash):
                if _same_hash(marker_hash, commit_hash):
                    return True
            elif marker.get('header') is not None and marker.get('header') == commit.header:
                return True
        return False

    def observe(self, commit: Commit) -> bool:
        """Feed the next (older) commit; return ``False`` if it is cancelled."""
        if self.matches(commit):
            logger.debug('commit_reverted', hash=commit.hash, header=commit.header)
            return False
        if commit.revert is not None:
            self._markers.append(commit.revert)
        return True


async def skip_reverted(
    commits: AsyncIterable[Commit],
    *,
    ignore_reverted: bool = True,
) -> AsyncIterator[Commit]:
    """Yield the commits of a newest-first stream that were not reverted.

    Args:
        commits: Parsed commits, newest first.
        ignore_reverted: When ``False`` every commit is passed through
            and no markers are recorded.
    """
    tracker = RevertTracker() if ignore_reverted else None
    async for commit in commits:
        if tracker is None or tracker.observe(commit):
            yield commit


__all__ = [
    'RevertTracker',
    'skip_reverted',
]
