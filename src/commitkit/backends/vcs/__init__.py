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


"""VCS protocol for commitkit.

The :class:`VCS` protocol is the read-only view of a repository the rest
of commitkit needs: raw commit messages, tag names and the remote URL.
Implementations:

- :class:`~commitkit.backends.vcs.git.GitCLIBackend`: ``git`` CLI
"""

from __future__ import annotations

import re
from collections.abc import AsyncIterator
from typing import Protocol, runtime_checkable

from commitkit.backends.vcs.git import GitCLIBackend as GitCLIBackend

__all__ = [
    'VCS',
    'GitCLIBackend',
]


@runtime_checkable
class VCS(Protocol):
    """Protocol for reading commit history.

    Streams are async iterators so consumers can process one record at a
    time and backends can shell out without blocking the event loop.
    """

    def commits(
        self,
        *,
        since: str | None = None,
        ignore: re.Pattern[str] | None = None,
    ) -> AsyncIterator[str]:
        """Yield raw commits, newest first.

        Each record is the object id on the first line followed by the
        full message.

        Args:
            since: Only commits after this revision (``since..HEAD``).
            ignore: Skip records this pattern matches anywhere.
        """
        ...

    def tags(self) -> AsyncIterator[str]:
        """Yield every tag name in the repository."""
        ...

    async def remote_url(self) -> str:
        """Return the ``origin`` remote URL, or ``''`` when there is none."""
        ...
