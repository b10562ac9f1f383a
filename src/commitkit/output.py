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


"""Atomic changelog file sink.

New release notes are inserted between the file header and the previous
releases::

    # Changelog              ← header (written once, kept on top)

    ## 1.1.0                 ← changes (this release)
    ...

    ## 1.0.0                 ← previous body (header prefix removed)
    ...

Parts are trimmed, empty ones dropped, and joined by one blank line; the
file always ends with a blank line. The result is written to
``<path>.tmp`` and renamed over ``<path>``, so a crash never leaves a
half-written changelog. The temp file is removed before any error
propagates.
"""

from __future__ import annotations

from pathlib import Path

import aiofiles
import aiofiles.os

from commitkit.errors import CommitKitError, E
from commitkit.logging import get_logger

logger = get_logger(__name__)

DEFAULT_HEADER = '# Changelog'
EMPTY_LINE = '\n\n'


def compose_changelog(existing: str, changes: str, header: str = DEFAULT_HEADER) -> str:
    """Return the new file content.

    >>> compose_changelog('# Changelog\\n\\n## 1.0.0\\n', '## 1.1.0')
    '# Changelog\\n\\n## 1.1.0\\n\\n## 1.0.0\\n\\n'
    """
    header = header.strip()
    body = existing[len(header) :] if header and existing.startswith(header) else existing
    parts = [p.strip() for p in (header, changes, body)]
    return EMPTY_LINE.join(p for p in parts if p) + EMPTY_LINE


async def _read_existing(path: Path) -> str:
    if not await aiofiles.os.path.exists(path):
        return ''
    try:
        async with aiofiles.open(path, encoding='utf-8') as f:
            return await f.read()
    except OSError as exc:
        raise CommitKitError(
            code=E.OUTPUT_READ_FAILED,
            message=f'Failed to read {path}: {exc}',
            hint=f'Check that {path} is a readable file.',
        ) from exc


async def write_changelog_file(path: Path | str, changes: str, header: str = DEFAULT_HEADER) -> None:
    """Prepend ``changes`` to the changelog at ``path``.

    Args:
        path: Changelog file; created when missing.
        changes: Rendered release notes for this release.
        header: Heading kept at the top of the file.

    Raises:
        CommitKitError: ``CK-OUTPUT-READ-FAILED`` or
            ``CK-OUTPUT-WRITE-FAILED``; the file itself is unchanged.
    """
    path = Path(path)
    tmp = path.with_name(path.name + '.tmp')

    content = compose_changelog(await _read_existing(path), changes, header)
    try:
        async with aiofiles.open(tmp, mode='w', encoding='utf-8') as f:
            await f.write(content)
        await aiofiles.os.replace(tmp, path)
    except OSError as exc:
        if await aiofiles.os.path.exists(tmp):
            await aiofiles.os.remove(tmp)
        raise CommitKitError(
            code=E.OUTPUT_WRITE_FAILED,
            message=f'Failed to write {path}: {exc}',
            hint=f'Check file permissions for {path}.',
        ) from exc

    logger.info('changelog_written', path=str(path), size=len(content))


__all__ = [
    'DEFAULT_HEADER',
    'compose_changelog',
    'write_changelog_file',
]
