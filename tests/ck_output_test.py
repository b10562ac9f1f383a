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


"""Tests for commitkit.output."""

from __future__ import annotations

from pathlib import Path

import aiofiles.os
import pytest
from commitkit import output
from commitkit.errors import CommitKitError, E
from commitkit.output import compose_changelog, write_changelog_file


class TestComposeChangelog:
    """Tests for compose_changelog."""

    def test_new_file(self) -> None:
        """Test new file."""
        assert compose_changelog('', '## 1.0.0\n\n* a') == '# Changelog\n\n## 1.0.0\n\n* a\n\n'

    def test_prepends_below_header(self) -> None:
        """Test prepends below header."""
        existing = '# Changelog\n\n## 1.0.0\n\n* a\n'
        assert compose_changelog(existing, '## 1.1.0') == '# Changelog\n\n## 1.1.0\n\n## 1.0.0\n\n* a\n\n'

    def test_existing_without_header(self) -> None:
        """Test existing without header."""
        assert compose_changelog('## 0.1.0\n', '## 0.2.0') == '# Changelog\n\n## 0.2.0\n\n## 0.1.0\n\n'

    def test_empty_header(self) -> None:
        """Test empty header."""
        assert compose_changelog('', 'Entry', header='') == 'Entry\n\n'

    def test_custom_header(self) -> None:
        """Test custom header."""
        existing = '# Release notes\n\n## 1.0.0\n'
        assert compose_changelog(existing, '## 2.0.0', header='# Release notes') == (
            '# Release notes\n\n## 2.0.0\n\n## 1.0.0\n\n'
        )


class TestWriteChangelogFile:
    """Tests for write_changelog_file."""

    @pytest.mark.asyncio()
    async def test_creates_file(self, tmp_path: Path) -> None:
        """Test creates file."""
        path = tmp_path / 'CHANGELOG.md'
        await write_changelog_file(path, '## 1.0.0')
        assert path.read_text(encoding='utf-8') == '# Changelog\n\n## 1.0.0\n\n'

    @pytest.mark.asyncio()
    async def test_prepends(self, tmp_path: Path) -> None:
        """Test prepends."""
        path = tmp_path / 'CHANGELOG.md'
        await write_changelog_file(path, '## 1.0.0')
        await write_changelog_file(str(path), '## 1.1.0')
        assert path.read_text(encoding='utf-8') == '# Changelog\n\n## 1.1.0\n\n## 1.0.0\n\n'

    @pytest.mark.asyncio()
    async def test_unreadable_path(self, tmp_path: Path) -> None:
        """Test unreadable path."""
        with pytest.raises(CommitKitError) as exc_info:
            await write_changelog_file(tmp_path, '## 1.0.0')
        assert exc_info.value.code == E.OUTPUT_READ_FAILED

    @pytest.mark.asyncio()
    async def test_failed_replace_removes_tmp(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        """The target is untouched and the temp file is gone after a failure."""
        path = tmp_path / 'CHANGELOG.md'
        path.write_text('# Changelog\n\n## 1.0.0\n', encoding='utf-8')

        async def fail_replace(src: object, dst: object) -> None:
            raise PermissionError('denied')

        monkeypatch.setattr(output.aiofiles.os, 'replace', fail_replace)

        with pytest.raises(CommitKitError) as exc_info:
            await write_changelog_file(path, '## 1.1.0')

        assert exc_info.value.code == E.OUTPUT_WRITE_FAILED
        assert path.read_text(encoding='utf-8') == '# Changelog\n\n## 1.0.0\n'
        assert not await aiofiles.os.path.exists(tmp_path / 'CHANGELOG.md.tmp')
