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


"""Tests for commitkit.config."""

from __future__ import annotations

from pathlib import Path

import pytest
from commitkit.advisor import DEFAULT_COMMIT_TYPES, CommitType
from commitkit.config import CONFIG_FILENAME, CommitKitConfig, load_config
from commitkit.errors import CommitKitError, E


def _write(root: Path, text: str) -> Path:
    path = root / CONFIG_FILENAME
    path.write_text(text, encoding='utf-8')
    return path


class TestLoadConfig:
    """Tests for load_config."""

    def test_missing_file(self, tmp_path: Path) -> None:
        """Test missing file."""
        assert load_config(tmp_path) == CommitKitConfig()

    def test_empty_file(self, tmp_path: Path) -> None:
        """Test empty file."""
        path = _write(tmp_path, '')
        cfg = load_config(tmp_path)
        assert cfg.config_path == path
        assert cfg.types == DEFAULT_COMMIT_TYPES

    def test_values(self, tmp_path: Path) -> None:
        """Test values."""
        _write(
            tmp_path,
            'comment_char = "#"\n'
            'issue_prefixes = ["#", "GH-"]\n'
            'strict = true\n'
            'pre_major = false\n'
            'prerelease = "alpha"\n'
            'tag_prefix = "pkg@"\n',
        )
        cfg = load_config(tmp_path)
        assert cfg.comment_char == '#'
        assert cfg.issue_prefixes == ('#', 'GH-')
        assert cfg.strict is True
        assert cfg.pre_major is False
        assert cfg.prerelease == 'alpha'
        assert cfg.tag_prefix == 'pkg@'
        assert cfg.ignore_reverted is True

    def test_parse_options(self, tmp_path: Path) -> None:
        """Test parse options."""
        _write(tmp_path, 'notes_keywords = ["SECURITY"]\nissue_prefixes_case_sensitive = true\n')
        options = load_config(tmp_path).parse_options()
        assert tuple(options.notes_keywords) == ('SECURITY',)
        assert options.issue_prefixes_case_sensitive is True

    def test_types(self, tmp_path: Path) -> None:
        """Test types."""
        _write(
            tmp_path,
            '[[types]]\ntype = "feat"\nsection = "New"\n\n[[types]]\ntype = "chore"\nsection = "Chores"\nhidden = true\n',
        )
        assert load_config(tmp_path).types == (
            CommitType('feat', 'New'),
            CommitType('chore', 'Chores', hidden=True),
        )

    def test_unknown_key_suggestion(self, tmp_path: Path) -> None:
        """Test unknown key suggestion."""
        _write(tmp_path, 'issue_prefix = ["#"]\n')
        with pytest.raises(CommitKitError) as exc_info:
            load_config(tmp_path)
        assert exc_info.value.code == E.CONFIG_INVALID_KEY
        assert "Did you mean 'issue_prefixes'?" in exc_info.value.hint

    def test_unknown_key_no_suggestion(self, tmp_path: Path) -> None:
        """Test unknown key no suggestion."""
        _write(tmp_path, 'zzz = 1\n')
        with pytest.raises(CommitKitError) as exc_info:
            load_config(tmp_path)
        assert exc_info.value.hint.startswith('Valid keys:')

    def test_wrong_type(self, tmp_path: Path) -> None:
        """Test wrong type."""
        _write(tmp_path, 'strict = "yes"\n')
        with pytest.raises(CommitKitError) as exc_info:
            load_config(tmp_path)
        assert exc_info.value.code == E.CONFIG_INVALID_VALUE
        assert "'strict' must be bool, got str" in str(exc_info.value)

    def test_non_string_list_item(self, tmp_path: Path) -> None:
        """Test non string list item."""
        _write(tmp_path, 'reference_actions = ["closes", 3]\n')
        with pytest.raises(CommitKitError) as exc_info:
            load_config(tmp_path)
        assert exc_info.value.code == E.CONFIG_INVALID_VALUE

    def test_bad_type_table(self, tmp_path: Path) -> None:
        """Test bad type table."""
        _write(tmp_path, '[[types]]\ntype = "feat"\n')
        with pytest.raises(CommitKitError) as exc_info:
            load_config(tmp_path)
        assert exc_info.value.code == E.CONFIG_INVALID_VALUE

    def test_unknown_type_key(self, tmp_path: Path) -> None:
        """Test unknown type key."""
        _write(tmp_path, '[[types]]\ntype = "feat"\nsection = "Features"\nhiden = true\n')
        with pytest.raises(CommitKitError) as exc_info:
            load_config(tmp_path)
        assert exc_info.value.code == E.CONFIG_INVALID_KEY
        assert "'hidden'" in exc_info.value.hint

    def test_parse_error(self, tmp_path: Path) -> None:
        """Test parse error."""
        _write(tmp_path, 'strict = \n')
        with pytest.raises(CommitKitError) as exc_info:
            load_config(tmp_path)
        assert exc_info.value.code == E.CONFIG_PARSE_ERROR
