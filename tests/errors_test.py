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


"""Tests for commitkit.errors module."""

from __future__ import annotations

import dataclasses
import io

import pytest
from commitkit.errors import (
    ERRORS,
    CommitKitError,
    E,
    ErrorCode,
    ErrorInfo,
    explain,
    render_error,
)


class TestErrorCode:
    """Tests for ErrorCode enum."""

    def test_all_codes_have_ck_prefix(self) -> None:
        """Every error code must start with 'CK-'."""
        for code in ErrorCode:
            assert code.value.startswith('CK-'), f'{code.name} does not start with CK-'

    def test_no_duplicate_values(self) -> None:
        """Error code values must be unique."""
        values = [c.value for c in ErrorCode]
        assert len(values) == len(set(values)), 'Duplicate error code values found'

    def test_e_alias(self) -> None:
        """E should be an alias for ErrorCode."""
        assert E is ErrorCode
        assert E.VCS_TIMEOUT is ErrorCode.VCS_TIMEOUT


class TestErrorInfo:
    """Tests for ErrorInfo dataclass."""

    def test_frozen(self) -> None:
        """ErrorInfo instances should be immutable."""
        info = ErrorInfo(code=E.VCS_TIMEOUT, message='test')
        with pytest.raises(dataclasses.FrozenInstanceError):
            info.message = 'changed'  # type: ignore[misc]

    def test_default_hint(self) -> None:
        """Hint should default to empty string."""
        assert ErrorInfo(code=E.VCS_TIMEOUT, message='test').hint == ''


class TestCommitKitError:
    """Tests for CommitKitError exception."""

    def test_message_includes_code(self) -> None:
        """Exception message should include the code."""
        err = CommitKitError(code=E.VCS_COMMAND_FAILED, message='git broke')
        assert str(err) == '[CK-VCS-COMMAND-FAILED] git broke'

    def test_code_and_hint(self) -> None:
        """Test code and hint."""
        err = CommitKitError(code=E.CONFIG_INVALID_KEY, message='bad key', hint='fix it')
        assert err.code is E.CONFIG_INVALID_KEY
        assert err.hint == 'fix it'
        assert isinstance(err.info, ErrorInfo)

    def test_hint_default_empty(self) -> None:
        """Hint should default to empty string."""
        assert CommitKitError(code=E.VCS_TIMEOUT, message='slow').hint == ''


class TestErrorCatalog:
    """Tests for the ERRORS catalog."""

    def test_entries_match_keys(self) -> None:
        """Each catalog entry is filed under its own code."""
        for code, info in ERRORS.items():
            assert info.code is code
            assert info.message

    def test_explain_known(self) -> None:
        """Test explain known."""
        result = explain('CK-CONFIG-INVALID-KEY')
        assert result is not None
        assert result.startswith('CK-CONFIG-INVALID-KEY: ')
        assert '\n  Hint: ' in result

    def test_explain_without_entry(self) -> None:
        """Test explain without entry."""
        assert explain('CK-VCS-TIMEOUT') == 'CK-VCS-TIMEOUT: No detailed explanation available.'

    def test_explain_unknown(self) -> None:
        """Test explain unknown."""
        assert explain('CK-NOPE') is None


class TestRenderError:
    """Tests for render_error."""

    def test_with_hint(self) -> None:
        """Test with hint."""
        buf = io.StringIO()
        render_error(CommitKitError(code=E.VCS_TIMEOUT, message='git log hung', hint='retry'), file=buf)
        out = buf.getvalue()
        assert 'error[CK-VCS-TIMEOUT]: git log hung' in out
        assert 'hint: retry' in out

    def test_without_hint(self) -> None:
        """Test without hint."""
        buf = io.StringIO()
        render_error(CommitKitError(code=E.VCS_TIMEOUT, message='[not markup]'), file=buf)
        out = buf.getvalue()
        assert 'error[CK-VCS-TIMEOUT]: [not markup]' in out
        assert 'hint' not in out
