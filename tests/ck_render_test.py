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


"""Tests for commitkit.render."""

from __future__ import annotations

from pathlib import Path

import pytest
from commitkit.changelog import ChangelogSection, Highlight, HighlightNote
from commitkit.commit_parsing import parse_commit
from commitkit.errors import CommitKitError, E
from commitkit.render import ChangelogRenderer, forge, shorten

_HASH = 'aa64d4ff8934e2b4304aee621bdd7562cb995e03'
_REMOTE = {'host': 'https://github.com', 'owner': 'owner', 'repository': 'repo'}


class TestFilters:
    """Tests for forge and shorten."""

    def test_forge(self) -> None:
        """Test forge."""
        assert forge('{{host}}/{{owner}}', {'host': 'h', 'owner': 'o'}) == 'h/o'

    def test_forge_skips_none(self) -> None:
        """Test forge skips none."""
        assert forge('{{a}}-{{b}}', {'a': 1, 'b': None}) == '1-{{b}}'

    def test_shorten(self) -> None:
        """Test shorten."""
        assert shorten(_HASH, 7) == 'aa64d4f'
        assert shorten('abc', 7) == 'abc'


class TestHeader:
    """Tests for the header template."""

    def test_plain(self) -> None:
        """Test plain."""
        assert ChangelogRenderer().header({'version': '1.0.0'}) == '## 1.0.0'

    def test_compare_link(self) -> None:
        """Test compare link."""
        context = {
            'version': '1.0.0',
            'link_compare': True,
            'previous_tag': 'v0.9.0',
            'current_tag': 'v1.0.0',
            **_REMOTE,
        }
        assert ChangelogRenderer().header(context) == (
            '## [1.0.0](https://github.com/owner/repo/compare/v0.9.0...v1.0.0)'
        )

    def test_title_and_date(self) -> None:
        """Test title and date."""
        rendered = ChangelogRenderer().header({'version': '1.0.0', 'title': 'Codename', 'date': '2026-01-01'})
        assert rendered == '## 1.0.0 "Codename" (2026-01-01)'

    def test_template_string(self) -> None:
        """Test template string."""
        assert ChangelogRenderer().header({'version': '2.0.0'}, template='v{{ version }}') == 'v2.0.0'


class TestCommit:
    """Tests for the commit template."""

    def test_linked(self) -> None:
        """Test linked."""
        commit = parse_commit(f'{_HASH}\nfeat(scope): Subject')
        assert ChangelogRenderer().commit(commit, _REMOTE) == (
            f'* **scope:** Subject ([aa64d4f](https://github.com/owner/repo/commit/{_HASH}))'
        )

    def test_unlinked(self) -> None:
        """Test unlinked."""
        commit = parse_commit(f'{_HASH}\nfix: Subject')
        assert ChangelogRenderer().commit(commit, {'link_references': False}) == '* Subject aa64d4f'

    def test_references(self) -> None:
        """Test references."""
        commit = parse_commit('fix: crash\n\nCloses #12, other/lib#3')
        rendered = ChangelogRenderer().commit(commit, _REMOTE)
        assert rendered == (
            '* crash'
            ', closes [#12](https://github.com/owner/repo/issues/12)'
            ', closes [other/lib#3](https://github.com/other/lib/issues/3)'
        )

    def test_reference_without_action(self) -> None:
        """Test reference without action."""
        commit = parse_commit('fix: crash #7')
        rendered = ChangelogRenderer().commit(commit, {**_REMOTE, 'link_references': False})
        assert rendered == '* crash #7, refs #7'

    def test_non_conventional_uses_header(self) -> None:
        """Test non conventional uses header."""
        assert ChangelogRenderer().commit(parse_commit('Update docs')) == '* Update docs'


class TestSection:
    """Tests for the section template."""

    def test_lines(self) -> None:
        """Test lines."""
        section = ChangelogSection(
            title='Features',
            commits=(parse_commit('feat: A'), parse_commit('feat(api): B')),
        )
        assert ChangelogRenderer().section(section) == '### Features\n\n* A\n* **api:** B'


class TestChangelog:
    """Tests for the full changelog template."""

    def test_empty(self) -> None:
        """Test empty."""
        assert ChangelogRenderer()({'version': '0.0.0'}) == '## 0.0.0\n\n'

    def test_sections(self) -> None:
        """Test sections."""
        context = {
            'version': '0.0.0',
            'sections': [
                ChangelogSection(title='Features', commits=(parse_commit('feat: A'),)),
                ChangelogSection(title='Bug Fixes', commits=(parse_commit('fix: B'),)),
            ],
        }
        assert ChangelogRenderer()(context) == '## 0.0.0\n\n### Features\n\n* A\n\n### Bug Fixes\n\n* B'

    def test_highlights(self) -> None:
        """Test highlights."""
        commit = parse_commit('feat!: drop v1')
        context = {
            'version': '2.0.0',
            'highlights': [Highlight(title='BREAKING CHANGE', notes=(HighlightNote(commit=commit, text='drop v1'),))],
            'sections': [ChangelogSection(title='Features', commits=(commit,))],
        }
        assert ChangelogRenderer()(context) == (
            '## 2.0.0\n\n### BREAKING CHANGE\n\n* drop v1\n\n### Features\n\n* drop v1'
        )


class TestTemplates:
    """Tests for template lookup and errors."""

    def test_templates_dir_overrides_builtin(self, tmp_path: Path) -> None:
        """A user commit template is used inside the built-in section."""
        (tmp_path / 'commit.md.j2').write_text('- {{ commit.subject }}\n', encoding='utf-8')
        section = ChangelogSection(title='Features', commits=(parse_commit('feat: A'),))
        assert ChangelogRenderer(tmp_path).section(section) == '### Features\n\n- A'

    def test_template_path(self, tmp_path: Path) -> None:
        """Test template path."""
        (tmp_path / 'custom.j2').write_text('[{{ version }}]', encoding='utf-8')
        assert ChangelogRenderer(tmp_path).header({'version': '1.0.0'}, template_path='custom.j2') == '[1.0.0]'

    def test_missing_template(self) -> None:
        """Test missing template."""
        with pytest.raises(CommitKitError) as exc_info:
            ChangelogRenderer().header(template_path='missing.j2')
        assert exc_info.value.code == E.RENDER_TEMPLATE_NOT_FOUND

    def test_syntax_error(self) -> None:
        """Test syntax error."""
        with pytest.raises(CommitKitError) as exc_info:
            ChangelogRenderer().header(template='{% if %}')
        assert exc_info.value.code == E.RENDER_FAILED
