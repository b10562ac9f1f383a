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


"""Tests for commitkit.advisor."""

from __future__ import annotations

from collections.abc import AsyncIterator

import pytest
from commitkit.advisor import (
    DEFAULT_COMMIT_TYPES,
    ReleaseAdvisor,
    ReleaseRecommendation,
    classify_commits,
)
from commitkit.commit_parsing import Commit, parse_commit
from commitkit.history import package_prefix

from tests._fakes import FakeVCS


async def _stream(*messages: str) -> AsyncIterator[Commit]:
    for message in messages:
        yield parse_commit(message)


def _base_history() -> FakeVCS:
    vcs = FakeVCS()
    vcs.commit('feat: a', 'a000001')
    vcs.commit('feat: b', 'a000002')
    vcs.tag('v1.0.0')
    return vcs


class TestClassifyCommits:
    """Tests for classify_commits."""

    @pytest.mark.asyncio()
    async def test_features_are_minor(self) -> None:
        """Test features are minor."""
        result = await classify_commits(_stream('feat: a', 'fix: b'))
        assert result == ReleaseRecommendation(type='minor', reason='There are 0 BREAKING CHANGES and 1 features')

    @pytest.mark.asyncio()
    async def test_feature_alias(self) -> None:
        """Test feature alias."""
        result = await classify_commits(_stream('feature: a'))
        assert result is not None
        assert result.type == 'minor'

    @pytest.mark.asyncio()
    async def test_fixes_are_patch(self) -> None:
        """Test fixes are patch."""
        result = await classify_commits(_stream('fix: a', 'perf: b'))
        assert result is not None
        assert result.type == 'patch'

    @pytest.mark.asyncio()
    async def test_single_breaking_change(self) -> None:
        """A breaking feature counts as a note, not as a feature."""
        result = await classify_commits(_stream('feat!: a', 'feat: b'))
        assert result == ReleaseRecommendation(type='major', reason='There is 1 BREAKING CHANGE and 1 features')

    @pytest.mark.asyncio()
    async def test_every_note_counts(self) -> None:
        """Test every note counts."""
        result = await classify_commits(_stream('feat!: a\n\nBREAKING CHANGE: b'))
        assert result == ReleaseRecommendation(type='major', reason='There are 2 BREAKING CHANGES and 0 features')

    @pytest.mark.asyncio()
    async def test_empty_stream(self) -> None:
        """Test empty stream."""
        assert await classify_commits(_stream()) == ReleaseRecommendation(
            type='patch', reason='There are 0 BREAKING CHANGES and 0 features'
        )
        assert await classify_commits(_stream(), strict=True) is None

    @pytest.mark.asyncio()
    async def test_strict_hidden_only_is_none(self) -> None:
        """Test strict hidden only is none."""
        assert await classify_commits(_stream('chore: a', 'docs: b'), strict=True) is None
        result = await classify_commits(_stream('chore: a', 'docs: b'))
        assert result is not None
        assert result.type == 'patch'

    @pytest.mark.asyncio()
    async def test_strict_counts_visible_types(self) -> None:
        """Unknown and untyped commits are user-facing in strict mode."""
        result = await classify_commits(_stream('chore: a', 'wip: b'), strict=True)
        assert result is not None
        assert result.type == 'patch'
        result = await classify_commits(_stream('update readme'), strict=True)
        assert result is not None
        assert result.type == 'patch'

    @pytest.mark.asyncio()
    async def test_strict_uses_type_table(self) -> None:
        """Test strict uses type table."""
        result = await classify_commits(_stream('chore: a'), strict=True, types=())
        assert result is not None
        assert result.type == 'patch'

    @pytest.mark.parametrize(
        ('message', 'expected'),
        [
            ('feat!: a', 'minor'),
            ('feat: a', 'patch'),
            ('fix: a', 'patch'),
        ],
    )
    @pytest.mark.asyncio()
    async def test_pre_major_shifts_down(self, message: str, expected: str) -> None:
        """Test pre major shifts down."""
        result = await classify_commits(_stream(message), pre_major=True)
        assert result is not None
        assert result.type == expected

    @pytest.mark.asyncio()
    async def test_pre_major_strict_nothing(self) -> None:
        """Test pre major strict nothing."""
        assert await classify_commits(_stream('chore: a'), pre_major=True, strict=True) is None

    @pytest.mark.asyncio()
    async def test_reverted_feature_not_counted(self) -> None:
        """Test reverted feature not counted."""
        messages = ('2222222\nRevert "feat: a"\n\nThis reverts commit 1111111.', '1111111\nfeat: a')
        result = await classify_commits(_stream(*messages))
        assert result is not None
        assert result.type == 'patch'

        result = await classify_commits(_stream(*messages), ignore_reverted=False)
        assert result is not None
        assert result.type == 'minor'

    @pytest.mark.asyncio()
    async def test_revert_of_revert_restores_feature(self) -> None:
        """Reverting the revert brings the feature's bump back."""
        messages = (
            '3333333\nRevert "Revert "feat: a""\n\nThis reverts commit 2222222.',
            '2222222\nRevert "feat: a"\n\nThis reverts commit 1111111.',
            '1111111\nfeat: a',
        )
        result = await classify_commits(_stream(*messages))
        assert result == ReleaseRecommendation(type='minor', reason='There are 0 BREAKING CHANGES and 1 features')

    @pytest.mark.asyncio()
    async def test_ignore_predicate(self) -> None:
        """Test ignore predicate."""
        result = await classify_commits(
            _stream('feat!: a', 'feat: b'),
            ignore=lambda commit: commit.breaking,
        )
        assert result == ReleaseRecommendation(type='minor', reason='There are 0 BREAKING CHANGES and 1 features')

    def test_default_types(self) -> None:
        """Test default types."""
        hidden = {t.type for t in DEFAULT_COMMIT_TYPES if t.hidden}
        assert {'chore', 'docs', 'style', 'refactor', 'test', 'build', 'ci'} == hidden


class TestReleaseAdvisor:
    """Tests for ReleaseAdvisor."""

    @pytest.mark.asyncio()
    async def test_minor_since_tag(self) -> None:
        """Only commits after the latest tag are considered."""
        vcs = _base_history()
        vcs.commit('feat: c', 'a000003')
        vcs.commit('feat: d', 'a000004')
        vcs.commit('fix: e', 'a000005')

        result = await ReleaseAdvisor(vcs).advise()

        assert result is not None
        assert result.type == 'minor'
        assert result.reason == 'There are 0 BREAKING CHANGES and 2 features'
        assert vcs.since_calls == ['v1.0.0']

    @pytest.mark.asyncio()
    async def test_major_since_tag(self) -> None:
        """Test major since tag."""
        vcs = _base_history()
        vcs.commit('feat!: c', 'a000003')
        vcs.commit('feat: d', 'a000004')
        vcs.commit('fix: e', 'a000005')

        result = await ReleaseAdvisor(vcs).advise()

        assert result is not None
        assert result.type == 'major'

    @pytest.mark.asyncio()
    async def test_no_tags_uses_whole_history(self) -> None:
        """Test no tags uses whole history."""
        vcs = FakeVCS()
        vcs.commit('feat: a', 'a000001')
        result = await ReleaseAdvisor(vcs).advise()
        assert result is not None
        assert result.type == 'minor'
        assert vcs.since_calls == [None]

    @pytest.mark.asyncio()
    async def test_highest_tag_wins(self) -> None:
        """Test highest tag wins."""
        vcs = _base_history()
        vcs.commit('feat: c', 'a000003')
        vcs.tag('v1.1.0')
        vcs.commit('fix: d', 'a000004')
        vcs.tag('nightly')

        result = await ReleaseAdvisor(vcs).advise()

        assert result is not None
        assert result.type == 'patch'
        assert vcs.since_calls == ['v1.1.0']

    @pytest.mark.asyncio()
    async def test_package_prefix(self) -> None:
        """Test package prefix."""
        vcs = FakeVCS()
        vcs.commit('feat: a', 'a000001')
        vcs.tag('pkg@1.0.0')
        vcs.commit('feat: b', 'a000002')
        vcs.tag('other@2.0.0')
        vcs.commit('fix: c', 'a000003')

        result = await ReleaseAdvisor(vcs, tag_prefix=package_prefix('pkg')).advise()

        assert result is not None
        assert result.type == 'minor'
        assert vcs.since_calls == ['pkg@1.0.0']

    @pytest.mark.asyncio()
    async def test_strict_nothing_to_release(self) -> None:
        """Test strict nothing to release."""
        vcs = _base_history()
        vcs.commit('chore: deps', 'a000003')
        assert await ReleaseAdvisor(vcs).advise(strict=True) is None
