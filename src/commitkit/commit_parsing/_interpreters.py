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

"""Regex-backed merge, revert and field interpreters.

Each class satisfies the matching protocol in :mod:`._types`. Custom
interpreters only need a ``parse`` method with the same signature.

Usage::

    merge = RegexMergeInterpreter(
        re.compile(r"^Merge pull request #(\\d+) from (\\S+)"),
        lambda m: MergeResult(meta={'pr': m.group(1), 'source': m.group(2)}),
    )
    parser = CommitParser(merge_interpreter=merge)
"""

from __future__ import annotations

import re
from collections.abc import Callable, Mapping

from commitkit.commit_parsing._types import (
    MANAGEABLE_FIELDS,
    FieldDirective,
    FieldTarget,
    MergeResult,
)

MATCH_REVERT: re.Pattern[str] = re.compile(r'^Revert\s"([\s\S]*)"\s*This reverts commit (\w*)\.')
MATCH_FIELD: re.Pattern[str] = re.compile(r'^-(.*?)-$')


def _default_revert(match: re.Match[str]) -> Mapping[str, str | None]:
    return {
        'header': match.group(1) or None,
        'hash': match.group(2) or None,
    }


class NoMergeInterpreter:
    """Merge interpreter that never matches."""

    def parse(self, line: str) -> MergeResult | None:
        """Return ``None`` for every line."""
        return None


class RegexMergeInterpreter:
    """Match merge lines with ``pattern`` and map the match with ``mapper``.

    Args:
        pattern: Searched against the first unconsumed line.
        mapper: Turns the match into a :class:`MergeResult`.
    """

    def __init__(
        self,
        pattern: re.Pattern[str],
        mapper: Callable[[re.Match[str]], MergeResult],
    ) -> None:
        """Store the pattern and mapper."""
        self._pattern = pattern
        self._mapper = mapper

    def parse(self, line: str) -> MergeResult | None:
        """Return the mapped result, or ``None`` when ``line`` doesn't match."""
        match = self._pattern.search(line)
        return self._mapper(match) if match else None


class RegexRevertInterpreter:
    """Detect reverts by searching the whole message.

    The default pattern recognizes the message ``git revert`` writes::

        Revert "feat: add X"

        This reverts commit 1a2b3c4.

    and yields ``{'header': 'feat: add X', 'hash': '1a2b3c4'}``.

    Args:
        pattern: Searched against the full message (hash line excluded).
        mapper: Turns the match into the revert descriptor.
    """

    def __init__(
        self,
        pattern: re.Pattern[str] = MATCH_REVERT,
        mapper: Callable[[re.Match[str]], Mapping[str, str | None]] = _default_revert,
    ) -> None:
        """Store the pattern and mapper."""
        self._pattern = pattern
        self._mapper = mapper

    def parse(self, text: str) -> Mapping[str, str | None] | None:
        """Return the revert descriptor, or ``None`` when ``text`` isn't a revert."""
        match = self._pattern.search(text)
        return self._mapper(match) if match else None


class RegexFieldInterpreter:
    """Recognize ``-key-`` footer directives.

    Group 1 of ``pattern`` is the key. A missing or empty key yields a
    ``NONE`` directive, which stops collection until the next directive.
    """

    def __init__(self, pattern: re.Pattern[str] = MATCH_FIELD) -> None:
        """Store the directive pattern."""
        self._pattern = pattern

    def parse(self, line: str) -> FieldDirective | None:
        """Return the directive for ``line``, or ``None``."""
        match = self._pattern.search(line)
        if not match:
            return None

        groups = match.groups()
        key = groups[0] if groups else None
        if not key:
            return FieldDirective(key='', target=FieldTarget.NONE)
        if key in MANAGEABLE_FIELDS:
            return FieldDirective(key=key, target=FieldTarget.MANAGEABLE)
        return FieldDirective(key=key, target=FieldTarget.FIELD)


__all__ = [
    'MATCH_FIELD',
    'MATCH_REVERT',
    'NoMergeInterpreter',
    'RegexFieldInterpreter',
    'RegexMergeInterpreter',
    'RegexRevertInterpreter',
]
