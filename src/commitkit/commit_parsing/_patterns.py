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

"""Compile parser options into regular expressions.

Keyword lists from configuration become alternations. An empty list turns
the feature off: the matcher is swapped for :data:`MATCH_NOTHING` (notes,
issue prefixes) or, for reference actions, for :data:`MATCH_EVERYTHING`,
which treats a whole line as one action-less sentence.

Key Concepts (ELI5)::

    ┌─────────────────────┬────────────────────────────────────────────────┐
    │ Concept             │ ELI5 Explanation                               │
    ├─────────────────────┼────────────────────────────────────────────────┤
    │ ParseOptions        │ The knobs: comment char, note keywords, issue  │
    │                     │ prefixes and action verbs like "Closes".       │
    ├─────────────────────┼────────────────────────────────────────────────┤
    │ ParsePatterns       │ The compiled regexes the parser runs per line. │
    ├─────────────────────┼────────────────────────────────────────────────┤
    │ MATCH_NOTHING       │ A regex that never matches. Plugging it in is  │
    │                     │ how a feature gets switched off.               │
    └─────────────────────┴────────────────────────────────────────────────┘
"""

from __future__ import annotations

import re
from collections.abc import Callable, Sequence
from dataclasses import dataclass

MATCH_NOTHING: re.Pattern[str] = re.compile(r'(?!.*)')
MATCH_EVERYTHING: re.Pattern[str] = re.compile(r'()(.+)', re.IGNORECASE)
MATCH_MENTIONS: re.Pattern[str] = re.compile(r'@([\w-]+)')

DEFAULT_NOTES_KEYWORDS: tuple[str, ...] = ('BREAKING CHANGE', 'BREAKING-CHANGE')
DEFAULT_ISSUE_PREFIXES: tuple[str, ...] = ('#',)
DEFAULT_REFERENCE_ACTIONS: tuple[str, ...] = (
    'close',
    'closes',
    'closed',
    'fix',
    'fixes',
    'fixed',
    'resolve',
    'resolves',
    'resolved',
)


def default_notes_pattern(keywords: str) -> re.Pattern[str]:
    """Build the note matcher for an alternation of escaped keywords.

    Group 1 is the keyword as written, group 2 the rest of the line.
    Leading whitespace, ``|`` and ``*`` are tolerated so that notes in
    quoted or bulleted footers are still found.
    """
    return re.compile(rf'^[\s|*]*({keywords})[:\s]+(.*)', re.IGNORECASE)


@dataclass(frozen=True)
class ParseOptions:
    """Textual configuration for :class:`~commitkit.commit_parsing.CommitParser`.

    Attributes:
        comment_char: Lines starting with this character are dropped.
            Empty disables comment stripping.
        notes_keywords: Footer keywords that open a note.
        notes_pattern: Builds the note regex from the joined keywords.
        issue_prefixes: Prefixes that introduce an issue number.
        issue_prefixes_case_sensitive: Match prefixes case-sensitively.
        reference_actions: Verbs such as ``Closes`` recorded as the
            reference's action.
    """

    comment_char: str = ''
    notes_keywords: Sequence[str] = DEFAULT_NOTES_KEYWORDS
    notes_pattern: Callable[[str], re.Pattern[str]] = default_notes_pattern
    issue_prefixes: Sequence[str] = DEFAULT_ISSUE_PREFIXES
    issue_prefixes_case_sensitive: bool = False
    reference_actions: Sequence[str] = DEFAULT_REFERENCE_ACTIONS


@dataclass(frozen=True)
class ParsePatterns:
    """Compiled matchers derived from :class:`ParseOptions`.

    Attributes:
        mentions: Finds ``@handle`` tokens.
        notes: Recognizes a note line.
        references: Splits a line into ``(action, sentence)`` pairs.
        reference_parts: Finds ``[owner/]repo<prefix><issue>`` tokens.
    """

    mentions: re.Pattern[str]
    notes: re.Pattern[str]
    references: re.Pattern[str]
    reference_parts: re.Pattern[str]


def join_patterns(parts: Sequence[str]) -> str:
    """Strip, drop blanks, escape and alternate ``parts``.

    >>> join_patterns(['close ', '', 'fix'])
    'close|fix'
    """
    return '|'.join(re.escape(p) for p in (part.strip() for part in parts) if p)


def compile_patterns(options: ParseOptions) -> ParsePatterns:
    """Compile ``options`` into the four per-line matchers."""
    issue_prefixes = join_patterns(options.issue_prefixes)
    notes_keywords = join_patterns(options.notes_keywords)
    reference_actions = join_patterns(options.reference_actions)

    if reference_actions:
        references = re.compile(
            rf'({reference_actions})(?:\s+(.*?))(?=(?:{reference_actions})|$)',
            re.IGNORECASE,
        )
    else:
        references = MATCH_EVERYTHING

    if issue_prefixes:
        reference_parts = re.compile(
            rf'(?:.*?)??\s*([\w\-./]*?)??({issue_prefixes})([\w-]*\d+)',
            0 if options.issue_prefixes_case_sensitive else re.IGNORECASE,
        )
    else:
        reference_parts = MATCH_NOTHING

    return ParsePatterns(
        mentions=MATCH_MENTIONS,
        notes=options.notes_pattern(notes_keywords) if notes_keywords else MATCH_NOTHING,
        references=references,
        reference_parts=reference_parts,
    )


__all__ = [
    'DEFAULT_ISSUE_PREFIXES',
    'DEFAULT_NOTES_KEYWORDS',
    'DEFAULT_REFERENCE_ACTIONS',
    'MATCH_EVERYTHING',
    'MATCH_NOTHING',
    'ParseOptions',
    'ParsePatterns',
    'compile_patterns',
    'default_notes_pattern',
    'join_patterns',
]
