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

"""Commit message parsing.

Turns a raw ``git log`` entry into a :class:`Commit`: type, scope and
subject from the header, body and footer text, breaking change notes,
issue references, ``@mentions`` and revert metadata.

Merge, revert and field handling are pluggable through the
:class:`MergeInterpreter`, :class:`RevertInterpreter` and
:class:`FieldInterpreter` protocols; the ``Regex*`` classes are the
built-in strategies.

Usage::

    from commitkit.commit_parsing import CommitParser, ParseOptions, parse_commit

    commit = parse_commit('fix(api): handle empty body\\n\\nCloses #42')
    assert commit.type == 'fix'
    assert commit.references[0].issue == '42'

    parser = CommitParser(ParseOptions(issue_prefixes=['GH-']))
    parser.parse('fix: crash GH-7').references[0].prefix  # 'GH-'
"""

from commitkit.commit_parsing._interpreters import (
    MATCH_FIELD,
    MATCH_REVERT,
    NoMergeInterpreter,
    RegexFieldInterpreter,
    RegexMergeInterpreter,
    RegexRevertInterpreter,
)
from commitkit.commit_parsing._parser import (
    MATCH_HASH,
    MATCH_HEADER,
    CommitParser,
    parse_commit,
    parse_references,
)
from commitkit.commit_parsing._patterns import (
    DEFAULT_ISSUE_PREFIXES,
    DEFAULT_NOTES_KEYWORDS,
    DEFAULT_REFERENCE_ACTIONS,
    MATCH_EVERYTHING,
    MATCH_NOTHING,
    ParseOptions,
    ParsePatterns,
    compile_patterns,
    default_notes_pattern,
)
from commitkit.commit_parsing._types import (
    MANAGEABLE_FIELDS,
    Commit,
    CommitNote,
    CommitReference,
    FieldDirective,
    FieldInterpreter,
    FieldTarget,
    MergeInterpreter,
    MergeResult,
    RevertInterpreter,
)

__all__ = [
    'DEFAULT_ISSUE_PREFIXES',
    'DEFAULT_NOTES_KEYWORDS',
    'DEFAULT_REFERENCE_ACTIONS',
    'MANAGEABLE_FIELDS',
    'MATCH_EVERYTHING',
    'MATCH_FIELD',
    'MATCH_HASH',
    'MATCH_HEADER',
    'MATCH_NOTHING',
    'MATCH_REVERT',
    'Commit',
    'CommitNote',
    'CommitParser',
    'CommitReference',
    'FieldDirective',
    'FieldInterpreter',
    'FieldTarget',
    'MergeInterpreter',
    'MergeResult',
    'NoMergeInterpreter',
    'ParseOptions',
    'ParsePatterns',
    'RegexFieldInterpreter',
    'RegexMergeInterpreter',
    'RegexRevertInterpreter',
    'RevertInterpreter',
    'compile_patterns',
    'default_notes_pattern',
    'parse_commit',
    'parse_references',
]
