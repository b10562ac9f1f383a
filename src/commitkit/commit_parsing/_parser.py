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

"""Full conventional commit message parser.

Pure implementation: depends only on ``re`` and the sibling modules.
No I/O, no logging, no side effects.

Parse phases::

    raw text
      │  drop "gpg:" and comment lines
      ▼
    hash ──► merge ──► header ──► body / notes / footer ──► mentions ──► revert
    (line 1)  (plug-in)  (type(scope)!: subject)  (line loop)  (@handles)  (plug-in)

The body/footer loop is a small state machine::

    ┌──────┐  line with references   ┌────────┐
    │ BODY │ ───────────────────────►│ FOOTER │◄──┐
    └──┬───┘                         └───┬────┘   │ line with references
       │ note keyword          note keyword│       │ or absorbed -field-
       ▼                                   ▼       │
    ┌──────┐ ◄────────────────────────────────────┘
    │ NOTE │   other lines extend the open note
    └──────┘

Field directives (``-key-``) can appear in any mode; the lines after one
are collected into that attribute or into :attr:`Commit.fields`.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType

from commitkit.commit_parsing._interpreters import (
    NoMergeInterpreter,
    RegexFieldInterpreter,
    RegexRevertInterpreter,
)
from commitkit.commit_parsing._patterns import (
    MATCH_EVERYTHING,
    ParseOptions,
    ParsePatterns,
    compile_patterns,
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
    RevertInterpreter,
)

MATCH_HASH: re.Pattern[str] = re.compile(r'^[0-9a-fA-F]{7,64}$')
MATCH_HEADER: re.Pattern[str] = re.compile(r'^(\w*)(?:\(([\w@$.\-*/ ]*)\))?(!)?: (.*)$')
MATCH_URL: re.Pattern[str] = re.compile(r'\b(?:https?)://(?:www\.)?[-a-zA-Z0-9@:%_+.~#?&/=]+\b')
MATCH_GPG: re.Pattern[str] = re.compile(r'^\s*gpg:')
_LINE_BREAK = re.compile(r'\r?\n')


class _Mode(Enum):
    BODY = 'body'
    NOTE = 'note'
    FOOTER = 'footer'


@dataclass
class _Note:
    title: str
    text: str


@dataclass
class _Draft:
    """Mutable accumulator frozen into a :class:`Commit` at the end."""

    attrs: dict[str, str | None] = field(default_factory=lambda: dict.fromkeys(MANAGEABLE_FIELDS))
    hash: str | None = None
    notes: list[_Note] = field(default_factory=list)
    mentions: list[str] = field(default_factory=list)
    references: list[CommitReference] = field(default_factory=list)
    fields: dict[str, str | None] = field(default_factory=dict)
    meta: dict[str, str | None] = field(default_factory=dict)

    def append(self, key: str, line: str) -> None:
        self.attrs[key] = append_line(self.attrs[key], line)


def append_line(src: str | None, line: str) -> str:
    """Join ``line`` onto ``src`` with a newline; an empty ``src`` is replaced."""
    return f'{src}\n{line}' if src else line


def trim_line_breaks(text: str) -> str:
    """Strip leading and trailing ``\\r``/``\\n`` characters only."""
    return text.strip('\r\n')


def lines_of(raw: str, comment_char: str = '') -> list[str]:
    """Split ``raw`` into lines, dropping GPG output and comment lines."""
    return [
        line
        for line in _LINE_BREAK.split(trim_line_breaks(raw))
        if not MATCH_GPG.search(line) and not (comment_char and line[:1] == comment_char)
    ]


def parse_references(line: str, patterns: ParsePatterns) -> list[CommitReference]:
    """Extract issue references from one line.

    When the line contains an action verb, each ``<action> <sentence>``
    run is scanned separately and its references carry that action.
    Otherwise the whole line is a single action-less sentence. URLs are
    blanked out first so ``https://host/issues/1`` is not a reference.
    """
    if not line:
        return []

    regex = patterns.references if patterns.references.search(line) else MATCH_EVERYTHING
    references: list[CommitReference] = []
    for match in regex.finditer(line):
        action = match.group(1) or None
        sentence = MATCH_URL.sub(' ', match.group(2) or '')
        for part in patterns.reference_parts.finditer(sentence):
            owner: str | None = None
            repository = part.group(1) or None
            if repository and '/' in repository:
                owner, repository = repository.split('/', 1)
            references.append(
                CommitReference(
                    raw=part.group(0),
                    action=action,
                    owner=owner,
                    repository=repository,
                    issue=part.group(3),
                    prefix=part.group(2),
                )
            )
    return references


class CommitParser:
    """Parse raw commit messages into :class:`Commit` records.

    The parser is stateless between calls; one instance can be shared.

    Args:
        options: Keyword, prefix and action configuration.
        merge_interpreter: Recognizes merge lines before the header.
        revert_interpreter: Recognizes revert messages.
        field_interpreter: Recognizes ``-key-`` footer directives.
    """

    def __init__(
        self,
        options: ParseOptions | None = None,
        *,
        merge_interpreter: MergeInterpreter | None = None,
        revert_interpreter: RevertInterpreter | None = None,
        field_interpreter: FieldInterpreter | None = None,
    ) -> None:
        """Compile patterns and select interpreters."""
        self.options = options or ParseOptions()
        self.patterns = compile_patterns(self.options)
        self._merge = merge_interpreter or NoMergeInterpreter()
        self._revert = revert_interpreter or RegexRevertInterpreter()
        self._field = field_interpreter or RegexFieldInterpreter()

    def parse(self, raw: str) -> Commit:
        """Parse one raw message, optionally prefixed by a hash line."""
        draft = _Draft()
        lines = lines_of(raw, self.options.comment_char)

        if lines and MATCH_HASH.search(lines[0]):
            draft.hash = lines.pop(0)

        cursor = self._parse_merge(draft, lines, 0)
        cursor = self._parse_header(draft, lines, cursor)

        if draft.attrs['header']:
            draft.references.extend(parse_references(draft.attrs['header'], self.patterns))

        for line in lines[cursor:]:
            draft.mentions.extend(self.patterns.mentions.findall(line))

        self._parse_sections(draft, lines, cursor)

        revert = self._revert.parse('\n'.join(lines))

        body = draft.attrs['body']
        if body:
            draft.attrs['body'] = trim_line_breaks(body)
        footer = draft.attrs['footer']
        if footer:
            draft.attrs['footer'] = trim_line_breaks(footer)

        return Commit(
            hash=draft.hash,
            type=draft.attrs['type'],
            scope=draft.attrs['scope'],
            subject=draft.attrs['subject'],
            merge=draft.attrs['merge'],
            header=draft.attrs['header'],
            body=draft.attrs['body'],
            footer=draft.attrs['footer'],
            revert=MappingProxyType(dict(revert)) if revert is not None else None,
            notes=tuple(CommitNote(title=n.title, text=trim_line_breaks(n.text)) for n in draft.notes),
            mentions=tuple(draft.mentions),
            references=tuple(draft.references),
            fields=MappingProxyType(draft.fields),
            meta=MappingProxyType(draft.meta),
        )

    def _parse_merge(self, draft: _Draft, lines: list[str], cursor: int) -> int:
        line = lines[cursor] if cursor < len(lines) else ''
        result = self._merge.parse(line) if line else None
        if result is None:
            return cursor

        draft.attrs['merge'] = result.merge or line
        for key, value in result.manageable.items():
            if key in MANAGEABLE_FIELDS:
                draft.attrs[key] = value or None
        for key, value in result.meta.items():
            draft.meta[key] = value or None

        cursor += 1
        while cursor < len(lines) and not lines[cursor].strip():
            cursor += 1
        return cursor

    def _parse_header(self, draft: _Draft, lines: list[str], cursor: int) -> int:
        header = draft.attrs['header']
        if header is None and cursor < len(lines):
            header = lines[cursor]
            cursor += 1
        if not header:
            return cursor

        draft.attrs['header'] = header
        match = MATCH_HEADER.search(header)
        if match:
            type_, scope, breaking, subject = match.groups()
            if type_:
                draft.attrs['type'] = type_
            if scope:
                draft.attrs['scope'] = scope
            if subject:
                draft.attrs['subject'] = subject
            if breaking:
                draft.notes.append(_Note(title='BREAKING CHANGE', text=subject))
        return cursor

    def _parse_sections(self, draft: _Draft, lines: list[str], cursor: int) -> None:
        mode = _Mode.BODY
        note: _Note | None = None

        while cursor < len(lines):
            line = lines[cursor]

            if self._field.parse(line) is not None:
                cursor, absorbed = self._absorb_fields(draft, lines, cursor)
                if absorbed and mode is _Mode.NOTE:
                    note = None
                    mode = _Mode.FOOTER
                continue

            match = self.patterns.notes.search(line)
            if match:
                note = _Note(title=match.group(1), text=match.group(2) or '')
                draft.notes.append(note)
                draft.append('footer', line)
                mode = _Mode.NOTE
                cursor += 1
                continue

            references = parse_references(line, self.patterns)
            if mode is _Mode.NOTE and note is not None:
                if references:
                    draft.references.extend(references)
                    note = None
                    mode = _Mode.FOOTER
                else:
                    note.text = append_line(note.text, line)
                draft.append('footer', line)
            elif mode is _Mode.BODY and not references:
                draft.append('body', line)
            else:
                draft.references.extend(references)
                draft.append('footer', line)
                mode = _Mode.FOOTER
            cursor += 1

    def _absorb_fields(self, draft: _Draft, lines: list[str], cursor: int) -> tuple[int, bool]:
        """Collect lines after field directives; return the new cursor and
        whether any line was collected.
        """
        target: FieldDirective | None = None
        absorbed = False

        while cursor < len(lines):
            line = lines[cursor]
            directive = self._field.parse(line)
            if directive is not None:
                target = None if directive.target is FieldTarget.NONE else directive
                cursor += 1
                continue
            if target is None or self.patterns.notes.search(line):
                break

            if target.target is FieldTarget.MANAGEABLE:
                draft.append(target.key, line)
            else:
                draft.fields[target.key] = append_line(draft.fields.get(target.key), line)
            absorbed = True
            cursor += 1

        return cursor, absorbed


_DEFAULT_PARSER = CommitParser()


def parse_commit(raw: str) -> Commit:
    """Parse ``raw`` with the default options and interpreters.

    >>> parse_commit('feat(api)!: drop v1').notes[0].text
    'drop v1'
    """
    return _DEFAULT_PARSER.parse(raw)


__all__ = [
    'MATCH_HASH',
    'MATCH_HEADER',
    'CommitParser',
    'append_line',
    'lines_of',
    'parse_commit',
    'parse_references',
    'trim_line_breaks',
]
