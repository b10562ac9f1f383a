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

"""Pure types for commit message parsing.

This module has **zero** runtime dependencies beyond the standard library.
Everything here is a frozen dataclass, enum, or protocol: no I/O, no
logging, no side effects.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any, Protocol, runtime_checkable

# Attributes a merge interpreter or a field directive may overwrite.
MANAGEABLE_FIELDS: frozenset[str] = frozenset({
    'type',
    'scope',
    'subject',
    'merge',
    'header',
    'body',
    'footer',
})

def _empty() -> Mapping[str, str | None]:
    return MappingProxyType({})


@dataclass(frozen=True)
class CommitNote:
    """A keyword annotation from the footer, e.g. ``BREAKING CHANGE: ...``.

    Attributes:
        title: The keyword as written in the message.
        text: The note body, trimmed of surrounding line breaks.
    """

    title: str
    text: str


@dataclass(frozen=True)
class CommitReference:
    """An issue or pull request cross-reference.

    ``Closes owner/repo#12`` yields ``action='Closes'``, ``owner='owner'``,
    ``repository='repo'``, ``prefix='#'`` and ``issue='12'``.

    Attributes:
        raw: The matched text, including any repository qualifier.
        action: The verb preceding the reference, or ``None``.
        owner: Repository owner, when written as ``owner/repo#N``.
        repository: Repository name, when qualified.
        issue: The issue identifier without its prefix.
        prefix: The issue prefix that matched (``#`` by default).
    """

    raw: str
    action: str | None
    owner: str | None
    repository: str | None
    issue: str
    prefix: str


@dataclass(frozen=True)
class Commit:
    """One parsed commit message.

    Every optional string is ``None`` rather than ``""`` when the message
    did not supply it. ``header`` is kept verbatim even when it doesn't
    follow ``type(scope)!: subject``.

    Attributes:
        hash: Object id, only when given as the first line of the input.
        type: Conventional type (``feat``, ``fix``...).
        scope: Conventional scope.
        subject: Text after ``: `` in the header.
        merge: The merge line, when a merge interpreter recognized one.
        header: The first meaningful line.
        body: Free text between header and footer.
        footer: Notes, references and everything after them.
        revert: What this commit reverts (``{'header', 'hash'}`` by
            default), or ``None``.
        notes: Breaking change and other keyword notes in encounter order.
        mentions: ``@handle`` names found after the header.
        references: Issue references from header, body and footer.
        fields: Values captured by ``-key-`` footer directives.
        meta: Extra values produced by a merge interpreter.
    """

    hash: str | None = None
    type: str | None = None
    scope: str | None = None
    subject: str | None = None
    merge: str | None = None
    header: str | None = None
    body: str | None = None
    footer: str | None = None
    revert: Mapping[str, str | None] | None = None
    notes: tuple[CommitNote, ...] = ()
    mentions: tuple[str, ...] = ()
    references: tuple[CommitReference, ...] = ()
    fields: Mapping[str, str | None] = field(default_factory=_empty)
    meta: Mapping[str, str | None] = field(default_factory=_empty)

    @property
    def breaking(self) -> bool:
        """Whether the commit carries any note."""
        return bool(self.notes)

    def to_dict(self) -> dict[str, Any]:
        """Return a JSON-ready copy with plain lists and dicts."""
        return {
            'hash': self.hash,
            'type': self.type,
            'scope': self.scope,
            'subject': self.subject,
            'merge': self.merge,
            'header': self.header,
            'body': self.body,
            'footer': self.footer,
            'revert': dict(self.revert) if self.revert is not None else None,
            'notes': [{'title': n.title, 'text': n.text} for n in self.notes],
            'mentions': list(self.mentions),
            'references': [
                {
                    'raw': r.raw,
                    'action': r.action,
                    'owner': r.owner,
                    'repository': r.repository,
                    'issue': r.issue,
                    'prefix': r.prefix,
                }
                for r in self.references
            ],
            'fields': dict(self.fields),
            'meta': dict(self.meta),
        }


@dataclass(frozen=True)
class MergeResult:
    """What a :class:`MergeInterpreter` extracted from a merge line.

    Attributes:
        merge: Replacement for :attr:`Commit.merge`; the raw line when
            ``None``.
        manageable: Values for manageable attributes (``type``, ``header``...).
            Keys outside :data:`MANAGEABLE_FIELDS` are ignored.
        meta: Values copied into :attr:`Commit.meta`.
    """

    merge: str | None = None
    manageable: Mapping[str, str | None] = field(default_factory=_empty)
    meta: Mapping[str, str | None] = field(default_factory=_empty)


class FieldTarget(Enum):
    """Where lines following a field directive are collected."""

    NONE = 'none'
    MANAGEABLE = 'manageable'
    FIELD = 'field'


@dataclass(frozen=True)
class FieldDirective:
    """A recognized ``-key-`` directive line.

    Attributes:
        key: The directive name; empty for a "none" directive.
        target: Where subsequent lines go.
    """

    key: str
    target: FieldTarget


@runtime_checkable
class MergeInterpreter(Protocol):
    """Recognizes merge or pull request header lines."""

    def parse(self, line: str) -> MergeResult | None:
        """Return a :class:`MergeResult` for a merge line, else ``None``."""
        ...


@runtime_checkable
class RevertInterpreter(Protocol):
    """Recognizes revert commits from the full message text."""

    def parse(self, text: str) -> Mapping[str, str | None] | None:
        """Return the revert descriptor, or ``None`` if not a revert."""
        ...


@runtime_checkable
class FieldInterpreter(Protocol):
    """Recognizes footer field directive lines."""

    def parse(self, line: str) -> FieldDirective | None:
        """Return a :class:`FieldDirective` for a directive line, else ``None``."""
        ...
