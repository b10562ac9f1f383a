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


"""Configuration reader for commitkit.

Reads ``commitkit.toml`` from the repository root and returns a
validated :class:`CommitKitConfig`. Keys are flat and top-level; commit
types are an array of tables.

Validation Pipeline::

    commitkit.toml
    ┌────────────────────┐
    │ issue_prefix = ... │  ← typo!
    └─────────┬──────────┘
              ▼
    ┌──────────────────┐     ┌──────────────────────────────┐
    │ 1. Unknown key   │────→│ CK-CONFIG-INVALID-KEY:       │
    │    detection     │     │ hint: "Did you mean          │
    └────────┬─────────┘     │       'issue_prefixes'?"     │
             │               └──────────────────────────────┘
             ▼
    ┌──────────────────┐     ┌──────────────────────────────┐
    │ 2. Type check    │────→│ CK-CONFIG-INVALID-VALUE:     │
    │    each value    │     │ 'strict' must be bool        │
    └────────┬─────────┘     └──────────────────────────────┘
             ▼
    ┌──────────────────┐
    │ CommitKitConfig  │
    └──────────────────┘

Supported keys in ``commitkit.toml``::

    comment_char                  = "#"
    notes_keywords                = ["BREAKING CHANGE", "BREAKING-CHANGE"]
    issue_prefixes                = ["#", "GH-"]
    issue_prefixes_case_sensitive = false
    reference_actions             = ["closes", "fixes", "resolves"]
    ignore_reverted               = true
    pre_major                     = false     # default: current major is 0
    strict                        = false
    prerelease                    = "alpha"
    release_as                    = "minor"
    tag_prefix                    = "pkg@"
    changelog_file                = "CHANGELOG.md"
    changelog_header              = "# Changelog"
    templates_dir                 = "changelog-templates"

    [[types]]
    type    = "feat"
    section = "Features"
    hidden  = false

Usage::

    from commitkit.config import load_config

    cfg = load_config(Path('.'))
    parser = CommitParser(cfg.parse_options())
"""

from __future__ import annotations

import difflib
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import tomlkit
import tomlkit.exceptions

from commitkit.advisor import DEFAULT_COMMIT_TYPES, CommitType
from commitkit.commit_parsing import (
    DEFAULT_ISSUE_PREFIXES,
    DEFAULT_NOTES_KEYWORDS,
    DEFAULT_REFERENCE_ACTIONS,
    ParseOptions,
)
from commitkit.errors import CommitKitError, E
from commitkit.logging import get_logger
from commitkit.output import DEFAULT_HEADER

logger = get_logger(__name__)

CONFIG_FILENAME = 'commitkit.toml'

VALID_KEYS: frozenset[str] = frozenset({
    'comment_char',
    'notes_keywords',
    'issue_prefixes',
    'issue_prefixes_case_sensitive',
    'reference_actions',
    'ignore_reverted',
    'pre_major',
    'strict',
    'prerelease',
    'release_as',
    'tag_prefix',
    'changelog_file',
    'changelog_header',
    'templates_dir',
    'types',
})

VALID_TYPE_KEYS: frozenset[str] = frozenset({'type', 'section', 'hidden'})

_TYPE_MAP: dict[str, type | tuple[type, ...]] = {
    'comment_char': str,
    'notes_keywords': list,
    'issue_prefixes': list,
    'issue_prefixes_case_sensitive': bool,
    'reference_actions': list,
    'ignore_reverted': bool,
    'pre_major': bool,
    'strict': bool,
    'prerelease': str,
    'release_as': str,
    'tag_prefix': str,
    'changelog_file': str,
    'changelog_header': str,
    'templates_dir': str,
    'types': list,
}

_STRING_LIST_KEYS = ('notes_keywords', 'issue_prefixes', 'reference_actions')


@dataclass(frozen=True)
class CommitKitConfig:
    """Validated ``commitkit.toml`` settings.

    ``pre_major`` is ``None`` unless set, meaning "decide from the
    current version".
    """

    comment_char: str = ''
    notes_keywords: tuple[str, ...] = tuple(DEFAULT_NOTES_KEYWORDS)
    issue_prefixes: tuple[str, ...] = tuple(DEFAULT_ISSUE_PREFIXES)
    issue_prefixes_case_sensitive: bool = False
    reference_actions: tuple[str, ...] = tuple(DEFAULT_REFERENCE_ACTIONS)
    ignore_reverted: bool = True
    pre_major: bool | None = None
    strict: bool = False
    prerelease: str | None = None
    release_as: str | None = None
    tag_prefix: str | None = None
    changelog_file: str = 'CHANGELOG.md'
    changelog_header: str = DEFAULT_HEADER
    templates_dir: str | None = None
    types: tuple[CommitType, ...] = field(default=DEFAULT_COMMIT_TYPES)
    config_path: Path | None = None

    def parse_options(self) -> ParseOptions:
        """Return the parser options these settings describe."""
        return ParseOptions(
            comment_char=self.comment_char,
            notes_keywords=self.notes_keywords,
            issue_prefixes=self.issue_prefixes,
            issue_prefixes_case_sensitive=self.issue_prefixes_case_sensitive,
            reference_actions=self.reference_actions,
        )


def _suggest_key(unknown: str, valid: frozenset[str]) -> str | None:
    """Return the closest valid key for a typo, or None."""
    matches = difflib.get_close_matches(unknown, valid, n=1, cutoff=0.6)
    return matches[0] if matches else None


def _reject_unknown(key: str, valid: frozenset[str], context: str) -> None:
    suggestion = _suggest_key(key, valid)
    raise CommitKitError(
        code=E.CONFIG_INVALID_KEY,
        message=f"Unknown key '{key}' in {context}",
        hint=f"Did you mean '{suggestion}'?" if suggestion else f'Valid keys: {", ".join(sorted(valid))}.',
    )


def _validate_value_type(
    key: str,
    value: Any,  # noqa: ANN401 - dynamic config values
    *,
    context: str = CONFIG_FILENAME,
) -> None:
    """Raise if a config value has the wrong type."""
    expected = _TYPE_MAP.get(key)
    if expected is None:
        return
    if not isinstance(value, expected):
        type_name = expected.__name__ if isinstance(expected, type) else str(expected)
        raise CommitKitError(
            code=E.CONFIG_INVALID_VALUE,
            message=f"'{key}' must be {type_name}, got {type(value).__name__}",
            hint=f'Check the value of {key} in {context}.',
        )


def _validate_string_list(key: str, items: list[object]) -> None:
    """Raise if any item in a list is not a string."""
    for item in items:
        if not isinstance(item, str):
            raise CommitKitError(
                code=E.CONFIG_INVALID_VALUE,
                message=f"'{key}' items must be strings, got {type(item).__name__}: {item!r}",
                hint=f'Each {key} entry should be a string in {CONFIG_FILENAME}.',
            )


def _parse_types(items: list[Any]) -> tuple[CommitType, ...]:  # noqa: ANN401 - dynamic config
    types: list[CommitType] = []
    for index, item in enumerate(items):
        context = f'[[types]] #{index + 1}'
        if not isinstance(item, dict):
            raise CommitKitError(
                code=E.CONFIG_INVALID_VALUE,
                message=f'{context} must be a table, got {type(item).__name__}',
                hint='Write each commit type as a [[types]] table.',
            )
        for key in item:
            if key not in VALID_TYPE_KEYS:
                _reject_unknown(key, VALID_TYPE_KEYS, context)
        type_ = item.get('type')
        section = item.get('section')
        hidden = item.get('hidden', False)
        if not isinstance(type_, str) or not isinstance(section, str) or not isinstance(hidden, bool):
            raise CommitKitError(
                code=E.CONFIG_INVALID_VALUE,
                message=f'{context} needs string type and section, and a boolean hidden',
                hint='Example: type = "feat", section = "Features", hidden = false.',
            )
        types.append(CommitType(type=type_, section=section, hidden=hidden))
    return tuple(types)


def load_config(root: Path) -> CommitKitConfig:
    """Load and validate configuration from ``commitkit.toml``.

    Args:
        root: Directory containing ``commitkit.toml``.

    Returns:
        A validated :class:`CommitKitConfig`; defaults when the file is
        missing or empty.

    Raises:
        CommitKitError: If the file cannot be parsed or contains an
            unknown key or a mistyped value.
    """
    config_path = root / CONFIG_FILENAME

    if not config_path.is_file():
        logger.debug('no_commitkit_config', path=str(config_path))
        return CommitKitConfig()

    try:
        doc = tomlkit.parse(config_path.read_text(encoding='utf-8'))
    except (OSError, tomlkit.exceptions.TOMLKitError) as exc:
        raise CommitKitError(
            code=E.CONFIG_PARSE_ERROR,
            message=f'Failed to parse {config_path}: {exc}',
            hint='Check the TOML syntax.',
        ) from exc

    raw: dict[str, Any] = doc.unwrap()  # noqa: ANN401

    for key in raw:
        if key not in VALID_KEYS:
            _reject_unknown(key, VALID_KEYS, CONFIG_FILENAME)

    for key, value in raw.items():
        _validate_value_type(key, value)
    for key in _STRING_LIST_KEYS:
        if key in raw:
            _validate_string_list(key, raw[key])

    kwargs: dict[str, Any] = dict(raw)  # noqa: ANN401
    for key in _STRING_LIST_KEYS:
        if key in kwargs:
            kwargs[key] = tuple(kwargs[key])
    if 'types' in kwargs:
        kwargs['types'] = _parse_types(kwargs['types'])

    logger.debug('config_loaded', path=str(config_path), keys=sorted(raw))
    return CommitKitConfig(**kwargs, config_path=config_path)


__all__ = [
    'CONFIG_FILENAME',
    'VALID_KEYS',
    'CommitKitConfig',
    'load_config',
]
