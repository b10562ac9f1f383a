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

"""Structured error system for commitkit.

Parsing and classification never raise for malformed commit text: a
header that isn't conventional simply leaves ``type``/``scope``/``subject``
empty. Errors exist only for the I/O edges (git, config, templates and
the changelog file).

Key Concepts (ELI5)::

    ┌─────────────────────┬────────────────────────────────────────────────┐
    │ Concept             │ ELI5 Explanation                               │
    ├─────────────────────┼────────────────────────────────────────────────┤
    │ ErrorCode           │ A unique named ID like "CK-VCS-COMMAND-FAILED" │
    │                     │ for each error. Readable at a glance.          │
    ├─────────────────────┼────────────────────────────────────────────────┤
    │ ErrorInfo           │ Code + message + hint. An error card with a    │
    │                     │ fix suggestion stapled on.                     │
    ├─────────────────────┼────────────────────────────────────────────────┤
    │ CommitKitError      │ The exception you raise. Carries the card so   │
    │                     │ the CLI can render it.                         │
    ├─────────────────────┼────────────────────────────────────────────────┤
    │ explain()           │ Looks up a code in the ERRORS catalog.         │
    └─────────────────────┴────────────────────────────────────────────────┘

Code categories::

    CK-CONFIG-*     commitkit.toml errors
    CK-VCS-*        git invocation errors
    CK-VERSION-*    Versioning errors
    CK-RENDER-*     Template errors
    CK-OUTPUT-*     Changelog file errors

Usage::

    from commitkit.errors import CommitKitError, E

    raise CommitKitError(
        code=E.VCS_COMMAND_FAILED,
        message='git log exited with status 128',
        hint='Run the command inside a git repository.',
    )
"""

from __future__ import annotations

import sys
from dataclasses import dataclass
from enum import Enum
from typing import TextIO

from rich.console import Console
from rich.markup import escape as rich_escape


class ErrorCode(str, Enum):
    """All commitkit diagnostic codes."""

    # Configuration
    CONFIG_INVALID_KEY = 'CK-CONFIG-INVALID-KEY'
    CONFIG_INVALID_VALUE = 'CK-CONFIG-INVALID-VALUE'
    CONFIG_PARSE_ERROR = 'CK-CONFIG-PARSE-ERROR'

    # Version control
    VCS_COMMAND_FAILED = 'CK-VCS-COMMAND-FAILED'
    VCS_TIMEOUT = 'CK-VCS-TIMEOUT'

    # Versioning
    VERSION_NOT_FOUND = 'CK-VERSION-NOT-FOUND'

    # Rendering
    RENDER_TEMPLATE_NOT_FOUND = 'CK-RENDER-TEMPLATE-NOT-FOUND'
    RENDER_FAILED = 'CK-RENDER-FAILED'

    # Output
    OUTPUT_READ_FAILED = 'CK-OUTPUT-READ-FAILED'
    OUTPUT_WRITE_FAILED = 'CK-OUTPUT-WRITE-FAILED'


E = ErrorCode


@dataclass(frozen=True)
class ErrorInfo:
    """Metadata for a single error code.

    Attributes:
        code: The ``CK-NAMED-KEY`` error code.
        message: Human-readable description of what went wrong.
        hint: Optional suggestion for how to fix the error.
    """

    code: ErrorCode
    message: str
    hint: str = ''


class CommitKitError(Exception):
    """Base exception for all commitkit errors.

    Args:
        code: The error code from :class:`ErrorCode`.
        message: Human-readable description of what went wrong.
        hint: Optional suggestion for how to fix the error.
    """

    def __init__(self, code: ErrorCode, message: str, hint: str = '') -> None:
        """Initialize with an error code, message, and optional hint."""
        self.info = ErrorInfo(code=code, message=message, hint=hint)
        super().__init__(f'[{code.value}] {message}')

    @property
    def code(self) -> ErrorCode:
        """The error code."""
        return self.info.code

    @property
    def hint(self) -> str:
        """Suggestion for fixing this error, or empty string."""
        return self.info.hint


ERRORS: dict[ErrorCode, ErrorInfo] = {
    E.CONFIG_INVALID_KEY: ErrorInfo(
        code=E.CONFIG_INVALID_KEY,
        message='commitkit.toml contains a key commitkit does not recognize.',
        hint='Check the spelling; the error message suggests the closest valid key.',
    ),
    E.CONFIG_INVALID_VALUE: ErrorInfo(
        code=E.CONFIG_INVALID_VALUE,
        message='A commitkit.toml value has the wrong type.',
        hint='Lists must be arrays of strings; flags must be true or false.',
    ),
    E.VCS_COMMAND_FAILED: ErrorInfo(
        code=E.VCS_COMMAND_FAILED,
        message='A git command exited with a non-zero status.',
        hint='Make sure you are inside a git repository and the boundary tag exists.',
    ),
    E.VERSION_NOT_FOUND: ErrorInfo(
        code=E.VERSION_NOT_FOUND,
        message='No semver tag was found and no version was given.',
        hint='Pass the current version explicitly or create a tag such as v0.1.0.',
    ),
    E.RENDER_TEMPLATE_NOT_FOUND: ErrorInfo(
        code=E.RENDER_TEMPLATE_NOT_FOUND,
        message='A changelog template could not be found.',
        hint='Templates are looked up in templates_dir first, then among the built-ins.',
    ),
    E.OUTPUT_WRITE_FAILED: ErrorInfo(
        code=E.OUTPUT_WRITE_FAILED,
        message='The changelog file could not be written.',
        hint='Check file permissions; the temporary .tmp file has been removed.',
    ),
}


def explain(code: str) -> str | None:
    """Return a detailed explanation for an error code.

    Args:
        code: The error code string, e.g. ``"CK-VCS-COMMAND-FAILED"``.

    Returns:
        A formatted explanation string, or ``None`` if the code is unknown.
    """
    try:
        error_code = ErrorCode(code)
    except ValueError:
        return None

    info = ERRORS.get(error_code)
    if info is None:
        return f'{code}: No detailed explanation available.'

    lines = [f'{code}: {info.message}']
    if info.hint:
        lines.append(f'  Hint: {info.hint}')
    return '\n'.join(lines)


def render_error(exc: CommitKitError, *, file: TextIO | None = None) -> None:
    """Render an error in Rust-compiler style.

    Output format::

        error[CK-VCS-COMMAND-FAILED]: git log exited with status 128
          |
          = hint: Run the command inside a git repository.

    Args:
        exc: The error to render.
        file: Output stream (defaults to ``sys.stderr``).
    """
    out = file or sys.stderr
    console = Console(file=out, highlight=False, no_color=not out.isatty())
    msg = rich_escape(exc.info.message)
    console.print(
        f'[bold red]error[/bold red][bold red]\\[{exc.code.value}][/bold red][bold]: {msg}[/bold]',
    )
    if exc.hint:
        console.print('  [dim]|[/dim]')
        console.print(f'  [dim]=[/dim] [cyan]hint[/cyan]: {rich_escape(exc.hint)}')
    console.print()


__all__ = [
    'E',
    'ERRORS',
    'CommitKitError',
    'ErrorCode',
    'ErrorInfo',
    'explain',
    'render_error',
]
