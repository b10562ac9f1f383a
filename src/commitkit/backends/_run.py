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


"""Subprocess abstraction for commitkit.

Every external tool call goes through :func:`run_command`, which logs
the invocation, enforces a timeout and returns a :class:`CommandResult`
instead of raising on a non-zero exit. Callers decide whether a failed
command is fatal.

Key Concepts (ELI5)::

    ┌─────────────────────┬────────────────────────────────────────────────┐
    │ Concept             │ ELI5 Explanation                               │
    ├─────────────────────┼────────────────────────────────────────────────┤
    │ run_command         │ Runs ``git ...`` and writes down what happened.│
    ├─────────────────────┼────────────────────────────────────────────────┤
    │ CommandResult       │ The receipt: exit code, output, duration.      │
    ├─────────────────────┼────────────────────────────────────────────────┤
    │ Timeout             │ A hung command becomes a ``CK-VCS-TIMEOUT``    │
    │                     │ error instead of hanging the release.          │
    └─────────────────────┴────────────────────────────────────────────────┘
"""

from __future__ import annotations

import os
import subprocess  # noqa: S404 - subprocess is the core purpose of this module
import time
from dataclasses import dataclass
from pathlib import Path

from commitkit.errors import CommitKitError, E
from commitkit.logging import get_logger

log = get_logger('commitkit.backends.run')

# Reading history is fast; a minute means something is stuck.
DEFAULT_TIMEOUT_SECONDS = 60


@dataclass(frozen=True)
class CommandResult:
    """Result of a subprocess invocation.

    Attributes:
        command: The command that was executed.
        return_code: Process exit code (0 = success).
        stdout: Captured standard output.
        stderr: Captured standard error.
        duration: Wall-clock duration in milliseconds.
    """

    command: list[str]
    return_code: int
    stdout: str = ''
    stderr: str = ''
    duration: float = 0.0

    @property
    def ok(self) -> bool:
        """Whether the command exited with status 0."""
        return self.return_code == 0

    @property
    def command_str(self) -> str:
        """The command as a single shell-style string."""
        return ' '.join(self.command)


def run_command(
    cmd: list[str],
    *,
    cwd: Path | str | None = None,
    env: dict[str, str] | None = None,
    timeout: int = DEFAULT_TIMEOUT_SECONDS,
) -> CommandResult:
    """Run ``cmd`` and capture its output as text.

    Args:
        cmd: Command and arguments.
        cwd: Working directory for the command.
        env: Extra environment variables, merged over the current ones.
        timeout: Seconds to wait before killing the process.

    Returns:
        A :class:`CommandResult`; a non-zero exit is not an exception.

    Raises:
        CommitKitError: ``CK-VCS-TIMEOUT`` if the command exceeds
            ``timeout``, ``CK-VCS-COMMAND-FAILED`` if the executable
            cannot be started.
    """
    cmd_str = ' '.join(cmd)
    log.debug('run_command', cmd=cmd_str, cwd=str(cwd or '.'))

    full_env = {**os.environ, **env} if env else None

    start = time.monotonic()
    try:
        result = subprocess.run(  # noqa: S603 - arguments come from the backends
            cmd,
            cwd=cwd,
            env=full_env,
            capture_output=True,
            text=True,
            timeout=timeout,
        )
    except subprocess.TimeoutExpired as exc:
        duration = (time.monotonic() - start) * 1000
        log.error('command_timeout', cmd=cmd_str, timeout=timeout, duration=duration)
        raise CommitKitError(
            code=E.VCS_TIMEOUT,
            message=f'{cmd_str} did not finish within {timeout}s',
            hint='Check for a credential prompt or a very large history.',
        ) from exc
    except OSError as exc:
        raise CommitKitError(
            code=E.VCS_COMMAND_FAILED,
            message=f'Could not run {cmd[0]}: {exc}',
            hint=f'Make sure {cmd[0]} is installed and on PATH.',
        ) from exc

    duration = (time.monotonic() - start) * 1000
    cmd_result = CommandResult(
        command=cmd,
        return_code=result.returncode,
        stdout=result.stdout,
        stderr=result.stderr,
        duration=duration,
    )

    if result.returncode != 0:
        log.warning(
            'command_failed',
            cmd=cmd_str,
            return_code=result.returncode,
            stderr=result.stderr[:500],
            duration=duration,
        )
    else:
        log.debug('command_ok', cmd=cmd_str, duration=duration)

    return cmd_result


__all__ = [
    'DEFAULT_TIMEOUT_SECONDS',
    'CommandResult',
    'run_command',
]
