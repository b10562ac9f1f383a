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


"""Backends for the I/O edges of commitkit.

The parsing, classification and changelog code never shells out
directly. Raw commit text and tag names arrive through the
:class:`~commitkit.backends.vcs.VCS` protocol, so tests can hand in a
fake and other version control systems can plug in.

- :class:`VCS`: raw commits, tags, remote URL (default: :class:`GitCLIBackend`)
- :func:`run_command`: the one place a subprocess is started
"""

from commitkit.backends._run import CommandResult, run_command
from commitkit.backends.vcs import VCS, GitCLIBackend

__all__ = [
    'VCS',
    'CommandResult',
    'GitCLIBackend',
    'run_command',
]
