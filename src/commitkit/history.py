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


"""Commit stream and release tag selection.

Glue between a :class:`~commitkit.backends.vcs.VCS` and the pure parsing
and versioning code: raw records become :class:`Commit` objects, and tag
names become the release boundary.

Tag selection::

    tags()            v0.9.0  v1.0.0  v1.1.0-rc.1  pkg@2.0.0  nightly
      │ skip_unstable         ────────✗─────
      │ prefix=None                              ✗ (not semver)  ✗
      ▼
    semver_tags()     v0.9.0  v1.0.0  v1.1.0-rc.1
      │ highest by semver precedence
      ▼
    latest_version_tag()  → 'v1.1.0-rc.1'   (raw, usable as ``since``)
    current_version()     → '1.1.0-rc.1'    (cleaned)

With a prefix, only tags carrying that prefix are considered and the
prefix is removed before the semver check.
"""

from __future__ import annotations

import re
from collections.abc import AsyncIterator

from commitkit.backends.vcs import VCS
from commitkit.commit_parsing import Commit, CommitParser
from commitkit.logging import get_logger
from commitkit.versioning import clean, compare, is_valid

logger = get_logger(__name__)

UNSTABLE_TAG: re.Pattern[str] = re.compile(r'\d+\.\d+\.\d+-.+')
ANY_PACKAGE_PREFIX: re.Pattern[str] = re.compile(r'^.+@')

TagPrefix = str | re.Pattern[str]


def package_prefix(name: str | None = None) -> TagPrefix:
    """Return the tag prefix for a package in a monorepo.

    >>> package_prefix('pkg')
    'pkg@'

    Without a name, a pattern matching any ``<name>@`` prefix is returned.
    """
    return f'{name}@' if name else ANY_PACKAGE_PREFIX


def _unprefixed(tag: str, prefix: TagPrefix) -> str | None:
    if isinstance(prefix, str):
        return tag[len(prefix) :] if tag.startswith(prefix) else None
    if prefix.search(tag) is None:
        return None
    return prefix.sub('', tag, count=1)


async def _version_tags(
    vcs: VCS,
    prefix: TagPrefix | None,
    skip_unstable: bool,
) -> AsyncIterator[tuple[str, str]]:
    """Yield ``(tag, version)`` for each tag that is semver once unprefixed."""
    async for tag in vcs.tags():
        if skip_unstable and UNSTABLE_TAG.search(tag):
            continue
        version = _unprefixed(tag, prefix) if prefix else tag
        if version is not None and is_valid(version):
            yield tag, version


async def semver_tags(
    vcs: VCS,
    *,
    prefix: TagPrefix | None = None,
    skip_unstable: bool = False,
    clean_tags: bool = False,
) -> AsyncIterator[str]:
    """Yield the tags that are valid semver, in the order the VCS lists them.

    Args:
        vcs: Tag source.
        prefix: Keep only tags with this prefix (string or pattern).
        skip_unstable: Drop prerelease tags such as ``1.0.0-rc.1``.
        clean_tags: Yield the cleaned version instead of the raw tag.
    """
    async for tag, version in _version_tags(vcs, prefix, skip_unstable):
        if not clean_tags:
            yield tag
            continue
        cleaned = clean(version)
        if cleaned:
            yield cleaned


async def _highest(
    vcs: VCS,
    prefix: TagPrefix | None,
    skip_unstable: bool,
) -> tuple[str, str] | None:
    best: tuple[str, str] | None = None
    async for tag, version in _version_tags(vcs, prefix, skip_unstable):
        if best is None or compare(version, best[1]) > 0:
            best = (tag, version)
    return best


async def latest_version_tag(
    vcs: VCS,
    *,
    prefix: TagPrefix | None = None,
    skip_unstable: bool = False,
) -> str | None:
    """Return the raw name of the highest semver tag, or ``None``."""
    best = await _highest(vcs, prefix, skip_unstable)
    logger.debug('latest_version_tag', tag=best[0] if best else None)
    return best[0] if best else None


async def current_version(
    vcs: VCS,
    *,
    prefix: TagPrefix | None = None,
    skip_unstable: bool = False,
) -> str | None:
    """Return the cleaned version of the highest semver tag, or ``None``."""
    best = await _highest(vcs, prefix, skip_unstable)
    return clean(best[1]) if best else None


async def parse_commits(
    vcs: VCS,
    parser: CommitParser,
    *,
    since: str | None = None,
    ignore: re.Pattern[str] | None = None,
) -> AsyncIterator[Commit]:
    """Yield parsed commits after ``since``, newest first."""
    async for raw in vcs.commits(since=since, ignore=ignore):
        yield parser.parse(raw)


__all__ = [
    'ANY_PACKAGE_PREFIX',
    'UNSTABLE_TAG',
    'TagPrefix',
    'current_version',
    'latest_version_tag',
    'package_prefix',
    'parse_commits',
    'semver_tags',
]
