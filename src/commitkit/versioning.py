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

"""Semantic version arithmetic and next-version computation.

Key Concepts (ELI5)::

    ┌─────────────────────────┬─────────────────────────────────────────────┐
    │ Concept                 │ Plain-English                               │
    ├─────────────────────────┼─────────────────────────────────────────────┤
    │ SemVer                  │ ``1.2.3-alpha.1``: major, minor, patch and  │
    │                         │ optional dot-separated prerelease ids.      │
    ├─────────────────────────┼─────────────────────────────────────────────┤
    │ Release type            │ How to step: major, minor, patch, their     │
    │                         │ ``pre*`` forms, or ``prerelease``.          │
    ├─────────────────────────┼─────────────────────────────────────────────┤
    │ Channel                 │ A prerelease identifier like ``alpha``.     │
    │                         │ With a channel, stable steps become pre-    │
    │                         │ steps.                                      │
    ├─────────────────────────┼─────────────────────────────────────────────┤
    │ Tier                    │ The highest non-zero component: ``0.2.0``   │
    │                         │ is a minor tier, ``1.1.0`` a major tier.    │
    └─────────────────────────┴─────────────────────────────────────────────┘

Channel normalization (``next`` with a channel)::

    1.0.0         + minor → preminor   → 1.1.0-alpha.1
    1.1.0-alpha.1 + patch → prerelease → 1.1.0-alpha.2   (major tier ≥ patch)
    0.2.0-alpha.1 + major → premajor   → 1.0.0-alpha.1   (minor tier < major)

Usage::

    from commitkit.versioning import VersionGenerator, increment

    increment('1.2.3', 'preminor', 'beta')  # '1.3.0-beta.0'

    gen = VersionGenerator(advisor, prerelease='alpha')
    release = await gen.next('1.0.0')
    release.version  # '1.1.0-alpha.1'
"""

from __future__ import annotations

import re
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Protocol, runtime_checkable

from commitkit.commit_parsing import Commit
from commitkit.logging import get_logger

logger = get_logger(__name__)

RELEASE_TYPES: tuple[str, ...] = (
    'major',
    'premajor',
    'minor',
    'preminor',
    'patch',
    'prepatch',
    'prerelease',
)
STABLE_TYPES: frozenset[str] = frozenset({'major', 'minor', 'patch'})
UNKNOWN = 'unknown'

_PRIORITY: dict[str, int] = {'major': 2, 'minor': 1, 'patch': 0}

_NUMERIC_ID = r'0|[1-9]\d*'
_PRERELEASE_ID = r'(?:0|[1-9]\d*|\d*[a-zA-Z-][a-zA-Z0-9-]*)'
SEMVER_PATTERN: re.Pattern[str] = re.compile(
    rf'^v?({_NUMERIC_ID})\.({_NUMERIC_ID})\.({_NUMERIC_ID})'
    rf'(?:-({_PRERELEASE_ID}(?:\.{_PRERELEASE_ID})*))?'
    r'(?:\+([0-9A-Za-z-]+(?:\.[0-9A-Za-z-]+)*))?$'
)
_CLEAN_PREFIX = re.compile(r'^[=v]+')


@dataclass(frozen=True)
class SemVer:
    """A parsed semantic version.

    Build metadata is parsed but never formatted back; it does not take
    part in precedence.
    """

    major: int
    minor: int
    patch: int
    prerelease: tuple[str | int, ...] = ()
    build: tuple[str, ...] = field(default=(), compare=False)

    def __str__(self) -> str:
        """Format as ``M.m.p`` or ``M.m.p-pre``."""
        core = f'{self.major}.{self.minor}.{self.patch}'
        if self.prerelease:
            return f'{core}-{".".join(str(p) for p in self.prerelease)}'
        return core


def _identifier(part: str) -> str | int:
    return int(part) if part.isdigit() else part


def parse_version(version: str) -> SemVer | None:
    """Parse a strict semver string (an optional leading ``v`` is allowed).

    Returns ``None`` for anything that isn't valid semver.

    >>> parse_version('v1.2.3-rc.1+build.5')
    SemVer(major=1, minor=2, patch=3, prerelease=('rc', 1), build=('build', '5'))
    """
    match = SEMVER_PATTERN.match(version.strip())
    if match is None:
        return None
    major, minor, patch, pre, build = match.groups()
    return SemVer(
        major=int(major),
        minor=int(minor),
        patch=int(patch),
        prerelease=tuple(_identifier(p) for p in pre.split('.')) if pre else (),
        build=tuple(build.split('.')) if build else (),
    )


def is_valid(version: str | None) -> bool:
    """Return whether ``version`` is strict semver."""
    return version is not None and parse_version(version) is not None


def clean(version: str) -> str | None:
    """Normalize a loose version string, or return ``None``.

    Leading ``=`` and ``v`` characters and surrounding whitespace are
    dropped; build metadata is removed.

    >>> clean(' =v1.2.3+build ')
    '1.2.3'
    """
    parsed = parse_version(_CLEAN_PREFIX.sub('', version.strip()))
    return str(parsed) if parsed else None


def _compare_identifiers(a: str | int, b: str | int) -> int:
    a_num = isinstance(a, int)
    b_num = isinstance(b, int)
    if a_num and not b_num:
        return -1
    if b_num and not a_num:
        return 1
    if a == b:
        return 0
    return -1 if a < b else 1  # type: ignore[operator]


def _compare_prerelease(a: tuple[str | int, ...], b: tuple[str | int, ...]) -> int:
    # A release outranks any prerelease of the same core.
    if a and not b:
        return -1
    if b and not a:
        return 1
    for left, right in zip(a, b):
        result = _compare_identifiers(left, right)
        if result:
            return result
    return (len(a) > len(b)) - (len(a) < len(b))


def compare(a: str | SemVer, b: str | SemVer) -> int:
    """Return -1, 0 or 1 by semver precedence.

    Raises:
        ValueError: If either side isn't valid semver.
    """
    left = a if isinstance(a, SemVer) else _require(a)
    right = b if isinstance(b, SemVer) else _require(b)
    core_l = (left.major, left.minor, left.patch)
    core_r = (right.major, right.minor, right.patch)
    if core_l != core_r:
        return -1 if core_l < core_r else 1
    return _compare_prerelease(left.prerelease, right.prerelease)


def rcompare(a: str | SemVer, b: str | SemVer) -> int:
    """Reverse of :func:`compare`, for sorting newest first."""
    return compare(b, a)


def _require(version: str) -> SemVer:
    parsed = parse_version(version)
    if parsed is None:
        raise ValueError(f'Invalid version: {version!r}')
    return parsed


def _bump_prerelease(
    prerelease: list[str | int],
    identifier: str | None,
    identifier_base: str,
) -> list[str | int]:
    base = 1 if identifier_base == '1' else 0

    if not prerelease:
        prerelease = [base]
    else:
        for i in range(len(prerelease) - 1, -1, -1):
            if isinstance(prerelease[i], int):
                prerelease[i] += 1  # type: ignore[operator]
                break
        else:
            prerelease.append(base)

    if identifier:
        if prerelease[0] == identifier and len(prerelease) > 1 and isinstance(prerelease[1], int):
            return prerelease
        return [identifier, base]
    return prerelease


def increment(
    version: str,
    release_type: str,
    identifier: str | None = None,
    identifier_base: str = '0',
) -> str | None:
    """Step ``version`` by ``release_type``.

    ``pre*`` types open a prerelease line named ``identifier``;
    ``prerelease`` bumps the trailing number of an existing one.
    Stepping a prerelease to a stable type finishes it instead of skipping
    past it (``1.1.0-alpha.2`` + minor → ``1.1.0``).

    Args:
        version: Current version.
        release_type: One of :data:`RELEASE_TYPES`.
        identifier: Prerelease channel, e.g. ``"alpha"``.
        identifier_base: ``"0"`` or ``"1"``; the first prerelease number.

    Returns:
        The new version, or ``None`` if ``version`` is invalid or
        ``release_type`` is unknown.

    >>> increment('1.2.3', 'prerelease', 'rc')
    '1.2.4-rc.0'
    >>> increment('1.0.0-rc.1', 'major')
    '1.0.0'
    """
    parsed = parse_version(version)
    if parsed is None or release_type not in RELEASE_TYPES:
        return None

    major, minor, patch = parsed.major, parsed.minor, parsed.patch
    pre: list[str | int] = list(parsed.prerelease)

    if release_type == 'premajor':
        pre, major, minor, patch = [], major + 1, 0, 0
        pre = _bump_prerelease(pre, identifier, identifier_base)
    elif release_type == 'preminor':
        pre, minor, patch = [], minor + 1, 0
        pre = _bump_prerelease(pre, identifier, identifier_base)
    elif release_type == 'prepatch':
        pre, patch = [], patch + 1
        pre = _bump_prerelease(pre, identifier, identifier_base)
    elif release_type == 'prerelease':
        if not pre:
            patch += 1
        pre = _bump_prerelease(pre, identifier, identifier_base)
    elif release_type == 'major':
        if minor != 0 or patch != 0 or not pre:
            major += 1
        minor, patch, pre = 0, 0, []
    elif release_type == 'minor':
        if patch != 0 or not pre:
            minor += 1
        patch, pre = 0, []
    else:
        if not pre:
            patch += 1
        pre = []

    return str(SemVer(major, minor, patch, tuple(pre)))


def prerelease_tier(version: SemVer) -> str:
    """Return the highest non-zero component of ``version``."""
    if version.major > 0:
        return 'major'
    if version.minor > 0:
        return 'minor'
    return 'patch'


def normalize_release_type(prerelease: str | None, release_type: str, version: str) -> str:
    """Turn a stable step into its channel form.

    Without a channel, or for a type that is already a pre-step, the type
    is returned unchanged. When the current version is a prerelease whose
    tier is at least the requested one, the step continues that line
    (``prerelease``); otherwise a new line is opened (``pre<type>``).
    """
    if not prerelease or release_type not in STABLE_TYPES:
        return release_type

    parsed = parse_version(version)
    if parsed is not None and parsed.prerelease:
        tier = prerelease_tier(parsed)
        if _PRIORITY[tier] >= _PRIORITY[release_type]:
            return 'prerelease'
    return f'pre{release_type}'


@dataclass(frozen=True)
class NextRelease:
    """Result of :meth:`VersionGenerator.next`.

    Attributes:
        type: The applied release type, or ``"unknown"``.
        version: The stepped version; unchanged when nothing applies.
    """

    type: str
    version: str


@runtime_checkable
class Recommendation(Protocol):
    """Anything with a release ``type`` (see :class:`~commitkit.advisor.ReleaseRecommendation`)."""

    @property
    def type(self) -> str:
        """The recommended release type."""
        ...


@runtime_checkable
class Advisor(Protocol):
    """Produces a release recommendation."""

    async def advise(
        self,
        *,
        ignore: Callable[[Commit], bool] | None = None,
        ignore_reverted: bool = True,
        pre_major: bool = False,
        strict: bool = False,
    ) -> Recommendation | None:
        """Recommend a release type."""
        ...


class VersionGenerator:
    """Compute the next version from a recommendation and an optional channel.

    Args:
        advisor: Consulted unless ``release_as`` forces the type.
        release_as: Forced release type; skips the advisor entirely.
        prerelease: Channel name (``alpha``, ``rc``...). Stable steps
            become pre-steps on this channel.
    """

    def __init__(
        self,
        advisor: Advisor,
        *,
        release_as: str | None = None,
        prerelease: str | None = None,
    ) -> None:
        """Store the advisor and options."""
        self.advisor = advisor
        self.release_as = release_as
        self.prerelease = prerelease

    async def next(
        self,
        version: str,
        *,
        pre_major: bool | None = None,
        ignore: Callable[[Commit], bool] | None = None,
        ignore_reverted: bool = True,
        strict: bool = False,
    ) -> NextRelease:
        """Return the release that follows ``version``.

        ``pre_major`` defaults to whether the major component of
        ``version`` is 0. ``ignore``, ``ignore_reverted`` and ``strict`` are
        passed to the advisor. An unknown or missing recommendation leaves
        the version untouched with type ``"unknown"``.
        """
        parsed = parse_version(version)
        valid = parsed is not None
        if pre_major is None:
            pre_major = parsed is not None and parsed.major == 0

        if self.release_as:
            recommended: str | None = self.release_as
        else:
            recommendation = await self.advisor.advise(
                ignore=ignore,
                ignore_reverted=ignore_reverted,
                pre_major=pre_major,
                strict=strict,
            )
            recommended = recommendation.type if recommendation else None

        if recommended in RELEASE_TYPES:
            release_type = normalize_release_type(self.prerelease, recommended, version)
        else:
            release_type = recommended or UNKNOWN

        next_version = version
        if release_type in RELEASE_TYPES and valid:
            next_version = increment(version, release_type, self.prerelease, '1') or version

        logger.debug(
            'next_version',
            current=version,
            recommended=recommended,
            type=release_type,
            version=next_version,
        )
        return NextRelease(type=release_type, version=next_version)


__all__ = [
    'RELEASE_TYPES',
    'SEMVER_PATTERN',
    'STABLE_TYPES',
    'UNKNOWN',
    'Advisor',
    'NextRelease',
    'Recommendation',
    'SemVer',
    'VersionGenerator',
    'clean',
    'compare',
    'increment',
    'is_valid',
    'normalize_release_type',
    'parse_version',
    'prerelease_tier',
    'rcompare',
]
