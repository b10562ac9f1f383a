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


"""CLI entry point for commitkit.

Constructs the git backend from ``commitkit.toml`` settings and injects
it into the advisor, version generator and changelog writer.

Subcommands::

    commitkit advise     Recommend major / minor / patch from commits
    commitkit next       Compute the next version
    commitkit changelog  Prepend release notes to CHANGELOG.md
    commitkit parse      Parse one commit message to JSON
    commitkit explain    Explain an error code

Usage::

    # What kind of release do the commits since the last tag call for?
    commitkit advise --strict

    # Next alpha prerelease after the latest tag:
    commitkit next --prerelease alpha

    # Release notes for 1.2.0 on stdout only:
    commitkit changelog --release 1.2.0 --stdout

    # Debug a message:
    git log -1 --format=%H%n%B | commitkit parse
"""

from __future__ import annotations

import argparse
import asyncio
import json
import re
import sys
from collections.abc import Callable
from pathlib import Path

from rich_argparse import RichHelpFormatter

from commitkit import __version__
from commitkit.advisor import ReleaseAdvisor
from commitkit.backends.vcs import GitCLIBackend
from commitkit.changelog import ChangelogWriter
from commitkit.commit_parsing import Commit, CommitParser
from commitkit.config import CONFIG_FILENAME, CommitKitConfig, load_config
from commitkit.errors import CommitKitError, E, explain, render_error
from commitkit.history import current_version, latest_version_tag
from commitkit.logging import configure_logging, get_logger
from commitkit.render import ChangelogRenderer
from commitkit.versioning import RELEASE_TYPES, VersionGenerator

logger = get_logger(__name__)


def _find_repo_root(start: Path | None = None) -> Path:
    """Walk up from ``start`` to the directory holding ``commitkit.toml`` or ``.git``.

    Falls back to ``start`` itself so ``git`` can report the problem.
    """
    cwd = (start or Path.cwd()).resolve()
    for marker in (CONFIG_FILENAME, '.git'):
        for parent in [cwd, *cwd.parents]:
            if (parent / marker).exists():
                return parent
    return cwd


def _load(args: argparse.Namespace) -> tuple[Path, CommitKitConfig, GitCLIBackend]:
    root = _find_repo_root(Path(args.cwd) if args.cwd else None)
    config = load_config(root)
    return root, config, GitCLIBackend(root)


def _ignore_predicate(args: argparse.Namespace) -> Callable[[Commit], bool] | None:
    if not args.ignore:
        return None
    try:
        pattern = re.compile(args.ignore)
    except re.error as exc:
        raise CommitKitError(
            code=E.CONFIG_INVALID_VALUE,
            message=f'--ignore is not a valid regular expression: {exc}',
            hint='Quote the pattern so the shell leaves it alone.',
        ) from exc
    return lambda commit: bool(pattern.search(commit.header or ''))


def _tag_prefix(args: argparse.Namespace, config: CommitKitConfig) -> str | None:
    return args.tag_prefix if args.tag_prefix is not None else config.tag_prefix


async def _cmd_advise(args: argparse.Namespace) -> int:
    """Handle the ``advise`` subcommand."""
    _, config, vcs = _load(args)
    advisor = ReleaseAdvisor(
        vcs,
        parser=CommitParser(config.parse_options()),
        types=config.types,
        tag_prefix=_tag_prefix(args, config),
    )
    recommendation = await advisor.advise(
        ignore=_ignore_predicate(args),
        ignore_reverted=config.ignore_reverted and not args.keep_reverted,
        pre_major=args.pre_major or bool(config.pre_major),
        strict=args.strict or config.strict,
    )

    if args.json:
        data = {'type': recommendation.type, 'reason': recommendation.reason} if recommendation else None
        print(json.dumps(data, indent=2))  # noqa: T201 - CLI output
        return 0
    if recommendation is None:
        print('No release needed.')  # noqa: T201 - CLI output
        return 0
    print(recommendation.type)  # noqa: T201 - CLI output
    print(f'  {recommendation.reason}')  # noqa: T201 - CLI output
    return 0


async def _cmd_next(args: argparse.Namespace) -> int:
    """Handle the ``next`` subcommand."""
    _, config, vcs = _load(args)
    prefix = _tag_prefix(args, config)

    version = args.current or await current_version(vcs, prefix=prefix)
    if version is None:
        raise CommitKitError(
            code=E.VERSION_NOT_FOUND,
            message='No semver tag found and no current version given.',
            hint='Pass the current version, e.g. "commitkit next 0.1.0".',
        )

    advisor = ReleaseAdvisor(
        vcs,
        parser=CommitParser(config.parse_options()),
        types=config.types,
        tag_prefix=prefix,
    )
    generator = VersionGenerator(
        advisor,
        release_as=args.release_as or config.release_as,
        prerelease=args.prerelease or config.prerelease,
    )
    release = await generator.next(
        version,
        pre_major=config.pre_major,
        ignore_reverted=config.ignore_reverted and not args.keep_reverted,
        strict=args.strict or config.strict,
    )

    if args.json:
        data = {'current': version, 'type': release.type, 'version': release.version}
        print(json.dumps(data, indent=2))  # noqa: T201 - CLI output
    else:
        print(release.version)  # noqa: T201 - CLI output
    return 0


async def _cmd_changelog(args: argparse.Namespace) -> int:
    """Handle the ``changelog`` subcommand."""
    root, config, vcs = _load(args)
    prefix = _tag_prefix(args, config)

    since = None if args.all else (args.since or await latest_version_tag(vcs, prefix=prefix))
    version = args.release or await current_version(vcs, prefix=prefix) or '0.0.0'

    context: dict[str, object] = {}
    if args.link_compare and since:
        context.update(link_compare=True, previous_tag=since, current_tag=f'{prefix or "v"}{version}')

    templates_dir = root / config.templates_dir if config.templates_dir else None
    output = None if args.stdout else root / (args.output or config.changelog_file)
    writer = ChangelogWriter(
        vcs,
        parser=CommitParser(config.parse_options()),
        types=config.types,
        renderer=ChangelogRenderer(templates_dir),
        header=config.changelog_header,
        file=output,
        context=context,
        ignore_reverted=config.ignore_reverted and not args.keep_reverted,
    )
    changes = await writer.write(version, since=since)

    if output is None:
        print(changes)  # noqa: T201 - CLI output
    else:
        print(f'  📝 {output}')  # noqa: T201 - CLI output
    return 0


def _cmd_parse(args: argparse.Namespace) -> int:
    """Handle the ``parse`` subcommand."""
    if args.message == '-':
        raw = sys.stdin.read()
    else:
        try:
            raw = Path(args.message).read_text(encoding='utf-8')
        except OSError as exc:
            raise CommitKitError(
                code=E.OUTPUT_READ_FAILED,
                message=f'Failed to read {args.message}: {exc}',
                hint='Pass a readable file, or "-" to read standard input.',
            ) from exc

    root = _find_repo_root(Path(args.cwd) if args.cwd else None)
    parser = CommitParser(load_config(root).parse_options())
    print(json.dumps(parser.parse(raw).to_dict(), indent=2))  # noqa: T201 - CLI output
    return 0


def _cmd_explain(args: argparse.Namespace) -> int:
    """Handle the ``explain`` subcommand."""
    result = explain(args.code)
    if result is None:
        print(f'Unknown error code: {args.code}')  # noqa: T201 - CLI output
        return 1
    print(result)  # noqa: T201 - CLI output
    return 0


def _add_history_options(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        '--tag-prefix',
        metavar='PREFIX',
        default=None,
        help='Only consider tags with this prefix (e.g. "pkg@").',
    )
    parser.add_argument(
        '--json',
        action='store_true',
        help='Print machine-readable JSON.',
    )


def build_parser() -> argparse.ArgumentParser:
    """Build the CLI argument parser.

    Returns:
        Configured :class:`argparse.ArgumentParser`.
    """
    RichHelpFormatter.styles['argparse.groups'] = 'bold yellow'
    parser = argparse.ArgumentParser(
        prog='commitkit',
        description='Conventional commit parsing, release advice and changelogs.',
        formatter_class=RichHelpFormatter,
    )
    parser.add_argument(
        '--version',
        action='version',
        version=f'%(prog)s {__version__}',
    )
    parser.add_argument(
        '--cwd',
        '-C',
        metavar='PATH',
        default=None,
        help='Run as if started in PATH.',
    )
    parser.add_argument('--verbose', '-v', action='store_true', help='Show debug logs.')
    parser.add_argument('--quiet', '-q', action='store_true', help='Only show warnings and errors.')
    parser.add_argument('--json-log', action='store_true', help='Emit logs as JSON lines.')

    subparsers = parser.add_subparsers(dest='command')

    advise_parser = subparsers.add_parser(
        'advise',
        help='Recommend a release type from the commits since the last tag.',
        formatter_class=RichHelpFormatter,
    )
    _add_history_options(advise_parser)
    advise_parser.add_argument(
        '--strict',
        action='store_true',
        help='Print "No release needed." when only hidden types changed.',
    )
    advise_parser.add_argument(
        '--pre-major',
        action='store_true',
        help='Shift the recommendation down one level (0.x releases).',
    )
    advise_parser.add_argument(
        '--keep-reverted',
        action='store_true',
        help='Count commits even if a later commit reverts them.',
    )
    advise_parser.add_argument(
        '--ignore',
        metavar='REGEX',
        default=None,
        help='Skip commits whose header matches this pattern.',
    )

    next_parser = subparsers.add_parser(
        'next',
        help='Compute the next version.',
        formatter_class=RichHelpFormatter,
    )
    next_parser.add_argument(
        'current',
        nargs='?',
        default=None,
        help='Current version (default: highest semver tag).',
    )
    _add_history_options(next_parser)
    next_parser.add_argument(
        '--release-as',
        choices=RELEASE_TYPES,
        default=None,
        help='Force the release type instead of asking the commits.',
    )
    next_parser.add_argument(
        '--prerelease',
        metavar='CHANNEL',
        default=None,
        help='Prerelease channel, e.g. alpha or rc.',
    )
    next_parser.add_argument(
        '--strict',
        action='store_true',
        help='Keep the version when only hidden types changed.',
    )
    next_parser.add_argument(
        '--keep-reverted',
        action='store_true',
        help='Count commits even if a later commit reverts them.',
    )

    changelog_parser = subparsers.add_parser(
        'changelog',
        help='Prepend release notes to the changelog file.',
        formatter_class=RichHelpFormatter,
    )
    changelog_parser.add_argument(
        '--release',
        metavar='VERSION',
        default=None,
        help='Version for the heading (default: highest semver tag, else 0.0.0).',
    )
    changelog_parser.add_argument(
        '--tag-prefix',
        metavar='PREFIX',
        default=None,
        help='Only consider tags with this prefix (e.g. "pkg@").',
    )
    history = changelog_parser.add_mutually_exclusive_group()
    history.add_argument(
        '--since',
        metavar='REV',
        default=None,
        help='Only commits after REV (default: highest semver tag).',
    )
    history.add_argument(
        '--all',
        action='store_true',
        help='Use the whole history.',
    )
    destination = changelog_parser.add_mutually_exclusive_group()
    destination.add_argument(
        '--output',
        '-o',
        metavar='FILE',
        default=None,
        help='Changelog file (default: changelog_file from commitkit.toml).',
    )
    destination.add_argument(
        '--stdout',
        action='store_true',
        help='Print the release notes instead of writing a file.',
    )
    changelog_parser.add_argument(
        '--link-compare',
        action='store_true',
        help='Link the heading to a compare view between tags.',
    )
    changelog_parser.add_argument(
        '--keep-reverted',
        action='store_true',
        help='List commits even if a later commit reverts them.',
    )

    parse_parser = subparsers.add_parser(
        'parse',
        help='Parse a commit message and print it as JSON.',
        formatter_class=RichHelpFormatter,
    )
    parse_parser.add_argument(
        'message',
        nargs='?',
        default='-',
        help='File holding the message, or "-" for stdin (default).',
    )

    explain_parser = subparsers.add_parser(
        'explain',
        help='Explain an error code.',
        formatter_class=RichHelpFormatter,
    )
    explain_parser.add_argument('code', help='Error code, e.g. CK-VCS-COMMAND-FAILED.')

    return parser


def main(argv: list[str] | None = None) -> int:
    """CLI entry point.

    Returns:
        Exit code (0 for success, 1 for errors, 2 for usage errors).
    """
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(verbose=args.verbose, quiet=args.quiet, json_log=args.json_log)

    try:
        command = args.command
        if command == 'advise':
            return asyncio.run(_cmd_advise(args))
        if command == 'next':
            return asyncio.run(_cmd_next(args))
        if command == 'changelog':
            return asyncio.run(_cmd_changelog(args))
        if command == 'parse':
            return _cmd_parse(args)
        if command == 'explain':
            return _cmd_explain(args)

        parser.print_help()  # noqa: T201 - CLI output
        print(  # noqa: T201 - CLI output
            f'\n{parser.prog}: error: please provide a command',
            file=sys.stderr,
        )
        return 2

    except CommitKitError as exc:
        render_error(exc)
        return 1
    except KeyboardInterrupt:
        logger.info('interrupted')
        return 130


def _main() -> None:
    """Wrapper for pyproject.toml [project.scripts] entry point."""
    sys.exit(main())


__all__ = [
    'build_parser',
    'main',
]
