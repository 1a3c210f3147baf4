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


"""CLI entry point for nocyclic.

Installed twice: as ``cargo-ensure-no-cyclic-deps`` so that cargo picks
it up as a subcommand, and as ``nocyclic``. Cargo runs external
subcommands with the subcommand name as the first argument, so both
spellings below reach the same check::

    cargo ensure-no-cyclic-deps [--manifest-path PATH]
    cargo-ensure-no-cyclic-deps [--manifest-path PATH]

Subcommands::

    ensure-no-cyclic-deps   Check the workspace for cyclic dependencies
                            (also the default when no subcommand is given)
    explain CODE            Explain an error code

Exit status is 0 when no cycles are found and 1 when cycles are found
or the workspace metadata cannot be loaded.
"""

from __future__ import annotations

import argparse
import sys
from typing import TextIO

from rich_argparse import RichHelpFormatter

from nocyclic import __version__
from nocyclic.config import resolve_config
from nocyclic.cycles import CycleReport, check_cycles
from nocyclic.errors import NoCyclicError, explain, render_error
from nocyclic.logging import configure_logging, get_logger
from nocyclic.metadata import load_metadata

logger = get_logger(__name__)

SUBCOMMAND = 'ensure-no-cyclic-deps'


def _print_cycles(report: CycleReport, *, file: TextIO | None = None) -> None:
    """Print every detected cycle as a numbered closed path."""
    out = file or sys.stderr
    print('Error: Cyclic dependencies detected!\n', file=out)  # noqa: T201 - CLI output
    for i, path in enumerate(report.render(), start=1):
        print(f'Cycle {i}:', file=out)  # noqa: T201 - CLI output
        print(f'  {path}', file=out)  # noqa: T201 - CLI output
        print(file=out)  # noqa: T201 - CLI output


def _cmd_check(args: argparse.Namespace) -> int:
    """Handle the ``ensure-no-cyclic-deps`` subcommand."""
    config = resolve_config(manifest_path=getattr(args, 'manifest_path', None))
    metadata = load_metadata(config)
    report = check_cycles(metadata)

    if report.ok:
        print('No cyclic dependencies found.')  # noqa: T201 - CLI output
        return 0

    _print_cycles(report)
    return report.exit_code


def _cmd_explain(args: argparse.Namespace) -> int:
    """Handle the ``explain`` subcommand."""
    result = explain(args.code)
    if result is None:
        print(f'Unknown error code: {args.code}')  # noqa: T201 - CLI output
        return 1
    print(result)  # noqa: T201 - CLI output
    return 0


def _common_options() -> argparse.ArgumentParser:
    """Options accepted both before and after the subcommand name.

    Defaults are suppressed so a value given on one side is not reset
    by the other; readers use ``getattr`` with a fallback.
    """
    common = argparse.ArgumentParser(add_help=False, argument_default=argparse.SUPPRESS)
    common.add_argument(
        '--manifest-path',
        metavar='PATH',
        help="Path to the workspace Cargo.toml. Defaults to cargo's own lookup from the current directory.",
    )
    common.add_argument(
        '--verbose',
        '-v',
        action='store_true',
        help='Show debug logging.',
    )
    common.add_argument(
        '--quiet',
        '-q',
        action='store_true',
        help='Only log errors.',
    )
    common.add_argument(
        '--json-log',
        action='store_true',
        help='Emit log events as JSON lines on stderr.',
    )
    return common


def build_parser() -> argparse.ArgumentParser:
    """Build the CLI argument parser.

    Returns:
        Configured :class:`argparse.ArgumentParser`.
    """
    RichHelpFormatter.styles['argparse.groups'] = 'bold yellow'
    common = _common_options()
    parser = argparse.ArgumentParser(
        prog='cargo-ensure-no-cyclic-deps',
        description='Detects cyclic dependencies in workspace crates.',
        formatter_class=RichHelpFormatter,
        parents=[common],
    )
    parser.add_argument(
        '--version',
        action='version',
        version=f'%(prog)s {__version__}',
    )

    subparsers = parser.add_subparsers(dest='command')

    subparsers.add_parser(
        SUBCOMMAND,
        help='Check the workspace for cyclic dependencies (default).',
        formatter_class=RichHelpFormatter,
        parents=[common],
    )

    explain_parser = subparsers.add_parser(
        'explain',
        help='Explain an error code.',
        formatter_class=RichHelpFormatter,
    )
    explain_parser.add_argument(
        'code',
        help='Error code to explain (e.g., NC-METADATA-LOAD-FAILED).',
    )

    return parser


def main(argv: list[str] | None = None) -> int:
    """CLI entry point.

    Args:
        argv: Arguments without the program name (defaults to ``sys.argv[1:]``).

    Returns:
        Exit code (0 for success, non-zero for failure).
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    configure_logging(
        verbose=getattr(args, 'verbose', False),
        quiet=getattr(args, 'quiet', False),
        json_log=getattr(args, 'json_log', False),
    )

    try:
        if args.command == 'explain':
            return _cmd_explain(args)
        return _cmd_check(args)

    except NoCyclicError as exc:
        render_error(exc)
        return 1
    except KeyboardInterrupt:
        logger.info('interrupted')
        return 130


def _main() -> None:
    """Wrapper for pyproject.toml [project.scripts] entry point."""
    sys.exit(main())


__all__ = [
    'SUBCOMMAND',
    'build_parser',
    'main',
]
