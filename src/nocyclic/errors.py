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


"""Structured error system for nocyclic.

Every error has a unique ``NC-NAMED-KEY`` code, a human-readable message,
and an optional hint with a suggested fix.

Code categories::

    NC-CONFIG-*       Configuration errors (environment, flags)
    NC-CARGO-*        The cargo executable itself
    NC-MANIFEST-*     The workspace manifest
    NC-METADATA-*     Loading ``cargo metadata`` output
    NC-GRAPH-*        Dependency graph findings

Usage::

    from nocyclic.errors import E, NoCyclicError

    raise NoCyclicError(
        code=E.METADATA_LOAD_FAILED,
        message='cargo metadata exited with status 101',
        hint='Run the command by hand to see the full cargo error.',
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
    """Enumeration of all nocyclic diagnostic codes."""

    # Configuration
    CONFIG_INVALID_VALUE = 'NC-CONFIG-INVALID-VALUE'

    # Metadata retrieval
    CARGO_NOT_FOUND = 'NC-CARGO-NOT-FOUND'
    MANIFEST_NOT_FOUND = 'NC-MANIFEST-NOT-FOUND'
    METADATA_LOAD_FAILED = 'NC-METADATA-LOAD-FAILED'
    METADATA_TIMEOUT = 'NC-METADATA-TIMEOUT'
    METADATA_PARSE_ERROR = 'NC-METADATA-PARSE-ERROR'

    # Dependency graph
    GRAPH_CYCLE_DETECTED = 'NC-GRAPH-CYCLE-DETECTED'


# Convenience alias for shorter imports.
E = ErrorCode


@dataclass(frozen=True)
class ErrorInfo:
    """Metadata for a single error code.

    Attributes:
        code: The ``NC-NAMED-KEY`` error code.
        message: Human-readable description of what went wrong.
        hint: Optional suggestion for how to fix the error.
    """

    code: ErrorCode
    message: str
    hint: str = ''


class NoCyclicError(Exception):
    """Base exception for all nocyclic errors.

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
    E.CONFIG_INVALID_VALUE: ErrorInfo(
        code=E.CONFIG_INVALID_VALUE,
        message='A configuration value from the environment is invalid.',
        hint='NOCYCLIC_TIMEOUT must be a positive whole number of seconds.',
    ),
    E.CARGO_NOT_FOUND: ErrorInfo(
        code=E.CARGO_NOT_FOUND,
        message='The cargo executable could not be started.',
        hint='Install Rust via rustup, or point the CARGO environment variable at cargo.',
    ),
    E.MANIFEST_NOT_FOUND: ErrorInfo(
        code=E.MANIFEST_NOT_FOUND,
        message='The manifest passed via --manifest-path does not exist.',
        hint='Pass the path to the workspace Cargo.toml.',
    ),
    E.METADATA_LOAD_FAILED: ErrorInfo(
        code=E.METADATA_LOAD_FAILED,
        message="'cargo metadata --no-deps' exited with a non-zero status.",
        hint='A malformed or missing Cargo.toml is the usual cause; cargo prints the details.',
    ),
    E.METADATA_TIMEOUT: ErrorInfo(
        code=E.METADATA_TIMEOUT,
        message="'cargo metadata' did not finish in time.",
        hint='Raise NOCYCLIC_TIMEOUT, or check for a stuck cargo lock on the build directory.',
    ),
    E.METADATA_PARSE_ERROR: ErrorInfo(
        code=E.METADATA_PARSE_ERROR,
        message="The output of 'cargo metadata' is not a valid format-version 1 document.",
        hint='Upgrade cargo; nocyclic reads --format-version 1.',
    ),
    E.GRAPH_CYCLE_DETECTED: ErrorInfo(
        code=E.GRAPH_CYCLE_DETECTED,
        message='Circular dependency detected between workspace crates.',
        hint='Break the loop by moving shared code into a crate that both sides depend on.',
    ),
}


def explain(code: str) -> str | None:
    """Return a detailed explanation for an error code.

    Args:
        code: The error code string, e.g. ``"NC-CARGO-NOT-FOUND"``.

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


def render_error(exc: NoCyclicError, *, file: TextIO | None = None) -> None:
    """Render an error in Rust-compiler style.

    Output format::

        error[NC-CARGO-NOT-FOUND]: Failed to run 'cargo': not found.
          |
          = hint: Install Rust via rustup.

    Args:
        exc: The error to render.
        file: Output stream (defaults to ``sys.stderr``).
    """
    out = file or sys.stderr

    if out.isatty():
        console = Console(file=out, highlight=False)
        msg = rich_escape(exc.info.message)
        console.print(
            f'[bold red]error[/bold red][bold red]\\[{exc.code.value}][/bold red][bold]: {msg}[/bold]',
        )
        if exc.hint:
            hint = rich_escape(exc.hint)
            console.print('  [dim]|[/dim]')
            console.print(f'  [dim]=[/dim] [cyan]hint[/cyan]: {hint}')
        console.print()
    else:
        print(f'error[{exc.code.value}]: {exc.info.message}', file=out)  # noqa: T201 - CLI output
        if exc.hint:
            print('  |', file=out)  # noqa: T201 - CLI output
            print(f'  = hint: {exc.hint}', file=out)  # noqa: T201 - CLI output
        print(file=out)  # noqa: T201 - CLI output


__all__ = [
    'E',
    'ERRORS',
    'ErrorCode',
    'ErrorInfo',
    'NoCyclicError',
    'explain',
    'render_error',
]
