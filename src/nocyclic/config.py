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


"""Runtime configuration for a cycle check.

nocyclic has no config file of its own. Settings come from the command
line and from the environment, and are resolved once into a frozen
:class:`CheckConfig`::

    CARGO               cargo executable (cargo exports this to subcommands)
    NOCYCLIC_TIMEOUT    seconds to wait for ``cargo metadata`` (default 300)

Usage::

    from nocyclic.config import resolve_config

    cfg = resolve_config(manifest_path=Path('rust/Cargo.toml'))
    print(cfg.cargo, cfg.timeout)
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path

from nocyclic._run import DEFAULT_TIMEOUT_SECONDS
from nocyclic.errors import E, NoCyclicError
from nocyclic.logging import get_logger

logger = get_logger(__name__)

CARGO_ENV = 'CARGO'
TIMEOUT_ENV = 'NOCYCLIC_TIMEOUT'


@dataclass(frozen=True)
class CheckConfig:
    """Resolved settings for one run.

    Attributes:
        cargo: The cargo executable to invoke.
        manifest_path: Workspace ``Cargo.toml``, or ``None`` to let cargo
            search upwards from the current directory.
        timeout: Seconds to wait for ``cargo metadata``.
    """

    cargo: str = 'cargo'
    manifest_path: Path | None = None
    timeout: int = DEFAULT_TIMEOUT_SECONDS


def _parse_timeout(raw: str) -> int:
    try:
        timeout = int(raw)
    except ValueError:
        timeout = 0
    if timeout <= 0:
        raise NoCyclicError(
            code=E.CONFIG_INVALID_VALUE,
            message=f'{TIMEOUT_ENV} must be a positive integer, got {raw!r}',
            hint=f'Unset {TIMEOUT_ENV} to use the default of {DEFAULT_TIMEOUT_SECONDS} seconds.',
        )
    return timeout


def resolve_config(
    *,
    manifest_path: Path | str | None = None,
    environ: Mapping[str, str] | None = None,
) -> CheckConfig:
    """Build a :class:`CheckConfig` from CLI values and the environment.

    Args:
        manifest_path: Value of ``--manifest-path``, if given.
        environ: Environment to read (defaults to ``os.environ``).

    Returns:
        A validated :class:`CheckConfig`.

    Raises:
        NoCyclicError: If the manifest does not exist or an environment
            value is invalid.
    """
    env = os.environ if environ is None else environ

    path: Path | None = None
    if manifest_path is not None:
        path = Path(manifest_path)
        if not path.is_file():
            raise NoCyclicError(
                code=E.MANIFEST_NOT_FOUND,
                message=f'Manifest not found: {path}',
                hint='Pass the path to the workspace Cargo.toml.',
            )

    cargo = env.get(CARGO_ENV) or 'cargo'

    raw_timeout = env.get(TIMEOUT_ENV)
    timeout = DEFAULT_TIMEOUT_SECONDS if raw_timeout is None else _parse_timeout(raw_timeout)

    config = CheckConfig(cargo=cargo, manifest_path=path, timeout=timeout)
    logger.debug(
        'config_resolved',
        cargo=config.cargo,
        manifest_path=str(config.manifest_path) if config.manifest_path else None,
        timeout=config.timeout,
    )
    return config


__all__ = [
    'CARGO_ENV',
    'TIMEOUT_ENV',
    'CheckConfig',
    'resolve_config',
]
