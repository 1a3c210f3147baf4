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


"""Loads the package universe of a Cargo workspace.

Runs ``cargo metadata --format-version 1 --no-deps`` and turns its JSON
into :class:`Metadata`. ``--no-deps`` is essential: it makes cargo
report every member's *declared* dependencies without running the
resolver, and the resolver is exactly what refuses to load a workspace
that contains a cycle.

Shape of the parts we read::

    {
      "packages": [
        {
          "id": "path+file:///ws/core#core@0.1.0",
          "name": "core",
          "version": "0.1.0",
          "manifest_path": "/ws/core/Cargo.toml",
          "dependencies": [
            {"name": "serde", "kind": null, "rename": null, "optional": false},
            {"name": "utils", "kind": "dev", "rename": null, "optional": false}
          ]
        }
      ],
      "workspace_members": ["path+file:///ws/core#core@0.1.0"],
      "workspace_root": "/ws"
    }
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from nocyclic._run import TimeoutExpired, run_command
from nocyclic.config import CheckConfig
from nocyclic.errors import E, NoCyclicError
from nocyclic.logging import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class Dependency:
    """A dependency declared in a package manifest.

    Attributes:
        name: Name of the depended-on package (not the rename).
        kind: ``None`` for normal dependencies, ``"dev"`` or ``"build"``.
        rename: Local alias from ``package = "..."`` renames, if any.
        optional: Whether the dependency is feature-gated.
    """

    name: str
    kind: str | None = None
    rename: str | None = None
    optional: bool = False


@dataclass(frozen=True)
class Package:
    """A package known to cargo.

    Attributes:
        id: Cargo's opaque package id, unique across the universe.
        name: Display name; unique among workspace members only.
        version: Package version string.
        manifest_path: Path to the package's ``Cargo.toml``.
        dependencies: Declared dependencies in manifest order.
    """

    id: str
    name: str
    version: str = '0.0.0'
    manifest_path: Path | None = None
    dependencies: list[Dependency] = field(default_factory=list)


@dataclass(frozen=True)
class Metadata:
    """The package universe reported by ``cargo metadata``.

    Attributes:
        packages: Every package cargo reported.
        workspace_members: Ids of the packages that belong to the workspace.
        workspace_root: The workspace root directory, when reported.
    """

    packages: list[Package] = field(default_factory=list)
    workspace_members: list[str] = field(default_factory=list)
    workspace_root: Path | None = None

    def workspace_packages(self) -> list[Package]:
        """Return the workspace members, in :attr:`packages` order."""
        members = set(self.workspace_members)
        return [p for p in self.packages if p.id in members]

    def names(self) -> dict[str, str]:
        """Return a mapping of package id to display name."""
        return {p.id: p.name for p in self.packages}


def _parse_error(message: str) -> NoCyclicError:
    return NoCyclicError(
        code=E.METADATA_PARSE_ERROR,
        message=message,
        hint="Run 'cargo metadata --format-version 1 --no-deps' and check its output.",
    )


def _parse_dependency(raw: Any) -> Dependency:  # noqa: ANN401 - raw JSON
    if not isinstance(raw, dict) or not isinstance(raw.get('name'), str):
        raise _parse_error(f'Malformed dependency entry: {raw!r}')
    return Dependency(
        name=raw['name'],
        kind=raw.get('kind'),
        rename=raw.get('rename'),
        optional=bool(raw.get('optional', False)),
    )


def _parse_package(raw: Any) -> Package:  # noqa: ANN401 - raw JSON
    if not isinstance(raw, dict):
        raise _parse_error(f'Malformed package entry: {raw!r}')
    pkg_id = raw.get('id')
    name = raw.get('name')
    if not isinstance(pkg_id, str) or not isinstance(name, str):
        raise _parse_error(f'Package entry without id or name: {raw!r}')
    deps = raw.get('dependencies') or []
    if not isinstance(deps, list):
        raise _parse_error(f"'dependencies' of {name} is not a list")
    manifest = raw.get('manifest_path')
    return Package(
        id=pkg_id,
        name=name,
        version=str(raw.get('version', '0.0.0')),
        manifest_path=Path(manifest) if isinstance(manifest, str) else None,
        dependencies=[_parse_dependency(d) for d in deps],
    )


def parse_metadata(text: str) -> Metadata:
    """Parse the JSON printed by ``cargo metadata --format-version 1``.

    When ``workspace_members`` is absent every reported package is treated
    as a member, which matches what ``--no-deps`` reports.

    Args:
        text: The raw stdout of ``cargo metadata``.

    Returns:
        The parsed :class:`Metadata`.

    Raises:
        NoCyclicError: If the text is not a metadata document.
    """
    try:
        doc = json.loads(text)
    except json.JSONDecodeError as exc:
        raise _parse_error(f'cargo metadata did not print valid JSON: {exc}') from exc

    if not isinstance(doc, dict) or not isinstance(doc.get('packages'), list):
        raise _parse_error("cargo metadata output has no 'packages' list")

    packages = [_parse_package(p) for p in doc['packages']]

    members = doc.get('workspace_members')
    if members is None:
        members = [p.id for p in packages]
    elif not isinstance(members, list) or not all(isinstance(m, str) for m in members):
        raise _parse_error("'workspace_members' is not a list of package ids")

    root = doc.get('workspace_root')
    return Metadata(
        packages=packages,
        workspace_members=list(members),
        workspace_root=Path(root) if isinstance(root, str) else None,
    )


def metadata_command(config: CheckConfig) -> list[str]:
    """Return the ``cargo metadata`` argv for ``config``."""
    cmd = [config.cargo, 'metadata', '--format-version', '1', '--no-deps']
    if config.manifest_path is not None:
        cmd.extend(['--manifest-path', str(config.manifest_path)])
    return cmd


def load_metadata(config: CheckConfig) -> Metadata:
    """Run ``cargo metadata --no-deps`` and parse the result.

    Args:
        config: Resolved run configuration.

    Returns:
        The workspace :class:`Metadata`.

    Raises:
        NoCyclicError: If cargo cannot be started, fails, times out, or
            prints something that is not a metadata document.
    """
    cmd = metadata_command(config)
    try:
        result = run_command(cmd, timeout=config.timeout)
    except FileNotFoundError as exc:
        raise NoCyclicError(
            code=E.CARGO_NOT_FOUND,
            message=f'Failed to run {config.cargo!r}: {exc}',
            hint='Install Rust via rustup, or point the CARGO environment variable at cargo.',
        ) from exc
    except TimeoutExpired as exc:
        raise NoCyclicError(
            code=E.METADATA_TIMEOUT,
            message=f'cargo metadata did not finish within {config.timeout}s',
            hint='Raise NOCYCLIC_TIMEOUT if the workspace is very large.',
        ) from exc

    if not result.ok:
        stderr = result.stderr.strip()
        raise NoCyclicError(
            code=E.METADATA_LOAD_FAILED,
            message=f'Failed to load cargo metadata (exit {result.return_code}): {stderr}',
            hint=f'Run {result.command_str!r} to see the full cargo output.',
        )

    metadata = parse_metadata(result.stdout)
    logger.info(
        'metadata_loaded',
        packages=len(metadata.packages),
        members=len(metadata.workspace_members),
        workspace_root=str(metadata.workspace_root) if metadata.workspace_root else None,
    )
    return metadata


__all__ = [
    'Dependency',
    'Metadata',
    'Package',
    'load_metadata',
    'metadata_command',
    'parse_metadata',
]
