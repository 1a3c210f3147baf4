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


"""Dependency graph of workspace crates.

Builds a directed graph whose nodes are workspace member package ids and
whose edges are the declared dependencies between members. Dependencies on
packages outside the workspace are left out.

Edge direction::

    Edges point from dependent to dependency (who needs what):

    cli ──→ utils ──→ core

    edges[cli]   = [utils]
    edges[utils] = [core]
    edges[core]  = []

Data Flow::

    Metadata.packages       index_by_name()        build_graph()
    ┌──────────────────┐   ┌────────────────┐   ┌────────────────────┐
    │ every package    │──→│ name → id      │──→│ members as nodes,  │
    │ cargo reported   │   │ (first wins)   │   │ member→member edges│
    └──────────────────┘   └────────────────┘   └────────────────────┘

Usage::

    from nocyclic.graph import build_graph, index_by_name

    index = index_by_name(metadata.packages)
    graph = build_graph(metadata.workspace_packages(), index)
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field

from nocyclic.logging import get_logger
from nocyclic.metadata import Package

logger = get_logger(__name__)


@dataclass
class DependencyGraph:
    """A directed graph of workspace package dependencies.

    If ``A`` depends on ``B`` there is an edge ``A → B`` in :attr:`edges`.
    The same ordered pair may appear more than once (a crate listed as
    both a normal and a dev dependency); multiplicity does not change
    which cycles exist.

    Attributes:
        nodes: Mapping from package id to :class:`Package`.
        edges: Forward adjacency list (dependent id → dependency ids).
    """

    nodes: dict[str, Package] = field(default_factory=dict)
    edges: dict[str, list[str]] = field(default_factory=dict)

    def has_edge(self, source: str, target: str) -> bool:
        """Whether ``source`` declares a dependency on ``target``."""
        return target in self.edges.get(source, ())

    @property
    def edge_count(self) -> int:
        """Total number of edges, duplicates included."""
        return sum(len(targets) for targets in self.edges.values())

    def __len__(self) -> int:
        """Return the number of nodes in the graph."""
        return len(self.nodes)


def index_by_name(packages: Iterable[Package]) -> dict[str, str]:
    """Map package names to package ids.

    Names are only unique among workspace members. When the universe holds
    two packages with the same name the first one seen wins, so a
    dependency on that name binds to whichever package cargo listed first.

    Args:
        packages: The full package universe.

    Returns:
        A mapping of package name to package id.
    """
    index: dict[str, str] = {}
    for pkg in packages:
        if pkg.name in index:
            logger.debug(
                'duplicate_package_name',
                name=pkg.name,
                kept=index[pkg.name],
                ignored=pkg.id,
            )
            continue
        index[pkg.name] = pkg.id
    return index


def build_graph(
    workspace_packages: Iterable[Package],
    index: Mapping[str, str],
) -> DependencyGraph:
    """Build the dependency graph of the workspace members.

    An edge ``P → Q`` is added for every dependency of ``P`` whose name
    resolves through ``index`` to a package ``Q`` that is itself a
    workspace member. Other dependencies are ignored.

    Args:
        workspace_packages: The workspace members.
        index: Name to id mapping over the whole package universe, from
            :func:`index_by_name`.

    Returns:
        A :class:`DependencyGraph` over the workspace members.
    """
    graph = DependencyGraph()
    members = list(workspace_packages)

    for pkg in members:
        graph.nodes[pkg.id] = pkg
        graph.edges[pkg.id] = []

    for pkg in members:
        for dep in pkg.dependencies:
            target = index.get(dep.name)
            if target is not None and target in graph.nodes:
                graph.edges[pkg.id].append(target)

    logger.debug(
        'built_dependency_graph',
        packages=len(graph),
        edges=graph.edge_count,
    )
    return graph


__all__ = [
    'DependencyGraph',
    'build_graph',
    'index_by_name',
]
