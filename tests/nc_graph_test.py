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


"""Tests for nocyclic.graph module."""

from __future__ import annotations

from nocyclic.graph import DependencyGraph, build_graph, index_by_name
from nocyclic.logging import configure_logging
from nocyclic.metadata import Dependency, Package

configure_logging(quiet=True)


def _id(name: str) -> str:
    return f'path+file:///ws/{name}#{name}@0.1.0'


def _pkg(name: str, deps: list[str] | None = None, *, pkg_id: str | None = None) -> Package:
    """Create a minimal workspace Package for testing."""
    return Package(
        id=pkg_id or _id(name),
        name=name,
        dependencies=[Dependency(name=d) for d in deps or []],
    )


def _graph(packages: list[Package], universe: list[Package] | None = None) -> DependencyGraph:
    return build_graph(packages, index_by_name(universe if universe is not None else packages))


class TestIndexByName:
    """index_by_name maps names to ids over the whole universe."""

    def test_empty(self) -> None:
        """No packages gives an empty index."""
        assert index_by_name([]) == {}

    def test_maps_name_to_id(self) -> None:
        """Every package is reachable by name."""
        index = index_by_name([_pkg('core'), _pkg('cli')])
        assert index == {'core': _id('core'), 'cli': _id('cli')}, f'Unexpected index {index}'

    def test_duplicate_name_first_wins(self) -> None:
        """The first package with a given name is kept."""
        first = _pkg('dup', pkg_id='first')
        second = _pkg('dup', pkg_id='second')
        index = index_by_name([first, second])
        assert index['dup'] == 'first', f'Expected first match, got {index["dup"]}'


class TestBuildGraph:
    """build_graph creates member-to-member edges only."""

    def test_empty(self) -> None:
        """Empty package list produces an empty graph."""
        graph = _graph([])
        assert len(graph) == 0, f'Expected empty graph, got {len(graph)}'
        assert graph.edge_count == 0

    def test_single_package(self) -> None:
        """A package without dependencies has no edges."""
        graph = _graph([_pkg('core')])
        assert list(graph.nodes) == [_id('core')]
        assert graph.edges[_id('core')] == [], f'Expected no edges, got {graph.edges[_id("core")]}'

    def test_forward_edges(self) -> None:
        """Edges point from dependent to dependency."""
        graph = _graph([_pkg('core'), _pkg('cli', ['core'])])
        assert graph.edges[_id('cli')] == [_id('core')], f'Expected cli->core, got {graph.edges[_id("cli")]}'
        assert graph.has_edge(_id('cli'), _id('core'))
        assert not graph.has_edge(_id('core'), _id('cli'))

    def test_external_dependencies_ignored(self) -> None:
        """Names that resolve to no package produce no edge."""
        graph = _graph([_pkg('core', ['serde', 'tokio'])])
        assert graph.edge_count == 0, f'Expected no edges, got {graph.edges}'

    def test_known_non_member_ignored(self) -> None:
        """A package in the universe but not in the workspace gets no edge."""
        outside = _pkg('vendored')
        member = _pkg('core', ['vendored'])
        graph = _graph([member], universe=[member, outside])
        assert _id('vendored') not in graph.nodes
        assert graph.edge_count == 0, f'Expected no edges, got {graph.edges}'

    def test_self_dependency_is_an_edge(self) -> None:
        """A package listing itself gets a reflexive edge."""
        graph = _graph([_pkg('core', ['core'])])
        assert graph.has_edge(_id('core'), _id('core'))

    def test_duplicate_edges_kept(self) -> None:
        """The same dependency declared twice yields two edges."""
        pkg = Package(
            id=_id('cli'),
            name='cli',
            dependencies=[Dependency(name='core'), Dependency(name='core', kind='dev')],
        )
        graph = _graph([_pkg('core'), pkg])
        assert graph.edges[_id('cli')] == [_id('core'), _id('core')]
        assert graph.edge_count == 2

    def test_every_edge_target_is_a_node(self) -> None:
        """Edges never leave the workspace."""
        packages = [_pkg('a', ['b', 'x']), _pkg('b', ['c', 'y']), _pkg('c', ['a', 'z'])]
        graph = _graph(packages)
        for source, targets in graph.edges.items():
            for target in targets:
                assert target in graph.nodes, f'{source} -> {target} leaves the workspace'

    def test_no_dependency_data(self) -> None:
        """Members without dependency data yield an edgeless graph."""
        graph = _graph([_pkg('a'), _pkg('b'), _pkg('c')])
        assert len(graph) == 3
        assert graph.edge_count == 0
