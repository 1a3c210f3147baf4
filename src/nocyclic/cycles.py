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


"""Cycle detection over the workspace dependency graph.

A cycle means crates depend on each other in a loop (A→B→C→A), so no
build or publish order exists for them.

Detection runs two independent checks and concatenates the results:

1. **Strongly connected components** (Tarjan, O(V+E)). Any component
   with more than one member is a cycle.
2. **Self-loops**. A crate that lists itself as a dependency is its own
   trivial component, so step 1 never reports it; each one yields a
   length-1 cycle here.

Rendering closes the loop by repeating the first name::

    [a, b, c]  →  "a -> b -> c -> a"
    [a]        →  "a -> a"

Usage::

    from nocyclic.cycles import check_cycles

    report = check_cycles(metadata)
    for line in report.render():
        print(line)
    sys.exit(report.exit_code)
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping, Sequence
from dataclasses import dataclass, field

from nocyclic.graph import DependencyGraph, build_graph, index_by_name
from nocyclic.logging import get_logger
from nocyclic.metadata import Metadata

logger = get_logger(__name__)

CYCLE_SEPARATOR = ' -> '


def strongly_connected_components(graph: DependencyGraph) -> list[list[str]]:
    """Partition the graph into strongly connected components.

    Iterative form of Tarjan's algorithm, so deep dependency chains do
    not hit the interpreter's recursion limit. Components come out in
    reverse topological order. Within a component, members are listed in
    the order the search reached them starting from the component root,
    which for a simple loop is a walk along its edges.

    Args:
        graph: The dependency graph.

    Returns:
        Every component, singletons included.
    """
    index_of: dict[str, int] = {}
    lowlink: dict[str, int] = {}
    on_stack: set[str] = set()
    stack: list[str] = []
    components: list[list[str]] = []
    counter = 0

    for root in graph.nodes:
        if root in index_of:
            continue

        index_of[root] = lowlink[root] = counter
        counter += 1
        stack.append(root)
        on_stack.add(root)
        work: list[tuple[str, Iterator[str]]] = [(root, iter(graph.edges[root]))]

        while work:
            node, successors = work[-1]
            descended = False
            for succ in successors:
                if succ not in index_of:
                    index_of[succ] = lowlink[succ] = counter
                    counter += 1
                    stack.append(succ)
                    on_stack.add(succ)
                    work.append((succ, iter(graph.edges[succ])))
                    descended = True
                    break
                if succ in on_stack:
                    lowlink[node] = min(lowlink[node], index_of[succ])
            if descended:
                continue

            # All successors of node are done.
            work.pop()
            if work:
                parent = work[-1][0]
                lowlink[parent] = min(lowlink[parent], lowlink[node])

            if lowlink[node] == index_of[node]:
                component: list[str] = []
                while True:
                    member = stack.pop()
                    on_stack.discard(member)
                    component.append(member)
                    if member == node:
                        break
                component.reverse()
                components.append(component)

    return components


def self_loops(graph: DependencyGraph) -> list[list[str]]:
    """Return a length-1 cycle for every node with an edge to itself."""
    return [[node] for node in graph.nodes if graph.has_edge(node, node)]


def detect_cycles(graph: DependencyGraph) -> list[list[str]]:
    """Detect all cycles in the dependency graph.

    Multi-member components come first, then self-loops. Nothing is
    deduplicated: a self-looping crate inside a larger component shows up
    in both. No order across cycles is guaranteed, and the rotation of a
    multi-member cycle is arbitrary; compare cycles by member set.

    Args:
        graph: The dependency graph to check.

    Returns:
        A list of cycles, each a list of package ids. Empty if acyclic.
    """
    cycles = [scc for scc in strongly_connected_components(graph) if len(scc) > 1]
    cycles.extend(self_loops(graph))

    if cycles:
        logger.info('cycles_detected', count=len(cycles))
    else:
        logger.debug('no_cycles_detected', packages=len(graph))
    return cycles


def format_cycle(cycle: Sequence[str], names: Mapping[str, str]) -> str:
    """Render a cycle as a closed path such as ``a -> b -> a``.

    Ids missing from ``names`` are shown as the raw id.

    Args:
        cycle: Package ids forming the cycle.
        names: Package id to display name.

    Returns:
        The rendered path, or an empty string for an empty cycle.
    """
    labels = [names.get(pkg_id, pkg_id) for pkg_id in cycle]
    if not labels:
        return ''
    return CYCLE_SEPARATOR.join([*labels, labels[0]])


@dataclass(frozen=True)
class CycleReport:
    """Outcome of one cycle check.

    Attributes:
        cycles: Detected cycles as lists of package ids.
        names: Package id to display name, used for rendering.
    """

    cycles: list[list[str]] = field(default_factory=list)
    names: dict[str, str] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        """Whether the workspace is free of cycles."""
        return not self.cycles

    @property
    def exit_code(self) -> int:
        """Process exit status: 0 when no cycles were found, 1 otherwise."""
        return 0 if self.ok else 1

    def render(self) -> list[str]:
        """Return one closed-path string per cycle."""
        return [format_cycle(cycle, self.names) for cycle in self.cycles]


def check_cycles(metadata: Metadata) -> CycleReport:
    """Check the workspace described by ``metadata`` for cycles.

    Args:
        metadata: The loaded package universe.

    Returns:
        A :class:`CycleReport`.
    """
    index = index_by_name(metadata.packages)
    graph = build_graph(metadata.workspace_packages(), index)
    return CycleReport(cycles=detect_cycles(graph), names=metadata.names())


__all__ = [
    'CYCLE_SEPARATOR',
    'CycleReport',
    'check_cycles',
    'detect_cycles',
    'format_cycle',
    'self_loops',
    'strongly_connected_components',
]
