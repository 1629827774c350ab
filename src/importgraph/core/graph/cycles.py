"""Strongly connected components and import cycle detection.

Cycles are legal in a dependency graph; whether they are fatal is the
caller's decision. This module gives callers the tools to make it:

- ``strongly_connected_components`` runs Tarjan's algorithm and returns the
  components dependencies-first, which doubles as a compilation order.
- ``find_cycles`` keeps only the components that are actual cycles: more
  than one file, or a single file that imports itself.

Tarjan's algorithm is written with an explicit work stack instead of
recursion so that long import chains cannot hit the interpreter's recursion
limit.
"""

from __future__ import annotations

from collections.abc import Hashable, Iterable, Iterator, Mapping

Graph = Mapping[Hashable, Iterable[Hashable]]


def _successors(graph: Graph, node: Hashable) -> Iterator[Hashable]:
    # Sets iterate in hash order; sort for stable output across runs.
    return iter(sorted(graph.get(node, ()), key=str))


def strongly_connected_components(graph: Graph) -> list[list[Hashable]]:
    """Partition the graph into strongly connected components.

    Components are returned in reverse topological order of the condensed
    graph: every component appears after all the components it depends on.
    Nodes that only appear as dependencies are treated as leaves.

    Args:
        graph: Adjacency mapping (node -> direct dependencies).

    Returns:
        List of components, each a list of nodes sorted by their string form.
    """
    index: dict[Hashable, int] = {}
    lowlink: dict[Hashable, int] = {}
    stack: list[Hashable] = []
    on_stack: set[Hashable] = set()
    components: list[list[Hashable]] = []
    counter = 0

    for root in graph:
        if root in index:
            continue

        index[root] = lowlink[root] = counter
        counter += 1
        stack.append(root)
        on_stack.add(root)
        work: list[tuple[Hashable, Iterator[Hashable]]] = [
            (root, _successors(graph, root))
        ]

        while work:
            node, successors = work[-1]
            descended = False
            for succ in successors:
                if succ not in index:
                    index[succ] = lowlink[succ] = counter
                    counter += 1
                    stack.append(succ)
                    on_stack.add(succ)
                    work.append((succ, _successors(graph, succ)))
                    descended = True
                    break
                if succ in on_stack:
                    lowlink[node] = min(lowlink[node], index[succ])
            if descended:
                continue

            work.pop()
            if work:
                parent = work[-1][0]
                lowlink[parent] = min(lowlink[parent], lowlink[node])

            if lowlink[node] == index[node]:
                component: list[Hashable] = []
                while True:
                    member = stack.pop()
                    on_stack.discard(member)
                    component.append(member)
                    if member == node:
                        break
                components.append(sorted(component, key=str))

    return components


def is_cycle(graph: Graph, component: list[Hashable]) -> bool:
    """Return True if a component is an import cycle."""
    if len(component) > 1:
        return True
    node = component[0]
    return node in set(graph.get(node, ()))


def find_cycles(graph: Graph) -> list[list[Hashable]]:
    """Return every strongly connected component that forms a cycle."""
    return [
        component
        for component in strongly_connected_components(graph)
        if is_cycle(graph, component)
    ]
