"""Graph algorithms for arch-test."""

from __future__ import annotations

from collections.abc import Mapping, Set


class _DfsState:
    """Mutable state container for the depth-first cycle search."""

    def __init__(self) -> None:
        self.visited: set[str] = set()
        self.on_stack: set[str] = set()
        self.stack: list[str] = []
        self.cycles: list[list[str]] = []
        self.seen: set[tuple[str, ...]] = set()


def canonical_rotation(cycle: list[str]) -> list[str]:
    """Rotate a cycle so that its lexically smallest member comes first.

    Direction is preserved; only the starting point changes.

    Examples:
        >>> canonical_rotation(["core", "api"])
        ['api', 'core']
        >>> canonical_rotation(["c", "a", "b"])
        ['a', 'b', 'c']
    """
    if not cycle:
        return []
    start = min(range(len(cycle)), key=lambda i: cycle[i])
    return cycle[start:] + cycle[:start]


def _record_cycle(state: _DfsState, target: str) -> None:
    start = state.stack.index(target)
    cycle = canonical_rotation(state.stack[start:])
    key = tuple(cycle)
    if key not in state.seen:
        state.seen.add(key)
        state.cycles.append(cycle)


def _visit(node: str, graph: Mapping[str, Set[str]], state: _DfsState) -> None:
    """Process a node, recording a cycle for every edge back onto the stack."""
    state.visited.add(node)
    state.on_stack.add(node)
    state.stack.append(node)

    for neighbor in sorted(graph.get(node, ())):
        if neighbor in state.on_stack:
            _record_cycle(state, neighbor)
        elif neighbor not in state.visited:
            _visit(neighbor, graph, state)

    state.stack.pop()
    state.on_stack.remove(node)


def find_cycles(graph: Mapping[str, Set[str]]) -> list[list[str]]:
    """Find cycles in a directed graph by depth-first search.

    Every node is used as an entry point (in sorted order) unless an earlier
    search already reached it, so disconnected components are all covered.
    Each back edge found closes one cycle; self-loops yield cycles of length
    one. Diamonds are not cycles.

    Only back-edge cycles are reported: a cycle that re-enters a node whose
    search already finished is not listed, so a graph is reported cyclic
    exactly when it has a cycle, but not every elementary cycle is named.
    For ``{a: {b, c}, b: {a}, c: {b}}`` only ``[a, b]`` is returned.

    Args:
        graph: Mapping of node -> set of successor nodes. Successors that
            are not keys are treated as nodes without outgoing edges.

    Returns:
        List of distinct cycles, each rotated to start at its lexically
        smallest node, sorted.
    """
    state = _DfsState()

    for node in sorted(graph):
        if node not in state.visited:
            _visit(node, graph, state)

    return sorted(state.cycles)


__all__ = [
    "canonical_rotation",
    "find_cycles",
]
