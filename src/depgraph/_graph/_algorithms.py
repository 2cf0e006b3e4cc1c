"""Ordering algorithms over dependency graphs."""

from __future__ import annotations

import logging
from collections import deque
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from collections.abc import Callable, Hashable

    from ._dependency_graph import DependencyGraph

logger = logging.getLogger(__name__)


def topo_sort[T: Hashable](graph: DependencyGraph[T], *, key: Callable[[T], Any] | None = None) -> list[T]:
    """Sort the nodes of a graph topologically (dependencies before dependents).

    Nodes that nothing depends on are peeled off first and prepended to the
    result; a dependency becomes ready once all of its dependents have been
    peeled off.

    Args:
        graph: The graph to sort. It is not modified.
        key: Optional sort key for breaking ties. When given, independent nodes
            come out in ascending key order. Otherwise the order among
            independent nodes follows set iteration order.

    Returns:
        List of nodes in topological order.

    Example:
        >>> from depgraph import DependencyGraph
        >>> graph = DependencyGraph.from_edges([("web", "db"), ("db", "net")])
        >>> topo_sort(graph)
        ['net', 'db', 'web']

    """
    # Working copy of the dependents mapping, consumed as nodes are peeled off
    waiting: dict[T, set[T]] = {node: set(graph.immediate_dependents(node)) for node in graph.nodes}
    todo: set[T] = {node for node, dependents in waiting.items() if not dependents}
    order: deque[T] = deque()

    while todo:
        node = max(todo, key=key) if key is not None else next(iter(todo))
        todo.discard(node)
        order.appendleft(node)
        freed: set[T] = set()
        for dep in graph.immediate_dependencies(node):
            remaining = waiting.setdefault(dep, set())
            remaining.discard(node)
            if not remaining:
                freed.add(dep)
        todo |= freed

    logger.debug("Sorted %d of %d nodes", len(order), len(graph.nodes))
    return list(order)


def topo_sort_key[T: Hashable](graph: DependencyGraph[T]) -> Callable[[T], int]:
    """Build a ``key=`` function ordering nodes by their topological position.

    Nodes that are not in the graph map to a position after every known node.

    Example:
        >>> from depgraph import DependencyGraph
        >>> graph = DependencyGraph.from_edges([("web", "db")])
        >>> sorted(["web", "other", "db"], key=topo_sort_key(graph))
        ['db', 'web', 'other']

    """
    positions = {node: index for index, node in enumerate(topo_sort(graph))}
    missing = len(positions)

    def key(node: T) -> int:
        return positions.get(node, missing)

    return key


def topo_comparator[T: Hashable](graph: DependencyGraph[T]) -> Callable[[T, T], int]:
    """Build a three-way comparison function ordering nodes topologically.

    The sort is computed once. The returned function gives a negative number,
    zero or a positive number like the ``cmp`` functions accepted by
    :func:`functools.cmp_to_key`. Nodes that are not in the graph sort after
    every node that is, and two such nodes compare equal.

    Args:
        graph: The graph defining the order.

    Returns:
        A comparison function over nodes.

    """
    position = topo_sort_key(graph)

    def compare(a: T, b: T) -> int:
        pa, pb = position(a), position(b)
        return (pa > pb) - (pa < pb)

    return compare
