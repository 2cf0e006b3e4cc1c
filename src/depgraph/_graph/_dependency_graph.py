"""Persistent dependency graph."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from depgraph._errors import CircularDependencyError

from ._algorithms import topo_sort

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable, Iterator, Mapping
    from typing import Any

logger = logging.getLogger(__name__)


def _with_member[K, V](mapping: Mapping[K, frozenset[V]], key: K, value: V) -> dict[K, frozenset[V]]:
    """Return a copy of ``mapping`` with ``value`` added to the set at ``key``."""
    return {**mapping, key: mapping.get(key, frozenset()) | {value}}


def _without_member[K, V](mapping: Mapping[K, frozenset[V]], key: K, value: V) -> dict[K, frozenset[V]]:
    """Return a copy of ``mapping`` with ``value`` removed from the set at ``key``.

    Unknown keys are left absent rather than created.
    """
    if key not in mapping:
        return dict(mapping)
    return {**mapping, key: mapping[key] - {value}}


def _closure[T](start: Iterable[T], neighbors: Callable[[T], frozenset[T]]) -> frozenset[T]:
    """Collect every node reachable from ``start`` by following ``neighbors``.

    The start nodes themselves are only included when reachable from one of them.
    """
    visited: set[T] = set()
    stack = [n for s in start for n in neighbors(s)]
    while stack:
        current = stack.pop()
        if current not in visited:
            visited.add(current)
            stack.extend(neighbors(current))
    return frozenset(visited)


@dataclass(frozen=True, slots=True)
class DependencyGraph[T]:
    """An immutable directed acyclic graph of dependencies between nodes.

    An edge ``node -> dep`` means "node depends on dep", i.e. ``dep`` has to be
    available before ``node``. Every update method returns a new graph and
    leaves the receiver untouched, so a graph value can be shared freely.

    The graph is generic over the node type T; any hashable value works.

    Attributes:
        _dependencies: Mapping from node to the nodes it directly depends on.
        _dependents: Mapping from node to the nodes that directly depend on it.

    """

    _dependencies: dict[T, frozenset[T]] = field(default_factory=dict)
    _dependents: dict[T, frozenset[T]] = field(default_factory=dict)

    @classmethod
    def from_edges(cls, edges: Iterable[tuple[T, T]]) -> DependencyGraph[T]:
        """Build a graph from ``(node, dep)`` pairs.

        Args:
            edges: Pairs where the first element depends on the second.

        Returns:
            A new DependencyGraph instance.

        Raises:
            CircularDependencyError: If an edge would introduce a cycle.

        Example:
            >>> graph = DependencyGraph.from_edges([("web", "db"), ("db", "net")])
            >>> graph.immediate_dependencies("web")
            frozenset({'db'})

        """
        graph: DependencyGraph[T] = cls()
        for node, dep in edges:
            graph = graph.depend(node, dep)
        return graph

    @classmethod
    def from_mapping(cls, mapping: Mapping[T, Iterable[T]]) -> DependencyGraph[T]:
        """Build a graph from a mapping of node to its dependencies.

        Nodes mapped to an empty collection are kept as nodes without edges.

        Raises:
            CircularDependencyError: If an edge would introduce a cycle.

        """
        graph: DependencyGraph[T] = cls()
        for node, deps in mapping.items():
            if node not in graph._dependencies:
                graph = cls(
                    _dependencies={**graph._dependencies, node: frozenset()},
                    _dependents=graph._dependents,
                )
            for dep in deps:
                graph = graph.depend(node, dep)
        return graph

    # -------------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------------

    @property
    def nodes(self) -> frozenset[T]:
        """All nodes in the graph, including ones left with no edges after removals."""
        return frozenset(self._dependencies.keys()) | frozenset(self._dependents.keys())

    def immediate_dependencies(self, node: T) -> frozenset[T]:
        """Get the nodes that ``node`` directly depends on.

        Args:
            node: The node to query.

        Returns:
            Set of direct dependencies, empty if the node is unknown.

        """
        return self._dependencies.get(node, frozenset())

    def immediate_dependents(self, node: T) -> frozenset[T]:
        """Get the nodes that directly depend on ``node``.

        Args:
            node: The node to query.

        Returns:
            Set of direct dependents, empty if the node is unknown.

        """
        return self._dependents.get(node, frozenset())

    def transitive_dependencies(self, node: T) -> frozenset[T]:
        """Get all nodes that ``node`` depends on, directly or indirectly."""
        return _closure((node,), self.immediate_dependencies)

    def transitive_dependents(self, node: T) -> frozenset[T]:
        """Get all nodes that depend on ``node``, directly or indirectly."""
        return _closure((node,), self.immediate_dependents)

    def transitive_dependencies_set(self, nodes: Iterable[T]) -> frozenset[T]:
        """Get the union of the transitive dependencies of several nodes.

        A start node is part of the result only if another start node depends on it.
        """
        return _closure(nodes, self.immediate_dependencies)

    def transitive_dependents_set(self, nodes: Iterable[T]) -> frozenset[T]:
        """Get the union of the transitive dependents of several nodes."""
        return _closure(nodes, self.immediate_dependents)

    def depends(self, node: T, dep: T) -> bool:
        """Check whether ``node`` depends on ``dep``, directly or indirectly."""
        return dep in self.transitive_dependencies(node)

    def dependent(self, node: T, dep: T) -> bool:
        """Check whether ``dep`` depends on ``node``, directly or indirectly."""
        return dep in self.transitive_dependents(node)

    def edges(self) -> Iterator[tuple[T, T]]:
        """Iterate over ``(node, dep)`` pairs."""
        for node, deps in self._dependencies.items():
            for dep in deps:
                yield node, dep

    def roots(self) -> frozenset[T]:
        """Get nodes that nothing depends on."""
        return frozenset(n for n in self.nodes if not self._dependents.get(n))

    def leaves(self) -> frozenset[T]:
        """Get nodes that depend on nothing."""
        return frozenset(n for n in self.nodes if not self._dependencies.get(n))

    def topological_order(self, key: Callable[[T], Any] | None = None) -> list[T]:
        """Return nodes in topological order (dependencies before dependents).

        Args:
            key: Optional sort key used to break ties between independent nodes.

        """
        return topo_sort(self, key=key)

    def validate(self) -> list[str]:
        """Validate the graph and return a list of error messages.

        Graphs built through ``depend`` are always valid. This is meant for
        graphs constructed directly from raw mappings.

        Checks for:
        - Dependencies that are not mirrored in the dependents mapping
        - Cycles

        Returns:
            List of error messages. Empty list if graph is valid.

        """
        errors: list[str] = []

        for node, dep in self.edges():
            if node not in self._dependents.get(dep, frozenset()):
                errors.append(f"Edge {node!r} -> {dep!r} is missing from the dependents of {dep!r}")

        cyclic = sorted(repr(n) for n in self.nodes if self.depends(n, n))
        if cyclic:
            errors.append(f"Graph contains a cycle through: {', '.join(cyclic)}")

        return errors

    # -------------------------------------------------------------------------
    # Updates
    # -------------------------------------------------------------------------

    def depend(self, node: T, dep: T) -> DependencyGraph[T]:
        """Return a new graph where ``node`` depends on ``dep``.

        Args:
            node: The dependent node.
            dep: The node it depends on.

        Returns:
            A new DependencyGraph containing the edge.

        Raises:
            CircularDependencyError: If ``node == dep`` or ``dep`` already
                depends on ``node``.

        """
        if node == dep or self.depends(dep, node):
            logger.debug("Rejecting edge %r -> %r: would introduce a cycle", node, dep)
            raise CircularDependencyError(node, dep)
        return DependencyGraph(
            _dependencies=_with_member(self._dependencies, node, dep),
            _dependents=_with_member(self._dependents, dep, node),
        )

    def remove_edge(self, node: T, dep: T) -> DependencyGraph[T]:
        """Return a new graph without the edge ``node -> dep``.

        Removing an edge that does not exist is a no-op. Both endpoints stay in
        the graph, possibly with empty edge sets.
        """
        return DependencyGraph(
            _dependencies=_without_member(self._dependencies, node, dep),
            _dependents=_without_member(self._dependents, dep, node),
        )

    def remove_all(self, node: T) -> DependencyGraph[T]:
        """Return a new graph with ``node`` and every reference to it removed."""
        return DependencyGraph(
            _dependencies={k: v - {node} for k, v in self._dependencies.items() if k != node},
            _dependents={k: v - {node} for k, v in self._dependents.items() if k != node},
        )

    def remove_node(self, node: T) -> DependencyGraph[T]:
        """Return a new graph without the dependencies of ``node``.

        Only the outgoing edges of ``node`` are dropped. Other nodes still
        record ``node`` as one of their dependents.
        """
        return DependencyGraph(
            _dependencies={k: v for k, v in self._dependencies.items() if k != node},
            _dependents=self._dependents,
        )

    def __len__(self) -> int:
        """Return the number of nodes in the graph."""
        return len(self.nodes)

    def __contains__(self, node: object) -> bool:
        """Check if a node is in the graph."""
        return node in self._dependencies or node in self._dependents

    def __iter__(self) -> Iterator[T]:
        """Iterate over the nodes of the graph."""
        return iter(self.nodes)
