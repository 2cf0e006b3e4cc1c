"""Exceptions raised by depgraph."""

from collections.abc import Hashable


class CircularDependencyError(Exception):
    """Adding an edge would introduce a cycle into the graph.

    Attributes:
        node: The node that was declared to depend on ``dependency``.
        dependency: The node that ``node`` was declared to depend on.

    """

    def __init__(self, node: Hashable, dependency: Hashable) -> None:
        self.node = node
        self.dependency = dependency
        super().__init__(f"Circular dependency between {node!r} and {dependency!r}")


class GraphFileError(Exception):
    """Error in a graph input file."""
