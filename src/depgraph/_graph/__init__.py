"""Graph module providing the dependency graph abstraction.

This module contains:
- DependencyGraph[T]: A generic, immutable directed acyclic graph
- topo_sort: Ordering of nodes with dependencies first
- topo_comparator / topo_sort_key: Sorting helpers derived from topo_sort
"""

from ._algorithms import topo_comparator, topo_sort, topo_sort_key
from ._dependency_graph import DependencyGraph

__all__ = ["DependencyGraph", "topo_comparator", "topo_sort", "topo_sort_key"]
