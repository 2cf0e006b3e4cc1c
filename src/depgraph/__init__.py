"""Persistent dependency graphs with topological ordering."""

__all__ = [
    "CircularDependencyError",
    "DependencyGraph",
    "GraphFile",
    "GraphFileError",
    "load_graph_from_toml",
    "topo_comparator",
    "topo_sort",
    "topo_sort_key",
    "toml_to_graph",
]

from ._errors import CircularDependencyError, GraphFileError
from ._graph import DependencyGraph, topo_comparator, topo_sort, topo_sort_key
from ._io import GraphFile, load_graph_from_toml, toml_to_graph
