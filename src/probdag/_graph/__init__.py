"""Graph module providing dependency graph abstractions.

This module contains:
- DependencyGraph[T]: A generic, immutable directed graph
- topological_sort: Algorithm for ordering nodes by dependencies
- undirected_closure: Reachability ignoring edge direction
- weakly_connected_components: Partition of nodes into disjoint sub-graphs
"""

from ._algorithms import topological_sort, undirected_closure, weakly_connected_components
from ._dependency_graph import DependencyGraph

__all__ = ["DependencyGraph", "topological_sort", "undirected_closure", "weakly_connected_components"]
