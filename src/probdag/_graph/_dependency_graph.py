"""Generic dependency graph abstraction."""

from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from ._algorithms import topological_sort

if TYPE_CHECKING:
    from collections.abc import Iterable


@dataclass(frozen=True, slots=True)
class DependencyGraph[T]:
    """A directed graph representing dependencies between nodes.

    This is a pure, immutable data structure with query methods.
    It is generic over the node type T. Node insertion order is preserved,
    which keeps every query that returns an ordered result deterministic.

    The graph represents "depends on" relationships:
    - predecessors[b] = {a} means "b depends on a"
    - successors[a] = {b} means "a is depended on by b"

    Attributes:
        _predecessors: Mapping from node to its direct dependencies.
        _successors: Mapping from node to nodes that depend on it.

    """

    _predecessors: dict[T, frozenset[T]] = field(default_factory=dict)
    _successors: dict[T, frozenset[T]] = field(default_factory=dict)

    @classmethod
    def from_edges(cls, edges: Iterable[tuple[T, T]], nodes: Iterable[T] = ()) -> DependencyGraph[T]:
        """Build a graph from (source, target) edges.

        An edge (a, b) means "b depends on a" (a -> b in the DAG).

        Args:
            edges: (source, target) tuples.
            nodes: Nodes to include even if no edge touches them. They are
                added first, so they also fix the node order.

        Returns:
            A new DependencyGraph instance.

        Example:
            >>> # b depends on a, c depends on b
            >>> graph = DependencyGraph.from_edges([("a", "b"), ("b", "c")])
            >>> graph.predecessors("b")
            frozenset({'a'})

        """
        predecessors: defaultdict[T, set[T]] = defaultdict(set)
        successors: defaultdict[T, set[T]] = defaultdict(set)

        for node in nodes:
            predecessors.setdefault(node, set())
            successors.setdefault(node, set())

        for src, dst in edges:
            # Ensure both nodes exist in the graph
            predecessors.setdefault(src, set())
            successors.setdefault(dst, set())
            predecessors[dst].add(src)
            successors[src].add(dst)

        return cls(
            _predecessors={k: frozenset(v) for k, v in predecessors.items()},
            _successors={k: frozenset(successors[k]) for k in predecessors},
        )

    @property
    def nodes(self) -> frozenset[T]:
        """All nodes in the graph."""
        return frozenset(self._predecessors.keys()) | frozenset(self._successors.keys())

    def ordered_nodes(self) -> list[T]:
        """All nodes in the graph, in insertion order."""
        return list(self._predecessors)

    def predecessors(self, node: T) -> frozenset[T]:
        """Get direct dependencies of a node (nodes it depends on).

        Args:
            node: The node to query.

        Returns:
            Set of nodes that this node directly depends on.

        """
        return self._predecessors.get(node, frozenset())

    def successors(self, node: T) -> frozenset[T]:
        """Get direct dependents of a node (nodes that depend on it).

        Args:
            node: The node to query.

        Returns:
            Set of nodes that directly depend on this node.

        """
        return self._successors.get(node, frozenset())

    def neighbors(self, node: T) -> frozenset[T]:
        """Get nodes linked to a node in either direction."""
        return self.predecessors(node) | self.successors(node)

    def edges(self) -> list[tuple[T, T]]:
        """Return all (source, target) edges, ordered by source then target in node order."""
        position = {node: i for i, node in enumerate(self._predecessors)}
        return [
            (src, dst)
            for src in self._predecessors
            for dst in sorted(self._successors.get(src, frozenset()), key=position.__getitem__)
        ]

    def topological_order(self) -> list[T]:
        """Return nodes in topological order (dependencies before dependents).

        Returns:
            List of nodes where each node appears before all nodes that depend on it.

        Raises:
            ValueError: If the graph contains a cycle.

        """
        # Successor sets are unordered; sort them into node order for a stable result
        position = {node: i for i, node in enumerate(self._predecessors)}
        return topological_sort(
            {
                node: sorted(self._successors.get(node, frozenset()), key=position.__getitem__)
                for node in self._predecessors
            },
        )

    def has_cycle(self) -> bool:
        """Check if the graph contains a cycle.

        Returns:
            True if the graph has a cycle, False otherwise.

        """
        try:
            self.topological_order()
        except ValueError:
            return True
        return False

    def subgraph(self, nodes: Iterable[T]) -> DependencyGraph[T]:
        """Create a subgraph containing only the specified nodes.

        Edges are kept only if both endpoints are in the node set.

        Args:
            nodes: Nodes to include in the subgraph, in the order to keep.

        Returns:
            A new DependencyGraph containing only the specified nodes.

        """
        ordered = list(nodes)
        keep = frozenset(ordered)
        return DependencyGraph(
            _predecessors={n: self._predecessors.get(n, frozenset()) & keep for n in ordered},
            _successors={n: self._successors.get(n, frozenset()) & keep for n in ordered},
        )

    def __len__(self) -> int:
        """Return the number of nodes in the graph."""
        return len(self.nodes)

    def __contains__(self, node: T) -> bool:
        """Check if a node is in the graph."""
        return node in self._predecessors or node in self._successors
