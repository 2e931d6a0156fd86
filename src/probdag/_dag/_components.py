"""Partitioning of a node set into disjoint sub-graphs."""

from __future__ import annotations

from typing import TYPE_CHECKING

from probdag._errors import GraphConsistencyError
from probdag._graph import weakly_connected_components

if TYPE_CHECKING:
    from collections.abc import Mapping

    from probdag._graph import DependencyGraph
    from probdag._nodes import Node, NodeId


def partition(
    nodes: Mapping[NodeId, Node],
    graph: DependencyGraph[NodeId],
) -> dict[NodeId, int]:
    """Assign each node to the weakly connected component it belongs to.

    Edge direction is ignored, so a distribution is grouped with both its
    parameters and its target. Components are numbered from 0 in the order
    of their first member in `nodes`.

    Args:
        nodes: The node set to partition.
        graph: Dependency graph containing at least the links between `nodes`.

    Returns:
        Mapping from node id to component number, covering every node.

    Raises:
        GraphConsistencyError: If a node links to a node outside the set.

    """
    for node_id in nodes:
        outside = graph.neighbors(node_id) - nodes.keys()
        if outside:
            msg = f"Node '{node_id}' links to nodes outside the model: {sorted(outside)}"
            raise GraphConsistencyError(msg)

    return weakly_connected_components(nodes, graph.neighbors)
