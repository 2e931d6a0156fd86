"""Discovery of the nodes connected to a set of seed nodes."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from probdag._errors import EmptySeedError, GraphConsistencyError
from probdag._graph import undirected_closure

if TYPE_CHECKING:
    from collections.abc import Collection, Mapping

    from probdag._graph import DependencyGraph
    from probdag._nodes import Node, NodeId

logger = logging.getLogger(__name__)


def discover(
    seeds: Collection[Node],
    graph: DependencyGraph[NodeId],
    nodes: Mapping[NodeId, Node],
) -> dict[NodeId, Node]:
    """Find every node linked to the seeds, directly or transitively.

    Links are followed in both directions, so a seed picks up the nodes it
    depends on as well as the nodes that depend on it.

    Args:
        seeds: The nodes to start from.
        graph: Dependency graph over all known nodes.
        nodes: All known nodes, keyed by id.

    Returns:
        The discovered nodes keyed by id, in the order of `nodes`.

    Raises:
        EmptySeedError: If there are no seeds.
        GraphConsistencyError: If the graph links to an unknown node.

    """
    if not seeds:
        msg = "could not find any non-data nodes"
        raise EmptySeedError(msg)

    reachable = set(undirected_closure((seed.id for seed in seeds), graph.neighbors))

    unknown = reachable - nodes.keys()
    if unknown:
        msg = f"Dependency graph refers to unknown nodes: {sorted(unknown)}"
        raise GraphConsistencyError(msg)

    logger.debug("Discovered %d nodes from %d seeds", len(reachable), len(seeds))
    return {node_id: node for node_id, node in nodes.items() if node_id in reachable}
