"""The validated graph a model is defined on."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import TYPE_CHECKING

import numpy as np

from probdag._graph import DependencyGraph

from ._classify import classify
from ._components import partition
from ._discovery import discover
from ._validate import validate

if TYPE_CHECKING:
    from collections.abc import Collection, Mapping

    from probdag._nodes import Node, NodeId, Role
    from probdag._registry import NodeRegistry

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class ModelDag:
    """The nodes of a model with their roles and sub-graph membership.

    Attributes:
        nodes: The discovered nodes, keyed by id, in creation order.
        roles: Role of each node.
        components: Component number of each node.
        graph: Dependency graph restricted to `nodes`.

    """

    nodes: Mapping[NodeId, Node] = field(default_factory=dict)
    roles: Mapping[NodeId, Role] = field(default_factory=dict)
    components: Mapping[NodeId, int] = field(default_factory=dict)
    graph: DependencyGraph[NodeId] = field(default_factory=DependencyGraph)

    def __post_init__(self) -> None:
        """Store read-only copies of the mappings."""
        # Use object.__setattr__ since the dataclass is frozen
        object.__setattr__(self, "nodes", MappingProxyType(dict(self.nodes)))
        object.__setattr__(self, "roles", MappingProxyType(dict(self.roles)))
        object.__setattr__(self, "components", MappingProxyType(dict(self.components)))

    @property
    def node_list(self) -> list[NodeId]:
        """Node ids in creation order."""
        return list(self.nodes)

    @property
    def node_types(self) -> list[Role]:
        """Roles, aligned with `node_list`."""
        return [self.roles[node_id] for node_id in self.nodes]

    @property
    def n_components(self) -> int:
        """Number of disjoint sub-graphs."""
        return len(set(self.components.values()))

    def subgraph_membership(self) -> list[int]:
        """Component numbers, aligned with `node_list`."""
        return [self.components[node_id] for node_id in self.nodes]

    def component_members(self, component: int) -> list[NodeId]:
        """Ids of the nodes in a component."""
        return [node_id for node_id, member_of in self.components.items() if member_of == component]

    def validate(self) -> None:
        """Check every component has a distribution and a variable.

        Raises:
            MissingDensityError: If a component has no distribution node.
            MissingVariableError: If a component has no variable node.

        """
        validate(self.roles, self.components)

    def adjacency(self) -> list[tuple[NodeId, NodeId]]:
        """Directed (parent, child) edges between the nodes, without self-loops."""
        return [(src, dst) for src, dst in self.graph.edges() if src != dst]

    def adjacency_matrix(self) -> np.ndarray:
        """0/1 matrix with a 1 at [i, j] when node i is a parent of node j.

        Rows and columns follow `node_list`; the diagonal is always zero.
        """
        index = {node_id: i for i, node_id in enumerate(self.nodes)}
        matrix = np.zeros((len(index), len(index)), dtype=np.int8)
        for src, dst in self.adjacency():
            matrix[index[src], index[dst]] = 1
        return matrix


def build_dag(seeds: Collection[Node], registry: NodeRegistry) -> ModelDag:
    """Discover, classify and partition the nodes linked to the seeds.

    The result is not validated; call `ModelDag.validate()` for that.

    Args:
        seeds: Nodes the model is built around.
        registry: Registry the seeds belong to.

    Returns:
        The ModelDag over every node linked to the seeds.

    Raises:
        EmptySeedError: If there are no seeds.
        ValueError: If a seed does not belong to `registry`.

    """
    for seed in seeds:
        if seed not in registry:
            msg = f"Node '{seed.id}' does not belong to the model's registry."
            raise ValueError(msg)

    full_graph = registry.graph()
    nodes = discover(seeds, full_graph, registry.nodes)
    graph = full_graph.subgraph(nodes)
    roles = classify(nodes)
    components = partition(nodes, full_graph)

    logger.debug(
        "Built graph with %d nodes in %d component(s)",
        len(nodes),
        len(set(components.values())),
    )
    return ModelDag(nodes=nodes, roles=roles, components=components, graph=graph)
