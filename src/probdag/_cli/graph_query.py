"""Graph query functions for CLI commands.

This module provides pure functions for querying a model graph.
These are the functional core - no I/O, no Rich rendering.
"""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass
from typing import TYPE_CHECKING

from probdag._nodes import Role

if TYPE_CHECKING:
    from probdag._dag import ModelDag
    from probdag._nodes import NodeId


@dataclass(frozen=True, slots=True)
class ComponentSummary:
    """Summary of one disjoint sub-graph."""

    component: int
    data_count: int
    variable_count: int
    distribution_count: int
    operation_count: int

    @property
    def node_count(self) -> int:
        """Total number of nodes in the sub-graph."""
        return self.data_count + self.variable_count + self.distribution_count + self.operation_count


@dataclass(frozen=True, slots=True)
class NodeInfo:
    """Basic information about a node for listing."""

    id: NodeId
    name: str | None
    role: Role
    component: int
    parent_count: int


def get_component_summaries(dag: ModelDag) -> list[ComponentSummary]:
    """Count the nodes of each role in every sub-graph.

    Args:
        dag: The model graph to analyze.

    Returns:
        List of ComponentSummary, one per sub-graph, in component order.

    """
    counts: dict[int, Counter[Role]] = {}
    for node_id, component in dag.components.items():
        counts.setdefault(component, Counter())[dag.roles[node_id]] += 1

    return [
        ComponentSummary(
            component=component,
            data_count=role_counts[Role.DATA],
            variable_count=role_counts[Role.VARIABLE],
            distribution_count=role_counts[Role.DISTRIBUTION],
            operation_count=role_counts[Role.OPERATION],
        )
        for component, role_counts in sorted(counts.items())
    ]


def list_nodes(dag: ModelDag, *, role: Role | None = None) -> list[NodeInfo]:
    """List the nodes of a model graph.

    Args:
        dag: The model graph.
        role: Only list nodes with this role.

    Returns:
        List of NodeInfo in creation order.

    """
    return [
        NodeInfo(
            id=node_id,
            name=node.name,
            role=dag.roles[node_id],
            component=dag.components[node_id],
            parent_count=len(dag.graph.predecessors(node_id)),
        )
        for node_id, node in dag.nodes.items()
        if role is None or dag.roles[node_id] == role
    ]
