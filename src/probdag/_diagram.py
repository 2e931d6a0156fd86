"""Labelled directed graphs describing a model, for external rendering."""

from __future__ import annotations

from typing import TYPE_CHECKING

import networkx as nx

from ._nodes import DistributionInfo, OperationInfo, Role

if TYPE_CHECKING:
    from collections.abc import Mapping

    from ._dag import ModelDag
    from ._nodes import Node

PALETTE = {
    "dark": "#996bc7",
    "light": "#c6a7e2",
    "lighter": "#e3d6f0",
    "super_light": "#f8f4fb",
}

NODE_SHAPES: dict[Role, str] = {
    Role.DATA: "square",
    Role.VARIABLE: "circle",
    Role.DISTRIBUTION: "diamond",
    Role.OPERATION: "circle",
}

NODE_EDGE_COLOURS: dict[Role, str] = {
    Role.DATA: PALETTE["lighter"],
    Role.VARIABLE: PALETTE["lighter"],
    Role.DISTRIBUTION: PALETTE["light"],
    Role.OPERATION: "lightgray",
}

NODE_COLOURS: dict[Role, str] = {
    Role.DATA: "white",
    Role.VARIABLE: PALETTE["super_light"],
    Role.DISTRIBUTION: PALETTE["lighter"],
    Role.OPERATION: "lightgray",
}

NODE_SIZES: dict[Role, float] = {
    Role.DATA: 0.5,
    Role.VARIABLE: 0.6,
    Role.DISTRIBUTION: 1.0,
    Role.OPERATION: 0.2,
}


def _node_label(node: Node, names: Mapping[str, str]) -> str:
    label = node.plotting_label()
    name = names.get(node.id)
    return label if name is None else f"{name}\n{label}"


def build_diagram(dag: ModelDag, visible_nodes: Mapping[str, Node]) -> nx.DiGraph:
    """Build a labelled DiGraph of a model graph.

    Node attributes follow Graphviz names (shape, color, fillcolor, width,
    height, label) and are picked by role. Edges into an operation carry the
    operation name, parameter edges carry the parameter name, and the edge
    from a distribution to its target is dashed.

    Args:
        dag: The model graph.
        visible_nodes: Named nodes; their names are prepended to the labels.

    Returns:
        The diagram as a networkx DiGraph.

    """
    names = {node.id: name for name, node in visible_nodes.items() if node.id in dag.nodes}

    diagram = nx.DiGraph(layout="dot", rankdir="LR")
    for node_id, node in dag.nodes.items():
        role = dag.roles[node_id]
        size = NODE_SIZES[role]
        diagram.add_node(
            node_id,
            role=str(role),
            label=_node_label(node, names),
            shape=NODE_SHAPES[role],
            color=NODE_EDGE_COLOURS[role],
            fillcolor=NODE_COLOURS[role],
            fontcolor=PALETTE["dark"],
            width=size,
            height=size * 0.8,
        )

    for src, dst in dag.adjacency():
        info = dag.nodes[dst].info
        label = ""
        style = "solid"
        match info:
            case OperationInfo(operation_name=operation_name):
                label = operation_name.replace("`", "")
            case DistributionInfo(parameters=parameters):
                label = next((param for param, parent in parameters.items() if parent == src), "")
        src_info = dag.nodes[src].info
        if isinstance(src_info, DistributionInfo) and src_info.target == dst:
            style = "dashed"
        diagram.add_edge(src, dst, label=label, style=style, color="Gainsboro", fontcolor="gray")

    return diagram
