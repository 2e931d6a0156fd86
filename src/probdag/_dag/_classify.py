"""Role classification of discovered nodes."""

from __future__ import annotations

from typing import TYPE_CHECKING

from probdag._errors import GraphConsistencyError
from probdag._nodes import Role

if TYPE_CHECKING:
    from collections.abc import Mapping

    from probdag._nodes import Node, NodeId


def classify(nodes: Mapping[NodeId, Node]) -> dict[NodeId, Role]:
    """Look up the role of each node.

    Raises:
        GraphConsistencyError: If a node carries a role outside `Role`.

    """
    roles: dict[NodeId, Role] = {}
    for node_id, node in nodes.items():
        try:
            roles[node_id] = Role(node.role)
        except ValueError:
            msg = f"Node '{node_id}' has unrecognised role {node.role!r}"
            raise GraphConsistencyError(msg) from None
    return roles
