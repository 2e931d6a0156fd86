"""Registry accumulating the nodes created while writing a model."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from scoped_context import ScopedContext

from ._graph import DependencyGraph
from ._nodes import DataInfo, DistributionInfo, Node, Role

if TYPE_CHECKING:
    from collections.abc import Iterable

    from ._nodes import NodeId, NodeInfo

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class NodeRegistry(ScopedContext):
    """A collection of nodes and the links between them.

    The registry owns node identity: it allocates ids, records which nodes
    depend on which, and remembers the display names given to nodes. Using
    it as a context manager makes it the target of the module-level node
    constructors and the default source of nodes for `model()`.

    Example:
        >>> registry = NodeRegistry()
        >>> with registry:
        ...     mu = variable(name="mu")
        ...     distribution(data([1.0, 2.0]), "normal", mean=mu, sd=1.0)

    """

    _nodes: dict[NodeId, Node] = field(default_factory=dict)
    _children: dict[NodeId, list[NodeId]] = field(default_factory=dict)
    _names: dict[str, NodeId] = field(default_factory=dict)
    _scored_by: dict[NodeId, NodeId] = field(default_factory=dict)
    _next_index: int = 1

    def add(
        self,
        role: Role,
        info: NodeInfo,
        parents: Iterable[Node] = (),
        name: str | None = None,
    ) -> Node:
        """Create a node and register it.

        Args:
            role: The node's role.
            info: Role-specific metadata.
            parents: Nodes the new node is computed from. Must belong to this registry.
            name: Optional display name, unique within the registry.

        Returns:
            The new node.

        Raises:
            KeyError: If the name is already taken.
            ValueError: If a parent or distribution target is not usable.

        """
        self._check_name(name)

        parent_ids = tuple(self._own(parent).id for parent in parents)

        target: NodeId | None = None
        if isinstance(info, DistributionInfo) and info.target is not None:
            target = info.target
            self._check_target(target)

        node = Node(
            id=f"node_{self._next_index}",
            role=role,
            parents=parent_ids,
            info=info,
            name=name,
        )
        self._next_index += 1

        self._nodes[node.id] = node
        self._children[node.id] = []
        for parent_id in dict.fromkeys(parent_ids):
            self._children[parent_id].append(node.id)
        if target is not None:
            self._children[node.id].append(target)
            self._scored_by[target] = node.id
        if name is not None:
            self._names[name] = node.id

        logger.debug("Registered %s (%s)", node.id, role)
        return node

    def check_inputs(self, values: Iterable[Any] = (), *, name: str | None = None, target: Any = None) -> None:
        """Check that a node can be built from `values` without registering anything.

        Constructors call this before wrapping constants, so a failed call
        leaves the registry unchanged. Values that are not nodes always pass,
        as does a `target` that is not a node.

        Raises:
            KeyError: If the name is already taken.
            ValueError: If a node does not belong to this registry, or
                `target` cannot be scored by a distribution.

        """
        self._check_name(name)
        for value in values:
            if isinstance(value, Node):
                self._own(value)
        if isinstance(target, Node):
            self._check_target(self._own(target).id)

    def as_node(self, value: Any) -> Node:
        """Return `value` if it is a node of this registry, else wrap it as a data node."""
        if isinstance(value, Node):
            return self._own(value)
        return self.add(Role.DATA, DataInfo(value=value))

    def get(self, node_id: NodeId) -> Node:
        """Get a node by its id.

        Raises:
            KeyError: If no node has the given id.

        """
        return self._nodes[node_id]

    @property
    def nodes(self) -> dict[NodeId, Node]:
        """All registered nodes, in creation order."""
        return dict(self._nodes)

    def parents(self, node_id: NodeId) -> list[NodeId]:
        """Ids of the nodes that `node_id` depends on, including its distribution."""
        parents = list(dict.fromkeys(self._nodes[node_id].parents))
        if node_id in self._scored_by:
            parents.append(self._scored_by[node_id])
        return parents

    def children(self, node_id: NodeId) -> list[NodeId]:
        """Ids of the nodes that depend on `node_id`, including a distribution's target."""
        return list(self._children[node_id])

    def distribution_of(self, node_id: NodeId) -> Node | None:
        """Get the distribution scoring a node, if any."""
        dist_id = self._scored_by.get(node_id)
        return None if dist_id is None else self._nodes[dist_id]

    def graph(self) -> DependencyGraph[NodeId]:
        """Build a DependencyGraph over every registered node.

        Isolated nodes are included. Distributions point at their targets.
        """
        edges = [(node_id, child) for node_id, children in self._children.items() for child in children]
        return DependencyGraph.from_edges(edges, nodes=self._nodes)

    def visible(self) -> dict[str, Node]:
        """Named nodes, keyed by name."""
        return {name: self._nodes[node_id] for name, node_id in self._names.items()}

    def tracked(self) -> list[Node]:
        """Named non-data nodes, in creation order.

        These are the nodes a model tracks when none are given explicitly.
        """
        named = set(self._names.values())
        return [node for node_id, node in self._nodes.items() if node_id in named and node.role != Role.DATA]

    def _check_name(self, name: str | None) -> None:
        if name is not None and name in self._names:
            msg = f"A node named '{name}' already exists in the registry."
            raise KeyError(msg)

    def _own(self, node: Node) -> Node:
        if self._nodes.get(node.id) is not node:
            msg = f"Node '{node.id}' does not belong to this registry."
            raise ValueError(msg)
        return node

    def _check_target(self, target: NodeId) -> None:
        if target not in self._nodes:
            msg = f"Distribution target '{target}' does not belong to this registry."
            raise ValueError(msg)
        target_role = self._nodes[target].role
        if target_role not in (Role.DATA, Role.VARIABLE):
            msg = f"Distributions can only be assigned to data or variable nodes, not to {target_role} node '{target}'."
            raise ValueError(msg)
        if target in self._scored_by:
            msg = f"Node '{target}' already has a distribution ('{self._scored_by[target]}')."
            raise ValueError(msg)

    def __contains__(self, node: object) -> bool:
        """Check if a node belongs to this registry."""
        return isinstance(node, Node) and self._nodes.get(node.id) is node

    def __len__(self) -> int:
        """Return the number of registered nodes."""
        return len(self._nodes)
