"""Nodes of model graphs and the metadata attached to each role."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum, auto
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from collections.abc import Callable

type NodeId = str


class Role(StrEnum):
    """The role a node plays in a model graph."""

    DATA = auto()  # Observed or constant values
    VARIABLE = auto()  # Unknown values to be estimated
    DISTRIBUTION = auto()  # Probability density over a target node
    OPERATION = auto()  # Deterministic function of its parents


@dataclass(frozen=True, slots=True)
class DataInfo:
    """Metadata for a data node."""

    value: Any


@dataclass(frozen=True, slots=True)
class VariableInfo:
    """Metadata for a variable node."""

    shape: tuple[int, ...] = ()
    lower: float | None = None
    upper: float | None = None


@dataclass(frozen=True, slots=True)
class OperationInfo:
    """Metadata for an operation node.

    `fn` is called with the values of the node's parents, in order.
    """

    operation_name: str
    fn: Callable[..., Any] | None


@dataclass(frozen=True, slots=True)
class DistributionInfo:
    """Metadata for a distribution node.

    Attributes:
        family: Name of the distribution family (e.g. "normal").
        parameters: Maps parameter names to the ids of the parent nodes
            providing them.
        target: Id of the node whose value this distribution scores.
        log_density: Called as ``log_density(target_value, **parameter_values)``.
            None stands for an improper flat density contributing zero.

    """

    family: str
    parameters: dict[str, NodeId] = field(default_factory=dict)
    target: NodeId | None = None
    log_density: Callable[..., Any] | None = None


type NodeInfo = DataInfo | VariableInfo | OperationInfo | DistributionInfo

_INFO_TYPES: dict[Role, type] = {
    Role.DATA: DataInfo,
    Role.VARIABLE: VariableInfo,
    Role.OPERATION: OperationInfo,
    Role.DISTRIBUTION: DistributionInfo,
}


@dataclass(frozen=True, slots=True)
class Node:
    """A symbolic node in a model graph.

    This is an immutable description of a node. Its links to other nodes are
    held as ids; the reverse (child) links are tracked by the registry that
    created it.

    Attributes:
        id: Unique identifier within the owning registry.
        role: The node's role.
        parents: Ids of the nodes this node is computed from, in order.
        info: Role-specific metadata.
        name: Optional display name.

    """

    id: NodeId
    role: Role
    parents: tuple[NodeId, ...] = ()
    info: NodeInfo = field(default_factory=VariableInfo)
    name: str | None = None

    def __post_init__(self) -> None:
        expected = _INFO_TYPES.get(self.role)
        if expected is not None and not isinstance(self.info, expected):
            msg = f"Node '{self.id}' with role '{self.role}' needs {expected.__name__}, got {type(self.info).__name__}"
            raise TypeError(msg)

    def plotting_label(self) -> str:
        """Return a short label describing what the node is."""
        match self.info:
            case DataInfo():
                return "data"
            case VariableInfo():
                return "variable"
            case OperationInfo(operation_name=operation_name):
                return operation_name
            case DistributionInfo(family=family):
                return family
        return str(self.role)

    def __hash__(self) -> int:
        """Hash based on the node ID."""
        return hash(self.id)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Node):
            return NotImplemented
        return self.id == other.id
