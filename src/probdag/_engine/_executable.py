"""Executable form of a model graph and the results of evaluating it."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

import numpy as np

from probdag._nodes import Role

if TYPE_CHECKING:
    from collections.abc import Callable

    from probdag._nodes import NodeId


@dataclass(frozen=True, slots=True)
class LoweredNode:
    """A node as seen by the execution engine.

    Attributes:
        id: Id of the source node.
        role: The node's role.
        parents: Ids of the nodes whose values are passed to `fn`, in order.
        value: Constant value of a data node, cast to the graph's dtype.
        fn: Function computing an operation node.
        parameters: (name, node id) pairs of a distribution's parameters.
        target: Id of the node a distribution scores.
        log_density: Log-density function of a distribution.
        shape: Expected shape of a variable, empty when unconstrained.
        bounds: (lower, upper) bounds of a variable.

    """

    id: NodeId
    role: Role
    parents: tuple[NodeId, ...] = ()
    value: np.ndarray | None = field(default=None, compare=False)
    fn: Callable[..., Any] | None = field(default=None, compare=False)
    parameters: tuple[tuple[str, NodeId], ...] = ()
    target: NodeId | None = None
    log_density: Callable[..., Any] | None = field(default=None, compare=False)
    shape: tuple[int, ...] = ()
    bounds: tuple[float | None, float | None] = (None, None)


@dataclass(frozen=True, slots=True)
class Step:
    """One resolved unit of work in an evaluation plan."""

    node_id: NodeId
    role: Role
    fn: Callable[..., Any] | None
    args: tuple[NodeId, ...]
    kwargs: tuple[tuple[str, NodeId], ...] = ()


def plan_steps(nodes: tuple[LoweredNode, ...]) -> tuple[Step, ...]:
    """Resolve lowered nodes into the steps that compute operations and densities.

    Data and variable nodes need no work and are skipped. A distribution's
    first argument is its target; a distribution without a target scores
    nothing and is skipped as well.
    """
    steps: list[Step] = []
    for node in nodes:
        match node.role:
            case Role.OPERATION:
                steps.append(Step(node_id=node.id, role=node.role, fn=node.fn, args=node.parents))
            case Role.DISTRIBUTION if node.target is not None:
                steps.append(
                    Step(
                        node_id=node.id,
                        role=node.role,
                        fn=node.log_density,
                        args=(node.target,),
                        kwargs=node.parameters,
                    ),
                )
    return tuple(steps)


@dataclass(frozen=True, slots=True)
class ExecutableGraph:
    """A model graph lowered for the execution engine.

    Attributes:
        nodes: Lowered nodes in topological order.
        dtype: Floating point type values are computed in.
        n_cores: Number of workers used when evaluating batches.
        compiled: Whether `steps` was resolved ahead of time.
        steps: The evaluation plan, or None when it is resolved per call.

    """

    nodes: tuple[LoweredNode, ...]
    dtype: np.dtype
    n_cores: int = 1
    compiled: bool = True
    steps: tuple[Step, ...] | None = field(default=None, compare=False)

    @property
    def data_values(self) -> dict[NodeId, np.ndarray]:
        """Constant values of the data nodes."""
        return {node.id: node.value for node in self.nodes if node.role == Role.DATA and node.value is not None}

    def plan(self) -> tuple[Step, ...]:
        """Return the evaluation plan, resolving it now if it was not compiled."""
        if self.steps is not None:
            return self.steps
        return plan_steps(self.nodes)

    def structure(self) -> tuple[Any, ...]:
        """Return a hashable description of the graph's structure.

        Two graphs lowered from the same nodes with the same configuration
        have equal structures.
        """
        return (
            str(self.dtype),
            self.compiled,
            tuple((node.id, str(node.role), node.parents, node.parameters, node.target) for node in self.nodes),
        )


@dataclass(frozen=True, slots=True)
class EvaluationResult:
    """Result of evaluating an executable graph.

    Attributes:
        values: Mapping from node id to its value. Distribution nodes hold
            their summed log density.
        errors: List of (node_id, error_message) for any failed evaluations.
        log_density: Total log density of the model, None if evaluation failed.

    """

    values: dict[NodeId, Any] = field(default_factory=dict)
    errors: list[tuple[NodeId, str]] = field(default_factory=list)
    log_density: float | None = None

    @property
    def success(self) -> bool:
        """Check if evaluation completed without errors."""
        return len(self.errors) == 0

    def get_value(self, node_id: NodeId) -> Any:
        """Get a computed value by node id.

        Raises:
            KeyError: If no value exists for the node.

        """
        return self.values[node_id]
