"""Execution context: defines and evaluates executable graphs with numpy."""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from typing import TYPE_CHECKING, Any

import numpy as np

from probdag._config import Precision
from probdag._nodes import Role

from ._executable import EvaluationResult, ExecutableGraph, plan_steps

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping, Sequence

    from probdag._nodes import NodeId

    from ._executable import LoweredNode, Step

logger = logging.getLogger(__name__)

DTYPES: dict[Precision, type[np.floating]] = {
    Precision.SINGLE: np.float32,
    Precision.DOUBLE: np.float64,
}


class ExecutionContext:
    """Owns the executable graphs defined for a model build.

    Each model build resets the context it is given before defining its
    graph, so a context holds the graph of at most one build at a time.
    Builds using separate contexts do not interfere with one another; a
    single context shared between threads needs external locking.

    Args:
        supported_precisions: Precisions this context can evaluate in.
            Defaults to all of them.

    """

    def __init__(self, supported_precisions: Iterable[Precision] | None = None) -> None:
        self.supported_precisions = frozenset(Precision if supported_precisions is None else supported_precisions)
        self._graphs: list[ExecutableGraph] = []

    @property
    def defined_graphs(self) -> tuple[ExecutableGraph, ...]:
        """Graphs defined since the last reset."""
        return tuple(self._graphs)

    def reset(self) -> None:
        """Drop every graph defined so far."""
        if self._graphs:
            logger.debug("Resetting execution context (%d graph(s) dropped)", len(self._graphs))
        self._graphs.clear()

    def dtype_for(self, precision: Precision) -> np.dtype:
        """Return the numpy dtype for a precision.

        Raises:
            ValueError: If this context does not support the precision.

        """
        if precision not in self.supported_precisions:
            supported = ", ".join(sorted(self.supported_precisions))
            msg = f"Precision '{precision}' is not supported by this execution context (supported: {supported})"
            raise ValueError(msg)
        return np.dtype(DTYPES[precision])

    def define_graph(
        self,
        nodes: Sequence[LoweredNode],
        *,
        dtype: np.dtype,
        n_cores: int,
        compiled: bool,
    ) -> ExecutableGraph:
        """Define an executable graph from lowered nodes in topological order."""
        lowered = tuple(nodes)
        graph = ExecutableGraph(
            nodes=lowered,
            dtype=dtype,
            n_cores=n_cores,
            compiled=compiled,
            steps=plan_steps(lowered) if compiled else None,
        )
        self._graphs.append(graph)
        logger.debug("Defined graph with %d nodes (dtype=%s, compiled=%s)", len(lowered), dtype, compiled)
        return graph

    def evaluate(self, graph: ExecutableGraph, values: Mapping[NodeId, Any]) -> EvaluationResult:
        """Evaluate a graph for given variable values.

        Args:
            graph: The executable graph.
            values: Values for the graph's variable nodes.

        Returns:
            EvaluationResult with every computed value and the total log
            density. Failures are collected per node instead of raised.

        """
        computed: dict[NodeId, Any] = dict(graph.data_values)
        errors: list[tuple[NodeId, str]] = []

        for node in graph.nodes:
            if node.role != Role.VARIABLE:
                continue
            if node.id not in values:
                errors.append((node.id, f"Missing value for variable node {node.id}"))
                continue
            try:
                computed[node.id] = _check_variable(node, np.asarray(values[node.id], dtype=graph.dtype))
            except (TypeError, ValueError) as e:
                errors.append((node.id, f"Invalid value: {e}"))

        total = graph.dtype.type(0)
        for step in graph.plan():
            try:
                args = [computed[arg] for arg in step.args]
                kwargs = {name: computed[node_id] for name, node_id in step.kwargs}
            except KeyError as e:
                errors.append((step.node_id, f"Missing dependency value: {e}"))
                continue
            try:
                value = _run_step(step, args, kwargs, graph.dtype)
            except (TypeError, ValueError, LookupError, ArithmeticError, AttributeError, RuntimeError) as e:
                errors.append((step.node_id, f"Evaluation error: {e}"))
                continue
            computed[step.node_id] = value
            if step.role == Role.DISTRIBUTION:
                total = total + value
            logger.debug("  %s = %r", step.node_id, value)

        return EvaluationResult(
            values=computed,
            errors=errors,
            log_density=float(total) if not errors else None,
        )

    def evaluate_many(
        self,
        graph: ExecutableGraph,
        batch: Sequence[Mapping[NodeId, Any]],
    ) -> list[EvaluationResult]:
        """Evaluate a graph for several sets of variable values.

        Evaluations run concurrently on up to `graph.n_cores` threads.
        Results are returned in the order of `batch`.
        """
        if graph.n_cores <= 1 or len(batch) <= 1:
            return [self.evaluate(graph, values) for values in batch]
        with ThreadPoolExecutor(max_workers=graph.n_cores) as executor:
            return list(executor.map(lambda values: self.evaluate(graph, values), batch))


def _check_variable(node: LoweredNode, value: np.ndarray) -> np.ndarray:
    if node.shape and value.shape != node.shape:
        msg = f"expected shape {node.shape}, got {value.shape}"
        raise ValueError(msg)
    lower, upper = node.bounds
    if (lower is not None and np.any(value <= lower)) or (upper is not None and np.any(value >= upper)):
        msg = f"value lies outside the bounds ({lower}, {upper})"
        raise ValueError(msg)
    return value


def _run_step(step: Step, args: list[Any], kwargs: dict[str, Any], dtype: np.dtype) -> Any:
    if step.role == Role.DISTRIBUTION:
        if step.fn is None:
            return dtype.type(0)
        return dtype.type(np.sum(step.fn(*args, **kwargs)))
    if step.fn is None:
        msg = f"No compute function for node {step.node_id}"
        raise RuntimeError(msg)
    return np.asarray(step.fn(*args), dtype=dtype)
