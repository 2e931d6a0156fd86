"""Lowering of a validated model graph into an executable graph."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import numpy as np

from probdag._errors import LoweringError
from probdag._nodes import DataInfo, DistributionInfo, OperationInfo, VariableInfo

from ._executable import LoweredNode

if TYPE_CHECKING:
    from probdag._config import ModelConfig
    from probdag._dag import ModelDag
    from probdag._nodes import Node

    from ._context import ExecutionContext
    from ._executable import ExecutableGraph

logger = logging.getLogger(__name__)


def _lower_node(node: Node, dag: ModelDag, dtype: np.dtype) -> LoweredNode:
    role = dag.roles[node.id]
    match node.info:
        case DataInfo(value=value):
            try:
                array = np.asarray(value, dtype=dtype)
            except (TypeError, ValueError) as e:
                msg = f"Data node '{node.id}' cannot be represented as {dtype}: {e}"
                raise LoweringError(msg) from e
            return LoweredNode(id=node.id, role=role, value=array)
        case VariableInfo(shape=shape, lower=lower, upper=upper):
            return LoweredNode(id=node.id, role=role, shape=shape, bounds=(lower, upper))
        case OperationInfo(fn=fn, operation_name=operation_name):
            if fn is None:
                msg = f"Operation node '{node.id}' ({operation_name}) has no compute function"
                raise LoweringError(msg)
            return LoweredNode(id=node.id, role=role, parents=node.parents, fn=fn)
        case DistributionInfo(parameters=parameters, target=target, log_density=log_density):
            return LoweredNode(
                id=node.id,
                role=role,
                parents=node.parents,
                parameters=tuple(parameters.items()),
                target=target,
                log_density=log_density,
            )
    msg = f"Cannot lower node '{node.id}' with metadata {type(node.info).__name__}"
    raise LoweringError(msg)


def lower(dag: ModelDag, config: ModelConfig, context: ExecutionContext) -> ExecutableGraph:
    """Lower a validated ModelDag into an executable graph.

    The context is reset first, so it only holds the graph of this build.
    Lowering the same dag with the same configuration always produces
    graphs with equal structure.

    Args:
        dag: The validated model graph.
        config: Precision, core count and compilation settings.
        context: Execution context to define the graph in.

    Returns:
        The executable graph.

    Raises:
        LoweringError: If the context rejects the precision, the graph has a
            cycle, or a node cannot be represented by the engine.

    """
    context.reset()

    try:
        dtype = context.dtype_for(config.precision)
    except ValueError as e:
        raise LoweringError(str(e)) from e

    try:
        order = dag.graph.topological_order()
    except ValueError as e:
        msg = f"The model graph cannot be executed: {e}"
        raise LoweringError(msg) from e

    lowered = [_lower_node(dag.nodes[node_id], dag, dtype) for node_id in order]

    logger.debug("Lowered %d nodes with precision %s", len(lowered), config.precision)
    return context.define_graph(
        lowered,
        dtype=dtype,
        n_cores=config.n_cores,
        compiled=config.compile,
    )
