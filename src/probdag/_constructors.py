"""Functions creating nodes in the current registry."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from ._nodes import DataInfo, DistributionInfo, Node, OperationInfo, Role, VariableInfo
from ._registry import NodeRegistry

if TYPE_CHECKING:
    from collections.abc import Callable


def _resolve_registry(registry: NodeRegistry | None) -> NodeRegistry:
    return registry if registry is not None else NodeRegistry.current()


def data(value: Any, *, name: str | None = None, registry: NodeRegistry | None = None) -> Node:
    """Create a data node holding a constant or observed value."""
    return _resolve_registry(registry).add(Role.DATA, DataInfo(value=value), name=name)


def variable(
    *,
    name: str | None = None,
    shape: tuple[int, ...] = (),
    lower: float | None = None,
    upper: float | None = None,
    registry: NodeRegistry | None = None,
) -> Node:
    """Create a variable node, an unknown quantity of the model.

    Raises:
        ValueError: If `lower` is not below `upper`.

    """
    if lower is not None and upper is not None and lower >= upper:
        msg = f"Variable bounds must satisfy lower < upper, got lower={lower} and upper={upper}."
        raise ValueError(msg)
    info = VariableInfo(shape=tuple(shape), lower=lower, upper=upper)
    return _resolve_registry(registry).add(Role.VARIABLE, info, name=name)


def operation(
    fn: Callable[..., Any],
    *inputs: Any,
    operation_name: str | None = None,
    name: str | None = None,
    registry: NodeRegistry | None = None,
) -> Node:
    """Create an operation node computing ``fn(*inputs)``.

    Inputs that are not nodes are wrapped as data nodes.
    """
    reg = _resolve_registry(registry)
    reg.check_inputs(inputs, name=name)
    parents = [reg.as_node(value) for value in inputs]
    if operation_name is None:
        operation_name = getattr(fn, "__name__", type(fn).__name__)
    info = OperationInfo(operation_name=operation_name, fn=fn)
    return reg.add(Role.OPERATION, info, parents=parents, name=name)


def distribution(
    target: Any,
    family: str,
    *,
    log_density: Callable[..., Any] | None = None,
    name: str | None = None,
    registry: NodeRegistry | None = None,
    **parameters: Any,
) -> Node:
    """Create a distribution node over `target`.

    Args:
        target: The data or variable node scored by the distribution. Other
            values are wrapped as data nodes. None creates a distribution
            without a target.
        family: Name of the distribution family.
        log_density: Called as ``log_density(target_value, **parameters)``.
        name: Optional display name.
        registry: Registry to use instead of the current one.
        **parameters: Parameter values, nodes or constants.

    Returns:
        The distribution node.

    Example:
        >>> with registry:
        ...     y = data([1.2, 0.8])
        ...     distribution(y, "normal", mean=mu, sd=sigma, log_density=normal_lpdf)

    """
    reg = _resolve_registry(registry)
    reg.check_inputs(parameters.values(), name=name, target=target)
    parameter_nodes = {param: reg.as_node(value) for param, value in parameters.items()}
    info = DistributionInfo(
        family=family,
        parameters={param: node.id for param, node in parameter_nodes.items()},
        target=None if target is None else reg.as_node(target).id,
        log_density=log_density,
    )
    return reg.add(Role.DISTRIBUTION, info, parents=parameter_nodes.values(), name=name)


def random_variable(
    family: str,
    *,
    log_density: Callable[..., Any] | None = None,
    name: str | None = None,
    shape: tuple[int, ...] = (),
    lower: float | None = None,
    upper: float | None = None,
    registry: NodeRegistry | None = None,
    **parameters: Any,
) -> Node:
    """Create a variable together with the distribution scoring it.

    Returns:
        The new variable node.

    """
    reg = _resolve_registry(registry)
    # Nothing may be registered until the distribution's inputs are known to be usable
    reg.check_inputs(parameters.values(), name=name)
    target = variable(name=name, shape=shape, lower=lower, upper=upper, registry=reg)
    distribution(target, family, log_density=log_density, registry=reg, **parameters)
    return target
