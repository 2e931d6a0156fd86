"""Model objects and the entry point that defines them."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import TYPE_CHECKING, Any

from scoped_context import NoContextError

from ._config import Precision, resolve_config
from ._dag import ModelDag, build_dag
from ._engine import ExecutionContext, lower
from ._errors import EmptySeedError
from ._registry import NodeRegistry

if TYPE_CHECKING:
    from collections.abc import Mapping, Sequence

    import networkx as nx
    import numpy as np

    from ._config import ModelConfig
    from ._engine import EvaluationResult, ExecutableGraph
    from ._nodes import Node, NodeId, Role

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class Model:
    """A validated statistical model, ready for evaluation.

    Attributes:
        dag: The model graph with roles and sub-graph membership.
        target_nodes: The nodes the model was asked to track.
        visible_nodes: Named nodes of the registry, used for labelling.
        config: The resolved configuration.
        context: The execution context holding the executable graph.
        executable: The lowered graph.

    """

    dag: ModelDag
    target_nodes: tuple[Node, ...]
    visible_nodes: Mapping[str, Node] = field(default_factory=dict)
    config: ModelConfig | None = None
    context: ExecutionContext = field(default_factory=ExecutionContext)
    executable: ExecutableGraph | None = None

    def __post_init__(self) -> None:
        """Store read-only copies of the tracked and visible nodes."""
        # Use object.__setattr__ since the dataclass is frozen
        object.__setattr__(self, "target_nodes", tuple(self.target_nodes))
        object.__setattr__(self, "visible_nodes", MappingProxyType(dict(self.visible_nodes)))

    @property
    def node_list(self) -> list[NodeId]:
        """Ids of the model's nodes, in creation order."""
        return self.dag.node_list

    @property
    def node_types(self) -> list[Role]:
        """Roles, aligned with `node_list`."""
        return self.dag.node_types

    @property
    def components(self) -> dict[NodeId, int]:
        """Sub-graph number of each node."""
        return dict(self.dag.components)

    def adjacency(self) -> list[tuple[NodeId, NodeId]]:
        """Directed (parent, child) edges between the model's nodes, without self-loops."""
        return self.dag.adjacency()

    def adjacency_matrix(self) -> np.ndarray:
        """0/1 adjacency matrix over `node_list`."""
        return self.dag.adjacency_matrix()

    def evaluate(self, values: Mapping[NodeId | Node, Any]) -> EvaluationResult:
        """Evaluate the model for given variable values.

        Args:
            values: Values for the model's variables, keyed by node or node id.

        Returns:
            EvaluationResult with every node value and the total log density.

        """
        if self.executable is None:
            msg = "Model has not been lowered to an executable graph"
            raise RuntimeError(msg)
        return self.context.evaluate(self.executable, _by_id(values))

    def evaluate_many(self, batch: Sequence[Mapping[NodeId | Node, Any]]) -> list[EvaluationResult]:
        """Evaluate the model for several sets of variable values, using `config.n_cores` threads."""
        if self.executable is None:
            msg = "Model has not been lowered to an executable graph"
            raise RuntimeError(msg)
        return self.context.evaluate_many(self.executable, [_by_id(values) for values in batch])

    def log_density(self, values: Mapping[NodeId | Node, Any]) -> float:
        """Total log density of the model for given variable values.

        Raises:
            ValueError: If evaluation failed for any node.

        """
        result = self.evaluate(values)
        if result.log_density is None:
            details = "; ".join(f"{node_id}: {message}" for node_id, message in result.errors)
            msg = f"Model evaluation failed: {details}"
            raise ValueError(msg)
        return result.log_density

    def diagram(self) -> nx.DiGraph:
        """Build a labelled directed graph of the model for rendering.

        Returns:
            A networkx DiGraph whose node and edge attributes describe shapes,
            colours, labels and edge styles (Graphviz attribute names).

        """
        from ._diagram import build_diagram  # noqa: PLC0415

        return build_diagram(self.dag, self.visible_nodes)

    def __str__(self) -> str:
        return "probdag model"

    def __repr__(self) -> str:
        return (
            f"<probdag model: {len(self.dag.nodes)} nodes, {self.dag.n_components} graph(s), "
            f"{len(self.target_nodes)} tracked>"
        )


def _by_id(values: Mapping[Any, Any]) -> dict[NodeId, Any]:
    return {getattr(key, "id", key): value for key, value in values.items()}


def model(
    *seeds: Node,
    precision: str | Precision = Precision.SINGLE,
    n_cores: int | None = None,
    compile: bool = True,  # noqa: A002
    registry: NodeRegistry | None = None,
    context: ExecutionContext | None = None,
) -> Model:
    """Define a model from the nodes it should track.

    The model contains every node the seeds depend on or that depends on
    them. When no seeds are given, all named non-data nodes of the registry
    are tracked.

    Args:
        *seeds: Nodes to track.
        precision: "single" or "double" floating point precision.
        n_cores: Cores to use for evaluation. Defaults to, and cannot exceed,
            the number of detected cores.
        compile: Whether to prepare the evaluation plan ahead of time.
        registry: Registry holding the nodes. Defaults to the current one.
        context: Execution context to define the graph in. Defaults to a
            new context owned by the model.

    Returns:
        The validated, lowered Model.

    Raises:
        ConfigurationError: If the configuration is invalid.
        EmptySeedError: If there are no nodes to track.
        MissingDensityError: If a sub-graph has no distribution.
        MissingVariableError: If a sub-graph has no variable.
        LoweringError: If the execution context rejects the graph.

    Example:
        >>> registry = NodeRegistry()
        >>> with registry:
        ...     mu = variable(name="mu")
        ...     sigma = random_variable("lognormal", name="sigma", meanlog=1.0, sdlog=0.1)
        ...     distribution(data([0.1, -0.4]), "normal", mean=mu, sd=sigma)
        ...     m = model(mu, sigma)

    """
    config = resolve_config(precision, n_cores, compile=compile)

    if registry is None:
        try:
            registry = NodeRegistry.current()
        except NoContextError:
            if seeds:
                msg = "No registry is active; pass `registry=` or call model() inside `with registry:`"
                raise ValueError(msg) from None
            msg = "could not find any non-data nodes: no registry is active and none was given"
            raise EmptySeedError(msg) from None

    targets = tuple(seeds) if seeds else tuple(registry.tracked())
    if not targets:
        msg = "could not find any non-data nodes"
        raise EmptySeedError(msg)

    dag = build_dag(targets, registry)
    dag.validate()

    if context is None:
        context = ExecutionContext()
    executable = lower(dag, config, context)

    logger.debug("Defined model with %d nodes tracking %d", len(dag.nodes), len(targets))
    return Model(
        dag=dag,
        target_nodes=targets,
        visible_nodes=registry.visible(),
        config=config,
        context=context,
        executable=executable,
    )
