"""Exceptions raised while defining a model."""


class ModelDefinitionError(Exception):
    """Base class for errors that stop a model from being defined."""


class EmptySeedError(ModelDefinitionError):
    """Raised when there are no nodes to build a model from."""


class ModelValidationError(ModelDefinitionError):
    """Raised when a connected component of the model graph is ill-formed."""

    single_graph_message = ""
    multi_graph_message = ""

    def __init__(self, n_graphs: int, component: int) -> None:
        self.n_graphs = n_graphs
        self.component = component
        if n_graphs == 1:
            message = self.single_graph_message
        else:
            message = self.multi_graph_message.format(n_graphs=n_graphs)
        super().__init__(message)


class MissingDensityError(ModelValidationError):
    """Raised when a component has no distribution node."""

    # Separate messages so beginners are not confronted with sub-graphs
    single_graph_message = (
        "none of the nodes in the model are associated with a probability density, so a model cannot be defined"
    )
    multi_graph_message = (
        "the model contains {n_graphs} disjoint graphs, one or more of these sub-graphs does not contain "
        "any nodes that are associated with a probability density, so a model cannot be defined"
    )


class MissingVariableError(ModelValidationError):
    """Raised when a component has no variable node."""

    single_graph_message = "none of the nodes in the model are unknown, so a model cannot be defined"
    multi_graph_message = (
        "the model contains {n_graphs} disjoint graphs, one or more of these sub-graphs does not contain "
        "any nodes that are unknown, so a model cannot be defined"
    )


class ConfigurationError(ModelDefinitionError):
    """Raised when the model configuration is invalid."""


class LoweringError(ModelDefinitionError):
    """Raised when the execution engine rejects the graph or its configuration."""


class GraphConsistencyError(RuntimeError):
    """Raised when the graph machinery finds an internally inconsistent state.

    This indicates a bug rather than a problem with the user's model.
    """
