"""Define and validate statistical models as graphs of symbolic nodes."""

__all__ = [
    "ConfigurationError",
    "DependencyGraph",
    "EmptySeedError",
    "EvaluationResult",
    "ExecutableGraph",
    "ExecutionContext",
    "GraphConsistencyError",
    "LoweringError",
    "MissingDensityError",
    "MissingVariableError",
    "Model",
    "ModelConfig",
    "ModelDag",
    "ModelDefinitionError",
    "ModelValidationError",
    "Node",
    "NodeRegistry",
    "Precision",
    "Role",
    "build_dag",
    "data",
    "distribution",
    "model",
    "operation",
    "random_variable",
    "resolve_config",
    "variable",
]

from ._config import ModelConfig, Precision, resolve_config
from ._constructors import data, distribution, operation, random_variable, variable
from ._dag import ModelDag, build_dag
from ._engine import EvaluationResult, ExecutableGraph, ExecutionContext
from ._errors import (
    ConfigurationError,
    EmptySeedError,
    GraphConsistencyError,
    LoweringError,
    MissingDensityError,
    MissingVariableError,
    ModelDefinitionError,
    ModelValidationError,
)
from ._graph import DependencyGraph
from ._model import Model, model
from ._nodes import Node, Role
from ._registry import NodeRegistry
