"""Execution engine module for probdag.

This module turns a validated model graph into an executable graph and
evaluates it with numpy.

Key types:
- ExecutionContext: Owns defined graphs and evaluates them
- ExecutableGraph: Lowered nodes in topological order plus evaluation plan
- EvaluationResult: Computed values, per-node errors and total log density
- lower: Build an ExecutableGraph from a ModelDag
"""

from ._context import ExecutionContext
from ._executable import EvaluationResult, ExecutableGraph, LoweredNode, Step
from ._lowering import lower

__all__ = [
    "EvaluationResult",
    "ExecutableGraph",
    "ExecutionContext",
    "LoweredNode",
    "Step",
    "lower",
]
