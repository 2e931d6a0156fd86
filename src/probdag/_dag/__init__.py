"""Construction and validation of model graphs.

This module turns a set of seed nodes into a validated graph:
- discover: Find every node linked to the seeds
- classify: Look up the role of each node
- partition: Split the nodes into disjoint sub-graphs
- validate: Check each sub-graph has a distribution and a variable
- ModelDag / build_dag: The assembled result
"""

from ._classify import classify
from ._components import partition
from ._dag import ModelDag, build_dag
from ._discovery import discover
from ._validate import validate

__all__ = ["ModelDag", "build_dag", "classify", "discover", "partition", "validate"]
