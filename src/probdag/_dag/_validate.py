"""Well-formedness checks for model graphs."""

from __future__ import annotations

import logging
from collections import defaultdict
from typing import TYPE_CHECKING

from probdag._errors import MissingDensityError, MissingVariableError
from probdag._nodes import Role

if TYPE_CHECKING:
    from collections.abc import Mapping

    from probdag._nodes import NodeId

logger = logging.getLogger(__name__)


def validate(roles: Mapping[NodeId, Role], components: Mapping[NodeId, int]) -> None:
    """Check that every component can form part of a model.

    Each component needs at least one distribution and at least one
    variable. Components are checked in ascending order and the first
    failure is raised.

    Args:
        roles: Role of each node.
        components: Component number of each node.

    Raises:
        MissingDensityError: If a component has no distribution node.
        MissingVariableError: If a component has no variable node.

    """
    component_roles: defaultdict[int, set[Role]] = defaultdict(set)
    for node_id, component in components.items():
        component_roles[component].add(roles[node_id])

    n_graphs = len(component_roles)
    for component in sorted(component_roles):
        present = component_roles[component]
        if Role.DISTRIBUTION not in present:
            raise MissingDensityError(n_graphs, component)
        if Role.VARIABLE not in present:
            raise MissingVariableError(n_graphs, component)

    logger.debug("Validated %d component(s)", n_graphs)
