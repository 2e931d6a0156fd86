"""Graph algorithms for dependency graph operations."""

from collections import defaultdict, deque
from collections.abc import Callable, Collection, Hashable, Iterable, Mapping


def topological_sort[T: Hashable](successors: Mapping[T, Collection[T]]) -> list[T]:
    """Sort a graph topologically (dependencies before dependents).

    Given a graph represented as a mapping from nodes to their successors
    (nodes that depend on them), return nodes in an order where each node
    appears before all nodes that depend on it. Ties are broken by the
    iteration order of `successors`, so the result is deterministic.

    Args:
        successors: Mapping from node to collection of nodes that depend on it.
            An edge (a -> b) means "b depends on a".

    Returns:
        List of nodes in topological order.

    Raises:
        ValueError: If the graph contains a cycle.

    Example:
        >>> # a -> b -> c means c depends on b, b depends on a
        >>> topological_sort({"a": ["b"], "b": ["c"], "c": []})
        ['a', 'b', 'c']

    """
    # Calculate in-degree for each node
    indegree: defaultdict[T, int] = defaultdict(int)
    for node, deps in successors.items():
        indegree[node] = indegree.get(node, 0)
        for dep in deps:
            indegree[dep] += 1

    # Start with nodes that have no predecessors (in-degree 0)
    queue = deque([node for node, deg in indegree.items() if deg == 0])
    order: list[T] = []

    while queue:
        node = queue.popleft()
        order.append(node)
        for successor in successors.get(node, []):
            indegree[successor] -= 1
            if indegree[successor] == 0:
                queue.append(successor)

    if len(order) != len(indegree):
        msg = "Cycle detected in graph"
        raise ValueError(msg)

    return order


def undirected_closure[T: Hashable](
    seeds: Iterable[T],
    neighbors: Callable[[T], Iterable[T]],
) -> list[T]:
    """Find every node reachable from the seeds, ignoring edge direction.

    Args:
        seeds: Starting nodes.
        neighbors: Returns the nodes adjacent to a node (both directions).

    Returns:
        The reachable nodes (seeds included) in breadth-first order, without
        duplicates.

    Example:
        >>> adjacency = {"a": ["b"], "b": ["a", "c"], "c": ["b"], "d": []}
        >>> undirected_closure(["a"], adjacency.__getitem__)
        ['a', 'b', 'c']

    """
    visited: dict[T, None] = {}
    queue: deque[T] = deque()
    for seed in seeds:
        if seed not in visited:
            visited[seed] = None
            queue.append(seed)

    while queue:
        node = queue.popleft()
        for neighbor in neighbors(node):
            if neighbor not in visited:
                visited[neighbor] = None
                queue.append(neighbor)

    return list(visited)


def weakly_connected_components[T: Hashable](
    nodes: Iterable[T],
    neighbors: Callable[[T], Iterable[T]],
) -> dict[T, int]:
    """Label each node with the weakly connected component it belongs to.

    Components are numbered from 0 in the order their first member appears
    in `nodes`.

    Args:
        nodes: All nodes to partition.
        neighbors: Returns the nodes adjacent to a node (both directions).

    Returns:
        Mapping from node to component number.

    Example:
        >>> adjacency = {"a": ["b"], "b": ["a"], "c": []}
        >>> weakly_connected_components(["a", "b", "c"], adjacency.__getitem__)
        {'a': 0, 'b': 0, 'c': 1}

    """
    membership: dict[T, int] = {}
    n_components = 0
    for node in nodes:
        if node in membership:
            continue
        for member in undirected_closure([node], neighbors):
            membership[member] = n_components
        n_components += 1
    return membership
