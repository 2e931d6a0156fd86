"""Tests for DependencyGraph and graph algorithms."""

import pytest

from probdag._graph import DependencyGraph, topological_sort, undirected_closure, weakly_connected_components


class TestTopologicalSort:
    """Tests for the topological_sort algorithm."""

    def test_empty_graph(self) -> None:
        assert topological_sort({}) == []

    def test_linear_chain(self) -> None:
        # a -> b -> c (c depends on b, b depends on a)
        result = topological_sort({"a": ["b"], "b": ["c"], "c": []})
        assert result == ["a", "b", "c"]

    def test_diamond_dependency(self) -> None:
        result = topological_sort({"a": ["b", "c"], "b": ["d"], "c": ["d"], "d": []})
        assert result[0] == "a"
        assert result[-1] == "d"

    def test_cycle_detection(self) -> None:
        with pytest.raises(ValueError, match="Cycle"):
            topological_sort({"a": ["b"], "b": ["a"]})

    def test_self_loop_detection(self) -> None:
        with pytest.raises(ValueError, match="Cycle"):
            topological_sort({"a": ["a"]})


class TestUndirectedClosure:
    """Tests for reachability ignoring edge direction."""

    def test_follows_both_directions(self) -> None:
        graph = DependencyGraph.from_edges([("a", "b"), ("c", "b"), ("d", "e")])
        assert set(undirected_closure(["a"], graph.neighbors)) == {"a", "b", "c"}

    def test_seeds_are_included_once(self) -> None:
        graph = DependencyGraph.from_edges([("a", "b")])
        assert sorted(undirected_closure(["a", "b", "a"], graph.neighbors)) == ["a", "b"]

    def test_terminates_on_cycles(self) -> None:
        graph = DependencyGraph(
            _predecessors={"a": frozenset({"c"}), "b": frozenset({"a"}), "c": frozenset({"b"})},
            _successors={"a": frozenset({"b"}), "b": frozenset({"c"}), "c": frozenset({"a"})},
        )
        assert set(undirected_closure(["a"], graph.neighbors)) == {"a", "b", "c"}

    def test_isolated_seed(self) -> None:
        graph = DependencyGraph.from_edges([("a", "b")], nodes=["z"])
        assert undirected_closure(["z"], graph.neighbors) == ["z"]


class TestWeaklyConnectedComponents:
    """Tests for partitioning into disjoint sub-graphs."""

    def test_single_component(self) -> None:
        graph = DependencyGraph.from_edges([("a", "b"), ("c", "b")])
        assert weakly_connected_components(["a", "b", "c"], graph.neighbors) == {"a": 0, "b": 0, "c": 0}

    def test_numbered_by_first_member(self) -> None:
        graph = DependencyGraph.from_edges([("x", "y"), ("a", "b")], nodes=["lonely"])
        membership = weakly_connected_components(["a", "lonely", "x", "b", "y"], graph.neighbors)
        assert membership == {"a": 0, "b": 0, "lonely": 1, "x": 2, "y": 2}

    def test_direction_is_ignored(self) -> None:
        # b and c only meet through a node that depends on both
        graph = DependencyGraph.from_edges([("b", "d"), ("c", "d")])
        membership = weakly_connected_components(["b", "c", "d"], graph.neighbors)
        assert len(set(membership.values())) == 1

    def test_empty(self) -> None:
        assert weakly_connected_components([], DependencyGraph().neighbors) == {}


class TestDependencyGraphConstruction:
    """Tests for DependencyGraph construction."""

    def test_empty_graph(self) -> None:
        graph = DependencyGraph.from_edges([])
        assert graph.nodes == frozenset()
        assert len(graph) == 0

    def test_single_edge(self) -> None:
        graph = DependencyGraph.from_edges([("a", "b")])
        assert graph.nodes == frozenset({"a", "b"})

    def test_isolated_nodes(self) -> None:
        graph = DependencyGraph.from_edges([("a", "b")], nodes=["c"])
        assert graph.nodes == frozenset({"a", "b", "c"})
        assert graph.neighbors("c") == frozenset()

    def test_node_order_is_preserved(self) -> None:
        graph = DependencyGraph.from_edges([("b", "a")], nodes=["c", "a"])
        assert graph.ordered_nodes() == ["c", "a", "b"]

    def test_contains(self) -> None:
        graph = DependencyGraph.from_edges([("a", "b")])
        assert "a" in graph
        assert "c" not in graph


class TestDependencyGraphQueries:
    """Tests for DependencyGraph query methods."""

    def test_predecessors_and_successors(self) -> None:
        graph = DependencyGraph.from_edges([("a", "c"), ("b", "c")])
        assert graph.predecessors("c") == frozenset({"a", "b"})
        assert graph.successors("a") == frozenset({"c"})
        assert graph.predecessors("nonexistent") == frozenset()

    def test_neighbors(self) -> None:
        graph = DependencyGraph.from_edges([("a", "b"), ("b", "c")])
        assert graph.neighbors("b") == frozenset({"a", "c"})

    def test_edges_are_ordered(self) -> None:
        graph = DependencyGraph.from_edges([("a", "c"), ("a", "b"), ("b", "c")], nodes=["a", "b", "c"])
        assert graph.edges() == [("a", "b"), ("a", "c"), ("b", "c")]


class TestDependencyGraphTopologicalOrder:
    """Tests for topological ordering of the graph."""

    def test_topological_order_linear(self) -> None:
        graph = DependencyGraph.from_edges([("a", "b"), ("b", "c")])
        assert graph.topological_order() == ["a", "b", "c"]

    def test_topological_order_is_deterministic(self) -> None:
        edges = [("a", "d"), ("b", "d"), ("c", "d")]
        orders = {tuple(DependencyGraph.from_edges(edges, nodes=["c", "b", "a"]).topological_order()) for _ in range(5)}
        assert orders == {("c", "b", "a", "d")}

    def test_has_cycle(self) -> None:
        assert DependencyGraph.from_edges([("a", "b")]).has_cycle() is False
        graph = DependencyGraph(
            _predecessors={"a": frozenset({"b"}), "b": frozenset({"a"})},
            _successors={"a": frozenset({"b"}), "b": frozenset({"a"})},
        )
        assert graph.has_cycle() is True


class TestDependencyGraphSubgraph:
    """Tests for subgraph extraction."""

    def test_subgraph_keeps_internal_edges(self) -> None:
        graph = DependencyGraph.from_edges([("a", "b"), ("b", "c"), ("c", "d")])
        sub = graph.subgraph(["b", "c"])
        assert sub.nodes == frozenset({"b", "c"})
        assert sub.predecessors("c") == frozenset({"b"})

    def test_subgraph_removes_external_edges(self) -> None:
        graph = DependencyGraph.from_edges([("a", "b"), ("b", "c")])
        sub = graph.subgraph(["b", "c"])
        assert sub.predecessors("b") == frozenset()
        assert sub.neighbors("b") == frozenset({"c"})
