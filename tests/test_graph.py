"""
Tests for the directed acyclic graph.
"""

import random

import pytest

from autodeps.core.graph import Graph
from autodeps.exceptions import CycleError


class TestVertices:
    """Vertex insertion and lookup."""

    def test_add_vertex_is_idempotent(self):
        graph = Graph()
        graph.add_vertex("a")
        graph.add_vertex("a")
        assert len(graph) == 1
        assert graph.vertices == ["a"]

    def test_contains(self):
        graph = Graph()
        graph.add_vertex("a")
        assert "a" in graph
        assert graph.has_vertex("a")
        assert "b" not in graph

    def test_add_edge_adds_missing_vertices(self):
        graph = Graph()
        graph.add_edge("a", "b")
        assert graph.vertices == ["a", "b"]

    def test_invalid_tie_break(self):
        with pytest.raises(ValueError):
            Graph(tie_break="random")


class TestEdges:
    """Edge insertion, reverse index and cycle rejection."""

    def test_dependents_and_dependencies(self):
        graph = Graph()
        graph.add_edge("a", "b")
        graph.add_edge("a", "c")
        graph.add_edge("b", "c")

        assert graph.get_dependents("a") == ["b", "c"]
        assert graph.get_dependencies("c") == ["a", "b"]
        assert graph.get_dependencies("a") == []

    def test_absent_vertex_has_no_neighbours(self):
        graph = Graph()
        assert graph.get_dependents("missing") == []
        assert graph.get_dependencies("missing") == []

    def test_duplicate_edge_is_ignored(self):
        graph = Graph()
        graph.add_edge("a", "b")
        graph.add_edge("a", "b")
        assert graph.get_dependents("a") == ["b"]
        assert list(graph.edges()) == [("a", "b")]

    def test_self_loop_rejected(self):
        graph = Graph()
        with pytest.raises(CycleError) as exc_info:
            graph.add_edge("a", "a")
        assert exc_info.value.cycle == ["a", "a"]

    def test_cycle_rejected_and_graph_unchanged(self):
        graph = Graph()
        graph.add_edge("a", "b")
        graph.add_edge("b", "c")

        with pytest.raises(CycleError) as exc_info:
            graph.add_edge("c", "a")

        err = exc_info.value
        assert err.source == "c"
        assert err.target == "a"
        assert err.cycle == ["c", "a", "b", "c"]
        assert "c --> a --> b --> c" in str(err)
        assert graph.get_dependents("c") == []
        assert graph.get_dependencies("a") == []

    def test_find_path(self):
        graph = Graph()
        graph.add_edge("a", "b")
        graph.add_edge("b", "c")
        graph.add_edge("x", "c")

        assert graph.find_path("a", "c") == ["a", "b", "c"]
        assert graph.find_path("c", "a") is None
        assert graph.find_path("x", "a") is None
        assert graph.find_path("a", "a") == ["a"]

    def test_edges_in_insertion_order(self):
        graph = Graph()
        graph.add_edge("ra", "a")
        graph.add_edge("rb", "b")
        graph.add_edge("ra", "rb")
        assert list(graph.edges()) == [("ra", "a"), ("ra", "rb"), ("rb", "b")]


class TestTopologicalSort:
    """Deterministic topological ordering."""

    def test_respects_edges(self):
        graph = Graph()
        graph.add_edge("a", "b")
        graph.add_edge("a", "c")
        graph.add_edge("b", "c")

        order = graph.topological_sort()
        assert order.index("a") < order.index("b") < order.index("c")

    def test_insertion_tie_break(self):
        graph = Graph()
        for name in ("c", "b", "a"):
            graph.add_vertex(name)
        assert graph.topological_sort() == ["c", "b", "a"]

    def test_lexical_tie_break(self):
        graph = Graph(tie_break="lexical")
        for name in ("c", "b", "a"):
            graph.add_vertex(name)
        assert graph.topological_sort() == ["a", "b", "c"]

    def test_return_path_chain(self):
        graph = Graph()
        for name in ("a", "ra", "b", "rb"):
            graph.add_vertex(name)
        graph.add_edge("ra", "a")
        graph.add_edge("rb", "b")
        graph.add_edge("ra", "rb")
        assert graph.topological_sort() == ["ra", "a", "rb", "b"]

    def test_eager_vertices_taken_first(self):
        graph = Graph()
        graph.add_vertex("b", eager=True)
        graph.add_vertex("rb")
        graph.add_vertex("a", eager=True)
        graph.add_vertex("ra")
        graph.add_edge("rb", "b")
        graph.add_edge("ra", "rb")
        graph.add_edge("ra", "a")

        # without the flag, insertion order would place rb and b before a
        assert graph.topological_sort() == ["ra", "a", "rb", "b"]

    def test_eager_with_lexical_tie_break(self):
        graph = Graph(tie_break="lexical")
        graph.add_vertex("z", eager=True)
        graph.add_vertex("m")
        graph.add_vertex("a")
        assert graph.topological_sort() == ["z", "a", "m"]

    def test_every_vertex_once(self):
        graph = Graph()
        graph.add_vertex("lonely")
        graph.add_edge("a", "b")
        order = graph.topological_sort()
        assert sorted(order) == ["a", "b", "lonely"]

    def test_empty_graph(self):
        assert Graph().topological_sort() == []

    def test_graph_built_through_add_edge_always_sorts(self):
        """Edges rejected on insert leave nothing for the sort-time check to find."""
        rng = random.Random(7)
        names = [f"v{i}" for i in range(30)]
        graph = Graph()
        accepted = []
        for _ in range(200):
            source, target = rng.sample(names, 2)
            try:
                graph.add_edge(source, target)
                accepted.append((source, target))
            except CycleError:
                pass

        order = graph.topological_sort()
        position = {name: i for i, name in enumerate(order)}
        assert len(order) == len(graph)
        for source, target in accepted:
            assert position[source] < position[target]

    def test_cycle_at_sort_time_detected(self):
        """A cycle injected behind add_edge's back is still caught when sorting."""
        graph = Graph()
        graph.add_edge("a", "b")
        graph._dependents["b"].append("a")
        graph._dependencies["a"].append("b")

        with pytest.raises(CycleError) as exc_info:
            graph.topological_sort()
        assert set(exc_info.value.cycle) == {"a", "b"}


class TestViews:
    """Layer and tree views."""

    def test_get_layers(self):
        graph = Graph()
        graph.add_edge("a", "b")
        graph.add_edge("b", "c")
        graph.add_edge("a", "c")
        graph.add_vertex("d")
        assert graph.get_layers() == {"a": 0, "d": 0, "b": 1, "c": 2}

    def test_visualize_layers(self):
        graph = Graph()
        graph.add_edge("a", "c")
        graph.add_edge("a", "b")
        assert graph.visualize_layers() == "Layer 0: a\nLayer 1: b ── c"

    def test_visualize_tree(self):
        graph = Graph()
        graph.add_edge("a", "c")
        graph.add_edge("a", "b")
        assert graph.visualize_tree().splitlines() == ["└─ a", "   ├─ b", "   └─ c"]

    def test_visualize_tree_from_root(self):
        graph = Graph()
        graph.add_edge("a", "b")
        graph.add_edge("b", "c")
        assert graph.visualize_tree("b").splitlines() == ["└─ b", "   └─ c"]

    def test_visualize_tree_unknown_root(self):
        graph = Graph()
        graph.add_vertex("a")
        assert graph.visualize_tree("zzz") == "No root vertices found"
