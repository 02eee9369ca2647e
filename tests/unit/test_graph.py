"""Unit tests for the graph module."""

import logging

from graphmaker import GraphModel, create_graph, parse_records
from graphmaker.models import GraphNode


def build(text):
    return create_graph(parse_records(text))


class TestGraphModel:
    """Tests for the GraphModel class."""

    def test_nodes_in_input_order(self, example_graph):
        assert [n.id for n in example_graph.nodes] == ["0", "1", "2", "3"]
        assert len(example_graph) == 4

    def test_contains(self, example_graph):
        assert "3" in example_graph
        assert "9" not in example_graph

    def test_edges_in_record_order(self, example_graph):
        assert example_graph.edges == [("0", "1"), ("0", "2"), ("1", "3"), ("2", "3")]

    def test_get_successors(self, example_graph):
        assert example_graph.get_successors("0") == ["1", "2"]
        assert example_graph.get_successors("3") == []

    def test_get_predecessors(self, example_graph):
        assert set(example_graph.get_predecessors("3")) == {"1", "2"}
        assert example_graph.get_predecessors("0") == []

    def test_unknown_node_has_no_neighbours(self, example_graph):
        assert example_graph.get_successors("missing") == []
        assert example_graph.get_predecessors("missing") == []

    def test_incoming_count_counts_duplicates(self):
        graph = build("a,A,b;b\nb,B,")
        assert graph.incoming_count("b") == 2
        assert graph.incoming_count("a") == 0

    def test_duplicate_ids_first_wins(self, caplog):
        """Later records with an existing id are dropped."""
        nodes = [
            GraphNode(id="a", label="First"),
            GraphNode(id="a", label="Second"),
        ]
        with caplog.at_level(logging.WARNING, logger="graphmaker.graph"):
            graph = GraphModel(nodes)

        assert len(graph) == 1
        assert graph.get_node("a").label == "First"
        assert "Duplicate node id" in caplog.text

    def test_dangling_references(self):
        graph = build("0,A,1;9\n1,B,")
        assert graph.dangling_references() == [("0", "9")]
        assert graph.get_successors("0") == ["1"]
        assert graph.edges == [("0", "1"), ("0", "9")]


class TestRoots:
    """Tests for root detection."""

    def test_single_root(self, example_graph):
        assert example_graph.roots() == ["0"]

    def test_multiple_roots(self):
        graph = build("a,A,c\nb,B,c\nc,C,")
        assert graph.roots() == ["a", "b"]

    def test_pure_cycle_has_no_roots(self, cyclic_input):
        assert build(cyclic_input).roots() == []

    def test_self_reference_is_not_root(self):
        assert build("a,A,a").roots() == []


class TestDepths:
    """Tests for depth assignment."""

    def test_example_depths(self, example_graph):
        assert example_graph.depths() == {"0": 0, "1": 1, "2": 1, "3": 2}

    def test_longest_path_wins(self):
        """A node reached along paths of different length sits below both."""
        graph = build("0,A,1;2\n1,B,3\n2,C,1\n3,D,")
        depths = graph.depths()
        assert depths == {"0": 0, "2": 1, "1": 2, "3": 3}

    def test_depth_monotonic_on_edges(self):
        """Every edge points at least one layer down."""
        graph = build(
            "a,A,b;c;d\nb,B,e\nc,C,b;e\nd,D,c\ne,E,f\nf,F,\ng,G,f"
        )
        depths = graph.depths()
        for source, target in graph.edges:
            assert depths[target] >= depths[source] + 1

    def test_cycle_terminates(self, cyclic_input):
        graph = build(cyclic_input)
        assert graph.has_cycles() is True
        assert graph.depths() == {"0": 0, "1": 1}
        assert graph.back_edges() == {("1", "0")}

    def test_cycle_below_root(self):
        graph = build("r,R,a\na,A,b\nb,B,a")
        assert graph.depths() == {"r": 0, "a": 1, "b": 2}
        assert graph.back_edges() == {("b", "a")}

    def test_self_loop(self):
        graph = build("a,A,a")
        assert graph.depths() == {"a": 0}
        assert graph.back_edges() == {("a", "a")}

    def test_nested_cycles_terminate(self):
        graph = build("r,R,a\na,A,b;c\nb,B,c;a\nc,C,a;b\nd,D,e\ne,E,d")
        depths = graph.depths()

        assert depths == {"r": 0, "a": 1, "b": 2, "c": 3, "d": 0, "e": 1}
        kept = set(graph.edges) - graph.back_edges()
        for source, target in kept:
            assert depths[target] > depths[source]

    def test_disconnected_nodes_default_to_zero(self):
        graph = build("a,A,b\nb,B,\nlone,Lone,")
        assert graph.depths()["lone"] == 0

    def test_acyclic_graph(self, example_graph):
        assert example_graph.has_cycles() is False
        assert example_graph.back_edges() == set()

    def test_max_depth(self, example_graph):
        assert example_graph.max_depth() == 2

    def test_empty_graph(self):
        graph = GraphModel([])
        assert graph.depths() == {}
        assert graph.roots() == []
        assert graph.max_depth() == 0

    def test_long_chain(self):
        """Deep chains do not hit the recursion limit."""
        count = 3000
        text = "\n".join(f"{i},N{i},{i + 1}" for i in range(count))
        graph = build(text)
        assert graph.depths()[str(count - 1)] == count - 1
