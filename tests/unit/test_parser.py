"""Unit tests for the parser module."""

import pytest

from graphmaker.models import Edge, LayoutNode
from graphmaker.parser import (
    EmptyGraphError,
    ParseError,
    looks_like_records,
    parse_records,
    serialize_records,
    table_to_records,
)


class TestParse:
    """Tests for RecordCodec.parse."""

    def test_parse_example(self, codec, example_input):
        """Test parsing the four-record example."""
        nodes = codec.parse(example_input)

        assert [n.id for n in nodes] == ["0", "1", "2", "3"]
        assert [n.label for n in nodes] == ["Root", "Foo", "Bar", "Buzz"]
        assert nodes[0].children == ["1", "2"]
        assert nodes[3].children == []
        assert all(n.position is None for n in nodes)

    def test_parse_trims_child_tokens(self, codec):
        """Whitespace around child ids is removed and empty tokens dropped."""
        nodes = codec.parse("a,Alpha, b ; c ;")
        assert nodes[0].children == ["b", "c"]

    def test_parse_keeps_duplicate_children(self, codec):
        """Duplicate child ids within one record are not deduplicated."""
        nodes = codec.parse("a,Alpha,b;b")
        assert nodes[0].children == ["b", "b"]

    def test_parse_keeps_unknown_children(self, codec):
        """References to ids with no record are kept."""
        nodes = codec.parse("a,Alpha,missing")
        assert nodes[0].children == ["missing"]

    def test_parse_position(self, codec):
        """Fourth field is parsed as x;y."""
        nodes = codec.parse("a,Alpha,,1.5;-2")
        assert nodes[0].position == (1.5, -2.0)

    @pytest.mark.parametrize(
        "field_text", ["x;2", "1;y", "5", "5;", ";", "inf;2", "1;nan", "  "]
    )
    def test_parse_bad_position_is_absent(self, codec, field_text):
        """Malformed or non-finite positions are ignored, not errors."""
        nodes = codec.parse(f"a,Alpha,b,{field_text}")
        assert len(nodes) == 1
        assert nodes[0].position is None
        assert nodes[0].children == ["b"]

    def test_parse_skips_short_lines(self, codec):
        """Lines with fewer than two fields are skipped."""
        nodes = codec.parse("lonely\na,Alpha,\n\nb,Beta,")
        assert [n.id for n in nodes] == ["a", "b"]

    def test_parse_empty_text(self, codec):
        """Empty input yields no nodes."""
        assert codec.parse("") == []
        assert codec.parse("   \n  \n") == []

    def test_parse_two_field_record(self, codec):
        """A record with only id and label is valid."""
        nodes = codec.parse("a,Alpha")
        assert nodes[0].children == []
        assert nodes[0].position is None

    def test_parse_empty_label_gets_placeholder(self, codec):
        """Empty labels fall back to a placeholder based on record position."""
        nodes = codec.parse("a,Alpha,\nb,,\nc, ,")
        assert nodes[1].label == "Node 1"
        assert nodes[2].label == "Node 2"

    def test_parse_comma_in_label_shifts_fields(self, codec):
        """Commas in labels are not escaped and split the record."""
        nodes = codec.parse("a,Hello, world,b")
        assert nodes[0].label == "Hello"
        assert nodes[0].children == ["world"]
        assert nodes[0].position is None

    def test_parse_ignores_extra_fields(self, codec):
        """Fields after the fourth are ignored."""
        nodes = codec.parse("a,Alpha,b,3;4,extra")
        assert nodes[0].position == (3.0, 4.0)

    def test_parse_handles_crlf(self, codec):
        """Windows line endings do not leak into fields."""
        nodes = codec.parse("a,Alpha,b,1;2\r\nb,Beta,\r\n")
        assert nodes[0].position == (1.0, 2.0)
        assert nodes[1].label == "Beta"

    def test_parse_records_convenience(self, example_input):
        """Module level parse_records matches the codec."""
        assert len(parse_records(example_input)) == 4


class TestSerialize:
    """Tests for RecordCodec.serialize."""

    def test_serialize_children_from_edges(self, codec):
        """Children are rebuilt from the edge list, not the node's field."""
        nodes = [
            LayoutNode(id="a", label="A", children=["b"], x=0, y=0),
            LayoutNode(id="b", label="B", x=10, y=20),
        ]
        edges = [Edge("a", "b"), Edge("b", "a")]

        text = codec.serialize(nodes, edges)

        assert text == "a,A,b,0;0\nb,B,a,10;20"

    def test_serialize_rounds_half_up(self, codec):
        """Coordinates are rounded half up to integers."""
        nodes = [LayoutNode(id="a", label="A", x=2.5, y=-2.5)]
        assert codec.serialize(nodes, []) == "a,A,,3;-2"

    def test_serialize_keeps_node_order(self, codec):
        """Output follows the in-memory node order."""
        nodes = [
            LayoutNode(id="z", label="Z"),
            LayoutNode(id="a", label="A"),
        ]
        lines = codec.serialize(nodes, []).split("\n")
        assert [line.split(",")[0] for line in lines] == ["z", "a"]

    def test_serialize_keeps_unknown_targets(self, codec):
        """Edges to ids without a node are written back."""
        nodes = [LayoutNode(id="a", label="A")]
        assert codec.serialize(nodes, [Edge("a", "ghost")]) == "a,A,ghost,0;0"

    def test_serialize_empty(self):
        """No nodes gives empty text."""
        assert serialize_records([], []) == ""


class TestTableToRecords:
    """Tests for table_to_records."""

    def test_table_rows(self):
        """Rows become indexed records with placeholder labels."""
        rows = [
            ("Root", [1, 2]),
            ("", []),
            ("Leaf B", [3, 3]),
            ("Leaf C", []),
        ]
        assert table_to_records(rows) == (
            "0,Root,1;2\n1,Node 1,\n2,Leaf B,3\n3,Leaf C,"
        )

    def test_table_output_parses(self):
        """Generated records parse back into the same structure."""
        nodes = parse_records(table_to_records([("A", [1]), ("B", [])]))
        assert [(n.id, n.label, n.children) for n in nodes] == [
            ("0", "A", ["1"]),
            ("1", "B", []),
        ]


class TestLooksLikeRecords:
    """Tests for looks_like_records."""

    def test_plain_text_is_rejected(self):
        assert looks_like_records("just some words") is False

    def test_empty_text_is_rejected(self):
        assert looks_like_records("") is False

    def test_records_are_accepted(self, example_input):
        assert looks_like_records(example_input) is True


class TestErrors:
    """Tests for the exception hierarchy."""

    def test_empty_graph_error_is_parse_error(self):
        assert issubclass(EmptyGraphError, ParseError)
