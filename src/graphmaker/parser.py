"""
Record codec for graph descriptions.

Parses the line-oriented record format into GraphNode objects and serializes
the current node and edge state back to it. One record per line:

    id,label,children[,x;y]

``children`` is a ``;``-separated list of ids and ``x;y`` is an optional
persisted position. Parsing is permissive: short lines are skipped and bad
positions are dropped instead of failing the whole load, since records are
often written by hand or generated by a language model.

Labels are not escaped. A label containing a comma is split into extra fields
and misparsed; this matches files written by earlier versions of the format.
"""

import logging
import math
from typing import Iterable, List, Optional, Sequence, Tuple

from .models import Edge, GraphNode, LayoutNode, Point, round_half_up

logger = logging.getLogger(__name__)

FIELD_SEPARATOR = ","
LIST_SEPARATOR = ";"


class ParseError(Exception):
    """Raised when input cannot be turned into a usable graph."""

    pass


class EmptyGraphError(ParseError):
    """Raised when the input contains no usable records."""

    pass


def placeholder_label(index: int) -> str:
    """Label used for a record with an empty label."""
    return f"Node {index}"


class RecordCodec:
    """Converts between record text and graph nodes."""

    def parse(self, input_text: str) -> List[GraphNode]:
        """
        Parse record text into nodes, in input order.

        Args:
            input_text: Multi-line string, one ``id,label,children[,x;y]``
                record per line.

        Returns:
            List of GraphNode objects. Empty if no line had at least two fields.
        """
        nodes: List[GraphNode] = []

        for line_num, line in enumerate(input_text.strip().split("\n"), 1):
            parts = line.split(FIELD_SEPARATOR)
            if len(parts) < 2:
                if line.strip():
                    logger.debug("Line %d: skipped, fewer than 2 fields", line_num)
                continue

            node_id = parts[0].strip()
            label = parts[1].strip() or placeholder_label(len(nodes))
            children = self._parse_children(parts[2] if len(parts) > 2 else "")
            position = self._parse_position(parts[3] if len(parts) > 3 else "")

            if len(parts) > 3 and parts[3].strip() and position is None:
                logger.debug(
                    "Line %d: ignoring malformed position %r", line_num, parts[3]
                )

            nodes.append(
                GraphNode(id=node_id, label=label, children=children, position=position)
            )

        return nodes

    def serialize(self, nodes: Sequence[LayoutNode], edges: Iterable[Edge]) -> str:
        """
        Serialize nodes and edges to record text.

        Children are rebuilt from the edge list, grouped per source in edge
        order, so the output reflects the live topology rather than the
        children field that was originally read.

        Args:
            nodes: Current nodes, written in this order.
            edges: Current edges.

        Returns:
            Record text, lines joined with ``\\n``.
        """
        children_map = {}
        for edge in edges:
            children_map.setdefault(edge.source, []).append(edge.target)

        lines = []
        for node in nodes:
            children = LIST_SEPARATOR.join(children_map.get(node.id, []))
            x = round_half_up(node.x)
            y = round_half_up(node.y)
            lines.append(
                f"{node.id}{FIELD_SEPARATOR}{node.label}{FIELD_SEPARATOR}"
                f"{children}{FIELD_SEPARATOR}{x}{LIST_SEPARATOR}{y}"
            )

        return "\n".join(lines)

    def _parse_children(self, field_text: str) -> List[str]:
        field_text = field_text.strip()
        if not field_text:
            return []
        tokens = (token.strip() for token in field_text.split(LIST_SEPARATOR))
        return [token for token in tokens if token]

    def _parse_position(self, field_text: str) -> Optional[Point]:
        """Parse ``x;y``. Anything that is not two finite numbers gives None."""
        field_text = field_text.strip()
        if not field_text:
            return None

        halves = field_text.split(LIST_SEPARATOR)
        if len(halves) < 2:
            return None

        try:
            x = float(halves[0])
            y = float(halves[1])
        except ValueError:
            return None

        if not (math.isfinite(x) and math.isfinite(y)):
            return None
        return (x, y)


def table_to_records(rows: Iterable[Tuple[str, Iterable[int]]]) -> str:
    """
    Build record text from spreadsheet-like rows.

    Each row is ``(title, points_at)``; its id is the row index and
    ``points_at`` holds the indices of the rows it points to. Repeated
    indices within a row are kept once. Empty titles get a placeholder label.

    Args:
        rows: Iterable of (title, target indices) pairs.

    Returns:
        Record text without position fields.
    """
    lines = []
    for index, (title, points_at) in enumerate(rows):
        targets: List[int] = []
        for target in points_at:
            if target not in targets:
                targets.append(target)
        label = title or placeholder_label(index)
        children = LIST_SEPARATOR.join(str(t) for t in targets)
        lines.append(f"{index}{FIELD_SEPARATOR}{label}{FIELD_SEPARATOR}{children}")
    return "\n".join(lines)


def looks_like_records(input_text: str) -> bool:
    """Return True if pasted text contains a comma and yields at least one node."""
    if not input_text or FIELD_SEPARATOR not in input_text:
        return False
    return len(parse_records(input_text)) > 0


def parse_records(input_text: str) -> List[GraphNode]:
    """
    Convenience function to parse record text.

    Args:
        input_text: Multi-line record text.

    Returns:
        List of GraphNode objects.
    """
    return RecordCodec().parse(input_text)


def serialize_records(nodes: Sequence[LayoutNode], edges: Iterable[Edge]) -> str:
    """
    Convenience function to serialize nodes and edges to record text.

    Args:
        nodes: Current nodes.
        edges: Current edges.

    Returns:
        Record text.
    """
    return RecordCodec().serialize(nodes, edges)
