"""
Main diagram generator module.

Combines parsing, layout, snapping and routing behind one object, and keeps
the mutable node state of an interactive editing session.
"""

import logging
from typing import Any, Dict, Iterable, List, Sequence, Tuple

from .graph import GraphModel
from .layout import (
    COLORS,
    HORIZONTAL_SPACING,
    NODE_HEIGHT,
    NODE_WIDTH,
    VERTICAL_SPACING,
    LayoutResult,
    TreeLayout,
)
from .models import Edge, GraphNode, LayoutNode, Point
from .parser import EmptyGraphError, RecordCodec, table_to_records
from .router import RoutePlanner, RouteResult
from .snapping import SNAP_THRESHOLD, snap_position

logger = logging.getLogger(__name__)


class Diagram:
    """
    Node and edge state of one loaded graph.

    Positions change only through ``move_node``. Routes are not kept up to
    date automatically; call ``route`` whenever a redraw is needed.
    """

    def __init__(
        self,
        nodes: List[LayoutNode],
        edges: List[Edge],
        mode: str,
        planner: RoutePlanner,
        snap_threshold: float = SNAP_THRESHOLD,
    ):
        self.nodes = nodes
        self.edges = edges
        self.mode = mode
        self.planner = planner
        self.snap_threshold = snap_threshold

    def node(self, node_id: str) -> LayoutNode:
        for node in self.nodes:
            if node.id == node_id:
                return node
        raise KeyError(node_id)

    def move_node(self, node_id: str, x: float, y: float, snap: bool = True) -> Point:
        """
        Move a node, snapping the proposed position onto nearby nodes.

        Call once per incremental move event, not only on release.

        Args:
            node_id: Node to move.
            x: Proposed left edge.
            y: Proposed top edge.
            snap: Whether to apply snapping.

        Returns:
            The committed (x, y).

        Raises:
            KeyError: If no node has this id.
        """
        node = self.node(node_id)
        if snap:
            x, y = snap_position(node_id, (x, y), self.nodes, self.snap_threshold)
        node.x = x
        node.y = y
        return (x, y)

    def route(self) -> RouteResult:
        """Compute fresh routes from the current positions."""
        return self.planner.route(self.nodes, self.edges)

    def to_records(self) -> str:
        return RecordCodec().serialize(self.nodes, self.edges)

    def bounds(self, padding_ratio: float = 0.03) -> Tuple[float, float, float, float]:
        """
        Bounding box of all node boxes, padded by a fraction of its size.

        Args:
            padding_ratio: Padding on each side as a fraction of the
                width (x) and height (y) of the unpadded box.

        Returns:
            (min_x, min_y, max_x, max_y), or all zeros for an empty diagram.
        """
        if not self.nodes:
            return (0.0, 0.0, 0.0, 0.0)

        min_x = min(node.x for node in self.nodes)
        min_y = min(node.y for node in self.nodes)
        max_x = max(node.x + node.width for node in self.nodes)
        max_y = max(node.y + node.height for node in self.nodes)

        pad_x = (max_x - min_x) * padding_ratio
        pad_y = (max_y - min_y) * padding_ratio
        return (min_x - pad_x, min_y - pad_y, max_x + pad_x, max_y + pad_y)

    def to_dict(self) -> Dict[str, Any]:
        """Describe nodes and routed edges for a renderer."""
        routes = self.route()
        edges = [route.to_dict() for route in routes.routes]
        edges.extend(
            {
                "id": edge.id,
                "source": edge.source,
                "target": edge.target,
                "color": edge.color,
                "path": None,
                "via_trunk": False,
            }
            for edge in routes.unresolved
        )
        return {
            "mode": self.mode,
            "nodes": [node.to_dict() for node in self.nodes],
            "edges": edges,
        }


class GraphMaker:
    """
    Turn record text into positioned, routable diagrams and back.

    Example:
        >>> maker = GraphMaker()
        >>> diagram = maker.load('''
        ...     0,Root,1;2
        ...     1,Foo,3
        ...     2,Bar,3
        ...     3,Buzz,
        ... ''')
        >>> print(maker.save(diagram))
    """

    def __init__(
        self,
        horizontal_spacing: float = HORIZONTAL_SPACING,
        vertical_spacing: float = VERTICAL_SPACING,
        node_width: float = NODE_WIDTH,
        node_height: float = NODE_HEIGHT,
        palette: Sequence[str] = COLORS,
        snap_threshold: float = SNAP_THRESHOLD,
        spread_source_ports: bool = False,
    ):
        """
        Initialize the diagram generator.

        Args:
            horizontal_spacing: Distance between node origins within a layer
            vertical_spacing: Distance between consecutive layers
            node_width: Width of every node box
            node_height: Height of every node box
            palette: Colors assigned to nodes by input order
            snap_threshold: Distance under which moved nodes snap
            spread_source_ports: Spread edge starts along the source's bottom
        """
        if snap_threshold < 0:
            raise ValueError("snap_threshold must not be negative")

        self.snap_threshold = snap_threshold
        self.codec = RecordCodec()
        self.layout_engine = TreeLayout(
            horizontal_spacing=horizontal_spacing,
            vertical_spacing=vertical_spacing,
            node_width=node_width,
            node_height=node_height,
            palette=palette,
        )
        self.planner = RoutePlanner(spread_source_ports=spread_source_ports)

    def parse(self, input_text: str) -> GraphModel:
        """Parse record text into a graph model."""
        return GraphModel(self.codec.parse(input_text))

    def layout(self, graph: GraphModel) -> LayoutResult:
        return self.layout_engine.layout(graph)

    def load(self, input_text: str) -> Diagram:
        """
        Parse and lay out record text.

        Args:
            input_text: Multi-line record text.

        Returns:
            A Diagram ready for routing and editing.

        Raises:
            EmptyGraphError: If no line produced a node.
        """
        return self.load_nodes(self.codec.parse(input_text))

    def load_nodes(self, nodes: Iterable[GraphNode]) -> Diagram:
        graph = GraphModel(list(nodes))
        if not graph.nodes:
            raise EmptyGraphError("No usable records found in input")

        for source, target in graph.dangling_references():
            logger.debug("Node %r points at unknown id %r", source, target)

        result = self.layout(graph)
        return Diagram(
            nodes=result.nodes,
            edges=result.edges,
            mode=result.mode,
            planner=self.planner,
            snap_threshold=self.snap_threshold,
        )

    def from_table(self, rows: Iterable[Tuple[str, Iterable[int]]]) -> Diagram:
        """Load a diagram from ``(title, points_at)`` rows."""
        return self.load(table_to_records(rows))

    def save(self, diagram: Diagram) -> str:
        """Serialize the diagram's current state to record text."""
        return self.codec.serialize(diagram.nodes, diagram.edges)

    def snap(
        self, moving_id: str, candidate: Point, nodes: Sequence[LayoutNode]
    ) -> Point:
        return snap_position(moving_id, candidate, nodes, self.snap_threshold)

    def route(
        self, nodes: Sequence[LayoutNode], edges: Sequence[Edge]
    ) -> RouteResult:
        return self.planner.route(nodes, edges)


def generate_diagram(input_text: str, **options) -> Dict[str, Any]:
    """
    Convenience function: lay out and route record text in one call.

    Args:
        input_text: Multi-line record text.
        **options: Keyword arguments passed to GraphMaker.

    Returns:
        Renderer description from Diagram.to_dict().
    """
    return GraphMaker(**options).load(input_text).to_dict()
