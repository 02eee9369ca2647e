"""
Layout module for tree and DAG diagrams.

Assigns every node a box position, either by passing persisted coordinates
through or by stacking depth layers top to bottom, and assigns each node a
color from a fixed palette.
"""

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence

from .graph import GraphModel
from .models import Edge, LayoutNode

logger = logging.getLogger(__name__)

# Box size of a rendered node
NODE_WIDTH = 150
NODE_HEIGHT = 40

HORIZONTAL_SPACING = 200
VERTICAL_SPACING = 120

EXPLICIT_MODE = "explicit"
AUTO_MODE = "auto"

# Distinct colors for nodes and the edges pointing into them
COLORS = [
    "#2563eb",  # blue
    "#dc2626",  # red
    "#16a34a",  # green
    "#9333ea",  # purple
    "#ea580c",  # orange
    "#0891b2",  # cyan
    "#db2777",  # pink
    "#65a30d",  # lime
    "#7c3aed",  # violet
    "#ca8a04",  # yellow
    "#0d9488",  # teal
    "#e11d48",  # rose
]


def palette_color(index: int, palette: Sequence[str] = COLORS) -> str:
    """Return the palette color for the node at ``index``, wrapping around."""
    return palette[index % len(palette)]


@dataclass
class LayoutResult:
    """Result of the layout algorithm."""

    nodes: List[LayoutNode] = field(default_factory=list)
    edges: List[Edge] = field(default_factory=list)
    layers: List[List[str]] = field(default_factory=list)
    mode: str = AUTO_MODE

    def node(self, node_id: str) -> Optional[LayoutNode]:
        for node in self.nodes:
            if node.id == node_id:
                return node
        return None

    def positions(self) -> Dict[str, tuple]:
        return {node.id: node.position for node in self.nodes}


class TreeLayout:
    """
    Positions nodes either from persisted coordinates or by depth layers.

    Explicit mode is used only when every node has a position; a single node
    without one sends the whole graph through auto layout.

    In auto mode each layer is centered on x = 0 independently of the other
    layers, with nodes placed left to right in input order.
    """

    def __init__(
        self,
        horizontal_spacing: float = HORIZONTAL_SPACING,
        vertical_spacing: float = VERTICAL_SPACING,
        node_width: float = NODE_WIDTH,
        node_height: float = NODE_HEIGHT,
        palette: Sequence[str] = COLORS,
    ):
        """
        Initialize the layout engine.

        Args:
            horizontal_spacing: Distance between node origins within a layer.
            vertical_spacing: Distance between consecutive layers.
            node_width: Width of every node box.
            node_height: Height of every node box.
            palette: Colors assigned to nodes by input order.
        """
        if not palette:
            raise ValueError("palette must contain at least one color")
        self.horizontal_spacing = horizontal_spacing
        self.vertical_spacing = vertical_spacing
        self.node_width = node_width
        self.node_height = node_height
        self.palette = list(palette)

    def layout(self, graph: GraphModel) -> LayoutResult:
        """
        Compute positions for every node of the graph.

        Args:
            graph: GraphModel built from parsed records.

        Returns:
            LayoutResult with nodes in input order and one edge per child
            reference, including references to unknown ids.
        """
        colors = {
            node.id: palette_color(index, self.palette)
            for index, node in enumerate(graph.nodes)
        }
        depths = graph.depths()
        layers = self._group_layers(graph, depths)

        explicit = all(node.position is not None for node in graph.nodes)
        if explicit:
            positions = {node.id: node.position for node in graph.nodes}
        else:
            positions = self._layered_positions(layers)

        result = LayoutResult(
            layers=layers, mode=EXPLICIT_MODE if explicit else AUTO_MODE
        )
        for node in graph.nodes:
            x, y = positions[node.id]
            result.nodes.append(
                LayoutNode(
                    id=node.id,
                    label=node.label,
                    children=list(node.children),
                    x=x,
                    y=y,
                    width=self.node_width,
                    height=self.node_height,
                    color=colors[node.id],
                    depth=depths[node.id],
                )
            )

        for source, target in graph.edges:
            result.edges.append(
                Edge(
                    source=source,
                    target=target,
                    color=colors.get(target, self.palette[0]),
                )
            )

        logger.debug(
            "Laid out %d nodes and %d edges in %s mode",
            len(result.nodes),
            len(result.edges),
            result.mode,
        )
        return result

    def _group_layers(
        self, graph: GraphModel, depths: Dict[str, int]
    ) -> List[List[str]]:
        """Group node ids by depth, keeping input order within each layer."""
        if not graph.nodes:
            return []
        layers: List[List[str]] = [[] for _ in range(max(depths.values()) + 1)]
        for node in graph.nodes:
            layers[depths[node.id]].append(node.id)
        return layers

    def _layered_positions(self, layers: List[List[str]]) -> Dict[str, tuple]:
        positions = {}
        for depth, layer in enumerate(layers):
            layer_width = len(layer) * self.horizontal_spacing
            start_x = -layer_width / 2 + self.horizontal_spacing / 2
            for index, node_id in enumerate(layer):
                positions[node_id] = (
                    start_x + index * self.horizontal_spacing,
                    depth * self.vertical_spacing,
                )
        return positions


def compute_layout(graph: GraphModel, **options) -> LayoutResult:
    """
    Convenience function to lay out a graph.

    Args:
        graph: GraphModel to lay out.
        **options: Keyword arguments passed to TreeLayout.

    Returns:
        LayoutResult
    """
    return TreeLayout(**options).layout(graph)
