"""
Data models for diagram layout and edge routing.

This module contains the dataclasses shared by the codec, the layout engine and
the route planner. They describe parsed records, positioned node boxes, edges
and the routing geometry computed for one layout pass.

Classes:
    GraphNode: A single parsed record (id, label, children, optional position).
    LayoutNode: A node with a resolved box position and color.
    Edge: A directed connection from a parent node to one of its children.
    BoxInfo: A node box as seen by the route planner.
    ChannelKey: Composite key for a shared horizontal channel.
    TrunkAnchor: Shared vertical trunk point for a target with several inputs.
    RoutingPlan: Immutable routing geometry shared by all edges of a layout.
    EdgeRoute: A routed connector path for one edge.
"""

import math
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Dict, List, Mapping, NamedTuple, Optional, Tuple

Point = Tuple[float, float]


@dataclass
class GraphNode:
    """
    One record of the input format.

    Attributes:
        id: Node identifier, expected to be unique within a graph.
        label: Display text.
        children: Ordered child ids. Duplicates and unknown ids are kept.
        position: Explicit (x, y) from the record, or None when absent.
    """

    id: str
    label: str
    children: List[str] = field(default_factory=list)
    position: Optional[Point] = None


@dataclass
class LayoutNode:
    """
    A node with a resolved position.

    ``x`` and ``y`` are the top-left corner of a fixed size box. The position is
    the only field that changes after layout (interactive moves).

    Attributes:
        id: Node identifier.
        label: Display text.
        children: Child ids copied from the source record.
        x: Left edge of the box.
        y: Top edge of the box.
        width: Box width.
        height: Box height.
        color: Palette color assigned by input order.
        depth: Layer index computed by the graph model (0 in explicit mode
            when the node is a root).
    """

    id: str
    label: str
    children: List[str] = field(default_factory=list)
    x: float = 0.0
    y: float = 0.0
    width: float = 0.0
    height: float = 0.0
    color: str = ""
    depth: int = 0

    @property
    def position(self) -> Point:
        return (self.x, self.y)

    @property
    def center_x(self) -> float:
        return self.x + self.width / 2

    @property
    def bottom_y(self) -> float:
        return self.y + self.height

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "label": self.label,
            "children": list(self.children),
            "x": self.x,
            "y": self.y,
            "width": self.width,
            "height": self.height,
            "color": self.color,
            "depth": self.depth,
        }


@dataclass
class Edge:
    """A directed edge from a parent to a child, colored like its target."""

    source: str
    target: str
    color: str = ""

    @property
    def id(self) -> str:
        return f"{self.source}-{self.target}"


@dataclass(frozen=True)
class BoxInfo:
    """Box geometry used for routing."""

    id: str
    x: float
    y: float
    width: float
    height: float


class ChannelKey(NamedTuple):
    """Rounded (source bottom Y, target top Y) pair identifying a channel."""

    source_y: int
    target_y: int


class TrunkAnchor(NamedTuple):
    """Merge point above a target that receives more than one edge."""

    x: float
    y: float


@dataclass(frozen=True)
class RoutingPlan:
    """
    Routing geometry for one layout pass.

    The plan is shared by reference across every edge of the layout and is
    never mutated; a new plan is built whenever the caller asks for a redraw.

    Attributes:
        boxes: Node boxes in node order.
        channels: Horizontal channel Y for each (source Y, target Y) pair.
        trunks: Trunk anchor for each target with more than one incoming edge.
        colors: Assigned color per node id.
    """

    boxes: Tuple[BoxInfo, ...] = ()
    channels: Mapping[ChannelKey, float] = field(
        default_factory=lambda: MappingProxyType({})
    )
    trunks: Mapping[str, TrunkAnchor] = field(
        default_factory=lambda: MappingProxyType({})
    )
    colors: Mapping[str, str] = field(default_factory=lambda: MappingProxyType({}))

    def __post_init__(self):
        # Freeze plain dicts handed in by callers
        for name in ("channels", "trunks", "colors"):
            value = getattr(self, name)
            if not isinstance(value, MappingProxyType):
                object.__setattr__(self, name, MappingProxyType(dict(value)))
        object.__setattr__(self, "boxes", tuple(self.boxes))

    def channel_for(self, source_y: float, target_y: float) -> Optional[float]:
        """Look up the shared channel for an edge spanning the given Y values."""
        key = ChannelKey(round_half_up(source_y), round_half_up(target_y))
        return self.channels.get(key)


@dataclass
class EdgeRoute:
    """
    A routed connector.

    Attributes:
        edge: The edge this route belongs to.
        waypoints: Polyline points from the source port to the target port.
        channel_y: Horizontal channel used, or None for straight segments.
        via_trunk: True when the path runs down the target's shared trunk.
        color: Color of the target node. Defaults to the edge's own color.
    """

    edge: Edge
    waypoints: List[Point] = field(default_factory=list)
    channel_y: Optional[float] = None
    via_trunk: bool = False
    color: str = ""

    def __post_init__(self):
        if not self.color:
            self.color = self.edge.color

    def svg_path(self) -> str:
        """Return the route as SVG path data (``M x y L x y ...``)."""
        parts = []
        for i, (x, y) in enumerate(self.waypoints):
            command = "M" if i == 0 else "L"
            parts.append(f"{command} {format_number(x)} {format_number(y)}")
        return " ".join(parts)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.edge.id,
            "source": self.edge.source,
            "target": self.edge.target,
            "color": self.color,
            "path": self.svg_path(),
            "via_trunk": self.via_trunk,
        }


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves towards positive infinity."""
    return math.floor(value + 0.5)


def format_number(value: float) -> str:
    """Format a coordinate without a trailing ``.0`` for whole numbers."""
    if float(value).is_integer():
        return str(int(value))
    return repr(float(value))
