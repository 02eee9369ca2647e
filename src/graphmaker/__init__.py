"""
graphmaker - Tree and DAG diagrams from plain records

A Python library that lays out graphs described as ``id,label,children[,x;y]``
records and routes their connectors as shared orthogonal paths.

Example:
    >>> from graphmaker import GraphMaker
    >>> maker = GraphMaker()
    >>> diagram = maker.load('''
    ...     0,Root,1;2
    ...     1,Foo,3
    ...     2,Bar,3
    ...     3,Buzz,
    ... ''')
    >>> routes = diagram.route()
    >>> print(maker.save(diagram))
"""

from .generator import Diagram, GraphMaker, generate_diagram
from .graph import GraphModel, create_graph
from .layout import (
    AUTO_MODE,
    COLORS,
    EXPLICIT_MODE,
    LayoutResult,
    TreeLayout,
    compute_layout,
    palette_color,
)
from .models import (
    BoxInfo,
    ChannelKey,
    Edge,
    EdgeRoute,
    GraphNode,
    LayoutNode,
    RoutingPlan,
    TrunkAnchor,
)
from .parser import (
    EmptyGraphError,
    ParseError,
    RecordCodec,
    looks_like_records,
    parse_records,
    serialize_records,
    table_to_records,
)
from .router import RoutePlanner, RouteResult, build_routing_plan, route_edges
from .snapping import SNAP_THRESHOLD, snap_position

__version__ = "0.1.0"

__all__ = [
    # Main API
    "GraphMaker",
    "Diagram",
    "generate_diagram",
    # Codec
    "RecordCodec",
    "ParseError",
    "EmptyGraphError",
    "parse_records",
    "serialize_records",
    "table_to_records",
    "looks_like_records",
    # Graph model
    "GraphModel",
    "create_graph",
    # Layout
    "TreeLayout",
    "LayoutResult",
    "compute_layout",
    "palette_color",
    "COLORS",
    "AUTO_MODE",
    "EXPLICIT_MODE",
    # Router
    "RoutePlanner",
    "RouteResult",
    "build_routing_plan",
    "route_edges",
    # Snapping
    "snap_position",
    "SNAP_THRESHOLD",
    # Models
    "GraphNode",
    "LayoutNode",
    "Edge",
    "BoxInfo",
    "ChannelKey",
    "TrunkAnchor",
    "RoutingPlan",
    "EdgeRoute",
]
