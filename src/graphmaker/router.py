"""
Edge routing module for diagram layout.

Routes every edge as an orthogonal path from the bottom of its source box to
the top of its target box, with:
- Shared horizontal channels: all edges between the same pair of layer
  boundaries cross over at the same Y
- Shared vertical trunks: edges converging on one target merge into a single
  stem above it
- Target coloring: each connector takes the color of the node it points into
"""

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence

from .models import (
    BoxInfo,
    ChannelKey,
    Edge,
    EdgeRoute,
    LayoutNode,
    Point,
    RoutingPlan,
    TrunkAnchor,
    round_half_up,
)

logger = logging.getLogger(__name__)

# Ends closer than this on the x axis are treated as aligned
ALIGN_TOLERANCE = 1


@dataclass
class RouteResult:
    """Routes for one layout pass plus the plan they were computed from."""

    plan: RoutingPlan
    routes: List[EdgeRoute] = field(default_factory=list)
    unresolved: List[Edge] = field(default_factory=list)

    def route_for(self, edge_id: str) -> Optional[EdgeRoute]:
        for route in self.routes:
            if route.edge.id == edge_id:
                return route
        return None


def build_routing_plan(
    nodes: Sequence[LayoutNode], edges: Sequence[Edge]
) -> RoutingPlan:
    """
    Compute the shared routing geometry for the current node positions.

    Channels are keyed by the rounded bottom Y of the source and top Y of the
    target; the channel sits halfway between the two. A trunk is created for
    each positioned target that receives more than one edge from a positioned
    source. Its Y is halfway between the highest source bottom and the
    target's top.

    Args:
        nodes: Current nodes.
        edges: Current edges.

    Returns:
        A new RoutingPlan.
    """
    node_map = {}
    for node in nodes:
        node_map.setdefault(node.id, node)

    channels: Dict[ChannelKey, float] = {}
    sources_by_target: Dict[str, List[float]] = {}

    for edge in edges:
        source = node_map.get(edge.source)
        if source is None:
            continue

        sources_by_target.setdefault(edge.target, []).append(source.bottom_y)

        target = node_map.get(edge.target)
        if target is None:
            continue

        key = ChannelKey(round_half_up(source.bottom_y), round_half_up(target.y))
        if key not in channels:
            channels[key] = (key.source_y + key.target_y) / 2

    trunks: Dict[str, TrunkAnchor] = {}
    for target_id, source_bottoms in sources_by_target.items():
        if len(source_bottoms) < 2:
            continue
        target = node_map.get(target_id)
        if target is None:
            continue
        trunks[target_id] = TrunkAnchor(
            x=target.center_x, y=(min(source_bottoms) + target.y) / 2
        )

    return RoutingPlan(
        boxes=tuple(
            BoxInfo(id=n.id, x=n.x, y=n.y, width=n.width, height=n.height)
            for n in nodes
        ),
        channels=channels,
        trunks=trunks,
        colors={node.id: node.color for node in node_map.values()},
    )


class RoutePlanner:
    """
    Routes edges between node boxes using orthogonal paths.

    By default every edge leaves from the bottom center of its source. With
    ``spread_source_ports`` the edges leave from evenly spaced points along
    the bottom side, one per child, in children order.
    """

    def __init__(self, spread_source_ports: bool = False):
        self.spread_source_ports = spread_source_ports

    def route(self, nodes: Sequence[LayoutNode], edges: Sequence[Edge]) -> RouteResult:
        """
        Route all edges against the given node positions.

        Nothing is cached between calls; the plan is rebuilt every time.

        Args:
            nodes: Current nodes.
            edges: Current edges.

        Returns:
            RouteResult with one route per edge whose ends are both known,
            in edge order. Other edges are listed in ``unresolved``.
        """
        plan = build_routing_plan(nodes, edges)
        node_map = {}
        for node in nodes:
            node_map.setdefault(node.id, node)

        result = RouteResult(plan=plan)
        for edge in edges:
            source = node_map.get(edge.source)
            target = node_map.get(edge.target)
            if source is None or target is None:
                logger.debug("Edge %s has no position, not routed", edge.id)
                result.unresolved.append(edge)
                continue

            start = (self._source_port_x(source, edge.target), source.bottom_y)
            end = (target.center_x, target.y)
            route = self._route_edge(edge, start, end, plan)
            route.color = plan.colors.get(edge.target) or edge.color
            result.routes.append(route)

        return result

    def _source_port_x(self, source: LayoutNode, target_id: str) -> float:
        if not self.spread_source_ports or target_id not in source.children:
            return source.center_x
        index = source.children.index(target_id)
        slots = len(source.children) + 1
        return source.x + source.width * (index + 1) / slots

    def _route_edge(
        self, edge: Edge, start: Point, end: Point, plan: RoutingPlan
    ) -> EdgeRoute:
        start_x, start_y = start
        end_x, end_y = end

        # Vertically aligned: one straight segment
        if abs(start_x - end_x) < ALIGN_TOLERANCE:
            return EdgeRoute(edge=edge, waypoints=[start, end])

        channel_y = plan.channel_for(start_y, end_y)
        if channel_y is None:
            channel_y = (start_y + end_y) / 2

        trunk = plan.trunks.get(edge.target)
        if trunk is not None and abs(trunk.x - end_x) < ALIGN_TOLERANCE:
            return EdgeRoute(
                edge=edge,
                waypoints=[
                    start,
                    (start_x, channel_y),
                    (trunk.x, channel_y),
                    (trunk.x, end_y),
                ],
                channel_y=channel_y,
                via_trunk=True,
            )

        return EdgeRoute(
            edge=edge,
            waypoints=[start, (start_x, channel_y), (end_x, channel_y), end],
            channel_y=channel_y,
        )


def route_edges(
    nodes: Sequence[LayoutNode],
    edges: Sequence[Edge],
    spread_source_ports: bool = False,
) -> RouteResult:
    """
    Convenience function to route edges.

    Args:
        nodes: Current nodes.
        edges: Current edges.
        spread_source_ports: Spread edge starts along the source's bottom side.

    Returns:
        RouteResult
    """
    return RoutePlanner(spread_source_ports=spread_source_ports).route(nodes, edges)
