"""
Snapping for interactive node moves.

While a node is being dragged, each proposed position is pulled onto the x or
y coordinate of any other node that lies within SNAP_THRESHOLD on that axis.
"""

from typing import Iterable

from .models import LayoutNode, Point

SNAP_THRESHOLD = 15


def snap_position(
    moving_id: str,
    candidate: Point,
    nodes: Iterable[LayoutNode],
    threshold: float = SNAP_THRESHOLD,
) -> Point:
    """
    Adjust a proposed position so it lines up with nearby nodes.

    The axes snap independently. Nodes are checked in the order given and
    each check uses the coordinate as already adjusted, so when several nodes
    qualify on the same axis the last one in that order wins; there is no
    nearest-first ranking.

    Args:
        moving_id: Id of the node being moved; it is never a snap target.
        candidate: Proposed (x, y) of the node's top-left corner.
        nodes: Current nodes, in a fixed order.
        threshold: Distance below which a coordinate snaps (strictly less).

    Returns:
        The adjusted (x, y).
    """
    x, y = candidate

    for node in nodes:
        if node.id == moving_id:
            continue

        if abs(node.x - x) < threshold:
            x = node.x

        if abs(node.y - y) < threshold:
            y = node.y

    return (x, y)
