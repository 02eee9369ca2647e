"""
Graph module for diagram layout.

Builds an id lookup over parsed records and derives the structure the layout
engine needs: roots, back edges and per-node depth.

Uses networkx for:
- Adjacency between known nodes
- Topological ordering for longest-path depth assignment
"""

import logging
from typing import Dict, List, Optional, Sequence, Set, Tuple

import networkx as nx

from .models import GraphNode

logger = logging.getLogger(__name__)


class GraphModel:
    """
    Directed graph over parsed records.

    Node ids are expected to be unique. When they are not, the first record
    with a given id wins. Later records with that id are dropped from the
    model along with their children, so a diagram saved from it loses them.

    Child references to ids that are not in the graph are kept on the nodes but
    are left out of the adjacency, so they never get a depth or a position.
    """

    def __init__(self, nodes: Sequence[GraphNode]):
        self.nodes: List[GraphNode] = []
        self.node_map: Dict[str, GraphNode] = {}

        for node in nodes:
            if node.id in self.node_map:
                logger.warning("Duplicate node id %r ignored", node.id)
                continue
            self.node_map[node.id] = node
            self.nodes.append(node)

        self.graph = nx.DiGraph()
        self.graph.add_nodes_from(node.id for node in self.nodes)
        # (source, target) pairs in record order, duplicates included
        self.edges: List[Tuple[str, str]] = []
        for node in self.nodes:
            for child_id in node.children:
                self.edges.append((node.id, child_id))
                if child_id in self.node_map:
                    self.graph.add_edge(node.id, child_id)

        self._back_edges: Optional[Set[Tuple[str, str]]] = None
        self._depths: Optional[Dict[str, int]] = None

    def __len__(self) -> int:
        return len(self.nodes)

    def __contains__(self, node_id: str) -> bool:
        return node_id in self.node_map

    def get_node(self, node_id: str) -> Optional[GraphNode]:
        return self.node_map.get(node_id)

    def get_successors(self, node_id: str) -> List[str]:
        """Get the known children of a node, without duplicates."""
        if node_id not in self.graph:
            return []
        return list(self.graph.successors(node_id))

    def get_predecessors(self, node_id: str) -> List[str]:
        """Get the known parents of a node, without duplicates."""
        if node_id not in self.graph:
            return []
        return list(self.graph.predecessors(node_id))

    def incoming_count(self, node_id: str) -> int:
        """Number of child references pointing at ``node_id``, duplicates counted."""
        return sum(1 for source, target in self.edges if target == node_id)

    def dangling_references(self) -> List[Tuple[str, str]]:
        """Return (source, child id) pairs whose child is not a known node."""
        return [(s, t) for s, t in self.edges if t not in self.node_map]

    def roots(self) -> List[str]:
        """
        Get ids that never appear in any children list, in input order.

        Empty when every node is referenced, e.g. a pure cycle.
        """
        referenced = {child for node in self.nodes for child in node.children}
        return [node.id for node in self.nodes if node.id not in referenced]

    def has_cycles(self) -> bool:
        return not nx.is_directed_acyclic_graph(self.graph)

    def back_edges(self) -> Set[Tuple[str, str]]:
        """
        Find the edges that close a cycle.

        DFS starts from the roots, then from any node not yet visited, both in
        input order, so the result is deterministic.
        """
        if self._back_edges is not None:
            return self._back_edges

        back_edges: Set[Tuple[str, str]] = set()
        visited: Set[str] = set()
        on_stack: Set[str] = set()

        # Iterative DFS so deep chains do not hit the recursion limit
        def dfs(start: str) -> None:
            visited.add(start)
            on_stack.add(start)
            stack = [(start, iter(self.get_successors(start)))]
            while stack:
                node, successors = stack[-1]
                advanced = False
                for successor in successors:
                    if successor not in visited:
                        visited.add(successor)
                        on_stack.add(successor)
                        stack.append((successor, iter(self.get_successors(successor))))
                        advanced = True
                        break
                    if successor in on_stack:
                        back_edges.add((node, successor))
                if not advanced:
                    on_stack.discard(node)
                    stack.pop()

        for root in self.roots():
            if root not in visited:
                dfs(root)

        for node in self.nodes:
            if node.id not in visited:
                dfs(node.id)

        self._back_edges = back_edges
        return back_edges

    def depths(self) -> Dict[str, int]:
        """
        Assign a depth to every node.

        Roots sit at depth 0. A node reachable along several paths takes the
        longest one, so it sits below all of its parents. Back edges are
        ignored, which keeps cyclic input finite. Nodes that are not reachable
        from any root start their own branch at depth 0.

        Returns:
            Mapping of node id to depth, in input order.
        """
        if self._depths is not None:
            return self._depths

        working_graph = self.graph.copy()
        working_graph.remove_edges_from(self.back_edges())

        node_depth: Dict[str, int] = {}

        for node_id in nx.topological_sort(working_graph):
            predecessors = list(working_graph.predecessors(node_id))
            if not predecessors:
                node_depth[node_id] = 0
            else:
                node_depth[node_id] = (
                    max(node_depth.get(p, 0) for p in predecessors) + 1
                )

        self._depths = {node.id: node_depth.get(node.id, 0) for node in self.nodes}
        return self._depths

    def max_depth(self) -> int:
        depths = self.depths()
        return max(depths.values()) if depths else 0


def create_graph(nodes: Sequence[GraphNode]) -> GraphModel:
    """
    Create a GraphModel from parsed records.

    Args:
        nodes: Parsed GraphNode objects in input order.

    Returns:
        GraphModel object
    """
    return GraphModel(nodes)
