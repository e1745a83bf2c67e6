"""In-memory road network for a single area."""

from __future__ import annotations

import math
from types import MappingProxyType
from typing import Iterable, Mapping

from ...errors import GraphInconsistencyError
from ...models.domain import Edge, Node
from .shortest_path import shortest_path, shortest_path_lengths


class Graph:
    """Weighted undirected graph of road nodes.

    Every edge is traversable in both directions. When several edges join the
    same pair of nodes only the cheapest one is kept in the adjacency map.

    In the default lenient mode an edge whose endpoint has not been added is
    accepted and the endpoint is created as a bare node. With ``strict=True``
    such an edge raises :class:`GraphInconsistencyError` instead, so callers
    must add all nodes before any edge.
    """

    def __init__(self, *, strict: bool = False) -> None:
        self.strict = strict
        self._nodes: dict[int, Node] = {}
        self._adjacency: dict[int, dict[int, float]] = {}
        self._edge_count = 0

    @classmethod
    def from_network(cls, nodes: Iterable[Node], edges: Iterable[Edge], *, strict: bool = False) -> "Graph":
        graph = cls(strict=strict)
        for node in nodes:
            graph.add_node(node)
        for edge in edges:
            graph.add_edge(edge)
        return graph

    def add_node(self, node: Node) -> None:
        """Insert ``node``; re-adding an id replaces its payload and keeps its edges."""
        self._nodes[node.id] = node
        self._adjacency.setdefault(node.id, {})

    def add_edge(self, edge: Edge) -> None:
        weight = float(edge.weight)
        if math.isnan(weight) or math.isinf(weight) or weight < 0:
            raise ValueError(
                f"Edge {edge.node_a_id}-{edge.node_b_id} has invalid weight {edge.weight!r}; "
                "weights must be finite and non-negative."
            )

        for node_id in (edge.node_a_id, edge.node_b_id):
            if node_id not in self._nodes:
                if self.strict:
                    raise GraphInconsistencyError(
                        f"Edge {edge.node_a_id}-{edge.node_b_id} references unknown node {node_id}."
                    )
                self.add_node(Node(id=node_id))

        self._connect(edge.node_a_id, edge.node_b_id, weight)
        self._connect(edge.node_b_id, edge.node_a_id, weight)
        self._edge_count += 1

    def _connect(self, origin: int, target: int, weight: float) -> None:
        neighbours = self._adjacency[origin]
        current = neighbours.get(target)
        if current is None or weight < current:
            neighbours[target] = weight

    def has_node(self, node_id: int) -> bool:
        return node_id in self._nodes

    def get_node(self, node_id: int) -> Node | None:
        return self._nodes.get(node_id)

    def neighbors(self, node_id: int) -> Mapping[int, float]:
        """Read-only view of the cheapest edge weight to each neighbour."""
        return MappingProxyType(self._adjacency.get(node_id, {}))

    @property
    def node_count(self) -> int:
        return len(self._nodes)

    @property
    def edge_count(self) -> int:
        """Number of edges accepted, parallel edges included."""
        return self._edge_count

    def shortest_path(self, source: int, destination: int) -> float:
        return shortest_path(self, source, destination)

    def distances_from(self, source: int) -> dict[int, float]:
        """Distances from ``source`` to every node reachable from it."""
        return shortest_path_lengths(self, source)
