"""Dijkstra shortest-path search over a road graph.

All functions here are pure: they read the graph's adjacency and never mutate
it, so several searches may run against the same graph snapshot at once.
"""

from __future__ import annotations

import heapq
import math
from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from .graph import Graph

# Distance reported when no path exists. Compares greater than any finite
# distance, so ranking never needs a special case for it.
UNREACHABLE = math.inf


def shortest_path_lengths(graph: Graph, source: int, target: Optional[int] = None) -> dict[int, float]:
    """Return settled distances from ``source``.

    When ``target`` is given the search stops as soon as it is settled, so the
    result is only guaranteed complete for nodes closer than the target.
    Unknown sources yield an empty mapping.
    """
    if not graph.has_node(source):
        return {}

    settled: dict[int, float] = {}
    tentative: dict[int, float] = {source: 0.0}
    heap: list[tuple[float, int]] = [(0.0, source)]

    while heap:
        distance, node = heapq.heappop(heap)
        if node in settled:
            continue  # stale entry
        settled[node] = distance
        if node == target:
            break
        for neighbour, weight in graph.neighbors(node).items():
            if neighbour in settled:
                continue
            candidate = distance + weight
            if candidate < tentative.get(neighbour, UNREACHABLE):
                tentative[neighbour] = candidate
                heapq.heappush(heap, (candidate, neighbour))

    return settled


def shortest_path(graph: Graph, source: int, destination: int) -> float:
    """Minimum total edge weight between two nodes, or ``UNREACHABLE``."""
    if not graph.has_node(source) or not graph.has_node(destination):
        return UNREACHABLE
    if source == destination:
        return 0.0
    return shortest_path_lengths(graph, source, destination).get(destination, UNREACHABLE)
