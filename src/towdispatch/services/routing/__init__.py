"""Road-network graph and shortest-path search."""

from .graph import Graph
from .shortest_path import UNREACHABLE, shortest_path, shortest_path_lengths

__all__ = ["Graph", "UNREACHABLE", "shortest_path", "shortest_path_lengths"]
