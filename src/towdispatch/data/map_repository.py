"""Road network lookups backed by the Supabase ``nodes`` and ``edges`` tables."""

from __future__ import annotations

from typing import Any, Optional

from ..db.supabase import fetch_all_rows, run_query
from ..errors import NotFoundError, UpstreamFailure
from ..models.domain import Edge, Node

# Node ids per ``in_`` filter; keeps the PostgREST URL well under its length limit.
EDGE_FILTER_BATCH_SIZE = 200


def _optional_float(value: Any) -> Optional[float]:
    return float(value) if value is not None else None


def _row_to_node(row: dict[str, Any]) -> Node:
    try:
        return Node(
            id=int(row["id"]),
            x=_optional_float(row.get("x")),
            y=_optional_float(row.get("y")),
            area_id=int(row["area_id"]) if row.get("area_id") is not None else None,
        )
    except (KeyError, ValueError, TypeError) as exc:
        raise UpstreamFailure(f"Malformed node row {row!r}: {exc}") from exc


def _row_to_edge(row: dict[str, Any]) -> Edge:
    try:
        return Edge(
            node_a_id=int(row["node_a_id"]),
            node_b_id=int(row["node_b_id"]),
            weight=float(row["weight"]),
        )
    except (KeyError, ValueError, TypeError) as exc:
        raise UpstreamFailure(f"Malformed edge row {row!r}: {exc}") from exc


class SupabaseMapRepository:
    nodes_table = "nodes"
    edges_table = "edges"

    async def get_area_id_by_node_id(self, node_id: int) -> int:
        response = await run_query(
            f"resolve area for node {node_id}",
            lambda client: client.table(self.nodes_table).select("area_id").eq("id", node_id).limit(1).execute(),
        )
        if not response.data or response.data[0].get("area_id") is None:
            raise NotFoundError(f"No area found for node {node_id}")
        return int(response.data[0]["area_id"])

    async def get_all_nodes(self, area_id: Optional[int] = None) -> list[Node]:
        def _query(client):
            def build():
                query = client.table(self.nodes_table).select("id, x, y, area_id").order("id")
                if area_id is not None:
                    query = query.eq("area_id", area_id)
                return query

            return fetch_all_rows(build)

        rows = await run_query(f"load nodes for area {area_id}", _query)
        return [_row_to_node(row) for row in rows]

    async def get_all_edges(self, area_id: Optional[int] = None) -> list[Edge]:
        def _query(client):
            columns = "node_a_id, node_b_id, weight"
            if area_id is None:
                return fetch_all_rows(lambda: client.table(self.edges_table).select(columns).order("id"))

            # Edges carry no area column; an edge belongs to the area of its first endpoint.
            node_ids = [
                row["id"]
                for row in fetch_all_rows(
                    lambda: client.table(self.nodes_table).select("id").eq("area_id", area_id).order("id")
                )
            ]
            rows: list[dict[str, Any]] = []
            for i in range(0, len(node_ids), EDGE_FILTER_BATCH_SIZE):
                batch = node_ids[i:i + EDGE_FILTER_BATCH_SIZE]
                rows.extend(
                    fetch_all_rows(
                        lambda: client.table(self.edges_table).select(columns).in_("node_a_id", batch).order("id")
                    )
                )
            return rows

        rows = await run_query(f"load edges for area {area_id}", _query)
        return [_row_to_edge(row) for row in rows]
