"""Order lookups backed by the Supabase ``orders`` table."""

from __future__ import annotations

from typing import Any

from ..db.supabase import run_query
from ..errors import NotFoundError, UpstreamFailure
from ..models.domain import Order


def _row_to_order(row: dict[str, Any]) -> Order:
    try:
        return Order(
            id=int(row["id"]),
            node_id=int(row["node_id"]),
            status=str(row.get("status") or "pending"),
            area_id=int(row["area_id"]) if row.get("area_id") is not None else None,
            client_id=int(row["client_id"]) if row.get("client_id") is not None else None,
            tow_truck_id=int(row["tow_truck_id"]) if row.get("tow_truck_id") is not None else None,
        )
    except (KeyError, ValueError, TypeError) as exc:
        raise UpstreamFailure(f"Malformed order row {row!r}: {exc}") from exc


class SupabaseOrderRepository:
    table = "orders"

    async def find_order_by_id(self, order_id: int) -> Order:
        response = await run_query(
            f"load order {order_id}",
            lambda client: client.table(self.table).select("*").eq("id", order_id).limit(1).execute(),
        )
        if not response.data:
            raise NotFoundError(f"Order {order_id} not found")
        return _row_to_order(response.data[0])
