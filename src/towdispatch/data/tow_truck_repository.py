"""Tow truck fleet store backed by the Supabase ``tow_trucks`` table."""

from __future__ import annotations

from typing import Any, Optional

from ..db.supabase import fetch_all_rows, run_query
from ..errors import NotFoundError, UpstreamFailure
from ..models.domain import TowTruck


def _row_to_tow_truck(row: dict[str, Any]) -> TowTruck:
    try:
        return TowTruck(
            id=int(row["id"]),
            driver_id=int(row["driver_id"]),
            status=str(row["status"]),
            node_id=int(row["node_id"]),
            area_id=int(row["area_id"]),
        )
    except (KeyError, ValueError, TypeError) as exc:
        raise UpstreamFailure(f"Malformed tow truck row {row!r}: {exc}") from exc


class SupabaseTowTruckRepository:
    table = "tow_trucks"
    columns = "id, driver_id, status, node_id, area_id"

    async def get_paginated_tow_trucks(
        self,
        page: int = 0,
        page_size: Optional[int] = None,
        status: Optional[str] = None,
        area_id: Optional[int] = None,
    ) -> list[TowTruck]:
        if page < 0:
            raise ValueError("page must be >= 0")
        if page_size is not None and page_size < 1:
            raise ValueError("page_size must be >= 1, or None to fetch every tow truck")

        def _query(client):
            def build():
                query = client.table(self.table).select(self.columns).order("id")
                if status is not None:
                    query = query.eq("status", status)
                if area_id is not None:
                    query = query.eq("area_id", area_id)
                return query

            if page_size is None:
                return fetch_all_rows(build)
            start = page * page_size
            return build().range(start, start + page_size - 1).execute().data or []

        rows = await run_query(f"list tow trucks (status={status}, area={area_id})", _query)
        return [_row_to_tow_truck(row) for row in rows]

    async def find_tow_truck_by_id(self, truck_id: int) -> Optional[TowTruck]:
        response = await run_query(
            f"load tow truck {truck_id}",
            lambda client: client.table(self.table).select(self.columns).eq("id", truck_id).limit(1).execute(),
        )
        if not response.data:
            return None
        return _row_to_tow_truck(response.data[0])

    async def update_location(self, truck_id: int, node_id: int) -> None:
        await self._update(truck_id, {"node_id": node_id}, f"move tow truck {truck_id} to node {node_id}")

    async def update_status(self, truck_id: int, status: str) -> None:
        await self._update(truck_id, {"status": status}, f"set tow truck {truck_id} status to {status}")

    async def _update(self, truck_id: int, values: dict[str, Any], operation: str) -> None:
        response = await run_query(
            operation,
            lambda client: client.table(self.table).update(values).eq("id", truck_id).execute(),
        )
        if not response.data:
            raise NotFoundError(f"Tow truck {truck_id} not found")
