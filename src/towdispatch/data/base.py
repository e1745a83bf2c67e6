"""Capability contracts the dispatch service depends on.

Concrete stores (Supabase tables in production, in-memory fakes in tests)
only need to provide these coroutines; the service never imports a concrete
repository type.
"""

from __future__ import annotations

from typing import Optional, Protocol, Sequence

from ..models.domain import Edge, Node, Order, TowTruck


class OrderRepository(Protocol):
    async def find_order_by_id(self, order_id: int) -> Order:
        """Return the order or raise ``NotFoundError``."""
        ...


class MapRepository(Protocol):
    async def get_area_id_by_node_id(self, node_id: int) -> int:
        """Return the area containing ``node_id`` or raise ``NotFoundError``."""
        ...

    async def get_all_nodes(self, area_id: Optional[int] = None) -> Sequence[Node]:
        ...

    async def get_all_edges(self, area_id: Optional[int] = None) -> Sequence[Edge]:
        ...


class TowTruckRepository(Protocol):
    async def get_paginated_tow_trucks(
        self,
        page: int = 0,
        page_size: Optional[int] = None,
        status: Optional[str] = None,
        area_id: Optional[int] = None,
    ) -> Sequence[TowTruck]:
        """List tow trucks ordered by id.

        ``page_size=None`` disables pagination and returns every matching truck.
        """
        ...

    async def find_tow_truck_by_id(self, truck_id: int) -> Optional[TowTruck]:
        ...

    async def update_location(self, truck_id: int, node_id: int) -> None:
        ...

    async def update_status(self, truck_id: int, status: str) -> None:
        ...
