from __future__ import annotations

import asyncio
from types import SimpleNamespace
from typing import Any, Optional

import pytest

from towdispatch.errors import NotFoundError
from towdispatch.models.domain import Edge, Node, Order, TowTruck
from towdispatch.services.dispatch.policy import DispatchPolicy
from towdispatch.services.dispatch.service import DispatchService


def truck(truck_id: int, node_id: int, area_id: int = 1, status: str = "available") -> TowTruck:
    return TowTruck(id=truck_id, driver_id=100 + truck_id, status=status, node_id=node_id, area_id=area_id)


class InMemoryOrderRepository:
    def __init__(self, orders: list[Order]):
        self.orders = {order.id: order for order in orders}

    async def find_order_by_id(self, order_id: int) -> Order:
        if order_id not in self.orders:
            raise NotFoundError(f"Order {order_id} not found")
        return self.orders[order_id]


class InMemoryMapRepository:
    def __init__(self, nodes: list[Node], edges: list[Edge], area_by_node: dict[int, int], delay: float = 0.0):
        self.nodes = nodes
        self.edges = edges
        self.area_by_node = area_by_node
        self.delay = delay
        self.calls: list[str] = []

    async def get_area_id_by_node_id(self, node_id: int) -> int:
        self.calls.append("area")
        if node_id not in self.area_by_node:
            raise NotFoundError(f"No area found for node {node_id}")
        return self.area_by_node[node_id]

    async def get_all_nodes(self, area_id: Optional[int] = None) -> list[Node]:
        self.calls.append("nodes")
        await asyncio.sleep(self.delay)
        return [node for node in self.nodes if area_id is None or self.area_by_node.get(node.id) == area_id]

    async def get_all_edges(self, area_id: Optional[int] = None) -> list[Edge]:
        self.calls.append("edges")
        await asyncio.sleep(self.delay)
        return [edge for edge in self.edges if area_id is None or self.area_by_node.get(edge.node_a_id) == area_id]


class InMemoryTowTruckRepository:
    def __init__(self, tow_trucks: list[TowTruck]):
        self.tow_trucks = {t.id: t for t in tow_trucks}
        self.requests: list[tuple[int, Optional[int], Optional[str], Optional[int]]] = []

    async def get_paginated_tow_trucks(
        self,
        page: int = 0,
        page_size: Optional[int] = None,
        status: Optional[str] = None,
        area_id: Optional[int] = None,
    ) -> list[TowTruck]:
        self.requests.append((page, page_size, status, area_id))
        matching = [
            t
            for t in sorted(self.tow_trucks.values(), key=lambda t: t.id)
            if (status is None or t.status == status) and (area_id is None or t.area_id == area_id)
        ]
        if page_size is None:
            return matching
        return matching[page * page_size:(page + 1) * page_size]

    async def find_tow_truck_by_id(self, truck_id: int) -> Optional[TowTruck]:
        return self.tow_trucks.get(truck_id)

    async def update_location(self, truck_id: int, node_id: int) -> None:
        current = self.tow_trucks[truck_id]
        self.tow_trucks[truck_id] = TowTruck(current.id, current.driver_id, current.status, node_id, current.area_id)

    async def update_status(self, truck_id: int, status: str) -> None:
        current = self.tow_trucks[truck_id]
        self.tow_trucks[truck_id] = TowTruck(current.id, current.driver_id, status, current.node_id, current.area_id)


def build_service(
    *,
    nodes: list[Node],
    edges: list[Edge],
    tow_trucks: list[TowTruck],
    order_node: int,
    area_by_node: Optional[dict[int, int]] = None,
    policy: Optional[DispatchPolicy] = None,
    map_delay: float = 0.0,
) -> DispatchService:
    area_by_node = area_by_node if area_by_node is not None else {node.id: 1 for node in nodes}
    return DispatchService(
        tow_truck_repository=InMemoryTowTruckRepository(tow_trucks),
        order_repository=InMemoryOrderRepository([Order(id=1, node_id=order_node)]),
        map_repository=InMemoryMapRepository(nodes, edges, area_by_node, delay=map_delay),
        policy=policy or DispatchPolicy(),
    )


class FakeQuery:
    """Chainable stand-in for a PostgREST query builder over a list of rows."""

    def __init__(self, client: "FakeSupabaseClient", table: str):
        self.client = client
        self.table = table
        self.filters: list = []
        self.order_by: Optional[str] = None
        self.window: Optional[tuple[int, int]] = None
        self.max_rows: Optional[int] = None
        self.values: Optional[dict[str, Any]] = None

    def select(self, columns: str = "*", **kwargs: Any) -> "FakeQuery":
        return self

    def update(self, values: dict[str, Any]) -> "FakeQuery":
        self.values = values
        return self

    def eq(self, column: str, value: Any) -> "FakeQuery":
        self.filters.append(lambda row: row.get(column) == value)
        return self

    def in_(self, column: str, values: list[Any]) -> "FakeQuery":
        allowed = set(values)
        self.filters.append(lambda row: row.get(column) in allowed)
        return self

    def order(self, column: str, desc: bool = False) -> "FakeQuery":
        self.order_by = column
        return self

    def limit(self, count: int) -> "FakeQuery":
        self.max_rows = count
        return self

    def range(self, start: int, end: int) -> "FakeQuery":
        self.window = (start, end)
        return self

    def execute(self) -> SimpleNamespace:
        self.client.executed.append(self.table)
        if self.table in self.client.failing_tables:
            raise ConnectionError(f"connection reset while reading {self.table}")
        rows = [row for row in self.client.tables.get(self.table, []) if all(f(row) for f in self.filters)]
        if self.values is not None:
            for row in rows:
                row.update(self.values)
            return SimpleNamespace(data=[dict(row) for row in rows])
        if self.order_by:
            rows.sort(key=lambda row: row[self.order_by])
        if self.window:
            rows = rows[self.window[0]:self.window[1] + 1]
        if self.max_rows is not None:
            rows = rows[:self.max_rows]
        return SimpleNamespace(data=[dict(row) for row in rows])


class FakeSupabaseClient:
    def __init__(self, tables: dict[str, list[dict[str, Any]]], failing_tables: tuple[str, ...] = ()):
        self.tables = tables
        self.failing_tables = set(failing_tables)
        self.executed: list[str] = []

    def table(self, name: str) -> FakeQuery:
        return FakeQuery(self, name)


@pytest.fixture
def install_supabase(monkeypatch):
    """Point the repositories at an in-memory Supabase client."""
    from towdispatch.db import supabase as supabase_module

    def _install(client: Optional[FakeSupabaseClient]) -> Optional[FakeSupabaseClient]:
        monkeypatch.setattr(supabase_module, "get_supabase_client", lambda: client)
        return client

    return _install
