"""Tow truck dispatch orchestration service."""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Awaitable, Optional, Sequence, TypeVar

from ...data.base import MapRepository, OrderRepository, TowTruckRepository
from ...data.map_repository import SupabaseMapRepository
from ...data.order_repository import SupabaseOrderRepository
from ...data.tow_truck_repository import SupabaseTowTruckRepository
from ...errors import AppError, GraphInconsistencyError, UpstreamFailure
from ...models.domain import Edge, Node, Order, TowTruck, TowTruckStatus
from ...schemas.tow_truck import TowTruckDto, VehicleMatch
from ..routing.graph import Graph
from ..routing.shortest_path import UNREACHABLE
from .policy import DispatchPolicy, default_dispatch_policy
from .ranking import select_nearest

logger = logging.getLogger(__name__)

T = TypeVar("T")


class DispatchService:
    """
    Matches orders to the nearest available tow truck in the order's area.

    One call to :meth:`find_nearest_available_vehicle` resolves the order and
    its area, fetches the area's available trucks, nodes and edges
    concurrently, builds a private :class:`Graph` from the fetched snapshot,
    and ranks the trucks by shortest-path distance to the order.
    """

    def __init__(
        self,
        tow_truck_repository: TowTruckRepository,
        order_repository: OrderRepository,
        map_repository: MapRepository,
        policy: Optional[DispatchPolicy] = None,
    ) -> None:
        self.tow_truck_repository = tow_truck_repository
        self.order_repository = order_repository
        self.map_repository = map_repository
        self.policy = policy or default_dispatch_policy()
        self.policy.validate()

    async def get_tow_truck_by_id(self, truck_id: int) -> Optional[TowTruckDto]:
        tow_truck = await self.tow_truck_repository.find_tow_truck_by_id(truck_id)
        return TowTruckDto.from_entity(tow_truck) if tow_truck else None

    async def get_all_tow_trucks(
        self,
        page: int = 0,
        page_size: Optional[int] = None,
        status: Optional[str] = None,
        area_id: Optional[int] = None,
    ) -> list[TowTruckDto]:
        tow_trucks = await self.tow_truck_repository.get_paginated_tow_trucks(page, page_size, status, area_id)
        return [TowTruckDto.from_entity(truck) for truck in tow_trucks]

    async def update_location(self, truck_id: int, node_id: int) -> None:
        await self.tow_truck_repository.update_location(truck_id, node_id)

    async def update_status(self, truck_id: int, status: str | TowTruckStatus) -> None:
        status_value = TowTruckStatus(status).value
        await self.tow_truck_repository.update_status(truck_id, status_value)

    async def find_nearest_available_vehicle(self, order_id: int) -> Optional[VehicleMatch]:
        """Return the nearest available tow truck for ``order_id``.

        Returns ``None`` when the area has no available truck within
        ``policy.max_dispatch_distance``. Raises ``NotFoundError`` when the
        order or its area cannot be resolved and ``UpstreamFailure`` when any
        fetch fails or times out.
        """
        context = {"order_id": order_id}

        order = await self._run_stage(
            "resolve_order", self.order_repository.find_order_by_id(order_id), context
        )
        area_id = await self._run_stage(
            "resolve_area", self.map_repository.get_area_id_by_node_id(order.node_id), context
        )
        context["area_id"] = area_id

        tow_trucks, nodes, edges = await self._fetch_area_snapshot(area_id, context)
        graph = self._build_graph(nodes, edges, context)

        candidates = self._calculate_distances(graph, order, tow_trucks, area_id)
        best = select_nearest(candidates, self.policy.max_dispatch_distance)
        if best is None:
            logger.warning(
                f"No available tow trucks found within distance {self.policy.max_dispatch_distance} "
                f"for order {order_id}",
                extra={**context, "candidates": len(candidates)},
            )
            return None

        logger.info(
            f"Selected tow truck {best.truck.id} for order {order_id} at distance {best.distance}",
            extra={**context, "truck_id": best.truck.id, "distance": best.distance, "candidates": len(candidates)},
        )
        return VehicleMatch.from_candidate(best.truck, best.distance, order.id)

    async def _fetch_area_snapshot(
        self, area_id: int, context: dict[str, Any]
    ) -> tuple[Sequence[TowTruck], Sequence[Node], Sequence[Edge]]:
        """Fetch candidates, nodes and edges concurrently; all three or nothing."""
        tasks = [
            asyncio.create_task(
                self._run_stage(
                    "fetch_candidates",
                    self.tow_truck_repository.get_paginated_tow_trucks(
                        0, None, self.policy.available_status, area_id
                    ),
                    context,
                )
            ),
            asyncio.create_task(
                self._run_stage("fetch_nodes", self.map_repository.get_all_nodes(area_id), context)
            ),
            asyncio.create_task(
                self._run_stage("fetch_edges", self.map_repository.get_all_edges(area_id), context)
            ),
        ]
        timeout = self.policy.fetch_timeout_seconds
        try:
            gathered = asyncio.gather(*tasks)
            if timeout is None:
                tow_trucks, nodes, edges = await gathered
            else:
                tow_trucks, nodes, edges = await asyncio.wait_for(gathered, timeout)
        except asyncio.TimeoutError:
            logger.error(
                f"Timed out after {timeout}s fetching tow trucks and road network for area {area_id}",
                extra={**context, "stage": "fetch_network"},
            )
            raise UpstreamFailure(
                f"Timed out after {timeout}s fetching tow trucks and road network for area {area_id}",
                stage="fetch_network",
            ) from None
        finally:
            for task in tasks:
                if not task.done():
                    task.cancel()
        return tow_trucks, nodes, edges

    def _build_graph(self, nodes: Sequence[Node], edges: Sequence[Edge], context: dict[str, Any]) -> Graph:
        try:
            graph = Graph.from_network(nodes, edges, strict=self.policy.strict_graph)
        except AppError as exc:
            exc.stage = exc.stage or "build_graph"
            logger.error(f"Failed to build road graph: {exc}", extra={**context, "stage": "build_graph"})
            raise
        except ValueError as exc:
            logger.error(f"Failed to build road graph: {exc}", extra={**context, "stage": "build_graph"})
            raise GraphInconsistencyError(str(exc), stage="build_graph") from exc
        logger.debug(
            f"Built graph with {graph.node_count} nodes and {graph.edge_count} edges",
            extra={**context, "stage": "build_graph"},
        )
        return graph

    @staticmethod
    def _calculate_distances(
        graph: Graph, order: Order, tow_trucks: Sequence[TowTruck], area_id: int
    ) -> list[tuple[TowTruck, float]]:
        # Edges are undirected, so one search from the order covers every truck.
        distances = graph.distances_from(order.node_id)
        candidates: list[tuple[TowTruck, float]] = []
        for truck in tow_trucks:
            if truck.area_id != area_id:
                logger.debug(f"Ignoring tow truck {truck.id} outside area {area_id}")
                continue
            candidates.append((truck, distances.get(truck.node_id, UNREACHABLE)))
        return candidates

    @staticmethod
    async def _run_stage(stage: str, awaitable: Awaitable[T], context: dict[str, Any]) -> T:
        """Await one collaborator call, tagging any failure with ``stage``."""
        try:
            return await awaitable
        except AppError as exc:
            exc.stage = exc.stage or stage
            logger.warning(f"Dispatch stage '{stage}' failed: {exc.message}", extra={**context, "stage": stage})
            raise
        except Exception as exc:
            logger.error(f"Dispatch stage '{stage}' failed: {exc}", extra={**context, "stage": stage})
            raise UpstreamFailure(f"{type(exc).__name__}: {exc}", stage=stage) from exc


def create_dispatch_service(policy: Optional[DispatchPolicy] = None) -> DispatchService:
    """Wire the service to the Supabase-backed repositories."""
    return DispatchService(
        tow_truck_repository=SupabaseTowTruckRepository(),
        order_repository=SupabaseOrderRepository(),
        map_repository=SupabaseMapRepository(),
        policy=policy,
    )
