"""Tow truck DTO schemas returned by the dispatch service."""

from __future__ import annotations

from pydantic import BaseModel, Field

from ..models.domain import TowTruck


class TowTruckDto(BaseModel):
    id: int
    driver_id: int
    status: str
    node_id: int
    area_id: int

    @classmethod
    def from_entity(cls, truck: TowTruck) -> "TowTruckDto":
        return cls(
            id=truck.id,
            driver_id=truck.driver_id,
            status=truck.status,
            node_id=truck.node_id,
            area_id=truck.area_id,
        )


class VehicleMatch(TowTruckDto):
    """The tow truck selected for an order together with its road distance to the order."""

    order_id: int
    distance: float = Field(..., ge=0, description="Shortest-path distance from the truck to the order node.")

    @classmethod
    def from_candidate(cls, truck: TowTruck, distance: float, order_id: int) -> "VehicleMatch":
        return cls(
            id=truck.id,
            driver_id=truck.driver_id,
            status=truck.status,
            node_id=truck.node_id,
            area_id=truck.area_id,
            order_id=order_id,
            distance=distance,
        )
