"""Domain models for orders, tow trucks and the road network."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class TowTruckStatus(str, Enum):
    """States a tow truck can report to the fleet store."""

    AVAILABLE = "available"
    BUSY = "busy"


@dataclass(frozen=True, slots=True)
class Node:
    """A point in the road network (intersection, depot, truck or order position)."""

    id: int
    x: Optional[float] = None
    y: Optional[float] = None
    area_id: Optional[int] = None


@dataclass(frozen=True, slots=True)
class Edge:
    """Undirected road segment between two nodes with a non-negative traversal cost."""

    node_a_id: int
    node_b_id: int
    weight: float


@dataclass(frozen=True, slots=True)
class TowTruck:
    """Snapshot of a tow truck as read from the fleet store."""

    id: int
    driver_id: int
    status: str
    node_id: int
    area_id: int

    @property
    def is_available(self) -> bool:
        return self.status == TowTruckStatus.AVAILABLE.value


@dataclass(frozen=True, slots=True)
class Order:
    """A pending tow request located at a road-network node."""

    id: int
    node_id: int
    status: str = "pending"
    area_id: Optional[int] = None
    client_id: Optional[int] = None
    tow_truck_id: Optional[int] = None
