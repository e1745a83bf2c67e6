"""Repository contracts and their Supabase-backed implementations."""

from .base import MapRepository, OrderRepository, TowTruckRepository
from .map_repository import SupabaseMapRepository
from .order_repository import SupabaseOrderRepository
from .tow_truck_repository import SupabaseTowTruckRepository

__all__ = [
    "OrderRepository",
    "MapRepository",
    "TowTruckRepository",
    "SupabaseOrderRepository",
    "SupabaseMapRepository",
    "SupabaseTowTruckRepository",
]
