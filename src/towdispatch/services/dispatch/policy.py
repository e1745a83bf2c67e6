"""
Tunable thresholds for matching tow trucks to orders.

No logic here beyond sanity checks; the defaults come from ``Settings`` so they
can be changed through the environment without touching code.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Optional

from ...config import settings


@dataclass(frozen=True)
class DispatchPolicy:
    # Largest road distance (sum of edge weights) a truck may be sent over.
    # Anything farther, including unreachable trucks, means "no match".
    max_dispatch_distance: float = 10_000_000

    # Bound on the concurrent candidate + road network fetch. None waits forever.
    fetch_timeout_seconds: Optional[float] = 10.0

    # Reject edges that point at nodes outside the area's node list.
    strict_graph: bool = False

    # Fleet status value that makes a truck a candidate.
    available_status: str = "available"

    def validate(self) -> None:
        if not math.isfinite(self.max_dispatch_distance) or self.max_dispatch_distance < 0:
            raise ValueError("max_dispatch_distance must be a finite number >= 0")
        if self.fetch_timeout_seconds is not None and self.fetch_timeout_seconds <= 0:
            raise ValueError("fetch_timeout_seconds must be > 0 or None")
        if not self.available_status:
            raise ValueError("available_status must not be empty")


def default_dispatch_policy() -> DispatchPolicy:
    """Build the policy from the loaded settings."""
    policy = DispatchPolicy(
        max_dispatch_distance=settings.max_dispatch_distance,
        fetch_timeout_seconds=settings.fetch_timeout_seconds,
        strict_graph=settings.strict_graph,
        available_status=settings.available_status,
    )
    policy.validate()
    return policy
