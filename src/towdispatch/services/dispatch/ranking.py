"""Ranking and acceptance rules for dispatch candidates."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Iterable, Optional

from ...models.domain import TowTruck


@dataclass(frozen=True, slots=True)
class RankedCandidate:
    truck: TowTruck
    distance: float


def rank_candidates(candidates: Iterable[tuple[TowTruck, float]]) -> list[RankedCandidate]:
    """Order candidates nearest first; equal distances fall back to the lower truck id."""
    ranked = [RankedCandidate(truck=truck, distance=float(distance)) for truck, distance in candidates]
    ranked.sort(key=lambda candidate: (candidate.distance, candidate.truck.id))
    return ranked


def select_nearest(
    candidates: Iterable[tuple[TowTruck, float]],
    max_distance: float,
) -> Optional[RankedCandidate]:
    """Return the nearest candidate, or ``None`` when nobody is within ``max_distance``.

    A candidate exactly at ``max_distance`` is still accepted. Unreachable
    candidates are dropped before the threshold is applied, so they never
    qualify whatever ``max_distance`` is.
    """
    ranked = [c for c in rank_candidates(candidates) if math.isfinite(c.distance)]
    if not ranked or not ranked[0].distance <= max_distance:
        return None
    return ranked[0]
