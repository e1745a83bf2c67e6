"""Dispatch pipeline: ranking policy and the orchestrating service."""

from .policy import DispatchPolicy, default_dispatch_policy
from .ranking import RankedCandidate, rank_candidates, select_nearest
from .service import DispatchService, create_dispatch_service

__all__ = [
    "DispatchPolicy",
    "default_dispatch_policy",
    "RankedCandidate",
    "rank_candidates",
    "select_nearest",
    "DispatchService",
    "create_dispatch_service",
]
