"""Error taxonomy shared by repositories and the dispatch service."""

from __future__ import annotations

from typing import Optional


class AppError(Exception):
    """Base error carrying a machine-readable code and the dispatch stage that failed."""

    code = "app_error"

    def __init__(self, message: str, *, code: Optional[str] = None, stage: Optional[str] = None) -> None:
        super().__init__(message)
        self.message = message
        self.code = code or self.code
        self.stage = stage

    def __str__(self) -> str:
        if self.stage:
            return f"[{self.stage}] {self.message}"
        return self.message


class NotFoundError(AppError):
    """Raised when an order, tow truck or area-for-node lookup has no result."""

    code = "not_found"


class UpstreamFailure(AppError):
    """Raised when a repository call fails, times out or returns malformed data."""

    code = "upstream_failure"


class GraphInconsistencyError(AppError):
    """Raised when an edge references a node missing from the area's node set."""

    code = "graph_inconsistency"
