"""Supabase client for the dispatch data stores."""

from __future__ import annotations

import asyncio
import logging
from functools import lru_cache
from typing import Any, Callable

from supabase import Client, create_client

from ..config import settings
from ..errors import AppError, UpstreamFailure

# PostgREST caps a single response at 1000 rows by default.
DEFAULT_PAGE_ROWS = 1000

logger = logging.getLogger(__name__)


@lru_cache()
def get_supabase_client() -> Client | None:
    """Get cached Supabase client instance.

    Returns:
        Supabase Client instance if configured, None otherwise.
        Note: This does not test the connection - actual queries may fail with network errors.
    """
    if not settings.supabase_url or not settings.supabase_key:
        logger.warning("Supabase credentials not configured (missing URL or key)")
        return None

    try:
        return create_client(settings.supabase_url, settings.supabase_key)
    except Exception as e:
        logger.error(f"Failed to create Supabase client: {e}")
        return None


def require_client(operation: str) -> Client:
    client = get_supabase_client()
    if client is None:
        raise UpstreamFailure(
            f"Supabase is not configured; cannot {operation}. "
            "Set TOWDISPATCH_SUPABASE_URL and TOWDISPATCH_SUPABASE_KEY."
        )
    return client


async def run_query(operation: str, query: Callable[[Client], Any]) -> Any:
    """Run a blocking Supabase query in a worker thread.

    ``AppError`` raised by ``query`` passes through untouched; anything else is
    reported as an :class:`UpstreamFailure` naming ``operation``.
    """

    def _execute() -> Any:
        client = require_client(operation)
        return query(client)

    try:
        return await asyncio.to_thread(_execute)
    except AppError:
        raise
    except Exception as exc:
        logger.error(f"Supabase query failed during {operation}: {exc}")
        raise UpstreamFailure(f"Failed to {operation}: {exc}") from exc


def fetch_all_rows(build_query: Callable[[], Any], page_rows: int = DEFAULT_PAGE_ROWS) -> list[dict[str, Any]]:
    """Drain a query page by page with ``range`` until a short page is returned."""
    rows: list[dict[str, Any]] = []
    start = 0
    while True:
        response = build_query().range(start, start + page_rows - 1).execute()
        batch = response.data or []
        rows.extend(batch)
        if len(batch) < page_rows:
            return rows
        start += page_rows
