"""Database clients and utilities."""

from .supabase import fetch_all_rows, get_supabase_client, require_client, run_query

__all__ = ["get_supabase_client", "require_client", "run_query", "fetch_all_rows"]
