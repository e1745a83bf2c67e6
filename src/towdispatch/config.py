"""Application configuration and settings management."""

from typing import Any, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Runtime configuration loaded from environment variables or defaults."""

    model_config = SettingsConfigDict(
        env_prefix="TOWDISPATCH_",
        case_sensitive=False,
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    app_name: str = "Tow Truck Dispatch Engine"
    log_level: str = "INFO"

    max_dispatch_distance: float = Field(
        default=10_000_000,
        ge=0,
        allow_inf_nan=False,
        description="Largest shortest-path distance (raw edge weight units) a tow truck may be dispatched over.",
    )
    fetch_timeout_seconds: Optional[float] = Field(
        default=10.0,
        gt=0,
        description="Upper bound on the concurrent fetch of candidates and road network. None disables it.",
    )
    strict_graph: bool = Field(
        default=False,
        description="Reject edges whose endpoints are missing from the area's node list instead of creating them.",
    )
    available_status: str = Field(
        default="available",
        description="Tow truck status value that marks a truck as a dispatch candidate.",
    )

    # Supabase configuration
    supabase_url: Optional[str] = Field(
        default=None,
        description="Supabase project URL (e.g., https://xxx.supabase.co).",
    )
    supabase_key: Optional[str] = Field(
        default=None,
        description="Supabase service role key for backend operations.",
    )

    @field_validator("log_level", mode="before")
    @classmethod
    def _normalize_log_level(cls, value: Any) -> str:
        if value is None or not str(value).strip():
            return "INFO"
        return str(value).strip().upper()

    @field_validator("fetch_timeout_seconds", mode="before")
    @classmethod
    def _parse_optional_timeout(cls, value: Any) -> Any:
        """Treat empty strings and 'none' from the environment as no timeout."""
        if isinstance(value, str) and value.strip().lower() in {"", "none", "null"}:
            return None
        return value


settings = Settings()
