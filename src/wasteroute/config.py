"""Application configuration and settings management."""

from pathlib import Path
from typing import Any, Optional

import json
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Runtime configuration loaded from environment variables or defaults."""

    model_config = SettingsConfigDict(
        env_prefix="WASTEROUTE_",
        case_sensitive=False,
        env_file=".env",
        env_file_encoding="utf-8",
    )

    app_name: str = "Waste Pickup Routing API"
    api_prefix: str = "/api"
    data_root: Path = Field(default=Path("data"), description="Root directory for persisted run outputs.")
    average_speed_kmh: float = Field(
        default=30.0,
        gt=0.0,
        description="Urban average speed used to turn straight-line distance into travel minutes.",
    )
    default_max_assignments_per_collector: int = Field(default=5, ge=1)
    stats_minutes_per_report: int = Field(
        default=20,
        ge=0,
        description="Flat per-report estimate used for dashboard remaining-time figures.",
    )
    nearby_radius_km: float = Field(default=5.0, gt=0.0)
    dashboard_report_limit: int = Field(default=10, ge=1)
    local_timezone: str = Field(
        default="UTC",
        description="IANA timezone defining the calendar day for 'completed today' counts.",
    )
    frontend_allowed_origins: tuple[str, ...] = Field(
        default=(
            "http://localhost:3000",
            "http://127.0.0.1:3000",
            "http://localhost:5173",
            "http://127.0.0.1:5173",
        ),
        description="Permitted web origins for browser clients (CORS).",
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
    reports_table: str = "reports"
    collectors_table: str = "collectors"

    @field_validator("data_root", mode="before")
    @classmethod
    def _expand_path(cls, value: Any) -> Path:
        path_value = value if isinstance(value, Path) else Path(str(value))
        return path_value.expanduser().resolve()

    @field_validator("frontend_allowed_origins", mode="before")
    @classmethod
    def _split_origins(cls, value: Any) -> tuple[str, ...]:
        """Accept a JSON array or a comma-separated string for the CORS origins."""
        if isinstance(value, (tuple, list)):
            return tuple(str(origin) for origin in value)
        if not isinstance(value, str) or not value.strip():
            return tuple()
        text = value.strip()
        if text.startswith("["):
            return tuple(str(origin) for origin in json.loads(text))
        return tuple(origin.strip() for origin in text.split(",") if origin.strip())


settings = Settings()
