"""Application configuration and settings management."""

from pathlib import Path
from typing import Any, Literal, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Runtime configuration loaded from environment variables or defaults."""

    model_config = SettingsConfigDict(
        env_prefix="DISPATCH_",
        case_sensitive=False,
        env_file=".env",
        env_file_encoding="utf-8",
    )

    app_name: str = "Delivery Dispatch Dashboard"
    api_base_url: str = Field(
        default="http://localhost:8080",
        description="Base URL of the dispatch backend (pathfinding, orders, simulation).",
    )
    request_timeout_seconds: Optional[float] = Field(
        default=None,
        ge=0.0,
        description="Per-request timeout. None waits for the backend indefinitely.",
    )
    grid_width: int = Field(default=20, ge=1)
    grid_height: int = Field(default=20, ge=1)
    cell_size_px: int = Field(default=24, ge=4, description="Pixel size of one grid cell on a surface.")
    poll_interval_ms: int = Field(default=500, ge=10)
    allow_overlapping_ticks: bool = Field(
        default=False,
        description="Start a new simulation tick even if the previous one is still in flight.",
    )
    default_heuristic: str = "MANHATTAN"
    default_strategy: str = "IN_ORDER"
    output_root: Path = Field(default=Path("data"), description="Root directory for rendered snapshots.")
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"

    @field_validator("output_root", mode="before")
    @classmethod
    def _expand_path(cls, value: Any) -> Path:
        path_value = value if isinstance(value, Path) else Path(str(value))
        return path_value.expanduser().resolve()

    @field_validator("api_base_url", mode="before")
    @classmethod
    def _strip_trailing_slash(cls, value: Any) -> str:
        return str(value).strip().rstrip("/")

    @field_validator("log_level", mode="before")
    @classmethod
    def _upper_log_level(cls, value: Any) -> str:
        return str(value).strip().upper()


settings = Settings()
