"""Configuration management for map stitching."""

import os
from typing import Optional

from pydantic import BaseModel, Field


def _env_int(name: str) -> Optional[int]:
    value = os.environ.get(name)
    return int(value) if value else None


def _env_float(name: str) -> Optional[float]:
    value = os.environ.get(name)
    return float(value) if value else None


class AppConfig(BaseModel):
    """Application-level configuration."""

    # Request defaults
    default_zoom: int = Field(default=0, ge=0, description="Default zoom level")
    default_scale: float = Field(default=1.0, gt=0, description="Default pixel density multiplier")
    default_tile_size: int = Field(default=256, gt=0, description="Default unscaled tile size")
    default_format: str = Field(default="png", description="Default output format")
    default_quality: Optional[int] = Field(default=None, description="Default encoder quality")
    size_limit: int = Field(
        default=19008,
        gt=0,
        description="Output width/height must stay strictly below this",
    )
    row_policy: str = Field(
        default="clamp",
        pattern="^(clamp|skip)$",
        description="Rows outside the world: repeat edge row (clamp) or leave out (skip)",
    )

    # Fetching
    max_concurrency: Optional[int] = Field(
        default=None,
        ge=1,
        description="Cap on simultaneous tile fetches (unbounded when unset)",
    )
    request_timeout: float = Field(default=30.0, gt=0, description="HTTP timeout in seconds")
    user_agent: str = Field(default="mapstitch/0.1.0", description="User-Agent for tile requests")
    tile_url: Optional[str] = Field(
        default=None,
        description="Default tile URL template with {z}, {x}, {y} placeholders",
    )

    @classmethod
    def load(cls) -> "AppConfig":
        """Load configuration from environment and defaults."""
        overrides = {
            "size_limit": _env_int("MAPSTITCH_SIZE_LIMIT"),
            "max_concurrency": _env_int("MAPSTITCH_MAX_CONCURRENCY"),
            "request_timeout": _env_float("MAPSTITCH_TIMEOUT"),
            "tile_url": os.environ.get("MAPSTITCH_TILE_URL"),
            "row_policy": os.environ.get("MAPSTITCH_ROW_POLICY"),
        }
        return cls(**{key: value for key, value in overrides.items() if value is not None})


# Global config instance
_config: Optional[AppConfig] = None


def get_config() -> AppConfig:
    """Get or create global configuration."""
    global _config
    if _config is None:
        _config = AppConfig.load()
    return _config


def reset_config() -> None:
    """Forget the cached configuration so the next call reloads it."""
    global _config
    _config = None
