"""Stitch request options."""

from pathlib import Path
from typing import Any, Optional

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from ..config import get_config
from ..errors import ConfigurationError
from .geometry import RowPolicy

# camelCase spellings accepted in request dicts and YAML files
OPTION_ALIASES = {
    "getTile": "get_tile",
    "tileSize": "tile_size",
    "maxConcurrency": "max_concurrency",
    "rowPolicy": "row_policy",
}


class CenterPoint(BaseModel):
    """Map center as longitude/latitude, optionally with unscaled pixel size."""

    x: float = Field(..., description="Longitude")
    y: float = Field(..., description="Latitude")
    width: Optional[float] = Field(default=None, gt=0, description="Unscaled output width")
    height: Optional[float] = Field(default=None, gt=0, description="Unscaled output height")


class OutputSize(BaseModel):
    """Unscaled output size in pixels."""

    width: float = Field(..., gt=0)
    height: float = Field(..., gt=0)


class StitchOptions(BaseModel):
    """Validated options for one stitched map image."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    zoom: int = Field(default=0, ge=0, description="Tile zoom level")
    scale: float = Field(default=1.0, gt=0, description="Pixel density multiplier")
    tile_size: int = Field(default=256, gt=0, description="Unscaled tile size in pixels")
    format: str = Field(default="png", description="Output format")
    quality: Optional[int] = Field(default=None, description="Encoder quality")
    limit: int = Field(default=19008, gt=0, description="Exclusive upper bound on width/height")
    center: Optional[CenterPoint] = Field(default=None, description="Center point mode")
    bbox: Optional[tuple[float, float, float, float]] = Field(
        default=None,
        description="Bounding box mode as (west, south, east, north)",
    )
    dimensions: Optional[OutputSize] = Field(default=None, description="Output size for center mode")
    get_tile: Any = Field(default=None, exclude=True, description="Tile source")
    max_concurrency: Optional[int] = Field(default=None, ge=1, description="Cap on in-flight fetches")
    row_policy: RowPolicy = Field(default=RowPolicy.CLAMP, description="Out-of-world row handling")

    @classmethod
    def resolve(
        cls,
        options: Optional[dict] = None,
        require_tile_source: bool = True,
        **overrides: Any,
    ) -> "StitchOptions":
        """
        Validate raw request options and fill in defaults.

        Unset or falsy values (``zoom=0``, ``scale=0``, ``quality=0``...) take
        the configured default.

        Raises:
            ConfigurationError: missing tile source, missing or conflicting
                coordinates, or invalid option values
        """
        data = {OPTION_ALIASES.get(key, key): value for key, value in (options or {}).items()}
        data.update({OPTION_ALIASES.get(key, key): value for key, value in overrides.items()})

        if require_tile_source and not data.get("get_tile"):
            raise ConfigurationError("Invalid function for getting tiles")
        if not data.get("center") and not data.get("bbox"):
            raise ConfigurationError("No coordinates provided.")
        if data.get("center") and data.get("bbox"):
            raise ConfigurationError("Provide either a center or a bbox, not both.")

        config = get_config()
        defaults = {
            "zoom": config.default_zoom,
            "scale": config.default_scale,
            "tile_size": config.default_tile_size,
            "format": config.default_format,
            "quality": config.default_quality,
            "limit": config.size_limit,
            "max_concurrency": config.max_concurrency,
            "row_policy": config.row_policy,
        }
        for key, default in defaults.items():
            if not data.get(key):
                data[key] = default

        try:
            resolved = cls(**data)
        except ValidationError as exc:
            raise ConfigurationError(f"Invalid stitch options: {exc}") from exc

        if resolved.center is not None and resolved.output_size is None:
            raise ConfigurationError("Output dimensions are required with a center point.")

        return resolved

    @classmethod
    def from_yaml(cls, path: Path, require_tile_source: bool = True, **overrides: Any) -> "StitchOptions":
        """Load request options from a YAML file, applying ``overrides`` on top."""
        with open(path) as f:
            data = yaml.safe_load(f) or {}

        if not isinstance(data, dict):
            raise ConfigurationError(f"Request file must contain a mapping: {path}")

        overrides = {key: value for key, value in overrides.items() if value is not None}
        return cls.resolve(data, require_tile_source=require_tile_source, **overrides)

    @property
    def output_size(self) -> Optional[tuple[float, float]]:
        """Unscaled (width, height) for center mode."""
        if self.dimensions is not None:
            return (self.dimensions.width, self.dimensions.height)
        if self.center is not None and self.center.width and self.center.height:
            return (self.center.width, self.center.height)
        return None

    @property
    def lnglat(self) -> Optional[tuple[float, float]]:
        if self.center is None:
            return None
        return (self.center.x, self.center.y)
