"""Fetched tile payloads and stitch results."""

from dataclasses import dataclass, field
from typing import Optional


@dataclass
class FetchedTile:
    """Raw encoded tile bytes returned by a tile source."""

    buffer: bytes
    headers: Optional[dict[str, str]] = None
    stats: dict = field(default_factory=dict)

    def __post_init__(self):
        if self.stats is None:
            self.stats = {}

    @property
    def render_time(self) -> float:
        """Render time reported by the source, 0 when absent."""
        return self.stats.get("render") or 0


@dataclass
class PositionedTile:
    """A tile buffer paired with its canvas offset."""

    buffer: bytes
    x: int
    y: int


@dataclass
class CompositeOptions:
    """Target canvas and encoding for the compositor."""

    width: int
    height: int
    format: str = "png"
    quality: Optional[int] = None
    reencode: bool = True


@dataclass
class StitchStats:
    """Aggregate fetch statistics for one request."""

    tiles: int
    render_avg: int

    def to_dict(self) -> dict[str, int]:
        return {"tiles": self.tiles, "renderAvg": self.render_avg}


@dataclass
class StitchResult:
    """Composite image plus its statistics and cache headers."""

    image: bytes
    stats: StitchStats
    headers: dict[str, str] = field(default_factory=dict)
