"""Bundled tile sources: HTTP tile servers and on-disk tile directories."""

import asyncio
import logging
import time
from email.utils import formatdate
from pathlib import Path
from typing import Optional, Sequence, Union

import httpx

from ..config import get_config
from ..errors import TileFetchError
from ..models.tile import FetchedTile

logger = logging.getLogger(__name__)


class HttpTileSource:
    """Fetches tiles from an XYZ tile server."""

    def __init__(
        self,
        url_template: str,
        subdomains: Sequence[str] = ("a", "b", "c"),
        scale_suffix: str = "",
        timeout: Optional[float] = None,
        headers: Optional[dict[str, str]] = None,
        client: Optional[httpx.AsyncClient] = None,
    ):
        """
        Initialize HTTP tile source.

        Args:
            url_template: URL with {z}, {x}, {y} and optionally {s} and {scale}
            subdomains: Values rotated into {s}
            scale_suffix: Value for {scale}, e.g. "@2x"
            timeout: Request timeout in seconds (config default when omitted)
            headers: Extra request headers
            client: Pre-built client, e.g. one with a mock transport
        """
        if "{z}" not in url_template or "{x}" not in url_template or "{y}" not in url_template:
            raise ValueError("Tile URL template needs {z}, {x} and {y} placeholders")

        config = get_config()
        self.url_template = url_template
        self.subdomains = list(subdomains) or [""]
        self.scale_suffix = scale_suffix

        request_headers = {"User-Agent": config.user_agent}
        request_headers.update(headers or {})

        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(
            timeout=timeout or config.request_timeout,
            headers=request_headers,
            follow_redirects=True,
        )

    def tile_url(self, z: int, x: int, y: int) -> str:
        """Build the URL for one tile."""
        subdomain = self.subdomains[(x + y) % len(self.subdomains)]
        return self.url_template.format(z=z, x=x, y=y, s=subdomain, scale=self.scale_suffix)

    async def fetch(self, z: int, x: int, y: int) -> FetchedTile:
        """
        Download one tile.

        Returns:
            FetchedTile whose stats carry the request time in ms as ``render``

        Raises:
            TileFetchError: transport failure or non-success status
        """
        url = self.tile_url(z, x, y)
        start = time.perf_counter()

        try:
            response = await self._client.get(url)
        except httpx.HTTPError as exc:
            raise TileFetchError(f"Request for tile {z}/{x}/{y} failed: {exc}", z=z, x=x, y=y) from exc

        elapsed_ms = (time.perf_counter() - start) * 1000

        if response.status_code >= 400:
            raise TileFetchError(
                f"Tile {z}/{x}/{y} returned HTTP {response.status_code}",
                z=z,
                x=x,
                y=y,
            )

        logger.debug("Fetched %s in %.1f ms", url, elapsed_ms)
        return FetchedTile(
            buffer=response.content,
            headers=dict(response.headers),
            stats={"render": round(elapsed_ms)},
        )

    async def aclose(self) -> None:
        """Close the HTTP client if this source created it."""
        if self._owns_client:
            await self._client.aclose()

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.aclose()


class DirectoryTileSource:
    """Reads tiles laid out on disk as ``{root}/{z}/{x}/{y}.{extension}``."""

    def __init__(self, root: Union[str, Path], extension: str = "png"):
        self.root = Path(root)
        self.extension = extension.lstrip(".")

    def tile_path(self, z: int, x: int, y: int) -> Path:
        return self.root / str(z) / str(x) / f"{y}.{self.extension}"

    @staticmethod
    def _read(path: Path) -> Optional[tuple[bytes, float]]:
        """Tile bytes and modification time, or None when the file is missing."""
        if not path.is_file():
            return None
        return path.read_bytes(), path.stat().st_mtime

    async def fetch(self, z: int, x: int, y: int) -> FetchedTile:
        found = await asyncio.to_thread(self._read, self.tile_path(z, x, y))
        if found is None:
            raise TileFetchError("Tile does not exist", z=z, x=x, y=y)

        buffer, mtime = found
        headers = {"Last-Modified": formatdate(mtime, usegmt=True)}
        return FetchedTile(buffer=buffer, headers=headers)
