"""Cache header merging for stitched images."""

import hashlib
import logging
from datetime import datetime, timezone
from email.utils import format_datetime, parsedate_to_datetime
from typing import Optional, Sequence

logger = logging.getLogger(__name__)

CACHE_CONTROL = "max-age=3600"

# Floor for Last-Modified whenever at least one tile reports a timestamp
MIN_LAST_MODIFIED = datetime(2014, 2, 23, 18, 0, 0, tzinfo=timezone.utc)

CONTENT_HEADERS = {
    "vector.pbf": {"Content-Type": "application/x-protobuf", "Content-Encoding": "deflate"},
    "jpeg": {"Content-Type": "image/jpeg"},
    "png": {"Content-Type": "image/png"},
}


def _lookup(headers: Optional[dict], name: str) -> Optional[str]:
    """Case-insensitive header lookup."""
    if not headers:
        return None
    for key, value in headers.items():
        if key.lower() == name:
            return value
    return None


def _parse_http_date(value: str) -> Optional[datetime]:
    try:
        parsed = parsedate_to_datetime(value)
    except (TypeError, ValueError):
        logger.warning("Ignoring unparseable Last-Modified header: %r", value)
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def _md5_etag(text: str) -> str:
    return '"' + hashlib.md5(text.encode("utf-8")).hexdigest() + '"'


def merge_last_modified(
    headers: Sequence[Optional[dict]],
    now: Optional[datetime] = None,
) -> str:
    """Newest Last-Modified across tiles, or the current time if none report one."""
    times = []
    for tile_headers in headers:
        value = _lookup(tile_headers, "last-modified")
        if value is None:
            continue
        parsed = _parse_http_date(value)
        if parsed is not None:
            times.append(parsed)

    if times:
        times.append(MIN_LAST_MODIFIED)
    else:
        times.append(now or datetime.now(timezone.utc))

    return format_datetime(max(times).astimezone(timezone.utc), usegmt=True)


def merge_etag(headers: Sequence[Optional[dict]], last_modified: str) -> str:
    """Single tile ETag verbatim, otherwise an MD5 over all ETags or Last-Modified."""
    etags = [value for value in (_lookup(h, "etag") for h in headers) if value is not None]

    if not etags:
        return _md5_etag(last_modified)
    if len(etags) == 1:
        return etags[0]
    return _md5_etag(",".join(etags))


def merge_headers(
    headers: Sequence[Optional[dict]],
    format: str = "png",
    now: Optional[datetime] = None,
) -> dict[str, str]:
    """
    Compose response headers for a stitched image from per-tile headers.

    Args:
        headers: Headers of each tile, ``None`` where a tile had none
        format: Output format of the stitched image
        now: Clock override used when no tile carries Last-Modified

    Returns:
        Header dict with Cache-Control, content headers, Last-Modified and ETag
    """
    composed = {"Cache-Control": CACHE_CONTROL}
    composed.update(CONTENT_HEADERS.get(format, {}))

    composed["Last-Modified"] = merge_last_modified(headers, now=now)
    composed["ETag"] = merge_etag(headers, composed["Last-Modified"])

    return composed
