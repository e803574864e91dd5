"""Image decoding, placement and encoding helpers."""

from io import BytesIO
from typing import Optional

from PIL import Image, UnidentifiedImageError

from ..errors import CompositionError

DEFAULT_JPEG_QUALITY = 80

# Output format name -> Pillow encoder
PIL_FORMATS = {
    "png": "PNG",
    "jpeg": "JPEG",
    "jpg": "JPEG",
    "webp": "WEBP",
}


def pil_format(format: str) -> str:
    """Map an output format such as ``png8`` or ``jpeg80`` to a Pillow encoder name."""
    name = format.lower()
    for prefix, encoder in PIL_FORMATS.items():
        if name.startswith(prefix):
            return encoder
    raise CompositionError(f"Unsupported output format: {format}")


def decode_image(buffer: bytes) -> Image.Image:
    """Decode encoded tile bytes into an RGBA image."""
    try:
        image = Image.open(BytesIO(buffer))
        image.load()
    except (UnidentifiedImageError, OSError) as exc:
        raise CompositionError(f"Could not decode tile image: {exc}") from exc
    return image.convert("RGBA")


def composite_at(canvas: Image.Image, tile: Image.Image, position: tuple[int, int]) -> None:
    """Alpha-composite ``tile`` onto ``canvas`` in place, cropping to the canvas bounds."""
    x, y = position

    left = max(x, 0)
    top = max(y, 0)
    right = min(x + tile.width, canvas.width)
    bottom = min(y + tile.height, canvas.height)

    if right <= left or bottom <= top:
        return

    region = tile.crop((left - x, top - y, right - x, bottom - y))
    canvas.alpha_composite(region, dest=(left, top))


def flatten_alpha(image: Image.Image, background: tuple[int, int, int] = (255, 255, 255)) -> Image.Image:
    """Drop transparency by compositing on a solid background."""
    if image.mode != "RGBA":
        return image.convert("RGB")
    flattened = Image.new("RGB", image.size, background)
    flattened.paste(image, mask=image.split()[3])
    return flattened


def encode_image(image: Image.Image, format: str = "png", quality: Optional[int] = None) -> bytes:
    """Encode an image to bytes in the requested output format."""
    encoder = pil_format(format)
    buffer = BytesIO()

    if encoder == "JPEG":
        # JPEG has no alpha channel
        flatten_alpha(image).save(buffer, encoder, quality=quality or DEFAULT_JPEG_QUALITY)
    elif encoder == "WEBP" and quality:
        image.save(buffer, encoder, quality=quality)
    else:
        image.save(buffer, encoder)

    return buffer.getvalue()
