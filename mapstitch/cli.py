"""Command-line interface for map stitching."""

import asyncio
import logging
from datetime import datetime
from pathlib import Path
from typing import Optional

import click
from rich.console import Console
from rich.progress import Progress, SpinnerColumn, TextColumn
from rich.table import Table

from .config import get_config
from .errors import MapStitchError
from .models.request import StitchOptions
from .services.map_service import plan_map, render_map
from .services.tile_source_service import DirectoryTileSource, HttpTileSource


def timestamped_filename(base_name: str, extension: str = "png") -> str:
    """Default output name for a rendered map, e.g. ``static_map_20240201_143052.jpeg``."""
    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    return f"{base_name}_{timestamp}.{extension}"


def _parse_floats(value: Optional[str], count: int, label: str) -> Optional[list[float]]:
    if value is None:
        return None
    parts = value.replace("x", ",").split(",")
    if len(parts) != count:
        raise click.BadParameter(f"expected {count} comma-separated numbers", param_hint=label)
    try:
        return [float(part) for part in parts]
    except ValueError as e:
        raise click.BadParameter(str(e), param_hint=label) from e


def _build_options(
    request: Optional[str],
    center: Optional[str],
    size: Optional[str],
    bbox: Optional[str],
    require_tile_source: bool,
    **overrides,
) -> StitchOptions:
    """Merge a request file and command-line geometry into StitchOptions."""
    lnglat = _parse_floats(center, 2, "--center")
    dims = _parse_floats(size, 2, "--size")
    box = _parse_floats(bbox, 4, "--bbox")

    if lnglat is not None:
        overrides["center"] = {"x": lnglat[0], "y": lnglat[1]}
    if dims is not None:
        overrides["dimensions"] = {"width": dims[0], "height": dims[1]}
    if box is not None:
        overrides["bbox"] = box

    overrides = {key: value for key, value in overrides.items() if value is not None}

    if request:
        return StitchOptions.from_yaml(Path(request), require_tile_source=require_tile_source, **overrides)
    return StitchOptions.resolve(overrides, require_tile_source=require_tile_source)


def geometry_options(func):
    """Options shared by commands that resolve a map extent."""
    options = [
        click.option("--request", "-r", type=click.Path(exists=True, dir_okay=False), help="YAML request file"),
        click.option("--center", "-c", help="Map center as LNG,LAT"),
        click.option("--size", "-s", help="Unscaled output size as WIDTHxHEIGHT"),
        click.option("--bbox", "-b", help="Bounding box as WEST,SOUTH,EAST,NORTH"),
        click.option("--zoom", "-z", type=int, help="Zoom level"),
        click.option("--scale", type=float, help="Pixel density multiplier"),
        click.option("--tile-size", type=int, help="Unscaled tile size in pixels"),
        click.option("--limit", type=int, help="Maximum output width/height (exclusive)"),
        click.option("--row-policy", type=click.Choice(["clamp", "skip"]), help="Rows outside the world"),
    ]
    for option in reversed(options):
        func = option(func)
    return func


console = Console()


@click.group()
@click.version_option(version="0.1.0")
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
def main(verbose: bool):
    """Map Stitch - Compose static map images from XYZ tiles."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(name)s %(levelname)s %(message)s",
    )


@main.command()
@geometry_options
def plan(
    request: Optional[str],
    center: Optional[str],
    size: Optional[str],
    bbox: Optional[str],
    zoom: Optional[int],
    scale: Optional[float],
    tile_size: Optional[int],
    limit: Optional[int],
    row_policy: Optional[str],
):
    """Show the tiles and offsets needed for a map without fetching them."""
    try:
        options = _build_options(
            request, center, size, bbox,
            require_tile_source=False,
            zoom=zoom, scale=scale, tile_size=tile_size, limit=limit, row_policy=row_policy,
        )
        tile_plan = plan_map(options)
    except MapStitchError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise SystemExit(1)

    dims = tile_plan.dimensions
    console.print(f"[bold]Output size:[/bold] {dims.width} x {dims.height} px")
    console.print(f"[bold]Tiles:[/bold] {len(tile_plan)} at zoom {options.zoom}")

    table = Table()
    table.add_column("#", justify="right")
    table.add_column("Tile (z/x/y)", style="cyan")
    table.add_column("Offset (x, y)", style="green")

    for index, (tile, offset) in enumerate(tile_plan.pairs()):
        table.add_row(str(index), str(tile), f"({offset.x}, {offset.y})")

    console.print(table)


@main.command()
@geometry_options
@click.option("--tile-url", "-u", help="Tile URL template with {z}/{x}/{y}")
@click.option("--tile-dir", type=click.Path(exists=True, file_okay=False), help="Directory of z/x/y tiles")
@click.option("--tile-ext", default="png", show_default=True, help="Extension of tiles in --tile-dir")
@click.option("--format", "-f", "output_format", help="Output format (png, jpeg, webp)")
@click.option("--quality", "-q", type=int, help="Encoder quality")
@click.option("--max-concurrency", type=int, help="Cap on simultaneous tile fetches")
@click.option("--output", "-o", type=click.Path(dir_okay=False), help="Output image path")
def render(
    request: Optional[str],
    center: Optional[str],
    size: Optional[str],
    bbox: Optional[str],
    zoom: Optional[int],
    scale: Optional[float],
    tile_size: Optional[int],
    limit: Optional[int],
    row_policy: Optional[str],
    tile_url: Optional[str],
    tile_dir: Optional[str],
    tile_ext: str,
    output_format: Optional[str],
    quality: Optional[int],
    max_concurrency: Optional[int],
    output: Optional[str],
):
    """Fetch tiles and stitch them into one static map image."""
    config = get_config()
    tile_url = tile_url or config.tile_url

    if not tile_dir and not tile_url:
        console.print("[red]Error:[/red] Provide --tile-url, --tile-dir or MAPSTITCH_TILE_URL")
        raise SystemExit(1)

    try:
        options = _build_options(
            request, center, size, bbox,
            require_tile_source=False,
            zoom=zoom, scale=scale, tile_size=tile_size, limit=limit, row_policy=row_policy,
            format=output_format, quality=quality, max_concurrency=max_concurrency,
        )
    except MapStitchError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise SystemExit(1)

    # The HTTP client is only opened once the request is known to be valid
    if tile_dir:
        source = DirectoryTileSource(tile_dir, extension=tile_ext)
    else:
        source = HttpTileSource(tile_url)
    options = options.model_copy(update={"get_tile": source})

    async def run():
        try:
            return await render_map(options)
        finally:
            if isinstance(source, HttpTileSource):
                await source.aclose()

    with Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        console=console,
    ) as progress:
        task = progress.add_task("Fetching and stitching tiles...", total=None)
        try:
            result = asyncio.run(run())
        except MapStitchError as e:
            progress.stop()
            console.print(f"[red]Error:[/red] {e}")
            raise SystemExit(1)
        progress.update(task, completed=True, description="[green]Map stitched")

    extension = options.format.split(".")[-1]
    output_path = Path(output) if output else Path.cwd() / timestamped_filename("static_map", extension)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_bytes(result.image)

    console.print(f"[green]Saved:[/green] {output_path}")
    console.print(f"[bold]Tiles:[/bold] {result.stats.tiles}")
    console.print(f"[bold]Average render time:[/bold] {result.stats.render_avg} ms")

    table = Table(title="Cache headers")
    table.add_column("Header", style="cyan")
    table.add_column("Value", style="green")
    for name, value in result.headers.items():
        table.add_row(name, value)
    console.print(table)


if __name__ == "__main__":
    main()
