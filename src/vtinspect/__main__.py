"""CLI entry point for vtinspect."""

from __future__ import annotations

import json
import logging
import sys
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, NoReturn

import click
from tqdm import tqdm

from vtinspect import __version__
from vtinspect.core.errors import CopyError, VtInspectError
from vtinspect.core.paths import ensure_tile_store_path
from vtinspect.core.types import ProgressCallback, Report
from vtinspect.mbtiles import copy_store, inspect
from vtinspect.style import load_style

logger = logging.getLogger(__name__)


def _setup_logging(verbose: int) -> None:
    """Configure logging based on verbosity."""
    if verbose >= 2:
        logging.basicConfig(level=logging.DEBUG, format="%(name)s: %(message)s")
    elif verbose == 1:
        logging.basicConfig(level=logging.INFO, format="%(message)s")


def _fail(message: str) -> NoReturn:
    click.echo(click.style(f"Error: {message}", fg="red"), err=True)
    sys.exit(1)


def _format_bytes(size: float) -> str:
    """Format byte size as human-readable string."""
    for unit in ("B", "KB", "MB", "GB", "TB"):
        if size < 1024:
            return f"{size:.1f} {unit}"
        size /= 1024
    return f"{size:.1f} PB"


@contextmanager
def _progress_bar(desc: str) -> Iterator[ProgressCallback]:
    """Yield a progress callback that drives a transient tqdm bar."""
    with tqdm(desc=desc, unit="tiles", leave=False, disable=None) as pbar:

        def update(processed: int, total: int) -> None:
            if total and pbar.total != total:
                pbar.total = total
            pbar.update(processed - pbar.n)

        yield update


def _print_report(path: Path, report: Report) -> None:
    """Print the overall and per-zoom statistics table."""
    overall = report.overall
    click.echo(click.style(f"Tile store: {path}", fg="cyan", bold=True))
    click.echo(click.style("=" * 56, fg="cyan"))
    click.echo(
        f"Tiles: {overall.tile_count} | Total: {_format_bytes(overall.total_bytes)} | "
        f"Max: {_format_bytes(overall.max_bytes)} | "
        f"Avg: {_format_bytes(overall.average_bytes)}"
    )
    if not report.by_zoom:
        click.echo("No tiles")
        return

    click.echo()
    click.echo(f"{'zoom':>4}  {'tiles':>10}  {'total':>12}  {'max':>10}  {'avg':>10}")
    for entry in report.by_zoom:
        stats = entry.stats
        click.echo(
            f"{entry.zoom:>4}  {stats.tile_count:>10}  "
            f"{_format_bytes(stats.total_bytes):>12}  "
            f"{_format_bytes(stats.max_bytes):>10}  "
            f"{_format_bytes(stats.average_bytes):>10}"
        )


@click.group()
@click.version_option(__version__, prog_name="vtinspect")
@click.option("-v", "--verbose", count=True, help="Enable verbose logging (-vv for debug)")
def main(verbose: int) -> None:
    """Inspect and copy MBTiles files, and check style layer visibility.

    \b
    Examples:
        vtinspect inspect tiles.mbtiles
        vtinspect copy tiles.mbtiles backup.mbtiles
        vtinspect style-layers style.json --zoom 12
        vtinspect visible style.json roads 12
    """
    _setup_logging(verbose)


@main.command("inspect")
@click.argument("path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--json", "as_json", is_flag=True, help="Print the report as JSON")
def inspect_command(path: Path, as_json: bool) -> None:
    """Report tile counts and sizes, overall and per zoom level.

    PATH is an .mbtiles file.
    """
    try:
        with _progress_bar("Scanning tiles") as progress:
            report = inspect(path, progress_callback=progress)
    except VtInspectError as e:
        _fail(str(e))

    if as_json:
        click.echo(json.dumps(report.to_dict(), indent=2))
    else:
        _print_report(path, report)


@main.command("copy")
@click.argument("input_path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.argument("output_path", type=click.Path(dir_okay=False, path_type=Path))
@click.option(
    "--force",
    "-f",
    is_flag=True,
    help="Overwrite OUTPUT_PATH if it already exists",
)
def copy_command(input_path: Path, output_path: Path, force: bool) -> None:
    """Copy every metadata entry and tile into a new .mbtiles file.

    The copy is written in a single transaction. If it fails, the partial
    output file is removed.
    """
    try:
        ensure_tile_store_path(input_path)
        ensure_tile_store_path(output_path)
    except VtInspectError as e:
        _fail(str(e))

    if output_path.exists():
        if output_path.resolve() == input_path.resolve():
            _fail("Input and output are the same file")
        if not force:
            _fail(f"{output_path} already exists (use --force to overwrite)")
        click.echo(click.style(f"Removing existing {output_path}", fg="yellow"))
        output_path.unlink()

    try:
        with _progress_bar("Copying tiles") as progress:
            copy_store(input_path, output_path, progress_callback=progress)
    except CopyError as e:
        click.echo(click.style(f"Error: {e}", fg="red"), err=True)
        if output_path.exists():
            try:
                output_path.unlink()
                click.echo(f"  Cleaned up partial output: {output_path}", err=True)
            except OSError as cleanup_err:
                click.echo(f"  Failed to clean up partial output: {cleanup_err}", err=True)
        sys.exit(1)
    except VtInspectError as e:
        _fail(str(e))

    click.echo(click.style(f"Copied {input_path} -> {output_path}", fg="green"))


@main.command("style-layers")
@click.argument("style_path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option(
    "--zoom",
    "-z",
    type=click.IntRange(0, 255),
    default=None,
    help="Only list source-layers visible at this zoom",
)
def style_layers_command(style_path: Path, zoom: int | None) -> None:
    """List the source-layers referenced by a style."""
    try:
        index = load_style(style_path)
    except VtInspectError as e:
        _fail(str(e))

    if zoom is None:
        names = index.source_layer_names()
    else:
        names = index.visible_source_layers(zoom)
    for name in sorted(names):
        click.echo(name)


@main.command("visible")
@click.argument("style_path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.argument("source_layer")
@click.argument("zoom", type=click.IntRange(0, 255))
def visible_command(style_path: Path, source_layer: str, zoom: int) -> None:
    """Print whether SOURCE_LAYER is drawn by the style at ZOOM."""
    try:
        index = load_style(style_path)
    except VtInspectError as e:
        _fail(str(e))

    if source_layer not in index:
        logger.info("Source-layer %r is not referenced by %s", source_layer, style_path)
    if index.is_visible_at_zoom(source_layer, zoom):
        click.echo(click.style("visible", fg="green"))
    else:
        click.echo(click.style("hidden", fg="yellow"))


if __name__ == "__main__":
    main()
