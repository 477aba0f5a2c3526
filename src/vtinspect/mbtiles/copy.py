"""Whole-store duplication of MBTiles files."""

from __future__ import annotations

import logging
import sqlite3
from pathlib import Path
from typing import Iterable, Iterator, TypeVar

from vtinspect.config import PROGRESS_INTERVAL
from vtinspect.core.errors import CopyError, ReadError
from vtinspect.core.paths import ensure_tile_store_path
from vtinspect.core.types import ProgressCallback

from .store import TileStore

logger = logging.getLogger(__name__)

T = TypeVar("T")

STEP_SCHEMA = "schema creation"
STEP_BEGIN = "begin transaction"
STEP_METADATA_READ = "metadata read"
STEP_METADATA_WRITE = "metadata write"
STEP_TILE_READ = "tile read"
STEP_TILE_WRITE = "tile write"
STEP_COMMIT = "commit"


def _counted(
    rows: Iterable[T],
    total: int,
    progress_callback: ProgressCallback | None,
    counter: list[int],
) -> Iterator[T]:
    for row in rows:
        yield row
        counter[0] += 1
        if progress_callback is not None and counter[0] % PROGRESS_INTERVAL == 0:
            progress_callback(counter[0], total)


def _copy_rows(
    source: TileStore,
    destination: TileStore,
    progress_callback: ProgressCallback | None,
) -> tuple[int, int]:
    """Insert metadata then tiles inside the caller's open transaction."""
    metadata_count = [0]
    try:
        destination.insert_metadata(
            _counted(source.iter_metadata(), 0, None, metadata_count)
        )
    except ReadError as e:
        raise CopyError(STEP_METADATA_READ, str(e)) from e
    except sqlite3.Error as e:
        raise CopyError(STEP_METADATA_WRITE, str(e)) from e

    try:
        total = source.tile_count()
    except ReadError as e:
        raise CopyError(STEP_TILE_READ, str(e)) from e

    tile_count = [0]
    try:
        destination.insert_tiles(
            _counted(source.iter_tiles(), total, progress_callback, tile_count)
        )
    except ReadError as e:
        raise CopyError(STEP_TILE_READ, str(e)) from e
    except sqlite3.Error as e:
        raise CopyError(STEP_TILE_WRITE, str(e)) from e

    if progress_callback is not None:
        progress_callback(tile_count[0], total)
    return metadata_count[0], tile_count[0]


def copy_tiles(
    source: TileStore,
    destination: TileStore,
    progress_callback: ProgressCallback | None = None,
) -> tuple[int, int]:
    """Copy every metadata pair and tile from ``source`` into ``destination``.

    The destination schema is created first. All inserts then run in one
    transaction which is rolled back on any failure, so the destination never
    holds a partial copy. Tile order (zoom, column, row) is preserved.

    Args:
        source: Readable tile store
        destination: Fresh, writable tile store
        progress_callback: Optional callback(processed, total) over tile rows

    Returns:
        Tuple of (metadata_rows, tile_rows) copied

    Raises:
        CopyError: With ``step`` naming the failing part of the copy
    """
    try:
        destination.create_schema()
    except sqlite3.Error as e:
        raise CopyError(STEP_SCHEMA, str(e)) from e

    try:
        destination.begin()
    except sqlite3.Error as e:
        raise CopyError(STEP_BEGIN, str(e)) from e

    try:
        counts = _copy_rows(source, destination, progress_callback)
        try:
            destination.commit()
        except sqlite3.Error as e:
            raise CopyError(STEP_COMMIT, str(e)) from e
    except BaseException:
        try:
            destination.rollback()
        except sqlite3.Error as rollback_err:
            logger.error(
                "Rollback of %s failed: %s", destination.path, rollback_err
            )
        raise

    logger.info(
        "Copied %d metadata rows and %d tiles into %s",
        counts[0],
        counts[1],
        destination.path,
    )
    return counts


def copy_store(
    input_path: str | Path,
    output_path: str | Path,
    progress_callback: ProgressCallback | None = None,
) -> None:
    """Duplicate the tile store at ``input_path`` into a new file.

    ``output_path`` must not already hold a tile store. If the copy fails
    the output file may remain on disk without any copied rows; removing it
    is up to the caller.

    Source rows are read through ``TileStore.iter_tiles``, so a tile whose
    zoom_level lies outside 0-255 aborts the copy with step "tile read"
    instead of being copied unchanged.

    Raises:
        UnsupportedPathError: If either path is not a tile store path
        OpenError: If either store cannot be opened
        CopyError: If the copy fails after both stores are open
    """
    input_path = ensure_tile_store_path(input_path)
    output_path = ensure_tile_store_path(output_path)

    with TileStore(input_path) as source:
        with TileStore(output_path, writable=True) as destination:
            logger.info("Copying %s -> %s", input_path, output_path)
            copy_tiles(source, destination, progress_callback)
