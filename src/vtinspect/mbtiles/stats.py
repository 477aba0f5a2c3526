"""Zoom-bucketed size statistics over a tile stream."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable

from vtinspect.config import PROGRESS_INTERVAL
from vtinspect.core.paths import ensure_tile_store_path
from vtinspect.core.types import (
    ProgressCallback,
    Report,
    TileRecord,
    ZoomLevelStats,
    ZoomStats,
)

from .store import TileStore

logger = logging.getLogger(__name__)


@dataclass
class _Accumulator:
    tile_count: int = 0
    total_bytes: int = 0
    max_bytes: int = 0

    def add(self, length: int) -> None:
        self.tile_count += 1
        self.total_bytes += length
        if length > self.max_bytes:
            self.max_bytes = length

    def snapshot(self) -> ZoomStats:
        return ZoomStats(self.tile_count, self.total_bytes, self.max_bytes)


@dataclass
class _ZoomRun:
    """A contiguous run of rows sharing one zoom level."""

    zoom: int
    totals: _Accumulator

    def flush(self) -> ZoomLevelStats:
        return ZoomLevelStats(self.zoom, self.totals.snapshot())


def aggregate(
    tiles: Iterable[TileRecord],
    total: int = 0,
    progress_callback: ProgressCallback | None = None,
    progress_interval: int = PROGRESS_INTERVAL,
) -> Report:
    """Fold a tile stream into overall and per-zoom statistics.

    Rows of the same zoom must be contiguous (a stream sorted by zoom).
    A zoom that reappears after another zoom starts a second, separate
    entry in ``by_zoom``.

    Args:
        tiles: Tile records, sorted by zoom ascending
        total: Expected row count, forwarded to ``progress_callback``
        progress_callback: Optional callback(processed, total)
        progress_interval: Rows between progress callbacks, at least 1

    Returns:
        Report snapshot of the stream
    """
    progress_interval = max(1, progress_interval)
    overall = _Accumulator()
    by_zoom: list[ZoomLevelStats] = []
    run: _ZoomRun | None = None
    processed = 0

    for tile in tiles:
        length = tile.byte_length
        overall.add(length)

        if run is None:
            run = _ZoomRun(tile.zoom, _Accumulator())
        elif run.zoom != tile.zoom:
            by_zoom.append(run.flush())
            run = _ZoomRun(tile.zoom, _Accumulator())
        run.totals.add(length)

        processed += 1
        if progress_callback is not None and processed % progress_interval == 0:
            progress_callback(processed, total)

    if run is not None:
        by_zoom.append(run.flush())

    if progress_callback is not None:
        progress_callback(processed, total)

    return Report(overall=overall.snapshot(), by_zoom=tuple(by_zoom))


def inspect(
    path: str | Path,
    progress_callback: ProgressCallback | None = None,
) -> Report:
    """Scan a tile store and report its size statistics.

    Args:
        path: Path to a ``.mbtiles`` file
        progress_callback: Optional callback(processed, total)

    Raises:
        UnsupportedPathError: If ``path`` is not a tile store path
        OpenError: If the store cannot be opened
        ReadError: If a row cannot be read; no partial report is returned
    """
    path = ensure_tile_store_path(path)
    with TileStore(path) as store:
        total = store.tile_count()
        logger.info("Scanning %d tiles in %s", total, path)
        report = aggregate(
            store.iter_tiles(include_data=False),
            total=total,
            progress_callback=progress_callback,
        )
    logger.info(
        "Scanned %s: %d tiles, %d bytes across %d zoom levels",
        path,
        report.overall.tile_count,
        report.overall.total_bytes,
        len(report.by_zoom),
    )
    return report
