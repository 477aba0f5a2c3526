"""Shared type definitions for vtinspect core module."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, NamedTuple

#: Progress sink receiving (processed, total) row counts
ProgressCallback = Callable[[int, int], None]


class TileRecord(NamedTuple):
    """One row of the tile table.

    Attributes:
        zoom: Zoom level (0-255)
        column: Tile column (x)
        row: Tile row (TMS y, as stored)
        byte_length: Length of the tile blob in bytes
        data: The tile blob, or None when the scan skipped blob contents
    """

    zoom: int
    column: int
    row: int
    byte_length: int
    data: bytes | None = None


@dataclass(frozen=True)
class ZoomStats:
    """Size statistics over a set of tiles.

    Attributes:
        tile_count: Number of tiles counted
        total_bytes: Sum of tile byte lengths
        max_bytes: Largest tile byte length (0 when no tiles were counted)
    """

    tile_count: int = 0
    total_bytes: int = 0
    max_bytes: int = 0

    @property
    def average_bytes(self) -> float:
        if self.tile_count == 0:
            return 0.0
        return self.total_bytes / self.tile_count

    def to_dict(self) -> dict:
        return {
            "tile_count": self.tile_count,
            "total_bytes": self.total_bytes,
            "max_bytes": self.max_bytes,
        }


class ZoomLevelStats(NamedTuple):
    """Statistics for a single contiguous run of one zoom level."""

    zoom: int
    stats: ZoomStats


@dataclass(frozen=True)
class Report:
    """Result of scanning a tile store.

    Attributes:
        overall: Statistics over every tile in the store
        by_zoom: Per-zoom statistics, in scan order (ascending zoom for a sorted scan)
    """

    overall: ZoomStats
    by_zoom: tuple[ZoomLevelStats, ...] = ()

    @property
    def zoom_levels(self) -> list[int]:
        return [entry.zoom for entry in self.by_zoom]

    def to_dict(self) -> dict:
        return {
            "overall": self.overall.to_dict(),
            "by_zoom": [
                {"zoom": entry.zoom, **entry.stats.to_dict()}
                for entry in self.by_zoom
            ],
        }
