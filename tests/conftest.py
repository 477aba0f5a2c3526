"""Test fixtures for vtinspect tests."""

from __future__ import annotations

import json
import sqlite3
import tempfile
from pathlib import Path
from typing import Any, Callable, Generator, Iterable

import pytest

SCHEMA = """
CREATE TABLE metadata (name TEXT, value TEXT);
CREATE TABLE tiles (
    zoom_level INTEGER,
    tile_column INTEGER,
    tile_row INTEGER,
    tile_data BLOB
);
"""

MbtilesFactory = Callable[..., Path]


def write_mbtiles(
    path: Path,
    tiles: Iterable[tuple[int, int, int, bytes]] = (),
    metadata: Iterable[tuple[str, str]] = (),
) -> Path:
    """Write a minimal .mbtiles file with rows inserted in the given order."""
    conn = sqlite3.connect(path)
    try:
        conn.executescript(SCHEMA)
        conn.executemany("INSERT INTO metadata (name, value) VALUES (?, ?)", metadata)
        conn.executemany(
            "INSERT INTO tiles (zoom_level, tile_column, tile_row, tile_data) "
            "VALUES (?, ?, ?, ?)",
            tiles,
        )
        conn.commit()
    finally:
        conn.close()
    return path


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Provide a temporary directory that's cleaned up after tests."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def make_mbtiles(temp_dir: Path) -> MbtilesFactory:
    """Factory creating .mbtiles files inside ``temp_dir``."""

    def _make(
        name: str = "tiles.mbtiles",
        tiles: Iterable[tuple[int, int, int, bytes]] = (),
        metadata: Iterable[tuple[str, str]] = (),
    ) -> Path:
        return write_mbtiles(temp_dir / name, tiles, metadata)

    return _make


@pytest.fixture
def sample_tiles() -> list[tuple[int, int, int, bytes]]:
    """Tiles across zooms 0, 1 and 3, inserted out of order."""
    return [
        (1, 1, 0, b"x" * 20),
        (0, 0, 0, b"x" * 10),
        (3, 2, 5, b"x" * 7),
        (1, 0, 1, b"x" * 30),
        (1, 0, 0, b"x" * 5),
        (3, 0, 0, b"x" * 100),
    ]


@pytest.fixture
def sample_metadata() -> list[tuple[str, str]]:
    return [
        ("name", "sample"),
        ("format", "pbf"),
        ("minzoom", "0"),
        ("maxzoom", "3"),
        ("json", '{"vector_layers": []}'),
    ]


@pytest.fixture
def sample_mbtiles(
    make_mbtiles: MbtilesFactory,
    sample_tiles: list[tuple[int, int, int, bytes]],
    sample_metadata: list[tuple[str, str]],
) -> Path:
    """A small .mbtiles store with metadata and tiles at zooms 0, 1, 3."""
    return make_mbtiles("sample.mbtiles", sample_tiles, sample_metadata)


@pytest.fixture
def write_style(temp_dir: Path) -> Callable[[Any], Path]:
    """Factory writing a style document (dict or raw text) to a JSON file."""

    def _write(document: Any, name: str = "style.json") -> Path:
        path = temp_dir / name
        if isinstance(document, str):
            path.write_text(document)
        else:
            path.write_text(json.dumps(document))
        return path

    return _write


@pytest.fixture
def sample_style() -> dict:
    """A style with fills, a hidden layer, zoom ranges and stop functions."""
    return {
        "version": 8,
        "sources": {"openmaptiles": {"type": "vector"}},
        "layers": [
            {"id": "background", "type": "background"},
            {
                "id": "water",
                "type": "fill",
                "source": "openmaptiles",
                "source-layer": "water",
                "paint": {"fill-color": "#00f", "fill-opacity": 1},
            },
            {
                "id": "roads-major",
                "type": "line",
                "source": "openmaptiles",
                "source-layer": "transportation",
                "minzoom": 5,
                "maxzoom": 10,
            },
            {
                "id": "roads-minor",
                "type": "line",
                "source": "openmaptiles",
                "source-layer": "transportation",
                "minzoom": 12,
                "paint": {"line-width": {"stops": [[12, 0], [14, 2]]}},
            },
            {
                "id": "poi",
                "type": "symbol",
                "source": "openmaptiles",
                "source-layer": "poi",
                "layout": {"visibility": "none"},
            },
            {
                "id": "landuse",
                "type": "fill",
                "source": "openmaptiles",
                "source-layer": "landuse",
                "paint": {"fill-opacity": {"stops": [[5, 0.0]]}},
            },
        ],
    }
