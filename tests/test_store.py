"""Tests for the MBTiles tile store accessor."""

from __future__ import annotations

import sqlite3
from pathlib import Path

import pytest

from vtinspect.core.errors import OpenError, ReadError
from vtinspect.core.types import TileRecord
from vtinspect.mbtiles.store import TileStore


class TestOpen:
    """Tests for opening tile stores."""

    def test_open_missing_file(self, temp_dir: Path):
        """A path that does not exist should raise OpenError."""
        with pytest.raises(OpenError):
            TileStore(temp_dir / "missing.mbtiles")

    def test_open_does_not_create_file(self, temp_dir: Path):
        """Read-only open must not leave a new file behind."""
        path = temp_dir / "missing.mbtiles"
        with pytest.raises(OpenError):
            TileStore(path)
        assert not path.exists()

    def test_open_non_sqlite_file(self, temp_dir: Path):
        """A file that is not SQLite should raise OpenError."""
        path = temp_dir / "garbage.mbtiles"
        path.write_bytes(b"this is not a database at all" * 10)
        with pytest.raises(OpenError):
            TileStore(path)

    def test_open_wrong_shape(self, temp_dir: Path):
        """A SQLite file without a tiles table is not a tile store."""
        path = temp_dir / "other.mbtiles"
        conn = sqlite3.connect(path)
        conn.execute("CREATE TABLE metadata (name TEXT, value TEXT)")
        conn.commit()
        conn.close()

        with pytest.raises(OpenError, match="tiles"):
            TileStore(path)

    def test_tiles_view_is_accepted(self, temp_dir: Path):
        """Deduplicated stores expose tiles as a view."""
        path = temp_dir / "dedup.mbtiles"
        conn = sqlite3.connect(path)
        conn.executescript(
            """
            CREATE TABLE metadata (name TEXT, value TEXT);
            CREATE TABLE map (zoom_level INTEGER, tile_column INTEGER,
                              tile_row INTEGER, tile_id TEXT);
            CREATE TABLE images (tile_id TEXT, tile_data BLOB);
            CREATE VIEW tiles AS
                SELECT map.zoom_level, map.tile_column, map.tile_row,
                       images.tile_data
                FROM map JOIN images ON map.tile_id = images.tile_id;
            INSERT INTO map VALUES (2, 1, 1, 'a');
            INSERT INTO images VALUES ('a', x'0102');
            """
        )
        conn.commit()
        conn.close()

        with TileStore(path) as store:
            assert store.tile_count() == 1
            assert list(store.iter_tiles()) == [TileRecord(2, 1, 1, 2, b"\x01\x02")]

    def test_readonly_store_rejects_writes(self, sample_mbtiles: Path):
        """Query-only mode should refuse writes."""
        with TileStore(sample_mbtiles) as store:
            with pytest.raises(sqlite3.Error):
                store.create_schema()

    def test_open_writable_in_missing_directory(self, temp_dir: Path):
        """A read-write store that cannot be created raises OpenError."""
        with pytest.raises(OpenError):
            TileStore(temp_dir / "no" / "such" / "dir.mbtiles", writable=True)

    def test_context_manager_closes(self, sample_mbtiles: Path):
        with TileStore(sample_mbtiles) as store:
            assert not store.closed
        assert store.closed


class TestIteration:
    """Tests for tile and metadata iteration."""

    def test_tile_count(self, sample_mbtiles: Path, sample_tiles):
        with TileStore(sample_mbtiles) as store:
            assert store.tile_count() == len(sample_tiles)

    def test_tiles_sorted_by_zoom_column_row(self, sample_mbtiles: Path):
        """Tiles come back ordered by (zoom, column, row) whatever the insert order."""
        with TileStore(sample_mbtiles) as store:
            keys = [(t.zoom, t.column, t.row) for t in store.iter_tiles()]

        assert keys == [
            (0, 0, 0),
            (1, 0, 0),
            (1, 0, 1),
            (1, 1, 0),
            (3, 0, 0),
            (3, 2, 5),
        ]

    def test_tile_records_carry_data_and_length(self, sample_mbtiles: Path):
        with TileStore(sample_mbtiles) as store:
            first = next(store.iter_tiles())

        assert first == TileRecord(0, 0, 0, 10, b"x" * 10)

    def test_iter_without_data(self, sample_mbtiles: Path):
        """Skipping blob contents still reports byte lengths."""
        with TileStore(sample_mbtiles) as store:
            records = list(store.iter_tiles(include_data=False))

        assert all(r.data is None for r in records)
        assert [r.byte_length for r in records] == [10, 5, 30, 20, 100, 7]

    def test_null_tile_data_has_zero_length(self, make_mbtiles):
        path = make_mbtiles(tiles=[(0, 0, 0, None)])
        with TileStore(path) as store:
            assert list(store.iter_tiles()) == [TileRecord(0, 0, 0, 0, None)]

    def test_fresh_iterator_rescans(self, sample_mbtiles: Path):
        """Each call returns a new single-pass iterator over all rows."""
        with TileStore(sample_mbtiles) as store:
            first = store.iter_tiles()
            next(first)
            next(first)
            assert len(list(store.iter_tiles())) == 6
            assert len(list(first)) == 4

    def test_metadata_in_stored_order(self, sample_mbtiles: Path, sample_metadata):
        with TileStore(sample_mbtiles) as store:
            assert list(store.iter_metadata()) == sample_metadata

    def test_metadata_dict(self, sample_mbtiles: Path):
        with TileStore(sample_mbtiles) as store:
            assert store.metadata()["format"] == "pbf"

    def test_invalid_zoom_is_read_error(self, make_mbtiles):
        """A zoom_level outside 0-255 cannot be represented."""
        path = make_mbtiles(tiles=[(0, 0, 0, b"a"), (300, 0, 0, b"b")])
        with TileStore(path) as store:
            tiles = store.iter_tiles()
            assert next(tiles).zoom == 0
            with pytest.raises(ReadError, match="zoom_level"):
                next(tiles)

    def test_iterate_closed_store(self, sample_mbtiles: Path):
        store = TileStore(sample_mbtiles)
        store.close()
        with pytest.raises(ReadError):
            list(store.iter_tiles())

    def test_abandoned_iterator_after_close(self, sample_mbtiles: Path):
        """Closing the store with a half-consumed iterator must not raise."""
        store = TileStore(sample_mbtiles)
        tiles = store.iter_tiles()
        next(tiles)
        store.close()
        tiles.close()
