"""SQLite-backed access to MBTiles tile stores."""

from __future__ import annotations

import logging
import sqlite3
from pathlib import Path
from typing import Iterable, Iterator

from vtinspect.config import READ_CACHE_SIZE_KB, READ_PRAGMAS
from vtinspect.core.errors import OpenError, ReadError
from vtinspect.core.types import TileRecord

logger = logging.getLogger(__name__)

#: Tables every tile store must expose (either may be a view)
REQUIRED_TABLES: tuple[str, ...] = ("metadata", "tiles")

#: Schema written into freshly created stores
SCHEMA_SQL = """
CREATE TABLE metadata (name TEXT, value TEXT);
CREATE TABLE tiles (
    zoom_level INTEGER,
    tile_column INTEGER,
    tile_row INTEGER,
    tile_data BLOB
);
"""

_TILE_ORDER = "ORDER BY zoom_level, tile_column, tile_row"
_SELECT_TILES = (
    "SELECT zoom_level, tile_column, tile_row, LENGTH(tile_data), tile_data "
    f"FROM tiles {_TILE_ORDER}"
)
_SELECT_TILE_SIZES = (
    "SELECT zoom_level, tile_column, tile_row, LENGTH(tile_data) "
    f"FROM tiles {_TILE_ORDER}"
)
_SELECT_METADATA = "SELECT name, value FROM metadata"
_INSERT_METADATA = "INSERT INTO metadata (name, value) VALUES (?, ?)"
_INSERT_TILE = (
    "INSERT INTO tiles (zoom_level, tile_column, tile_row, tile_data) "
    "VALUES (?, ?, ?, ?)"
)

MAX_ZOOM = 255


class TileStore:
    """Connection to a single ``.mbtiles`` file.

    Read-only stores are checked for the metadata/tiles shape and tuned for
    sequential scans. Read-write stores are opened in autocommit mode; the
    caller drives transactions with :meth:`begin`, :meth:`commit` and
    :meth:`rollback`.

    Iterators returned by :meth:`iter_tiles` and :meth:`iter_metadata` are
    single-pass. Request a fresh iterator to scan again.
    """

    def __init__(self, path: str | Path, writable: bool = False) -> None:
        self._path = Path(path)
        self._writable = writable
        self._conn: sqlite3.Connection | None = None

        if writable:
            self._conn = self._connect_readwrite()
        else:
            self._conn = self._connect_readonly()
        logger.debug(
            "Opened %s (%s)", self._path, "read-write" if writable else "read-only"
        )

    # ------------------------------------------------------------------
    # Opening / closing
    # ------------------------------------------------------------------

    def _connect_readonly(self) -> sqlite3.Connection:
        uri = f"{self._path.absolute().as_uri()}?mode=ro"
        try:
            conn = sqlite3.connect(uri, uri=True)
        except sqlite3.Error as e:
            raise OpenError(f"Failed to open tile store {self._path}: {e}") from e

        try:
            self._apply_read_pragmas(conn)
            self._check_shape(conn)
        except sqlite3.Error as e:
            conn.close()
            raise OpenError(f"Failed to open tile store {self._path}: {e}") from e
        except OpenError:
            conn.close()
            raise
        return conn

    def _connect_readwrite(self) -> sqlite3.Connection:
        try:
            return sqlite3.connect(str(self._path), isolation_level=None)
        except sqlite3.Error as e:
            raise OpenError(
                f"Failed to open tile store {self._path} for writing: {e}"
            ) from e

    @staticmethod
    def _apply_read_pragmas(conn: sqlite3.Connection) -> None:
        for pragma in READ_PRAGMAS:
            conn.execute(pragma)
        conn.execute(f"PRAGMA cache_size = -{READ_CACHE_SIZE_KB}")

    def _check_shape(self, conn: sqlite3.Connection) -> None:
        rows = conn.execute(
            "SELECT name FROM sqlite_master WHERE type IN ('table', 'view')"
        ).fetchall()
        present = {name for (name,) in rows}
        missing = [name for name in REQUIRED_TABLES if name not in present]
        if missing:
            raise OpenError(
                f"{self._path} is not a tile store (missing: {', '.join(missing)})"
            )

    @property
    def path(self) -> Path:
        return self._path

    @property
    def writable(self) -> bool:
        return self._writable

    @property
    def closed(self) -> bool:
        return self._conn is None

    def _connection(self) -> sqlite3.Connection:
        if self._conn is None:
            raise ReadError(f"Tile store {self._path} is closed")
        return self._conn

    def close(self) -> None:
        if self._conn is not None:
            self._conn.close()
            self._conn = None
            logger.debug("Closed %s", self._path)

    def __enter__(self) -> TileStore:
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def __repr__(self) -> str:
        mode = "rw" if self._writable else "ro"
        return f"<TileStore {self._path} ({mode})>"

    # ------------------------------------------------------------------
    # Reading
    # ------------------------------------------------------------------

    def tile_count(self) -> int:
        """Return the number of rows in the tile table."""
        try:
            (count,) = self._connection().execute("SELECT COUNT(*) FROM tiles").fetchone()
        except sqlite3.Error as e:
            raise ReadError(f"Failed to read tile count from {self._path}: {e}") from e
        return count

    def iter_tiles(self, include_data: bool = True) -> Iterator[TileRecord]:
        """Yield every tile ordered by (zoom, column, row) ascending.

        Args:
            include_data: If False, blob contents are not fetched and each
                record carries ``data=None``; ``byte_length`` is still set.

        Raises:
            ReadError: If a row cannot be read or has an invalid zoom level
        """
        conn = self._connection()
        sql = _SELECT_TILES if include_data else _SELECT_TILE_SIZES
        try:
            cursor = conn.execute(sql)
        except sqlite3.Error as e:
            raise ReadError(f"Failed to query tiles in {self._path}: {e}") from e

        try:
            while True:
                try:
                    row = cursor.fetchone()
                except sqlite3.Error as e:
                    raise ReadError(
                        f"Failed to read tile row from {self._path}: {e}"
                    ) from e
                if row is None:
                    break
                yield self._to_record(row)
        finally:
            if self._conn is not None:
                cursor.close()

    def _to_record(self, row: tuple) -> TileRecord:
        zoom, column, tile_row, length = row[:4]
        if not isinstance(zoom, int) or not 0 <= zoom <= MAX_ZOOM:
            raise ReadError(
                f"Invalid zoom_level {zoom!r} at column={column} row={tile_row} "
                f"in {self._path}"
            )
        data = row[4] if len(row) > 4 else None
        return TileRecord(zoom, column, tile_row, length or 0, data)

    def iter_metadata(self) -> Iterator[tuple[str, str]]:
        """Yield (name, value) metadata pairs in stored order."""
        conn = self._connection()
        try:
            cursor = conn.execute(_SELECT_METADATA)
        except sqlite3.Error as e:
            raise ReadError(f"Failed to query metadata in {self._path}: {e}") from e

        try:
            while True:
                try:
                    row = cursor.fetchone()
                except sqlite3.Error as e:
                    raise ReadError(
                        f"Failed to read metadata row from {self._path}: {e}"
                    ) from e
                if row is None:
                    break
                yield row[0], row[1]
        finally:
            if self._conn is not None:
                cursor.close()

    def metadata(self) -> dict[str, str]:
        """Return metadata as a dict (later duplicates win)."""
        return dict(self.iter_metadata())

    # ------------------------------------------------------------------
    # Writing (read-write stores only)
    # ------------------------------------------------------------------

    def _write_connection(self) -> sqlite3.Connection:
        if not self._writable:
            raise sqlite3.OperationalError(f"{self._path} was opened read-only")
        conn = self._conn
        if conn is None:
            raise sqlite3.ProgrammingError(f"Tile store {self._path} is closed")
        return conn

    def create_schema(self) -> None:
        """Create the metadata and tiles tables.

        Raises:
            sqlite3.Error: If the tables cannot be created (e.g. they exist)
        """
        self._write_connection().executescript(SCHEMA_SQL)

    def begin(self) -> None:
        self._write_connection().execute("BEGIN")

    def commit(self) -> None:
        self._write_connection().execute("COMMIT")

    def rollback(self) -> None:
        conn = self._write_connection()
        if conn.in_transaction:
            conn.execute("ROLLBACK")

    def insert_metadata(self, rows: Iterable[tuple[str, str]]) -> None:
        """Insert metadata pairs in iteration order."""
        self._write_connection().executemany(_INSERT_METADATA, rows)

    def insert_tiles(self, tiles: Iterable[TileRecord]) -> None:
        """Insert tiles in iteration order. Records must carry ``data``."""
        self._write_connection().executemany(
            _INSERT_TILE,
            ((t.zoom, t.column, t.row, t.data) for t in tiles),
        )
