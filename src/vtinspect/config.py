"""Centralized configuration for vtinspect.

All tunable parameters are defined here with sensible defaults.
Values can be overridden via environment variables.

Environment Variables:
    VTINSPECT_CACHE_SIZE_KB: SQLite page cache for read scans in KiB (default: 200000)
    VTINSPECT_PROGRESS_INTERVAL: Rows between progress updates (default: 1000)
"""

from __future__ import annotations

import logging
import os

logger = logging.getLogger(__name__)


def _get_env_int(name: str, default: int) -> int:
    """Get an integer from environment variable with fallback."""
    value = os.environ.get(name)
    if value is not None:
        try:
            return int(value)
        except ValueError:
            logger.warning(
                "Invalid integer for %s: %r, using default %d", name, value, default
            )
    return default


# =============================================================================
# Tile Store Configuration
# =============================================================================

#: Supported tile store file extensions
TILE_STORE_EXTENSIONS: frozenset[str] = frozenset({".mbtiles"})

#: SQLite page cache used for read-only scans, in KiB
READ_CACHE_SIZE_KB: int = _get_env_int("VTINSPECT_CACHE_SIZE_KB", 200000)

#: Pragmas applied when a store is opened for scanning.
#: These only change how fast rows come back, never which rows.
READ_PRAGMAS: tuple[str, ...] = (
    "PRAGMA query_only = ON",
    "PRAGMA temp_store = MEMORY",
    "PRAGMA synchronous = OFF",
)


# =============================================================================
# Progress Reporting
# =============================================================================

#: Number of rows processed between progress callback invocations
PROGRESS_INTERVAL: int = _get_env_int("VTINSPECT_PROGRESS_INTERVAL", 1000)


# =============================================================================
# Validation
# =============================================================================


def _validate_config() -> None:
    """Validate configuration values and log warnings for out-of-range settings."""
    global READ_CACHE_SIZE_KB, PROGRESS_INTERVAL

    if READ_CACHE_SIZE_KB < 0:
        logger.warning(
            "READ_CACHE_SIZE_KB=%d is negative, clamping to 0", READ_CACHE_SIZE_KB
        )
        READ_CACHE_SIZE_KB = 0

    if PROGRESS_INTERVAL < 1:
        logger.warning(
            "PROGRESS_INTERVAL=%d is too low, clamping to 1", PROGRESS_INTERVAL
        )
        PROGRESS_INTERVAL = 1


_validate_config()
