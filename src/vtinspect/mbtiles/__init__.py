"""MBTiles inspection and duplication."""

from .copy import copy_store, copy_tiles
from .stats import aggregate, inspect
from .store import TileStore

__all__ = [
    "TileStore",
    "aggregate",
    "copy_store",
    "copy_tiles",
    "inspect",
]
