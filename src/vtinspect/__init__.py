"""vtinspect - MBTiles inspection and Mapbox GL style visibility checks."""

__version__ = "0.1.0"

from vtinspect.core.errors import (
    CopyError,
    NoSourceLayers,
    OpenError,
    ReadError,
    StyleParseError,
    UnsupportedPathError,
    VtInspectError,
)
from vtinspect.core.types import Report, TileRecord, ZoomLevelStats, ZoomStats
from vtinspect.mbtiles import TileStore, copy_store, inspect
from vtinspect.style import MapboxStyleIndex, load_source_layer_names, load_style

__all__ = [
    "__version__",
    "CopyError",
    "NoSourceLayers",
    "OpenError",
    "ReadError",
    "StyleParseError",
    "UnsupportedPathError",
    "VtInspectError",
    "Report",
    "TileRecord",
    "ZoomLevelStats",
    "ZoomStats",
    "TileStore",
    "copy_store",
    "inspect",
    "MapboxStyleIndex",
    "load_source_layer_names",
    "load_style",
]
