"""Core types, errors and path helpers for vtinspect."""

from .errors import (
    CopyError,
    NoSourceLayers,
    OpenError,
    ReadError,
    StyleParseError,
    UnsupportedPathError,
    VtInspectError,
)
from .types import ProgressCallback, Report, TileRecord, ZoomLevelStats, ZoomStats

__all__ = [
    "CopyError",
    "NoSourceLayers",
    "OpenError",
    "ReadError",
    "StyleParseError",
    "UnsupportedPathError",
    "VtInspectError",
    "ProgressCallback",
    "Report",
    "TileRecord",
    "ZoomLevelStats",
    "ZoomStats",
]
