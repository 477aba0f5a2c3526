"""Mapbox GL style visibility evaluation."""

from .index import MapboxStyleIndex
from .parser import (
    build_index,
    load_source_layer_names,
    load_style,
    parse_paint_value,
    parse_style,
)
from .types import (
    RECOGNIZED_PAINT_PROPERTIES,
    PaintValue,
    ScalarPaint,
    StopsPaint,
    StyleLayer,
    Visibility,
)

__all__ = [
    "MapboxStyleIndex",
    "build_index",
    "load_source_layer_names",
    "load_style",
    "parse_paint_value",
    "parse_style",
    "RECOGNIZED_PAINT_PROPERTIES",
    "PaintValue",
    "ScalarPaint",
    "StopsPaint",
    "StyleLayer",
    "Visibility",
]
