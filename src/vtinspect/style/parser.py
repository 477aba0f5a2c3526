"""Parsing of Mapbox GL style documents into a source-layer index."""

from __future__ import annotations

import json
import logging
import math
from pathlib import Path
from typing import Any

from vtinspect.core.errors import NoSourceLayers, StyleParseError

from .index import MapboxStyleIndex
from .types import (
    RECOGNIZED_PAINT_PROPERTIES,
    PaintValue,
    ScalarPaint,
    StopsPaint,
    StyleLayer,
    Visibility,
)

logger = logging.getLogger(__name__)

MIN_STOP_ZOOM = 0
MAX_STOP_ZOOM = 255


def _as_number(value: Any) -> float | None:
    # JSON booleans arrive as bool, which is an int subclass
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    try:
        return float(value)
    except OverflowError:
        # Integers beyond the float range
        return None


def _parse_stop(stop: Any) -> tuple[int, float] | None:
    if not isinstance(stop, list) or len(stop) < 2:
        return None
    zoom = _as_number(stop[0])
    value = _as_number(stop[1])
    if zoom is None or value is None or not math.isfinite(zoom):
        return None
    zoom_level = int(zoom)
    if not MIN_STOP_ZOOM <= zoom_level <= MAX_STOP_ZOOM:
        return None
    return zoom_level, value


def parse_paint_value(value: Any) -> PaintValue | None:
    """Parse a paint property value.

    Returns a ``ScalarPaint`` for a bare number, a ``StopsPaint`` for an
    object with a ``stops`` list, or None if the value is neither or no
    stop survives. Malformed stops and stops outside zoom 0-255 are dropped.
    """
    number = _as_number(value)
    if number is not None:
        return ScalarPaint(number)

    if not isinstance(value, dict):
        return None
    stops = value.get("stops")
    if not isinstance(stops, list):
        return None

    parsed = []
    for stop in stops:
        result = _parse_stop(stop)
        if result is None:
            logger.debug("Dropping unusable stop %r", stop)
            continue
        parsed.append(result)

    if not parsed:
        return None
    return StopsPaint(tuple(parsed))


def _parse_layer(layer: dict) -> StyleLayer:
    layout = layer.get("layout")
    visibility = Visibility.VISIBLE
    if isinstance(layout, dict) and layout.get("visibility") == "none":
        visibility = Visibility.NONE

    paint: dict[str, PaintValue] = {}
    props = layer.get("paint")
    if isinstance(props, dict):
        for name in RECOGNIZED_PAINT_PROPERTIES:
            if name not in props:
                continue
            parsed = parse_paint_value(props[name])
            if parsed is not None:
                paint[name] = parsed

    layer_id = layer.get("id")
    return StyleLayer(
        min_zoom=_as_number(layer.get("minzoom")),
        max_zoom=_as_number(layer.get("maxzoom")),
        visibility=visibility,
        paint=paint,
        layer_id=layer_id if isinstance(layer_id, str) else "",
    )


def build_index(document: Any) -> MapboxStyleIndex:
    """Build a ``MapboxStyleIndex`` from an already decoded style document.

    Layers without a ``source`` key or a string ``source-layer`` are skipped.
    A ``source`` of null still counts as present.

    Raises:
        StyleParseError: If the document has no ``layers`` list
        NoSourceLayers: If no layer references a source-layer
    """
    if not isinstance(document, dict):
        raise StyleParseError("Style document is not an object")
    layers = document.get("layers")
    if not isinstance(layers, list):
        raise StyleParseError("Style document is missing a layers array")

    by_source_layer: dict[str, list[StyleLayer]] = {}
    for layer in layers:
        if not isinstance(layer, dict) or "source" not in layer:
            continue
        source_layer = layer.get("source-layer")
        if not isinstance(source_layer, str):
            logger.debug("Skipping layer %r without source-layer", layer.get("id"))
            continue
        by_source_layer.setdefault(source_layer, []).append(_parse_layer(layer))

    if not by_source_layer:
        raise NoSourceLayers("Style document contains no source-layer entries")

    logger.debug(
        "Indexed %d style layers across %d source-layers",
        sum(len(v) for v in by_source_layer.values()),
        len(by_source_layer),
    )
    return MapboxStyleIndex(by_source_layer)


def parse_style(text: str | bytes) -> MapboxStyleIndex:
    """Parse style JSON text into a ``MapboxStyleIndex``.

    Raises:
        StyleParseError: If the text is not valid JSON or has no layers list
        NoSourceLayers: If no layer references a source-layer
    """
    try:
        document = json.loads(text)
    except ValueError as e:
        # JSONDecodeError, UnicodeDecodeError and the int digit limit
        raise StyleParseError(f"Failed to parse style JSON: {e}") from e
    return build_index(document)


def load_style(path: str | Path) -> MapboxStyleIndex:
    """Read and parse a style file.

    Raises:
        StyleParseError: If the file cannot be read or is not a usable style
        NoSourceLayers: If no layer references a source-layer
    """
    path = Path(path)
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise StyleParseError(f"Failed to read style file {path}: {e}") from e
    logger.debug("Loaded style %s", path)
    return parse_style(text)


def load_source_layer_names(path: str | Path) -> frozenset[str]:
    """Return the source-layer names referenced by the style at ``path``."""
    return load_style(path).source_layer_names()
