"""Type definitions for Mapbox GL style visibility rules."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Mapping, Union

#: Paint properties whose zero value suppresses rendering
RECOGNIZED_PAINT_PROPERTIES: tuple[str, ...] = (
    "fill-opacity",
    "fill-outline-color",
    "line-opacity",
    "line-width",
    "icon-size",
    "text-size",
    "text-max-width",
    "text-opacity",
    "raster-opacity",
    "circle-radius",
    "circle-opacity",
    "fill-extrusion-opacity",
    "heatmap-opacity",
)


class Visibility(Enum):
    """Value of a layer's ``layout.visibility``."""

    VISIBLE = "visible"  # Absent, "visible", or anything other than "none"
    NONE = "none"


@dataclass(frozen=True)
class ScalarPaint:
    """A constant paint value."""

    value: float

    def is_nonzero_at(self, zoom: int) -> bool:
        return self.value != 0.0


@dataclass(frozen=True)
class StopsPaint:
    """A zoom-keyed stop function.

    Only a stop at exactly ``zoom`` decides the value. Between or outside
    the stops the property counts as non-zero.
    """

    stops: tuple[tuple[int, float], ...]

    def value_at(self, zoom: int) -> float | None:
        for stop_zoom, value in self.stops:
            if stop_zoom == zoom:
                return value
        return None

    def is_nonzero_at(self, zoom: int) -> bool:
        value = self.value_at(zoom)
        return value is None or value != 0.0


PaintValue = Union[ScalarPaint, StopsPaint]


@dataclass(frozen=True)
class StyleLayer:
    """One style layer bound to a source-layer.

    Attributes:
        min_zoom: Inclusive lower zoom bound, None if unbounded
        max_zoom: Exclusive upper zoom bound, None if unbounded
        visibility: Layout visibility
        paint: Recognized paint properties that parsed to a usable value
        layer_id: The style layer ``id``, for diagnostics
    """

    min_zoom: float | None = None
    max_zoom: float | None = None
    visibility: Visibility = Visibility.VISIBLE
    paint: Mapping[str, PaintValue] = field(default_factory=dict)
    layer_id: str = ""

    def __post_init__(self) -> None:
        object.__setattr__(self, "paint", MappingProxyType(dict(self.paint)))

    def __hash__(self) -> int:
        # MappingProxyType is unhashable, so hash the paint items instead
        return hash(
            (
                self.min_zoom,
                self.max_zoom,
                self.visibility,
                tuple(sorted(self.paint.items())),
                self.layer_id,
            )
        )

    def is_visible_at_zoom(self, zoom: int) -> bool:
        """Check layout visibility and the [min_zoom, max_zoom) range."""
        if self.visibility is Visibility.NONE:
            return False
        if self.min_zoom is not None and zoom < self.min_zoom:
            return False
        if self.max_zoom is not None and zoom >= self.max_zoom:
            return False
        return True

    def is_rendered_at_zoom(self, zoom: int) -> bool:
        """Check that no recognized paint property is zero at ``zoom``."""
        for name in RECOGNIZED_PAINT_PROPERTIES:
            value = self.paint.get(name)
            if value is not None and not value.is_nonzero_at(zoom):
                return False
        return True

    def is_shown_at_zoom(self, zoom: int) -> bool:
        return self.is_visible_at_zoom(zoom) and self.is_rendered_at_zoom(zoom)
