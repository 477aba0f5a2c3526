"""Source-layer index over a parsed style and its visibility queries."""

from __future__ import annotations

from types import MappingProxyType
from typing import Iterable, Mapping

from .types import StyleLayer


class MapboxStyleIndex:
    """Style layers grouped by the source-layer they draw from.

    Built once by the parser and never mutated afterwards.
    """

    def __init__(self, layers_by_source_layer: Mapping[str, Iterable[StyleLayer]]) -> None:
        self._layers: Mapping[str, tuple[StyleLayer, ...]] = MappingProxyType(
            {name: tuple(layers) for name, layers in layers_by_source_layer.items()}
        )

    def source_layer_names(self) -> frozenset[str]:
        return frozenset(self._layers)

    def layers_for(self, source_layer: str) -> tuple[StyleLayer, ...]:
        """Return the style layers bound to ``source_layer`` (empty if unknown)."""
        return self._layers.get(source_layer, ())

    def is_visible_at_zoom(self, source_layer: str, zoom: int) -> bool:
        """Whether any style layer draws ``source_layer`` at ``zoom``.

        A style layer draws when its layout visibility is not ``none``, the
        zoom lies in ``[minzoom, maxzoom)``, and none of its recognized paint
        properties is zero at that zoom. Unknown source-layers are not visible.
        """
        return any(
            layer.is_shown_at_zoom(zoom) for layer in self._layers.get(source_layer, ())
        )

    def visible_source_layers(self, zoom: int) -> frozenset[str]:
        """Return the source-layer names visible at ``zoom``."""
        return frozenset(
            name for name in self._layers if self.is_visible_at_zoom(name, zoom)
        )

    def __contains__(self, source_layer: object) -> bool:
        return source_layer in self._layers

    def __len__(self) -> int:
        return len(self._layers)

    def __repr__(self) -> str:
        rules = sum(len(layers) for layers in self._layers.values())
        return f"<MapboxStyleIndex: {len(self._layers)} source-layers, {rules} layers>"
