"""Selector -> atlas coordinate mapping.

The atlas is split into ten horizontal color bands, each ``BAND_HEIGHT``
(five cells) tall. Inside a band, rows hold one layer each::

    +0    mouth      (eye/mouth color)
    +300  eyes       (eye/mouth color)
    +600  accessory  (accessory color)
    +900  body       (body/head color)
    +1200 head       (body/head color)

Columns are the ten styles. Body and head share a band index, eyes and mouth
share another, and the accessory has its own, so a style can be recolored
without redrawing it. Only the row of the chosen band is read for each layer.
"""

from dataclasses import dataclass
from typing import Callable, Dict, Tuple

from pyrsistent import pvector
from pyrsistent.typing import PVector

from robo_avatar.fingerprint import Selectors
from robo_avatar.types import (
    BAND_HEIGHT,
    CELL_SIZE,
    NUM_COLORS,
    NUM_STYLES,
    Layer,
    Origin,
    Z_ORDER,
)

SelectorFn = Callable[[Selectors], int]

LAYER_ROW_OFFSETS: Dict[Layer, int] = {
    Layer.MOUTH: 0,
    Layer.EYES: CELL_SIZE,
    Layer.ACCESSORY: 2 * CELL_SIZE,
    Layer.BODY: 3 * CELL_SIZE,
    Layer.HEAD: 4 * CELL_SIZE,
}

LAYER_STYLE: Dict[Layer, SelectorFn] = {
    Layer.BODY: lambda s: s.body,
    Layer.HEAD: lambda s: s.head,
    Layer.MOUTH: lambda s: s.mouth,
    Layer.EYES: lambda s: s.eyes,
    Layer.ACCESSORY: lambda s: s.accessory,
}

LAYER_COLOR: Dict[Layer, SelectorFn] = {
    Layer.BODY: lambda s: s.body_head_color,
    Layer.HEAD: lambda s: s.body_head_color,
    Layer.MOUTH: lambda s: s.eye_mouth_color,
    Layer.EYES: lambda s: s.eye_mouth_color,
    Layer.ACCESSORY: lambda s: s.accessory_color,
}


@dataclass(frozen=True)
class LayerPlacement:
    """One resolved layer: which cell of the atlas to draw.

    Attributes:
        layer: Robot part this cell depicts.
        style: Column index in ``[0, 9]``.
        color: Band index in ``[0, 9]``.
    """

    layer: Layer
    style: int
    color: int

    @property
    def x(self) -> int:
        return self.style * CELL_SIZE

    @property
    def y(self) -> int:
        return self.color * BAND_HEIGHT + LAYER_ROW_OFFSETS[self.layer]

    @property
    def origin(self) -> Origin:
        return (self.x, self.y)


def resolve_layer(selectors: Selectors, layer: Layer) -> LayerPlacement:
    return LayerPlacement(
        layer=layer,
        style=LAYER_STYLE[layer](selectors),
        color=LAYER_COLOR[layer](selectors),
    )


def resolve_layers(selectors: Selectors) -> PVector[LayerPlacement]:
    """Return the five placements in drawing order (body first, accessory last)."""
    return pvector([resolve_layer(selectors, layer) for layer in Z_ORDER])


def cell_origin(layer: Layer, style: int, color: int) -> Origin:
    """Atlas origin of a given layer/style/color cell."""
    return LayerPlacement(layer=layer, style=style, color=color).origin


def required_atlas_size() -> Tuple[int, int]:
    """Minimum ``(width, height)`` an atlas needs to cover every placement."""
    return (NUM_STYLES * CELL_SIZE, NUM_COLORS * BAND_HEIGHT)
