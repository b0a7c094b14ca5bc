"""Common type aliases, layer enumeration and atlas geometry constants."""

from enum import StrEnum, auto
from typing import Tuple

import numpy as np
import numpy.typing as npt

Digest = bytes
Origin = Tuple[int, int]
Pixel = Tuple[int, int, int, int]
RGBAArray = npt.NDArray[np.uint8]

CELL_SIZE = 300
"""Side length of one sprite cell and of the output canvas."""

NUM_STYLES = 10
NUM_COLORS = 10
LAYERS_PER_BAND = 5
BAND_HEIGHT = CELL_SIZE * LAYERS_PER_BAND


class Layer(StrEnum):
    """Drawable robot parts."""

    BODY = auto()
    HEAD = auto()
    MOUTH = auto()
    EYES = auto()
    ACCESSORY = auto()


Z_ORDER: Tuple[Layer, ...] = (
    Layer.BODY,
    Layer.HEAD,
    Layer.MOUTH,
    Layer.EYES,
    Layer.ACCESSORY,
)
