"""Read-only sprite atlas.

The atlas is decoded once into an RGBA ``uint8`` NumPy array whose write flag
is cleared, then shared by every generation call. Regions handed to the
compositor are views into that array, never copies.
"""

from dataclasses import dataclass
from typing import Tuple

import numpy as np
from PIL import Image, UnidentifiedImageError

from robo_avatar.errors import AtlasError
from robo_avatar.layers import required_atlas_size
from robo_avatar.types import CELL_SIZE, RGBAArray


@dataclass(frozen=True)
class SpriteAtlas:
    """Immutable RGBA sprite sheet.

    Attributes:
        pixels: ``(height, width, 4)`` uint8 array, read-only.
    """

    pixels: RGBAArray

    def __post_init__(self) -> None:
        pixels = self.pixels
        if pixels.ndim != 3 or pixels.shape[2] != 4:
            raise AtlasError(f"Atlas must be an RGBA array, got shape {pixels.shape}")
        if pixels.dtype != np.uint8:
            raise AtlasError(f"Atlas must be uint8, got {pixels.dtype}")
        if pixels.flags.writeable:
            # Keep the caller's buffer untouched; freeze a private copy.
            pixels = pixels.copy()
            pixels.setflags(write=False)
            object.__setattr__(self, "pixels", pixels)

    @property
    def width(self) -> int:
        return int(self.pixels.shape[1])

    @property
    def height(self) -> int:
        return int(self.pixels.shape[0])

    @property
    def size(self) -> Tuple[int, int]:
        return (self.width, self.height)

    def region(self, x: int, y: int, size: int = CELL_SIZE) -> RGBAArray:
        """Return a read-only ``size`` x ``size`` view with top-left ``(x, y)``."""
        if x < 0 or y < 0 or x + size > self.width or y + size > self.height:
            raise AtlasError(
                f"Region ({x}, {y}) size {size} is outside atlas {self.size}"
            )
        return self.pixels[y : y + size, x : x + size]


def atlas_from_image(image: Image.Image) -> SpriteAtlas:
    if image.mode != "RGBA":
        image = image.convert("RGBA")
    pixels: RGBAArray = np.array(image, dtype=np.uint8)
    pixels.setflags(write=False)
    return SpriteAtlas(pixels)


def check_atlas_size(atlas: SpriteAtlas) -> None:
    """Raise :class:`AtlasError` unless every layer placement fits in ``atlas``."""
    min_width, min_height = required_atlas_size()
    if atlas.width < min_width or atlas.height < min_height:
        raise AtlasError(
            f"Atlas is {atlas.width}x{atlas.height}, "
            f"needs at least {min_width}x{min_height}"
        )


def load_atlas(path: str) -> SpriteAtlas:
    """Decode an atlas PNG from ``path``.

    Raises:
        AtlasError: The file is missing, not an image, or too small.
    """
    try:
        with Image.open(path) as image:
            atlas = atlas_from_image(image)
    except (UnidentifiedImageError, OSError, ValueError) as e:
        raise AtlasError(f"Cannot load sprite atlas {path!r}: {e}") from e
    check_atlas_size(atlas)
    return atlas
