import hashlib
from functools import lru_cache
from pathlib import Path
from typing import Sequence, Tuple

import numpy as np
import pytest

from robo_avatar.atlas import SpriteAtlas
from robo_avatar.compositor import blend_pixel
from robo_avatar.generator import AvatarGenerator
from robo_avatar.layers import LayerPlacement, required_atlas_size
from robo_avatar.sprites import build_atlas
from robo_avatar.types import BAND_HEIGHT, CELL_SIZE, Pixel, RGBAArray

PNG_SIGNATURE = b"\x89PNG\r\n\x1a\n"

GOLDEN_DIR = Path(__file__).parent / "golden"

STRIPE_HEIGHT = 60
PATCH_SIZE = 10


def make_pixels(width: int, height: int) -> RGBAArray:
    return np.zeros((height, width, 4), dtype=np.uint8)


def paint(
    pixels: RGBAArray,
    origin: Tuple[int, int],
    color: Pixel,
    size: int = CELL_SIZE,
) -> None:
    """Fill a ``size`` x ``size`` square at ``origin`` (x, y) with ``color``."""
    x, y = origin
    pixels[y : y + size, x : x + size] = color


@lru_cache(maxsize=1)
def built_in_generator() -> AvatarGenerator:
    """Generator over the built-in atlas, rendered once per test session."""
    return AvatarGenerator(build_atlas())


def cell_code(x: int, y: int) -> Pixel:
    """Opaque color naming the atlas cell whose top-left corner is (x, y)."""
    return (x // CELL_SIZE * 25, y // CELL_SIZE * 5, 100, 255)


@lru_cache(maxsize=1)
def coded_atlas() -> SpriteAtlas:
    """Full-size atlas where each cell draws an opaque stripe of its own code.

    The stripe of a cell sits at rows ``60 * k`` to ``60 * k + 59`` of the
    cell, ``k`` being the cell's row inside its color band, so the five
    layers of one avatar never overlap there. Every cell also paints a 10x10
    patch at its top-left corner, where only the topmost layer shows.
    """
    width, height = required_atlas_size()
    pixels = make_pixels(width, height)
    for y in range(0, height, CELL_SIZE):
        top = y + STRIPE_HEIGHT * ((y % BAND_HEIGHT) // CELL_SIZE)
        for x in range(0, width, CELL_SIZE):
            code = cell_code(x, y)
            pixels[top : top + STRIPE_HEIGHT, x : x + CELL_SIZE] = code
            pixels[y : y + PATCH_SIZE, x : x + PATCH_SIZE] = code
    pixels.setflags(write=False)
    return SpriteAtlas(pixels)


def reference_pixel(
    atlas: SpriteAtlas, placements: Sequence[LayerPlacement], x: int, y: int
) -> Pixel:
    """Canvas pixel (x, y) computed one layer at a time with ``blend_pixel``."""
    dst: Pixel = (0, 0, 0, 0)
    for placement in placements:
        src = atlas.pixels[placement.y + y, placement.x + x]
        dst = blend_pixel((int(src[0]), int(src[1]), int(src[2]), int(src[3])), dst)
    return dst


def check_golden(name: str, data: bytes) -> None:
    """Compare the SHA-256 of ``data`` with ``tests/golden/<name>.sha256``.

    If the golden file does not exist, it is created and the test fails, so
    a new digest is always reviewed before it is committed.
    """
    path = GOLDEN_DIR / f"{name}.sha256"
    actual = hashlib.sha256(data).hexdigest()
    if not path.exists():
        GOLDEN_DIR.mkdir(exist_ok=True)
        path.write_text(actual + "\n")
        pytest.fail(
            f"Golden file did not exist. A new one has been created at:"
            f"\n{path}\nPlease review it and commit it to the repository."
        )
    expected = path.read_text().strip()
    assert actual == expected, (
        f"{name} no longer matches {path}; every deployed avatar would change. "
        f"Delete the file and rerun only if the change is intended."
    )
