"""Plain identicons.

A horizontally mirrored 5x5 block pattern derived from the SHA-512 of the
input, drawn on a light grey tile. This is the non-robot fallback served for
every path outside ``/robo/``.
"""

import colorsys
import hashlib
import io
from typing import List, Tuple

from PIL import Image, ImageDraw

DEFAULT_GRID = 5
DEFAULT_SIZE = 500
DEFAULT_BORDER = 50
BACKGROUND: Tuple[int, int, int] = (240, 240, 240)


def identicon_color(hash_bytes: bytes) -> Tuple[int, int, int]:
    """Deterministic saturated foreground color from the tail of the hash."""
    hue = int.from_bytes(hash_bytes[-3:-1], "big") / 0xFFFF
    saturation = 0.45 + 0.2 * (hash_bytes[-1] / 255)
    lightness = 0.5 + 0.15 * (hash_bytes[-4] / 255)
    r, g, b = colorsys.hls_to_rgb(hue, lightness, saturation)
    return int(r * 255), int(g * 255), int(b * 255)


def identicon_grid(hash_bytes: bytes, grid: int = DEFAULT_GRID) -> List[List[bool]]:
    """Filled cells, mirrored so column ``x`` equals column ``grid - 1 - x``."""
    half_cols = (grid + 1) // 2  # include middle if odd
    rows: List[List[bool]] = []
    for y in range(grid):
        half = [
            hash_bytes[(y * half_cols + x) % len(hash_bytes)] % 2 == 0
            for x in range(half_cols)
        ]
        rows.append(half + half[: grid // 2][::-1])
    return rows


def render_identicon(
    data: str,
    size: int = DEFAULT_SIZE,
    *,
    grid: int = DEFAULT_GRID,
    border: int = DEFAULT_BORDER,
) -> Image.Image:
    """Render the identicon for ``data`` as an RGB image of ``size`` pixels."""
    if size <= 2 * border:
        raise ValueError(f"size {size} leaves no room inside a {border}px border")
    hash_bytes = hashlib.sha512(data.encode("utf-8", "surrogatepass")).digest()
    color = identicon_color(hash_bytes)

    image = Image.new("RGB", (size, size), BACKGROUND)
    draw = ImageDraw.Draw(image)
    cell = (size - 2 * border) / grid
    for y, row in enumerate(identicon_grid(hash_bytes, grid)):
        for x, filled in enumerate(row):
            if not filled:
                continue
            x0 = border + round(x * cell)
            y0 = border + round(y * cell)
            x1 = border + round((x + 1) * cell) - 1
            y1 = border + round((y + 1) * cell) - 1
            draw.rectangle([x0, y0, x1, y1], fill=color)
    return image


def identicon_png(data: str, size: int = DEFAULT_SIZE) -> bytes:
    buffer = io.BytesIO()
    render_identicon(data, size).save(buffer, format="PNG")
    return buffer.getvalue()
