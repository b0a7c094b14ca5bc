"""Layer compositing and PNG encoding.

Every layer is blended onto the canvas with the rule below, one layer at a
time in z-order. All arithmetic is single precision and results are
truncated toward zero, which existing avatars depend on bit-for-bit::

    a     = src_alpha / 255
    inv   = 1 - a
    C     = trunc(src_C * a + dst_C * inv)        for C in R, G, B
    alpha = trunc(min(255, src_alpha + dst_alpha * inv))

Pixels with ``src_alpha == 0`` leave the destination untouched. Note the
alpha term is not the textbook source-over alpha; it is kept as is.

:func:`blend_pixel` is the scalar statement of the rule and
:func:`blend_region` the vectorized one used for rendering.
"""

import io
from typing import Iterable

import numpy as np
import numpy.typing as npt
from PIL import Image

from robo_avatar.atlas import SpriteAtlas
from robo_avatar.errors import EncodeError
from robo_avatar.layers import LayerPlacement
from robo_avatar.types import CELL_SIZE, Pixel, RGBAArray

FloatArray = npt.NDArray[np.float32]

_MAX = np.float32(255.0)
_ONE = np.float32(1.0)


def new_canvas(size: int = CELL_SIZE) -> RGBAArray:
    """Fully transparent black ``size`` x ``size`` RGBA canvas."""
    return np.zeros((size, size, 4), dtype=np.uint8)


def _to_u8(value: np.float32) -> int:
    return int(min(max(value, np.float32(0.0)), _MAX))


def blend_pixel(src: Pixel, dst: Pixel) -> Pixel:
    """Blend one source pixel over one destination pixel."""
    if src[3] == 0:
        return dst
    alpha = np.float32(src[3]) / _MAX
    inv_alpha = _ONE - alpha
    r = _to_u8(np.float32(src[0]) * alpha + np.float32(dst[0]) * inv_alpha)
    g = _to_u8(np.float32(src[1]) * alpha + np.float32(dst[1]) * inv_alpha)
    b = _to_u8(np.float32(src[2]) * alpha + np.float32(dst[2]) * inv_alpha)
    a = _to_u8(min(np.float32(src[3]) + np.float32(dst[3]) * inv_alpha, _MAX))
    return (r, g, b, a)


def blend_region(canvas: RGBAArray, sprite: RGBAArray) -> None:
    """Blend ``sprite`` over ``canvas`` in place; both must share a shape."""
    if canvas.shape != sprite.shape:
        raise ValueError(
            f"Sprite shape {sprite.shape} does not match canvas {canvas.shape}"
        )

    visible = sprite[..., 3] > 0
    if not visible.any():
        return

    src_a: FloatArray = sprite[..., 3].astype(np.float32)
    alpha: FloatArray = src_a / _MAX
    inv_alpha: FloatArray = _ONE - alpha

    src_rgb: FloatArray = sprite[..., :3].astype(np.float32)
    dst_rgb: FloatArray = canvas[..., :3].astype(np.float32)
    dst_a: FloatArray = canvas[..., 3].astype(np.float32)

    rgb: FloatArray = src_rgb * alpha[..., None] + dst_rgb * inv_alpha[..., None]
    out_a: FloatArray = np.minimum(src_a + dst_a * inv_alpha, _MAX)

    blended: RGBAArray = np.empty_like(canvas)
    # astype(uint8) truncates toward zero once values are clipped into range
    blended[..., :3] = np.clip(rgb, 0.0, _MAX).astype(np.uint8)
    blended[..., 3] = np.clip(out_a, 0.0, _MAX).astype(np.uint8)

    canvas[visible] = blended[visible]


def composite_sprite(
    canvas: RGBAArray, atlas: SpriteAtlas, placement: LayerPlacement
) -> None:
    """Blend the atlas cell named by ``placement`` onto ``canvas`` in place."""
    sprite = atlas.region(placement.x, placement.y, canvas.shape[0])
    blend_region(canvas, sprite)


def composite_layers(
    atlas: SpriteAtlas,
    placements: Iterable[LayerPlacement],
    size: int = CELL_SIZE,
) -> RGBAArray:
    """Draw ``placements`` in the given order onto a fresh canvas."""
    canvas = new_canvas(size)
    for placement in placements:
        composite_sprite(canvas, atlas, placement)
    return canvas


def encode_png(canvas: RGBAArray) -> bytes:
    """Encode an RGBA canvas as PNG.

    Raises:
        EncodeError: Pillow rejected the array or failed while writing.
    """
    try:
        image = Image.fromarray(canvas)
    except (TypeError, ValueError) as e:
        raise EncodeError(f"Canvas is not an image array: {e}") from e
    if image.mode != "RGBA":
        raise EncodeError(f"Canvas decoded as {image.mode}, expected RGBA")

    buffer = io.BytesIO()
    try:
        image.save(buffer, format="PNG")
    except (OSError, ValueError) as e:
        raise EncodeError(f"PNG encoding failed: {e}") from e
    return buffer.getvalue()
