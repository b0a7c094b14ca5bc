import io

import numpy as np
import pytest
from PIL import Image

from robo_avatar.atlas import SpriteAtlas
from robo_avatar.compositor import (
    blend_pixel,
    blend_region,
    composite_layers,
    encode_png,
    new_canvas,
)
from robo_avatar.errors import EncodeError
from robo_avatar.fingerprint import Selectors
from robo_avatar.layers import LayerPlacement, resolve_layers
from robo_avatar.types import Layer, Pixel
from tests.test_utils import PNG_SIGNATURE, make_pixels, paint


@pytest.mark.parametrize(
    "src, dst, expected",
    [
        # opaque source replaces destination
        ((12, 34, 56, 255), (200, 100, 50, 255), (12, 34, 56, 255)),
        ((250, 250, 250, 100), (10, 10, 10, 200), (104, 104, 104, 221)),
        # 139.82 truncates to 139, never rounds up
        ((200, 200, 200, 100), (101, 101, 101, 0), (139, 139, 139, 100)),
        ((0, 0, 0, 1), (0, 0, 0, 0), (0, 0, 0, 1)),
    ],
)
def test_blend_pixel(src: Pixel, dst: Pixel, expected: Pixel) -> None:
    assert blend_pixel(src, dst) == expected


def test_zero_alpha_source_never_changes_destination() -> None:
    dst: Pixel = (10, 20, 30, 200)
    assert blend_pixel((255, 255, 255, 0), dst) == dst

    canvas = np.full((8, 8, 4), (10, 20, 30, 200), dtype=np.uint8)
    sprite = np.full((8, 8, 4), (255, 0, 255, 0), dtype=np.uint8)
    blend_region(canvas, sprite)
    assert (canvas == np.array((10, 20, 30, 200), dtype=np.uint8)).all()


def test_alpha_never_exceeds_255() -> None:
    for src_a in range(1, 256, 17):
        _, _, _, a = blend_pixel((0, 0, 0, src_a), (0, 0, 0, 255))
        assert a <= 255


def test_vectorized_blend_matches_scalar_rule() -> None:
    rng = np.random.default_rng(1234)
    canvas = rng.integers(0, 256, size=(24, 24, 4), dtype=np.uint8)
    sprite = rng.integers(0, 256, size=(24, 24, 4), dtype=np.uint8)
    sprite[::3, ::3, 3] = 0  # sprinkle fully transparent pixels

    expected = np.empty_like(canvas)
    for y in range(24):
        for x in range(24):
            src = tuple(int(v) for v in sprite[y, x])
            dst = tuple(int(v) for v in canvas[y, x])
            expected[y, x] = blend_pixel(src, dst)  # type: ignore[arg-type]

    blend_region(canvas, sprite)
    assert (canvas == expected).all()


def test_blend_region_rejects_shape_mismatch() -> None:
    with pytest.raises(ValueError):
        blend_region(new_canvas(10), np.zeros((5, 5, 4), dtype=np.uint8))


def test_new_canvas_is_transparent() -> None:
    canvas = new_canvas()
    assert canvas.shape == (300, 300, 4)
    assert canvas.dtype == np.uint8
    assert not canvas.any()


def _color_zero_selectors(head: int, accessory: int) -> Selectors:
    return Selectors(
        body=0,
        head=head,
        eyes=0,
        mouth=0,
        accessory=accessory,
        body_head_color=0,
        eye_mouth_color=0,
        accessory_color=0,
    )


def test_accessory_drawn_last_wins_over_head() -> None:
    # band 0 only needs the first 1500 rows
    pixels = make_pixels(3000, 1500)
    placements = resolve_layers(_color_zero_selectors(head=2, accessory=5))
    head = next(p for p in placements if p.layer == Layer.HEAD)
    accessory = next(p for p in placements if p.layer == Layer.ACCESSORY)

    paint(pixels, head.origin, (255, 0, 0, 255))
    # accessory covers only the top-left 100x100 of its cell
    paint(pixels, accessory.origin, (0, 0, 255, 255), size=100)

    canvas = composite_layers(SpriteAtlas(pixels), placements)
    assert tuple(canvas[50, 50]) == (0, 0, 255, 255)
    assert tuple(canvas[99, 99]) == (0, 0, 255, 255)
    assert tuple(canvas[150, 150]) == (255, 0, 0, 255)
    assert tuple(canvas[100, 0]) == (255, 0, 0, 255)


def test_layers_blend_sequentially() -> None:
    pixels = make_pixels(600, 300)
    paint(pixels, (0, 0), (0, 0, 200, 255))
    paint(pixels, (300, 0), (250, 250, 250, 100))
    # mouth cells sit on the first row of band 0
    placements = [
        LayerPlacement(Layer.MOUTH, 0, 0),
        LayerPlacement(Layer.MOUTH, 1, 0),
    ]
    canvas = composite_layers(SpriteAtlas(pixels), placements)
    expected = blend_pixel((250, 250, 250, 100), (0, 0, 200, 255))
    assert tuple(canvas[0, 0]) == expected
    assert tuple(canvas[299, 299]) == expected


def test_encode_png_round_trips_pixels() -> None:
    canvas = new_canvas(16)
    canvas[4:8, 4:8] = (1, 2, 3, 4)
    data = encode_png(canvas)
    assert data.startswith(PNG_SIGNATURE)
    with Image.open(io.BytesIO(data)) as image:
        assert image.mode == "RGBA"
        assert image.size == (16, 16)
        assert (np.array(image) == canvas).all()


def test_encode_png_is_deterministic() -> None:
    canvas = np.random.default_rng(7).integers(0, 256, (32, 32, 4), dtype=np.uint8)
    assert encode_png(canvas) == encode_png(canvas.copy())


def test_encode_failure_raises_encode_error() -> None:
    with pytest.raises(EncodeError):
        encode_png(np.zeros((4, 4, 4), dtype=np.float64))  # type: ignore[arg-type]
