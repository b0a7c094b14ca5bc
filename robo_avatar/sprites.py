"""Built-in robot sprite sheet.

Draws the ten styles of every layer in grey tones with ``ImageDraw`` and
tints each one into the ten band colors with
:func:`robo_avatar.utils.image.recolor_keep_tone`. Grey value carries the
shading, so outlines stay dark and highlights stay light in every band.

Sprites share one face layout on the 300x300 cell:

* accessory: anywhere, mostly above y=60 and on the head sides
* head: y 50-180, eyes around y=105, mouth around y=148
* body: neck and torso, y 160-292

The output is a pure function of this module, so a saved sheet
(``robo-avatar build-atlas``) and the in-process one are identical.
"""

import math
from typing import Callable, Dict, List, Optional, Sequence, Tuple

import numpy as np
from PIL import Image, ImageDraw

from robo_avatar.atlas import SpriteAtlas
from robo_avatar.layers import cell_origin, required_atlas_size
from robo_avatar.log import get_logger
from robo_avatar.types import CELL_SIZE, NUM_COLORS, NUM_STYLES, Layer, RGBAArray
from robo_avatar.utils.image import RGB, recolor_keep_tone

logger = get_logger(__name__)

Fill = Tuple[int, int, int, int]
Box = Tuple[int, int, int, int]
SpriteFn = Callable[[ImageDraw.ImageDraw, int], None]

OUTLINE: Fill = (40, 40, 40, 255)
SHADOW: Fill = (110, 110, 110, 255)
FILL: Fill = (180, 180, 180, 255)
LIGHT: Fill = (235, 235, 235, 255)
DROP_SHADOW: Fill = (0, 0, 0, 90)
GLOW: Fill = (250, 250, 250, 110)

CX = CELL_SIZE // 2

BAND_COLORS: List[RGB] = [
    (220, 60, 60),  # red
    (235, 140, 40),  # orange
    (230, 210, 50),  # yellow
    (90, 190, 70),  # green
    (40, 170, 150),  # teal
    (60, 180, 230),  # sky
    (60, 90, 210),  # blue
    (140, 80, 210),  # violet
    (220, 80, 170),  # pink
    (120, 130, 145),  # steel
]

# How far each layer is pulled to the band color's saturation
LAYER_SATURATION: Dict[Layer, float] = {
    Layer.BODY: 1.0,
    Layer.HEAD: 1.0,
    Layer.MOUTH: 0.7,
    Layer.EYES: 0.7,
    Layer.ACCESSORY: 1.0,
}


def _shape(draw: ImageDraw.ImageDraw, kind: int, box: Box, fill: Fill) -> None:
    """Draw one of five outline shapes inside ``box``."""
    x0, y0, x1, y1 = box
    inset = (x1 - x0) // 5
    if kind == 0:
        draw.rectangle(box, fill=fill, outline=OUTLINE, width=4)
    elif kind == 1:
        draw.rounded_rectangle(box, radius=24, fill=fill, outline=OUTLINE, width=4)
    elif kind == 2:
        draw.ellipse(box, fill=fill, outline=OUTLINE, width=4)
    elif kind == 3:
        draw.polygon(
            [(x0 + inset, y0), (x1 - inset, y0), (x1, y1), (x0, y1)],
            fill=fill,
            outline=OUTLINE,
            width=4,
        )
    else:
        cut = min(inset, (y1 - y0) // 3)
        draw.polygon(
            [
                (x0 + cut, y0),
                (x1 - cut, y0),
                (x1, y0 + cut),
                (x1, y1 - cut),
                (x1 - cut, y1),
                (x0 + cut, y1),
                (x0, y1 - cut),
                (x0, y0 + cut),
            ],
            fill=fill,
            outline=OUTLINE,
            width=4,
        )


# --- Body ---


def draw_body(draw: ImageDraw.ImageDraw, style: int) -> None:
    half_w = 70 if style < 5 else 92
    draw.ellipse((CX - half_w - 10, 276, CX + half_w + 10, 298), fill=DROP_SHADOW)
    draw.rectangle((CX - 16, 160, CX + 16, 190), fill=SHADOW, outline=OUTLINE, width=3)
    _shape(draw, style % 5, (CX - half_w, 182, CX + half_w, 290), FILL)

    panel = (CX - 32, 206, CX + 32, 258)
    draw.rounded_rectangle(panel, radius=8, fill=SHADOW, outline=OUTLINE, width=3)
    buttons = 1 + style % 3
    spacing = 64 // (buttons + 1)
    for i in range(buttons):
        bx = panel[0] + spacing * (i + 1)
        draw.ellipse((bx - 7, 225, bx + 7, 239), fill=LIGHT, outline=OUTLINE, width=2)


# --- Head ---


def draw_head(draw: ImageDraw.ImageDraw, style: int) -> None:
    half_w = 58 + 8 * (style % 4)
    top = 46 + 6 * (style // 4)
    kind = (style * 3) % 5
    _shape(draw, kind, (CX - half_w, top, CX + half_w, 180), FILL)
    if style % 2 == 0:
        draw.rounded_rectangle(
            (CX - half_w + 18, top + 26, CX + half_w - 18, 170),
            radius=12,
            fill=LIGHT,
        )
    else:
        for bx in (CX - half_w + 12, CX + half_w - 12):
            draw.ellipse((bx - 5, top + 16, bx + 5, top + 26), fill=SHADOW)


# --- Eyes ---

EYE_Y = 105


def _pair(shape: Callable[..., None], gap: int, half_w: int, half_h: int, **kwargs) -> None:
    for ex in (CX - gap, CX + gap):
        shape((ex - half_w, EYE_Y - half_h, ex + half_w, EYE_Y + half_h), **kwargs)


def draw_eyes(draw: ImageDraw.ImageDraw, style: int) -> None:
    cy = EYE_Y
    if style == 0:
        _pair(draw.ellipse, 28, 14, 14, fill=LIGHT, outline=OUTLINE, width=3)
        _pair(draw.ellipse, 28, 5, 5, fill=OUTLINE)
    elif style == 1:
        _pair(draw.rectangle, 30, 13, 13, fill=LIGHT, outline=OUTLINE, width=3)
        _pair(draw.rectangle, 30, 4, 4, fill=OUTLINE)
    elif style == 2:
        draw.rounded_rectangle(
            (CX - 50, cy - 14, CX + 50, cy + 14),
            radius=14,
            fill=SHADOW,
            outline=OUTLINE,
            width=3,
        )
        draw.line((CX - 36, cy, CX + 36, cy), fill=LIGHT, width=6)
    elif style == 3:
        draw.ellipse((CX - 24, cy - 24, CX + 24, cy + 24), fill=LIGHT, outline=OUTLINE, width=4)
        draw.ellipse((CX - 9, cy - 9, CX + 9, cy + 9), fill=OUTLINE)
    elif style == 4:
        _pair(draw.ellipse, 26, 9, 18, fill=LIGHT, outline=OUTLINE, width=3)
    elif style == 5:
        _pair(draw.rectangle, 28, 16, 4, fill=OUTLINE)
    elif style == 6:
        _pair(draw.ellipse, 30, 16, 16, outline=OUTLINE, width=5)
        _pair(draw.ellipse, 30, 6, 6, fill=LIGHT)
    elif style == 7:
        for ex in (CX - 28, CX + 28):
            draw.polygon(
                [(ex - 15, cy + 10), (ex + 15, cy + 10), (ex, cy - 14)],
                fill=LIGHT,
                outline=OUTLINE,
                width=3,
            )
    elif style == 8:
        for ex in (CX - 28, CX + 28):
            draw.line((ex - 11, cy - 11, ex + 11, cy + 11), fill=OUTLINE, width=6)
            draw.line((ex - 11, cy + 11, ex + 11, cy - 11), fill=OUTLINE, width=6)
    else:
        for ex in (CX - 34, CX, CX + 34):
            draw.ellipse((ex - 10, cy - 10, ex + 10, cy + 10), fill=LIGHT, outline=OUTLINE, width=3)


# --- Mouth ---


def draw_mouth(draw: ImageDraw.ImageDraw, style: int) -> None:
    cy = 148
    if style == 0:
        draw.line((CX - 28, cy, CX + 28, cy), fill=OUTLINE, width=5)
    elif style == 1:
        draw.rectangle((CX - 34, cy - 12, CX + 34, cy + 12), fill=SHADOW, outline=OUTLINE, width=3)
        for bx in range(CX - 22, CX + 23, 11):
            draw.line((bx, cy - 10, bx, cy + 10), fill=OUTLINE, width=3)
    elif style == 2:
        draw.arc((CX - 30, cy - 26, CX + 30, cy + 10), start=20, end=160, fill=OUTLINE, width=5)
    elif style == 3:
        draw.ellipse((CX - 14, cy - 12, CX + 14, cy + 12), fill=OUTLINE)
    elif style == 4:
        points = [(CX - 30 + 10 * i, cy + (6 if i % 2 else -6)) for i in range(7)]
        draw.line(points, fill=OUTLINE, width=4)
    elif style == 5:
        draw.rounded_rectangle((CX - 32, cy - 11, CX + 32, cy + 11), radius=5, fill=LIGHT, outline=OUTLINE, width=3)
        draw.line((CX - 30, cy, CX + 30, cy), fill=OUTLINE, width=2)
    elif style == 6:
        draw.arc((CX - 30, cy - 4, CX + 30, cy + 30), start=200, end=340, fill=OUTLINE, width=5)
    elif style == 7:
        draw.rectangle((CX - 10, cy - 8, CX + 10, cy + 8), fill=OUTLINE)
    elif style == 8:
        draw.ellipse((CX - 36, cy - 13, CX + 36, cy + 13), fill=SHADOW, outline=OUTLINE, width=3)
        for bx in range(CX - 21, CX + 22, 14):
            draw.ellipse((bx - 3, cy - 3, bx + 3, cy + 3), fill=LIGHT)
    else:
        wave = [(CX - 32 + 4 * i, cy + 6 * math.sin(i * math.pi / 4)) for i in range(17)]
        draw.line(wave, fill=OUTLINE, width=4)


# --- Accessory ---


def draw_accessory(draw: ImageDraw.ImageDraw, style: int) -> None:
    if style == 0:
        draw.line((CX, 10, CX, 50), fill=OUTLINE, width=5)
        draw.ellipse((CX - 11, 2, CX + 11, 24), fill=FILL, outline=OUTLINE, width=3)
    elif style == 1:
        for dx in (-30, 30):
            draw.line((CX + dx, 52, CX + dx * 1.6, 12), fill=OUTLINE, width=4)
            draw.ellipse((CX + dx * 1.6 - 8, 4, CX + dx * 1.6 + 8, 20), fill=FILL, outline=OUTLINE, width=3)
    elif style == 2:
        for x0 in (CX - 104, CX + 84):
            draw.rounded_rectangle((x0, 90, x0 + 20, 140), radius=6, fill=FILL, outline=OUTLINE, width=3)
    elif style == 3:
        draw.rectangle((CX - 70, 38, CX + 70, 52), fill=FILL, outline=OUTLINE, width=3)
        draw.rectangle((CX - 45, 4, CX + 45, 40), fill=FILL, outline=OUTLINE, width=3)
    elif style == 4:
        spikes = [(CX - 50 + 20 * i, 50 if i % 2 == 0 else 14) for i in range(6)]
        draw.polygon([(CX - 50, 52)] + spikes[1:] + [(CX + 50, 50), (CX + 50, 52)], fill=FILL, outline=OUTLINE, width=3)
    elif style == 5:
        draw.line((CX, 24, CX, 50), fill=OUTLINE, width=5)
        draw.ellipse((CX - 48, 14, CX - 2, 28), fill=FILL, outline=OUTLINE, width=3)
        draw.ellipse((CX + 2, 14, CX + 48, 28), fill=FILL, outline=OUTLINE, width=3)
    elif style == 6:
        draw.arc((CX - 92, 20, CX + 92, 180), start=190, end=350, fill=OUTLINE, width=8)
        for x0 in (CX - 104, CX + 78):
            draw.ellipse((x0, 84, x0 + 26, 136), fill=FILL, outline=OUTLINE, width=3)
    elif style == 7:
        draw.polygon([(CX - 14, 52), (CX + 14, 52), (CX + 4, 6)], fill=FILL, outline=OUTLINE, width=3)
    elif style == 8:
        for x0 in (CX - 40, CX + 24):
            draw.ellipse((x0, 160, x0 + 16, 176), fill=FILL, outline=OUTLINE, width=3)
    else:
        draw.ellipse((CX - 30, -6, CX + 30, 54), fill=GLOW)
        draw.line((CX, 36, CX, 52), fill=OUTLINE, width=6)
        draw.ellipse((CX - 14, 8, CX + 14, 38), fill=LIGHT, outline=OUTLINE, width=3)


SPRITE_FNS: Dict[Layer, SpriteFn] = {
    Layer.BODY: draw_body,
    Layer.HEAD: draw_head,
    Layer.MOUTH: draw_mouth,
    Layer.EYES: draw_eyes,
    Layer.ACCESSORY: draw_accessory,
}


def draw_sprite(layer: Layer, style: int) -> RGBAArray:
    """Grey-tone sprite for one layer/style on a transparent cell."""
    image = Image.new("RGBA", (CELL_SIZE, CELL_SIZE), (0, 0, 0, 0))
    SPRITE_FNS[layer](ImageDraw.Draw(image), style)
    return np.array(image, dtype=np.uint8)


def build_atlas_pixels(colors: Sequence[RGB] = BAND_COLORS) -> RGBAArray:
    """Render the full sheet as a read-only ``(15000, 3000, 4)`` array."""
    if len(colors) != NUM_COLORS:
        raise ValueError(f"Expected {NUM_COLORS} band colors, got {len(colors)}")
    width, height = required_atlas_size()
    pixels: RGBAArray = np.zeros((height, width, 4), dtype=np.uint8)
    for layer in SPRITE_FNS:
        for style in range(NUM_STYLES):
            base = draw_sprite(layer, style)
            for color, rgb in enumerate(colors):
                x, y = cell_origin(layer, style, color)
                pixels[y : y + CELL_SIZE, x : x + CELL_SIZE] = recolor_keep_tone(
                    base, rgb, saturation_mix=LAYER_SATURATION[layer]
                )
    pixels.setflags(write=False)
    return pixels


def build_atlas() -> SpriteAtlas:
    logger.info("Rendering built-in sprite atlas")
    return SpriteAtlas(build_atlas_pixels())


def build_atlas_image(atlas: Optional[SpriteAtlas] = None) -> Image.Image:
    pixels = build_atlas_pixels() if atlas is None else atlas.pixels
    return Image.fromarray(pixels)


def save_atlas(path: str, atlas: Optional[SpriteAtlas] = None) -> None:
    """Write ``atlas`` (the built-in one by default) to ``path`` as PNG."""
    build_atlas_image(atlas).save(path, format="PNG")
    logger.info("Saved sprite atlas to %s", path)
