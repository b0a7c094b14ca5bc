"""Vectorized color helpers used when authoring the built-in atlas."""

from typing import Tuple

import numpy as np
import numpy.typing as npt

from robo_avatar.types import RGBAArray

FloatArray = npt.NDArray[np.float32]
BoolArray = npt.NDArray[np.bool_]
RGB = Tuple[int, int, int]


def rgb_to_hsv(
    r: FloatArray, g: FloatArray, b: FloatArray
) -> Tuple[FloatArray, FloatArray, FloatArray]:
    """
    RGB->HSV for float32 arrays in [0,1]. Returns H,S,V in [0,1].
    """
    maxc: FloatArray = np.maximum(np.maximum(r, g), b)
    minc: FloatArray = np.minimum(np.minimum(r, g), b)
    delta: FloatArray = maxc - minc

    s: FloatArray = np.where(
        maxc > 0.0, delta / np.where(maxc == 0.0, 1.0, maxc), 0.0
    ).astype(np.float32)

    # Chromatic pixels only; greys keep hue 0
    safe_delta: FloatArray = np.where(delta == 0.0, 1.0, delta).astype(np.float32)
    rc: FloatArray = (maxc - r) / safe_delta
    gc: FloatArray = (maxc - g) / safe_delta
    bc: FloatArray = (maxc - b) / safe_delta

    chromatic: BoolArray = delta != 0.0
    h: FloatArray = np.zeros_like(maxc, dtype=np.float32)
    b_max: BoolArray = (b == maxc) & chromatic
    g_max: BoolArray = (g == maxc) & chromatic
    r_max: BoolArray = (r == maxc) & chromatic
    # Later assignments win, so red takes precedence on ties like colorsys
    h[b_max] = (4.0 + gc - rc)[b_max]
    h[g_max] = (2.0 + rc - bc)[g_max]
    h[r_max] = (bc - gc)[r_max]
    h = ((h / 6.0) % 1.0).astype(np.float32)

    return h, s, maxc.astype(np.float32)


def hsv_to_rgb(
    h: FloatArray, s: FloatArray, v: FloatArray
) -> Tuple[FloatArray, FloatArray, FloatArray]:
    """
    HSV->RGB for float32 arrays in [0,1].
    """
    sector = np.floor(h * 6.0).astype(np.int32)
    f: FloatArray = (h * 6.0 - sector).astype(np.float32)
    p: FloatArray = (v * (1.0 - s)).astype(np.float32)
    q: FloatArray = (v * (1.0 - s * f)).astype(np.float32)
    t: FloatArray = (v * (1.0 - s * (1.0 - f))).astype(np.float32)

    sector = sector % 6
    r: FloatArray = np.choose(sector, [v, q, p, p, t, v]).astype(np.float32)
    g: FloatArray = np.choose(sector, [t, v, v, q, p, p]).astype(np.float32)
    b: FloatArray = np.choose(sector, [p, p, t, v, v, q]).astype(np.float32)
    return r, g, b


def recolor_keep_tone(
    pixels: RGBAArray,
    target_rgb: RGB,
    saturation_mix: float = 1.0,
) -> RGBAArray:
    """
    Recolor the visible pixels of an RGBA array towards ``target_rgb``.

    Hue is replaced by the target's hue and per-pixel value (brightness) is
    preserved, so grey shading drawn into a sprite survives as darker and
    lighter shades of the target color. ``saturation_mix`` blends between
    the pixel's own saturation (0.0) and the target's (1.0). Alpha and fully
    transparent pixels are left unchanged.
    """
    rgb: FloatArray = pixels[..., :3].astype(np.float32) / 255.0
    _, s, v = rgb_to_hsv(rgb[..., 0], rgb[..., 1], rgb[..., 2])

    target: FloatArray = np.array(target_rgb, dtype=np.float32).reshape(1, 3) / 255.0
    th, ts, _ = rgb_to_hsv(target[:, 0], target[:, 1], target[:, 2])

    mix = np.float32(np.clip(saturation_mix, 0.0, 1.0))
    s_new: FloatArray = ((1.0 - mix) * s + mix * ts[0]).astype(np.float32)
    h_new: FloatArray = np.full_like(v, th[0], dtype=np.float32)

    r, g, b = hsv_to_rgb(h_new, s_new, v)

    out: RGBAArray = pixels.copy()
    visible: BoolArray = pixels[..., 3] > 0
    for channel, values in enumerate((r, g, b)):
        out[..., channel][visible] = (values * 255.0).astype(np.uint8)[visible]
    return out
