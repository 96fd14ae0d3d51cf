"""Per-channel color effects: brightness/contrast, VHS grade, color shift."""

from __future__ import annotations

import math

import numpy as np

from rewind.effects.base import active, bounded, make_rng
from rewind.paint import hsl, linear_gradient, radial_gradient
from rewind.raster import BlendMode, RasterBuffer, blend_into, to_uint8

LUMA = np.array([0.299, 0.587, 0.114], dtype=np.float64)


def brightness_contrast(buf: RasterBuffer, intensity: float) -> None:
    """Lift every channel by 12.75*I, then stretch about the mean luminance."""
    if not active(intensity):
        return
    intensity = bounded(intensity)
    rgb = np.clip(buf.data[..., :3].astype(np.float64) + 12.75 * intensity, 0, 255)
    mean = float((rgb @ LUMA).mean())
    rgb = (rgb - mean) * (1 + 0.05 * intensity) + mean
    buf.data[..., :3] = to_uint8(rgb)


def vhs_color_grade(
    buf: RasterBuffer,
    intensity: float,
    rng: np.random.Generator | None = None,
) -> None:
    """Warm channel bias, contrast, vignette, film grain and color bleed."""
    if not active(intensity):
        return
    rng = make_rng(rng)
    intensity = bounded(intensity)
    src = buf.snapshot()
    w, h = buf.size

    rgb = buf.data[..., :3].astype(np.float64)
    rgb[..., 0] = np.minimum(255, rgb[..., 0] + intensity * 15)
    rgb[..., 2] = np.maximum(0, rgb[..., 2] - intensity * 8)
    shadows = rgb[..., 0] < 128
    rgb[..., 1] = np.where(shadows, np.minimum(255, rgb[..., 1] + intensity * 5), rgb[..., 1])
    rgb = np.clip(((rgb / 255 - 0.5) * (1 + intensity * 0.2) + 0.5) * 255, 0, 255)
    buf.data[..., :3] = to_uint8(rgb)

    vignette = radial_gradient(
        w, h, (w / 2, h / 2), min(w, h) * 0.3, max(w, h) * 0.7,
        (0, 0, 0, 0), (0, 0, 0, min(intensity * 0.4, 1.0) * 255),
    )
    blend_into(buf.data, vignette, BlendMode.MULTIPLY)

    grain = np.empty((h, w, 4), dtype=np.float64)
    grain[..., :3] = (rng.random((h, w)) * 255)[..., np.newaxis]
    grain[..., 3] = 50
    blend_into(buf.data, grain, BlendMode.OVERLAY, 0.1 * intensity)

    if intensity > 3:
        shift = 2 if intensity > 6 else 1
        buf.composite(src, shift, 0, BlendMode.SCREEN, 0.1 * intensity)


def color_shift(buf: RasterBuffer, intensity: float, t: float = 0.0) -> None:
    """Offset R, G and B by sines 120 degrees apart; gradient overlay above 7."""
    if not active(intensity):
        return
    intensity = bounded(intensity)

    rgb = buf.data[..., :3].astype(np.float64)
    for k in range(3):
        rgb[..., k] += math.sin(t * 2 + k * 2 * math.pi / 3) * intensity * 20
    buf.data[..., :3] = to_uint8(rgb)

    if intensity > 7:
        w, h = buf.size
        hue = math.degrees(t)
        gradient = linear_gradient(w, h, (0, 0), (w, h), hsl(hue, 1.0, 0.5), hsl(hue + 180, 1.0, 0.5))
        blend_into(buf.data, gradient, BlendMode.OVERLAY, 0.06)
