"""ZigZag: horizontal strip displacement driven by two sine waves."""

from __future__ import annotations

import math

import numpy as np

from rewind.effects.base import Layer, active, bounded, chance, make_rng
from rewind.raster import BlendMode, RasterBuffer

MAX_CORRUPT_BLOCKS = 200


def zigzag(
    buf: RasterBuffer,
    intensity: float,
    t: float = 0.0,
    layers: list[Layer] | None = None,
    rng: np.random.Generator | None = None,
    speed: float = 1.0,
) -> None:
    """Shift each strip sideways by a sum of two time-varying sine waves.

    Strips are the split layers when available, else fixed-height slices.
    Above intensity 5 a "major glitch" may throw a window of strips far off
    and mirror some of them; above 7 random blocks are copied around and
    difference-blended with random colors.
    """
    if not active(intensity):
        return
    rng = make_rng(rng)
    intensity = bounded(intensity)
    if not math.isfinite(speed):
        speed = 1.0
    src = buf.snapshot()
    w, h = buf.size
    buf.clear()

    slice_h = max(2, int(math.floor(10 - intensity * 0.5)))
    wave_freq = 0.1 + intensity * 0.02
    time_scale = (2 + intensity * 0.5) * speed

    major = intensity > 5 and chance(rng, 0.1)
    glitch_y = int(rng.random() * h) if major else -1
    glitch_h = int(rng.random() * 50) + 10 if major else 0

    if layers:
        strips = [(layer.y, layer.height) for layer in layers]
    else:
        strips = [(y, min(slice_h, h - y)) for y in range(0, h, slice_h)]

    for y, strip_h in strips:
        offset = math.sin(y * wave_freq + t * time_scale) * intensity * 3
        offset += math.sin(y * wave_freq * 2.7 + t * time_scale * 0.6) * intensity * 1.5
        jump = (rng.random() - 0.5) * intensity * 20 if chance(rng, intensity / 30) else 0.0

        if major and glitch_y <= y < glitch_y + glitch_h:
            offset = (rng.random() - 0.5) * w * 0.5
            if chance(rng, 0.3):
                buf.copy_rect(src, (0, y, w, strip_h), (offset, y, w, strip_h), flip_x=True)
                continue

        x = offset + jump
        buf.copy_rect(src, (0, y, w, strip_h), (x, y, w, strip_h))

        if chance(rng, intensity / 20):
            tint = (255, 0, 0, 76.5) if chance(rng, 0.5) else (0, 0, 255, 76.5)
            buf.fill_rect((x, y, w, strip_h), tint, BlendMode.SCREEN, 0.3)

    if intensity > 7:
        for _ in range(min(int(intensity * 2), MAX_CORRUPT_BLOCKS)):
            bx, by = int(rng.random() * w), int(rng.random() * h)
            bw, bh = int(rng.random() * 40) + 10, int(rng.random() * 20) + 5
            sx, sy = int(rng.random() * w), int(rng.random() * h)
            buf.copy_rect(src, (sx, sy, bw, bh), (bx, by, bw, bh))
            color = (rng.random() * 255, rng.random() * 255, rng.random() * 255, 127.5)
            buf.fill_rect((bx, by, bw, bh), color, BlendMode.DIFFERENCE)
