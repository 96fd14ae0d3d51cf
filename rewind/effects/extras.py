"""Pixelate, chroma shift and scan lines."""

from __future__ import annotations

import math

import numpy as np

from rewind.effects.base import active, bounded, chance, make_rng
from rewind.raster import BLACK, BlendMode, RasterBuffer, Rect


def pixel_size(intensity: float) -> int:
    """Block edge for a 0-10 intensity; 0 means too faint to show."""
    p = intensity / 10
    if p < 0.01:
        return 0
    if p <= 0.2:
        return max(1, int(1 + p * 10))
    if p <= 0.5:
        return int(3 + (p - 0.2) * 10)
    if p <= 0.8:
        return int(6 + (p - 0.5) * 13.33)
    return int(10 + (p - 0.8) * 30)


def pixelate(buf: RasterBuffer, intensity: float) -> None:
    """Replace each block with its average color."""
    if not active(intensity):
        return
    w, h = buf.size
    size = min(pixel_size(bounded(intensity)), max(w, h))
    if size <= 1:
        return

    data = buf.snapshot().data.astype(np.float64)
    ys = np.arange(0, h, size)
    xs = np.arange(0, w, size)
    sums = np.add.reduceat(np.add.reduceat(data, ys, axis=0), xs, axis=1)
    counts = np.outer(np.diff(np.append(ys, h)), np.diff(np.append(xs, w)))
    blocks = sums / counts[..., np.newaxis]

    # nearest scaling maps pixel x to block x // size
    buf.draw_scaled(blocks, Rect(0, 0, len(xs) * size, len(ys) * size), BlendMode.COPY)


def chroma_shift(buf: RasterBuffer, intensity: float, t: float = 0.0) -> None:
    """Sample red from ``shift`` pixels to the left and blue from the right; vacated samples go to zero."""
    if not active(intensity):
        return
    intensity = bounded(intensity)
    w = buf.width
    shift = max(1, int(math.floor(intensity * 2 * (0.7 + 0.3 * math.sin(t * 2)))))
    shift = min(shift, w)
    src = buf.snapshot().data

    buf.data[:, :, 0] = 0
    buf.data[:, shift:, 0] = src[:, :w - shift, 0]
    buf.data[:, :, 2] = 0
    buf.data[:, :w - shift, 2] = src[:, shift:, 2]


def scan_lines(
    buf: RasterBuffer,
    intensity: float,
    t: float = 0.0,
    rng: np.random.Generator | None = None,
) -> None:
    """Dark horizontal lines whose spacing tightens with intensity.

    Line thickness and vertical position wobble with ``t``; now and then a
    line gets a thicker partial-width glitch segment.
    """
    if not active(intensity):
        return
    rng = make_rng(rng)
    intensity = bounded(intensity)
    w, h = buf.size
    spacing = max(2, int(math.floor(12 - intensity)))
    opacity = 0.2 + intensity / 20

    for y in range(0, h, spacing):
        line_h = 1 + math.sin(y * 0.05 + t * 2) * intensity * 0.3
        pos = y + math.sin(y * 0.02 + t) * intensity
        if line_h < 0:
            pos, line_h = pos + line_h, -line_h
        buf.fill_rect((0, pos, w, line_h), BLACK, BlendMode.NORMAL, opacity)

        if chance(rng, 0.02 * intensity):
            glitch_w = rng.random() * w * 0.8
            glitch_x = rng.random() * (w - glitch_w)
            buf.fill_rect((glitch_x, pos, glitch_w, line_h * 3), BLACK, BlendMode.NORMAL, opacity)
