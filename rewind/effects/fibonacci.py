"""Fibonacci spiral overlay."""

from __future__ import annotations

import math

import numpy as np

from rewind.effects.base import active, bounded, make_rng
from rewind.paint import hsl, overlay, overlay_pixels, rgba_int
from rewind.raster import BlendMode, RasterBuffer, blend_into

FIBONACCI = (1, 1, 2, 3, 5, 8, 13, 21, 34, 55)
MAX_SPIRALS = 3
MAX_PARTICLES = 300


def fibonacci_spiral(
    buf: RasterBuffer,
    intensity: float,
    t: float = 0.0,
    rng: np.random.Generator | None = None,
) -> None:
    """Stroke rotating golden spirals from the center of the frame.

    Each spiral is one stroke: nine quarter arcs with radii 1..34 from the
    Fibonacci table, joined by straight segments from the center outward.
    The table is scaled so that its last entry, 55, maps to
    ``0.04 * I * min(W, H)``; the outermost arc reaches 34/55 of that.
    The frame as it was before the strokes is screened back at half alpha,
    and above intensity 6 particles are scattered within the spiral radius.
    """
    if not active(intensity):
        return
    rng = make_rng(rng)
    intensity = bounded(intensity)
    src = buf.snapshot()
    w, h = buf.size
    cx, cy = w / 2, h / 2

    max_radius = min(w, h) * 0.04 * intensity
    scale = max_radius / FIBONACCI[-1]
    stroke = rgba_int((255, 255, 255, min(intensity / 10, 1.0) * 255))
    spirals = min(1 + int(intensity // 5), MAX_SPIRALS)

    img, draw = overlay(w, h)
    for s in range(spirals):
        angle = t * 0.2 + s * 2 * math.pi / spirals
        x, y = cx, cy
        pen = (cx, cy)
        for i in range(len(FIBONACCI) - 1):
            r = FIBONACCI[i] * scale
            # one stroked path: join the pen to where this arc starts
            start = (x + math.cos(angle) * r, y + math.sin(angle) * r)
            draw.line([pen, start], fill=stroke, width=2)
            draw.arc([x - r, y - r, x + r, y + r],
                     start=math.degrees(angle), end=math.degrees(angle + math.pi / 2),
                     fill=stroke, width=2)
            angle += math.pi / 2
            pen = (x + math.cos(angle) * r, y + math.sin(angle) * r)
            x = cx + math.cos(angle) * FIBONACCI[i + 1] * scale
            y = cy + math.sin(angle) * FIBONACCI[i + 1] * scale
    blend_into(buf.data, overlay_pixels(img), BlendMode.NORMAL)

    buf.composite(src, 0, 0, BlendMode.SCREEN, 0.5)

    if intensity > 6:
        img, draw = overlay(w, h)
        for i in range(min(int(intensity * 3), MAX_PARTICLES)):
            theta = rng.random() * 2 * math.pi
            dist = rng.random() * max_radius
            px, py = cx + math.cos(theta) * dist, cy + math.sin(theta) * dist
            r = rng.random() * 2 + 1
            draw.ellipse([px - r, py - r, px + r, py + r],
                         fill=rgba_int(hsl(math.degrees(t) + i * 10, 1.0, 0.7, 0.6)))
        blend_into(buf.data, overlay_pixels(img), BlendMode.NORMAL)
