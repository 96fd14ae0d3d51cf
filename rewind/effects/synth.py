"""Duplicate Synth and Psychedelic: hue-rotated ghost copies screened on top."""

from __future__ import annotations

import math

from rewind.effects.base import active, bounded
from rewind.paint import hue_rotate, transform_about_center
from rewind.raster import BlendMode, RasterBuffer, to_uint8

MAX_DUPLICATES = 5
MAX_MIRRORS = 16


def duplicate_synth(buf: RasterBuffer, intensity: float, t: float = 0.0) -> None:
    """Screen 1-5 drifting, hue-rotated copies of the frame onto itself.

    Above intensity 5 each copy also wobbles in rotation about the center.
    """
    if not active(intensity):
        return
    intensity = bounded(intensity)
    src = buf.snapshot()

    n = min(int(math.floor(1 + intensity * 0.4)), MAX_DUPLICATES)
    alpha = 0.03 * intensity
    for i in range(n):
        ghost = to_uint8(hue_rotate(src.data, i * 360.0 / n))
        if intensity > 5:
            degrees = math.sin(t * (0.2 + 0.1 * i)) * 3 * (intensity - 5)
            ghost = transform_about_center(ghost, math.radians(degrees))
        dx = math.sin(t * (0.5 + 0.2 * i)) * intensity * 2
        dy = math.cos(t * (0.3 + 0.2 * i)) * intensity * 2
        buf.composite(ghost, dx, dy, BlendMode.SCREEN, alpha)


def psychedelic(buf: RasterBuffer, intensity: float, t: float = 0.0) -> None:
    """Kaleidoscope: rotated, alternately mirrored, breathing copies."""
    if not active(intensity):
        return
    intensity = bounded(intensity)
    src = buf.snapshot()

    n = min(int(intensity / 2.5) + 1, MAX_MIRRORS)
    alpha = 0.05 * intensity
    for i in range(n):
        tinted = to_uint8(hue_rotate(src.data, math.degrees(t) + 30 * i))
        mirrored = transform_about_center(
            tinted,
            angle=2 * math.pi * i / n,
            scale=1 + 0.01 * intensity * math.sin(t + i),
            mirror=i % 2 == 1,
        )
        buf.composite(mirrored, 0, 0, BlendMode.SCREEN, alpha)
