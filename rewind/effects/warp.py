"""Displacement warps: liquid mesh, turbulence and fluid animation.

Each warp builds a ``DisplacementField`` from a few sine/cosine terms of
(x, y, t) and resamples the buffer through it. Time factors in the fluid warp
are whole numbers so a 2*pi export cycle comes back to its first frame.
"""

from __future__ import annotations

import math

import numpy as np

from rewind.displace import BILINEAR, NEAREST, DisplacementField, warp
from rewind.effects.base import active, bounded, make_rng
from rewind.paint import hsl, linear_gradient, overlay, overlay_pixels, radial_gradient, rgba_int
from rewind.raster import BlendMode, RasterBuffer, blend_into

WAVE_SCALE = 0.05
MAX_PARTICLES = 500


def liquid_mesh(buf: RasterBuffer, intensity: float, t: float = 0.0) -> None:
    if not active(intensity):
        return
    amount = bounded(intensity)

    def field(xs, ys, t):
        k = t * amount
        dx = (np.sin(ys * WAVE_SCALE + k) * amount
              + np.cos((xs + ys) * WAVE_SCALE * 0.5 + k * 0.7) * amount * 0.5)
        dy = (np.cos(xs * WAVE_SCALE + k * 0.8) * amount
              + np.sin((xs - ys) * WAVE_SCALE * 0.5 + k * 1.2) * amount * 0.5)
        return dx, dy

    warp(buf, DisplacementField.from_function(field, buf.width, buf.height, t), NEAREST,
         source=buf.snapshot())


def turbulence(
    buf: RasterBuffer,
    intensity: float,
    t: float = 0.0,
    rng: np.random.Generator | None = None,
) -> None:
    """Product-of-waves displacement; above 5, glowing particles on top."""
    if not active(intensity):
        return
    rng = make_rng(rng)
    amount = bounded(intensity)

    def field(xs, ys, t):
        dx = np.sin(xs * 0.1 + t) * np.cos(ys * 0.1 + t * 0.5) * amount * 5
        dy = np.cos(xs * 0.1 + t * 0.7) * np.sin(ys * 0.1 + t * 0.3) * amount * 5
        return dx, dy

    warp(buf, DisplacementField.from_function(field, buf.width, buf.height, t), NEAREST,
         source=buf.snapshot())

    if amount > 5:
        w, h = buf.size
        img, draw = overlay(w, h)
        for i in range(min(int(amount * 5), MAX_PARTICLES)):
            x, y = rng.random() * w, rng.random() * h
            r = rng.random() * min(amount, 10.0) + 2
            color = rgba_int(hsl(math.degrees(t) + i * 30, 1.0, 0.7, 0.5))
            draw.ellipse([x - r, y - r, x + r, y + r], fill=color)
        blend_into(buf.data, overlay_pixels(img), BlendMode.SCREEN, 0.2)


def fluid_animation(buf: RasterBuffer, intensity: float, t: float = 0.0) -> None:
    """Layered bilinear flow warp with a tint overlay and caustic highlights.

    The third wave pair joins above intensity 3, the hue tint above 2 and
    three drifting radial caustics above 6.
    """
    if not active(intensity):
        return
    amount = bounded(intensity)
    k = max(1, round(amount))

    def field(xs, ys, t):
        s = t * k
        dx = np.sin(ys * WAVE_SCALE + s) * 5 * amount
        dy = np.cos(xs * WAVE_SCALE + s) * 5 * amount
        dx += np.cos((xs + ys) * WAVE_SCALE * 0.5 + s) * 3 * amount
        dy += np.sin((xs - ys) * WAVE_SCALE * 0.5 + s * 2) * 3 * amount
        if amount > 3:
            dx += np.sin(xs * WAVE_SCALE * 0.3 + s) * 2 * amount
            dy += np.cos(ys * WAVE_SCALE * 0.3 + s) * 2 * amount
        return dx, dy

    warp(buf, DisplacementField.from_function(field, buf.width, buf.height, t), BILINEAR,
         source=buf.snapshot())

    w, h = buf.size
    hue = math.degrees(t)
    if amount > 2:
        tint = linear_gradient(w, h, (0, 0), (w, h), hsl(hue, 0.7, 0.6), hsl(hue + 180, 0.7, 0.6))
        blend_into(buf.data, tint, BlendMode.OVERLAY, 0.1 * amount / 10)

    if amount > 6:
        size = min(w, h) * (0.2 + math.sin(t) * 0.1)
        for i in range(3):
            cx = math.sin(t * (i + 1)) * w * 0.3 + w * 0.5
            cy = math.cos(t * (i + 1)) * h * 0.3 + h * 0.5
            caustic = radial_gradient(w, h, (cx, cy), 0.0, size,
                                      hsl(hue + i * 120, 1.0, 0.7, 0.5), (0, 0, 0, 0))
            blend_into(buf.data, caustic, BlendMode.LIGHTEN, 0.2)
