"""Analog static: screen-wide noise with VHS artifacts, and noise inside gaps."""

from __future__ import annotations

import math

import numpy as np

from rewind.effects.base import Gap, active, bounded, make_rng
from rewind.raster import BLACK, BlendMode, RasterBuffer, blend_into, to_uint8


def static_on_screen(
    buf: RasterBuffer,
    intensity: float,
    rng: np.random.Generator | None = None,
) -> None:
    """Bernoulli static, dropout lines, pixel dropouts and bright spots.

    Above intensity 3 a random horizontal band slips sideways (vertical
    sync trouble); above 5 a scanline overlay darkens every other row.
    """
    if not active(intensity):
        return
    rng = make_rng(rng)
    intensity = bounded(intensity)
    src = buf.snapshot()
    h, w = src.height, src.width
    rgb = src.data[..., :3].astype(np.float32)

    # horizontal line glitches
    for y in np.nonzero(rng.random(h) < intensity / 50)[0]:
        length = int(rng.random() * w)
        start = int(rng.random() * (w - length))
        brightness = rng.random() * 255
        thickness = int(rng.integers(1, 4))
        rgb[y:y + thickness, start:start + length] = brightness

    row_p = intensity * (1 + 0.2 * np.sin(np.arange(h) * 0.1)) / 30
    hit = rng.random((h, w)) < row_p[:, np.newaxis]
    noise = rng.random((h, w)) * 255
    alpha = rng.random((h, w)) * 0.7 + 0.3
    mixed = rgb * (1 - alpha[..., np.newaxis]) + (noise * alpha)[..., np.newaxis]
    rgb = np.where(hit[..., np.newaxis], mixed, rgb)

    rgb[rng.random((h, w)) < intensity / 200] = 0
    rgb[rng.random((h, w)) < intensity / 300] = 255

    if intensity > 3:
        offset = int(math.floor(rng.random() * 10) * (intensity / 3))
        if 0 < offset < w:
            band = min(int(rng.integers(10, 40)), h)
            y0 = int(rng.random() * (h - band))
            rgb[y0:y0 + band, :w - offset] = rgb[y0:y0 + band, offset:].copy()

    buf.data[..., :3] = to_uint8(rgb)

    if intensity > 5:
        rows = buf.data[::2]
        blend_into(rows, np.broadcast_to(np.asarray(BLACK, dtype=np.float32), rows.shape),
                   BlendMode.MULTIPLY, 0.2)


def static_in_gaps(
    buf: RasterBuffer,
    intensity: float,
    gaps: list[Gap],
    rng: np.random.Generator | None = None,
) -> None:
    """Gray static restricted to the gap bands left by layer separation."""
    if not active(intensity) or not gaps:
        return
    rng = make_rng(rng)
    p = bounded(intensity) / 10

    for gap in gaps:
        y0, y1 = max(gap.y, 0), min(gap.y + gap.height, buf.height)
        if y0 >= y1:
            continue
        region = buf.data[y0:y1, :, :3]
        hit = rng.random(region.shape[:2]) < p
        noise = to_uint8(rng.random(region.shape[:2]) * 255)
        region[hit] = noise[hit][:, np.newaxis]
