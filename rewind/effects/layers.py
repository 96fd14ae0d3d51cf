"""Layer split and layer separation: the effects that produce side channels."""

from __future__ import annotations

import math

import numpy as np

from rewind.effects.base import Gap, Layer, active, bounded, make_rng
from rewind.raster import BLACK, BlendMode, RasterBuffer

MIN_LAYERS = 5
MAX_LAYERS = 15


def layer_split(
    buf: RasterBuffer,
    intensity: float,
    t: float = 0.0,
    rng: np.random.Generator | None = None,
) -> list[Layer]:
    """Partition the buffer into 5-15 horizontal bands.

    Each band but the last is 5-20% of the buffer height; the last takes the
    remainder. Above intensity 5, red and blue copies of the frame drift on
    sinusoidal offsets and are screen-blended on top (chromatic smear).
    """
    if not active(intensity):
        return []
    rng = make_rng(rng)
    intensity = bounded(intensity)
    src = buf.snapshot()

    height = buf.height
    count = int(np.clip(math.floor(MIN_LAYERS + min(intensity, 10.0)), MIN_LAYERS, MAX_LAYERS))

    layers = []
    y = 0
    for i in range(count):
        remaining = height - y
        if remaining <= 0:
            break
        if i == count - 1:
            layers.append(Layer(y, remaining))
            break
        band = max(1, int(height * (0.05 + rng.random() * 0.15)))
        band = min(band, remaining)
        layers.append(Layer(y, band))
        y += band

    # The bands tile every row, so redrawing them in place is an identity;
    # only the smear changes pixels.
    if intensity > 5:
        k = intensity - 5
        red = src.data.copy()
        red[..., 1:3] = 0
        blue = src.data.copy()
        blue[..., 0:2] = 0
        buf.composite(red, math.sin(t * 0.8) * k * 0.6, math.cos(t * 0.7) * k * 0.3,
                      BlendMode.SCREEN, 0.5)
        buf.composite(blue, math.sin(t * 1.1) * k * -0.5, math.cos(t * 0.8) * k * -0.2,
                      BlendMode.SCREEN, 0.5)

    return layers


def layer_separation(
    buf: RasterBuffer,
    intensity: float,
    layers: list[Layer],
    rng: np.random.Generator | None = None,
) -> list[Gap]:
    """Push layers apart with random black gaps of 1..floor(intensity) rows.

    The first layer stays put; every later layer moves down by the sum of
    the gaps above it. Content pushed past the bottom edge is lost.
    """
    if not active(intensity) or not layers:
        return []
    rng = make_rng(rng)
    intensity = bounded(intensity)
    src = buf.snapshot()

    width, height = buf.size
    max_gap = max(1, min(int(intensity), height))

    buf.clear()
    gaps = []
    offset = 0
    for index, layer in enumerate(layers):
        if index > 0:
            size = int(rng.integers(1, max_gap + 1))
            gaps.append(Gap(layer.y + offset, size))
            offset += size
        buf.copy_rect(src, (0, layer.y, width, layer.height), (0, layer.y + offset, width, layer.height))

    for gap in gaps:
        buf.fill_rect((0, gap.y, width, gap.height), BLACK, BlendMode.COPY)

    return [Gap(g.y, min(g.height, height - g.y)) for g in gaps if g.y < height]
