"""Displacement sampler: warp-and-resample shared by all warp effects.

Edge behavior, kept on purpose: bilinear sampling needs all four taps
strictly inside the buffer. ``warp`` falls back to nearest-neighbor for the
last row/column, which leaves a faint seam at the right and bottom edges.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable

import numpy as np

from rewind.raster import RasterBuffer

NEAREST = "nearest"
BILINEAR = "bilinear"


@dataclass
class DisplacementField:
    """Per-pixel source offsets: output pixel (x, y) reads from (x + dx, y + dy)."""
    dx: np.ndarray   # (H, W) float
    dy: np.ndarray   # (H, W) float

    @classmethod
    def from_function(
        cls,
        fn: Callable[[np.ndarray, np.ndarray, float], tuple[np.ndarray, np.ndarray]],
        width: int,
        height: int,
        t: float,
    ) -> DisplacementField:
        """Evaluate ``fn(xs, ys, t) -> (dx, dy)`` over the pixel grid."""
        ys, xs = np.mgrid[0:height, 0:width].astype(np.float64)
        dx, dy = fn(xs, ys, t)
        return cls(
            np.broadcast_to(dx, (height, width)).astype(np.float64),
            np.broadcast_to(dy, (height, width)).astype(np.float64),
        )


def in_bounds(width: int, height: int, x: np.ndarray, y: np.ndarray) -> np.ndarray:
    return (x >= 0) & (x < width) & (y >= 0) & (y < height)


def bilinear_interior(width: int, height: int, x: np.ndarray, y: np.ndarray) -> np.ndarray:
    """Where all four bilinear taps around (x, y) lie inside the buffer."""
    return (x >= 0) & (x < width - 1) & (y >= 0) & (y < height - 1)


def sample(src: np.ndarray, x, y, mode: str = NEAREST) -> np.ndarray:
    """Sample RGBA ``src`` at float coordinates.

    Nearest floors the coordinates; reads outside the buffer return
    transparent black. Bilinear only answers where ``bilinear_interior`` holds
    and returns transparent black elsewhere; callers pick the fallback.
    """
    h, w = src.shape[:2]
    x = np.asarray(x, dtype=np.float64)
    y = np.asarray(y, dtype=np.float64)
    out = np.zeros(x.shape + (src.shape[2],), dtype=np.uint8)

    if mode == NEAREST:
        ok = in_bounds(w, h, x, y)
        out[ok] = src[np.floor(y[ok]).astype(np.int64), np.floor(x[ok]).astype(np.int64)]
        return out

    if mode != BILINEAR:
        raise ValueError(f"Unknown sampling mode: {mode}")

    ok = bilinear_interior(w, h, x, y)
    xv, yv = x[ok], y[ok]
    x0 = np.floor(xv).astype(np.int64)
    y0 = np.floor(yv).astype(np.int64)
    wx = (xv - x0)[:, np.newaxis]
    wy = (yv - y0)[:, np.newaxis]

    p00 = src[y0, x0].astype(np.float64)
    p01 = src[y0, x0 + 1].astype(np.float64)
    p10 = src[y0 + 1, x0].astype(np.float64)
    p11 = src[y0 + 1, x0 + 1].astype(np.float64)
    value = (
        p00 * (1 - wx) * (1 - wy)
        + p01 * wx * (1 - wy)
        + p10 * (1 - wx) * wy
        + p11 * wx * wy
    )
    out[ok] = np.clip(np.rint(value), 0, 255).astype(np.uint8)
    return out


def warp(buf: RasterBuffer, field: DisplacementField, mode: str = NEAREST, source: RasterBuffer | None = None) -> None:
    """Resample ``buf`` in place through ``field``.

    Reads come from ``source`` (default: a snapshot of ``buf``). Target
    pixels whose source position falls outside the buffer keep their value.
    """
    src = (source if source is not None else buf.snapshot()).data
    h, w = src.shape[:2]
    ys, xs = np.mgrid[0:h, 0:w]
    sx = np.nan_to_num(xs + field.dx, nan=-1.0)
    sy = np.nan_to_num(ys + field.dy, nan=-1.0)

    valid = in_bounds(w, h, sx, sy)
    if mode == BILINEAR:
        interior = bilinear_interior(w, h, sx, sy)
        buf.data[interior] = sample(src, sx[interior], sy[interior], BILINEAR)
        edge = valid & ~interior
        buf.data[edge] = sample(src, sx[edge], sy[edge], NEAREST)
    else:
        buf.data[valid] = sample(src, sx[valid], sy[valid], mode)
