"""Paint helpers: colors, gradients, transformed copies and vector overlays.

Gradients and overlays are returned as float/uint8 RGBA arrays sized like the
target buffer, ready for ``RasterBuffer.composite`` or ``blend_into``.
"""

from __future__ import annotations

import colorsys
import math

import numpy as np
from PIL import Image, ImageDraw
from scipy import ndimage


def hsl(hue_deg: float, saturation: float, lightness: float, alpha: float = 1.0) -> tuple[float, float, float, float]:
    """CSS-style hsla() as an RGBA tuple in 0..255."""
    r, g, b = colorsys.hls_to_rgb((hue_deg % 360.0) / 360.0, lightness, saturation)
    return (r * 255.0, g * 255.0, b * 255.0, min(max(alpha, 0.0), 1.0) * 255.0)


def hue_matrix(degrees: float) -> np.ndarray:
    """The 3x3 RGB matrix of the CSS ``hue-rotate()`` filter."""
    a = math.cos(math.radians(degrees))
    b = math.sin(math.radians(degrees))
    return np.array([
        [0.213 + a * 0.787 - b * 0.213, 0.715 - a * 0.715 - b * 0.715, 0.072 - a * 0.072 + b * 0.928],
        [0.213 - a * 0.213 + b * 0.143, 0.715 + a * 0.285 + b * 0.140, 0.072 - a * 0.072 - b * 0.283],
        [0.213 - a * 0.213 - b * 0.787, 0.715 - a * 0.715 + b * 0.715, 0.072 + a * 0.928 + b * 0.072],
    ])


def hue_rotate(rgba: np.ndarray, degrees: float) -> np.ndarray:
    """Hue-rotated copy of an RGBA array; alpha is untouched."""
    out = rgba.astype(np.float32)
    if degrees % 360.0 == 0:
        return out
    out[..., :3] = out[..., :3] @ hue_matrix(degrees).T.astype(np.float32)
    return np.clip(out, 0.0, 255.0)


def linear_gradient(width: int, height: int, start, end, color0, color1) -> np.ndarray:
    """Two-stop linear gradient along start -> end, clamped past the ends."""
    ys, xs = np.mgrid[0:height, 0:width].astype(np.float32)
    vx, vy = end[0] - start[0], end[1] - start[1]
    length2 = vx * vx + vy * vy
    if length2 == 0:
        p = np.zeros((height, width), dtype=np.float32)
    else:
        p = np.clip(((xs - start[0]) * vx + (ys - start[1]) * vy) / length2, 0.0, 1.0)
    c0 = np.asarray(color0, dtype=np.float32)
    c1 = np.asarray(color1, dtype=np.float32)
    return c0 + (c1 - c0) * p[..., np.newaxis]


def radial_gradient(width: int, height: int, center, r0: float, r1: float, color0, color1) -> np.ndarray:
    """Two-stop radial gradient between concentric circles r0 and r1."""
    ys, xs = np.mgrid[0:height, 0:width].astype(np.float32)
    dist = np.hypot(xs - center[0], ys - center[1])
    if r1 <= r0:
        p = (dist >= r0).astype(np.float32)
    else:
        p = np.clip((dist - r0) / (r1 - r0), 0.0, 1.0)
    c0 = np.asarray(color0, dtype=np.float32)
    c1 = np.asarray(color1, dtype=np.float32)
    return c0 + (c1 - c0) * p[..., np.newaxis]


def transform_about_center(
    rgba: np.ndarray,
    angle: float = 0.0,
    scale: float = 1.0,
    mirror: bool = False,
) -> np.ndarray:
    """Rotate (radians, clockwise on screen), scale and optionally mirror
    an RGBA array about its center. Uncovered pixels are transparent."""
    h, w = rgba.shape[:2]
    if scale <= 0 or not math.isfinite(scale) or not math.isfinite(angle):
        return np.zeros_like(rgba)

    c, s = math.cos(angle), math.sin(angle)
    forward = np.array([[c, -s], [s, c]]) @ np.diag([(-1.0 if mirror else 1.0) * scale, scale])
    inv_xy = np.linalg.inv(forward)
    # (x, y) -> (row, col) ordering for ndimage
    inv_rc = inv_xy[::-1, ::-1]
    center = np.array([(h - 1) / 2.0, (w - 1) / 2.0])

    matrix = np.eye(3)
    matrix[:2, :2] = inv_rc
    offset = np.zeros(3)
    offset[:2] = center - inv_rc @ center
    return ndimage.affine_transform(rgba, matrix, offset=offset, order=0, mode="constant", cval=0)


def overlay(width: int, height: int) -> tuple[Image.Image, ImageDraw.ImageDraw]:
    """Transparent Pillow canvas for vector strokes and particles."""
    img = Image.new("RGBA", (width, height), (0, 0, 0, 0))
    return img, ImageDraw.Draw(img)


def overlay_pixels(img: Image.Image) -> np.ndarray:
    return np.asarray(img, dtype=np.uint8)


def rgba_int(color) -> tuple[int, int, int, int]:
    return tuple(int(round(min(max(v, 0.0), 255.0))) for v in color)
