"""RasterBuffer: a fixed-size RGBA pixel grid and its blit/blend primitives.

Every drawing call takes its blend mode and alpha as arguments; there is no
"current" compositing state carried between calls.
"""

from __future__ import annotations

import hashlib
from dataclasses import dataclass
from enum import Enum
from typing import NamedTuple

import numpy as np

from rewind.errors import ScratchBufferError


class BlendMode(str, Enum):
    """Compositing operators, named after their canvas equivalents."""
    COPY = "copy"              # replace, alpha included
    NORMAL = "source-over"
    SCREEN = "screen"
    MULTIPLY = "multiply"
    OVERLAY = "overlay"
    DIFFERENCE = "difference"
    LIGHTEN = "lighten"
    ADD = "lighter"


class Rect(NamedTuple):
    x: int
    y: int
    w: int
    h: int


TRANSPARENT = (0, 0, 0, 0)
BLACK = (0, 0, 0, 255)
WHITE = (255, 255, 255, 255)


def to_uint8(values) -> np.ndarray:
    """Round and clamp channel values to [0, 255]; NaN becomes 0."""
    arr = np.nan_to_num(np.asarray(values, dtype=np.float64), nan=0.0, posinf=255.0, neginf=0.0)
    return np.clip(np.rint(arr), 0, 255).astype(np.uint8)


def _unit(value: float) -> float:
    value = float(value)
    if not value > 0:
        return 0.0
    return min(value, 1.0)


def _as_rect(rect) -> Rect:
    return Rect(*(int(round(v)) for v in rect))


def _blend_rgb(d: np.ndarray, s: np.ndarray, mode: BlendMode) -> np.ndarray:
    if mode is BlendMode.SCREEN:
        return 1.0 - (1.0 - d) * (1.0 - s)
    if mode is BlendMode.MULTIPLY:
        return d * s
    if mode is BlendMode.OVERLAY:
        return np.where(d <= 0.5, 2.0 * d * s, 1.0 - 2.0 * (1.0 - d) * (1.0 - s))
    if mode is BlendMode.DIFFERENCE:
        return np.abs(d - s)
    if mode is BlendMode.LIGHTEN:
        return np.maximum(d, s)
    if mode is BlendMode.ADD:
        return np.minimum(1.0, d + s)
    return s


def blend_into(
    dst: np.ndarray,
    src: np.ndarray,
    mode: BlendMode | str = BlendMode.NORMAL,
    alpha: float = 1.0,
) -> None:
    """Composite RGBA ``src`` onto ``dst`` in place.

    Both arrays are (H, W, 4) with channel values in 0..255. ``dst`` must be
    a uint8 array (or a view of one). ``alpha`` scales the source's own alpha
    channel. Blending is linear in 8-bit space.
    """
    mode = BlendMode(mode)
    if mode is BlendMode.COPY:
        dst[...] = to_uint8(src)
        return

    alpha = _unit(alpha)
    if alpha == 0.0:
        return

    d = dst.astype(np.float32) / 255.0
    s = np.asarray(src, dtype=np.float32) / 255.0
    a = s[..., 3:4] * alpha

    base = d[..., :3]
    rgb = base + (_blend_rgb(base, s[..., :3], mode) - base) * a
    out_a = a + d[..., 3:4] * (1.0 - a)

    dst[..., :3] = to_uint8(rgb * 255.0)
    dst[..., 3:] = to_uint8(out_a * 255.0)


@dataclass(eq=False)
class RasterBuffer:
    """Row-major RGBA pixel grid, shape (height, width, 4), uint8."""
    data: np.ndarray

    def __post_init__(self):
        if self.data.ndim != 3 or self.data.shape[2] != 4:
            raise ValueError(f"Expected (H, W, 4) RGBA data, got shape {self.data.shape}")
        if self.data.dtype != np.uint8:
            raise ValueError(f"Expected uint8 pixel data, got {self.data.dtype}")
        if self.data.shape[0] <= 0 or self.data.shape[1] <= 0:
            raise ValueError("Raster dimensions must be positive")

    @classmethod
    def blank(cls, width: int, height: int, color=TRANSPARENT) -> RasterBuffer:
        data = np.empty((height, width, 4), dtype=np.uint8)
        data[...] = to_uint8(color)
        return cls(data)

    @classmethod
    def from_array(cls, array: np.ndarray) -> RasterBuffer:
        """Wrap a gray, RGB or RGBA array; missing alpha becomes opaque."""
        arr = np.asarray(array)
        if arr.dtype != np.uint8:
            arr = to_uint8(arr)
        if arr.ndim == 2:
            arr = np.repeat(arr[:, :, np.newaxis], 3, axis=2)
        if arr.ndim == 3 and arr.shape[2] == 3:
            alpha = np.full(arr.shape[:2] + (1,), 255, dtype=np.uint8)
            arr = np.concatenate([arr, alpha], axis=2)
        return cls(np.ascontiguousarray(arr).copy())

    @property
    def width(self) -> int:
        return self.data.shape[1]

    @property
    def height(self) -> int:
        return self.data.shape[0]

    @property
    def size(self) -> tuple[int, int]:
        return self.width, self.height

    @property
    def rect(self) -> Rect:
        return Rect(0, 0, self.width, self.height)

    # --- copies ---

    def copy(self) -> RasterBuffer:
        return RasterBuffer(self.data.copy())

    def snapshot(self) -> RasterBuffer:
        """Private scratch copy for an effect that needs the pre-image."""
        try:
            return RasterBuffer(self.data.copy())
        except MemoryError as exc:
            raise ScratchBufferError(
                f"cannot allocate {self.width}x{self.height} scratch buffer"
            ) from exc

    def freeze(self) -> np.ndarray:
        """Immutable deep copy of the pixels."""
        frozen = self.data.copy()
        frozen.flags.writeable = False
        return frozen

    def checksum(self) -> str:
        return hashlib.sha1(self.data.tobytes()).hexdigest()

    # --- pixel access ---

    def get(self, x: int, y: int) -> tuple[int, int, int, int]:
        if 0 <= x < self.width and 0 <= y < self.height:
            return tuple(int(v) for v in self.data[y, x])
        return TRANSPARENT

    def put(self, x: int, y: int, rgba) -> None:
        if 0 <= x < self.width and 0 <= y < self.height:
            self.data[y, x] = to_uint8(rgba)

    def clear(self) -> None:
        self.data[...] = 0

    # --- drawing ---

    def fill_rect(self, rect, color, mode=BlendMode.NORMAL, alpha: float = 1.0) -> None:
        x, y, w, h = _as_rect(rect)
        x0, y0 = max(x, 0), max(y, 0)
        x1, y1 = min(x + w, self.width), min(y + h, self.height)
        if x0 >= x1 or y0 >= y1:
            return
        region = self.data[y0:y1, x0:x1]
        src = np.broadcast_to(np.asarray(color, dtype=np.float32), region.shape)
        blend_into(region, src, mode, alpha)

    def copy_rect(
        self,
        src: RasterBuffer | np.ndarray,
        src_rect,
        dst_rect=None,
        mode=BlendMode.COPY,
        alpha: float = 1.0,
        flip_x: bool = False,
    ) -> None:
        """Nearest-neighbor blit of ``src_rect`` of ``src`` into ``dst_rect``.

        Rects of different sizes scale. Parts of either rect that fall
        outside their buffer are clipped away; nothing here raises for
        out-of-range rectangles.
        """
        src_data = src.data if isinstance(src, RasterBuffer) else src
        src_h, src_w = src_data.shape[:2]
        sx, sy, sw, sh = _as_rect(src_rect)
        dx, dy, dw, dh = _as_rect(dst_rect if dst_rect is not None else src_rect)
        if sw <= 0 or sh <= 0 or dw <= 0 or dh <= 0:
            return

        x0, x1 = max(dx, 0), min(dx + dw, self.width)
        y0, y1 = max(dy, 0), min(dy + dh, self.height)
        if x0 >= x1 or y0 >= y1:
            return

        xs = np.arange(x0, x1)
        ys = np.arange(y0, y1)
        u = (xs - dx + 0.5) * sw / dw
        if flip_x:
            u = sw - u
        src_x = sx + np.floor(u).astype(np.int64)
        src_y = sy + np.floor((ys - dy + 0.5) * sh / dh).astype(np.int64)

        keep_x = (src_x >= 0) & (src_x < src_w)
        keep_y = (src_y >= 0) & (src_y < src_h)
        if not keep_x.any() or not keep_y.any():
            return
        xs, src_x = xs[keep_x], src_x[keep_x]
        ys, src_y = ys[keep_y], src_y[keep_y]

        patch = src_data[np.ix_(src_y, src_x)]
        region = self.data[ys[0]:ys[-1] + 1, xs[0]:xs[-1] + 1]
        blend_into(region, patch, mode, alpha)

    def draw_scaled(self, src: RasterBuffer | np.ndarray, dst_rect=None, mode=BlendMode.COPY, alpha: float = 1.0) -> None:
        """Draw the whole of ``src`` stretched into ``dst_rect`` (default: whole buffer)."""
        src_data = src.data if isinstance(src, RasterBuffer) else src
        full = Rect(0, 0, src_data.shape[1], src_data.shape[0])
        self.copy_rect(src_data, full, dst_rect if dst_rect is not None else self.rect, mode, alpha)

    def composite(self, src: RasterBuffer | np.ndarray, dx: float = 0, dy: float = 0, mode=BlendMode.NORMAL, alpha: float = 1.0) -> None:
        """Draw ``src`` unscaled with its top-left corner at (dx, dy)."""
        src_data = src.data if isinstance(src, RasterBuffer) else src
        h, w = src_data.shape[:2]
        self.copy_rect(src_data, Rect(0, 0, w, h), (dx, dy, w, h), mode, alpha)
