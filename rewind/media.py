"""Source image loading and resizing."""

from __future__ import annotations

import numpy as np
from PIL import Image, ImageOps

from rewind.raster import RasterBuffer

OPAQUE_BLACK = (0, 0, 0, 255)


def load_image(path: str, max_dimension: int | None = 1000) -> RasterBuffer:
    """Load image via Pillow as RGBA, cap its longer side, mark it read-only."""
    with Image.open(path) as img:
        img = img.convert("RGBA")
        if max_dimension is not None and max(img.size) > max_dimension:
            scale = max_dimension / max(img.size)
            size = (max(1, int(img.width * scale)), max(1, int(img.height * scale)))
            img = img.resize(size, Image.LANCZOS)
        source = RasterBuffer(np.array(img, dtype=np.uint8))
    source.data.flags.writeable = False
    return source


def fit_to_resolution(
    image: np.ndarray,
    resolution: tuple[int, int],
    mode: str = "contain",
) -> np.ndarray:
    """Resize an RGBA frame to ``resolution`` (width, height).

    ``cover`` scales until both sides are filled and crops the overflow
    around the center. ``contain`` scales until the image fits and pads the
    rest with opaque black. ``stretch`` ignores the aspect ratio.
    """
    size = tuple(resolution)
    if image.shape[1::-1] == size:
        return image

    img = Image.fromarray(np.ascontiguousarray(image, dtype=np.uint8))
    if mode == "stretch":
        fitted = img.resize(size, Image.LANCZOS)
    elif mode == "cover":
        fitted = ImageOps.fit(img, size, Image.LANCZOS)
    elif mode == "contain":
        fitted = ImageOps.pad(img, size, Image.LANCZOS, color=OPAQUE_BLACK)
    else:
        raise ValueError(f"Unknown fit mode: {mode}")
    return np.array(fitted, dtype=np.uint8)
