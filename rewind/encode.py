"""Encoders: PNG and GIF via Pillow, video via moviepy.

Frames are (H, W, 4) uint8 RGBA arrays in display order. Encoder errors are
not caught here.
"""

from __future__ import annotations

import io
import os

import numpy as np
from PIL import Image


def to_image(frame: np.ndarray, size: tuple[int, int] | None = None) -> Image.Image:
    """RGBA frame -> Pillow image, nearest-resized to ``size`` (width, height) if given."""
    img = Image.fromarray(np.ascontiguousarray(frame, dtype=np.uint8))
    if size is not None and img.size != tuple(size):
        img = img.resize(tuple(size), Image.NEAREST)
    return img


def flatten(img: Image.Image, background=(0, 0, 0)) -> Image.Image:
    """Composite an RGBA image over an opaque background, returning RGB."""
    base = Image.new("RGBA", img.size, tuple(background) + (255,))
    return Image.alpha_composite(base, img.convert("RGBA")).convert("RGB")


def encode_png(frame: np.ndarray) -> bytes:
    out = io.BytesIO()
    to_image(frame).save(out, format="PNG")
    return out.getvalue()


def encode_gif(frames: list[np.ndarray], delay_ms: float, size: tuple[int, int] | None = None) -> bytes:
    """Looping animated GIF; every frame shows for ``delay_ms``."""
    if not frames:
        raise ValueError("No frames to encode")
    images = [flatten(to_image(f, size)) for f in frames]
    out = io.BytesIO()
    images[0].save(
        out,
        format="GIF",
        save_all=True,
        append_images=images[1:],
        duration=int(round(delay_ms)),
        loop=0,
        disposal=2,
    )
    return out.getvalue()


def encode_video(
    frames: list[np.ndarray],
    delay_ms: float,
    size: tuple[int, int] | None,
    path: str,
    codec: str = "libx264",
    crf: int = 18,
) -> None:
    """Write frames to a video file at ``1000 / delay_ms`` fps.

    Args:
        frames: RGBA frames in display order.
        delay_ms: Display time of each frame.
        size: Output (width, height); frames are resized when it differs.
        path: Output file path; its extension picks the container.
        codec: Video codec.
        crf: Constant rate factor (quality).
    """
    from moviepy import ImageSequenceClip

    if not frames:
        raise ValueError("No frames to encode")
    fps = 1000.0 / delay_ms
    rgb = [np.array(flatten(to_image(f, size))) for f in frames]

    os.makedirs(os.path.dirname(os.path.abspath(path)), exist_ok=True)

    clip = ImageSequenceClip(rgb, fps=fps)
    clip.write_videofile(
        path,
        codec=codec,
        fps=fps,
        audio=False,
        logger=None,
        # libx264 needs even dimensions
        ffmpeg_params=["-crf", str(crf), "-vf", "pad=ceil(iw/2)*2:ceil(ih/2)*2"],
    )
