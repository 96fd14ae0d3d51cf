"""Frame capture and export.

Frames are rendered at evenly spaced virtual times, independent of wall
clock and animation speed, and captured as read-only copies. Capture runs in
batches so a caller can interleave other work or cancel between batches.
"""

from __future__ import annotations

import logging
import os
from contextlib import contextmanager
from pathlib import Path
from typing import Callable, Iterator

import numpy as np

from rewind.clock import DEFAULT_CYCLE, AnimationClock
from rewind.encode import encode_gif, encode_png, encode_video
from rewind.errors import CaptureError, ExportCancelled, RewindError
from rewind.pipeline import render, renderer
from rewind.raster import RasterBuffer
from rewind.settings import Settings

log = logging.getLogger(__name__)

BATCH_SIZE = 5


def freeze(frame: RasterBuffer | np.ndarray) -> np.ndarray:
    """Read-only deep copy of a rendered frame."""
    if isinstance(frame, RasterBuffer):
        return frame.freeze()
    frozen = np.array(frame, dtype=np.uint8, copy=True)
    frozen.flags.writeable = False
    return frozen


class ExportJob:
    """Batched capture of ``frame_count`` frames over one cycle.

    Iterate ``steps()`` to drive it; each yield is the number of frames
    captured so far. ``cancel()`` takes effect at the next batch boundary.
    """

    def __init__(
        self,
        render_at: Callable[[float], RasterBuffer | np.ndarray],
        frame_count: int,
        cycle_length: float = DEFAULT_CYCLE,
        on_progress: Callable[[float], None] | None = None,
        batch_size: int = BATCH_SIZE,
    ):
        if batch_size <= 0:
            raise ValueError(f"batch_size must be positive, got {batch_size}")
        self.render_at = render_at
        self.times = AnimationClock.export_times(frame_count, cycle_length)
        self.on_progress = on_progress
        self.batch_size = batch_size
        self._frames: list[np.ndarray] = []
        self._cancelled = False
        self._done = False

    @property
    def frame_count(self) -> int:
        return len(self.times)

    @property
    def captured(self) -> int:
        return len(self._frames)

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    @property
    def done(self) -> bool:
        return self._done

    @property
    def frames(self) -> list[np.ndarray]:
        if self._cancelled:
            raise ExportCancelled("export was cancelled")
        if not self._done:
            raise RewindError(f"export incomplete: {self.captured}/{self.frame_count} frames")
        return list(self._frames)

    def cancel(self) -> None:
        self._cancelled = True

    def steps(self) -> Iterator[int]:
        n = self.frame_count
        for start in range(0, n, self.batch_size):
            if self._cancelled:
                self._frames.clear()
                log.info("Export cancelled after %d/%d frames", start, n)
                return
            for i in range(start, min(start + self.batch_size, n)):
                self._capture(i)
            yield self.captured

        if self._cancelled:
            self._frames.clear()
            return
        self._done = True

    def _capture(self, index: int) -> None:
        t = self.times[index]
        try:
            frame = self.render_at(t)
        except Exception as exc:
            self._frames.clear()
            raise CaptureError(index, t, str(exc)) from exc
        self._frames.append(freeze(frame))
        if self.on_progress is not None:
            self.on_progress(self.captured / self.frame_count)

    def run(self) -> list[np.ndarray]:
        """Drive every batch to completion and return the frames."""
        for captured in self.steps():
            log.info("Captured %d/%d frames", captured, self.frame_count)
        return self.frames


def capture_frames(
    render_at: Callable[[float], RasterBuffer | np.ndarray],
    frame_count: int,
    cycle_length: float = DEFAULT_CYCLE,
    on_progress: Callable[[float], None] | None = None,
    batch_size: int = BATCH_SIZE,
) -> list[np.ndarray]:
    """Render ``render_at(i * cycle_length / frame_count)`` for every i."""
    return ExportJob(render_at, frame_count, cycle_length, on_progress, batch_size).run()


def loop_frames(frames: list[np.ndarray]) -> list[np.ndarray]:
    """Re-append the first frame for players that don't loop."""
    return list(frames) + list(frames[:1])


@contextmanager
def atomic_output(path: str) -> Iterator[str]:
    """Yield a temporary sibling path; move it onto ``path`` only on success."""
    target = Path(path)
    target.parent.mkdir(parents=True, exist_ok=True)
    tmp = target.with_name(f"{target.stem}.partial{target.suffix}")
    try:
        yield str(tmp)
        os.replace(tmp, target)
    finally:
        if tmp.exists():
            tmp.unlink()


def export_still(
    source: RasterBuffer,
    settings: Settings,
    path: str,
    t: float = 0.0,
    rng: np.random.Generator | None = None,
) -> str:
    """Render one frame at virtual time ``t`` and write it as PNG."""
    frame = render(source, settings, t, rng)
    data = encode_png(frame.data)
    with atomic_output(path) as tmp:
        with open(tmp, "wb") as f:
            f.write(data)
    return path


def export_gif(
    source: RasterBuffer,
    settings: Settings,
    path: str,
    on_progress: Callable[[float], None] | None = None,
    rng: np.random.Generator | None = None,
) -> str:
    frames = capture_frames(renderer(source, settings, rng), settings.frame_count,
                            settings.cycle_length, on_progress)
    delay = AnimationClock(settings.animation_speed).export_delay_ms(
        settings.frame_count, settings.cycle_length, settings.frame_delay_ms)
    data = encode_gif(frames, delay, source.size)
    with atomic_output(path) as tmp:
        with open(tmp, "wb") as f:
            f.write(data)
    log.info("Wrote %d-frame GIF to %s", len(frames), path)
    return path


def export_video(
    source: RasterBuffer,
    settings: Settings,
    path: str,
    on_progress: Callable[[float], None] | None = None,
    rng: np.random.Generator | None = None,
    loop: bool = True,
) -> str:
    """Capture one cycle and encode it as video, closing the loop by default."""
    frames = capture_frames(renderer(source, settings, rng), settings.frame_count,
                            settings.cycle_length, on_progress)
    if loop:
        frames = loop_frames(frames)
    delay = AnimationClock(settings.animation_speed).export_delay_ms(
        settings.frame_count, settings.cycle_length, settings.frame_delay_ms)
    with atomic_output(path) as tmp:
        encode_video(frames, delay, source.size, tmp)
    log.info("Wrote %d-frame video to %s", len(frames), path)
    return path
