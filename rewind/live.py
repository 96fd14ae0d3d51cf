"""Live renderer: drive the pipeline from the wall clock for previews."""

from __future__ import annotations

import logging
import threading
import time
from typing import Callable

import numpy as np

from rewind.clock import AnimationClock
from rewind.pipeline import render
from rewind.raster import RasterBuffer
from rewind.settings import Settings

log = logging.getLogger(__name__)


class LiveRenderer:
    """Render frames at wall-clock-derived virtual times until stopped.

    Each frame is rendered into a private copy of ``source`` and handed to
    ``on_frame(buffer, t)``. ``stop()`` is safe to call from another thread;
    the loop exits before starting its next frame.
    """

    def __init__(
        self,
        source: RasterBuffer,
        settings: Settings,
        on_frame: Callable[[RasterBuffer, float], None] | None = None,
        fps: float = 30.0,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], None] = time.sleep,
        rng: np.random.Generator | None = None,
    ):
        self.source = source
        self.settings = settings
        self.on_frame = on_frame
        self.interval = 1.0 / fps if fps > 0 else 0.0
        self._clock = clock
        self._sleep = sleep
        self.rng = rng if rng is not None else np.random.default_rng(settings.seed)
        self.animation = AnimationClock.live(settings.animation_speed, self.rng)
        self._start = clock()
        self._stop = threading.Event()
        self.frames_rendered = 0

    @property
    def running(self) -> bool:
        return not self._stop.is_set()

    def stop(self) -> None:
        self._stop.set()

    def now(self) -> float:
        """Current virtual time."""
        wall_ms = (self._clock() - self._start) * 1000.0
        self.animation.animation_speed = self.settings.animation_speed
        return self.animation.at_wall(wall_ms)

    def render_frame(self, t: float | None = None) -> RasterBuffer:
        if t is None:
            t = self.now()
        frame = render(self.source, self.settings, t, self.rng)
        self.frames_rendered += 1
        if self.on_frame is not None:
            self.on_frame(frame, t)
        return frame

    def run(self, max_frames: int | None = None) -> int:
        """Render until stopped or ``max_frames`` is reached; returns frames rendered."""
        self._stop.clear()
        count = 0
        while not self._stop.is_set():
            if max_frames is not None and count >= max_frames:
                break
            began = self._clock()
            self.render_frame()
            count += 1
            remaining = self.interval - (self._clock() - began)
            if remaining > 0 and not self._stop.is_set():
                self._sleep(remaining)
        log.debug("Live renderer stopped after %d frames", count)
        return count
