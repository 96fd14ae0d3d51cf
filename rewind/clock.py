"""Animation clock: wall-clock and frame-index mappings to virtual time."""

from __future__ import annotations

import math
from dataclasses import dataclass

import numpy as np

DEFAULT_CYCLE = 2 * math.pi
MIN_GIF_DELAY_MS = 20.0


@dataclass
class AnimationClock:
    """Virtual-time source for one live session or one export.

    ``offset`` is the random starting point of a live session so that two
    previews of the same image don't begin on the same frame.
    """
    animation_speed: float = 1.0
    offset: float = 0.0

    @classmethod
    def live(cls, animation_speed: float = 1.0, rng: np.random.Generator | None = None) -> AnimationClock:
        rng = rng if rng is not None else np.random.default_rng()
        return cls(animation_speed, float(rng.random() * 1000))

    def at_wall(self, wall_ms: float) -> float:
        return wall_ms / 1000.0 * self.animation_speed + self.offset

    @staticmethod
    def export_times(frame_count: int, cycle_length: float = DEFAULT_CYCLE) -> list[float]:
        """``[i * cycle_length / frame_count for i in range(frame_count)]``."""
        if frame_count <= 0:
            raise ValueError(f"frame_count must be positive, got {frame_count}")
        return [i * cycle_length / frame_count for i in range(frame_count)]

    def gif_delay_ms(self, frame_delay_ms: float) -> float:
        """Per-frame GIF delay at this speed, never below 20 ms."""
        if not self.animation_speed > 0:
            return max(frame_delay_ms, MIN_GIF_DELAY_MS)
        return max(frame_delay_ms / self.animation_speed, MIN_GIF_DELAY_MS)

    def export_delay_ms(
        self,
        frame_count: int,
        cycle_length: float = DEFAULT_CYCLE,
        frame_delay_ms: float | None = None,
    ) -> float:
        """Per-frame delay for an exported loop.

        Without an explicit ``frame_delay_ms`` the delay is chosen so the
        loop plays at the same pace as the live preview: one virtual second
        per wall second at speed 1.
        """
        if frame_delay_ms is None:
            frame_delay_ms = cycle_length * 1000.0 / frame_count
        return self.gif_delay_ms(frame_delay_ms)
