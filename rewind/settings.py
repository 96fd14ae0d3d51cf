"""Settings: effect intensities plus animation and export parameters."""

from __future__ import annotations

import json
import math
import re
from dataclasses import dataclass, fields

INTENSITY_FIELDS = (
    "layer_variation",
    "layer_separation",
    "static_on_screen",
    "static_on_layer_separation",
    "zig_zag",
    "duplicate_synth",
    "liquid_mesh",
    "psychedelic",
    "brightness",
    "fibonacci",
    "vhs_color_grade",
    "flow_speed",
    "turbulence",
    "color_shift",
    "pixelate",
    "chroma_shift",
    "scan_lines",
)


def snake_case(name: str) -> str:
    """``zigZag`` -> ``zig_zag``; snake_case names pass through."""
    return re.sub(r"(?<!^)(?=[A-Z])", "_", name).lower()


@dataclass
class Settings:
    """Intensities are on a nominal 0-10 scale; 0 turns an effect off.

    No range checks happen here. Effects clamp what they are given.
    """
    layer_variation: float = 2.9
    layer_separation: float = 0.0
    static_on_screen: float = 3.0
    static_on_layer_separation: float = 0.0
    zig_zag: float = 3.8
    duplicate_synth: float = 0.0
    liquid_mesh: float = 0.0
    psychedelic: float = 0.0
    brightness: float = 0.0
    fibonacci: float = 0.0
    vhs_color_grade: float = 0.0
    flow_speed: float = 1.6        # fluid animation
    turbulence: float = 0.0
    color_shift: float = 0.0
    pixelate: float = 0.0
    chroma_shift: float = 0.0
    scan_lines: float = 0.0

    zigzag_speed: float = 1.0
    animation_speed: float = 1.0
    frame_count: int = 20
    cycle_length: float = 2 * math.pi
    frame_delay_ms: float | None = None  # None: real time, cycle_length / frame_count
    seed: int | None = None

    @classmethod
    def only(cls, **values) -> Settings:
        """All effects off except the ones named; other fields may be given too."""
        known = {f.name for f in fields(cls)}
        for name in values:
            if name not in known:
                raise ValueError(f"Unknown setting: {name}")
        return cls(**{**{name: 0.0 for name in INTENSITY_FIELDS}, **values})

    def intensity(self, name: str) -> float:
        return getattr(self, name)

    def to_dict(self) -> dict:
        d = {}
        for f in fields(self):
            value = getattr(self, f.name)
            if value is None:
                d[f.name] = None
            elif f.name in ("frame_count", "seed"):
                d[f.name] = int(value)
            else:
                d[f.name] = float(value)
        return d

    def save(self, path: str) -> None:
        """Serialize to JSON."""
        with open(path, "w") as f:
            json.dump(self.to_dict(), f, indent=2)

    @classmethod
    def from_dict(cls, d: dict) -> Settings:
        """Build from snake_case or camelCase keys; unknown keys are an error."""
        known = {f.name for f in fields(cls)}
        kwargs = {}
        for key, value in d.items():
            name = snake_case(key)
            if name not in known:
                raise ValueError(f"Unknown setting: {key}")
            kwargs[name] = value
        return cls(**kwargs)

    @classmethod
    def load(cls, path: str) -> Settings:
        """Deserialize from JSON."""
        with open(path) as f:
            return cls.from_dict(json.load(f))
