"""Effect pipeline: one fixed-order pass of every effect over a frame buffer.

Each effect is described by an ``EffectSpec``. Side channels (layer bands,
gap bands) are stored on the ``PipelineState`` under their channel name and
read back by later effects; an effect whose required channel is missing or
empty is skipped like a zero-intensity one. An effect that runs out of
memory is rolled back and skipped; the pass carries on with the next one.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Callable

import numpy as np

from rewind import effects
from rewind.effects.base import active
from rewind.errors import ScratchBufferError
from rewind.raster import RasterBuffer
from rewind.settings import Settings

log = logging.getLogger(__name__)

LAYERS = "layers"
GAPS = "gaps"
COMPOSITED = "composited"

APPLIED = "applied"
OFF = "off"
NO_SCRATCH = "no-scratch"


@dataclass(frozen=True)
class SideChannel:
    """Bands produced by one effect for use by later ones."""
    kind: str
    bands: tuple = ()


@dataclass
class PipelineState:
    """Everything a pass needs, passed explicitly from stage to stage."""
    buffer: RasterBuffer
    t: float
    rng: np.random.Generator
    settings: Settings
    channels: dict[str, SideChannel] = field(default_factory=dict)
    stage: str = "start"
    trace: list[tuple[str, str]] = field(default_factory=list)

    def bands(self, channel: str) -> list:
        side = self.channels.get(channel)
        return list(side.bands) if side is not None else []

    def outcome(self, name: str) -> str | None:
        for effect, result in self.trace:
            if effect == name:
                return result
        return None


@dataclass(frozen=True)
class EffectSpec:
    name: str
    setting: str                       # Settings field holding the intensity
    requires: tuple[str, ...]
    accepts: tuple[str, ...]
    produces: str | None
    run: Callable[[PipelineState, float], list | None]


EFFECTS = (
    EffectSpec("layer_split", "layer_variation", (), (), LAYERS,
               lambda s, i: effects.layer_split(s.buffer, i, s.t, s.rng)),
    EffectSpec("layer_separation", "layer_separation", (LAYERS,), (), GAPS,
               lambda s, i: effects.layer_separation(s.buffer, i, s.bands(LAYERS), s.rng)),
    EffectSpec("static", "static_on_screen", (), (), None,
               lambda s, i: effects.static_on_screen(s.buffer, i, s.rng)),
    EffectSpec("static_in_gaps", "static_on_layer_separation", (GAPS,), (), None,
               lambda s, i: effects.static_in_gaps(s.buffer, i, s.bands(GAPS), s.rng)),
    EffectSpec("zigzag", "zig_zag", (), (LAYERS,), None,
               lambda s, i: effects.zigzag(s.buffer, i, s.t, s.bands(LAYERS) or None, s.rng,
                                           s.settings.zigzag_speed)),
    EffectSpec("duplicate_synth", "duplicate_synth", (), (), None,
               lambda s, i: effects.duplicate_synth(s.buffer, i, s.t)),
    EffectSpec("liquid_mesh", "liquid_mesh", (), (), None,
               lambda s, i: effects.liquid_mesh(s.buffer, i, s.t)),
    EffectSpec("psychedelic", "psychedelic", (), (), None,
               lambda s, i: effects.psychedelic(s.buffer, i, s.t)),
    EffectSpec("brightness", "brightness", (), (), None,
               lambda s, i: effects.brightness_contrast(s.buffer, i)),
    EffectSpec("fibonacci", "fibonacci", (), (), None,
               lambda s, i: effects.fibonacci_spiral(s.buffer, i, s.t, s.rng)),
    EffectSpec("vhs_grade", "vhs_color_grade", (), (), None,
               lambda s, i: effects.vhs_color_grade(s.buffer, i, s.rng)),
    EffectSpec("fluid_animation", "flow_speed", (), (), None,
               lambda s, i: effects.fluid_animation(s.buffer, i, s.t)),
    EffectSpec("turbulence", "turbulence", (), (), None,
               lambda s, i: effects.turbulence(s.buffer, i, s.t, s.rng)),
    EffectSpec("color_shift", "color_shift", (), (), None,
               lambda s, i: effects.color_shift(s.buffer, i, s.t)),
    EffectSpec("pixelate", "pixelate", (), (), None,
               lambda s, i: effects.pixelate(s.buffer, i)),
    EffectSpec("chroma_shift", "chroma_shift", (), (), None,
               lambda s, i: effects.chroma_shift(s.buffer, i, s.t)),
    EffectSpec("scan_lines", "scan_lines", (), (), None,
               lambda s, i: effects.scan_lines(s.buffer, i, s.t, s.rng)),
)

EFFECT_NAMES = tuple(spec.name for spec in EFFECTS)


def step(state: PipelineState, spec: EffectSpec) -> None:
    """Advance ``state`` through one effect, recording the outcome."""
    state.stage = spec.name
    intensity = state.settings.intensity(spec.setting)

    if not active(intensity):
        state.trace.append((spec.name, OFF))
        return

    for channel in spec.requires:
        if not state.bands(channel):
            log.debug("Skipping %s: no %s", spec.name, channel)
            state.trace.append((spec.name, f"missing:{channel}"))
            return

    # An effect can run out of memory part way through; restore the
    # pre-step pixels when it does.
    backup = None
    try:
        backup = state.buffer.snapshot()
        produced = spec.run(state, intensity)
    except (ScratchBufferError, MemoryError) as exc:
        if backup is not None:
            state.buffer.data = backup.data
        log.warning("Skipping %s: %s", spec.name, str(exc) or type(exc).__name__)
        state.trace.append((spec.name, NO_SCRATCH))
        return

    if spec.produces is not None:
        state.channels[spec.produces] = SideChannel(spec.produces, tuple(produced or ()))
    state.trace.append((spec.name, APPLIED))


def run(state: PipelineState, specs=EFFECTS) -> PipelineState:
    for spec in specs:
        step(state, spec)
    state.stage = COMPOSITED
    return state


def compose(
    source: RasterBuffer,
    settings: Settings,
    t: float,
    rng: np.random.Generator | None = None,
) -> PipelineState:
    """Render one frame from a private copy of ``source`` and return the final state."""
    if rng is None:
        rng = np.random.default_rng(settings.seed)
    state = PipelineState(buffer=source.copy(), t=t, rng=rng, settings=settings)
    return run(state)


def render(
    source: RasterBuffer,
    settings: Settings,
    t: float,
    rng: np.random.Generator | None = None,
) -> RasterBuffer:
    return compose(source, settings, t, rng).buffer


def renderer(
    source: RasterBuffer,
    settings: Settings,
    rng: np.random.Generator | None = None,
) -> Callable[[float], RasterBuffer]:
    """Bind source and settings into a ``render_at(t)`` callback.

    All frames share one generator, seeded from ``settings.seed`` unless
    ``rng`` is given, so a sequence of calls is reproducible as a whole.
    """
    if rng is None:
        rng = np.random.default_rng(settings.seed)

    def render_at(t: float) -> RasterBuffer:
        return render(source, settings, t, rng)

    return render_at
