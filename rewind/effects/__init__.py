"""Raster effects. Each takes a RasterBuffer and an intensity and mutates in place."""

from rewind.effects.base import Gap, Layer, active, bounded
from rewind.effects.extras import chroma_shift, pixelate, scan_lines
from rewind.effects.fibonacci import fibonacci_spiral
from rewind.effects.grade import brightness_contrast, color_shift, vhs_color_grade
from rewind.effects.layers import layer_separation, layer_split
from rewind.effects.static import static_in_gaps, static_on_screen
from rewind.effects.synth import duplicate_synth, psychedelic
from rewind.effects.warp import fluid_animation, liquid_mesh, turbulence
from rewind.effects.zigzag import zigzag

__all__ = [
    "Gap", "Layer", "active", "bounded",
    "layer_split", "layer_separation", "static_on_screen", "static_in_gaps",
    "zigzag", "duplicate_synth", "liquid_mesh", "psychedelic",
    "brightness_contrast", "fibonacci_spiral", "vhs_color_grade",
    "fluid_animation", "turbulence", "color_shift",
    "pixelate", "chroma_shift", "scan_lines",
]
