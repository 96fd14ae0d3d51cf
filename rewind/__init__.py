"""rewind: VHS / glitch effect compositing for still images, with loop export."""

from rewind.raster import BlendMode, RasterBuffer
from rewind.settings import Settings
from rewind.pipeline import EFFECTS, PipelineState, compose, render, renderer
from rewind.clock import AnimationClock
from rewind.export import ExportJob, capture_frames, export_gif, export_still, export_video
from rewind.media import load_image
from rewind.errors import CaptureError, ExportCancelled, RewindError, ScratchBufferError

__version__ = "0.1.0"
