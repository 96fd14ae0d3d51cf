"""Exception types raised by the compositing pipeline and exporter."""


class RewindError(Exception):
    """Base class for all rewind errors."""


class ScratchBufferError(RewindError):
    """An effect could not allocate the scratch copy it works from."""


class CaptureError(RewindError):
    """Rendering a frame failed during export; the whole export is void."""

    def __init__(self, frame_index: int, time: float, message: str):
        super().__init__(f"frame {frame_index} (t={time:.4f}): {message}")
        self.frame_index = frame_index
        self.time = time


class ExportCancelled(RewindError):
    """The export was cancelled before all frames were captured."""
