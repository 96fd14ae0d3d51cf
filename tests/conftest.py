"""Shared test fixtures: synthetic frames and seeded generators."""

import numpy as np
import pytest
from PIL import Image

from rewind.raster import RasterBuffer


def gradient(width=64, height=64):
    """RGBA frame with a red ramp across and a green ramp down."""
    f = np.zeros((height, width, 4), dtype=np.uint8)
    f[:, :, 0] = np.linspace(0, 255, width).astype(np.uint8).reshape(1, width)
    f[:, :, 1] = np.linspace(0, 255, height).astype(np.uint8).reshape(height, 1)
    f[:, :, 2] = 64
    f[:, :, 3] = 255
    return f


@pytest.fixture
def rng():
    return np.random.default_rng(42)


@pytest.fixture
def gray():
    """64x64 opaque mid-gray buffer."""
    return RasterBuffer.blank(64, 64, (128, 128, 128, 255))


@pytest.fixture
def frame():
    """64x64 gradient buffer."""
    return RasterBuffer(gradient())


@pytest.fixture
def source():
    """Read-only gradient source, shared the way a loaded image is."""
    buf = RasterBuffer(gradient(48, 32))
    buf.data.flags.writeable = False
    return buf


@pytest.fixture
def image_file(tmp_path):
    """Write an RGB gradient PNG and return its path."""
    path = str(tmp_path / "source.png")
    Image.fromarray(gradient(40, 30)[:, :, :3]).save(path)
    return path
