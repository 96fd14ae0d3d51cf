"""Tests for media module."""

import numpy as np
import pytest
from PIL import Image

from rewind.media import fit_to_resolution, load_image

from conftest import gradient


class TestLoadImage:
    def test_rgb_becomes_opaque_rgba(self, image_file):
        source = load_image(image_file)
        assert source.size == (40, 30)
        assert source.data.shape == (30, 40, 4)
        assert (source.data[..., 3] == 255).all()

    def test_read_only(self, image_file):
        source = load_image(image_file)
        assert not source.data.flags.writeable

    def test_caps_longer_side(self, tmp_path):
        path = str(tmp_path / "big.png")
        Image.new("RGB", (2000, 1000), (10, 20, 30)).save(path)
        source = load_image(path)
        assert source.size == (1000, 500)

    def test_no_cap(self, tmp_path):
        path = str(tmp_path / "big.png")
        Image.new("RGB", (1200, 10)).save(path)
        assert load_image(path, max_dimension=None).size == (1200, 10)


class TestFit:
    def test_same_size_passthrough(self):
        img = gradient(20, 10)
        assert fit_to_resolution(img, (20, 10)) is img

    def test_stretch(self):
        out = fit_to_resolution(gradient(20, 10), (30, 30), "stretch")
        assert out.shape == (30, 30, 4)

    def test_cover(self):
        out = fit_to_resolution(gradient(40, 20), (20, 20), "cover")
        assert out.shape == (20, 20, 4)
        assert (out[..., 3] == 255).all()

    def test_contain_letterbox(self):
        out = fit_to_resolution(gradient(40, 20), (40, 40), "contain")
        assert out.shape == (40, 40, 4)
        np.testing.assert_array_equal(out[0, 0], [0, 0, 0, 255])
        np.testing.assert_array_equal(out[-1, -1], [0, 0, 0, 255])

    def test_contain_centers_image(self):
        out = fit_to_resolution(gradient(40, 20), (40, 40), "contain")
        assert (out[:10, :, :3] == 0).all()
        assert (out[30:, :, :3] == 0).all()
        # the red ramp survives in the middle band
        assert out[20, 35, 0] > out[20, 5, 0]

    def test_cover_crops_center(self):
        out = fit_to_resolution(gradient(40, 20), (20, 20), "cover")
        red = out[10, :, 0].astype(int)
        # columns 10..29 of a 0..255 ramp over 40 columns
        assert 40 < red.min() and red.max() < 215

    def test_unknown_mode(self):
        with pytest.raises(ValueError):
            fit_to_resolution(gradient(20, 10), (5, 5), "zoom")
