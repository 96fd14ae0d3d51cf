"""Tests for displace module."""

import numpy as np
import pytest

from rewind.displace import (
    BILINEAR, NEAREST, DisplacementField, bilinear_interior, sample, warp,
)
from rewind.raster import RasterBuffer


def constant_field(buf, dx, dy):
    return DisplacementField.from_function(
        lambda xs, ys, t: (np.full_like(xs, dx), np.full_like(ys, dy)),
        buf.width, buf.height, 0.0,
    )


class TestField:
    def test_from_function_shapes(self):
        field = DisplacementField.from_function(lambda xs, ys, t: (xs * 0 + t, ys), 5, 3, 2.0)
        assert field.dx.shape == (3, 5)
        assert (field.dx == 2.0).all()
        assert field.dy[2, 0] == 2.0

    def test_scalar_result_broadcasts(self):
        field = DisplacementField.from_function(lambda xs, ys, t: (1.0, 0.0), 4, 4, 0.0)
        assert field.dx.shape == (4, 4)


class TestSample:
    def test_nearest_floors(self, frame):
        out = sample(frame.data, np.array([3.9]), np.array([2.2]), NEAREST)
        np.testing.assert_array_equal(out[0], frame.data[2, 3])

    def test_nearest_outside_is_transparent(self, frame):
        out = sample(frame.data, np.array([-0.5, 64.0]), np.array([0.0, 0.0]), NEAREST)
        assert (out == 0).all()

    def test_bilinear_midpoint(self):
        data = np.zeros((2, 2, 4), dtype=np.uint8)
        data[:, 1] = 100
        out = sample(data, np.array([0.5]), np.array([0.5]), BILINEAR)
        assert out[0].tolist() == [50, 50, 50, 50]

    def test_bilinear_needs_all_taps(self, frame):
        out = sample(frame.data, np.array([63.0, 10.0]), np.array([10.0, 63.0]), BILINEAR)
        assert (out == 0).all()

    def test_unknown_mode(self, frame):
        with pytest.raises(ValueError):
            sample(frame.data, np.array([0.0]), np.array([0.0]), "cubic")

    def test_interior_mask(self):
        mask = bilinear_interior(4, 4, np.array([0.0, 2.9, 3.0]), np.array([0.0, 2.9, 0.0]))
        assert mask.tolist() == [True, True, False]


class TestWarp:
    @pytest.mark.parametrize("mode", [NEAREST, BILINEAR])
    def test_zero_field_is_identity(self, frame, mode):
        before = frame.data.copy()
        warp(frame, constant_field(frame, 0.0, 0.0), mode)
        np.testing.assert_array_equal(frame.data, before)

    def test_shift_keeps_out_of_bounds_pixels(self, frame):
        before = frame.data.copy()
        warp(frame, constant_field(frame, 1.0, 0.0), NEAREST)
        np.testing.assert_array_equal(frame.data[:, :-1], before[:, 1:])
        # last column reads past the edge and keeps its value
        np.testing.assert_array_equal(frame.data[:, -1], before[:, -1])

    def test_bilinear_border_falls_back_to_nearest(self, frame):
        before = frame.data.copy()
        warp(frame, constant_field(frame, 0.5, 0.0), BILINEAR)
        # the last column has no right-hand tap; nearest keeps the same pixel
        np.testing.assert_array_equal(frame.data[:-1, -1], before[:-1, -1])

    @pytest.mark.parametrize("value", [1e9, -1e9, np.inf, np.nan])
    def test_extreme_displacement_never_raises(self, frame, value):
        before = frame.checksum()
        for mode in (NEAREST, BILINEAR):
            warp(frame, constant_field(frame, value, value), mode)
        assert frame.checksum() == before

    def test_reads_from_given_source(self, frame):
        other = RasterBuffer.blank(64, 64, (1, 2, 3, 255))
        warp(frame, constant_field(frame, 0.0, 0.0), NEAREST, source=other)
        assert frame.get(10, 10) == (1, 2, 3, 255)
