"""Tests for paint module."""

import numpy as np
import pytest

from rewind.paint import (
    hsl, hue_rotate, linear_gradient, overlay, overlay_pixels, radial_gradient,
    rgba_int, transform_about_center,
)


class TestColors:
    def test_hsl_primaries(self):
        assert rgba_int(hsl(0, 1.0, 0.5)) == (255, 0, 0, 255)
        assert rgba_int(hsl(120, 1.0, 0.5)) == (0, 255, 0, 255)
        assert rgba_int(hsl(240, 1.0, 0.5, 0.5)) == (0, 0, 255, 128)

    def test_hsl_wraps_hue(self):
        assert hsl(360 + 120, 1.0, 0.5) == hsl(120, 1.0, 0.5)
        assert hsl(-120, 1.0, 0.5) == hsl(240, 1.0, 0.5)

    def test_rgba_int_clamps(self):
        assert rgba_int((-3.0, 300.0, 12.4, 255.0)) == (0, 255, 12, 255)


class TestHueRotate:
    def test_zero_is_identity(self, frame):
        np.testing.assert_array_equal(hue_rotate(frame.data, 0), frame.data.astype(np.float32))
        np.testing.assert_array_equal(hue_rotate(frame.data, 360), frame.data.astype(np.float32))

    @pytest.mark.parametrize("degrees", [45, 120, 200])
    def test_gray_is_invariant(self, gray, degrees):
        out = hue_rotate(gray.data, degrees)
        np.testing.assert_allclose(out, gray.data.astype(np.float32), atol=1.0)

    def test_alpha_untouched(self, frame):
        frame.data[..., 3] = 77
        assert (hue_rotate(frame.data, 90)[..., 3] == 77).all()

    def test_stays_in_range(self, frame):
        out = hue_rotate(frame.data, 137)
        assert out.min() >= 0 and out.max() <= 255


class TestGradients:
    def test_linear_endpoints(self):
        g = linear_gradient(11, 1, (0, 0), (10, 0), (0, 0, 0, 255), (200, 100, 0, 255))
        assert g.shape == (1, 11, 4)
        np.testing.assert_allclose(g[0, 0], [0, 0, 0, 255])
        np.testing.assert_allclose(g[0, 10], [200, 100, 0, 255])
        np.testing.assert_allclose(g[0, 5], [100, 50, 0, 255])

    def test_linear_degenerate(self):
        g = linear_gradient(3, 3, (1, 1), (1, 1), (5, 5, 5, 5), (9, 9, 9, 9))
        assert (g == 5).all()

    def test_radial_center_and_edge(self):
        g = radial_gradient(21, 21, (10, 10), 0, 10, (255, 0, 0, 255), (0, 0, 0, 0))
        np.testing.assert_allclose(g[10, 10], [255, 0, 0, 255])
        np.testing.assert_allclose(g[0, 0], [0, 0, 0, 0])


class TestTransform:
    def test_identity(self, frame):
        out = transform_about_center(frame.data)
        np.testing.assert_array_equal(out, frame.data)

    def test_mirror(self, frame):
        out = transform_about_center(frame.data, mirror=True)
        np.testing.assert_array_equal(out, frame.data[:, ::-1])

    def test_bad_scale_is_transparent(self, frame):
        assert (transform_about_center(frame.data, scale=0.0) == 0).all()
        assert (transform_about_center(frame.data, scale=-1.0) == 0).all()
        assert (transform_about_center(frame.data, angle=np.inf) == 0).all()

    def test_shrink_leaves_transparent_border(self, frame):
        out = transform_about_center(frame.data, scale=0.5)
        assert out.shape == frame.data.shape
        assert (out[0, 0] == 0).all()
        assert out[32, 32, 3] == 255


class TestOverlay:
    def test_blank_overlay(self):
        img, draw = overlay(8, 6)
        assert img.size == (8, 6)
        px = overlay_pixels(img)
        assert px.shape == (6, 8, 4)
        assert (px == 0).all()

    def test_drawn_pixels(self):
        img, draw = overlay(8, 8)
        draw.rectangle([2, 2, 5, 5], fill=(255, 0, 0, 255))
        px = overlay_pixels(img)
        assert tuple(px[3, 3]) == (255, 0, 0, 255)
        assert tuple(px[0, 0]) == (0, 0, 0, 0)
