"""Tests for the raster helper functions."""

import numpy as np
import pytest

from py_imagemap.core.color_space import Color
from py_imagemap.core.image_tools import (
    brightness_histogram,
    dominant_color,
    height_at_position,
    resize,
    to_grayscale,
)
from py_imagemap.core.pixel_buffer import PixelBuffer


@pytest.fixture
def top_white():
    """2x2 image, white top row over a black bottom row."""
    array = np.zeros((2, 2, 3), dtype=np.uint8)
    array[0] = 255
    return PixelBuffer.from_array(array)


class TestHeightAtPosition:
    """Test brightness lookups in bottom-left coordinates."""

    def test_bottom_left_origin(self, top_white):
        assert height_at_position(top_white, 0, 1) == pytest.approx(1.0)
        assert height_at_position(top_white, 1, 0) == 0.0

    @pytest.mark.parametrize("x, y", [(-1, 0), (0, -1), (2, 0), (0, 2)])
    def test_out_of_range(self, top_white, x, y):
        assert height_at_position(top_white, x, y) == 0.0

    def test_empty(self):
        assert height_at_position(None, 0, 0) == 0.0


class TestGrayscale:
    """Test grayscale conversion."""

    def test_channels_equal(self):
        array = np.zeros((1, 2, 3), dtype=np.uint8)
        array[0, 0] = (255, 0, 0)
        gray = to_grayscale(PixelBuffer.from_array(array))

        red = gray.get_pixel(0, 0)
        assert red.r == red.g == red.b
        assert red.r == pytest.approx(76 / 255)
        assert gray.get_pixel(1, 0) == Color(0.0, 0.0, 0.0)

    def test_empty(self):
        assert to_grayscale(None) is None


class TestHistogram:
    """Test brightness histograms."""

    def test_two_levels(self, top_white):
        histogram = brightness_histogram(top_white)

        assert histogram.shape == (256,)
        assert histogram[0] == 2
        assert histogram[255] == 2
        assert histogram.sum() == 4

    def test_custom_bins(self, top_white):
        histogram = brightness_histogram(top_white, bins=10)

        assert histogram.tolist() == [2, 0, 0, 0, 0, 0, 0, 0, 0, 2]

    def test_empty(self):
        histogram = brightness_histogram(None)

        assert histogram.shape == (256,)
        assert histogram.sum() == 0


class TestDominantColor:
    """Test single-cluster dominant color."""

    def test_mean_of_pixels(self):
        array = np.zeros((2, 2, 3), dtype=np.uint8)
        array[...] = (255, 0, 0)
        array[1, 1] = (0, 0, 255)

        color = dominant_color(PixelBuffer.from_array(array), seed=1)

        assert color == pytest.approx(Color(0.75, 0.0, 0.25))

    def test_empty(self):
        assert dominant_color(None) == Color(0.0, 0.0, 0.0)


class TestResize:
    """Test resampling."""

    def test_dimensions(self, top_white):
        resized = resize(top_white, 8, 3)

        assert resized.width == 8
        assert resized.height == 3

    def test_uniform_color_survives(self):
        array = np.zeros((4, 4, 3), dtype=np.uint8)
        array[...] = (10, 200, 30)
        resized = resize(PixelBuffer.from_array(array), 2, 6)

        assert resized.get_pixel(1, 5).to_rgb255() == (10, 200, 30)

    @pytest.mark.parametrize("width, height", [(0, 4), (4, 0), (-1, -1)])
    def test_invalid_target(self, top_white, width, height):
        assert resize(top_white, width, height) is None

    def test_empty(self):
        assert resize(None, 4, 4) is None
