"""Tests for color math."""

import math

import numpy as np
import pytest

from py_imagemap.core.color_space import (
    Color,
    color_similarity,
    distance_squared,
    distance_squared_array,
    luminance,
    luminance_array,
    perceptual_distance,
    rgb_to_lab,
)

BLACK = Color(0.0, 0.0, 0.0)
WHITE = Color(1.0, 1.0, 1.0)
RED = Color(1.0, 0.0, 0.0)


class TestDistanceSquared:
    """Test squared RGB distance."""

    def test_black_white(self):
        assert distance_squared(BLACK, WHITE) == pytest.approx(3.0)

    def test_identical(self):
        assert distance_squared(RED, RED) == 0.0

    def test_array_matches_scalar(self):
        """Vectorized distances agree with the scalar version."""
        colors = np.array([BLACK, WHITE, RED])
        centroids = np.array([BLACK, RED])
        distances = distance_squared_array(colors, centroids)

        assert distances.shape == (3, 2)
        for i, color in enumerate(colors):
            for j, centroid in enumerate(centroids):
                assert distances[i, j] == pytest.approx(distance_squared(color, centroid))


class TestLuminance:
    """Test brightness conversion."""

    def test_weights(self):
        assert luminance(RED) == pytest.approx(0.299)
        assert luminance(Color(0.0, 1.0, 0.0)) == pytest.approx(0.587)
        assert luminance(Color(0.0, 0.0, 1.0)) == pytest.approx(0.114)

    def test_range(self):
        assert luminance(BLACK) == 0.0
        assert luminance(WHITE) == pytest.approx(1.0)
        assert luminance(WHITE) <= 1.0

    def test_array(self):
        grid = np.array([[BLACK, WHITE], [RED, RED]])
        result = luminance_array(grid)

        assert result.shape == (2, 2)
        np.testing.assert_allclose(result, [[0.0, 1.0], [0.299, 0.299]])


class TestPerceptualDistance:
    """Test CIELAB distance."""

    def test_white_lab(self):
        lab = rgb_to_lab(np.array([WHITE]))
        np.testing.assert_allclose(lab[0], [100.0, 0.0, 0.0], atol=1e-2)

    def test_black_lab(self):
        lab = rgb_to_lab(np.array([BLACK]))
        np.testing.assert_allclose(lab[0], [0.0, 0.0, 0.0], atol=1e-6)

    def test_black_white_is_maximal(self):
        assert perceptual_distance(BLACK, WHITE) == pytest.approx(1.0, abs=1e-3)

    def test_identical_is_zero(self):
        assert perceptual_distance(RED, RED) == pytest.approx(0.0)

    def test_symmetric(self):
        a = Color(0.2, 0.5, 0.1)
        b = Color(0.9, 0.3, 0.6)
        assert perceptual_distance(a, b) == pytest.approx(perceptual_distance(b, a))

    def test_bounded(self):
        """Distances are clamped into [0, 1]."""
        blue = Color(0.0, 0.0, 1.0)
        yellow = Color(1.0, 1.0, 0.0)
        assert 0.0 <= perceptual_distance(blue, yellow) <= 1.0

    def test_similar_colors_are_close(self):
        a = Color(0.50, 0.50, 0.50)
        b = Color(0.51, 0.50, 0.50)
        assert perceptual_distance(a, b) < 0.02


class TestColor:
    """Test the Color value type."""

    def test_from_rgb255(self):
        assert Color.from_rgb255(255, 0, 51) == pytest.approx((1.0, 0.0, 0.2))

    def test_to_rgb255(self):
        assert Color(1.0, 0.5, 0.0).to_rgb255() == (255, 128, 0)

    def test_similarity(self):
        assert color_similarity(BLACK, WHITE) == pytest.approx(1.0)
        assert color_similarity(RED, RED) == 0.0
        assert color_similarity(BLACK, RED) == pytest.approx(1.0 / math.sqrt(3.0))
