"""
Color math shared by the analysis components.

Colors are normalized RGB triples in [0, 1]. Clustering compares colors with
the cheap squared RGB distance; callers deciding whether two colors are
"close enough" use the perceptual CIELAB distance instead.
"""

import math
from typing import NamedTuple

import numpy as np

# Rec. 601 luma weights
LUMA_WEIGHTS = np.array([0.299, 0.587, 0.114])

# Linear sRGB -> XYZ, D65 white point
RGB_TO_XYZ = np.array(
    [
        [0.4124564, 0.3575761, 0.1804375],
        [0.2126729, 0.7151522, 0.0721750],
        [0.0193339, 0.1191920, 0.9503041],
    ]
)
D65_WHITE = np.array([0.95047, 1.0, 1.08883])

LAB_EPSILON = 0.008856
LAB_KAPPA = 903.3

# Empirical ceiling used to bring Lab distances into [0, 1]
MAX_LAB_DISTANCE = 100.0

MAX_RGB_DISTANCE = math.sqrt(3.0)


class Color(NamedTuple):
    """Normalized RGB color."""

    r: float
    g: float
    b: float

    @classmethod
    def from_rgb255(cls, r: int, g: int, b: int) -> "Color":
        return cls(r / 255.0, g / 255.0, b / 255.0)

    def to_rgb255(self):
        return tuple(int(round(min(max(c, 0.0), 1.0) * 255)) for c in self)


BLACK = Color(0.0, 0.0, 0.0)


def distance_squared(a, b) -> float:
    """Sum of squared per-channel differences in RGB space."""
    dr = a[0] - b[0]
    dg = a[1] - b[1]
    db = a[2] - b[2]
    return float(dr * dr + dg * dg + db * db)


def distance_squared_array(colors: np.ndarray, centroids: np.ndarray) -> np.ndarray:
    """
    Squared RGB distance from every color to every centroid.

    Args:
        colors: (N, 3) array
        centroids: (K, 3) array

    Returns:
        (N, K) array of squared distances
    """
    # One centroid at a time keeps the working set at (N, 3)
    columns = [np.sum((colors - centroid) ** 2, axis=1) for centroid in centroids]
    if not columns:
        return np.empty((len(colors), 0), dtype=np.float64)
    return np.stack(columns, axis=1)


def luminance(color) -> float:
    """Perceived brightness (0.299 R + 0.587 G + 0.114 B) clamped to [0, 1]."""
    value = 0.299 * color[0] + 0.587 * color[1] + 0.114 * color[2]
    return min(max(float(value), 0.0), 1.0)


def luminance_array(rgb: np.ndarray) -> np.ndarray:
    """Vectorized luminance over the last axis of an (..., 3) array."""
    return np.clip(rgb @ LUMA_WEIGHTS, 0.0, 1.0)


def rgb_to_lab(rgb: np.ndarray) -> np.ndarray:
    """Convert an (N, 3) array of normalized sRGB colors to CIELAB."""
    rgb = np.clip(np.asarray(rgb, dtype=np.float64), 0.0, 1.0)

    # sRGB gamma decode
    linear = np.where(rgb > 0.04045, ((rgb + 0.055) / 1.055) ** 2.4, rgb / 12.92)

    xyz = linear @ RGB_TO_XYZ.T
    xyz = xyz / D65_WHITE

    f = np.where(
        xyz > LAB_EPSILON,
        np.cbrt(xyz),
        (LAB_KAPPA * xyz + 16.0) / 116.0,
    )
    fx, fy, fz = f[:, 0], f[:, 1], f[:, 2]

    L = 116.0 * fy - 16.0
    a = 500.0 * (fx - fy)
    b = 200.0 * (fy - fz)
    return np.column_stack([L, a, b])


def perceptual_distance(a, b) -> float:
    """
    Normalized CIELAB distance between two colors.

    Returns:
        Euclidean Lab distance divided by MAX_LAB_DISTANCE, clamped to [0, 1]
    """
    lab = rgb_to_lab(np.array([a[:3], b[:3]], dtype=np.float64))
    dist = float(np.linalg.norm(lab[0] - lab[1]))
    return min(dist / MAX_LAB_DISTANCE, 1.0)


def color_similarity(a, b) -> float:
    """Euclidean RGB distance scaled to [0, 1] (0 = identical)."""
    dist = math.sqrt(distance_squared(a, b))
    return min(max(dist / MAX_RGB_DISTANCE, 0.0), 1.0)
