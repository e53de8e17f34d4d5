"""
Edge detection with 3x3 Sobel kernels.

The edge map is a dense grid in storage orientation (row 0 at the top) and is
indexed positionally; unlike cluster and band coordinate sets it is never
flipped. Out-of-bounds samples replicate the nearest edge pixel.
"""

from dataclasses import dataclass
from typing import FrozenSet, Optional, Tuple

import numpy as np
import structlog
from scipy import ndimage

from .pixel_buffer import PixelBuffer, is_empty_buffer

DEFAULT_EDGE_THRESHOLD = 0.1
DEFAULT_POSITION_THRESHOLD = 0.5

# Gradients smaller than this are float residue from summing equal samples
GRADIENT_EPSILON = 1e-9

SOBEL_X = np.array(
    [
        [-1, 0, 1],
        [-2, 0, 2],
        [-1, 0, 1],
    ],
    dtype=np.float64,
)

SOBEL_Y = np.array(
    [
        [-1, -2, -1],
        [0, 0, 0],
        [1, 2, 1],
    ],
    dtype=np.float64,
)


@dataclass(frozen=True, eq=False)
class EdgeMap:
    """Threshold-gated gradient magnitudes, same size as the source image."""

    magnitudes: np.ndarray  # (height, width), values in [0, 1]
    threshold: float

    @property
    def width(self) -> int:
        return self.magnitudes.shape[1] if self.magnitudes.ndim == 2 else 0

    @property
    def height(self) -> int:
        return self.magnitudes.shape[0]

    @property
    def is_empty(self) -> bool:
        return self.magnitudes.size == 0

    def magnitude_at(self, x: int, y: int) -> float:
        """Magnitude at storage coordinate (x, y)."""
        return float(self.magnitudes[y, x])

    def positions(
        self, threshold: float = DEFAULT_POSITION_THRESHOLD
    ) -> FrozenSet[Tuple[int, int]]:
        return edge_positions(self.magnitudes, threshold)

    @classmethod
    def empty(cls, threshold: float = DEFAULT_EDGE_THRESHOLD) -> "EdgeMap":
        return cls(magnitudes=_read_only(np.zeros((0, 0))), threshold=threshold)


def _read_only(array: np.ndarray) -> np.ndarray:
    array.setflags(write=False)
    return array


def sobel_gradients(brightness: np.ndarray) -> Tuple[np.ndarray, np.ndarray]:
    """
    Horizontal and vertical gradients of a brightness grid.

    Kernels are applied as written (correlation, no flip) with replicate
    padding at the borders.
    """
    gx = ndimage.correlate(brightness, SOBEL_X, mode="nearest")
    gy = ndimage.correlate(brightness, SOBEL_Y, mode="nearest")
    gx[np.abs(gx) < GRADIENT_EPSILON] = 0.0
    gy[np.abs(gy) < GRADIENT_EPSILON] = 0.0
    return gx, gy


class EdgeDetector:
    """Computes gradient magnitude and direction maps."""

    def __init__(self, logger=None):
        self.logger = logger if logger is not None else structlog.get_logger(__name__)

    def detect_edges(
        self, pixels: Optional[PixelBuffer], threshold: float = DEFAULT_EDGE_THRESHOLD
    ) -> EdgeMap:
        """
        Sobel gradient magnitude gated by a threshold.

        Magnitudes at or below ``threshold`` become 0; those above keep their
        clamped intensity rather than being binarized.

        Args:
            pixels: Source image
            threshold: Gate in [0, 1]

        Returns:
            EdgeMap in storage orientation; an empty map on invalid input
        """
        if is_empty_buffer(pixels):
            self.logger.error("Cannot detect edges in an empty image")
            return EdgeMap.empty(threshold)

        gx, gy = sobel_gradients(pixels.luminance())
        magnitude = np.clip(np.sqrt(gx * gx + gy * gy), 0.0, 1.0)
        gated = np.where(magnitude > threshold, magnitude, 0.0)

        self.logger.debug(
            "Edge detection completed",
            threshold=threshold,
            edge_pixels=int(np.count_nonzero(gated)),
        )
        return EdgeMap(magnitudes=_read_only(gated), threshold=threshold)

    def gradient_direction(self, pixels: Optional[PixelBuffer]) -> np.ndarray:
        """
        Gradient angle per pixel, ``atan2(gy, gx)`` in radians.

        Returns:
            (height, width) grid in storage orientation; an empty grid on
            invalid input
        """
        if is_empty_buffer(pixels):
            self.logger.error("Cannot compute gradient direction of an empty image")
            return np.zeros((0, 0))

        gx, gy = sobel_gradients(pixels.luminance())
        angles = np.arctan2(gy, gx)
        # Report the half-open range (-pi, pi]
        return np.where(angles <= -np.pi, np.pi, angles)


def edge_positions(
    magnitudes, threshold: float = DEFAULT_POSITION_THRESHOLD
) -> FrozenSet[Tuple[int, int]]:
    """
    Sparse (x, y) set of cells whose magnitude exceeds ``threshold``.

    Coordinates stay in storage orientation (row 0 at the top).
    """
    if isinstance(magnitudes, EdgeMap):
        magnitudes = magnitudes.magnitudes
    if magnitudes is None:
        return frozenset()

    grid = np.asarray(magnitudes)
    if grid.size == 0:
        return frozenset()

    ys, xs = np.nonzero(grid > threshold)
    return frozenset(zip(xs.tolist(), ys.tolist()))


def detect_edges(
    pixels: Optional[PixelBuffer], threshold: float = DEFAULT_EDGE_THRESHOLD, logger=None
) -> EdgeMap:
    """Sobel edge map with a throwaway ``EdgeDetector``."""
    return EdgeDetector(logger=logger).detect_edges(pixels, threshold)


def gradient_direction(pixels: Optional[PixelBuffer], logger=None) -> np.ndarray:
    return EdgeDetector(logger=logger).gradient_direction(pixels)
