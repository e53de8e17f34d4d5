"""Small raster helpers used alongside the main analysis."""

from typing import Optional

import numpy as np
import structlog
from PIL import Image

from .color_space import BLACK, Color, luminance_array
from .height_bands import brightness_bins
from .kmeans import KMeansClusterer
from .pixel_buffer import PixelBuffer, is_empty_buffer

logger = structlog.get_logger(__name__)

DOMINANT_COLOR_ITERATIONS = 50


def height_at_position(pixels: Optional[PixelBuffer], x: int, y: int) -> float:
    """
    Brightness at a bottom-left-origin coordinate.

    Uses the same convention as cluster and height band coordinate sets.
    Returns 0.0 outside the image.
    """
    if is_empty_buffer(pixels):
        return 0.0
    if x < 0 or x >= pixels.width or y < 0 or y >= pixels.height:
        return 0.0

    storage_y = pixels.height - 1 - y
    return float(luminance_array(pixels.rgb[storage_y, x]))


def to_grayscale(pixels: Optional[PixelBuffer]) -> Optional[PixelBuffer]:
    """New buffer holding 8-bit quantized luminance in all three channels."""
    if is_empty_buffer(pixels):
        return None

    gray = np.floor(pixels.luminance() * 255.0 + 1e-9).astype(np.uint8)
    return PixelBuffer.from_array(gray)


def brightness_histogram(pixels: Optional[PixelBuffer], bins: int = 256) -> np.ndarray:
    """Luminance histogram; bin is ``int(l * (bins - 1))`` clamped to range."""
    if bins <= 0:
        return np.zeros(0, dtype=np.int64)
    if is_empty_buffer(pixels):
        return np.zeros(bins, dtype=np.int64)

    indices = brightness_bins(pixels.luminance().ravel(), bins)
    return np.bincount(indices, minlength=bins)


def dominant_color(pixels: Optional[PixelBuffer], seed=None, logger=None) -> Color:
    """Centroid of a single-cluster run; black for an empty image."""
    if is_empty_buffer(pixels):
        return BLACK

    clusters = KMeansClusterer(
        max_iterations=DOMINANT_COLOR_ITERATIONS, logger=logger
    ).cluster(pixels, 1, seed=seed)
    if clusters:
        return clusters[0].centroid
    return BLACK


def resize(pixels: Optional[PixelBuffer], width: int, height: int) -> Optional[PixelBuffer]:
    """Bilinear resample to the target size."""
    if is_empty_buffer(pixels):
        return None
    if width <= 0 or height <= 0:
        logger.error("Resize target must be positive", width=width, height=height)
        return None

    image = Image.fromarray(np.round(pixels.rgb * 255.0).astype(np.uint8))
    return PixelBuffer.from_image(
        image.resize((width, height), Image.Resampling.BILINEAR)
    )
