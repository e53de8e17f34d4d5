"""
Height band extraction from pixel brightness.

Brightness (luminance) is read as elevation and split into ordered bands:
- fixed mode: equal-width brightness ranges
- adaptive mode: histogram-equalized ranges holding roughly equal pixel counts

Bands are contiguous, ascending and cover [0, 1]; the top band's upper bound
sits slightly above 1.0 so pure white is included.
"""

from dataclasses import dataclass
from typing import Dict, FrozenSet, List, Optional

import numpy as np
import structlog

from .kmeans import Coordinate, coordinate_set
from .pixel_buffer import PixelBuffer, is_empty_buffer

HISTOGRAM_BINS = 256

# Keeps brightness exactly 1.0 inside the top band's half-open range
TOP_BAND_EPSILON = 0.001

# Absorbs float error so a channel-exact gray level lands in its own bin
BIN_TOLERANCE = 1e-9

BAND_NAMES: Dict[int, List[str]] = {
    1: ["Ground"],
    2: ["Low", "High"],
    3: ["Valley", "Plains", "Hills"],
    4: ["Deep", "Low", "Mid", "High"],
    5: ["Abyss", "Valley", "Plains", "Hills", "Peaks"],
}


@dataclass(frozen=True)
class HeightBand:
    """A contiguous brightness range standing for one elevation tier."""

    min_brightness: float
    max_brightness: float  # exclusive
    label: str
    pixels: FrozenSet[Coordinate]  # (x, y), bottom-left origin
    coverage: float = 0.0

    @property
    def pixel_count(self) -> int:
        return len(self.pixels)

    def contains(self, brightness: float) -> bool:
        return self.min_brightness <= brightness < self.max_brightness


def band_names(n: int) -> List[str]:
    """Human-readable names for n bands; "Level_N" beyond the named sets."""
    if n <= 0:
        return []
    if n in BAND_NAMES:
        return list(BAND_NAMES[n])
    return [f"Level_{i + 1}" for i in range(n)]


def brightness_bins(brightness: np.ndarray, bins: int = HISTOGRAM_BINS) -> np.ndarray:
    """Histogram bin index per brightness value, ``int(b * (bins - 1))`` clamped."""
    scaled = np.floor(brightness * (bins - 1) + BIN_TOLERANCE)
    return np.clip(scaled, 0, bins - 1).astype(np.int64)


class HeightBandExtractor:
    """
    Splits image brightness into N ordered height bands.

    Stateless between calls: histograms and assignment arrays live only for
    the duration of one extraction.
    """

    def __init__(self, logger=None):
        self.logger = logger if logger is not None else structlog.get_logger(__name__)

    def extract(
        self, pixels: Optional[PixelBuffer], n: int, adaptive: bool = False
    ) -> List[HeightBand]:
        """Dispatch to the adaptive or fixed-width strategy."""
        if adaptive:
            return self.extract_adaptive(pixels, n)
        return self.extract_fixed(pixels, n)

    def extract_fixed(self, pixels: Optional[PixelBuffer], n: int) -> List[HeightBand]:
        """
        Equal-width bands over [0, 1].

        Each pixel goes to the first band whose [min, max) holds its
        brightness.

        Args:
            pixels: Source image
            n: Number of bands

        Returns:
            Bands in ascending brightness order; empty on invalid input
        """
        if not self._validate(pixels, n, "fixed"):
            return []

        edges = np.array([i / n for i in range(n + 1)], dtype=np.float64)
        edges[-1] = 1.0 + TOP_BAND_EPSILON

        brightness = pixels.luminance().ravel()
        # Bands share edges, so the first containing band is the count of
        # upper bounds at or below the value
        band_index = np.searchsorted(edges[1:], brightness, side="right")
        band_index = np.minimum(band_index, n - 1)

        bands = self._build_bands(edges, band_index, pixels)
        self._log_bands(bands, "fixed")
        return bands

    def extract_adaptive(
        self, pixels: Optional[PixelBuffer], n: int
    ) -> List[HeightBand]:
        """
        Histogram-equalized bands holding about ``total / n`` pixels each.

        The 256-bin brightness histogram is walked in ascending order and a
        threshold is cut at ``(bin + 1) / 255`` the first time the running
        count reaches each quota boundary, at most one cut per bin.

        Args:
            pixels: Source image
            n: Number of bands

        Returns:
            Bands in ascending brightness order; empty on invalid input
        """
        if not self._validate(pixels, n, "adaptive"):
            return []

        brightness = pixels.luminance().ravel()
        bins = brightness_bins(brightness)
        histogram = np.bincount(bins, minlength=HISTOGRAM_BINS)

        total_pixels = len(brightness)
        pixels_per_band = total_pixels // n
        top = 1.0 + TOP_BAND_EPSILON

        edges = np.full(n + 1, top, dtype=np.float64)
        edges[0] = 0.0
        # Bin at which each internal threshold was cut; HISTOGRAM_BINS if never
        cut_bins = np.full(n - 1, HISTOGRAM_BINS, dtype=np.int64)

        cumulative = 0
        threshold_idx = 1
        for bin_idx in range(HISTOGRAM_BINS):
            if threshold_idx >= n:
                break
            cumulative += int(histogram[bin_idx])
            if cumulative >= pixels_per_band * threshold_idx:
                edges[threshold_idx] = min((bin_idx + 1) / (HISTOGRAM_BINS - 1), top)
                cut_bins[threshold_idx - 1] = bin_idx
                threshold_idx += 1

        # A band owns the bins above the previous cut up to and including its own
        band_index = np.searchsorted(cut_bins, bins, side="left")

        bands = self._build_bands(edges, band_index, pixels)
        self._log_bands(bands, "adaptive")
        return bands

    def _validate(self, pixels: Optional[PixelBuffer], n: int, mode: str) -> bool:
        if is_empty_buffer(pixels):
            self.logger.error("Cannot extract height bands from an empty image", mode=mode)
            return False
        if n <= 0:
            self.logger.error("Height band count must be positive", mode=mode, n=n)
            return False
        return True

    @staticmethod
    def _build_bands(
        edges: np.ndarray, band_index: np.ndarray, pixels: PixelBuffer
    ) -> List[HeightBand]:
        n = len(edges) - 1
        names = band_names(n)
        total_pixels = len(band_index)
        storage_indices = np.arange(total_pixels)

        bands = []
        for i in range(n):
            members = storage_indices[band_index == i]
            bands.append(
                HeightBand(
                    min_brightness=float(edges[i]),
                    max_brightness=float(edges[i + 1]),
                    label=names[i],
                    pixels=coordinate_set(members, pixels.width, pixels.height),
                    coverage=len(members) / total_pixels,
                )
            )
        return bands

    def _log_bands(self, bands: List[HeightBand], mode: str) -> None:
        for band in bands:
            self.logger.debug(
                "Height band extracted",
                mode=mode,
                label=band.label,
                min_brightness=round(band.min_brightness, 3),
                max_brightness=round(band.max_brightness, 3),
                pixels=band.pixel_count,
                coverage=round(band.coverage * 100, 1),
            )


def extract_height_bands(
    pixels: Optional[PixelBuffer], n: int, adaptive: bool = False, logger=None
) -> List[HeightBand]:
    """Extract fixed-width or adaptive height bands."""
    return HeightBandExtractor(logger=logger).extract(pixels, n, adaptive=adaptive)
