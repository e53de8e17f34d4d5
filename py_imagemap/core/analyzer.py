"""
Complete image analysis.

Runs color clustering, height band extraction and edge detection over one
image and bundles the outcome, together with the source dimensions and a
completion timestamp, into an immutable AnalysisResult.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, Optional, Tuple

import structlog

from ..utils.random import Seed
from .edge_detection import DEFAULT_EDGE_THRESHOLD, EdgeDetector, EdgeMap
from .height_bands import HeightBand, HeightBandExtractor
from .kmeans import (
    DEFAULT_CONVERGENCE_THRESHOLD,
    DEFAULT_MAX_ITERATIONS,
    Cluster,
    KMeansClusterer,
)
from .pixel_buffer import PixelBuffer, is_empty_buffer

DEFAULT_CLUSTER_COUNT = 5
DEFAULT_BAND_COUNT = 4


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True, eq=False)
class AnalysisResult:
    """Clusters, height bands and edge map of one image."""

    clusters: Tuple[Cluster, ...] = ()
    height_bands: Tuple[HeightBand, ...] = ()
    edge_map: Optional[EdgeMap] = None
    width: int = 0
    height: int = 0
    analysis_time: datetime = field(default_factory=_utcnow)

    @property
    def is_empty(self) -> bool:
        return not self.clusters and not self.height_bands and self.edge_map is None

    def summary(self) -> Dict[str, Any]:
        """Plain-data overview for logging and inspection."""
        return {
            "width": self.width,
            "height": self.height,
            "analysis_time": self.analysis_time.isoformat(),
            "clusters": [
                {
                    "label": c.label,
                    "centroid": c.centroid.to_rgb255(),
                    "coverage": round(c.coverage, 4),
                }
                for c in self.clusters
            ],
            "height_bands": [
                {
                    "label": b.label,
                    "min_brightness": round(b.min_brightness, 4),
                    "max_brightness": round(b.max_brightness, 4),
                    "coverage": round(b.coverage, 4),
                }
                for b in self.height_bands
            ],
            "edge_pixels": (
                len(self.edge_map.positions(0.0)) if self.edge_map is not None else 0
            ),
        }


class ImageAnalyzer:
    """
    Runs the full analysis pipeline.

    The analyzer only stores configuration. Each ``analyze`` call builds its
    own working state, so calls are reentrant and never observe one another.
    """

    def __init__(
        self,
        max_iterations: int = DEFAULT_MAX_ITERATIONS,
        convergence_threshold: float = DEFAULT_CONVERGENCE_THRESHOLD,
        logger=None,
    ):
        """
        Initialize the analyzer.

        Args:
            max_iterations: K-Means iteration cap
            convergence_threshold: K-Means centroid movement stop threshold
            logger: Optional structlog-style logger; every component logs
                through it
        """
        self.logger = logger if logger is not None else structlog.get_logger(__name__)
        self.clusterer = KMeansClusterer(
            max_iterations, convergence_threshold, logger=self.logger
        )
        self.band_extractor = HeightBandExtractor(logger=self.logger)
        self.edge_detector = EdgeDetector(logger=self.logger)
        self.settings = None

    @classmethod
    def from_settings(cls, settings, logger=None) -> "ImageAnalyzer":
        """Build an analyzer configured from AnalysisSettings."""
        analyzer = cls(
            max_iterations=settings.kmeans_max_iterations,
            convergence_threshold=settings.kmeans_convergence_threshold,
            logger=logger,
        )
        analyzer.settings = settings
        return analyzer

    def analyze(
        self,
        pixels: Optional[PixelBuffer],
        k: int = DEFAULT_CLUSTER_COUNT,
        n: int = DEFAULT_BAND_COUNT,
        edge_threshold: float = DEFAULT_EDGE_THRESHOLD,
        use_adaptive_heights: bool = True,
        seed: Optional[Seed] = None,
    ) -> AnalysisResult:
        """
        Analyze one image.

        Args:
            pixels: Source image
            k: Number of color clusters
            n: Number of height bands
            edge_threshold: Edge magnitude gate
            use_adaptive_heights: Histogram-equalized bands instead of
                equal-width ones
            seed: Clustering seed; None is non-deterministic

        Returns:
            AnalysisResult; all sub-results are empty when the image is
        """
        if is_empty_buffer(pixels):
            self.logger.error("Cannot analyze an empty image")
            return AnalysisResult()

        self.logger.debug(
            "Starting analysis",
            width=pixels.width,
            height=pixels.height,
            k=k,
            n=n,
            edge_threshold=edge_threshold,
            adaptive=use_adaptive_heights,
        )

        clusters = self.clusterer.cluster(pixels, k, seed=seed)
        height_bands = self.band_extractor.extract(
            pixels, n, adaptive=use_adaptive_heights
        )
        edge_map = self.edge_detector.detect_edges(pixels, edge_threshold)

        result = AnalysisResult(
            clusters=tuple(clusters),
            height_bands=tuple(height_bands),
            edge_map=edge_map,
            width=pixels.width,
            height=pixels.height,
            analysis_time=_utcnow(),
        )

        self.logger.debug(
            "Analysis complete",
            clusters=len(result.clusters),
            height_bands=len(result.height_bands),
        )
        return result

    def analyze_with_settings(
        self, pixels: Optional[PixelBuffer], settings=None
    ) -> AnalysisResult:
        """Analyze with parameters taken from AnalysisSettings."""
        if settings is None:
            settings = self.settings
        if settings is None:
            from ..config.config import settings as default_settings

            settings = default_settings

        return self.analyze(
            pixels,
            k=settings.color_cluster_count,
            n=settings.height_level_count,
            edge_threshold=settings.edge_threshold,
            use_adaptive_heights=settings.use_adaptive_heights,
            seed=settings.effective_seed,
        )


def analyze(
    pixels: Optional[PixelBuffer],
    k: int = DEFAULT_CLUSTER_COUNT,
    n: int = DEFAULT_BAND_COUNT,
    edge_threshold: float = DEFAULT_EDGE_THRESHOLD,
    use_adaptive_heights: bool = True,
    seed: Optional[Seed] = None,
    logger=None,
) -> AnalysisResult:
    """Run the complete pipeline with a default-configured analyzer."""
    return ImageAnalyzer(logger=logger).analyze(
        pixels,
        k=k,
        n=n,
        edge_threshold=edge_threshold,
        use_adaptive_heights=use_adaptive_heights,
        seed=seed,
    )
