"""
K-Means color clustering.

This module implements:
- K-Means++ seeding with roulette-wheel selection over squared distances
- Lloyd iteration with squared RGB distance and a movement-based stop test
- Cluster assembly with bottom-left-origin member coordinates, coverage and
  descending-coverage ordering
"""

from dataclasses import dataclass, replace
from typing import FrozenSet, List, Optional, Tuple

import numpy as np
import structlog

from ..utils.random import Seed, make_prng
from .alea_prng import AleaPRNG
from .color_space import Color, distance_squared_array
from .pixel_buffer import PixelBuffer, is_empty_buffer

DEFAULT_MAX_ITERATIONS = 100
DEFAULT_CONVERGENCE_THRESHOLD = 0.001

Coordinate = Tuple[int, int]


@dataclass(frozen=True)
class Cluster:
    """A group of similar pixel colors."""

    centroid: Color
    pixels: FrozenSet[Coordinate]  # (x, y), bottom-left origin
    coverage: float  # fraction of all pixels, 0-1
    label: str

    @property
    def pixel_count(self) -> int:
        return len(self.pixels)

    def with_label(self, label: str) -> "Cluster":
        """Copy of this cluster under a new name (e.g. "Water")."""
        return replace(self, label=label)


def storage_to_reported(
    indices: np.ndarray, width: int, height: int
) -> Tuple[np.ndarray, np.ndarray]:
    """
    Map flat row-major storage indices to bottom-left-origin (x, y).

    Storage row 0 is the top of the image; it is reported as y = height - 1.
    """
    xs = indices % width
    ys = height - 1 - indices // width
    return xs, ys


def coordinate_set(indices: np.ndarray, width: int, height: int) -> FrozenSet[Coordinate]:
    """Frozen set of reported (x, y) tuples for the given storage indices."""
    xs, ys = storage_to_reported(indices, width, height)
    return frozenset(zip(xs.tolist(), ys.tolist()))


class KMeansClusterer:
    """
    Partitions pixel colors into K clusters.

    A clusterer holds configuration only; every ``cluster`` call allocates its
    own centroids, assignments and PRNG, so calls are independent and may run
    concurrently.
    """

    def __init__(
        self,
        max_iterations: int = DEFAULT_MAX_ITERATIONS,
        convergence_threshold: float = DEFAULT_CONVERGENCE_THRESHOLD,
        logger=None,
    ):
        self.max_iterations = max_iterations
        self.convergence_threshold = convergence_threshold
        self.logger = logger if logger is not None else structlog.get_logger(__name__)

    def cluster(
        self,
        pixels: Optional[PixelBuffer],
        k: int,
        max_iterations: Optional[int] = None,
        convergence_threshold: Optional[float] = None,
        seed: Optional[Seed] = None,
    ) -> List[Cluster]:
        """
        Cluster the colors of an image.

        Args:
            pixels: Source image
            k: Number of clusters
            max_iterations: Iteration cap, defaults to the clusterer's setting
            convergence_threshold: Stop once every centroid moves less than
                this, defaults to the clusterer's setting
            seed: Seed for reproducible centroid picks; None is non-deterministic

        Returns:
            Clusters sorted by coverage, largest first; empty on invalid input
        """
        if is_empty_buffer(pixels):
            self.logger.error("Cannot cluster an empty image")
            return []

        if k <= 0:
            self.logger.error("Cluster count must be positive", k=k)
            return []

        if max_iterations is None:
            max_iterations = self.max_iterations
        if convergence_threshold is None:
            convergence_threshold = self.convergence_threshold

        colors = pixels.colors()
        prng = make_prng(seed)

        centroids = self.init_centroids(colors, k, prng)
        assignments = (
            self.assign(colors, centroids)
            if max_iterations <= 0
            else np.zeros(len(colors), dtype=np.int64)
        )
        threshold_sq = convergence_threshold * convergence_threshold

        converged = False
        iteration = 0
        while not converged and iteration < max_iterations:
            assignments = self.assign(colors, centroids)
            new_centroids = self.update_centroids(colors, assignments, centroids)

            moved_sq = np.sum((new_centroids - centroids) ** 2, axis=1)
            converged = bool(np.all(moved_sq <= threshold_sq))
            centroids = new_centroids
            iteration += 1

        clusters = self._build_clusters(
            centroids, assignments, pixels.width, pixels.height
        )

        self.logger.debug(
            "K-Means completed",
            iterations=iteration,
            converged=converged,
            clusters=len(clusters),
        )
        return clusters

    def init_centroids(
        self, colors: np.ndarray, k: int, prng: AleaPRNG
    ) -> np.ndarray:
        """
        K-Means++ seeding.

        The first centroid is a uniformly random pixel. Each following one is
        the first pixel whose running total of squared distances to its
        nearest chosen centroid reaches ``random() * total``.
        """
        centroids = np.empty((k, 3), dtype=np.float64)
        centroids[0] = colors[prng.next_index(len(colors))]

        nearest_sq = None
        for c in range(1, k):
            # Only the newest centroid can lower a pixel's nearest distance
            newest = distance_squared_array(colors, centroids[c - 1 : c])[:, 0]
            nearest_sq = newest if nearest_sq is None else np.minimum(nearest_sq, newest)

            cumulative = np.cumsum(nearest_sq)
            total = cumulative[-1]
            threshold = prng.random() * total
            index = int(np.searchsorted(cumulative, threshold, side="left"))
            centroids[c] = colors[min(index, len(colors) - 1)]

        return centroids

    @staticmethod
    def assign(colors: np.ndarray, centroids: np.ndarray) -> np.ndarray:
        """Index of the nearest centroid per pixel; ties go to the lower index."""
        return np.argmin(distance_squared_array(colors, centroids), axis=1)

    @staticmethod
    def update_centroids(
        colors: np.ndarray, assignments: np.ndarray, centroids: np.ndarray
    ) -> np.ndarray:
        """Mean color per cluster; a cluster left empty keeps its centroid."""
        k = len(centroids)
        counts = np.bincount(assignments, minlength=k)
        new_centroids = centroids.copy()

        for channel in range(3):
            sums = np.bincount(assignments, weights=colors[:, channel], minlength=k)
            filled = counts > 0
            new_centroids[filled, channel] = sums[filled] / counts[filled]

        return new_centroids

    def _build_clusters(
        self,
        centroids: np.ndarray,
        assignments: np.ndarray,
        width: int,
        height: int,
    ) -> List[Cluster]:
        total_pixels = len(assignments)
        order = np.argsort(assignments, kind="stable")
        counts = np.bincount(assignments, minlength=len(centroids))
        bounds = np.concatenate([[0], np.cumsum(counts)])

        clusters = []
        for c, centroid in enumerate(centroids):
            members = order[bounds[c] : bounds[c + 1]]
            clusters.append(
                Cluster(
                    centroid=Color(*(float(v) for v in centroid)),
                    pixels=coordinate_set(members, width, height),
                    coverage=int(counts[c]) / total_pixels,
                    label=f"Cluster_{c + 1}",
                )
            )

        # Stable sort keeps label order among equal coverages
        clusters.sort(key=lambda cluster: cluster.coverage, reverse=True)
        return clusters


def cluster(
    pixels: Optional[PixelBuffer],
    k: int,
    max_iterations: int = DEFAULT_MAX_ITERATIONS,
    convergence_threshold: float = DEFAULT_CONVERGENCE_THRESHOLD,
    seed: Optional[Seed] = None,
    logger=None,
) -> List[Cluster]:
    """Cluster pixel colors with a throwaway ``KMeansClusterer``."""
    return KMeansClusterer(max_iterations, convergence_threshold, logger=logger).cluster(
        pixels, k, seed=seed
    )
