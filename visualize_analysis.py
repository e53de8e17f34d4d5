#!/usr/bin/env python3
"""
Visualize an image analysis.
Shows the source image next to its color clusters, height bands and edge map.
"""

import sys
from pathlib import Path

import matplotlib.pyplot as plt
import numpy as np
from PIL import Image

sys.path.append(str(Path(__file__).parent))

from py_imagemap.core.analyzer import ImageAnalyzer
from py_imagemap.core.pixel_buffer import PixelBuffer
from py_imagemap.utils.logging import configure_logging


def coordinate_layer(groups, width, height):
    """
    Paint coordinate sets into a storage-oriented label grid.

    Args:
        groups: Sequence of (x, y) sets in bottom-left-origin coordinates
        width: Image width
        height: Image height

    Returns:
        Integer grid where each pixel holds the index of its group
    """
    layer = np.full((height, width), -1, dtype=int)
    for index, pixels in enumerate(groups):
        for x, y in pixels:
            layer[height - 1 - y, x] = index
    return layer


def visualize_analysis(image_path, k=5, n=4, edge_threshold=0.1, adaptive=True, seed="123456"):
    """
    Analyze an image file and plot the results.

    Args:
        image_path: Path to any image Pillow can open
        k: Number of color clusters
        n: Number of height bands
        edge_threshold: Edge magnitude gate
        adaptive: Use histogram-equalized bands
        seed: Clustering seed
    """
    print(f"Loading {image_path}...")
    with Image.open(image_path) as image:
        pixels = PixelBuffer.from_image(image)

    print(f"Analyzing {pixels.width}x{pixels.height} image (k={k}, n={n})...")
    result = ImageAnalyzer().analyze(
        pixels,
        k=k,
        n=n,
        edge_threshold=edge_threshold,
        use_adaptive_heights=adaptive,
        seed=seed,
    )

    print("\nClusters:")
    for cluster in result.clusters:
        print(f"  {cluster.label}: {cluster.coverage * 100:.1f}%")
    print("\nHeight bands:")
    for band in result.height_bands:
        print(f"  {band.label}: {band.coverage * 100:.1f}%")

    print("\nCreating visualization...")
    fig, axes = plt.subplots(2, 2, figsize=(12, 12))

    axes[0, 0].imshow(pixels.rgb)
    axes[0, 0].set_title("Source")

    # Color each pixel with its cluster centroid
    labels = coordinate_layer([c.pixels for c in result.clusters], pixels.width, pixels.height)
    palette = np.array([c.centroid for c in result.clusters] + [(0.0, 0.0, 0.0)])
    axes[0, 1].imshow(palette[labels])
    axes[0, 1].set_title(f"Color clusters (k={len(result.clusters)})")

    bands = coordinate_layer([b.pixels for b in result.height_bands], pixels.width, pixels.height)
    im = axes[1, 0].imshow(bands, cmap="terrain", vmin=0, vmax=max(len(result.height_bands) - 1, 1))
    cbar = plt.colorbar(im, ax=axes[1, 0], ticks=range(len(result.height_bands)))
    cbar.ax.set_yticklabels([b.label for b in result.height_bands])
    axes[1, 0].set_title("Adaptive height bands" if adaptive else "Fixed height bands")

    axes[1, 1].imshow(result.edge_map.magnitudes, cmap="gray", vmin=0, vmax=1)
    axes[1, 1].set_title(f"Edges (threshold {edge_threshold})")

    for ax in axes.flat:
        ax.set_xticks([])
        ax.set_yticks([])

    fig.suptitle(f"Image Analysis - Seed: {seed}", fontsize=16)
    plt.tight_layout()

    output_file = f"analysis_{Path(image_path).stem}_{seed}.png"
    plt.savefig(output_file, dpi=150, bbox_inches="tight")
    print(f"\nVisualization saved to: {output_file}")

    plt.show()


if __name__ == "__main__":
    if len(sys.argv) < 2:
        print("Usage: visualize_analysis.py IMAGE [k] [n]")
        sys.exit(1)

    configure_logging("INFO", "console")
    path = sys.argv[1]
    k = int(sys.argv[2]) if len(sys.argv) > 2 else 5
    n = int(sys.argv[3]) if len(sys.argv) > 3 else 4
    visualize_analysis(path, k=k, n=n)
