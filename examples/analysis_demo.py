#!/usr/bin/env python3
"""
Simple demo script showing image analysis capabilities.
"""

import numpy as np
from py_imagemap.core import ImageAnalyzer, PixelBuffer
from py_imagemap.config import ColorPalette


def synthetic_island(size=64, seed=7):
    """Radial island: blue sea, green lowland, gray mountain, white peak."""
    rng = np.random.default_rng(seed)
    yy, xx = np.mgrid[0:size, 0:size]
    center = (size - 1) / 2
    distance = np.hypot(xx - center, yy - center) / center
    elevation = np.clip(1.0 - distance + rng.normal(0, 0.05, distance.shape), 0, 1)

    image = np.zeros((size, size, 3), dtype=np.uint8)
    image[elevation < 0.3] = (30, 60, 200)
    image[(elevation >= 0.3) & (elevation < 0.6)] = (40, 150, 40)
    image[(elevation >= 0.6) & (elevation < 0.85)] = (128, 128, 128)
    image[elevation >= 0.85] = (250, 250, 250)
    return PixelBuffer.from_array(image)


def main():
    """Demonstrate image analysis."""
    print("Py-ImageMap Analysis Demo")
    print("=" * 40)

    pixels = synthetic_island()
    print(f"\nAnalyzing synthetic island ({pixels.width}x{pixels.height})...")

    analyzer = ImageAnalyzer()
    palette = ColorPalette.default()

    for adaptive in (False, True):
        mode = "ADAPTIVE" if adaptive else "FIXED"
        print(f"\n{mode} height bands:")
        print("-" * 30)

        result = analyzer.analyze(
            pixels, k=4, n=4, edge_threshold=0.1, use_adaptive_heights=adaptive, seed="demo123"
        )

        for band in result.height_bands:
            bar = "#" * int(band.coverage * 40)
            print(
                f"  {band.label:8s} [{band.min_brightness:.3f}, {band.max_brightness:.3f}): "
                f"{bar} ({band.pixel_count})"
            )

    print("\nColor clusters:")
    print("-" * 30)
    for cluster in result.clusters:
        match = palette.find_best_match(cluster.centroid)
        terrain = match.name if match else "unmatched"
        r, g, b = cluster.centroid.to_rgb255()
        print(
            f"  {cluster.label}: rgb({r:3d},{g:3d},{b:3d}) "
            f"{cluster.coverage * 100:5.1f}% -> {terrain}"
        )

    edge_pixels = len(result.edge_map.positions())
    print("\nEdges:")
    print("-" * 30)
    print(f"  Edge pixels (magnitude >= 0.5): {edge_pixels}")
    print(f"  Strongest edge: {result.edge_map.magnitudes.max():.2f}")

    warnings = palette.validate_mappings()
    print(f"\nPalette warnings: {len(warnings)}")
    for warning in warnings:
        print(f"  - {warning}")


if __name__ == "__main__":
    main()
