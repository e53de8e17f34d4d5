"""
Image analysis for terrain generation.

Extracts color clusters, brightness height bands and a Sobel edge map from a
raster image. The four entry points are ``cluster``, ``extract_height_bands``,
``detect_edges`` and ``analyze``.
"""

from .core import (
    AnalysisResult,
    Cluster,
    Color,
    EdgeMap,
    HeightBand,
    ImageAnalyzer,
    PixelBuffer,
    analyze,
    cluster,
    detect_edges,
    extract_height_bands,
)

__version__ = "0.1.0"

__all__ = [
    "AnalysisResult",
    "Cluster",
    "Color",
    "EdgeMap",
    "HeightBand",
    "ImageAnalyzer",
    "PixelBuffer",
    "analyze",
    "cluster",
    "detect_edges",
    "extract_height_bands",
]
