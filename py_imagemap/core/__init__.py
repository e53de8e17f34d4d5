"""
Core image analysis functionality.
"""

from .pixel_buffer import PixelBuffer, InvalidPixelBufferError
from .color_space import Color, distance_squared, perceptual_distance, luminance, color_similarity
from .kmeans import Cluster, KMeansClusterer, cluster
from .height_bands import HeightBand, HeightBandExtractor, extract_height_bands
from .edge_detection import EdgeMap, EdgeDetector, detect_edges, gradient_direction, edge_positions
from .analyzer import AnalysisResult, ImageAnalyzer, analyze

__all__ = ['PixelBuffer', 'InvalidPixelBufferError',
           'Color', 'distance_squared', 'perceptual_distance', 'luminance', 'color_similarity',
           'Cluster', 'KMeansClusterer', 'cluster',
           'HeightBand', 'HeightBandExtractor', 'extract_height_bands',
           'EdgeMap', 'EdgeDetector', 'detect_edges', 'gradient_direction', 'edge_positions',
           'AnalysisResult', 'ImageAnalyzer', 'analyze']
