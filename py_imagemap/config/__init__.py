"""
Configuration for image analysis.
"""

from .config import AnalysisSettings, settings
from .palette import ColorMapping, ColorPalette

__all__ = ["AnalysisSettings", "settings", "ColorMapping", "ColorPalette"]
