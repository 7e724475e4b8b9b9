"""Core palette extraction engine for PaletteGen."""

from .extractor import (
    ExtractionConfig,
    Palette,
    PaletteColor,
    PaletteExtractor,
    extract_palette,
)
from .quantizer import ColorBucket, ColorQuantizer
from .scoring import ScoringEngine
from .selector import DiversitySelector, color_distance

__all__ = [
    "ColorBucket",
    "ColorQuantizer",
    "ScoringEngine",
    "DiversitySelector",
    "color_distance",
    "ExtractionConfig",
    "Palette",
    "PaletteColor",
    "PaletteExtractor",
    "extract_palette",
]
