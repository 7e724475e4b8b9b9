"""PaletteGen: perceptually diverse color palettes from images."""

__version__ = "0.1.0"
__author__ = "PaletteGen Team"

from .core.extractor import ExtractionConfig, Palette, PaletteExtractor, extract_palette
from .image.sampler import DecodeError, PixelBuffer, PixelSampler
from .output.exporter import PaletteExporter

__all__ = [
    "ExtractionConfig",
    "Palette",
    "PaletteExtractor",
    "extract_palette",
    "DecodeError",
    "PixelBuffer",
    "PixelSampler",
    "PaletteExporter",
]
