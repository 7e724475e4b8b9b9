"""Output generation modules for PaletteGen."""

from .exporter import SUPPORTED_FORMATS, PaletteExporter

__all__ = [
    "PaletteExporter",
    "SUPPORTED_FORMATS",
]
