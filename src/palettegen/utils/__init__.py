"""Utility modules for PaletteGen."""

from .color import hex_to_rgb, rgb_to_css, rgb_to_hex
from .config import Config, ConfigManager
from .logging import setup_logging
from .visualization import Visualizer

__all__ = [
    "ConfigManager",
    "Config",
    "setup_logging",
    "Visualizer",
    "hex_to_rgb",
    "rgb_to_hex",
    "rgb_to_css",
]
