"""Color string helpers for PaletteGen."""

from typing import Tuple


def hex_to_rgb(hex_color: str) -> Tuple[int, int, int]:
    """Convert hex color string to RGB tuple."""
    hex_color = hex_color.lstrip("#")
    if len(hex_color) != 6:
        raise ValueError(f"Expected 6 hex digits, got '{hex_color}'")
    rgb_values = tuple(int(hex_color[i : i + 2], 16) for i in (0, 2, 4))
    return (rgb_values[0], rgb_values[1], rgb_values[2])


def rgb_to_hex(r: int, g: int, b: int) -> str:
    """Format an RGB triple as a lowercase ``#rrggbb`` string."""
    return f"#{int(r):02x}{int(g):02x}{int(b):02x}"


def rgb_to_css(r: int, g: int, b: int) -> str:
    """Format an RGB triple as ``rgb(R, G, B)``."""
    return f"rgb({int(r)}, {int(g)}, {int(b)})"


def contrasting_text_color(r: int, g: int, b: int) -> str:
    """Pick black or white text for a swatch of the given color."""
    luma = (0.299 * r + 0.587 * g + 0.114 * b) / 255
    return "#000000" if luma > 0.5 else "#ffffff"
