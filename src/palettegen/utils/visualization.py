"""Visualization utilities for PaletteGen."""

from typing import Optional, Sequence, Union

import matplotlib.patches as patches
import matplotlib.pyplot as plt
import numpy as np
from PIL import Image

from .color import contrasting_text_color, hex_to_rgb


class Visualizer:
    """Render extracted palettes as swatch previews."""

    def __init__(self, style: str = "default", dpi: int = 150):
        """Initialize visualizer.

        Args:
            style: Matplotlib style to use
            dpi: DPI for output images
        """
        plt.style.use(style)
        self.dpi = dpi

    def plot_palette(
        self,
        palette: Sequence,
        image: Optional[Union[Image.Image, np.ndarray]] = None,
        save_path: Optional[str] = None,
        show: bool = False,
    ) -> plt.Figure:
        """Plot a palette, optionally above the image it came from.

        Args:
            palette: Sequence of colors exposing ``hex`` and ``rgb``
            image: Optional source image
            save_path: Optional path to save plot
            show: Whether to display plot

        Returns:
            Figure object
        """
        if image is not None:
            fig, (image_ax, palette_ax) = plt.subplots(
                2, 1, figsize=(8, 8), gridspec_kw={"height_ratios": [3, 1]}
            )
            image_ax.imshow(np.asarray(image))
            image_ax.set_title("Source Image")
            image_ax.axis("off")
        else:
            fig, palette_ax = plt.subplots(1, 1, figsize=(8, 2))

        self._plot_color_swatches(palette_ax, palette)

        plt.tight_layout()

        if save_path:
            plt.savefig(save_path, dpi=self.dpi, bbox_inches="tight")

        if show:
            plt.show()

        return fig

    def _plot_color_swatches(self, ax: plt.Axes, palette: Sequence) -> None:
        """Draw one labelled swatch per palette color in a horizontal row."""
        ax.set_xlim(0, 1)
        ax.set_ylim(0, 1)
        ax.axis("off")

        if len(palette) == 0:
            ax.text(0.5, 0.5, "No colors", ha="center", va="center", fontsize=12)
            ax.set_title("Palette")
            return

        swatch_width = 1.0 / len(palette)

        for i, color in enumerate(palette):
            x_pos = i * swatch_width
            rect = patches.Rectangle(
                (x_pos, 0),
                swatch_width,
                1,
                facecolor=color.hex,
                edgecolor="black",
                linewidth=1,
            )
            ax.add_patch(rect)

            ax.text(
                x_pos + swatch_width / 2,
                0.5,
                color.hex.upper(),
                ha="center",
                va="center",
                fontsize=9,
                color=contrasting_text_color(*hex_to_rgb(color.hex)),
            )

        ax.set_title(f"Palette ({len(palette)} colors)")
