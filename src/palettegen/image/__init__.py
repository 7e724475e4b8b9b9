"""Image ingestion modules for PaletteGen."""

from .sampler import DecodeError, PixelBuffer, PixelSampler, load_image

__all__ = [
    "DecodeError",
    "PixelBuffer",
    "PixelSampler",
    "load_image",
]
