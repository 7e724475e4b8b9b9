"""Image loading and downsampling for palette extraction."""

import logging
import math
from dataclasses import dataclass
from pathlib import Path
from typing import Tuple, Union

import numpy as np
from PIL import Image, UnidentifiedImageError

logger = logging.getLogger(__name__)


class DecodeError(ValueError):
    """Raised when an image cannot be read or decoded."""


@dataclass(frozen=True, eq=False)
class PixelBuffer:
    """Decoded RGBA8 pixels with explicit dimensions.

    ``pixels`` has shape ``(height, width, 4)`` and dtype ``uint8``.
    """

    width: int
    height: int
    pixels: np.ndarray

    def __post_init__(self):
        if self.pixels.dtype != np.uint8:
            raise ValueError(f"Pixel data must be uint8, got {self.pixels.dtype}")
        if self.pixels.shape != (self.height, self.width, 4):
            raise ValueError(
                f"Pixel data shape {self.pixels.shape} does not match "
                f"{self.width}x{self.height} RGBA"
            )

    @property
    def size(self) -> Tuple[int, int]:
        return (self.width, self.height)

    @property
    def pixel_count(self) -> int:
        return self.width * self.height

    @classmethod
    def from_bytes(cls, width: int, height: int, data: bytes) -> "PixelBuffer":
        """Wrap a linear RGBA8 byte string."""
        expected = width * height * 4
        if len(data) != expected:
            raise ValueError(
                f"Expected {expected} bytes for {width}x{height} RGBA, got {len(data)}"
            )
        pixels = np.frombuffer(data, dtype=np.uint8).reshape(height, width, 4).copy()
        return cls(width=width, height=height, pixels=pixels)

    @classmethod
    def from_array(cls, array: np.ndarray) -> "PixelBuffer":
        """Wrap an ``(H, W, 3)`` or ``(H, W, 4)`` uint8 array.

        RGB input gets a fully opaque alpha channel.
        """
        if array.ndim != 3 or array.shape[2] not in (3, 4):
            raise ValueError(f"Expected (H, W, 3) or (H, W, 4) array, got {array.shape}")
        if array.dtype != np.uint8:
            raise ValueError(f"Pixel data must be uint8, got {array.dtype}")

        if array.shape[2] == 3:
            alpha = np.full(array.shape[:2] + (1,), 255, dtype=np.uint8)
            array = np.concatenate([array, alpha], axis=2)

        height, width = array.shape[:2]
        return cls(width=width, height=height, pixels=np.ascontiguousarray(array))

    @classmethod
    def from_image(cls, image: Image.Image) -> "PixelBuffer":
        """Convert a PIL image to RGBA pixels."""
        rgba = image if image.mode == "RGBA" else image.convert("RGBA")
        return cls.from_array(np.asarray(rgba, dtype=np.uint8))

    def to_image(self) -> Image.Image:
        return Image.fromarray(self.pixels)


ImageSource = Union[PixelBuffer, Image.Image, np.ndarray, str, Path]


def load_image(image_path: Union[str, Path]) -> Image.Image:
    """Load an image file and convert it to RGBA.

    Args:
        image_path: Path to image file

    Returns:
        Decoded RGBA image

    Raises:
        DecodeError: If the file is missing or cannot be decoded
    """
    path = Path(image_path)
    if not path.is_file():
        raise DecodeError(f"Image file not found: {path}")

    try:
        with Image.open(path) as image:
            image.load()
            return image.convert("RGBA")
    except (UnidentifiedImageError, Image.DecompressionBombError, OSError) as e:
        raise DecodeError(f"Could not decode image {path}: {e}") from e


def to_pixel_buffer(source: ImageSource) -> PixelBuffer:
    """Coerce any supported image source into a PixelBuffer."""
    if isinstance(source, PixelBuffer):
        return source
    if isinstance(source, Image.Image):
        return PixelBuffer.from_image(source)
    if isinstance(source, np.ndarray):
        return PixelBuffer.from_array(source)
    if isinstance(source, (str, Path)):
        return PixelBuffer.from_image(load_image(source))
    raise TypeError(f"Unsupported image source: {type(source).__name__}")


class PixelSampler:
    """Downsample images to a bounded working resolution."""

    def __init__(self, max_dimension: int = 300, allow_upscale: bool = False):
        """Initialize pixel sampler.

        Args:
            max_dimension: Largest allowed width or height of the working buffer
            allow_upscale: Whether images smaller than the bound are enlarged
        """
        if max_dimension <= 0:
            raise ValueError("max_dimension must be positive")
        self.max_dimension = max_dimension
        self.allow_upscale = allow_upscale

    def target_size(self, width: int, height: int) -> Tuple[int, int]:
        """Calculate the working size for a source of the given size."""
        if width <= 0 or height <= 0:
            return (0, 0)

        scale = min(self.max_dimension / width, self.max_dimension / height)
        if not self.allow_upscale:
            scale = min(scale, 1.0)

        new_w = max(1, math.floor(width * scale))
        new_h = max(1, math.floor(height * scale))
        return (new_w, new_h)

    def sample(self, source: ImageSource) -> PixelBuffer:
        """Produce the working RGBA buffer for an image.

        Args:
            source: Image, array, PixelBuffer or path

        Returns:
            PixelBuffer no larger than ``max_dimension`` on either side
        """
        buffer = to_pixel_buffer(source)
        new_w, new_h = self.target_size(buffer.width, buffer.height)

        if (new_w, new_h) == buffer.size or buffer.pixel_count == 0:
            return buffer

        logger.debug(f"Resampling {buffer.width}x{buffer.height} -> {new_w}x{new_h}")
        resized = buffer.to_image().resize((new_w, new_h), Image.BILINEAR)
        return PixelBuffer.from_image(resized)
