"""Frequency aggregation of pixels into coarse color buckets."""

import logging
import math
from dataclasses import dataclass
from typing import Dict, List, Tuple

import numpy as np

from ..image.sampler import PixelBuffer
from ..utils.color import rgb_to_css, rgb_to_hex

logger = logging.getLogger(__name__)

RGB = Tuple[int, int, int]


@dataclass(frozen=True)
class ColorBucket:
    """A quantized color cell and its scores.

    Score fields stay at 0.0 until the bucket passes through a ScoringEngine.
    """

    r: int
    g: int
    b: int
    frequency: int
    saturation: float = 0.0
    brightness: float = 0.0
    colorfulness: float = 0.0
    visual_impact: float = 0.0
    frequency_score: float = 0.0
    final_score: float = 0.0

    @property
    def rgb(self) -> RGB:
        return (self.r, self.g, self.b)

    @property
    def hex(self) -> str:
        return rgb_to_hex(self.r, self.g, self.b)

    @property
    def rgb_string(self) -> str:
        return rgb_to_css(self.r, self.g, self.b)


class ColorQuantizer:
    """Bucket opaque pixels into a coarse RGB grid and count them."""

    def __init__(self, bucket_size: int = 15, alpha_threshold: int = 128):
        """Initialize color quantizer.

        Args:
            bucket_size: Grid spacing applied to each channel
            alpha_threshold: Pixels with alpha below this are ignored
        """
        if bucket_size <= 0:
            raise ValueError("bucket_size must be positive")
        self.bucket_size = bucket_size
        self.alpha_threshold = alpha_threshold

    def quantize_channel(self, value: int) -> int:
        """Round a channel value to the nearest multiple of the bucket size."""
        return min(255, math.floor(value / self.bucket_size + 0.5) * self.bucket_size)

    def quantize_pixels(self, rgb: np.ndarray) -> np.ndarray:
        """Quantize an ``(N, 3)`` array of channel values, rounding half up."""
        steps = np.floor(rgb.astype(np.float64) / self.bucket_size + 0.5)
        return np.minimum(steps.astype(np.int64) * self.bucket_size, 255)

    def count(self, buffer: PixelBuffer) -> Dict[RGB, int]:
        """Count opaque pixels per quantized color.

        Args:
            buffer: RGBA pixel buffer

        Returns:
            Mapping of quantized RGB triple to pixel count
        """
        flat = buffer.pixels.reshape(-1, 4)
        opaque = flat[flat[:, 3] >= self.alpha_threshold]

        counts: Dict[RGB, int] = {}
        if opaque.shape[0] == 0:
            return counts

        quantized = self.quantize_pixels(opaque[:, :3])
        keys, frequencies = np.unique(quantized, axis=0, return_counts=True)
        for key, frequency in zip(keys, frequencies):
            counts[(int(key[0]), int(key[1]), int(key[2]))] = int(frequency)

        return counts

    def quantize(self, buffer: PixelBuffer) -> List[ColorBucket]:
        """Aggregate a pixel buffer into unscored color buckets.

        Args:
            buffer: RGBA pixel buffer

        Returns:
            Buckets ordered by quantized triple
        """
        counts = self.count(buffer)
        buckets = [
            ColorBucket(r=r, g=g, b=b, frequency=frequency)
            for (r, g, b), frequency in sorted(counts.items())
        ]

        total = sum(bucket.frequency for bucket in buckets)
        logger.debug(
            f"Quantized {total}/{buffer.pixel_count} opaque pixels into {len(buckets)} buckets"
        )
        return buckets
