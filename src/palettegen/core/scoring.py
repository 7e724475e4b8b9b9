"""Perceptual metrics and desirability scoring for color buckets."""

import logging
import math
from dataclasses import replace
from typing import List

from .quantizer import ColorBucket

logger = logging.getLogger(__name__)


def calculate_saturation(r: int, g: int, b: int) -> float:
    """HSV-style saturation of an RGB color in [0, 1]."""
    max_c = max(r, g, b) / 255
    min_c = min(r, g, b) / 255
    return 0.0 if max_c == 0 else (max_c - min_c) / max_c


def calculate_brightness(r: int, g: int, b: int) -> float:
    """Perceived brightness using Rec. 601 luma weights."""
    return (0.299 * r + 0.587 * g + 0.114 * b) / 255


def calculate_colorfulness(r: int, g: int, b: int) -> float:
    """Distance from neutral gray: channel standard deviation over 255."""
    avg = (r + g + b) / 3
    variance = ((r - avg) ** 2 + (g - avg) ** 2 + (b - avg) ** 2) / 3
    return math.sqrt(variance) / 255


class ScoringEngine:
    """Score buckets by coverage with a boost for vibrant colors.

    Frequency is compressed with a square root so that large uniform
    regions (backgrounds) still rank well without drowning out smaller,
    more saturated areas.
    """

    def __init__(
        self,
        saturation_threshold: float = 0.3,
        saturation_boost: float = 1.3,
        colorfulness_threshold: float = 0.2,
        colorfulness_boost: float = 1.2,
    ):
        """Initialize scoring engine.

        Args:
            saturation_threshold: Saturation above which the boost applies
            saturation_boost: Multiplier for saturated colors
            colorfulness_threshold: Colorfulness above which the boost applies
            colorfulness_boost: Multiplier for colorful colors
        """
        self.saturation_threshold = saturation_threshold
        self.saturation_boost = saturation_boost
        self.colorfulness_threshold = colorfulness_threshold
        self.colorfulness_boost = colorfulness_boost

    def visual_impact(self, saturation: float, colorfulness: float) -> float:
        impact = 1.0
        if saturation > self.saturation_threshold:
            impact *= self.saturation_boost
        if colorfulness > self.colorfulness_threshold:
            impact *= self.colorfulness_boost
        return impact

    def score_bucket(self, bucket: ColorBucket, total_pixels: int) -> ColorBucket:
        """Return a copy of the bucket with all derived fields populated.

        Args:
            bucket: Unscored bucket
            total_pixels: Number of opaque pixels across all buckets

        Returns:
            Scored bucket
        """
        r, g, b = bucket.rgb
        saturation = calculate_saturation(r, g, b)
        colorfulness = calculate_colorfulness(r, g, b)
        frequency_score = bucket.frequency / total_pixels if total_pixels > 0 else 0.0
        visual_impact = self.visual_impact(saturation, colorfulness)
        balanced_frequency_score = math.sqrt(frequency_score) * 2

        return replace(
            bucket,
            saturation=saturation,
            brightness=calculate_brightness(r, g, b),
            colorfulness=colorfulness,
            visual_impact=visual_impact,
            frequency_score=frequency_score,
            final_score=balanced_frequency_score * visual_impact,
        )

    def score(self, buckets: List[ColorBucket]) -> List[ColorBucket]:
        """Score every bucket against the total opaque pixel count.

        Args:
            buckets: Buckets from a ColorQuantizer

        Returns:
            Scored buckets in the same order
        """
        total_pixels = sum(bucket.frequency for bucket in buckets)
        scored = [self.score_bucket(bucket, total_pixels) for bucket in buckets]

        if scored and logger.isEnabledFor(logging.DEBUG):
            best = max(scored, key=lambda bucket: bucket.final_score)
            logger.debug(
                f"Scored {len(scored)} buckets, best {best.hex} ({best.final_score:.4f})"
            )
        return scored
