"""Greedy top-K color selection under a perceptual distance constraint."""

import logging
import math
from typing import List, Sequence, Tuple

from .quantizer import ColorBucket

logger = logging.getLogger(__name__)


def color_distance(c1: ColorBucket, c2: ColorBucket) -> float:
    """Weighted ("redmean") Euclidean RGB distance approximating perceived difference."""
    delta_r = c1.r - c2.r
    delta_g = c1.g - c2.g
    delta_b = c1.b - c2.b

    avg_r = (c1.r + c2.r) / 2
    weight_r = 2 + avg_r / 256
    weight_g = 4
    weight_b = 2 + (255 - avg_r) / 256

    return math.sqrt(
        weight_r * delta_r * delta_r
        + weight_g * delta_g * delta_g
        + weight_b * delta_b * delta_b
    )


def ranking_key(bucket: ColorBucket) -> Tuple[float, int, int, int, int]:
    """Sort key: score descending, then frequency descending, then RGB ascending."""
    return (-bucket.final_score, -bucket.frequency, bucket.r, bucket.g, bucket.b)


class DiversitySelector:
    """Pick high-scoring colors that are not too similar to each other.

    A first pass uses ``initial_distance``. If that leaves the palette short,
    the threshold is lowered by ``distance_step`` and the remaining candidates
    are rescanned, until the palette is full or the threshold hits
    ``min_distance``.
    """

    def __init__(
        self,
        initial_distance: float = 40.0,
        distance_step: float = 5.0,
        min_distance: float = 20.0,
    ):
        """Initialize diversity selector.

        Args:
            initial_distance: Threshold of the first greedy pass
            distance_step: Amount the threshold drops per relaxation round
            min_distance: Threshold below which relaxation stops
        """
        if distance_step <= 0:
            raise ValueError("distance_step must be positive")
        if min_distance > initial_distance:
            raise ValueError("min_distance must not exceed initial_distance")
        self.initial_distance = initial_distance
        self.distance_step = distance_step
        self.min_distance = min_distance

    @staticmethod
    def _is_distinct(
        candidate: ColorBucket, selected: Sequence[ColorBucket], threshold: float
    ) -> bool:
        return all(color_distance(candidate, other) >= threshold for other in selected)

    def _greedy_pass(
        self,
        candidates: Sequence[ColorBucket],
        selected: List[ColorBucket],
        count: int,
        threshold: float,
    ) -> None:
        for candidate in candidates:
            if len(selected) >= count:
                break
            if self._is_distinct(candidate, selected, threshold):
                selected.append(candidate)

    def select(self, buckets: Sequence[ColorBucket], count: int = 5) -> List[ColorBucket]:
        """Select up to ``count`` mutually distinct buckets.

        Args:
            buckets: Scored buckets
            count: Requested palette size

        Returns:
            Selected buckets in selection order
        """
        if count <= 0 or not buckets:
            return []

        candidates = sorted(buckets, key=ranking_key)
        selected: List[ColorBucket] = []

        threshold = self.initial_distance
        self._greedy_pass(candidates, selected, count, threshold)

        while (
            len(selected) < count
            and len(selected) < len(candidates)
            and threshold > self.min_distance
        ):
            threshold = max(threshold - self.distance_step, self.min_distance)
            chosen = {bucket.rgb for bucket in selected}
            remaining = [c for c in candidates if c.rgb not in chosen]
            logger.debug(
                f"Relaxing distance to {threshold:g} with {len(remaining)} candidates left"
            )
            self._greedy_pass(remaining, selected, count, threshold)

        logger.debug(
            f"Selected {len(selected)}/{count} colors from {len(candidates)} candidates"
        )
        return selected
