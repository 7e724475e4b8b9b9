"""Palette extraction pipeline tying sampling, quantization, scoring and selection together."""

import logging
from dataclasses import dataclass, field
from typing import Iterator, List, Optional, Tuple

from ..image.sampler import ImageSource, PixelSampler, to_pixel_buffer
from ..utils.logging import PerformanceLogger
from .quantizer import ColorBucket, ColorQuantizer
from .scoring import ScoringEngine
from .selector import DiversitySelector

logger = logging.getLogger(__name__)


@dataclass
class ExtractionConfig:
    """Configuration for palette extraction."""

    palette_size: int = 5
    max_dimension: int = 300
    allow_upscale: bool = False
    alpha_threshold: int = 128
    bucket_size: int = 15
    saturation_threshold: float = 0.3
    saturation_boost: float = 1.3
    colorfulness_threshold: float = 0.2
    colorfulness_boost: float = 1.2
    initial_distance: float = 40.0
    distance_step: float = 5.0
    min_distance: float = 20.0


@dataclass(frozen=True)
class PaletteColor:
    """One extracted color as exposed to consumers."""

    hex: str
    rgb: str
    bucket: ColorBucket = field(compare=False, repr=False)

    @classmethod
    def from_bucket(cls, bucket: ColorBucket) -> "PaletteColor":
        return cls(hex=bucket.hex, rgb=bucket.rgb_string, bucket=bucket)

    def to_dict(self) -> dict:
        return {"hex": self.hex, "rgb": self.rgb}


@dataclass(frozen=True)
class Palette:
    """Ordered result of a single extraction."""

    colors: Tuple[PaletteColor, ...]
    source_size: Tuple[int, int] = (0, 0)
    sample_size: Tuple[int, int] = (0, 0)
    opaque_pixels: int = 0
    bucket_count: int = 0

    def __len__(self) -> int:
        return len(self.colors)

    def __iter__(self) -> Iterator[PaletteColor]:
        return iter(self.colors)

    def __getitem__(self, index: int) -> PaletteColor:
        return self.colors[index]

    @property
    def is_empty(self) -> bool:
        return not self.colors

    def hex_codes(self) -> List[str]:
        return [color.hex for color in self.colors]

    def to_list(self) -> List[dict]:
        return [color.to_dict() for color in self.colors]


class PaletteExtractor:
    """Extract a ranked, perceptually diverse palette from an image.

    Each call is independent; the extractor holds only its configuration and
    the stateless pipeline components built from it.
    """

    def __init__(self, config: Optional[ExtractionConfig] = None):
        """Initialize palette extractor.

        Args:
            config: Extraction settings, defaults used when omitted
        """
        self.config = config or ExtractionConfig()

        self.sampler = PixelSampler(
            max_dimension=self.config.max_dimension,
            allow_upscale=self.config.allow_upscale,
        )
        self.quantizer = ColorQuantizer(
            bucket_size=self.config.bucket_size,
            alpha_threshold=self.config.alpha_threshold,
        )
        self.scoring = ScoringEngine(
            saturation_threshold=self.config.saturation_threshold,
            saturation_boost=self.config.saturation_boost,
            colorfulness_threshold=self.config.colorfulness_threshold,
            colorfulness_boost=self.config.colorfulness_boost,
        )
        self.selector = DiversitySelector(
            initial_distance=self.config.initial_distance,
            distance_step=self.config.distance_step,
            min_distance=self.config.min_distance,
        )
        self.perf = PerformanceLogger()

    def extract(self, image: ImageSource, count: Optional[int] = None) -> Palette:
        """Extract a palette.

        Args:
            image: PixelBuffer, PIL image, uint8 array or image path
            count: Palette size, ``config.palette_size`` when omitted

        Returns:
            Palette of at most ``count`` colors; empty when the image has no
            opaque pixels or ``count`` is not positive

        Raises:
            DecodeError: If ``image`` is a path that cannot be decoded
        """
        count = self.config.palette_size if count is None else count

        self.perf.start_timer("sample")
        source = to_pixel_buffer(image)
        buffer = self.sampler.sample(source)
        self.perf.end_timer("sample")

        self.perf.start_timer("quantize")
        buckets = self.quantizer.quantize(buffer)
        self.perf.end_timer("quantize")

        self.perf.start_timer("score")
        scored = self.scoring.score(buckets)
        self.perf.end_timer("score")

        self.perf.start_timer("select")
        selected = self.selector.select(scored, count)
        self.perf.end_timer("select")

        palette = Palette(
            colors=tuple(PaletteColor.from_bucket(bucket) for bucket in selected),
            source_size=source.size,
            sample_size=buffer.size,
            opaque_pixels=sum(bucket.frequency for bucket in buckets),
            bucket_count=len(buckets),
        )

        if palette.is_empty:
            logger.info("No colors extracted (no opaque pixels or empty request)")
        else:
            logger.info(f"Extracted {len(palette)} colors: {', '.join(palette.hex_codes())}")
        return palette


def extract_palette(image: ImageSource, count: int = 5) -> List[PaletteColor]:
    """Extract ``count`` colors with the default settings."""
    return list(PaletteExtractor().extract(image, count))
