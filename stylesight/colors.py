"""
Named-color classification in RGB space.
"""
import logging
import math
from dataclasses import dataclass
from typing import List, Sequence, Tuple

import numpy as np

from stylesight.constants import (
    BACKGROUND_BRIGHTNESS_HIGH,
    BACKGROUND_BRIGHTNESS_LOW,
    COLOR_SAMPLE_STEP,
    MIN_COLOR_PERCENTAGE,
)
from stylesight.models import ColorSample, PixelBuffer

logger = logging.getLogger(__name__)

NEUTRAL = "neutral"


@dataclass(frozen=True)
class ReferenceColor:
    name: str
    rgb: Tuple[int, int, int]
    threshold: float


# Declaration order is the tie-break for equidistant colors
PALETTE: Tuple[ReferenceColor, ...] = (
    ReferenceColor("black", (0, 0, 0), 60),
    ReferenceColor("white", (255, 255, 255), 60),
    ReferenceColor("red", (255, 0, 0), 80),
    ReferenceColor("burgundy", (128, 0, 32), 60),
    ReferenceColor("pink", (255, 192, 203), 70),
    ReferenceColor("blue", (0, 0, 255), 80),
    ReferenceColor("navy", (0, 0, 128), 60),
    ReferenceColor("light blue", (173, 216, 230), 70),
    ReferenceColor("green", (0, 255, 0), 80),
    ReferenceColor("forest green", (34, 139, 34), 60),
    ReferenceColor("yellow", (255, 255, 0), 80),
    ReferenceColor("orange", (255, 165, 0), 70),
    ReferenceColor("purple", (128, 0, 128), 70),
    ReferenceColor("brown", (139, 69, 19), 60),
    ReferenceColor("tan", (210, 180, 140), 60),
    ReferenceColor("gray", (128, 128, 128), 50),
    ReferenceColor("beige", (245, 245, 220), 60),
    ReferenceColor("cream", (255, 253, 208), 60),
    ReferenceColor("khaki", (240, 230, 140), 60),
)


class ColorClassifier:
    """Maps RGB triples to the closest palette color within that color's threshold."""

    def __init__(self, palette: Sequence[ReferenceColor] = PALETTE):
        self.palette = tuple(palette)
        self.names: Tuple[str, ...] = tuple(c.name for c in self.palette) + (NEUTRAL,)
        self.neutral_index = len(self.palette)

        self._references = np.array([c.rgb for c in self.palette], dtype=np.int64)
        self._thresholds_sq = np.array([c.threshold ** 2 for c in self.palette], dtype=np.float64)

    def classify(self, r: int, g: int, b: int) -> str:
        closest = NEUTRAL
        min_distance = math.inf

        for color in self.palette:
            distance = math.sqrt(
                (r - color.rgb[0]) ** 2 +
                (g - color.rgb[1]) ** 2 +
                (b - color.rgb[2]) ** 2
            )
            if distance < color.threshold and distance < min_distance:
                min_distance = distance
                closest = color.name

        return closest

    def classify_array(self, rgb: np.ndarray) -> np.ndarray:
        """
        Vectorized classify() over an (..., 3) array.

        Returns:
            np.ndarray: palette indices with the same leading shape; neutral
            pixels get ``neutral_index``.
        """
        rgb = np.asarray(rgb)
        lead_shape = rgb.shape[:-1]
        flat = rgb.reshape(-1, 3).astype(np.int64)
        result = np.empty(flat.shape[0], dtype=np.int64)

        # Chunked to keep the (N, palette) distance matrix small
        chunk = 65536
        for start in range(0, flat.shape[0], chunk):
            part = flat[start:start + chunk]
            diff = part[:, None, :] - self._references[None, :, :]
            dist_sq = (diff * diff).sum(axis=2).astype(np.float64)
            dist_sq[dist_sq >= self._thresholds_sq[None, :]] = np.inf
            best = np.argmin(dist_sq, axis=1)
            no_match = np.isinf(dist_sq[np.arange(part.shape[0]), best])
            best[no_match] = self.neutral_index
            result[start:start + chunk] = best

        return result.reshape(lead_shape)

    def name_of(self, index: int) -> str:
        return self.names[index]

    def analyze_colors(self, buffer: PixelBuffer) -> List[ColorSample]:
        """
        Whole-image color breakdown over every 4th pixel.

        Pixels that are very dark or very light are treated as background or
        lighting and skipped. Percentages are relative to the number of
        sampled positions.
        """
        total_pixels = buffer.size
        if total_pixels == 0:
            return []

        samples = buffer.pixels.reshape(-1, 4)[::COLOR_SAMPLE_STEP, :3].astype(np.int64)
        brightness = samples.sum(axis=1) / 3
        keep = (brightness >= BACKGROUND_BRIGHTNESS_LOW) & (brightness <= BACKGROUND_BRIGHTNESS_HIGH)
        samples = samples[keep]
        if samples.shape[0] == 0:
            return []

        labels = self.classify_array(samples)
        unique, first_seen, counts = np.unique(labels, return_index=True, return_counts=True)
        order = np.argsort(first_seen, kind="stable")

        denominator = total_pixels / COLOR_SAMPLE_STEP
        result = []
        for position in order:
            label = unique[position]
            count = int(counts[position])
            members = samples[labels == label]
            sums = members.sum(axis=0)
            rgb = tuple(_round_half_up(s / count) for s in sums)
            result.append(ColorSample(
                name=self.names[label],
                rgb=rgb,
                percentage=(count / denominator) * 100,
            ))

        result = [c for c in result if c.percentage > MIN_COLOR_PERCENTAGE]
        return sorted(result, key=lambda c: c.percentage, reverse=True)


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))
