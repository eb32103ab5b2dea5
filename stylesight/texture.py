"""
Local binary pattern style texture measure.
"""
import numpy as np

from stylesight.constants import (
    SMOOTH_COMPLEXITY,
    TEXTURE_SAMPLE_STRIDE,
    TEXTURED_COMPLEXITY,
    UNIFORMITY_DIVISOR,
)
from stylesight.models import PixelBuffer, TextureSummary

# Neighbor order defines bit positions 0..7
NEIGHBOR_OFFSETS = tuple(
    (dy, dx) for dy in (-1, 0, 1) for dx in (-1, 0, 1) if (dy, dx) != (0, 0)
)


def pattern_complexity(pattern: int) -> int:
    """Number of 0/1 changes between consecutive bits 0..7 (bit 7 does not wrap to bit 0)."""
    complexity = 0
    prev = pattern & 1
    for i in range(1, 8):
        current = (pattern >> i) & 1
        if current != prev:
            complexity += 1
        prev = current
    return complexity


class TextureAnalyzer:

    def __init__(self, stride: int = TEXTURE_SAMPLE_STRIDE):
        self.stride = stride

    def local_pattern(self, buffer: PixelBuffer, x: int, y: int) -> int:
        """8-bit pattern, bit set when the neighbor is brighter than the center."""
        if not (0 < x < buffer.width - 1 and 0 < y < buffer.height - 1):
            raise ValueError(f"Pattern needs all 8 neighbors, got border pixel ({x}, {y})")
        intensity = buffer.intensity
        center = intensity[y, x]
        pattern = 0
        for bit, (dy, dx) in enumerate(NEIGHBOR_OFFSETS):
            if intensity[y + dy, x + dx] > center:
                pattern |= 1 << bit
        return pattern

    def analyze(self, buffer: PixelBuffer) -> TextureSummary:
        intensity = buffer.intensity
        height, width = intensity.shape

        ys = np.arange(1, height - 1, self.stride)
        xs = np.arange(1, width - 1, self.stride)

        complexity = 0
        if ys.size and xs.size:
            center = intensity[np.ix_(ys, xs)]
            bits = [
                intensity[np.ix_(ys + dy, xs + dx)] > center
                for dy, dx in NEIGHBOR_OFFSETS
            ]
            transitions = sum(
                (bits[i] != bits[i - 1]).astype(np.int64) for i in range(1, 8)
            )
            complexity = int(transitions.sum())

        patterns = []
        if complexity > TEXTURED_COMPLEXITY:
            patterns.append("textured")
        if complexity < SMOOTH_COMPLEXITY:
            patterns.append("smooth")

        return TextureSummary(
            complexity=complexity,
            patterns=tuple(patterns),
            uniformity=100 - min(complexity / UNIFORMITY_DIVISOR, 100),
        )
