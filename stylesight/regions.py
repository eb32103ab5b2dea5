"""
Per-region statistics over overlapping slices of the image.
"""
import logging
from typing import Dict, Optional

import numpy as np

from stylesight.colors import ColorClassifier
from stylesight.constants import (
    CONTOUR_THRESHOLD,
    DEFAULT_BRIGHTNESS,
    EDGE_THRESHOLD,
    MAX_DOMINANT_COLORS,
    MAX_TEXTURE_COMPLEXITY,
    REGION_SAMPLE_STRIDE,
)
from stylesight.edges import EdgeDetector
from stylesight.models import PixelBuffer, Region, RegionSpec, RegionStats
from stylesight.sampler import PixelSampler

logger = logging.getLogger(__name__)

REGION_SPECS = (
    RegionSpec("top", 0, 0, 1, 0.35),
    RegionSpec("upper_middle", 0, 0.25, 1, 0.25),
    RegionSpec("middle", 0, 0.4, 1, 0.3),
    RegionSpec("lower_middle", 0, 0.6, 1, 0.25),
    RegionSpec("bottom", 0, 0.7, 1, 0.3),
    RegionSpec("left_side", 0, 0, 0.2, 1),
    RegionSpec("right_side", 0.8, 0, 0.2, 1),
    RegionSpec("center", 0.3, 0, 0.4, 1),
)


def texture_complexity(color_variance: float, edge_density: float) -> float:
    return min((color_variance / 1000 + edge_density * 10) * 100, MAX_TEXTURE_COMPLEXITY)


class RegionAnalyzer:
    """Brightness, edge, color and texture statistics for each declared region."""

    def __init__(
        self,
        classifier: Optional[ColorClassifier] = None,
        detector: Optional[EdgeDetector] = None,
        stride: int = REGION_SAMPLE_STRIDE,
    ):
        self.classifier = classifier or ColorClassifier()
        self.detector = detector or EdgeDetector()
        self.stride = stride

    def analyze(
        self,
        buffer: PixelBuffer,
        magnitude: Optional[np.ndarray] = None,
        color_index: Optional[np.ndarray] = None,
    ) -> Dict[str, RegionStats]:
        """
        Compute RegionStats for every region in REGION_SPECS.

        Args:
            buffer: Pixel buffer to analyze
            magnitude: Precomputed zero-padded Sobel magnitudes, if available
            color_index: Precomputed palette index per pixel, if available

        Returns:
            dict: region name -> RegionStats, in declaration order
        """
        if magnitude is None:
            _, _, magnitude = self.detector.gradients(buffer)
        if color_index is None:
            color_index = self.classifier.classify_array(buffer.pixels[..., :3])

        regions = {}
        for spec in REGION_SPECS:
            region = spec.resolve(buffer.width, buffer.height)
            regions[spec.name] = self.analyze_region(buffer, region, magnitude, color_index)
        return regions

    def analyze_region(
        self,
        buffer: PixelBuffer,
        region: Region,
        magnitude: np.ndarray,
        color_index: np.ndarray,
    ) -> RegionStats:
        rows, cols = PixelSampler(buffer).window(region, self.stride)
        row_slice = slice(rows.start, rows.stop, rows.step)
        col_slice = slice(cols.start, cols.stop, cols.step)

        brightness = buffer.intensity[row_slice, col_slice]
        pixel_count = brightness.size

        if pixel_count == 0:
            return RegionStats(
                name=region.name,
                x=region.x,
                y=region.y,
                width=region.width,
                height=region.height,
                average_brightness=DEFAULT_BRIGHTNESS,
                edge_density=0.0,
                contours=0.0,
                color_variance=0.0,
                dominant_colors=(),
                texture_complexity=0.0,
            )

        # Sobel is only evaluated away from the right and bottom border
        row_ok = np.fromiter(rows, dtype=np.int64) < buffer.height - 2
        col_ok = np.fromiter(cols, dtype=np.int64) < buffer.width - 2
        eligible = row_ok[:, None] & col_ok[None, :]

        strength = magnitude[row_slice, col_slice]
        edges = eligible & (strength > EDGE_THRESHOLD)
        edge_count = int(edges.sum())
        contour_count = int((edges & (strength > CONTOUR_THRESHOLD)).sum())

        average = float(brightness.sum() / pixel_count)
        variance = float(((brightness - average) ** 2).sum() / pixel_count)

        labels = color_index[row_slice, col_slice].ravel()
        unique, first_seen, counts = np.unique(labels, return_index=True, return_counts=True)
        histogram = [
            (self.classifier.name_of(int(unique[i])), int(counts[i]) / pixel_count * 100)
            for i in np.argsort(first_seen, kind="stable")
        ]
        dominant = sorted(histogram, key=lambda item: item[1], reverse=True)[:MAX_DOMINANT_COLORS]

        edge_density = edge_count / pixel_count

        return RegionStats(
            name=region.name,
            x=region.x,
            y=region.y,
            width=region.width,
            height=region.height,
            average_brightness=average,
            edge_density=edge_density,
            contours=contour_count / pixel_count,
            color_variance=variance,
            dominant_colors=tuple(dominant),
            texture_complexity=texture_complexity(variance, edge_density),
        )
