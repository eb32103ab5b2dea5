"""
Sobel edge detection and contour tracing.
"""
import logging
import math
from typing import List, Tuple

import numpy as np

from stylesight.constants import (
    CONTOUR_SEED_THRESHOLD,
    EDGE_STRENGTH_THRESHOLD,
    MAX_CONTOUR_LENGTH,
    MIN_CONTOUR_LENGTH,
)
from stylesight.models import Contour, EdgeAnalysis, PixelBuffer

logger = logging.getLogger(__name__)

SOBEL_X = ((-1, 0, 1), (-2, 0, 2), (-1, 0, 1))
SOBEL_Y = ((-1, -2, -1), (0, 0, 0), (1, 2, 1))


class EdgeDetector:
    """Sobel gradient magnitudes over grayscale intensity (r+g+b)/3."""

    def sobel_magnitude(self, buffer: PixelBuffer, x: int, y: int) -> float:
        """Gradient magnitude at one pixel; out-of-bounds neighbors contribute nothing."""
        gx = 0.0
        gy = 0.0
        for ky in range(3):
            for kx in range(3):
                px = x + kx - 1
                py = y + ky - 1
                if 0 <= px < buffer.width and 0 <= py < buffer.height:
                    r, g, b = buffer.rgb(px, py)
                    intensity = (r + g + b) / 3
                    gx += intensity * SOBEL_X[ky][kx]
                    gy += intensity * SOBEL_Y[ky][kx]
        return math.sqrt(gx * gx + gy * gy)

    def gradients(self, buffer: PixelBuffer) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
        """
        Full-image Sobel responses with zero padding.

        Returns:
            tuple: (gx, gy, magnitude), each an (H, W) float64 array
        """
        padded = np.pad(buffer.intensity, 1, mode="constant")
        top, mid, bot = padded[:-2], padded[1:-1], padded[2:]

        gx = (top[:, 2:] + 2 * mid[:, 2:] + bot[:, 2:]) - (top[:, :-2] + 2 * mid[:, :-2] + bot[:, :-2])
        gy = (bot[:, :-2] + 2 * bot[:, 1:-1] + bot[:, 2:]) - (top[:, :-2] + 2 * top[:, 1:-1] + top[:, 2:])
        magnitude = np.sqrt(gx * gx + gy * gy)
        return gx, gy, magnitude

    def edge_map(self, buffer: PixelBuffer, magnitude: np.ndarray = None) -> np.ndarray:
        """Magnitudes for interior pixels, zero on the 1px border."""
        if magnitude is None:
            _, _, magnitude = self.gradients(buffer)
        edge_map = np.zeros((buffer.height, buffer.width), dtype=np.float64)
        if buffer.height > 2 and buffer.width > 2:
            edge_map[1:-1, 1:-1] = magnitude[1:-1, 1:-1]
        return edge_map

    def detect(self, buffer: PixelBuffer, magnitude: np.ndarray = None) -> EdgeAnalysis:
        edge_map = self.edge_map(buffer, magnitude)

        strong = edge_map[edge_map > EDGE_STRENGTH_THRESHOLD]
        strength = float(strong.sum() / strong.size) if strong.size > 0 else 0.0

        contours = ContourTracer().find_contours(edge_map)
        logger.debug(f"Edge strength {strength:.1f}, {len(contours)} contours")

        return EdgeAnalysis(edge_map=edge_map, contours=tuple(contours), strength=strength)


class ContourTracer:
    """Stack-based flood walk over connected strong-edge pixels."""

    def __init__(self, max_length: int = MAX_CONTOUR_LENGTH, min_length: int = MIN_CONTOUR_LENGTH):
        self.max_length = max_length
        self.min_length = min_length

    def trace_contour(self, edge_map, visited: List[List[bool]], start_x: int, start_y: int) -> Contour:
        """
        Collect connected pixels above the edge-strength threshold.

        Stops once the contour reaches ``max_length`` points even if more
        connected pixels remain; those stay unvisited.
        """
        height = len(edge_map)
        width = len(edge_map[0]) if height else 0

        contour = []
        stack = [(start_x, start_y)]

        while stack and len(contour) < self.max_length:
            x, y = stack.pop()

            if x < 0 or x >= width or y < 0 or y >= height or visited[y][x]:
                continue

            if edge_map[y][x] > EDGE_STRENGTH_THRESHOLD:
                visited[y][x] = True
                contour.append((x, y))

                for dy in (-1, 0, 1):
                    for dx in (-1, 0, 1):
                        stack.append((x + dx, y + dy))

        return tuple(contour)

    def find_contours(self, edge_map) -> List[Contour]:
        """Raster-scan the interior and trace from every unvisited seed pixel."""
        rows = edge_map.tolist() if isinstance(edge_map, np.ndarray) else edge_map
        height = len(rows)
        width = len(rows[0]) if height else 0
        visited = [[False] * width for _ in range(height)]

        contours = []
        for y in range(1, height - 1):
            row = rows[y]
            visited_row = visited[y]
            for x in range(1, width - 1):
                if row[x] > CONTOUR_SEED_THRESHOLD and not visited_row[x]:
                    contour = self.trace_contour(rows, visited, x, y)
                    if len(contour) > self.min_length:
                        contours.append(contour)

        return contours
