"""
Strided sampling over a pixel buffer.
"""
import math
from typing import Iterator, Tuple

from stylesight.models import PixelBuffer, Region


class PixelSampler:
    """Walks a region of a buffer at a fixed stride, skipping out-of-bounds pixels."""

    def __init__(self, buffer: PixelBuffer):
        self.buffer = buffer

    @staticmethod
    def _check_stride(stride: int):
        if stride < 1:
            raise ValueError(f"Stride must be at least 1, got {stride}")

    def _bounds(self, region: Region) -> Tuple[int, int, int, int]:
        x_start = math.floor(region.x)
        y_start = math.floor(region.y)
        x_end = math.floor(region.x + region.width)
        y_end = math.floor(region.y + region.height)
        return x_start, y_start, x_end, y_end

    def coordinates(self, region: Region, stride: int = 1) -> Iterator[Tuple[int, int]]:
        """Yield (x, y) pairs inside both the region and the buffer."""
        self._check_stride(stride)
        x_start, y_start, x_end, y_end = self._bounds(region)
        width, height = self.buffer.width, self.buffer.height

        for y in range(y_start, y_end, stride):
            for x in range(x_start, x_end, stride):
                if 0 <= x < width and 0 <= y < height:
                    yield x, y

    def window(self, region: Region, stride: int = 1) -> Tuple[range, range]:
        """
        Row and column ranges visited by coordinates(), clipped to the buffer.

        The ranges keep the region's stride phase, so indexing an (H, W) array
        with them selects exactly the pixels coordinates() would yield.
        """
        self._check_stride(stride)
        x_start, y_start, x_end, y_end = self._bounds(region)

        rows = _clip_range(y_start, y_end, stride, self.buffer.height)
        cols = _clip_range(x_start, x_end, stride, self.buffer.width)
        return rows, cols


def _clip_range(start: int, end: int, stride: int, limit: int) -> range:
    # Advance past negative coordinates without changing the stride phase
    if start < 0:
        start -= (start // stride) * stride
    end = min(end, limit)
    if start >= end:
        return range(0)
    return range(start, end, stride)
