"""Synthetic test images."""

from __future__ import annotations

from io import BytesIO

import numpy as np
from PIL import Image

from stylesight.models import PixelBuffer


def solid_array(width: int, height: int, rgb: tuple[int, int, int]) -> np.ndarray:
    array = np.zeros((height, width, 3), dtype=np.uint8)
    array[...] = rgb
    return array


def solid_buffer(width: int, height: int, rgb: tuple[int, int, int]) -> PixelBuffer:
    return PixelBuffer.from_array(solid_array(width, height, rgb))


def noise_array(width: int, height: int, low: int = 0, high: int = 256, seed: int = 0) -> np.ndarray:
    rng = np.random.default_rng(seed)
    return rng.integers(low, high, size=(height, width, 3), dtype=np.uint8)


def gray_noise_array(width: int, height: int, low: int, high: int, seed: int = 0) -> np.ndarray:
    rng = np.random.default_rng(seed)
    gray = rng.integers(low, high, size=(height, width), dtype=np.uint8)
    return np.stack([gray, gray, gray], axis=2)


def striped_band_array(width: int = 600, height: int = 400) -> np.ndarray:
    """Mid-gray image with black/white 3px stripes in rows 40-99."""
    array = solid_array(width, height, (128, 128, 128))
    for y in range(40, 100):
        array[y, :] = 0 if ((y - 40) // 3) % 2 == 0 else 255
    return array


def landscape_lines_array(size: int = 400) -> np.ndarray:
    """Vertical brightness gradient crossed by a grid of long black lines."""
    y = np.arange(size)
    gradient = (120 + (y * 110) // size).astype(np.uint8)
    gray = np.repeat(gradient[:, None], size, axis=1)
    gray[(y % 20) < 3, :] = 0
    gray[:, (np.arange(size) % 40) < 3] = 0
    return np.stack([gray, gray, gray], axis=2)


def to_png(array: np.ndarray) -> bytes:
    buffer = BytesIO()
    Image.fromarray(array).save(buffer, format="PNG")
    return buffer.getvalue()


def t_shirt_array(
    rgb: tuple[int, int, int] = (20, 25, 115),
    sleeves: bool = True,
    neckline: bool = True,
    seed: int = 0,
) -> np.ndarray:
    """
    Flat 240x240 T-shirt on a light background.

    Shoulders run along y=40 from x=24 to x=215, sleeves reach down to
    y=104 and the torso to y=216. The neckline is a notch cut 24px into
    the shoulder line. Every outline sits on the 8px block grid so the
    fabric blocks never straddle the background. The fabric carries a
    +-4 intensity grain, enough texture without strong Sobel edges.
    """
    array = solid_array(240, 240, (235, 235, 235))
    mask = np.zeros((240, 240), dtype=bool)

    mask[40:216, 72:168] = True
    if sleeves:
        mask[40:104, 24:216] = True
    if neckline:
        mask[40:64, 104:136] = False

    rng = np.random.default_rng(seed)
    grain = rng.integers(-4, 5, size=(240, 240))
    fabric = np.clip(np.array(rgb)[None, None, :] + grain[..., None], 0, 255).astype(np.uint8)
    array[mask] = fabric[mask]
    return array
