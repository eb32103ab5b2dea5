from PIL import Image, UnidentifiedImageError
from io import BytesIO
from typing import Tuple
import base64
import binascii
import logging

from stylesight.constants import DEFAULT_MAX_DIMENSION
from stylesight.errors import AnalysisFailure, ImageDecodeError
from stylesight.models import PixelBuffer

logger = logging.getLogger(__name__)


def decode_base64_image(base64_image: str) -> bytes:
    """Decode a base64 string or data URL into raw image bytes."""
    if base64_image.startswith('data:image'):
        # Remove data URL prefix
        base64_data = base64_image.partition(',')[2]
    else:
        base64_data = base64_image

    if not base64_data:
        logger.error("❌ Empty base64 image data")
        raise ImageDecodeError()

    try:
        return base64.b64decode(base64_data, validate=True)
    except (binascii.Error, ValueError) as e:
        logger.error(f"❌ Invalid base64 image data: {e}")
        raise ImageDecodeError() from e


def scaled_size(width: int, height: int, max_dimension: int = DEFAULT_MAX_DIMENSION) -> Tuple[int, int]:
    """
    Target size with the longer side at max_dimension.

    Smaller images are scaled up as well; fractional sizes are truncated.
    """
    if width <= 0 or height <= 0:
        return 0, 0
    scale = min(max_dimension / width, max_dimension / height)
    return int(width * scale), int(height * scale)


def load_pixel_buffer(image_bytes: bytes, max_dimension: int = DEFAULT_MAX_DIMENSION) -> PixelBuffer:
    """
    Decode image bytes and pre-scale them for analysis.

    Args:
        image_bytes: Encoded image in any format Pillow understands
        max_dimension: Size of the longer side after scaling

    Returns:
        PixelBuffer: RGBA pixels of the scaled image

    Raises:
        ImageDecodeError: the bytes are not a readable image
        AnalysisFailure: scaling leaves an empty image
    """
    try:
        # Step 1: Decode; the with-block closes the handle on every path
        with Image.open(BytesIO(image_bytes)) as image:
            image.load()
            rgba = image.convert("RGBA")
    except (UnidentifiedImageError, OSError, ValueError, Image.DecompressionBombError) as e:
        logger.error(f"❌ Failed to load image: {e}")
        raise ImageDecodeError() from e

    # Step 2: Scale so the longer side equals max_dimension
    target = scaled_size(rgba.width, rgba.height, max_dimension)
    if target[0] <= 0 or target[1] <= 0:
        raise AnalysisFailure(
            f"Image of {rgba.width}x{rgba.height} is empty after scaling to {max_dimension}px"
        )

    if target != rgba.size:
        logger.info(f"🔄 Resized image from {rgba.width}x{rgba.height} to {target[0]}x{target[1]} for analysis")
        rgba = rgba.resize(target, Image.LANCZOS)

    return PixelBuffer.from_image(rgba)
