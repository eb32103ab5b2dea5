"""
Error types raised by the garment analysis pipeline.
"""
from typing import Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from stylesight.models import ClothingValidationResult


class StyleSightError(Exception):
    """Base class for all analysis errors."""


class ImageDecodeError(StyleSightError):
    """The image bytes could not be turned into a pixel buffer."""

    def __init__(self, message: str = "Failed to load image"):
        super().__init__(message)


class ClothingRejectedError(StyleSightError):
    """The content gate decided the image does not show clothing."""

    def __init__(self, result: "ClothingValidationResult"):
        self.result = result
        message = f"Image does not appear to contain clothing (confidence {result.confidence}/100)"
        if result.suggestion:
            message = f"{message}. {result.suggestion}"
        super().__init__(message)

    @property
    def suggestion(self) -> Optional[str]:
        return self.result.suggestion


class AnalysisFailure(StyleSightError):
    """Internal failure while computing image statistics."""
