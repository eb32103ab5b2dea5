"""
StyleSight Garment Analysis
===========================

Heuristic computer-vision analysis of clothing photos for styling advice.

Features:
- Region statistics, Sobel edges, contours and texture over raw pixels
- Named-color classification against a fixed palette
- Clothing content gate with graded user advice
- Rule-based garment attributes with a confidence score

Modules:
- analyzer.py: Pipeline orchestration
- config.py: Configuration management
- process.py: Image decoding and pre-scaling
- validator.py: Clothing content gate
- features.py: Attribute rules
- cli.py: Command-line entry point
"""

from stylesight.analyzer import (
    AnalysisStage,
    AnalyzerState,
    ClothingAnalyzer,
    analyze_clothing,
    create_clothing_analyzer,
    validate_clothing,
)
from stylesight.config import AnalyzerConfig
from stylesight.errors import (
    AnalysisFailure,
    ClothingRejectedError,
    ImageDecodeError,
    StyleSightError,
)
from stylesight.models import (
    AnalysisDetails,
    ClothingValidationResult,
    DetectedFeatures,
    GarmentType,
    PixelBuffer,
)

__version__ = "1.0.0"
__description__ = "Heuristic garment feature extraction for styling advice"
__license__ = "MIT"

__all__ = [
    "AnalysisDetails",
    "AnalysisFailure",
    "AnalysisStage",
    "AnalyzerConfig",
    "AnalyzerState",
    "ClothingAnalyzer",
    "ClothingRejectedError",
    "ClothingValidationResult",
    "DetectedFeatures",
    "GarmentType",
    "ImageDecodeError",
    "PixelBuffer",
    "StyleSightError",
    "analyze_clothing",
    "create_clothing_analyzer",
    "validate_clothing",
]
