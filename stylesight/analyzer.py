"""
StyleSight Garment Analysis - Core Pipeline
===========================================

Runs the heuristic computer-vision passes over one image and returns the
detected garment attributes.

Pipeline:
- Decode and pre-scale the image (process.py)
- Optional clothing content gate (validator.py)
- Region statistics, Sobel edges and contours, texture, colors
- Silhouette and garment type
- Rule-based attribute extraction and confidence (features.py)
"""

import logging
import time
from enum import Enum
from typing import Optional

from stylesight.colors import ColorClassifier
from stylesight.config import AnalyzerConfig, config as default_config
from stylesight.edges import EdgeDetector
from stylesight.errors import AnalysisFailure, ClothingRejectedError, StyleSightError
from stylesight.fallback import FallbackPolicy
from stylesight.features import FeatureContext, FeatureExtractor
from stylesight.garment import GarmentClassifier, analyze_silhouette
from stylesight.models import ClothingValidationResult, DetectedFeatures, PixelBuffer
from stylesight.process import load_pixel_buffer
from stylesight.regions import RegionAnalyzer
from stylesight.texture import TextureAnalyzer
from stylesight.validator import ClothingContentValidator

logger = logging.getLogger(__name__)


class AnalyzerState(str, Enum):
    UNINITIALIZED = "uninitialized"
    INITIALIZING = "initializing"
    READY = "ready"


class AnalysisStage(str, Enum):
    READY = "ready"
    LOADING = "loading"
    VALIDATING = "validating"
    ANALYZING = "analyzing"
    DONE = "done"
    REJECTED = "rejected"
    FAILED = "failed"


class ClothingAnalyzer:
    """
    Heuristic garment feature extraction over raw pixels.

    ``stage`` records the step of the current call on the instance itself,
    so an analyzer serves one thread at a time. Build one analyzer per
    thread with ``create_clothing_analyzer`` to run calls in parallel.
    """

    def __init__(self, settings: Optional[AnalyzerConfig] = None):
        self.settings = settings or default_config
        self.state = AnalyzerState.UNINITIALIZED
        self.stage = AnalysisStage.READY

        self.classifier: Optional[ColorClassifier] = None
        self.edge_detector: Optional[EdgeDetector] = None
        self.region_analyzer: Optional[RegionAnalyzer] = None
        self.texture_analyzer: Optional[TextureAnalyzer] = None
        self.garment_classifier: Optional[GarmentClassifier] = None
        self.validator: Optional[ClothingContentValidator] = None
        self.feature_extractor: Optional[FeatureExtractor] = None
        self.fallback_policy: Optional[FallbackPolicy] = None

    def initialize(self) -> "ClothingAnalyzer":
        """Build the analysis passes. Safe to call more than once."""
        if self.state == AnalyzerState.READY:
            return self

        self.state = AnalyzerState.INITIALIZING
        logger.info("Initializing clothing analyzer...")

        for warning in self.settings.validate():
            logger.warning(f"⚠️ Configuration: {warning}")

        self.classifier = ColorClassifier()
        self.edge_detector = EdgeDetector()
        self.region_analyzer = RegionAnalyzer(self.classifier, self.edge_detector)
        self.texture_analyzer = TextureAnalyzer()
        self.garment_classifier = GarmentClassifier()
        self.validator = ClothingContentValidator(
            self.classifier, self.edge_detector, threshold=self.settings.validation_threshold
        )
        self.feature_extractor = FeatureExtractor()
        self.fallback_policy = FallbackPolicy.from_seed(self.settings.fallback_seed)

        self.state = AnalyzerState.READY
        logger.info("Clothing analyzer initialized successfully")
        return self

    def _require_ready(self):
        if self.state != AnalyzerState.READY:
            raise RuntimeError("ClothingAnalyzer used before initialize()")

    def load(self, image_bytes: bytes) -> PixelBuffer:
        """Decode and pre-scale image bytes."""
        self._require_ready()
        self.stage = AnalysisStage.LOADING
        try:
            return load_pixel_buffer(image_bytes, self.settings.max_dimension)
        except StyleSightError:
            self.stage = AnalysisStage.FAILED
            raise

    def validate(self, image_bytes: bytes) -> ClothingValidationResult:
        """Run only the clothing content gate on encoded image bytes."""
        return self.validate_pixels(self.load(image_bytes))

    def validate_pixels(self, buffer: PixelBuffer) -> ClothingValidationResult:
        self._require_ready()
        self.stage = AnalysisStage.VALIDATING
        result = self.validator.validate(buffer)
        self.stage = AnalysisStage.DONE if result.is_clothing else AnalysisStage.REJECTED
        return result

    def analyze(self, image_bytes: bytes, validate: Optional[bool] = None) -> DetectedFeatures:
        """
        Analyze an encoded clothing image.

        Args:
            image_bytes: Raw image bytes
            validate: Override the configured content gate for this call

        Returns:
            DetectedFeatures: detected garment attributes

        Raises:
            ImageDecodeError: the bytes could not be decoded
            ClothingRejectedError: the content gate rejected the image
            AnalysisFailure: analysis failed and fallback is disabled
        """
        start_time = time.time()
        logger.info(f"Analyzing clothing image ({len(image_bytes)} bytes)...")

        try:
            buffer = self.load(image_bytes)
        except AnalysisFailure as e:
            return self._fail(e)

        features = self.analyze_pixels(buffer, validate=validate)

        logger.info(f"⏱️ TOTAL analysis completed in {time.time() - start_time:.2f}s")
        return features

    def analyze_pixels(self, buffer: PixelBuffer, validate: Optional[bool] = None) -> DetectedFeatures:
        """Run the pipeline on an already decoded pixel buffer."""
        self._require_ready()

        if buffer.width == 0 or buffer.height == 0:
            return self._fail(AnalysisFailure(f"Cannot analyze a {buffer.width}x{buffer.height} image"))

        try:
            # Shared per-call inputs
            grad_start = time.time()
            gradients = self.edge_detector.gradients(buffer)
            color_index = self.classifier.classify_array(buffer.pixels[..., :3])
            logger.info(f"⏱️ Gradients and color map completed in {time.time() - grad_start:.2f}s")
        except Exception as e:
            return self._fail(AnalysisFailure(f"Pixel preprocessing failed: {e}"))

        # Step 1: Content gate
        should_validate = self.settings.content_validation if validate is None else validate
        if should_validate:
            self.stage = AnalysisStage.VALIDATING
            result = self.validator.validate(buffer, gradients=gradients, color_index=color_index)
            if not result.is_clothing:
                self.stage = AnalysisStage.REJECTED
                logger.warning(f"Image rejected by content gate: {result.confidence}/100")
                raise ClothingRejectedError(result)

        # Step 2: Statistics and features
        self.stage = AnalysisStage.ANALYZING
        try:
            features = self._extract(buffer, gradients, color_index)
        except Exception as e:
            logger.error(f"❌ Error in clothing analysis: {e}")
            return self._fail(AnalysisFailure(str(e)))

        self.stage = AnalysisStage.DONE
        return features

    def _extract(self, buffer: PixelBuffer, gradients, color_index) -> DetectedFeatures:
        _, _, magnitude = gradients

        regions_start = time.time()
        regions = self.region_analyzer.analyze(buffer, magnitude=magnitude, color_index=color_index)
        logger.info(f"⏱️ Region analysis completed in {time.time() - regions_start:.2f}s")

        edges_start = time.time()
        edges = self.edge_detector.detect(buffer, magnitude)
        logger.info(f"⏱️ Edges and contours completed in {time.time() - edges_start:.2f}s "
                    f"({edges.contour_count} contours)")

        texture = self.texture_analyzer.analyze(buffer)
        colors = self.classifier.analyze_colors(buffer)
        silhouette = analyze_silhouette(buffer.width, buffer.height, edges)
        garment_type = self.garment_classifier.classify(regions, buffer.width, buffer.height)

        context = FeatureContext(
            regions=regions,
            garment_type=garment_type,
            colors=colors,
            edges=edges,
            texture=texture,
            silhouette=silhouette,
        )
        features = self.feature_extractor.extract(context)
        logger.info(f"✅ Detected {garment_type.value} ({features.confidence}% confidence)")
        return features

    def _fail(self, error: AnalysisFailure) -> DetectedFeatures:
        self.stage = AnalysisStage.FAILED
        if not self.settings.fallback_on_failure:
            raise error
        logger.warning(f"⚠️ Analysis failed, returning fallback record: {error}")
        return self.fallback_policy.select()


def create_clothing_analyzer(settings: Optional[AnalyzerConfig] = None) -> ClothingAnalyzer:
    """Return a ready-to-use analyzer."""
    return ClothingAnalyzer(settings).initialize()


def analyze_clothing(image_bytes: bytes, settings: Optional[AnalyzerConfig] = None) -> DetectedFeatures:
    return create_clothing_analyzer(settings).analyze(image_bytes)


def validate_clothing(image_bytes: bytes, settings: Optional[AnalyzerConfig] = None) -> ClothingValidationResult:
    return create_clothing_analyzer(settings).validate(image_bytes)
