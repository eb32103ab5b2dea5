"""
Clothing content gate.

Scores an image on five independent signals and only lets it through to
feature extraction when the total clears a strict threshold. Rejections carry
graded, human-readable advice for the user.
"""
import logging
from collections import Counter
from dataclasses import dataclass
from typing import List, Optional, Tuple

import numpy as np

from stylesight.colors import ColorClassifier
from stylesight.constants import (
    ANTI_PATTERN_POINTS,
    COLOR_AREA_POINTS,
    COLOR_CONSISTENCY_RATIO,
    COLOR_GRID_SIZE,
    EDGE_STRENGTH_THRESHOLD,
    FABRIC_BLOCK_SIZE,
    FABRIC_FLAT_VARIANCE,
    FABRIC_MAX_VARIANCE,
    FABRIC_POINTS,
    FOCUS_BORDER_FRACTION,
    FOCUS_POINTS,
    FOCUS_VARIANCE_FACTOR,
    FOCUS_VARIANCE_MARGIN,
    MAX_BLOCK_COLORS,
    MAX_LINE_DENSITY,
    NECKLINE_COLUMN_STEP,
    NECKLINE_MIN_COLUMNS,
    NECKLINE_MIN_SPREAD,
    NECKLINE_POINTS,
    SKIN_MAX_RATIO,
    SKIN_MAX_RED_GREEN_GAP,
    SKIN_MIN_RATIO,
    SKIN_POINTS,
    SKIN_SAMPLE_STRIDE,
    SLEEVE_MAX_RATIO,
    SLEEVE_MIN_RATIO,
    SLEEVE_POINTS,
    SLEEVE_STRIP_FRACTION,
    STRAIGHT_LINE_COVERAGE,
    SUGGESTION_UNCLEAR_BAND,
    SUGGESTION_WEAK_BAND,
    VALIDATION_THRESHOLD,
)
from stylesight.edges import EdgeDetector
from stylesight.models import ClothingValidationResult, PixelBuffer

logger = logging.getLogger(__name__)

SUGGESTION_UNCLEAR = (
    "The image may contain clothing but it is hard to read. Try a well-lit photo "
    "with the garment centered against a plain background."
)
SUGGESTION_WEAK = (
    "This doesn't look clearly like clothing. Please upload a photo that focuses "
    "on a single garment and fills most of the frame."
)
SUGGESTION_NONE = (
    "No clothing was detected. Please upload a photo of a clothing item such as "
    "a shirt, dress, skirt or pants."
)


@dataclass(frozen=True)
class SignalScore:
    name: str
    points: int
    reason: str


def suggestion_for(confidence: int) -> str:
    if confidence >= SUGGESTION_UNCLEAR_BAND:
        return SUGGESTION_UNCLEAR
    if confidence >= SUGGESTION_WEAK_BAND:
        return SUGGESTION_WEAK
    return SUGGESTION_NONE


class ClothingContentValidator:

    def __init__(
        self,
        classifier: Optional[ColorClassifier] = None,
        detector: Optional[EdgeDetector] = None,
        threshold: int = VALIDATION_THRESHOLD,
    ):
        self.classifier = classifier or ColorClassifier()
        self.detector = detector or EdgeDetector()
        self.threshold = threshold

    def validate(
        self,
        buffer: PixelBuffer,
        gradients: Optional[Tuple[np.ndarray, np.ndarray, np.ndarray]] = None,
        color_index: Optional[np.ndarray] = None,
    ) -> ClothingValidationResult:
        """
        Score how plausible it is that the buffer shows clothing.

        Args:
            buffer: Pixel buffer to check
            gradients: Precomputed (gx, gy, magnitude), if available
            color_index: Precomputed palette index per pixel, if available

        Returns:
            ClothingValidationResult: verdict, score, reasons and advice
        """
        if buffer.width < 3 or buffer.height < 3:
            return ClothingValidationResult(
                is_clothing=False,
                confidence=0,
                reasons=["Image is too small to analyze"],
                suggestion=SUGGESTION_NONE,
            )

        if gradients is None:
            gradients = self.detector.gradients(buffer)
        gx, gy, magnitude = gradients
        edge_map = self.detector.edge_map(buffer, magnitude)
        if color_index is None:
            color_index = self.classifier.classify_array(buffer.pixels[..., :3])

        signals = [
            self.score_fabric_texture(buffer),
            self.score_neckline(edge_map),
            self.score_sleeve_edges(edge_map, gx, gy),
            self.score_color_areas(color_index),
            self.score_subject_focus(buffer),
            self.score_skin_tones(buffer),
            self.score_anti_patterns(edge_map),
        ]

        confidence = sum(s.points for s in signals)
        is_clothing = confidence >= self.threshold

        if is_clothing:
            logger.info(f"✅ Clothing content confirmed ({confidence}/100)")
        else:
            logger.info(f"🚫 Clothing content rejected ({confidence}/100)")

        return ClothingValidationResult(
            is_clothing=is_clothing,
            confidence=confidence,
            reasons=[s.reason for s in signals],
            suggestion=None if is_clothing else suggestion_for(confidence),
            scores={s.name: s.points for s in signals},
        )

    # Fabric texture

    def score_fabric_texture(self, buffer: PixelBuffer) -> SignalScore:
        size = FABRIC_BLOCK_SIZE
        rows, cols = buffer.height // size, buffer.width // size
        ratio = 0.0

        if rows and cols:
            blocks = buffer.intensity[:rows * size, :cols * size].reshape(rows, size, cols, size)
            variances = blocks.var(axis=(1, 3))
            textured = variances > FABRIC_FLAT_VARIANCE
            if textured.any():
                in_band = textured & (variances <= FABRIC_MAX_VARIANCE)
                ratio = float(in_band.sum() / textured.sum())

        if ratio >= 0.6:
            return SignalScore("fabric_texture", FABRIC_POINTS, "Fabric-like texture across most of the image")
        if ratio >= 0.4:
            return SignalScore("fabric_texture", 20, "Fabric-like texture in parts of the image")
        if ratio >= 0.2:
            return SignalScore("fabric_texture", 10, "Limited fabric-like texture")
        return SignalScore("fabric_texture", 0, "No fabric-like texture found")

    # Garment silhouette

    def score_neckline(self, edge_map: np.ndarray) -> SignalScore:
        """A neckline shows up as an edge profile that dips in the middle of the upper third."""
        height, width = edge_map.shape
        upper = edge_map[:height // 3] > EDGE_STRENGTH_THRESHOLD

        center = width / 2
        inner, outer = [], []
        for x in range(int(width * 0.25), int(width * 0.75), NECKLINE_COLUMN_STEP):
            column = upper[:, x]
            if not column.any():
                continue
            first_row = int(np.argmax(column))
            if abs(x - center) < width / 8:
                inner.append(first_row)
            else:
                outer.append(first_row)

        profile = inner + outer
        curved = (
            len(profile) >= NECKLINE_MIN_COLUMNS
            and bool(inner) and bool(outer)
            and float(np.std(profile)) > NECKLINE_MIN_SPREAD
            and np.mean(inner) > np.mean(outer)
        )
        if curved:
            return SignalScore("neckline", NECKLINE_POINTS, "Curved neckline outline in the upper third")
        return SignalScore("neckline", 0, "No neckline outline found")

    def score_sleeve_edges(self, edge_map: np.ndarray, gx: np.ndarray, gy: np.ndarray) -> SignalScore:
        height, width = edge_map.shape
        strip = max(1, int(width * SLEEVE_STRIP_FRACTION))
        y0, y1 = height // 6, (2 * height) // 3

        vertical = (edge_map > EDGE_STRENGTH_THRESHOLD) & (np.abs(gx) > np.abs(gy))
        band = vertical[y0:y1]
        if band.size == 0:
            return SignalScore("sleeve_edges", 0, "No vertical sleeve edges on the sides")

        left = float(band[:, :strip].mean())
        right = float(band[:, width - strip:].mean())

        if all(SLEEVE_MIN_RATIO <= r <= SLEEVE_MAX_RATIO for r in (left, right)):
            return SignalScore("sleeve_edges", SLEEVE_POINTS, "Vertical sleeve-like edges on both sides")
        return SignalScore("sleeve_edges", 0, "No vertical sleeve edges on the sides")

    # Color areas

    def _block_colors(self, color_index: np.ndarray) -> List[int]:
        height, width = color_index.shape
        neutral = self.classifier.neutral_index
        colors = []

        for row in range(COLOR_GRID_SIZE):
            for col in range(COLOR_GRID_SIZE):
                y0, y1 = row * height // COLOR_GRID_SIZE, (row + 1) * height // COLOR_GRID_SIZE
                x0, x1 = col * width // COLOR_GRID_SIZE, (col + 1) * width // COLOR_GRID_SIZE
                labels = color_index[y0:y1:2, x0:x1:2]
                if labels.size == 0:
                    continue
                counts = np.bincount(labels.ravel(), minlength=neutral + 1)
                named = counts[:neutral]
                colors.append(int(np.argmax(named)) if named.any() else neutral)

        return colors

    def score_color_areas(self, color_index: np.ndarray) -> SignalScore:
        colors = self._block_colors(color_index)
        if not colors:
            return SignalScore("color_areas", 0, "No color areas to compare")

        distinct = len(set(colors))
        consistency = Counter(colors).most_common(1)[0][1] / len(colors)

        if 1 <= distinct <= MAX_BLOCK_COLORS and consistency >= COLOR_CONSISTENCY_RATIO:
            return SignalScore("color_areas", COLOR_AREA_POINTS, f"Consistent color areas ({distinct} main colors)")
        if 1 <= distinct <= MAX_BLOCK_COLORS:
            return SignalScore("color_areas", 10, f"Mixed color areas ({distinct} main colors)")
        return SignalScore("color_areas", 0, f"Too many unrelated color areas ({distinct})")

    # Subject focus

    def score_subject_focus(self, buffer: PixelBuffer) -> SignalScore:
        intensity = buffer.intensity
        height, width = intensity.shape
        center = intensity[height // 4:(3 * height) // 4, width // 4:(3 * width) // 4]

        by = max(1, int(height * FOCUS_BORDER_FRACTION))
        bx = max(1, int(width * FOCUS_BORDER_FRACTION))
        frame = np.ones((height, width), dtype=bool)
        frame[by:height - by, bx:width - bx] = False
        border = intensity[frame]

        if center.size == 0 or border.size == 0:
            return SignalScore("subject_focus", 0, "Cannot separate subject from background")

        center_variance = float(center.var())
        border_variance = float(border.var())

        if center_variance > border_variance * FOCUS_VARIANCE_FACTOR + FOCUS_VARIANCE_MARGIN:
            return SignalScore("subject_focus", FOCUS_POINTS, "Subject stands out from the background")
        return SignalScore("subject_focus", 0, "No distinct subject in the center")

    def score_skin_tones(self, buffer: PixelBuffer) -> SignalScore:
        rgb = buffer.pixels[::SKIN_SAMPLE_STRIDE, ::SKIN_SAMPLE_STRIDE, :3].astype(np.int64)
        if rgb.size == 0:
            return SignalScore("skin_tones", 0, "No skin tones near the garment")

        r, g, b = rgb[..., 0], rgb[..., 1], rgb[..., 2]
        spread = rgb.max(axis=2) - rgb.min(axis=2)
        skin = (
            (r > 95) & (g > 40) & (b > 20)
            & (spread > 15) & (np.abs(r - g) > 15)
            & (r > g) & (r > b)
            & (g > b) & (r - g < SKIN_MAX_RED_GREEN_GAP)
        )
        ratio = float(skin.mean())

        if SKIN_MIN_RATIO < ratio < SKIN_MAX_RATIO:
            return SignalScore("skin_tones", SKIN_POINTS, "Some skin tones, as on a worn garment")
        return SignalScore("skin_tones", 0, "No skin tones near the garment")

    # Anti-patterns

    def score_anti_patterns(self, edge_map: np.ndarray) -> SignalScore:
        """Architecture, horizons and vehicles produce long straight edges across the frame."""
        height, width = edge_map.shape
        strong = edge_map > EDGE_STRENGTH_THRESHOLD

        long_rows = int((strong.mean(axis=1) >= STRAIGHT_LINE_COVERAGE).sum())
        long_cols = int((strong.mean(axis=0) >= STRAIGHT_LINE_COVERAGE).sum())
        density = (long_rows + long_cols) / (width + height)

        if density <= MAX_LINE_DENSITY:
            return SignalScore("anti_patterns", ANTI_PATTERN_POINTS, "No architecture or scenery lines")
        return SignalScore(
            "anti_patterns", 0,
            f"Long straight lines across the frame ({long_rows + long_cols}) suggest architecture or scenery",
        )
