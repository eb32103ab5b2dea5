"""
Rule-based mapping from image statistics to named garment attributes.

Each attribute is an ordered list of (predicate, result) rules evaluated
first-match-wins, with a named default when nothing matches.
"""
import logging
from dataclasses import dataclass
from typing import Callable, Dict, List, Mapping, Sequence

from stylesight.constants import BASE_CONFIDENCE, MAX_CONFIDENCE, REPORTED_COLORS
from stylesight.models import (
    AnalysisDetails,
    ColorSample,
    DetectedFeatures,
    EdgeAnalysis,
    GarmentType,
    RegionStats,
    Silhouette,
    TextureSummary,
)

logger = logging.getLogger(__name__)

NOT_APPLICABLE = "not applicable"


@dataclass(frozen=True)
class FeatureContext:
    """Everything the attribute rules may look at."""

    regions: Mapping[str, RegionStats]
    garment_type: GarmentType
    colors: Sequence[ColorSample]
    edges: EdgeAnalysis
    texture: TextureSummary
    silhouette: Silhouette

    def region(self, name: str) -> RegionStats:
        return self.regions[name]

    @property
    def side_complexity(self) -> float:
        return (self.region("left_side").texture_complexity + self.region("right_side").texture_complexity) / 2

    @property
    def side_edges(self) -> float:
        return (self.region("left_side").edge_density + self.region("right_side").edge_density) / 2

    @property
    def average_edge_density(self) -> float:
        return sum(r.edge_density for r in self.regions.values()) / len(self.regions)

    @property
    def average_texture_complexity(self) -> float:
        return sum(r.texture_complexity for r in self.regions.values()) / len(self.regions)

    def garment_is(self, *types: GarmentType) -> bool:
        return self.garment_type in types


@dataclass(frozen=True)
class Rule:
    predicate: Callable[[FeatureContext], bool]
    result: str


@dataclass(frozen=True)
class AttributeRules:
    name: str
    rules: Sequence[Rule]
    default: str

    def evaluate(self, context: FeatureContext) -> str:
        for rule in self.rules:
            if rule.predicate(context):
                return rule.result
        return self.default


def _top(c: FeatureContext) -> RegionStats:
    return c.region("top")


NECKLINE = AttributeRules("neckline", (
    Rule(lambda c: c.garment_is(GarmentType.BOTTOM), NOT_APPLICABLE),
    Rule(lambda c: _top(c).contours > 0.15, "v-neck"),
    Rule(lambda c: _top(c).edge_density > 0.12 and _top(c).average_brightness > 150, "scoop neck"),
    Rule(lambda c: _top(c).edge_density < 0.05, "strapless"),
    Rule(lambda c: len(_top(c).dominant_colors) > 2 and _top(c).average_brightness > 180, "boat neck"),
    Rule(lambda c: _top(c).edge_density > 0.08 and _top(c).contours > 0.08, "square neck"),
), default="crew neck")

SLEEVES = AttributeRules("sleeves", (
    Rule(lambda c: c.garment_is(GarmentType.BOTTOM), NOT_APPLICABLE),
    Rule(lambda c: c.side_complexity < 10 and c.side_edges < 0.02, "sleeveless"),
    Rule(lambda c: c.side_complexity > 30 and c.region("upper_middle").edge_density > 0.08, "long sleeves"),
    Rule(lambda c: c.side_complexity > 20 and c.side_edges > 0.05, "3/4 sleeves"),
    Rule(lambda c: c.side_edges > 0.03, "short sleeves"),
), default="cap sleeves")

TOP_STYLE = AttributeRules("top_style", (
    Rule(lambda c: c.silhouette.has("flowing") and _top(c).average_brightness > 180, "blouse"),
    Rule(lambda c: c.silhouette.has("flowing"), "tunic"),
    Rule(lambda c: c.texture.complexity > 600, "sweater"),
    Rule(lambda c: c.region("middle").edge_density > 0.1 and c.silhouette.has("structured"), "fitted"),
    Rule(lambda c: _top(c).average_brightness < 100, "tank top"),
    Rule(lambda c: _top(c).color_variance > 500, "patterned top"),
), default="t-shirt")

BOTTOM_STYLE = AttributeRules("bottom_style", (
    Rule(lambda c: c.garment_is(GarmentType.TOP, GarmentType.DRESS), NOT_APPLICABLE),
    Rule(lambda c: c.silhouette.type == "wide", "wide-leg"),
    Rule(lambda c: c.region("bottom").edge_density > 0.12, "skinny"),
    Rule(lambda c: c.region("bottom").texture_complexity > 40, "textured pants"),
    Rule(lambda c: c.silhouette.has("flowing"), "relaxed"),
), default="straight-leg")

DRESS_STYLE = AttributeRules("dress_style", (
    Rule(lambda c: not c.garment_is(GarmentType.DRESS), NOT_APPLICABLE),
    Rule(lambda c: c.silhouette.type == "elongated", "maxi"),
    Rule(lambda c: _top(c).edge_density > c.region("bottom").edge_density * 1.5, "fit-and-flare"),
    Rule(lambda c: c.silhouette.has("structured"), "sheath"),
), default="a-line")


def _brightness_drop(c: FeatureContext) -> float:
    return c.region("middle").average_brightness - c.region("bottom").average_brightness


def _edge_drop(c: FeatureContext) -> float:
    return c.region("middle").edge_density - c.region("bottom").edge_density


RISE = AttributeRules("rise", (
    Rule(lambda c: c.garment_is(GarmentType.TOP, GarmentType.DRESS), NOT_APPLICABLE),
    Rule(lambda c: _brightness_drop(c) > 30 and _edge_drop(c) > 0.02, "high-waisted"),
    Rule(lambda c: _brightness_drop(c) < -20, "low-rise"),
), default="mid-rise")

FIT = AttributeRules("fit", (
    Rule(lambda c: c.silhouette.has("structured") and c.average_edge_density > 0.1, "fitted"),
    Rule(lambda c: c.silhouette.has("flowing"), "loose"),
    Rule(lambda c: c.average_texture_complexity > 40, "relaxed"),
    Rule(lambda c: c.edges.strength > 70, "tailored"),
), default="regular")

PATTERN = AttributeRules("pattern_detected", (
    Rule(lambda c: c.texture.complexity > 800 and len(c.colors) > 4, "multicolored pattern"),
    Rule(lambda c: c.texture.complexity > 800, "textured"),
    Rule(lambda c: len(c.colors) > 3 and c.colors[0].percentage < 60, "mixed colors"),
    Rule(lambda c: len(c.colors) > 3, "color blocked"),
    Rule(lambda c: c.texture.uniformity > 80, "solid"),
), default="subtle pattern")

FABRIC_TEXTURE = AttributeRules("fabric_texture", (
    Rule(lambda c: c.texture.complexity > 1000, "textured/knit"),
    Rule(lambda c: c.texture.complexity > 500, "woven"),
    Rule(lambda c: c.texture.uniformity > 85, "smooth"),
), default="medium texture")

ATTRIBUTE_RULES = (NECKLINE, SLEEVES, TOP_STYLE, BOTTOM_STYLE, DRESS_STYLE, RISE, FIT)


class FeatureExtractor:
    """Turns the statistics of one image into a DetectedFeatures record."""

    def extract_attributes(self, context: FeatureContext) -> Dict[str, str]:
        return {rules.name: rules.evaluate(context) for rules in ATTRIBUTE_RULES}

    def detect_pattern(self, context: FeatureContext) -> str:
        return PATTERN.evaluate(context)

    def classify_fabric_texture(self, context: FeatureContext) -> str:
        return FABRIC_TEXTURE.evaluate(context)

    def calculate_confidence(self, context: FeatureContext) -> int:
        confidence = BASE_CONFIDENCE

        if context.edges.strength > 50:
            confidence += 15
        if len(context.colors) >= 2 and context.colors[0].percentage > 30:
            confidence += 10
        if any(r.texture_complexity > 20 for r in context.regions.values()):
            confidence += 10
        if any(r.edge_density > 0.08 for r in context.regions.values()):
            confidence += 5

        return min(confidence, MAX_CONFIDENCE)

    def color_names(self, context: FeatureContext) -> List[str]:
        """
        Names of the leading color samples.

        When every sampled pixel fell outside the background brightness band
        (an all-black or all-white garment), the center region's histogram is
        used instead so the record still names a color.
        """
        if context.colors:
            return [c.name for c in context.colors[:REPORTED_COLORS]]
        center = context.regions.get("center")
        if center is None:
            return []
        return [name for name, _ in center.dominant_colors[:REPORTED_COLORS]]

    def extract(self, context: FeatureContext) -> DetectedFeatures:
        attributes = self.extract_attributes(context)
        logger.debug(f"Attributes: {attributes}")

        return DetectedFeatures(
            **attributes,
            colors=self.color_names(context),
            confidence=self.calculate_confidence(context),
            analysis_details=AnalysisDetails(
                garment_type=context.garment_type.value,
                pattern_detected=self.detect_pattern(context),
                fabric_texture=self.classify_fabric_texture(context),
                silhouette=context.silhouette.type,
            ),
        )
