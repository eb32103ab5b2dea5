"""
Garment type and silhouette classification.

Both are rule-based and read only statistics that were already computed;
every threshold comparison is strict.
"""
import logging
from typing import Mapping

from stylesight.constants import (
    BOTTOM_DOMINANCE_FACTOR,
    COMPLEX_SHAPE_CONTOURS,
    DRESS_COMPLEXITY_DELTA,
    SILHOUETTE_ELONGATED_RATIO,
    SILHOUETTE_WIDE_RATIO,
    STRUCTURED_EDGE_STRENGTH,
    TALL_ASPECT_RATIO,
    WIDE_ASPECT_RATIO,
)
from stylesight.models import EdgeAnalysis, GarmentType, RegionStats, Silhouette

logger = logging.getLogger(__name__)


def composite_score(region: RegionStats) -> float:
    """Texture complexity plus edge density scaled to the same range."""
    return region.texture_complexity + region.edge_density * 100


class GarmentClassifier:

    def classify(self, regions: Mapping[str, RegionStats], width: int, height: int) -> GarmentType:
        top_region = regions.get("top")
        bottom_region = regions.get("bottom")

        if top_region is None or bottom_region is None or height <= 0:
            return GarmentType.TOP

        aspect_ratio = width / height
        top = composite_score(top_region)
        bottom = composite_score(bottom_region)

        if aspect_ratio < TALL_ASPECT_RATIO:
            # Tall image: dress when content is spread evenly, otherwise an outfit
            if abs(top - bottom) < DRESS_COMPLEXITY_DELTA:
                return GarmentType.DRESS
            return GarmentType.FULL_OUTFIT

        if aspect_ratio > WIDE_ASPECT_RATIO:
            return GarmentType.TOP if top > bottom else GarmentType.BOTTOM

        if bottom > top * BOTTOM_DOMINANCE_FACTOR:
            return GarmentType.BOTTOM
        return GarmentType.TOP


def analyze_silhouette(width: int, height: int, edges: EdgeAnalysis) -> Silhouette:
    aspect_ratio = width / height if height else 0.0

    silhouette_type = "fitted"
    characteristics = []

    if aspect_ratio > SILHOUETTE_WIDE_RATIO:
        silhouette_type = "wide"
        characteristics.append("horizontal emphasis")
    elif aspect_ratio < SILHOUETTE_ELONGATED_RATIO:
        silhouette_type = "elongated"
        characteristics.append("vertical emphasis")

    if edges.strength > STRUCTURED_EDGE_STRENGTH:
        characteristics.append("structured")
    else:
        characteristics.append("flowing")

    if edges.contour_count > COMPLEX_SHAPE_CONTOURS:
        characteristics.append("complex shape")
    else:
        characteristics.append("simple shape")

    return Silhouette(type=silhouette_type, characteristics=tuple(characteristics))
