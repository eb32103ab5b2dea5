"""
Labeled fallback records used when analysis fails and the caller opted to
degrade instead of propagating the error.
"""
import random
from typing import Optional

from stylesight.constants import FALLBACK_CONFIDENCE
from stylesight.models import AnalysisDetails, DetectedFeatures

FALLBACK_RECORDS = (
    DetectedFeatures(
        neckline="crew neck",
        sleeves="short sleeves",
        top_style="t-shirt",
        bottom_style="straight-leg",
        dress_style="a-line",
        rise="mid-rise",
        colors=["navy", "white"],
        fit="regular",
        confidence=FALLBACK_CONFIDENCE,
        analysis_details=AnalysisDetails(
            garment_type="top",
            pattern_detected="solid",
            fabric_texture="smooth",
            silhouette="fitted",
        ),
        is_fallback=True,
    ),
    DetectedFeatures(
        neckline="v-neck",
        sleeves="sleeveless",
        top_style="blouse",
        bottom_style="skinny",
        dress_style="bodycon",
        rise="high-waisted",
        colors=["black", "white"],
        fit="fitted",
        confidence=FALLBACK_CONFIDENCE - 2,
        analysis_details=AnalysisDetails(
            garment_type="full_outfit",
            pattern_detected="solid",
            fabric_texture="woven",
            silhouette="structured",
        ),
        is_fallback=True,
    ),
)


class FallbackPolicy:
    """
    Picks a fallback record.

    Without a random source the first record is always returned; pass a
    seeded ``random.Random`` to vary the placeholder reproducibly. Callers
    get a deep copy, so changing one never leaks into later calls.
    """

    def __init__(self, rng: Optional[random.Random] = None):
        self.rng = rng

    @classmethod
    def from_seed(cls, seed: Optional[int]) -> "FallbackPolicy":
        return cls(random.Random(seed) if seed is not None else None)

    def select(self) -> DetectedFeatures:
        if self.rng is None:
            record = FALLBACK_RECORDS[0]
        else:
            record = self.rng.choice(FALLBACK_RECORDS)
        return record.model_copy(deep=True)
