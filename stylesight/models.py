"""
Value types passed between the analysis passes, and the pydantic records
handed back to callers.
"""
from dataclasses import dataclass, field
from enum import Enum
from functools import cached_property
from typing import Dict, List, Literal, Optional, Tuple

import numpy as np
from PIL import Image
from pydantic import BaseModel, ConfigDict, Field


class GarmentType(str, Enum):
    TOP = "top"
    BOTTOM = "bottom"
    DRESS = "dress"
    FULL_OUTFIT = "full_outfit"


@dataclass(frozen=True)
class PixelBuffer:
    """Immutable RGBA pixel buffer, origin top-left, row-major."""

    width: int
    height: int
    data: bytes = field(repr=False)

    def __post_init__(self):
        if self.width < 0 or self.height < 0:
            raise ValueError(f"Invalid buffer size {self.width}x{self.height}")
        expected = self.width * self.height * 4
        if len(self.data) != expected:
            raise ValueError(f"Buffer length {len(self.data)} does not match {self.width}x{self.height}x4")

    @classmethod
    def from_array(cls, array: np.ndarray) -> "PixelBuffer":
        """Build a buffer from an (H, W, 3) RGB or (H, W, 4) RGBA uint8 array."""
        array = np.asarray(array, dtype=np.uint8)
        if array.ndim != 3 or array.shape[2] not in (3, 4):
            raise ValueError(f"Expected (H, W, 3|4) array, got shape {array.shape}")
        if array.shape[2] == 3:
            alpha = np.full(array.shape[:2] + (1,), 255, dtype=np.uint8)
            array = np.concatenate([array, alpha], axis=2)
        height, width = array.shape[:2]
        return cls(width=width, height=height, data=np.ascontiguousarray(array).tobytes())

    @classmethod
    def from_image(cls, image: Image.Image) -> "PixelBuffer":
        rgba = image.convert("RGBA")
        return cls(width=rgba.width, height=rgba.height, data=rgba.tobytes())

    @cached_property
    def pixels(self) -> np.ndarray:
        """Read-only (H, W, 4) uint8 view of the buffer."""
        return np.frombuffer(self.data, dtype=np.uint8).reshape(self.height, self.width, 4)

    @cached_property
    def intensity(self) -> np.ndarray:
        """Grayscale intensity (r+g+b)/3 as float64."""
        rgb = self.pixels[..., :3].astype(np.float64)
        gray = (rgb[..., 0] + rgb[..., 1] + rgb[..., 2]) / 3
        gray.setflags(write=False)
        return gray

    @property
    def size(self) -> int:
        return self.width * self.height

    def rgb(self, x: int, y: int) -> Tuple[int, int, int]:
        index = (y * self.width + x) * 4
        return self.data[index], self.data[index + 1], self.data[index + 2]


@dataclass(frozen=True)
class RegionSpec:
    """Region declared as fractions of the full image."""

    name: str
    x: float
    y: float
    width: float
    height: float

    def resolve(self, image_width: int, image_height: int) -> "Region":
        return Region(
            name=self.name,
            x=image_width * self.x,
            y=image_height * self.y,
            width=image_width * self.width,
            height=image_height * self.height,
        )


@dataclass(frozen=True)
class Region:
    """Axis-aligned rectangle in pixel coordinates (may exceed the buffer)."""

    name: str
    x: float
    y: float
    width: float
    height: float


@dataclass(frozen=True)
class RegionStats:
    name: str
    x: float
    y: float
    width: float
    height: float
    average_brightness: float
    edge_density: float
    contours: float
    color_variance: float
    dominant_colors: Tuple[Tuple[str, float], ...]
    texture_complexity: float


@dataclass(frozen=True)
class ColorSample:
    name: str
    rgb: Tuple[int, int, int]
    percentage: float


Point = Tuple[int, int]
Contour = Tuple[Point, ...]


@dataclass(frozen=True)
class EdgeAnalysis:
    edge_map: np.ndarray = field(repr=False, compare=False)
    contours: Tuple[Contour, ...] = field(repr=False)
    strength: float

    @property
    def contour_count(self) -> int:
        return len(self.contours)


@dataclass(frozen=True)
class TextureSummary:
    complexity: int
    patterns: Tuple[str, ...]
    uniformity: float


@dataclass(frozen=True)
class Silhouette:
    type: str
    characteristics: Tuple[str, ...]

    def has(self, characteristic: str) -> bool:
        return characteristic in self.characteristics


class AnalysisDetails(BaseModel):
    model_config = ConfigDict(frozen=True)

    garment_type: Literal["top", "bottom", "dress", "full_outfit"]
    pattern_detected: str
    fabric_texture: str
    silhouette: str


class DetectedFeatures(BaseModel):
    """Garment attributes consumed by the styling recommendation layer."""

    model_config = ConfigDict(frozen=True)

    neckline: str
    sleeves: str
    top_style: str
    bottom_style: str
    dress_style: str
    rise: str
    colors: List[str]
    fit: str
    confidence: int = Field(ge=0, le=100)
    analysis_details: Optional[AnalysisDetails] = None
    is_fallback: bool = False


class ClothingValidationResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    is_clothing: bool
    confidence: int = Field(ge=0, le=100)
    reasons: List[str]
    suggestion: Optional[str] = None
    scores: Dict[str, int] = Field(default_factory=dict)
