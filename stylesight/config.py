import logging
import os
from typing import List, Optional
from dataclasses import dataclass

from stylesight.constants import DEFAULT_MAX_DIMENSION, VALIDATION_THRESHOLD


def _env_flag(name: str, default: bool) -> bool:
    return os.getenv(name, str(default)).lower() in {"1", "true", "yes"}


@dataclass
class AnalyzerConfig:
    """Configuration class for the StyleSight garment analyzer."""

    # Pre-scaling
    max_dimension: int = DEFAULT_MAX_DIMENSION

    # Content gate
    content_validation: bool = True
    validation_threshold: int = VALIDATION_THRESHOLD

    # Failure policy
    fallback_on_failure: bool = False
    fallback_seed: Optional[int] = None

    # Logging Settings
    log_level: str = "INFO"
    log_format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

    def __post_init__(self):
        """Load overrides from environment variables."""
        self.max_dimension = int(os.getenv("MAX_IMAGE_DIMENSION", str(self.max_dimension)))

        self.content_validation = _env_flag("CONTENT_VALIDATION", self.content_validation)
        self.validation_threshold = int(os.getenv("VALIDATION_THRESHOLD", str(self.validation_threshold)))

        self.fallback_on_failure = _env_flag("FALLBACK_ON_FAILURE", self.fallback_on_failure)
        seed_env = os.getenv("FALLBACK_SEED")
        if seed_env and seed_env.strip():
            self.fallback_seed = int(seed_env)

        self.log_level = os.getenv("LOG_LEVEL", self.log_level)
        self.log_format = os.getenv("LOG_FORMAT", self.log_format)

    def validate(self) -> List[str]:
        """Validate configuration and return list of warnings."""
        warnings = []

        if self.max_dimension < 16:
            warnings.append("MAX_IMAGE_DIMENSION should be at least 16")

        if self.max_dimension > 4000:
            warnings.append("MAX_IMAGE_DIMENSION above 4000 makes analysis very slow")

        if not 0 <= self.validation_threshold <= 100:
            warnings.append("VALIDATION_THRESHOLD must be between 0 and 100")

        if self.fallback_seed is not None and not self.fallback_on_failure:
            warnings.append("FALLBACK_SEED has no effect while FALLBACK_ON_FAILURE is disabled")

        return warnings


def configure_logging(settings: "AnalyzerConfig") -> None:
    """Configure the root logger from the analyzer settings."""
    logging.basicConfig(
        level=getattr(logging, settings.log_level.upper(), logging.INFO),
        format=settings.log_format,
    )


# Global configuration instance
config = AnalyzerConfig()
