import pytest

from stylesight.config import AnalyzerConfig

CONFIG_ENV_VARS = (
    "MAX_IMAGE_DIMENSION",
    "CONTENT_VALIDATION",
    "VALIDATION_THRESHOLD",
    "FALLBACK_ON_FAILURE",
    "FALLBACK_SEED",
    "LOG_LEVEL",
    "LOG_FORMAT",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in CONFIG_ENV_VARS:
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def settings():
    """No rescaling for test images up to 600px and no content gate."""
    return AnalyzerConfig(max_dimension=600, content_validation=False)
