import random

import pytest

from stylesight.analyzer import (
    AnalysisStage,
    AnalyzerState,
    ClothingAnalyzer,
    analyze_clothing,
    create_clothing_analyzer,
    validate_clothing,
)
from stylesight.config import AnalyzerConfig
from stylesight.errors import AnalysisFailure, ClothingRejectedError, ImageDecodeError
from stylesight.fallback import FALLBACK_RECORDS, FallbackPolicy
from stylesight.models import PixelBuffer
from tests.images import landscape_lines_array, solid_array, solid_buffer, striped_band_array, to_png


@pytest.fixture
def analyzer(settings):
    return create_clothing_analyzer(settings)


def test_black_image(analyzer):
    features = analyzer.analyze(to_png(solid_array(400, 600, (0, 0, 0))))

    assert features.fit == "loose"
    assert features.confidence == 60
    assert "black" in features.colors
    assert features.is_fallback is False
    assert features.analysis_details.fabric_texture == "smooth"
    assert features.analysis_details.pattern_detected == "solid"
    for stats in analyzer.region_analyzer.analyze(solid_buffer(400, 600, (0, 0, 0))).values():
        assert stats.texture_complexity == 0
    assert analyzer.stage == AnalysisStage.DONE


def test_band_in_top_third(analyzer):
    array = striped_band_array()
    buffer = PixelBuffer.from_array(array)
    regions = analyzer.region_analyzer.analyze(buffer)
    assert regions["top"].edge_density > 0.2
    assert regions["top"].edge_density > regions["bottom"].edge_density * 10

    features = analyzer.analyze(to_png(array))
    assert features.analysis_details.garment_type == "top"
    assert features.neckline not in ("strapless", "crew neck", "not applicable")
    assert features.bottom_style == "not applicable"


def test_landscape_is_rejected_before_extraction(settings, monkeypatch):
    settings.content_validation = True
    analyzer = create_clothing_analyzer(settings)

    calls = []
    monkeypatch.setattr(analyzer.feature_extractor, "extract", lambda context: calls.append(context))

    with pytest.raises(ClothingRejectedError) as excinfo:
        analyzer.analyze(to_png(landscape_lines_array(600)))

    assert calls == []
    assert analyzer.stage == AnalysisStage.REJECTED
    assert excinfo.value.result.is_clothing is False
    assert excinfo.value.result.confidence < 75
    assert excinfo.value.suggestion
    assert excinfo.value.suggestion in str(excinfo.value)


def test_validate_override_per_call(analyzer):
    features = analyzer.analyze(to_png(landscape_lines_array(600)), validate=False)
    assert features.is_fallback is False
    with pytest.raises(ClothingRejectedError):
        analyzer.analyze(to_png(landscape_lines_array(600)), validate=True)


def test_validate_only(analyzer):
    result = analyzer.validate(to_png(landscape_lines_array(600)))
    assert result.is_clothing is False
    assert analyzer.stage == AnalysisStage.REJECTED


def test_same_image_twice_gives_identical_records(settings):
    image = to_png(striped_band_array())
    analyzer = create_clothing_analyzer(settings)
    first = analyzer.analyze(image)
    second = analyzer.analyze(image)
    assert first == second
    assert first.model_dump() == create_clothing_analyzer(settings).analyze(image).model_dump()


def test_decode_failure_is_not_masked(settings):
    settings.fallback_on_failure = True
    analyzer = create_clothing_analyzer(settings)
    with pytest.raises(ImageDecodeError, match="Failed to load image"):
        analyzer.analyze(b"\x89PNG but not really")
    assert analyzer.stage == AnalysisStage.FAILED


def test_empty_scaled_image_propagates_failure(analyzer):
    with pytest.raises(AnalysisFailure):
        analyzer.analyze(to_png(solid_array(1, 2000, (0, 0, 0))))
    assert analyzer.stage == AnalysisStage.FAILED


def test_empty_scaled_image_uses_fallback(settings):
    settings.fallback_on_failure = True
    features = create_clothing_analyzer(settings).analyze(to_png(solid_array(1, 2000, (0, 0, 0))))
    assert features == FALLBACK_RECORDS[0]
    assert features.is_fallback is True
    assert features.confidence == 40


def test_changing_a_fallback_record_does_not_leak(settings):
    settings.fallback_on_failure = True
    image = to_png(solid_array(1, 2000, (0, 0, 0)))

    first = create_clothing_analyzer(settings).analyze(image)
    first.colors.append("hot pink")
    second = create_clothing_analyzer(settings).analyze(image)

    assert second is not first
    assert second.colors == ["navy", "white"]
    assert FALLBACK_RECORDS[0].colors == ["navy", "white"]


def test_stage_belongs_to_each_analyzer(settings):
    busy = create_clothing_analyzer(settings)
    idle = create_clothing_analyzer(settings)

    with pytest.raises(AnalysisFailure):
        busy.analyze(to_png(solid_array(1, 2000, (0, 0, 0))))

    assert busy.stage == AnalysisStage.FAILED
    assert idle.stage == AnalysisStage.READY
    assert idle.analyze(to_png(solid_array(40, 60, (0, 0, 0)))).confidence == 60
    assert idle.stage == AnalysisStage.DONE
    assert busy.stage == AnalysisStage.FAILED


def test_internal_error_becomes_analysis_failure(analyzer, monkeypatch):
    def broken(buffer):
        raise RuntimeError("texture pass exploded")

    monkeypatch.setattr(analyzer.texture_analyzer, "analyze", broken)
    with pytest.raises(AnalysisFailure, match="texture pass exploded"):
        analyzer.analyze(to_png(solid_array(40, 40, (0, 0, 0))))


def test_zero_size_buffer(analyzer):
    with pytest.raises(AnalysisFailure):
        analyzer.analyze_pixels(PixelBuffer(0, 0, b""))


@pytest.mark.parametrize("width, height", [(1, 1), (2, 3), (3, 1)])
def test_tiny_buffers_are_analyzed(analyzer, width, height):
    features = analyzer.analyze_pixels(solid_buffer(width, height, (200, 30, 30)))
    assert 0 <= features.confidence <= 100
    assert features.is_fallback is False


def test_state_machine():
    analyzer = ClothingAnalyzer(AnalyzerConfig(content_validation=False))
    assert analyzer.state == AnalyzerState.UNINITIALIZED
    with pytest.raises(RuntimeError):
        analyzer.analyze(to_png(solid_array(4, 4, (0, 0, 0))))

    assert analyzer.initialize() is analyzer
    assert analyzer.state == AnalyzerState.READY
    assert analyzer.stage == AnalysisStage.READY
    assert analyzer.initialize() is analyzer


def test_module_helpers(settings):
    image = to_png(solid_array(40, 60, (0, 0, 0)))
    assert analyze_clothing(image, settings).confidence == 60
    assert validate_clothing(image, settings).is_clothing is False


def test_seeded_fallback_is_reproducible():
    picks = [FallbackPolicy(random.Random(3)).select() for _ in range(2)]
    assert picks[0] == picks[1]
    assert all(pick.is_fallback for pick in FALLBACK_RECORDS)
    assert all(pick.confidence < 60 for pick in FALLBACK_RECORDS)
    assert FallbackPolicy.from_seed(None).select() == FALLBACK_RECORDS[0]
