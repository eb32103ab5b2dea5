import math

import pytest

from stylesight.colors import ColorClassifier
from stylesight.edges import EdgeDetector
from stylesight.models import PixelBuffer
from stylesight.regions import REGION_SPECS, RegionAnalyzer, texture_complexity
from stylesight.sampler import PixelSampler
from tests.images import noise_array, solid_buffer


def reference_stats(buffer, region):
    """Per-pixel rendition of the region statistics."""
    classifier = ColorClassifier()
    detector = EdgeDetector()
    values, counts = [], {}
    edges = contours = 0

    for x, y in PixelSampler(buffer).coordinates(region, 2):
        r, g, b = buffer.rgb(x, y)
        values.append((r + g + b) / 3)
        if x < buffer.width - 2 and y < buffer.height - 2:
            magnitude = detector.sobel_magnitude(buffer, x, y)
            if magnitude > 30:
                edges += 1
                if magnitude > 60:
                    contours += 1
        name = classifier.classify(r, g, b)
        counts[name] = counts.get(name, 0) + 1

    n = len(values)
    average = sum(values) / n
    variance = sum((v - average) ** 2 for v in values) / n
    dominant = sorted(((k, c / n * 100) for k, c in counts.items()), key=lambda i: i[1], reverse=True)[:5]
    return average, edges / n, contours / n, variance, dominant


def test_regions_follow_declaration_order():
    regions = RegionAnalyzer().analyze(solid_buffer(20, 30, (0, 0, 0)))
    assert list(regions) == [spec.name for spec in REGION_SPECS]


def test_black_image_statistics():
    regions = RegionAnalyzer().analyze(solid_buffer(40, 60, (0, 0, 0)))
    for stats in regions.values():
        assert stats.average_brightness == 0
        assert stats.edge_density == 0
        assert stats.contours == 0
        assert stats.texture_complexity == 0
        assert stats.dominant_colors == (("black", 100.0),)


def test_region_geometry():
    regions = RegionAnalyzer().analyze(solid_buffer(100, 200, (0, 0, 0)))
    right = regions["right_side"]
    assert (right.x, right.y, right.width, right.height) == pytest.approx((80, 0, 20, 200))
    bottom = regions["bottom"]
    assert (bottom.y, bottom.height) == pytest.approx((140, 60))


def test_matches_per_pixel_reference():
    buffer = PixelBuffer.from_array(noise_array(23, 17, seed=11))
    analyzer = RegionAnalyzer()
    regions = analyzer.analyze(buffer)

    for spec in REGION_SPECS:
        stats = regions[spec.name]
        average, edge_density, contours, variance, dominant = reference_stats(
            buffer, spec.resolve(buffer.width, buffer.height)
        )
        assert stats.average_brightness == pytest.approx(average)
        assert stats.edge_density == pytest.approx(edge_density)
        assert stats.contours == pytest.approx(contours)
        assert stats.color_variance == pytest.approx(variance)
        assert [name for name, _ in stats.dominant_colors] == [name for name, _ in dominant]
        assert [pct for _, pct in stats.dominant_colors] == pytest.approx([pct for _, pct in dominant])


@pytest.mark.parametrize("seed", [0, 1, 2])
def test_statistics_stay_in_bounds(seed):
    buffer = PixelBuffer.from_array(noise_array(64, 48, seed=seed))
    for stats in RegionAnalyzer().analyze(buffer).values():
        assert 0 <= stats.edge_density <= 1
        assert 0 <= stats.contours <= stats.edge_density
        assert 0 <= stats.texture_complexity <= 100
        percentages = [pct for _, pct in stats.dominant_colors]
        assert len(percentages) <= 5
        assert percentages == sorted(percentages, reverse=True)
        assert sum(percentages) <= 100 + 1e-9


def test_degenerate_regions_use_defaults():
    regions = RegionAnalyzer().analyze(solid_buffer(1, 1, (0, 0, 0)))

    top = regions["top"]
    assert top.average_brightness == 128
    assert top.edge_density == 0
    assert top.dominant_colors == ()

    # The single pixel lies inside the bottom and right_side regions
    assert regions["bottom"].average_brightness == 0
    assert regions["right_side"].average_brightness == 0
    for stats in regions.values():
        assert all(math.isfinite(v) for v in (
            stats.average_brightness, stats.edge_density, stats.contours,
            stats.color_variance, stats.texture_complexity,
        ))


def test_texture_complexity_is_capped():
    assert texture_complexity(0, 0) == 0
    assert texture_complexity(100, 0.01) == pytest.approx(20)
    assert texture_complexity(5000, 0.5) == 100
