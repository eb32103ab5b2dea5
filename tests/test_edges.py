import numpy as np
import pytest

from stylesight.edges import ContourTracer, EdgeDetector
from stylesight.models import PixelBuffer
from tests.images import noise_array, solid_array, solid_buffer


@pytest.fixture
def detector():
    return EdgeDetector()


def step_buffer(width=10, height=10):
    array = solid_array(width, height, (0, 0, 0))
    array[:, width // 2:] = (255, 255, 255)
    return PixelBuffer.from_array(array)


def test_uniform_interior_has_zero_magnitude(detector):
    buffer = solid_buffer(10, 10, (100, 100, 100))
    for y in range(1, 9):
        for x in range(1, 9):
            assert detector.sobel_magnitude(buffer, x, y) == 0
    assert not detector.edge_map(buffer).any()


def test_step_edge_reaches_kernel_maximum(detector):
    buffer = step_buffer()
    assert detector.sobel_magnitude(buffer, 4, 5) == pytest.approx(1020)
    assert detector.sobel_magnitude(buffer, 5, 5) == pytest.approx(1020)
    assert detector.sobel_magnitude(buffer, 2, 5) == 0


def test_border_neighbors_count_as_zero(detector):
    buffer = solid_buffer(5, 5, (90, 90, 90))
    # Left column of the kernel falls outside: gx = 90 * (1 + 2 + 1)
    assert detector.sobel_magnitude(buffer, 0, 2) == pytest.approx(360)


def test_vectorized_gradients_match_scalar(detector):
    buffer = PixelBuffer.from_array(noise_array(9, 7, seed=3))
    _, _, magnitude = detector.gradients(buffer)
    for y in range(buffer.height):
        for x in range(buffer.width):
            assert magnitude[y, x] == pytest.approx(detector.sobel_magnitude(buffer, x, y))


def test_edge_map_zero_on_border(detector):
    edge_map = detector.edge_map(PixelBuffer.from_array(noise_array(8, 6, seed=1)))
    assert not edge_map[0].any() and not edge_map[-1].any()
    assert not edge_map[:, 0].any() and not edge_map[:, -1].any()


def test_detect_uniform_image(detector):
    edges = detector.detect(solid_buffer(20, 20, (50, 50, 50)))
    assert edges.strength == 0
    assert edges.contour_count == 0


def test_detect_step_edge(detector):
    edges = detector.detect(step_buffer(30, 30))
    assert edges.strength == pytest.approx(1020)
    # Two strong columns of 28 interior pixels each, traced as one connected contour
    assert edges.contour_count == 1
    assert len(edges.contours[0]) == 56


def test_trace_contour_follows_line():
    edge_map = np.zeros((5, 20))
    edge_map[2, 2:17] = 100
    visited = [[False] * 20 for _ in range(5)]
    contour = ContourTracer().trace_contour(edge_map, visited, 2, 2)
    assert len(contour) == 15
    assert contour[0] == (2, 2)
    assert all(visited[2][x] for x in range(2, 17))


def test_contour_length_is_capped():
    edge_map = np.full((32, 32), 100.0)
    contours = ContourTracer().find_contours(edge_map)
    assert contours
    assert len(contours[0]) == 100
    assert all(len(c) <= 100 for c in contours)


def test_short_contours_are_dropped():
    edge_map = np.zeros((10, 10))
    edge_map[4, 2:5] = 100
    assert ContourTracer().find_contours(edge_map) == []

    edge_map = np.zeros((10, 20))
    edge_map[4, 2:12] = 100  # exactly 10 points
    assert ContourTracer().find_contours(edge_map) == []
    edge_map[4, 12] = 100
    assert [len(c) for c in ContourTracer().find_contours(edge_map)] == [11]


def test_contours_need_a_seed_above_threshold():
    edge_map = np.zeros((10, 30))
    edge_map[4, 2:25] = 45  # strong enough to join, too weak to seed
    assert ContourTracer().find_contours(edge_map) == []

    edge_map[4, 10] = 55
    assert [len(c) for c in ContourTracer().find_contours(edge_map)] == [23]
