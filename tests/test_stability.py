import pytest

from conftest import build_landmarks
from pose_types import LandmarkIndex as L
from stability import StabilityBuffer, positional_stability, stability_from_variance


def test_empty_buffer_is_neutral():
    buffer = StabilityBuffer()
    assert buffer.mean() == 0.0
    assert buffer.variance() == 0.0
    assert not buffer.is_ready
    assert not buffer.is_stable()


def test_needs_min_samples_before_stable():
    buffer = StabilityBuffer(min_samples=10, threshold=0.02)
    buffer.extend([0.25] * 9)
    assert not buffer.is_stable()
    buffer.push(0.25)
    assert buffer.is_stable()
    assert buffer.mean() == pytest.approx(0.25)


def test_window_drops_oldest_samples():
    buffer = StabilityBuffer(maxlen=30)
    buffer.extend([5.0] * 10 + [1.0] * 30)
    assert len(buffer) == 30
    assert buffer.mean() == pytest.approx(1.0)
    assert buffer.variance() == pytest.approx(0.0)


def test_population_variance():
    buffer = StabilityBuffer()
    buffer.extend([1.0, 2.0, 3.0, 4.0])
    assert buffer.variance() == pytest.approx(1.25)


def test_2d_variance_sums_axes():
    buffer = StabilityBuffer(maxlen=None)
    buffer.extend([(0.0, 0.0), (0.2, 0.0), (0.0, 0.2), (0.2, 0.2)])
    assert buffer.variance() == pytest.approx(0.01 + 0.01)
    assert list(buffer.centroid()) == pytest.approx([0.1, 0.1])


def test_variance_to_score_is_clamped_and_monotonic():
    variances = [0.0, 0.001, 0.005, 0.01, 0.015, 0.02, 0.05, 1.0]
    scores = [stability_from_variance(v) for v in variances]
    assert scores[0] == 100.0
    assert scores[3] == pytest.approx(50.0)
    assert scores[-1] == 0.0
    assert all(a >= b for a, b in zip(scores, scores[1:]))


def test_positional_stability_of_still_and_swaying_hips():
    still = [build_landmarks() for _ in range(20)]
    assert positional_stability(still) == pytest.approx(100.0)

    swaying = [
        build_landmarks({L.LEFT_HIP: (0.57 + 0.1 * (i % 2), 0.65), L.RIGHT_HIP: (0.43 + 0.1 * (i % 2), 0.65)})
        for i in range(20)
    ]
    # Hip center alternates 0.5 / 0.6 in x: variance 0.0025.
    assert positional_stability(swaying) == pytest.approx(87.5)


def test_positional_stability_needs_two_frames():
    assert positional_stability([]) == 100.0
    assert positional_stability([build_landmarks()]) == 100.0
