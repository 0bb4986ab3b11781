import itertools

import pytest

from conftest import build_landmarks
from geometry import (
    angle_degrees,
    distance_2d,
    elbow_angle,
    hip_center,
    hip_width,
    knee_angle,
    shoulder_width,
    torso_length,
)
from pose_types import Landmark, LandmarkIndex as L, Side


def test_distance_ignores_depth():
    assert distance_2d(Landmark(0, 0, 5.0), Landmark(3, 4, -2.0)) == pytest.approx(5.0)


def test_right_and_straight_angles():
    vertex = Landmark(0, 0)
    assert angle_degrees(Landmark(1, 0), vertex, Landmark(0, 1)) == pytest.approx(90.0)
    assert angle_degrees(Landmark(-1, 0), vertex, Landmark(1, 0)) == pytest.approx(180.0)


def test_reflex_angle_is_folded():
    # Raw atan2 difference here is -270 degrees.
    vertex = Landmark(0, 0)
    assert angle_degrees(Landmark(-1, 0), vertex, Landmark(0, -1)) == pytest.approx(90.0)


def test_angle_bounded_and_symmetric():
    coords = [-1.0, -0.3, 0.0, 0.4, 1.0]
    points = [Landmark(x, y) for x, y in itertools.product(coords, coords)]
    vertex = Landmark(0.1, -0.2)
    for a, c in itertools.product(points[::3], points[1::3]):
        forward = angle_degrees(a, vertex, c)
        backward = angle_degrees(c, vertex, a)
        assert 0.0 <= forward <= 180.0
        assert forward == pytest.approx(backward)


def test_body_measurements(guard_landmarks):
    assert shoulder_width(guard_landmarks) == pytest.approx(0.2)
    assert hip_width(guard_landmarks) == pytest.approx(0.14)
    assert torso_length(guard_landmarks) == pytest.approx(0.3)
    assert hip_center(guard_landmarks) == pytest.approx((0.5, 0.65))


def test_side_selection_mirrors():
    lm = build_landmarks({L.LEFT_ELBOW: (0.7, 0.35), L.LEFT_WRIST: (0.8, 0.35)})
    assert elbow_angle(lm, Side.LEFT) == pytest.approx(180.0)
    assert elbow_angle(lm, Side.RIGHT) < 155.0
    assert knee_angle(lm, Side.LEFT) == pytest.approx(180.0)
    assert knee_angle(lm, Side.RIGHT) == pytest.approx(180.0)
