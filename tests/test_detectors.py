import pytest

from conftest import KNEE_POSE, PUNCH_POSE, build_landmarks
from detectors import (
    GuardDetector,
    KneeLiftDetector,
    PunchExtensionDetector,
    check_framing_quality,
    estimate_view_angle,
)
from pose_types import Landmark, LandmarkIndex as L, Side, ViewAngle


class TestGuard:
    def test_both_hands_up_at_optimal_height(self, guard_landmarks):
        state = GuardDetector().evaluate(guard_landmarks)
        assert state.left_up and state.right_up
        assert state.score == 100.0

    def test_hands_down(self):
        lm = build_landmarks({L.LEFT_WRIST: (0.58, 0.6), L.RIGHT_WRIST: (0.42, 0.6)})
        state = GuardDetector().evaluate(lm)
        assert not state.left_up and not state.right_up
        assert state.score == 0.0

    def test_glove_tolerance_widens_optimal_band(self):
        # Left hand up but low (0.13 from optimal), right hand dropped.
        lm = build_landmarks({L.LEFT_WRIST: (0.55, 0.28), L.RIGHT_WRIST: (0.42, 0.6)})
        detector = GuardDetector()
        assert detector.evaluate(lm, wearing_gloves=False).score == 50.0
        assert detector.evaluate(lm, wearing_gloves=True).score == 60.0

    def test_wrist_too_far_from_face(self):
        lm = build_landmarks({L.LEFT_WRIST: (0.85, 0.18)})
        state = GuardDetector().evaluate(lm)
        assert not state.left_up
        assert state.right_up


class TestStrikes:
    def test_punch_extension_per_side(self):
        lm = build_landmarks(PUNCH_POSE)
        detector = PunchExtensionDetector()
        left = detector.detect(lm, Side.LEFT)
        right = detector.detect(lm, Side.RIGHT)
        assert left.detected and left.value == pytest.approx(180.0)
        assert not right.detected
        assert detector.detect_any(lm)

    def test_guard_is_not_an_extension(self, guard_landmarks):
        assert not PunchExtensionDetector().detect_any(guard_landmarks)

    def test_knee_lift(self):
        lm = build_landmarks(KNEE_POSE)
        detector = KneeLiftDetector()
        left = detector.detect(lm, Side.LEFT)
        assert left.detected and left.value == pytest.approx(0.05)
        assert not detector.detect(lm, Side.RIGHT).detected

    def test_knee_level_with_hip_is_not_lifted(self):
        lm = build_landmarks({L.LEFT_KNEE: (0.57, 0.65)})
        assert not KneeLiftDetector().detect(lm, Side.LEFT).detected


class TestViewAngle:
    def test_front(self, guard_landmarks):
        assert estimate_view_angle(guard_landmarks) == ViewAngle.FRONT

    def test_narrow_shoulders_read_as_side(self):
        lm = build_landmarks({L.LEFT_SHOULDER: (0.51, 0.35), L.RIGHT_SHOULDER: (0.49, 0.35)})
        assert estimate_view_angle(lm) == ViewAngle.SIDE

    def test_depth_gap_reads_as_side(self):
        lm = build_landmarks({L.LEFT_SHOULDER: (0.6, 0.35, 0.3), L.RIGHT_SHOULDER: (0.4, 0.35, 0.0)})
        assert estimate_view_angle(lm) == ViewAngle.SIDE

    def test_three_quarter(self):
        lm = build_landmarks({L.LEFT_SHOULDER: (0.56, 0.35), L.RIGHT_SHOULDER: (0.44, 0.35)})
        assert estimate_view_angle(lm) == ViewAngle.THREE_QUARTER

    def test_zero_torso_does_not_divide(self):
        lm = build_landmarks({L.LEFT_HIP: (0.6, 0.35), L.RIGHT_HIP: (0.4, 0.35)})
        assert estimate_view_angle(lm) == ViewAngle.THREE_QUARTER


class TestFraming:
    def test_fully_visible(self, guard_landmarks):
        framing = check_framing_quality(guard_landmarks)
        assert framing.head_visible and framing.hips_visible and framing.ankles_visible
        assert framing.overall_score == 100

    def test_missing_ankles_and_one_hip(self):
        lm = build_landmarks()
        lm[L.LEFT_ANKLE] = Landmark(0.57, 0.95, 0.0, 0.1)
        lm[L.RIGHT_HIP] = Landmark(0.43, 0.65, 0.0, 0.3)
        framing = check_framing_quality(lm)
        assert framing.head_visible
        assert not framing.hips_visible
        assert not framing.ankles_visible
        assert framing.overall_score == 40

    def test_missing_visibility_counts_as_hidden(self):
        lm = [Landmark(0.5, 0.5) for _ in range(33)]
        assert check_framing_quality(lm).overall_score == 0
