from typing import Dict, Iterable, List, Optional, Tuple

import pytest

from pose_types import NUM_LANDMARKS, Landmark, LandmarkFrame, LandmarkIndex as L

# Front-facing fighter in a high guard, image coordinates (y grows downward).
GUARD_POSE: Dict[L, Tuple[float, float]] = {
    L.NOSE: (0.5, 0.2),
    L.LEFT_SHOULDER: (0.6, 0.35),
    L.RIGHT_SHOULDER: (0.4, 0.35),
    L.LEFT_ELBOW: (0.65, 0.3),
    L.RIGHT_ELBOW: (0.35, 0.3),
    L.LEFT_WRIST: (0.55, 0.18),
    L.RIGHT_WRIST: (0.45, 0.18),
    L.LEFT_HIP: (0.57, 0.65),
    L.RIGHT_HIP: (0.43, 0.65),
    L.LEFT_KNEE: (0.57, 0.8),
    L.RIGHT_KNEE: (0.43, 0.8),
    L.LEFT_ANKLE: (0.57, 0.95),
    L.RIGHT_ANKLE: (0.43, 0.95),
}


def build_landmarks(
    overrides: Optional[Dict[L, Tuple[float, ...]]] = None,
    visibility: float = 0.9,
    dx: float = 0.0,
) -> List[Landmark]:
    points = dict(GUARD_POSE)
    points.update(overrides or {})
    landmarks = []
    for i in range(NUM_LANDMARKS):
        x, y, *rest = points.get(L(i), (0.5, 0.5))
        z = rest[0] if rest else 0.0
        landmarks.append(Landmark(x + dx, y, z, visibility))
    return landmarks


def build_frames(poses: Iterable[List[Landmark]], interval_ms: float = 100.0) -> List[LandmarkFrame]:
    return [LandmarkFrame(i * interval_ms, tuple(lm)) for i, lm in enumerate(poses)]


# Left arm fully extended to the side.
PUNCH_POSE = {L.LEFT_ELBOW: (0.7, 0.35), L.LEFT_WRIST: (0.8, 0.35)}
# Left knee raised above the hip.
KNEE_POSE = {L.LEFT_KNEE: (0.57, 0.6), L.LEFT_ANKLE: (0.6, 0.75)}


@pytest.fixture
def guard_landmarks():
    return build_landmarks()


@pytest.fixture
def static_frames():
    return build_frames(build_landmarks() for _ in range(60))
