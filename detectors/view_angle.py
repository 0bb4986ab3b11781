from typing import Sequence

from geometry import shoulder_width, torso_length
from pose_types import Landmark, LandmarkIndex, ViewAngle

FRONT_MIN_RATIO = 0.6
FRONT_MAX_Z_DIFF = 0.1
SIDE_MAX_RATIO = 0.3
SIDE_MIN_Z_DIFF = 0.2


def estimate_view_angle(lm: Sequence[Landmark]) -> ViewAngle:
    # Wide shoulders relative to the torso read as a frontal view.
    z_diff = abs((lm[LandmarkIndex.LEFT_SHOULDER].z or 0.0) - (lm[LandmarkIndex.RIGHT_SHOULDER].z or 0.0))
    torso = torso_length(lm)
    if torso <= 1e-9:
        return ViewAngle.SIDE if z_diff > SIDE_MIN_Z_DIFF else ViewAngle.THREE_QUARTER

    ratio = shoulder_width(lm) / torso
    if ratio > FRONT_MIN_RATIO and z_diff < FRONT_MAX_Z_DIFF:
        return ViewAngle.FRONT
    if ratio < SIDE_MAX_RATIO or z_diff > SIDE_MIN_Z_DIFF:
        return ViewAngle.SIDE
    return ViewAngle.THREE_QUARTER
