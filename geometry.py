import math
from typing import Sequence, Tuple

from pose_types import Landmark, LandmarkIndex, Side

Landmarks = Sequence[Landmark]


def distance_2d(a: Landmark, b: Landmark) -> float:
    return math.hypot(a.x - b.x, a.y - b.y)


def angle_degrees(a: Landmark, b: Landmark, c: Landmark) -> float:
    # Angle at b between rays b->a and b->c, folded into [0, 180].
    radians = math.atan2(c.y - b.y, c.x - b.x) - math.atan2(a.y - b.y, a.x - b.x)
    angle = abs(math.degrees(radians))
    if angle > 180.0:
        angle = 360.0 - angle
    return angle


def midpoint(a: Landmark, b: Landmark) -> Tuple[float, float]:
    return (a.x + b.x) / 2.0, (a.y + b.y) / 2.0


def shoulder_width(lm: Landmarks) -> float:
    return distance_2d(lm[LandmarkIndex.LEFT_SHOULDER], lm[LandmarkIndex.RIGHT_SHOULDER])


def hip_width(lm: Landmarks) -> float:
    return distance_2d(lm[LandmarkIndex.LEFT_HIP], lm[LandmarkIndex.RIGHT_HIP])


def hip_center(lm: Landmarks) -> Tuple[float, float]:
    return midpoint(lm[LandmarkIndex.LEFT_HIP], lm[LandmarkIndex.RIGHT_HIP])


def torso_length(lm: Landmarks) -> float:
    sx, sy = midpoint(lm[LandmarkIndex.LEFT_SHOULDER], lm[LandmarkIndex.RIGHT_SHOULDER])
    hx, hy = hip_center(lm)
    return math.hypot(sx - hx, sy - hy)


def elbow_angle(lm: Landmarks, side: Side) -> float:
    return angle_degrees(lm[side.joint("shoulder")], lm[side.joint("elbow")], lm[side.joint("wrist")])


def knee_angle(lm: Landmarks, side: Side) -> float:
    return angle_degrees(lm[side.joint("hip")], lm[side.joint("knee")], lm[side.joint("ankle")])
