from typing import Sequence

from detectors.base import MoveDetector, SideDetection
from geometry import elbow_angle
from pose_types import Landmark, Side


class PunchExtensionDetector(MoveDetector):
    name = "punch_extension"

    def __init__(self, min_elbow_angle: float = 155.0):
        self.min_elbow_angle = min_elbow_angle

    def detect(self, lm: Sequence[Landmark], side: Side) -> SideDetection:
        angle = elbow_angle(lm, side)
        return SideDetection(side=side, detected=angle >= self.min_elbow_angle, value=angle)


class KneeLiftDetector(MoveDetector):
    name = "knee_lift"

    def __init__(self, min_lift: float = 0.0):
        self.min_lift = min_lift

    def detect(self, lm: Sequence[Landmark], side: Side) -> SideDetection:
        # Image y grows downward, so a positive height means the knee is above the hip.
        height = lm[side.joint("hip")].y - lm[side.joint("knee")].y
        return SideDetection(side=side, detected=height > self.min_lift, value=height)
