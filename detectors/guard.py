from dataclasses import dataclass
from typing import Optional, Sequence

from pose_types import Landmark, LandmarkIndex, Side


@dataclass(frozen=True)
class GuardState:
    score: float
    left_up: bool
    right_up: bool


@dataclass
class GuardThresholds:
    chin_margin: float = 0.1
    max_horizontal_offset: float = 0.3
    optimal_offset: float = 0.05
    bare_tolerance: float = 0.10
    gloved_tolerance: float = 0.15


class GuardDetector:
    def __init__(self, thresholds: Optional[GuardThresholds] = None):
        self.thresholds = thresholds or GuardThresholds()

    def _wrist_up(self, lm: Sequence[Landmark], side: Side) -> bool:
        t = self.thresholds
        nose = lm[LandmarkIndex.NOSE]
        wrist = lm[side.joint("wrist")]
        mid_chest_y = (lm[LandmarkIndex.LEFT_SHOULDER].y + lm[LandmarkIndex.RIGHT_SHOULDER].y) / 2.0
        return (
            wrist.y < mid_chest_y
            and wrist.y < nose.y + t.chin_margin
            and abs(wrist.x - nose.x) < t.max_horizontal_offset
        )

    def evaluate(self, lm: Sequence[Landmark], wearing_gloves: bool = False) -> GuardState:
        t = self.thresholds
        tolerance = t.gloved_tolerance if wearing_gloves else t.bare_tolerance
        optimal_y = lm[LandmarkIndex.NOSE].y - t.optimal_offset

        score = 0.0
        up = {}
        for side in Side:
            up[side] = self._wrist_up(lm, side)
            if not up[side]:
                continue
            score += 50.0
            if abs(lm[side.joint("wrist")].y - optimal_y) < tolerance:
                score += 10.0

        return GuardState(score=min(100.0, score), left_up=up[Side.LEFT], right_up=up[Side.RIGHT])
