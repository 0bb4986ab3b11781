from dataclasses import dataclass, field
from typing import List, Optional, Sequence

from calibration import CalibrationData
from detectors import check_framing_quality
from pose_types import LandmarkFrame, ViewAngle

MAX_ITEMS = 3
GOOD_FORM_TOTAL = 70.0
RETURN_FASTER_TOTAL = 80.0
MIN_FRAME_COUNT = 50
MIN_FRAMING_SCORE = 60

GOOD_FORM = "feedback.strengths.goodForm"
RETURN_FASTER = "feedback.improvements.returnFaster"
LOW_FRAME_COUNT = "feedback.warnings.lowFrameCount"
POOR_FRAMING = "feedback.warnings.poorFraming"
SIDEWAYS_VIEW = "feedback.warnings.sidewaysView"


@dataclass(frozen=True)
class AxisRule:
    axis: str
    high: float
    low: float
    strength: str
    improvement: str


# Evaluated in this order.
AXIS_RULES = (
    AxisRule("guard", 20, 15, "feedback.strengths.goodGuard", "feedback.improvements.raiseGuard"),
    AxisRule("stability", 16, 10, "feedback.strengths.stableBase", "feedback.improvements.stayBalanced"),
    AxisRule("execution", 32, 20, "feedback.strengths.goodExtension", "feedback.improvements.extendMore"),
    AxisRule("timing", 12, 8, "feedback.strengths.goodTiming", "feedback.improvements.improveFlow"),
)


@dataclass
class Feedback:
    strengths: List[str] = field(default_factory=list)
    improvements: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)


def generate_feedback(
    subscores: dict,
    frames: Sequence[LandmarkFrame],
    calibration: Optional[CalibrationData] = None,
) -> Feedback:
    fb = Feedback()
    total = sum(subscores[rule.axis] for rule in AXIS_RULES)

    for rule in AXIS_RULES:
        score = subscores[rule.axis]
        if score >= rule.high:
            fb.strengths.append(rule.strength)
        elif score < rule.low:
            fb.improvements.append(rule.improvement)

    if total > GOOD_FORM_TOTAL:
        fb.strengths.append(GOOD_FORM)

    if len(frames) < MIN_FRAME_COUNT:
        fb.warnings.append(LOW_FRAME_COUNT)
    if frames and check_framing_quality(frames[-1].landmarks).overall_score < MIN_FRAMING_SCORE:
        fb.warnings.append(POOR_FRAMING)
    if calibration is not None and calibration.view_angle == ViewAngle.SIDE:
        fb.warnings.append(SIDEWAYS_VIEW)

    if not fb.strengths:
        fb.strengths.append(GOOD_FORM)
    if not fb.improvements and total < RETURN_FASTER_TOTAL:
        fb.improvements.append(RETURN_FASTER)

    return Feedback(
        strengths=fb.strengths[:MAX_ITEMS],
        improvements=fb.improvements[:MAX_ITEMS],
        warnings=fb.warnings[:MAX_ITEMS],
    )
