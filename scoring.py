import logging
import math
from dataclasses import dataclass, field
from typing import FrozenSet, Iterable, List, Optional, Sequence, Tuple

import numpy as np

from calibration import CalibrationData
from detectors import GuardDetector
from feedback import generate_feedback
from move_registry import MAX_CHECK_CREDIT, MoveCheck, get_move_checks
from pose_types import Landmark, LandmarkFrame
from stability import positional_stability

logger = logging.getLogger(__name__)

GUARD_MAX = 25.0
STABILITY_MAX = 20.0
EXECUTION_MAX = 40.0
TIMING_MAX = 15.0

MIN_FRAMES = 5
GUARD_SAMPLES = 20
STABILITY_DEFAULT = 10.0
EXECUTION_DEFAULT = 20.0
EXECUTION_NO_CHECKS = 25.0
TIMING_DEFAULT = 8.0

# (mean low, mean high, variance max) for the timing bands.
TIMING_SMOOTH = (0.01, 0.2, 0.01)
TIMING_ACTIVE = (0.005, 0.02)


@dataclass(frozen=True)
class ScoringContext:
    calibration: Optional[CalibrationData] = None
    move_types: FrozenSet[str] = field(default_factory=frozenset)

    def __post_init__(self):
        move_types = self.move_types
        if isinstance(move_types, str):
            move_types = (move_types,)
        object.__setattr__(self, "move_types", frozenset(move_types))


@dataclass(frozen=True)
class SessionScore:
    overall: int
    guard: int
    stability: int
    execution: int
    timing: int
    strengths: Tuple[str, ...] = ()
    improvements: Tuple[str, ...] = ()
    warnings: Tuple[str, ...] = ()


@dataclass(frozen=True)
class AnalysisResult:
    frame_count: int
    duration: float
    score: SessionScore
    frames: Tuple[LandmarkFrame, ...]


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def guard_subscore(
    frames: Sequence[Sequence[Landmark]],
    calibration: Optional[CalibrationData] = None,
    detector: Optional[GuardDetector] = None,
) -> float:
    if not frames:
        return 0.0
    detector = detector or GuardDetector()
    gloves = calibration.wearing_gloves if calibration is not None else False

    step = max(1, len(frames) // min(GUARD_SAMPLES, len(frames)))
    scores = [detector.evaluate(frames[i], wearing_gloves=gloves).score for i in range(0, len(frames), step)]
    return float(np.mean(scores)) / 100.0 * GUARD_MAX


def stability_subscore(frames: Sequence[Sequence[Landmark]]) -> float:
    if len(frames) < MIN_FRAMES:
        return STABILITY_DEFAULT
    return positional_stability(frames) / 100.0 * STABILITY_MAX


def execution_subscore(
    frames: Sequence[Sequence[Landmark]],
    move_types: Iterable[str],
    checks: Optional[List[MoveCheck]] = None,
) -> float:
    if len(frames) < MIN_FRAMES:
        return EXECUTION_DEFAULT
    move_types = {move_types} if isinstance(move_types, str) else set(move_types)
    if checks is None:
        checks = get_move_checks()
    active = [c for c in checks if c.applies_to(move_types)]
    if not active:
        return EXECUTION_NO_CHECKS

    credit = 0
    for check in active:
        hits = sum(1 for lm in frames if check.detector.detect_any(lm))
        fraction = hits / len(frames)
        earned = check.bands.credit(fraction)
        logger.debug(f"Execution check {check.name}: fraction={fraction:.3f} credit={earned}")
        credit += earned
    return min(EXECUTION_MAX, credit / (len(active) * MAX_CHECK_CREDIT) * EXECUTION_MAX)


def movement_series(frames: Sequence[Sequence[Landmark]]) -> np.ndarray:
    # Total 2D displacement of all landmarks between consecutive frames.
    if len(frames) < 2:
        return np.zeros(0)
    points = np.array([[(p.x, p.y) for p in lm] for lm in frames], dtype=float)
    deltas = np.diff(points, axis=0)
    return np.linalg.norm(deltas, axis=2).sum(axis=1)


def timing_subscore(frames: Sequence[Sequence[Landmark]]) -> float:
    if len(frames) < MIN_FRAMES:
        return TIMING_DEFAULT
    movements = movement_series(frames)
    mean = float(movements.mean())
    variance = float(movements.var())

    smooth_low, smooth_high, smooth_var = TIMING_SMOOTH
    active_min, active_var = TIMING_ACTIVE
    if smooth_low < mean < smooth_high and variance < smooth_var:
        return 15.0
    if mean > active_min and variance < active_var:
        return 10.0
    return 5.0


def generate_score(frames: Sequence[LandmarkFrame], context: Optional[ScoringContext] = None) -> AnalysisResult:
    context = context or ScoringContext()
    frames = tuple(frames)
    landmarks = [f.landmarks for f in frames]
    duration = frames[-1].timestamp if frames else 0.0

    subscores = {
        "guard": guard_subscore(landmarks, context.calibration),
        "stability": stability_subscore(landmarks),
        "execution": execution_subscore(landmarks, context.move_types),
        "timing": timing_subscore(landmarks),
    }
    logger.debug(f"Subscores for {len(frames)} frames: {subscores}")

    overall = min(100, round_half_up(sum(subscores.values())))
    feedback = generate_feedback(subscores, frames, context.calibration)

    score = SessionScore(
        overall=overall,
        guard=round_half_up(subscores["guard"]),
        stability=round_half_up(subscores["stability"]),
        execution=round_half_up(subscores["execution"]),
        timing=round_half_up(subscores["timing"]),
        strengths=tuple(feedback.strengths),
        improvements=tuple(feedback.improvements),
        warnings=tuple(feedback.warnings),
    )
    return AnalysisResult(frame_count=len(frames), duration=duration, score=score, frames=frames)
