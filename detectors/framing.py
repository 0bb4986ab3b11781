from dataclasses import asdict, dataclass
from typing import Sequence

from pose_types import Landmark, LandmarkIndex

VISIBILITY_THRESHOLD = 0.3


@dataclass(frozen=True)
class FramingQuality:
    head_visible: bool
    hips_visible: bool
    ankles_visible: bool
    overall_score: int

    def to_dict(self) -> dict:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict) -> "FramingQuality":
        return cls(
            head_visible=bool(data["head_visible"]),
            hips_visible=bool(data["hips_visible"]),
            ankles_visible=bool(data["ankles_visible"]),
            overall_score=int(data["overall_score"]),
        )


# Used when calibration confirms without ever assessing a frame.
DEFAULT_FRAMING = FramingQuality(head_visible=True, hips_visible=True, ankles_visible=False, overall_score=80)


def _visible(lm: Landmark, threshold: float) -> bool:
    return (lm.visibility or 0.0) > threshold


def check_framing_quality(lm: Sequence[Landmark], threshold: float = VISIBILITY_THRESHOLD) -> FramingQuality:
    head = _visible(lm[LandmarkIndex.NOSE], threshold)
    hips = _visible(lm[LandmarkIndex.LEFT_HIP], threshold) and _visible(lm[LandmarkIndex.RIGHT_HIP], threshold)
    ankles = _visible(lm[LandmarkIndex.LEFT_ANKLE], threshold) and _visible(
        lm[LandmarkIndex.RIGHT_ANKLE], threshold
    )

    score = 0
    if head:
        score += 40
    if hips:
        score += 40
    if ankles:
        score += 20
    return FramingQuality(head_visible=head, hips_visible=hips, ankles_visible=ankles, overall_score=score)
