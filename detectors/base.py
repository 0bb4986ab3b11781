from dataclasses import dataclass
from typing import Sequence

from pose_types import Landmark, Side


@dataclass(frozen=True)
class SideDetection:
    side: Side
    detected: bool
    value: float


class MoveDetector:
    name = "base"

    def detect(self, lm: Sequence[Landmark], side: Side) -> SideDetection:
        raise NotImplementedError

    def detect_any(self, lm: Sequence[Landmark]) -> bool:
        return any(self.detect(lm, side).detected for side in Side)
