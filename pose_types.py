from dataclasses import dataclass
from enum import Enum, IntEnum
from typing import Optional, Sequence, Tuple

NUM_LANDMARKS = 33


class LandmarkIndex(IntEnum):
    NOSE = 0
    LEFT_EYE_INNER = 1
    LEFT_EYE = 2
    LEFT_EYE_OUTER = 3
    RIGHT_EYE_INNER = 4
    RIGHT_EYE = 5
    RIGHT_EYE_OUTER = 6
    LEFT_EAR = 7
    RIGHT_EAR = 8
    MOUTH_LEFT = 9
    MOUTH_RIGHT = 10
    LEFT_SHOULDER = 11
    RIGHT_SHOULDER = 12
    LEFT_ELBOW = 13
    RIGHT_ELBOW = 14
    LEFT_WRIST = 15
    RIGHT_WRIST = 16
    LEFT_PINKY = 17
    RIGHT_PINKY = 18
    LEFT_INDEX = 19
    RIGHT_INDEX = 20
    LEFT_THUMB = 21
    RIGHT_THUMB = 22
    LEFT_HIP = 23
    RIGHT_HIP = 24
    LEFT_KNEE = 25
    RIGHT_KNEE = 26
    LEFT_ANKLE = 27
    RIGHT_ANKLE = 28
    LEFT_HEEL = 29
    RIGHT_HEEL = 30
    LEFT_FOOT_INDEX = 31
    RIGHT_FOOT_INDEX = 32


class Side(Enum):
    LEFT = "left"
    RIGHT = "right"

    def joint(self, name: str) -> LandmarkIndex:
        # e.g. Side.LEFT.joint("wrist") -> LandmarkIndex.LEFT_WRIST
        return LandmarkIndex[f"{self.name}_{name.upper()}"]


class ViewAngle(str, Enum):
    FRONT = "front"
    THREE_QUARTER = "three-quarter"
    SIDE = "side"


class Stance(str, Enum):
    ORTHODOX = "orthodox"
    SOUTHPAW = "southpaw"

    @property
    def lead_side(self) -> Side:
        return Side.LEFT if self is Stance.ORTHODOX else Side.RIGHT

    @property
    def rear_side(self) -> Side:
        return Side.RIGHT if self is Stance.ORTHODOX else Side.LEFT


@dataclass(frozen=True)
class Landmark:
    x: float
    y: float
    z: float = 0.0
    visibility: Optional[float] = None


@dataclass(frozen=True)
class LandmarkFrame:
    timestamp: float
    landmarks: Tuple[Landmark, ...]

    def __post_init__(self):
        if len(self.landmarks) != NUM_LANDMARKS:
            raise ValueError(
                f"Expected {NUM_LANDMARKS} landmarks per frame, got {len(self.landmarks)}"
            )
        if not isinstance(self.landmarks, tuple):
            object.__setattr__(self, "landmarks", tuple(self.landmarks))


def make_frame(timestamp: float, landmarks: Sequence[Landmark]) -> LandmarkFrame:
    return LandmarkFrame(timestamp=float(timestamp), landmarks=tuple(landmarks))
