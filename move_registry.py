from dataclasses import dataclass
from typing import Iterable, List, Mapping, Sequence, Tuple

from detectors import KneeLiftDetector, MoveDetector, PunchExtensionDetector

MAX_CHECK_CREDIT = 20


@dataclass(frozen=True)
class CreditBands:
    # Fraction of frames in (full_low, full_high) earns full credit,
    # above partial_min earns half.
    full_low: float
    full_high: float
    partial_min: float

    def credit(self, fraction: float) -> int:
        if self.full_low < fraction < self.full_high:
            return MAX_CHECK_CREDIT
        if fraction > self.partial_min:
            return MAX_CHECK_CREDIT // 2
        return 0


@dataclass
class MoveCheck:
    name: str
    move_types: Tuple[str, ...]
    detector: MoveDetector
    bands: CreditBands

    def applies_to(self, move_types: Iterable[str]) -> bool:
        return any(t in self.move_types for t in move_types)


def get_move_checks() -> List[MoveCheck]:
    # The punch and kick/knee bands differ; both are kept as found.
    return [
        MoveCheck(
            "punch",
            ("punch",),
            PunchExtensionDetector(min_elbow_angle=155.0),
            CreditBands(full_low=0.1, full_high=0.5, partial_min=0.05),
        ),
        MoveCheck(
            "knee_lift",
            ("kick", "knee"),
            KneeLiftDetector(),
            CreditBands(full_low=0.05, full_high=0.4, partial_min=0.02),
        ),
    ]


def move_types_from_combo(move_ids: Sequence[str], moves: Mapping[str, Mapping[str, str]]) -> List[str]:
    types: List[str] = []
    for move_id in move_ids:
        move = moves.get(move_id)
        if move is None:
            continue
        if move["type"] not in types:
            types.append(move["type"])
    return types
