from detectors.base import MoveDetector, SideDetection
from detectors.framing import DEFAULT_FRAMING, FramingQuality, check_framing_quality
from detectors.guard import GuardDetector, GuardState, GuardThresholds
from detectors.strikes import KneeLiftDetector, PunchExtensionDetector
from detectors.view_angle import estimate_view_angle

__all__ = [
    "MoveDetector",
    "SideDetection",
    "FramingQuality",
    "DEFAULT_FRAMING",
    "check_framing_quality",
    "GuardDetector",
    "GuardState",
    "GuardThresholds",
    "PunchExtensionDetector",
    "KneeLiftDetector",
    "estimate_view_angle",
]
