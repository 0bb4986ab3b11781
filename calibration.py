import logging
import time
from dataclasses import dataclass, replace
from enum import Enum
from typing import Optional

from detectors import DEFAULT_FRAMING, FramingQuality, check_framing_quality, estimate_view_angle
from geometry import shoulder_width
from pose_types import LandmarkFrame, LandmarkIndex, Stance, ViewAngle
from stability import StabilityBuffer

logger = logging.getLogger(__name__)

CALIBRATION_VERSION = 1
HOLD_DURATION_MS = 3000.0
STABILITY_THRESHOLD = 0.02


class CalibrationNotReady(RuntimeError):
    pass


class CalibrationStep(str, Enum):
    DETECTING = "detecting"
    HOLDING = "holding"
    CONFIRM = "confirm"


@dataclass(frozen=True)
class CalibrationData:
    version: int
    timestamp: float
    view_angle: ViewAngle
    stance: Stance
    wearing_gloves: bool
    baseline_scale: float
    baseline_guard_height: float
    framing_quality: FramingQuality

    def with_stance(self, stance: Stance) -> "CalibrationData":
        return replace(self, stance=Stance(stance))

    def with_gloves(self, wearing_gloves: bool) -> "CalibrationData":
        return replace(self, wearing_gloves=bool(wearing_gloves))

    def to_dict(self) -> dict:
        return {
            "version": self.version,
            "timestamp": self.timestamp,
            "view_angle": self.view_angle.value,
            "stance": self.stance.value,
            "wearing_gloves": self.wearing_gloves,
            "baseline_scale": self.baseline_scale,
            "baseline_guard_height": self.baseline_guard_height,
            "framing_quality": self.framing_quality.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: dict) -> "CalibrationData":
        return cls(
            version=int(data.get("version", CALIBRATION_VERSION)),
            timestamp=float(data["timestamp"]),
            view_angle=ViewAngle(data["view_angle"]),
            stance=Stance(data["stance"]),
            wearing_gloves=bool(data["wearing_gloves"]),
            baseline_scale=float(data["baseline_scale"]),
            baseline_guard_height=float(data["baseline_guard_height"]),
            framing_quality=FramingQuality.from_dict(data["framing_quality"]),
        )


@dataclass(frozen=True)
class CalibrationStatus:
    step: CalibrationStep
    hold_progress: float
    view_angle: ViewAngle
    framing: Optional[FramingQuality]
    variance: float


class Calibrator:
    """Waits for the user to stand still, then captures a baseline pose.

    Driven by one tick per captured frame; the frame timestamp (ms) is the
    clock, so replaying the same frames always gives the same result.
    """

    def __init__(
        self,
        hold_ms: float = HOLD_DURATION_MS,
        stability_threshold: float = STABILITY_THRESHOLD,
        window: int = 30,
        min_samples: int = 10,
    ):
        self.hold_ms = hold_ms
        self._buffer = StabilityBuffer(maxlen=window, min_samples=min_samples, threshold=stability_threshold)
        self.reset()

    def reset(self) -> None:
        self.step = CalibrationStep.DETECTING
        self.hold_progress = 0.0
        self._buffer.clear()
        self._hold_start: Optional[float] = None
        self._view_angle = ViewAngle.FRONT
        self._framing: Optional[FramingQuality] = None
        self._baseline_scale = 0.0
        self._baseline_guard_height = 0.0

    @property
    def status(self) -> CalibrationStatus:
        return CalibrationStatus(
            step=self.step,
            hold_progress=self.hold_progress,
            view_angle=self._view_angle,
            framing=self._framing,
            variance=self._buffer.variance(),
        )

    def tick(self, frame: Optional[LandmarkFrame]) -> CalibrationStatus:
        if frame is None or self.step == CalibrationStep.CONFIRM:
            return self.status

        lm = frame.landmarks
        self._framing = check_framing_quality(lm)
        self._view_angle = estimate_view_angle(lm)
        self._buffer.push(shoulder_width(lm))

        if not self._buffer.is_ready:
            return self.status

        stable = self._buffer.variance() < self._buffer.threshold
        if stable and self.step == CalibrationStep.DETECTING:
            self.step = CalibrationStep.HOLDING
            self._hold_start = frame.timestamp
            logger.info(f"Calibration holding at t={frame.timestamp:.0f}ms")
        elif stable and self.step == CalibrationStep.HOLDING:
            elapsed = frame.timestamp - self._hold_start
            self.hold_progress = min(100.0, elapsed / self.hold_ms * 100.0)
            if elapsed >= self.hold_ms:
                self._capture(frame)
        elif not stable and self.step == CalibrationStep.HOLDING:
            self.step = CalibrationStep.DETECTING
            self.hold_progress = 0.0
            self._hold_start = None
            logger.info("Calibration lost stability, back to detecting")

        return self.status

    def _capture(self, frame: LandmarkFrame) -> None:
        lm = frame.landmarks
        mean_wrist_y = (lm[LandmarkIndex.LEFT_WRIST].y + lm[LandmarkIndex.RIGHT_WRIST].y) / 2.0
        self._baseline_scale = self._buffer.mean()
        self._baseline_guard_height = lm[LandmarkIndex.NOSE].y - mean_wrist_y
        self.step = CalibrationStep.CONFIRM
        logger.info(
            f"Calibration captured: scale={self._baseline_scale:.4f} "
            f"guard={self._baseline_guard_height:.4f} view={self._view_angle.value}"
        )

    def build_calibration(
        self,
        stance: Stance = Stance.ORTHODOX,
        wearing_gloves: bool = False,
        view_angle: Optional[ViewAngle] = None,
        timestamp: Optional[float] = None,
    ) -> CalibrationData:
        if self.step != CalibrationStep.CONFIRM:
            raise CalibrationNotReady(f"Calibration is still {self.step.value}")
        return CalibrationData(
            version=CALIBRATION_VERSION,
            timestamp=timestamp if timestamp is not None else time.time() * 1000.0,
            view_angle=ViewAngle(view_angle) if view_angle is not None else self._view_angle,
            stance=Stance(stance),
            wearing_gloves=wearing_gloves,
            baseline_scale=self._baseline_scale,
            baseline_guard_height=self._baseline_guard_height,
            framing_quality=self._framing or DEFAULT_FRAMING,
        )
