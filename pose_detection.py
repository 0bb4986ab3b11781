import logging
from typing import List, Optional

import cv2
import mediapipe as mp

from pose_types import NUM_LANDMARKS, Landmark
from settings import AnalysisQualityPreset, get_quality_preset

logger = logging.getLogger(__name__)


class PoseDetector:
    """MediaPipe Pose wrapper owned by the caller (one per session)."""

    def __init__(self, preset: Optional[AnalysisQualityPreset] = None):
        self.preset = preset or get_quality_preset()
        self._mp_pose = mp.solutions.pose
        self._pose = self._mp_pose.Pose(
            static_image_mode=False,
            model_complexity=self.preset.model_complexity,
            smooth_landmarks=True,
            min_detection_confidence=self.preset.min_detection_confidence,
            min_tracking_confidence=self.preset.min_tracking_confidence,
        )

    def detect(self, frame_bgr, timestamp: float) -> Optional[List[Landmark]]:
        # The caller guarantees strictly increasing timestamps; the solutions
        # API tracks by call order, so the value is only logged.
        frame_rgb = cv2.cvtColor(frame_bgr, cv2.COLOR_BGR2RGB)
        results = self._pose.process(frame_rgb)
        if results.pose_landmarks is None:
            logger.debug(f"No pose at t={timestamp:.0f}ms")
            return None

        points = results.pose_landmarks.landmark
        if len(points) != NUM_LANDMARKS:
            logger.warning(f"Detector returned {len(points)} landmarks, skipping frame")
            return None
        return [Landmark(lm.x, lm.y, lm.z, lm.visibility) for lm in points]

    def close(self) -> None:
        self._pose.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()
