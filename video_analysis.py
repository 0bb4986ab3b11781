"""
Recorded-attempt driver: samples a video at the preset fps, runs the pose
detector on each sample and collects the frames that had a pose.
"""
import logging
import math
from typing import Callable, Iterable, List, Optional, Sequence

import cv2

from pose_types import LandmarkFrame, make_frame
from scoring import AnalysisResult, ScoringContext, generate_score
from settings import AnalysisQualityPreset, get_quality_preset

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[int], None]


class VideoOpenError(RuntimeError):
    pass


def next_detector_timestamp(media_ms: float, last_timestamp: float) -> int:
    # Strictly increasing and >= 1.
    return int(max(math.floor(media_ms) + 1, last_timestamp + 1))


def sample_times_ms(duration_sec: float, fps: float) -> List[float]:
    if duration_sec <= 0 or fps <= 0:
        return []
    interval_ms = 1000.0 / fps
    count = int(math.floor(duration_sec * 1000.0 / interval_ms)) + 1
    return [i * interval_ms for i in range(count)]


def _video_duration_sec(capture) -> float:
    fps = capture.get(cv2.CAP_PROP_FPS) or 0.0
    frames = capture.get(cv2.CAP_PROP_FRAME_COUNT) or 0.0
    if fps <= 0:
        return 0.0
    return frames / fps


def collect_frames(
    read_at: Callable[[float], Optional[object]],
    detector,
    times_ms: Sequence[float],
    on_progress: Optional[ProgressCallback] = None,
    last_timestamp: float = 0.0,
):
    """Run the detector over images fetched by ``read_at`` (ms -> image or None).

    Returns ``(frames, last_timestamp)`` so a caller can continue the detector
    timeline across calls.
    """
    frames: List[LandmarkFrame] = []
    total = len(times_ms)
    for processed, media_ms in enumerate(times_ms, start=1):
        image = read_at(media_ms)
        if image is not None:
            last_timestamp = next_detector_timestamp(media_ms, last_timestamp)
            landmarks = detector.detect(image, last_timestamp)
            if landmarks is not None:
                frames.append(make_frame(media_ms, landmarks))
            else:
                logger.debug(f"No landmarks at {media_ms:.0f}ms, frame omitted")
        if on_progress is not None and total:
            on_progress(round(processed / total * 100))
    return frames, last_timestamp


def analyze_video(
    path: str,
    detector,
    preset: Optional[AnalysisQualityPreset] = None,
    on_progress: Optional[ProgressCallback] = None,
) -> List[LandmarkFrame]:
    preset = preset or get_quality_preset()
    capture = cv2.VideoCapture(path)
    if not capture.isOpened():
        raise VideoOpenError(f"Failed to load video: {path}")

    def read_at(media_ms: float):
        capture.set(cv2.CAP_PROP_POS_MSEC, media_ms)
        ok, image = capture.read()
        return image if ok else None

    try:
        duration = min(_video_duration_sec(capture), preset.max_duration_sec)
        times = sample_times_ms(duration, preset.fps)
        logger.info(f"Analyzing {path}: {duration:.1f}s at {preset.fps}fps ({len(times)} samples)")
        frames, _ = collect_frames(read_at, detector, times, on_progress)
    finally:
        capture.release()

    logger.info(f"Collected {len(frames)} pose frames from {path}")
    return frames


def analyze_attempt(frames: Iterable[LandmarkFrame], context: Optional[ScoringContext] = None) -> AnalysisResult:
    return generate_score(list(frames), context)
