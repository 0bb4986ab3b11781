import argparse
import json
import logging
import sys
from typing import List, Optional

import cv2
import numpy as np

from calibration import Calibrator, CalibrationStep
from camera import CameraStream
from pose_detection import PoseDetector
from pose_types import Stance, make_frame
from scoring import ScoringContext
from settings import CalibrationRepository, JsonFileStore, get_analysis_quality, get_quality_preset
from video_analysis import VideoOpenError, analyze_attempt, analyze_video

logger = logging.getLogger("strike_coach")

WINDOW_NAME = "Calibration"
MAX_FAILED_READS = 30


def _draw_status(frame, lines: List[str]) -> None:
    y = 30
    for line in lines:
        cv2.putText(frame, line, (10, y), cv2.FONT_HERSHEY_SIMPLEX, 0.7, (0, 255, 0), 2)
        y += 28


def calibration_loop(camera, detector, calibrator, max_failed_reads: int = MAX_FAILED_READS) -> bool:
    """Tick the calibrator from the camera until it confirms.

    Returns False when the user quits or the camera keeps failing.
    """
    failed_reads = 0
    while calibrator.step != CalibrationStep.CONFIRM:
        cam_frame = camera.read()
        if cam_frame.ok:
            failed_reads = 0
            display = cam_frame.frame
            landmarks = detector.detect(display, cam_frame.timestamp_ms)
            frame = make_frame(cam_frame.timestamp_ms, landmarks) if landmarks else None
            status = calibrator.tick(frame)
            lines = [
                f"Step: {status.step.value}",
                f"Hold: {status.hold_progress:.0f}%",
                f"View: {status.view_angle.value}",
                "Stand still in your guard (q to quit, r to restart)",
            ]
        else:
            failed_reads += 1
            logger.warning(f"Camera read failed ({failed_reads}/{max_failed_reads})")
            if failed_reads >= max_failed_reads:
                logger.error("Camera stopped delivering frames")
                return False
            display = np.zeros((480, 640, 3), dtype=np.uint8)
            lines = ["Camera error (q to quit)"]

        _draw_status(display, lines)
        cv2.imshow(WINDOW_NAME, display)
        key = cv2.waitKey(1) & 0xFF
        if key == ord("q"):
            logger.info("Calibration cancelled")
            return False
        if key == ord("r"):
            calibrator.reset()
    return True


def run_calibration(args) -> int:
    store = JsonFileStore(args.settings)
    preset = get_analysis_quality(store)
    camera = CameraStream(camera_index=args.camera)
    if not camera.open():
        logger.error("Could not open webcam")
        return 1

    calibrator = Calibrator()
    cv2.namedWindow(WINDOW_NAME, cv2.WINDOW_NORMAL)
    try:
        with PoseDetector(preset) as detector:
            if not calibration_loop(camera, detector, calibrator):
                return 1
    finally:
        camera.release()
        cv2.destroyAllWindows()

    calibration = calibrator.build_calibration(stance=Stance(args.stance), wearing_gloves=args.gloves)
    CalibrationRepository(store).save(calibration)
    print(json.dumps(calibration.to_dict(), indent=2))
    return 0


def run_analysis(args) -> int:
    store = JsonFileStore(args.settings)
    preset = get_quality_preset(args.quality) if args.quality else get_analysis_quality(store)
    calibration = CalibrationRepository(store).get()
    if calibration is None:
        logger.info("No saved calibration, scoring without one")

    def progress(pct: int) -> None:
        logger.debug(f"Analysis {pct}%")

    try:
        with PoseDetector(preset) as detector:
            frames = analyze_video(args.video, detector, preset, on_progress=progress)
    except VideoOpenError as e:
        logger.error(str(e))
        return 1

    moves = [m.strip() for m in args.moves.split(",") if m.strip()]
    result = analyze_attempt(frames, ScoringContext(calibration=calibration, move_types=moves))
    score = result.score
    print(
        json.dumps(
            {
                "frame_count": result.frame_count,
                "duration": result.duration,
                "score": {
                    "overall": score.overall,
                    "guard": score.guard,
                    "stability": score.stability,
                    "execution": score.execution,
                    "timing": score.timing,
                    "strengths": list(score.strengths),
                    "improvements": list(score.improvements),
                    "warnings": list(score.warnings),
                },
            },
            indent=2,
        )
    )
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Strike technique calibration and scoring")
    parser.add_argument("--settings", default="strike_coach_settings.json", help="Settings JSON file")
    parser.add_argument("-v", "--verbose", action="store_true")
    sub = parser.add_subparsers(dest="command", required=True)

    cal = sub.add_parser("calibrate", help="Capture a baseline pose from the webcam")
    cal.add_argument("--camera", type=int, default=0)
    cal.add_argument("--stance", choices=[s.value for s in Stance], default=Stance.ORTHODOX.value)
    cal.add_argument("--gloves", action="store_true")
    cal.set_defaults(func=run_calibration)

    ana = sub.add_parser("analyze", help="Score a recorded attempt")
    ana.add_argument("video")
    ana.add_argument("--moves", default="punch", help="Comma-separated move types, e.g. punch,kick")
    ana.add_argument("--quality", choices=["fast", "balanced", "maximum"])
    ana.set_defaults(func=run_analysis)
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s - %(levelname)s - %(message)s",
    )
    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
