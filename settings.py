"""
Analysis quality presets and calibration persistence.

Persistence goes through a plain key-value contract (get/set/delete); the
engine never decides where or how the values are stored.
"""
import json
import logging
import os
from dataclasses import dataclass
from typing import Any, Dict, Optional

from calibration import CalibrationData
from pose_types import Stance

logger = logging.getLogger(__name__)

CALIBRATION_KEY = "calibration"
ANALYSIS_QUALITY_KEY = "analysis_quality"


class UnknownQualityPreset(KeyError):
    pass


@dataclass(frozen=True)
class AnalysisQualityPreset:
    name: str
    model_complexity: int
    fps: int
    max_duration_sec: float
    min_detection_confidence: float
    min_tracking_confidence: float


ANALYSIS_QUALITY_PRESETS: Dict[str, AnalysisQualityPreset] = {
    "fast": AnalysisQualityPreset("fast", 0, 10, 60.0, 0.5, 0.5),
    "balanced": AnalysisQualityPreset("balanced", 1, 15, 180.0, 0.6, 0.6),
    "maximum": AnalysisQualityPreset("maximum", 2, 30, 300.0, 0.8, 0.8),
}
DEFAULT_ANALYSIS_QUALITY = "balanced"


def get_quality_preset(name: Optional[str] = None) -> AnalysisQualityPreset:
    name = name or DEFAULT_ANALYSIS_QUALITY
    try:
        return ANALYSIS_QUALITY_PRESETS[name]
    except KeyError:
        raise UnknownQualityPreset(name) from None


class KeyValueStore:
    def get(self, key: str) -> Optional[Any]:
        raise NotImplementedError

    def set(self, key: str, value: Any) -> None:
        raise NotImplementedError

    def delete(self, key: str) -> None:
        raise NotImplementedError


class MemoryStore(KeyValueStore):
    def __init__(self, initial: Optional[Dict[str, Any]] = None):
        self._data: Dict[str, Any] = dict(initial or {})

    def get(self, key: str) -> Optional[Any]:
        return self._data.get(key)

    def set(self, key: str, value: Any) -> None:
        self._data[key] = value

    def delete(self, key: str) -> None:
        self._data.pop(key, None)


class JsonFileStore(KeyValueStore):
    def __init__(self, path: str):
        self.path = path

    def _load(self) -> Dict[str, Any]:
        if not os.path.exists(self.path):
            return {}
        try:
            with open(self.path, "r") as f:
                data = json.load(f)
        except json.JSONDecodeError:
            logger.warning(f"Settings file {self.path} is not valid JSON, starting empty")
            return {}
        if not isinstance(data, dict):
            logger.warning(f"Settings file {self.path} does not hold a JSON object, starting empty")
            return {}
        return data

    def _save(self, data: Dict[str, Any]) -> None:
        with open(self.path, "w") as f:
            json.dump(data, f, indent=2)

    def get(self, key: str) -> Optional[Any]:
        return self._load().get(key)

    def set(self, key: str, value: Any) -> None:
        data = self._load()
        data[key] = value
        self._save(data)

    def delete(self, key: str) -> None:
        data = self._load()
        if data.pop(key, None) is not None:
            self._save(data)


class CalibrationRepository:
    def __init__(self, store: KeyValueStore):
        self._store = store

    def get(self) -> Optional[CalibrationData]:
        raw = self._store.get(CALIBRATION_KEY)
        if raw is None:
            return None
        if not isinstance(raw, dict):
            logger.warning("Stored calibration is not a mapping, ignoring it")
            return None
        try:
            return CalibrationData.from_dict(raw)
        except (AttributeError, KeyError, TypeError, ValueError):
            logger.warning("Stored calibration is unreadable, ignoring it")
            return None

    def save(self, calibration: CalibrationData) -> None:
        self._store.set(CALIBRATION_KEY, calibration.to_dict())

    def clear(self) -> None:
        self._store.delete(CALIBRATION_KEY)

    def has(self) -> bool:
        return self.get() is not None

    def wearing_gloves(self) -> bool:
        calibration = self.get()
        return calibration.wearing_gloves if calibration else False

    def set_wearing_gloves(self, wearing: bool) -> None:
        calibration = self.get()
        if calibration:
            self.save(calibration.with_gloves(wearing))

    def stance(self) -> Stance:
        calibration = self.get()
        return calibration.stance if calibration else Stance.ORTHODOX

    def set_stance(self, stance: Stance) -> None:
        calibration = self.get()
        if calibration:
            self.save(calibration.with_stance(stance))


def get_analysis_quality(store: KeyValueStore) -> AnalysisQualityPreset:
    name = store.get(ANALYSIS_QUALITY_KEY)
    if name not in ANALYSIS_QUALITY_PRESETS:
        return get_quality_preset(DEFAULT_ANALYSIS_QUALITY)
    return ANALYSIS_QUALITY_PRESETS[name]


def set_analysis_quality(store: KeyValueStore, name: str) -> None:
    get_quality_preset(name)
    store.set(ANALYSIS_QUALITY_KEY, name)
