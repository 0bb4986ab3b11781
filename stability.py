from collections import deque
from typing import Deque, Iterable, Optional, Sequence, Tuple, Union

import numpy as np

from geometry import hip_center
from pose_types import Landmark

Sample = Union[float, Tuple[float, float]]

# Hip variance -> 0..100 stability. A variance of 0.01 maps to 50.
HIP_VARIANCE_SCALE = 5000.0


class StabilityBuffer:
    """Rolling window of a scalar or 2D signal.

    Variance is the population variance; for 2D samples it is the sum of the
    per-axis variances (mean squared distance from the centroid).
    """

    def __init__(self, maxlen: Optional[int] = 30, min_samples: int = 10, threshold: float = 0.02):
        self.min_samples = min_samples
        self.threshold = threshold
        self._buffer: Deque[np.ndarray] = deque(maxlen=maxlen)

    def __len__(self) -> int:
        return len(self._buffer)

    def push(self, sample: Sample) -> None:
        self._buffer.append(np.atleast_1d(np.asarray(sample, dtype=float)))

    def extend(self, samples: Iterable[Sample]) -> None:
        for sample in samples:
            self.push(sample)

    def clear(self) -> None:
        self._buffer.clear()

    @property
    def is_ready(self) -> bool:
        return len(self._buffer) >= self.min_samples

    def mean(self) -> float:
        # Scalar signals only; use centroid() for 2D samples.
        return float(self.centroid()[0])

    def centroid(self) -> np.ndarray:
        if not self._buffer:
            return np.zeros(1)
        return np.stack(self._buffer).mean(axis=0)

    def variance(self) -> float:
        if not self._buffer:
            return 0.0
        values = np.stack(self._buffer)
        return float(values.var(axis=0).sum())

    def is_stable(self) -> bool:
        return self.is_ready and self.variance() < self.threshold


def stability_from_variance(variance: float) -> float:
    return float(np.clip(100.0 - variance * HIP_VARIANCE_SCALE, 0.0, 100.0))


def positional_stability(frames: Sequence[Sequence[Landmark]]) -> float:
    # Whole attempt, so the buffer is unbounded.
    if len(frames) < 2:
        return 100.0
    buffer = StabilityBuffer(maxlen=None, min_samples=2)
    buffer.extend(hip_center(lm) for lm in frames)
    return stability_from_variance(buffer.variance())
