"""Rotational steadiness from pitch/roll angular rates."""

from __future__ import annotations

import math
from typing import Optional, Sequence

import numpy as np

from configs.settings import StabilityConfig
from contracts import Sample, StabilitySeries, TrimmedCapture
from log_config.logger import get_logger

logger = get_logger(__name__)

AXIS_FIELDS = {
    "pitch": "gx",
    "roll": "gy",
    "yaw": "gz",
}


def score_from_variance(variance: float) -> float:
    """Map angular-rate variance onto 0-100 on a log scale."""
    if not math.isfinite(variance) or variance < 0.0:
        return 0.0
    return max(0.0, min(100.0, 100.0 - math.log10(variance + 1.0) * 20.0))


class StabilityAnalyzer:
    """Windowed RMS stability series and scalar stability score.

    Only the configured axes contribute; by default yaw is left out so
    that a deliberate turn of the body does not count as instability.
    """

    def __init__(self, config: Optional[StabilityConfig] = None):
        self._config = config or StabilityConfig()
        if self._config.window_size < 1 or self._config.window_size % 2 == 0:
            raise ValueError(f"Stability window must be a positive odd size, got {self._config.window_size}")
        unknown = [axis for axis in self._config.axes if axis not in AXIS_FIELDS]
        if unknown:
            raise ValueError(f"Unknown stability axes: {unknown}")
        self._fields = [AXIS_FIELDS[axis] for axis in self._config.axes]

    @property
    def axes(self) -> tuple:
        return tuple(self._config.axes)

    def _squared_sum(self, samples: Sequence[Sample]) -> np.ndarray:
        if not samples:
            return np.zeros(0, dtype=float)
        rates = np.array([[getattr(s, f) for f in self._fields] for s in samples], dtype=float)
        return np.sum(rates * rates, axis=1)

    def series(self, trimmed: TrimmedCapture) -> StabilitySeries:
        """RMS over a centred window, clamped at the array edges."""
        samples = trimmed.angular_rate
        squared = self._squared_sum(samples)
        n = len(squared)
        if n == 0:
            return StabilitySeries()

        half = self._config.window_size // 2
        cumulative = np.concatenate(([0.0], np.cumsum(squared)))
        idx = np.arange(n)
        lo = np.maximum(0, idx - half)
        hi = np.minimum(n, idx + half + 1)
        rms = np.sqrt((cumulative[hi] - cumulative[lo]) / (hi - lo))

        return StabilitySeries(
            timestamps=tuple(s.timestamp for s in samples),
            values=tuple(float(v) for v in rms),
        )

    def variance(self, trimmed: TrimmedCapture) -> float:
        """Population variance of the per-sample angular-rate magnitude."""
        squared = self._squared_sum(trimmed.angular_rate)
        if squared.size == 0:
            return 0.0
        return float(np.var(np.sqrt(squared)))

    def score(self, trimmed: TrimmedCapture) -> float:
        variance = self.variance(trimmed)
        score = score_from_variance(variance)
        logger.debug(
            f"Stability: {len(trimmed.angular_rate)} samples, variance={variance:.3f}, score={score:.1f}"
        )
        return score
