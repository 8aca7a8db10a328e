"""Per-throw metrics from a trimmed delivery."""

from __future__ import annotations

import math
import time
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional

import numpy as np

from configs.settings import MetricsConfig
from contracts import FailureCode, GlideEfficiency, ThrowMetrics, TrimmedCapture, VelocitySeries
from log_config.logger import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class ExtractionResult:
    metrics: Optional[ThrowMetrics]
    failure: Optional[FailureCode] = None

    @property
    def ok(self) -> bool:
        return self.metrics is not None


def finite_or_zero(value: float) -> float:
    value = float(value)
    return value if math.isfinite(value) else 0.0


def classify_glide(decel_rate: float, config: Optional[MetricsConfig] = None) -> GlideEfficiency:
    """Label glide quality from the absolute deceleration rate.

    The high-drag check runs first, then the bands from best to worst.
    """
    cfg = config or MetricsConfig()
    decel = abs(decel_rate)
    if decel > cfg.poor_glide_decel:
        return GlideEfficiency.POOR
    if decel < cfg.excellent_glide_decel:
        return GlideEfficiency.EXCELLENT
    if decel < cfg.very_good_glide_decel:
        return GlideEfficiency.VERY_GOOD
    return GlideEfficiency.GOOD


def new_throw_id() -> str:
    return f"throw_{time.time_ns() // 1_000_000}"


def utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


class DeliveryMetricsExtractor:
    """Reduces trimmed series to one immutable ThrowMetrics record."""

    def __init__(self, config: Optional[MetricsConfig] = None):
        self._config = config or MetricsConfig()

    def pushoff_window(self, sample_count: int) -> int:
        """Number of leading samples treated as the push-off phase."""
        return int(math.floor(sample_count * self._config.pushoff_fraction))

    def extract(
        self,
        trimmed: TrimmedCapture,
        velocity: VelocitySeries,
        stability_score: float,
        throw_id: Optional[str] = None,
        recorded_at: Optional[str] = None,
    ) -> ExtractionResult:
        """Compute push-off, velocity, duration, deceleration and glide label.

        Args:
            trimmed: Trimmed capture for the delivery
            velocity: Velocity series integrated from ``trimmed``
            stability_score: Scalar score from the stability analyzer
            throw_id: Identifier for the record (generated if None)
            recorded_at: ISO-8601 timestamp (now, UTC, if None)

        Returns:
            ExtractionResult with the metrics, or ``FailureCode.NO_DATA``
            when the capture holds no acceleration samples
        """
        accel = trimmed.acceleration
        if not accel:
            logger.warning("Metrics extraction skipped: no acceleration samples")
            return ExtractionResult(metrics=None, failure=FailureCode.NO_DATA)

        ax = np.array([s.ax for s in accel], dtype=float)
        window = self.pushoff_window(len(ax))

        # Empty windows resolve to 0 rather than -inf / NaN
        pushoff = float(np.max(np.abs(ax[:window]))) if window > 0 else 0.0

        velocities = np.array(velocity.velocities, dtype=float)
        peak_velocity = float(np.max(np.abs(velocities))) if velocities.size else 0.0

        slide_duration = accel[-1].timestamp - accel[0].timestamp

        slide = ax[window:]
        negative = slide[slide < 0]
        decel_rate = abs(float(np.mean(negative))) if negative.size else 0.0

        decel_rate = finite_or_zero(decel_rate)
        metrics = ThrowMetrics(
            id=throw_id or new_throw_id(),
            timestamp=recorded_at or utc_now_iso(),
            pushoff_strength=finite_or_zero(pushoff),
            peak_velocity=finite_or_zero(peak_velocity),
            slide_duration=finite_or_zero(slide_duration),
            decel_rate=decel_rate,
            stability_score=finite_or_zero(stability_score),
            glide_efficiency=classify_glide(decel_rate, self._config),
        )
        logger.info(
            f"Throw {metrics.id}: pushoff={metrics.pushoff_strength:.2f} m/s², "
            f"peak={metrics.peak_velocity:.2f} m/s, duration={metrics.slide_duration:.2f}s, "
            f"decel={metrics.decel_rate:.3f} m/s², stability={metrics.stability_score:.0f}, "
            f"glide={metrics.glide_efficiency.value}"
        )
        return ExtractionResult(metrics=metrics)
