"""Runs the per-delivery analysis chain on a frozen capture."""

from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Optional

from analysis import DeliveryTrimmer, StabilityAnalyzer, VelocityIntegrator
from app.events import DeliveryAnalyzedEvent, DeliveryRejectedEvent, EventBus
from capture import SampleBuffer
from configs.settings import AppConfig
from contracts import (
    FailureCode,
    RawCapture,
    StabilitySeries,
    ThrowMetrics,
    TrimmedCapture,
    VelocitySeries,
)
from exceptions import StaleCaptureError
from log_config.logger import get_logger, log_performance
from metrics.delivery_metrics import DeliveryMetricsExtractor

logger = get_logger(__name__)


@dataclass(frozen=True)
class DeliveryAnalysis:
    """Everything derived from one recorded delivery."""
    trimmed: TrimmedCapture
    velocity: VelocitySeries
    stability: StabilitySeries
    stability_score: float
    metrics: Optional[ThrowMetrics]
    failure: Optional[FailureCode] = None

    @property
    def ok(self) -> bool:
        return self.metrics is not None


class DeliveryAnalyzer:
    """Trim, integrate, score and extract metrics for one capture.

    Each stage is a plain object built from its own config section, so
    callers can swap one out in tests.
    """

    def __init__(
        self,
        config: Optional[AppConfig] = None,
        event_bus: Optional[EventBus] = None,
        trimmer: Optional[DeliveryTrimmer] = None,
        integrator: Optional[VelocityIntegrator] = None,
        stability: Optional[StabilityAnalyzer] = None,
        extractor: Optional[DeliveryMetricsExtractor] = None,
    ):
        config = config or AppConfig()
        self._bus = event_bus
        self._trimmer = trimmer or DeliveryTrimmer(config.trim)
        self._integrator = integrator or VelocityIntegrator()
        self._stability = stability or StabilityAnalyzer(config.stability)
        self._extractor = extractor or DeliveryMetricsExtractor(config.metrics)

    def analyze(
        self,
        capture: RawCapture,
        buffer: Optional[SampleBuffer] = None,
        throw_id: Optional[str] = None,
    ) -> DeliveryAnalysis:
        """Analyze a frozen capture.

        Args:
            capture: Snapshot returned by the recording session
            buffer: Buffer the snapshot came from; if given, the snapshot
                must still be current
            throw_id: Identifier for the resulting record (generated if None)

        Returns:
            DeliveryAnalysis; ``metrics`` is None and ``failure`` set when
            the capture holds no acceleration data

        Raises:
            StaleCaptureError: If ``buffer`` was reset after the snapshot
        """
        if buffer is not None and not buffer.is_current(capture):
            raise StaleCaptureError(
                f"Capture version {capture.version} is stale "
                f"(buffer is at version {buffer.version})"
            )

        start = time.perf_counter()

        trim_result = self._trimmer.trim(capture)
        trimmed = trim_result.capture
        if not trim_result.ok:
            return self._reject(trimmed, trim_result.failure)

        velocity = self._integrator.integrate(trimmed)
        stability_series = self._stability.series(trimmed)
        stability_score = self._stability.score(trimmed)

        extraction = self._extractor.extract(
            trimmed, velocity, stability_score, throw_id=throw_id
        )
        if not extraction.ok:
            return self._reject(trimmed, extraction.failure, velocity, stability_series)

        duration_ms = (time.perf_counter() - start) * 1000.0
        log_performance("delivery_analysis", duration_ms)

        if self._bus is not None:
            self._bus.publish(DeliveryAnalyzedEvent(metrics=extraction.metrics, duration_ms=duration_ms))

        return DeliveryAnalysis(
            trimmed=trimmed,
            velocity=velocity,
            stability=stability_series,
            stability_score=stability_score,
            metrics=extraction.metrics,
        )

    def _reject(
        self,
        trimmed: TrimmedCapture,
        failure: Optional[FailureCode],
        velocity: Optional[VelocitySeries] = None,
        stability: Optional[StabilitySeries] = None,
    ) -> DeliveryAnalysis:
        failure = failure or FailureCode.NO_DATA
        logger.warning(f"Delivery rejected: {failure.value}")
        if self._bus is not None:
            self._bus.publish(DeliveryRejectedEvent(failure=failure))
        return DeliveryAnalysis(
            trimmed=trimmed,
            velocity=velocity or VelocitySeries(),
            stability=stability or StabilitySeries(),
            stability_score=0.0,
            metrics=None,
            failure=failure,
        )
