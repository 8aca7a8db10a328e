"""Session-level statistics over an ordered list of throws."""

from __future__ import annotations

import math
from typing import Iterable, List, Optional, Sequence

from configs.settings import SessionConfig
from contracts import GlideEfficiency, ImprovementTrend, SessionSummary, ThrowMetrics


def mean(values: Sequence[float]) -> float:
    if not values:
        return 0.0
    return sum(values) / len(values)


def coefficient_of_variation(values: Sequence[float]) -> float:
    """Population standard deviation over mean, as a percentage.

    Returns 0 for an empty sequence or a zero mean.
    """
    if not values:
        return 0.0
    avg = mean(values)
    if avg == 0:
        return 0.0
    variance = sum((v - avg) ** 2 for v in values) / len(values)
    return math.sqrt(variance) / avg * 100.0


def best_glide_label(labels: Iterable[GlideEfficiency]) -> str:
    labels = list(labels)
    excellent = sum(1 for label in labels if label == GlideEfficiency.EXCELLENT)
    if excellent:
        return f"{excellent} {GlideEfficiency.EXCELLENT.value}"
    very_good = sum(1 for label in labels if label == GlideEfficiency.VERY_GOOD)
    if very_good:
        return f"{very_good} {GlideEfficiency.VERY_GOOD.value}"
    return GlideEfficiency.GOOD.value


class SessionAggregator:
    """Pure function of the throw sequence; holds configuration only.

    Every call works on its own copy of the input, so deleting or appending
    throws between calls needs no bookkeeping here.
    """

    def __init__(self, config: Optional[SessionConfig] = None):
        self._config = config or SessionConfig()

    def improvement(self, throws: Sequence[ThrowMetrics]) -> ImprovementTrend:
        """Compare mean stability of the latest throws against the earliest."""
        window = self._config.trend_window
        if len(throws) < window:
            return ImprovementTrend.STABLE

        early = mean([t.stability_score for t in throws[:window]])
        recent = mean([t.stability_score for t in throws[-window:]])
        margin = self._config.trend_margin
        if recent > early + margin:
            return ImprovementTrend.IMPROVING
        if recent < early - margin:
            return ImprovementTrend.DECLINING
        return ImprovementTrend.STABLE

    def consistency(self, throws: Sequence[ThrowMetrics]) -> float:
        cvs: List[float] = [
            coefficient_of_variation([t.pushoff_strength for t in throws]),
            coefficient_of_variation([t.peak_velocity for t in throws]),
            coefficient_of_variation([t.stability_score for t in throws]),
        ]
        avg_cv = mean(cvs)
        return max(0.0, 100.0 - avg_cv * self._config.consistency_cv_scale)

    def compute(self, throws: Iterable[ThrowMetrics]) -> SessionSummary:
        snapshot = tuple(throws)
        return SessionSummary(
            throw_count=len(snapshot),
            avg_pushoff=mean([t.pushoff_strength for t in snapshot]),
            avg_velocity=mean([t.peak_velocity for t in snapshot]),
            avg_stability=mean([t.stability_score for t in snapshot]),
            best_glide=best_glide_label(t.glide_efficiency for t in snapshot),
            consistency=self.consistency(snapshot),
            improvement=self.improvement(snapshot),
        )
