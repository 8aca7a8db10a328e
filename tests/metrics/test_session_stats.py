"""Tests for session aggregation."""

from __future__ import annotations

import pytest

from configs.settings import SessionConfig
from contracts import GlideEfficiency, ImprovementTrend, ThrowMetrics
from metrics.session_stats import (
    SessionAggregator,
    best_glide_label,
    coefficient_of_variation,
    mean,
)


def make_throw(index=0, pushoff=5.0, velocity=3.0, stability=80.0, glide=GlideEfficiency.GOOD):
    return ThrowMetrics(
        id=f"throw_{index}",
        timestamp="2026-01-01T00:00:00+00:00",
        pushoff_strength=pushoff,
        peak_velocity=velocity,
        slide_duration=4.0,
        decel_rate=1.5,
        stability_score=stability,
        glide_efficiency=glide,
    )


@pytest.fixture
def aggregator():
    return SessionAggregator()


class TestCompute:
    def test_empty_session(self, aggregator):
        summary = aggregator.compute([])

        assert summary.throw_count == 0
        assert summary.avg_pushoff == 0.0
        assert summary.avg_velocity == 0.0
        assert summary.avg_stability == 0.0
        assert summary.best_glide == "Good"
        assert summary.consistency == 100.0
        assert summary.improvement is ImprovementTrend.STABLE

    def test_averages(self, aggregator):
        throws = [make_throw(0, pushoff=4.0, velocity=2.0, stability=60.0),
                  make_throw(1, pushoff=6.0, velocity=4.0, stability=80.0)]

        summary = aggregator.compute(throws)

        assert summary.throw_count == 2
        assert summary.avg_pushoff == pytest.approx(5.0)
        assert summary.avg_velocity == pytest.approx(3.0)
        assert summary.avg_stability == pytest.approx(70.0)

    def test_identical_throws_fully_consistent(self, aggregator):
        throws = [make_throw(i) for i in range(5)]
        assert aggregator.compute(throws).consistency == 100.0

    def test_consistency_floored_at_zero(self, aggregator):
        throws = [make_throw(0, pushoff=1.0, velocity=1.0, stability=1.0),
                  make_throw(1, pushoff=100.0, velocity=100.0, stability=100.0)]
        assert aggregator.compute(throws).consistency == 0.0

    def test_compute_is_pure(self, aggregator):
        throws = [make_throw(i, pushoff=3.0 + i, stability=50.0 + 7 * i) for i in range(6)]

        assert aggregator.compute(throws) == aggregator.compute(throws)

    def test_compute_does_not_hold_input(self, aggregator):
        throws = [make_throw(0), make_throw(1)]
        summary = aggregator.compute(throws)
        throws.pop()
        assert summary.throw_count == 2


class TestImprovement:
    def test_three_throws_compare_identical_windows(self, aggregator):
        throws = [make_throw(i, stability=s) for i, s in enumerate([40, 80, 85])]
        assert aggregator.improvement(throws) is ImprovementTrend.STABLE

    def test_fewer_than_window_is_stable(self, aggregator):
        throws = [make_throw(0, stability=10), make_throw(1, stability=90)]
        assert aggregator.improvement(throws) is ImprovementTrend.STABLE

    def test_improving(self, aggregator):
        throws = [make_throw(i, stability=s) for i, s in enumerate([40, 45, 50, 70, 80, 85])]
        assert aggregator.improvement(throws) is ImprovementTrend.IMPROVING

    def test_declining(self, aggregator):
        throws = [make_throw(i, stability=s) for i, s in enumerate([85, 80, 70, 50, 45, 40])]
        assert aggregator.improvement(throws) is ImprovementTrend.DECLINING

    def test_within_margin_is_stable(self, aggregator):
        throws = [make_throw(i, stability=s) for i, s in enumerate([60, 60, 60, 64, 64, 64])]
        assert aggregator.improvement(throws) is ImprovementTrend.STABLE

    def test_configurable_window(self):
        aggregator = SessionAggregator(SessionConfig(trend_window=1, trend_margin=1.0))
        throws = [make_throw(0, stability=50), make_throw(1, stability=60)]
        assert aggregator.improvement(throws) is ImprovementTrend.IMPROVING


class TestBestGlide:
    def test_excellent_count_wins(self):
        labels = [GlideEfficiency.EXCELLENT, GlideEfficiency.VERY_GOOD, GlideEfficiency.EXCELLENT]
        assert best_glide_label(labels) == "2 Excellent"

    def test_very_good_count(self):
        labels = [GlideEfficiency.VERY_GOOD, GlideEfficiency.POOR]
        assert best_glide_label(labels) == "1 Very Good"

    def test_falls_back_to_good(self):
        assert best_glide_label([GlideEfficiency.POOR, GlideEfficiency.GOOD]) == "Good"


def test_statistics_guard_empty_and_zero_mean():
    assert mean([]) == 0.0
    assert coefficient_of_variation([]) == 0.0
    assert coefficient_of_variation([0.0, 0.0]) == 0.0
    assert coefficient_of_variation([2.0, 4.0]) == pytest.approx(100.0 / 3.0)
