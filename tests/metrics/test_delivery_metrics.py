"""Tests for per-throw metrics extraction."""

from __future__ import annotations

import math

import pytest

from analysis import VelocityIntegrator
from configs.settings import MetricsConfig
from contracts import FailureCode, GlideEfficiency, Sample, TrimmedCapture, VelocitySeries
from metrics.delivery_metrics import (
    DeliveryMetricsExtractor,
    classify_glide,
    finite_or_zero,
    new_throw_id,
)


def trimmed_from_ax(ax_values, dt=0.1):
    accel = tuple(Sample(timestamp=i * dt, ax=v) for i, v in enumerate(ax_values))
    return TrimmedCapture(acceleration=accel, angular_rate=(), start_index=0, end_index=len(accel) - 1)


@pytest.fixture
def extractor():
    return DeliveryMetricsExtractor()


class TestExtract:
    def test_decel_scenario(self, extractor):
        trimmed = trimmed_from_ax([5, 5, -1, -2, -1])
        velocity = VelocityIntegrator().integrate(trimmed)

        result = extractor.extract(trimmed, velocity, 90.0, throw_id="throw_1", recorded_at="2026-01-01T00:00:00+00:00")

        metrics = result.metrics
        assert result.ok
        assert metrics.decel_rate == pytest.approx(4.0 / 3.0)
        assert metrics.glide_efficiency is GlideEfficiency.GOOD
        assert metrics.pushoff_strength == 5.0
        assert metrics.slide_duration == pytest.approx(0.4)
        assert metrics.stability_score == 90.0
        assert metrics.id == "throw_1"
        assert metrics.timestamp == "2026-01-01T00:00:00+00:00"

    def test_peak_velocity_uses_absolute_value(self, extractor):
        trimmed = trimmed_from_ax([1.0] * 5)
        velocity = VelocitySeries(timestamps=(0.0, 0.1, 0.2), velocities=(0.0, 1.5, -3.0))

        metrics = extractor.extract(trimmed, velocity, 50.0).metrics

        assert metrics.peak_velocity == 3.0

    def test_empty_pushoff_window_is_zero(self, extractor):
        # floor(4 * 0.2) == 0
        trimmed = trimmed_from_ax([9.0, -1.0, -1.0, -1.0])
        metrics = extractor.extract(trimmed, VelocitySeries(), 50.0).metrics

        assert metrics.pushoff_strength == 0.0
        assert metrics.peak_velocity == 0.0
        assert metrics.decel_rate == pytest.approx(1.0)

    def test_no_negative_samples_decel_zero(self, extractor):
        trimmed = trimmed_from_ax([2.0] * 10)
        metrics = extractor.extract(trimmed, VelocitySeries(), 50.0).metrics

        assert metrics.decel_rate == 0.0
        assert metrics.glide_efficiency is GlideEfficiency.EXCELLENT

    def test_no_data(self, extractor):
        result = extractor.extract(trimmed_from_ax([]), VelocitySeries(), 0.0)

        assert not result.ok
        assert result.metrics is None
        assert result.failure is FailureCode.NO_DATA

    def test_non_finite_values_become_zero(self, extractor):
        trimmed = trimmed_from_ax([1.0] * 10)
        metrics = extractor.extract(trimmed, VelocitySeries(), math.nan).metrics
        assert metrics.stability_score == 0.0

    def test_generated_id_and_timestamp(self, extractor):
        metrics = extractor.extract(trimmed_from_ax([1.0] * 5), VelocitySeries(), 10.0).metrics
        assert metrics.id.startswith("throw_")
        assert "T" in metrics.timestamp

    def test_pushoff_window(self, extractor):
        assert extractor.pushoff_window(5) == 1
        assert extractor.pushoff_window(4) == 0
        assert extractor.pushoff_window(100) == 20


class TestClassifyGlide:
    @pytest.mark.parametrize(
        "decel, expected",
        [
            (0.0, GlideEfficiency.EXCELLENT),
            (0.49, GlideEfficiency.EXCELLENT),
            (0.5, GlideEfficiency.VERY_GOOD),
            (0.99, GlideEfficiency.VERY_GOOD),
            (1.0, GlideEfficiency.GOOD),
            (2.0, GlideEfficiency.GOOD),
            (2.01, GlideEfficiency.POOR),
            (-3.0, GlideEfficiency.POOR),
        ],
    )
    def test_bands(self, decel, expected):
        assert classify_glide(decel) is expected

    def test_custom_thresholds(self):
        config = MetricsConfig(poor_glide_decel=1.0, excellent_glide_decel=0.1, very_good_glide_decel=0.2)
        assert classify_glide(1.5, config) is GlideEfficiency.POOR
        assert classify_glide(0.15, config) is GlideEfficiency.VERY_GOOD


def test_helpers():
    assert finite_or_zero(math.inf) == 0.0
    assert finite_or_zero(2.5) == 2.5
    assert new_throw_id().startswith("throw_")
