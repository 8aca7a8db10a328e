"""Tests for app.pipeline.analysis.session_summary module."""

from __future__ import annotations

import threading
from datetime import datetime, timezone
from unittest.mock import Mock

import pytest

from app.events import EventBus, SessionStartedEvent, ThrowAddedEvent, ThrowDeletedEvent
from app.pipeline.analysis.session_summary import TrainingSession, new_session_info
from contracts import GlideEfficiency, ImprovementTrend, SessionInfo, ThrowMetrics


def make_throw(index: int, stability: float = 80.0, glide=GlideEfficiency.GOOD) -> ThrowMetrics:
    return ThrowMetrics(
        id=f"throw_{index}",
        timestamp="2026-01-01T00:00:00+00:00",
        pushoff_strength=5.0,
        peak_velocity=3.0,
        slide_duration=4.0,
        decel_rate=1.2,
        stability_score=stability,
        glide_efficiency=glide,
    )


class TestTrainingSession:
    """Tests for TrainingSession."""

    @pytest.fixture
    def bus(self):
        return EventBus()

    @pytest.fixture
    def session(self, bus):
        info = SessionInfo(id="session-001", name="Practice", start_time="2026-01-01T09:00:00+00:00")
        return TrainingSession(info=info, event_bus=bus)

    def test_initial_summary(self, session):
        """Test initial session summary."""
        summary = session.get_summary()

        assert summary.throw_count == 0
        assert summary.best_glide == "Good"
        assert summary.improvement is ImprovementTrend.STABLE
        assert session.throw_count == 0

    def test_add_throw(self, session, bus):
        handler = Mock()
        bus.subscribe(ThrowAddedEvent, handler)

        session.add_throw(make_throw(1, glide=GlideEfficiency.EXCELLENT))

        assert session.throw_count == 1
        assert session.get_summary().best_glide == "1 Excellent"
        event = handler.call_args[0][0]
        assert event.session_id == "session-001"
        assert event.throw_id == "throw_1"
        assert event.throw_count == 1

    def test_get_throws_returns_copy(self, session):
        session.add_throw(make_throw(1))
        throws = session.get_throws()
        throws.clear()
        assert session.throw_count == 1

    def test_delete_recomputes_summary(self, session, bus):
        handler = Mock()
        bus.subscribe(ThrowDeletedEvent, handler)
        for i, s in enumerate([40, 45, 50, 80, 85, 90]):
            session.add_throw(make_throw(i, stability=s))
        assert session.get_summary().improvement is ImprovementTrend.IMPROVING

        removed = session.delete_throw(0)

        assert removed.id == "throw_0"
        assert [t.id for t in session.get_throws()] == [f"throw_{i}" for i in range(1, 6)]
        summary = session.get_summary()
        assert summary.throw_count == 5
        assert summary.avg_stability == pytest.approx((45 + 50 + 80 + 85 + 90) / 5)
        assert handler.call_args[0][0].remaining_throws == 5

    @pytest.mark.parametrize("index", [-1, 3, 10])
    def test_delete_bad_index(self, session, index):
        for i in range(3):
            session.add_throw(make_throw(i))
        with pytest.raises(IndexError):
            session.delete_throw(index)
        assert session.throw_count == 3

    def test_start_new_session(self, session, bus):
        handler = Mock()
        bus.subscribe(SessionStartedEvent, handler)
        session.add_throw(make_throw(1))

        info = session.start_new_session("Evening")

        assert session.throw_count == 0
        assert info.name == "Evening"
        assert session.info is info
        assert info.id != "session-001"
        assert handler.call_args[0][0].session_id == info.id

    def test_concurrent_adds(self, session):
        def add_many(offset):
            for i in range(100):
                session.add_throw(make_throw(offset + i))

        threads = [threading.Thread(target=add_many, args=(n * 100,)) for n in range(4)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert session.throw_count == 400
        assert session.get_summary().throw_count == 400


def test_new_session_info():
    now = datetime(2026, 3, 14, 15, 9, 26, tzinfo=timezone.utc)

    info = new_session_info(now=now)

    assert info.id == f"session_{int(now.timestamp() * 1000)}"
    assert info.name == "Session 2026-03-14"
    assert info.start_time == now.isoformat()
    assert new_session_info("Drills", now=now).name == "Drills"


def test_restored_throws():
    session = TrainingSession(throws=[make_throw(1), make_throw(2)])
    assert session.throw_count == 2
    assert session.info.id.startswith("session_")
