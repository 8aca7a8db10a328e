"""Training session state and aggregation."""

from __future__ import annotations

import threading
import time
from datetime import datetime, timezone
from typing import List, Optional

from app.events import EventBus, SessionStartedEvent, ThrowAddedEvent, ThrowDeletedEvent
from configs.settings import SessionConfig
from contracts import SessionInfo, SessionSummary, ThrowMetrics
from log_config.logger import get_logger
from metrics.session_stats import SessionAggregator

logger = get_logger(__name__)


def new_session_info(name: Optional[str] = None, now: Optional[datetime] = None) -> SessionInfo:
    """Create session metadata stamped with the current time."""
    now = now or datetime.now(timezone.utc)
    return SessionInfo(
        id=f"session_{int(now.timestamp() * 1000)}",
        name=name or f"Session {now.date().isoformat()}",
        start_time=now.isoformat(),
    )


class TrainingSession:
    """Ordered list of throws for one practice session.

    Summaries are recomputed from a snapshot of the throw list on every
    call, so add and delete never leave stale aggregates behind.
    """

    def __init__(
        self,
        info: Optional[SessionInfo] = None,
        config: Optional[SessionConfig] = None,
        event_bus: Optional[EventBus] = None,
        throws: Optional[List[ThrowMetrics]] = None,
    ):
        """Initialize training session.

        Args:
            info: Session metadata (a fresh one is created if None)
            config: Aggregation settings
            event_bus: Bus for throw added/deleted notifications
            throws: Throws to restore, e.g. from an export
        """
        self._info = info or new_session_info()
        self._aggregator = SessionAggregator(config)
        self._bus = event_bus
        self._lock = threading.Lock()
        self._throws: List[ThrowMetrics] = list(throws or [])

    @property
    def info(self) -> SessionInfo:
        with self._lock:
            return self._info

    @property
    def throw_count(self) -> int:
        with self._lock:
            return len(self._throws)

    def add_throw(self, metrics: ThrowMetrics) -> None:
        """Append a throw to the session."""
        with self._lock:
            self._throws.append(metrics)
            event = ThrowAddedEvent(
                session_id=self._info.id,
                throw_id=metrics.id,
                throw_count=len(self._throws),
            )
        logger.info(f"Throw {metrics.id} added to {event.session_id} ({event.throw_count} total)")
        self._publish(event)

    def delete_throw(self, index: int) -> ThrowMetrics:
        """Remove the throw at ``index`` and return it.

        Raises:
            IndexError: If ``index`` is out of range
        """
        with self._lock:
            if not 0 <= index < len(self._throws):
                raise IndexError(f"Throw index {index} out of range (0..{len(self._throws) - 1})")
            removed = self._throws.pop(index)
            event = ThrowDeletedEvent(
                session_id=self._info.id,
                throw_index=index,
                remaining_throws=len(self._throws),
            )
        logger.info(f"Throw {removed.id} deleted from {event.session_id}")
        self._publish(event)
        return removed

    def get_throws(self) -> List[ThrowMetrics]:
        """Get all throws in session order (copy)."""
        with self._lock:
            return list(self._throws)

    def get_summary(self) -> SessionSummary:
        start = time.perf_counter()
        summary = self._aggregator.compute(self.get_throws())
        logger.debug(
            f"Session summary: {summary.throw_count} throws, consistency={summary.consistency:.1f}, "
            f"trend={summary.improvement.value} ({(time.perf_counter() - start) * 1000:.2f}ms)"
        )
        return summary

    def start_new_session(self, name: Optional[str] = None) -> SessionInfo:
        """Clear all throws and begin a new session."""
        with self._lock:
            discarded = len(self._throws)
            self._throws = []
            self._info = new_session_info(name)
            info = self._info
        logger.info(f"Started {info.id} ({info.name}); discarded {discarded} throws")
        self._publish(SessionStartedEvent(session_id=info.id, name=info.name))
        return info

    def _publish(self, event) -> None:
        if self._bus is not None:
            self._bus.publish(event)
