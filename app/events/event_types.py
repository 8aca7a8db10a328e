"""Domain events published by the recording and analysis pipeline.

All events are immutable dataclasses that flow through the EventBus.
Presentation, persistence and usage-tracking collaborators subscribe to
them; the core never calls out to those collaborators directly.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from contracts import FailureCode, ThrowMetrics


class StopReason(str, Enum):
    MANUAL = "manual"
    AUTO = "auto"


@dataclass(frozen=True)
class RecordingStartedEvent:
    """Published when a recording begins.

    Published By: RecordingSession.start()

    Attributes:
        recording_index: Sequential recording number for this controller
        timestamp_ns: Wall-clock start time in nanoseconds
    """
    recording_index: int
    timestamp_ns: int


@dataclass(frozen=True)
class RecordingStoppedEvent:
    """Published once per recording when it stops, whatever the trigger.

    Published By: RecordingSession

    Attributes:
        recording_index: Sequential recording number
        reason: Manual stop or auto-stop
        accel_count: Acceleration samples captured
        angular_rate_count: Angular-rate samples captured
        duration_s: Span of the acceleration stream
    """
    recording_index: int
    reason: StopReason
    accel_count: int
    angular_rate_count: int
    duration_s: float


@dataclass(frozen=True)
class AutoStopTriggeredEvent:
    """Published when sustained calm motion ends a recording.

    Subscribed By: UI layer (shows the "motion settled" notice)
    """
    recording_index: int
    timestamp_s: float


@dataclass(frozen=True)
class CaptureClearedEvent:
    """Published when recorded data is discarded."""
    had_data: bool


@dataclass(frozen=True)
class DeliveryAnalyzedEvent:
    """Published when a delivery produced a metrics record."""
    metrics: ThrowMetrics
    duration_ms: float


@dataclass(frozen=True)
class DeliveryRejectedEvent:
    """Published when a delivery produced no metrics (e.g. no samples)."""
    failure: FailureCode


@dataclass(frozen=True)
class SessionStartedEvent:
    session_id: str
    name: str


@dataclass(frozen=True)
class ThrowAddedEvent:
    session_id: str
    throw_id: str
    throw_count: int


@dataclass(frozen=True)
class ThrowDeletedEvent:
    session_id: str
    throw_index: int
    remaining_throws: int


@dataclass(frozen=True)
class SessionExportedEvent:
    session_id: str
    throw_count: int
    path: str
