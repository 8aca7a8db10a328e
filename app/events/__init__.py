"""Domain event system."""

from app.events.event_bus import EventBus
from app.events.event_types import (
    AutoStopTriggeredEvent,
    CaptureClearedEvent,
    DeliveryAnalyzedEvent,
    DeliveryRejectedEvent,
    RecordingStartedEvent,
    RecordingStoppedEvent,
    SessionExportedEvent,
    SessionStartedEvent,
    StopReason,
    ThrowAddedEvent,
    ThrowDeletedEvent,
)

__all__ = [
    "AutoStopTriggeredEvent",
    "CaptureClearedEvent",
    "DeliveryAnalyzedEvent",
    "DeliveryRejectedEvent",
    "EventBus",
    "RecordingStartedEvent",
    "RecordingStoppedEvent",
    "SessionExportedEvent",
    "SessionStartedEvent",
    "StopReason",
    "ThrowAddedEvent",
    "ThrowDeletedEvent",
]
