"""Recording state machine for one delivery at a time.

Owns the sample buffer for the active recording, runs the auto-stop
detector inline with every acceleration sample, and hands a frozen
snapshot to the analysis pipeline when the recording stops.
"""

from __future__ import annotations

import threading
import time
from collections import deque
from enum import Enum
from typing import Deque, List, Optional

from capture import AutoStopDetector, SampleBuffer
from configs.settings import AutoStopConfig
from contracts import RawCapture, Sample, SampleKind
from app.events import (
    AutoStopTriggeredEvent,
    CaptureClearedEvent,
    EventBus,
    RecordingStartedEvent,
    RecordingStoppedEvent,
    StopReason,
)
from exceptions import OutOfOrderTimestampError, RecordingStateError
from log_config.logger import get_logger

logger = get_logger(__name__)


class RecordingPhase(Enum):
    """Recording phases with explicit transitions."""
    IDLE = "idle"
    RECORDING = "recording"
    AUTO_STOP_ARMED = "auto_stop_armed"  # Grace period over, detector live
    STOPPED = "stopped"


ACTIVE_PHASES = (RecordingPhase.RECORDING, RecordingPhase.AUTO_STOP_ARMED)


class RecordingSession:
    """Recording controller with idempotent stop.

    Transitions:
        IDLE/STOPPED -> RECORDING           start()
        RECORDING -> AUTO_STOP_ARMED         first sample past the grace period
        RECORDING/AUTO_STOP_ARMED -> STOPPED stop() or auto-stop signal
        any -> IDLE                          clear()

    Samples pushed outside an active phase are ignored.
    """

    def __init__(
        self,
        config: Optional[AutoStopConfig] = None,
        event_bus: Optional[EventBus] = None,
        buffer: Optional[SampleBuffer] = None,
    ):
        self._config = config or AutoStopConfig()
        self._bus = event_bus
        self._buffer = buffer or SampleBuffer()
        self._detector = AutoStopDetector(self._config)
        self._lock = threading.RLock()

        self._phase = RecordingPhase.IDLE
        self._recording_index = 0
        self._capture: Optional[RawCapture] = None
        self._stop_reason: Optional[StopReason] = None
        self._dropped_samples = 0

        # Event log for debugging
        self._event_log: Deque[dict] = deque(maxlen=1000)

    # Commands

    def start(self) -> None:
        """Begin a new recording.

        Raises:
            RecordingStateError: If a recording is already active
        """
        with self._lock:
            if self._phase in ACTIVE_PHASES:
                raise RecordingStateError(
                    f"Cannot start recording while {self._phase.value}"
                )
            self._buffer.reset()
            self._detector.reset()
            self._capture = None
            self._stop_reason = None
            self._dropped_samples = 0
            self._recording_index += 1
            self._transition(RecordingPhase.RECORDING)
            event = RecordingStartedEvent(
                recording_index=self._recording_index,
                timestamp_ns=time.time_ns(),
            )
        logger.info(f"Recording {self._recording_index} started")
        self._publish(event)

    def stop(self) -> Optional[RawCapture]:
        """Stop the active recording and return its frozen capture.

        Calling stop again, or after an auto-stop, returns the same capture
        without side effects. Returns None if nothing was ever recorded.
        """
        return self._stop(StopReason.MANUAL)

    def clear(self) -> None:
        """Discard recorded data and return to IDLE."""
        with self._lock:
            had_data = self._buffer.has_data()
            self._buffer.reset()
            self._detector.reset()
            self._capture = None
            self._stop_reason = None
            self._transition(RecordingPhase.IDLE)
        self._publish(CaptureClearedEvent(had_data=had_data))

    # Sensor feed

    def push_acceleration(self, sample: Sample) -> bool:
        """Append an acceleration sample and run the auto-stop check.

        Returns:
            True if this sample triggered an auto-stop
        """
        with self._lock:
            if self._phase not in ACTIVE_PHASES:
                return False
            if not self._append(sample, SampleKind.ACCELERATION):
                return False

            if self._phase is RecordingPhase.RECORDING and self._detector.is_armed(sample.timestamp):
                self._transition(RecordingPhase.AUTO_STOP_ARMED)

            if not self._detector.observe(sample):
                return False

        self._publish(AutoStopTriggeredEvent(
            recording_index=self._recording_index,
            timestamp_s=sample.timestamp,
        ))
        self._stop(StopReason.AUTO)
        return True

    def push_angular_rate(self, sample: Sample) -> None:
        with self._lock:
            if self._phase not in ACTIVE_PHASES:
                return
            self._append(sample, SampleKind.ANGULAR_RATE)

    # Queries

    @property
    def phase(self) -> RecordingPhase:
        with self._lock:
            return self._phase

    @property
    def is_recording(self) -> bool:
        with self._lock:
            return self._phase in ACTIVE_PHASES

    @property
    def capture(self) -> Optional[RawCapture]:
        """Frozen capture of the last stopped recording."""
        with self._lock:
            return self._capture

    @property
    def stop_reason(self) -> Optional[StopReason]:
        with self._lock:
            return self._stop_reason

    @property
    def dropped_samples(self) -> int:
        with self._lock:
            return self._dropped_samples

    @property
    def buffer(self) -> SampleBuffer:
        return self._buffer

    def get_event_log(self) -> List[dict]:
        """Get event log for debugging (thread-safe)."""
        with self._lock:
            return list(self._event_log)

    # Private methods

    def _append(self, sample: Sample, kind: SampleKind) -> bool:
        try:
            self._buffer.append(sample, kind)
            return True
        except OutOfOrderTimestampError as e:
            self._dropped_samples += 1
            logger.warning(f"Dropping sample: {e}")
            self._log_event("sample_dropped", {"kind": kind.value, "timestamp": sample.timestamp})
            return False

    def _stop(self, reason: StopReason) -> Optional[RawCapture]:
        with self._lock:
            if self._phase not in ACTIVE_PHASES:
                return self._capture

            self._capture = self._buffer.freeze()
            self._stop_reason = reason
            self._transition(RecordingPhase.STOPPED)
            capture = self._capture
            event = RecordingStoppedEvent(
                recording_index=self._recording_index,
                reason=reason,
                accel_count=len(capture.acceleration),
                angular_rate_count=len(capture.angular_rate),
                duration_s=capture.duration_s,
            )

        logger.info(
            f"Recording {event.recording_index} stopped ({reason.value}): "
            f"{event.accel_count} acceleration, {event.angular_rate_count} angular-rate samples"
        )
        self._publish(event)
        return capture

    def _transition(self, phase: RecordingPhase) -> None:
        self._log_event("transition", {"from": self._phase.value, "to": phase.value})
        self._phase = phase

    def _publish(self, event) -> None:
        if self._bus is not None:
            self._bus.publish(event)

    def _log_event(self, event_type: str, data: dict) -> None:
        """Log event for debugging."""
        self._event_log.append({
            "timestamp": time.monotonic_ns(),
            "type": event_type,
            "data": data,
        })
