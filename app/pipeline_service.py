"""In-process pipeline service to back the UI."""

from __future__ import annotations

import threading
from pathlib import Path
from typing import Optional

from app.events import EventBus, SessionExportedEvent
from app.pipeline.analysis.session_summary import TrainingSession
from app.pipeline.delivery_analysis import DeliveryAnalysis, DeliveryAnalyzer
from app.pipeline.recording.session_export import load_session_export, write_session_export
from app.pipeline.recording_session import RecordingSession
from configs.settings import AppConfig, load_config
from contracts import RawCapture, Sample, SessionSummary
from log_config.logger import configure_logging, get_logger

logger = get_logger(__name__)


class SlideTrackerService:
    """Wires recording, analysis and the training session together.

    Sensor callbacks feed ``push_acceleration`` / ``push_angular_rate``.
    A manual ``stop_recording`` or an auto-stop both end in the same place:
    the frozen capture is analyzed and, if it yields metrics, appended to the
    current training session.
    """

    def __init__(self, config: Optional[AppConfig] = None, event_bus: Optional[EventBus] = None):
        self._config = config or AppConfig()
        self._bus = event_bus or EventBus()
        self._recording = RecordingSession(self._config.auto_stop, event_bus=self._bus)
        self._analyzer = DeliveryAnalyzer(self._config, event_bus=self._bus)
        self._session = TrainingSession(config=self._config.session, event_bus=self._bus)
        self._last_analysis: Optional[DeliveryAnalysis] = None
        self._last_capture: Optional[RawCapture] = None
        self._analysis_lock = threading.Lock()

    @classmethod
    def from_config_file(cls, path: Path, event_bus: Optional[EventBus] = None) -> "SlideTrackerService":
        """Load config from YAML, apply its logging section and build the service."""
        config = load_config(path)
        log_dir = Path(config.logging.log_dir) if config.logging.log_dir else None
        configure_logging(config.logging.level, log_dir)
        return cls(config, event_bus=event_bus)

    @property
    def config(self) -> AppConfig:
        return self._config

    @property
    def event_bus(self) -> EventBus:
        return self._bus

    @property
    def recording(self) -> RecordingSession:
        return self._recording

    @property
    def session(self) -> TrainingSession:
        return self._session

    @property
    def last_analysis(self) -> Optional[DeliveryAnalysis]:
        with self._analysis_lock:
            return self._last_analysis

    def start_recording(self) -> None:
        self._recording.start()

    def push_acceleration(self, sample: Sample) -> Optional[DeliveryAnalysis]:
        """Feed one acceleration sample.

        Returns:
            The delivery analysis if this sample triggered an auto-stop
        """
        if self._recording.push_acceleration(sample):
            return self._complete(self._recording.capture)
        return None

    def push_angular_rate(self, sample: Sample) -> None:
        self._recording.push_angular_rate(sample)

    def stop_recording(self) -> Optional[DeliveryAnalysis]:
        """Stop the recording and analyze it.

        Stopping again, or after an auto-stop, returns the existing analysis
        without adding another throw.
        """
        return self._complete(self._recording.stop())

    def clear_recording(self) -> None:
        self._recording.clear()
        with self._analysis_lock:
            self._last_analysis = None
            self._last_capture = None

    def get_summary(self) -> SessionSummary:
        return self._session.get_summary()

    def start_new_session(self, name: Optional[str] = None) -> None:
        self._session.start_new_session(name)

    def export_session(self, out_dir: Optional[Path] = None) -> Path:
        """Write the current session to ``out_dir`` (config ``export_dir`` if None)."""
        out_dir = Path(out_dir) if out_dir is not None else Path(self._config.session.export_dir)
        path = write_session_export(self._session, out_dir)
        self._bus.publish(SessionExportedEvent(
            session_id=self._session.info.id,
            throw_count=self._session.throw_count,
            path=str(path),
        ))
        return path

    def import_session(self, path: Path) -> TrainingSession:
        """Replace the current session with one restored from an export."""
        self._session = load_session_export(path, config=self._config.session, event_bus=self._bus)
        return self._session

    def _complete(self, capture: Optional[RawCapture]) -> Optional[DeliveryAnalysis]:
        if capture is None:
            return None
        with self._analysis_lock:
            if capture is self._last_capture:
                return self._last_analysis
            analysis = self._analyzer.analyze(capture, buffer=self._recording.buffer)
            if analysis.ok:
                self._session.add_throw(analysis.metrics)
            self._last_analysis = analysis
            self._last_capture = capture
        return analysis
