"""Custom exception classes for SlideTracker."""

from __future__ import annotations

from typing import Optional


class SlideTrackerError(Exception):
    """Base exception for all SlideTracker errors."""

    pass


class CaptureError(SlideTrackerError):
    """Base exception for sample capture errors."""

    def __init__(self, message: str, kind: Optional[str] = None):
        self.kind = kind
        super().__init__(message)


class OutOfOrderTimestampError(CaptureError):
    """Raised when a sample's timestamp goes backwards for its stream."""

    def __init__(
        self,
        message: str,
        kind: Optional[str] = None,
        timestamp: Optional[float] = None,
        previous: Optional[float] = None,
    ):
        self.timestamp = timestamp
        self.previous = previous
        super().__init__(message, kind=kind)


class CaptureFrozenError(CaptureError):
    """Raised when appending to a buffer that has been frozen."""

    pass


class RecordingStateError(SlideTrackerError):
    """Raised when a recording command is not valid in the current state."""

    pass


class ConfigError(SlideTrackerError):
    """Base exception for configuration errors."""

    pass


class InvalidConfigError(ConfigError):
    """Raised when configuration file is invalid or corrupted."""

    pass


class ConfigValidationError(ConfigError):
    """Raised when configuration fails schema validation."""

    def __init__(self, message: str, validation_errors: Optional[list] = None):
        self.validation_errors = validation_errors or []
        super().__init__(message)


class AnalysisError(SlideTrackerError):
    """Base exception for delivery analysis errors."""

    pass


class StaleCaptureError(AnalysisError):
    """Raised when a capture snapshot predates the buffer's last reset."""

    pass


class ExportError(SlideTrackerError):
    """Raised when a session export cannot be written or read."""

    pass
