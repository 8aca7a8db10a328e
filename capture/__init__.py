"""Live sample capture: buffering and auto-stop detection."""

from .auto_stop import AutoStopDetector
from .sample_buffer import SampleBuffer

__all__ = ["AutoStopDetector", "SampleBuffer"]
