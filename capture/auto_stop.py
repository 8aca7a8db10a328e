"""Live detection of the settled period that ends a delivery."""

from __future__ import annotations

from collections import deque
from typing import Deque, Optional, Tuple

from configs.settings import AutoStopConfig
from contracts import Sample
from log_config.logger import get_logger

logger = get_logger(__name__)


class AutoStopDetector:
    """One-shot detector for sustained calm motion.

    Observes acceleration samples inline with ingestion. After the grace
    period, at most one check runs per ``check_interval_s``; each check
    records the sample magnitude, drops entries older than
    ``calm_window_s`` and fires once the window holds enough checks that are
    all below ``calm_threshold``. The trigger is not re-armed until
    ``reset()``.
    """

    def __init__(self, config: Optional[AutoStopConfig] = None):
        self._config = config or AutoStopConfig()
        self._window: Deque[Tuple[float, float]] = deque()
        self._last_check = 0.0
        self._triggered = False
        self._trigger_time: Optional[float] = None

    def observe(self, sample: Sample, timestamp: Optional[float] = None) -> bool:
        """Feed one acceleration sample.

        Args:
            sample: Acceleration sample
            timestamp: Session-relative time; defaults to ``sample.timestamp``

        Returns:
            True exactly once, on the observation that completes the calm window
        """
        if self._triggered:
            return False

        t = sample.timestamp if timestamp is None else timestamp
        cfg = self._config
        if t <= cfg.grace_period_s or t - self._last_check < cfg.check_interval_s:
            return False
        self._last_check = t

        self._window.append((t, sample.accel_magnitude))
        while self._window and t - self._window[0][0] > cfg.calm_window_s:
            self._window.popleft()

        if len(self._window) < cfg.required_calm_checks:
            return False
        if any(magnitude >= cfg.calm_threshold for _, magnitude in self._window):
            return False

        self._triggered = True
        self._trigger_time = t
        logger.info(f"Auto-stop: {cfg.calm_window_s}s of calm motion detected at {t:.2f}s")
        return True

    def is_armed(self, timestamp: float) -> bool:
        """Whether the grace period has elapsed at ``timestamp``."""
        return timestamp > self._config.grace_period_s

    def reset(self) -> None:
        self._window.clear()
        self._last_check = 0.0
        self._triggered = False
        self._trigger_time = None

    @property
    def triggered(self) -> bool:
        return self._triggered

    @property
    def trigger_time(self) -> Optional[float]:
        return self._trigger_time

    @property
    def window_size(self) -> int:
        return len(self._window)
