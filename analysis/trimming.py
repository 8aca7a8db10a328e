"""Trim a frozen capture down to the delivery interval."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Sequence, Tuple

import numpy as np

from configs.settings import TrimConfig
from contracts import (
    AlignmentMethod,
    FailureCode,
    RawCapture,
    Sample,
    StreamAlignment,
    TrimmedCapture,
)
from log_config.logger import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class TrimResult:
    capture: TrimmedCapture
    failure: Optional[FailureCode] = None

    @property
    def ok(self) -> bool:
        return self.failure is None


def accel_magnitudes(samples: Sequence[Sample]) -> np.ndarray:
    """Total acceleration magnitude per sample."""
    if not samples:
        return np.zeros(0, dtype=float)
    xyz = np.array([[s.ax, s.ay, s.az] for s in samples], dtype=float)
    return np.sqrt(np.sum(xyz * xyz, axis=1))


class DeliveryTrimmer:
    """Finds the push-off and settle points of a recorded delivery."""

    def __init__(self, config: Optional[TrimConfig] = None):
        self._config = config or TrimConfig()
        self._alignment = AlignmentMethod(self._config.alignment)

    def find_bounds(self, magnitudes: np.ndarray) -> Tuple[int, int]:
        """Return the inclusive ``(start_index, end_index)`` pair.

        Start is the first sample above ``start_threshold`` less
        ``pre_roll_samples``. End is found by scanning from
        ``start + end_search_offset`` for ``settle_samples`` consecutive calm
        samples, keeping ``settle_margin`` of them.
        """
        cfg = self._config
        n = len(magnitudes)

        start_index = 0
        above = np.flatnonzero(magnitudes > cfg.start_threshold)
        if above.size:
            start_index = max(0, int(above[0]) - cfg.pre_roll_samples)

        end_index = n - 1
        calm_count = 0
        for i in range(start_index + cfg.end_search_offset, n):
            if magnitudes[i] < cfg.settle_threshold:
                calm_count += 1
                if calm_count >= cfg.settle_samples:
                    end_index = i - cfg.settle_samples + cfg.settle_margin
                    break
            else:
                calm_count = 0

        # Custom margins can push the end outside [start, n - 1]
        end_index = max(start_index, min(end_index, n - 1))
        return start_index, end_index

    def trim(self, capture: RawCapture) -> TrimResult:
        """Slice both streams to the delivery and re-base timestamps to 0."""
        accel = capture.acceleration
        gyro = capture.angular_rate

        if not accel:
            logger.warning("No acceleration samples to trim")
            passthrough = TrimmedCapture(
                acceleration=(),
                angular_rate=tuple(gyro),
                start_index=0,
                end_index=-1,
                alignment=StreamAlignment(
                    method=self._alignment,
                    matched=not gyro,
                    acceleration_count=0,
                    angular_rate_count=len(gyro),
                ),
            )
            return TrimResult(capture=passthrough, failure=FailureCode.NO_DATA)

        start_index, end_index = self.find_bounds(accel_magnitudes(accel))
        kept_accel = accel[start_index:end_index + 1]
        offset = kept_accel[0].timestamp

        if self._alignment is AlignmentMethod.TIMESTAMP:
            kept_gyro = tuple(
                s for s in gyro
                if kept_accel[0].timestamp <= s.timestamp <= kept_accel[-1].timestamp
            )
            matched = bool(kept_gyro) or not gyro
        else:
            kept_gyro = gyro[start_index:end_index + 1]
            matched = not gyro or len(gyro) == len(accel)
            if not matched:
                logger.warning(
                    f"Stream length mismatch: {len(accel)} acceleration vs {len(gyro)} "
                    f"angular-rate samples; index alignment is approximate"
                )

        logger.info(
            f"Trimming data: {start_index} to {end_index} "
            f"({end_index - start_index + 1} of {len(accel)} samples)"
        )

        trimmed = TrimmedCapture(
            acceleration=tuple(s.shifted(offset) for s in kept_accel),
            angular_rate=tuple(s.shifted(offset) for s in kept_gyro),
            start_index=start_index,
            end_index=end_index,
            time_offset=offset,
            alignment=StreamAlignment(
                method=self._alignment,
                matched=matched,
                acceleration_count=len(accel),
                angular_rate_count=len(gyro),
            ),
        )
        return TrimResult(capture=trimmed)
