"""Thread-safe append-only sample store for one recording."""

from __future__ import annotations

import threading
from typing import Dict, List

from contracts import RawCapture, Sample, SampleKind
from exceptions import CaptureFrozenError, OutOfOrderTimestampError
from log_config.logger import get_logger

logger = get_logger(__name__)


class SampleBuffer:
    """Append-only log of acceleration and angular-rate samples.

    The live sensor feed is the only writer. Readers never see the mutable
    lists: ``snapshot()`` hands out an immutable ``RawCapture`` stamped with
    the buffer version, and ``reset()`` bumps the version so snapshots taken
    before it can be recognised as stale.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._streams: Dict[SampleKind, List[Sample]] = {
            SampleKind.ACCELERATION: [],
            SampleKind.ANGULAR_RATE: [],
        }
        self._version = 0
        self._frozen = False

    def append(self, sample: Sample, kind: SampleKind) -> None:
        """Append a sample to the stream for ``kind``.

        Raises:
            OutOfOrderTimestampError: If the timestamp is lower than the
                previous sample of the same kind
            CaptureFrozenError: If the buffer has been frozen
        """
        kind = SampleKind(kind)
        with self._lock:
            if self._frozen:
                raise CaptureFrozenError("Sample buffer is frozen", kind=kind.value)
            stream = self._streams[kind]
            if stream and sample.timestamp < stream[-1].timestamp:
                raise OutOfOrderTimestampError(
                    f"{kind.value} sample at {sample.timestamp:.4f}s precedes "
                    f"previous sample at {stream[-1].timestamp:.4f}s",
                    kind=kind.value,
                    timestamp=sample.timestamp,
                    previous=stream[-1].timestamp,
                )
            stream.append(sample)

    def snapshot(self) -> RawCapture:
        """Return an immutable view of everything appended so far."""
        with self._lock:
            return RawCapture(
                acceleration=tuple(self._streams[SampleKind.ACCELERATION]),
                angular_rate=tuple(self._streams[SampleKind.ANGULAR_RATE]),
                version=self._version,
            )

    def freeze(self) -> RawCapture:
        """Stop accepting samples and return the final snapshot."""
        with self._lock:
            self._frozen = True
        return self.snapshot()

    def reset(self) -> None:
        """Clear both streams for a new recording."""
        with self._lock:
            for stream in self._streams.values():
                stream.clear()
            self._version += 1
            self._frozen = False
        logger.debug(f"Sample buffer reset (version {self._version})")

    def is_current(self, capture: RawCapture) -> bool:
        """Check whether ``capture`` was taken since the last reset."""
        with self._lock:
            return capture.version == self._version

    def count(self, kind: SampleKind) -> int:
        with self._lock:
            return len(self._streams[SampleKind(kind)])

    def has_data(self) -> bool:
        with self._lock:
            return any(self._streams.values())

    @property
    def frozen(self) -> bool:
        with self._lock:
            return self._frozen

    @property
    def version(self) -> int:
        with self._lock:
            return self._version
