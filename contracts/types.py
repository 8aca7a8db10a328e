"""Core data contracts for capture, trimming, derived series, and metrics."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Tuple


class SampleKind(str, Enum):
    ACCELERATION = "acceleration"
    ANGULAR_RATE = "angular_rate"


@dataclass(frozen=True)
class Sample:
    """One sensor reading.

    Acceleration (m/s²): x forward along the sheet, y lateral, z vertical.
    Angular rate (°/s): x pitch, y roll, z yaw.
    """
    timestamp: float
    ax: float = 0.0
    ay: float = 0.0
    az: float = 0.0
    gx: float = 0.0
    gy: float = 0.0
    gz: float = 0.0

    @property
    def accel_magnitude(self) -> float:
        return math.sqrt(self.ax * self.ax + self.ay * self.ay + self.az * self.az)

    def shifted(self, offset: float) -> "Sample":
        return Sample(
            timestamp=self.timestamp - offset,
            ax=self.ax,
            ay=self.ay,
            az=self.az,
            gx=self.gx,
            gy=self.gy,
            gz=self.gz,
        )


@dataclass(frozen=True)
class RawCapture:
    acceleration: Tuple[Sample, ...] = ()
    angular_rate: Tuple[Sample, ...] = ()
    version: int = 0

    def is_empty(self) -> bool:
        return not self.acceleration and not self.angular_rate

    @property
    def duration_s(self) -> float:
        if not self.acceleration:
            return 0.0
        return self.acceleration[-1].timestamp - self.acceleration[0].timestamp


class AlignmentMethod(str, Enum):
    INDEX = "index"
    TIMESTAMP = "timestamp"


@dataclass(frozen=True)
class StreamAlignment:
    method: AlignmentMethod = AlignmentMethod.INDEX
    matched: bool = True
    acceleration_count: int = 0
    angular_rate_count: int = 0


@dataclass(frozen=True)
class TrimmedCapture:
    acceleration: Tuple[Sample, ...]
    angular_rate: Tuple[Sample, ...]
    start_index: int
    end_index: int
    time_offset: float = 0.0
    alignment: StreamAlignment = field(default_factory=StreamAlignment)

    def __len__(self) -> int:
        return len(self.acceleration)


@dataclass(frozen=True)
class VelocitySeries:
    timestamps: Tuple[float, ...] = ()
    velocities: Tuple[float, ...] = ()

    def __len__(self) -> int:
        return len(self.velocities)

    def points(self) -> Tuple[Tuple[float, float], ...]:
        return tuple(zip(self.timestamps, self.velocities))


@dataclass(frozen=True)
class StabilitySeries:
    timestamps: Tuple[float, ...] = ()
    values: Tuple[float, ...] = ()

    def __len__(self) -> int:
        return len(self.values)


class GlideEfficiency(str, Enum):
    EXCELLENT = "Excellent"
    VERY_GOOD = "Very Good"
    GOOD = "Good"
    POOR = "Poor (High Drag)"


class ImprovementTrend(str, Enum):
    IMPROVING = "Improving"
    DECLINING = "Declining"
    STABLE = "Stable"


class FailureCode(str, Enum):
    NO_DATA = "NO_DATA"


@dataclass(frozen=True)
class ThrowMetrics:
    id: str
    timestamp: str
    pushoff_strength: float
    peak_velocity: float
    slide_duration: float
    decel_rate: float
    stability_score: float
    glide_efficiency: GlideEfficiency


@dataclass(frozen=True)
class SessionSummary:
    throw_count: int
    avg_pushoff: float
    avg_velocity: float
    avg_stability: float
    best_glide: str
    consistency: float
    improvement: ImprovementTrend


@dataclass(frozen=True)
class SessionInfo:
    id: str
    name: str
    start_time: str
    notes: Optional[str] = None
