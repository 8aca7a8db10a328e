"""Shared data contracts for slide tracking."""

from .types import (
    AlignmentMethod,
    FailureCode,
    GlideEfficiency,
    ImprovementTrend,
    RawCapture,
    Sample,
    SampleKind,
    SessionInfo,
    SessionSummary,
    StabilitySeries,
    StreamAlignment,
    ThrowMetrics,
    TrimmedCapture,
    VelocitySeries,
)

__all__ = [
    "AlignmentMethod",
    "FailureCode",
    "GlideEfficiency",
    "ImprovementTrend",
    "RawCapture",
    "Sample",
    "SampleKind",
    "SessionInfo",
    "SessionSummary",
    "StabilitySeries",
    "StreamAlignment",
    "ThrowMetrics",
    "TrimmedCapture",
    "VelocitySeries",
]
