"""Signal processing for a single recorded delivery.

Trims the capture to the delivery, integrates forward velocity and scores
rotational stability.
"""

from .stability import StabilityAnalyzer, score_from_variance
from .trimming import DeliveryTrimmer, TrimResult, accel_magnitudes
from .velocity import VelocityIntegrator

__all__ = [
    "DeliveryTrimmer",
    "StabilityAnalyzer",
    "TrimResult",
    "VelocityIntegrator",
    "accel_magnitudes",
    "score_from_variance",
]
