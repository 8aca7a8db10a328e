"""Forward velocity reconstruction from trimmed acceleration."""

from __future__ import annotations

import numpy as np
from scipy.integrate import cumulative_trapezoid

from contracts import TrimmedCapture, VelocitySeries


class VelocityIntegrator:
    """Trapezoidal integration of the forward (x) acceleration axis.

    No gravity compensation: the forward axis is assumed level at rest.
    Velocities are not clamped, so a net backwards drift shows up as
    negative values.
    """

    def integrate(self, trimmed: TrimmedCapture) -> VelocitySeries:
        accel = trimmed.acceleration
        if not accel:
            return VelocitySeries()

        t = np.array([s.timestamp for s in accel], dtype=float)
        ax = np.array([s.ax for s in accel], dtype=float)
        if len(ax) < 2:
            velocity = np.zeros(1, dtype=float)
        else:
            velocity = cumulative_trapezoid(ax, t, initial=0.0)

        return VelocitySeries(
            timestamps=tuple(float(v) for v in t),
            velocities=tuple(float(v) for v in velocity),
        )
