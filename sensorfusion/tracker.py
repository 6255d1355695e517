"""A simplified constant-velocity Kalman tracker for 2-D positions."""

from __future__ import annotations

import math


class KalmanTracker:
    """Smooths noisy position measurements and estimates velocity."""

    def __init__(self, process_noise: float, measurement_noise: float) -> None:
        self.x = 0.0
        self.y = 0.0
        self.vx = 0.0
        self.vy = 0.0
        self.p = [[0.0] * 4 for _ in range(4)]
        self.q = process_noise
        self.r = measurement_noise
        self.initialized = False

    def initialize(self, x: float, y: float) -> None:
        """Start tracking at a position with zero velocity and unit uncertainty."""
        self.x = x
        self.y = y
        self.vx = 0.0
        self.vy = 0.0
        self.p = [[1.0 if i == j else 0.0 for j in range(4)] for i in range(4)]
        self.initialized = True

    def predict(self, dt: float) -> None:
        """Project the state forward by dt; does nothing before initialization."""
        if not self.initialized:
            return
        self.x += self.vx * dt
        self.y += self.vy * dt
        for i in range(4):
            self.p[i][i] += self.q

    def update(self, measured_x: float, measured_y: float) -> None:
        """Fold a position measurement into the state."""
        if not self.initialized:
            self.initialize(measured_x, measured_y)
            return

        innov_x = measured_x - self.x
        innov_y = measured_y - self.y

        kx = self.p[0][0] / (self.p[0][0] + self.r)
        ky = self.p[1][1] / (self.p[1][1] + self.r)

        self.x += kx * innov_x
        self.y += ky * innov_y

        self.vx = 0.8 * self.vx + 0.2 * innov_x
        self.vy = 0.8 * self.vy + 0.2 * innov_y

        self.p[0][0] *= 1 - kx
        self.p[1][1] *= 1 - ky

    def state(self) -> tuple[float, float, float, float]:
        """Return (x, y, vx, vy)."""
        return self.x, self.y, self.vx, self.vy

    def uncertainty(self) -> float:
        """Return the combined positional standard deviation."""
        return math.sqrt(self.p[0][0] + self.p[1][1])