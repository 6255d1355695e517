"""Sensor noise model: position jitter, misses, false positives and level drift."""

from __future__ import annotations

import math
import random
from dataclasses import dataclass


def gaussian(mean: float, std_dev: float) -> float:
    """Return a normally distributed sample using the Box-Muller transform."""
    u1 = 1.0 - random.random()  # in (0, 1], keeps the logarithm finite
    u2 = random.random()
    z = math.sqrt(-2.0 * math.log(u1)) * math.cos(2.0 * math.pi * u2)
    return mean + z * std_dev


@dataclass(frozen=True)
class NoiseConfig:
    """How imperfect a sensor's observations are."""

    position_std_dev: float = 3.0
    false_positive_rate: float = 0.05
    miss_rate: float = 0.1
    level_variance: int = 2

    def should_miss(self) -> bool:
        """Decide whether a real threat goes unseen this time."""
        return random.random() < self.miss_rate

    def should_false_positive(self) -> bool:
        """Decide whether to report a threat that does not exist."""
        return random.random() < self.false_positive_rate

    def add_position_noise(self, x: float, y: float) -> tuple[float, float]:
        """Jitter a position with independent Gaussian noise on each axis."""
        return gaussian(x, self.position_std_dev), gaussian(y, self.position_std_dev)

    def add_level_noise(self, level: int) -> int:
        """Shift a level by up to the configured variance, clamped to 1..10."""
        if self.level_variance < 0:
            raise ValueError(f"level variance must not be negative: {self.level_variance}")
        noisy = level + random.randint(-self.level_variance, self.level_variance)
        return max(1, min(10, noisy))