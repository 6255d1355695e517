"""Clusters sensor readings into fused threats on a wrap-around world."""

from __future__ import annotations

import math
import threading
import time
from collections.abc import Callable, Iterable
from dataclasses import dataclass, field


@dataclass
class SensorReading:
    """One sensor's report of a threat."""

    sensor_id: str
    threat_id: int
    x: float
    y: float
    level: int
    confidence: float
    timestamp: int = 0


@dataclass
class FusedThreat:
    """A threat assembled from readings of one or more sensors."""

    id: int
    x: float
    y: float
    level: int
    confidence: float
    sensor_count: int
    last_seen: float
    readings: list[SensorReading] = field(default_factory=list)


def _circular_mean(pairs: Iterable[tuple[float, float]], span: float) -> float:
    """Confidence-weighted mean of coordinates on a circle of the given span."""
    sin_sum = 0.0
    cos_sum = 0.0
    for value, weight in pairs:
        angle = value / span * 2 * math.pi
        sin_sum += math.sin(angle) * weight
        cos_sum += math.cos(angle) * weight
    mean = math.atan2(sin_sum, cos_sum) / (2 * math.pi) * span
    return mean + span if mean < 0 else mean


class FusionEngine:
    """Groups nearby readings; a group counts once enough sensors agree."""

    def __init__(
        self,
        cluster_radius: float,
        min_sensors: int,
        *,
        expiration: float = 2.0,
        world_width: float = 100.0,
        world_height: float = 100.0,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.cluster_radius = cluster_radius
        self.min_sensors = min_sensors
        self.expiration = expiration
        self.world_width = world_width
        self.world_height = world_height
        self._clock = clock
        self._threats: dict[int, FusedThreat] = {}
        self._next_id = 1
        self._lock = threading.Lock()

    def __len__(self) -> int:
        with self._lock:
            return len(self._threats)

    def process_reading(self, reading: SensorReading) -> FusedThreat | None:
        """Fold a reading into the nearest threat; return it if confirmed."""
        with self._lock:
            for threat in self._threats.values():
                distance = self.wrapped_distance(reading.x, reading.y, threat.x, threat.y)
                if distance <= self.cluster_radius:
                    self._update_threat(threat, reading)
                    return threat if threat.sensor_count >= self.min_sensors else None

            threat = FusedThreat(
                id=self._next_id,
                x=reading.x,
                y=reading.y,
                level=int(reading.level),
                confidence=reading.confidence,
                sensor_count=1,
                last_seen=self._clock(),
                readings=[reading],
            )
            self._threats[self._next_id] = threat
            self._next_id += 1
            return None

    def _update_threat(self, threat: FusedThreat, reading: SensorReading) -> None:
        for index, existing in enumerate(threat.readings):
            if existing.sensor_id == reading.sensor_id:
                threat.readings[index] = reading
                break
        else:
            threat.readings.append(reading)
            threat.sensor_count = len(threat.readings)
        self._recalculate(threat)

    def _recalculate(self, threat: FusedThreat) -> None:
        readings = threat.readings
        count = len(readings)
        threat.x = _circular_mean(((r.x, r.confidence) for r in readings), self.world_width)
        threat.y = _circular_mean(((r.y, r.confidence) for r in readings), self.world_height)
        threat.confidence = sum(r.confidence for r in readings) / count
        threat.level = int(sum(int(r.level) for r in readings) / count)
        threat.last_seen = self._clock()

    def wrapped_distance(self, x1: float, y1: float, x2: float, y2: float) -> float:
        """Euclidean distance on the torus formed by the world's edges."""
        dx = abs(x2 - x1)
        dy = abs(y2 - y1)
        if dx > self.world_width / 2:
            dx = self.world_width - dx
        if dy > self.world_height / 2:
            dy = self.world_height - dy
        return math.hypot(dx, dy)

    def confirmed_threats(self) -> list[FusedThreat]:
        """Threats seen by at least the minimum number of sensors."""
        with self._lock:
            return [t for t in self._threats.values() if t.sensor_count >= self.min_sensors]

    def cleanup(self) -> None:
        """Forget threats not seen within the expiration time."""
        with self._lock:
            now = self._clock()
            stale = [tid for tid, t in self._threats.items() if now - t.last_seen > self.expiration]
            for tid in stale:
                del self._threats[tid]