"""A simulated sensor that turns world states into noisy readings."""

from __future__ import annotations

import logging
import queue
import random
import time
from collections.abc import Callable, Iterable

from sensorfusion.fusion import SensorReading
from sensorfusion.noise import NoiseConfig
from sensorfusion.worldserver import WorldState

logger = logging.getLogger(__name__)


class Sensor:
    """Observes the world imperfectly and buffers the readings it produces."""

    def __init__(
        self,
        sensor_id: str,
        noise: NoiseConfig | None = None,
        *,
        capacity: int = 100,
        clock: Callable[[], int] = time.time_ns,
    ) -> None:
        self.id = sensor_id
        self.noise = noise if noise is not None else NoiseConfig()
        self.readings: queue.Queue[SensorReading] = queue.Queue(maxsize=capacity)
        self._clock = clock

    def _offer(self, reading: SensorReading) -> bool:
        try:
            self.readings.put_nowait(reading)
        except queue.Full:
            return False
        return True

    def process_world_state(self, state: WorldState) -> None:
        """Produce readings for the threats seen, plus an occasional false one."""
        now = self._clock()
        for threat in state.threats:
            if self.noise.should_miss():
                continue
            x, y = self.noise.add_position_noise(threat.x, threat.y)
            reading = SensorReading(
                sensor_id=self.id,
                threat_id=threat.id,
                x=x,
                y=y,
                level=self.noise.add_level_noise(int(threat.level)),
                confidence=0.7 + random.random() * 0.3,
                timestamp=now,
            )
            if not self._offer(reading):
                logger.warning("[%s] Reading queue full, dropping", self.id)

        if self.noise.should_false_positive():
            self._offer(
                SensorReading(
                    sensor_id=self.id,
                    threat_id=-1,
                    x=random.random() * 100,
                    y=random.random() * 100,
                    level=random.randint(1, 5),
                    confidence=0.3 + random.random() * 0.4,
                    timestamp=now,
                )
            )

    def observe(self, states: Iterable[WorldState]) -> int:
        """Process every state from a stream; return how many were seen."""
        count = 0
        for state in states:
            self.process_world_state(state)
            count += 1
        return count

    def drain(self) -> list[SensorReading]:
        """Take all buffered readings, oldest first."""
        drained = []
        while True:
            try:
                drained.append(self.readings.get_nowait())
            except queue.Empty:
                return drained