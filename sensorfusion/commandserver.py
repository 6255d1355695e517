"""Command server: fuses incoming sensor readings and publishes confirmed threats."""

from __future__ import annotations

import asyncio
import logging
import queue
import threading
from collections.abc import Iterable
from dataclasses import dataclass
from typing import Any

from sensorfusion.fusion import FusedThreat, FusionEngine, SensorReading
from sensorfusion.tracker import KalmanTracker

logger = logging.getLogger(__name__)

BROADCAST_CAPACITY = 100
TRACK_INTERVAL = 0.1


@dataclass(frozen=True)
class Ack:
    """Acknowledgement returned once a reading stream has ended."""

    received: bool


class CommandServer:
    """Runs readings through fusion and tracking and queues confirmed threats."""

    def __init__(
        self,
        cluster_radius: float = 10.0,
        min_sensors: int = 2,
        *,
        fusion: FusionEngine | None = None,
        broadcast_capacity: int = BROADCAST_CAPACITY,
    ) -> None:
        self.fusion = fusion if fusion is not None else FusionEngine(cluster_radius, min_sensors)
        self.trackers: dict[int, KalmanTracker] = {}
        self._trackers_lock = threading.Lock()
        self.broadcast: queue.Queue[FusedThreat] = queue.Queue(maxsize=broadcast_capacity)

    def stream_readings(self, readings: Iterable[SensorReading]) -> Ack:
        """Consume a stream of readings; errors from the stream propagate."""
        for reading in readings:
            logger.info(
                "Received from %s: threat=%d pos=(%.1f, %.1f)",
                reading.sensor_id,
                reading.threat_id,
                reading.x,
                reading.y,
            )
            confirmed = self.fusion.process_reading(reading)
            if confirmed is None:
                continue
            self.apply_tracking(confirmed)
            try:
                self.broadcast.put_nowait(confirmed)
            except queue.Full:
                pass
        return Ack(received=True)

    def apply_tracking(self, threat: FusedThreat) -> None:
        """Smooth a threat's position with its own Kalman tracker."""
        with self._trackers_lock:
            tracker = self.trackers.get(threat.id)
            if tracker is None:
                tracker = KalmanTracker(0.1, 1.0)
                self.trackers[threat.id] = tracker
            tracker.predict(TRACK_INTERVAL)
            tracker.update(threat.x, threat.y)
            threat.x, threat.y, _, _ = tracker.state()

    async def forward_confirmed(self, hub: Any, stop: threading.Event) -> None:
        """Pass queued confirmed threats to the hub until stop is set."""
        while not stop.is_set():
            try:
                threat = await asyncio.to_thread(self.broadcast.get, True, 0.1)
            except queue.Empty:
                continue
            logger.info(
                "CONFIRMED: Threat %d at (%.1f, %.1f) level=%d sensors=%d",
                threat.id,
                threat.x,
                threat.y,
                threat.level,
                threat.sensor_count,
            )
            await hub.broadcast_threat(threat)

    def run_cleanup(self, interval: float = 1.0, stop: threading.Event | None = None) -> None:
        """Drop stale threats every interval seconds until stop is set."""
        if stop is None:
            stop = threading.Event()
        while not stop.wait(interval):
            self.fusion.cleanup()