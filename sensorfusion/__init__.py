"""Simulated threat world, noisy sensors, multi-sensor fusion with tracking, and WebSocket publishing."""

__version__ = "0.1.0"

__all__ = [
    "commandserver",
    "fusion",
    "hub",
    "noise",
    "observer",
    "tracker",
    "world",
    "worldserver",
]