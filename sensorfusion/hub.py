"""WebSocket fan-out of confirmed threats to connected viewers."""

from __future__ import annotations

import asyncio
import json
import logging
import threading
from collections.abc import Hashable
from dataclasses import asdict, dataclass
from typing import Any

import websockets
from websockets.exceptions import ConnectionClosed

from sensorfusion.fusion import FusedThreat

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ThreatMessage:
    """The JSON message that describes one confirmed threat."""

    type: str
    id: int
    x: float
    y: float
    level: int
    confidence: float
    sensors: int

    @classmethod
    def from_threat(cls, threat: FusedThreat) -> ThreatMessage:
        """Describe a fused threat as a threat update."""
        return cls(
            type="threat_update",
            id=threat.id,
            x=threat.x,
            y=threat.y,
            level=threat.level,
            confidence=threat.confidence,
            sensors=threat.sensor_count,
        )

    def to_json(self) -> str:
        """Serialise the message as a JSON object."""
        return json.dumps(asdict(self))


class WebSocketHub:
    """Keeps track of connected clients and sends threat updates to all of them."""

    def __init__(self) -> None:
        self.clients: set[Any] = set()
        self._lock = threading.Lock()

    def add_client(self, client: Hashable) -> None:
        """Start sending updates to a client."""
        with self._lock:
            self.clients.add(client)

    def remove_client(self, client: Hashable) -> None:
        """Stop sending updates to a client; unknown clients are ignored."""
        with self._lock:
            self.clients.discard(client)

    async def handle_connection(self, connection: Any) -> None:
        """Register a connection, ignore what it sends, and drop it when it closes."""
        self.add_client(connection)
        address = getattr(connection, "remote_address", None)
        logger.info("WebSocket client connected: %s", address)
        try:
            async for _ in connection:
                pass
        except ConnectionClosed:
            pass
        finally:
            self.remove_client(connection)
            await connection.close()
            logger.info("WebSocket client disconnected: %s", address)

    async def broadcast_threat(self, threat: FusedThreat) -> None:
        """Send a threat update to every connected client."""
        data = ThreatMessage.from_threat(threat).to_json()
        with self._lock:
            clients = list(self.clients)
        for client in clients:
            try:
                await client.send(data)
            except Exception as error:  # one failing client must not stop the others
                logger.warning("WebSocket write error: %s", error)

    async def serve(self, host: str = "", port: int = 8080) -> None:
        """Accept WebSocket connections until cancelled."""
        async with websockets.serve(self.handle_connection, host, port):
            logger.info("WebSocket server listening on %s:%d", host, port)
            await asyncio.Future()