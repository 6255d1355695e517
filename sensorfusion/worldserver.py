"""World simulation server: ticks the world, fans states out, exposes controls."""

from __future__ import annotations

import argparse
import json
import logging
import threading
from collections import deque
from collections.abc import Iterator
from dataclasses import dataclass
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer
from urllib.parse import urlsplit

from sensorfusion.world import World

logger = logging.getLogger(__name__)

SUBSCRIPTION_CAPACITY = 10


@dataclass(frozen=True)
class ThreatState:
    """Snapshot of one threat as published to subscribers."""

    id: int
    x: float
    y: float
    vx: float
    vy: float
    level: int


@dataclass(frozen=True)
class WorldState:
    """Snapshot of the whole world at one tick."""

    threats: tuple[ThreatState, ...]
    tick: int


class Subscription:
    """A bounded stream of world states; new states are dropped while it is full."""

    def __init__(self, server: WorldServer, capacity: int = SUBSCRIPTION_CAPACITY) -> None:
        self._server = server
        self._capacity = capacity
        self._items: deque[WorldState] = deque()
        self._closed = False
        self._cond = threading.Condition()

    def offer(self, state: WorldState) -> bool:
        """Queue a state unless the subscription is closed or full."""
        with self._cond:
            if self._closed or len(self._items) >= self._capacity:
                return False
            self._items.append(state)
            self._cond.notify()
            return True

    def close(self) -> None:
        """Stop receiving states; pending ones can still be read."""
        self._server._unsubscribe(self)
        with self._cond:
            self._closed = True
            self._cond.notify_all()

    def __iter__(self) -> Iterator[WorldState]:
        return self

    def __next__(self) -> WorldState:
        with self._cond:
            while not self._items and not self._closed:
                self._cond.wait()
            if self._items:
                return self._items.popleft()
            raise StopIteration

    def __enter__(self) -> Subscription:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()


class WorldServer:
    """Owns the simulated world and publishes its state every tick."""

    def __init__(self, num_threats: int, width: float, height: float) -> None:
        self.num_threats = num_threats
        self.width = width
        self.height = height
        self.world = World.random(num_threats, width, height)
        self.tick_rate: float | None = None
        self._world_lock = threading.RLock()
        self._pause_lock = threading.Lock()
        self._sub_lock = threading.Lock()
        self._paused = False
        self._subscribers: list[Subscription] = []

    def subscribe(self) -> Subscription:
        """Register a new subscriber for world states."""
        subscription = Subscription(self)
        with self._sub_lock:
            self._subscribers.append(subscription)
        return subscription

    def _unsubscribe(self, subscription: Subscription) -> None:
        with self._sub_lock:
            if subscription in self._subscribers:
                self._subscribers.remove(subscription)

    def build_state(self) -> WorldState:
        """Snapshot the current world."""
        with self._world_lock:
            threats = tuple(
                ThreatState(id=t.id, x=t.x, y=t.y, vx=t.vx, vy=t.vy, level=t.level)
                for t in self.world.threats
            )
            return WorldState(threats=threats, tick=self.world.tick)

    def broadcast(self) -> None:
        """Send the current state to every subscriber that has room for it."""
        state = self.build_state()
        with self._sub_lock:
            subscribers = list(self._subscribers)
        for subscription in subscribers:
            subscription.offer(state)

    def tick(self) -> None:
        """Advance the world unless paused, then broadcast its state."""
        if not self.is_paused():
            with self._world_lock:
                self.world.step()
        self.broadcast()

    def run_simulation(self, tick_rate: float, stop: threading.Event | None = None) -> None:
        """Tick every tick_rate seconds until stop is set."""
        with self._pause_lock:
            self.tick_rate = tick_rate
        if stop is None:
            stop = threading.Event()
        while not stop.wait(tick_rate):
            self.tick()

    def pause(self) -> None:
        """Freeze the world; states keep being broadcast."""
        with self._pause_lock:
            self._paused = True
        logger.info("Simulation paused")

    def resume(self) -> None:
        """Let the world move again."""
        with self._pause_lock:
            self._paused = False
        logger.info("Simulation resumed")

    def restart(self) -> None:
        """Replace the world with a fresh random one and resume."""
        with self._pause_lock:
            self._paused = False
        with self._world_lock:
            self.world = World.random(self.num_threats, self.width, self.height)
        logger.info("Simulation restarted")

    def is_paused(self) -> bool:
        with self._pause_lock:
            return self._paused

    def status(self) -> dict[str, object]:
        """Report run state, current tick and number of threats."""
        paused = self.is_paused()
        with self._world_lock:
            tick = self.world.tick
            count = len(self.world.threats)
        return {"state": "paused" if paused else "running", "tick": tick, "threats": count}

    def make_control_server(self, host: str = "", port: int = 8081) -> ThreadingHTTPServer:
        """Build an HTTP server with /pause, /resume, /restart and /status."""
        world_server = self
        routes = {
            "/pause": self.pause,
            "/resume": self.resume,
            "/restart": self.restart,
            "/status": None,
        }

        class ControlHandler(BaseHTTPRequestHandler):
            def _cors(self) -> None:
                self.send_header("Access-Control-Allow-Origin", "*")
                self.send_header("Access-Control-Allow-Methods", "GET, POST, OPTIONS")
                self.send_header("Access-Control-Allow-Headers", "Content-Type")

            def _handle(self) -> None:
                path = urlsplit(self.path).path
                if path not in routes:
                    self.send_error(404)
                    return
                if self.command == "OPTIONS":
                    self.send_response(200)
                    self._cors()
                    self.send_header("Content-Length", "0")
                    self.end_headers()
                    return
                action = routes[path]
                if action is not None:
                    action()
                body = (json.dumps(world_server.status()) + "\n").encode()
                self.send_response(200)
                self._cors()
                self.send_header("Content-Type", "application/json")
                self.send_header("Content-Length", str(len(body)))
                self.end_headers()
                self.wfile.write(body)

            do_GET = _handle
            do_POST = _handle
            do_PUT = _handle
            do_DELETE = _handle
            do_OPTIONS = _handle

            def log_message(self, format: str, *args: object) -> None:
                logger.debug("control: " + format, *args)

        return ThreadingHTTPServer((host, port), ControlHandler)


def main(argv: list[str] | None = None) -> int:
    """Run the simulation and serve the control endpoints until interrupted."""
    parser = argparse.ArgumentParser(description="Run the world simulation server.")
    parser.add_argument("--threats", type=int, default=3, help="number of threats")
    parser.add_argument("--width", type=float, default=100.0, help="world width")
    parser.add_argument("--height", type=float, default=100.0, help="world height")
    parser.add_argument("--tick-rate", type=float, default=0.5, help="seconds per tick")
    parser.add_argument("--host", default="", help="control server host")
    parser.add_argument("--control-port", type=int, default=8081, help="control server port")
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(message)s")
    server = WorldServer(args.threats, args.width, args.height)
    stop = threading.Event()
    simulation = threading.Thread(
        target=server.run_simulation, args=(args.tick_rate, stop), daemon=True
    )
    simulation.start()

    httpd = server.make_control_server(args.host, args.control_port)
    logger.info("Control server listening on %s:%d", args.host, args.control_port)
    try:
        httpd.serve_forever()
    except KeyboardInterrupt:
        pass
    finally:
        stop.set()
        httpd.server_close()
    return 0


if __name__ == "__main__":
    raise SystemExit(main())