# sensorfusion

A small simulation of distributed sensor fusion. A ground-truth world moves a
handful of threats across a wrapping field; sensors observe that world with
Gaussian position noise, missed detections and false positives; a command
side clusters the readings from several sensors, confirms a threat once enough
distinct sensors agree, smooths its position with a simple Kalman tracker, and
can push confirmed threats to WebSocket clients.

## Installing

```
pip install .
```

For running the tests:

```
pip install ".[test]"
pytest
```

## Commands

### `sensorfusion-world`

Builds a random 100 × 100 world, steps it and prints every threat's position
and velocity after each tick.

```
sensorfusion-world [--threats N] [--ticks N] [--delay SECONDS]
```

Defaults: 3 threats, 50 ticks, 0.2 seconds between ticks.

### `sensorfusion-worldserver`

Runs the simulation in a background thread, stepping the world every tick and
broadcasting its state to in-process subscribers, and serves an HTTP control
interface until interrupted.

```
sensorfusion-worldserver [--threats N] [--width W] [--height H]
                         [--tick-rate SECONDS] [--host HOST] [--control-port PORT]
```

Defaults: 3 threats, a 100 × 100 world, 0.5 seconds per tick, control port
8081 on all interfaces.

Control endpoints (any of GET, POST, PUT, DELETE):

- `/pause` — freeze the world; states are still broadcast each tick.
- `/resume` — let the world move again.
- `/restart` — replace the world with a fresh random one and resume.
- `/status` — report only.

Each answers with JSON such as `{"state": "running", "tick": 12, "threats": 3}`
and carries permissive CORS headers; `OPTIONS` returns 200 with those headers
and no body. Other paths return 404.

## Using the library

A whole pipeline in one process:

```python
from sensorfusion.worldserver import WorldServer
from sensorfusion.observer import Sensor
from sensorfusion.commandserver import CommandServer

server = WorldServer(3, 100.0, 100.0)
sensors = [Sensor(f"sensor-{n}") for n in range(3)]
command = CommandServer(cluster_radius=10.0, min_sensors=2)

for _ in range(10):
    server.tick()
    state = server.build_state()
    for sensor in sensors:
        sensor.process_world_state(state)
        command.stream_readings(sensor.drain())

for threat in command.fusion.confirmed_threats():
    print(threat.id, round(threat.x, 1), round(threat.y, 1), threat.sensor_count)
```

### Modules

- `sensorfusion.world` — `Threat`, `World`, `update_position` and
  `create_threats`. `World.random(num_threats, width, height)` places threats
  at random with velocities in [-2, 2) and levels 1–10; `World.step()` moves
  each threat, wrapping at the edges, and advances `tick`.
- `sensorfusion.noise` — `gaussian(mean, std_dev)` (Box–Muller) and the frozen
  dataclass `NoiseConfig` with `position_std_dev=3.0`,
  `false_positive_rate=0.05`, `miss_rate=0.1` and `level_variance=2`. Its
  methods `should_miss`, `should_false_positive`, `add_position_noise` and
  `add_level_noise` (clamped to 1–10; a negative variance raises `ValueError`).
- `sensorfusion.observer` — `Sensor(sensor_id, noise=None, *, capacity=100)`.
  `process_world_state(state)` turns each seen threat into a `SensorReading`
  with confidence 0.7–1.0 and sometimes adds a false one (`threat_id` −1,
  confidence 0.3–0.7); readings go into the bounded `readings` queue and are
  dropped when it is full. `observe(states)` processes an iterable of states
  and returns how many it saw; `drain()` returns the buffered readings, oldest
  first.
- `sensorfusion.fusion` — `SensorReading`, `FusedThreat` and
  `FusionEngine(cluster_radius, min_sensors, *, expiration=2.0,
  world_width=100.0, world_height=100.0, clock=time.monotonic)`.
  `process_reading` joins a reading to the first threat within the radius
  (distance measured on the wrapping world by `wrapped_distance`), replacing an
  earlier reading from the same sensor, or starts a new pending threat. The
  position is a confidence-weighted circular mean; confidence and level are
  plain averages. It returns the threat once `sensor_count >= min_sensors`,
  otherwise `None`. `confirmed_threats()` lists such threats; `cleanup()`
  forgets those not seen within `expiration` seconds.
- `sensorfusion.tracker` — `KalmanTracker(process_noise, measurement_noise)`
  with `initialize`, `predict(dt)`, `update(measured_x, measured_y)` (the first
  update initializes), `state()` returning `(x, y, vx, vy)`, and
  `uncertainty()`.
- `sensorfusion.worldserver` — `WorldServer`, `Subscription`, `WorldState` and
  `ThreatState`. `subscribe()` returns a bounded (10 states) iterable
  subscription that drops new states while full and ends once closed; it is
  also a context manager. `tick()`, `run_simulation(tick_rate, stop)`,
  `pause()`, `resume()`, `restart()`, `is_paused()`, `status()` and
  `make_control_server(host, port)`, which returns the `ThreadingHTTPServer`
  behind the control endpoints above.
- `sensorfusion.commandserver` — `CommandServer(cluster_radius=10.0,
  min_sensors=2)` and `Ack`. `stream_readings(readings)` fuses an iterable of
  readings, smooths each confirmed threat through its own tracker
  (`apply_tracking`), puts it on the bounded `broadcast` queue (100 entries,
  extras dropped) and returns `Ack(received=True)`.
  `forward_confirmed(hub, stop)` is a coroutine that hands queued threats to a
  hub until `stop` is set; `run_cleanup(interval, stop)` calls the fusion
  engine's `cleanup()` every `interval` seconds.
- `sensorfusion.hub` — `ThreatMessage` and `WebSocketHub`.
  `ThreatMessage.from_threat(threat).to_json()` gives
  `{"type": "threat_update", "id", "x", "y", "level", "confidence", "sensors"}`.
  The hub keeps a set of clients; `broadcast_threat(threat)` sends that JSON to
  each, logging and skipping any that fail, and `serve(host, port)` accepts
  WebSocket connections (default port 8080) until cancelled.

## What it does not do

- World states and sensor readings move between the parts only inside one
  Python process: subscriptions yield `WorldState` objects, and
  `CommandServer.stream_readings` takes any iterable of `SensorReading`. There
  is no network protocol for sensors to subscribe to a world server or to
  send readings to a command server.
- There is no command that starts the command server or the sensors; wire
  `CommandServer`, `WebSocketHub` and `Sensor` together in your own code, for
  example running `hub.serve()` and `command.forward_confirmed(hub, stop)`
  under `asyncio` and `command.run_cleanup(1.0, stop)` in a thread.