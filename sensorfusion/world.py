"""Ground-truth world: moving threats on a toroidal plane."""

from __future__ import annotations

import argparse
import math
import random
import time
from dataclasses import dataclass, field


@dataclass
class Threat:
    """A real threat with position, velocity, identifier and severity level."""

    x: float
    y: float
    vx: float
    vy: float
    id: int
    level: int


def update_position(threat: Threat, width: float, height: float) -> None:
    """Advance a threat by its velocity, wrapping around the world edges."""
    x = math.fmod(threat.x + threat.vx, width)
    if x < 0:
        x += width
    y = math.fmod(threat.y + threat.vy, height)
    if y < 0:
        y += height
    threat.x = x
    threat.y = y


def create_threats(num_threats: int, width: float, height: float) -> list[Threat]:
    """Create threats at random positions with random velocities and levels."""
    return [
        Threat(
            x=random.random() * width,
            y=random.random() * height,
            vx=random.random() * 4 - 2,
            vy=random.random() * 4 - 2,
            id=i,
            level=random.randint(1, 10),
        )
        for i in range(num_threats)
    ]


@dataclass
class World:
    """The simulated world and its current tick."""

    width: float
    height: float
    threats: list[Threat] = field(default_factory=list)
    tick: int = 0

    @classmethod
    def random(cls, num_threats: int, width: float, height: float) -> World:
        """Build a world populated with randomly placed threats."""
        return cls(width=width, height=height, threats=create_threats(num_threats, width, height))

    def step(self) -> None:
        """Move every threat once and advance the tick counter."""
        for threat in self.threats:
            update_position(threat, self.width, self.height)
        self.tick += 1


def main(argv: list[str] | None = None) -> int:
    """Run a world for a number of ticks, printing every threat each tick."""
    parser = argparse.ArgumentParser(description="Step a random world and print threat positions.")
    parser.add_argument("--threats", type=int, default=3, help="number of threats")
    parser.add_argument("--ticks", type=int, default=50, help="number of ticks to run")
    parser.add_argument("--delay", type=float, default=0.2, help="seconds to wait between ticks")
    args = parser.parse_args(argv)

    world = World.random(args.threats, 100.0, 100.0)
    for tick in range(args.ticks):
        world.step()
        print(f"Tick {tick}:")
        for threat in world.threats:
            print(
                f"  ID={threat.id} pos=({threat.x:.1f}, {threat.y:.1f}) "
                f"vel=({threat.vx:.1f}, {threat.vy:.1f})"
            )
        print()
        if args.delay > 0:
            time.sleep(args.delay)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())