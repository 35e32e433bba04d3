#!/usr/bin/env python3
"""
Data models for the gravity simulator.

This module defines the state shared between the physics core and the
front-end: bodies with their history buffers, the tunable simulation
parameters, and the frozen per-tick snapshot.

Usage notes
- position and velocity are (x, y) tuples in simulation units; mass is kept
  strictly positive by the store.
- trail and prediction buffers are preallocated at creation and never grow.
- Snapshot is immutable; force evaluation inside a tick reads only from it.
"""
import logging
import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Iterator, List, NamedTuple, Sequence, Tuple, Union

from .constants import (
    DENSITY_DEFAULT,
    DENSITY_FLOOR,
    GRAVITY_DEFAULT,
    PREDICT_LENGTH,
    SOFTENING_DEFAULT,
    TRAIL_CAPACITY,
    WHITE,
)
from .vector_utils import Vec2, ZERO

logger = logging.getLogger("gravsim")


class _Choice(Enum):
    """Enum whose members can be looked up by value or by (case-insensitive) name."""

    @classmethod
    def coerce(cls, value: Union["_Choice", str]):
        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except ValueError:
            pass
        if isinstance(value, str):
            try:
                return cls[value.upper()]
            except KeyError:
                pass
        choices = ", ".join(m.value for m in cls)
        raise ValueError(f"unknown {cls.__name__} {value!r} (expected one of: {choices})")


class Integrator(_Choice):
    EULER = "Euler"
    VERLET = "Verlet"
    RK4 = "RK4"


class CollisionMode(_Choice):
    NONE = "None"
    MERGE = "Merge"
    ELASTIC = "Elastic"


class BodyState(NamedTuple):
    """The (position, velocity) pair an integrator produces."""
    position: Vec2
    velocity: Vec2


class Trail:
    """
    Fixed-capacity ring buffer of past positions.

    Slots are preallocated; pushing past capacity overwrites the oldest
    sample. ``nth_latest(0)`` is the most recently pushed position.
    """

    __slots__ = ("positions", "count", "oldest")

    def __init__(self, capacity: int = TRAIL_CAPACITY):
        if capacity < 1:
            raise ValueError("trail capacity must be at least 1")
        self.positions: List[Vec2] = [ZERO] * capacity
        self.count = 0
        self.oldest = 0

    @property
    def capacity(self) -> int:
        return len(self.positions)

    def push(self, position: Vec2) -> None:
        capacity = len(self.positions)
        self.positions[(self.oldest + self.count) % capacity] = position
        if self.count < capacity:
            self.count += 1
        else:
            self.oldest = (self.oldest + 1) % capacity

    def nth_latest_slot(self, n: int) -> int:
        """Slot index holding the n-th most recent sample (n=0 is the newest)."""
        if not 0 <= n < self.count:
            raise IndexError(f"trail holds {self.count} samples, asked for #{n}")
        return (self.oldest + self.count - 1 - n) % len(self.positions)

    def nth_latest(self, n: int) -> Vec2:
        return self.positions[self.nth_latest_slot(n)]

    def clear(self) -> None:
        self.count = 0
        self.oldest = 0

    def __len__(self) -> int:
        return self.count

    def __iter__(self) -> Iterator[Vec2]:
        """Iterate from oldest to newest."""
        capacity = len(self.positions)
        for k in range(self.count):
            yield self.positions[(self.oldest + k) % capacity]


class Prediction:
    """Future positions for one body plus the rollout's scratch velocity."""

    __slots__ = ("positions", "velocity")

    def __init__(self, horizon: int = PREDICT_LENGTH):
        if horizon < 0:
            raise ValueError("prediction horizon must be non-negative")
        self.positions: List[Vec2] = [ZERO] * horizon
        self.velocity: Vec2 = ZERO

    @property
    def horizon(self) -> int:
        return len(self.positions)


@dataclass
class Body:
    """
    A gravitating body.

    Fields:
    - position: 2D position (x, y)
    - velocity: 2D velocity (vx, vy)
    - mass: strictly positive mass
    - movable: immovable bodies attract others but are never integrated
    - color: RGB tuple used for rendering; the core never reads it
    - trail: ring buffer of past positions
    - prediction: forward-simulated positions filled by the predictor
    """
    position: Vec2
    velocity: Vec2
    mass: float
    movable: bool = True
    color: Tuple[int, int, int] = WHITE
    trail: Trail = field(default_factory=Trail, repr=False)
    prediction: Prediction = field(default_factory=Prediction, repr=False)


@dataclass(frozen=True)
class Snapshot:
    """Frozen copy of every body's position, velocity and mass at tick start."""
    positions: Tuple[Vec2, ...]
    velocities: Tuple[Vec2, ...]
    masses: Tuple[float, ...]

    @classmethod
    def from_bodies(cls, bodies: Sequence) -> "Snapshot":
        """Accepts anything exposing position, velocity and mass."""
        return cls(
            positions=tuple(b.position for b in bodies),
            velocities=tuple(b.velocity for b in bodies),
            masses=tuple(float(b.mass) for b in bodies),
        )

    def __len__(self) -> int:
        return len(self.positions)


@dataclass
class SimulationParameters:
    """Tunable physics parameters; degenerate values are clamped on assignment."""
    gravity: float = GRAVITY_DEFAULT
    softening: float = SOFTENING_DEFAULT
    density: float = DENSITY_DEFAULT
    integrator: Integrator = Integrator.VERLET
    collision_mode: CollisionMode = CollisionMode.NONE

    NAMES = ("gravity", "softening", "density", "integrator", "collision_mode")

    def __post_init__(self):
        for name in self.NAMES:
            self.set(name, getattr(self, name))

    def set(self, name: str, value) -> None:
        """Assign one parameter by name, sanitizing the value first."""
        if name not in self.NAMES:
            raise KeyError(f"unknown simulation parameter {name!r}")
        if name == "integrator":
            value = Integrator.coerce(value)
        elif name == "collision_mode":
            value = CollisionMode.coerce(value)
        else:
            value = _sanitize_number(name, value)
        setattr(self, name, value)

    def radius(self, mass: float) -> float:
        return radius_for_mass(mass, self.density)


def radius_for_mass(mass: float, density: float) -> float:
    """Radius derived from mass: (mass / density) ** (1/3)."""
    density = max(density, DENSITY_FLOOR)
    return (max(mass, 0.0) / density) ** (1.0 / 3.0)


def _sanitize_number(name: str, value) -> float:
    value = float(value)
    if math.isnan(value) or math.isinf(value):
        raise ValueError(f"{name} must be finite, got {value!r}")
    if name == "density" and value < DENSITY_FLOOR:
        logger.warning("density %r clamped to %r", value, DENSITY_FLOOR)
        return DENSITY_FLOOR
    if name == "softening" and value < 0.0:
        logger.warning("softening %r clamped to 0", value)
        return 0.0
    return value
