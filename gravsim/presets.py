#!/usr/bin/env python3
"""
Built-in starting configurations.

Each preset is a list of plain body specifications (dicts with position,
velocity, mass, movable and color) that Simulation.init feeds through
add_body, so presets get the same clamping and buffer setup as user-created
bodies.

Presets
=======
- "empty": no bodies.
- "demo": the canonical three-body scene, three mass-100 bodies around the
  middle of a 1200x900 view.
- "binary": two equal masses on a circular mutual orbit.
- "sun": an immovable central mass with one planet on a circular orbit.
"""
from typing import Callable, Dict, List, Tuple

from .constants import GRAVITY_DEFAULT, PALETTE, SOFTENING_DEFAULT, VIEW_HEIGHT, VIEW_WIDTH, WHITE
from .physics import binary_orbit_speed, circular_orbit_velocity
from .vector_utils import Vec2

BodySpec = Dict[str, object]


def _spec(position: Vec2, velocity: Vec2, mass: float, movable: bool = True,
          color: Tuple[int, int, int] = WHITE) -> BodySpec:
    return {
        "position": (float(position[0]), float(position[1])),
        "velocity": (float(velocity[0]), float(velocity[1])),
        "mass": float(mass),
        "movable": movable,
        "color": color,
    }


def template_empty() -> List[BodySpec]:
    return []


def template_demo(width: float = VIEW_WIDTH, height: float = VIEW_HEIGHT) -> List[BodySpec]:
    return [
        _spec((width / 3.0, height / 3.0), (10.0, 60.0), 100.0),
        _spec((2.0 * width / 3.0, height / 3.0), (-80.0, 10.0), 100.0),
        _spec((width / 2.0, 2.0 * height / 3.0), (50.0, -10.0), 100.0),
    ]


def template_binary(mass: float = 100.0, separation: float = 1000.0,
                    center: Vec2 = (VIEW_WIDTH / 2.0, VIEW_HEIGHT / 2.0),
                    gravity: float = GRAVITY_DEFAULT,
                    softening: float = SOFTENING_DEFAULT) -> List[BodySpec]:
    """Two equal masses on opposite sides of `center`, moving in opposite directions."""
    speed = binary_orbit_speed(gravity, mass, separation, softening)
    half = separation / 2.0
    cx, cy = center
    return [
        _spec((cx - half, cy), (0.0, -speed), mass, color=PALETTE[1]),
        _spec((cx + half, cy), (0.0, speed), mass, color=PALETTE[6]),
    ]


def template_sun(sun_mass: float = 600.0, planet_mass: float = 1.0, radius: float = 300.0,
                 center: Vec2 = (VIEW_WIDTH / 2.0, VIEW_HEIGHT / 2.0),
                 gravity: float = GRAVITY_DEFAULT,
                 softening: float = SOFTENING_DEFAULT) -> List[BodySpec]:
    """An immovable sun with one light planet on a circular orbit."""
    speed = circular_orbit_velocity(gravity, sun_mass, radius, softening)
    cx, cy = center
    return [
        _spec((cx, cy), (0.0, 0.0), sun_mass, movable=False, color=PALETTE[3]),
        _spec((cx + radius, cy), (0.0, speed), planet_mass, color=PALETTE[6]),
    ]


PRESETS: Dict[str, Callable[[], List[BodySpec]]] = {
    "empty": template_empty,
    "demo": template_demo,
    "binary": template_binary,
    "sun": template_sun,
}


def load_preset(name: str) -> List[BodySpec]:
    try:
        return PRESETS[name]()
    except KeyError:
        raise KeyError(f"unknown preset {name!r} (expected one of: {', '.join(PRESETS)})") from None
