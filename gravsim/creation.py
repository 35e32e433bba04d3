#!/usr/bin/env python3
"""
Body creation context.

Holds the "new body" settings the user edits between creations (mass, movable,
color) together with the rotating default color, and turns a placement gesture
into a Simulation.add_body call. The caller owns one context per session.
"""
import math
from dataclasses import dataclass
from typing import Optional, Sequence, Tuple

from .constants import MASS_DEFAULT, MASS_FLOOR, PALETTE
from .vector_utils import Vec2, ZERO, vec_add

Color = Tuple[int, int, int]


def to_rgb(values: Sequence[float]) -> Color:
    """First three channels of a 0-255 colour (alpha ignored), rounded and clamped."""
    if len(values) < 3:
        raise ValueError(f"expected at least three colour channels, got {values!r}")
    return tuple(int(round(min(max(float(c), 0.0), 255.0))) for c in values[:3])


@dataclass
class CreationContext:
    mass: float = MASS_DEFAULT
    movable: bool = True
    palette: Sequence[Color] = PALETTE
    color_index: int = 0
    color: Optional[Color] = None

    def __post_init__(self):
        if not self.palette:
            raise ValueError("palette must not be empty")
        if self.color is None:
            self.color = self.palette[self.color_index % len(self.palette)]

    def next_color(self) -> Color:
        self.color_index = (self.color_index + 1) % len(self.palette)
        self.color = self.palette[self.color_index]
        return self.color

    def scale_mass(self, wheel_steps: float) -> float:
        """Mouse-wheel style exponential mass adjustment."""
        self.mass = max(MASS_FLOOR, self.mass * math.exp(0.2 * wheel_steps))
        return self.mass

    def spawn(self, simulation, position: Vec2, velocity: Vec2 = ZERO) -> int:
        """
        Create a body from the current settings.

        When the simulation has a selected target, `velocity` is taken relative
        to the target (the target's velocity is added) and the palette does not
        rotate, so satellites share the color the user picked. Otherwise the
        palette advances after each creation.

        Returns:
            Index of the new body.
        """
        target = simulation.target_body
        if target is not None:
            velocity = vec_add(velocity, target.velocity)
        index = simulation.add_body(position, velocity, self.mass, self.movable, self.color)
        if target is None:
            self.next_color()
        return index

    def load_from(self, body) -> None:
        """Copy an existing body's editable settings (used when a target is selected)."""
        self.mass = body.mass
        self.movable = body.movable
        self.color = body.color
