#!/usr/bin/env python3
"""
Force model for the gravity simulator.

Responsibilities
- Compute softened gravitational acceleration at an arbitrary point from a frozen
  snapshot of body positions and masses.
- Sample the acceleration field on a grid for visualization.
- Provide small helpers for common orbital computations and conservation checks.

Units and conventions
- Simulation units throughout; G is a tunable parameter (default 10000), not SI.
- Positions and velocities are (x, y) tuples.

Numerical notes
- Softening: the squared separation gets softening^2 added before division, and
  the acceleration magnitude is G*m / (r^2 + eps^2) along the unit separation.
  When the softened squared separation is still below EPSILON the contribution is
  zero rather than a division by zero. Coincident points contribute nothing.
- Complexity: direct summation, O(N) per evaluated point and O(N^2) per tick.

Simultaneity
- Every evaluation reads the Snapshot taken at tick start, never bodies that have
  already advanced in the same tick.
"""

import math
from typing import Iterable, List, Optional, Sequence, Tuple

from .constants import EPSILON, GRAVITY_DEFAULT, SOFTENING_DEFAULT
from .data_models import Snapshot
from .vector_utils import Vec2, ZERO, vec_len_sq, vec_norm, vec_sub


class ForceModel:
    """
    Softened pairwise Newtonian gravity.

    The acceleration a point at x feels from a source body j is:
    a = G * m_j * r_hat / (|r|^2 + eps^2),  r = x_j - x

    Holds only G and the softening length; build one per tick from the
    current parameters.
    """

    def __init__(self, gravity: float = GRAVITY_DEFAULT, softening: float = SOFTENING_DEFAULT):
        self.gravity = float(gravity)
        self.softening = max(0.0, float(softening))

    @classmethod
    def from_parameters(cls, params) -> "ForceModel":
        return cls(params.gravity, params.softening)

    def acceleration(self, position: Vec2, source_position: Vec2, source_mass: float) -> Vec2:
        """
        Acceleration at `position` due to a single source.

        Args:
            position: Point where the field is evaluated.
            source_position: Position of the attracting body.
            source_mass: Mass of the attracting body.

        Returns:
            (ax, ay); (0, 0) when the softened separation is below EPSILON.
        """
        displacement = vec_sub(source_position, position)
        direction = vec_norm(displacement)
        denom = vec_len_sq(displacement) + self.softening * self.softening
        if denom < EPSILON:
            return ZERO
        magnitude = self.gravity * source_mass / denom
        return (direction[0] * magnitude, direction[1] * magnitude)

    def net_acceleration(self, position: Vec2, snapshot: Snapshot,
                         exclude: Optional[int] = None) -> Vec2:
        """
        Sum of accelerations at `position` from every snapshot entry.

        Args:
            position: Point where the field is evaluated.
            snapshot: Frozen body state of the current tick.
            exclude: Snapshot index to skip (the body being integrated), or None to
                include every body, e.g. when sampling the field at an arbitrary point.
                Index 0 is a real body and is excluded like any other.
        """
        ax_total, ay_total = 0.0, 0.0
        for j, (source_position, source_mass) in enumerate(zip(snapshot.positions, snapshot.masses)):
            if exclude is not None and j == exclude:
                continue
            ax, ay = self.acceleration(position, source_position, source_mass)
            ax_total += ax
            ay_total += ay
        return (ax_total, ay_total)

    def field_grid(self, snapshot: Snapshot, origin: Vec2, size: Tuple[float, float],
                   spacing: float) -> List[Tuple[Vec2, Vec2]]:
        """
        Sample the acceleration field on a regular grid.

        Grid points start at `origin` and step by `spacing` across a `size`
        (width, height) rectangle, inclusive of the far edges.

        Returns:
            List of (point, acceleration) pairs in row-major order.
        """
        if spacing <= 0:
            raise ValueError("grid spacing must be positive")
        cols = int(size[0] // spacing) + 1
        rows = int(size[1] // spacing) + 1
        samples = []
        for row in range(rows):
            y = origin[1] + row * spacing
            for col in range(cols):
                point = (origin[0] + col * spacing, y)
                samples.append((point, self.net_acceleration(point, snapshot, None)))
        return samples


def circular_orbit_velocity(gravity: float, central_mass: float, orbital_radius: float,
                            softening: float = 0.0) -> float:
    """
    Speed of a light body on a circular orbit around a fixed central mass.

    The softened attraction supplies the centripetal acceleration:
    G * M / (r^2 + eps^2) = v^2 / r
    Therefore: v = sqrt(G * M * r / (r^2 + eps^2))
    """
    if orbital_radius <= 0:
        return 0.0
    return math.sqrt(gravity * central_mass * orbital_radius
                     / (orbital_radius ** 2 + softening ** 2))


def binary_orbit_speed(gravity: float, mass: float, separation: float,
                       softening: float = 0.0) -> float:
    """
    Speed of each of two equal masses circling their common centre.

    Each body orbits at radius d/2 while feeling G*m / (d^2 + eps^2):
    v = sqrt(G * m * (d/2) / (d^2 + eps^2))
    """
    if separation <= 0:
        return 0.0
    return math.sqrt(gravity * mass * 0.5 * separation / (separation ** 2 + softening ** 2))


def total_mass(bodies: Iterable) -> float:
    return sum(b.mass for b in bodies)


def total_momentum(bodies: Iterable) -> Vec2:
    px, py = 0.0, 0.0
    for b in bodies:
        px += b.mass * b.velocity[0]
        py += b.mass * b.velocity[1]
    return (px, py)


def kinetic_energy(bodies: Iterable) -> float:
    return sum(0.5 * b.mass * vec_len_sq(b.velocity) for b in bodies)


def center_of_mass(bodies: Sequence) -> Vec2:
    m = total_mass(bodies)
    if m <= 0:
        return ZERO
    cx = sum(b.mass * b.position[0] for b in bodies) / m
    cy = sum(b.mass * b.position[1] for b in bodies) / m
    return (cx, cy)
