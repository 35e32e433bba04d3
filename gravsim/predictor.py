#!/usr/bin/env python3
"""
Trajectory prediction.

The predictor rolls a detached copy of the current state forward for a fixed
number of ticks and records where every body will be. It uses the configured
integrator and force model but skips collision resolution, so predictions show
unconstrained gravitational paths.

Only the live bodies' prediction buffers are written; their positions and
velocities are never touched.
"""
from typing import List, Sequence

from .data_models import Body, SimulationParameters, Snapshot
from .integrators import INTEGRATORS
from .physics import ForceModel
from .vector_utils import Vec2


class _Ghost:
    """Detached working copy of one body's dynamic state."""

    __slots__ = ("position", "velocity", "mass", "movable")

    def __init__(self, position: Vec2, velocity: Vec2, mass: float, movable: bool):
        self.position = position
        self.velocity = velocity
        self.mass = mass
        self.movable = movable


class TrajectoryPredictor:
    """Fills each body's prediction buffer with `horizon` future positions."""

    def __init__(self, horizon: int):
        if horizon < 0:
            raise ValueError("prediction horizon must be non-negative")
        self.horizon = horizon

    def run(self, bodies: Sequence[Body], params: SimulationParameters, dt: float) -> None:
        if self.horizon == 0 or not bodies:
            return

        ghosts: List[_Ghost] = [
            _Ghost(b.position, b.velocity, b.mass, b.movable) for b in bodies
        ]
        forces = ForceModel.from_parameters(params)
        step = INTEGRATORS[params.integrator]

        for k in range(self.horizon):
            snapshot = Snapshot.from_bodies(ghosts)
            for i, ghost in enumerate(ghosts):
                if not ghost.movable:
                    continue
                ghost.position, ghost.velocity = step(
                    ghost.position, ghost.velocity, i, snapshot, forces, dt
                )
            for body, ghost in zip(bodies, ghosts):
                body.prediction.positions[k] = ghost.position
                body.prediction.velocity = ghost.velocity
