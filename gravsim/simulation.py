#!/usr/bin/env python3
"""
Simulation state and the physics tick.

Simulation owns the body store, the parameters, the selected target and the
fixed-step scheduler, and exposes the operations the front-end uses: create,
remove and edit bodies, set parameters, pause/step/reset, and query the field.

One tick:
1) snapshot the current state
2) integrate every movable body against the snapshot
3) resolve collisions (merged bodies removed after the scan)
4) push the new positions onto the trails
5) refresh trajectory predictions

Everything runs on the caller's thread; the store changes shape only between
ticks or in step 3.
"""
import logging
from typing import List, Optional, Tuple

from .collisions import CollisionReport, handle_collisions
from .constants import (
    FIXED_DT,
    MASS_FLOOR,
    MAX_BODIES,
    MAX_TICKS_PER_FRAME,
    PREDICT_LENGTH,
    TRAIL_CAPACITY,
    WHITE,
)
from .data_models import Body, Prediction, SimulationParameters, Snapshot, Trail
from .integrators import INTEGRATORS
from .physics import ForceModel, center_of_mass, total_mass, total_momentum
from .predictor import TrajectoryPredictor
from .presets import load_preset
from .scheduler import FixedStepScheduler
from .vector_utils import Vec2, vec_dist, vec_sub

logger = logging.getLogger("gravsim")


class SimulationError(Exception):
    """Base class for errors raised by the simulation core."""


class BodyStoreError(SimulationError):
    """The body store could not grow; its contents are unchanged."""


class Simulation:
    """
    Body store plus the deterministic physics step.

    Args:
        preset: Starting configuration name ("demo", "empty", "binary", "sun").
        trail_capacity: Ring-buffer size for each body's trail.
        prediction_horizon: Number of predicted ticks per body (0 disables).
        fixed_dt: Physics step used by the scheduler and the predictor.
        max_bodies: Store capacity; add_body raises BodyStoreError beyond it.
        max_ticks_per_frame: Scheduler burst cap (None for unbounded).
    """

    def __init__(self, preset: str = "demo",
                 trail_capacity: int = TRAIL_CAPACITY,
                 prediction_horizon: int = PREDICT_LENGTH,
                 fixed_dt: float = FIXED_DT,
                 max_bodies: int = MAX_BODIES,
                 max_ticks_per_frame: Optional[int] = MAX_TICKS_PER_FRAME):
        self.trail_capacity = trail_capacity
        self.max_bodies = max_bodies
        self.predictor = TrajectoryPredictor(prediction_horizon)
        self.scheduler = FixedStepScheduler(fixed_dt, max_ticks_per_frame)
        self.bodies: List[Body] = []
        self.params = SimulationParameters()
        self.target: Optional[int] = None
        self.snapshot: Optional[Snapshot] = None  # taken at the start of the last tick
        self.last_collision: Optional[CollisionReport] = None
        self.preset = preset
        self.init(preset)

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def init(self, preset: Optional[str] = None) -> None:
        """
        Reset bodies, parameters, target and scheduler to a preset.

        With no argument the simulation returns to the preset it was last
        initialised with.
        """
        if preset is None:
            preset = self.preset
        specs = load_preset(preset)
        self.preset = preset
        self.bodies = []
        self.params = SimulationParameters()
        self.target = None
        self.snapshot = None
        self.last_collision = None
        self.scheduler.reset()
        for spec in specs:
            self.add_body(spec["position"], spec["velocity"], spec["mass"],
                          spec["movable"], spec["color"])
        self.predictor.run(self.bodies, self.params, self.fixed_dt)
        logger.info("simulation reset to preset %r with %d bodies", preset, len(self.bodies))

    @property
    def fixed_dt(self) -> float:
        return self.scheduler.step

    # ------------------------------------------------------------------
    # Body store
    # ------------------------------------------------------------------

    def add_body(self, position: Vec2, velocity: Vec2, mass: float,
                 movable: bool = True, color: Tuple[int, int, int] = WHITE) -> int:
        """
        Append a body and return its index.

        Non-positive masses are clamped to MASS_FLOOR. Raises BodyStoreError if
        the store is full or cannot grow.
        """
        if len(self.bodies) >= self.max_bodies:
            raise BodyStoreError(f"body store is full ({self.max_bodies} bodies)")
        mass = float(mass)
        if not mass >= MASS_FLOOR:
            logger.warning("mass %r clamped to %r", mass, MASS_FLOOR)
            mass = MASS_FLOOR
        try:
            body = Body(
                position=(float(position[0]), float(position[1])),
                velocity=(float(velocity[0]), float(velocity[1])),
                mass=mass,
                movable=bool(movable),
                color=color,
                trail=Trail(self.trail_capacity),
                prediction=Prediction(self.predictor.horizon),
            )
            self.bodies.append(body)
        except MemoryError as exc:
            raise BodyStoreError("out of memory while growing the body store") from exc
        logger.debug("added body %d at %s (mass %.3g)", len(self.bodies) - 1, body.position, mass)
        return len(self.bodies) - 1

    def remove_body(self, index: int) -> Body:
        """Remove and return the body at `index`, keeping the target index valid."""
        body = self.bodies.pop(self._check_index(index))
        if self.target is not None:
            if self.target == index:
                self.target = None
            elif self.target > index:
                self.target -= 1
        logger.debug("removed body %d", index)
        return body

    def edit_body(self, index: int, mass: Optional[float] = None,
                  movable: Optional[bool] = None,
                  color: Optional[Tuple[int, int, int]] = None) -> Body:
        body = self.bodies[self._check_index(index)]
        if mass is not None:
            mass = float(mass)
            if not mass >= MASS_FLOOR:
                logger.warning("mass %r clamped to %r", mass, MASS_FLOOR)
                mass = MASS_FLOOR
            body.mass = mass
        if movable is not None:
            body.movable = bool(movable)
        if color is not None:
            body.color = color
        return body

    def _check_index(self, index: int) -> int:
        if not 0 <= index < len(self.bodies):
            raise IndexError(f"no body at index {index}")
        return index

    def __len__(self) -> int:
        return len(self.bodies)

    # ------------------------------------------------------------------
    # Parameters and queries
    # ------------------------------------------------------------------

    def set_parameter(self, name: str, value) -> None:
        self.params.set(name, value)
        logger.debug("parameter %s set to %r", name, getattr(self.params, name))

    def query_radius(self, mass: float) -> float:
        return self.params.radius(mass)

    def query_net_acceleration(self, position: Vec2, exclude: Optional[int] = None) -> Vec2:
        """Field at an arbitrary point from the current body state."""
        if exclude is not None:
            self._check_index(exclude)
        snapshot = Snapshot.from_bodies(self.bodies)
        return ForceModel.from_parameters(self.params).net_acceleration(position, snapshot, exclude)

    def field_grid(self, origin: Vec2, size: Tuple[float, float], spacing: float):
        snapshot = Snapshot.from_bodies(self.bodies)
        return ForceModel.from_parameters(self.params).field_grid(snapshot, origin, size, spacing)

    def body_at(self, point: Vec2) -> Optional[int]:
        """Index of the body whose disc contains `point` (the last one drawn wins)."""
        hit = None
        for i, b in enumerate(self.bodies):
            if vec_dist(b.position, point) <= self.query_radius(b.mass):
                hit = i
        return hit

    def total_mass(self) -> float:
        return total_mass(self.bodies)

    def total_momentum(self) -> Vec2:
        return total_momentum(self.bodies)

    def center_of_mass(self) -> Vec2:
        return center_of_mass(self.bodies)

    # ------------------------------------------------------------------
    # Drawing queries
    # ------------------------------------------------------------------

    def _frame_target(self, relative: bool) -> Optional[Body]:
        return self.target_body if relative else None

    def trail_points(self, index: int, length: Optional[int] = None,
                     relative: bool = False) -> List[Vec2]:
        """
        Newest-first trail of one body.

        With `relative` and a selected target, sample k is shifted into the
        target's frame: target.position + (p_k - target_trail[k]). The trail is
        then cut to the samples both bodies have. An immovable target keeps no
        trail; its current position is used for every sample.
        """
        body = self.bodies[self._check_index(index)]
        n = len(body.trail) if length is None else min(max(length, 0), len(body.trail))
        target = self._frame_target(relative)
        if target is not None and target.movable:
            n = min(n, len(target.trail))
        points = []
        for k in range(n):
            p = body.trail.nth_latest(k)
            if target is not None:
                anchor = target.trail.nth_latest(k) if target.movable else target.position
                p = (target.position[0] + p[0] - anchor[0], target.position[1] + p[1] - anchor[1])
            points.append(p)
        return points

    def prediction_points(self, index: int, relative: bool = False) -> List[Vec2]:
        """Predicted path of one body, optionally in the target's predicted frame."""
        body = self.bodies[self._check_index(index)]
        target = self._frame_target(relative)
        if target is None:
            return list(body.prediction.positions)
        return [
            (target.position[0] + p[0] - q[0], target.position[1] + p[1] - q[1])
            for p, q in zip(body.prediction.positions, target.prediction.positions)
        ]

    def relative_velocity(self, index: int, relative: bool = False) -> Vec2:
        """Velocity of one body, minus the target's when `relative` is set."""
        body = self.bodies[self._check_index(index)]
        target = self._frame_target(relative)
        if target is None:
            return body.velocity
        return vec_sub(body.velocity, target.velocity)

    # ------------------------------------------------------------------
    # Target selection
    # ------------------------------------------------------------------

    @property
    def target_body(self) -> Optional[Body]:
        if self.target is not None and 0 <= self.target < len(self.bodies):
            return self.bodies[self.target]
        return None

    def select_target(self, index: Optional[int]) -> None:
        if index is not None and not 0 <= index < len(self.bodies):
            raise IndexError(f"no body at index {index}")
        self.target = index

    def cycle_target(self, step: int = 1) -> Optional[int]:
        """Move the target forward or backward through the bodies, wrapping around."""
        if not self.bodies:
            self.target = None
        elif self.target is None:
            self.target = 0 if step >= 0 else len(self.bodies) - 1
        else:
            self.target = (self.target + step) % len(self.bodies)
        return self.target

    # ------------------------------------------------------------------
    # Stepping
    # ------------------------------------------------------------------

    @property
    def paused(self) -> bool:
        return self.scheduler.paused

    def pause(self) -> None:
        self.scheduler.pause()

    def resume(self) -> None:
        self.scheduler.resume()

    def toggle_pause(self) -> bool:
        return self.scheduler.toggle_pause()

    def update(self, frame_time: float) -> int:
        """Feed one frame's elapsed real time to the scheduler; returns ticks run."""
        return self.scheduler.advance(frame_time, self.tick)

    def step_once(self) -> None:
        self.scheduler.step_once(self.tick)

    def tick(self, dt: Optional[float] = None) -> CollisionReport:
        """Advance the simulation by one fixed step."""
        if dt is None:
            dt = self.fixed_dt
        params = self.params
        snapshot = Snapshot.from_bodies(self.bodies)
        self.snapshot = snapshot
        forces = ForceModel.from_parameters(params)
        step = INTEGRATORS[params.integrator]

        for i, body in enumerate(self.bodies):
            if not body.movable:
                continue
            body.position, body.velocity = step(
                body.position, body.velocity, i, snapshot, forces, dt
            )

        report = handle_collisions(self.bodies, params.collision_mode, params.density)
        for index in report.removed:
            self.remove_body(index)
        if report.collided:
            self.last_collision = report

        for body in self.bodies:
            if body.movable:
                body.trail.push(body.position)

        self.predictor.run(self.bodies, params, dt)
        return report
