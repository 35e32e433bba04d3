#!/usr/bin/env python3
"""
Time integrators for a single body.

Each integrator is a pure function with the signature

    step(position, velocity, index, snapshot, forces, dt) -> BodyState

`index` is the body's slot in the snapshot so that it does not attract itself.
Accelerations are always evaluated against the snapshot, never against other
bodies' partially advanced state, and the body itself is never mutated; the
caller applies the returned state.

Integrators are selected through the INTEGRATORS table keyed by the
Integrator enum, so swapping one is a pure strategy substitution.
"""
from typing import Callable, Dict, Optional

from .data_models import BodyState, Integrator, Snapshot
from .physics import ForceModel
from .vector_utils import Vec2, vec_add, vec_scale

StepFunction = Callable[[Vec2, Vec2, Optional[int], Snapshot, ForceModel, float], BodyState]


def euler_step(position: Vec2, velocity: Vec2, index: Optional[int], snapshot: Snapshot,
               forces: ForceModel, dt: float) -> BodyState:
    """Semi-implicit Euler: update velocity first, then move with the new velocity."""
    acceleration = forces.net_acceleration(position, snapshot, index)
    velocity_new = vec_add(velocity, vec_scale(acceleration, dt))
    position_new = vec_add(position, vec_scale(velocity_new, dt))
    return BodyState(position_new, velocity_new)


def verlet_step(position: Vec2, velocity: Vec2, index: Optional[int], snapshot: Snapshot,
                forces: ForceModel, dt: float) -> BodyState:
    """
    Velocity Verlet.

    x' = x + v*dt + a*dt^2/2, then a' is evaluated at x' and
    v' = v + (a + a')*dt/2.
    """
    acceleration = forces.net_acceleration(position, snapshot, index)
    position_new = vec_add(
        vec_add(position, vec_scale(velocity, dt)),
        vec_scale(acceleration, dt * dt / 2.0),
    )
    acceleration_new = forces.net_acceleration(position_new, snapshot, index)
    velocity_new = vec_add(velocity, vec_scale(vec_add(acceleration, acceleration_new), dt / 2.0))
    return BodyState(position_new, velocity_new)


def _rk4_add(a: BodyState, b: BodyState) -> BodyState:
    return BodyState(vec_add(a.position, b.position), vec_add(a.velocity, b.velocity))


def _rk4_scale(state: BodyState, s: float) -> BodyState:
    return BodyState(vec_scale(state.position, s), vec_scale(state.velocity, s))


def _rk4_derivative(state: BodyState, index: Optional[int], snapshot: Snapshot,
                    forces: ForceModel) -> BodyState:
    # d/dt (x, v) = (v, a(x))
    return BodyState(state.velocity, forces.net_acceleration(state.position, snapshot, index))


def rk4_step(position: Vec2, velocity: Vec2, index: Optional[int], snapshot: Snapshot,
             forces: ForceModel, dt: float) -> BodyState:
    """
    Classic fourth-order Runge-Kutta on the combined (position, velocity) state.

    Workflow:
    1) k1 at the start state
    2) k2 at start + k1*dt/2
    3) k3 at start + k2*dt/2
    4) k4 at start + k3*dt
    Combine (k1 + 2*k2 + 2*k3 + k4) * dt/6.
    """
    state = BodyState(position, velocity)
    k1 = _rk4_derivative(state, index, snapshot, forces)
    k2 = _rk4_derivative(_rk4_add(state, _rk4_scale(k1, dt / 2.0)), index, snapshot, forces)
    k3 = _rk4_derivative(_rk4_add(state, _rk4_scale(k2, dt / 2.0)), index, snapshot, forces)
    k4 = _rk4_derivative(_rk4_add(state, _rk4_scale(k3, dt)), index, snapshot, forces)

    k_sum = _rk4_add(k1, _rk4_add(_rk4_scale(k2, 2.0), _rk4_add(_rk4_scale(k3, 2.0), k4)))
    return _rk4_add(state, _rk4_scale(k_sum, dt / 6.0))


INTEGRATORS: Dict[Integrator, StepFunction] = {
    Integrator.EULER: euler_step,
    Integrator.VERLET: verlet_step,
    Integrator.RK4: rk4_step,
}


def integrate(kind: Integrator, position: Vec2, velocity: Vec2, index: Optional[int],
              snapshot: Snapshot, forces: ForceModel, dt: float) -> BodyState:
    """Dispatch to the integrator selected by `kind`."""
    return INTEGRATORS[Integrator.coerce(kind)](position, velocity, index, snapshot, forces, dt)
