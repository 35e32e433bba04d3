"""Interactive 2D gravity simulator: physics core."""

from .collisions import CollisionReport, handle_collisions
from .creation import CreationContext
from .data_models import (
    Body,
    BodyState,
    CollisionMode,
    Integrator,
    Prediction,
    SimulationParameters,
    Snapshot,
    Trail,
)
from .integrators import INTEGRATORS, euler_step, integrate, rk4_step, verlet_step
from .physics import ForceModel
from .predictor import TrajectoryPredictor
from .scheduler import FixedStepScheduler
from .simulation import BodyStoreError, Simulation, SimulationError

__all__ = [
    "Body",
    "BodyState",
    "BodyStoreError",
    "CollisionMode",
    "CollisionReport",
    "CreationContext",
    "FixedStepScheduler",
    "ForceModel",
    "INTEGRATORS",
    "Integrator",
    "Prediction",
    "Simulation",
    "SimulationError",
    "SimulationParameters",
    "Snapshot",
    "TrajectoryPredictor",
    "Trail",
    "euler_step",
    "handle_collisions",
    "integrate",
    "rk4_step",
    "verlet_step",
]
