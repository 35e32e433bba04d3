import math

import pytest

from gravsim.data_models import Body, Snapshot
from gravsim.physics import (
    ForceModel,
    binary_orbit_speed,
    center_of_mass,
    circular_orbit_velocity,
    kinetic_energy,
    total_momentum,
)


def _snapshot(*entries):
    return Snapshot(
        positions=tuple(p for p, _ in entries),
        velocities=tuple((0.0, 0.0) for _ in entries),
        masses=tuple(m for _, m in entries),
    )


def test_acceleration_points_at_source():
    forces = ForceModel(gravity=10000.0, softening=0.0)
    ax, ay = forces.acceleration((0.0, 0.0), (100.0, 0.0), 100.0)
    assert ax == pytest.approx(100.0)
    assert ay == 0.0


def test_softening_reduces_magnitude():
    hard = ForceModel(gravity=1.0, softening=0.0).acceleration((0.0, 0.0), (0.0, 1.0), 1.0)
    soft = ForceModel(gravity=1.0, softening=1.0).acceleration((0.0, 0.0), (0.0, 1.0), 1.0)
    assert hard[1] == pytest.approx(1.0)
    assert soft[1] == pytest.approx(0.5)


def test_coincident_points_give_zero():
    forces = ForceModel(gravity=10000.0, softening=0.0)
    assert forces.acceleration((5.0, 5.0), (5.0, 5.0), 100.0) == (0.0, 0.0)
    # softening alone still yields no direction
    forces = ForceModel(gravity=10000.0, softening=0.05)
    a = forces.acceleration((5.0, 5.0), (5.0, 5.0), 100.0)
    assert a == (0.0, 0.0)
    assert not any(math.isnan(c) for c in a)


def test_net_acceleration_exclude_none_differs_from_zero():
    forces = ForceModel(gravity=1.0, softening=0.0)
    snap = _snapshot(((10.0, 0.0), 100.0), ((-20.0, 0.0), 100.0))

    all_bodies = forces.net_acceleration((0.0, 0.0), snap, None)
    without_first = forces.net_acceleration((0.0, 0.0), snap, 0)

    assert all_bodies[0] == pytest.approx(1.0 - 0.25)
    assert without_first[0] == pytest.approx(-0.25)


def test_field_grid_samples_every_point():
    forces = ForceModel(gravity=1.0, softening=0.0)
    snap = _snapshot(((0.0, 0.0), 1.0))
    samples = forces.field_grid(snap, (-10.0, -10.0), (20.0, 20.0), 10.0)
    assert len(samples) == 9
    points = [p for p, _ in samples]
    assert points[0] == (-10.0, -10.0)
    assert points[-1] == (10.0, 10.0)
    centre = dict(samples)[(0.0, 0.0)]
    assert centre == (0.0, 0.0)
    with pytest.raises(ValueError):
        forces.field_grid(snap, (0.0, 0.0), (1.0, 1.0), 0.0)


def test_orbit_speed_helpers():
    assert circular_orbit_velocity(10000.0, 100.0, 100.0) == pytest.approx(100.0)
    assert circular_orbit_velocity(10000.0, 100.0, 0.0) == 0.0
    # two bodies 1000 apart: each circles at 500 with a = G m / d^2
    v = binary_orbit_speed(10000.0, 100.0, 1000.0)
    assert v * v / 500.0 == pytest.approx(10000.0 * 100.0 / 1000.0 ** 2)


def test_conservation_helpers():
    bodies = [
        Body(position=(0.0, 0.0), velocity=(1.0, 0.0), mass=2.0),
        Body(position=(3.0, 0.0), velocity=(-1.0, 2.0), mass=1.0),
    ]
    assert total_momentum(bodies) == pytest.approx((1.0, 2.0))
    assert kinetic_energy(bodies) == pytest.approx(1.0 + 2.5)
    assert center_of_mass(bodies) == pytest.approx((1.0, 0.0))
    assert center_of_mass([]) == (0.0, 0.0)
