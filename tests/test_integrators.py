import math

import pytest

from gravsim.data_models import Integrator, Snapshot
from gravsim.integrators import INTEGRATORS, euler_step, integrate, rk4_step, verlet_step
from gravsim.physics import ForceModel
from gravsim.simulation import Simulation
from gravsim.vector_utils import vec_dist

# One Euler tick of the demo scene (G=10000, softening=0.01, dt=0.01), worked out
# by hand from a = G*m*r_hat/(r^2+eps^2), v' = v + a*dt, x' = x + v'*dt.
GOLDEN_EULER_TICK = [
    ((400.10105169246, 300.60064003869), (10.105169245863, 60.064003868795)),
    ((799.19894830754, 300.10064003869), (-80.105169245863, 10.064003868795)),
    ((600.5, 599.898719922624), (50.0, -10.1280077375904)),
]


def test_golden_euler_tick():
    sim = Simulation(preset="demo", prediction_horizon=0)
    sim.set_parameter("integrator", Integrator.EULER)
    sim.tick(0.01)

    assert len(sim.bodies) == 3
    for body, (position, velocity) in zip(sim.bodies, GOLDEN_EULER_TICK):
        assert body.position == pytest.approx(position, abs=1e-6)
        assert body.velocity == pytest.approx(velocity, abs=1e-6)


def test_forces_read_the_tick_snapshot(empty_sim):
    """The second body must feel the first body where it was before the tick."""
    empty_sim.set_parameter("integrator", "Euler")
    empty_sim.set_parameter("softening", 0.0)
    empty_sim.add_body((0.0, 0.0), (0.0, 0.0), 100.0)
    empty_sim.add_body((100.0, 0.0), (0.0, 0.0), 100.0)

    empty_sim.tick(0.01)

    a, b = empty_sim.bodies
    # G*m/d^2 = 10000*100/100^2 = 100 from the pre-tick separation of 100
    assert a.velocity == pytest.approx((1.0, 0.0), abs=1e-12)
    assert b.velocity == pytest.approx((-1.0, 0.0), abs=1e-12)
    assert a.position == pytest.approx((0.01, 0.0), abs=1e-12)
    assert b.position == pytest.approx((99.99, 0.0), abs=1e-12)


@pytest.mark.parametrize("step", [euler_step, verlet_step, rk4_step])
def test_integrators_are_pure(step):
    snap = Snapshot(positions=((0.0, 0.0), (50.0, 0.0)),
                    velocities=((0.0, 1.0), (0.0, -1.0)),
                    masses=(100.0, 100.0))
    forces = ForceModel(10000.0, 0.01)
    first = step((0.0, 0.0), (0.0, 1.0), 0, snap, forces, 0.01)
    second = step((0.0, 0.0), (0.0, 1.0), 0, snap, forces, 0.01)
    assert first == second
    assert first.position[0] > 0.0  # pulled towards the other body
    assert snap.positions == ((0.0, 0.0), (50.0, 0.0))


def test_verlet_matches_closed_form_in_uniform_field():
    # a far, heavy source gives an almost uniform field over one step
    snap = Snapshot(positions=((0.0, 1e6),), velocities=((0.0, 0.0),), masses=(1e12,))
    forces = ForceModel(1.0, 0.0)
    g = 1.0  # G * M / R^2
    state = verlet_step((0.0, 0.0), (3.0, 0.0), None, snap, forces, 0.5)
    assert state.position == pytest.approx((1.5, 0.5 * g * 0.25), rel=1e-5)
    assert state.velocity == pytest.approx((3.0, g * 0.5), rel=1e-5)


def test_rk4_agrees_with_verlet_on_small_steps():
    snap = Snapshot(positions=((0.0, 0.0),), velocities=((0.0, 0.0),), masses=(100.0,))
    forces = ForceModel(10000.0, 0.01)
    pos, vel = (100.0, 0.0), (0.0, 100.0)
    rk = rk4_step(pos, vel, None, snap, forces, 0.001)
    vv = verlet_step(pos, vel, None, snap, forces, 0.001)
    assert rk.position == pytest.approx(vv.position, abs=1e-6)
    assert rk.velocity == pytest.approx(vv.velocity, abs=1e-4)


def test_dispatch_table_covers_every_integrator():
    assert set(INTEGRATORS) == set(Integrator)
    snap = Snapshot(positions=((10.0, 0.0),), velocities=((0.0, 0.0),), masses=(1.0,))
    forces = ForceModel(1.0, 0.0)
    assert integrate("RK4", (0.0, 0.0), (0.0, 0.0), None, snap, forces, 0.1) == \
        rk4_step((0.0, 0.0), (0.0, 0.0), None, snap, forces, 0.1)
    with pytest.raises(ValueError):
        integrate("Leapfrog", (0.0, 0.0), (0.0, 0.0), None, snap, forces, 0.1)


def test_immovable_bodies_are_not_integrated(empty_sim):
    empty_sim.add_body((0.0, 0.0), (5.0, 5.0), 100.0, movable=False)
    empty_sim.add_body((200.0, 0.0), (0.0, 0.0), 100.0)
    empty_sim.tick()
    fixed, free = empty_sim.bodies
    assert fixed.position == (0.0, 0.0)
    assert len(fixed.trail) == 0
    assert free.position[0] < 200.0
    assert len(free.trail) == 1


@pytest.mark.parametrize("integrator", [Integrator.RK4, Integrator.VERLET])
def test_circular_binary_keeps_its_radius(integrator):
    """
    Wide binary (separation 1000, period about 140 s) over 100 s of ticks.

    Both bodies move, so every stage reads the partner frozen at tick start.
    That error grows with orbital speed: on tight mutual orbits RK4 and Verlet
    drift more than Euler, so this only checks the wide, sub-period regime.
    """
    sim = Simulation(preset="binary", prediction_horizon=0)
    sim.set_parameter("integrator", integrator)
    separation = vec_dist(sim.bodies[0].position, sim.bodies[1].position)

    worst = 0.0
    for k in range(10000):
        sim.tick()
        if k % 100 == 99:
            d = vec_dist(sim.bodies[0].position, sim.bodies[1].position)
            worst = max(worst, abs(d - separation) / separation)

    assert worst < 0.01
    px, py = sim.total_momentum()
    assert math.hypot(px, py) < 1e-3


def _sun_orbit_drift(integrator, ticks):
    sim = Simulation(preset="sun", prediction_horizon=0)
    sim.set_parameter("integrator", integrator)
    sun, planet = sim.bodies
    radius = vec_dist(sun.position, planet.position)

    worst = 0.0
    for k in range(ticks):
        sim.tick()
        if k % 10 == 9:
            d = vec_dist(sim.bodies[0].position, sim.bodies[1].position)
            worst = max(worst, abs(d - radius) / radius)
    return worst


def test_rk4_holds_circular_orbit_around_fixed_sun():
    """About three full periods (13.3 s each) around an immovable mass."""
    rk4 = _sun_orbit_drift(Integrator.RK4, 4000)
    euler = _sun_orbit_drift(Integrator.EULER, 4000)
    assert rk4 < 1e-4
    assert euler < 0.02
    assert rk4 < euler
