import pytest

from gravsim.scheduler import FixedStepScheduler


class _Recorder:
    def __init__(self):
        self.calls = []

    def __call__(self, dt):
        self.calls.append(dt)


def test_runs_whole_steps_and_keeps_remainder():
    scheduler = FixedStepScheduler(step=0.25, max_ticks_per_frame=None)
    tick = _Recorder()

    assert scheduler.advance(0.625, tick) == 2
    assert tick.calls == [0.25, 0.25]
    assert scheduler.accumulator == 0.125

    assert scheduler.advance(0.125, tick) == 1
    assert scheduler.accumulator == 0.0
    assert scheduler.ticks == 3


def test_short_frames_accumulate():
    scheduler = FixedStepScheduler(step=0.25)
    tick = _Recorder()
    assert scheduler.advance(0.125, tick) == 0
    assert scheduler.advance(0.125, tick) == 1


def test_paused_accumulator_is_frozen():
    scheduler = FixedStepScheduler(step=0.25)
    tick = _Recorder()
    scheduler.advance(0.125, tick)
    scheduler.pause()

    assert scheduler.advance(10.0, tick) == 0
    assert scheduler.accumulator == 0.125
    assert tick.calls == []

    scheduler.resume()
    assert scheduler.advance(0.125, tick) == 1


def test_toggle_pause():
    scheduler = FixedStepScheduler(step=0.25)
    assert scheduler.toggle_pause() is True
    assert scheduler.paused
    assert scheduler.toggle_pause() is False


def test_burst_cap_drops_backlog():
    scheduler = FixedStepScheduler(step=0.25, max_ticks_per_frame=3)
    tick = _Recorder()
    assert scheduler.advance(2.125, tick) == 3
    assert scheduler.accumulator == 0.125
    assert scheduler.advance(0.0, tick) == 0


def test_negative_frame_time_is_ignored():
    scheduler = FixedStepScheduler(step=0.25)
    tick = _Recorder()
    scheduler.advance(0.125, tick)
    assert scheduler.advance(-5.0, tick) == 0
    assert scheduler.accumulator == 0.125


def test_step_once_ignores_pause_and_accumulator():
    scheduler = FixedStepScheduler(step=0.25)
    tick = _Recorder()
    scheduler.advance(0.125, tick)
    scheduler.pause()
    scheduler.step_once(tick)
    assert tick.calls == [0.25]
    assert scheduler.accumulator == 0.125
    assert scheduler.ticks == 1


def test_invalid_step():
    with pytest.raises(ValueError):
        FixedStepScheduler(step=0.0)


def test_simulation_update_respects_pause(demo_sim):
    before = [b.position for b in demo_sim.bodies]
    demo_sim.pause()
    assert demo_sim.paused
    assert demo_sim.update(1.0) == 0
    assert [b.position for b in demo_sim.bodies] == before

    demo_sim.step_once()
    assert [b.position for b in demo_sim.bodies] != before

    demo_sim.resume()
    assert demo_sim.update(demo_sim.fixed_dt * 2.5) == 2
