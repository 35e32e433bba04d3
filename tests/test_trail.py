import pytest

from gravsim.data_models import Prediction, Trail


def test_nth_latest_returns_most_recent_sample():
    trail = Trail(4)
    for k in range(3):
        trail.push((float(k), 0.0))
        assert trail.nth_latest(0) == (float(k), 0.0)
    assert len(trail) == 3
    assert trail.nth_latest(2) == (0.0, 0.0)


def test_full_buffer_overwrites_oldest():
    trail = Trail(4)
    for k in range(5):
        trail.push((float(k), 0.0))

    assert trail.count == 4
    assert trail.oldest == 1
    assert trail.nth_latest(0) == (4.0, 0.0)
    assert trail.nth_latest(3) == (1.0, 0.0)
    assert (0.0, 0.0) not in list(trail)
    assert list(trail) == [(1.0, 0.0), (2.0, 0.0), (3.0, 0.0), (4.0, 0.0)]


def test_slot_arithmetic_wraps():
    trail = Trail(3)
    for k in range(7):
        trail.push((float(k), float(k)))
    # seven writes into three slots: 6 landed in slot 0
    assert trail.nth_latest_slot(0) == 0
    assert trail.positions[trail.nth_latest_slot(1)] == (5.0, 5.0)
    assert trail.count == trail.capacity == 3


def test_nth_latest_out_of_range():
    trail = Trail(3)
    trail.push((1.0, 1.0))
    with pytest.raises(IndexError):
        trail.nth_latest(1)


def test_capacity_is_fixed():
    trail = Trail(2)
    slots = trail.positions
    for k in range(10):
        trail.push((k, k))
    assert trail.positions is slots
    assert len(trail.positions) == 2


def test_clear():
    trail = Trail(3)
    trail.push((1.0, 2.0))
    trail.clear()
    assert len(trail) == 0
    assert list(trail) == []


def test_invalid_sizes():
    with pytest.raises(ValueError):
        Trail(0)
    with pytest.raises(ValueError):
        Prediction(-1)
    assert Prediction(0).horizon == 0
