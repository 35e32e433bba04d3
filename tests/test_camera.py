import pytest

from gravsim.camera import Camera2D, exp_decay
from gravsim.constants import ZOOM_MAX, ZOOM_MIN


def test_screen_world_round_trip():
    cam = Camera2D(target=(100.0, 50.0), zoom=2.0)
    world = cam.screen_to_world((700.0, 500.0))
    assert world == pytest.approx((150.0, 75.0))
    assert cam.world_to_screen(world) == (700, 500)


def test_zoom_is_clamped():
    cam = Camera2D()
    cam.zoom_by(1000)
    assert cam.zoom_target == ZOOM_MAX
    cam.zoom_by(-1000)
    assert cam.zoom_target == ZOOM_MIN


def test_zoom_pivot_keeps_world_point():
    cam = Camera2D(zoom=1.0)
    pivot = (300, 200)
    before = cam.screen_to_world(pivot)
    cam.zoom_by(3, pivot)
    cam.update(10.0)
    assert cam.screen_to_world(pivot) == pytest.approx(before)


def test_pan_moves_target_in_world_units():
    cam = Camera2D(target=(0.0, 0.0), zoom=4.0)
    cam.pan_pixels(40.0, -8.0)
    assert cam.target == [-10.0, 2.0]


def test_exp_decay_converges():
    assert exp_decay(0.0, 10.0, 12.0, 0.0) == 0.0
    assert exp_decay(0.0, 10.0, 12.0, 100.0) == pytest.approx(10.0)


def test_follow_glides_to_target():
    cam = Camera2D(target=(0.0, 0.0))
    for _ in range(200):
        cam.update(0.05, follow=(500.0, -300.0))
    assert cam.target == pytest.approx([500.0, -300.0])
