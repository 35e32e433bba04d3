#!/usr/bin/env python3
"""
Camera utilities for 2D world-to-screen transforms.
"""
import math
from typing import Optional, Tuple

from .constants import CAMERA_SMOOTHING, VIEW_HEIGHT, VIEW_WIDTH, ZOOM_MAX, ZOOM_MIN
from .vector_utils import Vec2, clamp


def exp_decay(a: float, b: float, decay: float, dt: float) -> float:
    """Frame-rate independent approach of a towards b."""
    return b + (a - b) * math.exp(-decay * dt)


class Camera2D:
    """
    2D camera: the world point `target` is drawn at screen point `offset`,
    scaled by `zoom` pixels per world unit.

    Zoom changes are smoothed towards `zoom_target`; when following a body the
    camera glides onto it and re-centres the offset.
    """

    def __init__(self, target=(0.0, 0.0), zoom: float = 1.0):
        self.target = [float(target[0]), float(target[1])]
        self.zoom = zoom
        self.zoom_target = zoom
        self.viewport_size = (VIEW_WIDTH, VIEW_HEIGHT)
        self.offset = [VIEW_WIDTH / 2.0, VIEW_HEIGHT / 2.0]

    def set_viewport_size(self, w: int, h: int) -> None:
        self.viewport_size = (w, h)

    def world_to_screen(self, pos: Vec2) -> Tuple[int, int]:
        px = (pos[0] - self.target[0]) * self.zoom + self.offset[0]
        py = (pos[1] - self.target[1]) * self.zoom + self.offset[1]
        return (int(px), int(py))

    def screen_to_world(self, screen: Tuple[float, float]) -> Vec2:
        wx = (screen[0] - self.offset[0]) / self.zoom + self.target[0]
        wy = (screen[1] - self.offset[1]) / self.zoom + self.target[1]
        return (wx, wy)

    def zoom_by(self, wheel_steps: float, pivot_screen: Optional[Tuple[int, int]] = None) -> None:
        """Exponential zoom; with a pivot, the world point under it stays put."""
        self.zoom_target = clamp(self.zoom * math.exp(0.2 * wheel_steps), ZOOM_MIN, ZOOM_MAX)
        if pivot_screen is not None:
            world = self.screen_to_world(pivot_screen)
            self.offset = [float(pivot_screen[0]), float(pivot_screen[1])]
            self.target = [world[0], world[1]]

    def pan_pixels(self, dx_pixels: float, dy_pixels: float) -> None:
        self.target[0] -= dx_pixels / self.zoom
        self.target[1] -= dy_pixels / self.zoom

    def update(self, dt: float, follow: Optional[Vec2] = None) -> None:
        """Advance zoom smoothing and, if given, glide towards the followed point."""
        self.zoom = exp_decay(self.zoom, self.zoom_target, CAMERA_SMOOTHING, dt)
        if follow is not None:
            self.target[0] = exp_decay(self.target[0], follow[0], CAMERA_SMOOTHING, dt)
            self.target[1] = exp_decay(self.target[1], follow[1], CAMERA_SMOOTHING, dt)
            w, h = self.viewport_size
            self.offset[0] = exp_decay(self.offset[0], w / 2.0, CAMERA_SMOOTHING, dt)
            self.offset[1] = exp_decay(self.offset[1], h / 2.0, CAMERA_SMOOTHING, dt)
