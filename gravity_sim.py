#!/usr/bin/env python3
"""
Gravity Simulator application entry point and UI/renderer coordination.

What this module does
- Opens a Pygame viewport (bodies, trails, predicted paths, velocity vectors,
  optional field grid, optionally in the selected body's frame) and a Dear
  PyGui control panel.
- Feeds real frame time to the Simulation's fixed-step scheduler, so physics
  advances in constant ticks independent of the framerate.

Threading model
- Everything runs on the main thread. Each loop iteration handles Pygame input,
  advances the simulation, draws the viewport, then renders one Dear PyGui frame
  and runs its queued callbacks (manual callback management), so widgets never
  touch the simulation from another thread.

Controls (viewport)
- C: toggle create mode. In create mode, left-press places a body and dragging
  sets its launch velocity (pull back like a slingshot); the wheel scales mass.
- Left click (not creating): select/follow a body. [ and ]: cycle target.
- Right-drag: pan (drops the target). Wheel: zoom.
- Space: pause/play. N: single step. R: reset. M: toggle movable. Esc: leave create mode.

Running
1) Install dependencies: `pip install -e .`
2) Run: `gravity-sim` (or `python gravity_sim.py`)
"""

import argparse
import logging
import math
import time
from typing import Optional

import pygame
from pygame import gfxdraw
import dearpygui.dearpygui as dpg

from gravsim.camera import Camera2D
from gravsim.constants import (
    BACKGROUND_COLOR,
    DENSITY_MAX,
    DENSITY_MIN,
    FIELD_GRID_SPACING,
    GRAVITY_MAX,
    GRAVITY_MIN,
    GRID_COLOR,
    MASS_FLOOR,
    MASS_MAX,
    SAFE_COORD_LIMIT,
    SELECTION_COLOR,
    SOFTENING_MAX,
    SOFTENING_MIN,
    TRAIL_CAPACITY,
    TRAIL_DEFAULT,
    VIEW_HEIGHT,
    VIEW_WIDTH,
)
from gravsim.creation import CreationContext, to_rgb
from gravsim.data_models import CollisionMode, Integrator
from gravsim.presets import PRESETS
from gravsim.simulation import Simulation
from gravsim.vector_utils import vec_add, vec_len, vec_scale, vec_sub

logger = logging.getLogger("gravsim")


class ViewSettings:
    """Render-only toggles; the physics core never reads these."""

    def __init__(self):
        self.trail_length = TRAIL_DEFAULT
        self.draw_predictions = True
        self.draw_velocity = False
        self.draw_field_grid = False
        self.draw_relative = False  # trails and vectors in the target's frame
        self.create = False


# ============================================================
# Pygame viewport
# ============================================================

class PygameViewport:
    """Draws the simulation and turns mouse/keyboard input into simulation commands."""

    def __init__(self, sim: Simulation, context: CreationContext, view: ViewSettings, panel=None):
        self.sim = sim
        self.context = context
        self.view = view
        self.panel = panel
        self.camera = Camera2D(target=(VIEW_WIDTH / 2.0, VIEW_HEIGHT / 2.0))
        self.surface = None
        self.running = True
        self.dragging_background = False
        self.drag_start_screen = (0, 0)
        self.create_anchor: Optional[tuple] = None  # offset from target while placing

    def open(self):
        pygame.init()
        pygame.display.set_caption("Gravity Simulator - Viewport")
        self.surface = pygame.display.set_mode((VIEW_WIDTH, VIEW_HEIGHT), pygame.RESIZABLE)
        self.camera.set_viewport_size(VIEW_WIDTH, VIEW_HEIGHT)

    def _target_position(self):
        target = self.sim.target_body
        return target.position if target is not None else (0.0, 0.0)

    def handle_events(self):
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                self.running = False

            elif event.type == pygame.VIDEORESIZE:
                self.surface = pygame.display.set_mode((event.w, event.h), pygame.RESIZABLE)
                self.camera.set_viewport_size(event.w, event.h)

            elif event.type == pygame.KEYDOWN:
                self._on_key(event.key)

            elif event.type == pygame.MOUSEWHEEL:
                if self.view.create:
                    self.context.scale_mass(event.y)
                    self._sync_panel()
                elif self.sim.target is None:
                    self.camera.zoom_by(event.y, pygame.mouse.get_pos())
                else:
                    self.camera.zoom_by(event.y)

            elif event.type == pygame.MOUSEBUTTONDOWN:
                world = self.camera.screen_to_world(pygame.mouse.get_pos())
                if event.button == 1 and self.view.create:
                    self.create_anchor = vec_sub(world, self._target_position())
                elif event.button == 1:
                    idx = self.sim.body_at(world)
                    if idx is not None:
                        self.select(idx)
                elif event.button in (2, 3):
                    self.dragging_background = True
                    self.drag_start_screen = pygame.mouse.get_pos()
                    self.sim.select_target(None)

            elif event.type == pygame.MOUSEBUTTONUP:
                if event.button == 1 and self.view.create and self.create_anchor is not None:
                    mouse = self.camera.screen_to_world(pygame.mouse.get_pos())
                    position = vec_add(self._target_position(), self.create_anchor)
                    self.context.spawn(self.sim, position, vec_sub(position, mouse))
                    self.create_anchor = None
                    self._sync_panel()
                if event.button in (2, 3):
                    self.dragging_background = False

            elif event.type == pygame.MOUSEMOTION:
                if self.dragging_background:
                    mouse = pygame.mouse.get_pos()
                    self.camera.pan_pixels(mouse[0] - self.drag_start_screen[0],
                                           mouse[1] - self.drag_start_screen[1])
                    self.drag_start_screen = mouse

    def _on_key(self, key):
        if key == pygame.K_SPACE:
            self.sim.toggle_pause()
        elif key == pygame.K_n:
            self.sim.step_once()
        elif key == pygame.K_r:
            self.sim.init()
        elif key == pygame.K_c:
            self.view.create = not self.view.create
        elif key == pygame.K_ESCAPE:
            self.view.create = False
            self.create_anchor = None
        elif key == pygame.K_m:
            self.context.movable = not self.context.movable
            if self.sim.target is not None and not self.view.create:
                self.sim.edit_body(self.sim.target, movable=self.context.movable)
        elif key == pygame.K_LEFTBRACKET:
            self.select(self.sim.cycle_target(-1))
        elif key == pygame.K_RIGHTBRACKET:
            self.select(self.sim.cycle_target(1))
        self._sync_panel()

    def select(self, index: Optional[int]):
        self.sim.select_target(index)
        if index is not None:
            self.context.load_from(self.sim.bodies[index])
        self._sync_panel()

    def _sync_panel(self):
        if self.panel is not None:
            self.panel.sync()

    # ----------------------------------------------------------------

    def draw(self):
        surf = self.surface
        surf.fill(BACKGROUND_COLOR)
        sim = self.sim

        if self.view.draw_field_grid:
            self.draw_field_grid(surf)

        for i, b in enumerate(sim.bodies):
            self.draw_trail(surf, i, b)
            if self.view.draw_predictions:
                self.draw_prediction(surf, i, b)

        for i, b in enumerate(sim.bodies):
            center = _safe_point(self.camera.world_to_screen(b.position))
            if center is None:
                continue
            vis_r = max(2, min(int(sim.query_radius(b.mass) * self.camera.zoom), 2000))
            try:
                if b.movable:
                    gfxdraw.aacircle(surf, center[0], center[1], vis_r, b.color)
                else:
                    gfxdraw.filled_circle(surf, center[0], center[1], vis_r, b.color)
                if i == sim.target:
                    gfxdraw.aacircle(surf, center[0], center[1], vis_r + 4, SELECTION_COLOR)
            except OverflowError:
                pass
            if self.view.draw_velocity:
                velocity = sim.relative_velocity(i, self.view.draw_relative)
                end = self.camera.world_to_screen(vec_add(b.position, velocity))
                draw_arrow(surf, center, end, b.color)

        if self.view.create:
            self.draw_new_body(surf)

        draw_text(surf, "C: create | Click: follow | [ ]: cycle | Right-drag: pan | Wheel: zoom | Space: pause | N: step | R: reset",
                  10, 10, (200, 200, 200))
        params = sim.params
        state = "Paused" if sim.paused else "Playing"
        draw_text(surf, f"{len(sim)} bodies  {params.integrator.value}  collisions: {params.collision_mode.value}  [{state}]",
                  10, 30, (200, 200, 200))
        cx, cy = sim.center_of_mass()
        draw_text(surf, f"mass {sim.total_mass():.1f}  centre of mass ({cx:.0f}, {cy:.0f})",
                  10, 50, (200, 200, 200))
        if sim.last_collision is not None and sim.last_collision.message:
            draw_text(surf, sim.last_collision.message, 10, 70, (180, 220, 180))

        pygame.display.flip()

    def draw_trail(self, surf, index, body):
        if not body.movable:
            return
        pts = []
        for point in self.sim.trail_points(index, self.view.trail_length, self.view.draw_relative):
            p = _safe_point(self.camera.world_to_screen(point))
            if p:
                pts.append(p)
        if len(pts) > 1:
            pygame.draw.aalines(surf, body.color, False, pts)

    def draw_prediction(self, surf, index, body):
        pts = [_safe_point(self.camera.world_to_screen(p))
               for p in self.sim.prediction_points(index, self.view.draw_relative)]
        pts = [p for p in pts if p]
        if len(pts) > 1:
            faded = tuple(c // 3 for c in body.color)
            pygame.draw.aalines(surf, faded, False, pts)

    def draw_field_grid(self, surf):
        w, h = self.camera.viewport_size
        top_left = self.camera.screen_to_world((0, 0))
        bottom_right = self.camera.screen_to_world((w, h))
        spacing = FIELD_GRID_SPACING
        origin = (math.floor(top_left[0] / spacing) * spacing,
                  math.floor(top_left[1] / spacing) * spacing)
        size = (bottom_right[0] - origin[0], bottom_right[1] - origin[1])
        for point, accel in self.sim.field_grid(origin, size, spacing):
            length = vec_len(accel)
            if length == 0:
                continue
            # log-scaled arrows so the field stays readable near bodies
            arrow = vec_scale(accel, spacing * 0.4 * min(1.0, math.log1p(length) / 8.0) / length)
            start = self.camera.world_to_screen(point)
            end = self.camera.world_to_screen(vec_add(point, arrow))
            draw_arrow(surf, start, end, GRID_COLOR)

    def draw_new_body(self, surf):
        mouse_screen = pygame.mouse.get_pos()
        mouse = self.camera.screen_to_world(mouse_screen)
        if self.create_anchor is not None:
            position = vec_add(self._target_position(), self.create_anchor)
        else:
            position = mouse
        center = _safe_point(self.camera.world_to_screen(position))
        if center is None:
            return
        vis_r = max(2, int(self.sim.query_radius(self.context.mass) * self.camera.zoom))
        gfxdraw.aacircle(surf, center[0], center[1], vis_r, self.context.color)
        if self.create_anchor is not None:
            launch = vec_sub(position, mouse)
            draw_arrow(surf, center, self.camera.world_to_screen(vec_add(position, launch)),
                       self.context.color)


_cached_font = None


def draw_text(surface, text, x, y, color):
    global _cached_font
    if not pygame.font.get_init():
        pygame.font.init()
    if _cached_font is None:
        _cached_font = pygame.font.SysFont("consolas", 16)
    img = _cached_font.render(text, True, color)
    surface.blit(img, (x, y))


def _safe_point(pt):
    try:
        x, y = int(pt[0]), int(pt[1])
    except (TypeError, ValueError, OverflowError):
        return None
    if -SAFE_COORD_LIMIT <= x <= SAFE_COORD_LIMIT and -SAFE_COORD_LIMIT <= y <= SAFE_COORD_LIMIT:
        return (x, y)
    return None


def draw_arrow(surface, tail, tip, color):
    tip_s = _safe_point(tip)
    tail_s = _safe_point(tail)
    if tip_s is None or tail_s is None or tip_s == tail_s:
        return
    pygame.draw.line(surface, color, tail_s, tip_s, 1)
    ang = math.atan2(tip_s[1] - tail_s[1], tip_s[0] - tail_s[0])
    size = 8
    left = (tip_s[0] - size * math.cos(ang - math.pi / 6), tip_s[1] - size * math.sin(ang - math.pi / 6))
    right = (tip_s[0] - size * math.cos(ang + math.pi / 6), tip_s[1] - size * math.sin(ang + math.pi / 6))
    left_s = _safe_point(left)
    right_s = _safe_point(right)
    if left_s and right_s:
        pygame.draw.polygon(surface, color, [tip_s, left_s, right_s])


# ============================================================
# Dear PyGui control panel
# ============================================================

class ControlPanel:
    """Sliders and toggles bound to Simulation.set_parameter and the creation context."""

    def __init__(self, sim: Simulation, context: CreationContext, view: ViewSettings):
        self.sim = sim
        self.context = context
        self.view = view

    def build(self):
        dpg.create_context()
        dpg.configure_app(manual_callback_management=True)
        dpg.create_viewport(title="Gravity Simulator - Controls", width=360, height=640)

        with dpg.window(label="N-Body Simulation", tag="main_window", width=360, height=640):
            with dpg.collapsing_header(label="Controls", default_open=True):
                with dpg.group(horizontal=True):
                    dpg.add_button(label="Reset", callback=lambda: self._reset())
                    dpg.add_checkbox(label="Pause", tag="pause", callback=self._on_pause)
                    dpg.add_button(label="Step", callback=lambda: self.sim.step_once())

            with dpg.collapsing_header(label="Simulation Parameters", default_open=True):
                p = self.sim.params
                dpg.add_slider_float(label="Gravity", tag="gravity", default_value=p.gravity,
                                     min_value=GRAVITY_MIN, max_value=GRAVITY_MAX,
                                     callback=self._on_param, user_data="gravity")
                dpg.add_slider_float(label="Softening", tag="softening", default_value=p.softening,
                                     min_value=SOFTENING_MIN, max_value=SOFTENING_MAX,
                                     callback=self._on_param, user_data="softening")
                dpg.add_slider_float(label="Density", tag="density", default_value=p.density,
                                     min_value=DENSITY_MIN, max_value=DENSITY_MAX, format="%.6f",
                                     callback=self._on_param, user_data="density")
                dpg.add_radio_button([m.value for m in Integrator], tag="integrator",
                                     default_value=p.integrator.value, horizontal=True,
                                     callback=self._on_param, user_data="integrator")
                dpg.add_radio_button([m.value for m in CollisionMode], tag="collision_mode",
                                     default_value=p.collision_mode.value, horizontal=True,
                                     callback=self._on_param, user_data="collision_mode")

            with dpg.collapsing_header(label="View", default_open=True):
                dpg.add_slider_int(label="Trail", default_value=self.view.trail_length,
                                   min_value=0, max_value=TRAIL_CAPACITY,
                                   callback=lambda s, a: setattr(self.view, "trail_length", int(a)))
                dpg.add_checkbox(label="Predictions", default_value=self.view.draw_predictions,
                                 callback=lambda s, a: setattr(self.view, "draw_predictions", bool(a)))
                dpg.add_checkbox(label="Velocity vectors", default_value=self.view.draw_velocity,
                                 callback=lambda s, a: setattr(self.view, "draw_velocity", bool(a)))
                dpg.add_checkbox(label="Field grid", default_value=self.view.draw_field_grid,
                                 callback=lambda s, a: setattr(self.view, "draw_field_grid", bool(a)))
                dpg.add_checkbox(label="Relative trail", default_value=self.view.draw_relative,
                                 callback=lambda s, a: setattr(self.view, "draw_relative", bool(a)))

            with dpg.collapsing_header(label="Body", default_open=True):
                dpg.add_slider_float(label="Mass", tag="mass", default_value=self.context.mass,
                                     min_value=0.0, max_value=MASS_MAX, callback=self._on_mass)
                dpg.add_checkbox(label="Movable", tag="movable", default_value=self.context.movable,
                                 callback=self._on_movable)
                dpg.add_color_edit(label="Color", tag="color", default_value=(*self.context.color, 255),
                                   no_alpha=True, callback=self._on_color)
                dpg.add_checkbox(label="Create", tag="create", default_value=self.view.create,
                                 callback=lambda s, a: setattr(self.view, "create", bool(a)))

        dpg.setup_dearpygui()
        dpg.show_viewport()
        dpg.set_primary_window("main_window", True)

    def _reset(self):
        self.sim.init()
        self.sync()

    def _on_pause(self, sender, value):
        if value:
            self.sim.pause()
        else:
            self.sim.resume()

    def _on_param(self, sender, value, name):
        self.sim.set_parameter(name, value)

    def _editing_target(self) -> bool:
        return self.sim.target is not None and not self.view.create

    def _on_mass(self, sender, value):
        self.context.mass = max(float(value), MASS_FLOOR)
        if self._editing_target():
            self.sim.edit_body(self.sim.target, mass=value)

    def _on_movable(self, sender, value):
        self.context.movable = bool(value)
        if self._editing_target():
            self.sim.edit_body(self.sim.target, movable=value)

    def _on_color(self, sender, value):
        # get_value reports 0-255 channels; the callback payload may be normalized
        self.context.color = to_rgb(dpg.get_value(sender))
        if self._editing_target():
            self.sim.edit_body(self.sim.target, color=self.context.color)

    def sync(self):
        """Push simulation/context state back into the widgets."""
        p = self.sim.params
        dpg.set_value("pause", self.sim.paused)
        dpg.set_value("gravity", p.gravity)
        dpg.set_value("softening", p.softening)
        dpg.set_value("density", p.density)
        dpg.set_value("integrator", p.integrator.value)
        dpg.set_value("collision_mode", p.collision_mode.value)
        dpg.set_value("mass", self.context.mass)
        dpg.set_value("movable", self.context.movable)
        dpg.set_value("color", (*self.context.color, 255))
        dpg.set_value("create", self.view.create)

    def render_frame(self) -> bool:
        if not dpg.is_dearpygui_running():
            return False
        dpg.render_dearpygui_frame()
        dpg.run_callbacks(dpg.get_callback_queue())
        return True

    def close(self):
        dpg.destroy_context()


# ============================================================
# Application Entry
# ============================================================

def main(argv=None):
    parser = argparse.ArgumentParser(description="Interactive 2D gravity simulator")
    parser.add_argument("--preset", default="demo", choices=sorted(PRESETS))
    parser.add_argument("--fps", type=int, default=60)
    parser.add_argument("-v", "--verbose", action="store_true", help="log debug messages")
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    sim = Simulation(preset=args.preset)
    context = CreationContext()
    view = ViewSettings()
    panel = ControlPanel(sim, context, view)
    viewport = PygameViewport(sim, context, view, panel)

    panel.build()
    viewport.open()
    clock = pygame.time.Clock()

    last_time = time.perf_counter()
    try:
        while viewport.running:
            now = time.perf_counter()
            real_dt = now - last_time
            last_time = now

            viewport.handle_events()
            sim.update(real_dt)
            target = sim.target_body
            viewport.camera.update(real_dt, target.position if target is not None else None)
            viewport.draw()

            if not panel.render_frame():
                break
            clock.tick(args.fps)
    finally:
        panel.close()
        pygame.quit()


if __name__ == "__main__":
    main()
