#!/usr/bin/env python3
"""
Solar System viewer application entry point and UI/renderer coordination.

What this module does
- Starts two event loops: a Pygame rendering thread (viewport) and the Dear PyGui
  control panel (running on the main thread).
- Shares one SimulationController between them. It owns the planet states, the
  camera and the pause/theme flags, and every access is guarded by its
  re-entrant lock.
- The viewport handles orbit-by-drag, zoom-by-wheel and hover picking, and
  draws the scene with a software perspective projection.
- The control panel has one speed slider per planet, Pause/Reset/Theme
  buttons, and the info panel for the hovered planet.

Threading model
- PygameRenderer runs in a background thread and performs: input handling (for the
  viewport), stepping the simulation and drawing. Drawing uses a snapshot taken
  under the controller lock.
- The UI class runs in the main thread via Dear PyGui and calls the controller's
  commands, which are lock-protected. Hover notifications raised on the
  renderer thread are handed to the UI and applied on its periodic sync.

Running
1) Install dependencies: `pip install -e .`
2) Run this module: `python solar_sim.py [--planets table.json] [--log-level DEBUG]`

Controls
- Viewport: left-drag orbits, wheel zooms, Space pauses, R resets, T toggles theme.
- Two windows will open: the viewport (Pygame) and the controls (Dear PyGui).
  Closing either will shut down the application cleanly.
"""

import argparse
import logging
import sys
import threading
import time
from typing import Optional

import numpy as np

# GUI and Rendering libs
import pygame
from pygame import gfxdraw
import dearpygui.dearpygui as dpg

from sim_core.constants import (
    FPS,
    HOVER_RING_COLOR,
    HUD_TEXT_COLOR,
    INFO_PANEL_BORDER,
    INFO_PANEL_COLOR,
    MAX_SPEED_MULTIPLIER,
    MIN_SPEED_MULTIPLIER,
    SAFE_COORD_LIMIT,
    VIEW_HEIGHT,
    VIEW_WIDTH,
    WHEEL_DELTA_PER_NOTCH,
    hex_to_rgb,
)
from sim_core.controller import FrameSnapshot, SimulationController
from sim_core.errors import ConfigurationError, RenderSurfaceError
from sim_core.lighting import blend, shade
from sim_core.planet_table import load_planet_table
from sim_core.scene import STARFIELD, SUN_GLOW
from sim_core.vector_utils import rotate_y

logger = logging.getLogger("solar_sim")

LOG_FORMAT = '%(asctime)s - %(levelname)s - %(module)s - %(message)s'

# ============================================================
# Pygame Renderer Thread
# ============================================================

class PygameRenderer(threading.Thread):
    """
    Pygame loop: handles viewport input, steps the simulation, draws the scene.

    `ready` is set once the display surface exists (or failed to be created, in
    which case `error` holds a RenderSurfaceError).
    """
    def __init__(self, sim: SimulationController):
        super().__init__(daemon=True)
        self.sim = sim
        self.surface = None
        self.clock = None
        self.running = True
        self.ready = threading.Event()
        self.error: Optional[RenderSurfaceError] = None
        self.hover_info = None  # (title, description) shown in the viewport

        sim.add_hover_listener(self._on_hover_enter, self._on_hover_leave)

    def _on_hover_enter(self, name, title, description):
        self.hover_info = (title, description)

    def _on_hover_leave(self):
        self.hover_info = None

    def open_surface(self):
        try:
            pygame.init()
            pygame.display.set_caption("Solar System - Viewport")
            self.surface = pygame.display.set_mode((VIEW_WIDTH, VIEW_HEIGHT), pygame.RESIZABLE)
        except pygame.error as e:
            raise RenderSurfaceError(f"Could not create the viewport display surface: {e}") from e
        self.sim.resize(*self.surface.get_size())
        self.clock = pygame.time.Clock()

    def run(self):
        try:
            self.open_surface()
        except RenderSurfaceError as e:
            self.error = e
            self.sim.running = False
            self.ready.set()
            return
        self.ready.set()
        logger.info("Viewport opened at %dx%d", *self.surface.get_size())

        while self.running and self.sim.running:
            dt = self.sim.clock.tick(time.perf_counter())

            # Input handling
            self.handle_events()

            # Simulation step and camera
            self.sim.frame(dt)

            # Draw
            self.draw(self.sim.snapshot())

            # Limit FPS
            self.clock.tick(FPS)

        pygame.quit()

    def handle_events(self):
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                self.sim.running = False
                self.running = False

            elif event.type == pygame.VIDEORESIZE:
                self.surface = pygame.display.set_mode((event.w, event.h), pygame.RESIZABLE)
                self.sim.resize(event.w, event.h)

            elif event.type == pygame.MOUSEWHEEL:
                # Wheel up moves the camera in, like a browser's negative deltaY
                self.sim.wheel(-event.y * WHEEL_DELTA_PER_NOTCH)

            elif event.type == pygame.MOUSEBUTTONDOWN:
                if event.button == 1:
                    self.sim.pointer_down(*event.pos)

            elif event.type == pygame.MOUSEBUTTONUP:
                if event.button == 1:
                    self.sim.pointer_up()

            elif event.type == pygame.MOUSEMOTION:
                self.sim.pointer_move(*event.pos)

            elif event.type == pygame.WINDOWLEAVE:
                self.sim.pointer_leave()

            elif event.type == pygame.KEYDOWN:
                if event.key == pygame.K_SPACE:
                    self.sim.toggle_pause()
                elif event.key == pygame.K_r:
                    self.sim.reset()
                elif event.key == pygame.K_t:
                    self.sim.toggle_theme()

    def draw(self, frame: FrameSnapshot):
        surf = self.surface
        bg = hex_to_rgb(frame.clear_color)
        surf.fill(bg)

        nodes = {n.name: n for n in frame.nodes}
        self.draw_starfield(surf, frame, nodes[STARFIELD], bg)
        for n in frame.nodes:
            if n.kind == "line":
                self.draw_orbit(surf, frame, n, bg)
        self.draw_spheres(surf, frame, [n for n in frame.nodes if n.kind == "sphere"], bg)

        draw_text(surf, "Left-drag: orbit | Wheel: zoom | Space: Pause/Play | R: Reset | T: Theme", 10, 10, HUD_TEXT_COLOR)
        status = "Paused" if frame.paused else "Playing"
        theme = "Dark" if frame.dark_mode else "Light"
        draw_text(surf, f"{status} | {theme} theme", 10, 30, HUD_TEXT_COLOR)
        if self.hover_info:
            draw_info_panel(surf, *self.hover_info)

        pygame.display.flip()

    def draw_starfield(self, surf, frame, node, bg):
        pts = rotate_y(node.geometry.positions, node.rotation_y)
        screen, _, visible = frame.rig.world_to_screen(pts)
        color = blend(hex_to_rgb(node.material.color), bg, node.material.opacity)
        # Sub-pixel points are drawn as single pixels
        size = max(1, int(round(node.material.point_size)))
        w, h = surf.get_size()
        for (x, y), vis in zip(screen, visible):
            if vis and 0 <= x < w and 0 <= y < h:
                if size == 1:
                    surf.set_at((int(x), int(y)), color)
                else:
                    pygame.draw.rect(surf, color, (int(x), int(y), size, size))

    def draw_orbit(self, surf, frame, node, bg):
        screen, _, visible = frame.rig.world_to_screen(node.geometry.points)
        color = blend(hex_to_rgb(node.material.color), bg, node.material.opacity)
        # Split the loop into runs of consecutive visible points
        run = []
        for pt, vis in zip(screen, visible):
            p = _safe_point(pt) if vis else None
            if p is None:
                _draw_run(surf, color, run)
                run = []
            else:
                run.append(p)
        _draw_run(surf, color, run)

    def draw_spheres(self, surf, frame, spheres, bg):
        centers = np.array([n.position for n in spheres])
        screen, depth, visible = frame.rig.world_to_screen(centers)
        focal = frame.rig.focal_px
        # Painter's algorithm: farthest first
        for i in np.argsort(-depth):
            if not visible[i]:
                continue
            node = spheres[i]
            p = _safe_point(screen[i])
            if p is None:
                continue
            r = max(1, int(node.radius * focal / depth[i]))
            if r > SAFE_COORD_LIMIT:
                continue
            mat = node.material
            if node.name == SUN_GLOW:
                draw_alpha_circle(surf, p, r, hex_to_rgb(mat.color), mat.opacity)
                continue
            if mat.emissive:
                color = hex_to_rgb(mat.color)
            else:
                color = shade(mat.color, node.position, frame.rig.position, frame.lights)
            color = blend(color, bg, mat.opacity)
            try:
                gfxdraw.filled_circle(surf, p[0], p[1], r, color)
                gfxdraw.aacircle(surf, p[0], p[1], r, color)
            except OverflowError:
                continue
            if node.name == frame.hovered:
                gfxdraw.aacircle(surf, p[0], p[1], r + 4, HOVER_RING_COLOR)


def _draw_run(surf, color, run):
    if len(run) > 1:
        pygame.draw.aalines(surf, color, False, run)


_cached_font = None
_cached_small_font = None

def _fonts():
    global _cached_font, _cached_small_font
    if not pygame.font.get_init():
        pygame.font.init()
    if _cached_font is None:
        _cached_font = pygame.font.SysFont("consolas", 16)
        _cached_small_font = pygame.font.SysFont("consolas", 14)
    return _cached_font, _cached_small_font

def draw_text(surface, text, x, y, color, small=False):
    font, small_font = _fonts()
    img = (small_font if small else font).render(text, True, color)
    surface.blit(img, (x, y))

def draw_info_panel(surface, title, description, width=300):
    """Info box in the top-right corner with the hovered planet's text."""
    _, small_font = _fonts()
    lines = _wrap(description, small_font, width - 20)
    height = 40 + 18 * len(lines)
    x = surface.get_width() - width - 10
    rect = pygame.Rect(x, 10, width, height)
    pygame.draw.rect(surface, INFO_PANEL_COLOR, rect)
    pygame.draw.rect(surface, INFO_PANEL_BORDER, rect, 1)
    draw_text(surface, title, x + 10, 18, HOVER_RING_COLOR)
    for i, line in enumerate(lines):
        draw_text(surface, line, x + 10, 42 + 18 * i, HUD_TEXT_COLOR, small=True)

def _wrap(text, font, max_width):
    lines, current = [], ""
    for word in text.split():
        candidate = f"{current} {word}".strip()
        if current and font.size(candidate)[0] > max_width:
            lines.append(current)
            current = word
        else:
            current = candidate
    if current:
        lines.append(current)
    return lines

def draw_alpha_circle(surface, center, radius, color, opacity):
    size = radius * 2 + 2
    layer = pygame.Surface((size, size), pygame.SRCALPHA)
    pygame.draw.circle(layer, (*color, int(255 * opacity)), (radius + 1, radius + 1), radius)
    surface.blit(layer, (center[0] - radius - 1, center[1] - radius - 1))

def _safe_point(pt):
    try:
        x, y = int(pt[0]), int(pt[1])
    except (TypeError, ValueError, OverflowError):
        return None
    if -SAFE_COORD_LIMIT <= x <= SAFE_COORD_LIMIT and -SAFE_COORD_LIMIT <= y <= SAFE_COORD_LIMIT:
        return (x, y)
    return None

# ============================================================
# Dear PyGui UI
# ============================================================

class UI:
    """
    Dear PyGui control panel: per-planet speed sliders, pause/reset/theme, info panel.
    """
    def __init__(self, sim: SimulationController):
        self.sim = sim

        self.slider_ids = {}
        self.pause_button_id = None
        self.theme_button_id = None
        self.status_msg_id = None
        self.info_group_id = None
        self.info_title_id = None
        self.info_content_id = None

        # Written from the renderer thread, applied on the next sync
        self._hover_info = None
        self._hover_dirty = False
        sim.add_hover_listener(self._on_hover_enter, self._on_hover_leave)

        self._build_ui()
        self._schedule_sync()

    def _schedule_sync(self):
        """Reschedule the periodic sync callback using frame callbacks (approx ~10Hz)."""
        dpg.set_frame_callback(dpg.get_frame_count() + 6, self._sync_ui_with_sim)

    # -----------------------
    # UI Construction
    # -----------------------

    def _build_ui(self):
        dpg.create_context()
        dpg.create_viewport(title='Solar System - Controls', width=380, height=560)

        with dpg.window(label="Controls", width=360, height=540, pos=(10, 10), tag="main_window"):
            dpg.add_text("Planet Speeds")
            for spec in self.sim.specs:
                self.slider_ids[spec.name] = dpg.add_slider_float(
                    label=spec.title,
                    min_value=MIN_SPEED_MULTIPLIER,
                    max_value=MAX_SPEED_MULTIPLIER,
                    default_value=1.0,
                    format="%.1fx",
                    width=220,
                    callback=self._on_speed_slider,
                    user_data=spec.name,
                )

            dpg.add_separator()

            dpg.add_text("Simulation Controls")
            with dpg.group(horizontal=True):
                self.pause_button_id = dpg.add_button(label="Pause", callback=self._toggle_play)
                dpg.add_button(label="Reset", callback=self._reset)
                self.theme_button_id = dpg.add_button(label="Light Mode", callback=self._toggle_theme)
            self.status_msg_id = dpg.add_text("")

            dpg.add_separator()

            with dpg.group(show=False) as self.info_group_id:
                self.info_title_id = dpg.add_text("", color=HOVER_RING_COLOR)
                self.info_content_id = dpg.add_text("", wrap=330)

        dpg.setup_dearpygui()
        dpg.show_viewport()
        dpg.set_primary_window("main_window", True)

    # -----------------------
    # UI Callbacks
    # -----------------------

    def _set_status(self, msg: str, color=(180, 220, 180)):
        dpg.set_value(self.status_msg_id, msg)
        dpg.configure_item(self.status_msg_id, color=color)

    def _on_speed_slider(self, sender, app_data, user_data):
        self.sim.set_speed_multiplier(user_data, float(app_data))

    def _toggle_play(self):
        paused = self.sim.toggle_pause()
        self._sync_pause_button(paused)
        self._set_status(f"Simulation {'Paused' if paused else 'Playing'}.")

    def _sync_pause_button(self, paused: bool):
        dpg.configure_item(self.pause_button_id, label="Resume" if paused else "Pause")

    def _reset(self):
        self.sim.reset()
        for slider in self.slider_ids.values():
            dpg.set_value(slider, 1.0)
        self._sync_pause_button(False)
        self._set_status("Simulation reset.")

    def _toggle_theme(self):
        dark = self.sim.toggle_theme()
        dpg.configure_item(self.theme_button_id, label="Light Mode" if dark else "Dark Mode")

    def _on_hover_enter(self, name, title, description):
        self._hover_info = (title, description)
        self._hover_dirty = True

    def _on_hover_leave(self):
        self._hover_info = None
        self._hover_dirty = True

    def _sync_ui_with_sim(self):
        """
        Periodic UI update: info panel from hover notifications, and the
        pause/theme labels and sliders in case the viewport keys changed them.
        """
        if self._hover_dirty:
            self._hover_dirty = False
            info = self._hover_info
            if info:
                dpg.set_value(self.info_title_id, info[0])
                dpg.set_value(self.info_content_id, info[1])
                dpg.configure_item(self.info_group_id, show=True)
            else:
                dpg.configure_item(self.info_group_id, show=False)

        self._sync_pause_button(self.sim.paused)
        dpg.configure_item(self.theme_button_id, label="Light Mode" if self.sim.dark_mode else "Dark Mode")
        for name, slider in self.slider_ids.items():
            value = self.sim.speed_multiplier(name)
            if abs(dpg.get_value(slider) - value) > 1e-6:
                dpg.set_value(slider, value)

        if not self.sim.running:
            dpg.stop_dearpygui()
            return
        self._schedule_sync()

# ============================================================
# Application Entry
# ============================================================

def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Interactive 3D solar system viewer.")
    parser.add_argument("--planets", help="JSON planet table to use instead of the built-in one")
    parser.add_argument("--log-level", default="INFO",
                        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"])
    return parser.parse_args(argv)

def main(argv=None):
    args = parse_args(argv)
    logging.basicConfig(level=getattr(logging, args.log_level), format=LOG_FORMAT)

    try:
        specs = load_planet_table(args.planets)
    except ConfigurationError as e:
        logger.error(f"FATAL CONFIGURATION ERROR: {e}")
        return 1

    sim = SimulationController(specs)
    renderer = PygameRenderer(sim)

    # Start Pygame renderer thread and wait for its display surface
    renderer.start()
    renderer.ready.wait()
    if renderer.error is not None:
        logger.critical(f"Cannot start: {renderer.error}")
        renderer.join(timeout=2.0)
        return 1

    ui = UI(sim)

    # Keyboard shortcut in UI window to toggle play/pause (Space)
    with dpg.handler_registry():
        def key_down(sender, app_data):
            if app_data == dpg.mvKey_Spacebar:
                ui._toggle_play()
        dpg.add_key_press_handler(callback=key_down)

    # Run Dear PyGui event loop
    try:
        dpg.start_dearpygui()
    finally:
        # Stop simulation and renderer
        sim.running = False
        renderer.running = False
        renderer.join(timeout=2.0)
        dpg.destroy_context()
    return 0

if __name__ == "__main__":
    sys.exit(main())
