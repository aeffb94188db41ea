#!/usr/bin/env python3
"""
Simulation controller: the single owner of all core state.

Shared between the control panel (Dear PyGui, main thread) and the viewport
(Pygame, renderer thread). Every command, pointer handler and frame update
takes the same re-entrant lock, so no two of them ever interleave and the
renderer always draws from a consistent snapshot.
"""
import copy
import logging
import math
import threading
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional, Sequence

import numpy as np

from .camera import CameraController, CameraRig
from .constants import DARK_THEME, LIGHT_THEME, MIN_SPEED_MULTIPLIER
from .data_models import CameraState, Light, PlanetSpec, PlanetState, SceneNode
from .picking import HoverService, intersect_spheres
from .scene import AMBIENT_LIGHT, build_scene, random_angle
from .simulator import OrbitalSimulator

logger = logging.getLogger(__name__)


class SimulationClock:
    """
    Frame delta source with a pause flag.

    While paused, ticks return 0.0 and the elapsed interval is dropped, so
    resuming never produces a catch-up jump.
    """

    def __init__(self):
        self.paused = False
        self._last: Optional[float] = None

    def tick(self, now: float) -> float:
        last, self._last = self._last, now
        if last is None or self.paused:
            return 0.0
        return max(0.0, now - last)


@dataclass
class FrameSnapshot:
    """Copy of everything the renderer needs to draw one frame."""
    nodes: List[SceneNode]
    lights: Dict[str, Light]
    clear_color: int
    rig: CameraRig
    hovered: Optional[str]
    paused: bool
    dark_mode: bool


class SimulationController:
    """
    Core state and the command/query surface used by the UI.

    Commands: set_speed_multiplier, toggle_pause, reset, toggle_theme, resize,
    pointer_down/move/up, wheel. Notifications: add_hover_listener.
    """

    def __init__(self, specs: Sequence[PlanetSpec], rng: Optional[np.random.Generator] = None):
        self.lock = threading.RLock()
        self.running = True  # app running
        self.specs = list(specs)
        self._rng = rng if rng is not None else np.random.default_rng()

        self.graph, self.states = build_scene(self.specs, self._rng)
        self.simulator = OrbitalSimulator(self.graph, self.specs, self.states)
        self.camera = CameraController(CameraRig())
        self.hover = HoverService(self.specs)
        self.clock = SimulationClock()
        self.dark_mode = True
        self.camera.update()

    # -----------------------
    # Queries
    # -----------------------

    @property
    def paused(self) -> bool:
        return self.clock.paused

    @property
    def camera_state(self) -> CameraState:
        with self.lock:
            return self.camera.state

    def planet_state(self, name: str) -> PlanetState:
        with self.lock:
            return copy.copy(self.states[name])

    def speed_multiplier(self, name: str) -> float:
        with self.lock:
            return self.states[name].speed_multiplier

    def add_hover_listener(self, on_enter: Callable[[str, str, str], None] = None,
                           on_leave: Callable[[], None] = None) -> None:
        with self.lock:
            self.hover.add_listener(on_enter, on_leave)

    def snapshot(self) -> FrameSnapshot:
        with self.lock:
            nodes = []
            for n in self.graph.nodes.values():
                c = copy.copy(n)
                c.position = n.position.copy()
                nodes.append(c)
            return FrameSnapshot(
                nodes=nodes,
                lights={k: copy.copy(v) for k, v in self.graph.lights.items()},
                clear_color=self.graph.clear_color,
                rig=copy.deepcopy(self.camera.rig),
                hovered=self.hover.hovered,
                paused=self.clock.paused,
                dark_mode=self.dark_mode,
            )

    # -----------------------
    # Commands
    # -----------------------

    def set_speed_multiplier(self, planet_name: str, value: float) -> None:
        with self.lock:
            st = self.states.get(planet_name)
            if st is None:
                logger.warning("Ignoring speed change for unknown planet %r", planet_name)
                return
            value = float(value)
            if not math.isfinite(value):
                logger.warning("Ignoring non-finite speed %r for %s", value, planet_name)
                return
            st.speed_multiplier = max(MIN_SPEED_MULTIPLIER, value)
            logger.debug("Speed multiplier for %s set to %.2f", planet_name, st.speed_multiplier)

    def toggle_pause(self) -> bool:
        with self.lock:
            self.clock.paused = not self.clock.paused
            logger.info("Simulation %s", "paused" if self.clock.paused else "resumed")
            return self.clock.paused

    def reset(self) -> None:
        with self.lock:
            for st in self.states.values():
                st.angle = random_angle(self._rng)
                st.speed_multiplier = 1.0
                st.rotation_angle = 0.0
            self.simulator.sync()
            self.camera.reset()
            self.camera.update()
            self.clock.paused = False
            logger.info("Simulation reset")

    def toggle_theme(self) -> bool:
        with self.lock:
            self.dark_mode = not self.dark_mode
            clear_color, ambient = DARK_THEME if self.dark_mode else LIGHT_THEME
            self.graph.clear_color = clear_color
            self.graph.lights[AMBIENT_LIGHT].intensity = ambient
            logger.info("Theme: %s", "dark" if self.dark_mode else "light")
            return self.dark_mode

    def resize(self, width: int, height: int) -> None:
        with self.lock:
            self.camera.rig.set_viewport_size(width, height)
            logger.debug("Viewport resized to %sx%s", *self.camera.rig.viewport_size)

    # -----------------------
    # Pointer input
    # -----------------------

    def pointer_down(self, x: float, y: float) -> None:
        with self.lock:
            self.camera.pointer_down(x, y)

    def pointer_up(self) -> None:
        with self.lock:
            self.camera.pointer_up()

    def pointer_move(self, x: float, y: float) -> Optional[str]:
        """Orbit if dragging, then update hover from the pointer position."""
        with self.lock:
            self.camera.pointer_move(x, y)
            self.camera.update()
            return self.pick(*self.camera.rig.pixel_to_ndc(x, y))

    def pointer_leave(self) -> None:
        with self.lock:
            self.hover.clear()

    def wheel(self, delta_y: float) -> None:
        with self.lock:
            self.camera.wheel(delta_y)

    def pick(self, ndc_x: float, ndc_y: float) -> Optional[str]:
        with self.lock:
            origin, direction = self.camera.rig.ray_from_ndc(ndc_x, ndc_y)
            hits = intersect_spheres(origin, direction, self.graph.pickable_nodes())
            return self.hover.update(hits)

    # -----------------------
    # Frame
    # -----------------------

    def frame(self, dt: float) -> None:
        """
        One render-loop iteration without the draw: advance the simulation
        unless paused, then recompute the camera from its state.
        """
        with self.lock:
            if not self.clock.paused:
                self.simulator.step(dt)
            self.camera.update()
