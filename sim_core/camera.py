#!/usr/bin/env python3
"""
Camera utilities: spherical orbit rig, drag state machine and 3D projection.

The camera is a pure function of CameraState. It sits on a sphere around the
origin and always looks at it. Pointer input goes through small pure transition
functions, (state, event) -> state, which can be tested without a display.
"""
import math
from dataclasses import replace
from typing import Tuple

import numpy as np

from .constants import (
    CAMERA_FAR,
    CAMERA_FOV_DEG,
    CAMERA_NEAR,
    MAX_CAMERA_PHI,
    MAX_CAMERA_RADIUS,
    MIN_CAMERA_PHI,
    MIN_CAMERA_RADIUS,
    ORBIT_SENSITIVITY,
    VIEW_HEIGHT,
    VIEW_WIDTH,
    ZOOM_SENSITIVITY,
)
from .data_models import IDLE, CameraState, DragState
from .vector_utils import clamp, look_at, perspective, vec_norm

ORIGIN = (0.0, 0.0, 0.0)


# ------------------------------------------------------------
# Pure transitions
# ------------------------------------------------------------

def press(drag: DragState, x: float, y: float) -> DragState:
    return DragState(dragging=True, last_x=x, last_y=y)


def release(drag: DragState) -> DragState:
    return IDLE


def move(camera: CameraState, drag: DragState, x: float, y: float) -> Tuple[CameraState, DragState]:
    """Orbit by the pixel delta since the last move; no-op unless dragging."""
    if not drag.dragging:
        return camera, drag
    dx = x - drag.last_x
    dy = y - drag.last_y
    camera = replace(
        camera,
        theta=camera.theta + dx * ORBIT_SENSITIVITY,
        phi=clamp(camera.phi + dy * ORBIT_SENSITIVITY, MIN_CAMERA_PHI, MAX_CAMERA_PHI),
    )
    return camera, DragState(dragging=True, last_x=x, last_y=y)


def zoom(camera: CameraState, wheel_delta_y: float) -> CameraState:
    radius = clamp(camera.radius + wheel_delta_y * ZOOM_SENSITIVITY, MIN_CAMERA_RADIUS, MAX_CAMERA_RADIUS)
    return replace(camera, radius=radius)


def camera_position(camera: CameraState) -> np.ndarray:
    r, phi, theta = camera.radius, camera.phi, camera.theta
    return np.array([
        r * math.sin(phi) * math.cos(theta),
        r * math.cos(phi),
        r * math.sin(phi) * math.sin(theta),
    ])


# ------------------------------------------------------------
# Projection
# ------------------------------------------------------------

class CameraRig:
    """
    Perspective camera positioned from a CameraState.

    Attributes:
        position: world-space eye position, recomputed by `update`.
        view: 4x4 world-to-camera matrix.
        projection: 4x4 camera-to-clip matrix.
        viewport_size: (width, height) in pixels.
    """

    def __init__(self, fov: float = CAMERA_FOV_DEG, near: float = CAMERA_NEAR, far: float = CAMERA_FAR):
        self.fov = fov
        self.near = near
        self.far = far
        self.viewport_size = (VIEW_WIDTH, VIEW_HEIGHT)
        self.position = np.zeros(3)
        self.view = np.identity(4)
        self.projection = np.identity(4)
        self.update(CameraState())

    @property
    def aspect(self) -> float:
        w, h = self.viewport_size
        return w / h

    @property
    def focal_px(self) -> float:
        """Pixels per world unit at distance 1 along the view axis."""
        return (self.viewport_size[1] / 2.0) / math.tan(math.radians(self.fov) / 2.0)

    def set_viewport_size(self, w: int, h: int) -> None:
        # Zero-area windows are legal while minimised
        self.viewport_size = (max(1, int(w)), max(1, int(h)))
        self.projection = perspective(self.fov, self.aspect, self.near, self.far)

    def update(self, camera: CameraState) -> None:
        self.position = camera_position(camera)
        self.view = look_at(self.position, ORIGIN)
        self.projection = perspective(self.fov, self.aspect, self.near, self.far)

    def to_camera_space(self, points: np.ndarray) -> np.ndarray:
        pts = np.atleast_2d(np.asarray(points, dtype=float))
        return pts @ self.view[:3, :3].T + self.view[:3, 3]

    def world_to_screen(self, points: np.ndarray) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
        """
        Project world points to pixels.

        Returns:
            (screen_xy, depth, visible) where depth is the distance along the
            view axis and visible marks points between the near and far planes.
        """
        cam = self.to_camera_space(points)
        depth = -cam[:, 2]
        visible = (depth > self.near) & (depth < self.far)
        safe = np.where(visible, depth, 1.0)
        f = self.focal_px
        w, h = self.viewport_size
        sx = w / 2.0 + cam[:, 0] * f / safe
        sy = h / 2.0 - cam[:, 1] * f / safe
        return np.column_stack([sx, sy]), depth, visible

    def pixel_to_ndc(self, x: float, y: float) -> Tuple[float, float]:
        w, h = self.viewport_size
        return (x / w) * 2.0 - 1.0, -(y / h) * 2.0 + 1.0

    def ray_from_ndc(self, ndc_x: float, ndc_y: float) -> Tuple[np.ndarray, np.ndarray]:
        """Ray from the eye through the given NDC point: (origin, unit direction)."""
        t = math.tan(math.radians(self.fov) / 2.0)
        dir_cam = np.array([ndc_x * t * self.aspect, ndc_y * t, -1.0])
        # Inverse of the rotation part of the view matrix is its transpose
        dir_world = self.view[:3, :3].T @ dir_cam
        return self.position.copy(), vec_norm(dir_world)


class CameraController:
    """Holds the current CameraState and DragState and applies pointer input."""

    def __init__(self, rig: CameraRig = None):
        self.state = CameraState()
        self.drag = IDLE
        self.rig = rig if rig is not None else CameraRig()

    @property
    def dragging(self) -> bool:
        return self.drag.dragging

    def pointer_down(self, x: float, y: float) -> None:
        self.drag = press(self.drag, x, y)

    def pointer_move(self, x: float, y: float) -> None:
        self.state, self.drag = move(self.state, self.drag, x, y)

    def pointer_up(self) -> None:
        self.drag = release(self.drag)

    def wheel(self, delta_y: float) -> None:
        self.state = zoom(self.state, delta_y)

    def reset(self) -> None:
        self.state = CameraState()
        self.drag = IDLE

    def update(self) -> None:
        """Recompute the rig from the current state (called once per frame)."""
        self.rig.update(self.state)
