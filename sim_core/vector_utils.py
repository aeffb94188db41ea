#!/usr/bin/env python3
"""
Vector and matrix helpers for 3D operations.

Small numpy functions used by the camera rig, picking and the renderer.
Matrices are 4x4 row-major and act on column vectors (M @ v).
"""
import math
from typing import Sequence

import numpy as np


def clamp(x: float, a: float, b: float) -> float:
    """Clamp x to the inclusive range [a, b]."""
    return max(a, min(b, x))


def vec_norm(a: Sequence[float], epsilon: float = 1e-12) -> np.ndarray:
    """Unit vector in the direction of a; zero vector if a is (nearly) zero."""
    v = np.asarray(a, dtype=float)
    n = np.linalg.norm(v)
    if n < epsilon:
        return np.zeros_like(v)
    return v / n


def look_at(eye: Sequence[float], target: Sequence[float], up=(0.0, 1.0, 0.0)) -> np.ndarray:
    """
    View matrix for a camera at `eye` looking at `target`.

    Camera space follows the usual right-handed convention: the camera looks
    down -Z, +X is right and +Y is up.
    """
    eye = np.asarray(eye, dtype=float)
    forward = vec_norm(np.asarray(target, dtype=float) - eye)
    right = np.cross(forward, up)
    if np.linalg.norm(right) < 1e-9:
        # Looking straight along the up axis; pick any perpendicular
        right = np.cross(forward, (0.0, 0.0, 1.0))
    right = vec_norm(right)
    true_up = np.cross(right, forward)

    m = np.identity(4)
    m[0, :3] = right
    m[1, :3] = true_up
    m[2, :3] = -forward
    m[0, 3] = -np.dot(right, eye)
    m[1, 3] = -np.dot(true_up, eye)
    m[2, 3] = np.dot(forward, eye)
    return m


def perspective(fov_deg: float, aspect: float, near: float, far: float) -> np.ndarray:
    """OpenGL-style projection matrix mapping the view frustum to NDC [-1, 1]^3."""
    f = 1.0 / math.tan(math.radians(fov_deg) / 2.0)
    m = np.zeros((4, 4))
    m[0, 0] = f / aspect
    m[1, 1] = f
    m[2, 2] = (far + near) / (near - far)
    m[2, 3] = 2.0 * far * near / (near - far)
    m[3, 2] = -1.0
    return m


def rotate_y(points: np.ndarray, angle: float) -> np.ndarray:
    """Rotate an (N, 3) array of points about the Y axis by `angle` radians."""
    if angle == 0.0:
        return points
    c, s = math.cos(angle), math.sin(angle)
    rot = np.array([[c, 0.0, s],
                    [0.0, 1.0, 0.0],
                    [-s, 0.0, c]])
    return points @ rot.T
