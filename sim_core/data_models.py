#!/usr/bin/env python3
"""
Data models for the Solar System viewer.

This module defines the planet table entries, the per-planet simulation state,
the camera state, and the scene-graph entities shared between the simulator,
picking, and the renderer.

Units and usage
- Positions are world units; angles are radians; colors are 0xRRGGBB integers.
- PlanetSpec is immutable and loaded once at startup.
- PlanetState is mutated by the Orbital Simulator and the controller commands.
- SceneNode transforms for planets are derived from PlanetState every frame.
- Access to these objects is coordinated by SimulationController using a lock.
"""
from dataclasses import dataclass, field
from typing import Dict, Optional, Tuple

import numpy as np

from .constants import (
    DEFAULT_CAMERA_PHI,
    DEFAULT_CAMERA_RADIUS,
    DEFAULT_CAMERA_THETA,
)


@dataclass(frozen=True)
class PlanetSpec:
    """
    One row of the planet table.

    Fields:
    - name: Unique identifier, lowercase (e.g. "earth")
    - color: Base color as 0xRRGGBB
    - distance: Orbit radius in world units (> 0)
    - size: Visual sphere radius in world units (> 0)
    - base_speed: Orbital angular speed in rad/s at multiplier 1.0 (> 0)
    - rotation_speed: Self-rotation speed in rad/s (> 0)
    - info: Descriptive text shown on hover
    """
    name: str
    color: int
    distance: float
    size: float
    base_speed: float
    rotation_speed: float
    info: str

    @property
    def title(self) -> str:
        return self.name[:1].upper() + self.name[1:]


@dataclass
class PlanetState:
    angle: float = 0.0
    rotation_angle: float = 0.0
    speed_multiplier: float = 1.0


@dataclass(frozen=True)
class CameraState:
    """Spherical camera rig around the origin: radius, polar phi, azimuth theta."""
    radius: float = DEFAULT_CAMERA_RADIUS
    theta: float = DEFAULT_CAMERA_THETA
    phi: float = DEFAULT_CAMERA_PHI


@dataclass(frozen=True)
class DragState:
    """Pointer-drag state: Idle when `dragging` is False, else Dragging(last_x, last_y)."""
    dragging: bool = False
    last_x: float = 0.0
    last_y: float = 0.0


IDLE = DragState()


# ------------------------------------------------------------
# Scene graph
# ------------------------------------------------------------

@dataclass
class Material:
    color: int = 0xFFFFFF
    opacity: float = 1.0
    emissive: bool = False
    point_size: float = 1.0


@dataclass
class SphereGeometry:
    radius: float


@dataclass
class PointsGeometry:
    positions: np.ndarray  # (N, 3)


@dataclass
class LineLoopGeometry:
    points: np.ndarray  # (N, 3), first point repeated as the last


@dataclass
class SceneNode:
    """
    A drawable entity in the scene graph.

    `kind` is one of "sphere", "points", "line". Only nodes with
    `pickable=True` take part in hover picking.
    """
    name: str
    kind: str
    geometry: object
    material: Material
    position: np.ndarray = field(default_factory=lambda: np.zeros(3))
    rotation_y: float = 0.0
    pickable: bool = False

    @property
    def radius(self) -> Optional[float]:
        if isinstance(self.geometry, SphereGeometry):
            return self.geometry.radius
        return None


@dataclass
class Light:
    """
    A light source. `kind` is "ambient", "point" or "directional".

    Point lights use `position`, `range` and `decay`; directional lights shine
    from `position` towards the origin.
    """
    name: str
    kind: str
    color: int
    intensity: float
    position: Tuple[float, float, float] = (0.0, 0.0, 0.0)
    range: float = 0.0
    decay: float = 1.0


@dataclass
class SceneGraph:
    """Arena of scene nodes and lights, each keyed by a stable name."""
    nodes: Dict[str, SceneNode] = field(default_factory=dict)
    lights: Dict[str, Light] = field(default_factory=dict)
    clear_color: int = 0x000000

    def add(self, node: SceneNode) -> SceneNode:
        if node.name in self.nodes:
            raise ValueError(f"Duplicate scene node name: {node.name}")
        self.nodes[node.name] = node
        return node

    def add_light(self, light: Light) -> Light:
        self.lights[light.name] = light
        return light

    def get(self, name: str) -> SceneNode:
        return self.nodes[name]

    def pickable_nodes(self):
        return [n for n in self.nodes.values() if n.pickable]
