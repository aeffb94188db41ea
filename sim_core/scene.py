#!/usr/bin/env python3
"""
Scene construction for the Solar System viewer.

Builds the sun, its glow shell, one sphere and one orbit guide per planet, the
starfield and the three lights, together with the initial PlanetState set.
Called once at startup.
"""
import math
from typing import Dict, Optional, Sequence, Tuple

import numpy as np

from .constants import (
    AMBIENT_LIGHT_COLOR,
    DARK_THEME,
    FILL_LIGHT_COLOR,
    FILL_LIGHT_INTENSITY,
    FILL_LIGHT_POSITION,
    ORBIT_COLOR,
    ORBIT_OPACITY,
    ORBIT_SEGMENTS,
    PLANET_OPACITY,
    STAR_COLOR,
    STAR_COUNT,
    STAR_OPACITY,
    STAR_POINT_SIZE,
    STARFIELD_SIZE,
    SUN_COLOR,
    SUN_GLOW_OPACITY,
    SUN_GLOW_RADIUS,
    SUN_LIGHT_COLOR,
    SUN_LIGHT_DECAY,
    SUN_LIGHT_INTENSITY,
    SUN_LIGHT_RANGE,
    SUN_RADIUS,
)
from .data_models import (
    LineLoopGeometry,
    Light,
    Material,
    PlanetSpec,
    PlanetState,
    PointsGeometry,
    SceneGraph,
    SceneNode,
    SphereGeometry,
)

SUN = "sun"
SUN_GLOW = "sun_glow"
STARFIELD = "starfield"
AMBIENT_LIGHT = "ambient_light"
SUN_LIGHT = "sun_light"
FILL_LIGHT = "fill_light"


def orbit_node_name(planet_name: str) -> str:
    return f"orbit_{planet_name}"


def random_angle(rng: np.random.Generator) -> float:
    """Uniform angle in [0, 2*pi)."""
    return float(rng.uniform(0.0, 2.0 * math.pi))


def orbit_points(radius: float, segments: int = ORBIT_SEGMENTS) -> np.ndarray:
    """Closed loop of segments + 1 points on a circle in the XZ plane."""
    t = np.linspace(0.0, 2.0 * math.pi, segments + 1)
    pts = np.column_stack([np.cos(t) * radius, np.zeros_like(t), np.sin(t) * radius])
    pts[-1] = pts[0]
    return pts


def starfield_points(rng: np.random.Generator, count: int = STAR_COUNT,
                     size: float = STARFIELD_SIZE) -> np.ndarray:
    """`count` points uniform in a cube of side `size` centred at the origin."""
    return (rng.random((count, 3)) - 0.5) * size


def build_starfield(graph: SceneGraph, rng: np.random.Generator) -> SceneNode:
    return graph.add(SceneNode(
        name=STARFIELD,
        kind="points",
        geometry=PointsGeometry(starfield_points(rng)),
        material=Material(color=STAR_COLOR, opacity=STAR_OPACITY, point_size=STAR_POINT_SIZE),
    ))


def build_sun(graph: SceneGraph) -> SceneNode:
    sun = graph.add(SceneNode(
        name=SUN,
        kind="sphere",
        geometry=SphereGeometry(SUN_RADIUS),
        material=Material(color=SUN_COLOR, emissive=True),
    ))
    # Glow shell is purely decorative
    graph.add(SceneNode(
        name=SUN_GLOW,
        kind="sphere",
        geometry=SphereGeometry(SUN_GLOW_RADIUS),
        material=Material(color=SUN_COLOR, opacity=SUN_GLOW_OPACITY, emissive=True),
    ))
    return sun


def build_planets(graph: SceneGraph, specs: Sequence[PlanetSpec],
                  rng: np.random.Generator) -> Dict[str, PlanetState]:
    states: Dict[str, PlanetState] = {}
    for spec in specs:
        graph.add(SceneNode(
            name=spec.name,
            kind="sphere",
            geometry=SphereGeometry(spec.size),
            material=Material(color=spec.color, opacity=PLANET_OPACITY),
            position=np.array([spec.distance, 0.0, 0.0]),
            pickable=True,
        ))
        states[spec.name] = PlanetState(angle=random_angle(rng))
    return states


def build_orbit_guides(graph: SceneGraph, specs: Sequence[PlanetSpec]) -> None:
    for spec in specs:
        graph.add(SceneNode(
            name=orbit_node_name(spec.name),
            kind="line",
            geometry=LineLoopGeometry(orbit_points(spec.distance)),
            material=Material(color=ORBIT_COLOR, opacity=ORBIT_OPACITY),
        ))


def build_lights(graph: SceneGraph) -> None:
    graph.add_light(Light(AMBIENT_LIGHT, "ambient", AMBIENT_LIGHT_COLOR, DARK_THEME[1]))
    graph.add_light(Light(SUN_LIGHT, "point", SUN_LIGHT_COLOR, SUN_LIGHT_INTENSITY,
                          position=(0.0, 0.0, 0.0), range=SUN_LIGHT_RANGE, decay=SUN_LIGHT_DECAY))
    graph.add_light(Light(FILL_LIGHT, "directional", FILL_LIGHT_COLOR, FILL_LIGHT_INTENSITY,
                          position=FILL_LIGHT_POSITION))


def build_scene(specs: Sequence[PlanetSpec],
                rng: Optional[np.random.Generator] = None) -> Tuple[SceneGraph, Dict[str, PlanetState]]:
    """
    Build the scene graph and the initial planet states.

    Args:
        specs: The validated planet table.
        rng: Random generator for initial angles and star positions; a fresh
             unseeded one is used if omitted.

    Returns:
        (graph, states) where states maps planet name to its PlanetState.
    """
    rng = rng if rng is not None else np.random.default_rng()
    graph = SceneGraph(clear_color=DARK_THEME[0])
    build_starfield(graph, rng)
    build_sun(graph)
    states = build_planets(graph, specs, rng)
    build_lights(graph)
    build_orbit_guides(graph, specs)
    return graph, states
