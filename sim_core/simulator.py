#!/usr/bin/env python3
"""
Orbital simulator for the Solar System viewer.

Responsibilities
- Advance each planet's orbital angle and self-rotation angle by elapsed time
  and the per-planet speed multiplier.
- Recompute the planet scene nodes from PlanetState (the nodes are a view of the
  state, never authoritative).
- Spin the sun and drift the starfield by a fixed amount per step.

Conventions
- Angles are not wrapped: only sin/cos of them are consumed downstream.
- The caller never steps the simulator while paused, so every kind of
  motion, decorative included, stops together.
"""
import math
from typing import Dict, Mapping, Sequence

from .constants import STARFIELD_DRIFT_PER_STEP, SUN_SPIN_PER_STEP
from .data_models import PlanetSpec, PlanetState, SceneGraph
from .scene import STARFIELD, SUN


def advance(states: Mapping[str, PlanetState], specs: Sequence[PlanetSpec], dt: float) -> None:
    """
    Advance every planet by dt seconds (in place).

        angle          += base_speed * speed_multiplier * dt
        rotation_angle += rotation_speed * dt
    """
    for spec in specs:
        st = states[spec.name]
        st.angle += spec.base_speed * st.speed_multiplier * dt
        st.rotation_angle += spec.rotation_speed * dt


def planet_position(spec: PlanetSpec, state: PlanetState):
    """World position on the circular orbit in the XZ plane."""
    return (math.cos(state.angle) * spec.distance, 0.0, math.sin(state.angle) * spec.distance)


def sync_scene(graph: SceneGraph, states: Mapping[str, PlanetState], specs: Sequence[PlanetSpec]) -> None:
    """Write each planet's derived position and rotation into its scene node."""
    for spec in specs:
        st = states[spec.name]
        node = graph.get(spec.name)
        node.position[:] = planet_position(spec, st)
        node.rotation_y = st.rotation_angle


class OrbitalSimulator:
    """Owns the planet states and keeps the scene graph in step with them."""

    def __init__(self, graph: SceneGraph, specs: Sequence[PlanetSpec], states: Dict[str, PlanetState]):
        self.graph = graph
        self.specs = list(specs)
        self.states = states
        sync_scene(self.graph, self.states, self.specs)

    def step(self, dt: float) -> None:
        advance(self.states, self.specs, dt)
        sync_scene(self.graph, self.states, self.specs)
        self.graph.get(SUN).rotation_y += SUN_SPIN_PER_STEP
        self.graph.get(STARFIELD).rotation_y += STARFIELD_DRIFT_PER_STEP

    def sync(self) -> None:
        sync_scene(self.graph, self.states, self.specs)
