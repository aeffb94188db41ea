#!/usr/bin/env python3
"""
Hover picking for the Solar System viewer.

A ray is cast from the eye through the pointer into the scene and tested
against the pickable sphere nodes (the planets). The nearest hit becomes the
hovered planet. Enter/leave notifications are pushed to registered listeners.

This runs once per pointer-move event, not once per frame.
"""
import logging
import math
from dataclasses import dataclass
from typing import Callable, Dict, Iterable, List, Optional

import numpy as np

from .data_models import PlanetSpec, SceneNode

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Intersection:
    name: str
    distance: float  # ray parameter t along the unit direction


def ray_sphere(origin: np.ndarray, direction: np.ndarray, center: np.ndarray, radius: float) -> Optional[float]:
    """
    Smallest non-negative t where origin + t*direction meets the sphere.

    `direction` must be a unit vector. Returns None on a miss or if the sphere
    is entirely behind the origin.
    """
    oc = origin - center
    b = float(np.dot(oc, direction))
    c = float(np.dot(oc, oc)) - radius * radius
    disc = b * b - c
    if disc < 0.0:
        return None
    root = math.sqrt(disc)
    t = -b - root
    if t < 0.0:
        # Origin inside the sphere
        t = -b + root
    if t < 0.0:
        return None
    return t


def intersect_spheres(origin: np.ndarray, direction: np.ndarray,
                      nodes: Iterable[SceneNode]) -> List[Intersection]:
    """Intersect the ray with every pickable sphere node; nearest first."""
    hits = []
    for node in nodes:
        if not node.pickable or node.kind != "sphere":
            continue
        t = ray_sphere(origin, direction, node.position, node.radius)
        if t is not None:
            hits.append(Intersection(node.name, t))
    hits.sort(key=lambda h: h.distance)
    return hits


class HoverService:
    """
    Tracks which planet is under the pointer and notifies listeners on change.

    Listeners:
        on_enter(planet_name, title, description)
        on_leave()
    """

    def __init__(self, specs: Iterable[PlanetSpec]):
        self._specs: Dict[str, PlanetSpec] = {s.name: s for s in specs}
        self._enter_listeners: List[Callable[[str, str, str], None]] = []
        self._leave_listeners: List[Callable[[], None]] = []
        self.hovered: Optional[str] = None

    def add_listener(self, on_enter: Callable[[str, str, str], None] = None,
                     on_leave: Callable[[], None] = None) -> None:
        if on_enter is not None:
            self._enter_listeners.append(on_enter)
        if on_leave is not None:
            self._leave_listeners.append(on_leave)

    def update(self, hits: List[Intersection]) -> Optional[str]:
        """Apply the latest ray-cast result; returns the hovered planet name."""
        nearest = min(hits, key=lambda h: h.distance).name if hits else None
        if nearest == self.hovered:
            return self.hovered
        if self.hovered is not None:
            self._emit_leave()
        self.hovered = nearest
        if nearest is not None:
            self._emit_enter(nearest)
        return self.hovered

    def clear(self) -> None:
        if self.hovered is not None:
            self.hovered = None
            self._emit_leave()

    def _emit_enter(self, name: str) -> None:
        spec = self._specs.get(name)
        title = spec.title if spec else name
        info = spec.info if spec else ""
        logger.debug("Hover enter: %s", name)
        for cb in self._enter_listeners:
            cb(name, title, info)

    def _emit_leave(self) -> None:
        logger.debug("Hover leave")
        for cb in self._leave_listeners:
            cb()
