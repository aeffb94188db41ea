#!/usr/bin/env python3
"""
Flat sphere shading for the software renderer.

Each sphere is drawn as one disc, so a single color stands in for the visible
hemisphere. Diffuse terms use the phase factor (1 + L.V) / 2, where L is the
direction to the light and V the direction to the eye. That is the lit fraction
of the disc as seen from the camera.
"""
from typing import Dict, Sequence, Tuple

import numpy as np

from .constants import hex_to_rgb
from .data_models import Light
from .vector_utils import clamp, vec_norm


def point_light_attenuation(distance: float, light_range: float, decay: float) -> float:
    """Range falloff: (1 - d/range)^decay inside the range, 0 beyond it; 1 if range is 0."""
    if light_range <= 0.0:
        return 1.0
    return clamp(1.0 - distance / light_range, 0.0, 1.0) ** decay


def phase(to_light: np.ndarray, to_eye: np.ndarray) -> float:
    return (1.0 + float(np.dot(to_light, to_eye))) / 2.0


def light_contribution(light: Light, position: np.ndarray, to_eye: np.ndarray) -> np.ndarray:
    """RGB intensity (0..1 per channel, unclamped) this light adds at `position`."""
    rgb = np.array(hex_to_rgb(light.color), dtype=float) / 255.0
    if light.kind == "ambient":
        return rgb * light.intensity
    if light.kind == "point":
        offset = np.asarray(light.position, dtype=float) - position
        dist = float(np.linalg.norm(offset))
        if dist == 0.0:
            return rgb * light.intensity
        att = point_light_attenuation(dist, light.range, light.decay)
        return rgb * light.intensity * att * phase(offset / dist, to_eye)
    if light.kind == "directional":
        return rgb * light.intensity * phase(vec_norm(light.position), to_eye)
    return np.zeros(3)


def shade(color: int, position: Sequence[float], eye: Sequence[float],
          lights: Dict[str, Light]) -> Tuple[int, int, int]:
    """Lambert-style flat color for a sphere at `position` seen from `eye`."""
    position = np.asarray(position, dtype=float)
    to_eye = vec_norm(np.asarray(eye, dtype=float) - position)
    total = np.zeros(3)
    for light in lights.values():
        total += light_contribution(light, position, to_eye)
    base = np.array(hex_to_rgb(color), dtype=float)
    out = np.clip(base * total, 0, 255)
    return (int(out[0]), int(out[1]), int(out[2]))


def blend(fg: Tuple[int, int, int], bg: Tuple[int, int, int], opacity: float) -> Tuple[int, int, int]:
    """Composite fg over bg with the given opacity."""
    a = clamp(opacity, 0.0, 1.0)
    return tuple(int(round(f * a + b * (1.0 - a))) for f, b in zip(fg, bg))
