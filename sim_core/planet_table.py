#!/usr/bin/env python3
"""
Planet table: built-in defaults and JSON loading.

The viewer needs a complete table of exactly eight planets. The built-in table
below is used unless a JSON file is supplied on the command line.

Schema
======
Planet table JSON:
{
  "planets": [
    {
      "name": "mercury",
      "color": "#8C7853",              # or an integer 0xRRGGBB
      "distance": 12,
      "size": 0.4,
      "base_speed": 0.05,
      "rotation_speed": 0.01,
      "info": "Mercury: Closest planet to the Sun. ..."
    },
    ...
  ]
}

A bare list of planet objects is accepted as well. Any problem with the table
raises ConfigurationError; there is no partial fallback.
"""
import json
import logging
import re
from typing import Iterable, List, Optional

from .data_models import PlanetSpec
from .errors import ConfigurationError

logger = logging.getLogger(__name__)

HEX_COLOR = re.compile(r"[0-9a-fA-F]{6}")

PLANET_COUNT = 8
REQUIRED_FIELDS = ("name", "color", "distance", "size", "base_speed", "rotation_speed", "info")
POSITIVE_FIELDS = ("distance", "size", "base_speed", "rotation_speed")

DEFAULT_PLANETS = (
    PlanetSpec("mercury", 0x8C7853, 12.0, 0.4, 0.05, 0.01,
               "Mercury: Closest planet to the Sun. Orbital period: 88 Earth days."),
    PlanetSpec("venus", 0xFFC649, 16.0, 0.7, 0.035, 0.008,
               "Venus: Hottest planet in our solar system. Orbital period: 225 Earth days."),
    PlanetSpec("earth", 0x6B93D6, 20.0, 0.8, 0.03, 0.02,
               "Earth: Our home planet. Orbital period: 365 Earth days."),
    PlanetSpec("mars", 0xC1440E, 25.0, 0.6, 0.024, 0.018,
               "Mars: The Red Planet. Orbital period: 687 Earth days."),
    PlanetSpec("jupiter", 0xD8CA9D, 32.0, 1.5, 0.013, 0.04,
               "Jupiter: Largest planet in our solar system. Orbital period: 12 Earth years."),
    PlanetSpec("saturn", 0xFAD5A5, 40.0, 1.2, 0.009, 0.038,
               "Saturn: Known for its beautiful rings. Orbital period: 29 Earth years."),
    PlanetSpec("uranus", 0x4FD0E7, 48.0, 1.0, 0.006, 0.03,
               "Uranus: Tilted sideways. Orbital period: 84 Earth years."),
    PlanetSpec("neptune", 0x4B70DD, 56.0, 0.9, 0.004, 0.032,
               "Neptune: Windiest planet in our solar system. Orbital period: 165 Earth years."),
)


def _coerce_color(value) -> int:
    if isinstance(value, bool):
        raise ConfigurationError(f"Invalid color: {value!r}")
    if isinstance(value, int):
        if not 0 <= value <= 0xFFFFFF:
            raise ConfigurationError(f"Color out of range: {value!r}")
        return value
    if isinstance(value, str):
        text = value.strip().lstrip("#")
        if text.lower().startswith("0x"):
            text = text[2:]
        if not HEX_COLOR.fullmatch(text):
            raise ConfigurationError(f"Invalid color: {value!r}")
        return int(text, 16)
    raise ConfigurationError(f"Invalid color: {value!r}")


def planet_from_dict(data: dict) -> PlanetSpec:
    """Build one PlanetSpec from a JSON object, validating every field."""
    if not isinstance(data, dict):
        raise ConfigurationError(f"Planet entry must be an object, got {type(data).__name__}")
    missing = [f for f in REQUIRED_FIELDS if f not in data]
    if missing:
        raise ConfigurationError(f"Planet entry {data.get('name', '?')!r} is missing: {', '.join(missing)}")

    name = data["name"]
    if not isinstance(name, str) or not name.strip():
        raise ConfigurationError(f"Planet name must be a non-empty string, got {name!r}")
    name = name.strip().lower()

    numbers = {}
    for f in POSITIVE_FIELDS:
        try:
            numbers[f] = float(data[f])
        except (TypeError, ValueError):
            raise ConfigurationError(f"{name}: {f} must be a number, got {data[f]!r}") from None
        if not numbers[f] > 0:
            raise ConfigurationError(f"{name}: {f} must be positive, got {numbers[f]}")

    return PlanetSpec(
        name=name,
        color=_coerce_color(data["color"]),
        distance=numbers["distance"],
        size=numbers["size"],
        base_speed=numbers["base_speed"],
        rotation_speed=numbers["rotation_speed"],
        info=str(data["info"]),
    )


def validate_planet_table(planets: Iterable[PlanetSpec]) -> List[PlanetSpec]:
    """Check the table is complete: exactly eight planets with unique names."""
    planets = list(planets)
    if len(planets) != PLANET_COUNT:
        raise ConfigurationError(f"Planet table must contain exactly {PLANET_COUNT} planets, got {len(planets)}")
    seen = set()
    for p in planets:
        if p.name in seen:
            raise ConfigurationError(f"Duplicate planet name: {p.name}")
        seen.add(p.name)
    distances = [p.distance for p in planets]
    if distances != sorted(distances):
        # Allowed, but planets may visually overlap
        logger.warning("Planet distances are not increasing; orbits may overlap.")
    return planets


def load_planet_table(path: Optional[str] = None) -> List[PlanetSpec]:
    """
    Load and validate the planet table.

    With no path the built-in table is returned. Otherwise the JSON file is
    read; any read, parse or validation problem raises ConfigurationError.
    """
    if path is None:
        return validate_planet_table(DEFAULT_PLANETS)

    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except OSError as e:
        raise ConfigurationError(f"Cannot read planet table {path}: {e}") from e
    except json.JSONDecodeError as e:
        raise ConfigurationError(f"Planet table {path} is not valid JSON: {e}") from e

    entries = data.get("planets") if isinstance(data, dict) else data
    if not isinstance(entries, list):
        raise ConfigurationError(f"Planet table {path} must contain a list of planets")

    planets = validate_planet_table(planet_from_dict(e) for e in entries)
    logger.info("Loaded %d planets from %s", len(planets), path)
    return planets
