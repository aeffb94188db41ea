import json
import os
import tempfile
import unittest

from sim_core.errors import ConfigurationError
from sim_core.planet_table import DEFAULT_PLANETS, load_planet_table, planet_from_dict


def _entry(spec):
    return {
        "name": spec.name,
        "color": f"#{spec.color:06X}",
        "distance": spec.distance,
        "size": spec.size,
        "base_speed": spec.base_speed,
        "rotation_speed": spec.rotation_speed,
        "info": spec.info,
    }


class TestLoadPlanetTable(unittest.TestCase):

    def setUp(self):
        self.tmpdir = tempfile.TemporaryDirectory()

    def tearDown(self):
        self.tmpdir.cleanup()

    def _write(self, data, raw=False):
        path = os.path.join(self.tmpdir.name, "planets.json")
        with open(path, "w", encoding="utf-8") as f:
            f.write(data if raw else json.dumps(data))
        return path

    def test_builtin_table(self):
        planets = load_planet_table()
        self.assertEqual([p.name for p in planets],
                         ["mercury", "venus", "earth", "mars", "jupiter", "saturn", "uranus", "neptune"])
        self.assertEqual(planets[2].base_speed, 0.03)
        self.assertEqual(planets[2].title, "Earth")

    def test_json_table_round_trips_builtin(self):
        path = self._write({"planets": [_entry(p) for p in DEFAULT_PLANETS]})
        self.assertEqual(load_planet_table(path), list(DEFAULT_PLANETS))

    def test_bare_list_accepted(self):
        path = self._write([_entry(p) for p in DEFAULT_PLANETS])
        self.assertEqual(len(load_planet_table(path)), 8)

    def test_wrong_count_is_fatal(self):
        path = self._write({"planets": [_entry(p) for p in DEFAULT_PLANETS[:7]]})
        with self.assertRaises(ConfigurationError):
            load_planet_table(path)

    def test_duplicate_names_are_fatal(self):
        entries = [_entry(p) for p in DEFAULT_PLANETS]
        entries[1]["name"] = "Mercury"
        with self.assertRaises(ConfigurationError):
            load_planet_table(self._write(entries))

    def test_missing_file_is_fatal(self):
        with self.assertRaises(ConfigurationError):
            load_planet_table(os.path.join(self.tmpdir.name, "nope.json"))

    def test_bad_json_is_fatal(self):
        with self.assertRaises(ConfigurationError):
            load_planet_table(self._write("{not json", raw=True))


class TestPlanetFromDict(unittest.TestCase):

    def setUp(self):
        self.entry = _entry(DEFAULT_PLANETS[3])

    def test_missing_field(self):
        del self.entry["info"]
        with self.assertRaises(ConfigurationError):
            planet_from_dict(self.entry)

    def test_non_positive_number(self):
        self.entry["distance"] = 0
        with self.assertRaises(ConfigurationError):
            planet_from_dict(self.entry)

    def test_non_numeric(self):
        self.entry["size"] = "big"
        with self.assertRaises(ConfigurationError):
            planet_from_dict(self.entry)

    def test_color_formats(self):
        self.entry["color"] = 0xC1440E
        self.assertEqual(planet_from_dict(self.entry).color, 0xC1440E)
        self.entry["color"] = "0xc1440e"
        self.assertEqual(planet_from_dict(self.entry).color, 0xC1440E)
        self.entry["color"] = "#12345"
        with self.assertRaises(ConfigurationError):
            planet_from_dict(self.entry)

    def test_signed_or_non_hex_colors_rejected(self):
        for bad in ("#-12345", "+12345", "#12 345", "#GGGGGG", "0x-1234"):
            self.entry["color"] = bad
            with self.assertRaises(ConfigurationError):
                planet_from_dict(self.entry)

    def test_name_is_normalised(self):
        self.entry["name"] = "  Mars "
        self.assertEqual(planet_from_dict(self.entry).name, "mars")


if __name__ == '__main__':
    unittest.main()
