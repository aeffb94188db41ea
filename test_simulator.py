import math
import unittest

import numpy as np

from sim_core.planet_table import DEFAULT_PLANETS
from sim_core.scene import STARFIELD, SUN, build_scene
from sim_core.simulator import OrbitalSimulator, advance, planet_position, sync_scene
from sim_core.constants import STARFIELD_DRIFT_PER_STEP, SUN_SPIN_PER_STEP


def _specs_by_name():
    return {s.name: s for s in DEFAULT_PLANETS}


class TestAdvance(unittest.TestCase):

    def setUp(self):
        self.graph, self.states = build_scene(DEFAULT_PLANETS, np.random.default_rng(7))

    def test_angle_increases_by_base_speed_times_multiplier_times_dt(self):
        self.states["venus"].speed_multiplier = 3.5
        for dt in (0.0, 0.016, 1.0, 12.5):
            before = {n: s.angle for n, s in self.states.items()}
            advance(self.states, DEFAULT_PLANETS, dt)
            for spec in DEFAULT_PLANETS:
                st = self.states[spec.name]
                self.assertEqual(st.angle, before[spec.name] + spec.base_speed * st.speed_multiplier * dt)

    def test_rotation_ignores_speed_multiplier(self):
        self.states["jupiter"].speed_multiplier = 0.0
        advance(self.states, DEFAULT_PLANETS, 2.0)
        self.assertAlmostEqual(self.states["jupiter"].rotation_angle, 0.04 * 2.0)

    def test_earth_double_speed_scenario(self):
        specs = _specs_by_name()
        self.states["earth"].speed_multiplier = 2.0
        earth0 = self.states["earth"].angle
        mars0 = self.states["mars"].angle
        advance(self.states, DEFAULT_PLANETS, 1.0)
        self.assertAlmostEqual(self.states["earth"].angle - earth0, 0.06)
        self.assertAlmostEqual(self.states["mars"].angle - mars0, 0.024)
        self.assertEqual(specs["mars"].base_speed, 0.024)

    def test_angles_are_not_wrapped(self):
        self.states["mercury"].angle = 6.0
        advance(self.states, DEFAULT_PLANETS, 100.0)
        self.assertGreater(self.states["mercury"].angle, 2 * math.pi)


class TestSyncScene(unittest.TestCase):

    def test_planet_nodes_follow_state(self):
        graph, states = build_scene(DEFAULT_PLANETS, np.random.default_rng(1))
        states["saturn"].angle = math.pi / 2
        states["saturn"].rotation_angle = 1.25
        sync_scene(graph, states, DEFAULT_PLANETS)
        node = graph.get("saturn")
        np.testing.assert_array_almost_equal(node.position, [0.0, 0.0, 40.0])
        self.assertEqual(node.rotation_y, 1.25)

    def test_planet_position_on_circle(self):
        spec = _specs_by_name()["neptune"]
        graph, states = build_scene(DEFAULT_PLANETS, np.random.default_rng(2))
        x, y, z = planet_position(spec, states["neptune"])
        self.assertEqual(y, 0.0)
        self.assertAlmostEqual(math.hypot(x, z), spec.distance)


class TestOrbitalSimulator(unittest.TestCase):

    def test_step_moves_planets_and_decorations(self):
        graph, states = build_scene(DEFAULT_PLANETS, np.random.default_rng(3))
        sim = OrbitalSimulator(graph, DEFAULT_PLANETS, states)
        sun0 = graph.get(SUN).rotation_y
        stars0 = graph.get(STARFIELD).rotation_y
        sim.step(0.5)
        self.assertAlmostEqual(graph.get(SUN).rotation_y - sun0, SUN_SPIN_PER_STEP)
        self.assertAlmostEqual(graph.get(STARFIELD).rotation_y - stars0, STARFIELD_DRIFT_PER_STEP)
        earth = graph.get("earth")
        expected = planet_position(_specs_by_name()["earth"], states["earth"])
        np.testing.assert_array_almost_equal(earth.position, expected)

    def test_construction_syncs_initial_positions(self):
        graph, states = build_scene(DEFAULT_PLANETS, np.random.default_rng(4))
        OrbitalSimulator(graph, DEFAULT_PLANETS, states)
        for spec in DEFAULT_PLANETS:
            np.testing.assert_array_almost_equal(graph.get(spec.name).position,
                                                 planet_position(spec, states[spec.name]))


if __name__ == '__main__':
    unittest.main()
