import math
import random
import unittest

import numpy as np

from sim_core.camera import CameraController, CameraRig, camera_position, move, press, release, zoom
from sim_core.constants import MAX_CAMERA_PHI, MAX_CAMERA_RADIUS, MIN_CAMERA_PHI, MIN_CAMERA_RADIUS
from sim_core.data_models import IDLE, CameraState


class TestTransitions(unittest.TestCase):

    def test_press_move_release(self):
        drag = press(IDLE, 100, 100)
        self.assertTrue(drag.dragging)
        cam, drag = move(CameraState(), drag, 110, 95)
        self.assertAlmostEqual(cam.theta, 0.1)
        self.assertAlmostEqual(cam.phi, math.pi / 2 - 0.05)
        self.assertEqual((drag.last_x, drag.last_y), (110, 95))
        self.assertFalse(release(drag).dragging)

    def test_move_while_idle_does_nothing(self):
        cam = CameraState()
        cam2, drag = move(cam, IDLE, 500, 500)
        self.assertEqual(cam2, cam)
        self.assertIs(drag, IDLE)

    def test_phi_is_clamped_at_poles(self):
        cam, drag = move(CameraState(), press(IDLE, 0, 0), 0, 10000)
        self.assertEqual(cam.phi, MAX_CAMERA_PHI)
        cam, drag = move(cam, drag, 0, -20000)
        self.assertEqual(cam.phi, MIN_CAMERA_PHI)

    def test_theta_is_unbounded(self):
        cam, _ = move(CameraState(), press(IDLE, 0, 0), 5000, 0)
        self.assertAlmostEqual(cam.theta, 50.0)

    def test_wheel_clamps_radius(self):
        self.assertEqual(zoom(CameraState(radius=80), 5000).radius, 200)
        self.assertEqual(zoom(CameraState(radius=80), -10000).radius, 20)
        self.assertAlmostEqual(zoom(CameraState(radius=80), 100).radius, 81.0)

    def test_random_input_never_leaves_bounds(self):
        rnd = random.Random(42)
        ctl = CameraController()
        for _ in range(2000):
            action = rnd.choice(("down", "move", "up", "wheel"))
            if action == "down":
                ctl.pointer_down(rnd.uniform(0, 1100), rnd.uniform(0, 800))
            elif action == "move":
                ctl.pointer_move(rnd.uniform(-3000, 3000), rnd.uniform(-3000, 3000))
            elif action == "up":
                ctl.pointer_up()
            else:
                ctl.wheel(rnd.uniform(-20000, 20000))
            self.assertTrue(MIN_CAMERA_RADIUS <= ctl.state.radius <= MAX_CAMERA_RADIUS)
            self.assertTrue(MIN_CAMERA_PHI <= ctl.state.phi <= MAX_CAMERA_PHI)


class TestRig(unittest.TestCase):

    def test_spherical_to_cartesian(self):
        np.testing.assert_array_almost_equal(camera_position(CameraState()), [80.0, 0.0, 0.0])
        pos = camera_position(CameraState(radius=50, theta=math.pi / 2, phi=0.5))
        np.testing.assert_array_almost_equal(
            pos, [0.0, 50 * math.cos(0.5), 50 * math.sin(0.5)])

    def test_origin_projects_to_viewport_centre(self):
        rig = CameraRig()
        rig.set_viewport_size(1000, 600)
        rig.update(CameraState(radius=120, theta=1.3, phi=0.7))
        screen, depth, visible = rig.world_to_screen(np.zeros((1, 3)))
        np.testing.assert_array_almost_equal(screen[0], [500.0, 300.0])
        self.assertAlmostEqual(depth[0], 120.0)
        self.assertTrue(visible[0])

    def test_point_behind_camera_is_not_visible(self):
        rig = CameraRig()
        rig.update(CameraState())
        _, _, visible = rig.world_to_screen(np.array([[200.0, 0.0, 0.0]]))
        self.assertFalse(visible[0])

    def test_centre_ray_points_at_origin(self):
        rig = CameraRig()
        rig.update(CameraState(radius=60, theta=0.4, phi=1.1))
        origin, direction = rig.ray_from_ndc(0.0, 0.0)
        np.testing.assert_array_almost_equal(direction, -origin / np.linalg.norm(origin))

    def test_ray_and_projection_agree(self):
        rig = CameraRig()
        rig.set_viewport_size(800, 800)
        rig.update(CameraState(radius=90, theta=2.0, phi=1.0))
        target = np.array([10.0, 3.0, -7.0])
        screen, _, _ = rig.world_to_screen(target)
        origin, direction = rig.ray_from_ndc(*rig.pixel_to_ndc(*screen[0]))
        expected = (target - origin) / np.linalg.norm(target - origin)
        np.testing.assert_array_almost_equal(direction, expected)

    def test_zero_area_resize_is_clamped(self):
        rig = CameraRig()
        rig.set_viewport_size(0, 0)
        self.assertEqual(rig.viewport_size, (1, 1))
        self.assertEqual(rig.aspect, 1.0)

    def test_pixel_to_ndc(self):
        rig = CameraRig()
        rig.set_viewport_size(200, 100)
        self.assertEqual(rig.pixel_to_ndc(0, 0), (-1.0, 1.0))
        self.assertEqual(rig.pixel_to_ndc(200, 100), (1.0, -1.0))
        self.assertEqual(rig.pixel_to_ndc(100, 50), (0.0, 0.0))


class TestCameraController(unittest.TestCase):

    def test_reset_restores_initial_state(self):
        ctl = CameraController()
        ctl.pointer_down(0, 0)
        ctl.pointer_move(40, 30)
        ctl.wheel(900)
        ctl.reset()
        self.assertEqual(ctl.state, CameraState(radius=80, theta=0.0, phi=math.pi / 2))
        self.assertFalse(ctl.dragging)


if __name__ == '__main__':
    unittest.main()
