"""Tests for trajectory sampling, orbit outlines and meteorite tracks"""
import unittest
from datetime import datetime, timedelta

import numpy as np
import pytest

from orrery import J2000
from orrery.bodies import get_body, load_famous_asteroids
from orrery.config import DEFAULT_PRESENTATION
from orrery.constants import AU_KM, DAY_SECONDS
from orrery.meteorites import Meteorite, load_famous_meteorites, position_of_meteorite
from orrery.positions import OrbitError, position_of_asteroid, position_of_body
from orrery.trajectory import generate_trajectory, meteorite_trajectory, orbit_outline

SCALE = DEFAULT_PRESENTATION.orbital_scale


class TestGenerateTrajectory(unittest.TestCase):

    def test_shape(self):
        points = generate_trajectory(get_body('mars'), datetime(2024, 1, 1))
        self.assertEqual(points.shape, (200, 3))

    def test_closure(self):
        for body_id in ('mercury', 'earth', 'neptune', 'pluto', 'eris', 'moon', 'triton', 'io'):
            points = generate_trajectory(get_body(body_id), datetime(2024, 1, 1), 120)
            np.testing.assert_allclose(points[-1], points[0], rtol=1e-9, atol=1e-9, err_msg=body_id)

    def test_samples_match_position_function(self):
        earth = get_body('earth')
        center = datetime(2024, 6, 1)
        points = generate_trajectory(earth, center, 3)
        half = timedelta(days=earth.orbital_period / 2.0)
        np.testing.assert_allclose(points[0], position_of_body(earth, center - half), atol=1e-9)
        np.testing.assert_allclose(points[1], position_of_body(earth, center), atol=1e-9)
        np.testing.assert_allclose(points[2], position_of_body(earth, center + half), atol=1e-9)

    def test_single_sample_is_center(self):
        venus = get_body('venus')
        center = datetime(2012, 6, 6)
        points = generate_trajectory(venus, center, 1)
        self.assertEqual(points.shape, (1, 3))
        np.testing.assert_allclose(points[0], position_of_body(venus, center), atol=1e-12)

    def test_invalid_sample_count(self):
        with self.assertRaises(OrbitError):
            generate_trajectory(get_body('earth'), J2000, 0)

    def test_root_body(self):
        points = generate_trajectory(get_body('sun'), J2000, 10)
        np.testing.assert_array_equal(points, np.zeros((10, 3)))

    def test_moon_trajectory_circles_parent_at_center(self):
        moon = get_body('moon')
        earth = get_body('earth')
        center = datetime(2024, 1, 1)
        points = generate_trajectory(moon, center, 50)

        earth_at_center = np.array(position_of_body(earth, center))
        radii = np.linalg.norm(points - earth_at_center, axis=1)
        np.testing.assert_allclose(radii, moon.distance * DEFAULT_PRESENTATION.moon_orbital_scale, rtol=1e-9)

        middle = generate_trajectory(moon, center, 1)
        np.testing.assert_allclose(middle[0], position_of_body(moon, center), atol=1e-9)


class TestAsteroidTrajectory(unittest.TestCase):

    def test_closure_and_bounds(self):
        apophis = load_famous_asteroids()['apophis']
        points = generate_trajectory(apophis, datetime(2029, 4, 13), 200)
        np.testing.assert_allclose(points[-1], points[0], atol=1e-9)
        radii = np.linalg.norm(points, axis=1)
        self.assertGreaterEqual(radii.min(), apophis.perihelion * SCALE - 1e-9)
        self.assertLessEqual(radii.max(), apophis.aphelion * SCALE + 1e-9)

    def test_refresh_trajectory_caches_points(self):
        apophis = load_famous_asteroids()['apophis']
        center = datetime(2029, 4, 13)
        points = apophis.refresh_trajectory(center)
        self.assertEqual(len(points), 200)
        self.assertIs(points, apophis.trajectory)
        self.assertIsInstance(points[0], tuple)
        np.testing.assert_allclose(points[100], position_of_asteroid(apophis, center + timedelta(
            days=apophis.period_days * (100 / 199 - 0.5))), atol=1e-9)


def test_orbit_outline_closed_ring():
    earth = get_body('earth')
    ring = orbit_outline(earth)
    assert ring.shape == (257, 3)
    np.testing.assert_allclose(ring[-1], ring[0], atol=1e-12)
    radii = np.linalg.norm(ring, axis=1)
    assert radii.min() == pytest.approx(earth.distance * (1.0 - earth.eccentricity) * SCALE)
    assert radii.max() == pytest.approx(earth.distance * (1.0 + earth.eccentricity) * SCALE, rel=1e-4)


def test_moon_outline_uses_moon_scale():
    io = get_body('io')
    ring = orbit_outline(io)
    assert ring.shape == (65, 3)
    np.testing.assert_allclose(np.linalg.norm(ring, axis=1), io.distance * DEFAULT_PRESENTATION.moon_orbital_scale)


def test_asteroid_outline():
    bennu = load_famous_asteroids()['bennu']
    ring = orbit_outline(bennu, segments=32)
    assert ring.shape == (33, 3)
    radii = np.linalg.norm(ring, axis=1)
    assert radii.min() == pytest.approx(bennu.perihelion * SCALE)


def test_orbit_outline_rejects_root():
    with pytest.raises(OrbitError):
        orbit_outline(get_body('sun'))
    with pytest.raises(OrbitError):
        orbit_outline(get_body('earth'), segments=2)


def test_meteorite_trajectory():
    chelyabinsk = load_famous_meteorites()['chelyabinsk']
    center = datetime(2013, 2, 20)
    track = meteorite_trajectory(chelyabinsk, center)
    assert track.shape == (41, 3)
    np.testing.assert_allclose(track[20], position_of_meteorite(chelyabinsk, center), atol=1e-12)
    np.testing.assert_allclose(track[40], position_of_meteorite(chelyabinsk, center + timedelta(days=10)), atol=1e-12)

    # Straight line: constant step between samples
    steps = np.diff(track, axis=0)
    np.testing.assert_allclose(steps, np.broadcast_to(steps[0], steps.shape), atol=1e-12)


def test_meteorite_trajectory_window():
    perseid = load_famous_meteorites()['meteor-perseids']
    track = meteorite_trajectory(perseid, datetime(2024, 8, 12), half_window_days=1.0, step_hours=6)
    assert track.shape == (9, 3)


def test_meteorite_trajectory_without_discovery_date_is_centered_on_entry():
    meteorite = Meteorite(id='m', name='M', kind='debris', mass=1.0, diameter=0.001,
                          velocity=(30.0, 0.0, 0.0), position=(1.0, 0.0, 0.0))
    center = datetime(2030, 1, 1)
    track = meteorite_trajectory(meteorite, center)
    assert track.shape == (41, 3)
    np.testing.assert_allclose(track[20], position_of_meteorite(meteorite, center), atol=1e-12)
    np.testing.assert_allclose(track[20], (10.0, 0.0, 0.0), atol=1e-12)

    # The track still moves: the samples are counted from the center date
    step = 30.0 * DAY_SECONDS / AU_KM * 0.5 * 10.0
    np.testing.assert_allclose(np.diff(track[:, 0]), step, rtol=1e-9)
    assert track[0, 0] < track[20, 0] < track[40, 0]


if __name__ == '__main__':
    unittest.main()
