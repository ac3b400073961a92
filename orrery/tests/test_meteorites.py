"""Tests for meteorite kinematics and the randomizer"""
import unittest
from datetime import date, datetime, timedelta, timezone

import numpy as np
import pydantic
import pytest

from orrery.config import make_presentation_config
from orrery.constants import AU_KM, DAY_SECONDS
from orrery.meteorites import (
    Meteorite,
    load_famous_meteorites,
    meteorite_display_radius,
    position_of_meteorite,
    random_meteorite,
)


class TestFamousMeteorites(unittest.TestCase):

    def setUp(self):
        self.meteorites = load_famous_meteorites()

    def test_catalog(self):
        self.assertEqual(set(self.meteorites),
                         {'chelyabinsk', 'tunguska', 'chicxulub', 'hoba', 'oumuamua', 'meteor-perseids'})
        chelyabinsk = self.meteorites['chelyabinsk']
        self.assertEqual(chelyabinsk.kind, 'asteroid')
        self.assertEqual(chelyabinsk.discovery_date, date(2013, 2, 15))
        self.assertEqual(chelyabinsk.velocity, (18.6, -2.5, 0.0))
        self.assertEqual(self.meteorites['oumuamua'].kind, 'artificial')
        self.assertIsNone(self.meteorites['oumuamua'].impact_location)
        self.assertEqual(self.meteorites['chicxulub'].impact_date, '-66000000')

    def test_position_at_discovery(self):
        hoba = self.meteorites['hoba']
        self.assertEqual(position_of_meteorite(hoba, hoba.discovery_date), (10.0, 0.0, 0.0))

    def test_linear_motion(self):
        tunguska = self.meteorites['tunguska']
        start = datetime(1908, 7, 1, tzinfo=timezone.utc)
        end = start + timedelta(days=8)
        middle = start + timedelta(days=4)
        p0 = np.array(position_of_meteorite(tunguska, start))
        p1 = np.array(position_of_meteorite(tunguska, end))
        np.testing.assert_allclose(position_of_meteorite(tunguska, middle), (p0 + p1) / 2.0, atol=1e-12)

    def test_velocity_units(self):
        chelyabinsk = self.meteorites['chelyabinsk']
        one_day_later = datetime(2013, 2, 16)
        p = np.array(position_of_meteorite(chelyabinsk, one_day_later))
        expected = (np.array(chelyabinsk.position) + np.array(chelyabinsk.velocity) * DAY_SECONDS / AU_KM) * 10.0
        np.testing.assert_allclose(p, expected, rtol=1e-12)

    def test_scene_scale(self):
        hoba = self.meteorites['hoba']
        config = make_presentation_config(meteorite_scene_scale=1.0)
        self.assertEqual(position_of_meteorite(hoba, hoba.discovery_date, config), (1.0, 0.0, 0.0))


def test_without_discovery_date_stays_at_entry():
    meteorite = Meteorite(id='m', name='M', kind='debris', mass=1.0, diameter=0.001,
                          velocity=(30.0, 0.0, 0.0), position=(1.0, 2.0, 3.0))
    assert position_of_meteorite(meteorite, datetime(2030, 1, 1)) == (10.0, 20.0, 30.0)


def test_meteorite_validation():
    with pytest.raises(pydantic.ValidationError):
        Meteorite(id='m', name='M', kind='planet', mass=1.0, diameter=0.001,
                  velocity=(1.0, 0.0, 0.0), position=(1.0, 0.0, 0.0))
    with pytest.raises(pydantic.ValidationError):
        Meteorite(id='m', name='M', kind='comet', mass=-1.0, diameter=0.001,
                  velocity=(1.0, 0.0, 0.0), position=(1.0, 0.0, 0.0))


def test_display_radius_is_clipped():
    meteorites = load_famous_meteorites()
    assert meteorite_display_radius(meteorites['chicxulub']) == 0.5
    assert meteorite_display_radius(meteorites['meteor-perseids']) == 0.02
    assert meteorite_display_radius(meteorites['hoba']) == pytest.approx(0.0027 * 20.0)


class TestRandomMeteorite(unittest.TestCase):

    NOW = datetime(2025, 3, 1, 12, tzinfo=timezone.utc)

    def test_reproducible_with_seed(self):
        a = random_meteorite(np.random.default_rng(42), now=self.NOW)
        b = random_meteorite(np.random.default_rng(42), now=self.NOW)
        self.assertEqual(a.model_dump(), b.model_dump())

    def test_distributions(self):
        rng = np.random.default_rng(7)
        for _ in range(50):
            m = random_meteorite(rng, now=self.NOW)
            self.assertIn(m.kind, ('asteroid', 'comet', 'debris'))
            self.assertGreaterEqual(m.mass, 10.0)
            self.assertLessEqual(m.mass, 1e11)
            self.assertLessEqual(m.speed, 72.0)
            self.assertGreater(m.speed, 0.0)
            entry = np.hypot(m.position[0], m.position[2])
            self.assertGreaterEqual(entry, 1.5)
            self.assertLessEqual(entry, 3.0)
            self.assertLessEqual(abs(m.position[1]), 1.0)
            self.assertAlmostEqual(np.linalg.norm(m.direction), 1.0, places=12)
            self.assertTrue(m.is_active)
            self.assertEqual(m.discovery_date, self.NOW.date())

    def test_direction_points_inward(self):
        m = random_meteorite(np.random.default_rng(3), now=self.NOW)
        self.assertLess(np.dot(m.direction, m.position), 0.0)

    def test_diameter_from_mass(self):
        m = random_meteorite(np.random.default_rng(11), now=self.NOW)
        self.assertAlmostEqual(m.diameter, (m.mass / 2000.0) ** (1.0 / 3.0) / 1000.0)


if __name__ == '__main__':
    unittest.main()
