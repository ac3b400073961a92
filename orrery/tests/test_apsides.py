"""Tests for the apsidal analysis"""
import unittest

import pytest

from orrery.apsides import (
    apsidal_analysis,
    can_cross_inside_neptune,
    is_transneptunian,
    orbital_variation,
)
from orrery.bodies import CelestialBody, bodies_data, get_body


def _body(body_id, e, q, Q, distance=40.0, body_type='dwarf_planet'):
    return CelestialBody(id=body_id, name=body_id.title(), type=body_type, radius=100.0, distance=distance,
                         orbital_period=90000.0, parent='sun', eccentricity=e, perihelion=q, aphelion=Q)


class TestApsidalAnalysis(unittest.TestCase):

    def setUp(self):
        self.report = apsidal_analysis(bodies_data.values())

    def test_pluto_can_cross_inside_neptune(self):
        pluto = get_body('pluto')
        self.assertTrue(is_transneptunian(pluto))
        self.assertTrue(can_cross_inside_neptune(pluto))
        self.assertTrue(self.report.transneptunian_flags['pluto'])
        self.assertTrue(self.report.entry('pluto').can_cross_inside_neptune)

    def test_venus_cannot(self):
        venus = get_body('venus')
        self.assertFalse(can_cross_inside_neptune(venus))
        self.assertFalse(self.report.entry('venus').can_cross_inside_neptune)
        self.assertNotIn('venus', self.report.transneptunian_flags)

    def test_transneptunian_flags(self):
        self.assertEqual(self.report.transneptunian_flags,
                         {'pluto': True, 'quaoar': False, 'sedna': False, 'orcus': False,
                          'eris': False, 'haumea': False, 'makemake': False})

    def test_only_bodies_with_both_apsides(self):
        ids = {entry.id for entry in self.report.entries}
        self.assertIn('earth', ids)
        self.assertNotIn('moon', ids)
        self.assertNotIn('quaoar', ids)
        self.assertNotIn('sun', ids)

    def test_extremes(self):
        self.assertEqual(self.report.extremes.most_eccentric, 'sedna')
        self.assertEqual(self.report.extremes.farthest_aphelion, 'sedna')
        self.assertEqual(self.report.extremes.closest_perihelion, 'pluto')

    def test_variation_percent(self):
        self.assertAlmostEqual(self.report.entry('pluto').variation_percent, (49.3 - 29.7) / 29.7 * 100.0)

    def test_unknown_entry(self):
        with self.assertRaises(KeyError):
            self.report.entry('sun')


def test_ties_keep_first_encountered():
    first = _body('first', 0.5, 20.0, 60.0)
    second = _body('second', 0.5, 20.0, 60.0)
    report = apsidal_analysis([first, second])
    assert report.extremes.most_eccentric == 'first'
    assert report.extremes.farthest_aphelion == 'first'
    assert report.extremes.closest_perihelion == 'first'

    report = apsidal_analysis([second, first])
    assert report.extremes.most_eccentric == 'second'


def test_extremes_ignore_inner_bodies():
    inner = _body('inner', 0.9, 0.1, 1.9, distance=1.0, body_type='planet')
    outer = _body('outer', 0.3, 35.0, 65.0)
    report = apsidal_analysis([inner, outer])
    assert report.extremes.most_eccentric == 'outer'
    assert report.extremes.closest_perihelion == 'outer'
    assert [entry.id for entry in report.entries] == ['inner', 'outer']
    assert report.transneptunian_flags == {'outer': False}


def test_transneptunian_without_apsides():
    bare = _body('bare', 0.1, None, None)
    report = apsidal_analysis([bare])
    assert report.entries == []
    assert report.transneptunian_flags == {'bare': False}
    assert report.extremes.most_eccentric == 'bare'
    assert report.extremes.closest_perihelion == 'bare'


def test_empty_analysis():
    report = apsidal_analysis([])
    assert report.entries == []
    assert report.extremes.most_eccentric is None
    assert report.transneptunian_flags == {}


def test_custom_neptune_distance():
    pluto = get_body('pluto')
    assert not can_cross_inside_neptune(pluto, neptune_distance=25.0)


def test_orbital_variation():
    pluto = get_body('pluto')
    variation = orbital_variation(pluto)
    assert variation.min_distance == 29.7
    assert variation.max_distance == 49.3
    assert variation.variation_percent == pytest.approx(65.99, abs=0.01)


def test_orbital_variation_falls_back_to_distance():
    moon = get_body('moon')
    assert tuple(orbital_variation(moon)) == (moon.distance, moon.distance, 0.0)


def test_inner_dwarf_planet_is_not_transneptunian():
    assert not is_transneptunian(get_body('ceres'))
    assert not can_cross_inside_neptune(get_body('ceres'))


if __name__ == '__main__':
    unittest.main()
