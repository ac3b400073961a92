"""
Trajectory sampling and orbit outlines.

Kepler trajectories sample one full period centered on a date, on a closed
interval, so the first and last points coincide. Meteorite tracks sample a
fixed window of straight-line motion instead.
"""
from typing import Mapping, Optional, Union

import numpy as np

from orrery.astrodynamics import conic_radius, orbital_plane_to_scene
from orrery.bodies import Asteroid, CelestialBody
from orrery.config import (
    DEFAULT_MOON_OUTLINE_SEGMENTS,
    DEFAULT_OUTLINE_SEGMENTS,
    DEFAULT_PRESENTATION,
    DEFAULT_TRAJECTORY_SAMPLES,
    PresentationConfig,
)
from orrery.constants import J2000
from orrery.meteorites import Meteorite, meteorite_points
from orrery.positions import (
    OrbitError,
    asteroid_node_longitude,
    asteroid_points,
    days_since,
    moon_offset_points,
    planet_like_points,
    resolve_parent,
)


def _sample_offsets(period: float, sample_count: int) -> np.ndarray:
    if sample_count < 1:
        raise OrbitError(f"sample_count must be at least 1, got {sample_count}")
    if sample_count == 1:
        return np.zeros(1)
    half = abs(period) / 2.0
    return np.linspace(-half, half, sample_count)


def generate_trajectory(body: Union[CelestialBody, Asteroid], center_date,
                        sample_count: int = DEFAULT_TRAJECTORY_SAMPLES,
                        catalog: Optional[Mapping[str, CelestialBody]] = None,
                        reference_epoch=J2000,
                        config: PresentationConfig = DEFAULT_PRESENTATION) -> np.ndarray:
    """
    Sample one orbital period of ``body`` centered on ``center_date``.

    Samples are evenly spaced from ``center - P/2`` to ``center + P/2`` inclusive.
    A single sample is placed at ``center_date``. Satellites are sampled
    around their parent frozen at ``center_date``, so their loop closes too.

    Args:
        body: CelestialBody or followed Asteroid
        center_date: date or datetime at the middle of the window
        sample_count: number of points, at least 1
        catalog: catalog used to resolve parents (the bundled one by default)
        reference_epoch: epoch of zero mean anomaly
        config: presentation parameters

    Returns:
        numpy array of shape (sample_count, 3)

    Raises:
        OrbitError: if sample_count < 1 or the body cannot be positioned
    """
    center = days_since(center_date, reference_epoch)

    if isinstance(body, Asteroid):
        days = center + _sample_offsets(body.period_days, sample_count)
        return np.asarray(asteroid_points(body, days, config))

    if body.is_root():
        return np.zeros((_sample_offsets(0.0, sample_count).size, 3))

    days = center + _sample_offsets(body.orbital_period, sample_count)
    parent = resolve_parent(body, catalog)
    if parent is None:
        return np.asarray(planet_like_points(body, days, config))
    parent_center = np.asarray(planet_like_points(parent, center, config))
    return parent_center + np.asarray(moon_offset_points(body, days, config))


def orbit_outline(body: Union[CelestialBody, Asteroid], segments: Optional[int] = None,
                  catalog: Optional[Mapping[str, CelestialBody]] = None,
                  config: PresentationConfig = DEFAULT_PRESENTATION) -> np.ndarray:
    """
    Closed orbit ring of ``segments + 1`` points, relative to the body's parent.

    The ring sweeps the true anomaly over a full turn using the conic distance,
    so the first and last points are identical.
    """
    if isinstance(body, Asteroid):
        a = body.semi_major_axis * config.orbital_scale
        e = body.eccentricity
        inclination = body.inclination
        node = float(asteroid_node_longitude(body.id))
        amplify = config.planet_inclination_amplify
        default_segments = DEFAULT_OUTLINE_SEGMENTS
    else:
        if body.is_root():
            raise OrbitError(f"'{body.id}' is the fixed root and has no orbit")
        el = body.elements
        e = el.eccentricity or 0.0
        inclination = el.inclination
        node = el.longitude_of_ascending_node
        if resolve_parent(body, catalog) is None:
            a = el.distance * config.orbital_scale
            amplify = config.planet_inclination_amplify
            default_segments = DEFAULT_OUTLINE_SEGMENTS
        else:
            a = el.distance * config.moon_orbital_scale
            amplify = config.moon_inclination_amplify
            default_segments = DEFAULT_MOON_OUTLINE_SEGMENTS

    segments = default_segments if segments is None else int(segments)
    if segments < 3:
        raise OrbitError(f"An orbit outline needs at least 3 segments, got {segments}")

    nu = np.linspace(0.0, 2.0 * np.pi, segments + 1)
    r = conic_radius(nu, a, e)
    return np.asarray(orbital_plane_to_scene(nu, r, inclination, node, amplify))


def meteorite_trajectory(meteorite: Meteorite, center_date, half_window_days: float = 10.0,
                         step_hours: float = 12.0,
                         config: PresentationConfig = DEFAULT_PRESENTATION) -> np.ndarray:
    """
    Straight-line track of a meteorite over ``center_date +/- half_window_days``.

    With the defaults this is 41 points, one every 12 hours over 20 days. The
    elapsed time is counted from the discovery date, or from ``center_date``
    when the meteorite has none.
    """
    if half_window_days < 0.0 or step_hours <= 0.0:
        raise OrbitError("half_window_days must be non-negative and step_hours positive")

    step_days = step_hours / 24.0
    count = int(round(2.0 * half_window_days / step_days)) + 1
    offsets = np.linspace(-half_window_days, half_window_days, count)

    reference = meteorite.discovery_date if meteorite.discovery_date is not None else center_date
    elapsed = days_since(center_date, reference) + offsets
    return meteorite_points(meteorite, elapsed, config)

