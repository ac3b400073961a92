"""
Scene positions of catalog bodies, followed asteroids and satellites at a given date.

Every function here is a pure function of its record and the date: nothing is
cached and nothing is mutated. Positions are returned as plain float tuples in
scene units, Y-up (see orrery.astrodynamics.orbital_plane_to_scene).

The ``*_points`` helpers accept a scalar or an array of elapsed days and are
shared with orrery.trajectory.
"""
from datetime import date as date_type, datetime, time, timezone
from typing import Mapping, Optional

import numpy as np

from orrery.astrodynamics import (
    conic_radius,
    kepler_scene_point,
    orbital_plane_to_scene,
    solve_kepler,
    true_anomaly,
)
from orrery.bodies import Asteroid, CelestialBody, display_overrides, get_body
from orrery.config import (
    BASE_MOON_SIZE,
    BASE_PLANET_SIZE,
    DEFAULT_DISPLAY_RADIUS,
    DEFAULT_PRESENTATION,
    MOON_DISPLAY_LIMITS,
    PLANET_DISPLAY_LIMITS,
    STAR_DISPLAY_RADIUS,
    PresentationConfig,
)
from orrery.constants import DAY_SECONDS, EARTH_RADIUS_KM, J2000
from orrery.orbital_elements import Vec3

ORIGIN: Vec3 = (0.0, 0.0, 0.0)


class OrbitError(ValueError):
    """Raised when a body cannot be placed with the two-body display model."""


# ---------------------------------------------------------------------------
# Time helpers
# ---------------------------------------------------------------------------


def as_utc(when) -> datetime:
    """Normalize a date or datetime to an aware UTC datetime (naive values are taken as UTC)."""
    if not isinstance(when, datetime):
        if isinstance(when, date_type):
            return datetime.combine(when, time(), tzinfo=timezone.utc)
        raise TypeError(f"Expected a date or datetime, got {type(when).__name__}")
    if when.tzinfo is None:
        return when.replace(tzinfo=timezone.utc)
    return when.astimezone(timezone.utc)


def days_since(when, reference_epoch=J2000) -> float:
    """Elapsed days from ``reference_epoch`` to ``when`` (negative before the epoch)."""
    return (as_utc(when) - as_utc(reference_epoch)).total_seconds() / DAY_SECONDS


def mean_anomaly(days, orbital_period):
    """
    Mean anomaly (rad) after ``days`` for a body with the given signed period (days).

    The progress fraction is taken modulo one revolution of ``|orbital_period|``;
    a negative period marks retrograde revolution and flips the angle's sign.
    Works on scalars and numpy arrays.
    """
    if orbital_period == 0.0:
        raise OrbitError("orbital period must be non-zero to compute a mean anomaly")
    progress = np.mod(np.asarray(days, dtype=float) / abs(orbital_period), 1.0)
    M = 2.0 * np.pi * progress
    return -M if orbital_period < 0.0 else M


def to_vec3(point) -> Vec3:
    """Convert a length-3 array (numpy or jax) to a tuple of Python floats."""
    x, y, z = np.asarray(point, dtype=float)
    return (float(x), float(y), float(z))


def asteroid_node_longitude(identifier: str) -> int:
    """
    Deterministic longitude of the ascending node (deg) synthesized from an id.

    32-bit rolling hash over UTF-16 code units: hash = hash*31 + code, wrapped
    to signed 32 bits at every step, then abs() and modulo 360.

    Examples:
        >>> asteroid_node_longitude('apophis')
        30
    """
    h = 0
    units = identifier.encode('utf-16-le')
    for k in range(0, len(units), 2):
        code = units[k] | (units[k + 1] << 8)
        h = (h * 31 + code) & 0xFFFFFFFF
        if h >= 0x80000000:
            h -= 0x100000000
    return abs(h) % 360


# ---------------------------------------------------------------------------
# Vectorized cores
# ---------------------------------------------------------------------------


def planet_like_points(body: CelestialBody, days, config: PresentationConfig = DEFAULT_PRESENTATION):
    """Scene points of a body orbiting the root after ``days`` (scalar or array) since the epoch."""
    el = body.elements
    M = mean_anomaly(days, el.orbital_period)
    return kepler_scene_point(
        M,
        el.distance * config.orbital_scale,
        el.eccentricity or 0.0,
        el.inclination,
        el.longitude_of_ascending_node,
        config.planet_inclination_amplify,
        config.kepler_tolerance,
        config.kepler_max_iter,
    )


def moon_offset_points(moon: CelestialBody, days, config: PresentationConfig = DEFAULT_PRESENTATION):
    """Scene offsets of a satellite from its parent after ``days`` since the epoch."""
    if moon.orbital_period == 0.0:
        raise OrbitError(f"Satellite '{moon.id}' has a zero orbital period")
    el = moon.elements
    M = mean_anomaly(days, el.orbital_period)
    return kepler_scene_point(
        M,
        el.distance * config.moon_orbital_scale,
        el.eccentricity or 0.0,
        el.inclination,
        el.longitude_of_ascending_node,
        config.moon_inclination_amplify,
        config.kepler_tolerance,
        config.kepler_max_iter,
    )


def asteroid_points(asteroid: Asteroid, days, config: PresentationConfig = DEFAULT_PRESENTATION):
    """Scene points of a followed asteroid after ``days`` since the epoch."""
    M = mean_anomaly(days, asteroid.period_days)
    return kepler_scene_point(
        M,
        asteroid.semi_major_axis * config.orbital_scale,
        asteroid.eccentricity,
        asteroid.inclination,
        float(asteroid_node_longitude(asteroid.id)),
        config.planet_inclination_amplify,
        config.kepler_tolerance,
        config.kepler_max_iter,
    )


def resolve_parent(body: CelestialBody, catalog: Optional[Mapping[str, CelestialBody]] = None) -> Optional[CelestialBody]:
    """
    Return the parent when ``body`` is a satellite, None when it orbits the root.

    Raises:
        UnknownBodyError: if a parent id is not in the catalog
        OrbitError: if the parent is itself a satellite (nested satellites)
    """
    parent = get_body(body.parent, catalog)
    if parent.is_root():
        return None
    if not get_body(parent.parent, catalog).is_root():
        raise OrbitError(f"Nested satellites are not supported: '{body.id}' -> '{parent.id}' -> '{parent.parent}'")
    return parent


# ---------------------------------------------------------------------------
# Position functions
# ---------------------------------------------------------------------------


def position_of_planet_like_body(body: CelestialBody, when, reference_epoch=J2000,
                                 config: PresentationConfig = DEFAULT_PRESENTATION) -> Vec3:
    """
    Scene position of a body orbiting the fixed root (planet, dwarf planet, belt object).

    The root (no parent or zero period) is always at the origin. Otherwise the
    mean anomaly since ``reference_epoch`` is turned into an eccentric anomaly,
    the distance ``a*(1 - e*cos(E))`` is taken from the Kepler ellipse and the
    point is rotated by the amplified inclination and the ascending node.

    Args:
        body: Catalog body, distance in AU
        when: date or datetime (naive values are UTC)
        reference_epoch: epoch of zero mean anomaly (default J2000.0)
        config: presentation parameters

    Returns:
        (x, y, z) in scene units, Y-up
    """
    if body.is_root():
        return ORIGIN
    return to_vec3(planet_like_points(body, days_since(when, reference_epoch), config))


def position_of_moon(moon: CelestialBody, parent: CelestialBody, when, reference_epoch=J2000,
                     config: PresentationConfig = DEFAULT_PRESENTATION) -> Vec3:
    """
    Scene position of a satellite: its parent's position plus the satellite offset.

    The offset uses the satellite scale (km) and the satellite inclination
    amplification. Only one level of parent lookup is made; the parent must
    orbit the root. A negative period (Triton) revolves backward.
    """
    if moon.parent != parent.id:
        raise OrbitError(f"'{parent.id}' is not the parent of '{moon.id}' (parent is {moon.parent!r})")

    days = days_since(when, reference_epoch)
    parent_position = np.asarray(position_of_planet_like_body(parent, when, reference_epoch, config))
    offset = np.asarray(moon_offset_points(moon, days, config))
    return to_vec3(parent_position + offset)


def position_of_body(body: CelestialBody, when, catalog: Optional[Mapping[str, CelestialBody]] = None,
                     reference_epoch=J2000, config: PresentationConfig = DEFAULT_PRESENTATION) -> Vec3:
    """Place any catalog body, choosing the planet-like or satellite path from its parent."""
    if body.is_root():
        return ORIGIN
    parent = resolve_parent(body, catalog)
    if parent is None:
        return position_of_planet_like_body(body, when, reference_epoch, config)
    return position_of_moon(body, parent, when, reference_epoch, config)


def position_of_asteroid(asteroid: Asteroid, when, reference_epoch=J2000,
                         config: PresentationConfig = DEFAULT_PRESENTATION) -> Vec3:
    """
    Scene position of a followed asteroid.

    Semi-major axis and eccentricity are derived from the apsides:
        a = (q + Q) / 2,  e = (Q - q) / (Q + q)
    and the node longitude comes from asteroid_node_longitude(asteroid.id).
    The period is stored in years.
    """
    return to_vec3(asteroid_points(asteroid, days_since(when, reference_epoch), config))


def position_from_apsides(body: CelestialBody, when, reference_epoch=J2000,
                          config: PresentationConfig = DEFAULT_PRESENTATION) -> Vec3:
    """
    Apsidal variant: a = (perihelion + aphelion) / 2 with the conic distance
    a(1 - e^2) / (1 + e cos(nu)) and no inclination amplification by default.

    Bodies without both apsides fall back to position_of_planet_like_body.
    """
    if body.is_root():
        return ORIGIN
    if body.perihelion is None or body.aphelion is None:
        return position_of_planet_like_body(body, when, reference_epoch, config)

    el = body.elements
    e = el.eccentricity or 0.0
    M = mean_anomaly(days_since(when, reference_epoch), el.orbital_period)
    E = solve_kepler(M, e, config.kepler_tolerance, config.kepler_max_iter)
    nu = M if e == 0.0 else true_anomaly(E, e)
    a = (el.perihelion + el.aphelion) / 2.0
    r = conic_radius(nu, a, e) * config.orbital_scale
    point = orbital_plane_to_scene(nu, r, el.inclination, el.longitude_of_ascending_node,
                                   config.apsidal_inclination_amplify)
    return to_vec3(point)


# ---------------------------------------------------------------------------
# Display sizes
# ---------------------------------------------------------------------------


def display_radius(body: CelestialBody, overrides: Optional[Mapping[str, float]] = None) -> float:
    """
    Presentation radius of a body, compressed per body class.

    Stars get a fixed size; planets and satellites are proportional to the
    Earth radius, scaled by their class base size and by the per-body
    multiplier from ``overrides`` (display_overrides.csv by default), then
    clipped to the class limits.
    """
    overrides = display_overrides if overrides is None else overrides
    size_ratio = body.radius / EARTH_RADIUS_KM
    multiplier = overrides.get(body.id, 1.0)

    if body.type == 'star':
        return STAR_DISPLAY_RADIUS
    if body.type == 'planet':
        lo, hi = PLANET_DISPLAY_LIMITS
        return float(np.clip(size_ratio * BASE_PLANET_SIZE * multiplier, lo, hi))
    if body.type == 'moon':
        lo, hi = MOON_DISPLAY_LIMITS
        return float(np.clip(size_ratio * BASE_MOON_SIZE * multiplier, lo, hi))
    return DEFAULT_DISPLAY_RADIUS
