"""
Meteorites: kinematic records moving in a straight line at constant velocity.

Unlike catalog bodies there is no orbit here. A meteorite sits at its entry
position on its discovery date and drifts by ``velocity * elapsed_time``
afterwards (and before).
"""
import logging
from datetime import date, datetime
from pathlib import Path
from typing import Dict, Literal, Optional

import numpy as np
import pydantic
from pydantic import ConfigDict, Field, field_validator

from orrery.bodies import DATA_DIR, optional_str, read_rows
from orrery.config import (
    DEFAULT_PRESENTATION,
    METEORITE_DIAMETER_SCALE,
    METEORITE_DISPLAY_LIMITS,
    PresentationConfig,
)
from orrery.constants import AU_KM, DAY_SECONDS
from orrery.orbital_elements import Vec3
from orrery.positions import as_utc, days_since, to_vec3

logger = logging.getLogger(__name__)

MeteoriteKind = Literal['asteroid', 'comet', 'debris', 'artificial']

KIND_COLORS = {
    'asteroid': '#FF6B35',
    'comet': '#4ECDC4',
    'debris': '#F39C12',
}

# km/s -> AU/day
KM_S_TO_AU_DAY = DAY_SECONDS / AU_KM


class Meteorite(pydantic.BaseModel):
    """
    A meteorite or impactor.

    Attributes:
        id: Unique identifier
        name: Display name
        kind: asteroid, comet, debris or artificial
        mass: Mass (kg)
        diameter: Diameter (km)
        velocity: Constant velocity (km/s)
        position: Entry position at the discovery date (AU)
        direction: Unit vector of the approach direction
        color: Display color as a hex string
        is_active: Whether the meteorite is shown in the scene
        discovery_date: Date the position refers to; None means "now"
        impact_date: Free-form impact date (may be a geological age such as "-66000000")
        impact_location: Free-form impact location
        description: Free text
    """
    model_config = ConfigDict(validate_assignment=True)

    id: str
    name: str
    kind: MeteoriteKind
    mass: float = Field(..., gt=0.0)
    diameter: float = Field(..., gt=0.0)
    velocity: Vec3
    position: Vec3
    direction: Vec3 = (0.0, 0.0, 0.0)
    color: str = '#FFFFFF'
    is_active: bool = True
    discovery_date: Optional[date] = None
    impact_date: Optional[str] = None
    impact_location: Optional[str] = None
    description: str = ''

    @field_validator('discovery_date', mode='before')
    @classmethod
    def validate_discovery_date(cls, v):
        if isinstance(v, datetime):
            return v.date()
        return v

    @property
    def speed(self) -> float:
        """Speed in km/s."""
        return float(np.linalg.norm(self.velocity))

    def __repr__(self) -> str:
        return f"Meteorite(id='{self.id}', kind='{self.kind}')"


def meteorite_points(meteorite: Meteorite, elapsed_days, config: PresentationConfig = DEFAULT_PRESENTATION):
    """Scene points after ``elapsed_days`` (scalar or array) of straight-line motion."""
    elapsed = np.asarray(elapsed_days, dtype=float)[..., np.newaxis]
    start = np.asarray(meteorite.position, dtype=float)
    velocity = np.asarray(meteorite.velocity, dtype=float) * KM_S_TO_AU_DAY
    return (start + velocity * elapsed) * config.meteorite_scene_scale


def position_of_meteorite(meteorite: Meteorite, when, config: PresentationConfig = DEFAULT_PRESENTATION) -> Vec3:
    """
    Scene position of a meteorite at ``when`` by linear extrapolation.

    The elapsed time is counted from the discovery date. A meteorite without
    one is taken to be at its entry position at ``when``.
    """
    reference = meteorite.discovery_date if meteorite.discovery_date is not None else when
    return to_vec3(meteorite_points(meteorite, days_since(when, reference), config))


def meteorite_display_radius(meteorite: Meteorite) -> float:
    lo, hi = METEORITE_DISPLAY_LIMITS
    return float(np.clip(meteorite.diameter * METEORITE_DIAMETER_SCALE, lo, hi))


def _vec3_from_row(row, keys) -> Vec3:
    return tuple(float(row[k]) for k in keys)


def load_famous_meteorites(data_dir: Optional[Path] = None) -> Dict[str, Meteorite]:
    """Load the famous-impactor catalog. Each call returns fresh, mutable records."""
    data_dir = Path(data_dir) if data_dir is not None else DATA_DIR
    meteorites: Dict[str, Meteorite] = {}
    for row in read_rows(data_dir / 'famous_meteorites.csv'):
        discovery = optional_str(row, 'discovery_date')
        meteorite = Meteorite(
            id=row['id'],
            name=row['name'],
            kind=row['kind'],
            mass=float(row['mass_kg']),
            diameter=float(row['diameter_km']),
            velocity=_vec3_from_row(row, ('vx_km_s', 'vy_km_s', 'vz_km_s')),
            position=_vec3_from_row(row, ('x_au', 'y_au', 'z_au')),
            direction=_vec3_from_row(row, ('dx', 'dy', 'dz')),
            color=row.get('color') or '#FFFFFF',
            discovery_date=date.fromisoformat(discovery) if discovery else None,
            impact_date=optional_str(row, 'impact_date'),
            impact_location=optional_str(row, 'impact_location'),
            description=row.get('description', ''),
        )
        meteorites[meteorite.id] = meteorite
    logger.debug("Loaded %d famous meteorites", len(meteorites))
    return meteorites


def random_meteorite(rng: Optional[np.random.Generator] = None, now: Optional[datetime] = None) -> Meteorite:
    """
    Generate a plausible random meteorite entering the inner solar system.

    Mass is log-uniform between 10 kg and 1e11 kg and the diameter follows from
    a fixed bulk density. Speeds span 11 to 72 km/s with a bias toward steep
    vertical components. The entry point lies 1.5 to 3 AU from the origin and
    the direction points at a slightly jittered origin.

    Args:
        rng: numpy Generator, a fresh default_rng() when None
        now: creation time, used for the id and the discovery date

    Returns:
        A new active Meteorite
    """
    rng = np.random.default_rng() if rng is None else rng
    now = as_utc(now if now is not None else datetime.now())

    kind = ('asteroid', 'comet', 'debris')[int(rng.integers(3))]
    mass = 10.0 ** rng.uniform(1.0, 11.0)
    diameter = (mass / 2000.0) ** (1.0 / 3.0) / 1000.0

    speed = rng.uniform(11.0, 72.0)
    azimuth = rng.uniform(0.0, 2.0 * np.pi)
    elevation = (rng.uniform() - 0.5) * np.pi * 1.5
    velocity = (
        speed * np.cos(elevation) * np.cos(azimuth),
        speed * np.sin(elevation) * rng.uniform(0.5, 1.0),
        speed * np.cos(elevation) * np.sin(azimuth),
    )

    entry_angle = rng.uniform(0.0, 2.0 * np.pi)
    entry_distance = rng.uniform(1.5, 3.0)
    entry_height = rng.uniform(-1.0, 1.0)
    position = np.array([
        entry_distance * np.cos(entry_angle),
        entry_height,
        entry_distance * np.sin(entry_angle),
    ])

    target = rng.uniform(-0.15, 0.15, size=3)
    direction = target - position
    direction /= np.linalg.norm(direction)

    meteorite = Meteorite(
        id=f"random-{int(now.timestamp() * 1000)}",
        name=f"Meteorite {kind} #{int(rng.integers(1000))}",
        kind=kind,
        mass=mass,
        diameter=diameter,
        velocity=to_vec3(velocity),
        position=to_vec3(position),
        direction=to_vec3(direction),
        color=KIND_COLORS[kind],
        discovery_date=now.date(),
        description=f"Randomly generated {kind} meteorite with a mass of {mass:.2e} kg.",
    )
    logger.info("Generated %s (%.1f km/s, %.2e kg)", meteorite.id, speed, mass)
    return meteorite
