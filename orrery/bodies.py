import csv
import logging
from datetime import date, datetime
from pathlib import Path
from typing import Dict, Iterable, List, Literal, Mapping, Optional

import pydantic
from pydantic import ConfigDict, Field, field_validator, model_validator

from orrery.constants import YEAR_DAYS
from orrery.orbital_elements import OrbitalElements, Vec3

logger = logging.getLogger(__name__)

DATA_DIR = Path(__file__).parent / 'data'

BodyType = Literal['star', 'planet', 'moon', 'asteroid', 'dwarf_planet']
OrbitClass = Literal['Near-Earth', 'Main Belt', 'Trojan', 'Centaur']


class CatalogError(ValueError):
    """Raised when the body catalog breaks the single-root parent hierarchy."""


class UnknownBodyError(KeyError):
    """Raised when a body or parent id is not present in the catalog."""


class CelestialBody(pydantic.BaseModel):
    """
    Represents a body of the solar-system constants table.

    Attributes:
        id: Unique identifier (e.g. "earth", "triton")
        name: Display name
        type: Classification (star, planet, moon, asteroid, dwarf_planet)
        radius: Physical radius (km)
        distance: Mean distance to the parent (AU around the star, km for moons)
        color: Display color as a hex string
        rotation_period: Sidereal rotation (days), negative for retrograde spin
        orbital_period: Sidereal revolution (days), negative for retrograde revolution
        parent: Id of the parent body, None for the fixed root
        inclination: Orbital inclination (deg)
        longitude_of_ascending_node: Longitude of the ascending node (deg)
        axial_tilt: Obliquity (deg)
        eccentricity: Orbital eccentricity, 0 <= e < 1
        perihelion: Closest distance to the parent, same unit as distance
        aphelion: Farthest distance to the parent, same unit as distance
        mass: Mass (kg)
        region: Catalog section the body was loaded from
    """
    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    type: BodyType
    radius: float = Field(..., ge=0.0)
    distance: float = Field(..., ge=0.0)
    color: str = '#FFFFFF'
    rotation_period: float = 0.0
    orbital_period: float = 0.0
    parent: Optional[str] = None
    inclination: Optional[float] = None
    longitude_of_ascending_node: Optional[float] = None
    axial_tilt: Optional[float] = None
    eccentricity: Optional[float] = None
    perihelion: Optional[float] = None
    aphelion: Optional[float] = None
    mass: Optional[float] = None
    region: str = 'solar_system'

    @field_validator('eccentricity')
    @classmethod
    def validate_eccentricity(cls, v):
        if v is not None and not 0.0 <= v < 1.0:
            raise ValueError(f"eccentricity must be in [0, 1) for a bound orbit, got {v}")
        return v

    @model_validator(mode='after')
    def validate_apsides(self):
        if self.perihelion is not None and self.aphelion is not None and self.perihelion > self.aphelion:
            raise ValueError(f"perihelion ({self.perihelion}) must not exceed aphelion ({self.aphelion})")
        return self

    @property
    def elements(self) -> OrbitalElements:
        """Orbital elements with missing angles defaulted to 0."""
        return OrbitalElements(
            distance=self.distance,
            eccentricity=self.eccentricity,
            inclination=self.inclination or 0.0,
            longitude_of_ascending_node=self.longitude_of_ascending_node or 0.0,
            orbital_period=self.orbital_period,
            perihelion=self.perihelion,
            aphelion=self.aphelion,
        )

    def is_root(self) -> bool:
        """Check if this body is fixed at the origin (no parent or no revolution)"""
        return self.parent is None or self.orbital_period == 0.0

    def is_retrograde(self) -> bool:
        """Check if this body revolves backward around its parent"""
        return self.elements.is_retrograde

    def __repr__(self) -> str:
        return f"CelestialBody(id='{self.id}', type='{self.type}', parent={self.parent!r})"

    def __str__(self) -> str:
        return f"{self.name} ({self.id})"


class Asteroid(pydantic.BaseModel):
    """
    A followed asteroid, described by its apsidal distances.

    Unlike CelestialBody the period is in years and there is no stored
    eccentricity; both semi-major axis and eccentricity are derived from
    perihelion and aphelion.
    """
    model_config = ConfigDict(validate_assignment=True)

    id: str
    name: str
    discovery_date: date
    diameter: float = Field(..., gt=0.0, description="Diameter (km)")
    orbit_class: OrbitClass
    orbital_period: float = Field(..., gt=0.0, description="Orbital period (years)")
    perihelion: float = Field(..., gt=0.0, description="Perihelion (AU)")
    aphelion: float = Field(..., gt=0.0, description="Aphelion (AU)")
    inclination: float = Field(0.0, description="Inclination (deg)")
    description: str = ''
    trajectory: List[Vec3] = Field(default_factory=list)
    is_active: bool = False

    @model_validator(mode='after')
    def validate_apsides(self):
        if self.perihelion > self.aphelion:
            raise ValueError(f"perihelion ({self.perihelion}) must not exceed aphelion ({self.aphelion})")
        return self

    @property
    def semi_major_axis(self) -> float:
        return (self.perihelion + self.aphelion) / 2.0

    @property
    def eccentricity(self) -> float:
        return (self.aphelion - self.perihelion) / (self.aphelion + self.perihelion)

    @property
    def period_days(self) -> float:
        return self.orbital_period * YEAR_DAYS

    def refresh_trajectory(self, center_date: datetime, sample_count: int = 200) -> List[Vec3]:
        """
        Regenerate the cached trajectory around ``center_date`` and return it.

        Examples:
            >>> apophis = load_famous_asteroids()['apophis']
            >>> points = apophis.refresh_trajectory(datetime(2029, 4, 13))
            >>> len(points)
            200
        """
        from orrery.trajectory import generate_trajectory

        points = generate_trajectory(self, center_date, sample_count)
        self.trajectory = [tuple(float(c) for c in p) for p in points]
        return self.trajectory

    def __repr__(self) -> str:
        return f"Asteroid(id='{self.id}', class='{self.orbit_class}')"


def _optional_float(row: Mapping[str, str], key: str) -> Optional[float]:
    value = (row.get(key) or '').strip()
    return float(value) if value else None


def optional_str(row: Mapping[str, str], key: str) -> Optional[str]:
    """Stripped cell value, None when the cell is empty or missing."""
    value = (row.get(key) or '').strip()
    return value or None


def _body_from_row(row: Mapping[str, str], region: str) -> CelestialBody:
    return CelestialBody(
        id=row['id'].strip(),
        name=row['name'].strip(),
        type=row['type'].strip(),
        radius=float(row['radius_km']),
        distance=float(row['distance']),
        color=row.get('color') or '#FFFFFF',
        rotation_period=_optional_float(row, 'rotation_period_days') or 0.0,
        orbital_period=_optional_float(row, 'orbital_period_days') or 0.0,
        parent=optional_str(row, 'parent'),
        inclination=_optional_float(row, 'inclination_deg'),
        longitude_of_ascending_node=_optional_float(row, 'longitude_of_ascending_node_deg'),
        axial_tilt=_optional_float(row, 'axial_tilt_deg'),
        eccentricity=_optional_float(row, 'eccentricity'),
        perihelion=_optional_float(row, 'perihelion'),
        aphelion=_optional_float(row, 'aphelion'),
        mass=_optional_float(row, 'mass_kg'),
        region=region,
    )


def read_rows(filepath: Path) -> Iterable[Dict[str, str]]:
    """Yield the rows of a bundled CSV table as dicts keyed by header."""
    with open(filepath, 'r', encoding='utf-8', newline='') as f:
        yield from csv.DictReader(f)


def validate_catalog(bodies: Mapping[str, CelestialBody]) -> None:
    """
    Check that the catalog forms a single hierarchy rooted at one fixed body.

    Raises:
        CatalogError: if there is not exactly one root with period 0, if a
            parent id does not resolve, or if a chain of parents loops.
    """
    roots = [body.id for body in bodies.values() if body.parent is None]
    if len(roots) != 1:
        raise CatalogError(f"Catalog must have exactly one root body, found {len(roots)}: {roots}")
    root = bodies[roots[0]]
    if root.orbital_period != 0.0:
        raise CatalogError(f"Root body '{root.id}' must have orbital period 0, got {root.orbital_period}")

    for body in bodies.values():
        seen = {body.id}
        current = body
        while current.parent is not None:
            if current.parent not in bodies:
                raise CatalogError(f"Body '{current.id}' references unknown parent '{current.parent}'")
            current = bodies[current.parent]
            if current.id in seen:
                raise CatalogError(f"Parent cycle detected through '{current.id}'")
            seen.add(current.id)


def load_bodies_data(data_dir: Optional[Path] = None) -> Dict[str, CelestialBody]:
    """
    Load the constants table (star, planets, moons, belts, dwarf planets) from CSV files.

    Returns:
        Dictionary mapping body id to CelestialBody, in table order
    """
    data_dir = Path(data_dir) if data_dir is not None else DATA_DIR
    bodies: Dict[str, CelestialBody] = {}

    # Each catalog section, in display order
    body_configs = [
        {'filename': 'solar_system.csv', 'region': 'solar_system', 'required': True},
        {'filename': 'asteroid_belt.csv', 'region': 'asteroid_belt', 'required': False},
        {'filename': 'kuiper_belt.csv', 'region': 'kuiper_belt', 'required': False},
        {'filename': 'dwarf_planets.csv', 'region': 'dwarf_planets', 'required': False},
    ]

    for config in body_configs:
        filepath = data_dir / config['filename']

        if not filepath.exists():
            if config['required']:
                raise FileNotFoundError(f"Missing catalog file: {filepath}")
            continue

        count = 0
        for line_no, row in enumerate(read_rows(filepath), start=2):
            try:
                body = _body_from_row(row, config['region'])
            except (pydantic.ValidationError, ValueError, KeyError):
                logger.warning("Rejected row %d of %s", line_no, filepath.name)
                raise
            if body.id in bodies:
                raise CatalogError(f"Duplicate body id '{body.id}' in {filepath.name}")
            bodies[body.id] = body
            count += 1
        logger.debug("Loaded %d bodies from %s", count, filepath.name)

    validate_catalog(bodies)
    return bodies


def load_famous_asteroids(data_dir: Optional[Path] = None) -> Dict[str, Asteroid]:
    """Load the followed-asteroid catalog. Each call returns fresh, mutable records."""
    data_dir = Path(data_dir) if data_dir is not None else DATA_DIR
    asteroids: Dict[str, Asteroid] = {}
    for row in read_rows(data_dir / 'famous_asteroids.csv'):
        asteroid = Asteroid(
            id=row['id'],
            name=row['name'],
            discovery_date=date.fromisoformat(row['discovery_date']),
            diameter=float(row['diameter_km']),
            orbit_class=row['orbit_class'],
            orbital_period=float(row['orbital_period_years']),
            perihelion=float(row['perihelion_au']),
            aphelion=float(row['aphelion_au']),
            inclination=float(row['inclination_deg']),
            description=row.get('description', ''),
        )
        asteroids[asteroid.id] = asteroid
    logger.debug("Loaded %d famous asteroids", len(asteroids))
    return asteroids


def load_display_overrides(data_dir: Optional[Path] = None) -> Dict[str, float]:
    """Load per-body display size multipliers keyed by body id."""
    data_dir = Path(data_dir) if data_dir is not None else DATA_DIR
    overrides = {row['id'].strip(): float(row['size_multiplier']) for row in read_rows(data_dir / 'display_overrides.csv')}
    for body_id, multiplier in overrides.items():
        if multiplier <= 0.0:
            raise ValueError(f"Display multiplier for '{body_id}' must be positive, got {multiplier}")
    return overrides


# ---------------------------------------------------------------------------
# Catalog queries
# ---------------------------------------------------------------------------


def get_body(body_id: str, catalog: Optional[Mapping[str, CelestialBody]] = None) -> CelestialBody:
    catalog = bodies_data if catalog is None else catalog
    try:
        return catalog[body_id]
    except KeyError:
        raise UnknownBodyError(body_id) from None


def root_body(catalog: Optional[Mapping[str, CelestialBody]] = None) -> CelestialBody:
    catalog = bodies_data if catalog is None else catalog
    for body in catalog.values():
        if body.parent is None:
            return body
    raise CatalogError("Catalog has no root body")


def planets_ordered(catalog: Optional[Mapping[str, CelestialBody]] = None) -> List[CelestialBody]:
    """Planets orbiting the root, innermost first."""
    catalog = bodies_data if catalog is None else catalog
    root = root_body(catalog)
    planets = [b for b in catalog.values() if b.type == 'planet' and b.parent == root.id]
    return sorted(planets, key=lambda b: b.distance)


def moons_of(parent_id: str, catalog: Optional[Mapping[str, CelestialBody]] = None) -> List[CelestialBody]:
    """Satellites of ``parent_id`` sorted by distance to the parent."""
    catalog = bodies_data if catalog is None else catalog
    get_body(parent_id, catalog)
    moons = [b for b in catalog.values() if b.type == 'moon' and b.parent == parent_id]
    return sorted(moons, key=lambda b: b.distance)


def bodies_in_region(region: str, catalog: Optional[Mapping[str, CelestialBody]] = None) -> List[CelestialBody]:
    catalog = bodies_data if catalog is None else catalog
    return [b for b in catalog.values() if b.region == region]


def dwarf_planets(catalog: Optional[Mapping[str, CelestialBody]] = None) -> List[CelestialBody]:
    catalog = bodies_data if catalog is None else catalog
    return [b for b in catalog.values() if b.type == 'dwarf_planet']


bodies_data = load_bodies_data()
display_overrides = load_display_overrides()
