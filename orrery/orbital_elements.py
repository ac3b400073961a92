"""
Orbital elements representation for catalog bodies.
"""
from typing import NamedTuple, Optional, Tuple

Vec3 = Tuple[float, float, float]


class OrbitalElements(NamedTuple):
    """
    Simplified Keplerian elements of a catalog body around its parent.

    Unlike textbook element sets, angles are stored in degrees and the orbit is
    anchored to the reference epoch (mean anomaly 0 at J2000), which is all the
    two-body display model needs.

    Attributes:
        distance: Mean distance / semi-major axis (AU for bodies orbiting the star, km for moons)
        eccentricity: Eccentricity (0 <= e < 1), None when the table leaves it out
        inclination: Inclination relative to the reference plane (deg)
        longitude_of_ascending_node: Longitude of the ascending node (deg)
        orbital_period: Sidereal period (days), negative for retrograde revolution
        perihelion: Closest distance to the parent, same unit as distance
        aphelion: Farthest distance to the parent, same unit as distance

    Note:
        - A missing inclination or node is treated as 0 by the position functions
        - orbital_period == 0 marks the fixed root of the catalog
    """
    distance: float  # mean distance (AU or km)
    eccentricity: Optional[float]  # eccentricity
    inclination: float  # inclination (deg)
    longitude_of_ascending_node: float  # longitude of ascending node (deg)
    orbital_period: float  # period (days)
    perihelion: Optional[float]  # periapsis distance
    aphelion: Optional[float]  # apoapsis distance

    @property
    def is_retrograde(self) -> bool:
        return self.orbital_period < 0.0
