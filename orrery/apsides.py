"""
Apsidal analysis: distance spread between perihelion and aphelion.

Purely descriptive statistics over the constants table. Nothing here
positions a body or checks for encounters.
"""
import math
from typing import Dict, Iterable, List, NamedTuple, Optional

import pydantic
from pydantic import ConfigDict

from orrery.bodies import CelestialBody
from orrery.constants import NEPTUNE_SEMI_MAJOR_AXIS_AU


class OrbitalVariation(NamedTuple):
    """Distance extremes of an orbit (same unit as the body's distance)."""
    min_distance: float
    max_distance: float
    variation_percent: float


class ApsidalEntry(pydantic.BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    type: str
    perihelion: float
    aphelion: float
    eccentricity: Optional[float] = None
    variation_percent: float
    is_transneptunian: bool = False
    can_cross_inside_neptune: bool = False


class ApsidalExtremes(pydantic.BaseModel):
    """Ids of the extremal transneptunian objects, None when there are none."""
    model_config = ConfigDict(frozen=True)

    most_eccentric: Optional[str] = None
    farthest_aphelion: Optional[str] = None
    closest_perihelion: Optional[str] = None


class ApsidalReport(pydantic.BaseModel):
    model_config = ConfigDict(frozen=True)

    entries: List[ApsidalEntry]
    extremes: ApsidalExtremes
    transneptunian_flags: Dict[str, bool]

    def entry(self, body_id: str) -> ApsidalEntry:
        for entry in self.entries:
            if entry.id == body_id:
                return entry
        raise KeyError(body_id)


def orbital_variation(body: CelestialBody) -> OrbitalVariation:
    """
    Minimum and maximum distance of ``body`` and their spread relative to perihelion.

    A missing apsis falls back to the mean distance, so a body without
    apsides reports a 0 % variation.

    Examples:
        >>> from orrery.bodies import get_body
        >>> round(orbital_variation(get_body('pluto')).variation_percent, 1)
        66.0
    """
    perihelion = body.perihelion if body.perihelion else body.distance
    aphelion = body.aphelion if body.aphelion else body.distance
    if perihelion <= 0.0:
        raise ValueError(f"'{body.id}' has no positive perihelion or distance")
    return OrbitalVariation(perihelion, aphelion, (aphelion - perihelion) / perihelion * 100.0)


def is_transneptunian(body: CelestialBody, neptune_distance: float = NEPTUNE_SEMI_MAJOR_AXIS_AU) -> bool:
    """Dwarf planet whose mean distance lies beyond Neptune's orbit."""
    return body.type == 'dwarf_planet' and body.distance > neptune_distance


def can_cross_inside_neptune(body: CelestialBody, neptune_distance: float = NEPTUNE_SEMI_MAJOR_AXIS_AU) -> bool:
    """True for a transneptunian object whose perihelion is inside Neptune's orbit."""
    if not is_transneptunian(body, neptune_distance) or body.perihelion is None:
        return False
    return body.perihelion < neptune_distance


def apsidal_analysis(bodies: Iterable[CelestialBody],
                     neptune_distance: float = NEPTUNE_SEMI_MAJOR_AXIS_AU) -> ApsidalReport:
    """
    Per-body variation, transneptunian flags and extremal transneptunian objects.

    Entries cover the bodies with both perihelion and aphelion. Flags cover
    every transneptunian object; one without a perihelion is flagged False.
    Extremes are scanned over the transneptunian objects only, in input order
    with a strict comparison, so the first body encountered wins a tie. A
    missing eccentricity or aphelion counts as 0 and a missing perihelion as
    infinitely far.

    Args:
        bodies: bodies to analyze, e.g. ``bodies_data.values()``
        neptune_distance: reference distance of Neptune (AU)

    Returns:
        ApsidalReport
    """
    entries: List[ApsidalEntry] = []
    flags: Dict[str, bool] = {}
    most_eccentric = farthest = closest = None

    for body in bodies:
        transneptunian = is_transneptunian(body, neptune_distance)
        crosses = can_cross_inside_neptune(body, neptune_distance)

        if body.perihelion is not None and body.aphelion is not None:
            entries.append(ApsidalEntry(
                id=body.id,
                name=body.name,
                type=body.type,
                perihelion=body.perihelion,
                aphelion=body.aphelion,
                eccentricity=body.eccentricity,
                variation_percent=orbital_variation(body).variation_percent,
                is_transneptunian=transneptunian,
                can_cross_inside_neptune=crosses,
            ))

        if not transneptunian:
            continue
        flags[body.id] = crosses

        if most_eccentric is None or (body.eccentricity or 0.0) > (most_eccentric.eccentricity or 0.0):
            most_eccentric = body
        if farthest is None or (body.aphelion or 0.0) > (farthest.aphelion or 0.0):
            farthest = body
        if closest is None or _perihelion_or_inf(body) < _perihelion_or_inf(closest):
            closest = body

    extremes = ApsidalExtremes(
        most_eccentric=most_eccentric.id if most_eccentric else None,
        farthest_aphelion=farthest.id if farthest else None,
        closest_perihelion=closest.id if closest else None,
    )
    return ApsidalReport(entries=entries, extremes=extremes, transneptunian_flags=flags)


def _perihelion_or_inf(body: CelestialBody) -> float:
    return body.perihelion if body.perihelion is not None else math.inf
