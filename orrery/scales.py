"""
Camera-distance scale regimes and distance unit conversions for the scene.
"""
from typing import NamedTuple, Tuple

import pydantic
from pydantic import ConfigDict

from orrery.config import DEFAULT_PRESENTATION, PresentationConfig
from orrery.constants import AU_KM, AU_PER_LIGHT_YEAR, PROXIMA_DISTANCE_LY


class ScaleRegime(NamedTuple):
    key: str
    label: str
    description: str
    upper_bound: float  # camera distance (scene units), exclusive


# Ordered by increasing camera distance
SCALE_REGIMES: Tuple[ScaleRegime, ...] = (
    ScaleRegime('inner_system', 'Inner Solar System', 'Rocky planets', 1e2),
    ScaleRegime('outer_system', 'Outer Solar System', 'Gas giants and their moons', 1e3),
    ScaleRegime('kuiper_belt', 'Kuiper Belt', 'Transneptunian objects', 1e5),
    ScaleRegime('oort_cloud', 'Oort Cloud', "Edge of the Sun's gravitational reach", 1e6),
    ScaleRegime('interstellar', 'Interstellar Space', 'Nearby stars', 1e7),
    ScaleRegime('galactic_neighbourhood', 'Galactic Neighbourhood', 'Spiral structure of the Milky Way', 1e8),
    ScaleRegime('galactic', 'Galactic Scale', 'The Milky Way and neighbouring galaxies', float('inf')),
)

PROXIMA_SHOW_THRESHOLD_LY = 0.1
PROXIMA_VISIBLE_FRACTION = 0.8


class DistanceReport(pydantic.BaseModel):
    model_config = ConfigDict(frozen=True)

    regime: str
    label: str
    description: str
    distance_au: float
    distance_km: float
    distance_ly: float
    show_proxima: bool
    proxima_percent: float
    proxima_visible: bool


def scale_regime(camera_distance: float) -> ScaleRegime:
    """Regime for a camera distance in scene units."""
    if camera_distance < 0.0:
        raise ValueError(f"camera_distance must be non-negative, got {camera_distance}")
    for regime in SCALE_REGIMES:
        if camera_distance < regime.upper_bound:
            return regime
    return SCALE_REGIMES[-1]


def scene_to_au(distance: float, config: PresentationConfig = DEFAULT_PRESENTATION) -> float:
    return distance / config.orbital_scale


def au_to_light_years(distance_au: float) -> float:
    return distance_au / AU_PER_LIGHT_YEAR


def distance_report(camera_distance: float, config: PresentationConfig = DEFAULT_PRESENTATION) -> DistanceReport:
    """
    Describe a camera distance: its regime, the distance in AU, km and light
    years, and the progress toward Proxima Centauri.

    Progress is reported once the camera is more than 0.1 ly out, capped at
    100 %, and Proxima counts as visible from 80 % of its distance.
    """
    regime = scale_regime(camera_distance)
    distance_au = scene_to_au(camera_distance, config)
    distance_ly = au_to_light_years(distance_au)

    show = distance_ly > PROXIMA_SHOW_THRESHOLD_LY
    percent = min(distance_ly / PROXIMA_DISTANCE_LY * 100.0, 100.0) if show else 0.0
    visible = show and distance_ly >= PROXIMA_DISTANCE_LY * PROXIMA_VISIBLE_FRACTION

    return DistanceReport(
        regime=regime.key,
        label=regime.label,
        description=regime.description,
        distance_au=distance_au,
        distance_km=distance_au * AU_KM,
        distance_ly=distance_ly,
        show_proxima=show,
        proxima_percent=percent,
        proxima_visible=visible,
    )
