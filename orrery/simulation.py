"""
Simulation state and the per-frame update.

SimulationState is an immutable snapshot. Every change (user toggles, the
advancing clock) produces a new state, and every frame computes positions from
one snapshot with the pure position functions.
"""
import logging
from datetime import datetime, timedelta, timezone
from typing import Dict, Mapping, Optional

import pydantic
from pydantic import ConfigDict, Field, field_validator

from orrery.bodies import Asteroid, CelestialBody, bodies_data
from orrery.config import DEFAULT_PRESENTATION, PresentationConfig
from orrery.meteorites import Meteorite, position_of_meteorite
from orrery.orbital_elements import Vec3
from orrery.positions import as_utc, position_of_asteroid, position_of_body

logger = logging.getLogger(__name__)

DEFAULT_TIME_SCALE = 1.0  # simulated days per real second
DEFAULT_SUN_INTENSITY = 4.0
MAX_SUN_INTENSITY = 10.0


def _default_show_moons() -> Dict[str, bool]:
    return {'earth': True, 'jupiter': True, 'saturn': True, 'uranus': True, 'neptune': True}


class SimulationState(pydantic.BaseModel):
    """
    Snapshot of the simulation controls.

    Attributes:
        current_date: Simulated date (aware, UTC)
        time_scale: Simulated days advanced per real second (negative runs backward)
        is_playing: Whether the clock advances
        selected_asteroid_id: Followed asteroid, if any
        selected_meteorite_id: Selected meteorite, if any
        show_*: Visibility toggles
        show_moons: Satellite visibility keyed by parent id (unlisted parents are shown)
        sun_intensity: Light intensity of the star, 0 to 10
    """
    model_config = ConfigDict(frozen=True, extra='forbid')

    current_date: datetime
    time_scale: float = DEFAULT_TIME_SCALE
    is_playing: bool = False
    selected_asteroid_id: Optional[str] = None
    selected_meteorite_id: Optional[str] = None
    show_orbits: bool = True
    show_asteroid_path: bool = False
    show_planet_names: bool = True
    show_meteorites: bool = True
    show_meteorite_trails: bool = True
    show_galaxies: bool = True
    show_asteroid_belt: bool = True
    show_kuiper_belt: bool = True
    show_belt_density: bool = True
    show_moons: Dict[str, bool] = Field(default_factory=_default_show_moons)
    sun_intensity: float = Field(DEFAULT_SUN_INTENSITY, ge=0.0, le=MAX_SUN_INTENSITY)

    @field_validator('current_date')
    @classmethod
    def validate_current_date(cls, v):
        return as_utc(v)

    def moons_visible(self, parent_id: str) -> bool:
        return self.show_moons.get(parent_id, True)


class FrameSnapshot(pydantic.BaseModel):
    """Scene positions computed for one frame."""
    model_config = ConfigDict(frozen=True)

    date: datetime
    bodies: Dict[str, Vec3]
    asteroid: Optional[Vec3] = None
    meteorites: Dict[str, Vec3] = Field(default_factory=dict)


def initial_state(now: Optional[datetime] = None) -> SimulationState:
    """Startup state: paused at ``now`` (the current time by default) with all defaults."""
    return SimulationState(current_date=now if now is not None else datetime.now(timezone.utc))


def update_simulation(state: SimulationState, **changes) -> SimulationState:
    """
    Merge ``changes`` into ``state`` and return the validated new state.

    Raises:
        pydantic.ValidationError: on unknown fields or invalid values
    """
    merged = state.model_dump()
    merged.update(changes)
    return SimulationState.model_validate(merged)


def advance_simulation(state: SimulationState, elapsed_seconds: float) -> SimulationState:
    """
    Advance the simulated date by ``time_scale * elapsed_seconds`` days.

    A paused state is returned unchanged.
    """
    if elapsed_seconds < 0.0:
        raise ValueError(f"elapsed_seconds must be non-negative, got {elapsed_seconds}")
    if not state.is_playing or elapsed_seconds == 0.0:
        return state
    delta = timedelta(days=state.time_scale * elapsed_seconds)
    return state.model_copy(update={'current_date': state.current_date + delta})


def frame_positions(state: SimulationState,
                    catalog: Optional[Mapping[str, CelestialBody]] = None,
                    asteroids: Optional[Mapping[str, Asteroid]] = None,
                    meteorites: Optional[Mapping[str, Meteorite]] = None,
                    config: PresentationConfig = DEFAULT_PRESENTATION) -> FrameSnapshot:
    """
    Positions of everything visible in ``state`` at its current date.

    Satellites of a parent hidden in ``state.show_moons`` are omitted, as are
    inactive meteorites and all meteorites when they are hidden. The followed
    asteroid is placed only when one is selected.
    """
    catalog = bodies_data if catalog is None else catalog
    when = state.current_date

    bodies: Dict[str, Vec3] = {}
    for body in catalog.values():
        if body.type == 'moon' and body.parent is not None and not state.moons_visible(body.parent):
            continue
        bodies[body.id] = position_of_body(body, when, catalog, config=config)

    asteroid = None
    if state.selected_asteroid_id is not None and asteroids is not None:
        selected = asteroids.get(state.selected_asteroid_id)
        if selected is not None:
            asteroid = position_of_asteroid(selected, when, config=config)

    meteorite_positions: Dict[str, Vec3] = {}
    if state.show_meteorites and meteorites is not None:
        for meteorite in meteorites.values():
            if meteorite.is_active:
                meteorite_positions[meteorite.id] = position_of_meteorite(meteorite, when, config)

    return FrameSnapshot(date=when, bodies=bodies, asteroid=asteroid, meteorites=meteorite_positions)


class SimulationClock:
    """
    Owns the current SimulationState between frames.

    The clock is driven by frame deltas: each tick advances the simulated date
    by the real time elapsed since the previous frame, then returns the frame
    snapshot.
    """

    def __init__(self, state: Optional[SimulationState] = None,
                 catalog: Optional[Mapping[str, CelestialBody]] = None,
                 asteroids: Optional[Mapping[str, Asteroid]] = None,
                 meteorites: Optional[Mapping[str, Meteorite]] = None,
                 config: PresentationConfig = DEFAULT_PRESENTATION):
        self.state = state if state is not None else initial_state()
        self.catalog = catalog
        self.asteroids = asteroids
        self.meteorites = meteorites
        self.config = config

    def update(self, **changes) -> SimulationState:
        self.state = update_simulation(self.state, **changes)
        return self.state

    def play(self) -> SimulationState:
        logger.info("Simulation playing at %s days/s", self.state.time_scale)
        return self.update(is_playing=True)

    def pause(self) -> SimulationState:
        logger.info("Simulation paused at %s", self.state.current_date.isoformat())
        return self.update(is_playing=False)

    def toggle(self) -> SimulationState:
        return self.pause() if self.state.is_playing else self.play()

    def tick(self, elapsed_seconds: float) -> FrameSnapshot:
        self.state = advance_simulation(self.state, elapsed_seconds)
        logger.debug("Tick %.4f s -> %s", elapsed_seconds, self.state.current_date.isoformat())
        return frame_positions(self.state, self.catalog, self.asteroids, self.meteorites, self.config)
