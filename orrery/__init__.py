# Configure JAX to use double precision (64-bit floats) throughout the package
import jax
jax.config.update("jax_enable_x64", True)

from .orbital_elements import OrbitalElements, Vec3

from .constants import (
    # Constants
    AU_KM,
    DAY_SECONDS,
    YEAR_DAYS,
    AU_PER_LIGHT_YEAR,
    EARTH_RADIUS_KM,
    J2000,
    NEPTUNE_SEMI_MAJOR_AXIS_AU,
    PROXIMA_DISTANCE_LY,
)

from .config import (
    PresentationConfig,
    DEFAULT_PRESENTATION,
    make_presentation_config,
)

from .astrodynamics import (
    # Functions
    solve_kepler,
    solve_kepler_vec,
    true_anomaly,
    orbital_plane_to_scene,
    conic_radius,
)

from .bodies import (
    # Body models
    CelestialBody,
    Asteroid,
    CatalogError,
    UnknownBodyError,
    load_bodies_data,
    load_famous_asteroids,
    load_display_overrides,
    validate_catalog,
    get_body,
    root_body,
    planets_ordered,
    moons_of,
    bodies_in_region,
    dwarf_planets,
    bodies_data,
)

from .positions import (
    # Position functions
    OrbitError,
    days_since,
    mean_anomaly,
    asteroid_node_longitude,
    position_of_planet_like_body,
    position_of_moon,
    position_of_body,
    position_of_asteroid,
    position_from_apsides,
    display_radius,
)

from .meteorites import (
    Meteorite,
    position_of_meteorite,
    load_famous_meteorites,
    random_meteorite,
    meteorite_display_radius,
)

from .trajectory import (
    generate_trajectory,
    orbit_outline,
    meteorite_trajectory,
)

from .apsides import (
    OrbitalVariation,
    ApsidalReport,
    orbital_variation,
    is_transneptunian,
    can_cross_inside_neptune,
    apsidal_analysis,
)

from .simulation import (
    SimulationState,
    FrameSnapshot,
    SimulationClock,
    initial_state,
    update_simulation,
    advance_simulation,
    frame_positions,
)

from .scales import (
    DistanceReport,
    scale_regime,
    distance_report,
)

__all__ = [
    # Constants
    "AU_KM",
    "DAY_SECONDS",
    "YEAR_DAYS",
    "AU_PER_LIGHT_YEAR",
    "EARTH_RADIUS_KM",
    "J2000",
    "NEPTUNE_SEMI_MAJOR_AXIS_AU",
    "PROXIMA_DISTANCE_LY",

    # Named tuples
    "OrbitalElements",
    "Vec3",

    # Configuration
    "PresentationConfig",
    "DEFAULT_PRESENTATION",
    "make_presentation_config",

    # Kepler math
    "solve_kepler",
    "solve_kepler_vec",
    "true_anomaly",
    "orbital_plane_to_scene",
    "conic_radius",

    # Bodies
    "CelestialBody",
    "Asteroid",
    "CatalogError",
    "UnknownBodyError",
    "load_bodies_data",
    "load_famous_asteroids",
    "load_display_overrides",
    "validate_catalog",
    "get_body",
    "root_body",
    "planets_ordered",
    "moons_of",
    "bodies_in_region",
    "dwarf_planets",
    "bodies_data",

    # Positions
    "OrbitError",
    "days_since",
    "mean_anomaly",
    "asteroid_node_longitude",
    "position_of_planet_like_body",
    "position_of_moon",
    "position_of_body",
    "position_of_asteroid",
    "position_from_apsides",
    "display_radius",

    # Meteorites
    "Meteorite",
    "position_of_meteorite",
    "load_famous_meteorites",
    "random_meteorite",
    "meteorite_display_radius",

    # Trajectories
    "generate_trajectory",
    "orbit_outline",
    "meteorite_trajectory",

    # Apsides
    "OrbitalVariation",
    "ApsidalReport",
    "orbital_variation",
    "is_transneptunian",
    "can_cross_inside_neptune",
    "apsidal_analysis",

    # Simulation
    "SimulationState",
    "FrameSnapshot",
    "SimulationClock",
    "initial_state",
    "update_simulation",
    "advance_simulation",
    "frame_positions",

    # Scales
    "DistanceReport",
    "scale_regime",
    "distance_report",
]
