from __future__ import annotations

from dataclasses import dataclass, replace

# ---------------------------------------------------------------------------
# Defaults
# ---------------------------------------------------------------------------
DEFAULT_ORBITAL_SCALE = 15.0  # scene units per AU
DEFAULT_MOON_ORBITAL_SCALE = 0.03  # scene units per km of satellite distance
DEFAULT_PLANET_INCLINATION_AMPLIFY = 1.5
DEFAULT_MOON_INCLINATION_AMPLIFY = 1.2
DEFAULT_APSIDAL_INCLINATION_AMPLIFY = 1.0
DEFAULT_METEORITE_SCENE_SCALE = 10.0  # scene units per AU for linear meteorite tracks
DEFAULT_KEPLER_TOLERANCE = 1e-12  # rad
DEFAULT_KEPLER_MAX_ITER = 50

# Display radius model
STAR_DISPLAY_RADIUS = 1.5
BASE_PLANET_SIZE = 0.2
BASE_MOON_SIZE = 0.05
DEFAULT_DISPLAY_RADIUS = 0.05
PLANET_DISPLAY_LIMITS = (0.05, 1.5)
MOON_DISPLAY_LIMITS = (0.02, 0.3)
METEORITE_DISPLAY_LIMITS = (0.02, 0.5)
METEORITE_DIAMETER_SCALE = 20.0

# Sampling defaults
DEFAULT_TRAJECTORY_SAMPLES = 200
DEFAULT_OUTLINE_SEGMENTS = 256
DEFAULT_MOON_OUTLINE_SEGMENTS = 64


@dataclass(frozen=True, slots=True)
class PresentationConfig:
    """
    Presentation parameters that turn physical elements into scene coordinates.

    The two orbital scales are deliberately different: planets are placed at
    ``distance_au * orbital_scale`` while satellites use ``distance_km *
    moon_orbital_scale``. Inclination amplification exaggerates real
    inclinations so that orbital planes stay legible; it is not physical.
    """

    orbital_scale: float = DEFAULT_ORBITAL_SCALE
    moon_orbital_scale: float = DEFAULT_MOON_ORBITAL_SCALE
    planet_inclination_amplify: float = DEFAULT_PLANET_INCLINATION_AMPLIFY
    moon_inclination_amplify: float = DEFAULT_MOON_INCLINATION_AMPLIFY
    apsidal_inclination_amplify: float = DEFAULT_APSIDAL_INCLINATION_AMPLIFY
    meteorite_scene_scale: float = DEFAULT_METEORITE_SCENE_SCALE
    kepler_tolerance: float = DEFAULT_KEPLER_TOLERANCE
    kepler_max_iter: int = DEFAULT_KEPLER_MAX_ITER


DEFAULT_PRESENTATION = PresentationConfig()


def make_presentation_config(base: PresentationConfig = DEFAULT_PRESENTATION, **overrides) -> PresentationConfig:
    """Validate keyword overrides and return a new PresentationConfig."""
    unknown = set(overrides) - set(PresentationConfig.__dataclass_fields__)
    if unknown:
        raise ValueError(f"Unknown presentation settings: {', '.join(sorted(unknown))}")

    config = replace(base, **overrides)
    for name in ("orbital_scale", "moon_orbital_scale", "meteorite_scene_scale", "kepler_tolerance"):
        if getattr(config, name) <= 0.0:
            raise ValueError(f"{name} must be positive, got {getattr(config, name)}")
    for name in ("planet_inclination_amplify", "moon_inclination_amplify", "apsidal_inclination_amplify"):
        if getattr(config, name) < 0.0:
            raise ValueError(f"{name} must be non-negative, got {getattr(config, name)}")
    if int(config.kepler_max_iter) < 1:
        raise ValueError(f"kepler_max_iter must be at least 1, got {config.kepler_max_iter}")
    return replace(config, kepler_max_iter=int(config.kepler_max_iter))
