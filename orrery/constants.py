"""
Physical, time and reference constants for orrery.

This module contains the constants shared by the catalog, the position functions
and the presentation helpers. Presentation scale factors live in orrery.config.
"""
from datetime import datetime, timezone

# Basic astronomical and time constants
AU_KM = 149597870.7  # km per AU
DAY_SECONDS = 86400.0  # seconds per day
YEAR_DAYS = 365.25  # days per Julian year
AU_PER_LIGHT_YEAR = 63240.0  # AU per light year (rounded)
EARTH_RADIUS_KM = 6371.0  # reference radius for display proportions

# Reference epoch for mean anomalies (J2000.0)
J2000 = datetime(2000, 1, 1, 12, 0, 0, tzinfo=timezone.utc)

# Mean distance of Neptune (AU), the inner edge used for transneptunian flags
NEPTUNE_SEMI_MAJOR_AXIS_AU = 30.07

# Proxima Centauri, used by the distance indicator
PROXIMA_DISTANCE_LY = 4.24
