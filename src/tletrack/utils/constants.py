from __future__ import annotations

"""Physical constants and defaults for position and ground-track computation.

Distances in km, times in milliseconds unless otherwise noted.
"""

# --- Earth ellipsoid (WGS-84), used for geodetic conversion ---
EARTH_RADIUS_KM: float = 6378.137
"""Equatorial radius of Earth in km."""

EARTH_POLAR_RADIUS_KM: float = 6356.7523142
"""Polar radius of Earth in km."""

EARTH_FLATTENING: float = (EARTH_RADIUS_KM - EARTH_POLAR_RADIUS_KM) / EARTH_RADIUS_KM
"""Ellipsoid flattening (dimensionless)."""

EARTH_ECCENTRICITY_SQ: float = 2 * EARTH_FLATTENING - EARTH_FLATTENING ** 2
"""First eccentricity squared (dimensionless)."""

GEODETIC_ITERATIONS: int = 20
"""Fixed-point iterations for geodetic latitude."""

# --- Time ---
MS_PER_SECOND: int = 1000
MS_PER_MINUTE: int = 60 * MS_PER_SECOND
MS_PER_DAY: int = 86_400_000

TLE_CENTURY_PIVOT: int = 57
"""Two-digit epoch years >= this value are 19xx, otherwise 20xx."""

# --- Ground track ---
ANTEMERIDIAN_JUMP_DEG: float = 180.0
"""Longitude difference between consecutive samples that marks a ±180° crossing."""

DEFAULT_ORBIT_TRACK_STEP_MS: int = MS_PER_MINUTE
"""Default sample spacing for orbit tracks."""

DEFAULT_ORBIT_TRACK_MAX_TIME_MS: int = 6_000_000
"""Default orbit-track window (100 minutes)."""

DEFAULT_GROUND_TRACK_STEP_MS: int = MS_PER_MINUTE
"""Default sample spacing for ground tracks."""

NO_CROSSING_TRACK_STEP_MS: int = 10 * MS_PER_MINUTE
"""Sample spacing for orbits that never cross the antemeridian."""

NO_CROSSING_TRACK_WINDOW_MS: int = MS_PER_DAY
"""Window sampled for orbits that never cross the antemeridian."""

PREVIOUS_ORBIT_OFFSET_MS: int = 10 * MS_PER_SECOND
"""How far before the current orbit start to look for the previous one."""

# --- Antemeridian crossing search ---
CROSSING_COARSE_STEP_MS: int = MS_PER_MINUTE
"""Backward step of the coarse crossing search."""

CROSSING_HORIZON_ORBITS: float = 1.5
"""Search horizon as a multiple of the average orbit period."""

CROSSING_MAX_HORIZON_MS: int = 2 * MS_PER_DAY
"""Upper bound on the crossing search horizon."""

CROSSING_RESOLUTION_MS: int = 1
"""Bisection stops once the bracketing interval is this narrow."""

# --- Observer ---
DEFAULT_OBSERVER_HEIGHT_KM: float = 0.37
"""Observer height above the ellipsoid used when none is given, in km."""

# --- Memoization ---
DEFAULT_CACHE_SIZE: int = 4096
"""Default LRU capacity of each engine cache."""
