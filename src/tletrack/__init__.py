"""
tletrack: TLE parsing, satellite positions and ground tracks for Python.

Parses and validates Two-Line Element sets, computes memoized satellite
positions and observer look angles with SGP4, and builds ground tracks
split at the antemeridian for map rendering.
"""

from __future__ import annotations

__version__ = "0.1.0"

from tletrack.core.tle import (
    TLERecord,
    parse_tle,
    parse_tle_catalog,
    tle_line_checksum,
    is_valid_tle,
    validate_tle,
)
from tletrack.core.fields import (
    FIELDS,
    OrbitalElements,
    get_field,
    get_line_number_1,
    get_line_number_2,
    get_checksum_1,
    get_checksum_2,
    get_catalog_number_1,
    get_catalog_number_2,
    get_classification,
    get_international_designator,
    get_epoch_year,
    get_epoch_day,
    get_first_time_derivative,
    get_second_time_derivative,
    get_bstar_drag,
    get_orbit_model,
    get_element_set_number,
    get_inclination,
    get_right_ascension,
    get_eccentricity,
    get_perigee,
    get_mean_anomaly,
    get_mean_motion,
    get_revolution_number,
    get_tle_epoch_timestamp,
    get_tle_epoch,
    get_average_orbit_time_ms,
)
from tletrack.core.propagation import Propagator, Sgp4Propagator, StateVector
from tletrack.core.engine import (
    PositionEngine,
    ObserverLocation,
    SatelliteState,
    LatLng,
    get_default_engine,
    get_satellite_info,
    get_lat_lon,
    get_visible_satellites,
)
from tletrack.core.groundtrack import (
    get_orbit_track,
    get_ground_track_lat_lng,
    get_last_antemeridian_crossing_time_ms,
    split_at_antemeridian,
)
from tletrack.data.spacetrack import SpaceTrackClient
from tletrack.exceptions import (
    TLEError,
    InvalidInputError,
    InvalidFormatError,
    InvalidTLEError,
    FieldParseError,
    PropagationError,
)

__all__ = [
    "__version__",
    "TLERecord",
    "parse_tle",
    "parse_tle_catalog",
    "tle_line_checksum",
    "is_valid_tle",
    "validate_tle",
    "FIELDS",
    "OrbitalElements",
    "get_field",
    "get_line_number_1",
    "get_line_number_2",
    "get_checksum_1",
    "get_checksum_2",
    "get_catalog_number_1",
    "get_catalog_number_2",
    "get_classification",
    "get_international_designator",
    "get_epoch_year",
    "get_epoch_day",
    "get_first_time_derivative",
    "get_second_time_derivative",
    "get_bstar_drag",
    "get_orbit_model",
    "get_element_set_number",
    "get_inclination",
    "get_right_ascension",
    "get_eccentricity",
    "get_perigee",
    "get_mean_anomaly",
    "get_mean_motion",
    "get_revolution_number",
    "get_tle_epoch_timestamp",
    "get_tle_epoch",
    "get_average_orbit_time_ms",
    "Propagator",
    "Sgp4Propagator",
    "StateVector",
    "PositionEngine",
    "ObserverLocation",
    "SatelliteState",
    "LatLng",
    "get_default_engine",
    "get_satellite_info",
    "get_lat_lon",
    "get_visible_satellites",
    "get_orbit_track",
    "get_ground_track_lat_lng",
    "get_last_antemeridian_crossing_time_ms",
    "split_at_antemeridian",
    "SpaceTrackClient",
    "TLEError",
    "InvalidInputError",
    "InvalidFormatError",
    "InvalidTLEError",
    "FieldParseError",
    "PropagationError",
]
