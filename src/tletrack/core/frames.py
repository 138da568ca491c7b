"""Coordinate frame conversions: ECI, ECF, geodetic and topocentric.

Angles are in radians unless a name says ``_deg``. The ellipsoid is WGS-84.
"""
from __future__ import annotations

import math
from dataclasses import dataclass

import numpy as np
from numpy.typing import ArrayLike, NDArray
from sgp4.propagation import gstime

from tletrack.core.propagation import julian_date
from tletrack.utils.constants import (
    EARTH_ECCENTRICITY_SQ as E2,
    EARTH_RADIUS_KM as A,
    GEODETIC_ITERATIONS,
)

TWO_PI = 2.0 * math.pi


@dataclass(frozen=True)
class Geodetic:
    """Geodetic coordinates.

    Attributes:
        latitude: Geodetic latitude in radians.
        longitude: Longitude in radians, in [-pi, pi].
        height_km: Height above the ellipsoid in km.
    """

    latitude: float
    longitude: float
    height_km: float


@dataclass(frozen=True)
class LookAngles:
    """Topocentric look angles from an observer to a target.

    Attributes:
        azimuth: Radians clockwise from north, in [0, 2*pi).
        elevation: Radians above the local horizon.
        range_km: Slant range in km.
    """

    azimuth: float
    elevation: float
    range_km: float


def gmst(jd_ut1: float, fr: float = 0.0) -> float:
    """Greenwich mean sidereal time (IAU-82) in radians, in [0, 2*pi)."""
    return gstime(jd_ut1 + fr)


def gmst_from_timestamp_ms(timestamp_ms: float) -> float:
    """GMST in radians at a Unix timestamp in milliseconds."""
    jd, fr = julian_date(timestamp_ms)
    return gmst(jd, fr)


def _wrap_pi(angle: float) -> float:
    while angle < -math.pi:
        angle += TWO_PI
    while angle > math.pi:
        angle -= TWO_PI
    return angle


def eci_to_geodetic(position_eci: ArrayLike, gmst_rad: float) -> Geodetic:
    """Convert an ECI position (km) to geodetic coordinates.

    Latitude is refined by fixed-point iteration on the ellipsoid normal.
    """
    x, y, z = (float(c) for c in np.asarray(position_eci, dtype=np.float64))
    r = math.hypot(x, y)

    longitude = _wrap_pi(math.atan2(y, x) - gmst_rad)

    latitude = math.atan2(z, r)
    c = 1.0
    for _ in range(GEODETIC_ITERATIONS):
        c = 1.0 / math.sqrt(1.0 - E2 * math.sin(latitude) ** 2)
        latitude = math.atan2(z + A * c * E2 * math.sin(latitude), r)

    height = r / math.cos(latitude) - A * c
    return Geodetic(latitude=latitude, longitude=longitude, height_km=height)


def eci_to_ecf(position_eci: ArrayLike, gmst_rad: float) -> NDArray[np.float64]:
    """Rotate an ECI vector into the Earth-fixed frame."""
    x, y, z = np.asarray(position_eci, dtype=np.float64)
    cos_g, sin_g = math.cos(gmst_rad), math.sin(gmst_rad)
    return np.array([x * cos_g + y * sin_g, -x * sin_g + y * cos_g, z], dtype=np.float64)


def geodetic_to_ecf(geodetic: Geodetic) -> NDArray[np.float64]:
    """Earth-fixed position (km) of a point given in geodetic coordinates."""
    sin_lat = math.sin(geodetic.latitude)
    cos_lat = math.cos(geodetic.latitude)
    normal = A / math.sqrt(1.0 - E2 * sin_lat ** 2)
    return np.array(
        [
            (normal + geodetic.height_km) * cos_lat * math.cos(geodetic.longitude),
            (normal + geodetic.height_km) * cos_lat * math.sin(geodetic.longitude),
            (normal * (1.0 - E2) + geodetic.height_km) * sin_lat,
        ],
        dtype=np.float64,
    )


def ecf_to_look_angles(observer: Geodetic, satellite_ecf: ArrayLike) -> LookAngles:
    """Azimuth, elevation and range from an observer to an ECF position.

    The offset vector is expressed in the observer's south-east-zenith
    frame first.
    """
    offset = np.asarray(satellite_ecf, dtype=np.float64) - geodetic_to_ecf(observer)
    rx, ry, rz = (float(c) for c in offset)

    sin_lat, cos_lat = math.sin(observer.latitude), math.cos(observer.latitude)
    sin_lon, cos_lon = math.sin(observer.longitude), math.cos(observer.longitude)

    south = sin_lat * cos_lon * rx + sin_lat * sin_lon * ry - cos_lat * rz
    east = -sin_lon * rx + cos_lon * ry
    zenith = cos_lat * cos_lon * rx + cos_lat * sin_lon * ry + sin_lat * rz

    range_km = math.sqrt(south ** 2 + east ** 2 + zenith ** 2)
    elevation = math.asin(zenith / range_km)
    azimuth = math.atan2(-east, south) + math.pi
    return LookAngles(azimuth=azimuth, elevation=elevation, range_km=range_km)
