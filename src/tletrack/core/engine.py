"""Memoized satellite position and look-angle computation.

A :class:`PositionEngine` validates a TLE, propagates it with a
:class:`~tletrack.core.propagation.Propagator`, and converts the inertial
state to geodetic coordinates and (optionally) observer look angles. Every
result is cached by TLE text, timestamp and observer, so repeated requests
never re-run propagation.
"""

from __future__ import annotations

import logging
import math
import threading
from collections.abc import Iterable
from dataclasses import dataclass
from typing import Optional

import numpy as np
from sgp4.api import Satrec

from tletrack.core.frames import (
    Geodetic,
    ecf_to_look_angles,
    eci_to_ecf,
    eci_to_geodetic,
    gmst_from_timestamp_ms,
)
from tletrack.core.propagation import Propagator, Sgp4Propagator, satrec_from_record
from tletrack.core.tle import TLEInput, TLERecord, parse_tle, validate_tle
from tletrack.exceptions import TLEError
from tletrack.utils.cache import CacheInfo, MemoCache
from tletrack.utils.constants import DEFAULT_CACHE_SIZE, DEFAULT_OBSERVER_HEIGHT_KM

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ObserverLocation:
    """A ground observer.

    Attributes:
        lat: Geodetic latitude in degrees.
        lng: Longitude in degrees.
        height_km: Height above the ellipsoid in km.
    """

    lat: float
    lng: float
    height_km: float = DEFAULT_OBSERVER_HEIGHT_KM

    def to_geodetic(self) -> Geodetic:
        return Geodetic(
            latitude=math.radians(self.lat),
            longitude=math.radians(self.lng),
            height_km=self.height_km,
        )


@dataclass(frozen=True)
class LatLng:
    """A sub-satellite point in degrees."""

    lat: float
    lng: float


@dataclass(frozen=True)
class SatelliteState:
    """Satellite state at one instant.

    Look-angle attributes are None unless an observer was supplied.

    Attributes:
        lat: Geodetic latitude in degrees.
        lng: Longitude in degrees, in [-180, 180].
        height_km: Height above the WGS-84 ellipsoid in km.
        velocity_km_s: Inertial speed in km/s.
        azimuth_deg: Azimuth from the observer in degrees.
        elevation_deg: Elevation above the observer's horizon in degrees.
        range_km: Slant range from the observer in km.
    """

    lat: float
    lng: float
    height_km: float
    velocity_km_s: float
    azimuth_deg: Optional[float] = None
    elevation_deg: Optional[float] = None
    range_km: Optional[float] = None

    @property
    def lat_lng(self) -> LatLng:
        return LatLng(lat=self.lat, lng=self.lng)


@dataclass(frozen=True)
class _Fix:
    """Observer-independent part of a state, shared by all observers."""

    lat: float
    lng: float
    height_km: float
    velocity_km_s: float
    position_ecf: tuple[float, float, float]


class PositionEngine:
    """Computes and memoizes satellite states.

    Args:
        propagator: Strategy used for orbital propagation. Defaults to SGP4
            with Satrec objects shared through the engine's orbit-model cache.
        cache_size: LRU capacity of each internal cache.

    Example::

        engine = PositionEngine()
        state = engine.get_satellite_info(tle_text, 1501039265000, 34.24, -116.91)
        print(state.elevation_deg)
    """

    def __init__(self, propagator: Optional[Propagator] = None, cache_size: int = DEFAULT_CACHE_SIZE) -> None:
        self._models: MemoCache[tuple[str, str], Satrec] = MemoCache(cache_size, "orbit-model")
        self._fixes: MemoCache[tuple[str, str, float], _Fix] = MemoCache(cache_size, "geodetic")
        self._states: MemoCache[tuple, SatelliteState] = MemoCache(cache_size, "satellite-info")
        self.propagator: Propagator = propagator or Sgp4Propagator(satrec_lookup=self.get_satrec)

    def get_satrec(self, tle: TLEInput) -> Satrec:
        """Return the (cached) sgp4 Satrec for a TLE."""
        record = parse_tle(tle)
        return self._models.get_or_compute(record.lines, lambda: satrec_from_record(record))

    def _compute_fix(self, record: TLERecord, timestamp_ms: float) -> _Fix:
        validate_tle(record)
        state = self.propagator.propagate(record, timestamp_ms)
        gmst_rad = gmst_from_timestamp_ms(timestamp_ms)
        geodetic = eci_to_geodetic(state.position_km, gmst_rad)
        ecf = eci_to_ecf(state.position_km, gmst_rad)
        return _Fix(
            lat=math.degrees(geodetic.latitude),
            lng=math.degrees(geodetic.longitude),
            height_km=geodetic.height_km,
            velocity_km_s=float(np.linalg.norm(state.velocity_km_s)),
            position_ecf=(float(ecf[0]), float(ecf[1]), float(ecf[2])),
        )

    def _fix(self, record: TLERecord, timestamp_ms: float) -> _Fix:
        key = (record.line1, record.line2, timestamp_ms)
        return self._fixes.get_or_compute(key, lambda: self._compute_fix(record, timestamp_ms))

    def get_satellite_info(
        self,
        tle: TLEInput,
        timestamp_ms: float,
        observer_lat: Optional[float] = None,
        observer_lng: Optional[float] = None,
        observer_height_km: float = DEFAULT_OBSERVER_HEIGHT_KM,
    ) -> SatelliteState:
        """Compute the satellite state at an instant.

        Args:
            tle: TLE text, lines, or record.
            timestamp_ms: Time in ms since the Unix epoch.
            observer_lat: Observer latitude in degrees.
            observer_lng: Observer longitude in degrees.
            observer_height_km: Observer height above the ellipsoid in km.

        Returns:
            The SatelliteState. Look angles are filled in only when both
            observer coordinates are given.

        Raises:
            InvalidTLEError: If a line number or checksum does not match.
            PropagationError: If SGP4 fails for this instant.
            ValueError: If only one of the observer coordinates is given.
        """
        if (observer_lat is None) != (observer_lng is None):
            raise ValueError("observer_lat and observer_lng must be given together")

        record = parse_tle(tle)
        observer_key = None
        if observer_lat is not None:
            observer_key = (observer_lat, observer_lng, observer_height_km)
        key = (record.line1, record.line2, timestamp_ms, observer_key)

        def compute() -> SatelliteState:
            fix = self._fix(record, timestamp_ms)
            if observer_key is None:
                return SatelliteState(
                    lat=fix.lat, lng=fix.lng, height_km=fix.height_km, velocity_km_s=fix.velocity_km_s
                )
            observer = ObserverLocation(*observer_key)
            look = ecf_to_look_angles(observer.to_geodetic(), fix.position_ecf)
            return SatelliteState(
                lat=fix.lat,
                lng=fix.lng,
                height_km=fix.height_km,
                velocity_km_s=fix.velocity_km_s,
                azimuth_deg=math.degrees(look.azimuth),
                elevation_deg=math.degrees(look.elevation),
                range_km=look.range_km,
            )

        return self._states.get_or_compute(key, compute)

    def get_lat_lon(self, tle: TLEInput, timestamp_ms: float) -> LatLng:
        """Sub-satellite point at an instant, sharing the state cache."""
        fix = self._fix(parse_tle(tle), timestamp_ms)
        return LatLng(lat=fix.lat, lng=fix.lng)

    def get_visible_satellites(
        self,
        observer: ObserverLocation,
        tles: Iterable[TLEInput],
        timestamp_ms: float,
        elevation_threshold_deg: float = 0.0,
    ) -> list[tuple[TLERecord, SatelliteState]]:
        """Satellites above an elevation threshold for an observer.

        Records that fail validation or propagation are skipped.

        Args:
            observer: The ground observer.
            tles: TLEs to check.
            timestamp_ms: Time in ms since the Unix epoch.
            elevation_threshold_deg: Minimum elevation in degrees.

        Returns:
            (record, state) pairs sorted by descending elevation.
        """
        visible: list[tuple[TLERecord, SatelliteState]] = []
        for tle in tles:
            try:
                record = parse_tle(tle)
                state = self.get_satellite_info(
                    record, timestamp_ms, observer.lat, observer.lng, observer.height_km
                )
            except TLEError as exc:
                logger.warning("Skipping TLE in visibility check: %s", exc)
                continue
            if state.elevation_deg is not None and state.elevation_deg >= elevation_threshold_deg:
                visible.append((record, state))

        visible.sort(key=lambda item: item[1].elevation_deg, reverse=True)
        logger.debug("%d satellites above %.1f deg", len(visible), elevation_threshold_deg)
        return visible

    def cache_info(self) -> dict[str, CacheInfo]:
        return {
            "orbit_model": self._models.info(),
            "geodetic": self._fixes.info(),
            "satellite_info": self._states.info(),
        }

    def clear_cache(self) -> None:
        """Empty every cache of this engine."""
        self._models.clear()
        self._fixes.clear()
        self._states.clear()


_default_engine: Optional[PositionEngine] = None
_default_engine_lock = threading.Lock()


def get_default_engine() -> PositionEngine:
    """Return the shared engine used by the module-level functions."""
    global _default_engine
    with _default_engine_lock:
        if _default_engine is None:
            _default_engine = PositionEngine()
        return _default_engine


def get_satellite_info(
    tle: TLEInput,
    timestamp_ms: float,
    observer_lat: Optional[float] = None,
    observer_lng: Optional[float] = None,
    observer_height_km: float = DEFAULT_OBSERVER_HEIGHT_KM,
) -> SatelliteState:
    """Module-level form of :meth:`PositionEngine.get_satellite_info`."""
    return get_default_engine().get_satellite_info(
        tle, timestamp_ms, observer_lat, observer_lng, observer_height_km
    )


def get_lat_lon(tle: TLEInput, timestamp_ms: float) -> LatLng:
    """Module-level form of :meth:`PositionEngine.get_lat_lon`."""
    return get_default_engine().get_lat_lon(tle, timestamp_ms)


def get_visible_satellites(
    observer: ObserverLocation,
    tles: Iterable[TLEInput],
    timestamp_ms: float,
    elevation_threshold_deg: float = 0.0,
) -> list[tuple[TLERecord, SatelliteState]]:
    """Module-level form of :meth:`PositionEngine.get_visible_satellites`."""
    return get_default_engine().get_visible_satellites(observer, tles, timestamp_ms, elevation_threshold_deg)
