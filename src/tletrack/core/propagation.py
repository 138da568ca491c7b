"""Orbital propagation via SGP4."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Callable, Optional, Protocol, runtime_checkable

import numpy as np

logger = logging.getLogger(__name__)
from numpy.typing import NDArray
from sgp4.api import SGP4_ERRORS, WGS84, Satrec, jday
from tletrack.core.tle import TLERecord
from tletrack.exceptions import PropagationError

_UNIX_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


@dataclass(frozen=True)
class StateVector:
    """Position and velocity in the TEME (Earth-centered inertial) frame.

    Attributes:
        position_km: [x, y, z] position in km.
        velocity_km_s: [vx, vy, vz] velocity in km/s.
        timestamp_ms: Time of this state vector, ms since the Unix epoch.
    """

    position_km: NDArray[np.float64]  # shape (3,)
    velocity_km_s: NDArray[np.float64]  # shape (3,)
    timestamp_ms: float


@runtime_checkable
class Propagator(Protocol):
    """Strategy turning a TLE and an instant into an inertial state vector."""

    def propagate(self, record: TLERecord, timestamp_ms: float) -> StateVector:
        ...


def julian_date(timestamp_ms: float) -> tuple[float, float]:
    """Convert a Unix timestamp in ms to the (jd, fr) pair sgp4 expects."""
    t = _UNIX_EPOCH + timedelta(milliseconds=timestamp_ms)
    return jday(t.year, t.month, t.day, t.hour, t.minute, t.second + t.microsecond / 1e6)


def satrec_from_record(record: TLERecord) -> Satrec:
    """Create an sgp4 Satrec (WGS-84 gravity model) from a record."""
    return Satrec.twoline2rv(record.line1, record.line2, WGS84)


def propagate(satrec: Satrec, timestamp_ms: float, name: str = "") -> StateVector:
    """Propagate a Satrec to a single instant using SGP4.

    Args:
        satrec: Initialized sgp4 satellite record.
        timestamp_ms: Target time in ms since the Unix epoch.
        name: Satellite name, used in log and error messages.

    Returns:
        The TEME state vector at ``timestamp_ms``.

    Raises:
        PropagationError: If SGP4 propagation fails (error code != 0).
    """
    jd, fr = julian_date(timestamp_ms)
    error_code, pos, vel = satrec.sgp4(jd, fr)

    if error_code != 0:
        reason = SGP4_ERRORS.get(error_code, "unknown error")
        logger.warning(
            "SGP4 propagation failed for NORAD %s (%s) at %s ms: error code %d",
            satrec.satnum, name, timestamp_ms, error_code,
        )
        raise PropagationError(
            f"SGP4 propagation failed for NORAD {satrec.satnum} at {timestamp_ms} ms: "
            f"error code {error_code} ({reason})",
            error_code,
        )

    return StateVector(
        position_km=np.array(pos, dtype=np.float64),
        velocity_km_s=np.array(vel, dtype=np.float64),
        timestamp_ms=timestamp_ms,
    )


class Sgp4Propagator:
    """Default :class:`Propagator` backed by the ``sgp4`` package.

    The engine passes a ``satrec_lookup`` so parsed Satrec objects are shared
    through its orbit-model cache; without one, each call parses the lines.
    """

    def __init__(self, satrec_lookup: Optional[Callable[[TLERecord], Satrec]] = None) -> None:
        self._satrec_lookup = satrec_lookup or satrec_from_record

    def propagate(self, record: TLERecord, timestamp_ms: float) -> StateVector:
        satrec = self._satrec_lookup(record)
        state = propagate(satrec, timestamp_ms, record.name)
        logger.debug("Propagated %s to %s ms", record.name, timestamp_ms)
        return state
