"""Ground tracks and antemeridian crossings.

Ground tracks are sampled from a :class:`PositionEngine` and split into
segments wherever the path crosses the ±180° meridian, so that map
renderers never draw a line across the whole map.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Iterable
from typing import Optional

from tletrack.core.engine import LatLng, PositionEngine, get_default_engine
from tletrack.core.fields import get_average_orbit_time_ms
from tletrack.core.tle import TLEInput, TLERecord, parse_tle
from tletrack.utils.constants import (
    ANTEMERIDIAN_JUMP_DEG,
    CROSSING_COARSE_STEP_MS,
    CROSSING_HORIZON_ORBITS,
    CROSSING_MAX_HORIZON_MS,
    CROSSING_RESOLUTION_MS,
    DEFAULT_GROUND_TRACK_STEP_MS,
    DEFAULT_ORBIT_TRACK_MAX_TIME_MS,
    DEFAULT_ORBIT_TRACK_STEP_MS,
    MS_PER_MINUTE,
    NO_CROSSING_TRACK_STEP_MS,
    NO_CROSSING_TRACK_WINDOW_MS,
    PREVIOUS_ORBIT_OFFSET_MS,
)

logger = logging.getLogger(__name__)

GroundTrackSegment = list[LatLng]


def crosses_antemeridian(lng_a: float, lng_b: float) -> bool:
    """True if moving from ``lng_a`` to ``lng_b`` wraps across ±180°.

    The longitudes must have opposite signs and differ by more than half a
    turn; a small sign flip is an ordinary crossing of the prime meridian.
    """
    return (lng_a < 0) != (lng_b < 0) and abs(lng_a - lng_b) > ANTEMERIDIAN_JUMP_DEG


def get_orbit_track(
    tle: TLEInput,
    start_timestamp_ms: float,
    step_ms: float = DEFAULT_ORBIT_TRACK_STEP_MS,
    max_time_ms: float = DEFAULT_ORBIT_TRACK_MAX_TIME_MS,
    engine: Optional[PositionEngine] = None,
) -> list[LatLng]:
    """Sample the sub-satellite point at evenly spaced instants.

    Samples ``start + k * step_ms`` for ``k = 0 .. max_time_ms // step_ms``,
    so both ends of the window are included.

    Args:
        tle: TLE text, lines, or record.
        start_timestamp_ms: First sample time in ms since the Unix epoch.
        step_ms: Spacing between samples in ms.
        max_time_ms: Length of the window in ms.
        engine: Engine to use. Defaults to the shared engine.

    Returns:
        ``max_time_ms // step_ms + 1`` points in time order.

    Raises:
        ValueError: If ``step_ms`` is not positive or ``max_time_ms`` is negative.
    """
    if step_ms <= 0:
        raise ValueError(f"step_ms must be positive, got {step_ms}")
    if max_time_ms < 0:
        raise ValueError(f"max_time_ms must be >= 0, got {max_time_ms}")

    engine = engine or get_default_engine()
    record = parse_tle(tle)
    steps = int(max_time_ms // step_ms)

    track = [engine.get_lat_lon(record, start_timestamp_ms + k * step_ms) for k in range(steps + 1)]
    logger.debug("Sampled %d track points for %s", len(track), record.name)
    return track


def split_at_antemeridian(points: Iterable[LatLng]) -> list[GroundTrackSegment]:
    """Split a path into segments that never cross ±180° internally."""
    segments: list[GroundTrackSegment] = []
    current: GroundTrackSegment = []

    for point in points:
        if current and crosses_antemeridian(current[-1].lng, point.lng):
            segments.append(current)
            current = []
        current.append(point)

    if current:
        segments.append(current)
    return segments


def _refine_crossing(
    engine: PositionEngine,
    record: TLERecord,
    earlier_ms: float,
    later_ms: float,
) -> int:
    """Bisect a bracketing interval down to the crossing instant.

    Returns the first instant (to within the resolution) on the far side.
    """
    earlier_lng = engine.get_lat_lon(record, earlier_ms).lng

    while later_ms - earlier_ms > CROSSING_RESOLUTION_MS:
        mid_ms = (earlier_ms + later_ms) // 2
        mid_lng = engine.get_lat_lon(record, mid_ms).lng
        if crosses_antemeridian(earlier_lng, mid_lng):
            later_ms = mid_ms
        else:
            earlier_ms, earlier_lng = mid_ms, mid_lng

    return int(later_ms)


def get_last_antemeridian_crossing_time_ms(
    tle: TLEInput,
    timestamp_ms: float,
    engine: Optional[PositionEngine] = None,
) -> int:
    """Find the most recent antemeridian crossing at or before an instant.

    Steps backward in one-minute increments over 1.5 average orbit periods
    (at most two days), then bisects the bracketing minute to 1 ms.

    Args:
        tle: TLE text, lines, or record.
        timestamp_ms: Reference time in ms since the Unix epoch.
        engine: Engine to use. Defaults to the shared engine.

    Returns:
        The crossing time in integer ms, or -1 if the satellite did not
        cross within the search horizon (e.g. a geosynchronous orbit).
    """
    engine = engine or get_default_engine()
    record = parse_tle(tle)
    horizon_ms = min(CROSSING_HORIZON_ORBITS * get_average_orbit_time_ms(record), CROSSING_MAX_HORIZON_MS)

    later_ms = timestamp_ms
    later_lng = engine.get_lat_lon(record, later_ms).lng
    searched_ms = 0

    while searched_ms < horizon_ms:
        earlier_ms = later_ms - CROSSING_COARSE_STEP_MS
        earlier_lng = engine.get_lat_lon(record, earlier_ms).lng
        if crosses_antemeridian(earlier_lng, later_lng):
            crossing_ms = _refine_crossing(engine, record, earlier_ms, later_ms)
            logger.debug("%s crossed the antemeridian at %d ms", record.name, crossing_ms)
            return crossing_ms
        later_ms, later_lng = earlier_ms, earlier_lng
        searched_ms += CROSSING_COARSE_STEP_MS

    logger.debug("No antemeridian crossing for %s within %.0f ms", record.name, horizon_ms)
    return -1


def get_ground_track_lat_lng(
    tle: TLEInput,
    step_ms: float = DEFAULT_GROUND_TRACK_STEP_MS,
    timestamp_ms: Optional[float] = None,
    engine: Optional[PositionEngine] = None,
) -> list[GroundTrackSegment]:
    """Ground track around an instant, one segment per revolution.

    For orbits that cross the antemeridian, returns the previous, current
    and next revolutions, each running from one crossing to the next. For
    orbits that never cross (geosynchronous and similar), returns one day
    sampled every 10 minutes starting at ``timestamp_ms``, split at any
    crossing.

    Args:
        tle: TLE text, lines, or record.
        step_ms: Spacing between samples in ms (crossing orbits only).
        timestamp_ms: Reference time in ms since the Unix epoch. Defaults to now.
        engine: Engine to use. Defaults to the shared engine.

    Returns:
        A list of segments, each a list of LatLng points.
    """
    engine = engine or get_default_engine()
    record = parse_tle(tle)
    if timestamp_ms is None:
        timestamp_ms = int(time.time() * 1000)

    current_start = get_last_antemeridian_crossing_time_ms(record, timestamp_ms, engine)
    if current_start == -1:
        points = get_orbit_track(
            record, timestamp_ms, NO_CROSSING_TRACK_STEP_MS, NO_CROSSING_TRACK_WINDOW_MS, engine
        )
        return split_at_antemeridian(points)

    period_ms = get_average_orbit_time_ms(record)
    previous_start = get_last_antemeridian_crossing_time_ms(
        record, current_start - PREVIOUS_ORBIT_OFFSET_MS, engine
    )
    next_start = get_last_antemeridian_crossing_time_ms(
        record, current_start + period_ms + 30 * MS_PER_MINUTE, engine
    )

    orbit_starts = [current_start]
    if previous_start != -1 and previous_start < current_start:
        orbit_starts.insert(0, previous_start)
    if next_start > current_start:
        orbit_starts.append(next_start)

    segments: list[GroundTrackSegment] = []
    for i, begin in enumerate(orbit_starts):
        if i + 1 < len(orbit_starts):
            window_ms = orbit_starts[i + 1] - begin
        else:
            window_ms = CROSSING_HORIZON_ORBITS * period_ms
        points = get_orbit_track(record, begin, step_ms, window_ms, engine)
        segments.append(split_at_antemeridian(points)[0])

    logger.debug("Ground track for %s: %d segments", record.name, len(segments))
    return segments
