"""Tests for the memoized position engine."""
from __future__ import annotations

import time

import pytest

from tletrack.core.engine import (
    LatLng,
    ObserverLocation,
    PositionEngine,
    SatelliteState,
    get_default_engine,
    get_lat_lon,
    get_satellite_info,
)
from tletrack.core.propagation import Sgp4Propagator, StateVector
from tletrack.core.tle import TLERecord, parse_tle
from tletrack.exceptions import InvalidTLEError
from tletrack.utils.constants import DEFAULT_OBSERVER_HEIGHT_KM


ISS_TEXT = """ISS (ZARYA)
1 25544U 98067A   17206.51418347  .00001345  00000-0  27503-4 0  9993
2 25544  51.6396 207.2711 0006223  72.3525  71.7719 15.54224686 67715"""

GEO_TEXT = """ABS-3
1 24901U 97042A   17279.07057876  .00000084  00000-0  00000+0 0  9995
2 24901   5.0867  62.6208 0007858 138.4124 258.4388  0.99995119 73683"""

BIG_BEAR = ObserverLocation(lat=34.243889, lng=-116.911389)
FLYOVER_MS = 1501039265000


class CountingPropagator:
    """Wraps SGP4 and records every propagation request."""

    def __init__(self) -> None:
        self.inner = Sgp4Propagator()
        self.calls: list[tuple[str, float]] = []

    def propagate(self, record: TLERecord, timestamp_ms: float) -> StateVector:
        self.calls.append((record.line1, timestamp_ms))
        return self.inner.propagate(record, timestamp_ms)


@pytest.fixture
def propagator() -> CountingPropagator:
    return CountingPropagator()


@pytest.fixture
def engine(propagator: CountingPropagator) -> PositionEngine:
    return PositionEngine(propagator=propagator)


class TestSatelliteInfo:
    def test_big_bear_flyover(self, engine: PositionEngine) -> None:
        state = engine.get_satellite_info(ISS_TEXT, FLYOVER_MS, BIG_BEAR.lat, BIG_BEAR.lng)
        assert state.lat == pytest.approx(34.43928468167498, abs=1e-5)
        assert state.lng == pytest.approx(-117.47561026844932, abs=1e-5)
        assert state.azimuth_deg == pytest.approx(292.8251393, abs=1e-3)
        assert state.elevation_deg == pytest.approx(81.5452178, abs=1e-4)
        assert state.range_km == pytest.approx(406.8007926883391, abs=5e-4)
        assert state.height_km == pytest.approx(403.0134527800419, abs=1e-3)
        assert state.velocity_km_s == pytest.approx(7.675511980883446, abs=1e-5)

    def test_without_observer(self, engine: PositionEngine) -> None:
        state = engine.get_satellite_info(ISS_TEXT, FLYOVER_MS)
        assert state.azimuth_deg is None
        assert state.elevation_deg is None
        assert state.range_km is None
        assert state.lat == pytest.approx(34.43928468167498, abs=1e-5)

    def test_observer_height_changes_range(self, engine: PositionEngine) -> None:
        ground = engine.get_satellite_info(ISS_TEXT, FLYOVER_MS, BIG_BEAR.lat, BIG_BEAR.lng)
        raised = engine.get_satellite_info(ISS_TEXT, FLYOVER_MS, BIG_BEAR.lat, BIG_BEAR.lng, 2.0)
        assert raised.range_km < ground.range_km
        assert raised.lat == ground.lat

    def test_default_observer_height(self, engine: PositionEngine) -> None:
        assert BIG_BEAR.height_km == DEFAULT_OBSERVER_HEIGHT_KM == 0.37
        implicit = engine.get_satellite_info(ISS_TEXT, FLYOVER_MS, BIG_BEAR.lat, BIG_BEAR.lng)
        explicit = engine.get_satellite_info(ISS_TEXT, FLYOVER_MS, BIG_BEAR.lat, BIG_BEAR.lng, 0.37)
        at_sea_level = engine.get_satellite_info(ISS_TEXT, FLYOVER_MS, BIG_BEAR.lat, BIG_BEAR.lng, 0.0)
        assert implicit is explicit
        assert at_sea_level.range_km - implicit.range_km == pytest.approx(0.366, abs=0.01)

    def test_single_observer_coordinate_raises(self, engine: PositionEngine) -> None:
        with pytest.raises(ValueError, match="together"):
            engine.get_satellite_info(ISS_TEXT, FLYOVER_MS, BIG_BEAR.lat)

    def test_bad_checksum_raises(self, engine: PositionEngine, propagator: CountingPropagator) -> None:
        record = parse_tle(ISS_TEXT)
        bad = [record.line1[:-1] + "9", record.line2]
        with pytest.raises(InvalidTLEError):
            engine.get_satellite_info(bad, FLYOVER_MS)
        assert propagator.calls == []

    def test_state_is_frozen(self, engine: PositionEngine) -> None:
        state = engine.get_satellite_info(ISS_TEXT, FLYOVER_MS)
        with pytest.raises(AttributeError):
            state.lat = 0.0  # type: ignore[misc]
        assert state.lat_lng == LatLng(state.lat, state.lng)


class TestLatLon:
    def test_big_bear_flyover(self, engine: PositionEngine) -> None:
        point = engine.get_lat_lon(ISS_TEXT, FLYOVER_MS)
        assert point.lat == pytest.approx(34.43928468167498, abs=1e-5)
        assert point.lng == pytest.approx(-117.47561026844932, abs=1e-5)

    def test_geosynchronous(self, engine: PositionEngine) -> None:
        point = engine.get_lat_lon(GEO_TEXT, FLYOVER_MS)
        assert point.lat == pytest.approx(4.353016018653351, abs=1e-3)
        assert point.lng == pytest.approx(129.632535483672, abs=1e-3)

    def test_matches_satellite_info(self, engine: PositionEngine) -> None:
        state = engine.get_satellite_info(ISS_TEXT, FLYOVER_MS, BIG_BEAR.lat, BIG_BEAR.lng)
        point = engine.get_lat_lon(ISS_TEXT, FLYOVER_MS)
        assert point == state.lat_lng


class TestMemoization:
    def test_second_call_is_faster(self) -> None:
        engine = PositionEngine()

        start = time.perf_counter()
        first = engine.get_satellite_info(ISS_TEXT, 1501039268000, BIG_BEAR.lat, BIG_BEAR.lng)
        first_elapsed = time.perf_counter() - start

        start = time.perf_counter()
        second = engine.get_satellite_info(ISS_TEXT, 1501039268000, BIG_BEAR.lat, BIG_BEAR.lng)
        second_elapsed = time.perf_counter() - start

        assert second_elapsed < first_elapsed
        assert second == first

    def test_propagates_once(self, engine: PositionEngine, propagator: CountingPropagator) -> None:
        first = engine.get_satellite_info(ISS_TEXT, FLYOVER_MS, BIG_BEAR.lat, BIG_BEAR.lng)
        second = engine.get_satellite_info(ISS_TEXT, FLYOVER_MS, BIG_BEAR.lat, BIG_BEAR.lng)
        assert second is first
        assert len(propagator.calls) == 1

    def test_lat_lon_shares_cache(self, engine: PositionEngine, propagator: CountingPropagator) -> None:
        engine.get_satellite_info(ISS_TEXT, FLYOVER_MS, BIG_BEAR.lat, BIG_BEAR.lng)
        engine.get_lat_lon(ISS_TEXT, FLYOVER_MS)
        engine.get_satellite_info(ISS_TEXT, FLYOVER_MS)
        assert len(propagator.calls) == 1

    def test_keyed_on_text_not_identity(self, engine: PositionEngine, propagator: CountingPropagator) -> None:
        record = parse_tle(ISS_TEXT)
        engine.get_lat_lon(ISS_TEXT, FLYOVER_MS)
        engine.get_lat_lon([f"  {record.line1}  ", record.line2], FLYOVER_MS)
        engine.get_lat_lon(TLERecord("renamed", record.line1, record.line2), FLYOVER_MS)
        assert len(propagator.calls) == 1

    def test_distinct_timestamps_propagate(self, engine: PositionEngine, propagator: CountingPropagator) -> None:
        engine.get_lat_lon(ISS_TEXT, FLYOVER_MS)
        engine.get_lat_lon(ISS_TEXT, FLYOVER_MS + 1)
        assert len(propagator.calls) == 2

    def test_bounded_cache(self, propagator: CountingPropagator) -> None:
        engine = PositionEngine(propagator=propagator, cache_size=2)
        for offset in range(5):
            engine.get_lat_lon(ISS_TEXT, FLYOVER_MS + offset)
        assert engine.cache_info()["geodetic"].size == 2
        engine.get_lat_lon(ISS_TEXT, FLYOVER_MS)
        assert len(propagator.calls) == 6

    def test_clear_cache(self, engine: PositionEngine, propagator: CountingPropagator) -> None:
        engine.get_lat_lon(ISS_TEXT, FLYOVER_MS)
        engine.clear_cache()
        engine.get_lat_lon(ISS_TEXT, FLYOVER_MS)
        assert len(propagator.calls) == 2
        assert engine.cache_info()["geodetic"].size == 1

    def test_default_engine_shares_satrec(self) -> None:
        engine = PositionEngine()
        engine.get_lat_lon(ISS_TEXT, FLYOVER_MS)
        engine.get_lat_lon(ISS_TEXT, FLYOVER_MS + 1000)
        info = engine.cache_info()["orbit_model"]
        assert info.misses == 1
        assert info.hits == 1


class TestVisibleSatellites:
    def test_only_iss_visible(self, engine: PositionEngine) -> None:
        visible = engine.get_visible_satellites(BIG_BEAR, [ISS_TEXT, GEO_TEXT], FLYOVER_MS)
        assert [record.name for record, _ in visible] == ["ISS (ZARYA)"]
        assert visible[0][1].elevation_deg > 80

    def test_skips_invalid(self, engine: PositionEngine) -> None:
        record = parse_tle(ISS_TEXT)
        bad = [record.line1[:-1] + "9", record.line2]
        visible = engine.get_visible_satellites(BIG_BEAR, [bad, ISS_TEXT], FLYOVER_MS)
        assert len(visible) == 1

    def test_threshold(self, engine: PositionEngine) -> None:
        assert engine.get_visible_satellites(BIG_BEAR, [ISS_TEXT], FLYOVER_MS, 85.0) == []


class TestModuleFunctions:
    def test_delegate_to_default_engine(self) -> None:
        assert get_default_engine() is get_default_engine()
        state = get_satellite_info(ISS_TEXT, FLYOVER_MS)
        assert isinstance(state, SatelliteState)
        assert get_lat_lon(ISS_TEXT, FLYOVER_MS) == state.lat_lng
