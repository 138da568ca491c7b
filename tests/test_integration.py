"""Integration test: parse → validate → position → ground track end-to-end."""
from __future__ import annotations

import pytest

import tletrack
from tletrack import (
    ObserverLocation,
    PositionEngine,
    get_ground_track_lat_lng,
    is_valid_tle,
    parse_tle_catalog,
)

# Hardcoded real TLEs (no network calls)
CATALOG_TEXT = """\
ISS (ZARYA)
1 25544U 98067A   17206.51418347  .00001345  00000-0  27503-4 0  9993
2 25544  51.6396 207.2711 0006223  72.3525  71.7719 15.54224686 67715
ABS-3
1 24901U 97042A   17279.07057876  .00000084  00000-0  00000+0 0  9995
2 24901   5.0867  62.6208 0007858 138.4124 258.4388  0.99995119 73683
1 37820U 11053A   17206.57682878  .00025514  00000-0  13004-3 0  9995
2 37820  42.7593 324.6017 0020085 348.1948  81.3822 15.80564343334044
"""

TIMESTAMP_MS = 1501039265000


@pytest.fixture
def catalog():
    return parse_tle_catalog(CATALOG_TEXT)


def test_catalog_parses_and_validates(catalog):
    assert [r.name for r in catalog] == ["ISS (ZARYA)", "ABS-3", "Unknown"]
    assert all(is_valid_tle(r) for r in catalog)


def test_positions_for_catalog(catalog):
    engine = PositionEngine()
    for record in catalog:
        state = engine.get_satellite_info(record, TIMESTAMP_MS)
        assert -90.0 <= state.lat <= 90.0
        assert -180.0 <= state.lng <= 180.0
        assert state.height_km > 150.0


def test_visible_from_big_bear(catalog):
    engine = PositionEngine()
    observer = ObserverLocation(lat=34.243889, lng=-116.911389)
    visible = engine.get_visible_satellites(observer, catalog, TIMESTAMP_MS, elevation_threshold_deg=10.0)
    assert visible[0][0].name == "ISS (ZARYA)"


def test_ground_tracks(catalog):
    engine = PositionEngine()
    iss, geo, _ = catalog
    assert len(get_ground_track_lat_lng(iss, 60_000, TIMESTAMP_MS, engine=engine)) == 3
    assert len(get_ground_track_lat_lng(geo, 60_000, TIMESTAMP_MS, engine=engine)) == 1


def test_public_api_exports():
    for name in tletrack.__all__:
        assert hasattr(tletrack, name), name
