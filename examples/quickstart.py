"""tletrack quickstart: parse a TLE, look at the ISS from Big Bear, draw its ground track."""

from tletrack import (
    OrbitalElements,
    get_ground_track_lat_lng,
    get_satellite_info,
    get_tle_epoch,
    parse_tle,
    validate_tle,
)

tle_text = """
ISS (ZARYA)
1 25544U 98067A   17206.51418347  .00001345  00000-0  27503-4 0  9993
2 25544  51.6396 207.2711 0006223  72.3525  71.7719 15.54224686 67715
""".strip()

iss = parse_tle(tle_text)
validate_tle(iss)
elements = OrbitalElements(iss)

print(f"Satellite: {iss.name}")
print(f"NORAD ID:  {elements.catalog_number_1}")
print(f"Epoch:     {get_tle_epoch(iss)}")
print(f"Incl:      {elements.inclination:.4f}°")
print(f"Ecc:       {elements.eccentricity:.7f}")
print(f"Period:    {1440 / elements.mean_motion:.1f} min")

# Overhead pass seen from the Big Bear Solar Observatory
timestamp_ms = 1501039265000
state = get_satellite_info(iss, timestamp_ms, 34.243889, -116.911389)
print(f"Sub-point: {state.lat:.4f}, {state.lng:.4f} at {state.height_km:.1f} km")
print(f"Look:      az {state.azimuth_deg:.2f}° el {state.elevation_deg:.2f}° range {state.range_km:.1f} km")

for i, segment in enumerate(get_ground_track_lat_lng(iss, 60_000, timestamp_ms)):
    print(f"Orbit {i}: {len(segment)} points, {segment[0].lng:.1f}° -> {segment[-1].lng:.1f}°")
