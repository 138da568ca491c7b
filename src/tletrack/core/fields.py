"""Fixed-column field extraction and epoch decoding.

All field positions live in the :data:`FIELDS` table; every getter in this
module is derived from it.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any, Callable

from tletrack.core.tle import TLEInput, TLERecord, parse_tle
from tletrack.exceptions import FieldParseError
from tletrack.utils.constants import MS_PER_DAY, TLE_CENTURY_PIVOT

logger = logging.getLogger(__name__)


def _parse_int(raw: str) -> int:
    return int(raw)


def _parse_float(raw: str) -> float:
    return float(raw)


def _parse_str(raw: str) -> str:
    return raw.strip()


def _parse_implied_exponent(raw: str) -> float:
    """Decode the ``±NNNNN±E`` notation, e.g. ``" 36771-4"`` -> 0.36771e-4."""
    text = raw.strip()
    sign = ""
    if text.startswith(("+", "-")):
        sign = "-" if text[0] == "-" else ""
        text = text[1:]
    mantissa, exponent = text[:-2], text[-2:]
    if not (text.isascii() and mantissa.isdigit()) or exponent[:1] not in ("+", "-") or not exponent[1:].isdigit():
        raise ValueError(raw)
    return float(f"{sign}0.{mantissa}e{exponent}")


def _parse_implied_decimal(raw: str) -> float:
    """Decode a field with an implied leading decimal point, e.g. ``"0006317"``."""
    text = raw.strip()
    if not (text.isascii() and text.isdigit()):
        raise ValueError(raw)
    return float(f"0.{text}")


@dataclass(frozen=True)
class FieldSpec:
    """Location and decoder of one TLE field.

    Attributes:
        line: 1 or 2.
        start: 0-based start column.
        end: 0-based end column (exclusive).
        parser: Callable turning the raw slice into a value.
        kind: Human-readable type name used in error messages.
    """

    line: int
    start: int
    end: int
    parser: Callable[[str], Any]
    kind: str

    def extract(self, name: str, record: TLERecord) -> Any:
        line = record.line1 if self.line == 1 else record.line2
        raw = line[self.start:self.end]
        try:
            return self.parser(raw)
        except ValueError:
            logger.error("Cannot parse field %s from %r", name, raw)
            raise FieldParseError(name, raw, self.kind) from None


def _int(line: int, start: int, end: int) -> FieldSpec:
    return FieldSpec(line, start, end, _parse_int, "int")


def _float(line: int, start: int, end: int) -> FieldSpec:
    return FieldSpec(line, start, end, _parse_float, "float")


def _str(line: int, start: int, end: int) -> FieldSpec:
    return FieldSpec(line, start, end, _parse_str, "str")


FIELDS: dict[str, FieldSpec] = {
    # Line 1
    "line_number_1": _int(1, 0, 1),
    "catalog_number_1": _int(1, 2, 7),
    "classification": _str(1, 7, 8),
    "international_designator_year": _int(1, 9, 11),
    "international_designator_launch_number": _int(1, 11, 14),
    "international_designator_piece": _str(1, 14, 17),
    "epoch_year": _int(1, 18, 20),
    "epoch_day": _float(1, 20, 32),
    "first_time_derivative": _float(1, 33, 43),
    "second_time_derivative": FieldSpec(1, 44, 52, _parse_implied_exponent, "exponent float"),
    "bstar_drag": FieldSpec(1, 53, 61, _parse_implied_exponent, "exponent float"),
    "orbit_model": _int(1, 62, 63),
    "element_set_number": _int(1, 64, 68),
    "checksum_1": _int(1, 68, 69),
    # Line 2
    "line_number_2": _int(2, 0, 1),
    "catalog_number_2": _int(2, 2, 7),
    "inclination": _float(2, 8, 16),
    "right_ascension": _float(2, 17, 25),
    "eccentricity": FieldSpec(2, 26, 33, _parse_implied_decimal, "implied-decimal float"),
    "perigee": _float(2, 34, 42),
    "mean_anomaly": _float(2, 43, 51),
    "mean_motion": _float(2, 52, 63),
    "revolution_number": _int(2, 63, 68),
    "checksum_2": _int(2, 68, 69),
}


def get_field(tle: TLEInput, name: str) -> Any:
    """Extract one named field from a TLE.

    Args:
        tle: TLE text, lines, or record.
        name: A key of :data:`FIELDS`.

    Returns:
        The decoded value.

    Raises:
        KeyError: If ``name`` is not a known field.
        FieldParseError: If the column text does not parse.
    """
    spec = FIELDS[name]
    return spec.extract(name, parse_tle(tle))


class OrbitalElements:
    """Read-only attribute view over the fields of a TLE.

    Values are sliced from the lines on every access.

    Example::

        elements = OrbitalElements(parse_tle(text))
        elements.inclination  # 51.64
    """

    __slots__ = ("record",)

    def __init__(self, tle: TLEInput) -> None:
        object.__setattr__(self, "record", parse_tle(tle))

    def __getattr__(self, name: str) -> Any:
        spec = FIELDS.get(name)
        if spec is None:
            raise AttributeError(f"{type(self).__name__!r} has no field {name!r}")
        return spec.extract(name, self.record)

    def __setattr__(self, name: str, value: Any) -> None:
        raise AttributeError("OrbitalElements is read-only")

    def __dir__(self) -> list[str]:
        return sorted(set(super().__dir__()) | set(FIELDS))

    def as_dict(self) -> dict[str, Any]:
        return {name: spec.extract(name, self.record) for name, spec in FIELDS.items()}


def _getter(name: str) -> Callable[[TLEInput], Any]:
    spec = FIELDS[name]

    def getter(tle: TLEInput) -> Any:
        return spec.extract(name, parse_tle(tle))

    getter.__name__ = f"get_{name}"
    getter.__qualname__ = getter.__name__
    getter.__doc__ = f"Return the {name.replace('_', ' ')} field (line {spec.line}, columns {spec.start + 1}-{spec.end})."
    return getter


get_line_number_1 = _getter("line_number_1")
get_catalog_number_1 = _getter("catalog_number_1")
get_classification = _getter("classification")
get_international_designator_year = _getter("international_designator_year")
get_international_designator_launch_number = _getter("international_designator_launch_number")
get_international_designator_piece = _getter("international_designator_piece")
get_epoch_year = _getter("epoch_year")
get_epoch_day = _getter("epoch_day")
get_first_time_derivative = _getter("first_time_derivative")
get_second_time_derivative = _getter("second_time_derivative")
get_bstar_drag = _getter("bstar_drag")
get_orbit_model = _getter("orbit_model")
get_element_set_number = _getter("element_set_number")
get_checksum_1 = _getter("checksum_1")
get_line_number_2 = _getter("line_number_2")
get_catalog_number_2 = _getter("catalog_number_2")
get_inclination = _getter("inclination")
get_right_ascension = _getter("right_ascension")
get_eccentricity = _getter("eccentricity")
get_perigee = _getter("perigee")
get_mean_anomaly = _getter("mean_anomaly")
get_mean_motion = _getter("mean_motion")
get_revolution_number = _getter("revolution_number")
get_checksum_2 = _getter("checksum_2")


def _full_year(two_digit_year: int) -> int:
    return two_digit_year + 1900 if two_digit_year >= TLE_CENTURY_PIVOT else two_digit_year + 2000


def get_international_designator(tle: TLEInput) -> str:
    """Return the COSPAR designator, e.g. ``"1998-067A"``."""
    record = parse_tle(tle)
    year = _full_year(FIELDS["international_designator_year"].extract("international_designator_year", record))
    launch = FIELDS["international_designator_launch_number"].extract(
        "international_designator_launch_number", record
    )
    piece = FIELDS["international_designator_piece"].extract("international_designator_piece", record)
    return f"{year}-{launch:03d}{piece}"


def get_tle_epoch_timestamp(tle: TLEInput) -> int:
    """Decode the epoch of a TLE as milliseconds since the Unix epoch.

    The epoch day is 1-indexed: day 1.0 is midnight UTC on January 1st.

    Args:
        tle: TLE text, lines, or record.

    Returns:
        Epoch in integer milliseconds (floored).
    """
    record = parse_tle(tle)
    year = _full_year(FIELDS["epoch_year"].extract("epoch_year", record))
    day = FIELDS["epoch_day"].extract("epoch_day", record)
    year_start = datetime(year, 1, 1, tzinfo=timezone.utc)
    year_start_ms = int(year_start.timestamp()) * 1000
    return year_start_ms + math.floor((day - 1) * MS_PER_DAY)


def get_tle_epoch(tle: TLEInput) -> datetime:
    """Decode the epoch of a TLE as a UTC datetime (millisecond precision)."""
    return datetime(1970, 1, 1, tzinfo=timezone.utc) + timedelta(milliseconds=get_tle_epoch_timestamp(tle))


def get_average_orbit_time_ms(tle: TLEInput) -> float:
    """Return the orbital period implied by the mean motion, in ms.

    Raises:
        FieldParseError: If the mean motion is not positive.
    """
    record = parse_tle(tle)
    mean_motion = get_mean_motion(record)
    if mean_motion <= 0:
        spec = FIELDS["mean_motion"]
        raw = record.line2[spec.start:spec.end]
        logger.error("Mean motion of %s is not positive: %r", record.name, raw)
        raise FieldParseError("mean_motion", raw, "a positive revolutions-per-day value")
    return MS_PER_DAY / mean_motion
