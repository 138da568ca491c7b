"""TLE (Two-Line Element) parsing and checksum validation.

This module turns raw TLE text into immutable :class:`TLERecord` objects
and checks the per-line modulo-10 checksum digit.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Union

from tletrack.exceptions import InvalidFormatError, InvalidInputError, InvalidTLEError, TLEError

logger = logging.getLogger(__name__)

DEFAULT_NAME = "Unknown"


@dataclass(frozen=True)
class TLERecord:
    """A parsed Two-Line Element set.

    Attributes:
        name: Satellite name (line 0), or ``"Unknown"`` when absent.
        line1: TLE line 1, stripped.
        line2: TLE line 2, stripped.
    """

    name: str
    line1: str
    line2: str

    @classmethod
    def from_lines(cls, line1: str, line2: str, name: str = DEFAULT_NAME) -> TLERecord:
        """Build a record from two (or three) lines, stripping whitespace.

        Args:
            line1: TLE line 1.
            line2: TLE line 2.
            name: Optional satellite name (line 0).

        Returns:
            A TLERecord. Checksums are not verified here.
        """
        return cls(name=name.strip() or DEFAULT_NAME, line1=line1.strip(), line2=line2.strip())

    @property
    def lines(self) -> tuple[str, str]:
        return self.line1, self.line2

    def __str__(self) -> str:
        return f"{self.name}\n{self.line1}\n{self.line2}"


TLEInput = Union[str, Sequence[str], TLERecord]


def parse_tle(tle: TLEInput) -> TLERecord:
    """Parse a single TLE from text, a sequence of lines, or a record.

    Handles both 2-line and 3-line (with name) formats. Whitespace around
    every line and around the whole block is ignored.

    Args:
        tle: Raw TLE text, a list/tuple of lines, or an existing TLERecord.

    Returns:
        The parsed TLERecord. Records are returned unchanged.

    Raises:
        InvalidInputError: If ``tle`` is of an unsupported type.
        InvalidFormatError: If fewer than 2 or more than 3 non-blank lines remain.
    """
    if isinstance(tle, TLERecord):
        return tle

    if isinstance(tle, str):
        raw_lines = tle.strip().splitlines()
    elif isinstance(tle, Sequence) and all(isinstance(line, str) for line in tle):
        raw_lines = list(tle)
    else:
        logger.error("TLE input is invalid: %r", type(tle).__name__)
        raise InvalidInputError(f"TLE input is invalid: expected str or lines, got {type(tle).__name__}")

    lines = [line.strip() for line in raw_lines if line.strip()]

    if len(lines) < 2:
        raise InvalidFormatError(f"TLE input must have at least 2 lines, got {len(lines)}")
    if len(lines) > 3:
        raise InvalidFormatError(
            f"TLE input must have at most 3 lines, got {len(lines)}; use parse_tle_catalog for multiple TLEs"
        )

    if len(lines) == 2:
        return TLERecord(name=DEFAULT_NAME, line1=lines[0], line2=lines[1])
    return TLERecord(name=lines[0], line1=lines[1], line2=lines[2])


def parse_tle_catalog(text: str) -> list[TLERecord]:
    """Parse one or more TLEs from bulk text.

    Accepts a mix of 2-line and 3-line (with name) records, as served by
    CelesTrak and Space-Track. Lines that cannot start a record are skipped.

    Args:
        text: Raw TLE text, one or more TLE sets separated by newlines.

    Returns:
        A list of TLERecords in input order.
    """
    lines = [l.strip() for l in text.strip().splitlines() if l.strip()]
    records: list[TLERecord] = []
    i = 0

    while i < len(lines):
        if lines[i].startswith("1 ") and i + 1 < len(lines) and lines[i + 1].startswith("2 "):
            records.append(TLERecord.from_lines(lines[i], lines[i + 1]))
            i += 2
        elif (
            not lines[i].startswith("1 ")
            and not lines[i].startswith("2 ")
            and i + 2 < len(lines)
            and lines[i + 1].startswith("1 ")
            and lines[i + 2].startswith("2 ")
        ):
            records.append(TLERecord.from_lines(lines[i + 1], lines[i + 2], name=lines[i]))
            i += 3
        else:
            logger.warning("Skipping unrecognized TLE line: %r", lines[i])
            i += 1

    logger.debug("Parsed %d TLEs from text", len(records))
    return records


def tle_line_checksum(line: str) -> int:
    """Compute the modulo-10 checksum of a TLE line.

    Every character except the last (the checksum itself) is counted:
    digits add their value, ``-`` adds 1, everything else adds 0.

    Args:
        line: A TLE line, including its trailing checksum digit.

    Returns:
        The expected checksum digit, 0-9.
    """
    total = 0
    for char in line[:-1]:
        if char.isascii() and char.isdigit():
            total += int(char)
        elif char == "-":
            total += 1
    return total % 10


def _line_problem(line: str, line_number: int) -> str | None:
    """Describe why a line fails validation, or return None if it passes."""
    if not line.startswith(str(line_number)):
        return f"line {line_number} does not start with {line_number}"
    if not (line[-1:].isascii() and line[-1:].isdigit()):
        return f"line {line_number} has no checksum digit"
    expected = tle_line_checksum(line)
    if int(line[-1]) != expected:
        return f"line {line_number} checksum {line[-1]} != computed {expected}"
    return None


def is_valid_tle(tle: TLEInput) -> bool:
    """Check line numbers and checksum digits of a TLE.

    Returns:
        True if the input parses and both lines carry the right line number
        and checksum, False otherwise.
    """
    try:
        record = parse_tle(tle)
    except TLEError:
        return False
    return _line_problem(record.line1, 1) is None and _line_problem(record.line2, 2) is None


def validate_tle(tle: TLEInput) -> TLERecord:
    """Parse a TLE and require valid line numbers and checksums.

    Raises:
        InvalidInputError: If ``tle`` is of an unsupported type.
        InvalidFormatError: If the input does not have 2 or 3 lines.
        InvalidTLEError: If a line number or checksum does not match.
    """
    record = parse_tle(tle)
    for line, number in ((record.line1, 1), (record.line2, 2)):
        problem = _line_problem(line, number)
        if problem is not None:
            logger.error("Invalid TLE %r: %s", record.name, problem)
            raise InvalidTLEError(f"Invalid TLE {record.name!r}: {problem}")
    return record
