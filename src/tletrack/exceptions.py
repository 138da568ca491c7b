"""Exception hierarchy for TLE parsing, validation and propagation.

Every error raised by tletrack derives from :class:`TLEError`, which is a
``ValueError`` so callers that already guard TLE handling with
``except ValueError`` keep working.
"""

from __future__ import annotations


class TLEError(ValueError):
    """Base class for all tletrack errors."""


class InvalidInputError(TLEError, TypeError):
    """The TLE input is not a string, a sequence of lines, or a TLERecord."""


class InvalidFormatError(TLEError):
    """The TLE input does not have the 2- or 3-line structure."""


class InvalidTLEError(TLEError):
    """A line number or checksum digit does not match."""


class FieldParseError(TLEError):
    """A fixed-column field does not parse as its expected type.

    Attributes:
        field: Name of the field being decoded.
        raw: The raw column text.
    """

    def __init__(self, field: str, raw: str, expected: str) -> None:
        super().__init__(f"Cannot parse TLE field {field!r} as {expected}: {raw!r}")
        self.field = field
        self.raw = raw


class PropagationError(TLEError):
    """SGP4 returned a non-zero error code.

    Attributes:
        error_code: The sgp4 error code (1-6).
    """

    def __init__(self, message: str, error_code: int) -> None:
        super().__init__(message)
        self.error_code = error_code
