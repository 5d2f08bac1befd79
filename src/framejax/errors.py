"""Exception types raised by framejax.

All errors derive from :class:`FrameJaxError` so callers can catch every
library failure with a single clause. Where a built-in exception has the
same meaning the error also inherits from it, so existing ``ValueError``
or ``LookupError`` handlers keep working.
"""

from __future__ import annotations


class FrameJaxError(Exception):
    """Base class for all framejax errors."""


class InvalidDateError(FrameJaxError, ValueError):
    """Calendar fields are out of range or the date is not supported.

    Args:
        message: Human readable description of the offending field.
    """


class TableLookupMissError(FrameJaxError, LookupError):
    """An epoch falls outside the coverage of a leap-second or EOP table."""

    def __init__(self, table: str, mjd: float, lower: float, upper: float) -> None:
        self.table = table
        self.mjd = mjd
        self.lower = lower
        self.upper = upper
        super().__init__(
            f"MJD {mjd:.6f} is outside the {table} table range "
            f"[{lower:.1f}, {upper:.1f}]"
        )


class UnsupportedConversionError(FrameJaxError):
    """A time-scale conversion cannot be performed with the inputs given."""


class NonOrthogonalResultError(FrameJaxError, ArithmeticError):
    """A composed rotation matrix is not orthonormal within tolerance."""

    def __init__(self, label: str, error: float, tolerance: float) -> None:
        self.label = label
        self.error = error
        self.tolerance = tolerance
        super().__init__(
            f"{label}: orthonormality error {error:.3e} exceeds tolerance {tolerance:.1e}"
        )


class SeriesMismatchError(FrameJaxError, AssertionError):
    """Rotation products built from different nutation series were mixed."""
