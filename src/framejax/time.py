"""Calendar and Julian Date helpers.

Dates are handled as two-part Julian Dates so that no precision is lost
when the day number and the time of day are combined.  The conversions in
this module are plain Python (they branch on calendar fields) and are meant
to be called outside ``jax.jit``; the split values they produce feed the
traceable kernels in :mod:`framejax.sofa`.

The Gregorian calendar is used for all dates, proleptically before 1582.
"""

from __future__ import annotations

import enum
import math

from framejax.constants import JD_MJD_OFFSET
from framejax.errors import InvalidDateError

# Earliest year accepted by the calendar conversion (JD 0 is -4712 Jan 1.5
# in the Julian calendar, 4713 BC)
_YEAR_MIN = -4799

# Julian Date limits for the inverse conversion
_JD_MIN = -68569.5
_JD_MAX = 1.0e9

_MONTH_DAYS = (31, 28, 31, 30, 31, 30, 31, 31, 30, 31, 30, 31)


class TimeScale(enum.Enum):
    """Time scales supported by framejax.

    Attributes:
        UTC: Coordinated Universal Time.
        TAI: International Atomic Time.
        TT: Terrestrial Time.
        TCG: Geocentric Coordinate Time.
        TDB: Barycentric Dynamical Time.
        TCB: Barycentric Coordinate Time.
        UT1: Universal Time, tied to the Earth's rotation.
    """

    UTC = "UTC"
    TAI = "TAI"
    TT = "TT"
    TCG = "TCG"
    TDB = "TDB"
    TCB = "TCB"
    UT1 = "UT1"

    @classmethod
    def parse(cls, value: str | TimeScale) -> TimeScale:
        """Return the time scale named by *value* (case-insensitive).

        Args:
            value: Scale name such as ``"utc"`` or an existing member.

        Returns:
            TimeScale: Matching member.

        Raises:
            ValueError: If *value* does not name a known scale.
        """
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().upper())
        except ValueError:
            raise ValueError(
                f"Unknown time scale {value!r}. Must be one of: "
                f"{', '.join(m.value for m in cls)}"
            ) from None


def is_leap_year(year: int) -> bool:
    """Return whether *year* is a Gregorian leap year."""
    return year % 4 == 0 and (year % 100 != 0 or year % 400 == 0)


def days_in_month(year: int, month: int) -> int:
    """Return the number of days in a Gregorian month.

    Args:
        year (int): Year.
        month (int): Month, 1-12.

    Returns:
        int: Number of days in the month.

    Raises:
        InvalidDateError: If *month* is out of range.
    """
    if not 1 <= month <= 12:
        raise InvalidDateError(f"Month {month} is out of range 1-12")
    if month == 2 and is_leap_year(year):
        return 29
    return _MONTH_DAYS[month - 1]


def cal2jd(year: int, month: int, day: int) -> tuple[float, float]:
    """Convert a Gregorian calendar date to a two-part Julian Date at 0h.

    Args:
        year (int): Year.
        month (int): Month, 1-12.
        day (int): Day of month.

    Returns:
        tuple[float, float]: ``(2400000.5, mjd)``, the MJD zero-point and
            the Modified Julian Date of 0h on the given day.

    Raises:
        InvalidDateError: If any field is out of range.

    References:

        1. P. K. Seidelmann (ed.), *Explanatory Supplement to the
           Astronomical Almanac*, 1992, Section 12.92.
    """
    year, month, day = int(year), int(month), int(day)
    if year < _YEAR_MIN:
        raise InvalidDateError(f"Year {year} is before {_YEAR_MIN}")
    ndays = days_in_month(year, month)
    if not 1 <= day <= ndays:
        raise InvalidDateError(
            f"Day {day} is out of range 1-{ndays} for {year:04d}-{month:02d}"
        )

    my = -1 if month <= 2 else 0
    ypmy = year + my
    mjd = (
        (1461 * (ypmy + 4800)) // 4
        + (367 * (month - 2 - 12 * my)) // 12
        - (3 * ((ypmy + 4900) // 100)) // 4
        + day
        - 2432076
    )
    return JD_MJD_OFFSET, float(mjd)


def _dnint(x: float) -> float:
    """Round to the nearest whole number, halves away from zero."""
    return math.floor(x + 0.5) if x >= 0.0 else math.ceil(x - 0.5)


def jd2cal(dj1: float, dj2: float) -> tuple[int, int, int, float]:
    """Convert a two-part Julian Date to a Gregorian calendar date.

    The day fraction is formed with compensated summation so that the split
    of the input between the two parts does not affect the result.

    Args:
        dj1 (float): Julian Date, part 1.
        dj2 (float): Julian Date, part 2.

    Returns:
        tuple[int, int, int, float]: ``(year, month, day, fraction)`` where
            fraction is the elapsed fraction of the civil day, in ``[0, 1)``.

    Raises:
        InvalidDateError: If the Julian Date is outside the supported range.
    """
    dj1, dj2 = float(dj1), float(dj2)
    dj = dj1 + dj2
    if not _JD_MIN <= dj <= _JD_MAX:
        raise InvalidDateError(f"Julian Date {dj} is outside the supported range")

    # Separate whole days from fractions in [-0.5, 0.5]
    d1 = _dnint(dj1)
    d2 = _dnint(dj2)
    f1 = dj1 - d1
    f2 = dj2 - d2
    jd = int(d1) + int(d2)

    f = math.fsum((f1, f2, 0.5))
    if f < 0.0:
        jd -= 1
        f = math.fsum((f1, f2, 1.5))
    elif f >= 1.0:
        jd += 1
        f = math.fsum((f1, f2, -0.5))
    if f >= 1.0:
        jd += 1
        f = 0.0

    # Fliegel & Van Flandern
    ell = jd + 68569
    n = (4 * ell) // 146097
    ell -= (146097 * n + 3) // 4
    i = (4000 * (ell + 1)) // 1461001
    ell -= (1461 * i) // 4 - 31
    k = (80 * ell) // 2447
    day = ell - (2447 * k) // 80
    ell = k // 11
    month = k + 2 - 12 * ell
    year = 100 * (n - 49) + i + ell

    return year, month, day, f


def jd_to_mjd(jd: float) -> float:
    """Convert Julian Date to Modified Julian Date.

    Args:
        jd (float): Julian Date.

    Returns:
        Modified Julian Date.
    """
    return jd - JD_MJD_OFFSET


def mjd_to_jd(mjd: float) -> float:
    """Convert Modified Julian Date to Julian Date.

    Args:
        mjd (float): Modified Julian Date.

    Returns:
        Julian Date.
    """
    return mjd + JD_MJD_OFFSET
