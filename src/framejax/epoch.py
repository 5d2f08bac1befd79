"""The epoch module provides the ``TwoPartTime`` class for representing instants.

A ``TwoPartTime`` is a Julian Date split into two doubles ``(jd1, jd2)``
whose sum is the date.  Normally ``jd1`` is the Julian Date of 0h on the
calendar day (a half-integer) and ``jd2`` is the elapsed fraction of that
day.  The parts are never added together internally: differences are taken
part-by-part (large parts first) so that sub-nanosecond resolution survives
arithmetic on dates near JD 2.45e6.

The time scale is tracked by the caller; ``TwoPartTime`` only needs it when
converting to and from calendar fields, because a UTC day that ends in a
leap second is 86401 SI seconds long.

``TwoPartTime`` is registered as a JAX pytree so it can be passed through
``jax.jit``, ``jax.vmap`` and ``jax.lax.scan``.  The arithmetic methods use
JAX operations and are traceable; the calendar conversions are not.
"""

from __future__ import annotations

import re

import jax
import jax.numpy as jnp

from framejax.config import get_dtype, get_time_eq_tolerance
from framejax.constants import DAYSEC, DAYS_PER_CENTURY, JD2000, JD_MJD_OFFSET
from framejax.errors import InvalidDateError
from framejax.leap_seconds import LeapSecondTable, utc_day_offsets
from framejax.time import TimeScale, cal2jd, jd2cal

# Earliest supported calendar year (start of the TAI-UTC record)
_YEAR_MIN = 1960

# Valid ISO 8601 epoch string patterns
_EPOCH_PATTERNS = [
    # YYYY-MM-DD
    re.compile(r'^(\d{4})-(\d{2})-(\d{2})$'),
    # YYYY-MM-DDTHH:MM:SS[.fff][Z]
    re.compile(r'^(\d{4})-(\d{2})-(\d{2})[T ](\d{2}):(\d{2}):(\d{2}(?:\.\d+)?)Z?$'),
]


def _day_length(year: int, month: int, day: int, scale: TimeScale,
                table: LeapSecondTable | None) -> float:
    """Return the length of a calendar day in seconds of *scale*.

    Only UTC days differ from 86400 s: a day ending in a leap second is
    86400 + dleap seconds long.
    """
    if scale is not TimeScale.UTC:
        return DAYSEC
    _, _, dleap = utc_day_offsets(year, month, day, table=table)
    return DAYSEC + dleap


def dtf2d(
    year: int,
    month: int,
    day: int,
    hour: int = 0,
    minute: int = 0,
    second: float = 0.0,
    scale: TimeScale | str = TimeScale.UTC,
    *,
    table: LeapSecondTable | None = None,
) -> tuple[float, float]:
    """Convert calendar date and time of day to a two-part Julian Date.

    For UTC, the day length accounts for any leap second at the end of the
    day, and in the final minute of such a day seconds up to ``60 + dleap``
    are accepted (``23:59:60.5`` is valid on 2016-12-31).

    Args:
        year (int): Year, 1960 or later.
        month (int): Month, 1-12.
        day (int): Day of month.
        hour (int): Hour, 0-23. Default: ``0``
        minute (int): Minute, 0-59. Default: ``0``
        second (float): Second, ``>= 0`` and below the length of the minute.
            Default: ``0.0``
        scale: Time scale of the calendar fields. Default: UTC
        table: Leap-second table for UTC.  Defaults to the active snapshot.

    Returns:
        tuple[float, float]: ``(jd1, jd2)`` with ``jd1`` the Julian Date at
            0h and ``jd2`` the fraction of the day.

    Raises:
        InvalidDateError: If any field is out of range.
    """
    scale = TimeScale.parse(scale)
    if int(year) < _YEAR_MIN:
        raise InvalidDateError(f"Year {year} is before {_YEAR_MIN}")
    if not 0 <= hour <= 23:
        raise InvalidDateError(f"Hour {hour} is out of range 0-23")
    if not 0 <= minute <= 59:
        raise InvalidDateError(f"Minute {minute} is out of range 0-59")
    if not second >= 0.0:
        raise InvalidDateError(f"Second {second} is negative or not a number")

    djm0, djm = cal2jd(year, month, day)
    day_length = _day_length(year, month, day, scale, table)

    seclim = 60.0
    if hour == 23 and minute == 59:
        seclim += day_length - DAYSEC
    if not second < seclim:
        raise InvalidDateError(
            f"Second {second} is out of range for {year:04d}-{month:02d}-{day:02d} "
            f"{hour:02d}:{minute:02d} {scale.value} (limit {seclim})"
        )

    fraction = (60.0 * (60 * hour + minute) + second) / day_length
    return djm0 + djm, fraction


def d2dtf(
    jd1: float,
    jd2: float,
    scale: TimeScale | str = TimeScale.UTC,
    ndp: int = 9,
    *,
    table: LeapSecondTable | None = None,
) -> tuple[int, int, int, int, int, float]:
    """Convert a two-part Julian Date to calendar date and time of day.

    Inverse of :func:`dtf2d`.  The seconds are rounded to *ndp* decimal
    places; on a UTC leap-second day instants inside the leap second are
    reported as ``23:59:60.xxx``.

    Args:
        jd1 (float): Julian Date, part 1.
        jd2 (float): Julian Date, part 2.
        scale: Time scale of the date. Default: UTC
        ndp (int): Decimal places of the seconds. Default: ``9``
        table: Leap-second table for UTC.  Defaults to the active snapshot.

    Returns:
        tuple: ``(year, month, day, hour, minute, second)``.
    """
    scale = TimeScale.parse(scale)
    year, month, day, fraction = jd2cal(jd1, jd2)
    day_length = _day_length(year, month, day, scale, table)

    sod = round(fraction * day_length, ndp)
    if sod >= day_length:
        djm0, djm = cal2jd(year, month, day)
        year, month, day, _ = jd2cal(djm0, djm + 1.0)
        sod = 0.0

    if sod >= DAYSEC:
        # Inside the leap second at the end of the day
        return year, month, day, 23, 59, round(60.0 + (sod - DAYSEC), ndp)

    hour = int(sod // 3600.0)
    minute = int((sod - 3600.0 * hour) // 60.0)
    second = round(sod - 3600.0 * hour - 60.0 * minute, ndp)
    return year, month, day, hour, minute, second


class TwoPartTime:
    """An instant as a two-part Julian Date ``(jd1, jd2)``.

    The parts are stored as JAX scalars of the configured dtype (float64 by
    default).  Use ``jd()`` and ``mjd()`` only when a single user-facing
    value is needed; they are the only places where the parts are summed.

    Constructors:
        TwoPartTime(jd1, jd2)
        TwoPartTime.from_calendar(2004, 4, 6, 7, 51, 28.386009)
        TwoPartTime.from_string("2004-04-06T07:51:28.386009Z")
        TwoPartTime.from_jd(2451545.0)
        TwoPartTime.from_mjd(51544.5)
    """

    __slots__ = ('_jd1', '_jd2')

    def __init__(self, jd1: float, jd2: float = 0.0) -> None:
        """Initialize from the two Julian Date parts.

        Args:
            jd1: Julian Date, part 1.
            jd2: Julian Date, part 2. Default: ``0.0``
        """
        dtype = get_dtype()
        self._jd1 = jnp.asarray(jd1, dtype=dtype)
        self._jd2 = jnp.asarray(jd2, dtype=dtype)

    @classmethod
    def _from_internal(cls, jd1, jd2):
        """Create a TwoPartTime from raw JAX arrays without conversion.

        Used by pytree unflatten and arithmetic operators.

        Args:
            jd1: Julian Date, part 1.
            jd2: Julian Date, part 2.

        Returns:
            TwoPartTime: New instance.
        """
        obj = object.__new__(cls)
        obj._jd1 = jd1
        obj._jd2 = jd2
        return obj

    @classmethod
    def from_calendar(
        cls,
        year: int,
        month: int,
        day: int,
        hour: int = 0,
        minute: int = 0,
        second: float = 0.0,
        scale: TimeScale | str = TimeScale.UTC,
        *,
        table: LeapSecondTable | None = None,
    ) -> TwoPartTime:
        """Create from calendar fields in the given time scale.

        See :func:`dtf2d` for validation rules.

        Returns:
            TwoPartTime: ``jd1`` at 0h, ``jd2`` the day fraction.

        Raises:
            InvalidDateError: If any field is out of range.
        """
        jd1, jd2 = dtf2d(year, month, day, hour, minute, second, scale, table=table)
        return cls(jd1, jd2)

    @classmethod
    def from_string(
        cls,
        string: str,
        scale: TimeScale | str = TimeScale.UTC,
        *,
        table: LeapSecondTable | None = None,
    ) -> TwoPartTime:
        """Create from an ISO 8601 string.

        Supported formats:
            - ``YYYY-MM-DD``
            - ``YYYY-MM-DDTHH:MM:SS[.fff...][Z]``

        Args:
            string: ISO 8601 date/time string.
            scale: Time scale of the string. Default: UTC
            table: Leap-second table for UTC.

        Returns:
            TwoPartTime: Parsed instant.

        Raises:
            InvalidDateError: If the string is not in a supported format or
                a field is out of range.
        """
        for pattern in _EPOCH_PATTERNS:
            m = pattern.match(string.strip())
            if m:
                groups = m.groups()
                year, month, day = int(groups[0]), int(groups[1]), int(groups[2])
                hour, minute, second = 0, 0, 0.0
                if len(groups) == 6:
                    hour = int(groups[3])
                    minute = int(groups[4])
                    second = float(groups[5])
                return cls.from_calendar(
                    year, month, day, hour, minute, second, scale, table=table
                )

        raise InvalidDateError(
            f'Invalid time string: "{string}" is not ISO 8601 compliant'
        )

    @classmethod
    def from_jd(cls, jd: float, fraction: float = 0.0) -> TwoPartTime:
        """Create from a Julian Date and an optional extra day fraction."""
        return cls(jd, fraction)

    @classmethod
    def from_mjd(cls, mjd: float, fraction: float = 0.0) -> TwoPartTime:
        """Create from a Modified Julian Date and an optional extra day fraction."""
        return cls(JD_MJD_OFFSET, jnp.asarray(mjd, dtype=get_dtype()) + fraction)

    # Accessors

    @property
    def jd1(self) -> jax.Array:
        """Julian Date, part 1."""
        return self._jd1

    @property
    def jd2(self) -> jax.Array:
        """Julian Date, part 2."""
        return self._jd2

    def jd(self) -> jax.Array:
        """Return the Julian Date as a single value (lossy below ~20 us)."""
        return self._jd1 + self._jd2

    def mjd(self) -> jax.Array:
        """Return the Modified Julian Date as a single value."""
        return (self._jd1 - JD_MJD_OFFSET) + self._jd2

    def centuries_since_j2000(self) -> jax.Array:
        """Return Julian centuries elapsed since J2000.0 in this time scale."""
        return ((self._jd1 - JD2000) + self._jd2) / DAYS_PER_CENTURY

    def normalized(self) -> TwoPartTime:
        """Return the same instant with ``jd1`` at 0h and ``jd2`` in ``[0, 1)``.

        Traceable under ``jax.jit``.
        """
        whole = jnp.floor(self._jd1 - 0.5) + 0.5
        frac = (self._jd1 - whole) + self._jd2
        carry = jnp.floor(frac)
        return TwoPartTime._from_internal(whole + carry, frac - carry)

    # Arithmetic

    def add_seconds(self, seconds) -> TwoPartTime:
        """Return a new instant *seconds* later.

        The offset is added to ``jd2`` and whole days are carried into
        ``jd1`` so that ``jd2`` stays in ``[0, 1)``.  Seconds are those of
        the caller's time scale; no leap seconds are inserted.

        Args:
            seconds: Offset in seconds (may be negative).

        Returns:
            TwoPartTime: Shifted instant.
        """
        jd2 = self._jd2 + jnp.asarray(seconds, dtype=self._jd2.dtype) / DAYSEC
        carry = jnp.floor(jd2)
        return TwoPartTime._from_internal(self._jd1 + carry, jd2 - carry)

    def diff_seconds(self, other: TwoPartTime) -> jax.Array:
        """Return ``self - other`` in seconds.

        The large parts are differenced first so that no precision is lost
        to the magnitude of the Julian Date.

        Args:
            other: Instant in the same time scale.

        Returns:
            Difference in seconds.
        """
        return ((self._jd1 - other._jd1) + (self._jd2 - other._jd2)) * DAYSEC

    def diff_days(self, other: TwoPartTime) -> jax.Array:
        """Return ``self - other`` in days."""
        return (self._jd1 - other._jd1) + (self._jd2 - other._jd2)

    def __add__(self, seconds) -> TwoPartTime:
        if isinstance(seconds, TwoPartTime):
            return NotImplemented
        return self.add_seconds(seconds)

    def __sub__(self, other):
        """Subtract seconds, or take the difference of two instants in seconds."""
        if isinstance(other, TwoPartTime):
            return self.diff_seconds(other)
        return self.add_seconds(-jnp.asarray(other))

    # Comparison

    def isclose(self, other: TwoPartTime, tol_days: float | None = None) -> bool:
        """Return whether two instants agree within *tol_days*.

        Args:
            other: Instant in the same time scale.
            tol_days: Tolerance in days.  Defaults to
                :func:`~framejax.config.get_time_eq_tolerance` (1e-9 day at
                float64).

        Returns:
            bool: ``True`` if ``|self - other| <= tol_days``.
        """
        if tol_days is None:
            tol_days = get_time_eq_tolerance()
        return bool(jnp.abs(self.diff_days(other)) <= tol_days)

    def __eq__(self, other):
        if not isinstance(other, TwoPartTime):
            return NotImplemented
        return self.isclose(other)

    def __ne__(self, other):
        if not isinstance(other, TwoPartTime):
            return NotImplemented
        return not self.isclose(other)

    def __lt__(self, other):
        if not isinstance(other, TwoPartTime):
            return NotImplemented
        return bool(self.diff_days(other) < 0.0)

    def __le__(self, other):
        if not isinstance(other, TwoPartTime):
            return NotImplemented
        return self.__lt__(other) or self.__eq__(other)

    def __gt__(self, other):
        if not isinstance(other, TwoPartTime):
            return NotImplemented
        return bool(self.diff_days(other) > 0.0)

    def __ge__(self, other):
        if not isinstance(other, TwoPartTime):
            return NotImplemented
        return self.__gt__(other) or self.__eq__(other)

    __hash__ = None

    # Calendar

    def to_calendar(
        self,
        scale: TimeScale | str = TimeScale.UTC,
        ndp: int = 9,
        *,
        table: LeapSecondTable | None = None,
    ) -> tuple[int, int, int, int, int, float]:
        """Return calendar fields, inverse of :meth:`from_calendar`.

        Not traceable under ``jax.jit``.

        Args:
            scale: Time scale of this instant. Default: UTC
            ndp: Decimal places of the seconds. Default: ``9``
            table: Leap-second table for UTC.

        Returns:
            tuple: ``(year, month, day, hour, minute, second)``.
        """
        return d2dtf(float(self._jd1), float(self._jd2), scale, ndp, table=table)

    # String representations

    def isoformat(self, scale: TimeScale | str = TimeScale.UTC, ndp: int = 6) -> str:
        """Return an ISO 8601 string with *ndp* decimal places."""
        year, month, day, hour, minute, second = self.to_calendar(scale, ndp)
        width = 3 + ndp if ndp > 0 else 2
        return (f'{year:04d}-{month:02d}-{day:02d}T'
                f'{hour:02d}:{minute:02d}:{second:0{width}.{ndp}f}')

    def __str__(self):
        return f'TwoPartTime({float(self._jd1):.1f} + {float(self._jd2):.15f})'

    def __repr__(self):
        return f'TwoPartTime(jd1={float(self._jd1)!r}, jd2={float(self._jd2)!r})'


# Register TwoPartTime as a JAX pytree so it can be used with jit, vmap, scan, etc.
jax.tree_util.register_pytree_node(
    TwoPartTime,
    lambda t: ((t._jd1, t._jd2), None),
    lambda _, children: TwoPartTime._from_internal(*children),
)
