"""TAI-UTC lookups.

The scalar queries select the entry with the latest effective date not
after the query date, so at an entry's effective date the new offset
already applies.  They run eagerly (they may raise or log) and return
Python floats.  :func:`leap_seconds_tai_utc` is the JIT-compatible
vectorised counterpart.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import jax
import jax.numpy as jnp
from jax.typing import ArrayLike

from framejax.config import get_dtype, get_strict_checks
from framejax.errors import InvalidDateError, TableLookupMissError
from framejax.leap_seconds._state import get_leap_second_table
from framejax.leap_seconds._types import LeapSecondEntry, LeapSecondTable
from framejax.time import cal2jd, jd2cal

if TYPE_CHECKING:
    from framejax.epoch import TwoPartTime

logger = logging.getLogger(__name__)


def _resolve(table: LeapSecondTable | None) -> LeapSecondTable:
    return get_leap_second_table() if table is None else table


def _select_entry(
    table: LeapSecondTable, mjd: float, strict: bool | None
) -> LeapSecondEntry:
    """Return the entry in force at UTC *mjd*.

    Raises:
        TableLookupMissError: If *mjd* precedes the table and strict lookups
            are requested.
    """
    if strict is None:
        strict = get_strict_checks()

    mjds = jnp.asarray([e.mjd for e in table.entries], dtype=jnp.float64)
    idx = int(jnp.searchsorted(mjds, mjd, side="right")) - 1

    if idx < 0:
        if strict:
            raise TableLookupMissError("leap-second", mjd, table.first_mjd, table.last_mjd)
        logger.warning(
            "MJD %.6f precedes the leap-second table (starts %.1f); "
            "using the first entry",
            mjd,
            table.first_mjd,
        )
        idx = 0

    if table.expires_mjd is not None and mjd > table.expires_mjd:
        logger.warning(
            "MJD %.6f is past the leap-second table expiry (%.1f, source %s); "
            "re-provision the table",
            mjd,
            table.expires_mjd,
            table.source,
        )

    return table.entries[idx]


def tai_utc_at_mjd(
    mjd: float,
    *,
    table: LeapSecondTable | None = None,
    strict: bool | None = None,
) -> float:
    """Return TAI-UTC [s] at a UTC Modified Julian Date.

    Args:
        mjd: UTC MJD including the fraction of the day.
        table: Table to use.  Defaults to the active snapshot.
        strict: Raise instead of falling back when *mjd* precedes the
            table.  Defaults to :func:`~framejax.config.get_strict_checks`.

    Returns:
        TAI-UTC in seconds.
    """
    mjd = float(mjd)
    entry = _select_entry(_resolve(table), mjd, strict)
    return entry.offset(mjd)


def tai_minus_utc(
    year: int,
    month: int,
    day: int,
    fraction: float = 0.0,
    *,
    table: LeapSecondTable | None = None,
    strict: bool | None = None,
) -> float:
    """Return TAI-UTC [s] for a UTC calendar date.

    The entry is chosen from the date at 0h; *fraction* only matters for
    the drifting pre-1972 offsets.

    Args:
        year: UTC year.
        month: UTC month.
        day: UTC day.
        fraction: Fraction of the day elapsed, in ``[0, 1]``.
        table: Table to use.  Defaults to the active snapshot.
        strict: Raise instead of falling back when the date precedes the
            table.

    Returns:
        TAI-UTC in seconds.

    Raises:
        InvalidDateError: If the date is invalid or *fraction* is outside
            ``[0, 1]``.
        TableLookupMissError: If the date precedes the table and *strict*.
    """
    if not 0.0 <= fraction <= 1.0:
        raise InvalidDateError(f"Day fraction {fraction} is outside [0, 1]")
    _, mjd0 = cal2jd(year, month, day)
    entry = _select_entry(_resolve(table), mjd0, strict)
    return entry.offset(mjd0 + fraction)


def tai_utc(
    utc: TwoPartTime,
    *,
    table: LeapSecondTable | None = None,
    strict: bool | None = None,
) -> float:
    """Return TAI-UTC [s] at a UTC two-part time.

    Args:
        utc: Instant in UTC.
        table: Table to use.  Defaults to the active snapshot.
        strict: Raise instead of falling back when the date precedes the
            table.

    Returns:
        TAI-UTC in seconds.
    """
    year, month, day, fraction = jd2cal(float(utc.jd1), float(utc.jd2))
    return tai_minus_utc(year, month, day, fraction, table=table, strict=strict)


def utc_day_offsets(
    year: int,
    month: int,
    day: int,
    *,
    table: LeapSecondTable | None = None,
    strict: bool | None = None,
) -> tuple[float, float, float]:
    """Return TAI-UTC at 0h, its drift over the day, and any jump at 24h.

    The jump is the leap second (positive or negative) inserted at the end
    of the day; a UTC day that ends in a jump lasts ``86400 + dleap`` SI
    seconds.

    Args:
        year: UTC year.
        month: UTC month.
        day: UTC day.
        table: Table to use.  Defaults to the active snapshot.
        strict: Raise instead of falling back when the date precedes the
            table.

    Returns:
        tuple[float, float, float]: ``(dat0, dlod, dleap)`` in seconds.
    """
    table = _resolve(table)
    dat0 = tai_minus_utc(year, month, day, 0.0, table=table, strict=strict)
    dat12 = tai_minus_utc(year, month, day, 0.5, table=table, strict=strict)

    djm0, djm = cal2jd(year, month, day)
    year2, month2, day2, _ = jd2cal(djm0, djm + 1.0)
    dat24 = tai_minus_utc(year2, month2, day2, 0.0, table=table, strict=strict)

    dlod = 2.0 * (dat12 - dat0)
    dleap = dat24 - (dat0 + dlod)
    return dat0, dlod, dleap


def leap_seconds_tai_utc(
    mjd: ArrayLike, table: LeapSecondTable | None = None
) -> jax.Array:
    """Return TAI-UTC for UTC Modified Julian Dates, vectorised.

    JIT-compatible step lookup via ``jnp.searchsorted`` including the
    pre-1972 drift terms.  Dates before the first entry use the first
    entry; dates after the last entry use the last one.  No
    logging or strict checking happens here, use :func:`tai_utc_at_mjd`
    for checked scalar lookups.

    Args:
        mjd: UTC Modified Julian Date, scalar or array.
        table: Table to use.  Defaults to the active snapshot, captured at
            trace time.

    Returns:
        TAI-UTC in seconds.
    """
    table = _resolve(table)
    dtype = get_dtype()
    mjd = jnp.asarray(mjd, dtype=dtype)
    mjd_breaks = jnp.array([e.mjd for e in table.entries], dtype=dtype)
    offsets = jnp.array([e.tai_utc for e in table.entries], dtype=dtype)
    drift_mjd = jnp.array([e.drift_mjd for e in table.entries], dtype=dtype)
    drift_rate = jnp.array([e.drift_rate for e in table.entries], dtype=dtype)

    # searchsorted(side='right') returns the index of the first entry > mjd,
    # so idx-1 is the last entry <= mjd.
    idx = jnp.maximum(jnp.searchsorted(mjd_breaks, mjd, side="right") - 1, 0)

    return offsets[idx] + (mjd - drift_mjd[idx]) * drift_rate[idx]
