"""JIT-compatible EOP interpolation and query functions.

Interpolation uses only JAX primitives (``jnp.searchsorted``, array
indexing, ``jnp.where``) and works inside ``jax.jit`` and ``jax.vmap``.

The ``extrapolation`` argument is resolved at trace time.  Range checks
that need a concrete value (raising for ``ERROR``, warning for ``HOLD``)
run only when the query MJD is concrete; inside a trace ``ERROR`` produces
NaN instead of raising.
"""

from __future__ import annotations

import logging

import jax
import jax.numpy as jnp
from jax import Array
from jax.typing import ArrayLike

from framejax.eop._types import EOPData, EOPExtrapolation
from framejax.errors import TableLookupMissError
from framejax.leap_seconds import LeapSecondTable, leap_seconds_tai_utc

logger = logging.getLogger(__name__)


def _check_range(eop: EOPData, mjd: Array, extrapolation: EOPExtrapolation) -> None:
    """Raise or warn for concrete out-of-range queries."""
    try:
        outside = bool(jnp.any((mjd < eop.mjd_min) | (mjd > eop.mjd_max)))
    except jax.errors.ConcretizationTypeError:
        return
    if not outside:
        return

    lower, upper = float(eop.mjd_min), float(eop.mjd_max)
    if extrapolation == EOPExtrapolation.ERROR:
        raise TableLookupMissError("EOP", float(jnp.ravel(mjd)[0]), lower, upper)
    logger.warning(
        "EOP query at MJD %s is outside the table range [%s, %s]; "
        "holding the boundary values",
        jnp.ravel(mjd)[0],
        lower,
        upper,
    )


def _bracket(eop: EOPData, mjd: Array) -> tuple[Array, Array, Array]:
    """Return the bracketing row indices and the fraction between them."""
    n = eop.mjd.shape[0]

    idx = jnp.searchsorted(eop.mjd, mjd, side="right")

    # Bracket indices, clamped to valid range
    idx_lo = jnp.clip(idx - 1, 0, n - 1)
    idx_hi = jnp.clip(idx, 0, n - 1)

    mjd_lo = eop.mjd[idx_lo]
    dmjd = eop.mjd[idx_hi] - mjd_lo
    frac = jnp.where(dmjd > 0.0, (mjd - mjd_lo) / dmjd, 0.0)
    return idx_lo, idx_hi, frac


def _mask_range(
    eop: EOPData, mjd: Array, value: Array, extrapolation: EOPExtrapolation
) -> Array:
    if extrapolation == EOPExtrapolation.ERROR:
        in_range = (mjd >= eop.mjd_min) & (mjd <= eop.mjd_max)
        return jnp.where(in_range, value, jnp.nan)
    return value


def _interpolate_scalar(
    eop: EOPData,
    mjd: Array,
    values: Array,
    extrapolation: EOPExtrapolation = EOPExtrapolation.HOLD,
) -> Array:
    """Linearly interpolate a single EOP field at the given MJD.

    Args:
        eop: EOP table with sorted MJD array.
        mjd: MJD to query.
        values: The EOP field array to interpolate, shape ``(N,)``.
        extrapolation: Extrapolation mode for out-of-range queries.

    Returns:
        Interpolated value.
    """
    idx_lo, idx_hi, frac = _bracket(eop, mjd)
    val_lo = values[idx_lo]
    interpolated = val_lo + frac * (values[idx_hi] - val_lo)
    return _mask_range(eop, mjd, interpolated, extrapolation)


def _interpolate_ut1_utc(
    eop: EOPData,
    mjd: Array,
    extrapolation: EOPExtrapolation,
    leap_seconds: LeapSecondTable | None,
) -> Array:
    """Interpolate UT1-UTC without blending across a leap second.

    UT1-UTC steps by a whole second when TAI-UTC changes.  Where the
    leap-second table shows a change between two bracketing rows, the
    whole-second part of the row difference is taken out before the linear
    blend and put back only for queries at or after the leap instant.
    """
    idx_lo, idx_hi, frac = _bracket(eop, mjd)
    mjd_lo = eop.mjd[idx_lo]
    val_lo = eop.ut1_utc[idx_lo]
    val_hi = eop.ut1_utc[idx_hi]

    dat_lo = leap_seconds_tai_utc(mjd_lo, leap_seconds)
    dat_hi = leap_seconds_tai_utc(eop.mjd[idx_hi], leap_seconds)
    dat_q = leap_seconds_tai_utc(mjd, leap_seconds)

    step = jnp.where(dat_hi != dat_lo, jnp.round(val_hi - val_lo), 0.0)
    interpolated = val_lo + frac * (val_hi - step - val_lo)
    interpolated = interpolated + jnp.where(dat_q != dat_lo, step, 0.0)
    return _mask_range(eop, mjd, interpolated, extrapolation)


def _as_mjd(eop: EOPData, mjd: ArrayLike, extrapolation: EOPExtrapolation) -> Array:
    mjd = jnp.asarray(mjd, dtype=eop.mjd.dtype)
    _check_range(eop, mjd, extrapolation)
    return mjd


def get_ut1_utc(
    eop: EOPData,
    mjd: ArrayLike,
    extrapolation: EOPExtrapolation = EOPExtrapolation.HOLD,
    leap_seconds: LeapSecondTable | None = None,
) -> Array:
    """Query UT1-UTC at the given MJD.

    The leap-second step between two table rows is kept as a step, not
    spread over the interval.

    Args:
        eop: EOP table.
        mjd: UTC Modified Julian Date to query.
        extrapolation: Extrapolation mode for out-of-range queries.
        leap_seconds: Table locating the leap seconds.  Defaults to the
            active snapshot.

    Returns:
        UT1-UTC offset [seconds].

    Examples:
        ```python
        from framejax.eop import static_eop, get_ut1_utc
        eop = static_eop(ut1_utc=-0.2)
        ut1_utc = get_ut1_utc(eop, 59569.0)
        ```
    """
    mjd = _as_mjd(eop, mjd, extrapolation)
    return _interpolate_ut1_utc(eop, mjd, extrapolation, leap_seconds)


def get_pm(
    eop: EOPData,
    mjd: ArrayLike,
    extrapolation: EOPExtrapolation = EOPExtrapolation.HOLD,
) -> tuple[Array, Array]:
    """Query polar motion at the given MJD.

    Args:
        eop: EOP table.
        mjd: Modified Julian Date to query.
        extrapolation: Extrapolation mode for out-of-range queries.

    Returns:
        Tuple of (pm_x, pm_y) [rad].
    """
    mjd = _as_mjd(eop, mjd, extrapolation)
    pm_x = _interpolate_scalar(eop, mjd, eop.pm_x, extrapolation)
    pm_y = _interpolate_scalar(eop, mjd, eop.pm_y, extrapolation)
    return pm_x, pm_y


def get_dxdy(
    eop: EOPData,
    mjd: ArrayLike,
    extrapolation: EOPExtrapolation = EOPExtrapolation.HOLD,
) -> tuple[Array, Array]:
    """Query celestial pole offsets at the given MJD.

    Values may be NaN where the table has no dX/dY for the epoch.

    Args:
        eop: EOP table.
        mjd: Modified Julian Date to query.
        extrapolation: Extrapolation mode for out-of-range queries.

    Returns:
        Tuple of (dX, dY) [rad].
    """
    mjd = _as_mjd(eop, mjd, extrapolation)
    dx = _interpolate_scalar(eop, mjd, eop.dX, extrapolation)
    dy = _interpolate_scalar(eop, mjd, eop.dY, extrapolation)
    return dx, dy


def get_lod(
    eop: EOPData,
    mjd: ArrayLike,
    extrapolation: EOPExtrapolation = EOPExtrapolation.HOLD,
) -> Array:
    """Query length-of-day excess at the given MJD [seconds]."""
    mjd = _as_mjd(eop, mjd, extrapolation)
    return _interpolate_scalar(eop, mjd, eop.lod, extrapolation)


def get_eop(
    eop: EOPData,
    mjd: ArrayLike,
    extrapolation: EOPExtrapolation = EOPExtrapolation.HOLD,
    leap_seconds: LeapSecondTable | None = None,
) -> tuple[Array, Array, Array, Array, Array, Array]:
    """Query all EOP values at the given MJD.

    Args:
        eop: EOP table.
        mjd: Modified Julian Date to query.
        extrapolation: Extrapolation mode for out-of-range queries.
        leap_seconds: Table locating the leap seconds for UT1-UTC.

    Returns:
        Tuple of (pm_x, pm_y, ut1_utc, lod, dX, dY).
        Units: pm_x/pm_y [rad], ut1_utc [s], lod [s], dX/dY [rad].
    """
    mjd = _as_mjd(eop, mjd, extrapolation)
    pm_x = _interpolate_scalar(eop, mjd, eop.pm_x, extrapolation)
    pm_y = _interpolate_scalar(eop, mjd, eop.pm_y, extrapolation)
    ut1_utc = _interpolate_ut1_utc(eop, mjd, extrapolation, leap_seconds)
    lod = _interpolate_scalar(eop, mjd, eop.lod, extrapolation)
    dx = _interpolate_scalar(eop, mjd, eop.dX, extrapolation)
    dy = _interpolate_scalar(eop, mjd, eop.dY, extrapolation)
    return pm_x, pm_y, ut1_utc, lod, dx, dy
