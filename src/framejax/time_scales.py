"""Conversions between the UTC, TAI, TT, TCG, TDB, TCB and UT1 time scales.

Each pairwise conversion maps one :class:`~framejax.epoch.TwoPartTime` to
another and preserves the split of the input: the larger part is passed
through untouched and the correction is applied to the smaller one.  Only
the UTC conversions consult a table (TAI-UTC); everything else is a fixed
formula.

Two conversions need data the library does not compute itself:

- TT <-> TDB needs the periodic ``TDB - TT`` correction (an ephemeris
  quantity).  It must be supplied by the caller, as a number of seconds or
  as a callable of the epoch.  :func:`tdb_minus_tt_usno` is available as an
  explicit choice but is never applied implicitly.
- UTC <-> UT1 needs ``UT1 - UTC`` (``dut1``) from Earth-orientation data.

:class:`TimeScaleConverter` chains the pairwise conversions along a fixed
graph (UTC-TAI-TT-TCG, TT-TDB-TCB, UTC-UT1), so any two scales can be
converted and the same route is always taken for the same pair.

Uses routines and computations derived from software provided by SOFA
under license. Does not itself constitute software provided by and/or
endorsed by SOFA.
"""

from __future__ import annotations

import logging
from collections import deque
from collections.abc import Callable
from typing import Union

import jax.numpy as jnp

from framejax.constants import (
    DAYSEC,
    ELB,
    ELG,
    JD_MJD_OFFSET,
    MJD1977,
    MJD1977_TT,
    TDB0,
    TT_TAI,
)
from framejax.eop import EarthOrientationParameters, EOPData, get_eop_data, get_ut1_utc
from framejax.epoch import TwoPartTime
from framejax.errors import UnsupportedConversionError
from framejax.leap_seconds import (
    LeapSecondTable,
    tai_minus_utc,
    utc_day_offsets,
)
from framejax.time import TimeScale, cal2jd, jd2cal

logger = logging.getLogger(__name__)

TdbCorrection = Union[float, Callable[[TwoPartTime], float]]
"""``TDB - TT`` in seconds, or a callable returning it for an epoch."""

Dut1Source = Union[float, EarthOrientationParameters, EOPData]
"""Source of ``UT1 - UTC``: seconds, resolved parameters or an EOP table."""

# Fixed-point iterations for inverting UTC-based conversions
_INVERSE_ITERATIONS = 3


def _parts(t: TwoPartTime) -> tuple[float, float, bool]:
    """Return ``(big, small, big_first)`` for a two-part time."""
    t1, t2 = float(t.jd1), float(t.jd2)
    if abs(t1) >= abs(t2):
        return t1, t2, True
    return t2, t1, False


def _assemble(big: float, small: float, big_first: bool) -> TwoPartTime:
    return TwoPartTime(big, small) if big_first else TwoPartTime(small, big)


# ---------------------------------------------------------------------------
# UTC <-> TAI
# ---------------------------------------------------------------------------


def _utc_to_tai(u1: float, u2: float, table: LeapSecondTable | None) -> float:
    """Return the small TAI part for UTC ``(u1, u2)`` with ``|u1| >= |u2|``."""
    year, month, day, fd = jd2cal(u1, u2)
    dat0, dlod, dleap = utc_day_offsets(year, month, day, table=table)

    # Remove the scaling that spreads a leap second over the day, then
    # scale pre-1972 UTC seconds to SI seconds
    fd *= (DAYSEC + dleap) / DAYSEC
    fd *= (DAYSEC + dlod) / DAYSEC

    z1, z2 = cal2jd(year, month, day)
    a2 = z1 - u1
    a2 += z2
    a2 += fd + dat0 / DAYSEC
    return a2


def utc_to_tai(utc: TwoPartTime, *, table: LeapSecondTable | None = None) -> TwoPartTime:
    """Convert UTC to TAI.

    Within a leap-second day the UTC day fraction is scaled to the longer
    day, so ``23:59:60.5`` maps to the TAI instant half a second into the
    leap second.

    Args:
        utc: Instant in UTC.
        table: Leap-second table.  Defaults to the active snapshot.

    Returns:
        TwoPartTime: Same instant in TAI.
    """
    u1, u2, big_first = _parts(utc)
    return _assemble(u1, _utc_to_tai(u1, u2, table), big_first)


def tai_to_utc(tai: TwoPartTime, *, table: LeapSecondTable | None = None) -> TwoPartTime:
    """Convert TAI to UTC.

    Inverts :func:`utc_to_tai` by fixed-point iteration (three passes are
    enough for convergence to machine precision).  TAI instants that fall
    inside an inserted leap second map to the UTC leap-second representation
    of the same day.

    Args:
        tai: Instant in TAI.
        table: Leap-second table.  Defaults to the active snapshot.

    Returns:
        TwoPartTime: Same instant in UTC.
    """
    a1, a2, big_first = _parts(tai)
    u2 = a2
    for _ in range(_INVERSE_ITERATIONS):
        g2 = _utc_to_tai(a1, u2, table)
        u2 += a2 - g2
    return _assemble(a1, u2, big_first)


# ---------------------------------------------------------------------------
# TAI <-> TT
# ---------------------------------------------------------------------------


def tai_to_tt(tai: TwoPartTime) -> TwoPartTime:
    """Convert TAI to TT (adds exactly 32.184 s)."""
    t1, t2, big_first = _parts(tai)
    return _assemble(t1, t2 + TT_TAI / DAYSEC, big_first)


def tt_to_tai(tt: TwoPartTime) -> TwoPartTime:
    """Convert TT to TAI (subtracts exactly 32.184 s)."""
    t1, t2, big_first = _parts(tt)
    return _assemble(t1, t2 - TT_TAI / DAYSEC, big_first)


# ---------------------------------------------------------------------------
# TT <-> TCG
# ---------------------------------------------------------------------------


def tt_to_tcg(tt: TwoPartTime) -> TwoPartTime:
    """Convert TT to TCG.

    ``TCG = TT + (TT - T77) * L_G / (1 - L_G)`` where ``T77`` is
    1977-01-01T00:00:32.184 TT.

    Args:
        tt: Instant in TT.

    Returns:
        TwoPartTime: Same instant in TCG.
    """
    t1, t2, big_first = _parts(tt)
    elgg = ELG / (1.0 - ELG)
    return _assemble(t1, t2 + ((t1 - JD_MJD_OFFSET) + (t2 - MJD1977_TT)) * elgg, big_first)


def tcg_to_tt(tcg: TwoPartTime) -> TwoPartTime:
    """Convert TCG to TT, ``TT = TCG - (TCG - T77) * L_G``.

    Args:
        tcg: Instant in TCG.

    Returns:
        TwoPartTime: Same instant in TT.
    """
    t1, t2, big_first = _parts(tcg)
    return _assemble(t1, t2 - ((t1 - JD_MJD_OFFSET) + (t2 - MJD1977_TT)) * ELG, big_first)


# ---------------------------------------------------------------------------
# TT <-> TDB
# ---------------------------------------------------------------------------


def tt_to_tdb(tt: TwoPartTime, dtr: float) -> TwoPartTime:
    """Convert TT to TDB given the correction ``TDB - TT``.

    Args:
        tt: Instant in TT.
        dtr: ``TDB - TT`` in seconds.

    Returns:
        TwoPartTime: Same instant in TDB.
    """
    t1, t2, big_first = _parts(tt)
    return _assemble(t1, t2 + float(dtr) / DAYSEC, big_first)


def tdb_to_tt(tdb: TwoPartTime, dtr: float) -> TwoPartTime:
    """Convert TDB to TT given the correction ``TDB - TT``.

    Args:
        tdb: Instant in TDB.
        dtr: ``TDB - TT`` in seconds.

    Returns:
        TwoPartTime: Same instant in TT.
    """
    t1, t2, big_first = _parts(tdb)
    return _assemble(t1, t2 - float(dtr) / DAYSEC, big_first)


def tdb_minus_tt_usno(t: TwoPartTime) -> float:
    """Approximate ``TDB - TT`` [s] from the USNO Circular 179 series.

    Accurate to about 10 microseconds between 1600 and 2200.  This is an
    opt-in correction: pass it as ``tdb_correction`` where that accuracy is
    acceptable.

    Args:
        t: Instant in TT (TDB gives the same result to the stated accuracy).

    Returns:
        TDB - TT in seconds.

    References:

        1. G. H. Kaplan, *The IAU Resolutions on Astronomical Reference
           Systems, Time Scales, and Earth Rotation Models*, USNO Circular
           179, 2005, eq. 2.6.
    """
    tc = float(t.centuries_since_j2000())
    return float(
        0.001657 * jnp.sin(628.3076 * tc + 6.2401)
        + 0.000022 * jnp.sin(575.3385 * tc + 4.2970)
        + 0.000014 * jnp.sin(1256.6152 * tc + 6.1969)
        + 0.000005 * jnp.sin(606.9777 * tc + 4.0212)
        + 0.000005 * jnp.sin(52.9691 * tc + 0.4444)
        + 0.000002 * jnp.sin(21.3299 * tc + 5.5431)
        + 0.000010 * tc * jnp.sin(628.3076 * tc + 4.2490)
    )


# ---------------------------------------------------------------------------
# TDB <-> TCB
# ---------------------------------------------------------------------------


def tdb_to_tcb(tdb: TwoPartTime) -> TwoPartTime:
    """Convert TDB to TCB (IAU 2006 Resolution B3).

    Args:
        tdb: Instant in TDB.

    Returns:
        TwoPartTime: Same instant in TCB.
    """
    t1, t2, big_first = _parts(tdb)
    t77td = JD_MJD_OFFSET + MJD1977
    t77tf = TT_TAI / DAYSEC
    tdb0 = TDB0 / DAYSEC
    elbb = ELB / (1.0 - ELB)

    d = t77td - t1
    f = t2 - tdb0
    return _assemble(t1, f - (d - (f - t77tf)) * elbb, big_first)


def tcb_to_tdb(tcb: TwoPartTime) -> TwoPartTime:
    """Convert TCB to TDB (IAU 2006 Resolution B3).

    Args:
        tcb: Instant in TCB.

    Returns:
        TwoPartTime: Same instant in TDB.
    """
    t1, t2, big_first = _parts(tcb)
    t77td = JD_MJD_OFFSET + MJD1977
    t77tf = TT_TAI / DAYSEC
    tdb0 = TDB0 / DAYSEC

    d = t1 - t77td
    return _assemble(t1, t2 + tdb0 - (d + (t2 - t77tf)) * ELB, big_first)


# ---------------------------------------------------------------------------
# UTC <-> UT1
# ---------------------------------------------------------------------------


def utc_to_ut1(
    utc: TwoPartTime, dut1: float, *, table: LeapSecondTable | None = None
) -> TwoPartTime:
    """Convert UTC to UT1 given ``UT1 - UTC``.

    Formed as ``UT1 = TAI + (dut1 - dat)`` so that leap-second days are
    handled by the UTC-TAI step.

    Args:
        utc: Instant in UTC.
        dut1: ``UT1 - UTC`` in seconds.
        table: Leap-second table.  Defaults to the active snapshot.

    Returns:
        TwoPartTime: Same instant in UT1.
    """
    year, month, day, _ = jd2cal(float(utc.jd1), float(utc.jd2))
    dat = tai_minus_utc(year, month, day, 0.0, table=table)
    tai = utc_to_tai(utc, table=table)
    t1, t2, big_first = _parts(tai)
    return _assemble(t1, t2 + (float(dut1) - dat) / DAYSEC, big_first)


def ut1_to_utc(
    ut1: TwoPartTime, dut1: float, *, table: LeapSecondTable | None = None
) -> TwoPartTime:
    """Convert UT1 to UTC given ``UT1 - UTC``.

    Inverts :func:`utc_to_ut1` by fixed-point iteration.

    Args:
        ut1: Instant in UT1.
        dut1: ``UT1 - UTC`` in seconds.
        table: Leap-second table.  Defaults to the active snapshot.

    Returns:
        TwoPartTime: Same instant in UTC.
    """
    a1, a2, big_first = _parts(ut1)
    u2 = a2 - float(dut1) / DAYSEC
    for _ in range(_INVERSE_ITERATIONS):
        g = utc_to_ut1(TwoPartTime(a1, u2), dut1, table=table)
        g1, g2, _ = _parts(g)
        u2 += (a1 - g1) + (a2 - g2)
    return _assemble(a1, u2, big_first)


# ---------------------------------------------------------------------------
# Routed conversions
# ---------------------------------------------------------------------------

_GRAPH: dict[TimeScale, tuple[TimeScale, ...]] = {
    TimeScale.UTC: (TimeScale.TAI, TimeScale.UT1),
    TimeScale.TAI: (TimeScale.UTC, TimeScale.TT),
    TimeScale.TT: (TimeScale.TAI, TimeScale.TCG, TimeScale.TDB),
    TimeScale.TCG: (TimeScale.TT,),
    TimeScale.TDB: (TimeScale.TT, TimeScale.TCB),
    TimeScale.TCB: (TimeScale.TDB,),
    TimeScale.UT1: (TimeScale.UTC,),
}


def conversion_path(from_scale: TimeScale | str, to_scale: TimeScale | str) -> list[TimeScale]:
    """Return the chain of scales used to convert *from_scale* to *to_scale*.

    Args:
        from_scale: Source scale.
        to_scale: Target scale.

    Returns:
        list[TimeScale]: Scales visited, including both ends.
    """
    start = TimeScale.parse(from_scale)
    goal = TimeScale.parse(to_scale)
    previous: dict[TimeScale, TimeScale | None] = {start: None}
    queue = deque([start])
    while queue:
        scale = queue.popleft()
        if scale is goal:
            break
        for nxt in _GRAPH[scale]:
            if nxt not in previous:
                previous[nxt] = scale
                queue.append(nxt)

    path = [goal]
    while previous[path[-1]] is not None:
        path.append(previous[path[-1]])
    return path[::-1]


class TimeScaleConverter:
    """Convert instants between any two supported time scales.

    Args:
        leap_seconds: Leap-second table.  Defaults to the active snapshot
            at the time of each conversion.
        dut1: Source of ``UT1 - UTC``: seconds, an
            :class:`~framejax.eop.EarthOrientationParameters` or an
            :class:`~framejax.eop.EOPData` table (interpolated at the epoch).
        tdb_correction: ``TDB - TT`` in seconds, or a callable of the epoch.
        eop: EOP table used for ``UT1 - UTC`` when *dut1* is not given.
            Falls back to the process-wide table from
            :func:`~framejax.eop.set_eop_data`.

    Examples:
        ```python
        from framejax.epoch import TwoPartTime
        from framejax.time_scales import TimeScaleConverter
        utc = TwoPartTime.from_calendar(2010, 12, 15, 20, 59, 29.9)
        tt = TimeScaleConverter().convert(utc, "UTC", "TT")
        ```
    """

    def __init__(
        self,
        *,
        leap_seconds: LeapSecondTable | None = None,
        dut1: Dut1Source | None = None,
        tdb_correction: TdbCorrection | None = None,
        eop: EOPData | None = None,
    ) -> None:
        self.leap_seconds = leap_seconds
        self.dut1 = dut1
        self.tdb_correction = tdb_correction
        self.eop = eop

    def path(self, from_scale: TimeScale | str, to_scale: TimeScale | str) -> list[TimeScale]:
        """Return the route taken between two scales."""
        return conversion_path(from_scale, to_scale)

    def convert(
        self,
        t: TwoPartTime,
        from_scale: TimeScale | str,
        to_scale: TimeScale | str,
    ) -> TwoPartTime:
        """Convert *t* from one scale to another.

        Args:
            t: Instant in *from_scale*.
            from_scale: Scale of *t*.
            to_scale: Target scale.

        Returns:
            TwoPartTime: Same instant in *to_scale*.

        Raises:
            UnsupportedConversionError: If the route passes through TDB
                without a ``tdb_correction`` or through UT1 without ``dut1``.
        """
        path = self.path(from_scale, to_scale)
        for a, b in zip(path, path[1:]):
            t = self._step(t, a, b)
        return t

    def _step(self, t: TwoPartTime, a: TimeScale, b: TimeScale) -> TwoPartTime:
        table = self.leap_seconds
        if (a, b) == (TimeScale.UTC, TimeScale.TAI):
            return utc_to_tai(t, table=table)
        if (a, b) == (TimeScale.TAI, TimeScale.UTC):
            return tai_to_utc(t, table=table)
        if (a, b) == (TimeScale.TAI, TimeScale.TT):
            return tai_to_tt(t)
        if (a, b) == (TimeScale.TT, TimeScale.TAI):
            return tt_to_tai(t)
        if (a, b) == (TimeScale.TT, TimeScale.TCG):
            return tt_to_tcg(t)
        if (a, b) == (TimeScale.TCG, TimeScale.TT):
            return tcg_to_tt(t)
        if (a, b) == (TimeScale.TT, TimeScale.TDB):
            return tt_to_tdb(t, self._tdb_minus_tt(t))
        if (a, b) == (TimeScale.TDB, TimeScale.TT):
            return tdb_to_tt(t, self._tdb_minus_tt(t))
        if (a, b) == (TimeScale.TDB, TimeScale.TCB):
            return tdb_to_tcb(t)
        if (a, b) == (TimeScale.TCB, TimeScale.TDB):
            return tcb_to_tdb(t)
        if (a, b) == (TimeScale.UTC, TimeScale.UT1):
            return utc_to_ut1(t, self._ut1_minus_utc(t), table=table)
        if (a, b) == (TimeScale.UT1, TimeScale.UTC):
            return ut1_to_utc(t, self._ut1_minus_utc(t), table=table)
        raise UnsupportedConversionError(f"No direct conversion from {a.value} to {b.value}")

    def _tdb_minus_tt(self, t: TwoPartTime) -> float:
        if self.tdb_correction is None:
            raise UnsupportedConversionError(
                "TT <-> TDB requires a tdb_correction (TDB - TT in seconds "
                "or a callable of the epoch)"
            )
        if callable(self.tdb_correction):
            return float(self.tdb_correction(t))
        return float(self.tdb_correction)

    def _ut1_minus_utc(self, t: TwoPartTime) -> float:
        """Return UT1-UTC at *t*, which may be a UTC or UT1 instant.

        Table values are interpolated at the given instant; UT1-UTC changes
        by well under a microsecond over the ~1 s separating the two.
        """
        source = self.dut1
        if source is None:
            source = self.eop if self.eop is not None else get_eop_data()
        if source is None:
            raise UnsupportedConversionError("UTC <-> UT1 requires dut1 (UT1 - UTC)")
        if isinstance(source, EarthOrientationParameters):
            return float(source.dut1)
        if isinstance(source, EOPData):
            return float(get_ut1_utc(source, t.mjd(), leap_seconds=self.leap_seconds))
        return float(source)
