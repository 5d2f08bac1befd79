"""Type definitions for Earth Orientation Parameters (EOP).

- :class:`EOPData`: immutable table of sorted EOP arrays for
  JIT-compatible interpolation via ``jnp.searchsorted``.
- :class:`EOPExtrapolation`: behaviour when querying outside the table.
- :class:`EarthOrientationParameters`: the values resolved for one epoch,
  in the units IERS bulletins publish them.

Both containers are :class:`~typing.NamedTuple` subclasses, which JAX
treats as pytrees, so they pass through ``jax.jit`` and ``jax.vmap``.
"""

from __future__ import annotations

import enum
import math
from typing import TYPE_CHECKING, NamedTuple

import jax.numpy as jnp
from jax import Array
from jax.typing import ArrayLike

from framejax.constants import AS2RAD, RAD2AS

if TYPE_CHECKING:
    from framejax.leap_seconds import LeapSecondTable


class EOPData(NamedTuple):
    """Earth Orientation Parameter table for JIT-compatible lookups.

    Missing optional values (dX, dY and lod in the prediction region) are
    stored as NaN.

    Attributes:
        mjd: Sorted Modified Julian Dates (UTC), shape ``(N,)``.
        pm_x: Polar motion x-component [rad], shape ``(N,)``.
        pm_y: Polar motion y-component [rad], shape ``(N,)``.
        ut1_utc: UT1-UTC offset [seconds], shape ``(N,)``.
        dX: Celestial pole offset X [rad], shape ``(N,)``. NaN where missing.
        dY: Celestial pole offset Y [rad], shape ``(N,)``. NaN where missing.
        lod: Length of day excess [seconds], shape ``(N,)``. NaN where missing.
        mjd_min: Scalar, first MJD in the table.
        mjd_max: Scalar, last MJD in the table.
        mjd_last_lod: Scalar, last MJD with valid LOD data.
        mjd_last_dxdy: Scalar, last MJD with valid dX/dY data.
    """

    mjd: Array
    pm_x: Array
    pm_y: Array
    ut1_utc: Array
    dX: Array
    dY: Array
    lod: Array
    mjd_min: Array
    mjd_max: Array
    mjd_last_lod: Array
    mjd_last_dxdy: Array


class EOPExtrapolation(enum.Enum):
    """Extrapolation mode for EOP queries outside the table range.

    Resolved at trace time, not at runtime.

    Attributes:
        HOLD: Clamp to the nearest boundary value and log a warning.
        ERROR: Raise :class:`~framejax.errors.TableLookupMissError` for
            concrete out-of-range queries; traced queries yield NaN.
    """

    HOLD = "hold"
    ERROR = "error"


class EarthOrientationParameters(NamedTuple):
    """Earth orientation values for a single epoch.

    Attributes:
        dut1: UT1-UTC [s].
        lod: Excess length of day [s].
        xp: Polar motion x [arcsec].
        yp: Polar motion y [arcsec].
        dx: Celestial pole offset dX [arcsec].
        dy: Celestial pole offset dY [arcsec].
    """

    dut1: ArrayLike = 0.0
    lod: ArrayLike = 0.0
    xp: ArrayLike = 0.0
    yp: ArrayLike = 0.0
    dx: ArrayLike = 0.0
    dy: ArrayLike = 0.0

    def polar_motion_rad(self) -> tuple[Array, Array]:
        """Return ``(xp, yp)`` in radians."""
        return jnp.asarray(self.xp) * AS2RAD, jnp.asarray(self.yp) * AS2RAD

    def celestial_pole_offsets_rad(self) -> tuple[Array, Array]:
        """Return ``(dX, dY)`` in radians."""
        return jnp.asarray(self.dx) * AS2RAD, jnp.asarray(self.dy) * AS2RAD

    @classmethod
    def from_eop_data(
        cls,
        eop: EOPData,
        mjd: float,
        extrapolation: EOPExtrapolation = EOPExtrapolation.HOLD,
        leap_seconds: LeapSecondTable | None = None,
    ) -> EarthOrientationParameters:
        """Interpolate a table at *mjd* and convert to bulletin units.

        LOD and celestial pole offsets missing from the table (NaN in the
        prediction region) are returned as zero.

        Args:
            eop: EOP table.
            mjd: UTC Modified Julian Date.
            extrapolation: Behaviour outside the table range.
            leap_seconds: Leap-second table used to keep the UT1-UTC
                step intact.  Defaults to the active table.

        Returns:
            EarthOrientationParameters at *mjd*.

        Raises:
            TableLookupMissError: If *mjd* is outside the table and
                *extrapolation* is ``ERROR``.
        """
        from framejax.eop._lookup import get_eop

        pm_x, pm_y, ut1_utc, lod, dx, dy = get_eop(eop, mjd, extrapolation, leap_seconds)

        def _or_zero(value: Array) -> float:
            value = float(value)
            return 0.0 if math.isnan(value) else value

        return cls(
            dut1=float(ut1_utc),
            lod=_or_zero(lod),
            xp=float(pm_x) * RAD2AS,
            yp=float(pm_y) * RAD2AS,
            dx=_or_zero(dx) * RAD2AS,
            dy=_or_zero(dy) * RAD2AS,
        )
