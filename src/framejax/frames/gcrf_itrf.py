"""GCRF-ITRF transformations, CIO based, IAU 2000A or IAU 2006/2000A.

The terrestrial-to-celestial rotation is composed from three factors,
always in this order:

- **Polar motion** ``W`` (TIRS -> ITRS, so ``W^T`` maps ITRS -> TIRS) from
  the pole coordinates and the TIO locator s',
- **Earth rotation** ``Rz(-ERA)`` (TIRS -> CIRS) from the Earth Rotation
  Angle at UT1,
- **Celestial motion** ``Q = C^T`` (CIRS -> GCRS) from the precession-
  nutation model and the celestial pole offsets.

``ITRS -> GCRS = Q @ Rz(-ERA) @ W^T``; the inverse is its transpose.  An
equinox-based composition (``NPB^T @ Rz(-GAST) @ W^T``) is provided as a
cross-check.

Earth orientation values are passed explicitly as
:class:`~framejax.eop.EarthOrientationParameters` (arcseconds and seconds);
nothing here reads the global EOP table.  Positions and velocities may be
in any length unit; velocities must be per second.

Uses routines and computations derived from software provided by SOFA
under license. Does not itself constitute software provided by and/or
endorsed by SOFA.
"""

from __future__ import annotations

from dataclasses import dataclass

import jax.numpy as jnp
from jax import Array
from jax.typing import ArrayLike

from framejax.config import get_dtype
from framejax.constants import DAYSEC, OMEGA_EARTH
from framejax.eop import EarthOrientationParameters, EOPData
from framejax.epoch import TwoPartTime
from framejax.leap_seconds import LeapSecondTable
from framejax.precession_nutation import PrecessionNutationModel
from framejax.rotations import Rz, check_orthonormal
from framejax.sofa import era00, pom00, sp00
from framejax.time import TimeScale
from framejax.time_scales import TimeScaleConverter


def _model(model: PrecessionNutationModel | None) -> PrecessionNutationModel:
    return PrecessionNutationModel() if model is None else model


# ---------------------------------------------------------------------------
# Components
# ---------------------------------------------------------------------------


def earth_rotation_angle(ut1: TwoPartTime) -> Array:
    """Earth Rotation Angle at a UT1 epoch, in ``[0, 2*pi)`` [rad].

    ``ERA = 2*pi*(frac(JD) + 0.7790572732640 + 0.00273781191135448 *
    (JD - 2451545.0))`` evaluated on the two parts separately.

    Args:
        ut1: Epoch in UT1.

    Returns:
        Earth Rotation Angle [rad].
    """
    return era00(ut1.jd1, ut1.jd2)


def tio_locator(tt: TwoPartTime) -> Array:
    """TIO locator s' at a TT epoch [rad]."""
    return sp00(tt.jd1, tt.jd2)


def polar_motion_matrix(xp: ArrayLike, yp: ArrayLike, sp: ArrayLike) -> Array:
    """Polar motion matrix ``W = Rx(-yp) @ Ry(-xp) @ Rz(sp)``, TIRS -> ITRS.

    Args:
        xp: Pole x coordinate [rad].
        yp: Pole y coordinate [rad].
        sp: TIO locator s' [rad].

    Returns:
        3x3 polar motion matrix.
    """
    return pom00(xp, yp, sp)


def rotation_itrf_to_tirs(tt: TwoPartTime, eop: EarthOrientationParameters) -> Array:
    """Rotation ITRS -> TIRS, ``W^T``.

    Args:
        tt: Epoch in TT (for s').
        eop: Earth orientation values (pole coordinates).

    Returns:
        3x3 rotation matrix.
    """
    xp, yp = eop.polar_motion_rad()
    return polar_motion_matrix(xp, yp, tio_locator(tt)).T


def rotation_tirs_to_cirs(ut1: TwoPartTime) -> Array:
    """Rotation TIRS -> CIRS, ``Rz(-ERA)``."""
    return Rz(-earth_rotation_angle(ut1))


def rotation_cirs_to_gcrf(
    tt: TwoPartTime,
    eop: EarthOrientationParameters,
    model: PrecessionNutationModel | None = None,
) -> Array:
    """Rotation CIRS -> GCRS, ``C^T``.

    Args:
        tt: Epoch in TT.
        eop: Earth orientation values (celestial pole offsets).
        model: Precession-nutation model.  Defaults to IAU 2006/2000A.

    Returns:
        3x3 rotation matrix.
    """
    dx, dy = eop.celestial_pole_offsets_rad()
    return _model(model).celestial_to_intermediate(tt, dx, dy).matrix.T


def compose_itrf_to_gcrf(q: ArrayLike, era: ArrayLike, w: ArrayLike) -> Array:
    """Compose ITRS -> GCRS as ``Q @ Rz(-era) @ W^T``.

    Polar motion is applied first, then Earth rotation, then the celestial
    motion of the pole.

    Args:
        q: CIRS -> GCRS matrix.
        era: Earth Rotation Angle [rad].
        w: Polar motion matrix (TIRS -> ITRS).

    Returns:
        3x3 ITRS -> GCRS matrix.

    Raises:
        NonOrthogonalResultError: If the product is not a rotation and
            strict checks are enabled.
    """
    r = jnp.asarray(q) @ Rz(-era) @ jnp.asarray(w).T
    return check_orthonormal(r, "ITRS to GCRS matrix")


def compose_gcrf_to_itrf(q: ArrayLike, era: ArrayLike, w: ArrayLike) -> Array:
    """Compose GCRS -> ITRS, the transpose of :func:`compose_itrf_to_gcrf`."""
    return compose_itrf_to_gcrf(q, era, w).T


# ---------------------------------------------------------------------------
# Full rotations
# ---------------------------------------------------------------------------


def rotation_itrf_to_gcrf(
    tt: TwoPartTime,
    ut1: TwoPartTime,
    eop: EarthOrientationParameters,
    model: PrecessionNutationModel | None = None,
) -> Array:
    """Rotation matrix from ITRF to GCRF.

    Args:
        tt: Epoch in TT.
        ut1: The same epoch in UT1.
        eop: Earth orientation values at the epoch.
        model: Precession-nutation model.  Defaults to IAU 2006/2000A.

    Returns:
        3x3 rotation matrix (ITRF -> GCRF).

    Examples:
        ```python
        from framejax.eop import EarthOrientationParameters
        from framejax.epoch import TwoPartTime
        from framejax.frames import rotation_itrf_to_gcrf
        tt = TwoPartTime(2400000.5, 54195.500754444444444)
        ut1 = TwoPartTime(2400000.5, 54195.499999165813)
        R = rotation_itrf_to_gcrf(tt, ut1, EarthOrientationParameters())
        ```
    """
    xp, yp = eop.polar_motion_rad()
    w = polar_motion_matrix(xp, yp, tio_locator(tt))
    q = rotation_cirs_to_gcrf(tt, eop, model)
    return compose_itrf_to_gcrf(q, earth_rotation_angle(ut1), w)


def rotation_gcrf_to_itrf(
    tt: TwoPartTime,
    ut1: TwoPartTime,
    eop: EarthOrientationParameters,
    model: PrecessionNutationModel | None = None,
) -> Array:
    """Rotation matrix from GCRF to ITRF, the transpose of
    :func:`rotation_itrf_to_gcrf`.
    """
    return rotation_itrf_to_gcrf(tt, ut1, eop, model).T


def rotation_itrf_to_gcrf_equinox(
    tt: TwoPartTime,
    ut1: TwoPartTime,
    eop: EarthOrientationParameters,
    model: PrecessionNutationModel | None = None,
) -> Array:
    """Rotation ITRF -> GCRF through the equinox, ``NPB^T @ Rz(-GAST) @ W^T``.

    Celestial pole offsets are not applied.  With zero offsets the result
    agrees with :func:`rotation_itrf_to_gcrf` to rounding error.

    Args:
        tt: Epoch in TT.
        ut1: The same epoch in UT1.
        eop: Earth orientation values (pole coordinates).
        model: Precession-nutation model.  Defaults to IAU 2006/2000A.

    Returns:
        3x3 rotation matrix (ITRF -> GCRF).
    """
    model = _model(model)
    npb = model.bias_precession_nutation(tt).matrix
    gast = model.greenwich_apparent_sidereal_time(ut1, tt)
    return compose_itrf_to_gcrf(npb.T, gast, rotation_itrf_to_tirs(tt, eop).T)


# ---------------------------------------------------------------------------
# Vectors and states
# ---------------------------------------------------------------------------


def _omega(eop: EarthOrientationParameters) -> Array:
    """Earth angular velocity vector in TIRS, adjusted for LOD [rad/s]."""
    rate = OMEGA_EARTH * (1.0 - jnp.asarray(eop.lod) / DAYSEC)
    return jnp.array([0.0, 0.0, rate], dtype=get_dtype())


def position_itrf_to_gcrf(
    tt: TwoPartTime,
    ut1: TwoPartTime,
    eop: EarthOrientationParameters,
    r_itrf: ArrayLike,
    model: PrecessionNutationModel | None = None,
) -> Array:
    """Rotate an ITRF position into the GCRF.

    Args:
        tt: Epoch in TT.
        ut1: The same epoch in UT1.
        eop: Earth orientation values at the epoch.
        r_itrf: 3-element ITRF position.
        model: Precession-nutation model.  Defaults to IAU 2006/2000A.

    Returns:
        3-element GCRF position.
    """
    r_itrf = jnp.asarray(r_itrf, dtype=get_dtype())
    return rotation_itrf_to_gcrf(tt, ut1, eop, model) @ r_itrf


def state_itrf_to_gcrf(
    tt: TwoPartTime,
    ut1: TwoPartTime,
    eop: EarthOrientationParameters,
    x_itrf: ArrayLike,
    model: PrecessionNutationModel | None = None,
) -> Array:
    """Transform a 6-element state from ITRF to GCRF.

    The velocity picks up the rotation of the terrestrial frame:

    .. math::

        \\mathbf{v}_{\\text{GCRF}} = Q \\, R_z(-\\theta) \\left(
            W^T \\mathbf{v}_{\\text{ITRF}}
            + \\boldsymbol{\\omega} \\times W^T \\mathbf{r}_{\\text{ITRF}}
        \\right)

    with ``omega = OMEGA_EARTH * (1 - LOD/86400)`` about the CIP axis.

    Args:
        tt: Epoch in TT.
        ut1: The same epoch in UT1.
        eop: Earth orientation values at the epoch.
        x_itrf: 6-element ITRF state ``[x, y, z, vx, vy, vz]``.
        model: Precession-nutation model.  Defaults to IAU 2006/2000A.

    Returns:
        6-element GCRF state.
    """
    x_itrf = jnp.asarray(x_itrf, dtype=get_dtype())

    w_t = rotation_itrf_to_tirs(tt, eop)
    r_tirs = w_t @ x_itrf[:3]
    v_tirs = w_t @ x_itrf[3:6]

    er_t = rotation_tirs_to_cirs(ut1)
    r_cirs = er_t @ r_tirs
    v_cirs = er_t @ (v_tirs + jnp.cross(_omega(eop), r_tirs))

    q = rotation_cirs_to_gcrf(tt, eop, model)
    check_orthonormal(q @ er_t @ w_t, "ITRS to GCRS matrix")
    return jnp.concatenate([q @ r_cirs, q @ v_cirs])


def state_gcrf_to_itrf(
    tt: TwoPartTime,
    ut1: TwoPartTime,
    eop: EarthOrientationParameters,
    x_gcrf: ArrayLike,
    model: PrecessionNutationModel | None = None,
) -> Array:
    """Transform a 6-element state from GCRF to ITRF.

    Inverse of :func:`state_itrf_to_gcrf`.

    Args:
        tt: Epoch in TT.
        ut1: The same epoch in UT1.
        eop: Earth orientation values at the epoch.
        x_gcrf: 6-element GCRF state ``[x, y, z, vx, vy, vz]``.
        model: Precession-nutation model.  Defaults to IAU 2006/2000A.

    Returns:
        6-element ITRF state.
    """
    x_gcrf = jnp.asarray(x_gcrf, dtype=get_dtype())

    q = rotation_cirs_to_gcrf(tt, eop, model)
    r_cirs = q.T @ x_gcrf[:3]
    v_cirs = q.T @ x_gcrf[3:6]

    er = rotation_tirs_to_cirs(ut1).T
    r_tirs = er @ r_cirs
    v_tirs = er @ v_cirs - jnp.cross(_omega(eop), r_tirs)

    w = rotation_itrf_to_tirs(tt, eop).T
    check_orthonormal(w @ er @ q.T, "GCRS to ITRS matrix")
    return jnp.concatenate([w @ r_tirs, w @ v_tirs])


# ---------------------------------------------------------------------------
# Convenience bundle
# ---------------------------------------------------------------------------


@dataclass(frozen=True, eq=False)
class FrameTransform:
    """ITRF <-> GCRF transformation at one epoch.

    Holds the epoch in TT and UT1, the Earth orientation values and the
    three factors of the composition, so several vectors can be transformed
    without recomputing the model.

    Attributes:
        tt: Epoch in TT.
        ut1: Epoch in UT1.
        eop: Earth orientation values.
        model: Precession-nutation model.
        polar_motion: ``W``, TIRS -> ITRS.
        era: Earth Rotation Angle [rad].
        celestial: ``Q``, CIRS -> GCRS.
    """

    tt: TwoPartTime
    ut1: TwoPartTime
    eop: EarthOrientationParameters
    model: PrecessionNutationModel
    polar_motion: Array
    era: Array
    celestial: Array

    @classmethod
    def from_epochs(
        cls,
        tt: TwoPartTime,
        ut1: TwoPartTime,
        eop: EarthOrientationParameters,
        model: PrecessionNutationModel | None = None,
    ) -> FrameTransform:
        """Build from TT and UT1 epochs and explicit EOP values."""
        model = _model(model)
        xp, yp = eop.polar_motion_rad()
        return cls(
            tt=tt,
            ut1=ut1,
            eop=eop,
            model=model,
            polar_motion=polar_motion_matrix(xp, yp, tio_locator(tt)),
            era=earth_rotation_angle(ut1),
            celestial=rotation_cirs_to_gcrf(tt, eop, model),
        )

    @classmethod
    def from_utc(
        cls,
        utc: TwoPartTime,
        eop: EarthOrientationParameters | EOPData,
        model: PrecessionNutationModel | None = None,
        leap_seconds: LeapSecondTable | None = None,
    ) -> FrameTransform:
        """Build from a UTC epoch.

        TT and UT1 are derived through
        :class:`~framejax.time_scales.TimeScaleConverter`.

        Args:
            utc: Epoch in UTC.
            eop: Earth orientation values, or a table interpolated at *utc*.
            model: Precession-nutation model.  Defaults to IAU 2006/2000A.
            leap_seconds: Leap-second table.  Defaults to the active
                snapshot.

        Returns:
            FrameTransform at the epoch.
        """
        if isinstance(eop, EOPData):
            eop = EarthOrientationParameters.from_eop_data(
                eop, float(utc.mjd()), leap_seconds=leap_seconds
            )
        converter = TimeScaleConverter(leap_seconds=leap_seconds, dut1=eop)
        tt = converter.convert(utc, TimeScale.UTC, TimeScale.TT)
        ut1 = converter.convert(utc, TimeScale.UTC, TimeScale.UT1)
        return cls.from_epochs(tt, ut1, eop, model)

    @property
    def itrf_to_gcrf(self) -> Array:
        """ITRF -> GCRF matrix, ``Q @ Rz(-ERA) @ W^T``."""
        return compose_itrf_to_gcrf(self.celestial, self.era, self.polar_motion)

    @property
    def gcrf_to_itrf(self) -> Array:
        """GCRF -> ITRF matrix."""
        return self.itrf_to_gcrf.T

    def itrf_to_tirs(self, r_itrf: ArrayLike) -> Array:
        """Apply polar motion only, ITRF -> TIRS."""
        return self.polar_motion.T @ jnp.asarray(r_itrf, dtype=get_dtype())

    def position_itrf_to_gcrf(self, r_itrf: ArrayLike) -> Array:
        """Rotate an ITRF position into the GCRF."""
        return self.itrf_to_gcrf @ jnp.asarray(r_itrf, dtype=get_dtype())

    def position_gcrf_to_itrf(self, r_gcrf: ArrayLike) -> Array:
        """Rotate a GCRF position into the ITRF."""
        return self.gcrf_to_itrf @ jnp.asarray(r_gcrf, dtype=get_dtype())

    def state_itrf_to_gcrf(self, x_itrf: ArrayLike) -> Array:
        """Transform a 6-element state from ITRF to GCRF."""
        return state_itrf_to_gcrf(self.tt, self.ut1, self.eop, x_itrf, self.model)

    def state_gcrf_to_itrf(self, x_gcrf: ArrayLike) -> Array:
        """Transform a 6-element state from GCRF to ITRF."""
        return state_gcrf_to_itrf(self.tt, self.ut1, self.eop, x_gcrf, self.model)
