"""Tests for GCRF-ITRF frame transformations.

Reference values from IAU SOFA Tools for Earth Attitude, Example 5.5
(2007 April 5, 12:00:00 UTC), and from Vallado, Seago and Seidelmann,
"Implementation Issues Surrounding the New IAU Reference Systems for
Astrodynamics" (LEO case, 2004 April 6, 07:51:28.386009 UTC).
"""

import jax
import jax.numpy as jnp
import pytest

from framejax.constants import AS2RAD, OMEGA_EARTH
from framejax.eop import EarthOrientationParameters, static_eop
from framejax.epoch import TwoPartTime
from framejax.errors import NonOrthogonalResultError
from framejax.frames import (
    FrameTransform,
    compose_gcrf_to_itrf,
    compose_itrf_to_gcrf,
    earth_rotation_angle,
    polar_motion_matrix,
    position_itrf_to_gcrf,
    rotation_cirs_to_gcrf,
    rotation_gcrf_to_itrf,
    rotation_itrf_to_gcrf,
    rotation_itrf_to_gcrf_equinox,
    rotation_itrf_to_tirs,
    rotation_tirs_to_cirs,
    state_gcrf_to_itrf,
    state_itrf_to_gcrf,
    tio_locator,
)
from framejax.precession_nutation import PrecessionNutationModel
from framejax.rotations import Rz

_TOL = 1e-8

# SOFA Example 5.5 epochs and Earth orientation
_TT = TwoPartTime(2400000.5, 54195.500754444444444)
_UT1 = TwoPartTime(2400000.5, 54195.499999165813)
_EOP = EarthOrientationParameters(
    dut1=-0.072073685,
    xp=0.0349282,
    yp=0.4833163,
    dx=0.0001750,
    dy=-0.0002259,
)

# GCRS -> CIRS
_C_REF = jnp.array(
    [
        [+0.999999746339445, -0.000000005138822, -0.000712264729525],
        [-0.000000026475227, +0.999999999014975, -0.000044385242827],
        [+0.000712264729599, +0.000044385250426, +0.999999745354420],
    ]
)

# GCRS -> TIRS, Rz(ERA) @ C
_ER_C_REF = jnp.array(
    [
        [+0.973104317573127, +0.230363826247709, -0.000703332818845],
        [-0.230363798804182, +0.973104570735574, +0.000120888549586],
        [+0.000712264729599, +0.000044385250426, +0.999999745354420],
    ]
)

# GCRS -> ITRS, W @ Rz(ERA) @ C
_GCRF_TO_ITRF_REF = jnp.array(
    [
        [+0.973104317697535, +0.230363826239128, -0.000703163482198],
        [-0.230363800456037, +0.973104570632801, +0.000118545366625],
        [+0.000711560162668, +0.000046626403995, +0.999999745754024],
    ]
)

# Vallado LEO case
_LEO_UTC = TwoPartTime.from_calendar(2004, 4, 6, 7, 51, 28.386009)
_LEO_EOP = EarthOrientationParameters(
    dut1=-0.439962,
    lod=0.001556,
    xp=-0.140682,
    yp=0.333309,
    dx=-0.000199,
    dy=-0.000252,
)
_LEO_ITRF = jnp.array(
    [-1033.4793830, 7901.2952754, 6380.3565958, -3.225636520, -2.872451450, 5.531924446]
)
_LEO_TIRS = jnp.array(
    [-1033.4750312, 7901.3055856, 6380.3445328, -3.225632747, -2.872442511, 5.531931288]
)
_LEO_CIRS = jnp.array(
    [5100.0184047, 6122.7863648, 6380.3445328, -4.745380330, 0.790341453, 5.531931288]
)
_LEO_GCRF = jnp.array(
    [5102.508959, 6123.011403, 6378.136925, -4.743220157, 0.790536497, 5.533755727]
)


@pytest.fixture(scope="module")
def leo():
    return FrameTransform.from_utc(_LEO_UTC, _LEO_EOP)


# ---------------------------------------------------------------------------
# SOFA Example 5.5
# ---------------------------------------------------------------------------


class TestSofaExample:
    """Rotation factors against SOFA Example 5.5."""

    def test_celestial_to_intermediate(self):
        c = rotation_cirs_to_gcrf(_TT, _EOP).T
        assert jnp.allclose(c, _C_REF, atol=_TOL)

    def test_earth_rotation_applied(self):
        c = rotation_cirs_to_gcrf(_TT, _EOP).T
        er_c = rotation_tirs_to_cirs(_UT1).T @ c
        assert jnp.allclose(er_c, _ER_C_REF, atol=_TOL)

    def test_gcrf_to_itrf(self):
        r = rotation_gcrf_to_itrf(_TT, _UT1, _EOP)
        assert jnp.allclose(r, _GCRF_TO_ITRF_REF, atol=_TOL), (
            f"Max error: {float(jnp.max(jnp.abs(r - _GCRF_TO_ITRF_REF)))}"
        )

    def test_itrf_to_gcrf_is_transpose(self):
        r = rotation_itrf_to_gcrf(_TT, _UT1, _EOP)
        assert jnp.allclose(r, _GCRF_TO_ITRF_REF.T, atol=_TOL)

    def test_frame_transform_matches_functions(self):
        ft = FrameTransform.from_epochs(_TT, _UT1, _EOP)
        assert jnp.allclose(ft.gcrf_to_itrf, rotation_gcrf_to_itrf(_TT, _UT1, _EOP), atol=1e-15)

    def test_orthonormal(self):
        r = rotation_itrf_to_gcrf(_TT, _UT1, _EOP)
        assert jnp.allclose(r @ r.T, jnp.eye(3), atol=1e-14)
        assert float(jnp.linalg.det(r)) == pytest.approx(1.0, abs=1e-14)

    def test_iau2000a_close_to_iau2006a(self):
        r00 = rotation_itrf_to_gcrf(_TT, _UT1, _EOP, PrecessionNutationModel("IAU2000A"))
        r06 = rotation_itrf_to_gcrf(_TT, _UT1, _EOP)
        assert jnp.allclose(r00, r06, atol=1e-7)


# ---------------------------------------------------------------------------
# Composition
# ---------------------------------------------------------------------------


class TestComposition:
    """Ordering and consistency of the three factors."""

    def _factors(self):
        xp, yp = _EOP.polar_motion_rad()
        w = polar_motion_matrix(xp, yp, tio_locator(_TT))
        q = rotation_cirs_to_gcrf(_TT, _EOP)
        return q, earth_rotation_angle(_UT1), w

    def test_compose_matches_full_rotation(self):
        q, era, w = self._factors()
        assert jnp.allclose(
            compose_itrf_to_gcrf(q, era, w), rotation_itrf_to_gcrf(_TT, _UT1, _EOP), atol=1e-15
        )

    def test_compose_inverse(self):
        q, era, w = self._factors()
        product = compose_gcrf_to_itrf(q, era, w) @ compose_itrf_to_gcrf(q, era, w)
        assert jnp.allclose(product, jnp.eye(3), atol=1e-14)

    def test_order_matters(self):
        """Swapping polar motion and Earth rotation changes the result."""
        q, era, w = self._factors()
        swapped = q @ w.T @ Rz(-era)
        diff = jnp.max(jnp.abs(swapped - compose_itrf_to_gcrf(q, era, w)))
        assert float(diff) > 1e-9

    def test_itrf_to_tirs_is_polar_motion_transpose(self):
        _, _, w = self._factors()
        assert jnp.allclose(rotation_itrf_to_tirs(_TT, _EOP), w.T, atol=1e-15)

    def test_non_orthonormal_factor_raises(self):
        _, era, w = self._factors()
        with pytest.raises(NonOrthogonalResultError):
            compose_itrf_to_gcrf(1.001 * jnp.eye(3), era, w)

    def test_equinox_agrees_with_cio(self):
        eop = _EOP._replace(dx=0.0, dy=0.0)
        cio = rotation_itrf_to_gcrf(_TT, _UT1, eop)
        equinox = rotation_itrf_to_gcrf_equinox(_TT, _UT1, eop)
        assert jnp.allclose(cio, equinox, atol=1e-12)

    def test_equinox_agrees_with_cio_iau2000a(self):
        eop = _EOP._replace(dx=0.0, dy=0.0)
        model = PrecessionNutationModel("IAU2000A")
        cio = rotation_itrf_to_gcrf(_TT, _UT1, eop, model)
        equinox = rotation_itrf_to_gcrf_equinox(_TT, _UT1, eop, model)
        assert jnp.allclose(cio, equinox, atol=1e-12)

    def test_zero_polar_motion_is_identity(self):
        assert jnp.allclose(polar_motion_matrix(0.0, 0.0, 0.0), jnp.eye(3), atol=1e-15)


# ---------------------------------------------------------------------------
# Earth rotation angle
# ---------------------------------------------------------------------------


class TestEarthRotationAngle:
    def test_range(self):
        era = earth_rotation_angle(_UT1)
        assert 0.0 <= float(era) < 2.0 * jnp.pi

    def test_rate(self):
        era0 = earth_rotation_angle(_UT1)
        era1 = earth_rotation_angle(_UT1.add_seconds(60.0))
        diff = float(jnp.mod(era1 - era0, 2.0 * jnp.pi))
        assert diff == pytest.approx(OMEGA_EARTH * 60.0, abs=1e-9)

    def test_rate_over_a_day(self):
        step = 600.0
        eras = jnp.array(
            [float(earth_rotation_angle(_UT1.add_seconds(k * step))) for k in range(145)]
        )
        diffs = jnp.mod(jnp.diff(eras), 2.0 * jnp.pi)
        assert bool(jnp.all(diffs > 0.0)), diffs
        assert jnp.allclose(diffs, OMEGA_EARTH * step, atol=1e-9)
        # Slightly more than one turn per UT1 day
        assert float(jnp.sum(diffs)) == pytest.approx(OMEGA_EARTH * 86400.0, abs=1e-8)
        assert float(jnp.sum(diffs)) > 2.0 * jnp.pi

    def test_jit(self):
        era = jax.jit(earth_rotation_angle)(_UT1)
        assert float(era) == pytest.approx(float(earth_rotation_angle(_UT1)), abs=1e-15)

    def test_jit_polar_motion(self):
        xp, yp = _EOP.polar_motion_rad()
        w = jax.jit(polar_motion_matrix)(xp, yp, tio_locator(_TT))
        assert jnp.allclose(w, polar_motion_matrix(xp, yp, tio_locator(_TT)), atol=1e-15)


# ---------------------------------------------------------------------------
# Vallado LEO case
# ---------------------------------------------------------------------------


class TestLeoState:
    """Satellite state through each intermediate frame."""

    def test_epochs(self, leo):
        assert float(leo.tt.diff_seconds(_LEO_UTC)) == pytest.approx(32.0 + 32.184, abs=1e-6)
        assert float(leo.ut1.diff_seconds(_LEO_UTC)) == pytest.approx(-0.439962, abs=1e-6)

    def test_tirs_position(self, leo):
        r_tirs = leo.itrf_to_tirs(_LEO_ITRF[:3])
        assert jnp.allclose(r_tirs, _LEO_TIRS[:3], atol=1e-6)

    def test_tirs_velocity(self, leo):
        v_tirs = leo.itrf_to_tirs(_LEO_ITRF[3:])
        assert jnp.allclose(v_tirs, _LEO_TIRS[3:], atol=1e-8)

    def test_cirs_position(self, leo):
        r_cirs = rotation_tirs_to_cirs(leo.ut1) @ leo.itrf_to_tirs(_LEO_ITRF[:3])
        assert jnp.allclose(r_cirs, _LEO_CIRS[:3], atol=1e-4)

    def test_cirs_velocity(self, leo):
        x_gcrf = leo.state_itrf_to_gcrf(_LEO_ITRF)
        v_cirs = leo.celestial.T @ x_gcrf[3:]
        assert jnp.allclose(v_cirs, _LEO_CIRS[3:], atol=1e-6)

    def test_gcrf_position(self, leo):
        r_gcrf = leo.position_itrf_to_gcrf(_LEO_ITRF[:3])
        assert jnp.allclose(r_gcrf, _LEO_GCRF[:3], atol=1e-3), f"r_gcrf = {r_gcrf}"

    def test_gcrf_velocity(self, leo):
        x_gcrf = leo.state_itrf_to_gcrf(_LEO_ITRF)
        assert jnp.allclose(x_gcrf[3:], _LEO_GCRF[3:], atol=1e-5), f"v_gcrf = {x_gcrf[3:]}"

    def test_position_function_matches_bundle(self, leo):
        r = position_itrf_to_gcrf(leo.tt, leo.ut1, _LEO_EOP, _LEO_ITRF[:3])
        assert jnp.allclose(r, leo.position_itrf_to_gcrf(_LEO_ITRF[:3]), atol=1e-9)

    def test_state_roundtrip(self, leo):
        back = leo.state_gcrf_to_itrf(leo.state_itrf_to_gcrf(_LEO_ITRF))
        assert jnp.allclose(back, _LEO_ITRF, atol=1e-9)

    def test_state_functions_roundtrip(self):
        x_gcrf = state_itrf_to_gcrf(_TT, _UT1, _EOP, _LEO_ITRF)
        back = state_gcrf_to_itrf(_TT, _UT1, _EOP, x_gcrf)
        assert jnp.allclose(back, _LEO_ITRF, atol=1e-9)

    def test_position_roundtrip(self, leo):
        r = leo.position_gcrf_to_itrf(leo.position_itrf_to_gcrf(_LEO_ITRF[:3]))
        assert jnp.allclose(r, _LEO_ITRF[:3], atol=1e-9)

    def test_position_preserves_norm(self, leo):
        r_gcrf = leo.position_itrf_to_gcrf(_LEO_ITRF[:3])
        assert float(jnp.linalg.norm(r_gcrf)) == pytest.approx(
            float(jnp.linalg.norm(_LEO_ITRF[:3])), abs=1e-9
        )

    def test_stationary_point_moves_in_gcrf(self, leo):
        """A point fixed on the Earth has speed omega * rho in the GCRF."""
        x_gcrf = leo.state_itrf_to_gcrf(jnp.array([6378.0, 0.0, 0.0, 0.0, 0.0, 0.0]))
        speed = float(jnp.linalg.norm(x_gcrf[3:]))
        assert speed == pytest.approx(OMEGA_EARTH * 6378.0, rel=1e-5)

    def test_from_eop_table(self, leo):
        table = static_eop(
            pm_x=_LEO_EOP.xp * AS2RAD,
            pm_y=_LEO_EOP.yp * AS2RAD,
            ut1_utc=_LEO_EOP.dut1,
            dX=_LEO_EOP.dx * AS2RAD,
            dY=_LEO_EOP.dy * AS2RAD,
            lod=_LEO_EOP.lod,
        )
        ft = FrameTransform.from_utc(_LEO_UTC, table)
        assert jnp.allclose(ft.itrf_to_gcrf, leo.itrf_to_gcrf, atol=1e-12)
