"""Tests for PrecessionNutationModel and series-tagged rotations.

Reference values from IAU SOFA Tools for Earth Attitude, Example 5.5
(2007 April 5, 12:00:00 UTC).
"""

import jax.numpy as jnp
import pytest

from framejax import sofa
from framejax.constants import MAS2RAD
from framejax.epoch import TwoPartTime
from framejax.errors import SeriesMismatchError
from framejax.precession_nutation import (
    NutationSeries,
    PrecessionNutationModel,
    SeriesRotation,
    compose_bpn,
)
from framejax.rotations import is_orthonormal

_TT = TwoPartTime(2400000.5, 54195.500754444444444)
_UT1 = TwoPartTime(2400000.5, 54195.499999165813)
_DX = 0.1750 * MAS2RAD
_DY = -0.2259 * MAS2RAD

_TOL = 1e-8

# Celestial-to-intermediate matrix (GCRS -> CIRS), SOFA Example 5.5
_C_REF = jnp.array(
    [
        [+0.999999746339445, -0.000000005138822, -0.000712264729525],
        [-0.000000026475227, +0.999999999014975, -0.000044385242827],
        [+0.000712264729599, +0.000044385250426, +0.999999745354420],
    ]
)


@pytest.fixture(params=[NutationSeries.IAU2000A, NutationSeries.IAU2006A])
def model(request):
    return PrecessionNutationModel(request.param)


class TestSeriesRotation:
    """Tests for the series tag on rotation matrices."""

    def test_compose_same_series(self):
        a = SeriesRotation(jnp.eye(3), NutationSeries.IAU2006A)
        b = SeriesRotation(2.0 * jnp.eye(3), NutationSeries.IAU2006A)
        product = a.compose(b)
        assert product.series is NutationSeries.IAU2006A
        assert jnp.array_equal(product.matrix, 2.0 * jnp.eye(3))

    def test_compose_mixed_series_raises(self):
        a = SeriesRotation(jnp.eye(3), NutationSeries.IAU2000A)
        b = SeriesRotation(jnp.eye(3), NutationSeries.IAU2006A)
        with pytest.raises(SeriesMismatchError, match="IAU2000A"):
            a.compose(b)

    def test_compose_bpn_rejects_mixed_factors(self):
        m00 = PrecessionNutationModel(NutationSeries.IAU2000A)
        m06 = PrecessionNutationModel(NutationSeries.IAU2006A)
        with pytest.raises(SeriesMismatchError):
            compose_bpn(m06.nutation(_TT), m00.precession(_TT), m06.frame_bias(_TT))

    def test_transpose_keeps_tag(self):
        rot = PrecessionNutationModel("IAU2000A").nutation(_TT)
        inv = rot.transpose()
        assert inv.series is NutationSeries.IAU2000A
        assert jnp.allclose(inv.matrix @ rot.matrix, jnp.eye(3), atol=1e-15)


class TestModel:
    """Tests common to both model families."""

    def test_default_series(self):
        assert PrecessionNutationModel().series is NutationSeries.IAU2006A

    def test_from_string(self):
        assert PrecessionNutationModel("IAU2000A").series is NutationSeries.IAU2000A

    def test_unknown_series(self):
        with pytest.raises(ValueError):
            PrecessionNutationModel("IAU1980")

    def test_repr(self):
        assert repr(PrecessionNutationModel()) == "PrecessionNutationModel(series=IAU2006A)"

    def test_factors_tagged(self, model):
        for rot in (model.frame_bias(_TT), model.precession(_TT), model.nutation(_TT)):
            assert rot.series is model.series

    def test_bpn_orthonormal(self, model):
        assert is_orthonormal(model.bias_precession_nutation(_TT).matrix)

    def test_celestial_to_intermediate_reference(self):
        c = PrecessionNutationModel().celestial_to_intermediate(_TT, _DX, _DY).matrix
        assert jnp.allclose(c, _C_REF, atol=_TOL), (
            f"Max error: {float(jnp.max(jnp.abs(c - _C_REF)))}"
        )

    def test_celestial_to_intermediate_orthonormal(self, model):
        c = model.celestial_to_intermediate(_TT).matrix
        assert jnp.allclose(c.T @ c, jnp.eye(3), atol=1e-14)
        assert float(jnp.abs(jnp.linalg.det(c) - 1.0)) < 1e-14

    def test_cip_is_third_row(self, model):
        x, y = model.cip_xy(_TT)
        c = model.celestial_to_intermediate(_TT).matrix
        assert float(c[2, 0]) == pytest.approx(float(x), abs=1e-15)
        assert float(c[2, 1]) == pytest.approx(float(y), abs=1e-15)

    def test_classical_precession_matches_precession(self, model):
        p = model.classical_precession(_TT)
        assert p.series is model.series
        assert jnp.allclose(p.matrix, model.precession(_TT).matrix, atol=1e-11)

    def test_classical_precession_angles(self, model):
        eps0, psia, oma, chia = model.classical_precession_angles(_TT)
        # omega_A stays within an arcsecond of eps0 for centuries around J2000
        assert abs(float(oma - eps0)) < 5e-6
        assert 0.0 < float(psia) < 1e-2
        assert 0.0 < float(chia) < 1e-5

    def test_series_differ(self):
        """The two families agree closely but not exactly."""
        m00 = PrecessionNutationModel(NutationSeries.IAU2000A).bias_precession_nutation(_TT)
        m06 = PrecessionNutationModel(NutationSeries.IAU2006A).bias_precession_nutation(_TT)
        diff = float(jnp.max(jnp.abs(m00.matrix - m06.matrix)))
        assert 0.0 < diff < 1e-7


class TestIAU2000A:
    """IAU 2000A model against the SOFA kernels."""

    def test_bpn_matches_pnm00a(self):
        bpn = PrecessionNutationModel("IAU2000A").bias_precession_nutation(_TT).matrix
        assert jnp.allclose(bpn, sofa.pnm00a(_TT.jd1, _TT.jd2), atol=1e-14)

    def test_xys_matches_xys00a(self):
        x, y, s = PrecessionNutationModel("IAU2000A").xys(_TT)
        x_ref, y_ref, s_ref = sofa.xys00a(_TT.jd1, _TT.jd2)
        assert float(x) == pytest.approx(float(x_ref), abs=1e-15)
        assert float(y) == pytest.approx(float(y_ref), abs=1e-15)
        assert float(s) == pytest.approx(float(s_ref), abs=1e-18)

    def test_nutation_angles(self):
        dpsi, deps = PrecessionNutationModel("IAU2000A").nutation_angles(_TT)
        dpsi_ref, deps_ref = sofa.nut00a(_TT.jd1, _TT.jd2)
        assert float(dpsi) == float(dpsi_ref)
        assert float(deps) == float(deps_ref)

    def test_precession_angles(self):
        angles = PrecessionNutationModel("IAU2000A").precession_angles(_TT)
        assert len(angles) == 3

    def test_equation_of_equinoxes_matches_ee00a(self):
        ee = PrecessionNutationModel("IAU2000A").equation_of_equinoxes(_TT)
        assert float(ee) == float(sofa.ee00a(_TT.jd1, _TT.jd2))

    def test_classical_angles_use_lieske_eps0(self):
        eps0, *_ = PrecessionNutationModel("IAU2000A").classical_precession_angles(_TT)
        assert float(eps0) == sofa.EPS0


class TestIAU2006A:
    """IAU 2006/2000A model against the SOFA kernels."""

    def test_bpn_matches_pnm06a(self):
        bpn = PrecessionNutationModel().bias_precession_nutation(_TT).matrix
        assert jnp.allclose(bpn, sofa.pnm06a(_TT.jd1, _TT.jd2), atol=1e-14)

    def test_xys_matches_xys06a(self):
        x, y, s = PrecessionNutationModel().xys(_TT)
        x_ref, y_ref, s_ref = sofa.xys06a(_TT.jd1, _TT.jd2)
        assert float(x) == pytest.approx(float(x_ref), abs=1e-15)
        assert float(y) == pytest.approx(float(y_ref), abs=1e-15)
        assert float(s) == pytest.approx(float(s_ref), abs=1e-18)

    def test_mean_obliquity(self):
        eps = PrecessionNutationModel().mean_obliquity(_TT)
        assert float(eps) == float(sofa.obl06(_TT.jd1, _TT.jd2))

    def test_precession_angles(self):
        angles = PrecessionNutationModel().precession_angles(_TT)
        assert len(angles) == 4

    def test_gast_matches_gst06(self):
        model = PrecessionNutationModel()
        gast = model.greenwich_apparent_sidereal_time(_UT1, _TT)
        rnpb = sofa.pnm06a(_TT.jd1, _TT.jd2)
        expected = sofa.gst06(_UT1.jd1, _UT1.jd2, _TT.jd1, _TT.jd2, rnpb)
        assert float(gast) == pytest.approx(float(expected), abs=1e-12)

    def test_equation_of_origins(self):
        model = PrecessionNutationModel()
        era = sofa.era00(_UT1.jd1, _UT1.jd2)
        gast = model.greenwich_apparent_sidereal_time(_UT1, _TT)
        eo = model.equation_of_origins(_TT)
        assert float(jnp.mod(era - eo - gast + jnp.pi, 2.0 * jnp.pi) - jnp.pi) == pytest.approx(
            0.0, abs=1e-12
        )

    def test_equation_of_equinoxes(self):
        ee = PrecessionNutationModel().equation_of_equinoxes(_TT)
        assert float(ee) == pytest.approx(float(sofa.ee06a(_TT.jd1, _TT.jd2)), abs=1e-15)

    def test_gast_is_gmst_plus_equation_of_equinoxes(self):
        model = PrecessionNutationModel()
        gast = model.greenwich_apparent_sidereal_time(_UT1, _TT)
        gmst = sofa.gmst06(_UT1.jd1, _UT1.jd2, _TT.jd1, _TT.jd2)
        ee = model.equation_of_equinoxes(_TT)
        diff = jnp.mod(gast - gmst - ee + jnp.pi, 2.0 * jnp.pi) - jnp.pi
        assert float(diff) == pytest.approx(0.0, abs=1e-12)

    def test_classical_angles_at_reference_epoch(self):
        tt = TwoPartTime(2400000.5, 52541.0)
        eps0, psia, oma, chia = PrecessionNutationModel().classical_precession_angles(tt)
        assert float(eps0) == pytest.approx(0.4090926006005828715, abs=1e-14)
        assert float(psia) == pytest.approx(0.6664369630191613431e-3, abs=1e-14)
        assert float(oma) == pytest.approx(0.4090925973783255982, abs=1e-14)
        assert float(chia) == pytest.approx(0.1387703379530915364e-5, abs=1e-14)
