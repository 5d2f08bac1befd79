"""Tests for the SOFA-derived kernels in framejax.sofa.

Reference values are from the SOFA test suite (t_sofa.c).
"""

import jax
import jax.numpy as jnp
import pytest

from framejax.sofa import (
    EPS0,
    bi00,
    bp00,
    bp06,
    bpn2xy,
    c2ixys,
    classical_precession_matrix,
    ee00,
    ee00a,
    ee06a,
    eect00,
    eors,
    era00,
    fad03,
    fae03,
    faf03,
    faju03,
    fal03,
    falp03,
    fama03,
    fame03,
    fane03,
    faom03,
    fapa03,
    fasa03,
    faur03,
    fave03,
    fw2m,
    gmst06,
    gst06,
    nut00a,
    nut06a,
    numat,
    obl06,
    obl80,
    pfw06,
    pnm00a,
    pnm06a,
    pom00,
    pr00,
    precession_angles00,
    precession_angles06,
    s00,
    s06,
    sp00,
    xys00a,
    xys06a,
)

_MJD0 = 2400000.5

# CIP coordinates used by t_s00 / t_s06
_X = 0.5791308486706011000e-3
_Y = 0.4020579816732961219e-4

# BPN matrix used by t_eors / t_gst06
_RNPB = jnp.array([
    [0.9999989440476103608, -0.1332881761240011518e-2, -0.5790767434730085097e-3],
    [0.1332858254308954453e-2, 0.9999991109044505944, -0.4097782710401555759e-4],
    [0.5791308472168153320e-3, 0.4020595661593994396e-4, 0.9999998314954572365],
])


# ---------------------------------------------------------------------------
# Fundamental arguments
# ---------------------------------------------------------------------------


class TestFundamentalArguments:
    """Fundamental arguments at t = 0.8 Julian centuries."""

    @pytest.mark.parametrize(
        "func, expected",
        [
            (fal03, 5.132369751108684150),
            (falp03, 6.226797973505507345),
            (faf03, 0.2597711366745499518),
            (fad03, 1.946709205396925672),
            (faom03, -5.973618440951302183),
            (fame03, 5.417338184297289661),
            (fave03, 3.424900460533758000),
            (fae03, 1.744713738913081846),
            (fama03, 3.275506840277781492),
            (faju03, 5.275711665202481138),
            (fasa03, 5.371574539440827046),
            (faur03, 5.180636450180413523),
            (fane03, 2.079343830860413523),
            (fapa03, 0.1950884762240000000e-1),
        ],
    )
    def test_value(self, func, expected):
        assert float(func(0.8)) == pytest.approx(expected, abs=1e-12)


# ---------------------------------------------------------------------------
# Obliquity, bias and precession
# ---------------------------------------------------------------------------


class TestObliquity:
    def test_obl06(self):
        assert float(obl06(_MJD0, 54388.0)) == pytest.approx(0.4090749229387258204, abs=1e-14)

    def test_obl80(self):
        assert float(obl80(_MJD0, 54388.0)) == pytest.approx(0.4090751347643816218, abs=1e-14)


class TestBiasPrecession:
    def test_bi00(self):
        dpsibi, depsbi, dra = bi00()
        assert dpsibi == pytest.approx(-0.2025309152835086613e-6, abs=1e-12)
        assert depsbi == pytest.approx(-0.3306041454222147847e-7, abs=1e-12)
        assert dra == pytest.approx(-0.7078279744199225506e-7, abs=1e-12)

    def test_pr00(self):
        dpsipr, depspr = pr00(_MJD0, 53736.0)
        assert float(dpsipr) == pytest.approx(-0.8716465172668347629e-7, abs=1e-20)
        assert float(depspr) == pytest.approx(-0.7342018386722813087e-8, abs=1e-20)

    def test_pfw06(self):
        gamb, phib, psib, epsa = pfw06(_MJD0, 50123.9999)
        assert float(gamb) == pytest.approx(-0.2243387670997995690e-5, abs=1e-16)
        assert float(phib) == pytest.approx(0.4091014602391312808, abs=1e-12)
        assert float(psib) == pytest.approx(-0.9501954178013031895e-3, abs=1e-14)
        assert float(epsa) == pytest.approx(0.4091014316587367491, abs=1e-12)

    def test_fw2m_zero_angles(self):
        assert jnp.allclose(fw2m(0.0, 0.0, 0.0, 0.0), jnp.eye(3), atol=1e-15)


# ---------------------------------------------------------------------------
# Nutation
# ---------------------------------------------------------------------------


class TestNutation:
    def test_nut00a(self):
        dpsi, deps = nut00a(_MJD0, 53736.0)
        assert float(dpsi) == pytest.approx(-0.9630909107115518431e-5, abs=1e-13)
        assert float(deps) == pytest.approx(0.4063239174001678710e-4, abs=1e-13)

    def test_nut06a(self):
        dpsi, deps = nut06a(_MJD0, 53736.0)
        assert float(dpsi) == pytest.approx(-0.9630912025820308797e-5, abs=1e-13)
        assert float(deps) == pytest.approx(0.4063238496887249798e-4, abs=1e-13)

    def test_nut00a_jit(self):
        dpsi, deps = jax.jit(nut00a)(_MJD0, 53736.0)
        assert float(dpsi) == pytest.approx(-0.9630909107115518431e-5, abs=1e-13)
        assert float(deps) == pytest.approx(0.4063239174001678710e-4, abs=1e-13)

    def test_numat(self):
        rmatn = numat(0.4090789763356509900, -0.9630909107115582393e-5, 0.4090789763356509900e-4)
        expected = jnp.array([
            [0.9999999999536227949, 0.8836238544090873336e-5, 0.3830835237722400669e-5],
            [-0.8836082880798569274e-5, 0.9999999991354655028, -0.4063240865362499850e-4],
            [-0.3831194272065995866e-5, 0.4063237480216291775e-4, 0.9999999991671660338],
        ])
        assert jnp.allclose(rmatn, expected, atol=1e-12)


# ---------------------------------------------------------------------------
# Combined matrices and CIP
# ---------------------------------------------------------------------------


class TestPrecessionNutationMatrices:
    def test_pnm00a(self):
        expected = jnp.array([
            [0.9999995832793134257, 0.8372384254137809439e-3, 0.3639684306407150645e-3],
            [-0.8372535226570394543e-3, 0.9999996486491582471, 0.4132915262664072381e-4],
            [-0.3639337004054317729e-3, -0.4163386925461775873e-4, 0.9999999329094390695],
        ])
        assert jnp.allclose(pnm00a(_MJD0, 50123.9999), expected, atol=1e-12)

    def test_pnm06a(self):
        expected = jnp.array([
            [0.9999995832794205484, 0.8372382772630962111e-3, 0.3639684771140623099e-3],
            [-0.8372533744743683605e-3, 0.9999996486492861646, 0.4132905944611019498e-4],
            [-0.3639337469629464969e-3, -0.4163377605910663999e-4, 0.9999999329094260057],
        ])
        assert jnp.allclose(pnm06a(_MJD0, 50123.9999), expected, atol=1e-12)

    def test_pnm06a_orthonormal(self):
        rbpn = pnm06a(_MJD0, 58000.0)
        assert jnp.allclose(rbpn @ rbpn.T, jnp.eye(3), atol=1e-14)

    def test_bpn2xy(self):
        x, y = bpn2xy(_RNPB)
        assert float(x) == float(_RNPB[2, 0])
        assert float(y) == float(_RNPB[2, 1])


class TestCioLocator:
    def test_s00(self):
        s = s00(_MJD0, 53736.0, _X, _Y)
        assert float(s) == pytest.approx(-0.1220036263270905693e-7, abs=1e-18)

    def test_s06(self):
        s = s06(_MJD0, 53736.0, _X, _Y)
        assert float(s) == pytest.approx(-0.1220032213076463117e-7, abs=1e-18)

    def test_xys00a(self):
        x, y, s = xys00a(_MJD0, 53736.0)
        assert float(x) == pytest.approx(0.5791308472168152904e-3, abs=1e-14)
        assert float(y) == pytest.approx(0.4020595661591500259e-4, abs=1e-15)
        assert float(s) == pytest.approx(-0.1220040848471549623e-7, abs=1e-18)

    def test_xys06a(self):
        x, y, s = xys06a(_MJD0, 53736.0)
        assert float(x) == pytest.approx(0.5791308482835292617e-3, abs=1e-14)
        assert float(y) == pytest.approx(0.4020580099454020310e-4, abs=1e-15)
        assert float(s) == pytest.approx(-0.1220032294164579896e-7, abs=1e-18)

    def test_c2ixys(self):
        expected = jnp.array([
            [0.9999998323037157138, 0.5581984869168499149e-9, -0.5791308491611282180e-3],
            [-0.2384261642670440317e-7, 0.9999999991917468964, -0.4020579110169668931e-4],
            [0.5791308486706011000e-3, 0.4020579816732961219e-4, 0.9999998314954627590],
        ])
        rc2i = c2ixys(_X, _Y, -0.1220040848472271978e-7)
        assert jnp.allclose(rc2i, expected, atol=1e-12)

    def test_c2ixys_identity_at_zero(self):
        assert jnp.allclose(c2ixys(0.0, 0.0, 0.0), jnp.eye(3), atol=1e-15)


# ---------------------------------------------------------------------------
# Earth rotation and polar motion
# ---------------------------------------------------------------------------


class TestEarthRotation:
    def test_era00(self):
        assert float(era00(_MJD0, 54388.0)) == pytest.approx(0.4022837240028158102, abs=1e-12)

    def test_era00_part_order_irrelevant(self):
        assert float(era00(54388.0, _MJD0)) == pytest.approx(float(era00(_MJD0, 54388.0)), abs=1e-15)

    def test_era00_range(self):
        era = era00(jnp.full(5, _MJD0), jnp.linspace(50000.0, 60000.0, 5))
        assert bool(jnp.all((era >= 0.0) & (era < 2.0 * jnp.pi)))

    def test_eors(self):
        eo = eors(_RNPB, -0.1220040848472271978e-7)
        assert float(eo) == pytest.approx(-0.1332882715130744606e-2, abs=1e-14)

    def test_gst06(self):
        gst = gst06(_MJD0, 53736.0, _MJD0, 53736.0, _RNPB)
        assert float(gst) == pytest.approx(1.754166138018167568, abs=1e-12)

    def test_sp00(self):
        assert float(sp00(_MJD0, 52541.0)) == pytest.approx(-0.6216698469981019309e-11, abs=1e-12)

    def test_pom00(self):
        rpom = pom00(2.55060238e-7, 1.860359247e-6, -0.1367174580728891460e-10)
        expected = jnp.array([
            [0.9999999999999674721, -0.1367174580728846989e-10, 0.2550602379999972345e-6],
            [0.1414624947957029801e-10, 0.9999999999982695317, -0.1860359246998866389e-5],
            [-0.2550602379741215021e-6, 0.1860359247002414021e-5, 0.9999999999982370039],
        ])
        assert jnp.allclose(rpom, expected, atol=1e-12)


# ---------------------------------------------------------------------------
# Equinox-based quantities
# ---------------------------------------------------------------------------


class TestEquinoxBased:
    def test_precession_angles06(self):
        eps0, psia, oma, chia = precession_angles06(_MJD0, 52541.0)
        assert float(eps0) == pytest.approx(0.4090926006005828715, abs=1e-14)
        assert float(psia) == pytest.approx(0.6664369630191613431e-3, abs=1e-14)
        assert float(oma) == pytest.approx(0.4090925973783255982, abs=1e-14)
        assert float(chia) == pytest.approx(0.1387703379530915364e-5, abs=1e-14)

    def test_classical_precession_matches_fukushima_williams(self):
        _, rp, _ = bp06(_MJD0, 52541.0)
        p = classical_precession_matrix(*precession_angles06(_MJD0, 52541.0))
        assert jnp.allclose(p, rp, atol=1e-11)

    def test_classical_precession_is_bp00(self):
        _, rp, _ = bp00(_MJD0, 50123.9999)
        psia, oma, chia = precession_angles00(_MJD0, 50123.9999)
        p = classical_precession_matrix(EPS0, psia, oma, chia)
        assert jnp.allclose(p, rp, atol=1e-15)

    def test_gmst06(self):
        gmst = gmst06(_MJD0, 53736.0, _MJD0, 53736.0)
        assert float(gmst) == pytest.approx(1.754174971870091203, abs=1e-12)

    def test_eect00(self):
        assert float(eect00(_MJD0, 53736.0)) == pytest.approx(0.2046085004885125264e-8, abs=1e-18)

    def test_ee00(self):
        ee = ee00(_MJD0, 53736.0, 0.4090789763356509900, -0.9630909107115582393e-5)
        assert float(ee) == pytest.approx(-0.8834193235367965479e-5, abs=1e-17)

    def test_ee00a(self):
        assert float(ee00a(_MJD0, 53736.0)) == pytest.approx(-0.8834192459222588227e-5, abs=1e-13)

    def test_ee06a(self):
        assert float(ee06a(_MJD0, 53736.0)) == pytest.approx(-0.8834195072043790156e-5, abs=1e-13)

    def test_gst_minus_gmst_is_ee06a(self):
        gst = gst06(_MJD0, 53736.0, _MJD0, 53736.0, pnm06a(_MJD0, 53736.0))
        gmst = gmst06(_MJD0, 53736.0, _MJD0, 53736.0)
        assert float(gst - gmst) == pytest.approx(float(ee06a(_MJD0, 53736.0)), abs=1e-12)

    def test_ee00a_jit(self):
        ee = jax.jit(ee00a)(_MJD0, 53736.0)
        assert float(ee) == pytest.approx(-0.8834192459222588227e-5, abs=1e-13)
