"""Tests for time-scale conversions (framejax.time_scales).

Reference values are from the SOFA test suite (t_sofa.c), all on
2006-01-15 where TAI-UTC is 33 s.
"""

import jax.numpy as jnp
import pytest

from framejax.eop import EOPData, EarthOrientationParameters, set_eop_data, static_eop
from framejax.epoch import TwoPartTime
from framejax.errors import UnsupportedConversionError
from framejax.time import TimeScale
from framejax.time_scales import (
    TimeScaleConverter,
    conversion_path,
    tai_to_tt,
    tai_to_utc,
    tcb_to_tdb,
    tcg_to_tt,
    tdb_minus_tt_usno,
    tdb_to_tcb,
    tt_to_tai,
    tt_to_tcg,
    tt_to_tdb,
    ut1_to_utc,
    utc_to_tai,
    utc_to_ut1,
)

_TOL = 1e-12
_JD1 = 2453750.5


@pytest.fixture
def clear_eop():
    """Remove any process-wide EOP table after the test."""
    yield
    set_eop_data(None)


# ---------------------------------------------------------------------------
# Pairwise conversions
# ---------------------------------------------------------------------------


class TestUtcTai:
    """Tests for utc_to_tai and tai_to_utc."""

    def test_utc_to_tai_sofa(self):
        tai = utc_to_tai(TwoPartTime(_JD1, 0.892100694))
        assert float(tai.jd1) == _JD1
        assert float(tai.jd2) == pytest.approx(0.8924826384444444444, abs=_TOL)

    def test_tai_to_utc_sofa(self):
        utc = tai_to_utc(TwoPartTime(_JD1, 0.892482639))
        assert float(utc.jd1) == _JD1
        assert float(utc.jd2) == pytest.approx(0.8921006945555555556, abs=_TOL)

    def test_split_preserved_when_small_part_first(self):
        tai = utc_to_tai(TwoPartTime(0.892100694, _JD1))
        assert float(tai.jd2) == _JD1
        assert float(tai.jd1) == pytest.approx(0.8924826384444444444, abs=_TOL)

    def test_roundtrip(self):
        utc = TwoPartTime.from_calendar(2020, 3, 14, 15, 9, 26.5358979)
        back = tai_to_utc(utc_to_tai(utc))
        assert float(back.diff_seconds(utc)) == pytest.approx(0.0, abs=1e-6)

    def test_leap_second_is_counted(self):
        """TAI advances two seconds from 23:59:59 to 00:00:00 over a leap second."""
        before = utc_to_tai(TwoPartTime.from_calendar(2016, 12, 31, 23, 59, 59.0))
        after = utc_to_tai(TwoPartTime.from_calendar(2017, 1, 1, 0, 0, 0.0))
        assert float(after.diff_seconds(before)) == pytest.approx(2.0, abs=1e-6)

    def test_inside_leap_second(self):
        inside = utc_to_tai(TwoPartTime.from_calendar(2016, 12, 31, 23, 59, 60.5))
        after = utc_to_tai(TwoPartTime.from_calendar(2017, 1, 1, 0, 0, 0.0))
        assert float(after.diff_seconds(inside)) == pytest.approx(0.5, abs=1e-6)

    def test_ordinary_day_offset(self):
        utc = TwoPartTime.from_calendar(2018, 5, 1, 6, 0, 0.0)
        tai = utc_to_tai(utc)
        assert float(tai.diff_seconds(utc)) == pytest.approx(37.0, abs=1e-6)


class TestFixedOffsets:
    """Tests for TAI <-> TT and TT <-> TCG."""

    def test_tai_to_tt_sofa(self):
        tt = tai_to_tt(TwoPartTime(_JD1, 0.892482639))
        assert float(tt.jd1) == _JD1
        assert float(tt.jd2) == pytest.approx(0.892855139, abs=_TOL)

    def test_tt_to_tai_sofa(self):
        tai = tt_to_tai(TwoPartTime(_JD1, 0.892855139))
        assert float(tai.jd2) == pytest.approx(0.892482639, abs=_TOL)

    def test_tt_minus_tai_exact(self):
        tai = TwoPartTime.from_calendar(2021, 7, 4, 12, 0, 0.0, "TAI")
        assert float(tai_to_tt(tai).diff_seconds(tai)) == pytest.approx(32.184, abs=1e-6)

    def test_tt_to_tcg_sofa(self):
        tcg = tt_to_tcg(TwoPartTime(_JD1, 0.892482639))
        assert float(tcg.jd1) == _JD1
        assert float(tcg.jd2) == pytest.approx(0.8924900312508587113, abs=_TOL)

    def test_tcg_to_tt_sofa(self):
        tt = tcg_to_tt(TwoPartTime(_JD1, 0.892862531))
        assert float(tt.jd2) == pytest.approx(0.8928551387488816828, abs=_TOL)

    def test_tcg_equals_tt_at_1977(self):
        tt = TwoPartTime(2443144.5, 0.0003725)
        assert float(tt_to_tcg(tt).diff_seconds(tt)) == pytest.approx(0.0, abs=1e-6)


class TestBarycentric:
    """Tests for TT <-> TDB and TDB <-> TCB."""

    def test_tdb_to_tcb_sofa(self):
        tcb = tdb_to_tcb(TwoPartTime(_JD1, 0.892855137))
        assert float(tcb.jd1) == _JD1
        assert float(tcb.jd2) == pytest.approx(0.8930195997253656716, abs=1e-8)

    def test_tcb_to_tdb_sofa(self):
        tdb = tcb_to_tdb(TwoPartTime(_JD1, 0.893019599))
        assert float(tdb.jd2) == pytest.approx(0.8928551362746343397, abs=_TOL)

    def test_tdb_tcb_roundtrip(self):
        tdb = TwoPartTime(_JD1, 0.25)
        back = tcb_to_tdb(tdb_to_tcb(tdb))
        assert float(back.diff_seconds(tdb)) == pytest.approx(0.0, abs=1e-6)

    def test_tt_to_tdb_applies_correction(self):
        tt = TwoPartTime(_JD1, 0.5)
        tdb = tt_to_tdb(tt, -0.001)
        assert float(tdb.diff_seconds(tt)) == pytest.approx(-0.001, abs=1e-8)

    def test_usno_series_magnitude(self):
        """The periodic term never exceeds about 1.7 ms."""
        for day in (0.0, 91.3, 182.6, 273.9):
            assert abs(tdb_minus_tt_usno(TwoPartTime(_JD1, day))) < 0.0018


class TestUt1:
    """Tests for utc_to_ut1 and ut1_to_utc."""

    def test_utc_to_ut1_sofa(self):
        ut1 = utc_to_ut1(TwoPartTime(_JD1, 0.892104561), 0.3341)
        assert float(ut1.jd1) == _JD1
        assert float(ut1.jd2) == pytest.approx(0.8921045614537037037, abs=_TOL)

    def test_ut1_to_utc_sofa(self):
        utc = ut1_to_utc(TwoPartTime(_JD1, 0.892104561), 0.3341)
        assert float(utc.jd2) == pytest.approx(0.8921006941018518519, abs=_TOL)


# ---------------------------------------------------------------------------
# Routed conversions
# ---------------------------------------------------------------------------


class TestConversionPath:
    def test_utc_to_tt(self):
        assert conversion_path("UTC", "TT") == [TimeScale.UTC, TimeScale.TAI, TimeScale.TT]

    def test_ut1_to_tcb(self):
        assert conversion_path(TimeScale.UT1, TimeScale.TCB) == [
            TimeScale.UT1,
            TimeScale.UTC,
            TimeScale.TAI,
            TimeScale.TT,
            TimeScale.TDB,
            TimeScale.TCB,
        ]

    def test_identity(self):
        assert conversion_path("tt", "tt") == [TimeScale.TT]

    def test_deterministic(self):
        assert conversion_path("TCG", "UTC") == conversion_path("TCG", "UTC")


class TestTimeScaleConverter:
    """Tests for TimeScaleConverter.convert."""

    def test_utc_to_tt(self):
        utc = TwoPartTime.from_calendar(2010, 12, 15, 20, 59, 29.9)
        tt = TimeScaleConverter().convert(utc, "UTC", "TT")
        assert float(tt.diff_seconds(utc)) == pytest.approx(34.0 + 32.184, abs=1e-6)

    def test_utc_tt_roundtrip(self):
        conv = TimeScaleConverter()
        utc = TwoPartTime.from_calendar(2023, 2, 28, 23, 30, 15.25)
        back = conv.convert(conv.convert(utc, "UTC", "TT"), "TT", "UTC")
        assert back.isclose(utc, tol_days=1e-9)

    def test_utc_to_tcg_roundtrip(self):
        conv = TimeScaleConverter()
        utc = TwoPartTime.from_calendar(2015, 7, 1, 0, 0, 1.0)
        back = conv.convert(conv.convert(utc, "UTC", "TCG"), "TCG", "UTC")
        assert back.isclose(utc, tol_days=1e-9)

    def test_identity_returns_same_instant(self):
        t = TwoPartTime(_JD1, 0.3)
        assert TimeScaleConverter().convert(t, "TT", "TT") is t

    def test_tdb_requires_correction(self):
        with pytest.raises(UnsupportedConversionError, match="tdb_correction"):
            TimeScaleConverter().convert(TwoPartTime(_JD1, 0.5), "TT", "TDB")

    def test_tdb_with_constant_correction(self):
        conv = TimeScaleConverter(tdb_correction=0.0012)
        tt = TwoPartTime(_JD1, 0.5)
        tdb = conv.convert(tt, "TT", "TDB")
        assert float(tdb.diff_seconds(tt)) == pytest.approx(0.0012, abs=1e-8)

    def test_tdb_with_callable_correction(self):
        conv = TimeScaleConverter(tdb_correction=tdb_minus_tt_usno)
        tt = TwoPartTime(_JD1, 0.5)
        tcb = conv.convert(tt, "TT", "TCB")
        back = conv.convert(tcb, "TCB", "TT")
        assert back.isclose(tt, tol_days=1e-9)

    def test_ut1_requires_dut1(self):
        with pytest.raises(UnsupportedConversionError, match="dut1"):
            TimeScaleConverter().convert(TwoPartTime(_JD1, 0.5), "UTC", "UT1")

    def test_ut1_from_float(self):
        conv = TimeScaleConverter(dut1=0.3341)
        ut1 = conv.convert(TwoPartTime(_JD1, 0.892104561), "UTC", "UT1")
        assert float(ut1.jd2) == pytest.approx(0.8921045614537037037, abs=_TOL)

    def test_ut1_from_parameters(self):
        conv = TimeScaleConverter(dut1=EarthOrientationParameters(dut1=0.3341))
        ut1 = conv.convert(TwoPartTime(_JD1, 0.892104561), "UTC", "UT1")
        assert float(ut1.jd2) == pytest.approx(0.8921045614537037037, abs=_TOL)

    def test_ut1_from_eop_table(self):
        conv = TimeScaleConverter(eop=static_eop(ut1_utc=0.3341))
        utc = TwoPartTime(_JD1, 0.892104561)
        ut1 = conv.convert(utc, "UTC", "UT1")
        assert float(ut1.jd2) == pytest.approx(0.8921045614537037037, abs=_TOL)
        back = conv.convert(ut1, "UT1", "UTC")
        assert back.isclose(utc, tol_days=1e-10)

    def test_ut1_from_eop_table_on_leap_day(self):
        mjds = jnp.array([57752.0, 57753.0, 57754.0, 57755.0])
        zeros = jnp.zeros(4)
        eop = EOPData(
            mjd=mjds,
            pm_x=zeros,
            pm_y=zeros,
            ut1_utc=jnp.array([-0.5907, -0.5916, 0.4074, 0.4065]),
            dX=zeros,
            dY=zeros,
            lod=zeros,
            mjd_min=mjds[0],
            mjd_max=mjds[-1],
            mjd_last_lod=mjds[-1],
            mjd_last_dxdy=mjds[-1],
        )
        utc = TwoPartTime.from_calendar(2016, 12, 31, 12, 0, 0.0)
        ut1 = TimeScaleConverter(eop=eop).convert(utc, "UTC", "UT1")
        expected = utc_to_ut1(utc, -0.5921)
        assert float(ut1.diff_seconds(expected)) == pytest.approx(0.0, abs=1e-6)

    def test_ut1_from_global_table(self, clear_eop):
        set_eop_data(static_eop(ut1_utc=-0.2))
        utc = TwoPartTime.from_calendar(2021, 1, 1)
        ut1 = TimeScaleConverter().convert(utc, "UTC", "UT1")
        assert float(ut1.diff_seconds(utc)) == pytest.approx(-0.2, abs=1e-6)

    def test_ut1_to_tt(self):
        conv = TimeScaleConverter(dut1=-0.1)
        ut1 = TwoPartTime.from_calendar(2019, 8, 1, 0, 0, 0.0, "UT1")
        tt = conv.convert(ut1, "UT1", "TT")
        assert float(tt.diff_seconds(ut1)) == pytest.approx(37.0 + 32.184 + 0.1, abs=1e-6)
