"""Tests for the calendar helpers in framejax.time."""

import pytest

from framejax.errors import InvalidDateError
from framejax.time import (
    TimeScale,
    cal2jd,
    days_in_month,
    is_leap_year,
    jd2cal,
    jd_to_mjd,
    mjd_to_jd,
)


class TestCal2Jd:
    def test_j2000_day(self):
        djm0, djm = cal2jd(2000, 1, 1)
        assert djm0 == 2400000.5
        assert djm == 51544.0

    def test_sofa_reference(self):
        """SOFA t_cal2jd: 2003-06-01 gives MJD 52791."""
        djm0, djm = cal2jd(2003, 6, 1)
        assert djm0 == 2400000.5
        assert djm == 52791.0

    def test_mjd_epoch(self):
        assert cal2jd(1858, 11, 17) == (2400000.5, 0.0)

    def test_invalid_month(self):
        with pytest.raises(InvalidDateError, match="Month"):
            cal2jd(2020, 13, 1)

    def test_invalid_day(self):
        with pytest.raises(InvalidDateError, match="Day 30"):
            cal2jd(2021, 2, 30)

    def test_leap_day_accepted(self):
        _, djm = cal2jd(2020, 2, 29)
        assert djm == 58908.0

    def test_year_too_early(self):
        with pytest.raises(InvalidDateError):
            cal2jd(-5000, 1, 1)

    def test_invalid_date_is_value_error(self):
        with pytest.raises(ValueError):
            cal2jd(2020, 0, 1)


class TestJd2Cal:
    def test_sofa_reference(self):
        """SOFA t_jd2cal: 2400000.5 + 50123.9999 is 1996-02-10."""
        year, month, day, fraction = jd2cal(2400000.5, 50123.9999)
        assert (year, month, day) == (1996, 2, 10)
        assert fraction == pytest.approx(0.9999, abs=1e-7)

    def test_j2000_noon(self):
        year, month, day, fraction = jd2cal(2451545.0, 0.0)
        assert (year, month, day) == (2000, 1, 1)
        assert fraction == pytest.approx(0.5, abs=1e-12)

    def test_split_invariance(self):
        """The result does not depend on how the date is split."""
        a = jd2cal(2451545.0, 0.25)
        b = jd2cal(2400000.5, 51544.75)
        assert a[:3] == b[:3]
        assert a[3] == pytest.approx(b[3], abs=1e-12)

    def test_inverse_of_cal2jd(self):
        djm0, djm = cal2jd(2016, 12, 31)
        assert jd2cal(djm0, djm)[:3] == (2016, 12, 31)

    def test_out_of_range(self):
        with pytest.raises(InvalidDateError):
            jd2cal(-1.0e6, 0.0)


class TestCalendarHelpers:
    def test_leap_years(self):
        assert is_leap_year(2000)
        assert is_leap_year(2016)
        assert not is_leap_year(1900)
        assert not is_leap_year(2019)

    def test_days_in_month(self):
        assert days_in_month(2019, 2) == 28
        assert days_in_month(2020, 2) == 29
        assert days_in_month(2020, 4) == 30
        assert days_in_month(2020, 12) == 31

    def test_days_in_month_invalid(self):
        with pytest.raises(InvalidDateError):
            days_in_month(2020, 0)

    def test_jd_to_mjd(self):
        assert jd_to_mjd(2451545.0) == pytest.approx(51544.5, abs=1e-9)

    def test_mjd_to_jd(self):
        assert mjd_to_jd(51544.5) == pytest.approx(2451545.0, abs=1e-9)


class TestTimeScale:
    def test_parse_case_insensitive(self):
        assert TimeScale.parse("utc") is TimeScale.UTC
        assert TimeScale.parse(" Tdb ") is TimeScale.TDB

    def test_parse_member(self):
        assert TimeScale.parse(TimeScale.UT1) is TimeScale.UT1

    def test_parse_unknown(self):
        with pytest.raises(ValueError, match="Unknown time scale"):
            TimeScale.parse("GPS")

    def test_all_scales_present(self):
        names = {m.value for m in TimeScale}
        assert names == {"UTC", "TAI", "TT", "TCG", "TDB", "TCB", "UT1"}
