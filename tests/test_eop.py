"""Tests for Earth Orientation Parameters (EOP) module."""

from __future__ import annotations

import logging
import math
import os
import time
from unittest.mock import patch

import httpx
import jax
import jax.numpy as jnp
import pytest

from framejax.config import get_dtype
from framejax.constants import AS2RAD, MAS2RAD
from framejax.eop import (
    EarthOrientationParameters,
    EOPData,
    EOPExtrapolation,
    download_eop_file,
    get_dxdy,
    get_eop,
    get_eop_data,
    get_eop_version,
    get_lod,
    get_pm,
    get_ut1_utc,
    load_cached_eop,
    load_eop_from_file,
    parse_finals_file,
    parse_finals_line,
    set_eop_data,
    static_eop,
    zero_eop,
)
from framejax.errors import TableLookupMissError
from framejax.leap_seconds import LeapSecondEntry, LeapSecondTable


def _make_test_eop(
    mjds: list[float],
    ut1_utcs: list[float],
    pm_xs: list[float] | None = None,
    pm_ys: list[float] | None = None,
    dXs: list[float] | None = None,
    dYs: list[float] | None = None,
    lods: list[float] | None = None,
) -> EOPData:
    """Helper to construct EOPData for tests using the configured dtype."""
    dtype = get_dtype()
    n = len(mjds)
    return EOPData(
        mjd=jnp.array(mjds, dtype=dtype),
        pm_x=jnp.array(pm_xs or [0.0] * n, dtype=dtype),
        pm_y=jnp.array(pm_ys or [0.0] * n, dtype=dtype),
        ut1_utc=jnp.array(ut1_utcs, dtype=dtype),
        dX=jnp.array(dXs or [0.0] * n, dtype=dtype),
        dY=jnp.array(dYs or [0.0] * n, dtype=dtype),
        lod=jnp.array(lods or [0.0] * n, dtype=dtype),
        mjd_min=jnp.array(mjds[0], dtype=dtype),
        mjd_max=jnp.array(mjds[-1], dtype=dtype),
        mjd_last_lod=jnp.array(mjds[-1], dtype=dtype),
        mjd_last_dxdy=jnp.array(mjds[-1], dtype=dtype),
    )


def _finals_line(
    mjd: float,
    pm_x: str = "0.054460",
    pm_y: str = "0.275387",
    ut1_utc: str = "-0.1104988",
    lod: str = "0.2474",
    dx: str = "0.291",
    dy: str = "-0.128",
) -> str:
    """Build a 187-column finals record with the given fields."""
    chars = [" "] * 187
    fields = (
        (6, 15, f"{mjd:.2f}"),
        (17, 27, pm_x),
        (36, 46, pm_y),
        (58, 68, ut1_utc),
        (78, 86, lod),
        (96, 106, dx),
        (115, 125, dy),
    )
    for start, stop, text in fields:
        chars[start:stop] = text.rjust(stop - start)
    return "".join(chars)


@pytest.fixture
def finals_file(tmp_path):
    """Write a three-record finals file (the last record is a prediction)."""
    lines = [
        _finals_line(59581.0, ut1_utc="-0.1100000"),
        _finals_line(59580.0, ut1_utc="-0.1090000"),
        _finals_line(59582.0, ut1_utc="-0.1110000", lod="", dx="", dy=""),
        "",
    ]
    path = tmp_path / "finals.all.iau2000.txt"
    path.write_text("\n".join(lines))
    return path


@pytest.fixture
def clear_eop():
    """Remove any process-wide EOP table after the test."""
    yield
    set_eop_data(None)


# ---------------------------------------------------------------------------
# Static / Zero provider tests
# ---------------------------------------------------------------------------


class TestStaticEOP:
    """Tests for static_eop and zero_eop providers."""

    def test_zero_eop_returns_eopdata(self):
        assert isinstance(zero_eop(), EOPData)

    def test_zero_eop_values(self):
        pm_x, pm_y, ut1_utc, lod, dx, dy = get_eop(zero_eop(), 59569.0)
        for value in (pm_x, pm_y, ut1_utc, lod, dx, dy):
            assert float(value) == 0.0

    def test_static_values(self):
        eop = static_eop(pm_x=1e-6, pm_y=2e-6, ut1_utc=-0.2, dX=3e-10, dY=4e-10, lod=0.001)
        assert float(get_ut1_utc(eop, 59569.0)) == pytest.approx(-0.2, abs=1e-15)
        pm_x, pm_y = get_pm(eop, 59569.0)
        assert float(pm_x) == pytest.approx(1e-6, abs=1e-18)
        assert float(pm_y) == pytest.approx(2e-6, abs=1e-18)
        dx, dy = get_dxdy(eop, 59569.0)
        assert float(dx) == pytest.approx(3e-10, abs=1e-20)
        assert float(dy) == pytest.approx(4e-10, abs=1e-20)
        assert float(get_lod(eop, 59569.0)) == pytest.approx(0.001, abs=1e-15)

    def test_static_dtype(self):
        assert static_eop().mjd.dtype == get_dtype()


# ---------------------------------------------------------------------------
# Interpolation
# ---------------------------------------------------------------------------


class TestInterpolation:
    """Tests for linear interpolation and extrapolation modes."""

    def test_at_nodes(self):
        eop = _make_test_eop([59000.0, 59001.0, 59002.0], [0.1, 0.2, 0.4])
        assert float(get_ut1_utc(eop, 59001.0)) == pytest.approx(0.2, abs=1e-15)

    def test_midpoint(self):
        eop = _make_test_eop([59000.0, 59001.0, 59002.0], [0.1, 0.2, 0.4])
        assert float(get_ut1_utc(eop, 59001.5)) == pytest.approx(0.3, abs=1e-12)

    def test_vectorised_query(self):
        eop = _make_test_eop([59000.0, 59001.0], [0.0, 1.0])
        result = get_ut1_utc(eop, jnp.array([59000.25, 59000.5, 59000.75]))
        assert jnp.allclose(result, jnp.array([0.25, 0.5, 0.75]), atol=1e-12)

    def test_hold_clamps_and_warns(self, caplog):
        eop = _make_test_eop([59000.0, 59001.0], [0.1, 0.2])
        with caplog.at_level(logging.WARNING, logger="framejax.eop._lookup"):
            low = get_ut1_utc(eop, 58000.0)
            high = get_ut1_utc(eop, 60000.0)
        assert float(low) == pytest.approx(0.1, abs=1e-15)
        assert float(high) == pytest.approx(0.2, abs=1e-15)
        assert "outside the table range" in caplog.text

    def test_error_mode_raises(self):
        eop = _make_test_eop([59000.0, 59001.0], [0.1, 0.2])
        with pytest.raises(TableLookupMissError) as exc_info:
            get_ut1_utc(eop, 60000.0, EOPExtrapolation.ERROR)
        assert exc_info.value.table == "EOP"
        assert exc_info.value.upper == 59001.0

    def test_error_mode_in_range(self):
        eop = _make_test_eop([59000.0, 59001.0], [0.1, 0.2])
        value = get_ut1_utc(eop, 59000.5, EOPExtrapolation.ERROR)
        assert float(value) == pytest.approx(0.15, abs=1e-12)

    def test_error_mode_traced_gives_nan(self):
        eop = _make_test_eop([59000.0, 59001.0], [0.1, 0.2])
        f = jax.jit(lambda m: get_ut1_utc(eop, m, EOPExtrapolation.ERROR))
        assert math.isnan(float(f(60000.0)))

    def test_jit(self):
        eop = _make_test_eop([59000.0, 59001.0], [0.1, 0.2])
        f = jax.jit(lambda m: get_ut1_utc(eop, m))
        assert float(f(59000.5)) == pytest.approx(0.15, abs=1e-12)

    def test_get_eop_order(self):
        eop = static_eop(pm_x=1.0, pm_y=2.0, ut1_utc=3.0, lod=4.0, dX=5.0, dY=6.0)
        values = [float(v) for v in get_eop(eop, 59000.0)]
        assert values == [1.0, 2.0, 3.0, 4.0, 5.0, 6.0]


# ---------------------------------------------------------------------------
# UT1-UTC across a leap second
# ---------------------------------------------------------------------------

# Rows spanning the leap second at the end of 2016-12-31 (MJD 57754 = 2017-01-01)
_LEAP_MJDS = [57752.0, 57753.0, 57754.0, 57755.0]
_LEAP_UT1_UTC = [-0.5907, -0.5916, 0.4074, 0.4065]


class TestLeapSecondStep:
    """UT1-UTC keeps its one-second step instead of blending through it."""

    def test_last_day_before_leap(self):
        eop = _make_test_eop(_LEAP_MJDS, _LEAP_UT1_UTC)
        value = get_ut1_utc(eop, 57753.5)
        assert float(value) == pytest.approx(-0.5921, abs=1e-9)

    def test_just_before_leap(self):
        eop = _make_test_eop(_LEAP_MJDS, _LEAP_UT1_UTC)
        value = get_ut1_utc(eop, 57753.99)
        assert float(value) == pytest.approx(-0.5916 - 0.99 * 0.001, abs=1e-9)

    def test_at_leap_node(self):
        eop = _make_test_eop(_LEAP_MJDS, _LEAP_UT1_UTC)
        assert float(get_ut1_utc(eop, 57754.0)) == pytest.approx(0.4074, abs=1e-15)

    def test_after_leap(self):
        eop = _make_test_eop(_LEAP_MJDS, _LEAP_UT1_UTC)
        assert float(get_ut1_utc(eop, 57754.5)) == pytest.approx(0.40695, abs=1e-9)

    def test_step_of_either_sign(self):
        eop = _make_test_eop(_LEAP_MJDS, [0.40853, 0.40760, -0.59247, -0.59250])
        value = get_ut1_utc(eop, 57753.5)
        assert float(value) == pytest.approx(0.407565, abs=1e-9)

    def test_no_blend_anywhere_on_leap_day(self):
        eop = _make_test_eop(_LEAP_MJDS, _LEAP_UT1_UTC)
        values = get_ut1_utc(eop, jnp.linspace(57753.0, 57753.999, 50))
        assert bool(jnp.all(values < -0.59)), values
        assert bool(jnp.all(values > -0.5927)), values

    def test_jit(self):
        eop = _make_test_eop(_LEAP_MJDS, _LEAP_UT1_UTC)
        f = jax.jit(lambda m: get_ut1_utc(eop, m))
        assert float(f(57753.5)) == pytest.approx(-0.5921, abs=1e-9)

    def test_get_eop_matches_get_ut1_utc(self):
        eop = _make_test_eop(_LEAP_MJDS, _LEAP_UT1_UTC)
        _, _, ut1_utc, _, _, _ = get_eop(eop, 57753.25)
        assert float(ut1_utc) == float(get_ut1_utc(eop, 57753.25))

    def test_from_eop_data(self):
        eop = _make_test_eop(_LEAP_MJDS, _LEAP_UT1_UTC)
        params = EarthOrientationParameters.from_eop_data(eop, 57753.5)
        assert params.dut1 == pytest.approx(-0.5921, abs=1e-9)

    def test_table_without_leap_blends_linearly(self):
        entries = (LeapSecondEntry(41317.0, 10.0),)
        table = LeapSecondTable(entries=entries, source="test")
        eop = _make_test_eop(_LEAP_MJDS, _LEAP_UT1_UTC)
        value = get_ut1_utc(eop, 57753.5, leap_seconds=table)
        assert float(value) == pytest.approx(-0.0921, abs=1e-9)


# ---------------------------------------------------------------------------
# Per-epoch parameters
# ---------------------------------------------------------------------------


class TestEarthOrientationParameters:
    """Tests for EarthOrientationParameters."""

    def test_defaults_are_zero(self):
        params = EarthOrientationParameters()
        assert tuple(params) == (0.0, 0.0, 0.0, 0.0, 0.0, 0.0)

    def test_radian_conversion(self):
        params = EarthOrientationParameters(xp=0.0349282, yp=0.4833163, dx=0.000175, dy=-0.0002259)
        xp, yp = params.polar_motion_rad()
        dx, dy = params.celestial_pole_offsets_rad()
        assert float(xp) == pytest.approx(0.0349282 * AS2RAD, rel=1e-15)
        assert float(yp) == pytest.approx(0.4833163 * AS2RAD, rel=1e-15)
        assert float(dx) == pytest.approx(0.175 * MAS2RAD, rel=1e-12)
        assert float(dy) == pytest.approx(-0.2259 * MAS2RAD, rel=1e-12)

    def test_from_eop_data(self):
        eop = static_eop(
            pm_x=0.0349282 * AS2RAD,
            pm_y=0.4833163 * AS2RAD,
            ut1_utc=-0.072073685,
            dX=0.175 * MAS2RAD,
            dY=-0.2259 * MAS2RAD,
            lod=0.0014,
        )
        params = EarthOrientationParameters.from_eop_data(eop, 54195.5)
        assert params.dut1 == pytest.approx(-0.072073685, abs=1e-12)
        assert params.lod == pytest.approx(0.0014, abs=1e-15)
        assert params.xp == pytest.approx(0.0349282, abs=1e-12)
        assert params.yp == pytest.approx(0.4833163, abs=1e-12)
        assert params.dx == pytest.approx(0.000175, abs=1e-12)
        assert params.dy == pytest.approx(-0.0002259, abs=1e-12)

    def test_from_eop_data_missing_optional_values(self):
        eop = static_eop(ut1_utc=0.1, lod=math.nan, dX=math.nan, dY=math.nan)
        params = EarthOrientationParameters.from_eop_data(eop, 59000.0)
        assert params.lod == 0.0
        assert params.dx == 0.0
        assert params.dy == 0.0

    def test_from_eop_data_error_mode(self):
        eop = static_eop(mjd_min=59000.0, mjd_max=59010.0)
        with pytest.raises(TableLookupMissError):
            EarthOrientationParameters.from_eop_data(eop, 60000.0, EOPExtrapolation.ERROR)


# ---------------------------------------------------------------------------
# Parsing and file loading
# ---------------------------------------------------------------------------


class TestParser:
    """Tests for parse_finals_line and parse_finals_file."""

    def test_full_record(self):
        record = parse_finals_line(_finals_line(59580.0))
        assert record is not None
        mjd, pm_x, pm_y, ut1_utc, lod, dx, dy = record
        assert mjd == 59580.0
        assert pm_x == pytest.approx(0.054460 * AS2RAD, rel=1e-12)
        assert pm_y == pytest.approx(0.275387 * AS2RAD, rel=1e-12)
        assert ut1_utc == pytest.approx(-0.1104988, abs=1e-12)
        assert lod == pytest.approx(0.2474e-3, abs=1e-15)
        assert dx == pytest.approx(0.291 * MAS2RAD, rel=1e-12)
        assert dy == pytest.approx(-0.128 * MAS2RAD, rel=1e-12)

    def test_prediction_record_has_nan_optionals(self):
        record = parse_finals_line(_finals_line(59600.0, lod="", dx="", dy=""))
        assert record is not None
        assert all(math.isnan(v) for v in record[4:])

    def test_short_record_padded(self):
        record = parse_finals_line(_finals_line(59600.0).rstrip()[:70])
        assert record is not None
        assert record[3] == pytest.approx(-0.1104988, abs=1e-12)

    def test_missing_ut1_rejected(self):
        assert parse_finals_line(_finals_line(59600.0, ut1_utc="")) is None

    def test_overlong_record_rejected(self):
        assert parse_finals_line(_finals_line(59600.0) + "X") is None

    def test_file(self, finals_file):
        records = parse_finals_file(str(finals_file))
        assert [r[0] for r in records] == [59581.0, 59580.0, 59582.0]

    def test_empty_file(self, tmp_path):
        path = tmp_path / "empty.txt"
        path.write_text("\n")
        with pytest.raises(ValueError, match="No valid EOP data"):
            parse_finals_file(str(path))


class TestLoadFromFile:
    """Tests for load_eop_from_file."""

    def test_sorted_and_bounds(self, finals_file):
        eop = load_eop_from_file(finals_file)
        assert jnp.array_equal(eop.mjd, jnp.array([59580.0, 59581.0, 59582.0]))
        assert float(eop.mjd_min) == 59580.0
        assert float(eop.mjd_max) == 59582.0

    def test_last_valid_markers(self, finals_file):
        eop = load_eop_from_file(finals_file)
        assert float(eop.mjd_last_lod) == 59581.0
        assert float(eop.mjd_last_dxdy) == 59581.0

    def test_interpolated_value(self, finals_file):
        eop = load_eop_from_file(finals_file)
        assert float(get_ut1_utc(eop, 59580.5)) == pytest.approx(-0.1095, abs=1e-12)

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_eop_from_file(tmp_path / "missing.txt")


class TestDownloadAndCache:
    """Tests for download_eop_file and load_cached_eop."""

    def test_download_writes_file(self, tmp_path, finals_file):
        dest = tmp_path / "eop" / "finals.all.iau2000.txt"
        with patch("framejax.utils.download.httpx.Client") as mock_client_cls:
            mock_response = mock_client_cls.return_value.__enter__.return_value.get.return_value
            mock_response.text = finals_file.read_text()
            result = download_eop_file(dest)

        assert result == dest.resolve()
        assert dest.read_text() == finals_file.read_text()
        mock_response.raise_for_status.assert_called_once()

    def test_fresh_cache_skips_download(self, finals_file):
        with patch("framejax.eop._providers.download_eop_file") as mock_download:
            eop = load_cached_eop(finals_file)
        mock_download.assert_not_called()
        assert float(eop.mjd_max) == 59582.0

    def test_stale_cache_used_when_download_fails(self, finals_file, caplog):
        old_time = time.time() - 30 * 86400
        os.utime(finals_file, (old_time, old_time))
        with patch(
            "framejax.eop._providers.download_eop_file",
            side_effect=httpx.ConnectError("unreachable"),
        ):
            with caplog.at_level(logging.WARNING, logger="framejax.eop._providers"):
                eop = load_cached_eop(finals_file)
        assert float(eop.mjd_min) == 59580.0
        assert "stale cache" in caplog.text

    def test_no_cache_and_no_network_raises(self, tmp_path):
        with patch(
            "framejax.eop._providers.download_eop_file",
            side_effect=httpx.ConnectError("unreachable"),
        ):
            with pytest.raises(httpx.ConnectError):
                load_cached_eop(tmp_path / "finals.all.iau2000.txt")


# ---------------------------------------------------------------------------
# Process-wide snapshot
# ---------------------------------------------------------------------------


class TestEOPState:
    """Tests for set_eop_data and get_eop_data."""

    def test_install_and_clear(self, clear_eop):
        before = get_eop_version()
        eop = static_eop(ut1_utc=0.1)
        version = set_eop_data(eop)
        assert version == before + 1
        assert get_eop_data() is eop
        assert get_eop_version() == version

        set_eop_data(None)
        assert get_eop_data() is None
        assert get_eop_version() == version + 1
