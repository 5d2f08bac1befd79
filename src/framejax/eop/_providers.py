"""Factory functions for :class:`EOPData` tables.

- :func:`static_eop`: constant values (tests, or known values).
- :func:`zero_eop`: all-zero values.
- :func:`load_eop_from_file`: an IERS ``finals.all.iau2000.txt`` file.
- :func:`load_cached_eop`: a locally cached copy of the IERS file,
  refreshed when stale.

No EOP data is bundled with framejax; frame transformations take explicit
:class:`~framejax.eop.EarthOrientationParameters` and never need a table.
"""

from __future__ import annotations

import logging
from pathlib import Path

import httpx
import jax.numpy as jnp

from framejax.config import get_dtype
from framejax.eop._download import _FINALS_FILENAME, download_eop_file
from framejax.eop._parsers import parse_finals_file
from framejax.eop._types import EOPData
from framejax.utils.caching import get_eop_cache_dir, is_file_stale

logger = logging.getLogger(__name__)

_DEFAULT_MAX_AGE_DAYS: float = 7.0
"""Default maximum age for cached EOP data in days."""


def static_eop(
    pm_x: float = 0.0,
    pm_y: float = 0.0,
    ut1_utc: float = 0.0,
    dX: float = 0.0,
    dY: float = 0.0,
    lod: float = 0.0,
    mjd_min: float = 0.0,
    mjd_max: float = 99999.0,
) -> EOPData:
    """Create an EOPData with constant values across an MJD range.

    The table holds two identical rows at *mjd_min* and *mjd_max*, so
    interpolation returns the constant everywhere in between.

    Args:
        pm_x: Polar motion x-component [rad].
        pm_y: Polar motion y-component [rad].
        ut1_utc: UT1-UTC offset [seconds].
        dX: Celestial pole offset X [rad].
        dY: Celestial pole offset Y [rad].
        lod: Length of day excess [seconds].
        mjd_min: Start of the valid MJD range.
        mjd_max: End of the valid MJD range.

    Returns:
        EOPData with constant values.
    """
    dtype = get_dtype()

    def pair(value: float):
        return jnp.array([value, value], dtype=dtype)

    return EOPData(
        mjd=jnp.array([mjd_min, mjd_max], dtype=dtype),
        pm_x=pair(pm_x),
        pm_y=pair(pm_y),
        ut1_utc=pair(ut1_utc),
        dX=pair(dX),
        dY=pair(dY),
        lod=pair(lod),
        mjd_min=jnp.array(mjd_min, dtype=dtype),
        mjd_max=jnp.array(mjd_max, dtype=dtype),
        mjd_last_lod=jnp.array(mjd_max, dtype=dtype),
        mjd_last_dxdy=jnp.array(mjd_max, dtype=dtype),
    )


def zero_eop() -> EOPData:
    """Create an EOPData with all-zero values."""
    return static_eop()


def load_eop_from_file(filepath: str | Path) -> EOPData:
    """Load an EOP table from an IERS ``finals`` file.

    Args:
        filepath: Path to the file (e.g. ``finals.all.iau2000.txt``).

    Returns:
        EOPData ready for JIT-compatible lookups.

    Raises:
        FileNotFoundError: If the file does not exist.
        ValueError: If no valid EOP data is found.

    Examples:
        ```python
        from framejax.eop import load_eop_from_file, get_ut1_utc
        eop = load_eop_from_file("finals.all.iau2000.txt")
        val = get_ut1_utc(eop, 59569.0)
        ```
    """
    filepath = Path(filepath)
    if not filepath.exists():
        raise FileNotFoundError(f"EOP file not found: {filepath}")

    records = sorted(parse_finals_file(str(filepath)))
    mjd, pm_x, pm_y, ut1_utc, lod, dx, dy = (
        jnp.array(column, dtype=jnp.float64) for column in zip(*records)
    )

    lod_valid = ~jnp.isnan(lod)
    dxdy_valid = ~jnp.isnan(dx) & ~jnp.isnan(dy)
    mjd_last_lod = float(mjd[lod_valid][-1]) if jnp.any(lod_valid) else float(mjd[0])
    mjd_last_dxdy = float(mjd[dxdy_valid][-1]) if jnp.any(dxdy_valid) else float(mjd[0])

    dtype = get_dtype()
    logger.debug("Loaded %d EOP records from %s", mjd.shape[0], filepath)
    return EOPData(
        mjd=jnp.asarray(mjd, dtype=dtype),
        pm_x=jnp.asarray(pm_x, dtype=dtype),
        pm_y=jnp.asarray(pm_y, dtype=dtype),
        ut1_utc=jnp.asarray(ut1_utc, dtype=dtype),
        dX=jnp.asarray(dx, dtype=dtype),
        dY=jnp.asarray(dy, dtype=dtype),
        lod=jnp.asarray(lod, dtype=dtype),
        mjd_min=jnp.asarray(mjd[0], dtype=dtype),
        mjd_max=jnp.asarray(mjd[-1], dtype=dtype),
        mjd_last_lod=jnp.asarray(mjd_last_lod, dtype=dtype),
        mjd_last_dxdy=jnp.asarray(mjd_last_dxdy, dtype=dtype),
    )


def load_cached_eop(
    filepath: str | Path | None = None,
    *,
    max_age_days: float = _DEFAULT_MAX_AGE_DAYS,
) -> EOPData:
    """Load EOP data from a local cache, downloading fresh data when stale.

    If the cached file is missing or older than *max_age_days* a fresh
    copy is downloaded from IERS.  When the download fails a stale cache
    file is still used (with a warning).

    Args:
        filepath: Path to the cached file.  When ``None``, uses
            ``<cache_dir>/eop/finals.all.iau2000.txt``.
        max_age_days: Maximum acceptable age of the cached file in days.

    Returns:
        EOPData loaded from the cached (or freshly downloaded) file.

    Raises:
        httpx.HTTPError: If the download fails and no cached file exists.
        ValueError: If the cached file cannot be parsed.
    """
    if filepath is None:
        filepath = get_eop_cache_dir() / _FINALS_FILENAME
    else:
        filepath = Path(filepath)

    if is_file_stale(filepath, max_age_days):
        try:
            download_eop_file(filepath)
        except (httpx.HTTPError, OSError):
            if not filepath.exists():
                raise
            logger.warning(
                "Failed to download EOP data; using the stale cache %s",
                filepath,
                exc_info=True,
            )

    return load_eop_from_file(filepath)
