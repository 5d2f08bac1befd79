"""Constructors for :class:`LeapSecondTable` instances.

- :func:`builtin_leap_second_table`: the table shipped with framejax.
- :func:`load_leap_second_table_from_file`: an IERS ``Leap_Second.dat`` file.
- :func:`load_cached_leap_second_table`: a locally cached copy of the IERS
  file, refreshed when stale, falling back to the built-in table.

None of these install the table; pass the result to
:func:`~framejax.leap_seconds.set_leap_second_table` to make it the
process-wide default.
"""

from __future__ import annotations

import logging
from pathlib import Path

import httpx

from framejax.leap_seconds._data import BUILTIN_LEAP_SECONDS
from framejax.leap_seconds._download import (
    _LEAP_SECOND_FILENAME,
    download_leap_second_file,
)
from framejax.leap_seconds._parsers import parse_leap_second_file
from framejax.leap_seconds._types import LeapSecondEntry, LeapSecondTable
from framejax.utils.caching import get_leap_second_cache_dir, is_file_stale

logger = logging.getLogger(__name__)

_DEFAULT_MAX_AGE_DAYS: float = 30.0
"""Default maximum age for the cached leap-second file in days."""


def builtin_leap_second_table() -> LeapSecondTable:
    """Return the built-in TAI-UTC table (1960-01-01 through 2017-01-01).

    Returns:
        LeapSecondTable with source ``"builtin"`` and no expiry date.
    """
    entries = tuple(
        LeapSecondEntry(mjd, tai_utc, drift_mjd, drift_rate)
        for mjd, tai_utc, drift_mjd, drift_rate in BUILTIN_LEAP_SECONDS
    )
    return LeapSecondTable(entries=entries, expires_mjd=None, source="builtin")


def load_leap_second_table_from_file(filepath: str | Path) -> LeapSecondTable:
    """Load a table from an IERS ``Leap_Second.dat`` file.

    The file only covers the whole-second era, so the built-in pre-1972
    drift entries are prepended to keep early dates convertible.

    Args:
        filepath: Path to the file.

    Returns:
        LeapSecondTable with the file path as its source.

    Raises:
        FileNotFoundError: If the file does not exist.
        ValueError: If no entries are found.
    """
    filepath = Path(filepath)
    if not filepath.exists():
        raise FileNotFoundError(f"Leap-second file not found: {filepath}")

    entries, expires_mjd = parse_leap_second_file(str(filepath))
    first_mjd = entries[0].mjd
    early = tuple(e for e in builtin_leap_second_table().entries if e.mjd < first_mjd)

    return LeapSecondTable(
        entries=early + tuple(entries),
        expires_mjd=expires_mjd,
        source=str(filepath),
    )


def load_cached_leap_second_table(
    filepath: str | Path | None = None,
    *,
    max_age_days: float = _DEFAULT_MAX_AGE_DAYS,
) -> LeapSecondTable:
    """Load the leap-second table from a local cache, refreshing when stale.

    If the cached file is missing or older than *max_age_days* a fresh
    copy is downloaded from IERS.  When the download fails a stale cache
    file is still used; with no usable file the built-in table is returned.
    Each fallback is logged as a warning.

    Args:
        filepath: Path to the cached file.  When ``None``, uses
            ``<cache_dir>/leap_seconds/Leap_Second.dat``.
        max_age_days: Maximum acceptable age of the cached file in days.

    Returns:
        LeapSecondTable from the cached (or freshly downloaded) file, or the
        built-in table as a fallback.
    """
    if filepath is None:
        filepath = get_leap_second_cache_dir() / _LEAP_SECOND_FILENAME
    else:
        filepath = Path(filepath)

    if is_file_stale(filepath, max_age_days):
        try:
            download_leap_second_file(filepath)
        except (httpx.HTTPError, OSError):
            logger.warning(
                "Failed to download the leap-second table; using %s",
                "the stale cache" if filepath.exists() else "the built-in table",
                exc_info=True,
            )
            if not filepath.exists():
                return builtin_leap_second_table()

    try:
        return load_leap_second_table_from_file(filepath)
    except (OSError, ValueError):
        logger.warning(
            "Failed to parse leap-second file %s; using the built-in table.",
            filepath,
            exc_info=True,
        )
        return builtin_leap_second_table()
