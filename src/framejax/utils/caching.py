"""Local cache for downloaded IERS products.

Leap-second and EOP files are kept under one cache root, each product in
its own subdirectory.  The root is ``$FRAMEJAX_CACHE`` when set and
``~/.cache/framejax`` otherwise; directories are created on first use.

Freshness is judged from the file modification time, in days, which is
the unit the IERS publication cadence is quoted in.
"""

from __future__ import annotations

import os
import time
from pathlib import Path

_ENV_VAR = "FRAMEJAX_CACHE"
_DEFAULT_ROOT = Path(".cache") / "framejax"

EOP_SUBDIR = "eop"
LEAP_SECOND_SUBDIR = "leap_seconds"


def get_cache_dir(subdirectory: str | None = None) -> Path:
    """Return the cache root, or a product directory below it.

    Args:
        subdirectory: Product directory name (e.g. ``"eop"``).

    Returns:
        Path: Existing directory.
    """
    override = os.environ.get(_ENV_VAR)
    path = Path(override) if override is not None else Path.home() / _DEFAULT_ROOT
    if subdirectory is not None:
        path = path / subdirectory
    path.mkdir(parents=True, exist_ok=True)
    return path


def get_eop_cache_dir() -> Path:
    """Directory holding ``finals.all.iau2000.txt``."""
    return get_cache_dir(EOP_SUBDIR)


def get_leap_second_cache_dir() -> Path:
    """Directory holding ``Leap_Second.dat``."""
    return get_cache_dir(LEAP_SECOND_SUBDIR)


def file_age_days(filepath: str | Path) -> float:
    """Days since *filepath* was last modified.

    Raises:
        FileNotFoundError: If *filepath* does not exist.
    """
    try:
        mtime = Path(filepath).stat().st_mtime
    except FileNotFoundError:
        raise FileNotFoundError(f"No cached file at '{filepath}'") from None
    return max(0.0, time.time() - mtime) / 86400.0


def is_file_stale(filepath: str | Path, max_age_days: float) -> bool:
    """Whether a cached file is missing or older than *max_age_days*."""
    if not Path(filepath).exists():
        return True
    return file_age_days(filepath) > max_age_days
