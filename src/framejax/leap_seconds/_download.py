"""Download the IERS leap-second file."""

from __future__ import annotations

from pathlib import Path

from framejax.utils.download import download_text_file

IERS_LEAP_SECOND_URL: str = "https://hpiers.obspm.fr/iers/bul/bulc/Leap_Second.dat"
"""Default URL for the IERS leap-second file."""

_LEAP_SECOND_FILENAME: str = "Leap_Second.dat"
"""Canonical filename used for the cached leap-second file."""

_DEFAULT_TIMEOUT: float = 60.0
"""Default HTTP timeout in seconds."""


def download_leap_second_file(
    filepath: str | Path,
    *,
    url: str = IERS_LEAP_SECOND_URL,
    timeout: float = _DEFAULT_TIMEOUT,
) -> Path:
    """Download the IERS ``Leap_Second.dat`` file to *filepath*.

    Args:
        filepath: Destination path for the downloaded file.
        url: URL to fetch.  Defaults to :data:`IERS_LEAP_SECOND_URL`.
        timeout: HTTP timeout in seconds.  Defaults to 60.

    Returns:
        Resolved :class:`~pathlib.Path` to the written file.
    """
    return download_text_file(url, filepath, timeout=timeout, description="leap-second table")
