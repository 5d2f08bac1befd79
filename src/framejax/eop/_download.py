"""Download the IERS ``finals.all.iau2000.txt`` EOP file."""

from __future__ import annotations

from pathlib import Path

from framejax.utils.download import download_text_file

IERS_FINALS_URL: str = "https://datacenter.iers.org/data/latestVersion/finals.all.iau2000.txt"
"""Default URL for the IERS Bulletin A finals file."""

_FINALS_FILENAME: str = "finals.all.iau2000.txt"
"""Canonical filename used for cached EOP data."""

_DEFAULT_TIMEOUT: float = 120.0
"""Default HTTP timeout in seconds."""


def download_eop_file(
    filepath: str | Path,
    *,
    url: str = IERS_FINALS_URL,
    timeout: float = _DEFAULT_TIMEOUT,
) -> Path:
    """Download the IERS finals EOP file to *filepath*.

    Args:
        filepath: Destination path for the downloaded file.
        url: URL to fetch.  Defaults to :data:`IERS_FINALS_URL`.
        timeout: HTTP timeout in seconds.  Defaults to 120.

    Returns:
        Resolved :class:`~pathlib.Path` to the written file.
    """
    return download_text_file(url, filepath, timeout=timeout, description="EOP data")
