"""Parser for IERS ``finals.all.iau2000.txt`` (Bulletin A/B) files.

Each fixed-width record gives, for one UTC day, polar motion [arcsec],
UT1-UTC [s], LOD [ms] and the celestial pole offsets dX/dY [mas].  Values
are converted to radians and seconds on parsing.
"""

from __future__ import annotations

import math

from framejax.constants import AS2RAD, MAS2RAD

_RECORD_LENGTH = 187

# (column slice, scale to SI / radians)
_MJD = (slice(6, 15), 1.0)
_PM_X = (slice(17, 27), AS2RAD)
_PM_Y = (slice(36, 46), AS2RAD)
_UT1_UTC = (slice(58, 68), 1.0)
_LOD = (slice(78, 86), 1.0e-3)
_DX = (slice(96, 106), MAS2RAD)
_DY = (slice(115, 125), MAS2RAD)

EOPRecord = tuple[float, float, float, float, float, float, float]
"""``(mjd, pm_x, pm_y, ut1_utc, lod, dX, dY)`` for one record."""


def _field(line: str, column: tuple[slice, float]) -> float:
    """Return a scaled column value, or NaN when blank or malformed."""
    cols, scale = column
    try:
        return float(line[cols]) * scale
    except ValueError:
        return math.nan


def parse_finals_line(line: str) -> EOPRecord | None:
    """Parse one record of a ``finals`` file.

    Records shorter than the full width are padded (prediction records are
    often truncated).  Records that are too long, or that lack any of MJD,
    polar motion or UT1-UTC, are rejected.

    Args:
        line: A single line of the file.

    Returns:
        ``(mjd, pm_x [rad], pm_y [rad], ut1_utc [s], lod [s], dX [rad],
        dY [rad])`` with NaN for missing optional values, or ``None``.
    """
    if len(line) > _RECORD_LENGTH:
        return None
    line = line.ljust(_RECORD_LENGTH)

    mjd, pm_x, pm_y, ut1_utc = (_field(line, c) for c in (_MJD, _PM_X, _PM_Y, _UT1_UTC))
    if any(math.isnan(v) for v in (mjd, pm_x, pm_y, ut1_utc)):
        return None
    return mjd, pm_x, pm_y, ut1_utc, _field(line, _LOD), _field(line, _DX), _field(line, _DY)


def parse_finals_file(filepath: str) -> list[EOPRecord]:
    """Parse every usable record of a ``finals`` file.

    Args:
        filepath: Path to the file.

    Returns:
        Records in file order (units as in :func:`parse_finals_line`).

    Raises:
        FileNotFoundError: If the file does not exist.
        ValueError: If no record could be parsed.
    """
    records: list[EOPRecord] = []
    with open(filepath) as f:
        for line in f:
            record = parse_finals_line(line.rstrip("\n"))
            if record is not None:
                records.append(record)

    if not records:
        raise ValueError(f"No valid EOP data found in {filepath}")
    return records
