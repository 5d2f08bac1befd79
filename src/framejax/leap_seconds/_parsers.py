"""Parser for the IERS ``Leap_Second.dat`` file.

The file lists one step per line::

    #  File expires on 28 June 2026
    #
    #    MJD        Date        TAI-UTC (s)
    #           day month year
        41317.0    1  1 1972       10
        41499.0    1  7 1972       11

Comment lines start with ``#``; the expiry date is read from the
``File expires on`` comment when present.
"""

from __future__ import annotations

import re

from framejax.leap_seconds._types import LeapSecondEntry
from framejax.time import cal2jd

_EXPIRES_PATTERN = re.compile(
    r"File expires on\s+(\d{1,2})\s+([A-Za-z]+)\s+(\d{4})", re.IGNORECASE
)

_MONTHS = {
    name: i + 1
    for i, name in enumerate(
        (
            "january", "february", "march", "april", "may", "june",
            "july", "august", "september", "october", "november", "december",
        )
    )
}


def parse_expiry_line(line: str) -> float | None:
    """Extract the expiry MJD from a ``File expires on`` comment line.

    Args:
        line: A comment line from the file.

    Returns:
        The expiry date as an MJD, or ``None`` if the line carries none.
    """
    m = _EXPIRES_PATTERN.search(line)
    if m is None:
        return None
    month = _MONTHS.get(m.group(2).lower())
    if month is None:
        return None
    _, mjd = cal2jd(int(m.group(3)), month, int(m.group(1)))
    return mjd


def parse_leap_second_line(line: str) -> LeapSecondEntry | None:
    """Parse one data line of ``Leap_Second.dat``.

    Args:
        line: A single line from the file.

    Returns:
        The parsed entry, or ``None`` for comments, blank or malformed lines.
    """
    stripped = line.strip()
    if not stripped or stripped.startswith("#"):
        return None

    fields = stripped.split()
    if len(fields) < 5:
        return None

    try:
        mjd = float(fields[0])
        tai_utc = float(fields[4])
    except ValueError:
        return None

    return LeapSecondEntry(mjd=mjd, tai_utc=tai_utc)


def parse_leap_second_file(filepath: str) -> tuple[list[LeapSecondEntry], float | None]:
    """Parse an entire ``Leap_Second.dat`` file.

    Args:
        filepath: Path to the file.

    Returns:
        Tuple of (entries sorted by MJD, expiry MJD or ``None``).

    Raises:
        FileNotFoundError: If the file does not exist.
        ValueError: If no entries were parsed.
    """
    entries: list[LeapSecondEntry] = []
    expires_mjd: float | None = None

    with open(filepath) as f:
        for line in f:
            if line.lstrip().startswith("#"):
                expiry = parse_expiry_line(line)
                if expiry is not None:
                    expires_mjd = expiry
                continue
            entry = parse_leap_second_line(line)
            if entry is not None:
                entries.append(entry)

    if not entries:
        raise ValueError(f"No leap-second entries found in {filepath}")

    entries.sort(key=lambda e: e.mjd)
    return entries, expires_mjd
