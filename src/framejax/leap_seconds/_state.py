"""Process-wide leap-second table snapshot.

The active table is an immutable :class:`LeapSecondTable`.  Installing a
new table builds a fresh snapshot and swaps the module reference under a
lock; readers take the reference without locking and therefore always see
one complete table together with its version.
"""

from __future__ import annotations

import logging
import threading

from framejax.leap_seconds._providers import builtin_leap_second_table
from framejax.leap_seconds._types import LeapSecondTable

logger = logging.getLogger(__name__)

_lock = threading.Lock()
_version = 1
_active: LeapSecondTable = builtin_leap_second_table()._replace(version=_version)


def _validate(table: LeapSecondTable) -> None:
    """Check that a table is usable for lookups.

    Raises:
        ValueError: If the table is empty, unsorted, or its whole-second
            offsets decrease.
    """
    if not table.entries:
        raise ValueError("Leap-second table has no entries")
    for prev, cur in zip(table.entries, table.entries[1:]):
        if cur.mjd <= prev.mjd:
            raise ValueError(
                f"Leap-second entries are not sorted: MJD {cur.mjd} follows {prev.mjd}"
            )
        if prev.drift_rate == 0.0 and cur.tai_utc < prev.tai_utc:
            raise ValueError(
                f"TAI-UTC decreases from {prev.tai_utc} to {cur.tai_utc} at MJD {cur.mjd}"
            )


def get_leap_second_table() -> LeapSecondTable:
    """Return the active leap-second table snapshot.

    Returns:
        LeapSecondTable: Current table; never mutated after installation.
    """
    return _active


def set_leap_second_table(table: LeapSecondTable) -> LeapSecondTable:
    """Install *table* as the process-wide leap-second table.

    The table is validated, stamped with the next version number and
    swapped in atomically.  Conversions already in progress keep using the
    snapshot they started with.

    Args:
        table: Replacement table.

    Returns:
        LeapSecondTable: The installed snapshot (with its new version).

    Raises:
        ValueError: If the table fails validation.
    """
    global _active, _version
    _validate(table)
    with _lock:
        _version += 1
        _active = table._replace(version=_version)
        installed = _active
    logger.info(
        "Installed leap-second table version %d from %s (%d entries)",
        installed.version,
        installed.source,
        len(installed.entries),
    )
    return installed


def reset_leap_second_table() -> LeapSecondTable:
    """Reinstall the built-in leap-second table.

    Returns:
        LeapSecondTable: The installed built-in snapshot.
    """
    return set_leap_second_table(builtin_leap_second_table())
