"""Optional process-wide EOP table snapshot.

No table is installed by default.  Installing one swaps the module
reference under a lock; readers never lock and always observe one complete
table together with its version.
"""

from __future__ import annotations

import logging
import threading

from framejax.eop._types import EOPData

logger = logging.getLogger(__name__)

_lock = threading.Lock()
_version = 0
_active: EOPData | None = None


def get_eop_data() -> EOPData | None:
    """Return the installed EOP table, or ``None`` when none is installed."""
    return _active


def get_eop_version() -> int:
    """Return the version of the installed EOP snapshot (0 before any)."""
    return _version


def set_eop_data(eop: EOPData | None) -> int:
    """Install *eop* as the process-wide EOP table.

    Args:
        eop: Table to install, or ``None`` to clear the snapshot.

    Returns:
        int: Version number of the new snapshot.
    """
    global _active, _version
    with _lock:
        _version += 1
        _active = eop
        version = _version
    if eop is None:
        logger.info("Cleared EOP table (version %d)", version)
    else:
        logger.info(
            "Installed EOP table version %d covering MJD %s to %s",
            version,
            float(eop.mjd_min),
            float(eop.mjd_max),
        )
    return version
