"""Type definitions for leap-second (TAI-UTC) tables.

- :class:`LeapSecondEntry`: one row of the TAI-UTC history.
- :class:`LeapSecondTable`: immutable, sorted collection of entries with
  its provenance and a version number assigned when it is installed as the
  process-wide table.

Both are :class:`~typing.NamedTuple` instances, so a table can be shared
between threads without copying: replacing the active table swaps one
reference and never mutates an existing snapshot.
"""

from __future__ import annotations

from typing import NamedTuple

from framejax.constants import JD_MJD_OFFSET


class LeapSecondEntry(NamedTuple):
    """A single TAI-UTC step.

    Before 1972 UTC was steered with rate offsets, so TAI-UTC also drifted
    linearly within an entry.  From 1972 onward the drift rate is zero and
    the offset is a whole number of seconds.

    Attributes:
        mjd: UTC Modified Julian Date (0h) from which the entry applies.
        tai_utc: TAI-UTC at the reference epoch [s].
        drift_mjd: Reference MJD of the drift term.
        drift_rate: Drift of TAI-UTC [s/day].
    """

    mjd: float
    tai_utc: float
    drift_mjd: float = 0.0
    drift_rate: float = 0.0

    @property
    def jd(self) -> float:
        """Julian Date at which the entry takes effect."""
        return self.mjd + JD_MJD_OFFSET

    def offset(self, mjd: float) -> float:
        """Return TAI-UTC [s] at UTC Modified Julian Date *mjd*.

        Args:
            mjd: UTC MJD, including the fraction of the day.

        Returns:
            TAI-UTC in seconds.
        """
        if self.drift_rate == 0.0:
            return self.tai_utc
        return self.tai_utc + (mjd - self.drift_mjd) * self.drift_rate


class LeapSecondTable(NamedTuple):
    """Immutable, date-sorted TAI-UTC table.

    Attributes:
        entries: Entries sorted by effective date.
        expires_mjd: MJD after which the table must be re-provisioned, or
            ``None`` when unknown.
        source: Human-readable origin (``"builtin"`` or a file path).
        version: Snapshot number, assigned when the table is installed
            with :func:`~framejax.leap_seconds.set_leap_second_table`.
    """

    entries: tuple[LeapSecondEntry, ...]
    expires_mjd: float | None = None
    source: str = "builtin"
    version: int = 0

    @property
    def first_mjd(self) -> float:
        """MJD of the first entry."""
        return self.entries[0].mjd

    @property
    def last_mjd(self) -> float:
        """MJD of the last entry."""
        return self.entries[-1].mjd
