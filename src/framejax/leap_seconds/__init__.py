"""Leap-second (TAI-UTC) tables and lookups.

A process-wide immutable table snapshot backs the time-scale conversions.
It starts as the built-in table and can be replaced atomically::

    from framejax.leap_seconds import (
        load_leap_second_table_from_file,
        set_leap_second_table,
        tai_minus_utc,
    )
    set_leap_second_table(load_leap_second_table_from_file("Leap_Second.dat"))
    dat = tai_minus_utc(2017, 1, 1)  # 37.0
"""

from framejax.leap_seconds._download import download_leap_second_file
from framejax.leap_seconds._lookup import (
    leap_seconds_tai_utc,
    tai_minus_utc,
    tai_utc,
    tai_utc_at_mjd,
    utc_day_offsets,
)
from framejax.leap_seconds._providers import (
    builtin_leap_second_table,
    load_cached_leap_second_table,
    load_leap_second_table_from_file,
)
from framejax.leap_seconds._state import (
    get_leap_second_table,
    reset_leap_second_table,
    set_leap_second_table,
)
from framejax.leap_seconds._types import LeapSecondEntry, LeapSecondTable

__all__ = [
    "LeapSecondEntry",
    "LeapSecondTable",
    "builtin_leap_second_table",
    "download_leap_second_file",
    "get_leap_second_table",
    "leap_seconds_tai_utc",
    "load_cached_leap_second_table",
    "load_leap_second_table_from_file",
    "reset_leap_second_table",
    "set_leap_second_table",
    "tai_minus_utc",
    "tai_utc",
    "tai_utc_at_mjd",
    "utc_day_offsets",
]
