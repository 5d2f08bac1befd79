"""Shared utility functions for framejax.

Provides angle conversion helpers, filesystem cache management and the
IERS download helper.
"""

from framejax.utils._angle import to_radians, wrap_to_2pi, wrap_to_pi
from framejax.utils.caching import (
    file_age_days,
    get_cache_dir,
    get_eop_cache_dir,
    get_leap_second_cache_dir,
    is_file_stale,
)
from framejax.utils.download import download_text_file

__all__ = [
    "download_text_file",
    "file_age_days",
    "get_cache_dir",
    "get_eop_cache_dir",
    "get_leap_second_cache_dir",
    "is_file_stale",
    "to_radians",
    "wrap_to_2pi",
    "wrap_to_pi",
]
