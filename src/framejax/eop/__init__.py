"""Earth Orientation Parameters (EOP).

Per-epoch values are carried by :class:`EarthOrientationParameters` and
can be given literally or interpolated from an :class:`EOPData` table.
Table queries are JIT-compatible (sorted JAX arrays and
``jnp.searchsorted``).

Typical usage::

    from framejax.eop import EarthOrientationParameters, load_cached_eop
    eop = load_cached_eop()
    params = EarthOrientationParameters.from_eop_data(eop, 59569.5)
"""

from framejax.eop._download import download_eop_file
from framejax.eop._lookup import get_dxdy, get_eop, get_lod, get_pm, get_ut1_utc
from framejax.eop._parsers import parse_finals_file, parse_finals_line
from framejax.eop._providers import (
    load_cached_eop,
    load_eop_from_file,
    static_eop,
    zero_eop,
)
from framejax.eop._state import get_eop_data, get_eop_version, set_eop_data
from framejax.eop._types import EarthOrientationParameters, EOPData, EOPExtrapolation

__all__ = [
    "EOPData",
    "EOPExtrapolation",
    "EarthOrientationParameters",
    "download_eop_file",
    "get_dxdy",
    "get_eop",
    "get_eop_data",
    "get_eop_version",
    "get_lod",
    "get_pm",
    "get_ut1_utc",
    "load_cached_eop",
    "load_eop_from_file",
    "parse_finals_file",
    "parse_finals_line",
    "set_eop_data",
    "static_eop",
    "zero_eop",
]
