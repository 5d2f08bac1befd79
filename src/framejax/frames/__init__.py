"""Frame transformations between the ITRF and the GCRF.

The rotation is composed, innermost first, from polar motion (ITRS ->
TIRS), the Earth Rotation Angle (TIRS -> CIRS) and the celestial motion of
the pole from the precession-nutation model (CIRS -> GCRS).
"""

from .gcrf_itrf import (
    FrameTransform,
    compose_gcrf_to_itrf,
    compose_itrf_to_gcrf,
    earth_rotation_angle,
    polar_motion_matrix,
    position_itrf_to_gcrf,
    rotation_cirs_to_gcrf,
    rotation_gcrf_to_itrf,
    rotation_itrf_to_gcrf,
    rotation_itrf_to_gcrf_equinox,
    rotation_itrf_to_tirs,
    rotation_tirs_to_cirs,
    state_gcrf_to_itrf,
    state_itrf_to_gcrf,
    tio_locator,
)

__all__ = [
    "FrameTransform",
    "compose_gcrf_to_itrf",
    "compose_itrf_to_gcrf",
    "earth_rotation_angle",
    "polar_motion_matrix",
    "position_itrf_to_gcrf",
    "rotation_cirs_to_gcrf",
    "rotation_gcrf_to_itrf",
    "rotation_itrf_to_gcrf",
    "rotation_itrf_to_gcrf_equinox",
    "rotation_itrf_to_tirs",
    "rotation_tirs_to_cirs",
    "state_gcrf_to_itrf",
    "state_itrf_to_gcrf",
    "tio_locator",
]
