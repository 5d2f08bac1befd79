"""
framejax provides time scales, Earth orientation and precession-nutation models, and
ITRF/GCRF frame transformations implemented in JAX.
"""

from .config import (
    set_dtype,
    get_dtype,
    set_strict_checks,
    get_strict_checks,
)

from .constants import (
    DEG2RAD,
    RAD2DEG,
    AS2RAD,
    RAD2AS,
    MAS2RAD,
    JD_MJD_OFFSET,
    JD2000,
    MJD2000,
    DAYSEC,
    TT_TAI,
    OMEGA_EARTH,
)

from .errors import (
    FrameJaxError,
    InvalidDateError,
    TableLookupMissError,
    UnsupportedConversionError,
    NonOrthogonalResultError,
    SeriesMismatchError,
)

from .rotations import (
    Rx,
    Ry,
    Rz,
    rxr,
    rxp,
    trxp,
    is_orthonormal,
    check_orthonormal,
)

from .time import TimeScale, cal2jd, jd2cal
from .epoch import TwoPartTime

from .leap_seconds import (
    LeapSecondEntry,
    LeapSecondTable,
    get_leap_second_table,
    set_leap_second_table,
    tai_minus_utc,
    tai_utc,
)

from .eop import (
    EarthOrientationParameters,
    EOPData,
    EOPExtrapolation,
)

from .time_scales import TimeScaleConverter

from .precession_nutation import (
    NutationSeries,
    PrecessionNutationModel,
    SeriesRotation,
    compose_bpn,
)

from .frames import (
    FrameTransform,
    compose_itrf_to_gcrf,
    earth_rotation_angle,
    polar_motion_matrix,
    rotation_gcrf_to_itrf,
    rotation_itrf_to_gcrf,
    state_gcrf_to_itrf,
    state_itrf_to_gcrf,
)
