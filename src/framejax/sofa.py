"""JAX kernels for the IAU 2000A and IAU 2006/2000A Earth orientation models.

Every routine takes Julian Dates as two parts (``date1``, ``date2``) and is
traceable under ``jax.jit``.  The argument date is TT unless noted
otherwise; ERA takes UT1.  Angles are in radians.

Two model families are provided and must not be mixed within one
transformation:

- IAU 2000A: frame bias ``bi00``, precession ``bp00`` (Lieske 1977 with
  the IAU 2000 rate corrections ``pr00``), nutation ``nut00a``, CIO locator
  ``s00``.
- IAU 2006/2000A: Fukushima-Williams precession ``pfw06``, nutation
  ``nut06a`` (IAU 2000A adjusted to P03), CIO locator ``s06``.

The classical precession angles and the equation of the equinoxes are
provided for both families; GMST follows the IAU 2006 expression.

Uses routines and computations derived from software provided by SOFA
under license to the user. Does not itself constitute software provided
by and/or endorsed by SOFA.
"""

from __future__ import annotations

import jax.numpy as jnp
from jax import Array

from framejax._nutation_data import LUNI_SOLAR_COEFFS, PLANETARY_COEFFS
from framejax.config import get_dtype
from framejax.constants import AS2RAD, DAYS_PER_CENTURY, JD2000, JD_MJD_OFFSET, MJD2000
from framejax.rotations import Rx, Ry, Rz
from framejax.utils import wrap_to_2pi, wrap_to_pi

TWO_PI: float = 6.283185307179586476925287
"""2*pi."""

TURNAS: float = 1296000.0
"""Arcseconds in a full circle."""

EPS0: float = 84381.448 * AS2RAD
"""J2000.0 obliquity of the ecliptic (Lieske et al. 1977) [rad]."""

# 0.1 microarcsecond to radians
_U2R: float = AS2RAD / 1e7


def julian_centuries(date1: Array, date2: Array) -> Array:
    """Julian centuries since J2000.0 of a two-part Julian Date."""
    return ((date1 - JD2000) + date2) / DAYS_PER_CENTURY


# ---------------------------------------------------------------------------
# Fundamental arguments (IERS Conventions 2003)
# ---------------------------------------------------------------------------


def _delaunay(t: Array, c0: float, c1: float, c2: float, c3: float, c4: float) -> Array:
    """Quartic Delaunay argument in arcseconds, reduced to radians."""
    return jnp.fmod(c0 + t * (c1 + t * (c2 + t * (c3 + t * c4))), TURNAS) * AS2RAD


def _longitude(t: Array, c0: float, c1: float) -> Array:
    """Linear planetary longitude in radians, reduced to one turn."""
    return jnp.fmod(c0 + c1 * t, TWO_PI)


def fal03(t: Array) -> Array:
    """Mean anomaly of the Moon, l [rad]."""
    return _delaunay(t, 485868.249036, 1717915923.2178, 31.8792, 0.051635, -0.00024470)


def falp03(t: Array) -> Array:
    """Mean anomaly of the Sun, l' [rad]."""
    return _delaunay(t, 1287104.793048, 129596581.0481, -0.5532, 0.000136, -0.00001149)


def faf03(t: Array) -> Array:
    """Mean longitude of the Moon minus that of the ascending node, F [rad]."""
    return _delaunay(t, 335779.526232, 1739527262.8478, -12.7512, -0.001037, 0.00000417)


def fad03(t: Array) -> Array:
    """Mean elongation of the Moon from the Sun, D [rad]."""
    return _delaunay(t, 1072260.703692, 1602961601.2090, -6.3706, 0.006593, -0.00003169)


def faom03(t: Array) -> Array:
    """Mean longitude of the Moon's ascending node, Omega [rad]."""
    return _delaunay(t, 450160.398036, -6962890.5431, 7.4722, 0.007702, -0.00005939)


def fame03(t: Array) -> Array:
    """Mean longitude of Mercury [rad]."""
    return _longitude(t, 4.402608842, 2608.7903141574)


def fave03(t: Array) -> Array:
    """Mean longitude of Venus [rad]."""
    return _longitude(t, 3.176146697, 1021.3285546211)


def fae03(t: Array) -> Array:
    """Mean longitude of the Earth [rad]."""
    return _longitude(t, 1.753470314, 628.3075849991)


def fama03(t: Array) -> Array:
    """Mean longitude of Mars [rad]."""
    return _longitude(t, 6.203480913, 334.0612426700)


def faju03(t: Array) -> Array:
    """Mean longitude of Jupiter [rad]."""
    return _longitude(t, 0.599546497, 52.9690962641)


def fasa03(t: Array) -> Array:
    """Mean longitude of Saturn [rad]."""
    return _longitude(t, 0.874016757, 21.3299104960)


def faur03(t: Array) -> Array:
    """Mean longitude of Uranus [rad]."""
    return _longitude(t, 5.481293872, 7.4781598567)


def fane03(t: Array) -> Array:
    """Mean longitude of Neptune [rad]."""
    return _longitude(t, 5.311886287, 3.8133035638)


def fapa03(t: Array) -> Array:
    """General accumulated precession in longitude [rad]."""
    return (0.024381750 + 0.00000538691 * t) * t


# ---------------------------------------------------------------------------
# Mean obliquity
# ---------------------------------------------------------------------------


def obl80(date1: Array, date2: Array) -> Array:
    """Mean obliquity of the ecliptic, IAU 1980 model [rad]."""
    t = julian_centuries(date1, date2)
    return AS2RAD * (84381.448 + (-46.8150 + (-0.00059 + 0.001813 * t) * t) * t)


def obl06(date1: Array, date2: Array) -> Array:
    """Mean obliquity of the ecliptic, IAU 2006 precession model [rad]."""
    t = julian_centuries(date1, date2)
    eps0 = 84381.406 + t * (
        -46.836769 + t * (-0.0001831 + t * (0.00200340 + t * (-0.000000576 + t * (-0.0000000434))))
    )
    return eps0 * AS2RAD


# ---------------------------------------------------------------------------
# IAU 2000 frame bias and precession
# ---------------------------------------------------------------------------


def bi00() -> tuple[float, float, float]:
    """Frame bias components of the IAU 2000 precession-nutation models.

    Returns:
        Tuple of (dpsibi, depsbi, dra0): longitude and obliquity corrections
        and the ICRS RA of the J2000.0 mean equinox [rad].

    References:

        1. Chapront, J., Chapront-Touze, M. & Francou, G., *Astron.
           Astrophys.*, 387, 700, 2002.
    """
    return -0.041775 * AS2RAD, -0.0068192 * AS2RAD, -0.0146 * AS2RAD


def pr00(date1: Array, date2: Array) -> tuple[Array, Array]:
    """Precession-rate corrections of the IAU 2000 model.

    Args:
        date1: TT as 2-part Julian Date (part 1).
        date2: TT as 2-part Julian Date (part 2).

    Returns:
        Tuple of (dpsipr, depspr) corrections to the IAU 1976 precession
        in longitude and obliquity [rad].
    """
    t = julian_centuries(date1, date2)
    return -0.29965 * AS2RAD * t, -0.02524 * AS2RAD * t


def bp00(date1: Array, date2: Array) -> tuple[Array, Array, Array]:
    """Frame bias and precession matrices, IAU 2000.

    The precession is the Lieske et al. (1977) model with the IAU 2000
    rate corrections applied.

    Args:
        date1: TT as 2-part Julian Date (part 1).
        date2: TT as 2-part Julian Date (part 2).

    Returns:
        Tuple of (rb, rp, rbp): frame bias (GCRS to J2000.0 mean),
        precession (J2000.0 mean to mean of date) and their product.
    """
    psia, oma, chia = precession_angles00(date1, date2)
    dpsibi, depsbi, dra0 = bi00()

    rb = Rx(-depsbi) @ Ry(dpsibi * jnp.sin(EPS0)) @ Rz(dra0)
    rp = classical_precession_matrix(EPS0, psia, oma, chia)
    return rb, rp, rp @ rb


def precession_angles00(date1: Array, date2: Array) -> tuple[Array, Array, Array]:
    """Lieske precession angles with the IAU 2000 rate corrections.

    Args:
        date1: TT as 2-part Julian Date (part 1).
        date2: TT as 2-part Julian Date (part 2).

    Returns:
        Tuple of (psi_A, omega_A, chi_A) [rad].
    """
    t = julian_centuries(date1, date2)
    dpsipr, depspr = pr00(date1, date2)

    psia77 = (5038.7784 + (-1.07259 + (-0.001147) * t) * t) * t * AS2RAD
    oma77 = EPS0 + ((0.05127 + (-0.007726) * t) * t) * t * AS2RAD
    chia = (10.5526 + (-2.38064 + (-0.001125) * t) * t) * t * AS2RAD
    return psia77 + dpsipr, oma77 + depspr, chia


# ---------------------------------------------------------------------------
# IAU 2006 Fukushima-Williams precession
# ---------------------------------------------------------------------------


def pfw06(date1: Array, date2: Array) -> tuple[Array, Array, Array, Array]:
    """Precession angles, IAU 2006, Fukushima-Williams 4-angle formulation.

    The angles include the frame bias.

    Args:
        date1: TT as 2-part Julian Date (part 1).
        date2: TT as 2-part Julian Date (part 2).

    Returns:
        Tuple of (gamb, phib, psib, epsa) [rad].
    """
    t = julian_centuries(date1, date2)

    gamb = (
        -0.052928
        + t * (10.556378 + t * (0.4932044 + t * (-0.00031238 + t * (-0.000002788 + t * 0.0000000260))))
    ) * AS2RAD
    phib = (
        84381.412819
        + t * (-46.811016 + t * (0.0511268 + t * (0.00053289 + t * (-0.000000440 + t * -0.0000000176))))
    ) * AS2RAD
    psib = (
        -0.041775
        + t * (5038.481484 + t * (1.5584175 + t * (-0.00018522 + t * (-0.000026452 + t * -0.0000000148))))
    ) * AS2RAD

    return gamb, phib, psib, obl06(date1, date2)


def fw2m(gamb: Array, phib: Array, psi: Array, eps: Array) -> Array:
    """Rotation matrix from Fukushima-Williams angles.

    ``R = Rx(-eps) @ Rz(-psi) @ Rx(phib) @ Rz(gamb)``.  With nutation
    added to ``psi`` and ``eps`` the result is the bias-precession-nutation
    matrix; without, the bias-precession matrix.

    Args:
        gamb: F-W angle gamma_bar [rad].
        phib: F-W angle phi_bar [rad].
        psi: F-W angle psi [rad].
        eps: F-W angle epsilon [rad].

    Returns:
        3x3 rotation matrix.
    """
    return Rx(-eps) @ Rz(-psi) @ Rx(phib) @ Rz(gamb)


def bp06(date1: Array, date2: Array) -> tuple[Array, Array, Array]:
    """Frame bias and precession matrices, IAU 2006.

    Args:
        date1: TT as 2-part Julian Date (part 1).
        date2: TT as 2-part Julian Date (part 2).

    Returns:
        Tuple of (rb, rp, rbp): frame bias, precession and their product.
    """
    rb = fw2m(*pfw06(JD_MJD_OFFSET, MJD2000))
    rbp = fw2m(*pfw06(date1, date2))
    return rb, rbp @ rb.T, rbp


def precession_angles06(date1: Array, date2: Array) -> tuple[Array, Array, Array, Array]:
    """Classical precession angles, IAU 2006 (Capitaine et al. 2003).

    These are the ``eps0``, ``psi_A``, ``omega_A`` and ``chi_A`` of the
    canonical four-rotation precession, without frame bias.

    Args:
        date1: TT as 2-part Julian Date (part 1).
        date2: TT as 2-part Julian Date (part 2).

    Returns:
        Tuple of (eps0, psi_A, omega_A, chi_A) [rad].

    References:

        1. Capitaine, N., Wallace, P.T. & Chapront, J., *Astron.
           Astrophys.*, 412, 567, 2003.
    """
    t = julian_centuries(date1, date2)
    eps0 = 84381.406 * AS2RAD

    psia = (
        t * (5038.481507 + t * (-1.0790069 + t * (-0.00114045 + t * (0.000132851 + t * -0.0000000951))))
    ) * AS2RAD
    oma = eps0 + (
        t * (-0.025754 + t * (0.0512623 + t * (-0.00772503 + t * (-0.000000467 + t * 0.0000003337))))
    ) * AS2RAD
    chia = (
        t * (10.556403 + t * (-2.3814292 + t * (-0.00121197 + t * (0.000170663 + t * -0.0000000560))))
    ) * AS2RAD

    return jnp.asarray(eps0), psia, oma, chia


def classical_precession_matrix(eps0: Array, psia: Array, oma: Array, chia: Array) -> Array:
    """Precession matrix (J2000.0 mean to mean of date) from the classical angles.

    ``P = Rz(chi_A) @ Rx(-omega_A) @ Rz(-psi_A) @ Rx(eps0)``; no frame bias.
    """
    return Rz(chia) @ Rx(-oma) @ Rz(-psia) @ Rx(eps0)


# ---------------------------------------------------------------------------
# Nutation
# ---------------------------------------------------------------------------


def nut00a(date1: Array, date2: Array) -> tuple[Array, Array]:
    """Nutation, IAU 2000A model (MHB2000 luni-solar and planetary).

    All 678 luni-solar and 687 planetary terms are evaluated at once with
    a matrix product of the multiplier table and the argument vector.

    Args:
        date1: TT as 2-part Julian Date (part 1).
        date2: TT as 2-part Julian Date (part 2).

    Returns:
        Tuple of (dpsi, deps) nutation in longitude and obliquity [rad].
    """
    dtype = get_dtype()
    t = jnp.asarray(julian_centuries(date1, date2), dtype=dtype)

    # Delaunay arguments as used by MHB2000
    delaunay = jnp.array(
        [
            fal03(t),
            _delaunay(t, 1287104.79305, 129596581.0481, -0.5532, 0.000136, -0.00001149),
            faf03(t),
            _delaunay(t, 1072260.70369, 1602961601.2090, -6.3706, 0.006593, -0.00003169),
            faom03(t),
        ]
    )

    # MHB2000 planetary arguments (linear Delaunay terms, not the IERS 2003 ones)
    planetary = jnp.array(
        [
            _longitude(t, 2.35555598, 8328.6914269554),
            _longitude(t, 1.627905234, 8433.466158131),
            _longitude(t, 5.198466741, 7771.3771468121),
            _longitude(t, 2.18243920, -33.757045),
            fame03(t),
            fave03(t),
            fae03(t),
            fama03(t),
            faju03(t),
            fasa03(t),
            faur03(t),
            _longitude(t, 5.321159000, 3.8127774000),
            fapa03(t),
        ]
    )

    ls = jnp.array(LUNI_SOLAR_COEFFS, dtype=dtype)
    ls_args = ls[:, :5] @ delaunay
    ls_sin = jnp.sin(ls_args)
    ls_cos = jnp.cos(ls_args)
    dpsi_ls = jnp.sum((ls[:, 5] + ls[:, 6] * t) * ls_sin + ls[:, 7] * ls_cos)
    deps_ls = jnp.sum((ls[:, 8] + ls[:, 9] * t) * ls_cos + ls[:, 10] * ls_sin)

    pl = jnp.array(PLANETARY_COEFFS, dtype=dtype)
    pl_args = pl[:, :13] @ planetary
    pl_sin = jnp.sin(pl_args)
    pl_cos = jnp.cos(pl_args)
    dpsi_pl = jnp.sum(pl[:, 13] * pl_sin + pl[:, 14] * pl_cos)
    deps_pl = jnp.sum(pl[:, 15] * pl_sin + pl[:, 16] * pl_cos)

    return (dpsi_ls + dpsi_pl) * _U2R, (deps_ls + deps_pl) * _U2R


def nut06a(date1: Array, date2: Array) -> tuple[Array, Array]:
    """Nutation, IAU 2006/2000A.

    IAU 2000A nutation with the adjustments for consistency with the P03
    precession (secular change of J2).

    Args:
        date1: TT as 2-part Julian Date (part 1).
        date2: TT as 2-part Julian Date (part 2).

    Returns:
        Tuple of (dpsi, deps) [rad].
    """
    fj2 = -2.7774e-6 * julian_centuries(date1, date2)
    dp, de = nut00a(date1, date2)
    return dp * (1.0 + 0.4697e-6 * fj2), de * (1.0 + fj2)


def numat(epsa: Array, dpsi: Array, deps: Array) -> Array:
    """Nutation matrix from the mean obliquity and the nutation components.

    ``N = Rx(-(epsa + deps)) @ Rz(-dpsi) @ Rx(epsa)`` (mean of date to true
    of date).

    Args:
        epsa: Mean obliquity of date [rad].
        dpsi: Nutation in longitude [rad].
        deps: Nutation in obliquity [rad].

    Returns:
        3x3 nutation matrix.
    """
    return Rx(-(epsa + deps)) @ Rz(-dpsi) @ Rx(epsa)


# ---------------------------------------------------------------------------
# Bias-precession-nutation
# ---------------------------------------------------------------------------


def pn00(date1: Array, date2: Array, dpsi: Array, deps: Array) -> tuple[Array, ...]:
    """Bias, precession and nutation matrices, IAU 2000, given nutation.

    Args:
        date1: TT as 2-part Julian Date (part 1).
        date2: TT as 2-part Julian Date (part 2).
        dpsi: Nutation in longitude [rad].
        deps: Nutation in obliquity [rad].

    Returns:
        Tuple of (epsa, rb, rp, rbp, rn, rbpn).
    """
    _, depspr = pr00(date1, date2)
    epsa = obl80(date1, date2) + depspr
    rb, rp, rbp = bp00(date1, date2)
    rn = numat(epsa, dpsi, deps)
    return epsa, rb, rp, rbp, rn, rn @ rbp


def pnm00a(date1: Array, date2: Array) -> Array:
    """Bias-precession-nutation matrix, IAU 2000A (GCRS to true of date)."""
    dpsi, deps = nut00a(date1, date2)
    return pn00(date1, date2, dpsi, deps)[-1]


def pn06(date1: Array, date2: Array, dpsi: Array, deps: Array) -> tuple[Array, ...]:
    """Bias, precession and nutation matrices, IAU 2006, given nutation.

    The frame bias is the Fukushima-Williams matrix at J2000.0, the
    precession the remainder of the date's bias-precession matrix, and the
    nutation the remainder of the full matrix.

    Args:
        date1: TT as 2-part Julian Date (part 1).
        date2: TT as 2-part Julian Date (part 2).
        dpsi: Nutation in longitude [rad].
        deps: Nutation in obliquity [rad].

    Returns:
        Tuple of (epsa, rb, rp, rbp, rn, rbpn).
    """
    gamb, phib, psib, epsa = pfw06(date1, date2)
    rb, rp, rbp = bp06(date1, date2)
    rbpn = fw2m(gamb, phib, psib + dpsi, epsa + deps)
    return epsa, rb, rp, rbp, rbpn @ rbp.T, rbpn


def pnm06a(date1: Array, date2: Array) -> Array:
    """Bias-precession-nutation matrix, IAU 2006/2000A (GCRS to true of date).

    Args:
        date1: TT as 2-part Julian Date (part 1).
        date2: TT as 2-part Julian Date (part 2).

    Returns:
        3x3 bias-precession-nutation matrix.
    """
    gamb, phib, psib, epsa = pfw06(date1, date2)
    dpsi, deps = nut06a(date1, date2)
    return fw2m(gamb, phib, psib + dpsi, epsa + deps)


def bpn2xy(rbpn: Array) -> tuple[Array, Array]:
    """CIP X, Y coordinates: elements (3,1) and (3,2) of the BPN matrix."""
    return rbpn[2, 0], rbpn[2, 1]


# ---------------------------------------------------------------------------
# CIO locator s
# ---------------------------------------------------------------------------

# Series for s + XY/2 [arcsec].  Multipliers are of
# (l, l', F, D, Om, LVe, LE, pA); coefficients are (sin, cos) pairs.

# fmt: off
_S_T0_NFA = (
    (0,0,0,0,1,0,0,0), (0,0,0,0,2,0,0,0), (0,0,2,-2,3,0,0,0),
    (0,0,2,-2,1,0,0,0), (0,0,2,-2,2,0,0,0), (0,0,2,0,3,0,0,0),
    (0,0,2,0,1,0,0,0), (0,0,0,0,3,0,0,0), (0,1,0,0,1,0,0,0),
    (0,1,0,0,-1,0,0,0), (1,0,0,0,-1,0,0,0), (1,0,0,0,1,0,0,0),
    (0,1,2,-2,3,0,0,0), (0,1,2,-2,1,0,0,0), (0,0,4,-4,4,0,0,0),
    (0,0,1,-1,1,-8,12,0), (0,0,2,0,0,0,0,0), (0,0,2,0,2,0,0,0),
    (1,0,2,0,3,0,0,0), (1,0,2,0,1,0,0,0), (0,0,2,-2,0,0,0,0),
    (0,1,-2,2,-3,0,0,0), (0,1,-2,2,-1,0,0,0), (0,0,0,0,0,8,-13,-1),
    (0,0,0,2,0,0,0,0), (2,0,-2,0,-1,0,0,0), (0,1,2,-2,2,0,0,0),
    (1,0,0,-2,1,0,0,0), (1,0,0,-2,-1,0,0,0), (0,0,4,-2,4,0,0,0),
    (0,0,2,-2,4,0,0,0), (1,0,-2,0,-3,0,0,0), (1,0,-2,0,-1,0,0,0),
)
_S_T0_SC = (
    (-2640.73e-6, 0.39e-6), (-63.53e-6, 0.02e-6), (-11.75e-6, -0.01e-6),
    (-11.21e-6, -0.01e-6), (4.57e-6, 0.00e-6), (-2.02e-6, 0.00e-6),
    (-1.98e-6, 0.00e-6), (1.72e-6, 0.00e-6), (1.41e-6, 0.01e-6),
    (1.26e-6, 0.01e-6), (0.63e-6, 0.00e-6), (0.63e-6, 0.00e-6),
    (-0.46e-6, 0.00e-6), (-0.45e-6, 0.00e-6), (-0.36e-6, 0.00e-6),
    (0.24e-6, 0.12e-6), (-0.32e-6, 0.00e-6), (-0.28e-6, 0.00e-6),
    (-0.27e-6, 0.00e-6), (-0.26e-6, 0.00e-6), (0.21e-6, 0.00e-6),
    (-0.19e-6, 0.00e-6), (-0.18e-6, 0.00e-6), (0.10e-6, -0.05e-6),
    (-0.15e-6, 0.00e-6), (0.14e-6, 0.00e-6), (0.14e-6, 0.00e-6),
    (-0.14e-6, 0.00e-6), (-0.14e-6, 0.00e-6), (-0.13e-6, 0.00e-6),
    (0.11e-6, 0.00e-6), (-0.11e-6, 0.00e-6), (-0.11e-6, 0.00e-6),
)

_S_T1_NFA = ((0,0,0,0,2,0,0,0), (0,0,0,0,1,0,0,0), (0,0,2,-2,3,0,0,0))

_S_T2_NFA = (
    (0,0,0,0,1,0,0,0), (0,0,2,-2,2,0,0,0), (0,0,2,0,2,0,0,0),
    (0,0,0,0,2,0,0,0), (0,1,0,0,0,0,0,0), (1,0,0,0,0,0,0,0),
    (0,1,2,-2,2,0,0,0), (0,0,2,0,1,0,0,0), (1,0,2,0,2,0,0,0),
    (0,1,-2,2,-2,0,0,0), (1,0,0,-2,0,0,0,0), (0,0,2,-2,1,0,0,0),
    (1,0,-2,0,-2,0,0,0), (0,0,0,2,0,0,0,0), (1,0,0,0,1,0,0,0),
    (1,0,-2,-2,-2,0,0,0), (1,0,0,0,-1,0,0,0), (1,0,2,0,1,0,0,0),
    (2,0,0,-2,0,0,0,0), (2,0,-2,0,-1,0,0,0), (0,0,2,2,2,0,0,0),
    (2,0,2,0,2,0,0,0), (2,0,0,0,0,0,0,0), (1,0,2,-2,2,0,0,0),
    (0,0,2,0,0,0,0,0),
)
_S_T2_SC_TAIL = (
    (56.91e-6, 0.06e-6), (9.84e-6, -0.01e-6),
    (-8.85e-6, 0.01e-6), (-6.38e-6, -0.05e-6), (-3.07e-6, 0.00e-6),
    (2.23e-6, 0.00e-6), (1.67e-6, 0.00e-6), (1.30e-6, 0.00e-6),
    (0.93e-6, 0.00e-6), (0.68e-6, 0.00e-6), (-0.55e-6, 0.00e-6),
    (0.53e-6, 0.00e-6), (-0.27e-6, 0.00e-6), (-0.27e-6, 0.00e-6),
    (-0.26e-6, 0.00e-6), (-0.25e-6, 0.00e-6), (0.22e-6, 0.00e-6),
    (-0.21e-6, 0.00e-6), (0.20e-6, 0.00e-6), (0.17e-6, 0.00e-6),
    (0.13e-6, 0.00e-6), (-0.13e-6, 0.00e-6), (-0.12e-6, 0.00e-6),
    (-0.11e-6, 0.00e-6),
)

_S_T3_NFA = ((0,0,0,0,1,0,0,0), (0,0,2,-2,2,0,0,0), (0,0,2,0,2,0,0,0), (0,0,0,0,2,0,0,0))

_S_T4_NFA = ((0,0,0,0,1,0,0,0),)
_S_T4_SC = ((-0.26e-6, -0.01e-6),)

# IAU 2000A (s00)
_S00_POLY = (94.00e-6, 3808.35e-6, -119.94e-6, -72574.09e-6, 27.70e-6, 15.61e-6)
_S00_TERMS = (
    (_S_T0_NFA, _S_T0_SC),
    (_S_T1_NFA, ((-0.07e-6, 3.57e-6), (1.71e-6, -0.03e-6), (0.00e-6, 0.48e-6))),
    (_S_T2_NFA, ((743.53e-6, -0.17e-6),) + _S_T2_SC_TAIL),
    (_S_T3_NFA, ((0.30e-6, -23.51e-6), (-0.03e-6, -1.39e-6), (-0.01e-6, -0.24e-6), (0.00e-6, 0.22e-6))),
    (_S_T4_NFA, _S_T4_SC),
)

# IAU 2006/2000A (s06)
_S06_POLY = (94.00e-6, 3808.65e-6, -122.68e-6, -72574.11e-6, 27.98e-6, 15.62e-6)
_S06_TERMS = (
    (_S_T0_NFA, _S_T0_SC),
    (_S_T1_NFA, ((-0.07e-6, 3.57e-6), (1.73e-6, -0.03e-6), (0.00e-6, 0.48e-6))),
    (_S_T2_NFA, ((743.52e-6, -0.17e-6),) + _S_T2_SC_TAIL),
    (_S_T3_NFA, ((0.30e-6, -23.42e-6), (-0.03e-6, -1.46e-6), (-0.01e-6, -0.25e-6), (0.00e-6, 0.23e-6))),
    (_S_T4_NFA, _S_T4_SC),
)
# fmt: on


def _cio_locator(
    date1: Array,
    date2: Array,
    x: Array,
    y: Array,
    poly: tuple[float, ...],
    terms: tuple[tuple[tuple, tuple], ...],
) -> Array:
    """Evaluate the series for ``s + XY/2`` and return ``s``."""
    dtype = get_dtype()
    t = jnp.asarray(julian_centuries(date1, date2), dtype=dtype)

    fa = jnp.array(
        [fal03(t), falp03(t), faf03(t), fad03(t), faom03(t), fave03(t), fae03(t), fapa03(t)]
    )

    w = []
    for order, (nfa, sc) in enumerate(terms):
        nfa = jnp.array(nfa, dtype=dtype)
        sc = jnp.array(sc, dtype=dtype)
        args = nfa @ fa
        w.append(poly[order] + jnp.sum(sc[:, 0] * jnp.sin(args) + sc[:, 1] * jnp.cos(args)))
    w.append(poly[5])

    # Horner in t
    acc = w[5]
    for coeff in reversed(w[:5]):
        acc = coeff + acc * t
    return acc * AS2RAD - x * y / 2.0


def s00(date1: Array, date2: Array, x: Array, y: Array) -> Array:
    """CIO locator s, IAU 2000A, given the CIP X, Y.

    Args:
        date1: TT as 2-part Julian Date (part 1).
        date2: TT as 2-part Julian Date (part 2).
        x: CIP X coordinate.
        y: CIP Y coordinate.

    Returns:
        CIO locator s [rad].
    """
    return _cio_locator(date1, date2, x, y, _S00_POLY, _S00_TERMS)


def s06(date1: Array, date2: Array, x: Array, y: Array) -> Array:
    """CIO locator s, IAU 2006/2000A, given the CIP X, Y.

    Args:
        date1: TT as 2-part Julian Date (part 1).
        date2: TT as 2-part Julian Date (part 2).
        x: CIP X coordinate.
        y: CIP Y coordinate.

    Returns:
        CIO locator s [rad].
    """
    return _cio_locator(date1, date2, x, y, _S06_POLY, _S06_TERMS)


def xys00a(date1: Array, date2: Array) -> tuple[Array, Array, Array]:
    """CIP X, Y and CIO locator s, IAU 2000A."""
    x, y = bpn2xy(pnm00a(date1, date2))
    return x, y, s00(date1, date2, x, y)


def xys06a(date1: Array, date2: Array) -> tuple[Array, Array, Array]:
    """CIP X, Y and CIO locator s, IAU 2006/2000A.

    Args:
        date1: TT as 2-part Julian Date (part 1).
        date2: TT as 2-part Julian Date (part 2).

    Returns:
        Tuple of (x, y, s) [rad].
    """
    x, y = bpn2xy(pnm06a(date1, date2))
    return x, y, s06(date1, date2, x, y)


def c2ixys(x: Array, y: Array, s: Array) -> Array:
    """Celestial-to-intermediate matrix from the CIP X, Y and CIO locator s.

    ``C = Rz(-(e + s)) @ Ry(d) @ Rz(e)`` with ``e = atan2(y, x)`` and
    ``d = atan(sqrt((x^2 + y^2) / (1 - x^2 - y^2)))``.

    Args:
        x: CIP X coordinate.
        y: CIP Y coordinate.
        s: CIO locator [rad].

    Returns:
        3x3 GCRS to CIRS matrix.
    """
    r2 = x * x + y * y
    e = jnp.where(r2 > 0.0, jnp.arctan2(y, x), 0.0)
    d = jnp.arctan(jnp.sqrt(r2 / (1.0 - r2)))
    return Rz(-(e + s)) @ Ry(d) @ Rz(e)


def eors(rnpb: Array, s: Array) -> Array:
    """Equation of the origins, given the BPN matrix and the CIO locator.

    The equation of the origins is the distance from the CIO to the
    equinox along the intermediate equator, so that ``GST = ERA - EO``.

    Args:
        rnpb: 3x3 bias-precession-nutation matrix.
        s: CIO locator [rad].

    Returns:
        Equation of the origins [rad].

    References:

        1. Wallace, P. & Capitaine, N., *Astron. Astrophys.*, 459, 981, 2006.
    """
    x = rnpb[2, 0]
    ax = x / (1.0 + rnpb[2, 2])
    xs = 1.0 - ax * x
    ys = -ax * rnpb[2, 1]
    zs = -x
    p = rnpb[0, 0] * xs + rnpb[0, 1] * ys + rnpb[0, 2] * zs
    q = rnpb[1, 0] * xs + rnpb[1, 1] * ys + rnpb[1, 2] * zs
    return jnp.where((p != 0.0) | (q != 0.0), s - jnp.arctan2(q, p), s)


# ---------------------------------------------------------------------------
# Earth rotation and polar motion
# ---------------------------------------------------------------------------


def era00(dj1: Array, dj2: Array) -> Array:
    """Earth Rotation Angle, IAU 2000.

    Args:
        dj1: UT1 as 2-part Julian Date (part 1).
        dj2: UT1 as 2-part Julian Date (part 2).

    Returns:
        Earth Rotation Angle in ``[0, 2*pi)`` [rad].
    """
    d1 = jnp.where(dj1 < dj2, dj1, dj2)
    d2 = jnp.where(dj1 < dj2, dj2, dj1)
    t = d1 + (d2 - JD2000)

    # Fractional part of the date, kept separate from the day count
    f = jnp.fmod(d1, 1.0) + jnp.fmod(d2, 1.0)
    return wrap_to_2pi(TWO_PI * (f + 0.7790572732640 + 0.00273781191135448 * t))


def gst06(uta: Array, utb: Array, tta: Array, ttb: Array, rnpb: Array) -> Array:
    """Greenwich apparent sidereal time given the BPN matrix, IAU 2006.

    Args:
        uta: UT1 as 2-part Julian Date (part 1).
        utb: UT1 as 2-part Julian Date (part 2).
        tta: TT as 2-part Julian Date (part 1).
        ttb: TT as 2-part Julian Date (part 2).
        rnpb: 3x3 bias-precession-nutation matrix.

    Returns:
        Greenwich apparent sidereal time in ``[0, 2*pi)`` [rad].
    """
    x, y = bpn2xy(rnpb)
    s = s06(tta, ttb, x, y)
    return wrap_to_2pi(era00(uta, utb) - eors(rnpb, s))


def gmst06(uta: Array, utb: Array, tta: Array, ttb: Array) -> Array:
    """Greenwich mean sidereal time, consistent with IAU 2006 precession.

    Returns:
        GMST in ``[0, 2*pi)`` [rad].
    """
    t = julian_centuries(tta, ttb)
    poly = 0.014506 + t * (
        4612.156534 + t * (1.3915817 + t * (-0.00000044 + t * (-0.000029956 + t * -0.0000000368)))
    )
    return wrap_to_2pi(era00(uta, utb) + poly * AS2RAD)


# ---------------------------------------------------------------------------
# Equation of the equinoxes
# ---------------------------------------------------------------------------

# Complementary terms [arcsec], same arguments as the t^0 part of s.
# fmt: off
_EECT_T0_SC = (
    (2640.96e-6, -0.39e-6), (63.52e-6, -0.02e-6), (11.75e-6, 0.01e-6),
    (11.21e-6, 0.01e-6), (-4.55e-6, 0.00e-6), (2.02e-6, 0.00e-6),
    (1.98e-6, 0.00e-6), (-1.72e-6, 0.00e-6), (-1.41e-6, -0.01e-6),
    (-1.26e-6, -0.01e-6), (-0.63e-6, 0.00e-6), (-0.63e-6, 0.00e-6),
    (0.46e-6, 0.00e-6), (0.45e-6, 0.00e-6), (0.36e-6, 0.00e-6),
    (-0.24e-6, -0.12e-6), (0.32e-6, 0.00e-6), (0.28e-6, 0.00e-6),
    (0.27e-6, 0.00e-6), (0.26e-6, 0.00e-6), (-0.21e-6, 0.00e-6),
    (0.19e-6, 0.00e-6), (0.18e-6, 0.00e-6), (-0.10e-6, 0.05e-6),
    (0.15e-6, 0.00e-6), (-0.14e-6, 0.00e-6), (-0.14e-6, 0.00e-6),
    (0.14e-6, 0.00e-6), (0.14e-6, 0.00e-6), (0.13e-6, 0.00e-6),
    (-0.11e-6, 0.00e-6), (0.11e-6, 0.00e-6), (0.11e-6, 0.00e-6),
)
_EECT_T1_NFA = ((0,0,0,0,1,0,0,0),)
_EECT_T1_SC = ((-0.87e-6, 0.00e-6),)
# fmt: on


def eect00(date1: Array, date2: Array) -> Array:
    """Complementary terms of the equation of the equinoxes, IAU 2000.

    Args:
        date1: TT as 2-part Julian Date (part 1).
        date2: TT as 2-part Julian Date (part 2).

    Returns:
        Complementary terms [rad].

    References:

        1. McCarthy, D.D. & Petit, G. (eds.), IERS Conventions (2003),
           IERS Technical Note No. 32, Table 5.2e.
    """
    dtype = get_dtype()
    t = jnp.asarray(julian_centuries(date1, date2), dtype=dtype)

    fa = jnp.array(
        [fal03(t), falp03(t), faf03(t), fad03(t), faom03(t), fave03(t), fae03(t), fapa03(t)]
    )

    def _series(nfa: tuple, sc: tuple) -> Array:
        args = jnp.array(nfa, dtype=dtype) @ fa
        sc = jnp.array(sc, dtype=dtype)
        return jnp.sum(sc[:, 0] * jnp.sin(args) + sc[:, 1] * jnp.cos(args))

    s0 = _series(_S_T0_NFA, _EECT_T0_SC)
    s1 = _series(_EECT_T1_NFA, _EECT_T1_SC)
    return (s0 + s1 * t) * AS2RAD


def ee00(date1: Array, date2: Array, epsa: Array, dpsi: Array) -> Array:
    """Equation of the equinoxes given the mean obliquity and nutation in longitude.

    ``EE = dpsi * cos(epsa) + eect00``.
    """
    return dpsi * jnp.cos(epsa) + eect00(date1, date2)


def ee00a(date1: Array, date2: Array) -> Array:
    """Equation of the equinoxes, IAU 2000A (IAU 1980 obliquity with the IAU 2000 rate).

    Args:
        date1: TT as 2-part Julian Date (part 1).
        date2: TT as 2-part Julian Date (part 2).

    Returns:
        Equation of the equinoxes [rad].
    """
    _, depspr = pr00(date1, date2)
    epsa = obl80(date1, date2) + depspr
    dpsi, _ = nut00a(date1, date2)
    return ee00(date1, date2, epsa, dpsi)


def ee06a(date1: Array, date2: Array) -> Array:
    """Equation of the equinoxes, IAU 2006/2000A, as ``GAST - GMST``.

    Returns:
        Equation of the equinoxes in ``[-pi, pi)`` [rad].
    """
    gst = gst06(0.0, 0.0, date1, date2, pnm06a(date1, date2))
    return wrap_to_pi(gst - gmst06(0.0, 0.0, date1, date2))


def sp00(date1: Array, date2: Array) -> Array:
    """TIO locator s' [rad], ``-47 microarcseconds * t``."""
    return -47e-6 * julian_centuries(date1, date2) * AS2RAD


def pom00(xp: Array, yp: Array, sp: Array) -> Array:
    """Polar motion matrix (TIRS to ITRS).

    ``W = Rx(-yp) @ Ry(-xp) @ Rz(sp)``.

    Args:
        xp: Polar motion x [rad], positive towards Greenwich.
        yp: Polar motion y [rad], positive towards 90 degrees west.
        sp: TIO locator s' [rad].

    Returns:
        3x3 polar motion matrix.
    """
    return Rx(-yp) @ Ry(-xp) @ Rz(sp)
