"""Precession-nutation models on :class:`~framejax.epoch.TwoPartTime` epochs.

:class:`PrecessionNutationModel` exposes the frame bias, precession and
nutation of one model family, IAU 2000A or IAU 2006/2000A, together with
the CIO-based quantities derived from them.  The matrices it returns are
tagged with the series that produced them (:class:`SeriesRotation`), and
products of tagged matrices refuse to mix series.

The methods are eager (they verify orthonormality of the composed
matrices); the underlying kernels in :mod:`framejax.sofa` are traceable.

Examples:
    ```python
    from framejax.epoch import TwoPartTime
    from framejax.precession_nutation import PrecessionNutationModel
    tt = TwoPartTime(2400000.5, 54195.500754444444444)
    model = PrecessionNutationModel()
    bpn = model.bias_precession_nutation(tt).matrix
    ```
"""

from __future__ import annotations

import enum
from typing import NamedTuple

import jax.numpy as jnp
from jax import Array
from jax.typing import ArrayLike

from framejax import sofa
from framejax.epoch import TwoPartTime
from framejax.errors import SeriesMismatchError
from framejax.rotations import check_orthonormal
from framejax.utils import wrap_to_2pi


class NutationSeries(enum.Enum):
    """Precession-nutation model families.

    Attributes:
        IAU2000A: IAU 2000A nutation with IAU 2000 precession.
        IAU2006A: IAU 2006 precession with IAU 2000A nutation adjusted
            to it.
    """

    IAU2000A = "IAU2000A"
    IAU2006A = "IAU2006A"


class SeriesRotation(NamedTuple):
    """A rotation matrix tagged with the series that produced it.

    Attributes:
        matrix: 3x3 rotation matrix.
        series: Model family the matrix belongs to.
    """

    matrix: Array
    series: NutationSeries

    def compose(self, inner: SeriesRotation) -> SeriesRotation:
        """Return ``self @ inner`` (``inner`` applied first).

        Raises:
            SeriesMismatchError: If the two matrices come from different
                series.
        """
        if inner.series is not self.series:
            raise SeriesMismatchError(
                f"Cannot compose a {self.series.value} rotation with a "
                f"{inner.series.value} rotation"
            )
        return SeriesRotation(self.matrix @ inner.matrix, self.series)

    def transpose(self) -> SeriesRotation:
        """Return the inverse rotation, keeping the tag."""
        return SeriesRotation(self.matrix.T, self.series)


def compose_bpn(
    nutation: SeriesRotation,
    precession: SeriesRotation,
    bias: SeriesRotation,
) -> SeriesRotation:
    """Compose ``N @ P @ B`` and verify the product is a rotation.

    Args:
        nutation: Mean of date to true of date.
        precession: J2000.0 mean to mean of date.
        bias: GCRS to J2000.0 mean.

    Returns:
        SeriesRotation: GCRS to true of date.

    Raises:
        SeriesMismatchError: If the factors come from different series.
        NonOrthogonalResultError: If the product fails the orthonormality
            check and strict checks are enabled.
    """
    bpn = nutation.compose(precession).compose(bias)
    check_orthonormal(bpn.matrix, f"{bpn.series.value} bias-precession-nutation matrix")
    return bpn


class PrecessionNutationModel:
    """Bias, precession and nutation for one model family.

    Args:
        series: Model family.  Defaults to IAU 2006/2000A.
    """

    def __init__(self, series: NutationSeries | str = NutationSeries.IAU2006A) -> None:
        self.series = NutationSeries(series)

    def __repr__(self) -> str:
        return f"PrecessionNutationModel(series={self.series.value})"

    @property
    def is_2006(self) -> bool:
        return self.series is NutationSeries.IAU2006A

    def _tag(self, matrix: Array) -> SeriesRotation:
        return SeriesRotation(matrix, self.series)

    # -- bias and precession ------------------------------------------------

    def frame_bias(self, tt: TwoPartTime) -> SeriesRotation:
        """Frame bias matrix, GCRS to J2000.0 mean equator and equinox.

        Args:
            tt: Epoch in TT.  The bias is constant; the argument keeps the
                signature uniform.

        Returns:
            SeriesRotation: Bias matrix.
        """
        if self.is_2006:
            rb, _, _ = sofa.bp06(tt.jd1, tt.jd2)
        else:
            rb, _, _ = sofa.bp00(tt.jd1, tt.jd2)
        return self._tag(rb)

    def precession_angles(self, tt: TwoPartTime) -> tuple[Array, ...]:
        """Precession angles of the model [rad].

        Returns:
            ``(psi_A, omega_A, chi_A)`` for IAU 2000A, or the
            Fukushima-Williams angles ``(gamma_bar, phi_bar, psi_bar,
            eps_A)`` for IAU 2006.
        """
        if self.is_2006:
            return sofa.pfw06(tt.jd1, tt.jd2)
        return sofa.precession_angles00(tt.jd1, tt.jd2)

    def classical_precession_angles(self, tt: TwoPartTime) -> tuple[Array, Array, Array, Array]:
        """Classical precession angles ``(eps0, psi_A, omega_A, chi_A)`` [rad].

        IAU 2006 uses the P03 expressions; IAU 2000A the Lieske angles
        with the IAU 2000 rate corrections.
        """
        if self.is_2006:
            return sofa.precession_angles06(tt.jd1, tt.jd2)
        psia, oma, chia = sofa.precession_angles00(tt.jd1, tt.jd2)
        return jnp.asarray(sofa.EPS0), psia, oma, chia

    def classical_precession(self, tt: TwoPartTime) -> SeriesRotation:
        """Precession matrix built from the four classical rotations.

        ``Rz(chi_A) @ Rx(-omega_A) @ Rz(-psi_A) @ Rx(eps0)``, J2000.0 mean
        to mean of date.  Agrees with :meth:`precession` at the
        microarcsecond level.
        """
        p = sofa.classical_precession_matrix(*self.classical_precession_angles(tt))
        check_orthonormal(p, f"{self.series.value} classical precession matrix")
        return self._tag(p)

    def precession(self, tt: TwoPartTime) -> SeriesRotation:
        """Precession matrix, J2000.0 mean to mean of date."""
        if self.is_2006:
            _, rp, _ = sofa.bp06(tt.jd1, tt.jd2)
        else:
            _, rp, _ = sofa.bp00(tt.jd1, tt.jd2)
        return self._tag(rp)

    def mean_obliquity(self, tt: TwoPartTime) -> Array:
        """Mean obliquity of date [rad] consistent with the model."""
        if self.is_2006:
            return sofa.obl06(tt.jd1, tt.jd2)
        _, depspr = sofa.pr00(tt.jd1, tt.jd2)
        return sofa.obl80(tt.jd1, tt.jd2) + depspr

    # -- nutation -----------------------------------------------------------

    def nutation_angles(self, tt: TwoPartTime) -> tuple[Array, Array]:
        """Nutation in longitude and obliquity ``(dpsi, deps)`` [rad]."""
        if self.is_2006:
            return sofa.nut06a(tt.jd1, tt.jd2)
        return sofa.nut00a(tt.jd1, tt.jd2)

    def nutation(self, tt: TwoPartTime) -> SeriesRotation:
        """Nutation matrix, mean of date to true of date."""
        dpsi, deps = self.nutation_angles(tt)
        if self.is_2006:
            _, _, _, _, rn, _ = sofa.pn06(tt.jd1, tt.jd2, dpsi, deps)
        else:
            rn = sofa.numat(self.mean_obliquity(tt), dpsi, deps)
        return self._tag(rn)

    def bias_precession_nutation(self, tt: TwoPartTime) -> SeriesRotation:
        """Bias-precession-nutation matrix ``N @ P @ B``, GCRS to true of date.

        Args:
            tt: Epoch in TT.

        Returns:
            SeriesRotation: Combined matrix.
        """
        return compose_bpn(self.nutation(tt), self.precession(tt), self.frame_bias(tt))

    # -- CIO based quantities -------------------------------------------------

    def cip_xy(self, tt: TwoPartTime) -> tuple[Array, Array]:
        """CIP X, Y coordinates in the GCRS [rad]."""
        return sofa.bpn2xy(self.bias_precession_nutation(tt).matrix)

    def cio_locator(self, tt: TwoPartTime, x: ArrayLike, y: ArrayLike) -> Array:
        """CIO locator s [rad] for the given CIP coordinates."""
        if self.is_2006:
            return sofa.s06(tt.jd1, tt.jd2, x, y)
        return sofa.s00(tt.jd1, tt.jd2, x, y)

    def xys(self, tt: TwoPartTime) -> tuple[Array, Array, Array]:
        """CIP X, Y and CIO locator s [rad]."""
        x, y = self.cip_xy(tt)
        return x, y, self.cio_locator(tt, x, y)

    def celestial_to_intermediate(
        self, tt: TwoPartTime, dx: ArrayLike = 0.0, dy: ArrayLike = 0.0
    ) -> SeriesRotation:
        """Celestial-to-intermediate matrix ``C``, GCRS to CIRS.

        The celestial pole offsets are added to the modelled CIP
        coordinates; the CIO locator is evaluated from the modelled values.

        Args:
            tt: Epoch in TT.
            dx: Celestial pole offset dX [rad].
            dy: Celestial pole offset dY [rad].

        Returns:
            SeriesRotation: GCRS to CIRS matrix.
        """
        x, y, s = self.xys(tt)
        c = sofa.c2ixys(x + dx, y + dy, s)
        check_orthonormal(c, f"{self.series.value} celestial-to-intermediate matrix")
        return self._tag(c)

    def equation_of_origins(self, tt: TwoPartTime) -> Array:
        """Equation of the origins, ERA minus GAST [rad]."""
        bpn = self.bias_precession_nutation(tt).matrix
        x, y = sofa.bpn2xy(bpn)
        return sofa.eors(bpn, self.cio_locator(tt, x, y))

    def greenwich_apparent_sidereal_time(self, ut1: TwoPartTime, tt: TwoPartTime) -> Array:
        """Greenwich apparent sidereal time in ``[0, 2*pi)`` [rad].

        Args:
            ut1: Epoch in UT1.
            tt: The same epoch in TT.

        Returns:
            GAST [rad].
        """
        era = sofa.era00(ut1.jd1, ut1.jd2)
        return wrap_to_2pi(era - self.equation_of_origins(tt))

    def equation_of_equinoxes(self, tt: TwoPartTime) -> Array:
        """Equation of the equinoxes, GAST minus GMST [rad].

        IAU 2000A uses ``dpsi * cos(eps_A)`` plus the complementary terms;
        IAU 2006 takes the difference of the 2006 sidereal times.
        """
        if self.is_2006:
            return sofa.ee06a(tt.jd1, tt.jd2)
        return sofa.ee00a(tt.jd1, tt.jd2)
