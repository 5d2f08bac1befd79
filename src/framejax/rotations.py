"""Elementary rotation matrices and rotation-matrix utilities.

The elementary rotations follow the SOFA/ERFA sign convention: ``Rz(a)``
rotates the *frame* counter-clockwise by ``a``, i.e. it maps the components
of a fixed vector into a frame rotated by ``a`` about +z.  Every matrix
produced by the frame-transform modules is composed from these three
primitives.

The orthonormality helpers guard composed rotations.  A failure either
raises :class:`~framejax.errors.NonOrthogonalResultError` or is logged,
depending on :func:`~framejax.config.get_strict_checks`.
"""

from __future__ import annotations

import logging

import jax.numpy as jnp
from jax import Array
from jax.typing import ArrayLike

from framejax.config import get_orthonormality_tolerance, get_strict_checks
from framejax.errors import NonOrthogonalResultError
from framejax.utils import to_radians

logger = logging.getLogger(__name__)


def Rx(angle: ArrayLike, use_degrees: bool = False) -> Array:
    """Rotation matrix, for a rotation about the x-axis.

    Args:
        angle (ArrayLike): Counter-clockwise angle of rotation as viewed
            looking back along the positive direction of the rotation axis.
        use_degrees (bool): Handle input in degrees. Default: ``False``

    Returns:
        jax.Array: Rotation matrix.

    References:

        1. O. Montenbruck, and E. Gill, *Satellite Orbits: Models, Methods and Applications*, 2012, p.27.
    """
    angle = to_radians(angle, use_degrees)

    c = jnp.cos(angle)
    s = jnp.sin(angle)

    return jnp.array([[1.0,  0.0,  0.0],
                      [0.0,   +c,   +s],
                      [0.0,   -s,   +c]])


def Ry(angle: ArrayLike, use_degrees: bool = False) -> Array:
    """Rotation matrix, for a rotation about the y-axis.

    Args:
        angle (ArrayLike): Counter-clockwise angle of rotation as viewed
            looking back along the positive direction of the rotation axis.
        use_degrees (bool): Handle input in degrees. Default: ``False``

    Returns:
        jax.Array: Rotation matrix.

    References:

        1. O. Montenbruck, and E. Gill, *Satellite Orbits: Models, Methods and Applications*, 2012, p.27.
    """
    angle = to_radians(angle, use_degrees)

    c = jnp.cos(angle)
    s = jnp.sin(angle)

    return jnp.array([[ +c,  0.0,   -s],
                      [0.0, +1.0,  0.0],
                      [ +s,  0.0,   +c]])


def Rz(angle: ArrayLike, use_degrees: bool = False) -> Array:
    """Rotation matrix, for a rotation about the z-axis.

    Args:
        angle (ArrayLike): Counter-clockwise angle of rotation as viewed
            looking back along the positive direction of the rotation axis.
        use_degrees (bool): Handle input in degrees. Default: ``False``

    Returns:
        jax.Array: Rotation matrix.

    References:

        1. O. Montenbruck, and E. Gill, *Satellite Orbits: Models, Methods and Applications*, 2012, p.27.
    """
    angle = to_radians(angle, use_degrees)

    c = jnp.cos(angle)
    s = jnp.sin(angle)

    return jnp.array([[ +c,   +s,  0.0],
                      [ -s,   +c,  0.0],
                      [0.0,  0.0,  1.0]])


def rxr(a: ArrayLike, b: ArrayLike) -> Array:
    """Multiply two rotation matrices, ``a @ b`` (``b`` is applied first).

    Args:
        a: Outer 3x3 matrix.
        b: Inner 3x3 matrix.

    Returns:
        3x3 product.
    """
    return jnp.asarray(a) @ jnp.asarray(b)


def rxp(r: ArrayLike, v: ArrayLike) -> Array:
    """Rotate a 3-vector, ``r @ v``.

    Args:
        r: 3x3 rotation matrix.
        v: 3-vector.

    Returns:
        Rotated 3-vector.
    """
    return jnp.asarray(r) @ jnp.asarray(v)


def trxp(r: ArrayLike, v: ArrayLike) -> Array:
    """Rotate a 3-vector by the transpose of a matrix, ``r.T @ v``.

    Args:
        r: 3x3 rotation matrix.
        v: 3-vector.

    Returns:
        Vector rotated by the inverse rotation.
    """
    return jnp.asarray(r).T @ jnp.asarray(v)


def orthonormality_error(r: ArrayLike) -> Array:
    """Return the largest absolute element of ``R^T R - I``.

    Args:
        r: 3x3 matrix.

    Returns:
        Scalar error.
    """
    r = jnp.asarray(r)
    return jnp.max(jnp.abs(r.T @ r - jnp.eye(3, dtype=r.dtype)))


def is_orthonormal(r: ArrayLike, tol: float | None = None) -> bool:
    """Check that a matrix is a proper rotation.

    Tests orthogonality (``R^T R`` close to ``I``) and a determinant close
    to +1.  Not traceable under ``jax.jit``.

    Args:
        r: 3x3 matrix.
        tol: Tolerance.  Defaults to
            :func:`~framejax.config.get_orthonormality_tolerance`.

    Returns:
        bool: ``True`` if the matrix is a proper rotation.
    """
    if tol is None:
        tol = get_orthonormality_tolerance()
    r = jnp.asarray(r)
    det = jnp.linalg.det(r)
    return bool(orthonormality_error(r) < tol and abs(float(det) - 1.0) < tol)


def check_orthonormal(r: ArrayLike, label: str = "rotation") -> Array:
    """Verify that a composed matrix is a proper rotation and return it.

    Args:
        r: 3x3 matrix to check.
        label: Name used in the error or log message.

    Returns:
        The input matrix, unchanged.

    Raises:
        NonOrthogonalResultError: If the check fails and strict checks are
            enabled.
    """
    r = jnp.asarray(r)
    tol = get_orthonormality_tolerance()
    if is_orthonormal(r, tol):
        return r

    error = float(orthonormality_error(r))
    if get_strict_checks():
        raise NonOrthogonalResultError(label, error, tol)
    logger.error(
        "%s is not orthonormal (error %.3e, tolerance %.1e)", label, error, tol
    )
    return r
