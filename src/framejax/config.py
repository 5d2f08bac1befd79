"""Module-wide precision and checking configuration.

Provides ``set_dtype`` and ``get_dtype`` to control the float dtype used
for array outputs throughout framejax.  Unlike general-purpose simulation
code, time-scale and reference-frame work needs double precision (a
single float32 cannot even resolve one day near a Julian Date of 2.45e6),
so the default is ``jnp.float64`` and JAX's 64-bit mode
(``jax_enable_x64``) is switched on when this module is imported.

Call ``set_dtype`` **before** any JIT compilation, just like JAX's own
``jax.config.update("jax_enable_x64", True)``.  Under JIT, ``get_dtype()``
runs during tracing and its result is baked into the compiled program.

Strict checks control what happens when a composed rotation fails its
orthonormality check: with strict checks on a
:class:`~framejax.errors.NonOrthogonalResultError` is raised, otherwise the
failure is logged.  The initial value is read from the ``FRAMEJAX_STRICT``
environment variable (``1``, ``true``, ``yes`` or ``on`` enable it).
"""

from __future__ import annotations

import os

import jax
import jax.numpy as jnp

_VALID_DTYPES = (jnp.float16, jnp.bfloat16, jnp.float32, jnp.float64)

_STRICT_ENV_VAR = "FRAMEJAX_STRICT"

jax.config.update("jax_enable_x64", True)

_dtype = jnp.float64

_strict_checks = os.environ.get(_STRICT_ENV_VAR, "").strip().lower() in (
    "1",
    "true",
    "yes",
    "on",
)


def set_dtype(dtype) -> None:
    """Set the module-wide float dtype for framejax.

    Must be called **before** any ``jax.jit`` compilation.  In eager mode
    the change takes effect immediately.

    If *dtype* is ``jnp.float64``, JAX's 64-bit mode is (re-)enabled via
    ``jax.config.update("jax_enable_x64", True)``.

    Args:
        dtype: One of ``jnp.float16``, ``jnp.bfloat16``, ``jnp.float32``,
            or ``jnp.float64``.

    Raises:
        ValueError: If *dtype* is not a supported float type.
    """
    global _dtype
    if dtype not in _VALID_DTYPES:
        raise ValueError(
            f"Unsupported dtype {dtype}. Must be one of: "
            f"jnp.float16, jnp.bfloat16, jnp.float32, jnp.float64"
        )
    if dtype == jnp.float64:
        jax.config.update("jax_enable_x64", True)
    _dtype = dtype


def get_dtype():
    """Return the current module-wide float dtype.

    Returns:
        The active float dtype (default ``jnp.float64``).
    """
    return _dtype


def get_orthonormality_tolerance() -> float:
    """Return the dtype-adaptive tolerance for rotation-matrix checks.

    The tolerance bounds the largest element of ``R^T R - I``:

    - ``float64``:  1e-10
    - ``float32``:  1e-5
    - ``float16``:  1e-2
    - ``bfloat16``: 1e-2

    Returns:
        float: Absolute tolerance.
    """
    if _dtype == jnp.float64:
        return 1e-10
    if _dtype == jnp.float32:
        return 1e-5
    # float16 and bfloat16
    return 1e-2


def get_time_eq_tolerance() -> float:
    """Return the tolerance in days used when comparing two-part times.

    Returns:
        float: 1e-9 days at float64, 1e-5 days otherwise.
    """
    if _dtype == jnp.float64:
        return 1e-9
    return 1e-5


def set_strict_checks(enabled: bool) -> None:
    """Enable or disable strict invariant checks.

    Args:
        enabled: When ``True``, invariant violations such as a
            non-orthonormal composed rotation raise instead of being logged.
    """
    global _strict_checks
    _strict_checks = bool(enabled)


def get_strict_checks() -> bool:
    """Return whether strict invariant checks are enabled.

    Returns:
        bool: Current strict-check setting.
    """
    return _strict_checks
