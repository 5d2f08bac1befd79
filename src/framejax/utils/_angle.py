"""Angle helpers shared by the rotation builders and the sidereal angles."""

from jax import Array
import jax.numpy as jnp
from jax.typing import ArrayLike


def to_radians(angle: ArrayLike, use_degrees: bool) -> Array:
    """Return *angle* in radians, converting from degrees when asked.

    Traceable: *use_degrees* may be a traced boolean.
    """
    return jnp.where(use_degrees, jnp.deg2rad(angle), angle)


def wrap_to_2pi(angle: ArrayLike) -> Array:
    """Reduce an angle [rad] to ``[0, 2*pi)``."""
    two_pi = 2.0 * jnp.pi
    reduced = jnp.fmod(angle, two_pi)
    return jnp.where(reduced < 0.0, reduced + two_pi, reduced)


def wrap_to_pi(angle: ArrayLike) -> Array:
    """Reduce an angle [rad] to ``[-pi, pi)``."""
    return wrap_to_2pi(jnp.asarray(angle) + jnp.pi) - jnp.pi
