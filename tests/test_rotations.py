"""Tests for the elementary rotations and orthonormality checks."""

import logging
import math

import jax.numpy as jnp
import pytest

from framejax.config import set_strict_checks
from framejax.errors import NonOrthogonalResultError
from framejax.rotations import (
    Rx,
    Ry,
    Rz,
    check_orthonormal,
    is_orthonormal,
    orthonormality_error,
    rxp,
    rxr,
    trxp,
)

_TOL = 1e-14


class TestElementaryRotations:
    def test_rz_frame_rotation(self):
        """Rz rotates the frame, so +x maps to -y after a quarter turn."""
        v = Rz(math.pi / 2) @ jnp.array([1.0, 0.0, 0.0])
        assert jnp.allclose(v, jnp.array([0.0, -1.0, 0.0]), atol=_TOL)

    def test_rx_frame_rotation(self):
        v = Rx(math.pi / 2) @ jnp.array([0.0, 1.0, 0.0])
        assert jnp.allclose(v, jnp.array([0.0, 0.0, -1.0]), atol=_TOL)

    def test_ry_frame_rotation(self):
        v = Ry(math.pi / 2) @ jnp.array([0.0, 0.0, 1.0])
        assert jnp.allclose(v, jnp.array([-1.0, 0.0, 0.0]), atol=_TOL)

    def test_degrees(self):
        assert jnp.allclose(Rz(30.0, use_degrees=True), Rz(math.pi / 6), atol=_TOL)

    def test_inverse_is_transpose(self):
        r = Rx(0.3) @ Ry(-1.1) @ Rz(2.4)
        assert jnp.allclose(r @ r.T, jnp.eye(3), atol=_TOL)

    def test_negative_angle_is_inverse(self):
        assert jnp.allclose(Rz(-0.7), Rz(0.7).T, atol=_TOL)


class TestProducts:
    def test_rxr(self):
        a, b = Rx(0.2), Rz(0.5)
        assert jnp.allclose(rxr(a, b), a @ b, atol=_TOL)

    def test_rxp_trxp_inverse(self):
        r = Ry(0.9)
        p = jnp.array([1.0, 2.0, 3.0])
        assert jnp.allclose(trxp(r, rxp(r, p)), p, atol=_TOL)


class TestOrthonormality:
    def test_rotation_is_orthonormal(self):
        assert is_orthonormal(Rz(1.0) @ Rx(0.1))

    def test_reflection_is_rejected(self):
        assert not is_orthonormal(jnp.diag(jnp.array([1.0, 1.0, -1.0])))

    def test_error_of_scaled_matrix(self):
        err = orthonormality_error(1.001 * jnp.eye(3))
        assert float(err) == pytest.approx(1.001**2 - 1.0, rel=1e-9)

    def test_check_strict_raises(self):
        bad = jnp.eye(3).at[0, 1].set(1e-3)
        with pytest.raises(NonOrthogonalResultError, match="test matrix"):
            check_orthonormal(bad, "test matrix")

    def test_check_non_strict_logs(self, caplog):
        set_strict_checks(False)
        bad = jnp.eye(3).at[0, 1].set(1e-3)
        with caplog.at_level(logging.ERROR, logger="framejax.rotations"):
            out = check_orthonormal(bad, "test matrix")
        assert jnp.array_equal(out, bad)
        assert "not orthonormal" in caplog.text

    def test_check_passes_through(self):
        r = Rz(0.25)
        assert jnp.array_equal(check_orthonormal(r), r)
