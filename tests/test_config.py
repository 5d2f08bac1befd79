"""Tests for the framejax.config module."""

import jax.numpy as jnp
import pytest

from framejax.config import (
    get_dtype,
    get_orthonormality_tolerance,
    get_strict_checks,
    get_time_eq_tolerance,
    set_dtype,
    set_strict_checks,
)


@pytest.fixture
def reset_dtype():
    """Restore float64 after a test that changes the dtype."""
    yield
    set_dtype(jnp.float64)


class TestGetSetDtype:
    def test_default_dtype(self):
        assert get_dtype() == jnp.float64

    def test_set_float32(self, reset_dtype):
        set_dtype(jnp.float32)
        assert get_dtype() == jnp.float32

    def test_roundtrip(self, reset_dtype):
        for dtype in (jnp.float16, jnp.bfloat16, jnp.float32, jnp.float64):
            set_dtype(dtype)
            assert get_dtype() == dtype

    def test_invalid_dtype_raises(self):
        with pytest.raises(ValueError, match="Unsupported dtype"):
            set_dtype(jnp.int32)

    def test_invalid_dtype_string_raises(self):
        with pytest.raises(ValueError, match="Unsupported dtype"):
            set_dtype("float64")


class TestTolerances:
    def test_float64_tolerances(self):
        assert get_orthonormality_tolerance() == 1e-10
        assert get_time_eq_tolerance() == 1e-9

    def test_float32_tolerances(self, reset_dtype):
        set_dtype(jnp.float32)
        assert get_orthonormality_tolerance() == 1e-5
        assert get_time_eq_tolerance() == 1e-5

    def test_half_precision_tolerance(self, reset_dtype):
        set_dtype(jnp.bfloat16)
        assert get_orthonormality_tolerance() == 1e-2


class TestStrictChecks:
    def test_enabled_by_fixture(self):
        assert get_strict_checks() is True

    def test_toggle(self):
        set_strict_checks(False)
        assert get_strict_checks() is False
        set_strict_checks(True)
        assert get_strict_checks() is True

    def test_truthy_values_coerced(self):
        set_strict_checks(0)
        assert get_strict_checks() is False
        set_strict_checks(1)
        assert get_strict_checks() is True
