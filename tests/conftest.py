import jax.numpy as jnp
import pytest

from framejax.config import set_dtype, set_strict_checks
from framejax.leap_seconds import get_leap_second_table, reset_leap_second_table


@pytest.fixture(autouse=True)
def _ensure_float64_strict():
    """Use float64 precision and strict checks in every test.

    Tests that exercise the non-strict (logging) paths switch strict checks
    off themselves; the fixture restores them afterwards.
    """
    set_dtype(jnp.float64)
    set_strict_checks(True)
    yield
    set_strict_checks(True)


@pytest.fixture
def restore_leap_seconds():
    """Reinstall the built-in leap-second table after a test that replaces it."""
    yield get_leap_second_table()
    reset_leap_second_table()
