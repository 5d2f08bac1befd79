"""Tests for framejax.utils.caching module."""

import os
import time
from pathlib import Path

import pytest

from framejax.utils.caching import (
    file_age_days,
    get_cache_dir,
    get_eop_cache_dir,
    get_leap_second_cache_dir,
    is_file_stale,
)

# ---------------------------------------------------------------------------
# get_cache_dir
# ---------------------------------------------------------------------------


class TestGetCacheDir:
    """Tests for get_cache_dir()."""

    def test_default_path(self, monkeypatch, tmp_path):
        """Default cache lives under ~/.cache/framejax."""
        monkeypatch.delenv("FRAMEJAX_CACHE", raising=False)
        monkeypatch.setattr(Path, "home", staticmethod(lambda: tmp_path))
        result = get_cache_dir()
        assert result == tmp_path / ".cache" / "framejax"
        assert result.is_dir()

    def test_env_override(self, monkeypatch, tmp_path):
        """FRAMEJAX_CACHE env var overrides the default."""
        custom = tmp_path / "custom_cache"
        monkeypatch.setenv("FRAMEJAX_CACHE", str(custom))
        result = get_cache_dir()
        assert result == custom
        assert result.is_dir()

    def test_subdirectory_creation(self, monkeypatch, tmp_path):
        monkeypatch.setenv("FRAMEJAX_CACHE", str(tmp_path / "cache"))
        result = get_cache_dir("iers")
        assert result == tmp_path / "cache" / "iers"
        assert result.is_dir()

    def test_product_directories(self, monkeypatch, tmp_path):
        """EOP and leap-second files get their own subdirectories."""
        monkeypatch.setenv("FRAMEJAX_CACHE", str(tmp_path))
        assert get_eop_cache_dir() == tmp_path / "eop"
        assert get_leap_second_cache_dir() == tmp_path / "leap_seconds"
        assert (tmp_path / "eop").is_dir()
        assert (tmp_path / "leap_seconds").is_dir()


# ---------------------------------------------------------------------------
# File age and staleness
# ---------------------------------------------------------------------------


class TestFileAge:
    """Tests for file_age_days."""

    def test_recent_file(self, tmp_path):
        f = tmp_path / "recent.txt"
        f.write_text("hello")
        assert 0.0 <= file_age_days(f) < 5.0 / 86400.0

    def test_age_days(self, tmp_path):
        """Backdating mtime by a day gives an age of about one day."""
        f = tmp_path / "day_old.txt"
        f.write_text("hello")
        old_time = time.time() - 86400
        os.utime(f, (old_time, old_time))
        assert 0.99 < file_age_days(f) < 1.1

    def test_missing_file_raises(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            file_age_days(tmp_path / "nope.txt")


class TestIsFileStale:
    """Tests for is_file_stale."""

    def test_missing_file_is_stale(self, tmp_path):
        assert is_file_stale(tmp_path / "missing.txt", max_age_days=1.0) is True

    def test_old_file_is_stale(self, tmp_path):
        f = tmp_path / "old.txt"
        f.write_text("data")
        old_time = time.time() - 3.0 * 86400
        os.utime(f, (old_time, old_time))
        assert is_file_stale(f, max_age_days=2.0) is True

    def test_fresh_file_not_stale(self, tmp_path):
        f = tmp_path / "fresh.txt"
        f.write_text("data")
        assert is_file_stale(f, max_age_days=1.0) is False
