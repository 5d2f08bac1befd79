"""Tests for framejax.utils.download module."""

from pathlib import Path
from unittest.mock import patch

import httpx
import pytest

from framejax.utils.download import download_text_file

_URL = "https://example.invalid/Leap_Second.dat"


@pytest.fixture
def mock_client():
    """Patch httpx.Client so that GET returns a canned body."""
    with patch("framejax.utils.download.httpx.Client") as mock_client_cls:
        response = mock_client_cls.return_value.__enter__.return_value.get.return_value
        response.text = "new contents\n"
        yield response


class TestDownloadTextFile:
    """Tests for download_text_file()."""

    def test_writes_file(self, tmp_path, mock_client):
        dest = tmp_path / "sub" / "Leap_Second.dat"
        result = download_text_file(_URL, dest, timeout=5.0)
        assert result == dest.resolve()
        assert dest.read_text() == "new contents\n"
        assert list(dest.parent.iterdir()) == [dest]

    def test_replaces_existing_file(self, tmp_path, mock_client):
        dest = tmp_path / "Leap_Second.dat"
        dest.write_text("old contents\n")
        download_text_file(_URL, dest, timeout=5.0)
        assert dest.read_text() == "new contents\n"
        assert not dest.with_name("Leap_Second.dat.part").exists()

    def test_failed_write_keeps_existing_file(self, tmp_path, mock_client):
        dest = tmp_path / "Leap_Second.dat"
        dest.write_text("old contents\n")
        with patch.object(Path, "write_text", side_effect=OSError("disk full")):
            with pytest.raises(OSError, match="disk full"):
                download_text_file(_URL, dest, timeout=5.0)
        assert dest.read_text() == "old contents\n"
        assert list(tmp_path.iterdir()) == [dest]

    def test_failed_replace_removes_partial_file(self, tmp_path, mock_client):
        dest = tmp_path / "Leap_Second.dat"
        dest.write_text("old contents\n")
        with patch.object(Path, "replace", side_effect=OSError("busy")):
            with pytest.raises(OSError, match="busy"):
                download_text_file(_URL, dest, timeout=5.0)
        assert dest.read_text() == "old contents\n"
        assert list(tmp_path.iterdir()) == [dest]

    def test_http_error_keeps_existing_file(self, tmp_path, mock_client):
        dest = tmp_path / "Leap_Second.dat"
        dest.write_text("old contents\n")
        mock_client.raise_for_status.side_effect = httpx.HTTPStatusError(
            "404", request=httpx.Request("GET", _URL), response=httpx.Response(404)
        )
        with pytest.raises(httpx.HTTPStatusError):
            download_text_file(_URL, dest, timeout=5.0)
        assert dest.read_text() == "old contents\n"
