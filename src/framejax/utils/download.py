"""HTTP download helper for IERS products.

Network errors are propagated so that the cached loaders can decide on
fallback behaviour.
"""

from __future__ import annotations

import logging
from pathlib import Path

import httpx

logger = logging.getLogger(__name__)


def download_text_file(
    url: str,
    filepath: str | Path,
    *,
    timeout: float,
    description: str = "data",
) -> Path:
    """Fetch *url* and write the response text to *filepath*.

    Creates parent directories if they do not exist.  The text is written
    to a ``.part`` file beside *filepath* and moved into place, so a failed
    write leaves any existing file untouched.

    Args:
        url: URL to fetch.
        filepath: Destination path.
        timeout: HTTP timeout in seconds.
        description: Human-readable name used in log messages.

    Returns:
        Resolved :class:`~pathlib.Path` to the written file.

    Raises:
        httpx.HTTPStatusError: If the server returns a non-2xx status.
        httpx.TransportError: On network-level failures (DNS, timeout, etc.).
        OSError: If the file cannot be written.
    """
    filepath = Path(filepath)
    filepath.parent.mkdir(parents=True, exist_ok=True)

    logger.info("Downloading %s from %s", description, url)
    with httpx.Client(timeout=timeout, follow_redirects=True) as client:
        response = client.get(url)
        response.raise_for_status()

    partial = filepath.with_name(filepath.name + ".part")
    try:
        partial.write_text(response.text, encoding="utf-8")
        partial.replace(filepath)
    except OSError:
        partial.unlink(missing_ok=True)
        raise
    logger.info("%s written to %s", description.capitalize(), filepath)
    return filepath.resolve()
