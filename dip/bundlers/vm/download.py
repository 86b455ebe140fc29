"""
Runtime downloads — blocking HTTP GET with status classification.

Three failure classes are kept apart because they mean different
things to the user: 404 is almost always a mistyped version, any
other status is a server-side problem, and a transport error means
the machine is offline.  Nothing here retries.
"""

from __future__ import annotations

import logging
import urllib.error
import urllib.request
from pathlib import Path

from dip import __version__
from dip.bundlers.errors import (
    DownloadConnectionError,
    DownloadNotFoundError,
    DownloadStatusError,
)

logger = logging.getLogger(__name__)

_CHUNK_SIZE = 8192
_USER_AGENT = f"dip/{__version__}"


def download(url: str, dest: Path, *, timeout: float | None = None) -> Path:
    """Download ``url`` into ``dest``.

    Args:
        url: Absolute http(s) URL.
        dest: File to write; its parent must exist.
        timeout: Socket timeout in seconds. None blocks indefinitely.

    Returns:
        ``dest``.

    Raises:
        DownloadNotFoundError: The server answered 404.
        DownloadStatusError: Any other non-2xx status.
        DownloadConnectionError: The request never got a response.
    """
    logger.info("Downloading %s", url)
    req = urllib.request.Request(url, headers={"User-Agent": _USER_AGENT})

    try:
        with urllib.request.urlopen(req, timeout=timeout) as resp:
            _check_status(url, getattr(resp, "status", 200))
            with open(dest, "wb") as f:
                while True:
                    chunk = resp.read(_CHUNK_SIZE)
                    if not chunk:
                        break
                    f.write(chunk)
    except urllib.error.HTTPError as e:
        _check_status(url, e.code)
        raise DownloadStatusError(f"Failed to download binary: {e}", url, e.code) from e
    except urllib.error.URLError as e:
        raise DownloadConnectionError(
            f"Failed to download. Check internet connection. ({e.reason})", url
        ) from e
    except (ConnectionError, TimeoutError) as e:
        raise DownloadConnectionError(
            f"Failed to download. Check internet connection. ({e})", url
        ) from e

    logger.debug("Saved %s (%d bytes)", dest, dest.stat().st_size)
    return dest


def _check_status(url: str, status: int) -> None:
    if status == 404:
        raise DownloadNotFoundError(f"Download URL not found: {url}", url)
    if not 200 <= status < 300:
        raise DownloadStatusError(f"Failed to download binary (HTTP {status}): {url}", url, status)
