"""
Archive extraction — one extractor per archive format.

The platform resolver decides which archive extension a runtime ships
as; this table decides how to unpack it.  A format with no entry is
an unimplemented platform path and fails that single install.
"""

from __future__ import annotations

import logging
import tarfile
import zipfile
from pathlib import Path
from typing import Callable

from dip.bundlers.errors import BundleError, UnsupportedPlatformError

logger = logging.getLogger(__name__)


def _extract_tar_gz(archive: Path, dest: Path) -> None:
    with tarfile.open(archive, "r:gz") as tf:
        tf.extractall(dest, filter="data")


def _extract_zip(archive: Path, dest: Path) -> None:
    with zipfile.ZipFile(archive, "r") as zf:
        zf.extractall(dest)


EXTRACTORS: dict[str, Callable[[Path, Path], None]] = {
    ".tar.gz": _extract_tar_gz,
    ".zip": _extract_zip,
}


def extract_archive(archive: Path, dest: Path, archive_ext: str) -> None:
    """Unpack ``archive`` into ``dest`` using the extractor for ``archive_ext``.

    Raises:
        UnsupportedPlatformError: No extractor for this archive format.
        BundleError: The archive is corrupt or unsafe to extract.
    """
    extractor = EXTRACTORS.get(archive_ext)
    if extractor is None:
        raise UnsupportedPlatformError(
            f"Extracting {archive_ext} archives is not implemented"
        )

    logger.debug("Extracting %s into %s", archive, dest)
    try:
        extractor(archive, dest)
    except (tarfile.TarError, zipfile.BadZipFile) as e:
        raise BundleError(f"Extract failed for {archive.name}: {e}") from e
