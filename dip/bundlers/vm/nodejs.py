"""
Node.js version manager.

Installs official Node.js release archives from nodejs.org.  Each
archive unpacks to ``node-v<version>-<os>-<arch>/``, which is renamed
to the bare version so ``version_dir`` stays stable across platforms.
"""

from __future__ import annotations

import logging
from typing import ClassVar

from dip.bundlers.errors import BundleError
from dip.bundlers.vm.archive import extract_archive
from dip.bundlers.vm.base import VersionManager
from dip.bundlers.vm.download import download

logger = logging.getLogger(__name__)

DIST_URL = "https://nodejs.org/dist"


class NodeJS(VersionManager):
    key: ClassVar[str] = "nodejs"
    name: ClassVar[str] = "Node.js"
    shims: ClassVar[tuple[str, ...]] = ("corepack", "node", "npm", "npx")

    def file_name_without_ext(self, version: str) -> str:
        return f"node-v{version}-{self.platform.os}-{self.platform.arch}"

    def file_name(self, version: str) -> str:
        return f"{self.file_name_without_ext(version)}{self.platform.archive_ext}"

    def download_url(self, version: str) -> str:
        return f"{DIST_URL}/v{version}/{self.file_name(version)}"

    def install(self, version: str) -> None:
        url = self.download_url(version)

        with self.staging() as staging:
            archive = download(url, staging / self.file_name(version), timeout=self.timeout)
            extract_archive(archive, staging, self.platform.archive_ext)

            extracted = staging / self.file_name_without_ext(version)
            if not extracted.is_dir():
                raise BundleError(
                    f"Archive {archive.name} has no {extracted.name}/ directory"
                )
            target = self._replace_version_dir(version, extracted)

        logger.info("Installed %s %s into %s", self.name, version, target)
