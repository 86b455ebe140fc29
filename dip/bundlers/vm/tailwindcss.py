"""
Tailwind CSS version manager.

Tailwind ships a standalone CLI as a single executable per platform on
GitHub releases, so there is nothing to extract: the binary is placed
at ``<version>/bin/tailwindcss`` and marked executable.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import ClassVar

from dip.bundlers.vm.base import VersionManager
from dip.bundlers.vm.download import download
from dip.bundlers.vm.shims import SHIM_MODE

logger = logging.getLogger(__name__)

RELEASES_URL = "https://github.com/tailwindlabs/tailwindcss/releases/download"

# Platform OS label → Tailwind asset OS token
_OS_TOKENS: dict[str, str] = {
    "linux": "linux",
    "darwin": "macos",
    "win": "windows",
}

# Platform arch label → Tailwind asset arch token
_ARCH_TOKENS: dict[str, str] = {
    "x64": "x64",
    "arm64": "arm64",
    "armv7l": "armv7",
}


class TailwindCSS(VersionManager):
    key: ClassVar[str] = "tailwindcss"
    name: ClassVar[str] = "Tailwind CSS"
    shims: ClassVar[tuple[str, ...]] = ("tailwindcss",)

    def asset_name(self) -> str:
        os_token = _OS_TOKENS.get(self.platform.os, self.platform.os)
        arch_token = _ARCH_TOKENS.get(self.platform.arch, self.platform.arch)
        suffix = ".exe" if self.platform.is_windows else ""
        return f"tailwindcss-{os_token}-{arch_token}{suffix}"

    def download_url(self, version: str) -> str:
        return f"{RELEASES_URL}/v{version}/{self.asset_name()}"

    def binary_path(self, version: str, name: str) -> Path:
        if self.platform.is_windows:
            name = f"{name}.exe"
        return super().binary_path(version, name)

    def install(self, version: str) -> None:
        url = self.download_url(version)

        with self.staging() as staging:
            tree = staging / version
            bin_dir = tree / "bin"
            bin_dir.mkdir(parents=True)

            exe_name = "tailwindcss.exe" if self.platform.is_windows else "tailwindcss"
            binary = download(url, bin_dir / exe_name, timeout=self.timeout)
            os.chmod(binary, SHIM_MODE)

            target = self._replace_version_dir(version, tree)

        logger.info("Installed %s %s into %s", self.name, version, target)
