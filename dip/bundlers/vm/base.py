"""
Version manager base — bundlers that install versioned external tools.

Lifecycle per configured version:

    download → extract → normalize to ``<installs>/<key>/<version>`` → shim

and on clean: remove shims, then remove the configured version trees.
Subclasses provide the download URL, the install step and the list of
executables they expose.
"""

from __future__ import annotations

import logging
import shutil
import tempfile
from abc import abstractmethod
from contextlib import contextmanager
from pathlib import Path
from typing import ClassVar, Iterator

from dip.bundlers.base import Bundler
from dip.bundlers.errors import InstallError
from dip.bundlers.vm.shims import shim_file_name, write_shim
from dip.core.models.config import BundleConfig
from dip.core.models.receipt import Receipt
from dip.core.platform import Platform, current_platform

logger = logging.getLogger(__name__)

STAGING_PREFIX = ".staging-"


class VersionManager(Bundler):
    """Abstract base for runtime installers.

    ``install_all`` keeps going after a version fails and raises one
    InstallError for all failures at the end, so one bad version never
    blocks the others.
    """

    needs_setup: ClassVar[bool] = True

    # Executables this tool exposes through shims
    shims: ClassVar[tuple[str, ...]] = ()

    # Download socket timeout in seconds; None blocks until the server answers
    timeout: ClassVar[float | None] = None

    def __init__(self, config: BundleConfig, platform: Platform | None = None):
        super().__init__(config)
        self.platform = platform or current_platform()

    # ── Contract ────────────────────────────────────────────────

    def versions(self) -> tuple[str, ...]:
        """Versions configured for this tool, in configured order."""
        return self.config.versions(self.key)

    @abstractmethod
    def download_url(self, version: str) -> str:
        """URL of the distribution for ``version``. Must not do I/O."""

    @abstractmethod
    def install(self, version: str) -> None:
        """Download and unpack ``version`` into ``version_dir(version)``."""

    @classmethod
    def list_shims(cls) -> tuple[str, ...]:
        return cls.shims

    # ── Layout ──────────────────────────────────────────────────

    def installs_dir(self) -> Path:
        """``<data_dir>/installs/<key>``, created on first access."""
        path = self.config.install_root() / self.key
        path.mkdir(parents=True, exist_ok=True)
        return path

    def shims_dir(self) -> Path:
        return self.config.shim_root()

    def version_dir(self, version: str) -> Path:
        return self.installs_dir() / version

    def binary_path(self, version: str, name: str) -> Path:
        """Where executable ``name`` lives inside an installed version."""
        return self.version_dir(version) / "bin" / name

    def shim_path(self, name: str) -> Path:
        return self.shims_dir() / shim_file_name(name, self.platform)

    def shim_paths(self) -> list[Path]:
        return [self.shim_path(name) for name in self.list_shims()]

    def is_installed(self, version: str) -> bool:
        return self.version_dir(version).is_dir()

    @contextmanager
    def staging(self) -> Iterator[Path]:
        """Scratch directory next to the installs; removed on exit."""
        with tempfile.TemporaryDirectory(prefix=STAGING_PREFIX, dir=self.installs_dir()) as tmp:
            yield Path(tmp)

    def _replace_version_dir(self, version: str, source: Path) -> Path:
        """Move ``source`` to ``version_dir(version)``, replacing an old install."""
        target = self.version_dir(version)
        if target.exists():
            logger.debug("Replacing existing install %s", target)
            shutil.rmtree(target)
        source.rename(target)
        return target

    # ── Lifecycle ───────────────────────────────────────────────

    def setup(self) -> None:
        self.installs_dir()
        self.shims_dir()

    def shim(self, version: str) -> list[Path]:
        """Write shims for every listed executable present in ``version``.

        Executables missing from the install are skipped silently.

        Returns:
            Paths of the shims written.
        """
        written = []
        for name in self.list_shims():
            target = self.binary_path(version, name)
            if not target.is_file():
                logger.debug("No %s in %s %s, no shim", name, self.name, version)
                continue
            written.append(write_shim(self.shim_path(name), target, self.platform))
        return written

    def remove_shim(self) -> list[Path]:
        """Remove every shim this tool owns. Missing shims are not an error."""
        removed = []
        for path in self.shim_paths():
            if path.is_file() or path.is_symlink():
                path.unlink()
                removed.append(path)
        return removed

    def install_all(self) -> dict[str, str]:
        """Install and shim every configured version.

        Returns:
            Mapping of version → "installed" or "present".

        Raises:
            InstallError: After all versions were attempted, if any failed.
        """
        outcome: dict[str, str] = {}
        failures: dict[str, BaseException] = {}

        for version in self.versions():
            try:
                if self.is_installed(version) and not self.config.vm.reinstall:
                    logger.info("%s %s already installed", self.name, version)
                    outcome[version] = "present"
                else:
                    self.install(version)
                    outcome[version] = "installed"
                self.shim(version)
            except Exception as e:
                logger.warning("Failed to install %s %s: %s", self.name, version, e)
                failures[version] = e

        if failures:
            raise InstallError(self.name, failures)
        return outcome

    def clean_all(self) -> list[str]:
        """Remove this tool's shims, every configured version tree and
        staging directories left by an interrupted install.

        Returns:
            Versions whose install directory was removed.
        """
        self.remove_shim()

        removed = []
        for version in self.versions():
            path = self.version_dir(version)
            if path.is_dir():
                shutil.rmtree(path)
                removed.append(version)

        for leftover in self.installs_dir().glob(f"{STAGING_PREFIX}*"):
            logger.debug("Removing leftover staging directory %s", leftover)
            shutil.rmtree(leftover)
        return removed

    # ── Bundler stages ──────────────────────────────────────────

    def apply(self) -> Receipt:
        versions = self.versions()
        if not versions:
            return Receipt.skip(
                bundler=self.key, reason=f"no {self.name} versions configured"
            )

        outcome = self.install_all()
        installed = [v for v, state in outcome.items() if state == "installed"]
        return Receipt.success(
            bundler=self.key,
            output=f"{len(installed)} installed, {len(outcome) - len(installed)} already present",
            metadata={"versions": outcome},
        )

    def clean(self) -> Receipt:
        removed = self.clean_all()
        return Receipt.success(
            bundler=self.key,
            output=f"removed {len(removed)} version(s)",
            metadata={"removed": removed},
        )
