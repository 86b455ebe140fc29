"""
Bundle configuration model.

Built once by the config loader and shared read-only with every
bundler for the duration of a run.  Paths are already resolved; the
directory accessors create their directory on first access so a
bundler never sees a missing root.
"""

from __future__ import annotations

import logging
from pathlib import Path
from urllib.parse import urlparse

from pydantic import BaseModel, ConfigDict, Field, field_validator

logger = logging.getLogger(__name__)

VersionSet = tuple[str, ...]


class VMRuntime(BaseModel):
    """Pinned versions per runtime tool, keyed by bundler key."""

    model_config = ConfigDict(frozen=True)

    nodejs: VersionSet = ()         # https://nodejs.org/
    tailwindcss: VersionSet = ()    # https://tailwindcss.com/


class VMConfig(BaseModel):
    """Version manager section."""

    model_config = ConfigDict(frozen=True)

    runtime: VMRuntime = Field(default_factory=VMRuntime)
    # Re-download versions whose install directory already exists
    reinstall: bool = False


class BundleConfig(BaseModel):
    """Everything the bundlers need to know about the user's bundle."""

    model_config = ConfigDict(frozen=True)

    repository: str | None = None
    # Where dotfile links are created; resolved by the loader
    home: Path
    bundle_root: Path
    data_dir: Path
    vm: VMConfig = Field(default_factory=VMConfig)

    @field_validator("repository", mode="before")
    @classmethod
    def _drop_invalid_repository(cls, value: object) -> str | None:
        if value is None or value == "":
            return None
        if not isinstance(value, str):
            logger.warning("Ignoring non-string repository value: %r", value)
            return None
        parsed = urlparse(value)
        if not parsed.scheme or not parsed.netloc:
            logger.warning("Ignoring invalid repository URL: %s", value)
            return None
        return value

    # ── Derived directories ─────────────────────────────────────

    def bundle_root_dir(self) -> Path:
        """Directory holding one subdirectory per dotfile package."""
        return _ensure_dir(self.bundle_root)

    def install_root(self) -> Path:
        """``data_dir/installs`` — extracted runtime trees."""
        return _ensure_dir(self.data_dir / "installs")

    def shim_root(self) -> Path:
        """``data_dir/shims`` — generated shim executables."""
        return _ensure_dir(self.data_dir / "shims")

    def versions(self, key: str) -> VersionSet:
        """Configured versions for a runtime key, empty if unknown."""
        return tuple(getattr(self.vm.runtime, key, ()))

    def with_reinstall(self, reinstall: bool) -> BundleConfig:
        """Copy of this config with ``vm.reinstall`` replaced."""
        if reinstall == self.vm.reinstall:
            return self
        vm = self.vm.model_copy(update={"reinstall": reinstall})
        return self.model_copy(update={"vm": vm})


def _ensure_dir(path: Path) -> Path:
    if not path.is_dir():
        logger.debug("Creating directory %s", path)
        path.mkdir(parents=True, exist_ok=True)
    return path
