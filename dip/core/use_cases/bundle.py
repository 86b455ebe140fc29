"""
Bundle use cases — apply, clean and inspect the user's bundle.

This is the vertical slice from user intent to file-system changes:
load config, assemble the ordered bundler list, run the trigger
through the orchestrator and hand back a report.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path

from dip.bundlers.dotfiles import Dotfiles
from dip.bundlers.registry import BundlerRegistry
from dip.bundlers.vm.nodejs import NodeJS
from dip.bundlers.vm.tailwindcss import TailwindCSS
from dip.core.config.loader import ConfigError, default_config_path, load_bundle_config
from dip.core.engine.orchestrator import Orchestrator, StageProgress, StageReport, Trigger
from dip.core.models.config import BundleConfig

logger = logging.getLogger(__name__)


def default_registry() -> BundlerRegistry:
    """The built-in bundlers, in the order they run.

    Dotfiles first so linked config (e.g. ~/.npmrc) is in place before
    runtimes are installed.
    """
    return BundlerRegistry([Dotfiles, NodeJS, TailwindCSS])


@dataclass
class BundleResult:
    """Result of running a bundle trigger."""

    trigger: Trigger
    report: StageReport | None = None
    config: BundleConfig | None = None
    error: str | None = None

    def to_dict(self) -> dict:
        if self.error:
            return {"trigger": self.trigger.value, "error": self.error}

        result: dict = {"trigger": self.trigger.value}
        if self.config:
            result["bundle_root"] = str(self.config.bundle_root)
            result["data_dir"] = str(self.config.data_dir)
        if self.report:
            result["report"] = self.report.to_dict()
        return result


def run_bundle(
    trigger: Trigger,
    config_path: Path | None = None,
    reinstall: bool = False,
    registry: BundlerRegistry | None = None,
    printer: StageProgress | None = None,
    config: BundleConfig | None = None,
) -> BundleResult:
    """Run a trigger across all bundlers.

    Args:
        trigger: Apply or Clean.
        config_path: Optional explicit path to bundle.yml.
        reinstall: Re-download runtime versions that are already installed.
        registry: Optional pre-built registry (default: built-in bundlers).
        printer: Progress hook (default: silent; the CLI passes a terminal printer).
        config: Optional pre-loaded config; skips loading from disk.

    Returns:
        BundleResult with the stage report, or an error if the config
        could not be loaded.
    """
    result = BundleResult(trigger=trigger)

    if config is None:
        try:
            config = load_bundle_config(config_path)
        except ConfigError as e:
            result.error = str(e)
            return result

    if reinstall:
        config = config.with_reinstall(True)
    result.config = config

    orchestrator = Orchestrator(
        config=config,
        registry=registry or default_registry(),
        printer=printer,
    )
    result.report = orchestrator.run(trigger)

    logger.info(
        "%s finished: %d ok, %d skipped, %d failed",
        trigger.value,
        result.report.succeeded,
        result.report.skipped,
        result.report.failed,
    )
    return result


@dataclass
class BundleInfo:
    """Resolved configuration, for display."""

    config: BundleConfig | None = None
    config_path: Path | None = None
    bundlers: list[str] = field(default_factory=list)
    error: str | None = None

    def to_dict(self) -> dict:
        if self.error:
            return {"error": self.error}
        assert self.config is not None
        return {
            "config_path": str(self.config_path) if self.config_path else None,
            "repository": self.config.repository,
            "home": str(self.config.home),
            "bundle_root": str(self.config.bundle_root),
            "data_dir": str(self.config.data_dir),
            "reinstall": self.config.vm.reinstall,
            "bundlers": self.bundlers,
            "runtime": self.config.vm.runtime.model_dump(mode="json"),
        }


def bundle_info(config_path: Path | None = None) -> BundleInfo:
    """Load the config and describe what a run would act on."""
    info = BundleInfo(bundlers=default_registry().list_bundlers())
    try:
        info.config = load_bundle_config(config_path)
    except ConfigError as e:
        info.error = str(e)
        return info

    if config_path is not None:
        info.config_path = config_path
    else:
        candidate = default_config_path()
        info.config_path = candidate if candidate.is_file() else None
    return info
