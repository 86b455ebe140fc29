"""
Bundler base — the contract between the orchestrator and installable units.

Every unit the orchestrator drives (the dotfiles engine, each version
manager) implements this interface.  The orchestrator only talks to
bundlers through it, and only through a registry.

To create a new bundler:
    1. Subclass Bundler (or VersionManager for versioned tools)
    2. Set ``key`` and ``name``, implement ``apply`` and ``clean``
    3. Register the class in the BundlerRegistry
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Callable, ClassVar

from dip.core.models.config import BundleConfig
from dip.core.models.receipt import Receipt


class Bundler(ABC):
    """Abstract base class for all bundlers.

    A bundler is constructed fresh for every stage it runs in and is
    discarded afterwards; it keeps no state between stages.  Failures
    are raised as ``BundleError``; the orchestrator turns them into
    receipts.
    """

    key: ClassVar[str]              # machine-facing identifier, e.g. "nodejs"
    name: ClassVar[str]             # display name, e.g. "Node.js"
    needs_setup: ClassVar[bool] = False

    def __init__(self, config: BundleConfig):
        self._config = config

    @property
    def config(self) -> BundleConfig:
        """Shared, read-only bundle configuration."""
        return self._config

    def setup(self) -> None:
        """Materialize config-derived state before any apply/clean work."""

    @abstractmethod
    def apply(self) -> Receipt:
        """Bring the file system in line with the configuration."""

    @abstractmethod
    def clean(self) -> Receipt:
        """Remove everything ``apply`` is responsible for."""

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} key={self.key!r}>"


# Anything that builds a bundler from the config: usually the class itself.
BundlerFactory = Callable[[BundleConfig], Bundler]
