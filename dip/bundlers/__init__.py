"""Bundlers — the installable units the orchestrator drives.

Public re-exports for convenient access.
"""

from dip.bundlers.base import Bundler, BundlerFactory
from dip.bundlers.dotfiles import Dotfiles, Symlink
from dip.bundlers.mock import MockBundler
from dip.bundlers.registry import BundlerRegistry

__all__ = [
    "Bundler",
    "BundlerFactory",
    "BundlerRegistry",
    "Dotfiles",
    "MockBundler",
    "Symlink",
]
