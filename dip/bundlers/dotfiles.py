"""
Dotfiles bundler — mirror dotfile packages into the home directory.

Layout::

    <bundle_root>/<package>/.config/nvim/init.lua
                 └────────┘ dropped
    → ~/.config/nvim/init.lua  (symlink to the file above)

Only files are linked.  Directories are created as real directories
so several packages can contribute files to the same directory.
Existing regular files are never overwritten, and clean only ever
removes symlinks.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import ClassVar, Iterator, Literal

from dip.bundlers.base import Bundler
from dip.bundlers.errors import SymlinkError
from dip.core.models.receipt import Receipt

logger = logging.getLogger(__name__)

LinkState = Literal["created", "linked", "exists", "removed", "absent"]


@dataclass(frozen=True)
class Symlink:
    """Where a dotfile lives (``original``) and where it should appear (``link``)."""

    original: Path
    link: Path

    def apply(self) -> LinkState:
        """Create the link unless something is already there.

        Returns:
            "linked" if ``link`` is already a symlink, "exists" if it is a
            regular file, "created" if the symlink was made.

        Raises:
            OSError: The symlink could not be created.
        """
        if self.link.is_symlink():
            return "linked"
        if self.link.is_file():
            return "exists"

        os.symlink(self.original, self.link)
        logger.info("Symlink created: %s → %s", self.link, self.original)
        return "created"

    def clean(self) -> LinkState:
        """Remove ``link`` if it is a symlink; never touch anything else."""
        if not self.link.is_symlink():
            return "absent"

        self.link.unlink()
        logger.info("Symlink removed: %s", self.link)
        return "removed"


class Dotfiles(Bundler):
    key: ClassVar[str] = "dotfiles"
    name: ClassVar[str] = "dotfiles"
    needs_setup: ClassVar[bool] = True

    @property
    def home(self) -> Path:
        return self.config.home

    def bundle_dir(self) -> Path:
        return self.config.bundle_root_dir()

    def bundle_exists(self) -> bool:
        """Whether the bundle directory has anything in it."""
        return any(self.bundle_dir().iterdir())

    def packages(self) -> list[Path]:
        """Top-level package directories, sorted by name."""
        return sorted(p for p in self.bundle_dir().iterdir() if p.is_dir())

    def link_path(self, entry: Path) -> Path:
        """Home-directory location for a path inside the bundle.

        The first segment (the package name) is dropped; the rest is
        resolved against the home directory.
        """
        relative = entry.relative_to(self.bundle_dir())
        return self.home.joinpath(*relative.parts[1:])

    def walk(self) -> Iterator[tuple[Path, Symlink | None]]:
        """Every entry of every package, parents before children.

        Yields ``(link_dir, None)`` for a directory and
        ``(link, Symlink)`` for a file.
        """
        for package in self.packages():
            for dirpath, dirnames, filenames in os.walk(package):
                root = Path(dirpath)
                dirnames.sort()

                # os.walk lists symlinked directories but never descends
                # into them; they are linked like files.
                leaves = list(filenames)
                for d in list(dirnames):
                    if (root / d).is_symlink():
                        dirnames.remove(d)
                        leaves.append(d)

                for leaf in sorted(leaves):
                    entry = root / leaf
                    link = self.link_path(entry)
                    yield link, Symlink(original=entry.resolve(), link=link)

                for d in dirnames:
                    yield self.link_path(root / d), None

    def symlinks(self) -> list[Symlink]:
        """Every file in every package, paired with its home location."""
        return [sym for _, sym in self.walk() if sym is not None]

    def setup(self) -> None:
        self.bundle_dir()

    def apply(self) -> Receipt:
        if not self.bundle_exists():
            return Receipt.skip(
                bundler=self.key,
                reason=f"{self.bundle_dir()} directory is empty",
            )

        counts = {"created": 0, "linked": 0, "exists": 0}
        failures: list[tuple[str, str]] = []
        total = 0

        for link, sym in self.walk():
            total += 1
            try:
                if sym is None:
                    link.mkdir(parents=True, exist_ok=True)
                else:
                    counts[sym.apply()] += 1
            except OSError as e:
                logger.warning("Cannot link %s: %s", link, e)
                failures.append((str(link), str(e)))

        if failures:
            raise SymlinkError(failures, total)

        return Receipt.success(
            bundler=self.key,
            output=(
                f"{counts['created']} created, {counts['linked']} already linked, "
                f"{counts['exists']} left in place"
            ),
            metadata=counts,
        )

    def clean(self) -> Receipt:
        if not self.bundle_exists():
            return Receipt.skip(
                bundler=self.key,
                reason=f"{self.bundle_dir()} directory is empty",
            )

        removed = 0
        failures: list[tuple[str, str]] = []
        total = 0

        for sym in self.symlinks():
            total += 1
            try:
                if sym.clean() == "removed":
                    removed += 1
            except OSError as e:
                logger.warning("Cannot remove %s: %s", sym.link, e)
                failures.append((str(sym.link), str(e)))

        if failures:
            raise SymlinkError(failures, total)

        return Receipt.success(
            bundler=self.key,
            output=f"{removed} removed",
            metadata={"removed": removed},
        )
