"""
Tests for the dotfiles bundler — link derivation, apply/clean semantics.
"""

from __future__ import annotations

from pathlib import Path

import pytest

from dip.bundlers.dotfiles import Dotfiles, Symlink
from dip.bundlers.errors import SymlinkError


def _write(path: Path, content: str = "x") -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content)
    return path


@pytest.fixture
def packages(bundle_root: Path) -> Path:
    """Two packages sharing ~/.config."""
    _write(bundle_root / "shell" / ".zshrc", "export A=1\n")
    _write(bundle_root / "nvim" / ".config" / "nvim" / "init.lua", "-- nvim\n")
    _write(bundle_root / "git" / ".config" / "git" / "config", "[user]\n")
    return bundle_root


@pytest.fixture
def dotfiles(make_config, home: Path) -> Dotfiles:
    return Dotfiles(make_config())


def _symlinks_under(root: Path) -> set[Path]:
    return {p for p in root.rglob("*") if p.is_symlink()}


# ── Path derivation ──────────────────────────────────────────────────


class TestLinkPath:
    def test_strips_package_segment(self, dotfiles: Dotfiles, bundle_root: Path, home: Path):
        entry = bundle_root / "foo" / ".config" / "x"
        assert dotfiles.link_path(entry) == home / ".config" / "x"

    def test_top_level_file(self, dotfiles: Dotfiles, bundle_root: Path, home: Path):
        assert dotfiles.link_path(bundle_root / "shell" / ".zshrc") == home / ".zshrc"

    def test_symlinks_only_files(self, dotfiles: Dotfiles, packages: Path, home: Path):
        links = {s.link for s in dotfiles.symlinks()}
        assert links == {
            home / ".zshrc",
            home / ".config" / "nvim" / "init.lua",
            home / ".config" / "git" / "config",
        }

    def test_originals_are_canonical(self, dotfiles: Dotfiles, packages: Path):
        for sym in dotfiles.symlinks():
            assert sym.original.is_absolute()
            assert sym.original == sym.original.resolve()

    def test_top_level_files_are_not_packages(self, dotfiles: Dotfiles, bundle_root: Path):
        _write(bundle_root / "README.md")
        _write(bundle_root / "shell" / ".zshrc")
        assert [p.name for p in dotfiles.packages()] == ["shell"]


# ── Symlink ──────────────────────────────────────────────────────────


class TestSymlink:
    def test_create(self, tmp_path: Path):
        original = _write(tmp_path / "src" / "file")
        sym = Symlink(original=original, link=tmp_path / "link")
        assert sym.apply() == "created"
        assert (tmp_path / "link").is_symlink()
        assert (tmp_path / "link").resolve() == original

    def test_already_linked(self, tmp_path: Path):
        original = _write(tmp_path / "src" / "file")
        (tmp_path / "link").symlink_to(tmp_path / "elsewhere")
        sym = Symlink(original=original, link=tmp_path / "link")
        assert sym.apply() == "linked"
        # existing link is left alone, even if it points elsewhere
        assert Path.readlink(tmp_path / "link") == tmp_path / "elsewhere"

    def test_regular_file_untouched(self, tmp_path: Path):
        original = _write(tmp_path / "src" / "file", "bundle")
        existing = _write(tmp_path / "link", "mine")
        sym = Symlink(original=original, link=existing)
        assert sym.apply() == "exists"
        assert not existing.is_symlink()
        assert existing.read_text() == "mine"

    def test_missing_parent_raises(self, tmp_path: Path):
        original = _write(tmp_path / "src" / "file")
        sym = Symlink(original=original, link=tmp_path / "no" / "such" / "link")
        with pytest.raises(OSError):
            sym.apply()

    def test_clean_removes_symlink(self, tmp_path: Path):
        original = _write(tmp_path / "src" / "file")
        sym = Symlink(original=original, link=tmp_path / "link")
        sym.apply()
        assert sym.clean() == "removed"
        assert not (tmp_path / "link").exists()
        assert original.exists()

    def test_clean_leaves_regular_file(self, tmp_path: Path):
        original = _write(tmp_path / "src" / "file")
        existing = _write(tmp_path / "link", "mine")
        assert Symlink(original=original, link=existing).clean() == "absent"
        assert existing.read_text() == "mine"


# ── Apply / clean ────────────────────────────────────────────────────


class TestDotfilesApply:
    def test_empty_bundle_skips(self, dotfiles: Dotfiles, bundle_root: Path):
        receipt = dotfiles.apply()
        assert receipt.skipped
        assert "empty" in receipt.output

    def test_links_every_file(self, dotfiles: Dotfiles, packages: Path, home: Path):
        receipt = dotfiles.apply()
        assert receipt.ok
        assert receipt.metadata["created"] == 3
        assert (home / ".zshrc").resolve() == (packages / "shell" / ".zshrc").resolve()
        assert (home / ".config" / "nvim" / "init.lua").is_symlink()

    def test_directories_are_real(self, dotfiles: Dotfiles, packages: Path, home: Path):
        dotfiles.apply()
        assert (home / ".config").is_dir()
        assert not (home / ".config").is_symlink()
        assert (home / ".config" / "nvim").is_dir()
        assert not (home / ".config" / "nvim").is_symlink()

    def test_idempotent(self, dotfiles: Dotfiles, packages: Path, home: Path):
        dotfiles.apply()
        first = _symlinks_under(home)

        receipt = dotfiles.apply()
        assert receipt.ok
        assert receipt.metadata["created"] == 0
        assert receipt.metadata["linked"] == 3
        assert _symlinks_under(home) == first

    def test_existing_file_not_overwritten(self, dotfiles: Dotfiles, packages: Path, home: Path):
        zshrc = _write(home / ".zshrc", "my own zshrc\n")
        receipt = dotfiles.apply()
        assert receipt.ok
        assert receipt.metadata["exists"] == 1
        assert not zshrc.is_symlink()
        assert zshrc.read_text() == "my own zshrc\n"

    def test_per_file_failure_continues(self, dotfiles: Dotfiles, packages: Path, home: Path):
        # a directory where a file link should go makes that one link fail
        (home / ".zshrc").mkdir()
        with pytest.raises(SymlinkError) as exc_info:
            dotfiles.apply()
        assert len(exc_info.value.failures) == 1
        assert exc_info.value.failures[0][0] == str(home / ".zshrc")
        assert str(home / ".zshrc") in str(exc_info.value)
        # the other packages were still linked
        assert (home / ".config" / "nvim" / "init.lua").is_symlink()
        assert (home / ".config" / "git" / "config").is_symlink()

    def test_symlinked_directory_linked_as_leaf(self, dotfiles: Dotfiles, bundle_root: Path, home: Path, tmp_path: Path):
        target = tmp_path / "shared"
        _write(target / "a.txt")
        (bundle_root / "pkg").mkdir()
        (bundle_root / "pkg" / "shared").symlink_to(target, target_is_directory=True)

        dotfiles.apply()
        assert (home / "shared").is_symlink()
        assert (home / "shared").resolve() == target.resolve()


class TestDotfilesClean:
    def test_round_trip(self, dotfiles: Dotfiles, packages: Path, home: Path):
        before = {p for p in home.rglob("*")}
        dotfiles.apply()
        receipt = dotfiles.clean()

        assert receipt.ok
        assert receipt.metadata["removed"] == 3
        assert _symlinks_under(home) == set()
        after = {p for p in home.rglob("*")}
        # only the pre-created directories remain
        assert after - before == {
            home / ".config",
            home / ".config" / "nvim",
            home / ".config" / "git",
        }
        assert all(p.is_dir() for p in after - before)

    def test_regular_files_survive_clean(self, dotfiles: Dotfiles, packages: Path, home: Path):
        zshrc = _write(home / ".zshrc", "mine")
        dotfiles.apply()
        dotfiles.clean()
        assert zshrc.read_text() == "mine"

    def test_clean_without_apply(self, dotfiles: Dotfiles, packages: Path, home: Path):
        receipt = dotfiles.clean()
        assert receipt.ok
        assert receipt.metadata["removed"] == 0

    def test_clean_does_not_create_dirs(self, dotfiles: Dotfiles, packages: Path, home: Path):
        dotfiles.clean()
        assert not (home / ".config").exists()

    def test_empty_bundle_skips(self, dotfiles: Dotfiles):
        assert dotfiles.clean().skipped


class TestSymlinkErrorMessage:
    def test_names_failing_paths(self):
        err = SymlinkError([("/home/me/.zshrc", "File exists")], total=4)
        assert str(err) == "1 of 4 dotfile operations failed (/home/me/.zshrc: File exists)"

    def test_long_lists_are_cut(self):
        failures = [(f"/home/me/.f{i}", "denied") for i in range(5)]
        message = str(SymlinkError(failures, total=5))
        assert "/home/me/.f2: denied" in message
        assert "/home/me/.f3" not in message
        assert message.endswith("; and 2 more)")
