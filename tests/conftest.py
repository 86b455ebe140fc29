"""
Shared test fixtures and configuration.
"""

from __future__ import annotations

import io
import logging
import tarfile
import urllib.error
import urllib.request
from pathlib import Path
from typing import Callable

import pytest

from dip.core.models.config import BundleConfig, VMConfig, VMRuntime
from dip.core.platform import Platform


@pytest.fixture(autouse=True)
def _reset_dip_logger():
    """Undo handlers the CLI attaches to the ``dip`` logger."""
    logger = logging.getLogger("dip")
    handlers, level, propagate = list(logger.handlers), logger.level, logger.propagate
    yield
    for handler in logger.handlers:
        if handler not in handlers:
            handler.close()
    logger.handlers[:] = handlers
    logger.setLevel(level)
    logger.propagate = propagate


@pytest.fixture
def home(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """A throwaway home directory, with HOME and XDG dirs pointing into it."""
    home_dir = tmp_path / "home"
    home_dir.mkdir()
    monkeypatch.setenv("HOME", str(home_dir))
    monkeypatch.setenv("XDG_CONFIG_HOME", str(home_dir / ".config"))
    monkeypatch.setenv("XDG_DATA_HOME", str(home_dir / ".local" / "share"))
    return home_dir


@pytest.fixture
def bundle_root(tmp_path: Path) -> Path:
    root = tmp_path / "bundle"
    root.mkdir()
    return root


@pytest.fixture
def data_dir(tmp_path: Path) -> Path:
    return tmp_path / "data"


@pytest.fixture
def make_config(home: Path, bundle_root: Path, data_dir: Path) -> Callable[..., BundleConfig]:
    """Build a BundleConfig over the temp bundle/data dirs."""

    def _make(nodejs: tuple[str, ...] = (), tailwindcss: tuple[str, ...] = (), reinstall: bool = False) -> BundleConfig:
        return BundleConfig(
            home=home,
            bundle_root=bundle_root,
            data_dir=data_dir,
            vm=VMConfig(
                runtime=VMRuntime(nodejs=nodejs, tailwindcss=tailwindcss),
                reinstall=reinstall,
            ),
        )

    return _make


@pytest.fixture
def linux_x64() -> Platform:
    return Platform(os="linux", arch="x64", archive_ext=".tar.gz")


# ── Fake HTTP ────────────────────────────────────────────────────────


class FakeResponse(io.BytesIO):
    def __init__(self, body: bytes, status: int = 200):
        super().__init__(body)
        self.status = status


class FakeHTTP:
    """Stands in for ``urllib.request.urlopen``.

    ``routes`` maps a URL to response bytes, an HTTP status code, or an
    exception to raise.  Unknown URLs answer 404.
    """

    def __init__(self) -> None:
        self.routes: dict[str, bytes | int | BaseException] = {}
        self.calls: list[str] = []

    def __call__(self, req: urllib.request.Request, timeout: float | None = None) -> FakeResponse:
        url = req.full_url
        self.calls.append(url)
        value = self.routes.get(url, 404)
        if isinstance(value, BaseException):
            raise value
        if isinstance(value, int):
            raise urllib.error.HTTPError(url, value, "fake", hdrs=None, fp=None)  # type: ignore[arg-type]
        return FakeResponse(value)


@pytest.fixture
def fake_http(monkeypatch: pytest.MonkeyPatch) -> FakeHTTP:
    fake = FakeHTTP()
    monkeypatch.setattr(urllib.request, "urlopen", fake)
    return fake


def build_tarball(
    top: str,
    binaries: tuple[str, ...],
    links: dict[str, str] | None = None,
    files: dict[str, bytes] | None = None,
) -> bytes:
    """A gzipped tarball with ``<top>/bin/<name>`` for each binary.

    ``files`` adds other regular files under ``<top>``; ``links`` maps a
    path under ``<top>`` to a relative symlink target, the way release
    tarballs ship ``bin/npm`` pointing into ``lib/``.
    """
    buf = io.BytesIO()
    with tarfile.open(fileobj=buf, mode="w:gz") as tf:
        for name in binaries:
            data = f"#!/bin/sh\necho {name}\n".encode()
            info = tarfile.TarInfo(f"{top}/bin/{name}")
            info.size = len(data)
            info.mode = 0o755
            tf.addfile(info, io.BytesIO(data))
        for name, data in (files or {}).items():
            info = tarfile.TarInfo(f"{top}/{name}")
            info.size = len(data)
            info.mode = 0o755
            tf.addfile(info, io.BytesIO(data))
        for name, target in (links or {}).items():
            info = tarfile.TarInfo(f"{top}/{name}")
            info.type = tarfile.SYMTYPE
            info.linkname = target
            tf.addfile(info)
        readme = b"node test archive\n"
        info = tarfile.TarInfo(f"{top}/README.md")
        info.size = len(readme)
        tf.addfile(info, io.BytesIO(readme))
    return buf.getvalue()


@pytest.fixture
def tarball() -> Callable[..., bytes]:
    return build_tarball
