"""
Platform resolver — OS / architecture naming tokens.

Maps the running operating system and CPU architecture to the tokens
used in runtime download URLs and local file names.  The mapping is
pure; ``current_platform()`` computes it once per process.
"""

from __future__ import annotations

import platform as _platform
from dataclasses import dataclass
from functools import lru_cache

# platform.system() → OS label
_OS_MAP: dict[str, str] = {
    "linux": "linux",
    "darwin": "darwin",
    "windows": "win",
}

# platform.machine() → architecture label
_ARCH_MAP: dict[str, str] = {
    "x86_64": "x64",
    "amd64": "x64",        # Windows / WSL2
    "aarch64": "arm64",
    "arm64": "arm64",      # macOS (Darwin reports arm64)
    "armv7l": "armv7l",
    "ppc64le": "ppc64le",
    "s390x": "s390x",
    "i686": "x86",
    "i386": "x86",
}

ARCHIVE_EXT_UNIX = ".tar.gz"
ARCHIVE_EXT_WINDOWS = ".zip"


@dataclass(frozen=True)
class Platform:
    """Naming tokens for one OS / architecture pair."""

    os: str
    arch: str
    archive_ext: str

    @property
    def is_windows(self) -> bool:
        return self.os == "win"

    @property
    def is_unix(self) -> bool:
        return not self.is_windows

    @classmethod
    def from_uname(cls, system: str, machine: str) -> Platform:
        """Build a Platform from raw ``platform.system()`` / ``machine()`` values.

        Unknown systems and machines fall through lowercased, so the
        resulting URL points at a name the upstream can reject with 404
        instead of failing here.
        """
        system_key = system.lower()
        machine_key = machine.lower()

        os_label = _OS_MAP.get(system_key, system_key)
        arch_label = _ARCH_MAP.get(machine_key, machine_key)
        archive_ext = ARCHIVE_EXT_WINDOWS if os_label == "win" else ARCHIVE_EXT_UNIX

        return cls(os=os_label, arch=arch_label, archive_ext=archive_ext)


@lru_cache(maxsize=1)
def current_platform() -> Platform:
    """The platform of the running process (computed once)."""
    return Platform.from_uname(_platform.system(), _platform.machine())
