"""
Shim files — small executables that delegate to an installed binary.

Unix shims are POSIX shell scripts that ``exec`` the versioned binary;
Windows shims are ``.cmd`` batch files.  The writer is picked from the
platform once, not per call site.
"""

from __future__ import annotations

import logging
import os
import stat
from pathlib import Path

from dip.core.platform import Platform

logger = logging.getLogger(__name__)

# rwxr-xr-x
SHIM_MODE = stat.S_IRWXU | stat.S_IRGRP | stat.S_IXGRP | stat.S_IROTH | stat.S_IXOTH


def format_posix_shim(target: Path) -> str:
    return f'#!/bin/sh\nexec "{target}" "$@"\n'


def format_cmd_shim(target: Path) -> str:
    return f'@echo off\r\n"{target}" %*\r\n'


def shim_file_name(name: str, platform: Platform) -> str:
    """File name of the shim for executable ``name``."""
    return f"{name}.cmd" if platform.is_windows else name


def write_shim(shim_path: Path, target: Path, platform: Platform) -> Path:
    """Write a shim at ``shim_path`` delegating to ``target``, owner-executable."""
    content = format_cmd_shim(target) if platform.is_windows else format_posix_shim(target)

    shim_path.write_text(content, encoding="utf-8", newline="")
    os.chmod(shim_path, SHIM_MODE)

    logger.debug("Shim %s → %s", shim_path, target)
    return shim_path
