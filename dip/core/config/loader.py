"""
Configuration loader — reads bundle.yml into a BundleConfig.

The built-in ``default.yml`` is loaded first and the user's file is
merged over it, so a user file only has to name what it changes.
Path fields may use ``$HOME``, ``$CONFIG_DIR`` and ``$DATA_DIR``;
they are substituted here, before any bundler sees the config.
"""

from __future__ import annotations

import logging
import os
import sys
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from dip.core.models.config import BundleConfig

logger = logging.getLogger(__name__)

APP_DIR_NAME = "dip"
BUNDLE_CONFIG_FILE = "bundle.yml"

_DEFAULT_CONFIG = Path(__file__).parent / "default.yml"

# Config keys that hold paths and get variable substitution
_PATH_KEYS = ("bundle_root", "data_dir")


class ConfigError(Exception):
    """Raised when bundle configuration is invalid or cannot be resolved."""


# ── Well-known directories ──────────────────────────────────────


def home_dir() -> Path:
    """The user's home directory."""
    try:
        return Path.home()
    except RuntimeError as e:
        raise ConfigError(f"Cannot find home directory: {e}") from e


def config_dir() -> Path:
    """Per-user configuration directory (XDG_CONFIG_HOME aware)."""
    xdg = os.environ.get("XDG_CONFIG_HOME")
    if xdg:
        return Path(xdg)
    if sys.platform == "win32":
        appdata = os.environ.get("APPDATA")
        if not appdata:
            raise ConfigError("Cannot find config directory: APPDATA is not set.")
        return Path(appdata)
    if sys.platform == "darwin":
        return home_dir() / "Library" / "Application Support"
    return home_dir() / ".config"


def data_dir() -> Path:
    """Per-user data directory (XDG_DATA_HOME aware)."""
    xdg = os.environ.get("XDG_DATA_HOME")
    if xdg:
        return Path(xdg)
    if sys.platform == "win32":
        local = os.environ.get("LOCALAPPDATA")
        if not local:
            raise ConfigError("Cannot find data directory: LOCALAPPDATA is not set.")
        return Path(local)
    if sys.platform == "darwin":
        return home_dir() / "Library" / "Application Support"
    return home_dir() / ".local" / "share"


def default_config_path() -> Path:
    """Where the user's bundle.yml lives when --config is not given."""
    return config_dir() / APP_DIR_NAME / BUNDLE_CONFIG_FILE


# ── Substitution ────────────────────────────────────────────────


def substitute_path(value: str) -> Path:
    """Replace ``$HOME``, ``$CONFIG_DIR`` and ``$DATA_DIR`` in a path string.

    Variables are only resolved when they appear, so a path without
    tokens never fails on a missing directory lookup.

    Raises:
        ConfigError: If a referenced directory cannot be resolved.
    """
    resolvers = (
        ("$HOME", home_dir),
        ("$CONFIG_DIR", config_dir),
        ("$DATA_DIR", data_dir),
    )
    for token, resolve in resolvers:
        if token in value:
            value = value.replace(token, str(resolve()))
    return Path(value).expanduser()


# ── Loading ─────────────────────────────────────────────────────


def load_bundle_config(path: Path | None = None) -> BundleConfig:
    """Load, merge and validate the bundle configuration.

    Args:
        path: Explicit path to bundle.yml. If None, the default location
            is used when it exists; otherwise the built-in defaults apply.

    Returns:
        Validated, immutable BundleConfig.

    Raises:
        ConfigError: If the file is missing, unreadable or invalid, or the
            home, config or data directory cannot be resolved.
    """
    data = _read_yaml(_DEFAULT_CONFIG)

    if path is not None:
        if not path.is_file():
            raise ConfigError(f"Config file not found: {path}")
        user_path: Path | None = path
    else:
        candidate = default_config_path()
        user_path = candidate if candidate.is_file() else None

    if user_path is not None:
        logger.debug("Loading bundle config from %s", user_path)
        data = _deep_merge(data, _read_yaml(user_path))
    else:
        logger.debug("No user bundle config, using built-in defaults")

    data["home"] = home_dir()
    for key in _PATH_KEYS:
        raw = data.get(key)
        if not isinstance(raw, str) or not raw:
            raise ConfigError(f"'{key}' must be a non-empty path string")
        data[key] = substitute_path(raw)

    try:
        config = BundleConfig.model_validate(data)
    except ValidationError as e:
        raise ConfigError(f"Invalid bundle configuration: {e}") from e

    logger.info(
        "Loaded bundle config: bundle_root=%s data_dir=%s",
        config.bundle_root,
        config.data_dir,
    )
    return config


def _read_yaml(path: Path) -> dict[str, Any]:
    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigError(f"Cannot read {path}: {e}") from e

    try:
        data = yaml.safe_load(raw)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}") from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(f"Expected a YAML mapping in {path}, got {type(data).__name__}")
    return data


def _deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Merge ``override`` into a copy of ``base``; nested mappings merge, the rest replace."""
    merged = dict(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _deep_merge(merged[key], value)
        else:
            merged[key] = value
    return merged
