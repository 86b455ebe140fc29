"""
Logging configuration for the ``dip`` logger namespace.

Every module logs through ``logging.getLogger(__name__)``, so all
records land under the ``dip`` logger.  ``configure_logging`` is
called once by the CLI and attaches handlers there, leaving the root
logger (and whatever a host application put on it) alone.

Console level, highest precedence first:

    --debug  →  DEBUG
    --verbose  →  INFO
    --quiet  →  ERROR
    $DIP_LOG_LEVEL
    WARNING

``$DIP_LOG_FILE`` adds a file handler at ``$DIP_LOG_FILE_LEVEL``
(defaults to DEBUG, so the file keeps what the console hides).

Progress lines are not log records; the CLI prints those itself.
"""

from __future__ import annotations

import logging
import os
import sys
from collections.abc import Mapping
from dataclasses import dataclass

LOGGER_NAME = "dip"

ENV_LEVEL = "DIP_LOG_LEVEL"
ENV_FILE = "DIP_LOG_FILE"
ENV_FILE_LEVEL = "DIP_LOG_FILE_LEVEL"

# Console format per level; the file always gets the most detailed one
_CONSOLE_FORMATS: dict[int, tuple[str, str | None]] = {
    logging.DEBUG: ("%(asctime)s %(levelname)-5s %(name)s:%(lineno)d: %(message)s", "%H:%M:%S"),
    logging.INFO: ("%(asctime)s %(name)s: %(message)s", "%H:%M:%S"),
}
_FILE_FORMAT = ("%(asctime)s %(levelname)-5s %(name)s:%(lineno)d: %(message)s", "%Y-%m-%d %H:%M:%S")


@dataclass(frozen=True)
class LogSettings:
    """Resolved logging levels and destinations."""

    level: int = logging.WARNING
    log_file: str | None = None
    file_level: int = logging.DEBUG


def resolve_settings(
    *,
    debug: bool = False,
    verbose: bool = False,
    quiet: bool = False,
    env: Mapping[str, str] | None = None,
) -> LogSettings:
    """Combine CLI flags with ``DIP_LOG_*`` environment variables."""
    env = os.environ if env is None else env

    if debug:
        level = logging.DEBUG
    elif verbose:
        level = logging.INFO
    elif quiet:
        level = logging.ERROR
    else:
        level = parse_level(env.get(ENV_LEVEL), logging.WARNING)

    return LogSettings(
        level=level,
        log_file=env.get(ENV_FILE) or None,
        file_level=parse_level(env.get(ENV_FILE_LEVEL), logging.DEBUG),
    )


def configure_logging(settings: LogSettings) -> logging.Logger:
    """Attach console (stderr) and optional file handlers to the ``dip`` logger.

    Safe to call more than once: handlers from a previous call are
    closed and replaced.

    Returns:
        The configured ``dip`` logger.
    """
    logger = logging.getLogger(LOGGER_NAME)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    fmt, datefmt = _console_format(settings.level)
    console = logging.StreamHandler(sys.stderr)
    console.setLevel(settings.level)
    console.setFormatter(logging.Formatter(fmt, datefmt=datefmt))
    logger.addHandler(console)

    effective = settings.level
    if settings.log_file:
        fh = logging.FileHandler(settings.log_file, encoding="utf-8")
        fh.setLevel(settings.file_level)
        fh.setFormatter(logging.Formatter(*_FILE_FORMAT))
        logger.addHandler(fh)
        effective = min(effective, settings.file_level)

    logger.setLevel(effective)
    # Records stop here; the root logger never sees them twice
    logger.propagate = False
    return logger


def parse_level(name: str | None, default: int) -> int:
    """Level number for a name like "info"; ``default`` when unknown or empty."""
    if not name:
        return default
    numeric = logging.getLevelName(name.strip().upper())
    return numeric if isinstance(numeric, int) else default


def _console_format(level: int) -> tuple[str, str | None]:
    for threshold in (logging.DEBUG, logging.INFO):
        if level <= threshold:
            return _CONSOLE_FORMATS[threshold]
    return "%(message)s", None
