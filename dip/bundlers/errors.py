"""
Bundler error taxonomy.

Bundlers raise these; the orchestrator catches them at the stage
boundary and records a failed receipt for that one bundler.
"""

from __future__ import annotations


class BundleError(Exception):
    """Base class for every failure raised by a bundler."""


# ── Network ─────────────────────────────────────────────────────


class DownloadError(BundleError):
    """A runtime archive could not be downloaded."""

    def __init__(self, message: str, url: str):
        super().__init__(message)
        self.url = url


class DownloadConnectionError(DownloadError):
    """Transport failure: DNS, refused connection, reset, TLS."""


class DownloadNotFoundError(DownloadError):
    """The server answered 404, usually a mistyped version."""


class DownloadStatusError(DownloadError):
    """Any other non-success HTTP status."""

    def __init__(self, message: str, url: str, status: int):
        super().__init__(message, url)
        self.status = status


# ── Platform ────────────────────────────────────────────────────


class UnsupportedPlatformError(BundleError):
    """No implementation for this platform (e.g. an unknown archive format)."""


# ── Aggregates ──────────────────────────────────────────────────


class InstallError(BundleError):
    """One or more versions failed to install; the others were attempted."""

    def __init__(self, tool: str, failures: dict[str, BaseException]):
        self.tool = tool
        self.failures = failures
        details = "; ".join(f"{version}: {exc}" for version, exc in failures.items())
        super().__init__(f"Failed to install {tool} {', '.join(failures)} ({details})")


# Failing paths named in a SymlinkError message
_SHOWN_FAILURES = 3


class SymlinkError(BundleError):
    """One or more dotfiles could not be linked or unlinked."""

    def __init__(self, failures: list[tuple[str, str]], total: int):
        self.failures = failures
        self.total = total
        shown = "; ".join(f"{path}: {reason}" for path, reason in failures[:_SHOWN_FAILURES])
        more = len(failures) - _SHOWN_FAILURES
        if more > 0:
            shown += f"; and {more} more"
        super().__init__(f"{len(failures)} of {total} dotfile operations failed ({shown})")
