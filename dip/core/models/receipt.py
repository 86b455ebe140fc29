"""
Receipt model — the outcome of one bundler stage.

Bundlers raise on failure; the orchestrator turns every outcome,
good or bad, into a Receipt so one broken bundler never stops the
rest of the stage.
"""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Any, Literal

from pydantic import BaseModel, Field


def _now_iso() -> str:
    """Current UTC time as ISO string."""
    return datetime.now(UTC).isoformat()


class Receipt(BaseModel):
    """Result of running one bundler through one stage."""

    bundler: str                    # bundler key (e.g. "dotfiles")
    stage: str = ""                 # "setup", "apply" or "clean"
    status: Literal["ok", "skipped", "failed"] = "ok"

    started_at: str = Field(default_factory=_now_iso)
    duration_ms: int = 0

    output: str = ""
    error: str | None = None

    metadata: dict[str, Any] = Field(default_factory=dict)

    @property
    def ok(self) -> bool:
        """Whether the stage succeeded."""
        return self.status == "ok"

    @property
    def failed(self) -> bool:
        """Whether the stage failed."""
        return self.status == "failed"

    @property
    def skipped(self) -> bool:
        return self.status == "skipped"

    @classmethod
    def success(
        cls,
        bundler: str,
        output: str = "",
        **kwargs: Any,
    ) -> Receipt:
        """Create a success receipt."""
        return cls(bundler=bundler, status="ok", output=output, **kwargs)

    @classmethod
    def failure(
        cls,
        bundler: str,
        error: str,
        **kwargs: Any,
    ) -> Receipt:
        """Create a failure receipt."""
        return cls(bundler=bundler, status="failed", error=error, **kwargs)

    @classmethod
    def skip(
        cls,
        bundler: str,
        reason: str = "",
        **kwargs: Any,
    ) -> Receipt:
        """Create a skip receipt. The reason is kept in ``output``."""
        return cls(bundler=bundler, status="skipped", output=reason, **kwargs)
