"""
Mock bundler — universal test double for orchestrator runs.

A MockBundler instance is its own factory: registering it and letting
the orchestrator "construct" it binds the config and hands back the
same object, so its call log survives across stages.
"""

from __future__ import annotations

from dip.bundlers.base import Bundler
from dip.bundlers.errors import BundleError
from dip.core.models.config import BundleConfig
from dip.core.models.receipt import Receipt


class MockBundler(Bundler):
    """Configurable bundler for testing.

    By default every stage succeeds.  Stages can be set to fail with a
    BundleError (or any exception) or to skip with a reason.
    """

    def __init__(
        self,
        key: str = "mock",
        name: str | None = None,
        needs_setup: bool = False,
        journal: list[str] | None = None,
    ):
        self.key = key  # type: ignore[misc]
        self.name = name or key  # type: ignore[misc]
        self.needs_setup = needs_setup  # type: ignore[misc]
        self._config: BundleConfig | None = None  # type: ignore[assignment]
        self._errors: dict[str, BaseException] = {}
        self._skips: dict[str, str] = {}
        self._call_log: list[str] = []
        self._journal = journal

    def __call__(self, config: BundleConfig) -> MockBundler:
        self._config = config
        return self

    @property
    def call_log(self) -> list[str]:
        """Stage names this mock has run, in order."""
        return self._call_log

    @property
    def call_count(self) -> int:
        return len(self._call_log)

    def set_failure(self, stage: str, error: BaseException | str = "Mock failure") -> None:
        """Configure a stage to raise."""
        self._errors[stage] = BundleError(error) if isinstance(error, str) else error

    def set_skip(self, stage: str, reason: str = "nothing to do") -> None:
        """Configure a stage to report a skip."""
        self._skips[stage] = reason

    def setup(self) -> None:
        self._record("setup")

    def apply(self) -> Receipt:
        return self._record("apply")

    def clean(self) -> Receipt:
        return self._record("clean")

    def reset(self) -> None:
        """Clear call log and configured outcomes."""
        self._call_log.clear()
        self._errors.clear()
        self._skips.clear()

    def _record(self, stage: str) -> Receipt:
        self._call_log.append(stage)
        if self._journal is not None:
            self._journal.append(f"{self.key}:{stage}")

        if stage in self._errors:
            raise self._errors[stage]
        if stage in self._skips:
            return Receipt.skip(bundler=self.key, reason=self._skips[stage])
        return Receipt.success(bundler=self.key, output=f"[mock] {stage}")
