"""
Bundle orchestrator — the staged pipeline.

A trigger (Apply or Clean) runs two stages across the registered
bundlers:

    SETUP  (bundlers with needs_setup, registration order)
    APPLY | CLEAN  (every bundler, registration order)

Each bundler is built fresh from its factory for every stage.  A
bundler that raises gets a failed receipt and the stage moves on to
the next one; the orchestrator itself never raises for a bundler.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Protocol

from dip.bundlers.base import BundlerFactory
from dip.bundlers.errors import BundleError
from dip.bundlers.registry import BundlerRegistry
from dip.core.models.config import BundleConfig
from dip.core.models.receipt import Receipt

logger = logging.getLogger(__name__)


class Trigger(str, Enum):
    APPLY = "apply"
    CLEAN = "clean"


class Stage(str, Enum):
    SETUP = "setup"
    APPLY = "apply"
    CLEAN = "clean"


class StageProgress(Protocol):
    """Receives a start and a result notice for every bundler stage."""

    def start(self, stage: str, bundler_name: str) -> None: ...

    def result(self, stage: str, bundler_name: str, receipt: Receipt) -> None: ...


class SilentProgress:
    """StageProgress that reports nothing; the default outside the CLI."""

    def start(self, stage: str, bundler_name: str) -> None:
        pass

    def result(self, stage: str, bundler_name: str, receipt: Receipt) -> None:
        pass


_TRIGGER_STAGE: dict[Trigger, Stage] = {
    Trigger.APPLY: Stage.APPLY,
    Trigger.CLEAN: Stage.CLEAN,
}


@dataclass
class StageReport:
    """Receipts from one trigger run, in execution order."""

    trigger: Trigger
    setup_receipts: list[Receipt] = field(default_factory=list)
    receipts: list[Receipt] = field(default_factory=list)

    @property
    def total(self) -> int:
        return len(self.receipts)

    @property
    def succeeded(self) -> int:
        return sum(1 for r in self.receipts if r.ok)

    @property
    def failed(self) -> int:
        return sum(1 for r in self.all_receipts if r.failed)

    @property
    def skipped(self) -> int:
        return sum(1 for r in self.receipts if r.skipped)

    @property
    def all_receipts(self) -> list[Receipt]:
        return self.setup_receipts + self.receipts

    @property
    def all_ok(self) -> bool:
        return self.failed == 0

    @property
    def status(self) -> str:
        if self.failed == 0:
            return "ok"
        if self.succeeded > 0:
            return "partial"
        return "failed"

    def receipt_for(self, key: str) -> Receipt | None:
        """The main-stage receipt of one bundler."""
        for receipt in self.receipts:
            if receipt.bundler == key:
                return receipt
        return None

    def to_dict(self) -> dict:
        return {
            "trigger": self.trigger.value,
            "status": self.status,
            "total": self.total,
            "succeeded": self.succeeded,
            "failed": self.failed,
            "skipped": self.skipped,
            "setup": [r.model_dump(mode="json") for r in self.setup_receipts],
            "receipts": [r.model_dump(mode="json") for r in self.receipts],
        }


class Orchestrator:
    """Runs the registered bundlers through the stages of a trigger."""

    def __init__(
        self,
        config: BundleConfig,
        registry: BundlerRegistry,
        printer: StageProgress | None = None,
    ):
        self.config = config
        self.registry = registry
        self.printer = printer or SilentProgress()

    def run(self, trigger: Trigger) -> StageReport:
        """Run the Setup stage, then the trigger's stage, over every bundler.

        Returns:
            StageReport with one receipt per bundler per stage run.
        """
        report = StageReport(trigger=trigger)
        factories = self.registry.factories()

        for factory in factories:
            if getattr(factory, "needs_setup", False):
                report.setup_receipts.append(self._run_stage(factory, Stage.SETUP))

        stage = _TRIGGER_STAGE[trigger]
        for factory in factories:
            receipt = self._run_stage(factory, stage)
            report.receipts.append(receipt)

            status_marker = "✓" if receipt.ok else "✗" if receipt.failed else "⊘"
            logger.info("%s %s:%s → %s", status_marker, receipt.bundler, stage.value, receipt.status)

        return report

    def _run_stage(self, factory: BundlerFactory, stage: Stage) -> Receipt:
        """Build one bundler and run one stage on it. Never raises."""
        key = getattr(factory, "key", repr(factory))
        name = getattr(factory, "name", key)
        start_time = time.monotonic()

        # Setup is silent unless it fails
        if stage is not Stage.SETUP:
            self.printer.start(stage.value, name)

        try:
            bundler = factory(self.config)
            if stage is Stage.SETUP:
                bundler.setup()
                receipt = Receipt.success(bundler=key)
            elif stage is Stage.APPLY:
                receipt = bundler.apply()
            else:
                receipt = bundler.clean()
        except BundleError as e:
            receipt = Receipt.failure(bundler=key, error=str(e))
        except OSError as e:
            receipt = Receipt.failure(bundler=key, error=f"File system error: {e}")
        except Exception as e:
            logger.error("Bundler %s raised during %s: %s", key, stage.value, e, exc_info=True)
            receipt = Receipt.failure(bundler=key, error=f"Unexpected error: {e}")

        receipt.stage = stage.value
        receipt.duration_ms = int((time.monotonic() - start_time) * 1000)

        if stage is not Stage.SETUP or receipt.failed:
            self.printer.result(stage.value, name, receipt)

        return receipt
