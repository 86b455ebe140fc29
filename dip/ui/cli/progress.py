"""
Progress lines — what the user sees while a stage runs.

Implements the orchestrator's ``StageProgress`` hook for the terminal.

One start line and one result line per bundler.  Failures go to
stderr, everything else to stdout.  The wording is for humans; only
the leading markers are stable.
"""

from __future__ import annotations

import click

from dip.core.models.receipt import Receipt

_START_ICONS = {
    "setup": "⚙️ ",
    "apply": "📌",
    "clean": "🫧 ",
}


class ProgressPrinter:
    """Prints per-bundler start / result lines."""

    def __init__(self, enabled: bool = True):
        self.enabled = enabled

    def start(self, stage: str, bundler_name: str) -> None:
        if not self.enabled:
            return
        icon = _START_ICONS.get(stage, "•")
        click.echo(f"{icon} {_action(stage, bundler_name)}")

    def result(self, stage: str, bundler_name: str, receipt: Receipt) -> None:
        if not self.enabled:
            return
        action = _action(stage, bundler_name)
        if receipt.ok:
            click.secho(f"✅ {action}", fg="green")
        elif receipt.skipped:
            click.secho(f"🟡 Skip {action}: {receipt.output}", fg="yellow")
        else:
            click.secho(f"❌ Failed to {stage} {bundler_name}: {receipt.error}", fg="red", err=True)


def _action(stage: str, bundler_name: str) -> str:
    return f"{stage.capitalize()} {bundler_name}"
