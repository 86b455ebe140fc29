"""
CLI commands for the bundle pipeline.

Thin wrappers over ``dip.core.use_cases.bundle``.
"""

from __future__ import annotations

import json
import sys

import click

from dip.core.engine.orchestrator import Trigger
from dip.ui.cli.progress import ProgressPrinter


@click.group()
def bundle() -> None:
    """Bundle — link dotfiles and install pinned runtimes."""


def _run(ctx: click.Context, trigger: Trigger, as_json: bool, strict: bool, reinstall: bool = False) -> None:
    from dip.core.use_cases.bundle import run_bundle

    printer = ProgressPrinter(enabled=not as_json and not ctx.obj.get("quiet", False))
    result = run_bundle(
        trigger,
        config_path=ctx.obj.get("config_path"),
        reinstall=reinstall,
        printer=printer,
    )

    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2))
        if result.error:
            sys.exit(1)
    elif result.error:
        click.secho(f"❌ {result.error}", fg="red", err=True)
        sys.exit(1)

    report = result.report
    assert report is not None

    if not as_json and ctx.obj.get("verbose"):
        click.echo()
        for receipt in report.receipts:
            if receipt.output:
                click.echo(f"   {receipt.bundler}: {receipt.output}")

    if strict and report.failed > 0:
        sys.exit(1)


@bundle.command()
@click.option("--reinstall", is_flag=True, help="Re-download runtime versions that are already installed.")
@click.option("--strict", is_flag=True, help="Exit non-zero if any bundler failed.")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def apply(ctx: click.Context, reinstall: bool, strict: bool, as_json: bool) -> None:
    """Link dotfiles and install configured runtime versions."""
    _run(ctx, Trigger.APPLY, as_json=as_json, strict=strict, reinstall=reinstall)


@bundle.command()
@click.option("--strict", is_flag=True, help="Exit non-zero if any bundler failed.")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def clean(ctx: click.Context, strict: bool, as_json: bool) -> None:
    """Remove dotfile symlinks, runtime shims and configured installs."""
    _run(ctx, Trigger.CLEAN, as_json=as_json, strict=strict)


@bundle.command()
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def info(ctx: click.Context, as_json: bool) -> None:
    """Show the resolved bundle configuration."""
    from dip.core.use_cases.bundle import bundle_info

    result = bundle_info(config_path=ctx.obj.get("config_path"))

    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2))
        if result.error:
            sys.exit(1)
        return

    if result.error:
        click.secho(f"❌ {result.error}", fg="red", err=True)
        sys.exit(1)

    data = result.to_dict()
    click.secho("\n📦 Bundle", fg="cyan", bold=True)
    click.echo(f"   Config:      {data['config_path'] or '(built-in defaults)'}")
    if data["repository"]:
        click.echo(f"   Repository:  {data['repository']}")
    click.echo(f"   Home:        {data['home']}")
    click.echo(f"   Bundle root: {data['bundle_root']}")
    click.echo(f"   Data dir:    {data['data_dir']}")
    click.echo(f"   Bundlers:    {', '.join(data['bundlers'])}")
    click.echo()
    click.secho("   Runtimes:", fg="white", bold=True)
    for key, versions in data["runtime"].items():
        label = ", ".join(versions) if versions else "(none)"
        click.echo(f"     • {key}: {label}")
    click.echo()
