"""
dip — CLI entrypoint.

Usage:
    dip --help
    dip bundle apply
    dip bundle clean
    dip bundle info
"""

from __future__ import annotations

from pathlib import Path

import click

from dip import __version__
from dip.core.observability.logging_config import configure_logging, resolve_settings


@click.group()
@click.version_option(version=__version__, prog_name="dip")
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose output.")
@click.option("--quiet", "-q", is_flag=True, help="Suppress non-essential output.")
@click.option("--debug", is_flag=True, help="Enable debug logging (very verbose).")
@click.option(
    "--config",
    "-c",
    "config_path",
    type=click.Path(exists=False, dir_okay=False),
    default=None,
    help="Path to bundle.yml (default: $CONFIG_DIR/dip/bundle.yml).",
)
@click.pass_context
def cli(
    ctx: click.Context,
    verbose: bool,
    quiet: bool,
    debug: bool,
    config_path: str | None,
) -> None:
    """dip — bootstrap your environment from dotfiles and pinned runtimes."""
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    ctx.obj["quiet"] = quiet
    ctx.obj["debug"] = debug
    ctx.obj["config_path"] = Path(config_path) if config_path else None

    configure_logging(resolve_settings(debug=debug, verbose=verbose, quiet=quiet))


from dip.ui.cli.bundle import bundle  # noqa: E402

cli.add_command(bundle)


def main() -> None:
    cli(obj={})


if __name__ == "__main__":
    main()
