"""CLI entry point for ipwatch."""

import asyncio
from pathlib import Path

import click

from ipwatch import __version__
from ipwatch.checker import run_check
from ipwatch.errors import FatalError
from ipwatch.logging import setup_logging


@click.group()
@click.option(
    "--config",
    "-c",
    type=click.Path(exists=False, dir_okay=False, path_type=Path),
    default=None,
    help="Path to config file.",
)
@click.pass_context
def main(ctx: click.Context, config: Path | None) -> None:
    """ipwatch - Email me when my public IP address changes."""
    ctx.ensure_object(dict)
    ctx.obj["config_path"] = config
    ctx.obj["logger"] = setup_logging()


@main.command()
@click.option(
    "--state-file",
    "-s",
    type=click.Path(exists=False, dir_okay=False, path_type=Path),
    default=None,
    help="File holding the last known IP (overrides config).",
)
@click.pass_context
def check(ctx: click.Context, state_file: Path | None) -> None:
    """Check the public IP once and email if it changed."""
    try:
        result = asyncio.run(
            run_check(ctx.obj["config_path"], state_file=state_file)
        )
    except FatalError as e:
        ctx.obj["logger"].error(f"{e}. Exiting...")
        raise SystemExit(1)

    if result.changed:
        previous = result.previous if result.previous is not None else "none"
        click.echo(f"IP changed: {previous} -> {result.current}")
        if not result.persisted:
            click.echo("Warning: new IP could not be saved", err=True)
    else:
        click.echo(f"IP unchanged: {result.current}")


@main.command()
def version() -> None:
    """Show version."""
    click.echo(f"ipwatch version {__version__}")
