"""Command-line entry point."""

import asyncio

import typer

from awschecker import __version__
from awschecker.core.config import StartupError
from awschecker.core.logging import logger
from awschecker.core.prober_service import ShutdownError

PROG = "aws-checker"

app = typer.Typer(
    name=PROG,
    help=f"{PROG} is a toolkit for checking availability of AWS services.",
    add_completion=False,
    context_settings={"help_option_names": ["-h", "-help", "--help"]},
)


@app.callback(invoke_without_command=True)
def root(ctx: typer.Context) -> None:
    """Run the checker when no command is given."""
    if ctx.invoked_subcommand is not None:
        return

    from awschecker.main import main as run_main

    try:
        asyncio.run(run_main())
    except (StartupError, ShutdownError) as e:
        logger.error(f"Error: {e}")
        raise typer.Exit(code=1)


@app.command()
def version() -> None:
    """Print the version and exit."""
    typer.echo(f"{PROG} {__version__}")


def main() -> None:
    app(prog_name=PROG)
