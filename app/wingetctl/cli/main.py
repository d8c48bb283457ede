"""Main CLI application entry point.

Defines the Typer application and global options.
"""

from pathlib import Path
from typing import Annotated

import typer

from wingetctl import __version__
from wingetctl.cli.commands import init, install, ledger, listing, snapshot, uninstall, update
from wingetctl.cli.context import get_principal

# Create main Typer app
app = typer.Typer(
    name="wingetctl",
    help="Patch management for Windows endpoints, powered by winget.",
    no_args_is_help=True,
    rich_markup_mode="rich",
    context_settings={"help_option_names": ["-h", "--help"]},
)


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        typer.echo(f"wingetctl version {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    ctx: typer.Context,
    version: Annotated[
        bool | None,
        typer.Option(
            "--version",
            "-V",
            callback=version_callback,
            is_eager=True,
            help="Show version and exit.",
        ),
    ] = None,
    verbose: Annotated[
        bool,
        typer.Option(
            "--verbose",
            "-v",
            help="Enable debug logging.",
        ),
    ] = False,
    config: Annotated[
        Path | None,
        typer.Option(
            "--config",
            "-c",
            help="Path to config.toml (default: <config dir>/config.toml).",
        ),
    ] = None,
) -> None:
    """wingetctl - Patch management for Windows endpoints.

    Installs, updates and uninstalls applications through winget and
    keeps a ledger of what this agent changed.
    """
    # Store options in context for subcommands
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    ctx.obj["config_path"] = config
    # Resolve the principal once for the whole run
    get_principal(ctx)


# Register commands
app.command(name="init")(init.init_config)
app.add_typer(listing.app, name="list")
app.command(name="install")(install.install)
app.command(name="uninstall")(uninstall.uninstall)
app.command(name="update")(update.update)
app.add_typer(ledger.app, name="ledger")
app.add_typer(snapshot.app, name="snapshot")


if __name__ == "__main__":
    app()
