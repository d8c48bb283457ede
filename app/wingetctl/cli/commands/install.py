"""Install command implementation.

Installs applications by id, verifying each install and recording it
in the tracking ledger.
"""

from typing import Annotated

import typer

from wingetctl.cli.commands._run import run_batch
from wingetctl.cli.context import get_config
from wingetctl.utils.formatting import print_info


def install(
    ctx: typer.Context,
    app_ids: Annotated[
        list[str] | None,
        typer.Argument(
            help="Application ids to install (default: the configured install list).",
            show_default=False,
        ),
    ] = None,
    extra_args: Annotated[
        list[str] | None,
        typer.Option(
            "--arg",
            "-a",
            help="Extra argument passed to winget install (repeatable).",
        ),
    ] = None,
    json_output: Annotated[
        bool,
        typer.Option(
            "--json",
            help="Output results as JSON.",
        ),
    ] = False,
) -> None:
    """Install applications.

    Each id is checked for existence and skipped if already installed.
    An install only counts as successful when winget exits cleanly AND
    the package is installed afterwards.

    Examples:
        wingetctl install Mozilla.Firefox 7zip.7zip
        wingetctl install Vendor.App --arg=--scope --arg=machine
        wingetctl install                      # configured install list
    """
    ids = list(app_ids) if app_ids else list(get_config(ctx).install)
    if not ids:
        print_info("No applications to install.")
        return

    run_batch(
        ctx,
        lambda runtime: runtime.orchestrator.install_all(ids, extra_args or None),
        json_output=json_output,
    )
