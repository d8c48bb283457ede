"""Uninstall command implementation.

Removes applications by id, verifying each removal and recording it in
the tracking ledger.
"""

from typing import Annotated

import typer

from wingetctl.cli.commands._run import run_batch
from wingetctl.cli.context import get_config
from wingetctl.utils.formatting import print_info


def uninstall(
    ctx: typer.Context,
    app_ids: Annotated[
        list[str] | None,
        typer.Argument(
            help="Application ids to uninstall (default: the configured uninstall list).",
            show_default=False,
        ),
    ] = None,
    extra_args: Annotated[
        list[str] | None,
        typer.Option(
            "--arg",
            "-a",
            help="Extra argument passed to winget uninstall (repeatable).",
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
    """Uninstall applications.

    Ids that are not installed are skipped without a notification.

    Examples:
        wingetctl uninstall Vendor.Legacy
        wingetctl uninstall                    # configured uninstall list
    """
    ids = list(app_ids) if app_ids else list(get_config(ctx).uninstall)
    if not ids:
        print_info("No applications to uninstall.")
        return

    run_batch(
        ctx,
        lambda runtime: runtime.orchestrator.uninstall_all(ids, extra_args or None),
        json_output=json_output,
    )
