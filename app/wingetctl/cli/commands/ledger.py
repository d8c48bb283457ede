"""Ledger command implementation.

Shows which applications this agent installed and removed for the
current principal.
"""

import json
from typing import Annotated

import typer
from rich.table import Table

from wingetctl.cli.context import get_principal
from wingetctl.core.ledger import LedgerStore, TrackingLedger
from wingetctl.core.paths import get_ledger_path
from wingetctl.utils.formatting import console, print_info

app = typer.Typer(
    name="ledger",
    help="Show the tracking ledger.",
    invoke_without_command=True,
)


@app.callback(invoke_without_command=True)
def show_ledger(
    ctx: typer.Context,
    json_output: Annotated[
        bool,
        typer.Option(
            "--json",
            help="Output as JSON.",
        ),
    ] = False,
) -> None:
    """Show the tracking ledger.

    Examples:
        wingetctl ledger
        wingetctl ledger --json
    """
    if ctx.invoked_subcommand is not None:
        return

    principal = get_principal(ctx)
    store = LedgerStore(get_ledger_path(principal))
    ledger = store.load()

    if json_output:
        console.print_json(json.dumps(ledger.to_dict()))
        return

    if not ledger.installed and not ledger.removed:
        print_info(f"Ledger for {principal.name} is empty.")
        return

    console.print(_create_ledger_table(ledger, principal.name))


def _create_ledger_table(ledger: TrackingLedger, owner: str) -> Table:
    """Build a table of tracked ids with their ledger state."""
    table = Table(
        title=f"Tracking Ledger ({owner})",
        show_header=True,
        header_style="bold_header",
        border_style="border",
    )
    table.add_column("State", width=10)
    table.add_column("Id", no_wrap=True)

    for app_id in sorted(ledger.installed, key=str.casefold):
        table.add_row("[tracked.installed]installed[/]", app_id)
    for app_id in sorted(ledger.removed, key=str.casefold):
        table.add_row("[tracked.removed]removed[/]", app_id)

    return table
