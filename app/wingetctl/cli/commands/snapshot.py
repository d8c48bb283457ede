"""Snapshot commands.

Regenerates and inspects the system apps snapshot, the set of ids
excluded from listings for non-SYSTEM principals.
"""

from typing import Annotated

import typer

from wingetctl.cli.context import start_run
from wingetctl.core.paths import get_system_apps_path
from wingetctl.core.snapshot import SnapshotStore
from wingetctl.utils.formatting import console, print_info, print_success, print_warning

app = typer.Typer(
    help="Manage the system apps snapshot.",
    invoke_without_command=True,
    no_args_is_help=True,
)


@app.command()
def refresh(ctx: typer.Context) -> None:
    """Regenerate the snapshot from a full winget export.

    A failed or empty export keeps the previous snapshot.
    """
    runtime = start_run(ctx)
    ids = runtime.snapshot.refresh(runtime.query)

    if not ids:
        print_warning("winget export returned no packages; snapshot not updated.")
        raise typer.Exit(code=1)
    print_success(f"Snapshot refreshed with {len(ids)} id(s): {runtime.snapshot.path}")


@app.command()
def show(
    limit: Annotated[
        int | None,
        typer.Option(
            "--limit",
            "-n",
            help="Limit number of ids to display.",
        ),
    ] = None,
) -> None:
    """Show the ids in the current snapshot."""
    store = SnapshotStore(get_system_apps_path())
    ids = sorted(store.load(), key=str.casefold)

    if not ids:
        print_info("No system apps snapshot. Run 'wingetctl snapshot refresh'.")
        return

    shown = ids[:limit] if limit is not None else ids
    for app_id in shown:
        console.print(app_id)
    if len(shown) < len(ids):
        console.print(f"[muted]... and {len(ids) - len(shown)} more[/muted]")
    console.print(f"\n[muted]{len(ids)} system app(s) in {store.path}[/muted]")
