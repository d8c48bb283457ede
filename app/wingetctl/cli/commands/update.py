"""Update command implementation.

Upgrades outdated applications, skipping blocklisted ids unless forced.
"""

from typing import Annotated

import typer

from wingetctl.cli.commands._run import run_batch
from wingetctl.core.runtime import Runtime
from wingetctl.models.operation import RunSummary
from wingetctl.utils.formatting import print_info


def _update_selected(runtime: Runtime, app_ids: list[str], force: bool) -> RunSummary:
    """Update only the requested ids among the outdated packages."""
    wanted = {app_id.casefold(): app_id for app_id in app_ids}
    selected = [pkg for pkg in runtime.query.list_outdated() if pkg.id.casefold() in wanted]

    found = {pkg.id.casefold() for pkg in selected}
    for key, app_id in wanted.items():
        if key not in found:
            print_info(f"{app_id} is up to date or not installed.")

    return runtime.orchestrator.update_all(selected, override_blocklist=force)


def update(
    ctx: typer.Context,
    app_ids: Annotated[
        list[str] | None,
        typer.Argument(
            help="Application ids to update (default: every outdated package).",
            show_default=False,
        ),
    ] = None,
    force: Annotated[
        bool,
        typer.Option(
            "--force",
            "-f",
            help="Update blocklisted applications too.",
        ),
    ] = False,
    json_output: Annotated[
        bool,
        typer.Option(
            "--json",
            help="Output results as JSON.",
        ),
    ] = False,
) -> None:
    """Update outdated applications.

    Updates are verified against the available version reported by
    winget; blocklisted ids are skipped unless --force is given.

    Examples:
        wingetctl update                       # everything outdated
        wingetctl update Mozilla.Firefox
        wingetctl update Microsoft.Teams --force
    """
    if app_ids:
        ids = list(app_ids)
        run_batch(
            ctx,
            lambda runtime: _update_selected(runtime, ids, force),
            json_output=json_output,
        )
        return

    run_batch(
        ctx,
        lambda runtime: runtime.orchestrator.update_all(override_blocklist=force),
        json_output=json_output,
    )
