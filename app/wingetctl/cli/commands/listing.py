"""List command implementation.

Lists installed or outdated packages as reported by winget.
"""

import json
from typing import Annotated

import typer

from wingetctl.cli.context import start_run
from wingetctl.utils.formatting import (
    console,
    create_package_table,
    format_package_row,
    print_info,
)

app = typer.Typer(
    help="List installed packages.",
    invoke_without_command=True,
)


@app.callback(invoke_without_command=True)
def list_packages(
    ctx: typer.Context,
    outdated: Annotated[
        bool,
        typer.Option(
            "--outdated",
            "-o",
            help="Only show packages with an update available.",
        ),
    ] = False,
    json_output: Annotated[
        bool,
        typer.Option(
            "--json",
            help="Output as JSON.",
        ),
    ] = False,
) -> None:
    """List installed packages.

    For non-SYSTEM principals, packages from the system apps snapshot
    are hidden.

    Examples:
        wingetctl list                  # Installed packages
        wingetctl list --outdated       # Packages with updates
        wingetctl list --json           # JSON output for scripting
    """
    if ctx.invoked_subcommand is not None:
        return

    runtime = start_run(ctx)
    if outdated:
        packages = runtime.query.list_outdated()
    else:
        packages = runtime.query.list_installed()
    packages.sort(key=lambda p: p.id.casefold())

    if json_output:
        data = [
            {
                "id": p.id,
                "name": p.name,
                "installed_version": p.installed_version,
                "available_version": p.available_version,
                "source": p.source,
            }
            for p in packages
        ]
        console.print_json(json.dumps(data))
        return

    if not packages:
        print_info("No outdated packages." if outdated else "No installed packages found.")
        return

    title = "Outdated Packages" if outdated else "Installed Packages"
    table = create_package_table(title, show_available=outdated)
    for pkg in packages:
        table.add_row(*format_package_row(pkg, show_available=outdated))
    console.print(table)
    console.print(f"\n[muted]{len(packages)} package(s)[/muted]")
