"""Init command implementation.

Writes a starter config.toml for the agent.
"""

from pathlib import Path
from typing import Annotated

import typer

from wingetctl.core.config import AgentConfig, ConfigError, save_config
from wingetctl.core.paths import get_config_path
from wingetctl.utils.formatting import console, print_error, print_info, print_success


def _show_config_summary(config: AgentConfig, output_path: Path) -> None:
    """Display what the new config contains."""
    console.print()
    console.print("[bold]Config Summary[/bold]")
    console.print(f"  Output: [muted]{output_path}[/muted]")
    console.print(f"  Source: [info]{config.source}[/info]")
    console.print(f"  Install: [bold]{len(config.install)}[/bold] id(s)")
    console.print(f"  Uninstall: [bold]{len(config.uninstall)}[/bold] id(s)")
    if config.blocklist:
        blocked = ", ".join(sorted(config.blocklist, key=str.casefold))
        console.print(f"  Blocklist: [muted]{blocked}[/muted]")
    console.print()


def init_config(
    ctx: typer.Context,
    install_ids: Annotated[
        list[str] | None,
        typer.Option(
            "--install",
            "-i",
            help="Application id to install on every run (repeatable).",
        ),
    ] = None,
    uninstall_ids: Annotated[
        list[str] | None,
        typer.Option(
            "--uninstall",
            "-u",
            help="Application id to uninstall on every run (repeatable).",
        ),
    ] = None,
    blocklist: Annotated[
        list[str] | None,
        typer.Option(
            "--block",
            "-b",
            help="Application id exempt from automatic updates (repeatable).",
        ),
    ] = None,
    force: Annotated[
        bool,
        typer.Option(
            "--force",
            "-f",
            help="Overwrite an existing config file.",
        ),
    ] = False,
    dry_run: Annotated[
        bool,
        typer.Option(
            "--dry-run",
            "-n",
            help="Show what would be written without writing files.",
        ),
    ] = False,
) -> None:
    """Create config.toml with the given application lists.

    The file is written to the path given by the global --config option,
    or to the default config location.

    Examples:
        wingetctl init --install Mozilla.Firefox --install 7zip.7zip
        wingetctl init --block Microsoft.Teams --force
        wingetctl -c C:\\agent\\config.toml init --dry-run
    """
    obj = ctx.obj or {}
    output_path: Path = obj.get("config_path") or get_config_path()

    if output_path.exists() and not force and not dry_run:
        print_error(f"Config already exists: {output_path}")
        print_info("Use --force to overwrite it.")
        raise typer.Exit(code=1)

    config = AgentConfig(
        install=tuple(install_ids or ()),
        uninstall=tuple(uninstall_ids or ()),
        blocklist=frozenset(blocklist or ()),
    )
    _show_config_summary(config, output_path)

    if dry_run:
        print_info("Dry-run: no files written.")
        return

    try:
        saved = save_config(config, output_path)
    except ConfigError as e:
        print_error(str(e))
        raise typer.Exit(code=1) from e
    print_success(f"Config written to {saved}")
