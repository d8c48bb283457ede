"""Rich console formatting utilities.

Provides consistent formatting for CLI output using Rich.
"""

from __future__ import annotations

import sys
from typing import TYPE_CHECKING

from rich.console import Console
from rich.table import Table

from wingetctl.core.theme import get_theme

if TYPE_CHECKING:
    from wingetctl.models.package import PackageRecord


def _detect_color_system() -> str | None:
    """Detect the best color system for the current terminal.

    Returns "truecolor" for interactive terminals to enable full hex color support,
    None otherwise to let Rich auto-detect.
    """
    if sys.stdout.isatty():
        return "truecolor"
    return None


# Shared console instances (theme loaded once at import)
console = Console(theme=get_theme(), color_system=_detect_color_system())
err_console = Console(theme=get_theme(), stderr=True, color_system=_detect_color_system())


def create_package_table(title: str = "Installed Packages", show_available: bool = False) -> Table:
    """Create a pre-configured table for displaying packages.

    Args:
        title: Table title.
        show_available: Include the available version column.

    Returns:
        Rich Table configured for package display.
    """
    table = Table(
        title=title,
        show_header=True,
        header_style="bold_header",
        border_style="border",
        row_styles=["", "on grey7"],
    )
    table.add_column("Name", no_wrap=True)
    table.add_column("Id", style="package.id", no_wrap=True)
    table.add_column("Version", style="version.installed")
    if show_available:
        table.add_column("Available", style="version.available")
    table.add_column("Source", style="muted")
    return table


def format_package_row(pkg: PackageRecord, show_available: bool = False) -> tuple[str, ...]:
    """Format a package as a table row with proper styling.

    Args:
        pkg: The package record to format.
        show_available: Include the available version cell.

    Returns:
        Tuple of cells matching create_package_table's columns.
    """
    cells = [
        f"[package.name]{pkg.name}[/]",
        pkg.id,
        pkg.installed_version or "-",
    ]
    if show_available:
        cells.append(pkg.available_version or "-")
    cells.append(pkg.source or "-")
    return tuple(cells)


def print_info(message: str) -> None:
    """Print an info message."""
    console.print(f"[info]{message}[/]")


def print_warning(message: str) -> None:
    """Print a warning message."""
    err_console.print(f"[warning]Warning:[/] {message}")


def print_error(message: str) -> None:
    """Print an error message."""
    err_console.print(f"[error]Error:[/] {message}")


def print_success(message: str) -> None:
    """Print a success message."""
    console.print(f"[success]{message}[/]")
