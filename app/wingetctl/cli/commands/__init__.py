"""CLI commands for wingetctl.

This package contains all subcommand implementations.
"""

from wingetctl.cli.commands import init, install, ledger, listing, snapshot, uninstall, update

__all__ = ["init", "install", "ledger", "listing", "snapshot", "uninstall", "update"]
