"""Shared run setup for CLI commands.

Loads configuration, configures logging, and wires the runtime for a
command, turning configuration and precondition failures into a clean
exit code 1.
"""

import logging
from pathlib import Path

import typer

from wingetctl.core.config import AgentConfig, ConfigError, load_config_or_default
from wingetctl.core.logs import configure_logging
from wingetctl.core.paths import get_default_log_file
from wingetctl.core.preflight import FatalPreconditionError
from wingetctl.core.principal import ExecutionPrincipal, resolve_principal
from wingetctl.core.runtime import Runtime, build_runtime
from wingetctl.notify.base import Notifier
from wingetctl.utils.formatting import print_error, print_warning

logger = logging.getLogger(__name__)


def get_config(ctx: typer.Context) -> AgentConfig:
    """Load the configuration selected by the global --config option.

    Raises:
        typer.Exit: If the configuration file is invalid.
    """
    obj = ctx.obj or {}
    config_path: Path | None = obj.get("config_path")
    try:
        return load_config_or_default(config_path)
    except ConfigError as e:
        print_error(str(e))
        raise typer.Exit(code=1) from e


def get_principal(ctx: typer.Context) -> ExecutionPrincipal:
    """Return the execution principal for this run.

    The principal is resolved on first use and kept on the context, so
    every component of a run sees the same identity.
    """
    obj = ctx.ensure_object(dict)
    if obj.get("principal") is None:
        obj["principal"] = resolve_principal()
    return obj["principal"]


def setup_logging(
    ctx: typer.Context, config: AgentConfig, principal: ExecutionPrincipal
) -> None:
    """Configure logging from the configuration and the --verbose flag.

    A log file that cannot be opened degrades to console-only logging.
    """
    obj = ctx.obj or {}
    level = "DEBUG" if obj.get("verbose") else config.log_level
    log_file = Path(config.log_file) if config.log_file else get_default_log_file(principal)
    try:
        configure_logging(level, log_file)
    except OSError as e:
        print_warning(f"Cannot write log file {log_file}: {e}")
        configure_logging(level)


def start_run(ctx: typer.Context, notifier: Notifier | None = None) -> Runtime:
    """Prepare everything a winget-backed command needs.

    Args:
        ctx: Typer context carrying the global options.
        notifier: Notification sink override.

    Returns:
        Wired Runtime.

    Raises:
        typer.Exit: If configuration or a fatal precondition fails.
    """
    config = get_config(ctx)
    principal = get_principal(ctx)
    setup_logging(ctx, config, principal)
    try:
        return build_runtime(config, principal, notifier=notifier)
    except FatalPreconditionError as e:
        logger.error("Aborting run: %s", e)
        print_error(str(e))
        raise typer.Exit(code=1) from e
