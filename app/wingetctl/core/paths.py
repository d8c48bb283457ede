"""Path management for wingetctl.

On Windows all files live under %ProgramData%\\wingetctl so the SYSTEM
task and interactive users share one configuration. Elsewhere the XDG
Base Directory defaults are used, which keeps development and tests off
system locations. WINGETCTL_HOME overrides the base on every platform.

Layout:
- <base>/config.toml
- <base>/logs/
- <base>/state/ledger-<principal>.json
- <base>/state/system-apps.json
"""

import os
import sys
from pathlib import Path

from wingetctl.core.principal import ExecutionPrincipal

# Application identifier for directory naming
APP_NAME = "wingetctl"

HOME_ENV_VAR = "WINGETCTL_HOME"


def _get_xdg_dir(env_var: str, default_subdir: str) -> Path:
    """Get XDG directory respecting environment variable override.

    Args:
        env_var: XDG environment variable name (e.g., "XDG_CONFIG_HOME").
        default_subdir: Default subdirectory under home (e.g., ".config").

    Returns:
        Path to the application-specific directory.
    """
    base = os.environ.get(env_var)
    if base:
        return Path(base) / APP_NAME
    return Path.home() / default_subdir / APP_NAME


def _get_base_dir() -> Path | None:
    """Get the single base directory, if one applies.

    Returns:
        WINGETCTL_HOME if set, %ProgramData%\\wingetctl on Windows, else None.
    """
    override = os.environ.get(HOME_ENV_VAR)
    if override:
        return Path(override)
    if sys.platform == "win32":
        return Path(os.environ.get("ProgramData", r"C:\ProgramData")) / APP_NAME
    return None


def get_config_dir() -> Path:
    """Get the configuration directory path.

    Returns:
        Base directory, or ~/.config/wingetctl/ (XDG_CONFIG_HOME) off Windows.
    """
    base = _get_base_dir()
    if base is not None:
        return base
    return _get_xdg_dir("XDG_CONFIG_HOME", ".config")


def get_state_dir() -> Path:
    """Get the state directory path.

    State data includes the tracking ledgers and the system apps snapshot.

    Returns:
        <base>/state, or ~/.local/state/wingetctl/ (XDG_STATE_HOME) off Windows.
    """
    base = _get_base_dir()
    if base is not None:
        return base / "state"
    return _get_xdg_dir("XDG_STATE_HOME", ".local/state")


def get_log_dir() -> Path:
    """Get the log directory path.

    Returns:
        <base>/logs, or <state dir>/logs off Windows.
    """
    base = _get_base_dir()
    if base is not None:
        return base / "logs"
    return get_state_dir() / "logs"


def get_config_path() -> Path:
    """Get the default configuration file path.

    Returns:
        Path to <config dir>/config.toml.
    """
    return get_config_dir() / "config.toml"


def get_theme_path() -> Path:
    """Get the user theme override path.

    Returns:
        Path to <config dir>/theme.toml.
    """
    return get_config_dir() / "theme.toml"


def get_ledger_path(principal: ExecutionPrincipal) -> Path:
    """Get the tracking ledger path for a principal.

    Each principal owns a separate file so the SYSTEM task and user
    runs never write the same ledger.

    Args:
        principal: Execution principal.

    Returns:
        Path to <state dir>/ledger-<suffix>.json.
    """
    return get_state_dir() / f"ledger-{principal.suffix}.json"


def get_system_apps_path() -> Path:
    """Get the system apps snapshot path.

    Returns:
        Path to <state dir>/system-apps.json.
    """
    return get_state_dir() / "system-apps.json"


def get_default_log_file(principal: ExecutionPrincipal) -> Path:
    """Get the default log file for a principal.

    Returns:
        Path to <log dir>/wingetctl-<suffix>.log.
    """
    return get_log_dir() / f"{APP_NAME}-{principal.suffix}.log"
