"""Agent configuration.

This module provides the configuration model and I/O functions for a
wingetctl run. The configuration is constructed once per run and passed
explicitly to every component that needs it.

Configuration is stored in <config dir>/config.toml, for example:

    source = "winget"
    install = ["Mozilla.Firefox", "7zip.7zip"]
    uninstall = ["Vendor.Legacy"]
    blocklist = ["Microsoft.Teams"]
    version_match = "prefix"
    notification_level = "full"
"""

import logging
import os
import tomllib
from enum import Enum
from pathlib import Path
from tempfile import NamedTemporaryFile
from typing import Annotated, Literal

import tomli_w
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from wingetctl.core.paths import get_config_path
from wingetctl.core.preflight import MIN_WINDOWS_BUILD

logger = logging.getLogger(__name__)

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR"]


class VersionMatch(str, Enum):
    """How an installed version is compared against a target version.

    Attributes:
        PREFIX: Installed version starts with the target (tolerates build
            metadata suffixes such as '1.2.3.0' for target '1.2.3').
        EXACT: Installed version equals the target.
    """

    PREFIX = "prefix"
    EXACT = "exact"

    def matches(self, installed: str | None, target: str) -> bool:
        """Check if an installed version satisfies the target."""
        if not installed:
            return False
        if self == VersionMatch.EXACT:
            return installed == target
        return installed.startswith(target)


class NotificationLevel(str, Enum):
    """Which notifications reach the notifier.

    Attributes:
        FULL: Every notification.
        SUCCESS_ONLY: Only successful operations.
        NONE: Nothing.
    """

    FULL = "full"
    SUCCESS_ONLY = "success_only"
    NONE = "none"


class AgentConfig(BaseModel):
    """Configuration for one agent run.

    Attributes:
        winget_path: Explicit winget.exe path. If None, it is located automatically.
        source: winget source used for queries and operations.
        install: Application ids to install.
        uninstall: Application ids to uninstall.
        blocklist: Application ids exempt from automatic updates.
        version_match: Comparison used to verify updates.
        notification_level: Which notifications are emitted.
        log_level: Logging level name.
        log_file: Log file path. If None, the per-principal default is used.
        min_os_build: Oldest supported Windows build.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    winget_path: Annotated[
        str | None,
        Field(description="Path to winget.exe (None = locate automatically)"),
    ] = None
    source: Annotated[
        str,
        Field(min_length=1, description="winget source name"),
    ] = "winget"
    install: Annotated[
        tuple[str, ...],
        Field(description="Application ids to install"),
    ] = ()
    uninstall: Annotated[
        tuple[str, ...],
        Field(description="Application ids to uninstall"),
    ] = ()
    blocklist: Annotated[
        frozenset[str],
        Field(description="Application ids exempt from automatic updates"),
    ] = frozenset()
    version_match: VersionMatch = VersionMatch.PREFIX
    notification_level: NotificationLevel = NotificationLevel.FULL
    log_level: LogLevel = "INFO"
    log_file: str | None = None
    min_os_build: Annotated[
        int,
        Field(ge=0, description="Oldest supported Windows build"),
    ] = MIN_WINDOWS_BUILD

    @field_validator("install", "uninstall", mode="before")
    @classmethod
    def _clean_id_list(cls, v: object) -> object:
        """Strip ids, drop blanks and duplicates while keeping order."""
        if not isinstance(v, list | tuple):
            return v
        seen: dict[str, None] = {}
        for item in v:
            if isinstance(item, str) and item.strip():
                seen.setdefault(item.strip(), None)
        return tuple(seen)

    @field_validator("blocklist", mode="before")
    @classmethod
    def _clean_id_set(cls, v: object) -> object:
        """Strip ids and drop blanks."""
        if not isinstance(v, list | tuple | set | frozenset):
            return v
        return frozenset(item.strip() for item in v if isinstance(item, str) and item.strip())

    def is_blocked(self, app_id: str) -> bool:
        """Check if an application id is on the blocklist (case-insensitive)."""
        folded = app_id.casefold()
        return any(blocked.casefold() == folded for blocked in self.blocklist)


class ConfigError(Exception):
    """Base exception for configuration errors."""


class ConfigNotFoundError(ConfigError):
    """Raised when the config file is not found."""


class ConfigParseError(ConfigError):
    """Raised when the config file cannot be parsed."""


def load_config(path: Path | None = None) -> AgentConfig:
    """Load agent configuration from a TOML file.

    Args:
        path: Path to the config file. If None, uses the default config path.

    Returns:
        Validated AgentConfig object.

    Raises:
        ConfigNotFoundError: If the config file doesn't exist.
        ConfigParseError: If the TOML syntax is invalid.
        ConfigError: If the content doesn't match the schema.
    """
    config_path = path or get_config_path()

    if not config_path.exists():
        raise ConfigNotFoundError(f"Config not found: {config_path}")

    try:
        with open(config_path, "rb") as f:
            data = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise ConfigParseError(f"Invalid TOML syntax: {e}") from e
    except OSError as e:
        raise ConfigError(f"Failed to read config: {e}") from e

    try:
        return AgentConfig.model_validate(data)
    except (ValueError, ValidationError) as e:
        raise ConfigError(f"Invalid config content: {e}") from e


def load_config_or_default(path: Path | None = None) -> AgentConfig:
    """Load configuration, falling back to defaults when no file exists.

    Raises:
        ConfigParseError: If the file exists but is not valid TOML.
        ConfigError: If the file exists but its content is invalid.
    """
    try:
        return load_config(path)
    except ConfigNotFoundError:
        logger.debug("No config file found, using defaults")
        return AgentConfig()


def save_config(config: AgentConfig, path: Path | None = None) -> Path:
    """Save agent configuration to a TOML file.

    The file is written atomically by first writing to a temporary file
    and then using os.replace() for atomic rename.

    Args:
        config: The AgentConfig object to save.
        path: Path to save the config. If None, uses the default config path.

    Returns:
        Path where the config was saved.

    Raises:
        ConfigError: If the file cannot be written.
    """
    config_path = path or get_config_path()
    config_path.parent.mkdir(parents=True, exist_ok=True)

    data = _config_to_dict(config)

    tmp_path: Path | None = None
    try:
        with NamedTemporaryFile(
            mode="wb",
            dir=config_path.parent,
            delete=False,
            suffix=".tmp",
        ) as f:
            tmp_path = Path(f.name)
            tomli_w.dump(data, f)
        os.replace(str(tmp_path), str(config_path))
    except OSError as e:
        if tmp_path is not None and tmp_path.exists():
            tmp_path.unlink()
        raise ConfigError(f"Failed to write config: {e}") from e

    return config_path


def _config_to_dict(config: AgentConfig) -> dict[str, object]:
    """Convert AgentConfig to a dictionary for TOML serialization.

    None values are omitted (TOML has no null).

    Args:
        config: The AgentConfig to convert.

    Returns:
        Dictionary ready for TOML serialization.
    """
    result: dict[str, object] = {
        "source": config.source,
        "install": list(config.install),
        "uninstall": list(config.uninstall),
        "blocklist": sorted(config.blocklist),
        "version_match": config.version_match.value,
        "notification_level": config.notification_level.value,
        "log_level": config.log_level,
        "min_os_build": config.min_os_build,
    }

    if config.winget_path is not None:
        result["winget_path"] = config.winget_path

    if config.log_file is not None:
        result["log_file"] = config.log_file

    return result
