"""Fatal precondition checks.

Checks that must pass before any package operation is meaningful: a
supported Windows build and a locatable winget executable. Failures
raise FatalPreconditionError subclasses, which abort the whole run.
"""

import logging
import os
import platform
import re
import shutil
from pathlib import Path

logger = logging.getLogger(__name__)

# Windows 10 1809 is the oldest build winget supports
MIN_WINDOWS_BUILD = 17763

# App Installer package directories, one per installed version
_APP_INSTALLER_GLOB = "Microsoft.DesktopAppInstaller_*_x64__8wekyb3d8bbwe"

_VERSION_IN_DIR = re.compile(r"DesktopAppInstaller_([\d.]+)_")


class FatalPreconditionError(Exception):
    """Raised when the run cannot proceed at all."""


class UnsupportedPlatformError(FatalPreconditionError):
    """Raised when the operating system is not a supported Windows build."""


class WingetNotFoundError(FatalPreconditionError):
    """Raised when the winget executable cannot be located."""


def _parse_build(version: str) -> int | None:
    """Extract the build number from a '10.0.19045' style version string."""
    parts = version.split(".")
    if len(parts) < 3 or not parts[2].isdigit():
        return None
    return int(parts[2])


def check_platform(
    system: str | None = None,
    version: str | None = None,
    min_build: int = MIN_WINDOWS_BUILD,
) -> int:
    """Ensure the agent is running on a supported Windows build.

    Args:
        system: Operating system name. Defaults to platform.system().
        version: OS version string. Defaults to platform.version().
        min_build: Oldest supported Windows build number.

    Returns:
        The detected Windows build number.

    Raises:
        UnsupportedPlatformError: If not on Windows or the build is too old.
    """
    system = system if system is not None else platform.system()
    version = version if version is not None else platform.version()

    if system != "Windows":
        msg = f"Unsupported operating system: {system or 'unknown'} (Windows required)"
        raise UnsupportedPlatformError(msg)

    build = _parse_build(version)
    if build is None:
        msg = f"Cannot determine Windows build from version '{version}'"
        raise UnsupportedPlatformError(msg)

    if build < min_build:
        msg = f"Windows build {build} is not supported (minimum {min_build})"
        raise UnsupportedPlatformError(msg)

    logger.debug("Windows build %d detected", build)
    return build


def _version_key(path: Path) -> tuple[int, ...]:
    match = _VERSION_IN_DIR.search(path.parent.name)
    if match is None:
        return ()
    return tuple(int(part) for part in match.group(1).split(".") if part)


def _find_in_windows_apps(program_files: Path) -> Path | None:
    """Find the newest winget.exe shipped with App Installer.

    The SYSTEM account has no App Execution Alias for winget, so the
    executable is resolved from the WindowsApps package directories.
    """
    candidates = [
        path
        for path in (program_files / "WindowsApps").glob(f"{_APP_INSTALLER_GLOB}/winget.exe")
        if path.is_file()
    ]
    if not candidates:
        return None
    return max(candidates, key=_version_key)


def locate_winget(configured: str | None = None) -> Path:
    """Resolve the winget executable.

    Resolution order: configured path, PATH lookup, App Installer
    package directory under Program Files.

    Args:
        configured: Explicit path from configuration, if any.

    Returns:
        Path to winget.exe.

    Raises:
        WingetNotFoundError: If winget cannot be found.
    """
    if configured:
        path = Path(configured)
        if path.is_file():
            return path
        msg = f"Configured winget path does not exist: {configured}"
        raise WingetNotFoundError(msg)

    found = shutil.which("winget")
    if found:
        return Path(found)

    program_files = Path(os.environ.get("ProgramFiles", r"C:\Program Files"))
    resolved = _find_in_windows_apps(program_files)
    if resolved is not None:
        logger.debug("Resolved winget from App Installer package: %s", resolved)
        return resolved

    msg = "winget executable not found (is App Installer installed?)"
    raise WingetNotFoundError(msg)
