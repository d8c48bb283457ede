"""winget exit code taxonomy.

winget reports failures as 0x8A15xxxx HRESULTs, which surface to a
calling process as negative 32-bit exit codes. This module maps the
codes the agent cares about to a small set of categories. The mapping
is advisory: it is used for logging and messages, never to decide
whether an operation succeeded.
"""

from dataclasses import dataclass
from enum import Enum


class WingetErrorCategory(str, Enum):
    """Categories of winget failures."""

    INTERNAL_ERROR = "internal_error"
    INVALID_ARGUMENTS = "invalid_arguments"
    COMMAND_FAILED = "command_failed"
    DOWNLOAD_FAILED = "download_failed"
    NO_APPLICABLE_INSTALLER = "no_applicable_installer"
    HASH_MISMATCH = "hash_mismatch"
    SOURCE_NOT_FOUND = "source_not_found"
    NO_PACKAGES_FOUND = "no_packages_found"
    NO_SOURCES = "no_sources"
    MULTIPLE_PACKAGES_FOUND = "multiple_packages_found"
    ADMIN_REQUIRED = "admin_required"
    NO_APPLICABLE_UPDATE = "no_applicable_update"
    UPDATE_ALL_HAS_FAILURES = "update_all_has_failures"
    SECURITY_CHECK_FAILED = "security_check_failed"
    PACKAGE_IN_USE = "package_in_use"
    INSTALL_IN_PROGRESS = "install_in_progress"
    FILES_IN_USE = "files_in_use"
    MISSING_DEPENDENCY = "missing_dependency"
    DISK_FULL = "disk_full"
    INSUFFICIENT_MEMORY = "insufficient_memory"
    NO_NETWORK = "no_network"
    INSTALLER_FAILED = "installer_failed"
    REBOOT_REQUIRED = "reboot_required"
    CANCELLED = "cancelled"
    ALREADY_INSTALLED = "already_installed"
    HIGHER_VERSION_INSTALLED = "higher_version_installed"
    BLOCKED_BY_POLICY = "blocked_by_policy"
    UNKNOWN = "unknown"


def _hresult(value: int) -> int:
    """Convert an unsigned HRESULT to its signed 32-bit value."""
    return value - (1 << 32) if value & 0x80000000 else value


def signed_exit_code(exit_code: int) -> int:
    """Return a process exit code in the signed 32-bit form winget documents.

    Windows reports exit codes as unsigned DWORDs, so 0x8A150108 arrives
    as 2316632328 rather than -1978334968.
    """
    return _hresult(exit_code & 0xFFFFFFFF)


_KNOWN_CODES: dict[int, tuple[WingetErrorCategory, str]] = {
    _hresult(0x8A150001): (WingetErrorCategory.INTERNAL_ERROR, "Internal error"),
    _hresult(0x8A150002): (
        WingetErrorCategory.INVALID_ARGUMENTS,
        "Invalid command line arguments",
    ),
    _hresult(0x8A150003): (WingetErrorCategory.COMMAND_FAILED, "Executing command failed"),
    _hresult(0x8A150005): (WingetErrorCategory.CANCELLED, "Cancellation signal received"),
    _hresult(0x8A150008): (WingetErrorCategory.DOWNLOAD_FAILED, "Downloading installer failed"),
    _hresult(0x8A150010): (
        WingetErrorCategory.NO_APPLICABLE_INSTALLER,
        "No applicable installer for the current system",
    ),
    _hresult(0x8A150011): (
        WingetErrorCategory.HASH_MISMATCH,
        "Installer hash does not match the manifest",
    ),
    _hresult(0x8A150012): (WingetErrorCategory.SOURCE_NOT_FOUND, "Source name does not exist"),
    _hresult(0x8A150014): (
        WingetErrorCategory.NO_PACKAGES_FOUND,
        "No packages found matching the criteria",
    ),
    _hresult(0x8A150015): (WingetErrorCategory.NO_SOURCES, "No sources are configured"),
    _hresult(0x8A150016): (
        WingetErrorCategory.MULTIPLE_PACKAGES_FOUND,
        "Multiple packages found matching the criteria",
    ),
    _hresult(0x8A150019): (
        WingetErrorCategory.ADMIN_REQUIRED,
        "Command requires administrator privileges",
    ),
    _hresult(0x8A15002B): (
        WingetErrorCategory.NO_APPLICABLE_UPDATE,
        "No applicable update found",
    ),
    _hresult(0x8A15002C): (
        WingetErrorCategory.UPDATE_ALL_HAS_FAILURES,
        "Upgrade of all packages completed with failures",
    ),
    _hresult(0x8A15002D): (
        WingetErrorCategory.SECURITY_CHECK_FAILED,
        "Installer failed security check",
    ),
    _hresult(0x8A150101): (WingetErrorCategory.PACKAGE_IN_USE, "Application is currently running"),
    _hresult(0x8A150102): (
        WingetErrorCategory.INSTALL_IN_PROGRESS,
        "Another installation is already in progress",
    ),
    _hresult(0x8A150103): (WingetErrorCategory.FILES_IN_USE, "One or more files are in use"),
    _hresult(0x8A150104): (WingetErrorCategory.MISSING_DEPENDENCY, "Package dependency missing"),
    _hresult(0x8A150105): (WingetErrorCategory.DISK_FULL, "Not enough disk space"),
    _hresult(0x8A150106): (WingetErrorCategory.INSUFFICIENT_MEMORY, "Not enough memory"),
    _hresult(0x8A150107): (WingetErrorCategory.NO_NETWORK, "Network connection required"),
    _hresult(0x8A150108): (
        WingetErrorCategory.INSTALLER_FAILED,
        "Installer encountered an error during installation",
    ),
    _hresult(0x8A150109): (
        WingetErrorCategory.REBOOT_REQUIRED,
        "Restart required to finish installation",
    ),
    _hresult(0x8A15010A): (
        WingetErrorCategory.REBOOT_REQUIRED,
        "Installation failed, restart required",
    ),
    _hresult(0x8A15010B): (
        WingetErrorCategory.REBOOT_REQUIRED,
        "System will restart to finish installation",
    ),
    _hresult(0x8A15010C): (WingetErrorCategory.CANCELLED, "Installation cancelled by user"),
    _hresult(0x8A15010D): (
        WingetErrorCategory.ALREADY_INSTALLED,
        "Another version of the application is already installed",
    ),
    _hresult(0x8A15010E): (
        WingetErrorCategory.HIGHER_VERSION_INSTALLED,
        "A higher version of the application is already installed",
    ),
    _hresult(0x8A15010F): (
        WingetErrorCategory.BLOCKED_BY_POLICY,
        "Organization policies prevent installation",
    ),
    _hresult(0x8A150110): (
        WingetErrorCategory.MISSING_DEPENDENCY,
        "Failed to install package dependencies",
    ),
    _hresult(0x8A150111): (
        WingetErrorCategory.PACKAGE_IN_USE,
        "Application is in use by another application",
    ),
}


@dataclass(frozen=True, slots=True)
class WingetError:
    """Classified winget failure.

    Attributes:
        exit_code: Signed exit code reported by winget.
        category: Failure category.
        description: Human-readable description of the failure.
    """

    exit_code: int
    category: WingetErrorCategory
    description: str

    @property
    def hresult(self) -> str:
        """Return the exit code formatted as an unsigned HRESULT."""
        return f"0x{self.exit_code & 0xFFFFFFFF:08X}"

    def __str__(self) -> str:
        return f"{self.description} ({self.hresult})"


def classify_exit_code(exit_code: int) -> WingetError | None:
    """Map a winget exit code to its error category.

    Args:
        exit_code: Exit code of a winget process.

    Returns:
        WingetError describing the failure, or None for exit code 0.
    """
    if exit_code == 0:
        return None

    exit_code = signed_exit_code(exit_code)
    known = _KNOWN_CODES.get(exit_code)
    if known is None:
        return WingetError(
            exit_code=exit_code,
            category=WingetErrorCategory.UNKNOWN,
            description=f"Unknown failure, exit code {exit_code}",
        )

    category, description = known
    return WingetError(exit_code=exit_code, category=category, description=description)
