"""Execution principal resolution.

The agent runs either as the machine-wide SYSTEM account (scheduled
task) or as an interactive user. The principal is resolved once at
startup and passed to every component whose behaviour depends on it:
ledger file selection and system-app exclusion.
"""

import getpass
import os
import re
from dataclasses import dataclass
from enum import Enum

# Characters that cannot appear in a file name suffix
_UNSAFE_CHARS = re.compile(r"[^A-Za-z0-9._-]+")


class PrincipalKind(str, Enum):
    """Kind of execution identity."""

    SYSTEM = "system"
    USER = "user"


@dataclass(frozen=True, slots=True)
class ExecutionPrincipal:
    """Identity the agent runs under.

    Attributes:
        kind: SYSTEM for the machine-wide service account, USER otherwise.
        name: Account name (e.g., 'SYSTEM', 'alice').
    """

    kind: PrincipalKind
    name: str

    def __post_init__(self) -> None:
        """Validate principal data after initialization."""
        if not self.name:
            msg = "Principal name cannot be empty"
            raise ValueError(msg)

    @property
    def is_system(self) -> bool:
        """Check if running with machine-wide privileges."""
        return self.kind == PrincipalKind.SYSTEM

    @property
    def suffix(self) -> str:
        """File name suffix identifying this principal's state files."""
        if self.is_system:
            return "SYSTEM"
        return _UNSAFE_CHARS.sub("_", self.name) or "user"


def _is_system_account(name: str) -> bool:
    """Check if an account name is SYSTEM or a machine account."""
    upper = name.upper()
    return upper in ("SYSTEM", "LOCAL SYSTEM", "NT AUTHORITY\\SYSTEM") or upper.endswith("$")


def resolve_principal(name: str | None = None) -> ExecutionPrincipal:
    """Determine the execution principal.

    Args:
        name: Account name override. Defaults to the current user
            (USERNAME environment variable, then getpass).

    Returns:
        ExecutionPrincipal for the current process.
    """
    if name is None:
        name = os.environ.get("USERNAME") or getpass.getuser()

    kind = PrincipalKind.SYSTEM if _is_system_account(name) else PrincipalKind.USER
    return ExecutionPrincipal(kind=kind, name=name)
