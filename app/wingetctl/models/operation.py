"""Operation models for package management runs.

This module defines data structures for the operations the orchestrator
performs (install, update, uninstall), their per-application outcomes,
and the run-scoped summary that accumulates them.
"""

from dataclasses import dataclass, field
from enum import Enum


class OperationType(str, Enum):
    """Type of package management operation.

    Attributes:
        INSTALL: Install a package that is not currently installed.
        UPDATE: Upgrade an installed package to the available version.
        UNINSTALL: Remove an installed package.
    """

    INSTALL = "install"
    UPDATE = "update"
    UNINSTALL = "uninstall"


class OutcomeStatus(str, Enum):
    """Final state of a single operation.

    Attributes:
        SUCCEEDED: Invocation exited 0 and the post-check confirmed the end state.
        FAILED: Invocation failed or the post-check did not confirm the end state.
        NOT_FOUND: The package does not exist (or is not installable here).
        ALREADY_INSTALLED: Install requested for an installed package.
        NOT_INSTALLED: Uninstall requested for a package that is not installed.
        BLOCKED: Update skipped because the id is on the blocklist.
    """

    SUCCEEDED = "succeeded"
    FAILED = "failed"
    NOT_FOUND = "not_found"
    ALREADY_INSTALLED = "already_installed"
    NOT_INSTALLED = "not_installed"
    BLOCKED = "blocked"


@dataclass(frozen=True, slots=True)
class OperationOutcome:
    """Result of one operation on one application id.

    Attributes:
        app_id: Application id the operation targeted.
        operation: The operation that was requested.
        status: Final state of the operation.
        exit_code: winget exit code, if winget was invoked.
        error: Classified error description for nonzero exits.
        message: Human-readable detail for logs and summaries.
    """

    app_id: str
    operation: OperationType
    status: OutcomeStatus
    exit_code: int | None = None
    error: str | None = None
    message: str | None = None

    def __post_init__(self) -> None:
        """Validate outcome data after initialization."""
        if not self.app_id:
            msg = "Application id cannot be empty"
            raise ValueError(msg)

    @property
    def succeeded(self) -> bool:
        """Check if the operation was verified successful."""
        return self.status == OutcomeStatus.SUCCEEDED

    @property
    def failed(self) -> bool:
        """Check if the operation was attempted and failed."""
        return self.status == OutcomeStatus.FAILED

    @property
    def attempted(self) -> bool:
        """Check if winget was actually asked to change the system."""
        return self.status in (OutcomeStatus.SUCCEEDED, OutcomeStatus.FAILED)

    @property
    def skipped(self) -> bool:
        """Check if the operation was a no-op (nothing attempted)."""
        return not self.attempted


@dataclass(slots=True)
class RunSummary:
    """Mutable accumulator of outcomes for one run.

    The orchestrator returns this to the caller at the end of a batch;
    counters are derived from the recorded outcomes.
    """

    outcomes: list[OperationOutcome] = field(default_factory=lambda: [])

    def add(self, outcome: OperationOutcome) -> OperationOutcome:
        """Record an outcome and return it."""
        self.outcomes.append(outcome)
        return outcome

    def extend(self, other: "RunSummary") -> None:
        """Append all outcomes of another summary."""
        self.outcomes.extend(other.outcomes)

    def _count(self, operation: OperationType | None, predicate: str) -> int:
        return sum(
            1
            for outcome in self.outcomes
            if (operation is None or outcome.operation == operation)
            and getattr(outcome, predicate)
        )

    def attempted(self, operation: OperationType | None = None) -> int:
        """Count operations where winget was invoked."""
        return self._count(operation, "attempted")

    def succeeded(self, operation: OperationType | None = None) -> int:
        """Count verified-successful operations."""
        return self._count(operation, "succeeded")

    def failed(self, operation: OperationType | None = None) -> int:
        """Count failed operations."""
        return self._count(operation, "failed")

    def skipped(self, operation: OperationType | None = None) -> int:
        """Count no-op operations."""
        return self._count(operation, "skipped")

    @property
    def has_failures(self) -> bool:
        """Check if any operation in the run failed."""
        return any(outcome.failed for outcome in self.outcomes)
