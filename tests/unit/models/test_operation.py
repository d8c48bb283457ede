"""Unit tests for operation models."""

import pytest
from wingetctl.models.operation import (
    OperationOutcome,
    OperationType,
    OutcomeStatus,
    RunSummary,
)


def _outcome(app_id: str, operation: OperationType, status: OutcomeStatus) -> OperationOutcome:
    return OperationOutcome(app_id=app_id, operation=operation, status=status)


class TestOperationOutcome:
    """Tests for OperationOutcome dataclass."""

    def test_succeeded_outcome(self) -> None:
        """A succeeded outcome is attempted and not skipped."""
        outcome = _outcome("Git.Git", OperationType.INSTALL, OutcomeStatus.SUCCEEDED)

        assert outcome.succeeded
        assert outcome.attempted
        assert not outcome.failed
        assert not outcome.skipped

    @pytest.mark.parametrize(
        "status",
        [
            OutcomeStatus.NOT_FOUND,
            OutcomeStatus.ALREADY_INSTALLED,
            OutcomeStatus.NOT_INSTALLED,
            OutcomeStatus.BLOCKED,
        ],
    )
    def test_skipped_statuses(self, status: OutcomeStatus) -> None:
        """Pre-check exits are skips, not attempts."""
        outcome = _outcome("Git.Git", OperationType.INSTALL, status)

        assert outcome.skipped
        assert not outcome.attempted

    def test_empty_id_raises(self) -> None:
        """An outcome needs an application id."""
        with pytest.raises(ValueError, match="cannot be empty"):
            _outcome("", OperationType.UPDATE, OutcomeStatus.FAILED)


class TestRunSummary:
    """Tests for RunSummary accumulator."""

    @pytest.fixture
    def summary(self) -> RunSummary:
        """Create a summary with mixed outcomes."""
        summary = RunSummary()
        summary.add(_outcome("A.A", OperationType.INSTALL, OutcomeStatus.SUCCEEDED))
        summary.add(_outcome("B.B", OperationType.INSTALL, OutcomeStatus.FAILED))
        summary.add(_outcome("C.C", OperationType.UPDATE, OutcomeStatus.SUCCEEDED))
        summary.add(_outcome("D.D", OperationType.UPDATE, OutcomeStatus.BLOCKED))
        summary.add(_outcome("E.E", OperationType.UNINSTALL, OutcomeStatus.NOT_INSTALLED))
        return summary

    def test_counts_per_operation(self, summary: RunSummary) -> None:
        """Counters can be filtered by operation type."""
        assert summary.succeeded(OperationType.INSTALL) == 1
        assert summary.failed(OperationType.INSTALL) == 1
        assert summary.attempted(OperationType.INSTALL) == 2
        assert summary.succeeded(OperationType.UPDATE) == 1
        assert summary.skipped(OperationType.UPDATE) == 1
        assert summary.attempted(OperationType.UNINSTALL) == 0

    def test_total_counts(self, summary: RunSummary) -> None:
        """Without a filter, counters cover all outcomes."""
        assert summary.succeeded() == 2
        assert summary.failed() == 1
        assert summary.skipped() == 2
        assert summary.has_failures

    def test_add_returns_outcome(self) -> None:
        """add returns the outcome it recorded."""
        summary = RunSummary()
        outcome = _outcome("A.A", OperationType.INSTALL, OutcomeStatus.SUCCEEDED)

        assert summary.add(outcome) is outcome
        assert summary.outcomes == [outcome]

    def test_extend(self, summary: RunSummary) -> None:
        """extend appends another summary's outcomes."""
        combined = RunSummary()
        combined.extend(summary)

        assert len(combined.outcomes) == 5
        assert not RunSummary().has_failures
