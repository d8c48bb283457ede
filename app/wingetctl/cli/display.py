"""Shared Rich display functions for operation outcomes.

Provides the results table, the end-of-batch summary line, and the JSON
document used by the install, uninstall and update commands.
"""

from rich.table import Table

from wingetctl.models.notification import Notification
from wingetctl.models.operation import OperationOutcome, OutcomeStatus, RunSummary
from wingetctl.utils.formatting import console, print_info, print_success

_STATUS_LABELS: dict[OutcomeStatus, str] = {
    OutcomeStatus.SUCCEEDED: "[success]OK[/success]",
    OutcomeStatus.FAILED: "[error]FAIL[/error]",
    OutcomeStatus.NOT_FOUND: "[warning]MISSING[/warning]",
    OutcomeStatus.ALREADY_INSTALLED: "[muted]SKIP[/muted]",
    OutcomeStatus.NOT_INSTALLED: "[muted]SKIP[/muted]",
    OutcomeStatus.BLOCKED: "[warning]BLOCKED[/warning]",
}


def create_outcomes_table(outcomes: list[OperationOutcome]) -> Table:
    """Create a Rich table displaying operation outcomes.

    Args:
        outcomes: Outcomes to display.

    Returns:
        Rich Table configured for outcome display.
    """
    table = Table(
        title="Results",
        show_header=True,
        header_style="bold_header",
        border_style="border",
    )
    table.add_column("Status", width=9, justify="center")
    table.add_column("Action", width=9)
    table.add_column("Id", no_wrap=True)
    table.add_column("Message")

    for outcome in outcomes:
        message = outcome.error if outcome.failed else outcome.message
        table.add_row(
            _STATUS_LABELS[outcome.status],
            outcome.operation.value,
            outcome.app_id,
            f"[muted]{message or ''}[/muted]",
        )

    return table


def print_run_summary(summary: RunSummary) -> None:
    """Print counts of succeeded, failed, and skipped operations.

    Args:
        summary: Summary of the run.
    """
    if not summary.outcomes:
        print_info("Nothing to do.")
        return

    succeeded = summary.succeeded()
    failed = summary.failed()
    skipped = summary.skipped()

    if failed == 0 and skipped == 0:
        print_success(f"All {succeeded} operation(s) completed successfully.")
        return

    console.print(
        f"\n[success]{succeeded} succeeded[/success], "
        f"[error]{failed} failed[/error], "
        f"[muted]{skipped} skipped[/muted]"
    )


def summary_to_dict(
    summary: RunSummary,
    notifications: list[Notification] | None = None,
) -> dict[str, object]:
    """Convert a run summary to a JSON-serializable dictionary.

    Args:
        summary: Summary of the run.
        notifications: Notifications emitted during the run, if recorded.

    Returns:
        Dictionary with outcomes, counts, and notifications.
    """
    data: dict[str, object] = {
        "outcomes": [
            {
                "id": outcome.app_id,
                "operation": outcome.operation.value,
                "status": outcome.status.value,
                "exit_code": outcome.exit_code,
                "error": outcome.error,
                "message": outcome.message,
            }
            for outcome in summary.outcomes
        ],
        "counts": {
            "attempted": summary.attempted(),
            "succeeded": summary.succeeded(),
            "failed": summary.failed(),
            "skipped": summary.skipped(),
        },
    }
    if notifications is not None:
        data["notifications"] = [
            {
                "title": n.title,
                "body": n.body,
                "severity": n.severity.value,
                "app_name": n.app_name,
                "button": {"label": n.button.label, "url": n.button.url} if n.button else None,
            }
            for n in notifications
        ]
    return data
