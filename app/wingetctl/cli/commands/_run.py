"""Shared execution of batch commands (install, uninstall, update)."""

import json
from collections.abc import Callable

import typer

from wingetctl.cli.context import start_run
from wingetctl.cli.display import create_outcomes_table, print_run_summary, summary_to_dict
from wingetctl.core.preflight import FatalPreconditionError
from wingetctl.core.runtime import Runtime
from wingetctl.models.operation import RunSummary
from wingetctl.notify.base import RecordingNotifier
from wingetctl.utils.formatting import console, print_error


def run_batch(
    ctx: typer.Context,
    batch: Callable[[Runtime], RunSummary],
    json_output: bool = False,
) -> None:
    """Run a batch operation and report its outcomes.

    Args:
        ctx: Typer context carrying the global options.
        batch: Callable running the batch on the wired runtime.
        json_output: Print a JSON document instead of tables.

    Raises:
        typer.Exit: With code 1 if any operation failed or the run aborted.
    """
    recorder = RecordingNotifier() if json_output else None
    runtime = start_run(ctx, notifier=recorder)

    try:
        summary = batch(runtime)
    except FatalPreconditionError as e:
        print_error(str(e))
        raise typer.Exit(code=1) from e

    if json_output:
        notifications = recorder.notifications if recorder is not None else None
        console.print_json(json.dumps(summary_to_dict(summary, notifications)))
    else:
        if summary.outcomes:
            console.print(create_outcomes_table(summary.outcomes))
        print_run_summary(summary)

    if summary.has_failures:
        raise typer.Exit(code=1)
