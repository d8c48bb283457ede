"""Operation orchestrator.

Drives install, update, and uninstall of application ids through a
fixed sequence per id: pre-check, winget invocation, post-check, then
notification and ledger reconciliation. A zero exit code alone never
counts as success; the post-check must confirm the end state.

Failures are isolated per id. Only a FatalPreconditionError (winget
vanished, unsupported platform) stops a batch.
"""

import logging
from collections.abc import Callable, Iterable
from typing import TypeVar

from wingetctl.core.config import AgentConfig, NotificationLevel
from wingetctl.core.ledger import LedgerReconciler
from wingetctl.core.preflight import FatalPreconditionError
from wingetctl.models.notification import (
    Notification,
    NotificationButton,
    NotificationSeverity,
)
from wingetctl.models.operation import (
    OperationOutcome,
    OperationType,
    OutcomeStatus,
    RunSummary,
)
from wingetctl.models.package import PackageRecord
from wingetctl.notify.base import Notifier
from wingetctl.winget.invoker import WingetInvoker, WingetResult
from wingetctl.winget.query import ACCEPT_SOURCE_AGREEMENTS, PackageQuery

logger = logging.getLogger(__name__)

ACCEPT_PACKAGE_AGREEMENTS = "--accept-package-agreements"

VERIFICATION_FAILED = "verification failed"

T = TypeVar("T")


def _failure_reason(result: WingetResult) -> str:
    """Describe why an operation did not reach its end state."""
    if result.success:
        return VERIFICATION_FAILED
    if result.error is not None:
        return str(result.error)
    return f"winget exited with code {result.exit_code}"


class PatchOrchestrator:
    """Runs verified package operations and tracks their outcomes.

    Example:
        >>> orchestrator = PatchOrchestrator(query, invoker, reconciler, notifier, config)
        >>> summary = orchestrator.update_all()
        >>> summary.succeeded(OperationType.UPDATE)
        3
    """

    def __init__(
        self,
        query: PackageQuery,
        invoker: WingetInvoker,
        reconciler: LedgerReconciler,
        notifier: Notifier,
        config: AgentConfig,
    ) -> None:
        """Initialize the orchestrator.

        Args:
            query: Query layer for pre- and post-checks.
            invoker: Invoker used to run the operations.
            reconciler: Ledger reconciler for verified outcomes.
            notifier: Receives notification requests.
            config: Agent configuration for this run.
        """
        self._query = query
        self._invoker = invoker
        self._reconciler = reconciler
        self._notifier = notifier
        self._config = config

    def _notify(self, notification: Notification) -> None:
        level = self._config.notification_level
        if level == NotificationLevel.NONE:
            return
        if (
            level == NotificationLevel.SUCCESS_ONLY
            and notification.severity != NotificationSeverity.SUCCESS
        ):
            return
        self._notifier.notify(notification)

    def _command(
        self,
        verb: str,
        app_id: str,
        extra_args: list[str] | None = None,
        *,
        package_agreements: bool = True,
    ) -> list[str]:
        args = [verb, "--id", app_id, "--exact", "--silent"]
        if package_agreements:
            args.append(ACCEPT_PACKAGE_AGREEMENTS)
        args.extend([ACCEPT_SOURCE_AGREEMENTS, "--source", self._config.source])
        if extra_args:
            args.extend(extra_args)
        return args

    def _succeed(
        self,
        app_id: str,
        operation: OperationType,
        result: WingetResult,
        notification: Notification,
    ) -> OperationOutcome:
        try:
            self._reconciler.record_outcome(app_id, operation)
        except OSError as e:
            logger.warning(
                "Could not record %s of %s in the ledger: %s", operation.value, app_id, e
            )
        self._notify(notification)
        logger.info("%s %s succeeded", operation.value.capitalize(), app_id)
        return OperationOutcome(
            app_id=app_id,
            operation=operation,
            status=OutcomeStatus.SUCCEEDED,
            exit_code=result.exit_code,
            message=notification.body,
        )

    def _fail(
        self,
        app_id: str,
        app_name: str,
        operation: OperationType,
        result: WingetResult,
    ) -> OperationOutcome:
        reason = _failure_reason(result)
        logger.error("%s %s failed: %s", operation.value.capitalize(), app_id, reason)
        self._notify(
            Notification(
                title=f"{app_name} {operation.value} failed",
                body=f"Could not {operation.value} {app_id}: {reason}",
                severity=NotificationSeverity.ERROR,
                app_name=app_name,
            )
        )
        return OperationOutcome(
            app_id=app_id,
            operation=operation,
            status=OutcomeStatus.FAILED,
            exit_code=result.exit_code,
            error=reason,
        )

    def install(self, app_id: str, extra_args: list[str] | None = None) -> OperationOutcome:
        """Install a package and verify it is installed afterwards.

        Args:
            app_id: Application id to install.
            extra_args: Additional winget arguments appended verbatim.

        Returns:
            Outcome of the install.

        Raises:
            FatalPreconditionError: If winget can no longer be started.
        """
        if not self._query.exists(app_id):
            logger.warning("%s was not found in source %s", app_id, self._config.source)
            return OperationOutcome(
                app_id=app_id,
                operation=OperationType.INSTALL,
                status=OutcomeStatus.NOT_FOUND,
                message=f"Not found in source {self._config.source}",
            )

        if self._query.is_installed(app_id):
            logger.info("%s is already installed", app_id)
            return OperationOutcome(
                app_id=app_id,
                operation=OperationType.INSTALL,
                status=OutcomeStatus.ALREADY_INSTALLED,
                message="Already installed",
            )

        logger.info("Installing %s", app_id)
        result = self._invoker.run(self._command("install", app_id, extra_args))

        if result.success and self._query.is_installed(app_id):
            return self._succeed(
                app_id,
                OperationType.INSTALL,
                result,
                Notification(
                    title=f"{app_id} installed",
                    body=f"{app_id} was installed successfully",
                    severity=NotificationSeverity.SUCCESS,
                    app_name=app_id,
                ),
            )
        return self._fail(app_id, app_id, OperationType.INSTALL, result)

    def uninstall(self, app_id: str, extra_args: list[str] | None = None) -> OperationOutcome:
        """Uninstall a package and verify it is gone afterwards.

        Uninstalling a package that is not installed is a silent no-op.

        Args:
            app_id: Application id to uninstall.
            extra_args: Additional winget arguments appended verbatim.

        Returns:
            Outcome of the uninstall.

        Raises:
            FatalPreconditionError: If winget can no longer be started.
        """
        if not self._query.exists(app_id):
            logger.warning("%s was not found in source %s", app_id, self._config.source)
            return OperationOutcome(
                app_id=app_id,
                operation=OperationType.UNINSTALL,
                status=OutcomeStatus.NOT_FOUND,
                message=f"Not found in source {self._config.source}",
            )

        if not self._query.is_installed(app_id):
            logger.info("%s is not installed, nothing to uninstall", app_id)
            return OperationOutcome(
                app_id=app_id,
                operation=OperationType.UNINSTALL,
                status=OutcomeStatus.NOT_INSTALLED,
                message="Not installed",
            )

        logger.info("Uninstalling %s", app_id)
        result = self._invoker.run(
            self._command("uninstall", app_id, extra_args, package_agreements=False)
        )

        if result.success and not self._query.is_installed(app_id):
            return self._succeed(
                app_id,
                OperationType.UNINSTALL,
                result,
                Notification(
                    title=f"{app_id} uninstalled",
                    body=f"{app_id} was uninstalled successfully",
                    severity=NotificationSeverity.SUCCESS,
                    app_name=app_id,
                ),
            )
        return self._fail(app_id, app_id, OperationType.UNINSTALL, result)

    def update(self, package: PackageRecord, override_blocklist: bool = False) -> OperationOutcome:
        """Upgrade an outdated package and verify the target version.

        Args:
            package: Outdated package, with installed and available versions.
            override_blocklist: Update even if the id is on the blocklist.

        Returns:
            Outcome of the update.

        Raises:
            FatalPreconditionError: If winget can no longer be started.
        """
        app_id = package.id
        app_name = package.name or app_id

        if not override_blocklist and self._config.is_blocked(app_id):
            logger.info("Skipping update of %s: on the blocklist", app_id)
            return OperationOutcome(
                app_id=app_id,
                operation=OperationType.UPDATE,
                status=OutcomeStatus.BLOCKED,
                message="On the blocklist",
            )

        target = package.available_version
        notes = self._query.release_notes(app_id, target)

        logger.info(
            "Updating %s from %s to %s",
            app_id,
            package.installed_version or "unknown",
            target or "latest",
        )
        result = self._invoker.run(self._command("upgrade", app_id))

        if result.success and self._query.is_installed(app_id, target):
            button = None
            if notes is not None and notes.url:
                button = NotificationButton(label="Release notes", url=notes.url)
            body = f"{app_name} was updated"
            if target:
                body = f"{app_name} was updated to {target}"
            return self._succeed(
                app_id,
                OperationType.UPDATE,
                result,
                Notification(
                    title=f"{app_name} updated",
                    body=body,
                    severity=NotificationSeverity.SUCCESS,
                    app_name=app_name,
                    button=button,
                ),
            )
        return self._fail(app_id, app_name, OperationType.UPDATE, result)

    def _run_batch(
        self,
        operation: OperationType,
        items: Iterable[T],
        key: Callable[[T], str],
        action: Callable[[T], OperationOutcome],
    ) -> RunSummary:
        summary = RunSummary()
        for item in items:
            app_id = key(item)
            try:
                summary.add(action(item))
            except FatalPreconditionError:
                raise
            except Exception as e:
                logger.exception("Unexpected error during %s of %s", operation.value, app_id)
                summary.add(
                    OperationOutcome(
                        app_id=app_id,
                        operation=operation,
                        status=OutcomeStatus.FAILED,
                        error=str(e) or type(e).__name__,
                    )
                )

        logger.info(
            "%s: %d succeeded, %d failed, %d skipped",
            operation.value.capitalize(),
            summary.succeeded(operation),
            summary.failed(operation),
            summary.skipped(operation),
        )
        return summary

    def install_all(
        self,
        app_ids: Iterable[str] | None = None,
        extra_args: list[str] | None = None,
    ) -> RunSummary:
        """Install each id in turn.

        Args:
            app_ids: Ids to install. Defaults to the configured install list.
            extra_args: Additional winget arguments for every install.

        Returns:
            Summary of all install outcomes.
        """
        ids = self._config.install if app_ids is None else app_ids
        return self._run_batch(
            OperationType.INSTALL,
            ids,
            lambda app_id: app_id,
            lambda app_id: self.install(app_id, extra_args),
        )

    def uninstall_all(
        self,
        app_ids: Iterable[str] | None = None,
        extra_args: list[str] | None = None,
    ) -> RunSummary:
        """Uninstall each id in turn.

        Args:
            app_ids: Ids to uninstall. Defaults to the configured uninstall list.
            extra_args: Additional winget arguments for every uninstall.

        Returns:
            Summary of all uninstall outcomes.
        """
        ids = self._config.uninstall if app_ids is None else app_ids
        return self._run_batch(
            OperationType.UNINSTALL,
            ids,
            lambda app_id: app_id,
            lambda app_id: self.uninstall(app_id, extra_args),
        )

    def update_all(
        self,
        packages: Iterable[PackageRecord] | None = None,
        override_blocklist: bool = False,
    ) -> RunSummary:
        """Update each outdated package in turn.

        Args:
            packages: Packages to update. Defaults to every outdated package.
            override_blocklist: Update blocklisted ids as well.

        Returns:
            Summary of all update outcomes.
        """
        if packages is None:
            packages = self._query.list_outdated()
            logger.info("%d package(s) have updates available", len(packages))
        return self._run_batch(
            OperationType.UPDATE,
            packages,
            lambda package: package.id,
            lambda package: self.update(package, override_blocklist),
        )
