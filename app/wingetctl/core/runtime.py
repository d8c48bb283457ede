"""One-shot wiring of the components for a run.

build_runtime performs the fatal precondition checks and then builds
every component from one AgentConfig and one ExecutionPrincipal, so no
component reads configuration or identity from global state.
"""

import logging
from dataclasses import dataclass

from wingetctl.core.config import AgentConfig, NotificationLevel
from wingetctl.core.ledger import LedgerReconciler, LedgerStore
from wingetctl.core.orchestrator import PatchOrchestrator
from wingetctl.core.paths import get_ledger_path, get_system_apps_path
from wingetctl.core.preflight import check_platform, locate_winget
from wingetctl.core.principal import ExecutionPrincipal
from wingetctl.core.snapshot import SnapshotStore
from wingetctl.notify.base import Notifier, NullNotifier
from wingetctl.notify.console import ConsoleNotifier
from wingetctl.winget.invoker import WingetInvoker
from wingetctl.winget.query import PackageQuery

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class Runtime:
    """Components wired for one run.

    Attributes:
        config: Agent configuration.
        principal: Execution principal.
        invoker: winget invoker.
        query: Package query layer.
        snapshot: System apps snapshot store.
        ledger: Tracking ledger store for the principal.
        orchestrator: Operation orchestrator.
    """

    config: AgentConfig
    principal: ExecutionPrincipal
    invoker: WingetInvoker
    query: PackageQuery
    snapshot: SnapshotStore
    ledger: LedgerStore
    orchestrator: PatchOrchestrator


def build_runtime(
    config: AgentConfig,
    principal: ExecutionPrincipal,
    notifier: Notifier | None = None,
    check: bool = True,
) -> Runtime:
    """Check preconditions and build all components.

    Args:
        config: Agent configuration for this run.
        principal: Execution principal, resolved once at startup.
        notifier: Notification sink. Defaults to the console notifier, or
            a discarding one when notifications are disabled.
        check: Run the platform check. Disabled only where the host is
            known not to be Windows (tests, dry inspection).

    Returns:
        Fully wired Runtime.

    Raises:
        UnsupportedPlatformError: If the Windows build is not supported.
        WingetNotFoundError: If winget cannot be located.
    """
    if check:
        check_platform(min_build=config.min_os_build)

    executable = locate_winget(config.winget_path)
    logger.debug("Running as %s (%s) with %s", principal.name, principal.kind.value, executable)

    if notifier is None:
        if config.notification_level == NotificationLevel.NONE:
            notifier = NullNotifier()
        else:
            notifier = ConsoleNotifier()

    invoker = WingetInvoker(executable)
    snapshot = SnapshotStore(get_system_apps_path())
    query = PackageQuery(
        invoker,
        principal,
        source=config.source,
        system_apps=snapshot.load(),
        version_match=config.version_match,
    )
    ledger = LedgerStore(get_ledger_path(principal))
    reconciler = LedgerReconciler(ledger, query.is_installed)
    orchestrator = PatchOrchestrator(query, invoker, reconciler, notifier, config)

    return Runtime(
        config=config,
        principal=principal,
        invoker=invoker,
        query=query,
        snapshot=snapshot,
        ledger=ledger,
        orchestrator=orchestrator,
    )
