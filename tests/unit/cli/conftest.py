"""Fixtures for CLI command tests.

Commands run against a real orchestrator and ledger wired to mocked
winget query and invoker objects.
"""

from collections.abc import Iterator
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest
from wingetctl.core.config import AgentConfig
from wingetctl.core.ledger import LedgerReconciler, LedgerStore
from wingetctl.core.orchestrator import PatchOrchestrator
from wingetctl.core.paths import get_ledger_path, get_system_apps_path
from wingetctl.core.principal import ExecutionPrincipal, PrincipalKind
from wingetctl.core.runtime import Runtime
from wingetctl.core.snapshot import SnapshotStore
from wingetctl.notify.base import Notifier, NullNotifier
from wingetctl.winget.invoker import WingetInvoker, WingetResult
from wingetctl.winget.query import PackageQuery

ALICE = ExecutionPrincipal(kind=PrincipalKind.USER, name="alice")


@pytest.fixture
def query() -> MagicMock:
    """Mock query layer where every package exists."""
    mock = MagicMock(spec=PackageQuery)
    mock.exists.return_value = True
    mock.release_notes.return_value = None
    mock.list_installed.return_value = []
    mock.list_outdated.return_value = []
    return mock


@pytest.fixture
def invoker() -> MagicMock:
    """Mock invoker whose commands all exit 0."""
    mock = MagicMock(spec=WingetInvoker)
    mock.run.return_value = WingetResult(stdout="", stderr="", exit_code=0)
    return mock


@pytest.fixture
def cli_runtime(
    wingetctl_home: Path,
    monkeypatch: pytest.MonkeyPatch,
    query: MagicMock,
    invoker: MagicMock,
) -> Iterator[MagicMock]:
    """Replace runtime wiring and logging setup for CLI commands.

    Yields:
        The patched build_runtime mock.
    """
    monkeypatch.setenv("USERNAME", ALICE.name)

    def _build(
        config: AgentConfig,
        principal: ExecutionPrincipal,
        notifier: Notifier | None = None,
        check: bool = True,
    ) -> Runtime:
        ledger = LedgerStore(get_ledger_path(principal))
        orchestrator = PatchOrchestrator(
            query,
            invoker,
            LedgerReconciler(ledger, query.is_installed),
            notifier or NullNotifier(),
            config,
        )
        return Runtime(
            config=config,
            principal=principal,
            invoker=invoker,
            query=query,
            snapshot=SnapshotStore(get_system_apps_path()),
            ledger=ledger,
            orchestrator=orchestrator,
        )

    with (
        patch("wingetctl.cli.context.build_runtime", side_effect=_build) as mock_build,
        patch("wingetctl.cli.context.configure_logging"),
    ):
        yield mock_build
