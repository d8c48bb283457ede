"""Unit tests for runtime wiring."""

# pyright: reportPrivateUsage=false

from pathlib import Path
from unittest.mock import patch

import pytest
from wingetctl.core.config import AgentConfig, NotificationLevel
from wingetctl.core.paths import get_ledger_path
from wingetctl.core.preflight import UnsupportedPlatformError, WingetNotFoundError
from wingetctl.core.principal import ExecutionPrincipal, PrincipalKind
from wingetctl.core.runtime import build_runtime
from wingetctl.notify.base import NullNotifier, RecordingNotifier
from wingetctl.notify.console import ConsoleNotifier

ALICE = ExecutionPrincipal(kind=PrincipalKind.USER, name="alice")


@pytest.fixture
def winget_exe(tmp_path: Path) -> Path:
    """Create a stand-in winget executable."""
    exe = tmp_path / "winget.exe"
    exe.touch()
    return exe


class TestBuildRuntime:
    """Tests for build_runtime function."""

    def test_wires_components_for_principal(self, wingetctl_home: Path, winget_exe: Path) -> None:
        """Every component shares one config and principal."""
        config = AgentConfig(winget_path=str(winget_exe), source="msstore")

        runtime = build_runtime(config, ALICE, check=False)

        assert runtime.config is config
        assert runtime.principal == ALICE
        assert runtime.invoker.executable == str(winget_exe)
        assert runtime.query.source == "msstore"
        assert runtime.ledger.path == get_ledger_path(ALICE)
        assert runtime.ledger.path.name == "ledger-alice.json"

    def test_loads_system_apps_snapshot(self, wingetctl_home: Path, winget_exe: Path) -> None:
        """The snapshot on disk feeds system app exclusion."""
        state = wingetctl_home / "state"
        state.mkdir(parents=True)
        (state / "system-apps.json").write_text(
            '{"Sources": [{"Packages": [{"PackageIdentifier": "Microsoft.Edge"}]}]}',
            encoding="utf-8",
        )

        runtime = build_runtime(AgentConfig(winget_path=str(winget_exe)), ALICE, check=False)

        assert runtime.snapshot.load() == frozenset({"Microsoft.Edge"})
        assert runtime.query._system_apps == frozenset({"microsoft.edge"})

    @pytest.mark.parametrize(
        ("level", "expected"),
        [
            (NotificationLevel.FULL, ConsoleNotifier),
            (NotificationLevel.NONE, NullNotifier),
        ],
    )
    def test_default_notifier(
        self,
        wingetctl_home: Path,
        winget_exe: Path,
        level: NotificationLevel,
        expected: type,
    ) -> None:
        """Disabled notifications get a discarding notifier."""
        config = AgentConfig(winget_path=str(winget_exe), notification_level=level)

        runtime = build_runtime(config, ALICE, check=False)

        assert isinstance(runtime.orchestrator._notifier, expected)

    def test_explicit_notifier(self, wingetctl_home: Path, winget_exe: Path) -> None:
        """A caller-supplied notifier is used as is."""
        notifier = RecordingNotifier()

        runtime = build_runtime(
            AgentConfig(winget_path=str(winget_exe)), ALICE, notifier=notifier, check=False
        )

        assert runtime.orchestrator._notifier is notifier

    def test_platform_check_runs_first(self, wingetctl_home: Path) -> None:
        """An unsupported platform aborts before winget is located."""
        config = AgentConfig(min_os_build=22000)

        with (
            patch(
                "wingetctl.core.runtime.check_platform",
                side_effect=UnsupportedPlatformError("too old"),
            ) as check,
            patch("wingetctl.core.runtime.locate_winget") as locate,
            pytest.raises(UnsupportedPlatformError),
        ):
            build_runtime(config, ALICE)

        check.assert_called_once_with(min_build=22000)
        locate.assert_not_called()

    def test_missing_winget_is_fatal(self, wingetctl_home: Path, tmp_path: Path) -> None:
        """A configured but absent winget aborts the run."""
        config = AgentConfig(winget_path=str(tmp_path / "missing.exe"))

        with pytest.raises(WingetNotFoundError):
            build_runtime(config, ALICE, check=False)
