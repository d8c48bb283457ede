"""Unit tests for the main CLI application and shared run setup."""

from pathlib import Path
from unittest.mock import MagicMock, patch

from typer.testing import CliRunner
from wingetctl import __version__
from wingetctl.cli.main import app
from wingetctl.core.config import AgentConfig
from wingetctl.core.preflight import WingetNotFoundError
from wingetctl.core.principal import resolve_principal

runner = CliRunner()


class TestGlobalOptions:
    """Tests for the callback options."""

    def test_version(self) -> None:
        """--version prints the version and exits cleanly."""
        result = runner.invoke(app, ["--version"])

        assert result.exit_code == 0
        assert f"wingetctl version {__version__}" in result.stdout

    def test_help_lists_commands(self) -> None:
        """--help shows every command."""
        result = runner.invoke(app, ["--help"])

        assert result.exit_code == 0
        for command in ("init", "list", "install", "uninstall", "update", "ledger", "snapshot"):
            assert command in result.stdout

    def test_config_option_selects_file(
        self, cli_runtime: MagicMock, query: MagicMock, tmp_path: Path
    ) -> None:
        """--config loads the given file instead of the default one."""
        config_file = tmp_path / "agent.toml"
        config_file.write_text('source = "msstore"\n', encoding="utf-8")

        result = runner.invoke(app, ["--config", str(config_file), "list"])

        assert result.exit_code == 0
        config = cli_runtime.call_args[0][0]
        assert isinstance(config, AgentConfig)
        assert config.source == "msstore"

    def test_invalid_config_exits_with_error(self, cli_runtime: MagicMock, tmp_path: Path) -> None:
        """A broken config file aborts before winget is touched."""
        config_file = tmp_path / "agent.toml"
        config_file.write_text("install = [", encoding="utf-8")

        result = runner.invoke(app, ["-c", str(config_file), "list"])

        assert result.exit_code == 1
        assert "Invalid TOML syntax" in result.output
        cli_runtime.assert_not_called()


class TestFatalPreconditions:
    """Tests for fatal precondition handling."""

    def test_missing_winget_exits_with_error(self, cli_runtime: MagicMock) -> None:
        """A fatal precondition turns into exit code 1 with a message."""
        cli_runtime.side_effect = WingetNotFoundError("winget executable not found")

        result = runner.invoke(app, ["update"])

        assert result.exit_code == 1
        assert "winget executable not found" in result.output

    def test_fatal_error_mid_batch_exits(self, cli_runtime: MagicMock, query: MagicMock) -> None:
        """winget disappearing during a batch aborts the run."""
        query.exists.side_effect = WingetNotFoundError("winget vanished")

        result = runner.invoke(app, ["install", "Git.Git"])

        assert result.exit_code == 1
        assert "winget vanished" in result.output

    def test_verbose_enables_debug_logging(self, cli_runtime: MagicMock) -> None:
        """--verbose switches logging to DEBUG."""
        with patch("wingetctl.cli.context.configure_logging") as configure:
            result = runner.invoke(app, ["-v", "list"])

        assert result.exit_code == 0
        assert configure.call_args[0][0] == "DEBUG"


class TestPrincipal:
    """Tests for principal resolution at startup."""

    def test_resolved_once_and_shared(self, cli_runtime: MagicMock) -> None:
        """Logging and runtime wiring receive the principal resolved at startup."""
        with (
            patch(
                "wingetctl.cli.context.resolve_principal", wraps=resolve_principal
            ) as mock_resolve,
            patch("wingetctl.cli.context.configure_logging") as configure,
        ):
            result = runner.invoke(app, ["list"])

        assert result.exit_code == 0
        mock_resolve.assert_called_once_with()
        principal = cli_runtime.call_args[0][1]
        assert principal.name == "alice"
        assert configure.call_args[0][1].name == "wingetctl-alice.log"
