"""Unit tests for logging configuration."""

# pyright: reportPrivateUsage=false

import logging
from pathlib import Path

import pytest
import wingetctl.core.logs as logs_module
from rich.logging import RichHandler
from wingetctl.core.logs import configure_logging


@pytest.fixture(autouse=True)
def restore_root_logger():
    """Remove installed handlers and restore the root level afterwards."""
    root = logging.getLogger()
    level = root.level
    yield
    for handler in logs_module._installed_handlers:
        root.removeHandler(handler)
        handler.close()
    logs_module._installed_handlers.clear()
    root.setLevel(level)


class TestConfigureLogging:
    """Tests for configure_logging function."""

    def test_console_handler_only(self) -> None:
        """Without a file only the rich handler is attached."""
        configure_logging("WARNING")

        root = logging.getLogger()
        installed = logs_module._installed_handlers
        assert len(installed) == 1
        assert isinstance(installed[0], RichHandler)
        assert installed[0] in root.handlers
        assert root.level == logging.WARNING

    def test_file_handler_writes_records(self, tmp_path: Path) -> None:
        """Records are appended to the log file with the plain format."""
        log_file = tmp_path / "logs" / "wingetctl-SYSTEM.log"

        configure_logging("DEBUG", log_file)
        logging.getLogger("wingetctl.test").info("Updating %s", "Git.Git")
        for handler in logs_module._installed_handlers:
            handler.flush()

        text = log_file.read_text(encoding="utf-8")
        assert "INFO" in text
        assert "wingetctl.test: Updating Git.Git" in text

    def test_reconfiguring_replaces_handlers(self, tmp_path: Path) -> None:
        """Calling twice does not duplicate handlers."""
        configure_logging("INFO", tmp_path / "a.log")
        first = list(logs_module._installed_handlers)

        configure_logging("INFO")

        root = logging.getLogger()
        assert all(handler not in root.handlers for handler in first)
        assert len(logs_module._installed_handlers) == 1
