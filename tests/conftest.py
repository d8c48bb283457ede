"""Pytest configuration and shared fixtures.

This module contains fixtures used across all test modules.
"""

from collections.abc import Callable
from pathlib import Path

import pytest

FIXTURES_DIR = Path(__file__).parent / "fixtures" / "winget"


@pytest.fixture
def winget_output() -> Callable[[str], str]:
    """Return a loader for captured winget output samples."""

    def _load(name: str) -> str:
        return (FIXTURES_DIR / name).read_text(encoding="utf-8")

    return _load


@pytest.fixture
def wingetctl_home(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Point all wingetctl files at a temporary base directory."""
    home = tmp_path / "wingetctl"
    monkeypatch.setenv("WINGETCTL_HOME", str(home))
    return home


@pytest.fixture
def mock_empty_output() -> str:
    """Empty output for testing edge cases."""
    return ""
