"""Tracking ledger of the agent's own installs and removals.

The ledger records which application ids this agent has installed and
which it has removed, distinct from winget's own package database. It
is persisted as one JSON file per execution principal:

    {"Install": ["Mozilla.Firefox"], "Uninstall": ["Vendor.Legacy"]}

Updates are whole-file read-modify-write with an atomic replace. There
is no locking: separate principals never share a file, and concurrent
runs of the same principal may lose an update.
"""

import json
import logging
import os
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path
from tempfile import NamedTemporaryFile

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from wingetctl.models.operation import OperationType

logger = logging.getLogger(__name__)


class _LedgerDocument(BaseModel):
    """On-disk ledger format. Field names are historical."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    install: list[str] = Field(default_factory=lambda: [], alias="Install")
    uninstall: list[str] = Field(default_factory=lambda: [], alias="Uninstall")


@dataclass(frozen=True, slots=True)
class TrackingLedger:
    """Immutable view of the ledger.

    An id is a member of at most one of the two sets; moving it into
    one set removes it from the other.

    Attributes:
        installed: Ids this agent installed.
        removed: Ids this agent removed.
    """

    installed: frozenset[str] = frozenset()
    removed: frozenset[str] = frozenset()

    def __post_init__(self) -> None:
        """Validate ledger data after initialization."""
        overlap = self.installed & self.removed
        if overlap:
            msg = f"Ids cannot be both installed and removed: {sorted(overlap)}"
            raise ValueError(msg)

    def is_installed(self, app_id: str) -> bool:
        """Check if an id is tracked as installed."""
        return app_id in self.installed

    def is_removed(self, app_id: str) -> bool:
        """Check if an id is tracked as removed."""
        return app_id in self.removed

    def mark_installed(self, app_id: str) -> "TrackingLedger":
        """Return a ledger with the id moved to the installed set."""
        return TrackingLedger(
            installed=self.installed | {app_id},
            removed=self.removed - {app_id},
        )

    def mark_removed(self, app_id: str) -> "TrackingLedger":
        """Return a ledger with the id moved to the removed set."""
        return TrackingLedger(
            installed=self.installed - {app_id},
            removed=self.removed | {app_id},
        )

    def to_dict(self) -> dict[str, list[str]]:
        """Serialize to the on-disk JSON structure."""
        return {
            "Install": sorted(self.installed),
            "Uninstall": sorted(self.removed),
        }

    @classmethod
    def from_document(cls, document: _LedgerDocument) -> "TrackingLedger":
        """Build a ledger from a validated document.

        An id listed in both sets is kept as installed only; a later
        uninstall reconciliation will move it if it is really gone.
        """
        installed = frozenset(app_id for app_id in document.install if app_id)
        removed = frozenset(app_id for app_id in document.uninstall if app_id) - installed
        return cls(installed=installed, removed=removed)


class LedgerStore:
    """Loads and saves one principal's ledger file.

    Attributes:
        path: Location of the ledger file.
    """

    def __init__(self, path: Path) -> None:
        """Initialize the store.

        Args:
            path: Ledger file path (see core.paths.get_ledger_path).
        """
        self._path = path

    @property
    def path(self) -> Path:
        """Ledger file path."""
        return self._path

    def load(self) -> TrackingLedger:
        """Read the ledger.

        A missing, unreadable, or malformed file is treated as an empty
        ledger; it is never fatal.

        Returns:
            The persisted ledger, or an empty one.
        """
        if not self._path.exists():
            return TrackingLedger()

        try:
            text = self._path.read_text(encoding="utf-8-sig")
            document = _LedgerDocument.model_validate_json(text or "{}")
        except (OSError, UnicodeDecodeError, ValidationError) as e:
            logger.warning("Ignoring unreadable ledger %s: %s", self._path, e)
            return TrackingLedger()

        return TrackingLedger.from_document(document)

    def save(self, ledger: TrackingLedger) -> None:
        """Overwrite the ledger file with the given ledger.

        Writes to a temporary file in the same directory and renames it
        over the ledger, so readers never see a partial file.

        Raises:
            OSError: If the file cannot be written.
        """
        self._path.parent.mkdir(parents=True, exist_ok=True)

        tmp_path: Path | None = None
        try:
            with NamedTemporaryFile(
                mode="w",
                encoding="utf-8",
                dir=self._path.parent,
                delete=False,
                suffix=".tmp",
            ) as f:
                tmp_path = Path(f.name)
                json.dump(ledger.to_dict(), f, indent=2)
                f.write("\n")
            os.replace(str(tmp_path), str(self._path))
        except OSError:
            if tmp_path is not None and tmp_path.exists():
                tmp_path.unlink()
            raise


class LedgerReconciler:
    """Applies verified operation outcomes to the ledger.

    The live installed-state check is injected so every transition out
    of a tracked state is confirmed against the system, not just the
    caller's claim.
    """

    def __init__(self, store: LedgerStore, is_installed: Callable[[str], bool]) -> None:
        """Initialize the reconciler.

        Args:
            store: Ledger persistence for the current principal.
            is_installed: Live check returning True if an id is installed.
        """
        self._store = store
        self._is_installed = is_installed

    @property
    def store(self) -> LedgerStore:
        """Underlying ledger store."""
        return self._store

    def record_outcome(self, app_id: str, operation: OperationType) -> TrackingLedger:
        """Record a verified install or uninstall.

        Updates count as installs. Calling this repeatedly with the same
        arguments leaves the ledger unchanged after the first call.

        Args:
            app_id: Application id the operation targeted.
            operation: The operation that succeeded.

        Returns:
            The ledger after reconciliation.
        """
        uninstall = operation == OperationType.UNINSTALL
        ledger = self._store.load()

        if ledger.is_installed(app_id):
            if uninstall:
                if self._is_installed(app_id):
                    logger.info("%s is still installed, keeping it tracked as installed", app_id)
                    return ledger
                ledger = ledger.mark_removed(app_id)
                self._store.save(ledger)
                logger.info("%s moved from installed to removed", app_id)
                return ledger

            if self._is_installed(app_id):
                logger.info("%s already tracked as installed", app_id)
            return ledger

        if ledger.is_removed(app_id):
            if not uninstall:
                if not self._is_installed(app_id):
                    logger.info("%s is not installed, keeping it tracked as removed", app_id)
                    return ledger
                ledger = ledger.mark_installed(app_id)
                self._store.save(ledger)
                logger.info("%s moved from removed to installed", app_id)
                return ledger

            if not self._is_installed(app_id):
                logger.info("%s already tracked as removed", app_id)
            return ledger

        ledger = ledger.mark_removed(app_id) if uninstall else ledger.mark_installed(app_id)
        self._store.save(ledger)
        logger.info("%s tracked as %s", app_id, "removed" if uninstall else "installed")
        return ledger
