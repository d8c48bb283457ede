"""System apps snapshot.

A point-in-time set of application ids captured with a full winget
export. User-principal runs exclude these ids from installed and
outdated listings. The snapshot has no expiry; it is stale until the
next explicit refresh.
"""

import logging
import os
from pathlib import Path
from typing import TYPE_CHECKING

from wingetctl.winget.parser import ParseError, parse_export

if TYPE_CHECKING:
    from wingetctl.winget.query import PackageQuery

logger = logging.getLogger(__name__)


class SnapshotStore:
    """Reads and regenerates the system apps snapshot file."""

    def __init__(self, path: Path) -> None:
        """Initialize the store.

        Args:
            path: Snapshot file path (see core.paths.get_system_apps_path).
        """
        self._path = path

    @property
    def path(self) -> Path:
        """Snapshot file path."""
        return self._path

    def load(self) -> frozenset[str]:
        """Read the snapshot.

        Returns:
            Application ids in the snapshot. Empty if the file is missing
            or unreadable.
        """
        if not self._path.exists():
            return frozenset()

        try:
            return parse_export(self._path.read_text(encoding="utf-8-sig"))
        except (OSError, ParseError) as e:
            logger.warning("Ignoring unreadable system apps snapshot %s: %s", self._path, e)
            return frozenset()

    def refresh(self, query: "PackageQuery") -> frozenset[str]:
        """Regenerate the snapshot from a fresh winget export.

        The export is written next to the snapshot and only replaces it
        when it produced at least one id, so a failed export keeps the
        previous snapshot.

        Args:
            query: Query layer used to run the export.

        Returns:
            Application ids in the new snapshot. Empty if the export
            failed, in which case the previous snapshot is kept.
        """
        self._path.parent.mkdir(parents=True, exist_ok=True)
        export_path = self._path.with_name(self._path.stem + ".export.tmp")

        try:
            ids = query.list_system_owned(export_path)
            if not ids:
                logger.warning("System apps export was empty, keeping previous snapshot")
                return frozenset()

            os.replace(str(export_path), str(self._path))
            logger.info("System apps snapshot refreshed with %d id(s)", len(ids))
            return ids
        finally:
            if export_path.exists():
                export_path.unlink()
