"""Typed package queries built on the winget invoker and parser.

The query layer never writes persisted state. It turns winget
subcommands into PackageRecord lists and answers the yes/no questions
the orchestrator asks before and after an operation.
"""

import logging
from dataclasses import dataclass
from pathlib import Path

from wingetctl.core.config import VersionMatch
from wingetctl.core.principal import ExecutionPrincipal
from wingetctl.models.package import PackageRecord
from wingetctl.winget.invoker import WingetInvoker, WingetResult
from wingetctl.winget.parser import (
    ParseError,
    TableRow,
    parse_export,
    parse_output,
    parse_show_fields,
)

logger = logging.getLogger(__name__)

ACCEPT_SOURCE_AGREEMENTS = "--accept-source-agreements"


@dataclass(frozen=True, slots=True)
class ReleaseNotes:
    """Release notes metadata published with a package manifest.

    Attributes:
        url: Link to the release notes page.
        text: Inline release notes text.
    """

    url: str | None = None
    text: str | None = None


def _row_to_record(row: TableRow, *, version_is_installed: bool) -> PackageRecord | None:
    """Build a PackageRecord from a parsed table row.

    search prints the source's version in the Version column; list and
    upgrade print the installed version there.
    """
    try:
        if version_is_installed:
            return PackageRecord(
                id=row.get("Id") or "",
                name=row.get("Name"),
                installed_version=row.get("Version"),
                available_version=row.get("Available"),
                source=row.get("Source"),
            )
        return PackageRecord(
            id=row.get("Id") or "",
            name=row.get("Name"),
            available_version=row.get("Version"),
            source=row.get("Source"),
        )
    except ValueError as e:
        logger.debug("Skipping invalid row %r: %s", row, e)
        return None


class PackageQuery:
    """Read-only winget queries.

    When the principal is not SYSTEM, installed and outdated listings
    exclude ids from the system apps snapshot, which are managed by the
    machine-wide run.

    Example:
        >>> query = PackageQuery(WingetInvoker(), resolve_principal())
        >>> for pkg in query.list_outdated():
        ...     print(pkg.id, pkg.installed_version, pkg.available_version)
    """

    def __init__(
        self,
        invoker: WingetInvoker,
        principal: ExecutionPrincipal,
        *,
        source: str = "winget",
        system_apps: frozenset[str] = frozenset(),
        version_match: VersionMatch = VersionMatch.PREFIX,
    ) -> None:
        """Initialize the query layer.

        Args:
            invoker: Invoker used to run winget.
            principal: Execution principal of this run.
            source: Default winget source.
            system_apps: Snapshot of system-owned application ids.
            version_match: Comparison used by is_installed with a version.
        """
        self._invoker = invoker
        self._principal = principal
        self._source = source
        self._system_apps = frozenset(app_id.casefold() for app_id in system_apps)
        self._version_match = version_match

    @property
    def source(self) -> str:
        """Default winget source."""
        return self._source

    def _parse_records(
        self,
        command: str,
        result: WingetResult,
        *,
        version_is_installed: bool,
    ) -> list[PackageRecord]:
        try:
            parsed = parse_output(result.stdout)
        except ParseError as e:
            logger.warning("Could not parse winget %s output: %s", command, e)
            return []

        if not parsed.has_data:
            logger.debug("winget %s returned no data (exit code %d)", command, result.exit_code)
            return []

        records: list[PackageRecord] = []
        for row in parsed.rows:
            record = _row_to_record(row, version_is_installed=version_is_installed)
            if record is not None:
                records.append(record)
        return records

    def _exclude_system_apps(self, records: list[PackageRecord]) -> list[PackageRecord]:
        if self._principal.is_system or not self._system_apps:
            return records
        kept = [r for r in records if r.id.casefold() not in self._system_apps]
        if len(kept) != len(records):
            logger.debug("Excluded %d system-owned package(s)", len(records) - len(kept))
        return kept

    @staticmethod
    def _id_args(app_id: str | None, exact: bool) -> list[str]:
        if not app_id:
            return []
        args = ["--id", app_id]
        if exact:
            args.append("--exact")
        return args

    def find(
        self,
        app_id: str,
        source: str | None = None,
        exact: bool = True,
    ) -> list[PackageRecord]:
        """Search a source for packages.

        Args:
            app_id: Application id to search for.
            source: Source to search. Defaults to the configured source.
            exact: Require an exact id match.

        Returns:
            Matching records; available_version holds the source's version.
        """
        args = [
            "search",
            *self._id_args(app_id, exact),
            "--source",
            source or self._source,
            ACCEPT_SOURCE_AGREEMENTS,
        ]
        result = self._invoker.run(args)
        return self._parse_records("search", result, version_is_installed=False)

    def _list(
        self,
        app_id: str | None = None,
        source: str | None = None,
        exact: bool = True,
    ) -> list[PackageRecord]:
        args = ["list", *self._id_args(app_id, exact)]
        if source:
            args.extend(["--source", source])
        args.append(ACCEPT_SOURCE_AGREEMENTS)
        result = self._invoker.run(args)
        return self._parse_records("list", result, version_is_installed=True)

    def list_installed(
        self,
        app_id: str | None = None,
        source: str | None = None,
        exact: bool = True,
    ) -> list[PackageRecord]:
        """List installed packages.

        Args:
            app_id: Optional id filter.
            source: Optional source filter. None lists packages from any source.
            exact: Require an exact id match when filtering.

        Returns:
            Installed package records.
        """
        return self._exclude_system_apps(self._list(app_id, source, exact))

    def list_outdated(self, source: str | None = None) -> list[PackageRecord]:
        """List installed packages with a newer version available.

        Args:
            source: Source to check. Defaults to the configured source.

        Returns:
            Records with both installed and available versions.
        """
        args = ["upgrade", "--source", source or self._source, ACCEPT_SOURCE_AGREEMENTS]
        result = self._invoker.run(args)
        records = self._parse_records("upgrade", result, version_is_installed=True)
        outdated = [r for r in records if r.is_outdated]
        return self._exclude_system_apps(outdated)

    def list_system_owned(self, export_path: Path) -> frozenset[str]:
        """Export installed packages and extract their identifiers.

        Args:
            export_path: File winget writes the export document to.

        Returns:
            Exported application ids. Empty if the export failed.
        """
        args = ["export", "-o", str(export_path), ACCEPT_SOURCE_AGREEMENTS]
        result = self._invoker.run(args)

        if not export_path.is_file():
            logger.warning("winget export produced no file (exit code %d)", result.exit_code)
            return frozenset()

        try:
            return parse_export(export_path.read_text(encoding="utf-8-sig"))
        except (OSError, ParseError) as e:
            logger.warning("Could not read winget export %s: %s", export_path, e)
            return frozenset()

    def exists(self, app_id: str) -> bool:
        """Check if a package exists and is installable here.

        A package can appear in search results without an installer for
        the current architecture or scope; winget show then omits the
        installer section, and the package counts as missing.

        Args:
            app_id: Application id to check.

        Returns:
            True if winget show reports the id with an installer type.
        """
        args = [
            "show",
            "--id",
            app_id,
            "--exact",
            "--source",
            self._source,
            ACCEPT_SOURCE_AGREEMENTS,
        ]
        result = self._invoker.run(args)
        if not result.success:
            return False

        fields = parse_show_fields(result.stdout)
        shown_id = fields.get("Id")
        if shown_id is not None:
            id_matches = shown_id.casefold() == app_id.casefold()
        else:
            id_matches = app_id.casefold() in result.stdout.casefold()

        return id_matches and "Installer Type" in fields

    def is_installed(self, app_id: str, version: str | None = None) -> bool:
        """Check the live installed state of a package.

        System apps are not excluded here: this is a fact check, not a
        listing.

        Args:
            app_id: Application id to check.
            version: If given, the installed version must satisfy it
                under the configured version match strategy.

        Returns:
            True if installed (at the requested version).
        """
        for record in self._list(app_id, exact=True):
            if not record.matches(app_id):
                continue
            if version is None:
                return True
            if self._version_match.matches(record.installed_version, version):
                return True
            logger.debug(
                "%s installed at %s, expected %s", app_id, record.installed_version, version
            )
        return False

    def release_notes(self, app_id: str, version: str | None = None) -> ReleaseNotes | None:
        """Fetch release notes metadata for a package.

        Best effort: any failure yields None.

        Args:
            app_id: Application id.
            version: Specific version to describe. Defaults to the latest.

        Returns:
            ReleaseNotes, or None if unavailable.
        """
        args = ["show", "--id", app_id, "--exact", "--source", self._source]
        if version:
            args.extend(["--version", version])
        args.append(ACCEPT_SOURCE_AGREEMENTS)

        result = self._invoker.run(args, interpret_errors=False)
        if not result.success:
            logger.debug("No release notes for %s (exit code %d)", app_id, result.exit_code)
            return None

        fields = parse_show_fields(result.stdout)
        url = fields.get("Release Notes Url")
        text = fields.get("Release Notes")
        if url is None and text is None:
            return None
        return ReleaseNotes(url=url, text=text)
