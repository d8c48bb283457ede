"""Parser for winget's human-oriented output.

winget has no stable machine-readable format for search, list and
upgrade. Those commands print fixed-width tables:

    Name               Id                  Version      Available  Source
    ------------------------------------------------------------------------
    Mozilla Firefox    Mozilla.Firefox     127.0        128.0      winget

Names may contain spaces, so rows are sliced by the character offsets of
the column titles in the header line rather than split on whitespace.
Offsets are computed per table because column widths change between
invocations, and one output stream may contain several tables (e.g.
one per source, or the "require explicit targeting" block of upgrade).

The export command writes JSON, which is decoded structurally instead.
"""

import logging
import re
from dataclasses import dataclass

from pydantic import BaseModel, ConfigDict, Field, ValidationError

logger = logging.getLogger(__name__)

# Mis-decoded UTF-8 (read as code page 437) mapped back to the single
# character it stands for, so column offsets stay aligned.
_ARTIFACTS: dict[str, str] = {
    "ΓÇª": "…",  # horizontal ellipsis
    "ΓÇÖ": "’",  # right single quote
    "ΓÇô": "–",  # en dash
    "Γûê": "█",  # full block
    "ΓûÆ": "▒",  # medium shade
}

_BOM = "\ufeff"

# Truncation marker winget appends to cut-off values
_ELLIPSIS = "…"

_SPINNER_FRAMES = frozenset({"-", "\\", "|", "/"})
_PROGRESS_CHARS = frozenset({"█", "▒"})

# Informational lines winget prints inside or after a table
_SENTINELS: tuple[re.Pattern[str], ...] = (
    re.compile(r"^No (installed )?package found matching input criteria\.?$", re.IGNORECASE),
    re.compile(r"^No applicable update found\.?$", re.IGNORECASE),
    re.compile(r"^No newer package versions are available", re.IGNORECASE),
    re.compile(r"^\d+ upgrades? available\.?$", re.IGNORECASE),
    re.compile(r"^\d+ package(\(s\)|s)? ha(s|ve) ", re.IGNORECASE),
    re.compile(r"^The following packages have an upgrade available", re.IGNORECASE),
    re.compile(r"^Failed when searching source", re.IGNORECASE),
)


class ParseError(Exception):
    """Base exception for winget output parsing errors."""


class ColumnNotFoundError(ParseError):
    """Raised when a detected table header lacks a required column."""

    def __init__(self, column: str, header: str) -> None:
        self.column = column
        self.header = header
        super().__init__(f"Required column '{column}' not found in header: {header!r}")


class ExportParseError(ParseError):
    """Raised when an export document cannot be decoded."""


@dataclass(frozen=True, slots=True)
class ColumnSpec:
    """A column the parser anchors on.

    Attributes:
        name: Column title as printed in the header line.
        required: If True, a header without this title is an error.
    """

    name: str
    required: bool = True


@dataclass(frozen=True, slots=True)
class TableSchema:
    """Ordered set of columns expected in a table."""

    columns: tuple[ColumnSpec, ...]

    @property
    def titles(self) -> frozenset[str]:
        """All column titles in the schema."""
        return frozenset(column.name for column in self.columns)

    @property
    def names(self) -> tuple[str, ...]:
        """Column titles in schema order."""
        return tuple(column.name for column in self.columns)


# Columns of search/list/upgrade output. "Match" is only printed by
# search; it is anchored so it does not bleed into Version.
WINGET_TABLE_SCHEMA = TableSchema(
    columns=(
        ColumnSpec("Name"),
        ColumnSpec("Id"),
        ColumnSpec("Version"),
        ColumnSpec("Match", required=False),
        ColumnSpec("Available", required=False),
        ColumnSpec("Source", required=False),
    )
)


@dataclass(frozen=True, slots=True)
class ColumnSpan:
    """Character span of one column within a table's rows.

    Attributes:
        name: Column title.
        start: Offset of the first character.
        end: Offset one past the last character, or None for end of line.
    """

    name: str
    start: int
    end: int | None

    def slice(self, line: str) -> str | None:
        """Cut this column out of a data row and normalize the value."""
        value = line[self.start : self.end].replace(_ELLIPSIS, "").strip()
        return value or None


TableRow = dict[str, str | None]


@dataclass(frozen=True, slots=True)
class TableParseResult:
    """Rows parsed from one output stream.

    Attributes:
        rows: Parsed rows keyed by column title, across all tables.
        tables: Number of tables (header/separator pairs) found.
    """

    rows: tuple[TableRow, ...]
    tables: int

    @property
    def has_data(self) -> bool:
        """Check if any table header was found."""
        return self.tables > 0


def clean_line(line: str) -> str:
    """Remove console artifacts from a single output line.

    Strips byte order marks and maps known mis-decoded sequences back
    to one character. Spinner frames written with bare carriage returns
    arrive as separate lines and are dropped by the table parser.
    """
    line = line.replace(_BOM, "")
    for artifact, replacement in _ARTIFACTS.items():
        if artifact in line:
            line = line.replace(artifact, replacement)
    return line.rstrip("\n")


def is_separator(line: str) -> bool:
    """Check if a line consists solely of dashes."""
    stripped = line.strip()
    return bool(stripped) and set(stripped) == {"-"}


def is_sentinel(line: str) -> bool:
    """Check if a line is one of winget's informational messages."""
    stripped = line.strip()
    return any(pattern.search(stripped) for pattern in _SENTINELS)


def _is_noise(line: str) -> bool:
    """Check if a line is a spinner frame or progress bar."""
    stripped = line.strip()
    if not stripped:
        return True
    return stripped in _SPINNER_FRAMES or stripped[0] in _PROGRESS_CHARS


def _is_header(lines: list[str], index: int, schema: TableSchema) -> bool:
    """Check if lines[index] starts a table.

    A header's first token is a known column title and the next line is
    a dash separator.
    """
    tokens = lines[index].split()
    if not tokens or tokens[0] not in schema.titles:
        return False
    return index + 1 < len(lines) and is_separator(lines[index + 1])


def compute_spans(header: str, schema: TableSchema) -> tuple[ColumnSpan, ...]:
    """Compute column spans from a header line.

    Args:
        header: The header line.
        schema: Columns to anchor on.

    Returns:
        Column spans sorted by offset.

    Raises:
        ColumnNotFoundError: If a required column title is missing.
    """
    starts: list[tuple[int, str]] = []
    for column in schema.columns:
        match = re.search(rf"(?<!\S){re.escape(column.name)}(?!\S)", header)
        if match is None:
            if column.required:
                raise ColumnNotFoundError(column.name, header.strip())
            continue
        starts.append((match.start(), column.name))

    starts.sort()
    spans: list[ColumnSpan] = []
    for position, (start, name) in enumerate(starts):
        end = starts[position + 1][0] if position + 1 < len(starts) else None
        spans.append(ColumnSpan(name=name, start=start, end=end))
    return tuple(spans)


def parse_table(text: str, schema: TableSchema = WINGET_TABLE_SCHEMA) -> TableParseResult:
    """Parse every table in a winget output stream.

    Args:
        text: Raw stdout of a winget search/list/upgrade command.
        schema: Columns to anchor on.

    Returns:
        TableParseResult with rows from all tables. Output without any
        header yields no rows and has_data == False.

    Raises:
        ColumnNotFoundError: If a header lacks a required column.
    """
    lines = [clean_line(line) for line in text.splitlines()]

    rows: list[TableRow] = []
    spans: tuple[ColumnSpan, ...] | None = None
    header_text = ""
    tables = 0

    index = 0
    while index < len(lines):
        line = lines[index]

        if _is_header(lines, index, schema):
            spans = compute_spans(line, schema)
            header_text = line.strip()
            tables += 1
            index += 2
            continue

        index += 1

        if spans is None:
            continue
        if _is_noise(line) or is_separator(line) or is_sentinel(line):
            continue
        if line.strip() == header_text:
            continue

        row: TableRow = dict.fromkeys(schema.names)
        for span in spans:
            row[span.name] = span.slice(line)

        if not row.get("Id"):
            logger.debug("Skipping row without id: %r", line[:100])
            continue
        rows.append(row)

    if tables == 0:
        logger.debug("No table header found in winget output")

    return TableParseResult(rows=tuple(rows), tables=tables)


class _ExportPackage(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    package_identifier: str = Field(alias="PackageIdentifier", min_length=1)
    version: str | None = Field(default=None, alias="Version")


class _ExportSource(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    packages: list[_ExportPackage] = Field(default_factory=lambda: [], alias="Packages")


class _ExportDocument(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    sources: list[_ExportSource] = Field(default_factory=lambda: [], alias="Sources")


def _load_export(text: str) -> _ExportDocument:
    try:
        return _ExportDocument.model_validate_json(text.lstrip(_BOM))
    except ValidationError as e:
        raise ExportParseError(f"Invalid export document: {e}") from e


def parse_export(text: str) -> frozenset[str]:
    """Extract package identifiers from a winget export document.

    Args:
        text: JSON written by ``winget export``.

    Returns:
        Set of package identifiers across all sources.

    Raises:
        ExportParseError: If the text is not a valid export document.
    """
    document = _load_export(text)
    return frozenset(
        package.package_identifier for source in document.sources for package in source.packages
    )


def is_json_output(text: str) -> bool:
    """Check if output is in machine-readable (JSON) mode."""
    return text.lstrip(_BOM + " \t\r\n").startswith("{")


def parse_output(text: str, schema: TableSchema = WINGET_TABLE_SCHEMA) -> TableParseResult:
    """Parse winget output in whichever format it was produced.

    JSON export documents are decoded structurally and yield rows with
    Id (and Version, when exported with versions); anything else goes
    through positional table parsing.

    Raises:
        ParseError: If the output cannot be parsed.
    """
    if not is_json_output(text):
        return parse_table(text, schema)

    document = _load_export(text)
    rows: list[TableRow] = []
    for source in document.sources:
        for package in source.packages:
            row: TableRow = dict.fromkeys(schema.names)
            row["Id"] = package.package_identifier
            if "Version" in row:
                row["Version"] = package.version
            rows.append(row)
    return TableParseResult(rows=tuple(rows), tables=1)


# Keys of `winget show` whose indented continuation lines are free text
_TEXT_BLOCK_KEYS = frozenset({"Description", "Release Notes", "Tags", "Moniker"})

_SHOW_FOUND = re.compile(r"^Found (?P<name>.*) \[(?P<id>[^\]]+)\]\s*$")
_SHOW_FIELD = re.compile(r"^(?P<indent>\s*)(?P<key>[A-Za-z][A-Za-z ]*?):(?:\s+(?P<value>.*))?$")


def _indent_of(line: str) -> int:
    return len(line) - len(line.lstrip())


def parse_show_fields(text: str) -> dict[str, str]:
    """Parse the key/value output of ``winget show``.

    Nested sections (e.g. Installer) are flattened; the first
    occurrence of a key wins. The "Found <name> [<id>]" line provides
    the Name and Id keys.

    Args:
        text: Raw stdout of a winget show command.

    Returns:
        Mapping of field name to value.
    """
    lines = [clean_line(line) for line in text.splitlines()]
    fields: dict[str, str] = {}

    index = 0
    while index < len(lines):
        line = lines[index]
        index += 1

        found = _SHOW_FOUND.match(line.strip())
        if found is not None:
            fields.setdefault("Name", found.group("name").strip())
            fields.setdefault("Id", found.group("id").strip())
            continue

        match = _SHOW_FIELD.match(line)
        if match is None:
            continue

        key = match.group("key").strip()
        value = (match.group("value") or "").strip()

        if not value and key in _TEXT_BLOCK_KEYS:
            indent = _indent_of(line)
            block: list[str] = []
            while index < len(lines) and (
                not lines[index].strip() or _indent_of(lines[index]) > indent
            ):
                block.append(lines[index].strip())
                index += 1
            value = "\n".join(block).strip()

        if value:
            fields.setdefault(key, value)

    return fields
