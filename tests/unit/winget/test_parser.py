"""Unit tests for the winget output parser.

Golden-file tests run against captured winget output samples in
tests/fixtures/winget/.
"""

from collections.abc import Callable

import pytest
from wingetctl.winget.parser import (
    WINGET_TABLE_SCHEMA,
    ColumnNotFoundError,
    ColumnSpec,
    ExportParseError,
    TableSchema,
    clean_line,
    compute_spans,
    is_json_output,
    is_separator,
    is_sentinel,
    parse_export,
    parse_output,
    parse_show_fields,
    parse_table,
)


class TestCleanLine:
    """Tests for clean_line function."""

    def test_removes_byte_order_mark(self) -> None:
        """A leading BOM is removed."""
        assert clean_line("\ufeffName  Id") == "Name  Id"

    def test_maps_mojibake_to_single_character(self) -> None:
        """Mis-decoded ellipsis collapses back to one character."""
        assert clean_line("Visual Studio CodeΓÇª  Microsoft") == "Visual Studio Code…  Microsoft"

    def test_plain_line_unchanged(self) -> None:
        """Lines without artifacts pass through."""
        assert clean_line("Git  Git.Git  2.45.1") == "Git  Git.Git  2.45.1"


class TestLineClassifiers:
    """Tests for is_separator and is_sentinel."""

    def test_separator_line(self) -> None:
        """A line of dashes is a separator."""
        assert is_separator("-" * 40)
        assert is_separator("  -----  ")

    def test_non_separator_lines(self) -> None:
        """Empty and mixed lines are not separators."""
        assert not is_separator("")
        assert not is_separator("--- x ---")

    @pytest.mark.parametrize(
        "line",
        [
            "No package found matching input criteria.",
            "No installed package found matching input criteria.",
            "No applicable update found.",
            "3 upgrades available.",
            "1 upgrade available.",
            "2 package(s) have version numbers that cannot be determined.",
            "The following packages have an upgrade available, but require explicit targeting:",
        ],
    )
    def test_sentinels(self, line: str) -> None:
        """Known informational messages are sentinels."""
        assert is_sentinel(line)

    def test_data_row_is_not_sentinel(self) -> None:
        """A regular data row is not a sentinel."""
        assert not is_sentinel("Git    Git.Git    2.45.1    winget")


class TestComputeSpans:
    """Tests for compute_spans function."""

    def test_spans_follow_header_offsets(self) -> None:
        """Each column starts at its title and ends at the next one."""
        header = "Name      Id        Version   Source"

        spans = compute_spans(header, WINGET_TABLE_SCHEMA)

        assert [(s.name, s.start, s.end) for s in spans] == [
            ("Name", 0, 10),
            ("Id", 10, 20),
            ("Version", 20, 30),
            ("Source", 30, None),
        ]

    def test_title_inside_word_is_not_matched(self) -> None:
        """'Id' inside another word does not anchor the Id column."""
        header = "Name      Identity  Id        Version"

        spans = {s.name: s for s in compute_spans(header, WINGET_TABLE_SCHEMA)}

        assert spans["Id"].start == 20

    def test_missing_required_column_raises(self) -> None:
        """A header without a required title is an explicit error."""
        with pytest.raises(ColumnNotFoundError) as exc_info:
            compute_spans("Name      Id        Source", WINGET_TABLE_SCHEMA)

        assert exc_info.value.column == "Version"
        assert "Version" in str(exc_info.value)

    def test_missing_optional_column_is_skipped(self) -> None:
        """Optional columns may be absent."""
        spans = compute_spans("Name  Id  Version", WINGET_TABLE_SCHEMA)

        assert [s.name for s in spans] == ["Name", "Id", "Version"]


class TestParseTable:
    """Tests for parse_table function."""

    def test_parses_all_rows(self, winget_output: Callable[[str], str]) -> None:
        """A single table with N data rows yields N rows with ids."""
        result = parse_table(winget_output("list_installed.txt"))

        assert result.tables == 1
        assert len(result.rows) == 5
        assert all(row["Id"] for row in result.rows)

    def test_name_with_embedded_spaces(self, winget_output: Callable[[str], str]) -> None:
        """Positional slicing keeps multi-word names out of other columns."""
        result = parse_table(winget_output("list_installed.txt"))
        esr = result.rows[0]

        assert esr["Name"] == "Mozilla Firefox ESR (x64 en-US)"
        assert esr["Id"] == "Mozilla.Firefox.ESR"
        assert esr["Version"] == "115.12.0"
        assert esr["Available"] is None
        assert esr["Source"] == "winget"

    def test_truncation_marker_removed(self, winget_output: Callable[[str], str]) -> None:
        """The trailing ellipsis of a truncated value is dropped."""
        result = parse_table(winget_output("list_installed.txt"))
        vcredist = result.rows[2]

        assert vcredist["Name"] == "Microsoft Visual C++ 2015-2019"
        assert vcredist["Id"] == "Microsoft.VCRedist.2015+.x64"
        assert vcredist["Available"] == "14.40.33810.0"

    def test_short_row_leaves_trailing_columns_empty(
        self, winget_output: Callable[[str], str]
    ) -> None:
        """Rows ending before a column yield None for it."""
        result = parse_table(winget_output("list_installed.txt"))
        arp = result.rows[4]

        assert arp["Id"] == "ARP\\Machine\\X64\\Contoso"
        assert arp["Version"] == "3.1"
        assert arp["Source"] is None

    def test_sentinel_only_output_yields_no_rows(
        self, winget_output: Callable[[str], str]
    ) -> None:
        """The 'no package found' message yields zero rows, not an error."""
        result = parse_table(winget_output("search_no_results.txt"))

        assert result.rows == ()
        assert not result.has_data

    def test_empty_output(self, mock_empty_output: str) -> None:
        """Empty output yields no data."""
        result = parse_table(mock_empty_output)

        assert result.rows == ()
        assert result.tables == 0

    def test_two_tables_are_reanchored(self, winget_output: Callable[[str], str]) -> None:
        """A second header with different widths recomputes the offsets."""
        result = parse_table(winget_output("upgrade_two_tables.txt"))

        assert result.tables == 2
        assert [row["Id"] for row in result.rows] == [
            "Mozilla.Firefox",
            "Microsoft.VisualStudioCode",
            "Git.Git",
            "Microsoft.Teams",
        ]
        teams = result.rows[3]
        assert teams["Name"] == "Microsoft Teams"
        assert teams["Version"] == "1.7.00"
        assert teams["Available"] == "24165.1"

    def test_mojibake_does_not_shift_columns(self, winget_output: Callable[[str], str]) -> None:
        """Rows with mis-decoded characters still slice correctly."""
        result = parse_table(winget_output("upgrade_two_tables.txt"))
        vscode = result.rows[1]

        assert vscode["Name"] == "Visual Studio Code"
        assert vscode["Version"] == "1.90.0"
        assert vscode["Available"] == "1.91.1"

    def test_match_column_does_not_bleed_into_version(
        self, winget_output: Callable[[str], str]
    ) -> None:
        """search output's Match column is kept separate."""
        result = parse_table(winget_output("search_match.txt"))

        assert len(result.rows) == 1
        assert result.rows[0]["Version"] == "128.0.3"
        assert result.rows[0]["Match"] == "Moniker: firefox"
        assert result.rows[0]["Source"] == "winget"

    def test_header_missing_required_column_raises(self) -> None:
        """A detected table whose header lacks Version is an error."""
        text = "Name      Id        Source\n" + "-" * 26 + "\nGit       Git.Git   winget\n"

        with pytest.raises(ColumnNotFoundError):
            parse_table(text)

    def test_rows_without_id_are_dropped(self) -> None:
        """Continuation lines without an id are not returned as records."""
        text = (
            "Name      Id        Version\n"
            + "-" * 27
            + "\nGit       Git.Git   2.45.1\n"
            + "  more\n"
        )

        result = parse_table(text)

        assert [row["Id"] for row in result.rows] == ["Git.Git"]

    def test_spinner_frames_and_progress_bars_are_skipped(self) -> None:
        """Frames redrawn with carriage returns never become rows."""
        text = (
            "   -\r   \\\r   |\r   /\rName      Id        Version\n"
            + "-" * 27
            + "\nGit       Git.Git   2.45.1\n"
            + "\r   -\r  ██████████▒▒▒▒  1.2 MB / 3.4 MB\r"
            + "7-Zip     7zip.7zip 23.01\n"
        )

        result = parse_table(text)

        assert result.tables == 1
        assert [row["Id"] for row in result.rows] == ["Git.Git", "7zip.7zip"]
        assert result.rows[1]["Version"] == "23.01"

    def test_custom_schema(self) -> None:
        """The parser anchors on whatever schema it is given."""
        schema = TableSchema(columns=(ColumnSpec("Name"), ColumnSpec("Id")))
        text = "Name    Id\n" + "-" * 14 + "\nGit     Git.Git\n"

        result = parse_table(text, schema)

        assert result.rows == ({"Name": "Git", "Id": "Git.Git"},)


class TestParseExport:
    """Tests for export document decoding."""

    def test_extracts_identifiers_from_all_sources(
        self, winget_output: Callable[[str], str]
    ) -> None:
        """Identifiers from every source are returned."""
        ids = parse_export(winget_output("export.json"))

        assert ids == frozenset(
            {
                "Microsoft.Edge",
                "Microsoft.OneDrive",
                "Microsoft.VCRedist.2015+.x64",
                "9WZDNCRFJ3TJ",
            }
        )

    def test_accepts_byte_order_mark(self) -> None:
        """winget writes exports with a BOM on some systems."""
        text = '\ufeff{"Sources": [{"Packages": [{"PackageIdentifier": "Git.Git"}]}]}'

        assert parse_export(text) == frozenset({"Git.Git"})

    def test_empty_document(self) -> None:
        """A document without sources yields no identifiers."""
        assert parse_export("{}") == frozenset()

    def test_invalid_json_raises(self) -> None:
        """Malformed documents raise ExportParseError."""
        with pytest.raises(ExportParseError):
            parse_export("{not json")


class TestParseOutput:
    """Tests for parse_output dispatch."""

    def test_detects_json_mode(self, winget_output: Callable[[str], str]) -> None:
        """JSON output bypasses column slicing."""
        text = winget_output("export.json")

        assert is_json_output(text)
        result = parse_output(text)

        assert result.has_data
        edge = next(row for row in result.rows if row["Id"] == "Microsoft.Edge")
        assert edge["Version"] == "127.0.2651.86"
        assert edge["Name"] is None

    def test_table_mode(self, winget_output: Callable[[str], str]) -> None:
        """Text output is parsed as tables."""
        text = winget_output("list_installed.txt")

        assert not is_json_output(text)
        assert len(parse_output(text).rows) == 5


class TestParseShowFields:
    """Tests for parse_show_fields function."""

    def test_found_line_provides_name_and_id(self, winget_output: Callable[[str], str]) -> None:
        """The 'Found name [id]' line yields Name and Id."""
        fields = parse_show_fields(winget_output("show_firefox.txt"))

        assert fields["Name"] == "Mozilla Firefox"
        assert fields["Id"] == "Mozilla.Firefox"
        assert fields["Version"] == "128.0.3"

    def test_nested_installer_fields_flattened(
        self, winget_output: Callable[[str], str]
    ) -> None:
        """Installer section keys are available at the top level."""
        fields = parse_show_fields(winget_output("show_firefox.txt"))

        assert fields["Installer Type"] == "exe"
        assert fields["Release Date"] == "2024-07-23"
        assert fields["Installer Url"].startswith("https://download-installer.cdn.mozilla.net/")

    def test_text_blocks_collected(self, winget_output: Callable[[str], str]) -> None:
        """Indented continuation lines form the value of text keys."""
        fields = parse_show_fields(winget_output("show_firefox.txt"))

        assert fields["Description"].startswith("Mozilla Firefox is free")
        assert "of thousands" in fields["Description"]
        assert fields["Tags"] == "browser\nweb-browser"
        assert fields["Release Notes Url"] == (
            "https://www.mozilla.org/firefox/128.0.3/releasenotes/"
        )

    def test_no_installer_section(self, winget_output: Callable[[str], str]) -> None:
        """Packages without an installer have no Installer Type."""
        fields = parse_show_fields(winget_output("show_no_installer.txt"))

        assert fields["Id"] == "Contoso.Widget"
        assert fields["Description"] == "Desktop widget for Contoso services."
        assert "Installer Type" not in fields
