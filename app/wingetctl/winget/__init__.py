"""winget integration: process invocation, output parsing, and queries.

This module exports the classes used to talk to the winget CLI.
"""

from wingetctl.winget.errors import (
    WingetError,
    WingetErrorCategory,
    classify_exit_code,
    signed_exit_code,
)
from wingetctl.winget.invoker import WingetInvoker, WingetResult
from wingetctl.winget.parser import (
    WINGET_TABLE_SCHEMA,
    ColumnNotFoundError,
    ColumnSpec,
    ParseError,
    TableSchema,
    parse_export,
    parse_output,
    parse_table,
)
from wingetctl.winget.query import PackageQuery, ReleaseNotes

__all__ = [
    "WINGET_TABLE_SCHEMA",
    "ColumnNotFoundError",
    "ColumnSpec",
    "PackageQuery",
    "ParseError",
    "ReleaseNotes",
    "TableSchema",
    "WingetError",
    "WingetErrorCategory",
    "WingetInvoker",
    "WingetResult",
    "classify_exit_code",
    "parse_export",
    "parse_output",
    "parse_table",
    "signed_exit_code",
]
