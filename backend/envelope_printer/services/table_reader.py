"""
Tabular reader service.

Decodes an uploaded address file into a RawTable: an ordered list of rows,
each an ordered list of raw cell values, with row 0 being the header row.
Delimited text and spreadsheet workbooks both reduce to this shape.

Public API:
  source_kind_for(filename)     -> SourceKind
  parse_table(content, kind)    -> RawTable
  read_table(content, kind)     -> RawTable   (awaitable, non-blocking)
"""

import io
import logging
from dataclasses import dataclass, field
from typing import Any, Literal

import openpyxl
import xlrd
from fastapi.concurrency import run_in_threadpool

from envelope_printer.services.errors import DecodeFailure, EmptyTable, UnsupportedFormat

logger = logging.getLogger(__name__)

SourceKind = Literal["delimited-text", "spreadsheet-binary"]

DELIMITED_TEXT: SourceKind = "delimited-text"
SPREADSHEET_BINARY: SourceKind = "spreadsheet-binary"

# Extension (lower-case, with dot) -> source kind
EXTENSION_KINDS: dict[str, SourceKind] = {
    ".csv": DELIMITED_TEXT,
    ".xlsx": SPREADSHEET_BINARY,
    ".xls": SPREADSHEET_BINARY,
}

# Leading bytes of the two workbook containers we accept.
_ZIP_MAGIC = b"PK\x03\x04"                     # .xlsx (Office Open XML)
_OLE2_MAGIC = b"\xd0\xcf\x11\xe0\xa1\xb1\x1a\xe1"  # .xls (BIFF in OLE2)


# ---------------------------------------------------------------------------
# Data structures
# ---------------------------------------------------------------------------

@dataclass
class RawTable:
    """Rows of raw cells; rows[0] is the header. Rows may be ragged."""
    rows: list[list[Any]] = field(default_factory=list)

    @property
    def header(self) -> list[Any]:
        return self.rows[0] if self.rows else []

    @property
    def data_rows(self) -> list[list[Any]]:
        return self.rows[1:]

    @staticmethod
    def cell(row: list[Any], index: int) -> Any:
        """Return row[index], treating missing trailing cells as empty."""
        if index < len(row):
            return row[index]
        return None


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------

def _get_extension(filename: str) -> str:
    """Return lower-case file extension including the dot."""
    dot = filename.rfind(".")
    if dot == -1:
        return ""
    return filename[dot:].lower()


def _row_is_all_empty(row_cells: list) -> bool:
    """Return True if all cells in the row are None or whitespace."""
    return all(
        cell is None or str(cell).strip() == ""
        for cell in row_cells
    )


def source_kind_for(filename: str) -> SourceKind:
    """
    Infer the source kind from a filename's extension.

    Raises:
        UnsupportedFormat: If the extension is not .csv, .xlsx or .xls.
    """
    ext = _get_extension(filename or "")
    kind = EXTENSION_KINDS.get(ext)
    if kind is None:
        raise UnsupportedFormat(ext)
    return kind


# ---------------------------------------------------------------------------
# Delimited text
# ---------------------------------------------------------------------------

def parse_delimited_line(line: str) -> list[str]:
    """
    Split one line of delimited text into trimmed fields.

    A double quote flips the in-quotes state and is dropped; a comma outside
    quotes ends the field. Escaped quotes ("") are not unescaped.
    """
    result: list[str] = []
    current: list[str] = []
    in_quotes = False

    for char in line:
        if char == '"':
            in_quotes = not in_quotes
        elif char == "," and not in_quotes:
            result.append("".join(current).strip())
            current = []
        else:
            current.append(char)

    result.append("".join(current).strip())
    return result


def _parse_delimited_bytes(file_content: bytes) -> list[list[Any]]:
    try:
        text = file_content.decode("utf-8-sig")
    except UnicodeDecodeError as exc:
        raise DecodeFailure(f"Error reading CSV file: {exc}", cause=exc) from exc

    lines = [line for line in text.split("\n") if line.strip()]
    return [parse_delimited_line(line) for line in lines]


# ---------------------------------------------------------------------------
# Spreadsheet workbooks
# ---------------------------------------------------------------------------

def _parse_xlsx_bytes(file_content: bytes) -> list[list[Any]]:
    """Return the rows of the first worksheet of an .xlsx workbook."""
    wb = openpyxl.load_workbook(io.BytesIO(file_content), data_only=True)
    ws = wb.worksheets[0]
    return [list(row) for row in ws.iter_rows(values_only=True)]


def _parse_xls_bytes(file_content: bytes) -> list[list[Any]]:
    """Return the rows of the first sheet of a legacy .xls workbook."""
    wb = xlrd.open_workbook(file_contents=file_content)
    ws = wb.sheet_by_index(0)
    rows = []
    for row_idx in range(ws.nrows):
        row = []
        for cell in ws.row(row_idx):
            if cell.ctype == xlrd.XL_CELL_EMPTY:
                row.append(None)
            elif cell.ctype == xlrd.XL_CELL_NUMBER:
                # Return int if whole number, else float
                v = cell.value
                row.append(int(v) if v == int(v) else v)
            else:
                row.append(cell.value)
        rows.append(row)
    return rows


def _parse_spreadsheet_bytes(file_content: bytes) -> list[list[Any]]:
    """Decode a workbook (xlsx or xls, sniffed from its leading bytes)."""
    try:
        if file_content.startswith(_OLE2_MAGIC):
            raw_rows = _parse_xls_bytes(file_content)
        else:
            raw_rows = _parse_xlsx_bytes(file_content)
    except Exception as exc:
        raise DecodeFailure(f"Error reading Excel file: {exc}", cause=exc) from exc

    return [row for row in raw_rows if row and not _row_is_all_empty(row)]


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def parse_table(file_content: bytes, kind: SourceKind) -> RawTable:
    """
    Decode file content into a RawTable.

    Blank lines (or all-empty sheet rows) are dropped before counting rows.

    Raises:
        UnsupportedFormat: If kind is not a known source kind.
        DecodeFailure: If the underlying reader cannot decode the bytes.
        EmptyTable: If fewer than two rows (header + one data row) remain.
    """
    if kind == DELIMITED_TEXT:
        rows = _parse_delimited_bytes(file_content)
    elif kind == SPREADSHEET_BINARY:
        rows = _parse_spreadsheet_bytes(file_content)
    else:
        raise UnsupportedFormat(str(kind))

    if len(rows) < 2:
        raise EmptyTable()

    logger.debug("parse_table: %s produced %d rows", kind, len(rows))
    return RawTable(rows=rows)


async def read_table(file_content: bytes, kind: SourceKind) -> RawTable:
    """Decode file content off the event loop; resolves to a full RawTable or raises."""
    return await run_in_threadpool(parse_table, file_content, kind)
