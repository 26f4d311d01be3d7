"""
Field mapper service.

Maps spreadsheet columns to canonical address fields using a fixed table of
header synonyms, then builds an AddressRecord from a data row.

Matching is case-insensitive substring containment: a header matches a field
when it contains any of the field's synonyms. For each field the first
matching header in column order wins; there is no scoring.

Public API:
  normalize_headers(header_row)  -> list[str]
  resolve_columns(headers)       -> dict[str, int]
  map_row(headers, row)          -> AddressRecord
"""

import logging
from typing import Any, Optional

from envelope_printer.models.address import CANONICAL_FIELDS, AddressRecord
from envelope_printer.services.table_reader import RawTable

logger = logging.getLogger(__name__)

# Keyword synonyms for column matching. Each field resolves independently, so
# a header such as "Address2" can also satisfy "address" for address1 when no
# earlier column did.
FIELD_SYNONYMS: dict[str, list[str]] = {
    "name": ["name", "full name", "recipient", "to"],
    "address1": ["address", "address1", "street", "address line 1"],
    "address2": ["address2", "suite", "apt", "apartment", "address line 2"],
    "city": ["city", "town"],
    "state": ["state", "province", "region"],
    "zip": ["zip", "zipcode", "postal", "postal code", "postcode"],
    "country": ["country"],
}


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------

def _cell_to_str(value: Any) -> str:
    """Convert a cell value to a trimmed string; whole floats drop the '.0'."""
    if value is None:
        return ""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value).strip()


def _find_header_index(headers: list[str], synonyms: list[str]) -> Optional[int]:
    """Return the index of the first header containing any synonym."""
    for idx, header in enumerate(headers):
        if any(synonym in header for synonym in synonyms):
            return idx
    return None


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def normalize_headers(header_row: list[Any]) -> list[str]:
    """Lower-case and trim each header cell."""
    return [_cell_to_str(cell).lower() for cell in header_row]


def resolve_columns(headers: list[str]) -> dict[str, int]:
    """
    Work out which column feeds each canonical field.

    Args:
        headers: Normalized header row (see normalize_headers).

    Returns:
        Dict mapping field name -> column index, for fields that matched.
        Fields with no matching header are absent.
    """
    columns: dict[str, int] = {}
    for field_name in CANONICAL_FIELDS:
        idx = _find_header_index(headers, FIELD_SYNONYMS[field_name])
        if idx is not None:
            columns[field_name] = idx

    logger.debug("resolve_columns: %s -> %s", headers, columns)
    return columns


def record_from_columns(columns: dict[str, int], row: list[Any]) -> AddressRecord:
    """Build an AddressRecord from a row using pre-resolved column indexes."""
    values: dict[str, str] = {}
    for field_name, idx in columns.items():
        value = _cell_to_str(RawTable.cell(row, idx))
        if value:
            values[field_name] = value
    return AddressRecord(**values)


def map_row(headers: list[str], row: list[Any]) -> AddressRecord:
    """
    Map one data row to an AddressRecord.

    A field is present only if its header matched and the corresponding cell
    is non-empty after trimming; nothing is substituted for missing cells.
    """
    return record_from_columns(resolve_columns(headers), row)
