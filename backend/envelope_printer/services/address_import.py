"""
Address import pipeline.

Runs an uploaded file through the reader, field mapper and validator and
returns the ordered list of usable addresses.

Public API:
  import_addresses(file_content, filename)       -> ImportResult  (async)
  import_addresses_sync(file_content, filename)  -> ImportResult
"""

import logging
from dataclasses import dataclass, field

from envelope_printer.models.address import AddressRecord
from envelope_printer.services.address_validator import filter_valid
from envelope_printer.services.errors import NoValidRecords
from envelope_printer.services.field_mapper import (
    normalize_headers,
    record_from_columns,
    resolve_columns,
)
from envelope_printer.services.table_reader import (
    RawTable,
    SourceKind,
    parse_table,
    read_table,
    source_kind_for,
)

logger = logging.getLogger(__name__)


@dataclass
class ImportResult:
    """Result of import_addresses()."""
    filename: str
    source_kind: SourceKind
    addresses: list[AddressRecord] = field(default_factory=list)
    total_rows: int = 0      # data rows read (excl. header and blank lines)
    skipped_rows: int = 0    # data rows rejected by validation


def _addresses_from_table(table: RawTable, filename: str, kind: SourceKind) -> ImportResult:
    columns = resolve_columns(normalize_headers(table.header))
    records = [record_from_columns(columns, row) for row in table.data_rows]
    addresses = filter_valid(records)

    if not addresses:
        logger.info("import: %s (%s) had no valid addresses in %d rows", filename, kind, len(records))
        raise NoValidRecords()

    result = ImportResult(
        filename=filename,
        source_kind=kind,
        addresses=addresses,
        total_rows=len(records),
        skipped_rows=len(records) - len(addresses),
    )
    logger.info(
        "import: %s (%s) kept %d addresses, skipped %d rows",
        filename, kind, len(addresses), result.skipped_rows,
    )
    return result


async def import_addresses(file_content: bytes, filename: str) -> ImportResult:
    """
    Parse an uploaded address file into validated address records.

    Raises:
        UnsupportedFormat: If the file extension is not supported.
        DecodeFailure: If the file cannot be decoded.
        EmptyTable: If the file has no header or no data rows.
        NoValidRecords: If no row yields a valid address.
    """
    kind = source_kind_for(filename)
    table = await read_table(file_content, kind)
    return _addresses_from_table(table, filename, kind)


def import_addresses_sync(file_content: bytes, filename: str) -> ImportResult:
    """Blocking variant of import_addresses() for callers without an event loop."""
    kind = source_kind_for(filename)
    table = parse_table(file_content, kind)
    return _addresses_from_table(table, filename, kind)
