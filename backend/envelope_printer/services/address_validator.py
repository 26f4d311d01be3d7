"""
Address validation.

An address is usable on an envelope when it names a recipient and gives at
least a street line or a city. No other format checks are made.
"""

import logging
from typing import Iterable

from envelope_printer.models.address import AddressRecord

logger = logging.getLogger(__name__)


def is_valid_address(record: AddressRecord) -> bool:
    """Return True if the record has a name and either address1 or city."""
    return bool(record.name and (record.address1 or record.city))


def filter_valid(records: Iterable[AddressRecord]) -> list[AddressRecord]:
    """Keep only valid records, preserving their order. Rejects are dropped silently."""
    kept: list[AddressRecord] = []
    dropped = 0
    for record in records:
        if is_valid_address(record):
            kept.append(record)
        else:
            dropped += 1
    if dropped:
        logger.debug("filter_valid: dropped %d of %d records", dropped, dropped + len(kept))
    return kept
