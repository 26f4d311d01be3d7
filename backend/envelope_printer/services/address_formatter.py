"""
Address formatter.

Renders an AddressRecord as the ordered lines of a postal block:

    name
    address1
    address2
    city, state, zip
    country        (omitted for domestic addresses)

How the lines are joined is up to the output medium; see join_lines().
"""

import html
from typing import Literal

from envelope_printer.models.address import AddressRecord

# Country values (case-insensitive) that are never printed.
DOMESTIC_COUNTRY = "usa"

Medium = Literal["html", "text"]


def format_address(record: AddressRecord) -> list[str]:
    """Return the display lines for a record, skipping absent fields."""
    lines: list[str] = []

    if record.name:
        lines.append(record.name)
    if record.address1:
        lines.append(record.address1)
    if record.address2:
        lines.append(record.address2)

    locality = ", ".join(
        part for part in (record.city, record.state, record.zip) if part
    )
    if locality:
        lines.append(locality)

    if record.country and record.country.lower() != DOMESTIC_COUNTRY:
        lines.append(record.country)

    return lines


def join_lines(lines: list[str], medium: Medium = "html") -> str:
    """
    Join display lines into a single block.

    "html" escapes each line and separates them with <br>; "text" uses newlines.
    """
    if medium == "html":
        return "<br>".join(html.escape(line) for line in lines)
    return "\n".join(lines)
