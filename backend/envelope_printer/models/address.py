"""
Pydantic models for mailing addresses.
"""

from typing import Dict, Optional

from pydantic import BaseModel, ConfigDict, field_validator

# Closed set of address components, in mapping order.
CANONICAL_FIELDS = ("name", "address1", "address2", "city", "state", "zip", "country")


class AddressRecord(BaseModel):
    """One recipient address as mapped from a spreadsheet row.

    Every field is optional; a present field is always a trimmed, non-empty
    string. Records are immutable once built.
    """
    model_config = ConfigDict(frozen=True)

    name: Optional[str] = None
    address1: Optional[str] = None
    address2: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    zip: Optional[str] = None
    country: Optional[str] = None

    @field_validator(*CANONICAL_FIELDS)
    @classmethod
    def blank_to_none(cls, v: Optional[str]) -> Optional[str]:
        """Trim values; whitespace-only values become absent."""
        if v is None:
            return None
        v = v.strip()
        return v or None

    def present_fields(self) -> Dict[str, str]:
        """Return only the fields that carry a value, in canonical order."""
        return {
            field: getattr(self, field)
            for field in CANONICAL_FIELDS
            if getattr(self, field)
        }
