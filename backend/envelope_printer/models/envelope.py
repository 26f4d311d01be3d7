"""
Pydantic models for envelope layout and composed envelope documents.
"""

from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator

from envelope_printer import config

_FONT_FAMILY_FORBIDDEN = "<>{};"


class EnvelopeSize(str, Enum):
    STANDARD = "standard"
    A4 = "a4"
    LEGAL = "legal"
    CUSTOM = "custom"


class LayoutParameters(BaseModel):
    """Envelope size and typography chosen by the user.

    custom_width / custom_height are only read when envelope_size is
    ``custom``; a custom size missing either dimension keeps the previously
    resolved box.
    """
    envelope_size: EnvelopeSize = EnvelopeSize.STANDARD
    font_size: float = Field(default=14, gt=0)
    font_family: str = "Arial"
    custom_width: Optional[float] = None   # inches
    custom_height: Optional[float] = None  # inches

    @field_validator("font_family")
    @classmethod
    def reject_style_breaking_characters(cls, v: str) -> str:
        """
        The family is written verbatim into a CSS declaration, so quoted names
        such as 'Times New Roman', serif pass through untouched. Characters
        that could end the declaration or the <style> element are refused.
        """
        bad = sorted(set(v) & set(_FONT_FAMILY_FORBIDDEN))
        if bad:
            raise ValueError(f"font_family may not contain {' '.join(bad)}")
        if not v.strip():
            raise ValueError("font_family must not be empty")
        return v.strip()

    @classmethod
    def default(cls) -> "LayoutParameters":
        """Layout built from the configured defaults."""
        return cls(
            envelope_size=config.ENVELOPE_DEFAULT_SIZE,
            font_size=config.ENVELOPE_DEFAULT_FONT_SIZE,
            font_family=config.ENVELOPE_DEFAULT_FONT_FAMILY,
        )


class ContentBox(BaseModel):
    """On-screen preview box in pixels."""
    width: float
    height: float


class BlockPosition(BaseModel):
    """Absolute offsets of a text block on the printed envelope, in inches."""
    top: Optional[float] = None
    left: Optional[float] = None
    bottom: Optional[float] = None
    right: Optional[float] = None


class EnvelopeDocument(BaseModel):
    """A return address block paired with one recipient, plus layout metadata."""
    return_block: str
    recipient_lines: List[str]
    recipient_html: str
    recipient_text: str
    font_family: str
    font_size: float
    content_box: Optional[ContentBox] = None
    return_position: BlockPosition
    recipient_position: BlockPosition
    html: str


# ---------------------------------------------------------------------------
# Request models
# ---------------------------------------------------------------------------

class PreviewRequest(BaseModel):
    return_address: Optional[str] = None
    layout: LayoutParameters = Field(default_factory=LayoutParameters.default)
    index: int = Field(default=0, ge=0)


class PrintRequest(BaseModel):
    return_address: Optional[str] = None
    layout: LayoutParameters = Field(default_factory=LayoutParameters.default)
    # None prints every address; an index prints just that one.
    index: Optional[int] = Field(default=None, ge=0)
