"""
Envelope composer service.

Pairs a fixed return address block with each recipient's formatted lines and
annotates the result with layout metadata (preview box, block positions,
font). Performs no I/O; hosts wrap the documents for preview or printing
(see print_document).

Public API:
  resolve_content_box(layout, previous)                       -> ContentBox | None
  compose_one(return_block, recipient_lines, layout, ...)     -> EnvelopeDocument
  compose_all(return_block, records, layout, on_progress)     -> list[EnvelopeDocument]
"""

import logging
from typing import Callable, Optional, Sequence

from envelope_printer.models.address import AddressRecord
from envelope_printer.models.envelope import (
    BlockPosition,
    ContentBox,
    EnvelopeDocument,
    EnvelopeSize,
    LayoutParameters,
)
from envelope_printer.services.address_formatter import format_address, join_lines

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[int, int], None]

# ---------------------------------------------------------------------------
# Layout constants
# ---------------------------------------------------------------------------

# Preview content box in pixels, keyed by envelope size.
ENVELOPE_SIZES: dict[EnvelopeSize, tuple[float, float]] = {
    EnvelopeSize.STANDARD: (456, 228),
    EnvelopeSize.A4: (600, 400),
    EnvelopeSize.LEGAL: (650, 450),
}

# Custom sizes are scaled per inch and clamped so the preview stays on screen.
CUSTOM_WIDTH_SCALE = 50
CUSTOM_HEIGHT_SCALE = 30
CUSTOM_MAX_WIDTH = 800
CUSTOM_MAX_HEIGHT = 500

# Printed block offsets from the page edges, in inches.
RETURN_POSITION = BlockPosition(top=0.5, left=0.5)
RECIPIENT_POSITION = BlockPosition(bottom=2.0, right=1.0)


# ---------------------------------------------------------------------------
# Size resolution
# ---------------------------------------------------------------------------

def resolve_content_box(
    layout: LayoutParameters,
    previous: Optional[ContentBox] = None,
) -> Optional[ContentBox]:
    """
    Resolve the preview box for a layout.

    A custom size without both dimensions keeps ``previous`` (which may be
    None); it is never an error.
    """
    if layout.envelope_size == EnvelopeSize.CUSTOM:
        if layout.custom_width and layout.custom_height:
            return ContentBox(
                width=min(layout.custom_width * CUSTOM_WIDTH_SCALE, CUSTOM_MAX_WIDTH),
                height=min(layout.custom_height * CUSTOM_HEIGHT_SCALE, CUSTOM_MAX_HEIGHT),
            )
        return previous

    width, height = ENVELOPE_SIZES.get(
        layout.envelope_size, ENVELOPE_SIZES[EnvelopeSize.STANDARD]
    )
    return ContentBox(width=width, height=height)


# ---------------------------------------------------------------------------
# Composition
# ---------------------------------------------------------------------------

def _envelope_fragment(return_block: str, recipient_html: str) -> str:
    return (
        '<div class="envelope">'
        f'<div class="return-address">{return_block}</div>'
        f'<div class="recipient-address">{recipient_html}</div>'
        "</div>"
    )


def compose_one(
    return_block: str,
    recipient_lines: Sequence[str],
    layout: LayoutParameters,
    previous_box: Optional[ContentBox] = None,
) -> EnvelopeDocument:
    """
    Build a single envelope document.

    Args:
        return_block: Pre-formatted return address, embedded as-is.
        recipient_lines: Output of format_address() for the recipient.
        layout: Size and typography settings.
        previous_box: Box to keep when a custom size lacks dimensions.
    """
    lines = list(recipient_lines)
    recipient_html = join_lines(lines, "html")
    return EnvelopeDocument(
        return_block=return_block,
        recipient_lines=lines,
        recipient_html=recipient_html,
        recipient_text=join_lines(lines, "text"),
        font_family=layout.font_family,
        font_size=layout.font_size,
        content_box=resolve_content_box(layout, previous_box),
        return_position=RETURN_POSITION,
        recipient_position=RECIPIENT_POSITION,
        html=_envelope_fragment(return_block, recipient_html),
    )


def compose_all(
    return_block: str,
    records: Sequence[AddressRecord],
    layout: LayoutParameters,
    on_progress: Optional[ProgressCallback] = None,
    previous_box: Optional[ContentBox] = None,
) -> list[EnvelopeDocument]:
    """
    Compose one envelope per record, in order.

    on_progress, when given, is called with (index, total) after each envelope
    (index is 1-based). It is advisory: a failing callback is logged and
    composition carries on.
    """
    total = len(records)
    box = resolve_content_box(layout, previous_box)
    documents: list[EnvelopeDocument] = []

    for index, record in enumerate(records, start=1):
        documents.append(
            compose_one(return_block, format_address(record), layout, previous_box=box)
        )
        if on_progress is not None:
            try:
                on_progress(index, total)
            except Exception:
                logger.warning("compose_all: progress callback failed", exc_info=True)

    logger.info("compose_all: composed %d envelopes", len(documents))
    return documents
