"""
Print and preview page generation.

Wraps composed envelope fragments in a complete HTML page. The print page
uses physical units (inches, point font sizes, letter pages, one envelope per
page); the preview page uses pixel units sized from the resolved preview box.

Public API:
  render_print_html(documents, layout)   -> str
  render_preview_html(documents, layout) -> str
"""

from typing import Optional, Sequence

from envelope_printer.models.envelope import (
    BlockPosition,
    ContentBox,
    EnvelopeDocument,
    EnvelopeSize,
    LayoutParameters,
)
from envelope_printer.services.envelope_composer import (
    ENVELOPE_SIZES,
    RECIPIENT_POSITION,
    RETURN_POSITION,
)


def _position_css(position: BlockPosition) -> str:
    """Render the set offsets of a block as CSS declarations."""
    parts = []
    for side in ("top", "left", "bottom", "right"):
        value = getattr(position, side)
        if value is not None:
            parts.append(f"{side}: {value:g}in;")
    return " ".join(parts)


def _page(title: str, style: str, documents: Sequence[EnvelopeDocument]) -> str:
    body = "\n".join(doc.html for doc in documents)
    return (
        "<!DOCTYPE html>\n"
        "<html>\n"
        "<head>\n"
        f"<title>{title}</title>\n"
        f"<style>\n{style}\n</style>\n"
        "</head>\n"
        "<body>\n"
        f"{body}\n"
        "</body>\n"
        "</html>\n"
    )


def render_print_html(
    documents: Sequence[EnvelopeDocument],
    layout: LayoutParameters,
) -> str:
    """Build the printable page: one letter-sized page per envelope."""
    return_pos = documents[0].return_position if documents else RETURN_POSITION
    recipient_pos = documents[0].recipient_position if documents else RECIPIENT_POSITION
    font_size = f"{layout.font_size:g}pt"

    style = f"""
body {{ font-family: {layout.font_family}; margin: 0; padding: 0; background: white; }}
.envelope {{ width: 100%; height: 100vh; padding: 0.5in; position: relative; page-break-after: always; }}
.envelope:last-child {{ page-break-after: avoid; }}
.return-address {{ position: absolute; {_position_css(return_pos)} font-size: {font_size}; line-height: 1.4; white-space: pre-line; }}
.recipient-address {{ position: absolute; {_position_css(recipient_pos)} font-size: {font_size}; font-weight: 500; line-height: 1.5; }}
@page {{ margin: 0; size: letter; }}
""".strip()
    return _page("Envelope Print", style, documents)


def render_preview_html(
    documents: Sequence[EnvelopeDocument],
    layout: LayoutParameters,
) -> str:
    """Build the on-screen preview page with pixel-sized envelope boxes."""
    box: Optional[ContentBox] = documents[0].content_box if documents else None
    if box is None:
        width, height = ENVELOPE_SIZES[EnvelopeSize.STANDARD]
    else:
        width, height = box.width, box.height
    font_size = f"{layout.font_size:g}px"

    style = f"""
body {{ font-family: {layout.font_family}; margin: 0; padding: 20px; background: #f5f5f5; }}
.envelope {{ width: {width:g}px; height: {height:g}px; background: white; border: 1px solid #ddd; margin-bottom: 20px; position: relative; box-shadow: 0 2px 5px rgba(0,0,0,0.1); page-break-after: always; }}
.envelope:last-child {{ page-break-after: avoid; }}
.return-address {{ position: absolute; top: 20px; left: 20px; font-size: {font_size}; line-height: 1.4; white-space: pre-line; }}
.recipient-address {{ position: absolute; bottom: 40px; right: 60px; font-size: {font_size}; font-weight: 500; line-height: 1.5; }}
@media print {{
  body {{ background: white; padding: 0; }}
  .envelope {{ box-shadow: none; border: none; margin: 0; width: 100%; height: 100vh; }}
}}
""".strip()
    return _page("Envelope Print Preview", style, documents)
