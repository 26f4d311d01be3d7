"""
Envelope router.

Endpoints:
  POST   /upload                         : import an address file
  GET    /{upload_id}/addresses/{index}  : formatted lines for one address
  POST   /{upload_id}/preview            : compose one envelope for preview
  POST   /{upload_id}/print              : printable HTML (all or one address)
  POST   /{upload_id}/print-preview      : on-screen preview HTML for all addresses
  DELETE /{upload_id}                    : discard an upload
"""

import logging
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Optional

from fastapi import APIRouter, File, HTTPException, UploadFile
from fastapi.responses import HTMLResponse

from envelope_printer import config
from envelope_printer.models.address import AddressRecord
from envelope_printer.models.envelope import (
    ContentBox,
    EnvelopeDocument,
    PreviewRequest,
    PrintRequest,
)
from envelope_printer.services.address_formatter import format_address
from envelope_printer.services.address_import import import_addresses
from envelope_printer.services.envelope_composer import compose_all, compose_one
from envelope_printer.services.errors import EnvelopeImportError
from envelope_printer.services.print_document import render_preview_html, render_print_html

logger = logging.getLogger(__name__)

router = APIRouter()


# ---------------------------------------------------------------------------
# In-memory upload store with TTL
# ---------------------------------------------------------------------------

@dataclass
class _UploadEntry:
    """Addresses imported from one file, kept until the TTL expires."""
    addresses: list[AddressRecord]
    filename: str
    source_kind: str
    # Last resolved preview box; kept when a custom size lacks dimensions.
    preview_box: Optional[ContentBox] = None
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))


# Module-level dict: upload_id -> _UploadEntry
_upload_store: dict[str, _UploadEntry] = {}


def _is_expired(entry: _UploadEntry, now: datetime) -> bool:
    return (now - entry.created_at).total_seconds() > config.ENVELOPE_UPLOAD_TTL_SECONDS


def _purge_expired() -> None:
    """Drop every entry past its TTL."""
    now = datetime.now(timezone.utc)
    expired = [key for key, entry in _upload_store.items() if _is_expired(entry, now)]
    for key in expired:
        del _upload_store[key]
    if expired:
        logger.debug("Purged %d expired upload(s)", len(expired))


def _store_upload(addresses: list[AddressRecord], filename: str, source_kind: str) -> str:
    """Store imported addresses in memory and return the upload_id."""
    _purge_expired()
    upload_id = str(uuid.uuid4())
    _upload_store[upload_id] = _UploadEntry(
        addresses=addresses,
        filename=filename,
        source_kind=source_kind,
    )
    return upload_id


def _get_upload(upload_id: str) -> Optional[_UploadEntry]:
    """Retrieve an upload entry, returning None if expired or missing."""
    entry = _upload_store.get(upload_id)
    if entry is None:
        return None

    if _is_expired(entry, datetime.now(timezone.utc)):
        del _upload_store[upload_id]
        return None

    return entry


def _error(status_code: int, message: str, error_code: str) -> HTTPException:
    """Build an HTTPException with a structured detail payload."""
    return HTTPException(
        status_code=status_code,
        detail={"detail": message, "error_code": error_code},
    )


def _require_upload(upload_id: str) -> _UploadEntry:
    entry = _get_upload(upload_id)
    if entry is None:
        raise _error(404, "Upload not found or expired. Please upload the file again.", "upload_not_found")
    return entry


def _require_address(entry: _UploadEntry, index: int) -> AddressRecord:
    if index < 0 or index >= len(entry.addresses):
        raise _error(404, f"No address at position {index}.", "address_not_found")
    return entry.addresses[index]


def _return_block(requested: Optional[str]) -> str:
    return requested if requested is not None else config.ENVELOPE_RETURN_ADDRESS


# ---------------------------------------------------------------------------
# Endpoints
# ---------------------------------------------------------------------------

@router.post("/upload")
async def upload_file(file: UploadFile = File(...)) -> dict:
    """
    Import an address file and return a summary with the first address.

    Rows without a usable address are skipped; the upload fails only when
    no row survives.
    """
    if getattr(file, "size", None) is not None and file.size > config.ENVELOPE_MAX_FILE_BYTES:
        raise _error(400, "File exceeds the upload size limit.", "file_too_large")

    file_content = await file.read()

    if len(file_content) > config.ENVELOPE_MAX_FILE_BYTES:
        raise _error(400, "File exceeds the upload size limit.", "file_too_large")

    filename = file.filename or ""

    try:
        result = await import_addresses(file_content, filename)
    except EnvelopeImportError as e:
        logger.warning("Upload of %r rejected: %s", filename, e.message)
        raise _error(400, f"Error reading file: {e.message}", e.error_code)

    upload_id = _store_upload(result.addresses, filename, result.source_kind)

    return {
        "upload_id": upload_id,
        "filename": filename,
        "source_kind": result.source_kind,
        "total_addresses": len(result.addresses),
        "total_rows": result.total_rows,
        "skipped_rows": result.skipped_rows,
        "first_address": format_address(result.addresses[0]),
    }


@router.get("/{upload_id}/addresses/{index}")
async def get_address(upload_id: str, index: int) -> dict:
    """Return the formatted lines of one address plus navigation state."""
    entry = _require_upload(upload_id)
    record = _require_address(entry, index)
    total = len(entry.addresses)
    return {
        "index": index,
        "total": total,
        "lines": format_address(record),
        "has_previous": index > 0,
        "has_next": index < total - 1,
    }


@router.post("/{upload_id}/preview")
async def preview_envelope(upload_id: str, body: PreviewRequest) -> EnvelopeDocument:
    """Compose the envelope for one address with the requested layout."""
    entry = _require_upload(upload_id)
    record = _require_address(entry, body.index)

    document = compose_one(
        _return_block(body.return_address),
        format_address(record),
        body.layout,
        previous_box=entry.preview_box,
    )
    entry.preview_box = document.content_box
    return document


@router.post("/{upload_id}/print", response_class=HTMLResponse)
async def print_envelopes(upload_id: str, body: PrintRequest) -> HTMLResponse:
    """Return a printable page for every address, or for one when index is set."""
    entry = _require_upload(upload_id)
    return_block = _return_block(body.return_address)

    if body.index is None:
        documents = compose_all(return_block, entry.addresses, body.layout)
    else:
        record = _require_address(entry, body.index)
        documents = [compose_one(return_block, format_address(record), body.layout)]

    return HTMLResponse(content=render_print_html(documents, body.layout))


@router.post("/{upload_id}/print-preview", response_class=HTMLResponse)
async def print_preview(upload_id: str, body: PrintRequest) -> HTMLResponse:
    """Return the on-screen preview page for every address."""
    entry = _require_upload(upload_id)
    documents = compose_all(
        _return_block(body.return_address),
        entry.addresses,
        body.layout,
        previous_box=entry.preview_box,
    )
    return HTMLResponse(content=render_preview_html(documents, body.layout))


@router.delete("/{upload_id}", status_code=204)
async def delete_upload(upload_id: str) -> None:
    """Discard an upload so the host can start over."""
    if _upload_store.pop(upload_id, None) is None:
        raise _error(404, "Upload not found or expired.", "upload_not_found")
