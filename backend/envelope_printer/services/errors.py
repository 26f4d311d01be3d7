"""
Error kinds raised by the address import pipeline.

Every error carries a human-readable ``message`` and a machine-readable
``error_code`` so the HTTP layer can forward both to the client unchanged.
All of them end the current import attempt; nothing is retried.
"""

from typing import Optional


class EnvelopeImportError(Exception):
    """Base class for failures while turning an uploaded file into addresses."""
    def __init__(self, message: str, error_code: str):
        super().__init__(message)
        self.error_code = error_code
        self.message = message


class UnsupportedFormat(EnvelopeImportError):
    """Raised when the file extension is not one we can read."""
    def __init__(self, extension: str):
        super().__init__(
            f"Unsupported file format '{extension}'. Please use CSV or Excel files.",
            "unsupported_format",
        )
        self.extension = extension


class DecodeFailure(EnvelopeImportError):
    """Raised when the bytes cannot be decoded by the underlying reader."""
    def __init__(self, message: str, cause: Optional[BaseException] = None):
        super().__init__(message, "decode_failed")
        self.cause = cause


class EmptyTable(EnvelopeImportError):
    """Raised when a file has no header row or no data rows."""
    def __init__(self, message: str = "File must contain headers and at least one address"):
        super().__init__(message, "empty_table")


class NoValidRecords(EnvelopeImportError):
    """Raised when every data row was rejected by address validation."""
    def __init__(self, message: str = "No valid addresses found in the file"):
        super().__init__(message, "no_valid_records")
