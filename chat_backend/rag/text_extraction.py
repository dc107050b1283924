"""Turn uploaded file bytes into plain text."""

from __future__ import annotations

from loguru import logger

from ..utils.validation import normalise_mime_type

PDF_MIME_TYPE = "application/pdf"


def extract_text(file_bytes: bytes, mime_type: str | None, file_name: str | None = None) -> str:
    """Decode ``file_bytes`` as UTF-8 text.

    Every supported type, JSON and XML included, is read as raw text; a
    leading byte order mark is dropped and undecodable bytes are
    replaced.  PDF parsing is not implemented yet: PDF uploads are
    decoded the same way, which yields little usable text for binary
    PDFs.
    """
    if normalise_mime_type(mime_type) == PDF_MIME_TYPE:
        logger.warning("PDF support not yet implemented; decoding {} as plain text", file_name)
    return file_bytes.decode("utf-8-sig", errors="replace")
