"""Input checks performed before any provider or store call."""

from __future__ import annotations

from ..config.rag_config import RagConfig
from ..models.chat_request import PromptRequest
from .error_handler import FileProcessingError, InvalidMessageError


def is_blank(value: str | None) -> bool:
    return value is None or not value.strip()


def validate_prompt_request(request: PromptRequest | None) -> PromptRequest:
    """Reject absent requests and missing, empty or whitespace-only messages.

    User and conversation identifiers are not inspected.  Returns the
    request unchanged so callers can chain the check.
    """
    if request is None or is_blank(request.message):
        raise InvalidMessageError()
    return request


def normalise_mime_type(mime_type: str | None) -> str:
    """Strip parameters such as ``charset`` and lower-case the media type."""
    if not mime_type:
        return ""
    return mime_type.split(";", 1)[0].strip().lower()


def validate_upload(file_bytes: bytes | None, mime_type: str | None, rag_config: RagConfig) -> None:
    """Apply the upload policy: non-empty, within the size cap, allowed type."""
    if not file_bytes:
        raise FileProcessingError("File is empty or null")

    if len(file_bytes) > rag_config.max_file_size_bytes:
        raise FileProcessingError(
            f"File size exceeds maximum allowed size of {rag_config.max_file_size_mb}MB"
        )

    if normalise_mime_type(mime_type) not in rag_config.allowed_mime_types:
        raise FileProcessingError(
            "File type not supported. Allowed types: PDF, TXT, JSON, XML",
            details=f"Received content type: {mime_type or '<none>'}",
        )
