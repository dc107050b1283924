from __future__ import annotations

import pytest
from pydantic import ValidationError

from chat_backend.config.rag_config import RagConfig
from chat_backend.models.chat_request import PromptRequest
from chat_backend.models.enums import ErrorCode
from chat_backend.utils.error_handler import FileProcessingError, InvalidMessageError
from chat_backend.utils.validation import (
    normalise_mime_type,
    validate_prompt_request,
    validate_upload,
)


@pytest.mark.parametrize("message", [None, "", "   ", "\n\t "])
def test_blank_messages_are_rejected(message: str | None) -> None:
    with pytest.raises(InvalidMessageError) as exc_info:
        validate_prompt_request(PromptRequest(message=message, user_id="u1"))

    assert exc_info.value.code is ErrorCode.INVALID_MESSAGE
    assert exc_info.value.message == "Message wasn't valid or was empty"


def test_missing_request_is_rejected() -> None:
    with pytest.raises(InvalidMessageError):
        validate_prompt_request(None)


def test_identifiers_are_not_validated() -> None:
    request = PromptRequest(message=" hi ", user_id="", conversation_id="  ")

    assert validate_prompt_request(request) is request


def test_prompt_request_accepts_camel_case_and_is_frozen() -> None:
    request = PromptRequest.model_validate({"message": "hi", "userId": "u1", "conversationId": "c1"})

    assert request.user_id == "u1"
    assert request.conversation_id == "c1"
    with pytest.raises(ValidationError):
        request.message = "changed"


def test_upload_policy_rejects_empty_payload() -> None:
    with pytest.raises(FileProcessingError, match="File is empty or null"):
        validate_upload(b"", "text/plain", RagConfig())


def test_upload_policy_rejects_oversized_payload() -> None:
    config = RagConfig()
    payload = b"x" * (config.max_file_size_bytes + 1)

    with pytest.raises(FileProcessingError, match="File size exceeds maximum allowed size of 10MB"):
        validate_upload(payload, "text/plain", config)


def test_upload_policy_rejects_unsupported_type() -> None:
    with pytest.raises(FileProcessingError) as exc_info:
        validate_upload(b"GIF89a", "image/gif", RagConfig())

    assert exc_info.value.message == "File type not supported. Allowed types: PDF, TXT, JSON, XML"
    assert "image/gif" in exc_info.value.details


@pytest.mark.parametrize(
    "mime_type",
    ["application/pdf", "text/plain; charset=utf-8", "APPLICATION/JSON", "text/xml", "application/xml"],
)
def test_upload_policy_accepts_allowed_types(mime_type: str) -> None:
    validate_upload(b"content", mime_type, RagConfig())


def test_normalise_mime_type() -> None:
    assert normalise_mime_type("Text/Plain; charset=UTF-8") == "text/plain"
    assert normalise_mime_type(None) == ""
