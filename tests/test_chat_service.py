from __future__ import annotations

import uuid

import pytest

from chat_backend.models.chat_request import FileUploadRequest, PromptRequest
from chat_backend.models.enums import ErrorCode, Persona
from chat_backend.services.agent_service import AgentService
from chat_backend.services.chat_service import ChatService
from chat_backend.utils.error_handler import (
    FileProcessingError,
    InvalidMessageError,
    LlmError,
    RagError,
    TimedOutError,
)

from conftest import FakeLLMService


@pytest.fixture
def chat_service(fake_llm: FakeLLMService, rag_service) -> ChatService:
    return ChatService(llm_service=fake_llm, rag_service=rag_service)


@pytest.mark.parametrize("message", [None, "", "   "])
def test_invalid_message_is_rejected_before_provider_call(
    chat_service: ChatService, fake_llm: FakeLLMService, message: str | None
) -> None:
    with pytest.raises(InvalidMessageError):
        chat_service.process_prompt(PromptRequest(message=message, user_id="u1"))

    assert fake_llm.calls == []


def test_prompt_response_generates_identifiers(chat_service: ChatService, fake_llm: FakeLLMService) -> None:
    response = chat_service.process_prompt(PromptRequest(message="Explain quicksort", user_id="u1"))

    assert response.success is True
    assert response.error is None
    assert response.content == fake_llm.reply
    assert response.message == "Explain quicksort"
    assert response.user_id == "u1"
    assert len(response.conversation_id) == 36
    uuid.UUID(response.conversation_id)
    assert response.message_id != response.conversation_id
    assert fake_llm.calls == [("generate", Persona.CODE_ASSISTANT, {"prompt": "Explain quicksort"})]


def test_prompt_response_keeps_caller_conversation(chat_service: ChatService) -> None:
    request = PromptRequest(message="Hi", user_id="u1", conversation_id="conv-42")

    first = chat_service.process_prompt(request)
    second = chat_service.process_prompt(request)

    assert first.conversation_id == second.conversation_id == "conv-42"
    assert first.message_id != second.message_id


def test_provider_failures_are_wrapped_as_llm_errors(rag_service) -> None:
    service = ChatService(llm_service=FakeLLMService(error=RuntimeError("connection reset")), rag_service=rag_service)

    with pytest.raises(LlmError) as exc_info:
        service.process_prompt(PromptRequest(message="Hi"))

    assert exc_info.value.code is ErrorCode.LLM_ERROR
    assert exc_info.value.message == "Couldn't get a precise answer from LLM"
    assert exc_info.value.details == "connection reset"


def test_domain_errors_pass_through_unchanged(rag_service) -> None:
    service = ChatService(llm_service=FakeLLMService(error=TimedOutError()), rag_service=rag_service)

    with pytest.raises(TimedOutError):
        service.process_prompt(PromptRequest(message="Hi"))


def test_prompt_with_rag_uses_context(chat_service: ChatService, fake_llm: FakeLLMService) -> None:
    response = chat_service.process_prompt_with_rag(PromptRequest(message="What is it?"), "It is a sorter.")

    assert response.success is True
    assert fake_llm.calls == [
        ("rag", Persona.CODE_ASSISTANT, {"question": "What is it?", "context": "It is a sorter."})
    ]


def test_prompt_with_rag_failures_are_wrapped_as_rag_errors(rag_service) -> None:
    service = ChatService(llm_service=FakeLLMService(error=ValueError("bad response")), rag_service=rag_service)

    with pytest.raises(RagError) as exc_info:
        service.process_prompt_with_rag(PromptRequest(message="What?"), "context")

    assert exc_info.value.details == "bad response"


def _upload(**overrides) -> FileUploadRequest:
    fields = {
        "message": "What does the quicksort function return?",
        "user_id": "u1",
        "file_bytes": b"def quicksort(items):\n    return sorted(items)",
        "file_name": "sort.py.txt",
        "mime_type": "text/plain",
    }
    fields.update(overrides)
    return FileUploadRequest(**fields)


def test_prompt_with_file_ingests_retrieves_and_answers(
    chat_service: ChatService, fake_llm: FakeLLMService, store
) -> None:
    response = chat_service.process_prompt_with_file(_upload())

    assert response.success is True
    assert store.add_calls == 1
    [(kind, persona, variables)] = fake_llm.calls
    assert kind == "rag"
    assert persona is Persona.CODE_ASSISTANT
    assert "def quicksort(items)" in variables["context"]
    [chunk] = store.similarity_search("quicksort", k=5)
    assert chunk.conversation_id == response.conversation_id


def test_prompt_with_file_reuses_stored_file(chat_service: ChatService, store) -> None:
    first = chat_service.process_prompt_with_file(_upload(conversation_id="c1"))
    second = chat_service.process_prompt_with_file(_upload(conversation_id="c1"))

    assert first.conversation_id == second.conversation_id == "c1"
    assert store.add_calls == 1


def test_prompt_with_file_answers_plainly_without_context(
    chat_service: ChatService, fake_llm: FakeLLMService
) -> None:
    chat_service.process_prompt_with_file(_upload(message="zzz"))

    assert [call[0] for call in fake_llm.calls] == ["generate"]


def test_prompt_with_oversized_file_fails_without_ingestion(
    chat_service: ChatService, fake_llm: FakeLLMService, store
) -> None:
    upload = _upload(file_bytes=b"x" * (50 * 1024 * 1024))

    with pytest.raises(FileProcessingError, match="File size exceeds maximum allowed size of 10MB"):
        chat_service.process_prompt_with_file(upload)

    assert store.contains_calls == 0
    assert store.add_calls == 0
    assert fake_llm.calls == []


def test_prompt_with_file_validates_message_first(
    chat_service: ChatService, fake_llm: FakeLLMService, store
) -> None:
    with pytest.raises(InvalidMessageError):
        chat_service.process_prompt_with_file(_upload(message=" "))

    assert store.contains_calls == 0
    assert fake_llm.calls == []


def test_agent_request_uses_agent_persona(fake_llm: FakeLLMService) -> None:
    service = AgentService(llm_service=fake_llm)

    response = service.process_agent_request(PromptRequest(message="Review this module", user_id="u2"))

    assert response.success is True
    assert response.user_id == "u2"
    assert fake_llm.calls == [("generate", Persona.AGENT, {"prompt": "Review this module"})]


def test_plan_operation_uses_plan_prompt(fake_llm: FakeLLMService) -> None:
    service = AgentService(llm_service=fake_llm)

    service.plan_operation(PromptRequest(message="Split the monolith"))

    assert fake_llm.calls == [("plan", Persona.AGENT, {"operation": "Split the monolith"})]


def test_plan_failures_carry_plan_message() -> None:
    service = AgentService(llm_service=FakeLLMService(error=RuntimeError("upstream 502")))

    with pytest.raises(LlmError) as exc_info:
        service.plan_operation(PromptRequest(message="Split the monolith"))

    assert exc_info.value.message == "Failed to create operation plan"
    assert exc_info.value.details == "upstream 502"


def test_agent_rejects_blank_message(fake_llm: FakeLLMService) -> None:
    with pytest.raises(InvalidMessageError):
        AgentService(llm_service=fake_llm).plan_operation(PromptRequest(message=""))

    assert fake_llm.calls == []
