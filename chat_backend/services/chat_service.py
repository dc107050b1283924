"""Orchestration service for the code-assistant chat endpoints.

The ChatService validates prompts, optionally ingests an uploaded file
and retrieves document context, asks the LLM for a response and wraps
it in a :class:`ChatResponse`.  It centralises error handling so
controllers can remain thin.
"""

from __future__ import annotations

from functools import lru_cache

from loguru import logger

from ..models.chat_request import FileUploadRequest, PromptRequest
from ..models.chat_response import ChatResponse
from ..models.enums import Persona
from ..utils.error_handler import LlmError, RagError, wrap_errors
from ..utils.helpers import new_identifier
from ..utils.validation import validate_prompt_request
from .llm_service import LLMService, get_llm_service
from .rag_service import RagService, get_rag_service


class ChatService:
    """Coordinates validation, retrieval and LLM generation for chat prompts."""

    persona = Persona.CODE_ASSISTANT

    def __init__(self, llm_service: LLMService | None = None, rag_service: RagService | None = None) -> None:
        self.llm_service = llm_service or get_llm_service()
        self.rag_service = rag_service or get_rag_service()

    @wrap_errors(LlmError)
    def process_prompt(self, request: PromptRequest) -> ChatResponse:
        """Answer a plain prompt with the code-assistant persona.

        Raises
        ------
        InvalidMessageError
            If the message is missing or blank.  No provider call is made.
        LlmError
            If the provider fails for a reason without a dedicated code.
        """
        validate_prompt_request(request)
        logger.info("Processing chat prompt for user: {}", request.user_id)
        content = self.llm_service.generate(self.persona, request.message)
        return ChatResponse.for_request(request, content)

    @wrap_errors(RagError)
    def process_prompt_with_rag(self, request: PromptRequest, rag_context: str) -> ChatResponse:
        """Answer a prompt grounded on previously retrieved ``rag_context``."""
        validate_prompt_request(request)
        logger.info("Processing chat prompt with RAG for user: {}", request.user_id)
        content = self.llm_service.generate_with_context(self.persona, request.message, rag_context)
        return ChatResponse.for_request(request, content)

    @wrap_errors(RagError)
    def process_prompt_with_file(self, upload: FileUploadRequest) -> ChatResponse:
        """Ingest an uploaded file and answer the prompt using its content.

        The steps run in order: validate the message, ingest the file
        (reusing chunks already stored for this file and conversation),
        retrieve context scoped to the conversation, then call the model
        once.  When retrieval yields nothing the prompt is answered
        without augmentation.
        """
        validate_prompt_request(upload)
        conversation_id = upload.conversation_id or new_identifier()
        request = upload.as_prompt(conversation_id)

        stored = self.rag_service.ingest(
            upload.file_bytes,
            upload.file_name,
            upload.mime_type,
            conversation_id,
            upload.user_id,
        )
        logger.info(
            "File {} {} for conversation {}",
            upload.file_name,
            "ingested" if stored else "already available",
            conversation_id,
        )

        rag_context = self.rag_service.retrieve(request.message, conversation_id)
        if rag_context:
            return self.process_prompt_with_rag(request, rag_context)

        logger.info("No document context available; answering without augmentation")
        content = self.llm_service.generate(self.persona, request.message)
        return ChatResponse.for_request(request, content)


@lru_cache()
def get_chat_service() -> ChatService:
    """Dependency injector for ChatService instances.

    FastAPI will call this function to obtain a singleton
    ChatService.  The lru_cache decorator ensures only one
    instance exists.
    """
    return ChatService()
