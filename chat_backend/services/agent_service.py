"""Service for agent-style requests and operation planning."""

from __future__ import annotations

from functools import lru_cache

from loguru import logger

from ..models.chat_request import PromptRequest
from ..models.chat_response import ChatResponse
from ..models.enums import Persona
from ..utils.error_handler import LlmError, wrap_errors
from ..utils.validation import validate_prompt_request
from .llm_service import LLMService, get_llm_service


class AgentService:
    """Answers requests with the agent persona.

    Both operations validate the request, call the model once and wrap
    the reply in a :class:`ChatResponse`.
    """

    persona = Persona.AGENT

    def __init__(self, llm_service: LLMService | None = None) -> None:
        self.llm_service = llm_service or get_llm_service()

    @wrap_errors(LlmError)
    def process_agent_request(self, request: PromptRequest) -> ChatResponse:
        validate_prompt_request(request)
        logger.info("Processing agent request for user: {}", request.user_id)
        content = self.llm_service.generate(self.persona, request.message)
        return ChatResponse.for_request(request, content)

    @wrap_errors(LlmError, "Failed to create operation plan")
    def plan_operation(self, request: PromptRequest) -> ChatResponse:
        """Ask for a step-by-step plan (what, why, expected outcome, risks)."""
        validate_prompt_request(request)
        logger.info("Planning operation for user: {}", request.user_id)
        content = self.llm_service.generate_plan(self.persona, request.message)
        return ChatResponse.for_request(request, content)


@lru_cache()
def get_agent_service() -> AgentService:
    """Dependency injector returning a singleton AgentService."""
    return AgentService()
