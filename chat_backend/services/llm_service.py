"""Service encapsulating interactions with the language model.

Uses LangChain's ChatOpenAI integration to communicate with any
OpenAI-compatible chat completion endpoint.  The service renders the
persona prompts through :class:`ChatChainManager` and translates
provider failures that have a dedicated error code.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Callable

import httpx
import openai
from loguru import logger
from langchain_core.runnables import Runnable
from langchain_openai import ChatOpenAI

from ..chains import ChatChainManager
from ..config.llm_config import LlmConfig, get_llm_config
from ..models.enums import Persona
from ..utils.error_handler import (
    AIException,
    TimedOutError,
    TokenLimitError,
    UnauthorizedError,
)

CONTEXT_LENGTH_EXCEEDED = "context_length_exceeded"


class LLMService:
    """Service for generating responses from the language model.

    The underlying :class:`~langchain_openai.ChatOpenAI` client is built
    from a unified :class:`LlmConfig`.  If a ``base_url`` is provided the
    client talks to that endpoint, otherwise to the default OpenAI API.
    ``timeout`` bounds each provider call and ``max_retries`` is the
    client's own retry allowance for transient errors; this service itself
    invokes the model once per request.

    A pre-built model (any LangChain runnable accepting chat messages) may
    be injected instead, which is how tests and alternative providers plug
    in.
    """

    def __init__(self, llm_config: LlmConfig | None = None, llm: Runnable | None = None) -> None:
        if llm is None:
            self.llm_config = llm_config or get_llm_config()
            llm = ChatOpenAI(**self._build_llm_kwargs(self.llm_config))
        else:
            self.llm_config = llm_config
        self.llm = llm
        self.chain_manager = ChatChainManager()

    @staticmethod
    def _build_llm_kwargs(llm_config: LlmConfig) -> dict[str, object]:
        kwargs: dict[str, object] = {
            "api_key": llm_config.api_key,
            "model": llm_config.model,
            "temperature": llm_config.temperature,
            "timeout": llm_config.timeout,
            "max_retries": llm_config.max_retries,
        }
        if llm_config.base_url:
            kwargs["base_url"] = llm_config.base_url
        if llm_config.max_tokens:
            kwargs["max_tokens"] = llm_config.max_tokens
        return kwargs

    def generate(self, persona: Persona, prompt: str) -> str:
        """Return the model's reply to ``prompt`` under ``persona``."""
        logger.debug("Generating response persona={} prompt={!r}", persona.value, prompt[:80])
        return self._call_provider(
            lambda: self.chain_manager.invoke_standard(self.llm, persona, prompt)
        )

    def generate_with_context(self, persona: Persona, question: str, context: str) -> str:
        """Return the model's answer to ``question`` grounded on ``context``."""
        logger.debug("Generating RAG response persona={} question={!r}", persona.value, question[:80])
        return self._call_provider(
            lambda: self.chain_manager.invoke_with_context(self.llm, persona, question, context)
        )

    def generate_plan(self, persona: Persona, operation: str) -> str:
        """Return a step-by-step plan for ``operation``."""
        logger.debug("Generating plan persona={} operation={!r}", persona.value, operation[:80])
        return self._call_provider(
            lambda: self.chain_manager.invoke_plan(self.llm, persona, operation)
        )

    def _call_provider(self, call: Callable[[], str]) -> str:
        try:
            return call()
        except AIException:
            raise
        except Exception as exc:
            classified = classify_provider_error(exc)
            if classified is None:
                raise
            logger.error("Provider call failed with {}: {}", classified.code.value, exc)
            raise classified from exc


def classify_provider_error(exc: Exception) -> AIException | None:
    """Map provider failures with a dedicated error code, else ``None``."""
    if isinstance(exc, (openai.APITimeoutError, httpx.TimeoutException, TimeoutError)):
        return TimedOutError(details=str(exc))
    if isinstance(exc, openai.AuthenticationError):
        return UnauthorizedError(details=str(exc))
    if isinstance(exc, openai.BadRequestError) and getattr(exc, "code", None) == CONTEXT_LENGTH_EXCEEDED:
        return TokenLimitError(details=str(exc))
    return None


@lru_cache()
def get_llm_service() -> LLMService:
    """Return the process-wide LLMService shared by the chat and agent services."""
    return LLMService()
