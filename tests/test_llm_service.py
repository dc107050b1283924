from __future__ import annotations

import httpx
import openai
import pytest
from langchain_core.language_models.fake_chat_models import FakeListChatModel
from langchain_core.messages import AIMessage
from langchain_core.runnables import RunnableLambda

from chat_backend.config.llm_config import LlmConfig
from chat_backend.models.enums import ErrorCode, Persona
from chat_backend.prompts import AGENT_SYSTEM_PROMPT, CODE_ASSISTANT_SYSTEM_PROMPT
from chat_backend.services.llm_service import LLMService, classify_provider_error
from chat_backend.utils.error_handler import TimedOutError, TokenLimitError, UnauthorizedError

REQUEST = httpx.Request("POST", "https://api.openai.com/v1/chat/completions")


class CapturingModel:
    """Builds a runnable that records the rendered messages."""

    def __init__(self, reply: str = "  done  ") -> None:
        self.reply = reply
        self.messages: list[list] = []

    def runnable(self) -> RunnableLambda:
        def respond(prompt_value):
            self.messages.append(prompt_value.to_messages())
            return AIMessage(content=self.reply)

        return RunnableLambda(respond)


def test_generate_returns_stripped_model_output() -> None:
    service = LLMService(llm=FakeListChatModel(responses=["  Quicksort partitions around a pivot.  "]))

    assert service.generate(Persona.CODE_ASSISTANT, "Explain quicksort") == "Quicksort partitions around a pivot."


def test_generate_sends_persona_system_prompt_and_raw_message() -> None:
    model = CapturingModel()
    service = LLMService(llm=model.runnable())

    assert service.generate(Persona.AGENT, "Refactor {this} module") == "done"

    [messages] = model.messages
    assert messages[0].type == "system"
    assert messages[0].content == AGENT_SYSTEM_PROMPT
    assert messages[1].type == "human"
    assert messages[1].content == "Refactor {this} module"


def test_generate_with_context_embeds_context_and_question() -> None:
    model = CapturingModel()
    service = LLMService(llm=model.runnable())

    service.generate_with_context(Persona.CODE_ASSISTANT, "What does it do?", "def f(): return {}")

    [messages] = model.messages
    assert messages[0].content == CODE_ASSISTANT_SYSTEM_PROMPT
    human = messages[1].content
    assert human.startswith("Based on the following document context")
    assert "CONTEXT:\ndef f(): return {}" in human
    assert human.endswith("QUESTION:\nWhat does it do?")


def test_generate_plan_requests_structured_steps() -> None:
    model = CapturingModel()
    service = LLMService(llm=model.runnable())

    service.generate_plan(Persona.AGENT, "Migrate the database")

    human = model.messages[0][1].content
    assert "Migrate the database" in human
    for fragment in ("What needs to be done", "Why it's necessary", "Expected outcome", "Potential risks"):
        assert fragment in human


def _raising(exc: Exception) -> RunnableLambda:
    def fail(_):
        raise exc

    return RunnableLambda(fail)


def test_timeouts_are_reported_as_timed_out() -> None:
    service = LLMService(llm=_raising(openai.APITimeoutError(request=REQUEST)))

    with pytest.raises(TimedOutError) as exc_info:
        service.generate(Persona.CODE_ASSISTANT, "hello")

    assert exc_info.value.code is ErrorCode.TIMED_OUT


def test_authentication_failures_are_reported_as_unauthorized() -> None:
    error = openai.AuthenticationError(
        "Incorrect API key provided",
        response=httpx.Response(401, request=REQUEST),
        body=None,
    )

    assert isinstance(classify_provider_error(error), UnauthorizedError)


def test_context_length_errors_are_reported_as_token_limit() -> None:
    error = openai.BadRequestError(
        "maximum context length exceeded",
        response=httpx.Response(400, request=REQUEST),
        body={"code": "context_length_exceeded", "message": "too long"},
    )

    assert isinstance(classify_provider_error(error), TokenLimitError)


def test_unclassified_errors_propagate_unchanged() -> None:
    service = LLMService(llm=_raising(RuntimeError("boom")))

    with pytest.raises(RuntimeError, match="boom"):
        service.generate(Persona.CODE_ASSISTANT, "hello")


def test_client_kwargs_follow_configuration() -> None:
    config = LlmConfig(
        api_key="sk-test",
        base_url="http://localhost:11434/v1",
        model="llama3",
        max_tokens=256,
        timeout=12,
        max_retries=0,
    )

    kwargs = LLMService._build_llm_kwargs(config)

    assert kwargs == {
        "api_key": "sk-test",
        "model": "llama3",
        "temperature": 0.7,
        "timeout": 12,
        "max_retries": 0,
        "base_url": "http://localhost:11434/v1",
        "max_tokens": 256,
    }
