"""Reusable LangChain prompt pipelines for chat generation."""

from __future__ import annotations

from typing import Any

from loguru import logger
from langchain_core.prompts import ChatPromptTemplate
from langchain_core.runnables import Runnable

from ..models.enums import Persona
from ..prompts import PLAN_HUMAN_PROMPT, RAG_HUMAN_PROMPT, get_system_prompt


class ChatChainManager:
    """Composes persona prompts with user input and runs them on a model.

    Each public method performs exactly one model invocation.  The user
    text is always passed as a template variable so braces in messages or
    retrieved documents are never interpreted as placeholders.
    """

    def __init__(self) -> None:
        self._prompt_template = ChatPromptTemplate.from_messages(
            [
                ("system", "{system_prompt}"),
                ("human", "{user_prompt}"),
            ]
        )

        self._rag_template = ChatPromptTemplate.from_messages(
            [
                ("system", "{system_prompt}"),
                ("human", RAG_HUMAN_PROMPT),
            ]
        )

        self._plan_template = ChatPromptTemplate.from_messages(
            [
                ("system", "{system_prompt}"),
                ("human", PLAN_HUMAN_PROMPT),
            ]
        )

    def invoke_standard(self, llm: Runnable, persona: Persona, prompt: str) -> str:
        """Run the persona system prompt followed by the raw user message."""
        return self._invoke_template(
            llm,
            self._prompt_template,
            {
                "system_prompt": get_system_prompt(persona),
                "user_prompt": prompt,
            },
        )

    def invoke_with_context(
        self,
        llm: Runnable,
        persona: Persona,
        question: str,
        context: str,
    ) -> str:
        """Answer ``question`` grounded on retrieved document ``context``."""
        logger.debug(
            "Invoking RAG chain with {} characters of context for question snippet={}",
            len(context),
            question[:80],
        )
        return self._invoke_template(
            llm,
            self._rag_template,
            {
                "system_prompt": get_system_prompt(persona),
                "context": context,
                "question": question,
            },
        )

    def invoke_plan(self, llm: Runnable, persona: Persona, operation: str) -> str:
        """Ask for a step-by-step plan covering what, why, outcome and risks."""
        return self._invoke_template(
            llm,
            self._plan_template,
            {
                "system_prompt": get_system_prompt(persona),
                "question": operation,
            },
        )

    def _invoke_template(
        self,
        llm: Runnable,
        template: ChatPromptTemplate,
        variables: dict[str, Any],
    ) -> str:
        """Execute a prompt template with the provided LLM and return string content."""
        chain = template | llm
        result = chain.invoke(variables)
        content = getattr(result, "content", result)
        if not isinstance(content, str):
            content = str(content)
        return content.strip()
