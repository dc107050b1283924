"""Prompt templates shared by the chat chains."""

from .planner import PLAN_HUMAN_PROMPT  # noqa: F401
from .rag import CONTEXT_DELIMITER, RAG_HUMAN_PROMPT  # noqa: F401
from .system import (  # noqa: F401
    AGENT_SYSTEM_PROMPT,
    CODE_ASSISTANT_SYSTEM_PROMPT,
    SYSTEM_PROMPTS,
    get_system_prompt,
)
