"""Enumerations used across models."""

from enum import Enum


class Persona(str, Enum):
    """System persona used to steer the completion provider.

    ``CODE_ASSISTANT`` backs the ``/chat`` endpoints, ``AGENT`` backs the
    ``/api/agent`` endpoints including operation planning.
    """

    CODE_ASSISTANT = "code_assistant"
    AGENT = "agent"


class ErrorCode(str, Enum):
    """Stable error codes exposed to API clients."""

    INVALID_MESSAGE = "INVALID_MESSAGE"
    TIMED_OUT = "TIMED_OUT"
    LLM_ERROR = "LLM_ERROR"
    TOKEN_LIMIT = "TOKEN_LIMIT"
    UNAUTHORIZED = "UNAUTHORIZED"
    FILE_PROCESSING_ERROR = "FILE_PROCESSING_ERROR"
    RAG_ERROR = "RAG_ERROR"
    INTERNAL_ERROR = "INTERNAL_ERROR"

    @property
    def default_message(self) -> str:
        """Human readable message used when no specific one is supplied."""
        return _DEFAULT_MESSAGES[self]


_DEFAULT_MESSAGES = {
    ErrorCode.INVALID_MESSAGE: "Message wasn't valid or was empty",
    ErrorCode.TIMED_OUT: "Chat response timed out",
    ErrorCode.LLM_ERROR: "Couldn't get a precise answer from LLM",
    ErrorCode.TOKEN_LIMIT: "Reached the maximum amount of tokens",
    ErrorCode.UNAUTHORIZED: "The API key provided is invalid",
    ErrorCode.FILE_PROCESSING_ERROR: "Error processing uploaded file",
    ErrorCode.RAG_ERROR: "Error in RAG operation",
    ErrorCode.INTERNAL_ERROR: "Internal server error",
}
