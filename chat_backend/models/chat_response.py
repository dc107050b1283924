"""Response model for the chat and agent APIs."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from ..utils.helpers import new_identifier
from .chat_request import PromptRequest


class ChatResponse(BaseModel):
    """Represents the assistant's reply to a prompt.

    Besides the generated ``content`` the response echoes the original
    message and carries the conversation and message identifiers so the
    client can continue the dialogue.  Failed requests on the file upload
    path reuse this shape with ``success`` set to ``False`` and ``error``
    populated.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    message: str | None = None
    content: str | None = None
    conversation_id: str
    user_id: str | None = None
    timestamp: datetime = Field(default_factory=datetime.now)
    message_id: str = Field(default_factory=new_identifier)
    success: bool = True
    error: str | None = None

    @classmethod
    def for_request(
        cls,
        request: PromptRequest,
        content: str | None,
        *,
        conversation_id: str | None = None,
        success: bool = True,
        error: str | None = None,
    ) -> "ChatResponse":
        """Build a response for ``request`` stamping fresh identifiers.

        The conversation identifier is taken from ``conversation_id``, then
        from the request, and generated when neither is available.  Every
        call produces a new ``message_id`` and timestamp.
        """
        return cls(
            message=request.message,
            content=content,
            conversation_id=conversation_id or request.conversation_id or new_identifier(),
            user_id=request.user_id,
            success=success,
            error=error,
        )
