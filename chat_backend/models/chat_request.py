"""Request models for the chat and agent APIs."""

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class PromptRequest(BaseModel):
    """Represents a prompt sent to the chat or agent endpoints.

    ``message`` is deliberately optional at the schema level: an absent or
    blank message is rejected by :func:`validate_prompt_request` so the
    client receives the ``INVALID_MESSAGE`` error envelope instead of a
    generic schema error.  ``user_id`` and ``conversation_id`` are passed
    through verbatim; a conversation identifier is generated when omitted.
    Field names are camelCase on the wire (``userId``, ``conversationId``).
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    message: str | None = Field(
        default=None,
        max_length=9999,
        description="The user's message content.",
    )
    user_id: str | None = Field(
        default=None,
        description="Identifier of the user sending the message.",
    )
    conversation_id: str | None = Field(
        default=None,
        description="Optional conversation identifier.  Generated when omitted.",
    )


class FileUploadRequest(PromptRequest):
    """A prompt accompanied by a document to ingest for retrieval."""

    file_bytes: bytes = Field(default=b"", repr=False)
    file_name: str | None = None
    mime_type: str | None = None

    @property
    def file_size(self) -> int:
        return len(self.file_bytes)

    def as_prompt(self, conversation_id: str | None = None) -> PromptRequest:
        """Return the plain prompt part, optionally pinned to a conversation."""
        return PromptRequest(
            message=self.message,
            user_id=self.user_id,
            conversation_id=conversation_id or self.conversation_id,
        )
