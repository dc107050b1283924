"""Model for a stored document segment."""

from __future__ import annotations

from typing import Any

from langchain_core.documents import Document
from pydantic import BaseModel, ConfigDict, Field

from ..utils.helpers import now_millis

# Metadata keys written alongside every stored chunk
FILE_NAME_KEY = "fileName"
CONVERSATION_ID_KEY = "conversationId"
USER_ID_KEY = "userId"
TIMESTAMP_KEY = "timestamp"


class RagChunk(BaseModel):
    """A bounded segment of an uploaded document.

    Chunks are append-only.  ``source_file_name`` together with
    ``conversation_id`` forms the key used to detect a file that has
    already been ingested for a conversation.
    """

    model_config = ConfigDict(frozen=True)

    text: str
    source_file_name: str
    conversation_id: str
    user_id: str | None = None
    created_at: int = Field(default_factory=now_millis)
    metadata: dict[str, Any] = Field(default_factory=dict)

    @property
    def dedup_key(self) -> tuple[str, str]:
        return self.source_file_name, self.conversation_id

    def to_document(self) -> Document:
        """Convert to a LangChain document with flat, store-friendly metadata."""
        metadata: dict[str, Any] = {
            key: value
            for key, value in self.metadata.items()
            if isinstance(value, (str, int, float, bool))
        }
        metadata.update(
            {
                FILE_NAME_KEY: self.source_file_name,
                CONVERSATION_ID_KEY: self.conversation_id,
                TIMESTAMP_KEY: self.created_at,
            }
        )
        if self.user_id is not None:
            metadata[USER_ID_KEY] = self.user_id
        return Document(page_content=self.text, metadata=metadata)

    @classmethod
    def from_document(cls, document: Document) -> "RagChunk":
        metadata = dict(document.metadata or {})
        created_at = metadata.get(TIMESTAMP_KEY)
        return cls(
            text=document.page_content,
            source_file_name=str(metadata.get(FILE_NAME_KEY, "")),
            conversation_id=str(metadata.get(CONVERSATION_ID_KEY, "")),
            user_id=metadata.get(USER_ID_KEY),
            created_at=int(created_at) if created_at is not None else now_millis(),
            metadata=metadata,
        )
