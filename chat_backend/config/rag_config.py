"""Settings for document ingestion and retrieval.

The defaults mirror the upload policy the chat UI was built against:
text-like documents of at most 10 MiB, split into chunks of roughly
800 tokens.  ``RAG_STORE`` selects between the process-local store used
in development and tests and a persistent Chroma collection.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Annotated

from dotenv import load_dotenv
from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict

load_dotenv()

SUPPORTED_STORES = {"in_memory", "chroma"}

DEFAULT_ALLOWED_MIME_TYPES = [
    "application/pdf",
    "text/plain",
    "application/json",
    "application/xml",
    "text/xml",
]


class RagConfig(BaseSettings):
    """Configuration for the RAG pipeline and its document store."""

    store: str = Field("in_memory", alias="RAG_STORE")
    persist_directory: str = Field("chroma_db", alias="RAG_PERSIST_DIRECTORY")
    collection_name: str = Field("chat_backend_documents", alias="RAG_COLLECTION_NAME")
    embedding_model: str = Field("text-embedding-3-small", alias="RAG_EMBEDDING_MODEL")
    top_k: int = Field(5, alias="RAG_TOP_K")
    chunk_size: int = Field(800, alias="RAG_CHUNK_SIZE")
    chunk_overlap: int = Field(100, alias="RAG_CHUNK_OVERLAP")
    max_file_size_bytes: int = Field(10 * 1024 * 1024, alias="RAG_MAX_FILE_SIZE_BYTES")
    allowed_mime_types: Annotated[list[str], NoDecode] = Field(
        default_factory=lambda: list(DEFAULT_ALLOWED_MIME_TYPES),
        alias="RAG_ALLOWED_MIME_TYPES",
    )

    @field_validator("store")
    @classmethod
    def validate_store(cls, value: str) -> str:
        candidate = value.strip().lower()
        if candidate not in SUPPORTED_STORES:
            raise ValueError("RAG_STORE must be in_memory or chroma")
        return candidate

    @field_validator("top_k", "chunk_size", "max_file_size_bytes")
    @classmethod
    def validate_positive(cls, value: int) -> int:
        if value <= 0:
            raise ValueError("RAG sizes and limits must be positive")
        return value

    @field_validator("allowed_mime_types", mode="before")
    @classmethod
    def parse_mime_types(cls, value: list[str] | str | None) -> list[str]:
        if value in (None, ""):
            return list(DEFAULT_ALLOWED_MIME_TYPES)
        if isinstance(value, str):
            value = value.split(",")
        return [part.strip().lower() for part in value if part.strip()]

    @model_validator(mode="after")
    def validate_overlap(self) -> "RagConfig":
        if not 0 <= self.chunk_overlap < self.chunk_size:
            raise ValueError("RAG_CHUNK_OVERLAP must be between 0 and RAG_CHUNK_SIZE")
        return self

    @property
    def max_file_size_mb(self) -> int:
        """Upload limit expressed in whole mebibytes for user-facing messages."""

        return self.max_file_size_bytes // (1024 * 1024)

    model_config = SettingsConfigDict(env_file=".env", extra="ignore", populate_by_name=True)


@lru_cache()
def get_rag_config() -> RagConfig:
    """Return a cached RAG configuration instance."""

    return RagConfig()
