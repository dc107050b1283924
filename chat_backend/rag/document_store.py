"""Document stores backing retrieval-augmented generation.

Two implementations share the :class:`DocumentStore` interface: a
process-local list scanned linearly, used in development and tests, and
a persistent Chroma collection embedding chunks through the configured
OpenAI-compatible endpoint.  Both serialise the "already ingested?"
check with the insert so that concurrent uploads of the same file into
the same conversation store it once.
"""

from __future__ import annotations

import re
import threading
from abc import ABC, abstractmethod
from typing import Sequence

from loguru import logger
from langchain_chroma import Chroma
from langchain_openai import OpenAIEmbeddings

from ..config.llm_config import LlmConfig, get_llm_config
from ..config.rag_config import RagConfig
from ..models.rag_chunk import CONVERSATION_ID_KEY, FILE_NAME_KEY, RagChunk

_TERM_PATTERN = re.compile(r"\w+")


class DocumentStore(ABC):
    """Append-only store of :class:`RagChunk` objects with similarity search."""

    def __init__(self) -> None:
        self._lock = threading.RLock()

    @abstractmethod
    def add(self, chunks: Sequence[RagChunk]) -> None:
        """Insert ``chunks`` in a single batch."""

    @abstractmethod
    def contains(self, file_name: str, conversation_id: str) -> bool:
        """Return whether chunks exist for the ``(file_name, conversation_id)`` key."""

    @abstractmethod
    def similarity_search(
        self,
        query: str,
        k: int,
        conversation_id: str | None = None,
    ) -> list[RagChunk]:
        """Return up to ``k`` chunks relevant to ``query``, best first."""

    def add_if_absent(
        self,
        file_name: str,
        conversation_id: str,
        chunks: Sequence[RagChunk],
    ) -> bool:
        """Insert ``chunks`` unless the key is already present.

        The lookup and the insert happen under the store lock.  Returns
        ``True`` when the chunks were stored and ``False`` when existing
        chunks were reused, in which case :meth:`add` is not called.
        """
        with self._lock:
            if self.contains(file_name, conversation_id):
                logger.info(
                    "File {} already stored for conversation {}. Reusing existing embeddings.",
                    file_name,
                    conversation_id,
                )
                return False
            self.add(chunks)
            return True


class InMemoryDocumentStore(DocumentStore):
    """Ordered in-process list of chunks searched by keyword overlap.

    Chunks containing the whole query (case-insensitive) rank first, the
    rest by how many distinct query terms they contain.  Chunks matching
    nothing are left out and insertion order breaks ties.
    """

    def __init__(self) -> None:
        super().__init__()
        self._chunks: list[RagChunk] = []

    def __len__(self) -> int:
        return len(self._chunks)

    def add(self, chunks: Sequence[RagChunk]) -> None:
        with self._lock:
            self._chunks.extend(chunks)
        logger.debug("Stored {} chunks in memory ({} total)", len(chunks), len(self._chunks))

    def contains(self, file_name: str, conversation_id: str) -> bool:
        with self._lock:
            return any(chunk.dedup_key == (file_name, conversation_id) for chunk in self._chunks)

    def similarity_search(
        self,
        query: str,
        k: int,
        conversation_id: str | None = None,
    ) -> list[RagChunk]:
        lowered = query.strip().lower()
        if not lowered:
            return []
        terms = set(_TERM_PATTERN.findall(lowered))

        with self._lock:
            candidates = list(self._chunks)

        scored: list[tuple[int, int, int, RagChunk]] = []
        for position, chunk in enumerate(candidates):
            if conversation_id is not None and chunk.conversation_id != conversation_id:
                continue
            text = chunk.text.lower()
            phrase_hit = 1 if lowered in text else 0
            term_hits = sum(1 for term in terms if term in text)
            if phrase_hit or term_hits:
                scored.append((-phrase_hit, -term_hits, position, chunk))

        scored.sort(key=lambda item: item[:3])
        return [chunk for *_, chunk in scored[:k]]

    def clear(self) -> None:
        with self._lock:
            self._chunks.clear()


class ChromaDocumentStore(DocumentStore):
    """Chroma collection accessed through LangChain's vector store wrapper."""

    def __init__(self, vectorstore: Chroma) -> None:
        super().__init__()
        self.vectorstore = vectorstore

    @classmethod
    def from_config(cls, rag_config: RagConfig, llm_config: LlmConfig) -> "ChromaDocumentStore":
        embed_kwargs: dict[str, object] = {
            "api_key": llm_config.api_key,
            "model": rag_config.embedding_model,
        }
        if llm_config.base_url:
            embed_kwargs["base_url"] = llm_config.base_url
        embeddings = OpenAIEmbeddings(**embed_kwargs)

        vectorstore = Chroma(
            collection_name=rag_config.collection_name,
            persist_directory=rag_config.persist_directory,
            embedding_function=embeddings,
        )
        return cls(vectorstore)

    def add(self, chunks: Sequence[RagChunk]) -> None:
        documents = [chunk.to_document() for chunk in chunks]
        self.vectorstore.add_documents(documents)
        logger.debug("Stored {} chunks in Chroma", len(documents))

    def contains(self, file_name: str, conversation_id: str) -> bool:
        result = self.vectorstore.get(
            where={
                "$and": [
                    {FILE_NAME_KEY: file_name},
                    {CONVERSATION_ID_KEY: conversation_id},
                ]
            },
            limit=1,
        )
        return bool(result.get("ids"))

    def similarity_search(
        self,
        query: str,
        k: int,
        conversation_id: str | None = None,
    ) -> list[RagChunk]:
        search_filter = {CONVERSATION_ID_KEY: conversation_id} if conversation_id else None
        documents = self.vectorstore.similarity_search(query, k=k, filter=search_filter)
        return [RagChunk.from_document(document) for document in documents]


def build_document_store(rag_config: RagConfig, llm_config: LlmConfig | None = None) -> DocumentStore:
    """Create the document store selected by ``RAG_STORE``."""
    if rag_config.store == "chroma":
        logger.info(
            "Using Chroma document store collection={} directory={}",
            rag_config.collection_name,
            rag_config.persist_directory,
        )
        return ChromaDocumentStore.from_config(rag_config, llm_config or get_llm_config())
    logger.info("Using in-memory document store")
    return InMemoryDocumentStore()
