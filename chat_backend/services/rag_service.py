"""Service for document ingestion and context retrieval.

Uploaded files are validated, decoded to text, split into token-bounded
chunks and stored once per ``(file name, conversation)`` pair.  Retrieval
concatenates the best matching chunks into a single context block and
never fails the surrounding request: any store error degrades to an
empty context.
"""

from __future__ import annotations

from functools import lru_cache

from loguru import logger
from langchain_text_splitters import RecursiveCharacterTextSplitter

from ..config.rag_config import RagConfig, get_rag_config
from ..models.rag_chunk import RagChunk
from ..prompts import CONTEXT_DELIMITER
from ..rag.document_store import DocumentStore, build_document_store
from ..rag.text_extraction import extract_text
from ..utils.error_handler import FileProcessingError, RagError, wrap_errors
from ..utils.helpers import now_millis
from ..utils.validation import is_blank, normalise_mime_type, validate_upload

DEFAULT_FILE_NAME = "upload"
TOKEN_ENCODING = "cl100k_base"


class RagService:
    """Ingests documents into a :class:`DocumentStore` and retrieves context."""

    def __init__(self, store: DocumentStore | None = None, rag_config: RagConfig | None = None) -> None:
        self.rag_config = rag_config or get_rag_config()
        self.store = store if store is not None else build_document_store(self.rag_config)
        self._splitter = RecursiveCharacterTextSplitter.from_tiktoken_encoder(
            encoding_name=TOKEN_ENCODING,
            chunk_size=self.rag_config.chunk_size,
            chunk_overlap=self.rag_config.chunk_overlap,
        )

    def validate_file(self, file_bytes: bytes | None, mime_type: str | None) -> None:
        """Raise :class:`FileProcessingError` when the upload breaks policy."""
        validate_upload(file_bytes, mime_type, self.rag_config)

    @wrap_errors(RagError, "Failed to store content in vector database")
    def ingest(
        self,
        file_bytes: bytes,
        file_name: str | None,
        mime_type: str | None,
        conversation_id: str,
        user_id: str | None = None,
    ) -> bool:
        """Store an uploaded file for ``conversation_id``.

        Returns ``True`` when new chunks were stored and ``False`` when the
        same file had already been ingested for this conversation, in
        which case the store is left untouched.  Policy violations raise
        :class:`FileProcessingError` before the store is consulted.
        """
        self.validate_file(file_bytes, mime_type)
        name = file_name or DEFAULT_FILE_NAME
        logger.info(
            "Processing file {} ({} bytes) for user {} in conversation {}",
            name,
            len(file_bytes),
            user_id,
            conversation_id,
        )

        text = extract_text(file_bytes, mime_type, name)
        if is_blank(text):
            raise FileProcessingError("File is empty or could not be read")

        chunks = self.chunk_text(text, name, mime_type, conversation_id, user_id)
        stored = self.store.add_if_absent(name, conversation_id, chunks)
        if stored:
            logger.info(
                "Stored {} chunks ({} characters) from {} for conversation {}",
                len(chunks),
                len(text),
                name,
                conversation_id,
            )
        return stored

    def chunk_text(
        self,
        text: str,
        file_name: str,
        mime_type: str | None,
        conversation_id: str,
        user_id: str | None = None,
    ) -> list[RagChunk]:
        """Split ``text`` into chunks tagged with their origin."""
        ingested_at = now_millis()
        segments = [segment for segment in self._splitter.split_text(text) if segment.strip()]
        return [
            RagChunk(
                text=segment,
                source_file_name=file_name,
                conversation_id=conversation_id,
                user_id=user_id,
                created_at=ingested_at,
                metadata={
                    "chunkIndex": index,
                    "mimeType": normalise_mime_type(mime_type),
                    "source": file_name,
                },
            )
            for index, segment in enumerate(segments)
        ]

    def search_documents(self, query: str, conversation_id: str | None = None) -> list[RagChunk]:
        """Return the stored chunks most relevant to ``query``."""
        logger.info("Searching for documents matching query: {!r}", query[:80])
        return self.store.similarity_search(query, k=self.rag_config.top_k, conversation_id=conversation_id)

    def retrieve(self, query: str, conversation_id: str | None = None) -> str:
        """Return a context block for ``query``, or ``""`` when none is available."""
        try:
            results = self.search_documents(query, conversation_id)
        except Exception as exc:
            logger.opt(exception=exc).error("Error retrieving context; continuing without it")
            return ""

        if not results:
            logger.warning("No relevant documents found for query: {!r}", query[:80])
            return ""

        logger.info("Retrieved {} documents for query", len(results))
        return CONTEXT_DELIMITER.join(chunk.text for chunk in results)


@lru_cache()
def get_rag_service() -> RagService:
    """Dependency injector returning the process-wide RagService."""
    return RagService()
