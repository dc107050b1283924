"""Document storage and text extraction for retrieval-augmented generation."""

from .document_store import (  # noqa: F401
    ChromaDocumentStore,
    DocumentStore,
    InMemoryDocumentStore,
    build_document_store,
)
from .text_extraction import extract_text  # noqa: F401
