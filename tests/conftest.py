from __future__ import annotations

import os
import sys
from pathlib import Path

import pytest

repo_root = Path(__file__).resolve().parents[1]
if str(repo_root) not in sys.path:
    sys.path.insert(0, str(repo_root))

os.environ.setdefault("LLM_API_KEY", "test-key")
os.environ["RAG_STORE"] = "in_memory"

from chat_backend.config.rag_config import RagConfig
from chat_backend.models.enums import Persona
from chat_backend.rag.document_store import InMemoryDocumentStore
from chat_backend.services.rag_service import RagService


class FakeLLMService:
    """Records every provider call and answers with a canned reply."""

    def __init__(self, reply: str = "Quicksort picks a pivot and partitions.", error: Exception | None = None) -> None:
        self.reply = reply
        self.error = error
        self.calls: list[tuple[str, Persona, dict[str, str]]] = []

    def _answer(self, kind: str, persona: Persona, **variables: str) -> str:
        self.calls.append((kind, persona, variables))
        if self.error is not None:
            raise self.error
        return self.reply

    def generate(self, persona: Persona, prompt: str) -> str:
        return self._answer("generate", persona, prompt=prompt)

    def generate_with_context(self, persona: Persona, question: str, context: str) -> str:
        return self._answer("rag", persona, question=question, context=context)

    def generate_plan(self, persona: Persona, operation: str) -> str:
        return self._answer("plan", persona, operation=operation)


class CountingStore(InMemoryDocumentStore):
    """In-memory store that counts lookups and inserts."""

    def __init__(self) -> None:
        super().__init__()
        self.add_calls = 0
        self.contains_calls = 0
        self.search_calls = 0

    def add(self, chunks):
        self.add_calls += 1
        super().add(chunks)

    def contains(self, file_name, conversation_id):
        self.contains_calls += 1
        return super().contains(file_name, conversation_id)

    def similarity_search(self, query, k, conversation_id=None):
        self.search_calls += 1
        return super().similarity_search(query, k, conversation_id)


@pytest.fixture
def rag_config() -> RagConfig:
    return RagConfig(chunk_size=50, chunk_overlap=0, top_k=5)


@pytest.fixture
def store() -> CountingStore:
    return CountingStore()


@pytest.fixture
def rag_service(store: CountingStore, rag_config: RagConfig) -> RagService:
    return RagService(store=store, rag_config=rag_config)


@pytest.fixture
def fake_llm() -> FakeLLMService:
    return FakeLLMService()
