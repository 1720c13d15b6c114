"""
Test configuration and fixtures.
"""

import re
import zlib
from typing import Optional

import pytest

from milestone_search.core.errors import StoreError
from milestone_search.core.models.search import SearchConfig
from milestone_search.core.services.ai_search_service import AISearchService
from milestone_search.infrastructure.stores.memory_store import MemoryContentStore


class FakeEmbeddingProvider:
    """Bag-of-words embedding with one hashed dimension per word."""

    def __init__(self, dimension: int = 64):
        self.dimension = dimension
        self.calls: list[tuple[str, str]] = []

    async def generate_embedding(self, text: str, model: str) -> list[float]:
        self.calls.append((text, model))
        vector = [0.0] * self.dimension
        for word in re.findall(r"\w+", text.lower()):
            vector[zlib.crc32(word.encode()) % self.dimension] += 1.0
        return vector


class FailingEmbeddingProvider:
    async def generate_embedding(self, text: str, model: str) -> list[float]:
        raise RuntimeError("embedding provider unavailable")


class RecordingStore:
    """Content store double that records calls and returns canned rows."""

    def __init__(
        self,
        rows: Optional[list[dict]] = None,
        record_rows: Optional[list[dict]] = None,
        error: Optional[StoreError] = None,
    ):
        self.rows = rows or []
        self.record_rows = record_rows or []
        self.error = error
        self.configs: dict[str, SearchConfig] = {}
        self.calls: list[tuple[str, dict]] = []

    def _record(self, name: str, **kwargs) -> None:
        self.calls.append((name, kwargs))
        if self.error is not None:
            raise self.error

    def last(self, name: str) -> dict:
        return [kwargs for call, kwargs in self.calls if call == name][-1]

    async def init_search_config(self, config: SearchConfig) -> str:
        self._record("init_search_config", config=config)
        self.configs[config.project_id] = config
        return "cfg-1"

    async def get_search_config(self, project_id: str) -> Optional[SearchConfig]:
        return self.configs.get(project_id)

    async def insert_chunks(self, chunks) -> None:
        self._record("insert_chunks", chunks=chunks)

    async def insert_record_embedding(self, record_embedding) -> None:
        self._record("insert_record_embedding", record_embedding=record_embedding)

    async def delete_chunks(self, source_type, source_id) -> None:
        self._record("delete_chunks", source_type=source_type, source_id=source_id)

    async def delete_record_embedding(self, record_id) -> None:
        self._record("delete_record_embedding", record_id=record_id)

    async def search_chunks(
        self, query_embedding, project_id, source_types, match_threshold, match_count
    ) -> list[dict]:
        self._record(
            "search_chunks",
            query_embedding=query_embedding,
            project_id=project_id,
            source_types=source_types,
            match_threshold=match_threshold,
            match_count=match_count,
        )
        return self.rows

    async def search_hybrid(
        self,
        query_text,
        project_id,
        source_types,
        match_threshold,
        match_count,
        text_weight,
        vector_weight,
    ) -> list[dict]:
        self._record(
            "search_hybrid",
            query_text=query_text,
            project_id=project_id,
            source_types=source_types,
            match_threshold=match_threshold,
            match_count=match_count,
            text_weight=text_weight,
            vector_weight=vector_weight,
        )
        return self.rows

    async def search_similar_records(
        self, query_embedding, project_id, exclude_record_id, match_threshold, match_count
    ) -> list[dict]:
        self._record(
            "search_similar_records",
            query_embedding=query_embedding,
            project_id=project_id,
            exclude_record_id=exclude_record_id,
            match_threshold=match_threshold,
            match_count=match_count,
        )
        return self.record_rows


def make_row(
    row_id: str,
    text: str,
    similarity: float,
    source_type: str = "record",
    source_id: str = "src-1",
    chunk_index: int = 0,
) -> dict:
    return {
        "id": row_id,
        "source_type": source_type,
        "source_id": source_id,
        "text": text,
        "chunk_index": chunk_index,
        "similarity": similarity,
        "metadata": {"origin": "test"},
    }


@pytest.fixture
def embedder() -> FakeEmbeddingProvider:
    return FakeEmbeddingProvider()


@pytest.fixture
def memory_store(embedder) -> MemoryContentStore:
    return MemoryContentStore(embedding_provider=embedder)


@pytest.fixture
def ai_search(memory_store, embedder) -> AISearchService:
    return AISearchService(memory_store, embedder)


@pytest.fixture
def row_factory():
    return make_row
