import logging
import math
import re
import uuid
from dataclasses import replace
from typing import Optional

from milestone_search.core.errors import StoreError
from milestone_search.core.models.content import (
    ContentChunk,
    RecordEmbedding,
    SourceType,
)
from milestone_search.core.models.search import SearchConfig
from milestone_search.core.protocols.embedder import EmbeddingProvider
from milestone_search.core.vectors import cosine_similarity, vector_to_embedding

logger = logging.getLogger(__name__)

_WORD_RE = re.compile(r"\w+")


def keyword_score(query: str, text: str) -> float:
    """Share of distinct query words that occur in ``text``."""
    query_words = set(_WORD_RE.findall(query.lower()))
    if not query_words:
        return 0.0
    text_words = set(_WORD_RE.findall(text.lower()))
    return len(query_words & text_words) / len(query_words)


class MemoryContentStore:
    """In-process content store with exact cosine search.

    Mirrors the database functions of the Supabase store: one config per
    project, threshold-filtered rankings, and a hybrid score of
    ``text_weight * keyword_score + vector_weight * similarity``.
    """

    def __init__(
        self,
        embedding_provider: Optional[EmbeddingProvider] = None,
        embedding_model: str = "text-embedding-3-small",
    ):
        """Initialize memory store.

        Args:
            embedding_provider: Embeds hybrid query text. Required for
                hybrid search only.
            embedding_model: Hybrid query model for unconfigured projects.
        """
        self._embedding_provider = embedding_provider
        self._embedding_model = embedding_model
        self._configs: dict[str, SearchConfig] = {}
        self._chunks: dict[str, tuple[ContentChunk, list[float]]] = {}
        self._records: dict[str, tuple[RecordEmbedding, list[float]]] = {}

    @property
    def chunks(self) -> list[ContentChunk]:
        return [chunk for chunk, _ in self._chunks.values()]

    @property
    def record_embeddings(self) -> list[RecordEmbedding]:
        return [record for record, _ in self._records.values()]

    async def init_search_config(self, config: SearchConfig) -> str:
        if config.project_id in self._configs:
            raise StoreError(
                "Failed to initialize search config",
                f"search config already exists for project {config.project_id}",
            )
        config_id = str(uuid.uuid4())
        self._configs[config.project_id] = replace(config, id=config_id)
        return config_id

    async def get_search_config(self, project_id: str) -> Optional[SearchConfig]:
        return self._configs.get(project_id)

    async def insert_chunks(self, chunks: list[ContentChunk]) -> None:
        for chunk in chunks:
            self._chunks[str(uuid.uuid4())] = (chunk, _parse(chunk.embedding))
        logger.debug(f"Stored {len(chunks)} chunks ({len(self._chunks)} total)")

    async def insert_record_embedding(self, record_embedding: RecordEmbedding) -> None:
        self._records[str(uuid.uuid4())] = (
            record_embedding,
            _parse(record_embedding.embedding, "Failed to insert record embedding"),
        )

    async def delete_chunks(self, source_type: SourceType, source_id: str) -> None:
        source_type = SourceType(source_type)
        self._chunks = {
            chunk_id: entry
            for chunk_id, entry in self._chunks.items()
            if not (entry[0].source_type is source_type and entry[0].source_id == source_id)
        }

    async def delete_record_embedding(self, record_id: str) -> None:
        self._records = {
            row_id: entry
            for row_id, entry in self._records.items()
            if entry[0].record_id != record_id
        }

    def _candidates(
        self, project_id: str, source_types: Optional[list[str]]
    ) -> list[tuple[str, ContentChunk, list[float]]]:
        return [
            (chunk_id, chunk, vector)
            for chunk_id, (chunk, vector) in self._chunks.items()
            if chunk.project_id == project_id
            and (not source_types or chunk.source_type.value in source_types)
        ]

    async def search_chunks(
        self,
        query_embedding: str,
        project_id: str,
        source_types: Optional[list[str]],
        match_threshold: float,
        match_count: int,
    ) -> list[dict]:
        query_vector = _parse(query_embedding, "Search failed")
        scored = []
        for chunk_id, chunk, vector in self._candidates(project_id, source_types):
            similarity = _similarity(query_vector, vector, "Search failed")
            if similarity >= match_threshold:
                scored.append((similarity, chunk_id, chunk))
        return _chunk_rows(scored, match_count)

    async def search_hybrid(
        self,
        query_text: str,
        project_id: str,
        source_types: Optional[list[str]],
        match_threshold: float,
        match_count: int,
        text_weight: float,
        vector_weight: float,
    ) -> list[dict]:
        if self._embedding_provider is None:
            raise StoreError("Hybrid search failed", "no embedding provider configured")

        config = self._configs.get(project_id)
        model = config.embedding_model if config else self._embedding_model
        try:
            query_vector = await self._embedding_provider.generate_embedding(
                query_text, model
            )
        except Exception as e:
            raise StoreError("Hybrid search failed", str(e)) from e

        scored = []
        for chunk_id, chunk, vector in self._candidates(project_id, source_types):
            score = text_weight * keyword_score(query_text, chunk.text) + (
                vector_weight * _similarity(query_vector, vector, "Hybrid search failed")
            )
            if score >= match_threshold:
                scored.append((score, chunk_id, chunk))
        return _chunk_rows(scored, match_count)

    async def search_similar_records(
        self,
        query_embedding: str,
        project_id: str,
        exclude_record_id: Optional[str],
        match_threshold: float,
        match_count: int,
    ) -> list[dict]:
        query_vector = _parse(query_embedding, "Record search failed")
        scored = []
        for row_id, (record, vector) in self._records.items():
            if record.project_id != project_id or record.record_id == exclude_record_id:
                continue
            similarity = _similarity(query_vector, vector, "Record search failed")
            if similarity >= match_threshold:
                scored.append((similarity, row_id, record))

        scored.sort(key=lambda x: x[0], reverse=True)
        return [
            {
                "id": row_id,
                "record_id": record.record_id,
                "content": record.content or "",
                "similarity": similarity,
                "metadata": {"model": record.model},
            }
            for similarity, row_id, record in scored[:match_count]
        ]


def _parse(vector: str, operation: str = "Failed to insert content chunks") -> list[float]:
    try:
        values = vector_to_embedding(vector)
    except ValueError as e:
        raise StoreError(operation, f"malformed vector literal: {e}") from e
    # float() accepts "nan" and "inf", pgvector does not
    if not all(math.isfinite(v) for v in values):
        raise StoreError(operation, "vector contains NaN or infinite values")
    return values


def _similarity(a: list[float], b: list[float], operation: str) -> float:
    try:
        return cosine_similarity(a, b)
    except ValueError as e:
        raise StoreError(operation, str(e)) from e


def _chunk_rows(scored: list[tuple[float, str, ContentChunk]], match_count: int) -> list[dict]:
    scored.sort(key=lambda x: x[0], reverse=True)
    return [
        {
            "id": chunk_id,
            "source_type": chunk.source_type.value,
            "source_id": chunk.source_id,
            "text": chunk.text,
            "chunk_index": chunk.chunk_index,
            "similarity": score,
            "metadata": {"project_id": chunk.project_id, "model": chunk.model},
        }
        for score, chunk_id, chunk in scored[:match_count]
    ]
