"""Tests for content processing."""

import asyncio

import pytest

from milestone_search.core.models.content import ChunkingOptions, SourceType
from milestone_search.core.services.ingest_service import (
    IngestService,
    process_content_for_search,
)
from milestone_search.core.vectors import vector_to_embedding

from .conftest import FailingEmbeddingProvider

LONG_TEXT = " ".join(f"paragraph{i} covers backup rotation and retention" for i in range(40))


@pytest.mark.asyncio
async def test_short_text_one_chunk(embedder):
    result = await process_content_for_search(
        "record",
        "r1",
        "p1",
        "short text",
        ChunkingOptions(chunk_size=1000, chunk_overlap=100),
        embedder,
        "model-x",
    )

    assert len(result.chunks) == 1
    chunk = result.chunks[0]
    assert chunk.chunk_index == 0
    assert chunk.text == "short text"
    assert chunk.source_type is SourceType.RECORD
    assert chunk.model == "model-x"
    assert chunk.embedding.startswith("[") and chunk.embedding.endswith("]")

    assert result.record_embedding.record_id == "r1"
    assert result.record_embedding.to_row()["record_id"] == "r1"
    assert "content" not in result.record_embedding.to_row()
    assert embedder.calls == [("short text", "model-x"), ("short text", "model-x")]


@pytest.mark.asyncio
async def test_chunk_indices_sequential(embedder):
    service = IngestService(embedder)
    chunks = await service.create_content_chunks(
        SourceType.FILE, "f1", "p1", LONG_TEXT, ChunkingOptions(200, 40), "m"
    )

    assert len(chunks) > 1
    assert [c.chunk_index for c in chunks] == list(range(len(chunks)))
    assert all(c.source_type is SourceType.FILE for c in chunks)


@pytest.mark.asyncio
async def test_record_embedding_covers_full_content(embedder):
    service = IngestService(embedder)
    result = await service.process_content_for_search(
        "record", "r1", "p1", LONG_TEXT, ChunkingOptions(200, 40), "m"
    )

    assert embedder.calls[-1] == (LONG_TEXT, "m")
    assert len(vector_to_embedding(result.record_embedding.embedding)) == embedder.dimension


@pytest.mark.asyncio
async def test_batched_embedding_keeps_order(embedder):
    options = ChunkingOptions(200, 40)
    sequential = await IngestService(embedder).create_content_chunks(
        "file", "f1", "p1", LONG_TEXT, options, "m"
    )
    batched = await IngestService(embedder, batch_size=4).create_content_chunks(
        "file", "f1", "p1", LONG_TEXT, options, "m"
    )

    assert [c.text for c in batched] == [c.text for c in sequential]
    assert [c.embedding for c in batched] == [c.embedding for c in sequential]


@pytest.mark.asyncio
async def test_blank_content_yields_no_chunks(embedder):
    result = await process_content_for_search(
        "website", "w1", "p1", "   ", ChunkingOptions(100, 10), embedder, "m"
    )

    assert result.chunks == []
    assert result.record_embedding is not None


@pytest.mark.asyncio
async def test_provider_failure_propagates():
    with pytest.raises(RuntimeError, match="unavailable"):
        await process_content_for_search(
            "record",
            "r1",
            "p1",
            "short text",
            ChunkingOptions(100, 10),
            FailingEmbeddingProvider(),
            "m",
        )


@pytest.mark.asyncio
async def test_unknown_source_type(embedder):
    with pytest.raises(ValueError):
        await IngestService(embedder).create_content_chunks(
            "email", "e1", "p1", "text", ChunkingOptions(100, 10), "m"
        )


class SlowAfterFirstFailure:
    """First call fails at once, the others finish after a delay."""

    def __init__(self, delay: float = 0.05):
        self.delay = delay
        self.started = 0
        self.finished = 0

    async def generate_embedding(self, text: str, model: str) -> list[float]:
        self.started += 1
        if self.started == 1:
            raise RuntimeError("embedding provider unavailable")
        await asyncio.sleep(self.delay)
        self.finished += 1
        return [1.0, 0.0]


@pytest.mark.asyncio
async def test_batch_failure_cancels_sibling_calls():
    provider = SlowAfterFirstFailure()
    service = IngestService(provider, batch_size=4)

    with pytest.raises(RuntimeError, match="unavailable"):
        await service.create_content_chunks(
            "file", "f1", "p1", LONG_TEXT, ChunkingOptions(200, 40), "m"
        )
    await asyncio.sleep(provider.delay * 4)

    assert provider.started == 4
    assert provider.finished == 0
