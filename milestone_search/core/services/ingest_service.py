"""Ingest service - chunking and embedding of source content."""

import asyncio
import logging

from ..chunking import chunk_text
from ..models.content import (
    ChunkingOptions,
    ContentChunk,
    ContentProcessingResult,
    RecordEmbedding,
    SourceType,
)
from ..protocols.embedder import EmbeddingProvider
from ..vectors import embedding_to_vector

logger = logging.getLogger(__name__)


class IngestService:
    """Turns source content into chunk rows and a whole-document embedding.

    Nothing is persisted here; callers insert the returned rows.
    """

    def __init__(self, embedding_provider: EmbeddingProvider, batch_size: int = 1):
        """Initialize ingest service.

        Args:
            embedding_provider: Embedding provider.
            batch_size: Chunk embeddings requested concurrently. 1 embeds
                chunks one after another.
        """
        self._embedding_provider = embedding_provider
        self._batch_size = max(1, batch_size)

    async def _embed_all(self, texts: list[str], model: str) -> list[list[float]]:
        embeddings: list[list[float]] = []
        for i in range(0, len(texts), self._batch_size):
            batch = texts[i : i + self._batch_size]
            if len(batch) == 1:
                embeddings.append(
                    await self._embedding_provider.generate_embedding(batch[0], model)
                )
                continue
            tasks = [
                asyncio.ensure_future(
                    self._embedding_provider.generate_embedding(text, model)
                )
                for text in batch
            ]
            try:
                embeddings.extend(await asyncio.gather(*tasks))
            except BaseException:
                # One failure or a cancellation stops the rest of the batch
                for task in tasks:
                    task.cancel()
                await asyncio.gather(*tasks, return_exceptions=True)
                raise
        return embeddings

    async def create_content_chunks(
        self,
        source_type: SourceType | str,
        source_id: str,
        project_id: str,
        text: str,
        chunking_options: ChunkingOptions,
        embedding_model: str,
    ) -> list[ContentChunk]:
        """Chunk text and embed every chunk.

        Returns:
            Chunks with ``chunk_index`` 0..N-1 in document order.
        """
        source_type = SourceType(source_type)
        texts = chunk_text(text, chunking_options)
        embeddings = await self._embed_all(texts, embedding_model)

        chunks = [
            ContentChunk(
                source_type=source_type,
                source_id=source_id,
                project_id=project_id,
                chunk_index=index,
                text=chunk,
                embedding=embedding_to_vector(embedding),
                model=embedding_model,
            )
            for index, (chunk, embedding) in enumerate(zip(texts, embeddings))
        ]
        logger.debug(
            f"Embedded {len(chunks)} chunks for {source_type.value}:{source_id}"
        )
        return chunks

    async def create_record_embedding(
        self,
        record_id: str,
        project_id: str,
        content: str,
        embedding_model: str,
    ) -> RecordEmbedding:
        """Embed the full content as one vector."""
        embedding = await self._embedding_provider.generate_embedding(
            content, embedding_model
        )
        return RecordEmbedding(
            record_id=record_id,
            project_id=project_id,
            embedding=embedding_to_vector(embedding),
            model=embedding_model,
            content=content,
        )

    async def process_content_for_search(
        self,
        source_type: SourceType | str,
        source_id: str,
        project_id: str,
        content: str,
        chunking_options: ChunkingOptions,
        embedding_model: str,
    ) -> ContentProcessingResult:
        """Build chunk rows and the record embedding for one source.

        Args:
            source_type: Kind of source.
            source_id: Source ID, also used as the record embedding key.
            project_id: Owning project.
            content: Plain text content.
            chunking_options: Chunk size and overlap.
            embedding_model: Embedding model identifier.

        Returns:
            Chunks plus one record embedding.
        """
        chunks = await self.create_content_chunks(
            source_type, source_id, project_id, content, chunking_options, embedding_model
        )
        record_embedding = await self.create_record_embedding(
            source_id, project_id, content, embedding_model
        )
        return ContentProcessingResult(chunks=chunks, record_embedding=record_embedding)


async def process_content_for_search(
    source_type: SourceType | str,
    source_id: str,
    project_id: str,
    content: str,
    chunking_options: ChunkingOptions,
    embedding_provider: EmbeddingProvider,
    embedding_model: str,
) -> ContentProcessingResult:
    """Functional form of ``IngestService.process_content_for_search``."""
    return await IngestService(embedding_provider).process_content_for_search(
        source_type, source_id, project_id, content, chunking_options, embedding_model
    )
