"""AI search service - indexing and search entry point for the application."""

import logging
from typing import Optional, Sequence

from ..models.content import (
    ChunkingOptions,
    ContentChunk,
    ContentProcessingResult,
    SourceType,
)
from ..models.search import (
    ConversationSearchQuery,
    ConversationSearchResult,
    RecordSearchResult,
    SearchConfig,
    SearchConfigOptions,
    SearchResult,
)
from ..protocols.content_store import ContentStoreProtocol
from ..protocols.embedder import EmbeddingProvider
from .conversation_search import ConversationSearchService
from .ingest_service import IngestService
from .search_config_service import SearchConfigService
from .search_service import SearchService

logger = logging.getLogger(__name__)


class AISearchService:
    """Facade over config, indexing and search for one content store."""

    def __init__(
        self,
        store: ContentStoreProtocol,
        embedding_provider: EmbeddingProvider,
        embedding_model: str = "text-embedding-3-small",
        config_service: SearchConfigService | None = None,
        ingest_service: IngestService | None = None,
        search_service: SearchService | None = None,
        conversation_search: ConversationSearchService | None = None,
    ):
        """Initialize AI search service.

        Args:
            store: Content store.
            embedding_provider: Embedding provider.
            embedding_model: Fallback query model for unconfigured projects.
            config_service: Search config service.
            ingest_service: Chunking and embedding service.
            search_service: Search service.
            conversation_search: Conversation-aware search service.
        """
        self._store = store
        self._config = config_service or SearchConfigService(store)
        self._ingest = ingest_service or IngestService(embedding_provider)
        self._search = search_service or SearchService(
            embedding_provider,
            store,
            embedding_model=embedding_model,
            config_service=self._config,
        )
        self._conversation = conversation_search or ConversationSearchService(
            embedding_provider, self._search
        )

    async def initialize_search_config(
        self, project_id: str, options: SearchConfigOptions | None = None
    ) -> str:
        """Create the project's search config and return its ID."""
        return await self._config.initialize(project_id, options)

    async def get_search_config(self, project_id: str) -> Optional[SearchConfig]:
        """Get the project's search config, None if not initialized."""
        return await self._config.get(project_id)

    async def ensure_search_config(
        self, project_id: str, options: SearchConfigOptions | None = None
    ) -> SearchConfig:
        """Get the project's config, initializing it on first use."""
        config = await self._config.get(project_id)
        if config is not None:
            return config

        logger.info(f"Initializing search config for project {project_id}")
        await self._config.initialize(project_id, options)
        return await self._config.require(project_id)

    async def process_content(
        self,
        source_type: SourceType | str,
        source_id: str,
        project_id: str,
        content: str,
    ) -> ContentProcessingResult:
        """Chunk, embed and store a source plus its record embedding.

        Raises:
            SearchConfigNotFoundError: If the project has no config.
            StoreError: If an insert fails.
        """
        config = await self._config.require(project_id)

        result = await self._ingest.process_content_for_search(
            source_type,
            source_id,
            project_id,
            content,
            _chunking_options(config),
            config.embedding_model,
        )

        if result.chunks:
            await self._store.insert_chunks(result.chunks)
        if result.record_embedding is not None:
            await self._store.insert_record_embedding(result.record_embedding)

        logger.info(
            f"Indexed {SourceType(source_type).value}:{source_id}: "
            f"{len(result.chunks)} chunks in project {project_id}"
        )
        return result

    async def index_source(
        self,
        source_type: SourceType | str,
        source_id: str,
        project_id: str,
        content: str,
    ) -> list[ContentChunk]:
        """Chunk, embed and store a source without a record embedding.

        Used for file and website attachments.
        """
        config = await self._config.require(project_id)

        chunks = await self._ingest.create_content_chunks(
            source_type,
            source_id,
            project_id,
            content,
            _chunking_options(config),
            config.embedding_model,
        )
        if chunks:
            await self._store.insert_chunks(chunks)

        logger.info(
            f"Indexed {SourceType(source_type).value}:{source_id}: "
            f"{len(chunks)} chunks in project {project_id}"
        )
        return chunks

    async def update_content(
        self,
        source_type: SourceType | str,
        source_id: str,
        project_id: str,
        new_content: str,
    ) -> ContentProcessingResult:
        """Delete everything indexed for a source and index it again.

        Chunks and the record embedding are rebuilt from scratch, never
        patched.
        """
        await self._config.require(project_id)

        await self.delete_content_chunks(source_type, source_id)
        await self.delete_record_embedding(source_id)
        return await self.process_content(source_type, source_id, project_id, new_content)

    async def delete_content_chunks(
        self, source_type: SourceType | str, source_id: str
    ) -> None:
        await self._store.delete_chunks(SourceType(source_type), source_id)
        logger.debug(f"Deleted chunks for {SourceType(source_type).value}:{source_id}")

    async def delete_record_embedding(self, record_id: str) -> None:
        await self._store.delete_record_embedding(record_id)
        logger.debug(f"Deleted record embedding for {record_id}")

    async def search_content(
        self,
        query: str,
        project_id: str,
        source_types: Optional[Sequence[SourceType | str]] = None,
        match_threshold: float = 0.7,
        match_count: int = 10,
    ) -> list[SearchResult]:
        return await self._search.search_content(
            query, project_id, source_types, match_threshold, match_count
        )

    async def hybrid_search(
        self,
        query: str,
        project_id: str,
        source_types: Optional[Sequence[SourceType | str]] = None,
        match_threshold: float = 0.7,
        match_count: int = 10,
        text_weight: Optional[float] = None,
        vector_weight: Optional[float] = None,
    ) -> list[SearchResult]:
        return await self._search.hybrid_search(
            query,
            project_id,
            source_types,
            match_threshold,
            match_count,
            text_weight,
            vector_weight,
        )

    async def search_similar_records(
        self,
        query: str,
        project_id: str,
        exclude_record_id: Optional[str] = None,
        match_threshold: float = 0.8,
        match_count: int = 5,
    ) -> list[RecordSearchResult]:
        return await self._search.search_similar_records(
            query, project_id, exclude_record_id, match_threshold, match_count
        )

    async def search_with_conversation_context(
        self, query: ConversationSearchQuery
    ) -> list[ConversationSearchResult]:
        return await self._conversation.search_with_conversation_context(query)


def _chunking_options(config: SearchConfig) -> ChunkingOptions:
    return ChunkingOptions(
        chunk_size=config.chunk_size, chunk_overlap=config.chunk_overlap
    )
