"""Search service - vector, hybrid and similar-record search."""

import logging
from typing import Optional, Sequence

from ..models.content import SourceType
from ..models.search import RecordSearchResult, SearchOptions, SearchResult
from ..protocols.content_store import ContentStoreProtocol
from ..protocols.embedder import EmbeddingProvider
from ..vectors import embedding_to_vector
from .search_config_service import SearchConfigService

logger = logging.getLogger(__name__)


def _source_type_values(
    source_types: Optional[Sequence[SourceType | str]],
) -> Optional[list[str]]:
    if not source_types:
        return None
    return [SourceType(s).value for s in source_types]


class SearchService:
    """Embeds queries and delegates ranking to the content store.

    The store computes similarity and the hybrid blend; this service only
    serializes query vectors and deserializes ranked rows.
    """

    def __init__(
        self,
        embedding_provider: EmbeddingProvider,
        store: ContentStoreProtocol,
        embedding_model: str = "text-embedding-3-small",
        config_service: SearchConfigService | None = None,
        text_weight: float = 0.3,
        vector_weight: float = 0.7,
    ):
        """Initialize search service.

        Args:
            embedding_provider: Embedding provider.
            store: Content store.
            embedding_model: Model used when the project has no config.
            config_service: Resolves each project's configured model.
            text_weight: Default lexical weight for hybrid search.
            vector_weight: Default vector weight for hybrid search.
        """
        self._embedding_provider = embedding_provider
        self._store = store
        self._embedding_model = embedding_model
        self._config_service = config_service
        self._text_weight = text_weight
        self._vector_weight = vector_weight

    async def resolve_model(self, project_id: str, model: Optional[str] = None) -> str:
        """Pick the query embedding model: explicit, project config, default."""
        if model:
            return model
        if self._config_service is not None:
            config = await self._config_service.get(project_id)
            if config is not None:
                return config.embedding_model
        return self._embedding_model

    async def embed_query(
        self, query: str, project_id: str, model: Optional[str] = None
    ) -> list[float]:
        model = await self.resolve_model(project_id, model)
        return await self._embedding_provider.generate_embedding(query, model)

    async def search_by_embedding(
        self,
        query_embedding: Sequence[float],
        project_id: str,
        source_types: Optional[Sequence[SourceType | str]] = None,
        options: Optional[SearchOptions] = None,
    ) -> list[SearchResult]:
        """Rank chunks against a precomputed query embedding."""
        options = options or SearchOptions()
        rows = await self._store.search_chunks(
            query_embedding=embedding_to_vector(query_embedding),
            project_id=project_id,
            source_types=_source_type_values(source_types),
            match_threshold=options.match_threshold,
            match_count=options.match_count,
        )
        return [SearchResult.from_row(row, options.include_metadata) for row in rows]

    async def search_content(
        self,
        query: str,
        project_id: str,
        source_types: Optional[Sequence[SourceType | str]] = None,
        match_threshold: float = 0.7,
        match_count: int = 10,
        embedding_model: Optional[str] = None,
    ) -> list[SearchResult]:
        """Vector search over a project's chunks.

        Args:
            query: Natural-language query.
            project_id: Project scope.
            source_types: Restrict to these source types (all when None).
            match_threshold: Minimum similarity.
            match_count: Maximum results.
            embedding_model: Override the project's model.

        Returns:
            Results in the store's ranking order.

        Raises:
            StoreError: If the store search fails.
        """
        query_embedding = await self.embed_query(query, project_id, embedding_model)
        results = await self.search_by_embedding(
            query_embedding,
            project_id,
            source_types,
            SearchOptions(match_threshold=match_threshold, match_count=match_count),
        )
        logger.info(
            f"Search: returned {len(results)}/{match_count} chunks for '{query[:50]}...'"
        )
        return results

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
        """Blended keyword and vector search, computed by the store.

        Higher ``vector_weight`` favours semantic matches over keyword overlap.
        """
        text_weight = self._text_weight if text_weight is None else text_weight
        vector_weight = self._vector_weight if vector_weight is None else vector_weight

        rows = await self._store.search_hybrid(
            query_text=query,
            project_id=project_id,
            source_types=_source_type_values(source_types),
            match_threshold=match_threshold,
            match_count=match_count,
            text_weight=text_weight,
            vector_weight=vector_weight,
        )
        results = [SearchResult.from_row(row) for row in rows]
        logger.info(
            f"Hybrid search (text={text_weight}, vector={vector_weight}): "
            f"returned {len(results)}/{match_count} chunks for '{query[:50]}...'"
        )
        return results

    async def search_similar_records(
        self,
        query: str,
        project_id: str,
        exclude_record_id: Optional[str] = None,
        match_threshold: float = 0.8,
        match_count: int = 5,
        embedding_model: Optional[str] = None,
    ) -> list[RecordSearchResult]:
        """Find whole documents similar to ``query``.

        Args:
            exclude_record_id: Record to leave out, usually the one compared.
        """
        query_embedding = await self.embed_query(query, project_id, embedding_model)
        rows = await self._store.search_similar_records(
            query_embedding=embedding_to_vector(query_embedding),
            project_id=project_id,
            exclude_record_id=exclude_record_id,
            match_threshold=match_threshold,
            match_count=match_count,
        )
        results = [RecordSearchResult.from_row(row) for row in rows]
        logger.info(f"Similar records: returned {len(results)}/{match_count}")
        return results
