"""Conversation search - dialogue-aware topic search."""

import logging

from ..models.search import (
    ConversationSearchQuery,
    ConversationSearchResult,
    SearchResult,
)
from ..protocols.embedder import EmbeddingProvider
from ..strategies.scoring import ScoringStrategy, ThemeBoostStrategy
from ..strategies.themes import (
    extract_context_snippets,
    extract_themes,
    generate_suggested_questions,
)
from .search_service import SearchService

logger = logging.getLogger(__name__)


class ConversationSearchService:
    """Folds chat history into the query and annotates results.

    Flow:
        1. Append conversation themes to the topic description
        2. Embed the contextual query
        3. Vector search through ``SearchService``
        4. Score, snippet and suggest follow-up questions
    """

    def __init__(
        self,
        embedding_provider: EmbeddingProvider,
        search_service: SearchService,
        embedding_model: str | None = None,
        scoring: ScoringStrategy | None = None,
    ):
        """Initialize conversation search.

        Args:
            embedding_provider: Embedding provider.
            search_service: Vector search backend.
            embedding_model: Model for the contextual query. None uses the
                project's configured model.
            scoring: Relevance scoring strategy.
        """
        self._embedding_provider = embedding_provider
        self._search = search_service
        self._embedding_model = embedding_model
        self._scoring = scoring or ThemeBoostStrategy()

    async def search_with_conversation_context(
        self, query: ConversationSearchQuery
    ) -> list[ConversationSearchResult]:
        """Search a topic in the light of the conversation so far.

        Embedding and store failures propagate unchanged.
        """
        contextual_query = self.build_contextual_query(query)

        model = await self._search.resolve_model(query.project_id, self._embedding_model)
        query_embedding = await self._embedding_provider.generate_embedding(
            contextual_query, model
        )

        results = await self._search.search_by_embedding(
            query_embedding,
            project_id=query.project_id,
            source_types=query.source_types,
            options=query.options,
        )
        logger.info(
            f"Conversation search: {len(results)} results for "
            f"'{query.topic_description[:50]}...'"
        )
        return self.enhance_results(results, query)

    def build_contextual_query(self, query: ConversationSearchQuery) -> str:
        """Topic description plus a ``Related context`` line of themes."""
        if not query.conversation_history:
            return query.topic_description

        themes = extract_themes(query.conversation_history)
        if not themes:
            return query.topic_description

        return f"{query.topic_description}\n\nRelated context: {', '.join(themes)}"

    def enhance_results(
        self, results: list[SearchResult], query: ConversationSearchQuery
    ) -> list[ConversationSearchResult]:
        """Annotate results, keeping their order.

        Snippets and questions describe the whole result set, so every
        result carries the same ones.
        """
        themes = (
            extract_themes(query.conversation_history)
            if query.conversation_history
            else []
        )
        snippets = extract_context_snippets(results)
        questions = generate_suggested_questions(results, query.topic_description)

        return [
            ConversationSearchResult(
                id=result.id,
                source_type=result.source_type,
                source_id=result.source_id,
                text=result.text,
                chunk_index=result.chunk_index,
                similarity=result.similarity,
                metadata=result.metadata,
                relevance_score=self._scoring.score(result, themes),
                context_snippets=list(snippets),
                suggested_questions=list(questions),
            )
            for result in results
        ]
