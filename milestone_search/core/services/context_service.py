"""Context service - project context for chat replies."""

import logging
from typing import Awaitable, Callable, Optional, Sequence

from ..errors import SearchError
from ..models.chat import ChatMessage
from ..models.search import ContextItem
from ..strategies.themes import CHAT_STOP_WORDS, CONVERSATION_ROLES, extract_terms
from .search_service import SearchService

logger = logging.getLogger(__name__)

RecentContentLoader = Callable[[str], Awaitable[list[ContextItem]]]


class ContextService:
    """Retrieves chunks relevant to a chat turn, with a recency fallback.

    Unlike the search services, this layer does not fail: when hybrid
    search errors or finds nothing it returns what ``recent_content``
    provides for the project.
    """

    def __init__(
        self,
        search_service: SearchService,
        recent_content: Optional[RecentContentLoader] = None,
        match_threshold: float = 0.6,
        match_count: int = 5,
        text_weight: float = 0.3,
        vector_weight: float = 0.7,
        history_messages: int = 4,
        terms_per_message: int = 5,
    ):
        """Initialize context service.

        Args:
            search_service: Search service.
            recent_content: Loads recent project content by project ID.
            match_threshold: Minimum hybrid score.
            match_count: Maximum chunks.
            text_weight: Lexical weight.
            vector_weight: Vector weight.
            history_messages: Trailing history messages mined for terms.
            terms_per_message: Terms taken from each message.
        """
        self._search = search_service
        self._recent_content = recent_content
        self._match_threshold = match_threshold
        self._match_count = match_count
        self._text_weight = text_weight
        self._vector_weight = vector_weight
        self._history_messages = history_messages
        self._terms_per_message = terms_per_message

    def build_contextual_query(
        self, query: str, history: Sequence[ChatMessage]
    ) -> str:
        """Append terms from the recent conversation to the query."""
        if not history:
            return query

        terms: list[str] = []
        for message in history[-self._history_messages :]:
            if message.role in CONVERSATION_ROLES:
                words = extract_terms(message.content, CHAT_STOP_WORDS)
                terms.extend(words[: self._terms_per_message])

        if terms:
            return f"{query} {' '.join(terms)}"
        return query

    async def get_project_context(
        self,
        project_id: str,
        query: str,
        history: Sequence[ChatMessage] = (),
    ) -> list[ContextItem]:
        """Context items for a chat turn, best matches first."""
        contextual_query = self.build_contextual_query(query, history)

        try:
            results = await self._search.hybrid_search(
                contextual_query,
                project_id,
                match_threshold=self._match_threshold,
                match_count=self._match_count,
                text_weight=self._text_weight,
                vector_weight=self._vector_weight,
            )
        except SearchError as e:
            logger.warning(f"Context search failed, using recent content: {e}")
            return await self._load_recent(project_id)

        if not results:
            logger.info(f"No context matches in project {project_id}, using recent content")
            return await self._load_recent(project_id)

        return [
            ContextItem(
                text=r.text,
                source_type=r.source_type,
                source_id=r.source_id,
                similarity=r.similarity,
            )
            for r in results
        ]

    async def _load_recent(self, project_id: str) -> list[ContextItem]:
        if self._recent_content is None:
            return []
        return await self._recent_content(project_id)
