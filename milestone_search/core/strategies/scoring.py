
import logging
from abc import ABC, abstractmethod
from typing import Sequence

from ..models.search import SearchResult

logger = logging.getLogger(__name__)


class ScoringStrategy(ABC):
    """Base class for conversation relevance scoring."""

    @abstractmethod
    def score(self, result: SearchResult, themes: Sequence[str]) -> float:
        """Relevance of a result given the conversation themes."""
        ...


class SimilarityStrategy(ScoringStrategy):
    """Relevance equals the store's similarity."""

    def score(self, result: SearchResult, themes: Sequence[str]) -> float:
        return result.similarity


class ThemeBoostStrategy(ScoringStrategy):
    """Boost similarity by the share of themes the result text mentions."""

    def __init__(self, max_boost: float = 0.2, ceiling: float = 1.0):
        """Initialize strategy.

        Args:
            max_boost: Boost when every theme appears in the text.
            ceiling: Upper bound of the final score.
        """
        self._max_boost = max_boost
        self._ceiling = ceiling

    def score(self, result: SearchResult, themes: Sequence[str]) -> float:
        score = result.similarity
        if themes:
            text_lower = result.text.lower()
            matches = sum(1 for theme in themes if theme.lower() in text_lower)
            score += (matches / len(themes)) * self._max_boost
            if matches:
                logger.debug(
                    f"Theme boost: {matches}/{len(themes)} themes in result {result.id}"
                )
        return min(score, self._ceiling)
