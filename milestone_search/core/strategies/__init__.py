"""Scoring strategies and conversation text analysis."""
from .scoring import ScoringStrategy, SimilarityStrategy, ThemeBoostStrategy
from .themes import (
    CHAT_STOP_WORDS,
    STOP_WORDS,
    extract_context_snippets,
    extract_terms,
    extract_themes,
    generate_suggested_questions,
)

__all__ = [
    "ScoringStrategy",
    "SimilarityStrategy",
    "ThemeBoostStrategy",
    "CHAT_STOP_WORDS",
    "STOP_WORDS",
    "extract_context_snippets",
    "extract_terms",
    "extract_themes",
    "generate_suggested_questions",
]
