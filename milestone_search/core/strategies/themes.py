"""Theme extraction, snippets and follow-up questions."""

from typing import Iterable, Sequence

from ..models.chat import ChatMessage
from ..models.search import SearchResult

MIN_THEME_LENGTH = 5
MAX_CONVERSATION_THEMES = 5
MAX_QUESTION_TOPICS = 3
MAX_SNIPPETS = 3
SNIPPET_WORDS = 50

STOP_WORDS = frozenset({
    "the", "a", "an", "and", "or", "but", "in", "on", "at", "to", "for", "of",
    "with", "by", "from", "up", "about", "into", "through", "during", "before",
    "after", "above", "below", "between", "among", "is", "are", "was", "were",
    "be", "been", "being", "have", "has", "had", "do", "does", "did", "will",
    "would", "could", "should", "may", "might", "must", "can", "this", "that",
    "these", "those",
})

# Chat context retrieval also drops question words
CHAT_STOP_WORDS = frozenset({
    "the", "a", "an", "and", "or", "but", "in", "on", "at", "to", "for", "of",
    "with", "by", "from", "this", "that", "these", "those", "what", "which",
    "who", "when", "where", "why", "how", "would", "could", "should", "will",
    "can", "may", "might", "must",
})

CONVERSATION_ROLES = ("user", "assistant")


def extract_terms(text: str, stop_words: frozenset[str] = STOP_WORDS) -> list[str]:
    """Lower-cased whitespace tokens longer than 4 chars that are not stop words.

    Order and duplicates are preserved.
    """
    return [
        word
        for word in text.lower().split()
        if len(word) >= MIN_THEME_LENGTH and word not in stop_words
    ]


def _distinct(words: Iterable[str], limit: int) -> list[str]:
    seen: dict[str, None] = {}
    for word in words:
        if word not in seen:
            seen[word] = None
            if len(seen) == limit:
                break
    return list(seen)


def extract_themes(
    history: Sequence[ChatMessage], limit: int = MAX_CONVERSATION_THEMES
) -> list[str]:
    """First ``limit`` distinct terms across user and assistant turns."""
    words = (
        word
        for message in history
        if message.role in CONVERSATION_ROLES
        for word in extract_terms(message.content)
    )
    return _distinct(words, limit)


def extract_context_snippets(
    results: Sequence[SearchResult], max_snippets: int = MAX_SNIPPETS
) -> list[str]:
    """Up to ``SNIPPET_WORDS`` words around the middle of each top result."""
    snippets = []
    for result in results[:max_snippets]:
        words = result.text.split(" ")
        length = min(SNIPPET_WORDS, len(words))
        start = max(0, len(words) // 2 - length // 2)
        snippets.append(" ".join(words[start : start + length]))
    return snippets


def generate_suggested_questions(
    results: Sequence[SearchResult], topic_description: str
) -> list[str]:
    """Template follow-up questions seeded by the first topics in the results.

    Returns:
        Three questions, or an empty list when no result text yields a topic.
    """
    topics = _distinct(
        (word for result in results for word in extract_terms(result.text)),
        MAX_QUESTION_TOPICS,
    )
    if not topics:
        return []

    return [
        f"What are the key aspects of {', '.join(topics)}?",
        f"How do these topics relate to {topic_description}?",
        "What are the main challenges or opportunities in this area?",
    ]
