"""Domain models."""
from .chat import ChatMessage
from .content import (
    ChunkingOptions,
    ContentChunk,
    ContentProcessingResult,
    RecordEmbedding,
    SourceType,
)
from .search import (
    ContextItem,
    ConversationSearchQuery,
    ConversationSearchResult,
    RecordSearchResult,
    SearchConfig,
    SearchConfigOptions,
    SearchOptions,
    SearchResult,
)

__all__ = [
    "ChatMessage",
    "ChunkingOptions",
    "ContentChunk",
    "ContentProcessingResult",
    "RecordEmbedding",
    "SourceType",
    "ContextItem",
    "ConversationSearchQuery",
    "ConversationSearchResult",
    "RecordSearchResult",
    "SearchConfig",
    "SearchConfigOptions",
    "SearchOptions",
    "SearchResult",
]
