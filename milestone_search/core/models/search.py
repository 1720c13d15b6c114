"""Search domain models."""
from dataclasses import dataclass, field
from typing import Any, Optional

from .chat import ChatMessage
from .content import SourceType


@dataclass
class SearchOptions:
    """Threshold and count passed through to the store."""
    match_threshold: float = 0.7
    match_count: int = 10
    include_metadata: bool = True


@dataclass
class SearchConfigOptions:
    """Caller overrides for a new project's search configuration.

    Unset fields fall back to the defaults in ``DEFAULT_SEARCH_CONFIG``.
    """
    embedding_model: Optional[str] = None
    embedding_dim: Optional[int] = None
    chunk_size: Optional[int] = None
    chunk_overlap: Optional[int] = None
    rerank_model: Optional[str] = None
    filters: Optional[dict[str, Any]] = None


@dataclass
class SearchConfig:
    """Per-project search configuration."""
    project_id: str
    embedding_model: str
    embedding_dim: int
    chunk_size: int
    chunk_overlap: int
    rerank_model: Optional[str] = None
    filters: dict[str, Any] = field(default_factory=dict)
    id: Optional[str] = None

    @classmethod
    def from_row(cls, row: dict, project_id: str) -> "SearchConfig":
        return cls(
            id=row.get("id"),
            project_id=row.get("project_id") or project_id,
            embedding_model=row["embedding_model"],
            embedding_dim=int(row["embedding_dim"]),
            chunk_size=int(row["chunk_size"]),
            chunk_overlap=int(row["chunk_overlap"]),
            rerank_model=row.get("rerank_model"),
            filters=row.get("filters") or {},
        )


@dataclass
class SearchResult:
    """Ranked chunk returned by vector or hybrid search."""
    id: str
    source_type: str
    source_id: str
    text: str
    chunk_index: int
    similarity: float
    metadata: Optional[dict[str, Any]] = None

    @classmethod
    def from_row(cls, row: dict, include_metadata: bool = True) -> "SearchResult":
        return cls(
            id=str(row["id"]),
            source_type=row["source_type"],
            source_id=str(row["source_id"]),
            text=row["text"],
            chunk_index=int(row["chunk_index"]),
            similarity=float(row["similarity"]),
            metadata=row.get("metadata") if include_metadata else None,
        )


@dataclass
class RecordSearchResult:
    """Whole-document match from similar-record search."""
    id: str
    record_id: str
    content: str
    similarity: float
    metadata: Optional[dict[str, Any]] = None

    @classmethod
    def from_row(cls, row: dict) -> "RecordSearchResult":
        return cls(
            id=str(row["id"]),
            record_id=str(row["record_id"]),
            content=row.get("content") or "",
            similarity=float(row["similarity"]),
            metadata=row.get("metadata"),
        )


@dataclass
class ConversationSearchResult(SearchResult):
    """Search result annotated with conversation context."""
    relevance_score: float = 0.0
    context_snippets: list[str] = field(default_factory=list)
    suggested_questions: list[str] = field(default_factory=list)


@dataclass
class ConversationSearchQuery:
    """Topic query with optional dialogue history."""
    topic_description: str
    project_id: str
    conversation_history: list[ChatMessage] = field(default_factory=list)
    source_types: Optional[list[SourceType]] = None
    options: Optional[SearchOptions] = None


@dataclass
class ContextItem:
    """Piece of project content handed to the chat model."""
    text: str
    source_type: str
    source_id: str
    similarity: Optional[float] = None
