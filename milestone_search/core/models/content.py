"""Indexing domain models."""
from dataclasses import dataclass, field
from enum import Enum


class SourceType(str, Enum):
    """Kind of entity a chunk or embedding derives from."""
    RECORD = "record"
    FILE = "file"
    WEBSITE = "website"


@dataclass(frozen=True)
class ChunkingOptions:
    """Chunk window size and overlap, in characters."""
    chunk_size: int
    chunk_overlap: int


@dataclass
class ContentChunk:
    """Chunk row ready for insertion into the content store."""
    source_type: SourceType
    source_id: str
    project_id: str
    chunk_index: int
    text: str
    embedding: str  # "[v1,v2,...]"
    model: str

    def to_row(self) -> dict:
        return {
            "source_type": self.source_type.value,
            "source_id": self.source_id,
            "project_id": self.project_id,
            "chunk_index": self.chunk_index,
            "text": self.text,
            "embedding": self.embedding,
            "model": self.model,
        }


@dataclass
class RecordEmbedding:
    """Whole-document embedding row."""
    record_id: str
    project_id: str
    embedding: str
    model: str
    content: str | None = None  # not a table column

    def to_row(self) -> dict:
        return {
            "record_id": self.record_id,
            "project_id": self.project_id,
            "embedding": self.embedding,
            "model": self.model,
        }


@dataclass
class ContentProcessingResult:
    """Output of indexing one source document."""
    chunks: list[ContentChunk] = field(default_factory=list)
    record_embedding: RecordEmbedding | None = None
