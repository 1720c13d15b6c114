"""Content store protocol for dependency injection."""
from typing import Optional, Protocol, runtime_checkable

from ..models.content import ContentChunk, RecordEmbedding, SourceType
from ..models.search import SearchConfig


@runtime_checkable
class ContentStoreProtocol(Protocol):
    """Protocol for the persistent chunk/embedding store.

    Vector arguments are passed already serialized as ``"[v1,...,vn]"``.
    Implementations raise ``StoreError`` on any failure.
    """

    async def init_search_config(self, config: SearchConfig) -> str:
        """Create the project's search config row.

        Returns:
            ID of the new config. Fails if the project already has one.
        """
        ...

    async def get_search_config(self, project_id: str) -> Optional[SearchConfig]:
        """Get the project's search config, or None if not initialized."""
        ...

    async def insert_chunks(self, chunks: list[ContentChunk]) -> None:
        """Bulk insert content chunks."""
        ...

    async def insert_record_embedding(self, record_embedding: RecordEmbedding) -> None:
        """Insert a whole-document embedding."""
        ...

    async def delete_chunks(self, source_type: SourceType, source_id: str) -> None:
        """Delete all chunks of a source."""
        ...

    async def delete_record_embedding(self, record_id: str) -> None:
        """Delete a record's whole-document embedding."""
        ...

    async def search_chunks(
        self,
        query_embedding: str,
        project_id: str,
        source_types: Optional[list[str]],
        match_threshold: float,
        match_count: int,
    ) -> list[dict]:
        """Vector similarity search over chunks.

        Returns:
            Rows ranked by descending ``similarity``.
        """
        ...

    async def search_hybrid(
        self,
        query_text: str,
        project_id: str,
        source_types: Optional[list[str]],
        match_threshold: float,
        match_count: int,
        text_weight: float,
        vector_weight: float,
    ) -> list[dict]:
        """Blended lexical and vector search over chunks."""
        ...

    async def search_similar_records(
        self,
        query_embedding: str,
        project_id: str,
        exclude_record_id: Optional[str],
        match_threshold: float,
        match_count: int,
    ) -> list[dict]:
        """Vector similarity search over whole-document embeddings."""
        ...
