import logging
from typing import Any, Optional

import httpx

from milestone_search.core.errors import StoreError
from milestone_search.core.models.content import (
    ContentChunk,
    RecordEmbedding,
    SourceType,
)
from milestone_search.core.models.search import SearchConfig

logger = logging.getLogger(__name__)

CHUNK_TABLE = "content_chunk"
RECORD_EMBEDDING_TABLE = "record_embedding"


class SupabaseContentStore:
    """Content store using the Supabase PostgREST API.

    Similarity and hybrid ranking run in the database functions
    ``search_content_chunks``, ``search_content_hybrid`` and
    ``search_similar_records``.
    """

    def __init__(
        self,
        url: str,
        key: str,
        timeout: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """Initialize Supabase client.

        Args:
            url: Project URL.
            key: Service role or anon key.
            timeout: Request timeout in seconds.
            transport: Custom HTTP transport.
        """
        self._client = httpx.AsyncClient(
            base_url=f"{url.rstrip('/')}/rest/v1",
            headers={
                "apikey": key,
                "Authorization": f"Bearer {key}",
                "Content-Type": "application/json",
            },
            timeout=timeout,
            transport=transport,
        )

    async def __aenter__(self) -> "SupabaseContentStore":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    async def _request(
        self,
        operation: str,
        method: str,
        path: str,
        json: Any = None,
        params: Optional[dict] = None,
        prefer: Optional[str] = None,
    ) -> httpx.Response:
        headers = {"Prefer": prefer} if prefer else None
        try:
            resp = await self._client.request(
                method, path, json=json, params=params, headers=headers
            )
        except httpx.HTTPError as e:
            raise StoreError(operation, str(e) or type(e).__name__) from e

        if resp.is_error:
            raise StoreError(operation, _error_message(resp))
        return resp

    async def _rpc(self, operation: str, function: str, args: dict) -> Any:
        payload = {k: v for k, v in args.items() if v is not None}
        resp = await self._request(operation, "POST", f"/rpc/{function}", json=payload)
        logger.debug(f"RPC {function}: {resp.status_code}")
        return resp.json() if resp.content else None

    async def init_search_config(self, config: SearchConfig) -> str:
        data = await self._rpc(
            "Failed to initialize search config",
            "init_search_config",
            {
                "project_id": config.project_id,
                "embedding_model": config.embedding_model,
                "embedding_dim": config.embedding_dim,
                "chunk_size": config.chunk_size,
                "chunk_overlap": config.chunk_overlap,
                "rerank_model": config.rerank_model,
                "filters": config.filters,
            },
        )
        return str(data)

    async def get_search_config(self, project_id: str) -> Optional[SearchConfig]:
        data = await self._rpc(
            "Failed to get search config",
            "get_search_config",
            {"project_id": project_id},
        )
        if not data:
            return None
        return SearchConfig.from_row(data[0], project_id)

    async def insert_chunks(self, chunks: list[ContentChunk]) -> None:
        await self._request(
            "Failed to insert content chunks",
            "POST",
            f"/{CHUNK_TABLE}",
            json=[c.to_row() for c in chunks],
            prefer="return=minimal",
        )
        logger.info(f"Inserted {len(chunks)} content chunks")

    async def insert_record_embedding(self, record_embedding: RecordEmbedding) -> None:
        await self._request(
            "Failed to insert record embedding",
            "POST",
            f"/{RECORD_EMBEDDING_TABLE}",
            json=record_embedding.to_row(),
            prefer="return=minimal",
        )

    async def delete_chunks(self, source_type: SourceType, source_id: str) -> None:
        await self._request(
            "Failed to delete content chunks",
            "DELETE",
            f"/{CHUNK_TABLE}",
            params={
                "source_type": f"eq.{SourceType(source_type).value}",
                "source_id": f"eq.{source_id}",
            },
        )

    async def delete_record_embedding(self, record_id: str) -> None:
        await self._request(
            "Failed to delete record embedding",
            "DELETE",
            f"/{RECORD_EMBEDDING_TABLE}",
            params={"record_id": f"eq.{record_id}"},
        )

    async def search_chunks(
        self,
        query_embedding: str,
        project_id: str,
        source_types: Optional[list[str]],
        match_threshold: float,
        match_count: int,
    ) -> list[dict]:
        data = await self._rpc(
            "Search failed",
            "search_content_chunks",
            {
                "query_embedding": query_embedding,
                "project_id": project_id,
                "source_types": source_types,
                "match_threshold": match_threshold,
                "match_count": match_count,
            },
        )
        return data or []

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
        data = await self._rpc(
            "Hybrid search failed",
            "search_content_hybrid",
            {
                "query_text": query_text,
                "project_id": project_id,
                "source_types": source_types,
                "match_threshold": match_threshold,
                "match_count": match_count,
                "text_weight": text_weight,
                "vector_weight": vector_weight,
            },
        )
        return data or []

    async def search_similar_records(
        self,
        query_embedding: str,
        project_id: str,
        exclude_record_id: Optional[str],
        match_threshold: float,
        match_count: int,
    ) -> list[dict]:
        data = await self._rpc(
            "Record search failed",
            "search_similar_records",
            {
                "query_embedding": query_embedding,
                "project_id": project_id,
                "exclude_record_id": exclude_record_id,
                "match_threshold": match_threshold,
                "match_count": match_count,
            },
        )
        return data or []


def _error_message(resp: httpx.Response) -> str:
    """PostgREST error ``message`` if present, else the raw body."""
    try:
        body = resp.json()
    except ValueError:
        return resp.text or f"HTTP {resp.status_code}"
    if isinstance(body, dict) and body.get("message"):
        return str(body["message"])
    return resp.text or f"HTTP {resp.status_code}"
