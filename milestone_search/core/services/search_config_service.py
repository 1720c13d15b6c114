"""Search config service - per-project indexing parameters."""

import logging
from dataclasses import replace
from typing import Optional

from ..errors import InvalidSearchConfigError, SearchConfigNotFoundError
from ..models.search import SearchConfig, SearchConfigOptions
from ..protocols.content_store import ContentStoreProtocol

logger = logging.getLogger(__name__)

DEFAULT_SEARCH_CONFIG = SearchConfigOptions(
    embedding_model="text-embedding-3-small",
    embedding_dim=1536,
    chunk_size=1000,
    chunk_overlap=200,
    rerank_model=None,
    filters={},
)


def validate_search_config(config: SearchConfigOptions) -> list[str]:
    """Check option values, ignoring unset ones.

    Returns:
        Human-readable errors, empty when valid.
    """
    errors = []

    if config.embedding_dim is not None and config.embedding_dim <= 0:
        errors.append("Embedding dimension must be positive")

    if config.chunk_size is not None and config.chunk_size <= 0:
        errors.append("Chunk size must be positive")

    if config.chunk_overlap is not None and config.chunk_overlap < 0:
        errors.append("Chunk overlap must be non-negative")

    if (
        config.chunk_size is not None
        and config.chunk_overlap is not None
        and config.chunk_overlap >= config.chunk_size
    ):
        errors.append("Chunk overlap must be less than chunk size")

    return errors


class SearchConfigService:
    """Creates and reads project search configs through the content store."""

    def __init__(
        self,
        store: ContentStoreProtocol,
        defaults: SearchConfigOptions | None = None,
    ):
        """Initialize config service.

        Args:
            store: Content store holding config rows.
            defaults: Values for options the caller leaves unset.
        """
        self._store = store
        self._defaults = replace(DEFAULT_SEARCH_CONFIG, **_set_fields(defaults))

    def build(
        self, project_id: str, options: SearchConfigOptions | None = None
    ) -> SearchConfig:
        """Merge options over defaults into a config for ``project_id``."""
        merged = replace(self._defaults, **_set_fields(options))
        return SearchConfig(
            project_id=project_id,
            embedding_model=merged.embedding_model,
            embedding_dim=merged.embedding_dim,
            chunk_size=merged.chunk_size,
            chunk_overlap=merged.chunk_overlap,
            rerank_model=merged.rerank_model,
            filters=dict(merged.filters or {}),
        )

    async def initialize(
        self, project_id: str, options: SearchConfigOptions | None = None
    ) -> str:
        """Create the project's config.

        A second call for the same project fails in the store.

        Returns:
            Config ID.

        Raises:
            InvalidSearchConfigError: If the merged options are invalid.
            StoreError: If the store rejects the insert.
        """
        config = self.build(project_id, options)
        errors = validate_search_config(
            SearchConfigOptions(
                embedding_dim=config.embedding_dim,
                chunk_size=config.chunk_size,
                chunk_overlap=config.chunk_overlap,
            )
        )
        if errors:
            raise InvalidSearchConfigError(errors)

        config_id = await self._store.init_search_config(config)
        logger.info(
            f"Search config initialized for project {project_id}: "
            f"model={config.embedding_model} chunk={config.chunk_size}/{config.chunk_overlap}"
        )
        return config_id

    async def get(self, project_id: str) -> Optional[SearchConfig]:
        """Get the project's config, None if it was never initialized."""
        return await self._store.get_search_config(project_id)

    async def require(self, project_id: str) -> SearchConfig:
        """Get the project's config or raise ``SearchConfigNotFoundError``."""
        config = await self.get(project_id)
        if config is None:
            raise SearchConfigNotFoundError(project_id)
        return config


def _set_fields(options: SearchConfigOptions | None) -> dict:
    if options is None:
        return {}
    fields = {
        "embedding_model": options.embedding_model,
        "embedding_dim": options.embedding_dim,
        "chunk_size": options.chunk_size,
        "chunk_overlap": options.chunk_overlap,
        "rerank_model": options.rerank_model,
        "filters": options.filters,
    }
    return {k: v for k, v in fields.items() if v is not None}
