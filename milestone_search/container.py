import logging
from dataclasses import dataclass, field
from typing import Any, Callable, TypeVar

from .config.settings import Settings

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass
class Container:
    """Factories keyed by protocol or service type, optionally cached."""

    _factories: dict[type, Callable[[], Any]] = field(default_factory=dict)
    _singletons: dict[type, Any] = field(default_factory=dict)
    _singleton_flags: set[type] = field(default_factory=set)

    def register(
        self, interface: type[T], factory: Callable[[], T], singleton: bool = False
    ) -> None:
        """Register factory for interface.

        Args:
            interface: Interface type.
            factory: Factory function.
            singleton: Whether to cache instance.
        """
        self._factories[interface] = factory
        if singleton:
            self._singleton_flags.add(interface)

    def resolve(self, interface: type[T]) -> T:
        """Build or return the cached instance for interface.

        Raises:
            KeyError: If nothing is registered for interface.
        """
        if interface in self._singletons:
            return self._singletons[interface]

        if interface not in self._factories:
            raise KeyError(f"No factory registered for {interface}")

        instance = self._factories[interface]()

        if interface in self._singleton_flags:
            self._singletons[interface] = instance

        return instance

    def reset(self) -> None:
        """Reset singletons (for testing)."""
        self._singletons.clear()


container = Container()


def _embedding_provider(settings: Settings):
    if settings.embedding_provider == "local":
        from .infrastructure.embeddings.sentence_transformer import (
            SentenceTransformerEmbedder,
        )

        return SentenceTransformerEmbedder(settings.embedding_model)

    if settings.embedding_provider == "openai":
        from .infrastructure.embeddings.openai_embedder import OpenAIEmbeddingProvider

        return OpenAIEmbeddingProvider(
            api_key=settings.openai_api_key, base_url=settings.openai_base_url
        )

    raise ValueError(f"Unknown embedding provider: {settings.embedding_provider}")


def configure_container(settings: Settings, use_memory_store: bool = False) -> Container:
    """Configure container with all dependencies.

    Args:
        settings: Application settings.
        use_memory_store: Keep content in process instead of Supabase.

    Returns:
        Configured container.
    """
    from .core.models.search import SearchConfigOptions
    from .core.protocols.content_store import ContentStoreProtocol
    from .core.protocols.embedder import EmbeddingProvider
    from .core.services.ai_search_service import AISearchService
    from .core.services.context_service import ContextService
    from .core.services.conversation_search import ConversationSearchService
    from .core.services.ingest_service import IngestService
    from .core.services.search_config_service import SearchConfigService
    from .core.services.search_service import SearchService
    from .infrastructure.stores.memory_store import MemoryContentStore
    from .infrastructure.stores.supabase_store import SupabaseContentStore

    container.register(
        EmbeddingProvider,
        lambda: _embedding_provider(settings),
        singleton=True,
    )

    if use_memory_store:
        container.register(
            ContentStoreProtocol,
            lambda: MemoryContentStore(
                embedding_provider=container.resolve(EmbeddingProvider),
                embedding_model=settings.embedding_model,
            ),
            singleton=True,
        )
    else:
        container.register(
            ContentStoreProtocol,
            lambda: SupabaseContentStore(
                url=settings.supabase_url,
                key=settings.supabase_key,
                timeout=settings.supabase_timeout,
            ),
            singleton=True,
        )

    container.register(
        SearchConfigService,
        lambda: SearchConfigService(
            store=container.resolve(ContentStoreProtocol),
            defaults=SearchConfigOptions(
                embedding_model=settings.embedding_model,
                embedding_dim=settings.embedding_dim,
                chunk_size=settings.chunk_size,
                chunk_overlap=settings.chunk_overlap,
            ),
        ),
        singleton=True,
    )

    container.register(
        IngestService,
        lambda: IngestService(embedding_provider=container.resolve(EmbeddingProvider)),
        singleton=True,
    )

    container.register(
        SearchService,
        lambda: SearchService(
            embedding_provider=container.resolve(EmbeddingProvider),
            store=container.resolve(ContentStoreProtocol),
            embedding_model=settings.embedding_model,
            config_service=container.resolve(SearchConfigService),
            text_weight=settings.hybrid_text_weight,
            vector_weight=settings.hybrid_vector_weight,
        ),
        singleton=True,
    )

    container.register(
        ConversationSearchService,
        lambda: ConversationSearchService(
            embedding_provider=container.resolve(EmbeddingProvider),
            search_service=container.resolve(SearchService),
        ),
        singleton=True,
    )

    container.register(
        AISearchService,
        lambda: AISearchService(
            store=container.resolve(ContentStoreProtocol),
            embedding_provider=container.resolve(EmbeddingProvider),
            embedding_model=settings.embedding_model,
            config_service=container.resolve(SearchConfigService),
            ingest_service=container.resolve(IngestService),
            search_service=container.resolve(SearchService),
            conversation_search=container.resolve(ConversationSearchService),
        ),
        singleton=True,
    )

    container.register(
        ContextService,
        lambda: ContextService(
            search_service=container.resolve(SearchService),
            match_threshold=settings.context_match_threshold,
            match_count=settings.context_match_count,
            text_weight=settings.hybrid_text_weight,
            vector_weight=settings.hybrid_vector_weight,
            history_messages=settings.context_history_messages,
            terms_per_message=settings.context_terms_per_message,
        ),
        singleton=True,
    )

    logger.info("Container configured")
    return container
