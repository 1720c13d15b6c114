"""Tests for dependency wiring."""

import pytest

from milestone_search.config.settings import Settings
from milestone_search.container import container, configure_container
from milestone_search.core.protocols.content_store import ContentStoreProtocol
from milestone_search.core.protocols.embedder import EmbeddingProvider
from milestone_search.core.services.ai_search_service import AISearchService
from milestone_search.core.services.context_service import ContextService
from milestone_search.infrastructure.embeddings.openai_embedder import (
    OpenAIEmbeddingProvider,
)
from milestone_search.infrastructure.stores.memory_store import MemoryContentStore


@pytest.fixture(autouse=True)
def reset_container():
    container.reset()
    container._factories.clear()
    container._singleton_flags.clear()
    yield
    container.reset()
    container._factories.clear()
    container._singleton_flags.clear()


def test_memory_wiring():
    configure_container(
        Settings(embedding_provider="openai", openai_api_key="sk-test"),
        use_memory_store=True,
    )

    assert isinstance(container.resolve(EmbeddingProvider), OpenAIEmbeddingProvider)
    assert isinstance(container.resolve(ContentStoreProtocol), MemoryContentStore)
    assert isinstance(container.resolve(ContextService), ContextService)

    service = container.resolve(AISearchService)
    assert container.resolve(AISearchService) is service


def test_unknown_embedding_provider():
    configure_container(Settings(embedding_provider="nope"), use_memory_store=True)

    with pytest.raises(ValueError, match="Unknown embedding provider"):
        container.resolve(EmbeddingProvider)


def test_protocols_are_runtime_checkable(embedder, memory_store):
    assert isinstance(embedder, EmbeddingProvider)
    assert isinstance(memory_store, ContentStoreProtocol)


def test_unregistered_type_raises():
    with pytest.raises(KeyError):
        container.resolve(ContextService)
