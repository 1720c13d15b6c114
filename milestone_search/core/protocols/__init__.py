"""Protocol interfaces for dependency injection."""
from .content_store import ContentStoreProtocol
from .embedder import EmbeddingProvider

__all__ = [
    "ContentStoreProtocol",
    "EmbeddingProvider",
]
