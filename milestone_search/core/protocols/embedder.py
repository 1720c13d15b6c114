"""Embedding provider protocol for dependency injection."""
from typing import Protocol, runtime_checkable


@runtime_checkable
class EmbeddingProvider(Protocol):
    """Protocol for embedding providers."""

    async def generate_embedding(self, text: str, model: str) -> list[float]:
        """Embed a single text.

        Args:
            text: Text to embed.
            model: Embedding model identifier.

        Returns:
            Embedding vector with the model's dimensionality.
        """
        ...
