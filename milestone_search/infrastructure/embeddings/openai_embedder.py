import logging
from typing import Optional

from openai import AsyncOpenAI

from milestone_search.core.errors import EmbeddingError

logger = logging.getLogger(__name__)


class OpenAIEmbeddingProvider:
    """Embedding provider for the OpenAI embeddings API."""

    def __init__(
        self,
        api_key: str,
        base_url: Optional[str] = None,
        client: Optional[AsyncOpenAI] = None,
    ):
        """Initialize OpenAI embedding provider.

        Args:
            api_key: OpenAI API key.
            base_url: Alternative OpenAI-compatible API URL.
            client: Preconfigured client, overrides key and URL.
        """
        self._client = client or AsyncOpenAI(api_key=api_key, base_url=base_url)

    async def generate_embedding(self, text: str, model: str) -> list[float]:
        try:
            response = await self._client.embeddings.create(model=model, input=text)
        except Exception as e:
            logger.error(f"Failed to generate embedding with {model}: {e}")
            raise

        if not response.data or not response.data[0].embedding:
            logger.error(f"Invalid embedding response from {model}")
            raise EmbeddingError("Invalid embedding response from OpenAI API")

        return list(response.data[0].embedding)
