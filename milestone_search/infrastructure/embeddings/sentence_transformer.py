import asyncio
import logging

import numpy as np
from sentence_transformers import SentenceTransformer

logger = logging.getLogger(__name__)


class SentenceTransformerEmbedder:
    """Local embedding provider, one cached model per model name."""

    def __init__(
        self,
        default_model: str = "intfloat/multilingual-e5-base",
        text_prefix: str = "",
    ):
        """Initialize embedder.

        Args:
            default_model: Model loaded by ``warmup``.
            text_prefix: Prepended to every text (e5 models expect one).
        """
        self._default_model = default_model
        self._text_prefix = text_prefix
        self._models: dict[str, SentenceTransformer] = {}

    def model(self, name: str) -> SentenceTransformer:
        if name not in self._models:
            logger.info(f"Loading embedding model: {name}")
            self._models[name] = SentenceTransformer(name)
        return self._models[name]

    def warmup(self) -> None:
        _ = self.model(self._default_model)
        logger.info("Embedding model warmed up")

    def encode(self, texts: str | list[str], model: str) -> np.ndarray:
        if isinstance(texts, str):
            texts = f"{self._text_prefix}{texts}"
        else:
            texts = [f"{self._text_prefix}{t}" for t in texts]
        return self.model(model).encode(texts, convert_to_numpy=True)

    async def generate_embedding(self, text: str, model: str) -> list[float]:
        embedding = await asyncio.to_thread(self.encode, text, model)
        return embedding.tolist()
