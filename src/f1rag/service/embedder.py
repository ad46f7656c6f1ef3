"""Embedding strategies: a real backend with a deterministic fallback.

The strategy is picked once at construction time (see ``service.factory``):
- MockEmbedder: pure function of the text, reproducible bit for bit
- BackendEmbedder: delegates to an LLM backend and falls back to the mock
  per call whenever the backend fails or returns a malformed vector
"""

import logging
import math
import re
from typing import Any, Protocol

from f1rag.constants import (
    BACKEND_TEXT_LIMIT,
    DEFAULT_EMBEDDING_DIMENSIONS,
    MOCK_EMBEDDING_SCALE,
)
from f1rag.errors import InvalidInputError
from f1rag.llm.base import LLMService
from f1rag.service.database.utils import cosine_similarity

logger = logging.getLogger(__name__)

__all__ = ["Embedder", "MockEmbedder", "BackendEmbedder", "cosine_similarity"]


class Embedder(Protocol):
    """Maps text to a fixed-dimension vector."""

    dimension: int

    def embed(self, text: str) -> list[float]:
        ...

    def embed_batch(self, texts: list[str]) -> list[list[float]]:
        ...


def _validate_text(text: Any) -> str:
    if not isinstance(text, str) or not text.strip():
        raise InvalidInputError("Please provide valid text to embed")
    return text


def _validate_batch(texts: Any) -> list[str]:
    if not isinstance(texts, (list, tuple)) or not texts:
        raise InvalidInputError("Invalid texts array for batch embedding")
    return [_validate_text(text) for text in texts]


def preprocess_text(text: str) -> str:
    """Trim, collapse whitespace and cap text before sending it to a backend."""
    return re.sub(r"\s+", " ", text.strip())[:BACKEND_TEXT_LIMIT]


class MockEmbedder:
    """Deterministic embedder used when no backend is reachable.

    Every character at position ``i`` with code point ``c`` writes
    ``sin(c + i) * 0.1`` to slot ``(c * (i + 1)) % dimension``. Later writes
    to a colliding slot overwrite earlier ones.
    """

    def __init__(self, dimension: int = DEFAULT_EMBEDDING_DIMENSIONS) -> None:
        self.dimension = dimension

    def embed(self, text: str) -> list[float]:
        _validate_text(text)
        vector = [0.0] * self.dimension
        for i, char in enumerate(text):
            code = ord(char)
            vector[(code * (i + 1)) % self.dimension] = math.sin(code + i) * MOCK_EMBEDDING_SCALE
        return vector

    def embed_batch(self, texts: list[str]) -> list[list[float]]:
        return [self.embed(text) for text in _validate_batch(texts)]


class BackendEmbedder:
    """Embedder backed by an LLM service, degrading to a fallback per call."""

    def __init__(
        self,
        llm_service: LLMService,
        model: str | None = None,
        dimension: int = DEFAULT_EMBEDDING_DIMENSIONS,
        fallback: Embedder | None = None,
    ) -> None:
        self.llm_service = llm_service
        self.model = model
        self.dimension = dimension
        self.fallback = fallback or MockEmbedder(dimension)
        logger.info(f"🧠 Embedding backend ready: model={model or 'service default'}, dim={dimension}")

    def _check_vector(self, vector: Any) -> list[float]:
        if not isinstance(vector, (list, tuple)) or len(vector) != self.dimension:
            size = len(vector) if isinstance(vector, (list, tuple)) else type(vector).__name__
            raise ValueError(f"Malformed embedding from backend: expected {self.dimension}, got {size}")
        return [float(v) for v in vector]

    def embed(self, text: str) -> list[float]:
        _validate_text(text)
        try:
            vectors = self.llm_service.generate_embeddings([preprocess_text(text)], self.model)
            return self._check_vector(vectors[0])
        except Exception as e:
            logger.warning(f"⚠️ Embedding backend failed, falling back to mock embeddings: {e}")
            return self.fallback.embed(text)

    def embed_batch(self, texts: list[str]) -> list[list[float]]:
        texts = _validate_batch(texts)
        try:
            vectors = self.llm_service.generate_embeddings(
                [preprocess_text(text) for text in texts], self.model
            )
            if len(vectors) != len(texts):
                raise ValueError(f"Backend returned {len(vectors)} embeddings for {len(texts)} texts")
            return [self._check_vector(vector) for vector in vectors]
        except Exception as e:
            logger.warning(f"⚠️ Batch embedding backend failed, falling back to mock embeddings: {e}")
            return self.fallback.embed_batch(texts)
