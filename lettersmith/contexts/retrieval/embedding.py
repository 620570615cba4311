"""
Embedding gateways for the Retrieval context.

An embedding gateway turns text into a fixed-length vector. The model name and the
expected dimensionality are configuration passed at construction time; a gateway
never returns an empty or wrongly-sized vector, it raises EmbeddingError instead.

Adapters:
- OpenAIEmbeddingGateway: OpenAI embeddings API
- HashingEmbeddingGateway: deterministic token hashing, offline (local runs, tests)
"""

import hashlib
import os
import re
from abc import ABC, abstractmethod
from typing import List, Optional

from lettersmith.exceptions import EmbeddingError

Vector = List[float]

DEFAULT_OPENAI_EMBEDDING_MODEL = "text-embedding-ada-002"
DEFAULT_HASHING_DIMENSIONS = 256

_TOKEN = re.compile(r"\w+")


class EmbeddingGateway(ABC):
    """
    Abstract base for embedding gateways.

    Subclasses implement _embed() for the actual call. embed() checks the result
    against the configured dimensionality.

    Attributes:
        model: Embedding model name; vectors from different models are not comparable
        dimensions: Expected vector length, or None to accept any non-empty vector
    """

    def __init__(self, model: str, dimensions: Optional[int] = None):
        self.model = model
        self.dimensions = dimensions

    @abstractmethod
    def _embed(self, text: str) -> Vector:
        """Produce the raw vector for text. Implemented by subclasses."""
        pass

    def embed(self, text: str) -> Vector:
        """
        Embed text.

        Raises:
            EmbeddingError: If the upstream call fails, or returns an empty vector
                or one whose length differs from the configured dimensions
        """
        vector = self._embed(text)

        if not vector:
            raise EmbeddingError(f"{self.model} returned an empty embedding", operation="embed")
        if self.dimensions is not None and len(vector) != self.dimensions:
            raise EmbeddingError(
                f"{self.model} returned {len(vector)} dimensions, expected {self.dimensions}",
                operation="embed",
            )
        return vector


class OpenAIEmbeddingGateway(EmbeddingGateway):
    """Embedding gateway backed by the OpenAI embeddings API."""

    def __init__(
        self,
        model: str = DEFAULT_OPENAI_EMBEDDING_MODEL,
        dimensions: Optional[int] = None,
        api_key: Optional[str] = None,
        client=None,
    ):
        # Lazy import - openai SDK is heavy, only load if this gateway is used
        import openai

        super().__init__(model=model, dimensions=dimensions)
        self._sdk_error = openai.OpenAIError

        if client is None:
            api_key = api_key or os.getenv("OPENAI_API_KEY")
            if not api_key:
                raise ValueError("OPENAI_API_KEY environment variable not set")
            client = openai.OpenAI(api_key=api_key)
        self.client = client

    def _embed(self, text: str) -> Vector:
        try:
            response = self.client.embeddings.create(model=self.model, input=text)
        except self._sdk_error as e:
            raise EmbeddingError(
                f"OpenAI embedding request failed for model {self.model}",
                operation="embed",
                original_error=e,
            ) from e

        if not response.data:
            raise EmbeddingError(f"{self.model} returned no embedding data", operation="embed")
        return list(response.data[0].embedding)


class HashingEmbeddingGateway(EmbeddingGateway):
    """
    Deterministic feature-hashing embedding.

    Each lower-cased word token is hashed to a bucket and a sign; the bucket counts
    are normalized to unit length. Texts sharing vocabulary get higher cosine
    similarity. Text without any word token maps to the zero vector.
    """

    def __init__(self, dimensions: int = DEFAULT_HASHING_DIMENSIONS, model: str = "hashing"):
        if dimensions <= 0:
            raise ValueError(f"dimensions must be positive, got {dimensions}")
        super().__init__(model=f"{model}-{dimensions}", dimensions=dimensions)

    def _embed(self, text: str) -> Vector:
        vector = [0.0] * self.dimensions
        for token in _TOKEN.findall(text.lower()):
            digest = hashlib.md5(token.encode("utf-8")).hexdigest()
            bucket = int(digest[:8], 16) % self.dimensions
            sign = 1.0 if int(digest[8], 16) % 2 == 0 else -1.0
            vector[bucket] += sign

        norm = sum(v * v for v in vector) ** 0.5 or 1.0
        return [v / norm for v in vector]
