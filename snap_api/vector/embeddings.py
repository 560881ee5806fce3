"""
Embedding providers for the similarity index.
Each provider turns a batch of strings into equal-length float vectors and
reports failures as ProviderError.
"""

from abc import ABC, abstractmethod
import hashlib
import struct
from typing import List, Optional, Sequence

from sentence_transformers import SentenceTransformer

from ..core.errors import ProviderError


class IEmbeddingProvider(ABC):
    """Abstract interface for embedding providers."""

    def load(self) -> None:
        """Acquire expensive resources up front. Default is a no-op."""
        pass

    @abstractmethod
    def embed_texts(self, texts: Sequence[str]) -> List[List[float]]:
        """Embed a batch of texts, one vector per text in input order."""
        pass

    @abstractmethod
    def get_dimension(self) -> int:
        """Get the dimension of the embedding vectors."""
        pass

    def embed_text(self, text: str) -> List[float]:
        """Embed a single text."""
        embeddings = self.embed_texts([text])
        if not embeddings:
            raise ProviderError("No embedding returned")
        return embeddings[0]


class DeterministicHashEmbedding(IEmbeddingProvider):
    """Deterministic hash-based embedding provider for testing purposes.

    Every component is derived from a SHA-256 digest of the text, so the same
    string always maps to the same vector without loading any model. Vectors
    carry no semantic meaning.
    """

    def __init__(self, dimension: int = 384):
        self.dimension = dimension

    def _embed_one(self, text: str) -> List[float]:
        vector = []
        block = 0
        while len(vector) < self.dimension:
            digest = hashlib.sha256(f"{block}:{text}".encode("utf-8")).digest()
            # 8 unsigned 32-bit ints per digest, mapped to [-1, 1]
            for value in struct.unpack(">8I", digest):
                vector.append((value / 2**32) * 2 - 1)
            block += 1
        return vector[:self.dimension]

    def embed_texts(self, texts: Sequence[str]) -> List[List[float]]:
        return [self._embed_one(text) for text in texts]

    def get_dimension(self) -> int:
        return self.dimension


class SentenceTransformerEmbedding(IEmbeddingProvider):
    """Local sentence-transformers model.

    Uses all-MiniLM-L6-v2 (384 dimensions) by default. The model is loaded on
    first use or by an explicit load() call.
    """

    def __init__(self, model_name: str = "all-MiniLM-L6-v2"):
        self.model_name = model_name
        self._model = None
        self._dimension = None

    @property
    def model(self):
        if self._model is None:
            self._model = SentenceTransformer(self.model_name)
        return self._model

    def load(self) -> None:
        # Errors propagate: a model that cannot load is fatal for the caller
        _ = self.model

    def embed_texts(self, texts: Sequence[str]) -> List[List[float]]:
        try:
            embeddings = self.model.encode(list(texts), convert_to_numpy=True)
        except Exception as e:
            raise ProviderError(f"Embedding failed: {e}") from e
        return embeddings.tolist()

    def get_dimension(self) -> int:
        if self._dimension is None:
            self._dimension = self.model.get_sentence_embedding_dimension()
        return self._dimension


class OllamaEmbedding(IEmbeddingProvider):
    """Remote embeddings served by Ollama's /api/embed endpoint."""

    def __init__(self, service=None, model_name: Optional[str] = None):
        if service is None:
            from ..llm.ollama_service import OllamaService
            service = OllamaService(embed_model=model_name) if model_name else OllamaService()
        self.service = service
        self._dimension = None

    def embed_texts(self, texts: Sequence[str]) -> List[List[float]]:
        embeddings = self.service.embed_texts(list(texts))
        if embeddings and self._dimension is None:
            self._dimension = len(embeddings[0])
        return embeddings

    def get_dimension(self) -> int:
        if self._dimension is None:
            self._dimension = len(self.embed_text("dimension probe"))
        return self._dimension
