"""
Embedding providers: hash, sentence-transformers and Ollama.
"""

from unittest.mock import MagicMock, patch

import numpy as np
import pytest

from snap_api.core.errors import ProviderError
from snap_api.vector.embeddings import (
    DeterministicHashEmbedding,
    IEmbeddingProvider,
    OllamaEmbedding,
    SentenceTransformerEmbedding,
)


def test_embedding_interface():
    """Test that the hash provider implements the interface correctly."""
    embedder = DeterministicHashEmbedding(dimension=384)

    assert isinstance(embedder, IEmbeddingProvider)
    assert embedder.get_dimension() == 384


def test_deterministic_embedding():
    """Test that the same input always produces the same output."""
    embedder = DeterministicHashEmbedding(dimension=384)

    vector1 = embedder.embed_text("happy hamster")
    vector2 = embedder.embed_text("happy hamster")

    assert vector1 == vector2
    assert len(vector1) == 384


def test_consistent_output_across_instances():
    """Two providers with the same dimension agree."""
    assert DeterministicHashEmbedding(64).embed_text("chef") == DeterministicHashEmbedding(64).embed_text("chef")


def test_different_inputs_produce_different_vectors():
    embedder = DeterministicHashEmbedding(dimension=64)
    assert embedder.embed_text("pirate") != embedder.embed_text("cowboy")


def test_embedding_with_different_dimensions():
    """Dimensions that are not a multiple of the digest width are truncated."""
    for dimension in (1, 8, 50, 512):
        vector = DeterministicHashEmbedding(dimension=dimension).embed_text("test")
        assert len(vector) == dimension


def test_hash_values_in_range():
    vector = DeterministicHashEmbedding(dimension=256).embed_text("")
    assert all(-1.0 <= v <= 1.0 for v in vector)


def test_embed_texts_preserves_order():
    embedder = DeterministicHashEmbedding(dimension=16)
    batch = embedder.embed_texts(["a", "b", "c"])

    assert batch == [embedder.embed_text("a"), embedder.embed_text("b"), embedder.embed_text("c")]


def test_embed_text_empty_result_raises():
    class EmptyProvider(IEmbeddingProvider):
        def embed_texts(self, texts):
            return []

        def get_dimension(self):
            return 0

    with pytest.raises(ProviderError):
        EmptyProvider().embed_text("anything")


class TestSentenceTransformerEmbedding:

    @patch("snap_api.vector.embeddings.SentenceTransformer")
    def test_model_loaded_lazily_once(self, mock_st):
        provider = SentenceTransformerEmbedding()
        mock_st.assert_not_called()

        provider.load()
        provider.load()

        mock_st.assert_called_once_with("all-MiniLM-L6-v2")

    @patch("snap_api.vector.embeddings.SentenceTransformer")
    def test_embed_texts_returns_lists(self, mock_st):
        mock_st.return_value.encode.return_value = np.array([[0.1, 0.2], [0.3, 0.4]])
        provider = SentenceTransformerEmbedding(model_name="custom-model")

        result = provider.embed_texts(["a", "b"])

        assert result == [[0.1, 0.2], [0.3, 0.4]]
        mock_st.assert_called_once_with("custom-model")
        mock_st.return_value.encode.assert_called_once_with(["a", "b"], convert_to_numpy=True)

    @patch("snap_api.vector.embeddings.SentenceTransformer")
    def test_encode_failure_becomes_provider_error(self, mock_st):
        mock_st.return_value.encode.side_effect = RuntimeError("CUDA out of memory")
        provider = SentenceTransformerEmbedding()

        with pytest.raises(ProviderError, match="CUDA out of memory"):
            provider.embed_texts(["a"])

    @patch("snap_api.vector.embeddings.SentenceTransformer")
    def test_load_failure_propagates(self, mock_st):
        mock_st.side_effect = OSError("model not found")

        with pytest.raises(OSError):
            SentenceTransformerEmbedding().load()

    @patch("snap_api.vector.embeddings.SentenceTransformer")
    def test_dimension_from_model(self, mock_st):
        mock_st.return_value.get_sentence_embedding_dimension.return_value = 384
        assert SentenceTransformerEmbedding().get_dimension() == 384


class TestOllamaEmbedding:

    def test_delegates_to_service(self):
        service = MagicMock()
        service.embed_texts.return_value = [[1.0, 2.0, 3.0]]
        provider = OllamaEmbedding(service=service)

        assert provider.embed_texts(("happy",)) == [[1.0, 2.0, 3.0]]
        service.embed_texts.assert_called_once_with(["happy"])
        assert provider.get_dimension() == 3

    def test_dimension_probe(self):
        service = MagicMock()
        service.embed_texts.return_value = [[0.0] * 768]
        provider = OllamaEmbedding(service=service)

        assert provider.get_dimension() == 768
        service.embed_texts.assert_called_once_with(["dimension probe"])

    def test_service_error_propagates(self):
        service = MagicMock()
        service.embed_texts.side_effect = ProviderError("Failed to connect to Ollama")

        with pytest.raises(ProviderError):
            OllamaEmbedding(service=service).embed_texts(["x"])
