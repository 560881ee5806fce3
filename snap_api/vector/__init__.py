"""
Embedding providers, vector math and the in-memory similarity index.
"""

# Package initialization for vector module
from .index import SimilarityIndex
from .types import CatalogEntry, IndexedEntry, QueryResult, TextEmbedding, SimilarityResult, IndexBuildReport
from .embeddings import IEmbeddingProvider, DeterministicHashEmbedding, SentenceTransformerEmbedding, OllamaEmbedding
from .similarity import (
    DimensionMismatchError,
    average_embeddings,
    cosine_similarity,
    euclidean_distance,
    find_similar,
    find_similar_above_threshold,
    normalize,
)

__all__ = [
    'SimilarityIndex',
    'CatalogEntry',
    'IndexedEntry',
    'QueryResult',
    'TextEmbedding',
    'SimilarityResult',
    'IndexBuildReport',
    'IEmbeddingProvider',
    'DeterministicHashEmbedding',
    'SentenceTransformerEmbedding',
    'OllamaEmbedding',
    'DimensionMismatchError',
    'average_embeddings',
    'cosine_similarity',
    'euclidean_distance',
    'find_similar',
    'find_similar_above_threshold',
    'normalize',
]
