"""
Vector math for the similarity index.
Pure functions over plain float sequences; numpy does the arithmetic.
"""

import sys
from typing import List, Optional, Sequence

import numpy as np

from .types import SimilarityResult, TextEmbedding


class DimensionMismatchError(ValueError):
    """Vectors passed together do not share one dimension."""
    pass


def _as_array(v: Sequence[float]) -> np.ndarray:
    return np.asarray(v, dtype=np.float64).reshape(-1)


def cosine_similarity(a: Sequence[float], b: Sequence[float]) -> float:
    """
    Cosine of the angle between two vectors.

    Returns 0.0 when the lengths differ, when either vector is empty, or when
    either has zero magnitude. Rounding can push the result slightly outside
    [-1, 1].
    """
    va = _as_array(a)
    vb = _as_array(b)
    if va.size != vb.size or va.size == 0:
        return 0.0

    magnitude_a = np.linalg.norm(va)
    magnitude_b = np.linalg.norm(vb)
    if magnitude_a == 0.0 or magnitude_b == 0.0:
        return 0.0

    return float(np.dot(va, vb) / (magnitude_a * magnitude_b))


def euclidean_distance(a: Sequence[float], b: Sequence[float]) -> float:
    """Euclidean distance; the largest float when lengths differ."""
    va = _as_array(a)
    vb = _as_array(b)
    if va.size != vb.size:
        return sys.float_info.max
    return float(np.linalg.norm(va - vb))


def normalize(v: Sequence[float]) -> List[float]:
    """Scale to unit length. A zero vector is returned unchanged."""
    arr = _as_array(v)
    magnitude = np.linalg.norm(arr)
    if magnitude == 0.0:
        return arr.tolist()
    return (arr / magnitude).tolist()


def average_embeddings(embeddings: Sequence[Sequence[float]]) -> Optional[List[float]]:
    """
    Element-wise mean of a batch of vectors.

    Args:
        embeddings: Vectors sharing one dimension

    Returns:
        The mean vector, or None for an empty batch

    Raises:
        DimensionMismatchError: if the vectors do not all have the dimension of the first
    """
    if len(embeddings) == 0:
        return None

    dim = len(embeddings[0])
    for i, embedding in enumerate(embeddings):
        if len(embedding) != dim:
            raise DimensionMismatchError(
                f"Embedding {i} has dimension {len(embedding)}, expected {dim}"
            )

    matrix = np.asarray(embeddings, dtype=np.float64)
    return matrix.mean(axis=0).tolist()


def _score_candidates(query_embedding: Sequence[float], candidates: Sequence[TextEmbedding]) -> List[SimilarityResult]:
    return [
        SimilarityResult(text=candidate.text, score=cosine_similarity(query_embedding, candidate.embedding))
        for candidate in candidates
    ]


def find_similar(query_embedding: Sequence[float], candidates: Sequence[TextEmbedding], top_k: int) -> List[SimilarityResult]:
    """
    Rank candidates by cosine similarity to the query, highest first.

    Equal scores keep their candidate order. At most top_k results are
    returned; all of them when top_k exceeds the candidate count.
    """
    if top_k <= 0:
        return []
    results = _score_candidates(query_embedding, candidates)
    results = sorted(results, key=lambda r: r.score, reverse=True)
    return results[:top_k]


def find_similar_above_threshold(query_embedding: Sequence[float], candidates: Sequence[TextEmbedding], threshold: float) -> List[SimilarityResult]:
    """Every candidate scoring >= threshold, highest first."""
    results = [r for r in _score_candidates(query_embedding, candidates) if r.score >= threshold]
    return sorted(results, key=lambda r: r.score, reverse=True)
