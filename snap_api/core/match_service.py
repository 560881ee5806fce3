"""
Image matching facade used by the HTTP layer.
Holds no state of its own; every call goes to the shared SimilarityIndex.
"""

from typing import List, Sequence

from ..vector.index import SimilarityIndex
from ..vector.types import QueryResult


class ImageMatchService:
    """Stateless entry point for local embedding and catalog matching."""

    def __init__(self, index: SimilarityIndex):
        self.index = index

    def embed_texts(self, texts: Sequence[str]) -> List[List[float]]:
        """Embed texts with the local model."""
        return self.index.embed_batch(texts)

    def find_best_match(self, query_words: Sequence[str]) -> QueryResult:
        """Find the best matching image from the pre-computed library."""
        return self.index.find_best_match(query_words)
