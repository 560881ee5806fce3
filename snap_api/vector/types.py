"""
Record types for the similarity index and the ranking utilities.
"""

from typing import Dict, List, Optional, Tuple
from dataclasses import dataclass, field


@dataclass(frozen=True)
class CatalogEntry:
    """One indexable catalog item."""

    identifier: str
    """Stable, unique identifier (the image URL)"""

    tags: Tuple[str, ...]
    """Short descriptive words for the item"""

    def __post_init__(self):
        if not self.tags:
            raise ValueError(f"Catalog entry {self.identifier} must have at least one tag")
        # Accept lists from callers but keep the stored value hashable
        object.__setattr__(self, "tags", tuple(self.tags))


@dataclass(frozen=True)
class IndexedEntry:
    """A catalog entry together with the mean embedding of its tags."""

    identifier: str
    tags: Tuple[str, ...]
    embedding: Tuple[float, ...]
    """Mean of the tag embeddings, immutable"""

    def __post_init__(self):
        object.__setattr__(self, "embedding", tuple(self.embedding))


@dataclass(frozen=True)
class QueryResult:
    """Best catalog match for a query."""

    identifier: str
    """Identifier of the matching catalog entry"""

    score: float
    """Cosine similarity of the match (nominally -1..1)"""


@dataclass
class TextEmbedding:
    """Candidate text with its embedding, used by the ranking utilities."""
    text: str
    embedding: List[float]


@dataclass
class SimilarityResult:
    """Ranked candidate returned by find_similar."""
    text: str
    score: float


@dataclass
class IndexBuildReport:
    """Summary of a similarity index build, including skipped entries."""
    indexed: int
    skipped: List[str] = field(default_factory=list)
    skip_reasons: Dict[str, str] = field(default_factory=dict)
    dimension: Optional[int] = None
    duration_ms: float = 0.0

    @property
    def is_partial(self) -> bool:
        return bool(self.skipped)

    def to_dict(self):
        return {
            "indexed": self.indexed,
            "skipped": list(self.skipped),
            "skipped_count": len(self.skipped),
            "skip_reasons": dict(self.skip_reasons),
            "dimension": self.dimension,
            "duration_ms": self.duration_ms,
        }
