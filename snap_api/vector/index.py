"""
In-memory similarity index over the image catalog.

The index embeds every catalog entry once, keeps the averaged vectors in
memory and answers best-match queries against them. One lock guards the
provider handle and the entry table together, so queries are serialized
with each other and with provider calls. That bottleneck is accepted for
the low query volume this service sees; splitting the immutable entry table
from the provider lock is the way out if it ever matters.
"""

import threading
import time
from contextlib import contextmanager
from typing import Callable, Dict, List, Optional, Sequence, Tuple

from ..core.errors import (
    IndexInitializationError,
    InvalidInputError,
    LockAcquisitionError,
    NotFoundError,
    ProviderError,
)
from .embeddings import IEmbeddingProvider
from .similarity import DimensionMismatchError, average_embeddings, cosine_similarity
from .types import CatalogEntry, IndexBuildReport, IndexedEntry, QueryResult
from util.logging import logger


class SimilarityIndex:
    """
    Catalog index built once by initialize() and read many times after.

    Queries issued before initialization finishes block until the build is
    done and never see a partially built table.
    """

    def __init__(self, provider_factory: Callable[[], IEmbeddingProvider] = None, catalog=None,
                 lock_timeout_sec: float = None, fail_on_partial: bool = None):
        from ..core import config

        self._provider_factory = provider_factory or config.get_embedding_provider
        self._catalog = catalog if catalog is not None else config.get_catalog()
        self._lock_timeout_sec = lock_timeout_sec if lock_timeout_sec is not None else config.LOCK_TIMEOUT_SEC
        self._fail_on_partial = fail_on_partial if fail_on_partial is not None else config.FAIL_ON_PARTIAL_INDEX

        self._lock = threading.Lock()
        self._init_lock = threading.Lock()
        self._initialized = False
        self._init_error: Optional[Exception] = None

        self._provider: Optional[IEmbeddingProvider] = None
        self._entries: Tuple[IndexedEntry, ...] = ()
        self._report: Optional[IndexBuildReport] = None

    # Initialization

    def initialize(self) -> IndexBuildReport:
        """
        Build the index. Runs the build at most once; later calls return the
        first build's report.

        Raises:
            IndexInitializationError: the provider or catalog could not be
                loaded, the provider failed unexpectedly, or (with
                fail_on_partial) an entry failed to embed.
                A failed build is not retried.
        """
        if self._initialized:
            return self._report

        with self._init_lock:
            if self._initialized:
                return self._report
            if self._init_error is not None:
                raise IndexInitializationError(f"Index initialization previously failed: {self._init_error}")

            try:
                report = self._build()
            except IndexInitializationError as e:
                self._init_error = e
                raise
            except Exception as e:
                self._init_error = e
                raise IndexInitializationError(f"Index build failed: {e}") from e

            self._initialized = True
            return report

    def _build(self) -> IndexBuildReport:
        start_time = time.time()
        logger.info("Initializing embedding provider...")

        try:
            provider = self._provider_factory()
            provider.load()
        except Exception as e:
            raise IndexInitializationError(f"Failed to initialize embedding provider: {e}") from e

        try:
            catalog_entries = self._catalog.load()
        except Exception as e:
            raise IndexInitializationError(f"Failed to load catalog {self._catalog!r}: {e}") from e

        logger.info(f"Pre-computing embeddings for {len(catalog_entries)} catalog entries...")

        entries: List[IndexedEntry] = []
        skip_reasons: Dict[str, str] = {}
        dimension: Optional[int] = None

        for entry in catalog_entries:
            try:
                embedding = self._embed_entry(provider, entry)
            except (ProviderError, DimensionMismatchError) as e:
                reason = f"embedding failed: {e}"
            except Exception as e:
                raise IndexInitializationError(
                    f"Unexpected provider failure while embedding {entry.identifier}: {e}"
                ) from e
            else:
                if dimension is None:
                    dimension = len(embedding)
                if len(embedding) == dimension:
                    entries.append(IndexedEntry(identifier=entry.identifier, tags=entry.tags, embedding=embedding))
                    continue
                reason = f"dimension mismatch: got {len(embedding)}, index dimension is {dimension}"

            logger.log_index_skip(entry.identifier, reason)
            skip_reasons[entry.identifier] = reason

        skipped = list(skip_reasons)
        duration_ms = round((time.time() - start_time) * 1000, 2)
        report = IndexBuildReport(indexed=len(entries), skipped=skipped, skip_reasons=skip_reasons,
                                  dimension=dimension, duration_ms=duration_ms)
        logger.log_index_build(report.indexed, report.skipped, report.dimension, report.duration_ms)

        if skipped and self._fail_on_partial:
            raise IndexInitializationError(
                f"{len(skipped)} catalog entries failed to embed: {', '.join(skipped)}"
            )

        with self._locked():
            self._provider = provider
            self._entries = tuple(entries)
            self._report = report

        return report

    @staticmethod
    def _embed_entry(provider: IEmbeddingProvider, entry: CatalogEntry) -> List[float]:
        embeddings = provider.embed_texts(list(entry.tags))
        if len(embeddings) != len(entry.tags):
            raise ProviderError(f"Expected {len(entry.tags)} embeddings, got {len(embeddings)}")

        average = average_embeddings(embeddings)
        if average is None:
            raise ProviderError("No embeddings returned")
        return average

    @contextmanager
    def _locked(self):
        if not self._lock.acquire(timeout=self._lock_timeout_sec):
            raise LockAcquisitionError(
                f"Failed to acquire index lock within {self._lock_timeout_sec}s"
            )
        try:
            yield
        finally:
            self._lock.release()

    # Queries

    def find_best_match(self, query_tags: Sequence[str]) -> QueryResult:
        """
        Find the catalog entry whose averaged tag embedding is closest to the
        averaged embedding of the query words.

        Ties go to the entry that comes first in catalog order.

        Raises:
            InvalidInputError: no non-blank query words
            NotFoundError: the index holds no entries
            ProviderError: the query could not be embedded
            LockAcquisitionError: the index lock timed out
        """
        tags = [tag.strip() for tag in (query_tags or []) if tag and tag.strip()]
        if not tags:
            raise InvalidInputError("Words cannot be empty")

        self.initialize()

        with self._locked():
            if not self._entries:
                best = None
            else:
                query_embeddings = self._provider.embed_texts(tags)
                if len(query_embeddings) != len(tags):
                    raise ProviderError(f"Expected {len(tags)} query embeddings, got {len(query_embeddings)}")
                try:
                    query_avg = average_embeddings(query_embeddings)
                except DimensionMismatchError as e:
                    raise ProviderError(f"Failed to embed query: {e}") from e
                if query_avg is None:
                    raise ProviderError("Failed to calculate average embedding")

                index_dimension = len(self._entries[0].embedding)
                if len(query_avg) != index_dimension:
                    raise ProviderError(
                        f"Query embedding dimension {len(query_avg)} does not match index dimension {index_dimension}"
                    )

                best = None
                for entry in self._entries:
                    similarity = cosine_similarity(query_avg, entry.embedding)
                    # Strict comparison keeps the first entry on ties
                    if best is None or similarity > best.score:
                        best = QueryResult(identifier=entry.identifier, score=similarity)

        if best is None:
            logger.log_match(tags, None, None, status="not_found")
            raise NotFoundError("No matching images found")

        logger.log_match(tags, best.identifier, best.score)
        return best

    def embed_batch(self, texts: Sequence[str]) -> List[List[float]]:
        """
        Embed texts with the index's own provider, one vector per text.

        Raises:
            InvalidInputError: empty batch
            ProviderError: the provider call failed
        """
        if not texts:
            raise InvalidInputError("Texts array cannot be empty")

        self.initialize()

        with self._locked():
            return self._provider.embed_texts(list(texts))

    # Introspection

    @property
    def is_initialized(self) -> bool:
        return self._initialized

    @property
    def size(self) -> int:
        return len(self._entries)

    @property
    def entries(self) -> Tuple[IndexedEntry, ...]:
        return self._entries

    @property
    def skipped(self) -> List[str]:
        return list(self._report.skipped) if self._report else []

    @property
    def dimension(self) -> Optional[int]:
        return self._report.dimension if self._report else None

    def status(self) -> dict:
        """Index state for health reporting."""
        status = {
            "initialized": self._initialized,
            "size": self.size,
            "dimension": self.dimension,
            "skipped": self.skipped,
        }
        if self._report is not None and self._report.skip_reasons:
            status["skip_reasons"] = dict(self._report.skip_reasons)
        if self._init_error is not None:
            status["error"] = str(self._init_error)
        return status
