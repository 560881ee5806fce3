"""
Shared test doubles for the similarity index tests.
"""

import pytest

from snap_api.core.errors import ProviderError
from snap_api.vector.embeddings import IEmbeddingProvider
from snap_api.vector.types import CatalogEntry


class MappingEmbedding(IEmbeddingProvider):
    """Provider that looks words up in a fixed table and records every call."""

    def __init__(self, mapping, fail_on=()):
        self.mapping = mapping
        self.fail_on = set(fail_on)
        self.calls = []
        self.loaded = 0

    def load(self):
        self.loaded += 1

    def embed_texts(self, texts):
        self.calls.append(list(texts))
        for text in texts:
            if text in self.fail_on or text not in self.mapping:
                raise ProviderError(f"cannot embed {text!r}")
        return [list(self.mapping[text]) for text in texts]

    def get_dimension(self):
        return len(next(iter(self.mapping.values())))


class ListCatalog:
    """Catalog built from (identifier, tags) pairs."""

    def __init__(self, entries):
        self._entries = entries

    def load(self):
        return [CatalogEntry(identifier=identifier, tags=tuple(tags)) for identifier, tags in self._entries]


@pytest.fixture
def happy_sad_provider():
    return MappingEmbedding({"happy": [1.0, 0.0], "sad": [0.0, 1.0]})


@pytest.fixture
def happy_sad_catalog():
    return ListCatalog([("A", ["happy"]), ("B", ["sad"])])
