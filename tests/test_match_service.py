"""
Image match facade.
"""

from unittest.mock import Mock

import pytest

from conftest import ListCatalog
from snap_api.core.match_service import ImageMatchService
from snap_api.vector.index import SimilarityIndex
from snap_api.vector.types import QueryResult


def test_delegates_to_index():
    index = Mock(spec=SimilarityIndex)
    index.find_best_match.return_value = QueryResult(identifier="/images/a.jpg", score=0.9)
    index.embed_batch.return_value = [[1.0, 0.0]]
    service = ImageMatchService(index)

    assert service.find_best_match(["happy"]).identifier == "/images/a.jpg"
    assert service.embed_texts(["happy"]) == [[1.0, 0.0]]
    index.find_best_match.assert_called_once_with(["happy"])
    index.embed_batch.assert_called_once_with(["happy"])


def test_services_share_one_index(happy_sad_provider, happy_sad_catalog):
    index = SimilarityIndex(provider_factory=lambda: happy_sad_provider, catalog=happy_sad_catalog,
                            lock_timeout_sec=1.0, fail_on_partial=False)
    first = ImageMatchService(index)
    second = ImageMatchService(index)

    assert first.find_best_match(["happy"]).identifier == "A"
    assert second.find_best_match(["sad"]).identifier == "B"
    assert happy_sad_provider.loaded == 1


def test_works_with_list_catalog_directly():
    from snap_api.vector.embeddings import DeterministicHashEmbedding

    catalog = ListCatalog([("/images/x.jpg", ["pirate"])])
    index = SimilarityIndex(provider_factory=lambda: DeterministicHashEmbedding(16), catalog=catalog,
                            lock_timeout_sec=1.0, fail_on_partial=False)

    result = ImageMatchService(index).find_best_match(["pirate"])
    assert result.identifier == "/images/x.jpg"
    assert result.score == pytest.approx(1.0)
