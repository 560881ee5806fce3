"""
Configuration helpers.
"""

from unittest.mock import patch

from snap_api.core import config
from snap_api.core.catalog import CsvCatalog, StaticCatalog
from snap_api.vector.embeddings import DeterministicHashEmbedding, OllamaEmbedding, SentenceTransformerEmbedding


def test_defaults_are_valid():
    with patch.object(config, "EMBED_PROVIDER", "local"), patch.object(config, "CATALOG_SOURCE", "static"):
        assert config.validate_config() == []


def test_validate_config_reports_issues():
    with patch.object(config, "EMBED_PROVIDER", "faiss"), \
         patch.object(config, "CATALOG_SOURCE", "sqlite"), \
         patch.object(config, "LOCK_TIMEOUT_SEC", 0), \
         patch.object(config, "DEFAULT_TOP_K", 0):
        issues = config.validate_config()

    assert "Invalid EMBED_PROVIDER: faiss" in issues
    assert "Invalid CATALOG_SOURCE: sqlite" in issues
    assert "LOCK_TIMEOUT_SEC must be > 0" in issues
    assert "DEFAULT_TOP_K must be >= 1" in issues


def test_embedding_provider_selection():
    with patch.object(config, "EMBED_PROVIDER", "hash"), patch.object(config, "HASH_EMBED_DIM", 32):
        provider = config.get_embedding_provider()
        assert isinstance(provider, DeterministicHashEmbedding)
        assert provider.get_dimension() == 32

    with patch.object(config, "EMBED_PROVIDER", "local"):
        provider = config.get_embedding_provider()
        assert isinstance(provider, SentenceTransformerEmbedding)
        assert provider.model_name == config.LOCAL_EMBED_MODEL

    with patch.object(config, "EMBED_PROVIDER", "ollama"):
        assert isinstance(config.get_embedding_provider(), OllamaEmbedding)


def test_catalog_selection():
    with patch.object(config, "CATALOG_SOURCE", "static"):
        assert isinstance(config.get_catalog(), StaticCatalog)

    with patch.object(config, "CATALOG_SOURCE", "csv"), patch.object(config, "CATALOG_CSV_PATH", "lib.csv"):
        catalog = config.get_catalog()
        assert isinstance(catalog, CsvCatalog)
        assert catalog.path.name == "lib.csv"


def test_debug_enabled_reads_environment(monkeypatch):
    monkeypatch.setenv("DEBUG", "true")
    assert config.debug_enabled()

    monkeypatch.setenv("DEBUG", "false")
    assert not config.debug_enabled()
