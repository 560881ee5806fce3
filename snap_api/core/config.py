"""
Runtime configuration for the Snap API.
Every setting is read from the environment with a development default.
"""

import os
from dotenv import load_dotenv

load_dotenv()

# Debug flag enables /docs and error detail in 500 responses
DEBUG = os.getenv("DEBUG", "false").lower() == "true"

# Server
HOST = os.getenv("HOST", "0.0.0.0")
PORT = int(os.getenv("PORT", "8000"))

# Ollama generation backend
OLLAMA_BASE_URL = os.getenv("OLLAMA_BASE_URL", "http://localhost:11434")
OLLAMA_MODEL = os.getenv("OLLAMA_MODEL", "gemma3:4b")
OLLAMA_EMBED_MODEL = os.getenv("OLLAMA_EMBED_MODEL", "nomic-embed-text")
OLLAMA_TIMEOUT_SEC = float(os.getenv("OLLAMA_TIMEOUT_SEC", "120"))

# Similarity index
EMBED_PROVIDER = os.getenv("EMBED_PROVIDER", "local")  # local|ollama|hash
LOCAL_EMBED_MODEL = os.getenv("LOCAL_EMBED_MODEL", "all-MiniLM-L6-v2")
HASH_EMBED_DIM = int(os.getenv("HASH_EMBED_DIM", "384"))
LOCK_TIMEOUT_SEC = float(os.getenv("LOCK_TIMEOUT_SEC", "30"))
FAIL_ON_PARTIAL_INDEX = os.getenv("FAIL_ON_PARTIAL_INDEX", "false").lower() == "true"
DEFAULT_TOP_K = int(os.getenv("DEFAULT_TOP_K", "5"))

# Catalog
CATALOG_SOURCE = os.getenv("CATALOG_SOURCE", "static")  # static|csv
CATALOG_CSV_PATH = os.getenv("CATALOG_CSV_PATH", "image_library.csv")

# Image library generator and static image serving
IMAGES_DIR = os.getenv("IMAGES_DIR", "images")
LIBRARY_CSV_OUTPUT = os.getenv("LIBRARY_CSV_OUTPUT", "image_library.csv")

# Version string
VERSION = "1.0.0"


def debug_enabled():
    """Check if debug mode is enabled."""
    return os.getenv("DEBUG", "false").lower() == "true"


def get_embedding_provider():
    """Build the configured embedding provider. The model itself loads lazily."""
    if EMBED_PROVIDER == "hash":
        from ..vector.embeddings import DeterministicHashEmbedding
        return DeterministicHashEmbedding(HASH_EMBED_DIM)
    elif EMBED_PROVIDER == "ollama":
        from ..vector.embeddings import OllamaEmbedding
        return OllamaEmbedding(model_name=OLLAMA_EMBED_MODEL)
    else:
        from ..vector.embeddings import SentenceTransformerEmbedding
        return SentenceTransformerEmbedding(LOCAL_EMBED_MODEL)


def get_catalog():
    """Get the configured catalog source."""
    from .catalog import StaticCatalog, CsvCatalog

    if CATALOG_SOURCE == "csv":
        return CsvCatalog(CATALOG_CSV_PATH)
    return StaticCatalog()


def validate_config():
    """Validate configuration and return any issues."""
    issues = []

    if EMBED_PROVIDER not in ["local", "ollama", "hash"]:
        issues.append(f"Invalid EMBED_PROVIDER: {EMBED_PROVIDER}")

    if CATALOG_SOURCE not in ["static", "csv"]:
        issues.append(f"Invalid CATALOG_SOURCE: {CATALOG_SOURCE}")

    if HASH_EMBED_DIM < 1:
        issues.append("HASH_EMBED_DIM must be >= 1")

    if LOCK_TIMEOUT_SEC <= 0:
        issues.append("LOCK_TIMEOUT_SEC must be > 0")

    if DEFAULT_TOP_K < 1:
        issues.append("DEFAULT_TOP_K must be >= 1")

    return issues
