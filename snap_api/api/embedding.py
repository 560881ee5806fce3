"""
Embedding endpoints.
/embed, /embed/batch and /embed/search use the remote Ollama embedding
model; /embed/local goes through the in-process similarity index.
"""

from fastapi import APIRouter, Depends, status

from .dependencies import error_response, get_match_service, get_ollama_service, status_code_for
from .schemas import (
    EmbedBatchRequest,
    EmbedBatchResponse,
    EmbedRequest,
    EmbedResponse,
    SimilarityResultModel,
    SimilaritySearchRequest,
    SimilaritySearchResponse,
)
from ..core import config
from ..core.errors import SnapError
from ..core.match_service import ImageMatchService
from ..llm.ollama_service import OllamaService
from ..vector.similarity import find_similar

router = APIRouter()


@router.post("/embed", response_model=EmbedResponse)
def embed_text(request: EmbedRequest, ollama: OllamaService = Depends(get_ollama_service)):
    """Embed a single text."""
    if not request.text.strip():
        return error_response(status.HTTP_400_BAD_REQUEST, EmbedResponse(success=False, error="Text cannot be empty"))

    try:
        embedding = ollama.embed_text(request.text)
    except SnapError as e:
        return error_response(status_code_for(e), EmbedResponse(success=False, error=str(e)))

    return EmbedResponse(success=True, embedding=embedding)


@router.post("/embed/batch", response_model=EmbedBatchResponse)
def embed_batch(request: EmbedBatchRequest, ollama: OllamaService = Depends(get_ollama_service)):
    """Embed multiple texts."""
    if not request.texts:
        return error_response(status.HTTP_400_BAD_REQUEST, EmbedBatchResponse(success=False, error="Texts array cannot be empty"))

    try:
        embeddings = ollama.embed_texts(request.texts)
    except SnapError as e:
        return error_response(status_code_for(e), EmbedBatchResponse(success=False, error=str(e)))

    return EmbedBatchResponse(success=True, embeddings=embeddings)


@router.post("/embed/local", response_model=EmbedBatchResponse)
def embed_batch_local(request: EmbedBatchRequest, service: ImageMatchService = Depends(get_match_service)):
    """Embed multiple texts with the local index model."""
    try:
        embeddings = service.embed_texts(request.texts)
    except SnapError as e:
        return error_response(status_code_for(e), EmbedBatchResponse(success=False, error=str(e)))

    return EmbedBatchResponse(success=True, embeddings=embeddings)


@router.post("/embed/search", response_model=SimilaritySearchResponse)
def similarity_search(request: SimilaritySearchRequest, ollama: OllamaService = Depends(get_ollama_service)):
    """Search for similar texts in a corpus."""
    if not request.query.strip():
        return error_response(status.HTTP_400_BAD_REQUEST, SimilaritySearchResponse(success=False, error="Query cannot be empty"))

    if not request.corpus:
        return error_response(status.HTTP_400_BAD_REQUEST, SimilaritySearchResponse(success=False, error="Corpus cannot be empty"))

    top_k = request.top_k or config.DEFAULT_TOP_K

    try:
        query_embedding = ollama.embed_text(request.query)
    except SnapError as e:
        return error_response(status_code_for(e), SimilaritySearchResponse(success=False, error=f"Failed to embed query: {e}"))

    try:
        corpus_embeddings = ollama.create_text_embeddings(request.corpus)
    except SnapError as e:
        return error_response(status_code_for(e), SimilaritySearchResponse(success=False, error=f"Failed to embed corpus: {e}"))

    results = find_similar(query_embedding, corpus_embeddings, top_k)

    return SimilaritySearchResponse(
        success=True,
        results=[SimilarityResultModel(text=r.text, score=r.score) for r in results],
    )
