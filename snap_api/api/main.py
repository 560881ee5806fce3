"""
Snap API application.
Builds the similarity index before accepting requests and wires the
generation, embedding, matching and admin endpoints.
"""

from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import Depends, FastAPI
from fastapi.concurrency import run_in_threadpool
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse
from fastapi.staticfiles import StaticFiles

from .admin import router as admin_router
from .dependencies import error_response, get_match_service, status_code_for
from .embedding import router as embedding_router
from .generation import router as generation_router
from .schemas import HealthResponse, ImageMatchRequest, ImageMatchResponse
from ..core import config
from ..core.config import VERSION, debug_enabled, validate_config
from ..core.errors import InvalidInputError, SnapError
from ..core.match_service import ImageMatchService
from ..llm.ollama_service import OllamaService
from ..vector.index import SimilarityIndex
from util.logging import logger


@asynccontextmanager
async def lifespan(app: FastAPI):
    for issue in validate_config():
        logger.warning(f"Configuration issue: {issue}")

    index = getattr(app.state, "index", None) or SimilarityIndex()
    if getattr(app.state, "ollama_service", None) is None:
        app.state.ollama_service = OllamaService()

    # A failure here aborts startup: the service is useless without the index
    logger.info("Initializing local embeddings...")
    await run_in_threadpool(index.initialize)
    logger.info("Local embeddings ready!")

    app.state.index = index
    app.state.match_service = ImageMatchService(index)
    yield


def create_app(index: SimilarityIndex = None, ollama_service: OllamaService = None) -> FastAPI:
    """Build the application. Tests pass their own index and Ollama service."""
    app = FastAPI(
        title="Snap API",
        version=VERSION,
        description="Poems, roasts and hamster matching on top of a local Ollama server",
        docs_url="/docs" if debug_enabled() else None,
        redoc_url="/redoc" if debug_enabled() else None,
        lifespan=lifespan,
    )
    app.state.index = index
    app.state.ollama_service = ollama_service

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.get("/", response_class=PlainTextResponse)
    def root():
        return "Hack and Roll Snap API"

    @app.get("/health", response_model=HealthResponse)
    def health_check_endpoint():
        """Report index state. Degraded when the index is empty or partial."""
        index_status = app.state.index.status() if app.state.index is not None else {"initialized": False}
        healthy = index_status.get("initialized") and index_status.get("size", 0) > 0 and not index_status.get("skipped")
        return HealthResponse(
            status="ok" if healthy else "degraded",
            version=VERSION,
            index=index_status,
        )

    @app.post("/image/match", response_model=ImageMatchResponse)
    def match_image(request: ImageMatchRequest, service: ImageMatchService = Depends(get_match_service)):
        """Match extracted words against the hamster image library."""
        try:
            result = service.find_best_match(request.words)
        except SnapError as e:
            return error_response(
                status_code_for(e),
                ImageMatchResponse(
                    success=False,
                    extracted_words=request.words,
                    error=str(e) if isinstance(e, InvalidInputError) else f"Failed to match image: {e}",
                ),
            )

        return ImageMatchResponse(
            success=True,
            matched_image_url=result.identifier,
            extracted_words=request.words,
            similarity_score=result.score,
        )

    app.include_router(generation_router, tags=["generation"])
    app.include_router(embedding_router, tags=["embedding"])
    app.include_router(admin_router, prefix="/admin", tags=["admin"])

    # Serve static images when the folder is present
    if Path(config.IMAGES_DIR).is_dir():
        app.mount("/images", StaticFiles(directory=config.IMAGES_DIR), name="images")

    @app.exception_handler(Exception)
    async def global_exception_handler(request, exc):
        """Handle all unhandled exceptions."""
        logger.error(f"Unhandled exception: {exc}")
        content = {"success": False, "error": "Internal server error"}
        if debug_enabled():
            content["debug"] = str(exc)
        return JSONResponse(status_code=500, content=content)

    return app


app = create_app()
