"""
Request-scoped access to the services built at startup, and the mapping
from SnapError subclasses to HTTP status codes.
"""

from fastapi import Request, status
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from ..core.errors import InvalidInputError, NotFoundError
from ..core.match_service import ImageMatchService
from ..llm.ollama_service import OllamaService


def get_match_service(request: Request) -> ImageMatchService:
    return request.app.state.match_service


def get_ollama_service(request: Request) -> OllamaService:
    return request.app.state.ollama_service


def status_code_for(exc: Exception) -> int:
    """HTTP status for a core error. Anything unrecognised is a 500."""
    if isinstance(exc, InvalidInputError):
        return status.HTTP_400_BAD_REQUEST
    if isinstance(exc, NotFoundError):
        return status.HTTP_404_NOT_FOUND
    return status.HTTP_500_INTERNAL_SERVER_ERROR


def error_response(status_code: int, model: BaseModel) -> JSONResponse:
    """Serialize a failure envelope with the given status."""
    return JSONResponse(status_code=status_code, content=model.model_dump())
