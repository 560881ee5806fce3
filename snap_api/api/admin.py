"""
Admin endpoints.
"""

from fastapi import APIRouter, Depends

from .dependencies import error_response, get_ollama_service, status_code_for
from .schemas import GenerateLibraryRequest, GenerateLibraryResponse
from ..core import config
from ..core.errors import SnapError
from ..core.library_generator import generate_library
from ..llm.ollama_service import OllamaService

router = APIRouter()


@router.post("/generate-library", response_model=GenerateLibraryResponse)
def generate_library_endpoint(request: GenerateLibraryRequest, ollama: OllamaService = Depends(get_ollama_service)):
    """Tag a range of images with the vision model and write the catalog CSV."""
    try:
        result = generate_library(
            config.IMAGES_DIR,
            config.LIBRARY_CSV_OUTPUT,
            start_index=request.start_index,
            end_index=request.end_index,
            ollama_service=ollama,
        )
    except SnapError as e:
        return error_response(status_code_for(e), GenerateLibraryResponse(success=False, error=str(e)))

    return GenerateLibraryResponse(success=True, **result.to_dict())
