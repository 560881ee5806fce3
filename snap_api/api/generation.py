"""
Poem and roast endpoints.
Thin pass-through to the Ollama vision model.
"""

import base64
import binascii

from fastapi import APIRouter, Depends, status

from .dependencies import error_response, get_ollama_service, status_code_for
from .schemas import ImagePoemRequest, ImageRoastRequest, PoemResponse, RoastResponse, TextPoemRequest
from ..core.errors import SnapError
from ..llm.ollama_service import OllamaService

router = APIRouter()


def _image_error(image_base64: str):
    """Return an error message for unusable image data, or None."""
    if not image_base64.strip():
        return "Image data cannot be empty"
    try:
        base64.b64decode(image_base64, validate=True)
    except (binascii.Error, ValueError):
        return "Invalid base64 image data"
    return None


@router.post("/poem/text", response_model=PoemResponse)
def generate_poem_from_text(request: TextPoemRequest, ollama: OllamaService = Depends(get_ollama_service)):
    if not request.prompt.strip():
        return error_response(status.HTTP_400_BAD_REQUEST, PoemResponse(success=False, error="Prompt cannot be empty"))

    try:
        poem = ollama.generate_poem_from_text(request.prompt)
    except SnapError as e:
        return error_response(status_code_for(e), PoemResponse(success=False, error=str(e)))

    return PoemResponse(success=True, poem=poem)


@router.post("/poem/image", response_model=PoemResponse)
def generate_poem_from_image(request: ImagePoemRequest, ollama: OllamaService = Depends(get_ollama_service)):
    error = _image_error(request.image_base64)
    if error:
        return error_response(status.HTTP_400_BAD_REQUEST, PoemResponse(success=False, error=error))

    try:
        poem = ollama.generate_poem_from_image(request.image_base64, request.prompt)
    except SnapError as e:
        return error_response(status_code_for(e), PoemResponse(success=False, error=str(e)))

    return PoemResponse(success=True, poem=poem)


@router.post("/roast/image", response_model=RoastResponse)
def generate_roast_from_image(request: ImageRoastRequest, ollama: OllamaService = Depends(get_ollama_service)):
    error = _image_error(request.image_base64)
    if error:
        return error_response(status.HTTP_400_BAD_REQUEST, RoastResponse(success=False, error=error))

    try:
        roast = ollama.generate_roast_from_image(request.image_base64)
    except SnapError as e:
        return error_response(status_code_for(e), RoastResponse(success=False, error=str(e)))

    return RoastResponse(success=True, roast=roast)
