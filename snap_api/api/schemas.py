"""
Request and response models for the Snap API.
Responses share the {success, <payload>, error} envelope.
"""

from pydantic import BaseModel, Field
from typing import Optional, List, Dict, Any


# Generation

class TextPoemRequest(BaseModel):
    prompt: str

class ImagePoemRequest(BaseModel):
    image_base64: str
    prompt: Optional[str] = None

class ImageRoastRequest(BaseModel):
    image_base64: str

class PoemResponse(BaseModel):
    success: bool
    poem: Optional[str] = None
    error: Optional[str] = None

class RoastResponse(BaseModel):
    success: bool
    roast: Optional[str] = None
    error: Optional[str] = None


# Embeddings

class EmbedRequest(BaseModel):
    text: str

class EmbedBatchRequest(BaseModel):
    texts: List[str]

class SimilaritySearchRequest(BaseModel):
    query: str
    corpus: List[str]
    top_k: Optional[int] = Field(default=None, ge=1)

class EmbedResponse(BaseModel):
    success: bool
    embedding: Optional[List[float]] = None
    error: Optional[str] = None

class EmbedBatchResponse(BaseModel):
    success: bool
    embeddings: Optional[List[List[float]]] = None
    error: Optional[str] = None

class SimilarityResultModel(BaseModel):
    text: str
    score: float

class SimilaritySearchResponse(BaseModel):
    success: bool
    results: Optional[List[SimilarityResultModel]] = None
    error: Optional[str] = None


# Image matching

class ImageMatchRequest(BaseModel):
    words: List[str]

class ImageMatchResponse(BaseModel):
    success: bool
    matched_image_url: Optional[str] = None
    extracted_words: Optional[List[str]] = None
    similarity_score: Optional[float] = None
    error: Optional[str] = None


# Admin

class GenerateLibraryRequest(BaseModel):
    start_index: Optional[int] = None  # 0-based
    end_index: Optional[int] = None    # inclusive, 0-based

class GenerateLibraryResponse(BaseModel):
    success: bool
    csv_path: Optional[str] = None
    total_images_in_folder: Optional[int] = None
    processed_images: Optional[int] = None
    skipped_images: Optional[int] = None
    range: Optional[str] = None
    error: Optional[str] = None


# Health

class HealthResponse(BaseModel):
    status: str
    version: str
    index: Dict[str, Any]
