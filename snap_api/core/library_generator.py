"""
Image library generator.
Walks the images folder, asks the vision model for three words per image
and writes the catalog CSV that CsvCatalog reads back.
"""

import base64
import csv
from dataclasses import dataclass, asdict
from pathlib import Path
from typing import List, Optional

from .catalog import get_word_library
from .errors import InvalidInputError, LibraryGenerationError, NotFoundError, ProviderError
from util.logging import logger

IMAGE_EXTENSIONS = {"jpg", "jpeg", "png", "gif", "webp"}
WORDS_PER_IMAGE = 3
CSV_HEADER = ["image_url", "word1", "word2", "word3"]


@dataclass
class LibraryGenerationResult:
    """Counts reported back to the admin endpoint."""
    csv_path: str
    total_images_in_folder: int
    processed_images: int
    skipped_images: int
    range: str

    def to_dict(self):
        return asdict(self)


def list_image_files(images_dir) -> List[str]:
    """Image filenames in images_dir, sorted alphabetically."""
    files = []
    for path in Path(images_dir).iterdir():
        if not path.is_file():
            continue
        if path.suffix.lstrip(".").lower() not in IMAGE_EXTENSIONS:
            continue
        files.append(path.name)
    return sorted(files)


def _resolve_range(total: int, start_index: Optional[int], end_index: Optional[int]):
    start_idx = start_index if start_index is not None else 0
    end_idx = end_index if end_index is not None else total - 1

    if start_idx < 0 or start_idx >= total:
        raise InvalidInputError(f"start_index {start_idx} is out of range (total images: {total})")
    if end_idx < 0 or end_idx >= total:
        raise InvalidInputError(f"end_index {end_idx} is out of range (total images: {total})")
    if start_idx > end_idx:
        raise InvalidInputError(f"start_index {start_idx} cannot be greater than end_index {end_idx}")

    return start_idx, end_idx


def generate_library(images_dir, csv_output, start_index: Optional[int] = None,
                     end_index: Optional[int] = None, ollama_service=None) -> LibraryGenerationResult:
    """
    Tag images [start_index, end_index] (inclusive, 0-based, alphabetical)
    and write them to csv_output.

    Images that cannot be read, that the model fails on, or that do not come
    back with exactly three words are skipped and counted.

    Raises:
        InvalidInputError: images_dir missing or range invalid
        NotFoundError: no image files in images_dir
        LibraryGenerationError: nothing processed, or the CSV could not be written
    """
    images_path = Path(images_dir)
    if not images_path.is_dir():
        raise InvalidInputError(f"Images directory '{images_dir}' does not exist")

    try:
        image_files = list_image_files(images_path)
    except OSError as e:
        raise LibraryGenerationError(f"Failed to read images directory: {e}") from e

    if not image_files:
        raise NotFoundError("No valid images found in the images directory")

    total_images = len(image_files)
    start_idx, end_idx = _resolve_range(total_images, start_index, end_index)
    range_str = f"{start_idx}-{end_idx} ({image_files[start_idx]} to {image_files[end_idx]})"
    logger.info(f"Processing images {range_str} out of {total_images} total")

    if ollama_service is None:
        from ..llm.ollama_service import OllamaService
        ollama_service = OllamaService()

    word_library = get_word_library()
    rows = []
    skipped_count = 0

    for idx in range(start_idx, end_idx + 1):
        filename = image_files[idx]
        logger.info(f"[{idx + 1}/{total_images}] Processing image: {filename}")

        try:
            image_data = (images_path / filename).read_bytes()
        except OSError as e:
            logger.error(f"Failed to read image {filename}: {e}")
            skipped_count += 1
            continue

        image_base64 = base64.b64encode(image_data).decode("ascii")

        try:
            words = ollama_service.extract_words_from_image(image_base64, word_library)
        except ProviderError as e:
            logger.error(f"Failed to extract words from {filename}: {e}")
            skipped_count += 1
            continue

        if len(words) != WORDS_PER_IMAGE:
            logger.error(f"Expected {WORDS_PER_IMAGE} words for {filename} but got {len(words)}")
            skipped_count += 1
            continue

        rows.append([f"/images/{filename}", *words])
        logger.info(f"Processed {filename}: {words}")

    if not rows:
        logger.log_library_generation(0, skipped_count, range_str, status="failed")
        raise LibraryGenerationError("No images were successfully processed in the given range")

    try:
        with open(csv_output, "w", newline="", encoding="utf-8") as f:
            writer = csv.writer(f)
            writer.writerow(CSV_HEADER)
            writer.writerows(rows)
    except OSError as e:
        raise LibraryGenerationError(f"Failed to write CSV file: {e}") from e

    logger.log_library_generation(len(rows), skipped_count, range_str, csv_path=str(csv_output))

    return LibraryGenerationResult(
        csv_path=str(csv_output),
        total_images_in_folder=total_images,
        processed_images=len(rows),
        skipped_images=skipped_count,
        range=range_str,
    )
