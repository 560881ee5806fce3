"""
Library generator: tag a folder of images and write the catalog CSV.
"""

import base64
import csv
from unittest.mock import MagicMock

import pytest

from snap_api.core.catalog import CsvCatalog
from snap_api.core.errors import InvalidInputError, LibraryGenerationError, NotFoundError, ProviderError
from snap_api.core.library_generator import CSV_HEADER, generate_library, list_image_files


@pytest.fixture
def images_dir(tmp_path):
    folder = tmp_path / "images"
    folder.mkdir()
    for name in ("b.png", "a.jpg", "c.JPEG"):
        (folder / name).write_bytes(name.encode("utf-8"))
    (folder / "notes.txt").write_text("not an image")
    (folder / "nested").mkdir()
    return folder


@pytest.fixture
def tagger():
    service = MagicMock()
    service.extract_words_from_image.return_value = ["happy", "cute", "small"]
    return service


def read_rows(path):
    with open(path, newline="", encoding="utf-8") as f:
        return list(csv.reader(f))


def test_list_image_files_sorted_and_filtered(images_dir):
    assert list_image_files(images_dir) == ["a.jpg", "b.png", "c.JPEG"]


def test_generate_full_range(images_dir, tmp_path, tagger):
    output = tmp_path / "library.csv"

    result = generate_library(images_dir, output, ollama_service=tagger)

    assert result.total_images_in_folder == 3
    assert result.processed_images == 3
    assert result.skipped_images == 0
    assert result.range == "0-2 (a.jpg to c.JPEG)"
    assert result.csv_path == str(output)

    rows = read_rows(output)
    assert rows[0] == CSV_HEADER
    assert rows[1] == ["/images/a.jpg", "happy", "cute", "small"]
    assert len(rows) == 4


def test_image_sent_as_base64(images_dir, tmp_path, tagger):
    generate_library(images_dir, tmp_path / "library.csv", start_index=0, end_index=0, ollama_service=tagger)

    image_base64, word_library = tagger.extract_words_from_image.call_args.args
    assert base64.b64decode(image_base64) == b"a.jpg"
    assert "detective" in word_library


def test_partial_range(images_dir, tmp_path, tagger):
    result = generate_library(images_dir, tmp_path / "library.csv", start_index=1, end_index=2, ollama_service=tagger)

    assert result.processed_images == 2
    assert result.range == "1-2 (b.png to c.JPEG)"


def test_failed_images_are_skipped(images_dir, tmp_path):
    service = MagicMock()
    service.extract_words_from_image.side_effect = [
        ["happy", "cute", "small"],
        ProviderError("model crashed"),
        ["only", "two"],
    ]
    output = tmp_path / "library.csv"

    result = generate_library(images_dir, output, ollama_service=service)

    assert result.processed_images == 1
    assert result.skipped_images == 2
    assert len(read_rows(output)) == 2


def test_output_round_trips_through_csv_catalog(images_dir, tmp_path, tagger):
    output = tmp_path / "library.csv"
    generate_library(images_dir, output, ollama_service=tagger)

    entries = CsvCatalog(output).load()
    assert [e.identifier for e in entries] == ["/images/a.jpg", "/images/b.png", "/images/c.JPEG"]
    assert entries[0].tags == ("happy", "cute", "small")


def test_missing_directory(tmp_path, tagger):
    with pytest.raises(InvalidInputError, match="does not exist"):
        generate_library(tmp_path / "nope", tmp_path / "library.csv", ollama_service=tagger)


def test_empty_directory(tmp_path, tagger):
    (tmp_path / "empty").mkdir()
    with pytest.raises(NotFoundError):
        generate_library(tmp_path / "empty", tmp_path / "library.csv", ollama_service=tagger)


@pytest.mark.parametrize("start, end", [(-1, 1), (0, 3), (5, None), (2, 1)])
def test_invalid_range(images_dir, tmp_path, tagger, start, end):
    with pytest.raises(InvalidInputError):
        generate_library(images_dir, tmp_path / "library.csv", start_index=start, end_index=end, ollama_service=tagger)
    tagger.extract_words_from_image.assert_not_called()


def test_nothing_processed(images_dir, tmp_path):
    service = MagicMock()
    service.extract_words_from_image.side_effect = ProviderError("offline")
    output = tmp_path / "library.csv"

    with pytest.raises(LibraryGenerationError):
        generate_library(images_dir, output, ollama_service=service)
    assert not output.exists()
