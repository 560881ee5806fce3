"""
Hamster image catalog.
The baked-in table is the default source; a CSV written by the library
generator can replace it through CATALOG_SOURCE=csv.
"""

import csv
from pathlib import Path
from typing import List

from ..vector.types import CatalogEntry
from .errors import CatalogLoadError

# (image_url, words) in catalog order. Order decides ties in best-match search.
_IMAGE_LIBRARY = [
    ("/images/biggest-eater-hamster.jpg", ("smug", "hungry", "comical")),
    ("/images/birthday-hamster.jpg", ("cake", "confused", "whimsical")),
    ("/images/bleh-hamster.jpg", ("smug", "playful", "cartoon")),
    ("/images/bonita-hamster.png", ("cute", "relaxed", "whimsical")),
    ("/images/burger-hamster.jpg", ("hungry", "confused", "spooky")),
    ("/images/chad-hamster.jpg", ("smug", "confused", "minimalist")),
    ("/images/crying-hamster.jpg", ("confused", "frustrated", "comical")),
    ("/images/detective-hamster.jpg", ("detective", "contemplative", "thinking")),
    ("/images/devil-hamster.jpg", ("smug", "evil", "comical")),
    ("/images/emo-hamster.jpg", ("emotional", "anxious", "sketchy")),
    ("/images/femboy-lover-hamster.jpg", ("smug", "confident", "playful")),
    ("/images/flower-hamster.jpg", ("floral", "serene", "whimsical")),
    ("/images/free-hamster.jpg", ("freedom", "curious", "playful")),
    ("/images/french-hamster.jpg", ("baker", "smug", "elegant")),
    ("/images/furious-hamster.jpg", ("smug", "angry", "comical")),
    ("/images/homeless-hamster.jpg", ("homeless", "melancholic", "surreal")),
    ("/images/intimidating-hamster.jpg", ("smug", "scary", "skeptical")),
    ("/images/lolipop-hamster.jpg", ("candy", "playful", "whimsical")),
    ("/images/make-up-hamster.jpg", ("make up", "pretty", "curious")),
    ("/images/nerd-hamster.jpg", ("smug", "confused", "detective")),
    ("/images/pig-hamster.jpg", ("pig", "costume", "comical")),
    ("/images/poor-hamster.jpg", ("poor", "contemplative", "no money")),
    ("/images/rag-hamster.jpg", ("smug", "confused", "comical")),
    ("/images/schemy-hamster.jpg", ("smug", "confused", "detective")),
    ("/images/sick-hamster.jpg", ("sick", "dying", "whimsical")),
    ("/images/thirsty-hamster.jpg", ("confused", "thirsty", "whimsical")),
    ("/images/thumbs-down-hamster.jpg", ("thumbs down", "skeptical", "disapprove")),
    ("/images/thumbs-up-hamster.jpg", ("thumbs up", "smile", "approve")),
    ("/images/watermelon-hamster.jpg", ("confused", "whimsical", "watermelon")),
    ("/images/wizard-hamster.jpg", ("wizard", "neutral", "whimsical")),
]

# Vocabulary the vision model picks from when tagging new images
_WORD_LIBRARY = [
    # Emotions
    "happy", "sad", "angry", "tired", "scared", "anxious", "evil", "investigate",
    "smug", "confused", "content", "crying", "disappointed", "cheerful", "hungry",
    # Professions/Roles
    "detective", "cowboy", "pirate", "chef", "doctor", "business", "gamer", "artist",
    # States/Situations
    "fancy", "rich", "elegant", "poor", "homeless", "traveling", "eating", "sleeping", "dancing",
    # Styles/Appearance
    "stylish", "muscular", "cute", "small", "strong", "colorful", "glowing", "scary",
    # Seasonal/Themes
    "festive", "spooky", "romantic", "celebratory", "summery", "wintery",
    # Characteristics
    "polite", "rude", "gentle", "aggressive", "calm", "energetic",
    # Items/Props
    "hat", "glasses", "food", "drink", "book", "magnifying glass", "phone", "sign", "weapon",
]


def _word_column_order(name: str):
    # word2 before word10
    suffix = name[len("word"):]
    return (0, int(suffix), name) if suffix.isdigit() else (1, 0, name)


def get_image_library() -> List[CatalogEntry]:
    """Return the baked-in catalog in its fixed order."""
    return [CatalogEntry(identifier=url, tags=words) for url, words in _IMAGE_LIBRARY]


def get_word_library() -> List[str]:
    """Return the tagging vocabulary used by the library generator."""
    return list(_WORD_LIBRARY)


class StaticCatalog:
    """Catalog backed by the baked-in table. Never fails."""

    def load(self) -> List[CatalogEntry]:
        return get_image_library()

    def __repr__(self):
        return "StaticCatalog()"


class CsvCatalog:
    """
    Catalog loaded from a CSV with an image_url column and one or more word
    columns (word1, word2, ...), the format written by the library generator.
    """

    def __init__(self, path):
        self.path = Path(path)

    def load(self) -> List[CatalogEntry]:
        """
        Read and validate the CSV.

        Raises:
            CatalogLoadError: missing file, missing image_url column, an entry
                without words, or a duplicate identifier
        """
        if not self.path.exists():
            raise CatalogLoadError(f"Catalog file '{self.path}' does not exist")

        try:
            with self.path.open(newline="", encoding="utf-8") as f:
                reader = csv.DictReader(f)
                fieldnames = reader.fieldnames or []
                if "image_url" not in fieldnames:
                    raise CatalogLoadError(f"Catalog file '{self.path}' has no image_url column")

                word_columns = sorted(
                    (name for name in fieldnames if name.startswith("word")),
                    key=_word_column_order,
                )
                rows = list(reader)
        except (OSError, UnicodeDecodeError, csv.Error) as e:
            raise CatalogLoadError(f"Failed to read catalog file '{self.path}': {e}") from e

        entries = []
        seen = set()
        for line_no, row in enumerate(rows, start=2):
            identifier = (row.get("image_url") or "").strip()
            if not identifier:
                raise CatalogLoadError(f"{self.path}:{line_no}: empty image_url")
            if identifier in seen:
                raise CatalogLoadError(f"{self.path}:{line_no}: duplicate image_url {identifier}")

            words = tuple(
                row[column].strip() for column in word_columns
                if row.get(column) and row[column].strip()
            )
            if not words:
                raise CatalogLoadError(f"{self.path}:{line_no}: no words for {identifier}")

            seen.add(identifier)
            entries.append(CatalogEntry(identifier=identifier, tags=words))

        return entries

    def __repr__(self):
        return f"CsvCatalog({str(self.path)!r})"
