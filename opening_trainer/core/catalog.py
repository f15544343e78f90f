# opening_trainer/core/catalog.py
"""
Aggregates parsed PGN sources into the opening catalog.

The catalog is the in-memory opening book (opening -> line -> move string)
together with the display labels for openings and lines. It is built in one
pass and never mutated afterwards; a reload builds a fresh `Catalog` and the
owner swaps the reference.
"""
from typing import Dict, Final, Mapping, Optional

import structlog

from opening_trainer.core.pgn_parser import parse_records
from opening_trainer.types import Catalog, DisplayNameTable, OpeningBook, OpeningKey

logger = structlog.get_logger(__name__)

OPENING_NAMES: Final[Dict[OpeningKey, str]] = {
    "italian": "Italian Game",
    "ruylopez": "Ruy Lopez",
    "queens": "Queen's Gambit",
    "sicilian": "Sicilian Defense",
}

# Curated labels for the variation keys produced by the slug overrides.
LINE_NAMES: Final[Dict[str, str]] = {
    "classical": "Classical Variation",
    "aggressive": "Bird's Attack",
    "modern": "Modern Defense",
    "knights": "Two Knights Defense",
    "hungarian": "Hungarian Defense",
    "closed": "Closed Defense",
    "berlin": "Berlin Defense",
    "morphy": "Morphy Defense",
    "declined": "Declined",
    "accepted": "Accepted",
    "slav": "Slav Defense",
    "najdorf": "Najdorf Variation",
    "dragon": "Dragon Variation",
    "accelerated": "Accelerated Dragon",
    "main": "Main Line",
}


def fallback_label(key: str) -> str:
    """Capitalizes a slug for display when no curated label exists ('exchange' -> 'Exchange')."""
    return key[:1].upper() + key[1:]


def generate_line_names(
    book: OpeningBook, curated: Optional[Mapping[str, str]] = None
) -> DisplayNameTable:
    """
    Builds the display-name table for every variation key in the book.

    Keys are visited once in book order; the first occurrence of a key fixes
    its label and later openings sharing the key do not overwrite it.
    """
    labels = LINE_NAMES if curated is None else curated
    line_names: DisplayNameTable = {}
    for variations in book.values():
        for line_key in variations:
            if line_key not in line_names:
                line_names[line_key] = labels.get(line_key) or fallback_label(line_key)
    return line_names


def build_catalog(
    sources: Mapping[OpeningKey, Optional[str]],
    opening_names: Optional[Mapping[OpeningKey, str]] = None,
) -> Catalog:
    """
    Parses every source text and assembles the catalog.

    A source given as `None` could not be loaded; its opening is kept with an
    empty variation set instead of failing the whole build.

    Args:
        sources: Opening key -> raw PGN text, or `None` for an unavailable source.
        opening_names: Curated opening labels; defaults to `OPENING_NAMES`.

    Returns:
        The new `Catalog`. It may be empty; callers decide whether that is fatal.
    """
    names = OPENING_NAMES if opening_names is None else opening_names
    book: OpeningBook = {}

    for opening_key, text in sources.items():
        if text is None:
            logger.warning("Opening source unavailable; using an empty variation set.", opening=opening_key)
            book[opening_key] = {}
            continue
        book[opening_key] = parse_records(text)
        logger.info("Loaded opening.", opening=opening_key, variations=sorted(book[opening_key]))

    return Catalog(
        book=book,
        line_names=generate_line_names(book),
        opening_names={key: names.get(key) or fallback_label(key) for key in book},
    )
