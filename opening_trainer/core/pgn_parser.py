# opening_trainer/core/pgn_parser.py
"""
Parses raw PGN text into the opening book's variation mapping.

Opening book sources are hand-curated PGN files: several records, each a block
of tag pairs followed by movetext that may still carry comments, sub-variations
and annotation glyphs. This module turns such text into a mapping of variation
slug -> canonical move string. It is a pure text transformation and is
deliberately forgiving: incomplete or malformed records are dropped, and no
input, however broken, makes `parse_records` raise.
"""
import re
from dataclasses import dataclass, field
from typing import Dict, Final, List, Optional, Tuple

import structlog

from opening_trainer.core.movetext import canonicalize_movetext
from opening_trainer.types import Variation, VariationKey
from opening_trainer.utils import metrics

logger = structlog.get_logger(__name__)

_TAG_LINE_RE: Final = re.compile(r'^\[\s*([A-Za-z0-9_]+)\s+"((?:[^"\\]|\\.)*)"\s*\]')
_TAG_ESCAPE_RE: Final = re.compile(r"\\(.)")
_EVENT_TAG: Final = "Event"
_EVENT_SEPARATOR: Final = " - "

_NAG_RE: Final = re.compile(r"\$\d+")
_ANNOTATION_RE: Final = re.compile(r"[!?]+")
_RESULT_RE: Final = re.compile(r"1-0|0-1|1/2-1/2|\*")
_WHITESPACE_RE: Final = re.compile(r"\s+")

_SLUG_INVALID_CHARS_RE: Final = re.compile(r"[^a-z0-9\s]")
_SLUG_NOISE_WORDS_RE: Final = re.compile(r"\b(?:variation|defense|attack|gambit|opening)\b")
_FALLBACK_SLUG: Final = "main"

# Synonym collapsing for well-known lines, checked in order; the first needle
# found anywhere in the slug replaces the whole slug, so "Accelerated Dragon"
# collapses into "dragon".
_SLUG_OVERRIDES: Final[List[Tuple[str, str]]] = [
    ("najdorf", "najdorf"),
    ("dragon", "dragon"),
    ("accelerated", "accelerated"),
    ("classical", "classical"),
    ("modern", "modern"),
    ("aggressive", "aggressive"),
    ("bird", "aggressive"),
    ("knights", "knights"),
    ("hungarian", "hungarian"),
    ("closed", "closed"),
    ("berlin", "berlin"),
    ("morphy", "morphy"),
    ("declined", "declined"),
    ("accepted", "accepted"),
    ("slav", "slav"),
]


@dataclass
class RawRecord:
    """One game record split out of a PGN text, before interpretation."""
    tags: Dict[str, str] = field(default_factory=dict)
    movetext_lines: List[str] = field(default_factory=list)

    @property
    def movetext(self) -> str:
        return "\n".join(self.movetext_lines)


def _parse_tag_line(line: str) -> Optional[Tuple[str, str]]:
    match = _TAG_LINE_RE.match(line)
    if not match:
        return None
    return match.group(1), _TAG_ESCAPE_RE.sub(r"\1", match.group(2))


def _starts_new_record(current: RawRecord, tag_name: str) -> bool:
    if current.movetext_lines:
        return True
    # A repeated tag or a fresh Event closes a record that never got movetext.
    return bool(current.tags) and (tag_name == _EVENT_TAG or tag_name in current.tags)


def split_records(text: str) -> List[RawRecord]:
    """
    Splits PGN text into raw records.

    A tag line opens a new record when it follows movetext, when it is an
    Event tag, or when it repeats a tag the current record already has. Files
    holding any number of concatenated games are handled, including records
    without movetext and text with no tags at all. Lines starting with ';' or
    '%' are comments and are skipped.
    """
    records: List[RawRecord] = []
    current = RawRecord()

    for raw_line in text.splitlines():
        line = raw_line.strip()
        if not line or line.startswith((";", "%")):
            continue

        if line.startswith("["):
            tag = _parse_tag_line(line)
            if tag is not None:
                if _starts_new_record(current, tag[0]):
                    records.append(current)
                    current = RawRecord()
                current.tags[tag[0]] = tag[1]
                continue

        current.movetext_lines.append(line)

    if current.tags or current.movetext_lines:
        records.append(current)
    return records


def resolve_variation_name(tags: Dict[str, str]) -> str:
    """
    Picks the human-readable name of a record's variation.

    Precedence: the "Variation" tag, then "Opening", then whatever follows the
    last " - " in "Event" (e.g. "Sicilian Defense - Dragon" -> "Dragon").
    """
    for tag_name in ("Variation", "Opening"):
        value = tags.get(tag_name, "").strip()
        if value and value != "?":
            return value

    event = tags.get(_EVENT_TAG, "")
    separator_index = event.rfind(_EVENT_SEPARATOR)
    if separator_index > 0:
        return event[separator_index + len(_EVENT_SEPARATOR):].strip()
    return ""


def _strip_comments(text: str) -> str:
    """
    Removes `{...}` comments and `;` rest-of-line comments.

    Braces do not nest, and a ';' inside braces is plain comment text. An
    unterminated brace swallows the rest of the text; stray '}' are dropped.
    """
    kept: List[str] = []
    in_brace = False
    in_line_comment = False
    for char in text:
        if in_line_comment:
            if char == "\n":
                in_line_comment = False
                kept.append(char)
        elif in_brace:
            in_brace = char != "}"
        elif char == "{":
            in_brace = True
        elif char == ";":
            in_line_comment = True
        elif char != "}":
            kept.append(char)
    return "".join(kept)


def _strip_sub_variations(text: str) -> str:
    """
    Removes `(...)` sub-variations, honoring nesting.

    An unterminated '(' swallows the rest of the text; stray ')' are dropped.
    """
    kept: List[str] = []
    depth = 0
    for char in text:
        if char == "(":
            depth += 1
        elif char == ")":
            depth = max(depth - 1, 0)
        elif depth == 0:
            kept.append(char)
    return "".join(kept)


def clean_movetext(movetext: str) -> str:
    """Removes comments, sub-variations, annotations and result tokens."""
    # Comments go first so parentheses inside them are not read as sub-variations.
    cleaned = _strip_comments(movetext)
    cleaned = _strip_sub_variations(cleaned)
    cleaned = _NAG_RE.sub("", cleaned)
    cleaned = _ANNOTATION_RE.sub("", cleaned)
    cleaned = _RESULT_RE.sub("", cleaned)
    return _WHITESPACE_RE.sub(" ", cleaned).strip()


def derive_slug(name: str) -> VariationKey:
    """
    Derives a stable variation key from a human-readable name.

    Examples:
        "Najdorf Variation" -> "najdorf"
        "Two Knights Defense" -> "knights"
        "Exchange Variation" -> "exchange"
        "Variation" -> "main"
    """
    slug = _SLUG_INVALID_CHARS_RE.sub("", name.lower())
    slug = _SLUG_NOISE_WORDS_RE.sub("", slug)
    slug = _WHITESPACE_RE.sub("", slug)

    for needle, replacement in _SLUG_OVERRIDES:
        if needle in slug:
            return replacement
    if len(slug) < 2:
        return _FALLBACK_SLUG
    return slug


def parse_records(text: str) -> Dict[VariationKey, Variation]:
    """
    Parses every record of a PGN text into variation slug -> move string.

    Records missing either a resolvable name or usable movetext are dropped.
    When two records resolve to the same slug the later one wins.

    Args:
        text: Raw PGN text holding zero or more records.

    Returns:
        A mapping of variation keys to canonical "1. e4 c5 2. Nf3" strings.
        Empty if nothing usable was found.
    """
    variations: Dict[VariationKey, Variation] = {}

    for index, record in enumerate(split_records(text)):
        name = resolve_variation_name(record.tags)
        moves = canonicalize_movetext(clean_movetext(record.movetext))

        if not name or not moves:
            metrics.RECORDS_DROPPED_TOTAL.inc()
            logger.debug(
                "Skipping incomplete PGN record.",
                record_index=index, variation_name=name, has_moves=bool(moves),
            )
            continue

        key = derive_slug(name)
        if key in variations:
            logger.debug("Variation key collision; later record wins.", key=key, variation_name=name)
        variations[key] = moves
        metrics.RECORDS_PARSED_TOTAL.inc()

    logger.debug("Parsed PGN records.", variations=list(variations))
    return variations
