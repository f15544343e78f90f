# tests/core/test_pgn_parser.py
import pytest

from opening_trainer.core.pgn_parser import (
    clean_movetext, derive_slug, parse_records, resolve_variation_name, split_records
)


SICILIAN_PGN = """
[Event "Sicilian Defense"]
[Opening "Sicilian Defense"]
[Variation "Najdorf Variation"]

1. e4 c5 2. Nf3 d6 3. d4 cxd4 4. Nxd4 Nf6 5. Nc3 a6 *

[Event "Sicilian Defense - Dragon"]

1. e4 c5 2. Nf3 d6 3. d4 cxd4 4. Nxd4 Nf6 5. Nc3 g6 *
"""


def test_parse_najdorf_and_dragon():
    variations = parse_records(SICILIAN_PGN)

    assert variations == {
        "najdorf": "1. e4 c5 2. Nf3 d6 3. d4 cxd4 4. Nxd4 Nf6 5. Nc3 a6",
        "dragon": "1. e4 c5 2. Nf3 d6 3. d4 cxd4 4. Nxd4 Nf6 5. Nc3 g6",
    }


def test_split_records_counts_concatenated_games():
    records = split_records(SICILIAN_PGN)

    assert len(records) == 2
    assert records[0].tags["Variation"] == "Najdorf Variation"
    assert records[1].tags == {"Event": "Sicilian Defense - Dragon"}


def test_record_without_moves_does_not_lend_its_tags():
    pgn = (
        '[Event "Sicilian Defense - Najdorf"]\n[Variation "Najdorf Variation"]\n\n'
        '[Event "Sicilian Defense - Dragon"]\n\n1. e4 c5 2. Nf3 d6 3. d4 cxd4 *\n'
    )

    assert len(split_records(pgn)) == 2
    assert parse_records(pgn) == {"dragon": "1. e4 c5 2. Nf3 d6 3. d4 cxd4"}


def test_repeated_tag_starts_a_new_record():
    pgn = '[Variation "Najdorf"]\n[Variation "Dragon"]\n\n1. e4 c5 2. Nf3 d6\n'

    records = split_records(pgn)

    assert [r.tags for r in records] == [{"Variation": "Najdorf"}, {"Variation": "Dragon"}]
    assert parse_records(pgn) == {"dragon": "1. e4 c5 2. Nf3 d6"}


def test_split_records_skips_comment_lines():
    records = split_records('% escape line\n; a comment\n[Opening "Test"]\n1. e4 e5\n')

    assert len(records) == 1
    assert records[0].movetext == "1. e4 e5"


def test_split_records_without_tags():
    records = split_records("1. e4 e5 2. Nf3")

    assert len(records) == 1
    assert records[0].tags == {}


def test_tag_values_unescape_quotes():
    records = split_records('[Opening "The \\"Fried Liver\\""]\n1. e4 e5\n')

    assert records[0].tags["Opening"] == 'The "Fried Liver"'


@pytest.mark.parametrize("tags, name", [
    ({"Variation": "Berlin Defense", "Opening": "Ruy Lopez"}, "Berlin Defense"),
    ({"Opening": "Ruy Lopez"}, "Ruy Lopez"),
    ({"Variation": "?", "Opening": "Ruy Lopez"}, "Ruy Lopez"),
    ({"Event": "Italian Game - Evans Gambit"}, "Evans Gambit"),
    ({"Event": "Sicilian - Open - Dragon"}, "Dragon"),
    ({"Event": "Casual game"}, ""),
    ({}, ""),
])
def test_resolve_variation_name(tags, name):
    assert resolve_variation_name(tags) == name


def test_clean_movetext_removes_annotations():
    movetext = "1. e4! c5 $1 2. Nf3 {the main move} d6?! (2... Nc6 3. d4 (3. Bb5)) 3. d4 1/2-1/2"

    assert clean_movetext(movetext) == "1. e4 c5 2. Nf3 d6 3. d4"


def test_clean_movetext_semicolon_comment_ends_at_newline():
    assert clean_movetext("1. e4 e5 ; the open game\n2. Nf3 Nc6") == "1. e4 e5 2. Nf3 Nc6"


def test_clean_movetext_semicolon_inside_braces():
    assert clean_movetext("1. e4 {a; b} e5") == "1. e4 e5"


def test_clean_movetext_unterminated_sub_variation_swallows_rest():
    assert clean_movetext("1. e4 e5 (2. d4 2. Nf3") == "1. e4 e5"


def test_clean_movetext_stray_closers_are_dropped():
    assert clean_movetext("1. e4 } e5 ) 2. Nf3") == "1. e4 e5 2. Nf3"


@pytest.mark.parametrize("name, slug", [
    ("Najdorf Variation", "najdorf"),
    ("Dragon", "dragon"),
    ("Accelerated Dragon", "dragon"),
    ("Accelerated", "accelerated"),
    ("Two Knights Defense", "knights"),
    ("Bird's Attack", "aggressive"),
    ("Queen's Gambit Declined", "declined"),
    ("Slav Defense", "slav"),
    ("Exchange Variation", "exchange"),
    ("Evans Gambit", "evans"),
    ("Variation", "main"),
    ("", "main"),
])
def test_derive_slug(name, slug):
    assert derive_slug(name) == slug


def test_derive_slug_keeps_noise_words_inside_other_words():
    assert derive_slug("Openingham Line") == "openinghamline"


def test_record_without_name_is_dropped():
    assert parse_records("[Event \"Casual game\"]\n\n1. e4 e5\n") == {}


def test_record_without_moves_is_dropped():
    assert parse_records("[Variation \"Najdorf\"]\n\n*\n") == {}


def test_record_with_non_move_token_is_dropped():
    assert parse_records("[Variation \"Najdorf\"]\n\n1. e4 c5 2. banana\n") == {}


def test_later_record_wins_on_slug_collision():
    pgn = (
        '[Variation "Classical Variation"]\n\n1. e4 e5 2. Nf3 Nc6 3. Bc4 Bc5\n\n'
        '[Variation "Classical"]\n\n1. e4 e5 2. Nf3 Nc6 3. Bc4 Bc5 4. c3\n'
    )

    assert parse_records(pgn) == {"classical": "1. e4 e5 2. Nf3 Nc6 3. Bc4 Bc5 4. c3"}


def test_castling_written_with_zeros_is_normalized():
    pgn = '[Variation "Castle"]\n\n1. e4 e5 2. Nf3 Nc6 3. Bc4 Bc5 4. 0-0\n'

    assert parse_records(pgn)["castle"].endswith("4. O-O")


@pytest.mark.parametrize("text", [
    "",
    "[[[[",
    "{ never closed",
    "(((1. e4",
    '[Event "x"',
    "\x00\x01garbage\n[Variation \"A\"]\n)",
    "1. e4 e5 2. Nf3 Nc6 1-0",
])
def test_parse_records_never_raises(text):
    assert isinstance(parse_records(text), dict)


def test_parse_records_is_deterministic():
    assert parse_records(SICILIAN_PGN) == parse_records(SICILIAN_PGN)
