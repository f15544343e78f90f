# tests/core/test_speech_formatter.py
import pytest

from opening_trainer.core.speech_formatter import (
    completion_announcement, format_move_for_speech, format_move_pair, opening_announcement
)


@pytest.mark.parametrize("move, spoken", [
    ("e4", "e4"),
    ("Nf3", "Knight f3"),
    ("Nbd7", "Knight b d7"),
    ("R1e2", "Rook 1 e2"),
    ("exd5", "e takes d5"),
    ("Bxc6", "Bishop takes c6"),
    ("Nbxd2", "Knight b takes d2"),
    ("Bb5+", "Bishop b5 check"),
    ("Qxf7#", "Queen takes f7 checkmate"),
    ("O-O", "castles kingside"),
    ("O-O-O", "castles queenside"),
    ("e8=Q+", "e8 promotes to Q check"),
])
def test_format_move_for_speech(move, spoken):
    assert format_move_for_speech(move) == spoken


def test_format_move_pair():
    assert format_move_pair(["e4", "Nf6"]) == "e4, Knight f6"
    assert format_move_pair(["Nf3"]) == "Knight f3"


def test_announcements():
    assert opening_announcement("Sicilian Defense", "Najdorf Variation") == (
        "Playing Sicilian Defense, Najdorf Variation"
    )
    assert completion_announcement("white") == "Opening complete. White to move."
