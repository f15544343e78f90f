# opening_trainer/core/speech_formatter.py
"""
Renders moves and session events as text meant to be read aloud.
"""
import re
from typing import Dict, Final, Sequence

PIECE_NAMES: Final[Dict[str, str]] = {
    "N": "Knight", "B": "Bishop", "R": "Rook", "Q": "Queen", "K": "King",
}

# A piece letter plus an optional disambiguator that is followed by the destination.
_PIECE_MOVE_RE: Final = re.compile(r"^([NBRQK])([a-h1-8](?=\s*(?:takes\s+)?[a-h][1-8]))?")


def format_move_for_speech(move: str) -> str:
    """
    Spells out a SAN move for narration.

    Examples:
        "Nf3"   -> "Knight f3"
        "Nbd7"  -> "Knight b d7"
        "exd5"  -> "e takes d5"
        "O-O-O" -> "castles queenside"
        "e8=Q+" -> "e8 promotes to Q check"
    """
    spoken = move.replace("O-O-O", "castles queenside").replace("O-O", "castles kingside")
    spoken = spoken.replace("+", " check").replace("#", " checkmate")
    spoken = spoken.replace("x", " takes ").replace("=", " promotes to ")

    piece_match = _PIECE_MOVE_RE.match(spoken)
    if piece_match:
        piece, disambiguator = piece_match.groups()
        prefix = PIECE_NAMES[piece] + (f" {disambiguator}" if disambiguator else "")
        spoken = f"{prefix} {spoken[piece_match.end():]}"

    return " ".join(spoken.split())


def format_move_pair(moves: Sequence[str]) -> str:
    return ", ".join(format_move_for_speech(move) for move in moves)


def opening_announcement(opening_name: str, line_name: str) -> str:
    return f"Playing {opening_name}, {line_name}"


def completion_announcement(side_to_move: str) -> str:
    return f"Opening complete. {side_to_move.capitalize()} to move."
