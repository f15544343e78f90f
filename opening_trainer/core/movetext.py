# opening_trainer/core/movetext.py
"""
Converts between a variation's numbered-pair string and its individual plies.

The opening book stores every variation in the conventional form
"1. e4 c5 2. Nf3 d6". Playback needs it as numbered pairs and test mode needs
it as a flat list of plies; both views are derived here. None of these
functions raise on malformed input: a string containing anything that is not
a SAN move or a move number yields no pairs at all rather than a partial line.
"""
import re
from typing import Final, List, NamedTuple, Optional

from opening_trainer.types import MovePair, MoveToken

# A move number such as "12." or "12...", standing alone or glued to a move ("1.e4").
_MOVE_NUMBER_RE: Final = re.compile(r"(?<!\S)(\d+)(\.+)")
_MOVE_NUMBER_TOKEN_RE: Final = re.compile(r"^(\d+)(\.+)$")
_SAN_RE: Final = re.compile(
    r"^(?:O-O(?:-O)?"
    r"|[KQRBN][a-h]?[1-8]?x?[a-h][1-8]"
    r"|[a-h](?:x[a-h])?[1-8](?:=?[QRBN])?"
    r")[+#]?$"
)
_ZERO_CASTLING_RE: Final = re.compile(r"^0-0(-0)?")


class _Plies(NamedTuple):
    start_number: int
    black_first: bool
    moves: List[MoveToken]


def is_san_token(token: str) -> bool:
    """True if `token` has the shape of a SAN move (legality is not checked)."""
    return bool(_SAN_RE.match(token))


def _normalize_castling(token: str) -> str:
    return _ZERO_CASTLING_RE.sub(lambda m: "O-O-O" if m.group(1) else "O-O", token)


def _tokenize(movetext: str) -> Optional[_Plies]:
    """Splits movetext into plies; returns None if any token is not a move."""
    spaced = _MOVE_NUMBER_RE.sub(r" \1\2 ", movetext)
    start_number: Optional[int] = None
    black_first = False
    moves: List[MoveToken] = []

    for token in spaced.split():
        number_match = _MOVE_NUMBER_TOKEN_RE.match(token)
        if number_match:
            if not moves and start_number is None:
                start_number = int(number_match.group(1))
                black_first = len(number_match.group(2)) >= 3
            continue
        token = _normalize_castling(token)
        if not is_san_token(token):
            return None
        moves.append(token)

    return _Plies(start_number or 1, black_first, moves)


def _pair_up(plies: _Plies) -> List[MovePair]:
    pairs: List[MovePair] = []
    moves = plies.moves
    number = max(plies.start_number, 1)
    index = 0
    if plies.black_first and moves:
        pairs.append(MovePair(number=number, white=None, black=moves[0]))
        number += 1
        index = 1
    for i in range(index, len(moves), 2):
        black = moves[i + 1] if i + 1 < len(moves) else None
        pairs.append(MovePair(number=number, white=moves[i], black=black))
        number += 1
    return pairs


def split_move_pairs(variation: str) -> List[MovePair]:
    """
    Splits a variation string into numbered move pairs.

    Move numbers only anchor the first pair; after that plies simply alternate
    white, black. A leading "N..." marks a line that starts with black's move.

    Returns:
        The pairs in document order, or an empty list for malformed text.
    """
    plies = _tokenize(variation)
    if plies is None:
        return []
    return _pair_up(plies)


def flatten_move_pairs(pairs: List[MovePair]) -> List[MoveToken]:
    """Flattens pairs into plies, white before black, skipping absent plies."""
    return [move for pair in pairs for move in pair.plies()]


def format_move_pairs(pairs: List[MovePair]) -> str:
    """Renders pairs back into the "1. e4 c5 2. Nf3" form."""
    parts: List[str] = []
    for pair in pairs:
        if pair.white is None:
            parts.append(f"{pair.number}... {pair.black}")
        elif pair.black is None:
            parts.append(f"{pair.number}. {pair.white}")
        else:
            parts.append(f"{pair.number}. {pair.white} {pair.black}")
    return " ".join(parts)


def canonicalize_movetext(movetext: str) -> str:
    """Rewrites cleaned movetext into canonical numbered-pair form ('' if malformed)."""
    return format_move_pairs(split_move_pairs(movetext))


def expected_moves(variation: str) -> List[MoveToken]:
    """The flat ply sequence a learner must reproduce for `variation`."""
    return flatten_move_pairs(split_move_pairs(variation))
