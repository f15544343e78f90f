# opening_trainer/core/notation.py
"""
Pure functions for deciding whether two move tokens denote the same move.

A learner's move arrives from the rules engine in canonical SAN, while the
opening book was typed by hand: it may carry redundant disambiguation
("Ncb4"), omit or add check marks, or even be written in coordinate form
("e2e4"). The functions here fold those differences away. They have no
side effects and never mutate their inputs.
"""
import re
from typing import Final, Optional

_CHECK_SUFFIX_RE: Final = re.compile(r"[+#]+$")

# A piece move carrying a file, rank or square disambiguator, e.g. "Ncb4", "R1e2", "Qh4e1".
_DISAMBIGUATED_RE: Final = re.compile(r"^([NBRQK])([a-h][1-8]|[a-h]|[1-8])([a-h][1-8])([+#]?)$")
# The same piece move without disambiguation, e.g. "Nb4".
_PLAIN_PIECE_RE: Final = re.compile(r"^([NBRQK])([a-h][1-8])([+#]?)$")


def strip_check_suffix(move: str) -> str:
    """Removes trailing check (`+`) and mate (`#`) marks, e.g. 'Qd8+' -> 'Qd8'."""
    return _CHECK_SUFFIX_RE.sub("", move)


def _coordinates_match(expected: str, from_square: Optional[str], to_square: Optional[str]) -> bool:
    if not from_square or not to_square:
        return False
    coordinates = from_square + to_square
    return coordinates == expected or coordinates == expected.lower()


def _suffix_insensitive_match(actual: str, expected: str) -> bool:
    return strip_check_suffix(actual) == expected or actual == strip_check_suffix(expected)


def _folds_disambiguation(disambiguated: str, plain: str) -> bool:
    """True if `disambiguated` is `plain` with an extra file/rank/square disambiguator."""
    long_match = _DISAMBIGUATED_RE.match(disambiguated)
    short_match = _PLAIN_PIECE_RE.match(plain)
    if not long_match or not short_match:
        return False

    long_piece, _, long_destination, long_suffix = long_match.groups()
    short_piece, short_destination, short_suffix = short_match.groups()
    return (
        long_piece == short_piece
        and long_destination == short_destination
        and long_suffix == short_suffix
    )


def moves_equivalent(
    actual: str,
    expected: str,
    from_square: Optional[str] = None,
    to_square: Optional[str] = None,
) -> bool:
    """
    Decides whether a played move satisfies an expected book move.

    The checks run in order and stop at the first match: exact equality,
    coordinate notation built from the validated move's squares, equality
    after removing check/mate suffixes, and finally disambiguation folding
    in either direction ("Ncb4" vs "Nb4").

    Args:
        actual: The SAN of the move that was played.
        expected: The move token from the opening book.
        from_square: Source square of the validated move, e.g. "e2".
        to_square: Destination square of the validated move, e.g. "e4".

    Returns:
        True if the two tokens describe the same move.
    """
    if actual == expected:
        return True
    if _coordinates_match(expected, from_square, to_square):
        return True
    if _suffix_insensitive_match(actual, expected):
        return True
    return _folds_disambiguation(expected, actual) or _folds_disambiguation(actual, expected)
