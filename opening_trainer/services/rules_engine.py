# opening_trainer/services/rules_engine.py
"""
A `python-chess` backed implementation of the `RulesEngine` oracle.

The trainer never decides legality itself. This adapter owns the game state,
accepts moves in SAN ("Nf3"), UCI ("g1f3") or as a pair of squares, and
reports every accepted move as a `ValidatedMove` carrying the canonical SAN
and both squares. Illegal or unparsable input returns `None`.
"""
from typing import List, Optional

import chess
import structlog

from opening_trainer.exceptions import RulesEngineError
from opening_trainer.types import SideToMove, ValidatedMove

logger = structlog.get_logger(__name__)


class ChessRulesEngine:
    """Game state plus legality checks for one board."""

    def __init__(self, fen: Optional[str] = None):
        self._start_fen = fen or chess.STARTING_FEN
        self._board = chess.Board(self._start_fen)
        self._history: List[ValidatedMove] = []

    @property
    def history(self) -> List[ValidatedMove]:
        return list(self._history)

    def fen(self) -> str:
        return self._board.fen()

    def _parse_notation(self, notation: str) -> Optional[chess.Move]:
        try:
            return self._board.parse_san(notation)
        except ValueError:
            pass
        # Coordinate input such as "e2e4" or "e7e8q".
        try:
            move = chess.Move.from_uci(notation.lower())
        except ValueError:
            return None
        return self._with_auto_promotion(move)

    def _with_auto_promotion(self, move: chess.Move) -> chess.Move:
        """Promotes to a queen when a pawn reaches the last rank without a piece given."""
        if move.promotion is None and self._board.piece_type_at(move.from_square) == chess.PAWN:
            if chess.square_rank(move.to_square) in (0, 7):
                return chess.Move(move.from_square, move.to_square, promotion=chess.QUEEN)
        return move

    def _parse_squares(self, from_square: str, to_square: str) -> Optional[chess.Move]:
        try:
            move = chess.Move(chess.parse_square(from_square), chess.parse_square(to_square))
        except ValueError:
            return None
        return self._with_auto_promotion(move)

    def submit_move(
        self,
        notation: Optional[str] = None,
        *,
        from_square: Optional[str] = None,
        to_square: Optional[str] = None,
    ) -> Optional[ValidatedMove]:
        """
        Plays a move if it is legal in the current position.

        Args:
            notation: The move in SAN or UCI.
            from_square: Source square name, used together with `to_square`.
            to_square: Destination square name.

        Returns:
            The validated move, or `None` if the move is illegal or unreadable.

        Raises:
            RulesEngineError: If neither a notation nor both squares were given.
        """
        if notation:
            move = self._parse_notation(notation.strip())
        elif from_square and to_square:
            move = self._parse_squares(from_square, to_square)
        else:
            raise RulesEngineError("submit_move needs a notation or both squares.")

        if move is None or not self._board.is_legal(move):
            logger.debug(
                "Rejected move.", notation=notation, from_square=from_square,
                to_square=to_square, fen=self._board.fen(),
            )
            return None

        validated = ValidatedMove(
            san=self._board.san(move),
            from_square=chess.square_name(move.from_square),
            to_square=chess.square_name(move.to_square),
        )
        self._board.push(move)
        self._history.append(validated)
        return validated

    def current_side_to_move(self) -> SideToMove:
        return "white" if self._board.turn == chess.WHITE else "black"

    def reset_to_start(self) -> None:
        self._board = chess.Board(self._start_fen)
        self._history.clear()

    def undo(self) -> Optional[ValidatedMove]:
        """Takes back the last move; returns it, or `None` on an empty history."""
        if not self._history:
            return None
        self._board.pop()
        return self._history.pop()
