# opening_trainer/types.py
"""
A central module for shared data structures and service interfaces (Protocols).
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Literal, Optional, Protocol, Sequence, TypeAlias, runtime_checkable

MoveToken: TypeAlias = str
OpeningKey: TypeAlias = str
VariationKey: TypeAlias = str
Variation: TypeAlias = str
OpeningBook: TypeAlias = Dict[OpeningKey, Dict[VariationKey, Variation]]
DisplayNameTable: TypeAlias = Dict[VariationKey, str]
SideToMove: TypeAlias = Literal["white", "black"]


class SessionMode(str, Enum):
    IDLE = "Idle"; PLAYING = "Playing"; TESTING = "Testing"

class MoveVerdict(str, Enum):
    IGNORED = "Ignored"; ACCEPTED = "Accepted"; COMPLETED = "Completed"
    MISMATCH = "Mismatch"; REJECTED = "Rejected"

class PlaybackOutcome(str, Enum):
    COMPLETED = "Completed"; CANCELLED = "Cancelled"; FAILED = "Failed"; SKIPPED = "Skipped"


@dataclass(frozen=True, slots=True)
class ValidatedMove:
    san: MoveToken; from_square: Optional[str] = None; to_square: Optional[str] = None

@dataclass(frozen=True, slots=True)
class MovePair:
    number: int; white: Optional[MoveToken]; black: Optional[MoveToken]

    def plies(self) -> List[MoveToken]:
        """The moves of this pair in play order, absent plies omitted."""
        return [move for move in (self.white, self.black) if move]

@dataclass(frozen=True, slots=True)
class MoveCheck:
    verdict: MoveVerdict; expected: Optional[MoveToken] = None
    actual: Optional[MoveToken] = None; remaining: int = 0

    @property
    def allowed(self) -> bool:
        """Whether the move may stay on the board."""
        return self.verdict in (MoveVerdict.IGNORED, MoveVerdict.ACCEPTED, MoveVerdict.COMPLETED)

@dataclass(frozen=True)
class Catalog:
    book: OpeningBook = field(default_factory=dict)
    line_names: DisplayNameTable = field(default_factory=dict)
    opening_names: Dict[OpeningKey, str] = field(default_factory=dict)

    @property
    def is_empty(self) -> bool:
        return not any(self.book.values())

    def has_line(self, opening_key: OpeningKey, line_key: VariationKey) -> bool:
        return line_key in self.book.get(opening_key, {})

    def opening_label(self, opening_key: OpeningKey) -> str:
        return self.opening_names.get(opening_key, opening_key)

    def line_label(self, line_key: VariationKey) -> str:
        return self.line_names.get(line_key, line_key)

@dataclass
class SessionState:
    """
    Mutable state of the single training session owned by the sequencer.

    The cursor always stays within `[0, len(expected_moves)]`.
    """
    mode: SessionMode = SessionMode.IDLE
    opening_key: Optional[OpeningKey] = None
    line_key: Optional[VariationKey] = None
    expected_moves: List[MoveToken] = field(default_factory=list)
    cursor: int = 0
    cancelled: bool = False

    @property
    def has_selection(self) -> bool:
        return self.opening_key is not None and self.line_key is not None

    @property
    def remaining(self) -> int:
        return len(self.expected_moves) - self.cursor

    def clear_session(self) -> None:
        """Returns to IDLE and drops mode-specific fields, keeping the selection."""
        self.mode = SessionMode.IDLE
        self.expected_moves = []
        self.cursor = 0


# --- PROTOCOLS: Abstract Interfaces for Collaborators ---
# The sequencer depends on these contracts only, which allows test doubles
# for the rules engine, the presentation layer and the narrator.

@runtime_checkable
class RulesEngine(Protocol):
    """The legality oracle. Illegal submissions return `None`."""
    def submit_move(
        self, notation: Optional[str] = None, *,
        from_square: Optional[str] = None, to_square: Optional[str] = None,
    ) -> Optional[ValidatedMove]: ...
    def current_side_to_move(self) -> SideToMove: ...
    def reset_to_start(self) -> None: ...
    def undo(self) -> Optional[ValidatedMove]: ...

@runtime_checkable
class PresentationSink(Protocol):
    """One-way notifications towards whatever renders the trainer."""
    def set_status(self, text: str) -> None: ...
    def set_game_info(self, text: str) -> None: ...
    def set_progress(self, done: int, total: int) -> None: ...
    def enable_user_moves(self) -> None: ...
    def disable_user_moves(self) -> None: ...
    def enable_controls(self) -> None: ...
    def disable_controls(self) -> None: ...
    def show_error(self, message: str) -> None: ...

@runtime_checkable
class Narrator(Protocol):
    """Spoken commentary. Each call completes when the narration has finished."""
    async def announce_opening(self, opening_name: str, line_name: str) -> None: ...
    async def speak_move_pair(self, moves: Sequence[MoveToken]) -> None: ...
    async def announce_completion(self, side_to_move: str) -> None: ...
