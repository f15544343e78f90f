# opening_trainer/orchestration/session_sequencer.py
"""
The finite-state controller behind guided playback and test mode.

The sequencer owns the single `SessionState` of a trainer and moves it between
IDLE, PLAYING and TESTING. Playback is a coroutine whose only suspension points
are the pacing delays and the narration awaits; cancellation is cooperative and
polled at each of those points and before every move submission. Test mode is
purely reactive: the caller hands in each move the rules engine has validated
and receives a `MoveCheck` verdict.
"""

import asyncio
from typing import Awaitable, Callable, List, Optional

import structlog

from opening_trainer.config.settings import PlaybackSettings
from opening_trainer.core.movetext import expected_moves, split_move_pairs
from opening_trainer.core.notation import moves_equivalent
from opening_trainer.types import (
    Catalog, MoveCheck, MovePair, MoveVerdict, Narrator, PlaybackOutcome,
    PresentationSink, RulesEngine, SessionMode, SessionState, ValidatedMove
)
from opening_trainer.utils import metrics

logger = structlog.get_logger(__name__)

SleepFunc = Callable[[float], Awaitable[None]]


class SessionSequencer:
    """Drives playback and quiz sessions for the selected variation."""

    def __init__(
        self,
        engine: RulesEngine,
        sink: PresentationSink,
        narrator: Narrator,
        settings: PlaybackSettings,
        catalog: Optional[Catalog] = None,
        sleep: SleepFunc = asyncio.sleep,
    ):
        self._engine = engine
        self._sink = sink
        self._narrator = narrator
        self._settings = settings
        self._catalog = catalog or Catalog()
        self._sleep = sleep
        self._state = SessionState()
        # Bumped on every new session so a stale playback coroutine stops.
        self._run_token = 0

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def catalog(self) -> Catalog:
        return self._catalog

    # --- Selection and catalog lifecycle ---

    def replace_catalog(self, catalog: Catalog) -> None:
        """Swaps in a new catalog, ending any active session first."""
        self.cancel()
        self._catalog = catalog
        state = self._state
        if state.has_selection and not catalog.has_line(state.opening_key, state.line_key):
            state.opening_key = None
            state.line_key = None

    def _title(self) -> str:
        return (
            f"{self._catalog.opening_label(self._state.opening_key)} - "
            f"{self._catalog.line_label(self._state.line_key)}"
        )

    def select(self, opening_key: str, line_key: str) -> bool:
        """
        Selects the variation for the next playback or test.

        Picking a line while a session runs cancels that session first.

        Returns:
            False if the catalog has no such opening/line.
        """
        if not self._catalog.has_line(opening_key, line_key):
            logger.warning("Unknown opening line selected.", opening=opening_key, line=line_key)
            return False
        if self._state.mode is not SessionMode.IDLE:
            self.cancel()

        self._state.opening_key = opening_key
        self._state.line_key = line_key
        self._sink.enable_controls()
        self._sink.set_game_info(f"Selected: {self._title()}")
        logger.info("Selected opening line.", opening=opening_key, line=line_key)
        return True

    def _variation(self) -> str:
        return self._catalog.book[self._state.opening_key][self._state.line_key]

    def _can_start(self, action: str) -> bool:
        if not self._state.has_selection:
            logger.debug("Ignoring session start without a selection.", action=action)
            return False
        if self._state.mode is not SessionMode.IDLE:
            logger.debug("Ignoring session start while busy.", action=action, mode=self._state.mode.value)
            return False
        return True

    def _begin_session(self) -> int:
        self._run_token += 1
        self._state.cancelled = False
        self._engine.reset_to_start()
        self._sink.disable_user_moves()
        return self._run_token

    # --- Cancellation ---

    def _is_cancelled(self, token: int) -> bool:
        return self._state.cancelled or token != self._run_token

    def cancel(self) -> bool:
        """
        Stops the active playback or test and resets the board.

        Returns:
            True if a session was active, False if the sequencer was already idle.
        """
        if self._state.mode is SessionMode.IDLE:
            return False

        logger.info("Cancelling session.", mode=self._state.mode.value)
        self._state.cancelled = True
        self._engine.reset_to_start()
        self._state.clear_session()
        self._sink.disable_user_moves()
        if self._state.has_selection:
            self._sink.enable_controls()
        self._sink.set_status("Session cancelled")
        return True

    # --- Guided playback ---

    async def _pause(self, delay_s: float, token: int) -> bool:
        """Waits `delay_s`; returns False if the session was cancelled around the wait."""
        if self._is_cancelled(token):
            return False
        await self._sleep(delay_s)
        return not self._is_cancelled(token)

    def _submit_playback_move(self, notation: str) -> Optional[ValidatedMove]:
        move = self._engine.submit_move(notation)
        if move is None:
            logger.warning("Rules engine rejected a book move during playback.", move=notation)
        return move

    async def _play_pairs(self, pairs: List[MovePair], token: int) -> bool:
        """Plays all pairs in order; returns False as soon as a cancel is seen."""
        for index, pair in enumerate(pairs):
            played: List[str] = []

            if pair.white:
                if self._is_cancelled(token):
                    return False
                if move := self._submit_playback_move(pair.white):
                    played.append(move.san)
                if not await self._pause(self._settings.white_move_delay_s, token):
                    return False

            if pair.black:
                if self._is_cancelled(token):
                    return False
                if move := self._submit_playback_move(pair.black):
                    played.append(move.san)

            if played:
                await self._narrator.speak_move_pair(played)
                if self._is_cancelled(token):
                    return False

            if index < len(pairs) - 1:
                if not await self._pause(self._settings.pair_delay_s, token):
                    return False
        return True

    async def _finish_playback(self, token: int) -> None:
        self._state.mode = SessionMode.IDLE
        side = self._engine.current_side_to_move()
        self._sink.set_status(f"Opening complete - {side.capitalize()} to move")
        await self._sleep(self._settings.completion_delay_s)
        if token == self._run_token:
            await self._narrator.announce_completion(side)

    async def play(self) -> PlaybackOutcome:
        """
        Demonstrates the selected variation move by move.

        Returns:
            COMPLETED when every pair was played, CANCELLED if a cancel arrived
            first, FAILED on an unexpected error and SKIPPED if playback could
            not start (no selection, or another session is active).
        """
        if not self._can_start("play"):
            return PlaybackOutcome.SKIPPED

        token = self._begin_session()
        self._state.mode = SessionMode.PLAYING
        self._sink.set_status("Playing opening...")
        pairs = split_move_pairs(self._variation())
        structlog.contextvars.bind_contextvars(opening=self._state.opening_key, line=self._state.line_key)
        logger.info("Starting playback.", pairs=len(pairs))

        try:
            await self._narrator.announce_opening(
                self._catalog.opening_label(self._state.opening_key),
                self._catalog.line_label(self._state.line_key),
            )
            if await self._play_pairs(pairs, token):
                await self._finish_playback(token)
                outcome = PlaybackOutcome.COMPLETED
            else:
                outcome = PlaybackOutcome.CANCELLED
        except Exception:
            logger.error("Error playing opening.", exc_info=True)
            if not self._is_cancelled(token) and self._state.mode is SessionMode.PLAYING:
                self._state.mode = SessionMode.IDLE
                self._sink.set_status("Error playing opening")
            outcome = PlaybackOutcome.FAILED
        finally:
            structlog.contextvars.unbind_contextvars("opening", "line")

        metrics.PLAYBACKS_TOTAL.labels(outcome=outcome.value).inc()
        logger.info("Playback finished.", outcome=outcome.value)
        return outcome

    # --- Test mode ---

    def start_test(self) -> bool:
        """
        Starts quizzing the learner on the selected variation.

        Returns:
            True if test mode was entered.
        """
        if not self._can_start("test"):
            return False

        self._begin_session()
        moves = expected_moves(self._variation())
        if not moves:
            logger.warning("Selected line has no moves to test.", line=self._state.line_key)
            return False

        state = self._state
        state.mode = SessionMode.TESTING
        state.expected_moves = moves
        state.cursor = 0
        self._sink.set_status(f"Test Mode: Play {moves[0]} (move 1 of {len(moves)})")
        self._sink.set_game_info(f"Testing: {self._title()}")
        self._sink.set_progress(0, len(moves))
        self._sink.enable_user_moves()
        logger.info("Test mode started.", opening=state.opening_key, line=state.line_key, expected=moves)
        return True

    def check_move(self, move: ValidatedMove) -> MoveCheck:
        """
        Judges a learner move that the rules engine has already accepted.

        On a mismatch the state is left untouched and the caller is expected to
        take the move back on the board.
        """
        state = self._state
        if state.mode is not SessionMode.TESTING:
            return MoveCheck(verdict=MoveVerdict.IGNORED, actual=move.san)

        expected = state.expected_moves[state.cursor]
        total = len(state.expected_moves)

        if not moves_equivalent(move.san, expected, move.from_square, move.to_square):
            self._sink.set_status(f"Wrong move! Expected: {expected}, got: {move.san}. Try again.")
            logger.info("Test move rejected.", expected=expected, actual=move.san, cursor=state.cursor)
            check = MoveCheck(MoveVerdict.MISMATCH, expected=expected, actual=move.san, remaining=state.remaining)
            metrics.TEST_MOVES_TOTAL.labels(verdict=check.verdict.value).inc()
            return check

        state.cursor += 1
        self._sink.set_progress(state.cursor, total)
        if state.cursor == total:
            state.mode = SessionMode.IDLE
            self._sink.disable_user_moves()
            self._sink.set_status("Perfect! You completed the opening correctly!")
            self._sink.set_game_info(f"Test completed: {self._title()}")
            logger.info("Test completed.", moves=total)
            check = MoveCheck(MoveVerdict.COMPLETED, expected=expected, actual=move.san, remaining=0)
        else:
            self._sink.set_status(f"Correct! {state.remaining} moves to go")
            check = MoveCheck(MoveVerdict.ACCEPTED, expected=expected, actual=move.san, remaining=state.remaining)

        metrics.TEST_MOVES_TOTAL.labels(verdict=check.verdict.value).inc()
        return check
