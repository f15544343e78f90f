# opening_trainer/orchestration/trainer.py
"""
The top-level trainer facade.

`OpeningTrainer` ties the pieces together for a front end: it loads the PGN
sources, builds the catalog and hands it to the sequencer, and routes learner
moves through the rules engine before the sequencer judges them. It is also
the "caller" that takes a rejected quiz move back off the board.
"""

from typing import Optional

import structlog

from opening_trainer.config.settings import CatalogSettings
from opening_trainer.core.catalog import build_catalog
from opening_trainer.exceptions import CatalogEmptyError, CatalogError
from opening_trainer.orchestration.session_sequencer import SessionSequencer
from opening_trainer.services.pgn_service import PgnService
from opening_trainer.types import (
    Catalog, MoveCheck, MoveVerdict, PlaybackOutcome, PresentationSink,
    RulesEngine, SessionMode, SessionState
)
from opening_trainer.utils import metrics

logger = structlog.get_logger(__name__)

LOAD_FAILURE_MESSAGE = "Could not load opening book from PGN files"


class OpeningTrainer:
    """Front-end facing entry point for catalog loading and sessions."""

    def __init__(
        self,
        pgn_service: PgnService,
        engine: RulesEngine,
        sequencer: SessionSequencer,
        sink: PresentationSink,
        settings: CatalogSettings,
    ):
        self._pgn_service = pgn_service
        self._engine = engine
        self._sequencer = sequencer
        self._sink = sink
        self._settings = settings

    @property
    def catalog(self) -> Catalog:
        return self._sequencer.catalog

    @property
    def state(self) -> SessionState:
        return self._sequencer.state

    async def load_catalog(self) -> Catalog:
        """
        Reads all configured sources and builds a catalog from them.

        Raises:
            CatalogEmptyError: If no opening yielded a single variation.
        """
        texts = await self._pgn_service.load_sources(self._settings.book_dir, self._settings.sources)
        catalog = build_catalog(texts, self._settings.opening_names)
        if catalog.is_empty:
            raise CatalogEmptyError(f"No variations found in {self._settings.book_dir}")
        return catalog

    async def initialize(self) -> bool:
        """
        Loads the catalog and makes it available for selection.

        On failure the error is shown to the user, the controls stay disabled
        and an empty catalog is installed, so nothing can be selected until a
        later `initialize()` succeeds. Calling it again is a full reload.

        Returns:
            True if a non-empty catalog is now installed.
        """
        try:
            catalog = await self.load_catalog()
        except CatalogError as e:
            logger.error("Failed to load opening catalog.", error=str(e), book_dir=str(self._settings.book_dir))
            self._sequencer.replace_catalog(Catalog())
            self._sink.disable_controls()
            self._sink.show_error(LOAD_FAILURE_MESSAGE)
            return False

        self._sequencer.replace_catalog(catalog)
        logger.info(
            "Opening catalog ready.",
            openings=len(catalog.book), lines=sum(len(lines) for lines in catalog.book.values()),
        )
        return True

    reload = initialize

    def select(self, opening_key: str, line_key: str) -> bool:
        return self._sequencer.select(opening_key, line_key)

    async def play(self) -> PlaybackOutcome:
        return await self._sequencer.play()

    def start_test(self) -> bool:
        return self._sequencer.start_test()

    def cancel(self) -> bool:
        return self._sequencer.cancel()

    def reset(self) -> None:
        """Resets the board; any running session ends with it."""
        if not self._sequencer.cancel():
            self._engine.reset_to_start()

    def _rejected(self, attempted: str) -> MoveCheck:
        state = self.state
        expected = None
        if state.mode is SessionMode.TESTING:
            expected = state.expected_moves[state.cursor]
        metrics.TEST_MOVES_TOTAL.labels(verdict=MoveVerdict.REJECTED.value).inc()
        return MoveCheck(MoveVerdict.REJECTED, expected=expected, actual=attempted, remaining=state.remaining)

    def submit_move(
        self,
        notation: Optional[str] = None,
        *,
        from_square: Optional[str] = None,
        to_square: Optional[str] = None,
    ) -> MoveCheck:
        """
        Plays a learner move and judges it against the active test.

        Illegal moves and moves made during playback are rejected without any
        state change. A legal move that does not match the book is undone.
        """
        attempted = notation or f"{from_square or ''}{to_square or ''}"
        if self.state.mode is SessionMode.PLAYING:
            logger.debug("Ignoring learner move during playback.", move=attempted)
            return self._rejected(attempted)

        move = self._engine.submit_move(notation, from_square=from_square, to_square=to_square)
        if move is None:
            logger.info("Illegal move attempt.", move=attempted)
            return self._rejected(attempted)

        check = self._sequencer.check_move(move)
        if check.verdict is MoveVerdict.MISMATCH:
            self._engine.undo()
        return check
