# opening_trainer/services/narrator.py
"""
Narrator implementations.

Speech output itself belongs to the presentation layer. `LoggingNarrator`
renders every narration request as spoken text and emits it as a log event,
which is what the CLI uses; `SilentNarrator` completes every request at once.
Both satisfy the awaitable `Narrator` protocol.
"""
from typing import Sequence

import structlog

from opening_trainer.core.speech_formatter import (
    completion_announcement, format_move_pair, opening_announcement
)

logger = structlog.get_logger(__name__)


class LoggingNarrator:
    """Narrates by logging the text that would be spoken."""

    def __init__(self):
        self.spoken: list[str] = []

    async def _speak(self, text: str) -> None:
        if not text:
            return
        self.spoken.append(text)
        logger.info("Narration.", text=text)

    async def announce_opening(self, opening_name: str, line_name: str) -> None:
        await self._speak(opening_announcement(opening_name, line_name))

    async def speak_move_pair(self, moves: Sequence[str]) -> None:
        await self._speak(format_move_pair(moves))

    async def announce_completion(self, side_to_move: str) -> None:
        await self._speak(completion_announcement(side_to_move))


class SilentNarrator:
    """A narrator that says nothing."""

    async def announce_opening(self, opening_name: str, line_name: str) -> None:
        return None

    async def speak_move_pair(self, moves: Sequence[str]) -> None:
        return None

    async def announce_completion(self, side_to_move: str) -> None:
        return None
