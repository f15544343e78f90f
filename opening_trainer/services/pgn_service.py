# opening_trainer/services/pgn_service.py
"""
Provides a service for reading opening book sources from the filesystem.

This module is a stateless adapter between the filesystem and the catalog
builder. It reads each configured PGN file with `aiofiles` so the event loop
stays responsive, and converts I/O failures into `PgnServiceError`. The bulk
loader turns such failures into `None` entries so that one missing file only
empties its own opening.
"""

import asyncio
from pathlib import Path
from typing import Dict, Mapping, Optional

import aiofiles
import structlog

from opening_trainer.exceptions import PgnServiceError
from opening_trainer.utils import metrics

logger = structlog.get_logger(__name__)


class PgnService:
    """A stateless service for reading opening book PGN files."""

    async def read_source(self, pgn_filepath: Path) -> str:
        """
        Reads a whole PGN file as text.

        Args:
            pgn_filepath: The path to the PGN file.

        Returns:
            The file contents.

        Raises:
            PgnServiceError: If the file is missing, unreadable or not valid UTF-8.
        """
        try:
            async with aiofiles.open(pgn_filepath, "r", encoding="utf-8") as f:
                return await f.read()
        except FileNotFoundError as e:
            raise PgnServiceError(f"Opening source not found: {pgn_filepath}") from e
        except (OSError, UnicodeDecodeError) as e:
            raise PgnServiceError(f"Failed to read opening source {pgn_filepath}: {e}") from e

    async def _read_or_none(self, opening_key: str, pgn_filepath: Path) -> Optional[str]:
        try:
            text = await self.read_source(pgn_filepath)
        except PgnServiceError as e:
            metrics.CATALOG_SOURCE_FAILURES_TOTAL.labels(opening=opening_key).inc()
            logger.warning("Could not load opening source.", opening=opening_key, error=str(e))
            return None
        logger.debug("Read opening source.", opening=opening_key, path=str(pgn_filepath), length=len(text))
        return text

    async def load_sources(
        self, book_dir: Path, sources: Mapping[str, str]
    ) -> Dict[str, Optional[str]]:
        """
        Reads every configured source concurrently.

        Args:
            book_dir: Directory the file names are relative to.
            sources: Opening key -> PGN file name.

        Returns:
            Opening key -> file text, or `None` where the file could not be read.
            Keys keep the order of `sources`.
        """
        keys = list(sources)
        texts = await asyncio.gather(
            *(self._read_or_none(key, Path(book_dir) / sources[key]) for key in keys)
        )
        return dict(zip(keys, texts))
