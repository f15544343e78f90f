# opening_trainer/config/settings.py
"""
Configuration settings for the Opening Trainer, powered by Pydantic.

This module centralizes all tunable parameters: where the opening book lives,
which PGN file backs which opening, and the pacing of guided playback. Settings
can be overridden from environment variables, e.g.
`OPENING_TRAINER_PLAYBACK__PAIR_DELAY_S=1.5`.
"""
from pathlib import Path
from typing import Dict

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from opening_trainer.core.catalog import OPENING_NAMES

BUNDLED_BOOK_DIR = Path(__file__).resolve().parent.parent / "book"


class PlaybackSettings(BaseModel):
    """Pacing of guided playback, in seconds."""
    white_move_delay_s: float = Field(0.4, ge=0, description="Pause between white's and black's move of a pair.")
    pair_delay_s: float = Field(0.8, ge=0, description="Pause between two move pairs.")
    completion_delay_s: float = Field(0.5, ge=0, description="Pause before the completion announcement.")
    narration_enabled: bool = Field(True, description="Whether moves and events are narrated.")


class CatalogSettings(BaseModel):
    """Where the opening book sources are found."""
    book_dir: Path = Field(BUNDLED_BOOK_DIR, description="Directory holding the PGN sources.")
    sources: Dict[str, str] = Field(
        default_factory=lambda: {
            "italian": "italian-game.pgn",
            "ruylopez": "ruy-lopez.pgn",
            "queens": "queens-gambit.pgn",
            "sicilian": "sicilian-defense.pgn",
        },
        description="Opening key -> PGN file name, relative to `book_dir`.",
    )
    opening_names: Dict[str, str] = Field(
        default_factory=lambda: dict(OPENING_NAMES),
        description="Display labels for the opening keys.",
    )


# --- Main Application Settings Class ---

class Settings(BaseSettings):
    """
    Main configuration class for the application.

    It loads settings from environment variables with the prefix 'OPENING_TRAINER_'.
    Nested models use a double underscore delimiter, e.g.
    `OPENING_TRAINER_CATALOG__BOOK_DIR=/srv/book`.
    """
    model_config = SettingsConfigDict(env_prefix='OPENING_TRAINER_', env_nested_delimiter='__')

    playback: PlaybackSettings = Field(default_factory=PlaybackSettings)
    catalog: CatalogSettings = Field(default_factory=CatalogSettings)
    log_level: str = "INFO"
