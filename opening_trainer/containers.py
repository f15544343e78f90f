# opening_trainer/containers.py
"""
Defines the Dependency Injection (DI) container for the application.

This module uses the `punq` library to wire the trainer's object graph: one
rules engine, one sequencer and one trainer per container, all sharing the
same presentation sink. Front ends supply the sink (and optionally a narrator)
and resolve `OpeningTrainer`; tests can build the same graph around doubles.
"""
from typing import Optional

import punq

from opening_trainer.config.settings import Settings
from opening_trainer.orchestration.session_sequencer import SessionSequencer
from opening_trainer.orchestration.trainer import OpeningTrainer
from opening_trainer.services.narrator import LoggingNarrator, SilentNarrator
from opening_trainer.services.pgn_service import PgnService
from opening_trainer.services.rules_engine import ChessRulesEngine
from opening_trainer.types import Narrator, PresentationSink, RulesEngine


def get_container(
    settings: Settings,
    sink: PresentationSink,
    narrator: Optional[Narrator] = None,
) -> punq.Container:
    """
    Initializes and returns a DI container configured for one trainer instance.
    """
    container = punq.Container()

    if narrator is None:
        narrator = LoggingNarrator() if settings.playback.narration_enabled else SilentNarrator()

    # Register instances that are created outside the container's control.
    container.register(Settings, instance=settings)
    container.register(PresentationSink, instance=sink)
    container.register(Narrator, instance=narrator)

    container.register(PgnService, factory=lambda: PgnService(), scope=punq.Scope.singleton)
    # The sequencer and the trainer must drive the very same board.
    container.register(RulesEngine, factory=lambda: ChessRulesEngine(), scope=punq.Scope.singleton)
    container.register(
        SessionSequencer,
        factory=lambda: SessionSequencer(
            container.resolve(RulesEngine),
            container.resolve(PresentationSink),
            container.resolve(Narrator),
            settings.playback,
        ),
        scope=punq.Scope.singleton,
    )
    container.register(
        OpeningTrainer,
        factory=lambda: OpeningTrainer(
            container.resolve(PgnService),
            container.resolve(RulesEngine),
            container.resolve(SessionSequencer),
            container.resolve(PresentationSink),
            settings.catalog,
        ),
        scope=punq.Scope.singleton,
    )

    return container
