# opening_trainer/utils/signal_manager.py
"""
Provides an asynchronous context manager that turns SIGINT/SIGTERM into a
session cancel.

While guided playback runs inside `async with AsyncSignalManager(trainer.cancel)`,
pressing Ctrl+C stops the playback at its next suspension point instead of
killing the process mid-move.
"""

import asyncio
import signal
from typing import Callable, Set

import structlog

logger = structlog.get_logger(__name__)


class AsyncSignalManager:
    """
    An async context manager that invokes a callback on shutdown signals.

    Usage:
        async with AsyncSignalManager(trainer.cancel):
            await trainer.play()
    """

    def __init__(self, on_signal: Callable[[], object]):
        """
        Args:
            on_signal: Called once, from the event loop, on the first SIGINT or
                       SIGTERM received inside the context.
        """
        self._on_signal = on_signal
        self._signals_to_catch: Set[signal.Signals] = {signal.SIGINT, signal.SIGTERM}
        self._registered: Set[signal.Signals] = set()
        self.triggered = False

    def _signal_handler(self, sig: signal.Signals) -> None:
        if self.triggered:
            logger.info("Repeated signal ignored; cancellation already requested.", signal_name=sig.name)
            return
        self.triggered = True
        logger.warning("Signal received. Cancelling the session.", signal_name=sig.name)
        self._on_signal()

    async def __aenter__(self) -> "AsyncSignalManager":
        loop = asyncio.get_running_loop()
        for sig in self._signals_to_catch:
            try:
                loop.add_signal_handler(sig, self._signal_handler, sig)
                self._registered.add(sig)
            except (ValueError, NotImplementedError, RuntimeError) as e:
                # Windows event loops do not support signal handlers.
                logger.debug("Could not register signal handler.", signal_name=sig.name, error=str(e))
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        loop = asyncio.get_running_loop()
        for sig in self._registered:
            loop.remove_signal_handler(sig)
        self._registered.clear()
