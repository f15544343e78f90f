# opening_trainer/utils/logging_config.py
"""
Configures application-wide structured logging using structlog.

stdout belongs to the trainer itself (statuses, prompts, narration), so log
records always go to stderr, and optionally to a JSON-lines file.
"""

import logging
import sys
from pathlib import Path
from typing import List, Optional

import structlog
from structlog.types import Processor

# Loggers that stay at WARNING even when the trainer runs at DEBUG.
QUIET_LOGGERS = ("asyncio", "aiofiles")


def _shared_processors() -> List[Processor]:
    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.format_exc_info,
    ]


def _formatter(pre_chain: List[Processor], renderer: Processor) -> logging.Formatter:
    return structlog.stdlib.ProcessorFormatter(foreign_pre_chain=pre_chain, processor=renderer)


def setup_logging(
    log_level: str = "INFO",
    log_to_console: bool = True,
    log_file: Optional[Path] = None,
    force_json_console: bool = False,
) -> None:
    """
    Routes structlog and standard-library records through one processor chain.

    Args:
        log_level: Root level name, case-insensitive.
        log_to_console: Attach a stderr handler.
        log_file: Append JSON lines to this file as well.
        force_json_console: Render the console as JSON instead of colored text.
    """
    pre_chain = _shared_processors()
    structlog.configure(
        processors=pre_chain + [structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    handlers: List[logging.Handler] = []
    if log_to_console:
        if force_json_console:
            console_renderer: Processor = structlog.processors.JSONRenderer()
        else:
            console_renderer = structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty())
        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setFormatter(_formatter(pre_chain, console_renderer))
        handlers.append(console_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file, mode="a", encoding="utf-8")
        file_handler.setFormatter(_formatter(pre_chain, structlog.processors.JSONRenderer()))
        handlers.append(file_handler)

    logging.basicConfig(handlers=handlers, level=log_level.upper(), force=True)
    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(max(logging.WARNING, logging.getLogger().level))
