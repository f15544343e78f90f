# main.py
"""
The command-line entry point for the Opening Trainer.

    opening-trainer list
    opening-trainer play sicilian najdorf
    opening-trainer quiz ruylopez berlin
"""
import asyncio
from pathlib import Path
from typing import Optional, Sequence

import typer

from opening_trainer.config.settings import Settings
from opening_trainer.containers import get_container
from opening_trainer.core.speech_formatter import (
    completion_announcement, format_move_pair, opening_announcement
)
from opening_trainer.orchestration.trainer import OpeningTrainer
from opening_trainer.services.narrator import SilentNarrator
from opening_trainer.types import MoveVerdict, Narrator, PlaybackOutcome, SessionMode
from opening_trainer.utils.logging_config import setup_logging
from opening_trainer.utils.signal_manager import AsyncSignalManager

app = typer.Typer(help="Learn chess openings by watching them and playing them back.")


class ConsoleSink:
    """Prints trainer notifications to the terminal."""

    def __init__(self):
        self.user_moves_enabled = False
        self.controls_enabled = False
        self.progress = (0, 0)

    def set_status(self, text: str) -> None:
        typer.echo(text)

    def set_game_info(self, text: str) -> None:
        typer.secho(text, bold=True)

    def set_progress(self, done: int, total: int) -> None:
        self.progress = (done, total)

    def enable_user_moves(self) -> None:
        self.user_moves_enabled = True

    def disable_user_moves(self) -> None:
        self.user_moves_enabled = False

    def enable_controls(self) -> None:
        self.controls_enabled = True

    def disable_controls(self) -> None:
        self.controls_enabled = False

    def show_error(self, message: str) -> None:
        typer.secho(f"Error: {message}", fg=typer.colors.RED, err=True)


class ConsoleNarrator:
    """Writes the narration text instead of speaking it."""

    async def announce_opening(self, opening_name: str, line_name: str) -> None:
        typer.secho(opening_announcement(opening_name, line_name), fg=typer.colors.CYAN)

    async def speak_move_pair(self, moves: Sequence[str]) -> None:
        typer.secho(f"  {' '.join(moves):<16} {format_move_pair(moves)}", fg=typer.colors.CYAN)

    async def announce_completion(self, side_to_move: str) -> None:
        typer.secho(completion_announcement(side_to_move), fg=typer.colors.CYAN)


def _build_trainer(
    book_dir: Optional[Path], log_level: str, json_logs: bool, narration: bool
) -> OpeningTrainer:
    settings = Settings()
    if book_dir is not None:
        settings.catalog.book_dir = book_dir
    settings.playback.narration_enabled = narration
    setup_logging(log_level=log_level or settings.log_level, force_json_console=json_logs)

    narrator: Narrator = ConsoleNarrator() if narration else SilentNarrator()
    container = get_container(settings, ConsoleSink(), narrator)
    return container.resolve(OpeningTrainer)


BookDirOption = typer.Option(None, "--book-dir", help="Directory holding the PGN sources.")
LogLevelOption = typer.Option("WARNING", "--log-level", help="Logging level.")
JsonLogsOption = typer.Option(False, "--json-logs", help="Emit logs as JSON lines.")
NarrationOption = typer.Option(True, "--narration/--no-narration", help="Narrate the moves.")


async def _initialize_and_select(trainer: OpeningTrainer, opening: str, line: str) -> bool:
    if not await trainer.initialize():
        return False
    if not trainer.select(opening, line):
        typer.secho(f"Unknown line '{opening} {line}'. Try the 'list' command.", fg=typer.colors.RED, err=True)
        return False
    return True


@app.command("list")
def list_openings(
    book_dir: Optional[Path] = BookDirOption,
    log_level: str = LogLevelOption,
    json_logs: bool = JsonLogsOption,
):
    """Show every opening and line in the book."""
    trainer = _build_trainer(book_dir, log_level, json_logs, narration=False)
    if not asyncio.run(trainer.initialize()):
        raise typer.Exit(code=1)

    catalog = trainer.catalog
    for opening_key, lines in catalog.book.items():
        typer.secho(f"{catalog.opening_label(opening_key)} ({opening_key})", bold=True)
        if not lines:
            typer.echo("  (unavailable)")
        for line_key, moves in lines.items():
            typer.echo(f"  {line_key:<12} {catalog.line_label(line_key):<22} {moves}")


@app.command()
def play(
    opening: str,
    line: str,
    book_dir: Optional[Path] = BookDirOption,
    log_level: str = LogLevelOption,
    json_logs: bool = JsonLogsOption,
    narration: bool = NarrationOption,
):
    """Watch a line being played. Ctrl+C stops the playback."""
    trainer = _build_trainer(book_dir, log_level, json_logs, narration)

    async def _run() -> int:
        if not await _initialize_and_select(trainer, opening, line):
            return 1
        async with AsyncSignalManager(trainer.cancel):
            outcome = await trainer.play()
        return 1 if outcome in (PlaybackOutcome.FAILED, PlaybackOutcome.SKIPPED) else 0

    raise typer.Exit(code=asyncio.run(_run()))


@app.command()
def quiz(
    opening: str,
    line: str,
    book_dir: Optional[Path] = BookDirOption,
    log_level: str = LogLevelOption,
    json_logs: bool = JsonLogsOption,
):
    """Play a line from memory. Enter moves as SAN or squares (e2e4); 'hint' reveals the next move."""
    trainer = _build_trainer(book_dir, log_level, json_logs, narration=False)
    if not asyncio.run(_initialize_and_select(trainer, opening, line)) or not trainer.start_test():
        raise typer.Exit(code=1)

    while trainer.state.mode is SessionMode.TESTING:
        try:
            entry = typer.prompt("Your move").strip()
        except typer.Abort:
            trainer.cancel()
            raise typer.Exit(code=130)

        if entry == "hint":
            state = trainer.state
            typer.echo(f"Next: {state.expected_moves[state.cursor]}")
            continue
        if entry in ("quit", "exit"):
            trainer.cancel()
            break

        check = trainer.submit_move(entry)
        if check.verdict is MoveVerdict.REJECTED:
            typer.secho(f"'{entry}' is not a legal move here.", fg=typer.colors.YELLOW)


if __name__ == "__main__":
    app()
