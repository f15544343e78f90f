# tests/services/test_rules_engine.py
import chess
import pytest

from opening_trainer.exceptions import RulesEngineError
from opening_trainer.services.rules_engine import ChessRulesEngine
from opening_trainer.types import RulesEngine, ValidatedMove


@pytest.fixture
def engine():
    return ChessRulesEngine()


def test_satisfies_protocol(engine):
    assert isinstance(engine, RulesEngine)


def test_submit_san(engine):
    move = engine.submit_move("e4")

    assert move == ValidatedMove(san="e4", from_square="e2", to_square="e4")
    assert engine.current_side_to_move() == "black"


def test_submit_uci(engine):
    assert engine.submit_move("g1f3") == ValidatedMove("Nf3", "g1", "f3")


def test_submit_squares(engine):
    assert engine.submit_move(from_square="e2", to_square="e4").san == "e4"


def test_san_gains_check_mark():
    engine = ChessRulesEngine("rnbqkbnr/ppp2ppp/8/3pp3/4P3/8/PPPP1PPP/RNBQKBNR w KQkq - 0 3")

    assert engine.submit_move("Bb5").san == "Bb5+"


def test_illegal_move_returns_none(engine):
    assert engine.submit_move("e5") is None
    assert engine.submit_move(from_square="e2", to_square="e5") is None
    assert engine.fen() == chess.STARTING_FEN


def test_unreadable_input_returns_none(engine):
    assert engine.submit_move("hello") is None
    assert engine.submit_move(from_square="z9", to_square="e4") is None


def test_submit_without_arguments_raises(engine):
    with pytest.raises(RulesEngineError):
        engine.submit_move()


def test_squares_auto_promote_to_queen():
    engine = ChessRulesEngine("8/P7/8/8/8/8/8/k6K w - - 0 1")

    move = engine.submit_move(from_square="a7", to_square="a8")

    assert move.san.startswith("a8=Q")


def test_undo(engine):
    engine.submit_move("d4")
    engine.submit_move("d5")

    assert engine.undo().san == "d5"
    assert engine.current_side_to_move() == "black"
    assert [m.san for m in engine.history] == ["d4"]


def test_undo_on_empty_history(engine):
    assert engine.undo() is None


def test_reset_to_start(engine):
    engine.submit_move("e4")

    engine.reset_to_start()

    assert engine.fen() == chess.STARTING_FEN
    assert engine.history == []
    assert engine.current_side_to_move() == "white"
