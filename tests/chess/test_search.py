"""Unit tests for /src/chess/search.py"""

import logging
import math
import random
from typing import Callable
from unittest.mock import patch

import pytest

from src.chess.board import Board
from src.chess.moves import Move
from src.chess.position import Position
from src.chess.rules import legal_moves
from src.chess.search import SearchEngine, select_move
from src.core.config import SearchSettings
from src.core.shared_types import Color, Difficulty

BoardFactory = Callable[[str], Board]

STALEMATE_FEN = "k7/8/1Q6/8/8/8/8/7K"
BACK_RANK_MATE_FEN = "7k/6pp/8/8/8/8/8/R6K"
MATED_FEN = "R6k/6pp/8/8/8/8/8/7K"

# White to move: king takes the lone pawn, or one of four quiet moves (knight jumps / king steps)
ONE_CAPTURE_FEN = "4k3/8/8/8/8/8/4p3/N3K3"
CAPTURE = Move.from_coordinates(7, 4, 6, 4)

ALWAYS_BEST = SearchSettings(medium_best_move_probability=1.0)

# Black is already in check, so white can take the king on e8
KING_CAPTURE_FEN = "4k3/8/8/8/8/8/8/4R2K"
KING_CAPTURE = Move.from_coordinates(7, 4, 0, 4)


# --- EASY ---
def test_easy_plays_a_legal_move(seeded_rng: random.Random) -> None:
    board = Board.initial()
    engine = SearchEngine(Difficulty.EASY, rng=seeded_rng)
    for _ in range(20):
        move = engine.select_move(Position(board, Color.WHITE))
        assert move in legal_moves(board, Color.WHITE)


def test_easy_is_uniform_over_legal_moves(board_from_fen: BoardFactory) -> None:
    board = board_from_fen(ONE_CAPTURE_FEN)
    engine = SearchEngine(Difficulty.EASY, rng=random.Random(7))
    picked = {engine.select_move(Position(board, Color.WHITE)) for _ in range(200)}
    assert picked == set(legal_moves(board, Color.WHITE))


# --- MEDIUM ---
def test_medium_prefers_the_capture(board_from_fen: BoardFactory) -> None:
    """Best move 80% of the time, random otherwise: expect roughly 0.8 + 0.2 / 5 = 84% captures"""
    board = board_from_fen(ONE_CAPTURE_FEN)
    assert len(legal_moves(board, Color.WHITE)) == 5

    engine = SearchEngine(Difficulty.MEDIUM, rng=random.Random(1234))
    trials = 2000
    captures = sum(
        engine.select_move(Position(board, Color.WHITE)) == CAPTURE
        for _ in range(trials)
    )
    assert 0.80 < captures / trials < 0.88


def test_medium_always_best_without_noise(board_from_fen: BoardFactory) -> None:
    board = board_from_fen(ONE_CAPTURE_FEN)
    engine = SearchEngine(Difficulty.MEDIUM, settings=ALWAYS_BEST, rng=random.Random(0))
    for _ in range(10):
        assert engine.select_move(Position(board, Color.WHITE)) == CAPTURE


def test_medium_check_outweighs_capture(board_from_fen: BoardFactory) -> None:
    """Taking the knight is worth 3, the rook check on the king's file 10"""
    board = board_from_fen("4k3/8/8/n7/8/7K/8/R7")
    engine = SearchEngine(Difficulty.MEDIUM, settings=ALWAYS_BEST)
    assert engine.select_move(Position(board, Color.WHITE)) == Move.from_coordinates(
        7, 0, 7, 4
    )


def test_medium_ties_go_to_first_move() -> None:
    """Nothing to capture or check in the opening: first move in enumeration order"""
    engine = SearchEngine(Difficulty.MEDIUM, settings=ALWAYS_BEST)
    assert engine.select_move(Position.starting_position()) == Move.from_coordinates(
        6, 0, 4, 0
    )


def test_score_move(board_from_fen: BoardFactory) -> None:
    board = board_from_fen("4k3/8/8/n7/8/7K/8/R7")
    engine = SearchEngine(Difficulty.MEDIUM)
    assert engine.score_move(board, Move.from_coordinates(7, 0, 3, 0), Color.WHITE) == 3
    assert engine.score_move(board, Move.from_coordinates(7, 0, 7, 4), Color.WHITE) == 10
    assert engine.score_move(board, Move.from_coordinates(7, 0, 6, 0), Color.WHITE) == 0


# --- HARD ---
def test_hard_finds_mate_in_one(board_from_fen: BoardFactory) -> None:
    for seed in range(3):
        board = board_from_fen(BACK_RANK_MATE_FEN)
        engine = SearchEngine(Difficulty.HARD, rng=random.Random(seed))
        assert engine.select_move(Position(board, Color.WHITE)) == Move.from_coordinates(
            7, 0, 0, 0
        )


def test_hard_leaves_board_untouched(board_from_fen: BoardFactory) -> None:
    board = board_from_fen(BACK_RANK_MATE_FEN)
    SearchEngine(Difficulty.HARD).select_move(Position(board, Color.WHITE))
    assert board.to_fen() == BACK_RANK_MATE_FEN


def test_hard_takes_the_queen(board_from_fen: BoardFactory) -> None:
    """Shallow search is enough to see the rook should take the undefended queen (with check)"""
    board = board_from_fen("q3k3/8/8/8/8/8/8/R3K3")
    engine = SearchEngine(Difficulty.HARD, settings=SearchSettings(search_depth=1))
    assert engine.select_move(Position(board, Color.WHITE)) == Move.from_coordinates(
        7, 0, 0, 0
    )


# --- MINIMAX ---
def test_minimax_mated_opponent(board_from_fen: BoardFactory) -> None:
    """Black to move and mated: a minimizing node without moves scores the full checkmate score"""
    board = board_from_fen(MATED_FEN)
    engine = SearchEngine(Difficulty.HARD)
    score = engine.minimax(
        Position(board, Color.BLACK), 3, -math.inf, math.inf, False, Color.WHITE
    )
    assert score == 1000


def test_minimax_mated_self(board_from_fen: BoardFactory) -> None:
    board = board_from_fen(MATED_FEN)
    engine = SearchEngine(Difficulty.HARD)
    score = engine.minimax(
        Position(board, Color.BLACK), 3, -math.inf, math.inf, True, Color.BLACK
    )
    assert score == -1000


def test_minimax_stalemate_is_a_draw(board_from_fen: BoardFactory) -> None:
    board = board_from_fen(STALEMATE_FEN)
    engine = SearchEngine(Difficulty.HARD)
    score = engine.minimax(
        Position(board, Color.BLACK), 2, -math.inf, math.inf, False, Color.WHITE
    )
    assert score == 0


def test_minimax_depth_zero_is_static_evaluation(board_from_fen: BoardFactory) -> None:
    board = board_from_fen("4k3/8/8/8/8/8/8/4R2K")
    engine = SearchEngine(Difficulty.HARD)
    score = engine.minimax(
        Position(board, Color.BLACK), 0, -math.inf, math.inf, False, Color.WHITE
    )
    assert score == 55


def test_minimax_stops_when_game_over() -> None:
    engine = SearchEngine(Difficulty.HARD)
    position = Position(Board.initial(), Color.WHITE, game_over=True)
    with patch("src.chess.search.evaluate", return_value=42) as mock_evaluate:
        score = engine.minimax(position, 3, -math.inf, math.inf, True, Color.WHITE)
    assert score == 42
    mock_evaluate.assert_called_once()


def test_alpha_beta_prunes(board_from_fen: BoardFactory) -> None:
    """With a window that is already closed, only the first reply gets searched"""
    board = board_from_fen(BACK_RANK_MATE_FEN)
    engine = SearchEngine(Difficulty.HARD)
    with patch("src.chess.search.evaluate", return_value=0) as mock_evaluate:
        engine.minimax(Position(board, Color.WHITE), 1, 10, -10, True, Color.WHITE)
    assert mock_evaluate.call_count == 1


# --- NO MOVES / DISPATCH ---
@pytest.mark.parametrize("difficulty", list(Difficulty))
def test_no_move_in_stalemate(
    board_from_fen: BoardFactory, difficulty: Difficulty
) -> None:
    board = board_from_fen(STALEMATE_FEN)
    assert select_move(board, Color.BLACK, difficulty) is None


@pytest.mark.parametrize("difficulty", list(Difficulty))
def test_no_move_when_mated(board_from_fen: BoardFactory, difficulty: Difficulty) -> None:
    board = board_from_fen(MATED_FEN)
    assert select_move(board, Color.BLACK, difficulty) is None


def test_module_level_select_move(board_from_fen: BoardFactory) -> None:
    board = board_from_fen(BACK_RANK_MATE_FEN)
    assert select_move(board, Color.WHITE, Difficulty.HARD) == Move.from_coordinates(
        7, 0, 0, 0
    )


def test_unknown_difficulty_falls_back_to_random(
    caplog: pytest.LogCaptureFixture,
) -> None:
    board = Board.initial()
    engine = SearchEngine(difficulty="impossible", rng=random.Random(3))  # type: ignore[arg-type]
    with caplog.at_level(logging.WARNING, logger="src.chess.search"):
        move = engine.select_move(Position(board, Color.WHITE))
    assert move in legal_moves(board, Color.WHITE)
    assert "Unknown difficulty" in caplog.text


# --- KING CAPTURE ---
@pytest.mark.parametrize("difficulty", list(Difficulty))
def test_king_capture_position_does_not_crash(
    board_from_fen: BoardFactory, difficulty: Difficulty
) -> None:
    board = board_from_fen(KING_CAPTURE_FEN)
    move = select_move(board, Color.WHITE, difficulty, rng=random.Random(5))
    assert move in legal_moves(board, Color.WHITE)
    assert board.to_fen() == KING_CAPTURE_FEN


@pytest.mark.parametrize(
    "engine",
    [
        SearchEngine(Difficulty.MEDIUM, settings=ALWAYS_BEST),
        SearchEngine(Difficulty.HARD),
    ],
    ids=["medium", "hard"],
)
def test_king_capture_is_preferred(
    board_from_fen: BoardFactory, engine: SearchEngine
) -> None:
    board = board_from_fen(KING_CAPTURE_FEN)
    assert engine.select_move(Position(board, Color.WHITE)) == KING_CAPTURE


def test_score_move_king_capture(board_from_fen: BoardFactory) -> None:
    board = board_from_fen(KING_CAPTURE_FEN)
    engine = SearchEngine(Difficulty.MEDIUM)
    assert engine.score_move(board, KING_CAPTURE, Color.WHITE) == 100


def test_minimax_stops_after_king_capture(board_from_fen: BoardFactory) -> None:
    board = board_from_fen("4R3/8/8/8/8/8/8/7K")
    engine = SearchEngine(Difficulty.HARD)
    score = engine.minimax(
        Position(board, Color.BLACK), 3, -math.inf, math.inf, False, Color.WHITE
    )
    assert score == 105
