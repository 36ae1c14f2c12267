"""
Pytest will auto-discover / import this file called 'conftest.py'.
This file defines fixtures/variables required for testing multiple layers.
"""

import random
from typing import Callable

import pytest

from src.chess.board import Board

EMPTY_FEN = "/".join(["8"] * 8)


@pytest.fixture
def board_from_fen() -> Callable[[str], Board]:
    """Call the inner function with the piece placement part of a FEN string"""

    def _create_board(fen: str) -> Board:
        return Board.from_fen(fen)

    return _create_board


@pytest.fixture
def empty_board() -> Board:
    return Board.from_fen(EMPTY_FEN)


@pytest.fixture
def seeded_rng() -> random.Random:
    """Deterministic randomness for the Easy/Medium tiers"""
    return random.Random(20240601)
