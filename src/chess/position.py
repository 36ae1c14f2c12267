"""
Representation of a single position: the board, whose turn it is, and whether the game has ended.

No castling rights or en passant square: neither rule is part of this game.
"""

from dataclasses import dataclass, replace
from typing import Self

from src.chess.board import Board
from src.chess.moves import Move, MoveRecord
from src.chess.rules import apply_move, is_king_in_check, legal_moves
from src.core.shared_types import Color


@dataclass(frozen=True)
class Position:
    """
    Bundles side to move with the board, so no query has to be told separately whose turn it is.
    ---

    NOTE: frozen only refers to the fields. The board itself is still mutated in place by the search
    (apply -> inspect -> undo), exactly as the Game does when committing a move.
    """

    board: Board
    color_to_move: Color = Color.WHITE
    game_over: bool = False

    @classmethod
    def starting_position(cls) -> Self:
        return cls(Board.initial())

    def legal_moves(self) -> list[Move]:
        return legal_moves(self.board, self.color_to_move)

    def is_check(self) -> bool:
        return is_king_in_check(self.board, self.color_to_move)

    def play(self, move: Move) -> tuple[Self, MoveRecord]:
        """Apply the move to the board, and hand back the position with the turn passed to the opponent."""
        record = apply_move(self.board, move)
        return replace(self, color_to_move=self.color_to_move.opponent), record

    def with_turn(self, color: Color) -> Self:
        return replace(self, color_to_move=color)
