"""
The Game class will be the entrypoint into the domain layer for the service layer.
It is responsible for orchestrating all the business logic required to play a turn of the board game -->
passes this information to the service layer, which can then pass it onwards to the API layer.
"""

import logging
from dataclasses import dataclass, field
from typing import Optional, Self

from src.chess.board import Board
from src.chess.moves import Move, MoveRecord
from src.chess.position import Position
from src.chess.rules import (
    apply_move,
    is_checkmate,
    is_king_in_check,
    is_legal_move,
    is_stalemate,
    legal_moves,
    undo_move,
)
from src.chess.square import Square
from src.core.exceptions import GameStateError, IllegalMoveError
from src.core.shared_types import Color, Difficulty, GameMode, Status

logger = logging.getLogger(__name__)


@dataclass
class Game:
    # --- DOMAIN LAYER API CALLED BY SERVICE---

    board: Board = field(default_factory=Board.initial)
    color_to_move: Color = Color.WHITE
    status: Status = Status.IN_PROGRESS
    history: list[MoveRecord] = field(default_factory=list)
    mode: GameMode = GameMode.COMPUTER
    player_color: Color = Color.WHITE
    difficulty: Difficulty = Difficulty.MEDIUM

    @classmethod
    def new_game(
        cls,
        mode: GameMode = GameMode.COMPUTER,
        player_color: Color = Color.WHITE,
        difficulty: Difficulty = Difficulty.MEDIUM,
    ) -> Self:
        """Fresh board, white to move."""
        return cls(mode=mode, player_color=player_color, difficulty=difficulty)

    @property
    def game_over(self) -> bool:
        """Checkmate and stalemate are the only ways to end the game."""
        return self.status in (Status.CHECKMATE, Status.STALEMATE)

    @property
    def position(self) -> Position:
        return Position(self.board, self.color_to_move, self.game_over)

    @property
    def computer_color(self) -> Optional[Color]:
        """The side played by the engine (None when two humans play)."""
        if self.mode != GameMode.COMPUTER:
            return None
        return self.player_color.opponent

    @property
    def winner(self) -> Optional[Color]:
        """
        For now only works for checkmate.
        Given we know it is checkmate, the side that is to move just got mated and the opponent must be the winner
        """
        if self.status != Status.CHECKMATE:
            return None
        return self.color_to_move.opponent

    @property
    def in_check(self) -> bool:
        return is_king_in_check(self.board, self.color_to_move)

    def is_computer_turn(self) -> bool:
        return not self.game_over and self.color_to_move == self.computer_color

    def legal_moves(self) -> list[Move]:
        """All legal moves for the side to move (nothing once the game is over)."""
        if self.game_over:
            return []
        return legal_moves(self.board, self.color_to_move)

    def legal_destinations(self, square: Square) -> list[Square]:
        """
        Squares the piece on `square` may go to. Used to highlight a selected piece.
        ---

        Empty if the square is empty, holds an opponent's piece, or the game is over.
        """
        piece = self.board.piece(square)
        if piece is None or piece.color != self.color_to_move:
            return []
        return [
            move.to_square
            for move in self.legal_moves()
            if move.from_square == square
        ]

    def make_move(self, move: Move) -> MoveRecord:
        """
        Attempt to make a move
        -----

        1. make sure the game is (still) in progress
        2. make sure the move is legal for the side to move
        3. update the board and the history of moves
        4. pass the turn
        5. update game status (if needed)
        """
        if self.game_over:
            raise GameStateError(f"Game is not in progress. status: {self.status}")

        piece = self.board.piece(move.from_square)
        if piece is None or piece.color != self.color_to_move:
            raise IllegalMoveError(
                f"Move not allowed: {move}, no {self.color_to_move} piece on {move.from_square}"
            )

        # cheap rejection first, the full legality check tries out every move
        if not is_legal_move(self.board, move.from_square, move.to_square):
            raise IllegalMoveError(f"Move not allowed: {move}")

        if move not in self.legal_moves():
            raise IllegalMoveError(
                f"Move not allowed: {move} leaves the {self.color_to_move} king in check"
            )

        record = apply_move(self.board, move)
        self.history.append(record)
        self.color_to_move = self.color_to_move.opponent
        self._update_game_status()
        logger.info("Played %s, %s to move (%s)", move, self.color_to_move, self.status)
        return record

    def undo(self) -> list[MoveRecord]:
        """
        Take back the last move. Against the computer, take back the computer's reply as well
        so it is the player's turn again.

        Does nothing if no move has been made yet.
        """
        plies = 2 if self.mode == GameMode.COMPUTER else 1
        undone: list[MoveRecord] = []
        for _ in range(plies):
            if not self.history:
                break
            record = self.history.pop()
            undo_move(self.board, record)
            self.color_to_move = self.color_to_move.opponent
            undone.append(record)

        # NOTE: even a finished game is back in progress once a move is taken back
        if undone:
            self._update_game_status()
        return undone

    def reset(self) -> None:
        """Start over with the same settings."""
        self.board = Board.initial()
        self.color_to_move = Color.WHITE
        self.history.clear()
        self.status = Status.IN_PROGRESS

    def declare_stalemate(self) -> None:
        """The engine found no move to play, without the rules having flagged the game as over already."""
        if not self.game_over:
            self._change_status(Status.STALEMATE)

    # -- PRIVATE HELPERS ---
    def _update_game_status(self) -> None:
        """
        Two-part terminal check for the side that is now to move:
        in check and no legal move --> checkmate. Not in check and no legal move --> stalemate.
        """
        color = self.color_to_move
        if is_checkmate(self.board, color):
            self._change_status(Status.CHECKMATE)
        elif is_stalemate(self.board, color):
            self._change_status(Status.STALEMATE)
        elif is_king_in_check(self.board, color):
            self._change_status(Status.CHECK)
        else:
            self._change_status(Status.IN_PROGRESS)

    def _change_status(self, new_status: Status) -> None:
        if new_status != self.status:
            logger.info("Game status changed: %s -> %s", self.status, new_status)
        self.status = new_status
