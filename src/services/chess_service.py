"""Orchestration of communication from the UI to the game and the computer opponent (and the reverse direction)."""

import logging
import random
from typing import Optional

from src.api.models import (
    GameResponse,
    LegalMovesResponse,
    MoveRequest,
    MoveResponse,
    NewGameRequest,
    SettingsRequest,
    SquareRequest,
)
from src.chess.game import Game
from src.chess.moves import Move, MoveRecord
from src.chess.search import SearchEngine
from src.chess.square import Square
from src.core.config import DEFAULT_SETTINGS, SearchSettings
from src.core.exceptions import GameStateError

logger = logging.getLogger(__name__)


class ChessService:
    """Orchestration of layers for one chess game against a human or the computer."""

    def __init__(
        self,
        settings: SearchSettings = DEFAULT_SETTINGS,
        rng: Optional[random.Random] = None,
    ) -> None:
        self.settings = settings
        self.rng = rng or random.Random()
        self.game = Game.new_game()

    # -- UI actions ---
    def new_game(self, request: NewGameRequest) -> GameResponse:
        """Start a new game. If the player took black against the computer, the computer opens."""
        self.game = Game.new_game(
            mode=request.mode,
            player_color=request.player_color,
            difficulty=request.difficulty,
        )
        self._let_computer_move_if_needed()
        return self.get_state()

    def get_state(self) -> GameResponse:
        return self._create_game_response()

    def legal_moves(self, request: SquareRequest) -> LegalMovesResponse:
        """Where the piece on the requested square may go (for highlighting a selected piece)."""
        square = Square(request.row, request.col)
        piece = self.game.board.piece(square)
        destinations = self.game.legal_destinations(square)
        return LegalMovesResponse(
            row=request.row,
            col=request.col,
            color=piece.color if piece else None,
            destinations=[(dest.row, dest.col) for dest in destinations],
        )

    def make_move(self, request: MoveRequest) -> GameResponse:
        """
        The player attempts a move.
        ----

        Against the computer, the computer replies straight away (unless the move ended the game).
        """
        if self.game.is_computer_turn():
            raise GameStateError("It is not your turn. Waiting for the computer to move.")

        move = Move.from_coordinates(
            request.from_row, request.from_col, request.to_row, request.to_col
        )
        self.game.make_move(move)
        self._let_computer_move_if_needed()
        return self._create_game_response()

    def ai_move(self) -> GameResponse:
        """Ask the engine to play for the side to move (also usable in human mode as a hint-and-play)."""
        if self.game.game_over:
            raise GameStateError(
                f"Game is not in progress. status: {self.game.status}"
            )
        self._play_engine_move()
        return self._create_game_response()

    def undo(self) -> GameResponse:
        """
        Take back moves. If that hands the turn to the computer (player is black and only
        the computer's opening move was taken back), the computer plays again right away.
        """
        self.game.undo()
        self._let_computer_move_if_needed()
        return self._create_game_response()

    def reset(self) -> GameResponse:
        self.game.reset()
        self._let_computer_move_if_needed()
        return self._create_game_response()

    def change_settings(self, request: SettingsRequest) -> GameResponse:
        """
        Difficulty changes take effect on the next engine move.
        Changing the mode or the player's color starts the game over.
        """
        if request.difficulty is not None:
            self.game.difficulty = request.difficulty

        needs_reset = False
        if request.mode is not None and request.mode != self.game.mode:
            self.game.mode = request.mode
            needs_reset = True
        if (
            request.player_color is not None
            and request.player_color != self.game.player_color
        ):
            self.game.player_color = request.player_color
            needs_reset = True

        if needs_reset:
            return self.reset()
        return self._create_game_response()

    # -- Internal helpers --
    def _engine(self) -> SearchEngine:
        return SearchEngine(
            difficulty=self.game.difficulty, settings=self.settings, rng=self.rng
        )

    def _let_computer_move_if_needed(self) -> None:
        if self.game.is_computer_turn():
            self._play_engine_move()

    def _play_engine_move(self) -> None:
        """No move available while the rules did not end the game --> call it a stalemate."""
        move = self._engine().select_move(self.game.position)
        if move is None:
            logger.info("Engine has no move for %s", self.game.color_to_move)
            self.game.declare_stalemate()
            return
        self.game.make_move(move)

    def _create_game_response(self) -> GameResponse:
        return GameResponse(
            board_fen=self.game.board.to_fen(),
            color_to_move=self.game.color_to_move,
            status=self.game.status,
            winner=self.game.winner,
            in_check=self.game.in_check,
            mode=self.game.mode,
            player_color=self.game.player_color,
            difficulty=self.game.difficulty,
            move_history=[_to_move_response(record) for record in self.game.history],
            can_undo=bool(self.game.history),
        )


def _to_move_response(record: MoveRecord) -> MoveResponse:
    move = record.move
    return MoveResponse(
        from_row=move.from_square.row,
        from_col=move.from_square.col,
        to_row=move.to_square.row,
        to_col=move.to_square.col,
        captured=record.is_capture,
        promoted=record.promoted_from is not None,
    )
