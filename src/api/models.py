"""Requests and Response models"""

from typing import Optional

from pydantic import BaseModel, field_validator

from src.chess.square import BOARD_DIMENSIONS
from src.core.exceptions import InvalidRequestError
from src.core.shared_types import Color, Difficulty, GameMode, Status


# --- REQUEST MODELS ---
class NewGameRequest(BaseModel):
    mode: GameMode = GameMode.COMPUTER
    player_color: Color = Color.WHITE
    difficulty: Difficulty = Difficulty.MEDIUM


class SettingsRequest(BaseModel):
    """Only the fields that are supplied get changed."""

    mode: Optional[GameMode] = None
    player_color: Optional[Color] = None
    difficulty: Optional[Difficulty] = None


class SquareRequest(BaseModel):
    row: int
    col: int

    @field_validator(*["row", "col"])
    @classmethod
    def validate_coordinate(cls, value: int) -> int:
        if not 0 <= value < BOARD_DIMENSIONS[0]:
            raise InvalidRequestError(
                f"Cannot interpret {value!r} as a row/column. Must lie in [0, {BOARD_DIMENSIONS[0]})."
            )
        return value


class MoveRequest(BaseModel):
    from_row: int
    from_col: int
    to_row: int
    to_col: int

    @field_validator(*["from_row", "from_col", "to_row", "to_col"])
    @classmethod
    def validate_coordinate(cls, value: int) -> int:
        if not 0 <= value < BOARD_DIMENSIONS[0]:
            raise InvalidRequestError(
                f"Cannot interpret {value!r} as a row/column. Must lie in [0, {BOARD_DIMENSIONS[0]})."
            )
        return value


# --- RESPONSE MODELS ---
class MoveResponse(BaseModel):
    from_row: int
    from_col: int
    to_row: int
    to_col: int
    captured: bool
    promoted: bool


class GameResponse(BaseModel):
    board_fen: str
    color_to_move: Color
    status: Status
    winner: Optional[Color]
    in_check: bool
    mode: GameMode
    player_color: Color
    difficulty: Difficulty
    move_history: list[MoveResponse]
    can_undo: bool


class LegalMovesResponse(BaseModel):
    row: int
    col: int
    color: Optional[Color]
    destinations: list[tuple[int, int]]
