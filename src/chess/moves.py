"""
Geometry/Base movement rules

Key idea: Use strategy pattern to define the movement rule of each piece type.

Each rule answers a single question: "can the piece on `from_square` travel to `to_square`?"
Occupancy by a piece of the same color is checked beforehand (see `src.chess.rules.is_legal_move`),
and whether the move leaves your own king in check is checked later still.
"""

from dataclasses import dataclass
from typing import Callable, Optional, Protocol, Self

from src.chess.pieces import Piece
from src.chess.square import BOARD_DIMENSIONS, Square
from src.core.shared_types import Color, PieceType


class Board(Protocol):
    """Just the parts the movement rules need"""

    def piece(self, square: Square) -> Optional[Piece]: ...
    def is_empty(self, square: Square) -> bool: ...


Vector = tuple[int, int]


@dataclass(frozen=True)
class Move:
    """basic definition of a move to be made: a pure coordinate transition"""

    from_square: Square
    to_square: Square

    @classmethod
    def from_coordinates(
        cls, from_row: int, from_col: int, to_row: int, to_col: int
    ) -> Self:
        return cls(Square(from_row, from_col), Square(to_row, to_col))


@dataclass(frozen=True)
class MoveRecord:
    """
    Everything needed to take back exactly one ply.
    ---

    * `piece`: the piece standing on the target square AFTER the move (so a queen if the move promoted).
    * `captured`: what stood on the target square before the move (None if it was empty).
    * `promoted_from`: the original type of the piece when the move promoted it, otherwise None.
    """

    move: Move
    piece: Piece
    captured: Optional[Piece] = None
    promoted_from: Optional[PieceType] = None

    @property
    def moved_piece(self) -> Piece:
        """The piece as it stood on the starting square before the move."""
        if self.promoted_from is None:
            return self.piece
        return self.piece.promoted_to(self.promoted_from)

    @property
    def is_capture(self) -> bool:
        return self.captured is not None


# --- HELPERS ---
def displacement(from_square: Square, to_square: Square) -> Vector:
    return to_square.row - from_square.row, to_square.col - from_square.col


def _sign(value: int) -> int:
    return (value > 0) - (value < 0)


def is_path_clear(from_square: Square, to_square: Square, board: Board) -> bool:
    """
    Walk from one square towards the other (along a straight line or a diagonal)
    and make sure every square in between is empty. Endpoints are not inspected.
    """
    d_row, d_col = displacement(from_square, to_square)
    step_row, step_col = _sign(d_row), _sign(d_col)
    square = from_square.offset(step_row, step_col)
    while square != to_square:
        if not board.is_empty(square):
            return False
        square = square.offset(step_row, step_col)
    return True


def pawn_direction(color: Color) -> int:
    """White moves UP the board (towards row 0), black moves DOWN (towards row 7)"""
    return -1 if color == Color.WHITE else 1


def pawn_starting_row(color: Color) -> int:
    return BOARD_DIMENSIONS[0] - 2 if color == Color.WHITE else 1


def is_promotion_row(row: int) -> bool:
    """A pawn reaching either back rank gets promoted."""
    return row in (0, BOARD_DIMENSIONS[0] - 1)


# --- MOVEMENT RULES ---
def is_valid_pawn_move(from_square: Square, to_square: Square, board: Board) -> bool:
    """
    A pawn:
    - moves by a single square forward onto an empty square.
    - It can move by two in their first move (so when on their starting row), if both squares are empty
    - takes diagonally (one square forward), only when an opponent's piece stands there
    """
    pawn = board.piece(from_square)
    assert pawn is not None
    direction = pawn_direction(pawn.color)
    d_row, d_col = displacement(from_square, to_square)

    # single push
    if d_col == 0 and d_row == direction:
        return board.is_empty(to_square)

    # double push from the starting row
    if (
        d_col == 0
        and d_row == 2 * direction
        and from_square.row == pawn_starting_row(pawn.color)
    ):
        in_between = from_square.offset(direction, 0)
        return board.is_empty(in_between) and board.is_empty(to_square)

    # diagonal capture
    if abs(d_col) == 1 and d_row == direction:
        target = board.piece(to_square)
        return target is not None and target.color != pawn.color

    return False


def is_valid_knight_move(
    from_square: Square, to_square: Square, board: Board
) -> bool:
    """Knights always move such that |delta_row| + |delta_col| = 3 (and never in a straight line). They jump."""
    d_row, d_col = displacement(from_square, to_square)
    return {abs(d_row), abs(d_col)} == {1, 2}


def is_valid_bishop_move(
    from_square: Square, to_square: Square, board: Board
) -> bool:
    """Bishops move diagonally: |delta_row| = |delta_col|"""
    d_row, d_col = displacement(from_square, to_square)
    if abs(d_row) != abs(d_col) or d_row == 0:
        return False
    return is_path_clear(from_square, to_square, board)


def is_valid_rook_move(from_square: Square, to_square: Square, board: Board) -> bool:
    """Rooks move either horizontally or vertically"""
    d_row, d_col = displacement(from_square, to_square)
    if (d_row != 0) == (d_col != 0):
        return False
    return is_path_clear(from_square, to_square, board)


def is_valid_queen_move(
    from_square: Square, to_square: Square, board: Board
) -> bool:
    """
    The Queen combines the rook moves (horizontal + vertical movements) and bishop moves (diagonal movement)
    """
    return is_valid_rook_move(from_square, to_square, board) or is_valid_bishop_move(
        from_square, to_square, board
    )


def is_valid_king_move(from_square: Square, to_square: Square, board: Board) -> bool:
    """The king can move by a single square at the time, in any direction."""
    d_row, d_col = displacement(from_square, to_square)
    return abs(d_row) <= 1 and abs(d_col) <= 1 and (d_row, d_col) != (0, 0)


# -- STRATEGY PATTERN: MOVEMENT RULES ---
MovementRuleFn = Callable[[Square, Square, Board], bool]
MOVEMENT_RULES: dict[PieceType, MovementRuleFn] = {
    PieceType.PAWN: is_valid_pawn_move,
    PieceType.KNIGHT: is_valid_knight_move,
    PieceType.BISHOP: is_valid_bishop_move,
    PieceType.ROOK: is_valid_rook_move,
    PieceType.QUEEN: is_valid_queen_move,
    PieceType.KING: is_valid_king_move,
}
