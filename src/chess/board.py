"""The Game board: storage of which piece stands on which square"""

from __future__ import annotations

from copy import deepcopy
from dataclasses import dataclass, field
from typing import Iterator, Optional, Self

from src.chess.pieces import Piece
from src.chess.square import BOARD_DIMENSIONS, Square, all_squares
from src.core.shared_types import Color, PieceType

Grid = list[list[Optional[Piece]]]

STARTING_POSITION_FEN = "rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR"
BACK_RANK: tuple[PieceType, ...] = (
    PieceType.ROOK,
    PieceType.KNIGHT,
    PieceType.BISHOP,
    PieceType.QUEEN,
    PieceType.KING,
    PieceType.BISHOP,
    PieceType.KNIGHT,
    PieceType.ROOK,
)


def _empty_grid() -> Grid:
    rows, cols = BOARD_DIMENSIONS
    return [[None for _ in range(cols)] for _ in range(rows)]


@dataclass
class Board:
    grid: Grid = field(default_factory=_empty_grid)

    # --- CREATION ---
    @classmethod
    def empty(cls) -> Self:
        return cls()

    @classmethod
    def initial(cls) -> Self:
        """Standard starting layout: black on rows 0-1, white on rows 6-7"""
        board = cls()
        last_row = BOARD_DIMENSIONS[0] - 1
        for col, piece_type in enumerate(BACK_RANK):
            board.place_piece(Piece(piece_type, Color.BLACK), Square(0, col))
            board.place_piece(Piece(PieceType.PAWN, Color.BLACK), Square(1, col))
            board.place_piece(
                Piece(PieceType.PAWN, Color.WHITE), Square(last_row - 1, col)
            )
            board.place_piece(Piece(piece_type, Color.WHITE), Square(last_row, col))
        return board

    @classmethod
    def from_fen(cls, fen_str: str) -> Self:
        """Construct a board using the piece placement part of a FEN string.

        ex. standard starting position:
        rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR
        means:
        * the first group is row 0 (black's back rank), read from column 0 to column 7
        * digits denote that many consecutive empty squares
        * capital letters are white pieces, lower case letters black pieces
        """
        board = cls()
        for row, fen_one_row in enumerate(fen_str.split("/")):
            col = 0
            for character in fen_one_row:
                if character.isalpha():
                    board.place_piece(Piece.from_fen(character), Square(row, col))
                    col += 1
                else:
                    col += int(character)
        return board

    def to_fen(self) -> str:
        """Rows are separated by slashes in FEN string."""
        return "/".join(self._row_to_fen(row) for row in range(BOARD_DIMENSIONS[0]))

    def _row_to_fen(self, row: int) -> str:
        """FEN string of a single row"""
        fen_characters: list[str] = []
        empty_count = 0
        for col in range(BOARD_DIMENSIONS[1]):
            piece = self.grid[row][col]

            if piece is not None:
                if empty_count > 0:
                    fen_characters.append(str(empty_count))
                    empty_count = 0
                fen_characters.append(piece.to_fen())
            else:
                empty_count += 1

        # if the entire row is empty, then we still place this number in the string
        if empty_count > 0:
            fen_characters.append(str(empty_count))
        return "".join(fen_characters)

    def copy(self) -> Self:
        """Independent board to mutate (ex. for a search running next to another one)."""
        return deepcopy(self)

    # --- QUERIES ---
    def piece(self, square: Square) -> Optional[Piece]:
        square.validate()
        return self.grid[square.row][square.col]

    def is_empty(self, square: Square) -> bool:
        return self.piece(square) is None

    def pieces(self, color: Optional[Color] = None) -> Iterator[tuple[Square, Piece]]:
        """Occupied squares in row-major order, optionally only those of one color."""
        for square in all_squares():
            piece = self.grid[square.row][square.col]
            if piece is None:
                continue
            if color is None or piece.color == color:
                yield square, piece

    def locate_king(self, color: Color) -> Optional[Square]:
        """First king of that color found scanning row by row. None if the king is missing."""
        king = Piece(PieceType.KING, color)
        return next(
            (square for square, piece in self.pieces(color) if piece == king), None
        )

    def count_material(self) -> dict[Color, int]:
        """Tally the points of material each player has on the board"""
        return {
            color: sum(piece.points for _, piece in self.pieces(color))
            for color in Color
        }

    # --- MUTATIONS ---
    def place_piece(self, piece: Optional[Piece], square: Square) -> None:
        square.validate()
        self.grid[square.row][square.col] = piece

    def remove_piece(self, square: Square) -> Optional[Piece]:
        """Empty the square and hand back whatever stood there."""
        removed = self.piece(square)
        self.place_piece(None, square)
        return removed
