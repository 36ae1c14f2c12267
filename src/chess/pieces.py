"""Defines the types of chess pieces"""

from dataclasses import dataclass
from typing import Self

from src.core.shared_types import Color, PieceType

FEN_TO_PIECE: dict[str, PieceType] = {
    "p": PieceType.PAWN,
    "n": PieceType.KNIGHT,
    "b": PieceType.BISHOP,
    "r": PieceType.ROOK,
    "q": PieceType.QUEEN,
    "k": PieceType.KING,
}

PIECE_TO_FEN: dict[PieceType, str] = {value: key for key, value in FEN_TO_PIECE.items()}


# NOTE: the king gets a finite (but overwhelming) value so the search can count it like any other material
PIECE_POINTS: dict[PieceType, int] = {
    PieceType.PAWN: 1,
    PieceType.KNIGHT: 3,
    PieceType.BISHOP: 3,
    PieceType.ROOK: 5,
    PieceType.QUEEN: 9,
    PieceType.KING: 100,
}

# Pawns always promote into a queen. There is no under-promotion.
PROMOTION_PIECE = PieceType.QUEEN


@dataclass(frozen=True)
class Piece:
    """Plain value: two pieces of the same type and color are interchangeable."""

    type: PieceType
    color: Color

    @property
    def points(self) -> int:
        return PIECE_POINTS[self.type]

    @classmethod
    def from_fen(cls, character: str) -> Self:
        # lower case: Black pieces, upper case: White pieces
        color = Color.WHITE if character.isupper() else Color.BLACK
        piece_type = FEN_TO_PIECE[character.lower()]
        return cls(piece_type, color)

    def to_fen(self) -> str:
        return (
            PIECE_TO_FEN[self.type].upper()
            if self.color == Color.WHITE
            else PIECE_TO_FEN[self.type].lower()
        )

    def promoted_to(self, new_type: PieceType) -> Self:
        """Pieces are immutable, so promotion hands back a new piece of the same color."""
        return type(self)(new_type, self.color)
