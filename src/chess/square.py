"""
A square on the board

(placed in its own module as multiple other modules need to import it)
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator

from src.core.exceptions import InvalidCoordinateError

# (rows, columns). Row 0 is black's back rank, row 7 is white's back rank.
BOARD_DIMENSIONS = (8, 8)


@dataclass(frozen=True)
class Square:
    row: int
    col: int

    def is_within_bounds(self) -> bool:
        return (0 <= self.row < BOARD_DIMENSIONS[0]) and (
            0 <= self.col < BOARD_DIMENSIONS[1]
        )

    def validate(self) -> Square:
        """Fail fast instead of silently reading outside of the grid."""
        if not self.is_within_bounds():
            raise InvalidCoordinateError(
                f"Square {self.row, self.col} lies outside of the {BOARD_DIMENSIONS[0]}x{BOARD_DIMENSIONS[1]} board."
            )
        return self

    def offset(self, d_row: int, d_col: int) -> Square:
        return Square(self.row + d_row, self.col + d_col)


def all_squares() -> Iterator[Square]:
    """Every square in row-major order. Move enumeration relies on this order for tie-breaking."""
    for row in range(BOARD_DIMENSIONS[0]):
        for col in range(BOARD_DIMENSIONS[1]):
            yield Square(row, col)
