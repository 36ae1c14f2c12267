"""
Rules engine: everything that decides what may be played on a Board.

---
Two levels of legality:

* pseudo-legal (`is_legal_move`): the piece geometry / path / occupancy rules hold.
* legal (`legal_moves`): pseudo-legal AND the move does not leave your own king in check.

---
NOTE: Moves are tried out on the board itself (apply, inspect, undo) rather than on a copy.
Whoever runs such a check needs exclusive access to the board until `tentative_move` has restored it.
"""

from contextlib import contextmanager
from typing import Iterator

from src.chess.board import Board
from src.chess.moves import MOVEMENT_RULES, Move, MoveRecord, is_promotion_row
from src.chess.pieces import PROMOTION_PIECE
from src.chess.square import Square, all_squares
from src.core.exceptions import IllegalMoveError, MissingKingError
from src.core.shared_types import Color, PieceType


# --- PSEUDO-LEGAL MOVES ---
def is_legal_move(board: Board, from_square: Square, to_square: Square) -> bool:
    """
    Geometry + occupancy check for a single move.
    ---

    1. There must be a piece to move.
    2. You cannot land on your own piece (this also rules out staying on the same square).
    3. The movement rule of the piece type must allow it.

    Does NOT check whether the move leaves your own king in check.
    """
    to_square.validate()
    piece = board.piece(from_square)
    if piece is None:
        return False

    target = board.piece(to_square)
    if target is not None and target.color == piece.color:
        return False

    movement_rule = MOVEMENT_RULES[piece.type]
    return movement_rule(from_square, to_square, board)


def pseudo_legal_moves(board: Board, color: Color) -> Iterator[Move]:
    """Row-major over the starting squares, then row-major over the target squares."""
    for from_square, _ in list(board.pieces(color)):
        for to_square in all_squares():
            if is_legal_move(board, from_square, to_square):
                yield Move(from_square, to_square)


# --- MAKING / TAKING BACK MOVES ---
def apply_move(board: Board, move: Move) -> MoveRecord:
    """
    Update the board in place.
    ---

    * moves the piece, capturing whatever stands on the target square
    * a pawn reaching the first or last row always becomes a queen

    Legality is the caller's business. Returns the record needed by `undo_move`.
    """
    move.to_square.validate()
    piece = board.piece(move.from_square)
    if piece is None:
        raise IllegalMoveError(
            f"No piece on {move.from_square} to move to {move.to_square}."
        )

    promoted_from = None
    if piece.type == PieceType.PAWN and is_promotion_row(move.to_square.row):
        promoted_from = piece.type
        piece = piece.promoted_to(PROMOTION_PIECE)

    captured = board.piece(move.to_square)
    board.place_piece(None, move.from_square)
    board.place_piece(piece, move.to_square)
    return MoveRecord(
        move=move, piece=piece, captured=captured, promoted_from=promoted_from
    )


def undo_move(board: Board, record: MoveRecord) -> None:
    """Exact inverse of `apply_move`: the board ends up identical to the one before the move."""
    board.place_piece(record.moved_piece, record.move.from_square)
    board.place_piece(record.captured, record.move.to_square)


@contextmanager
def tentative_move(board: Board, move: Move) -> Iterator[MoveRecord]:
    """Apply a move for inspection only. The board is restored on exit, also when the inspection raises."""
    record = apply_move(board, move)
    try:
        yield record
    finally:
        undo_move(board, record)


def apply_to_copy(board: Board, move: Move) -> Board:
    """Pure variant of `apply_move`: the original board is left untouched."""
    new_board = board.copy()
    apply_move(new_board, move)
    return new_board


# --- CHECK / CHECKMATE / STALEMATE ---
def is_king_in_check(board: Board, color: Color) -> bool:
    """Could any of the opponent's pieces (pseudo-legally) move onto the king's square?"""
    king_square = board.locate_king(color)
    if king_square is None:
        raise MissingKingError(f"There is no {color} king on the board.")

    return any(
        is_legal_move(board, square, king_square)
        for square, _ in board.pieces(color.opponent)
    )


def leaves_king_in_check(board: Board, move: Move) -> bool:
    """Try the move and see if the mover's own king ends up (or stays) in check."""
    piece = board.piece(move.from_square)
    assert piece is not None
    with tentative_move(board, move):
        return is_king_in_check(board, piece.color)


def legal_moves(board: Board, color: Color) -> list[Move]:
    """
    Moves that are pseudo-legal and do not leave your own king in check.

    The order (row-major over starting squares, then over target squares) is used for tie-breaking by the search.
    """
    return [
        move
        for move in pseudo_legal_moves(board, color)
        if not leaves_king_in_check(board, move)
    ]


def has_legal_move(board: Board, color: Color) -> bool:
    """Same as `bool(legal_moves(...))`, but stops at the first escape found."""
    return any(
        not leaves_king_in_check(board, move)
        for move in pseudo_legal_moves(board, color)
    )


def is_checkmate(board: Board, color: Color) -> bool:
    """In check and no move gets you out of it."""
    if not is_king_in_check(board, color):
        return False
    return not has_legal_move(board, color)


def is_stalemate(board: Board, color: Color) -> bool:
    """
    Not in check, but no legal move either.

    NOTE: "no legal moves" on its own is ambiguous. Tell checkmate and stalemate apart by asking both questions.
    """
    if is_king_in_check(board, color):
        return False
    return not has_legal_move(board, color)
