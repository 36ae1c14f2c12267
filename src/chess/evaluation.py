"""Static evaluation of a board, always from the point of view of one side (the side the engine plays)."""

from src.chess.board import Board
from src.chess.pieces import PIECE_POINTS
from src.chess.rules import is_checkmate, is_king_in_check
from src.core.config import DEFAULT_SETTINGS, SearchSettings
from src.core.shared_types import Color, PieceType


def piece_value(piece_type: PieceType) -> int:
    return PIECE_POINTS[piece_type]


def material_balance(board: Board, color: Color) -> int:
    """Own material counts positive, the opponent's material negative."""
    material = board.count_material()
    return material[color] - material[color.opponent]


def _is_in_check(board: Board, color: Color) -> bool:
    """A side whose king has been captured is simply not in check any more."""
    return board.locate_king(color) is not None and is_king_in_check(board, color)


def evaluate(
    board: Board, color: Color, settings: SearchSettings = DEFAULT_SETTINGS
) -> int:
    """
    Material balance, corrected for check and checkmate
    ---

    * opponent in check: + check score (+ checkmate score on top if it is mate)
    * own king in check: - check score (- checkmate score on top if it is mate)
    * a captured king only shows up in the material balance
    """
    score = material_balance(board, color)

    opponent = color.opponent
    if _is_in_check(board, opponent):
        score += settings.check_score
        if is_checkmate(board, opponent):
            score += settings.checkmate_score

    if _is_in_check(board, color):
        score -= settings.check_score
        if is_checkmate(board, color):
            score -= settings.checkmate_score

    return score
