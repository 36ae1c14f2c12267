"""
Search engine: picks a move for the computer opponent.

---
Three difficulty tiers:

* EASY: any legal move, uniformly at random.
* MEDIUM: greedy on captures and checks, with some noise.
* HARD: fixed-depth minimax with alpha-beta pruning over the static evaluation.

---
NOTE: the search tries moves out on the board it is given (apply -> evaluate -> undo).
It needs exclusive access to that board until it returns. Give every concurrent search its own `Board.copy()`.
"""

import logging
import math
import random
from dataclasses import dataclass, field
from typing import Callable, Optional

from src.chess.board import Board
from src.chess.evaluation import evaluate, piece_value
from src.chess.moves import Move
from src.chess.position import Position
from src.chess.rules import is_king_in_check, legal_moves, tentative_move
from src.core.config import DEFAULT_SETTINGS, SearchSettings
from src.core.shared_types import Color, Difficulty

logger = logging.getLogger(__name__)


@dataclass
class SearchEngine:
    difficulty: Difficulty = Difficulty.MEDIUM
    settings: SearchSettings = DEFAULT_SETTINGS
    rng: random.Random = field(default_factory=random.Random)

    def select_move(self, position: Position) -> Optional[Move]:
        """
        Entry point: delegate to the strategy of the current difficulty.
        ---

        Returns None only when the side to move has no legal move (checkmate or stalemate).
        """
        strategy = self._strategies().get(self.difficulty)
        if strategy is None:
            logger.warning(
                "Unknown difficulty %r, falling back to %s",
                self.difficulty,
                Difficulty.EASY,
            )
            strategy = self.random_move

        move = strategy(position)
        logger.debug(
            "%s engine playing %s picked %s",
            self.difficulty,
            position.color_to_move,
            move,
        )
        return move

    def _strategies(self) -> dict[str, Callable[[Position], Optional[Move]]]:
        return {
            Difficulty.EASY: self.random_move,
            Difficulty.MEDIUM: self.greedy_move,
            Difficulty.HARD: self.best_move,
        }

    # --- EASY ---
    def random_move(self, position: Position) -> Optional[Move]:
        moves = position.legal_moves()
        if not moves:
            return None
        return self.rng.choice(moves)

    # --- MEDIUM ---
    def score_move(self, board: Board, move: Move, color: Color) -> int:
        """
        Value of whatever gets captured, plus a flat bonus if the move checks the opponent.

        Taking the king is worth its piece value, there is no check bonus once it is gone.
        """
        score = 0
        target = board.piece(move.to_square)
        if target is not None:
            score += piece_value(target.type)

        with tentative_move(board, move):
            if board.locate_king(color.opponent) is not None and is_king_in_check(
                board, color.opponent
            ):
                score += self.settings.check_bonus
        return score

    def greedy_move(self, position: Position) -> Optional[Move]:
        """
        Usually play the highest scoring move, sometimes any move at all.
        ---

        NOTE: `max` keeps the first move with the highest score, so ties go to the earliest move in enumeration order.
        """
        moves = position.legal_moves()
        if not moves:
            return None

        scored_moves = [
            (move, self.score_move(position.board, move, position.color_to_move))
            for move in moves
        ]
        best_move, best_score = max(scored_moves, key=lambda scored: scored[1])

        if self.rng.random() < self.settings.medium_best_move_probability:
            logger.debug("Greedy pick %s (score %d)", best_move, best_score)
            return best_move
        return self.rng.choice(moves)

    # --- HARD ---
    def best_move(self, position: Position) -> Optional[Move]:
        """
        Score every move by searching the replies to it. The move itself is not part of the search depth.
        ---

        Strict `>` keeps the first move found with the best score.
        """
        ai_color = position.color_to_move
        moves = position.legal_moves()
        if not moves:
            return None

        best_move: Optional[Move] = None
        best_score = -math.inf
        for move in moves:
            with tentative_move(position.board, move):
                score = self.minimax(
                    position.with_turn(ai_color.opponent),
                    self.settings.search_depth,
                    -math.inf,
                    math.inf,
                    False,
                    ai_color,
                )
            logger.debug("Move %s scores %s", move, score)
            if score > best_score:
                best_score = score
                best_move = move
        return best_move

    def minimax(
        self,
        position: Position,
        depth: int,
        alpha: float,
        beta: float,
        is_maximizing: bool,
        ai_color: Color,
    ) -> float:
        """
        Minimax with alpha-beta pruning.
        ---

        * maximizing at the engine's own turns, minimizing at the opponent's
        * leaves (depth 0, or the game is flagged over) get the static evaluation from the engine's point of view
        * so does a board where either king has been captured, there is no play after that
        * no legal moves: mate is the worst possible outcome for whoever is to move, stalemate counts as a draw
        """
        if depth == 0 or position.game_over or self._king_captured(position.board):
            return evaluate(position.board, ai_color, self.settings)

        current_color = ai_color if is_maximizing else ai_color.opponent
        node = position.with_turn(current_color)
        moves = node.legal_moves()

        if not moves:
            if node.is_check():
                return (
                    -self.settings.checkmate_score
                    if is_maximizing
                    else self.settings.checkmate_score
                )
            return 0

        child = node.with_turn(current_color.opponent)
        if is_maximizing:
            max_eval = -math.inf
            for move in moves:
                with tentative_move(position.board, move):
                    evaluation = self.minimax(
                        child, depth - 1, alpha, beta, False, ai_color
                    )
                max_eval = max(max_eval, evaluation)
                alpha = max(alpha, evaluation)
                if beta <= alpha:
                    break
            return max_eval

        min_eval = math.inf
        for move in moves:
            with tentative_move(position.board, move):
                evaluation = self.minimax(child, depth - 1, alpha, beta, True, ai_color)
            min_eval = min(min_eval, evaluation)
            beta = min(beta, evaluation)
            if beta <= alpha:
                break
        return min_eval

    @staticmethod
    def _king_captured(board: Board) -> bool:
        return any(board.locate_king(color) is None for color in Color)


def select_move(
    board: Board,
    color: Color,
    difficulty: Difficulty,
    rng: Optional[random.Random] = None,
) -> Optional[Move]:
    """Convenience wrapper: pick a move for `color` on `board` without setting up an engine first."""
    engine = SearchEngine(difficulty=difficulty, rng=rng or random.Random())
    return engine.select_move(Position(board, color))
