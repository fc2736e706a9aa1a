import chess
import logging
import time
from dataclasses import dataclass
from typing import List, Optional

from checkmate_ai.config import CONFIG, SearchConfig
from checkmate_ai.core.evaluator import Evaluator, is_drawn
from checkmate_ai.core.utils import format_info

logger = logging.getLogger(__name__)

INF = 1000000


@dataclass
class SearchResult:
    move: Optional[chess.Move]
    score: int  # from the root mover's point of view
    nodes: int
    elapsed: float


class SearchEngine:
    """
    Fixed-depth minimax with optional alpha-beta pruning.

    Scores inside the tree are from the root mover's perspective: the root
    picks the maximum, the opponent's plies pick the minimum. The board is
    mutated with push/pop and is always restored before returning.
    """

    def __init__(self, evaluator: Optional[Evaluator] = None, cfg: Optional[SearchConfig] = None):
        self.evaluator = evaluator or Evaluator()
        self.cfg = cfg or CONFIG.search
        self.nodes = 0

    def search_best_move(self, board: chess.Board, depth: int, use_alpha_beta: bool = False) -> Optional[chess.Move]:
        return self.search(board, depth, use_alpha_beta).move

    def search(self, board: chess.Board, depth: int, use_alpha_beta: bool = False) -> SearchResult:
        if depth < 1:
            raise ValueError(f"Search depth must be >= 1, got {depth}")

        self.nodes = 0
        start_time = time.time()
        perspective = board.turn

        moves = list(board.legal_moves)
        if not moves:
            return SearchResult(None, self._static(board, perspective, 0), 0, 0.0)

        best_move = None
        best_score = -INF
        alpha = -INF

        for move in self._order_moves(board, moves):
            board.push(move)
            try:
                score = self._minimax(board, depth - 1, False, alpha, INF, use_alpha_beta, perspective, 1)
            finally:
                board.pop()

            # ties keep the first-seen move
            if score > best_score:
                best_score = score
                best_move = move
            if use_alpha_beta and score > alpha:
                alpha = score

        elapsed = time.time() - start_time
        logger.debug(format_info(depth, best_score, self.nodes, elapsed, best_move, self.evaluator.mate_score))
        return SearchResult(best_move, best_score, self.nodes, elapsed)

    def _minimax(self, board: chess.Board, depth: int, maximizing: bool, alpha: int, beta: int,
                 use_alpha_beta: bool, perspective: chess.Color, ply: int) -> int:
        self.nodes += 1

        moves = list(board.legal_moves)
        if not moves or is_drawn(board):
            return self._static(board, perspective, ply)

        if depth == 0:
            if self.cfg.use_quiescence:
                return self._capture_extension(board, moves, maximizing, perspective, ply)
            return self._static(board, perspective, ply)

        best_value = -INF if maximizing else INF

        for move in self._order_moves(board, moves):
            board.push(move)
            try:
                value = self._minimax(board, depth - 1, not maximizing, alpha, beta,
                                      use_alpha_beta, perspective, ply + 1)
            finally:
                board.pop()

            if maximizing:
                best_value = max(best_value, value)
                if use_alpha_beta:
                    alpha = max(alpha, value)
            else:
                best_value = min(best_value, value)
                if use_alpha_beta:
                    beta = min(beta, value)

            if use_alpha_beta and beta <= alpha:
                break

        return best_value

    def _capture_extension(self, board: chess.Board, moves: List[chess.Move], maximizing: bool,
                           perspective: chess.Color, ply: int) -> int:
        """One extra ply over captures only; no captures means a quiet position."""
        captures = [m for m in moves if board.is_capture(m)]
        if not captures:
            return self._static(board, perspective, ply)

        best_value = -INF if maximizing else INF
        for move in captures:
            self.nodes += 1
            board.push(move)
            try:
                value = self._static(board, perspective, ply + 1)
            finally:
                board.pop()
            best_value = max(best_value, value) if maximizing else min(best_value, value)
        return best_value

    def _static(self, board: chess.Board, perspective: chess.Color, ply: int) -> int:
        """Evaluator score seen from `perspective`; mates found sooner score higher."""
        value = self.evaluator.evaluate(board)
        if perspective == chess.BLACK:
            value = -value
        mate = self.evaluator.mate_score
        if value >= mate:
            value -= ply
        elif value <= -mate:
            value += ply
        return value

    def _order_moves(self, board: chess.Board, moves: List[chess.Move]) -> List[chess.Move]:
        """Captures, then checking moves, then the rest; generation order kept within each group."""
        if not self.cfg.order_moves:
            return moves

        def bucket(move: chess.Move) -> int:
            if board.is_capture(move):
                return 0
            if board.gives_check(move):
                return 1
            return 2

        return sorted(moves, key=bucket)
