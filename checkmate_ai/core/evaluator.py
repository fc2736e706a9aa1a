"""
Evaluator Module
================

Static evaluation of a python-chess board, returned in centipawns from
White's point of view (positive = White is better). The search engine flips
the sign for Black, so the evaluator itself never looks at whose turn it is
except for terminal and check terms.

Terms:
    - Material (pawn=1 .. queen=9, scaled by 100).
    - Piece-square tables, mirrored for Black; separate king table for the endgame.
    - Mobility: legal-move count difference, the idle side counted after a null move.
    - Terminal scores (checkmate / draws) and a small in-check penalty.
"""

from typing import Dict, List, Optional

import chess

from checkmate_ai.config import CONFIG, EvalConfig

# --- Piece-square tables ---
# Row 0 is rank 8, column 0 is file a, as seen by White.

PAWN_TABLE: List[List[int]] = [
    [0, 0, 0, 0, 0, 0, 0, 0],
    [50, 50, 50, 50, 50, 50, 50, 50],
    [10, 10, 20, 30, 30, 20, 10, 10],
    [5, 5, 10, 25, 25, 10, 5, 5],
    [0, 0, 0, 20, 20, 0, 0, 0],
    [5, -5, -10, 0, 0, -10, -5, 5],
    [5, 10, 10, -20, -20, 10, 10, 5],
    [0, 0, 0, 0, 0, 0, 0, 0],
]

KNIGHT_TABLE: List[List[int]] = [
    [-50, -40, -30, -30, -30, -30, -40, -50],
    [-40, -20, 0, 0, 0, 0, -20, -40],
    [-30, 0, 10, 15, 15, 10, 0, -30],
    [-30, 5, 15, 20, 20, 15, 5, -30],
    [-30, 0, 15, 20, 20, 15, 0, -30],
    [-30, 5, 10, 15, 15, 10, 5, -30],
    [-40, -20, 0, 5, 5, 0, -20, -40],
    [-50, -40, -30, -30, -30, -30, -40, -50],
]

BISHOP_TABLE: List[List[int]] = [
    [-20, -10, -10, -10, -10, -10, -10, -20],
    [-10, 0, 0, 0, 0, 0, 0, -10],
    [-10, 0, 5, 10, 10, 5, 0, -10],
    [-10, 5, 5, 10, 10, 5, 5, -10],
    [-10, 0, 10, 10, 10, 10, 0, -10],
    [-10, 10, 10, 10, 10, 10, 10, -10],
    [-10, 5, 0, 0, 0, 0, 5, -10],
    [-20, -10, -10, -10, -10, -10, -10, -20],
]

ROOK_TABLE: List[List[int]] = [
    [0, 0, 0, 0, 0, 0, 0, 0],
    [5, 10, 10, 10, 10, 10, 10, 5],
    [-5, 0, 0, 0, 0, 0, 0, -5],
    [-5, 0, 0, 0, 0, 0, 0, -5],
    [-5, 0, 0, 0, 0, 0, 0, -5],
    [-5, 0, 0, 0, 0, 0, 0, -5],
    [-5, 0, 0, 0, 0, 0, 0, -5],
    [0, 0, 0, 5, 5, 0, 0, 0],
]

QUEEN_TABLE: List[List[int]] = [
    [-20, -10, -10, -5, -5, -10, -10, -20],
    [-10, 0, 0, 0, 0, 0, 0, -10],
    [-10, 0, 5, 5, 5, 5, 0, -10],
    [-5, 0, 5, 5, 5, 5, 0, -5],
    [0, 0, 5, 5, 5, 5, 0, -5],
    [-10, 5, 5, 5, 5, 5, 0, -10],
    [-10, 0, 5, 0, 0, 0, 0, -10],
    [-20, -10, -10, -5, -5, -10, -10, -20],
]

KING_MG_TABLE: List[List[int]] = [
    [-30, -40, -40, -50, -50, -40, -40, -30],
    [-30, -40, -40, -50, -50, -40, -40, -30],
    [-30, -40, -40, -50, -50, -40, -40, -30],
    [-30, -40, -40, -50, -50, -40, -40, -30],
    [-20, -30, -30, -40, -40, -30, -30, -20],
    [-10, -20, -20, -20, -20, -20, -20, -10],
    [20, 20, 0, 0, 0, 0, 20, 20],
    [20, 30, 10, 0, 0, 10, 30, 20],
]

KING_EG_TABLE: List[List[int]] = [
    [-50, -40, -30, -20, -20, -30, -40, -50],
    [-30, -20, -10, 0, 0, -10, -20, -30],
    [-30, -10, 20, 30, 30, 20, -10, -30],
    [-30, -10, 30, 40, 40, 30, -10, -30],
    [-30, -10, 30, 40, 40, 30, -10, -30],
    [-30, -10, 20, 30, 30, 20, -10, -30],
    [-30, -30, 0, 0, 0, 0, -30, -30],
    [-50, -30, -30, -30, -30, -30, -30, -50],
]

PIECE_TABLES: Dict[int, List[List[int]]] = {
    chess.PAWN: PAWN_TABLE,
    chess.KNIGHT: KNIGHT_TABLE,
    chess.BISHOP: BISHOP_TABLE,
    chess.ROOK: ROOK_TABLE,
    chess.QUEEN: QUEEN_TABLE,
    chess.KING: KING_MG_TABLE,
}


def table_bonus(table: List[List[int]], square: chess.Square, color: chess.Color) -> int:
    """Look up a piece-square bonus, mirroring the table for Black."""
    file = chess.square_file(square)
    rank = chess.square_rank(square)
    row = 7 - rank if color == chess.WHITE else rank
    return table[row][file]


def is_drawn(board: chess.Board) -> bool:
    """Draw conditions other than stalemate (which needs move generation)."""
    return (
        board.is_insufficient_material()
        or board.halfmove_clock >= 100
        or board.is_repetition(3)
    )


class Evaluator:
    def __init__(self, cfg: Optional[EvalConfig] = None):
        self.cfg = cfg or CONFIG.eval
        self.values = {
            pt: self.cfg.piece_values.get(chess.piece_name(pt).upper(), 0) * self.cfg.material_scale
            for pt in chess.PIECE_TYPES
        }

    @property
    def mate_score(self) -> int:
        return self.cfg.mate_score

    def evaluate(self, board: chess.Board) -> int:
        """Return static eval in centipawns, positive favors White."""
        in_check = board.is_check()
        mover_moves = board.legal_moves.count()

        if mover_moves == 0:
            if in_check:
                # side to move is mated
                return -self.cfg.mate_score if board.turn == chess.WHITE else self.cfg.mate_score
            return 0
        if is_drawn(board):
            return 0

        score = self._material_and_position(board)

        if self.cfg.use_mobility and not in_check:
            score += self._mobility(board, mover_moves)

        if in_check:
            score += -self.cfg.check_penalty if board.turn == chess.WHITE else self.cfg.check_penalty

        return score

    def is_endgame(self, board: chess.Board) -> bool:
        non_king = chess.popcount(board.occupied) - 2
        return non_king < self.cfg.endgame_piece_threshold

    def _material_and_position(self, board: chess.Board) -> int:
        score = 0
        endgame = self.is_endgame(board)
        for sq, piece in board.piece_map().items():
            value = self.values[piece.piece_type]
            if self.cfg.use_positional:
                table = PIECE_TABLES[piece.piece_type]
                if piece.piece_type == chess.KING and endgame:
                    table = KING_EG_TABLE
                value += table_bonus(table, sq, piece.color)
            score += value if piece.color == chess.WHITE else -value
        return score

    def _mobility(self, board: chess.Board, mover_moves: int) -> int:
        """Legal-move difference; the idle side is counted after a null move."""
        board.push(chess.Move.null())
        try:
            idle_moves = board.legal_moves.count()
        finally:
            board.pop()

        if board.turn == chess.WHITE:
            diff = mover_moves - idle_moves
        else:
            diff = idle_moves - mover_moves
        return diff * self.cfg.mobility_weight
