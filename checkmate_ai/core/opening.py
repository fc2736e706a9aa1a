"""Tiny opening table: canned first moves for both colors."""

import logging
from typing import List, Optional, Tuple

import chess

from checkmate_ai.config import CONFIG, OpeningConfig

logger = logging.getLogger(__name__)


class OpeningTable:
    def __init__(self, cfg: Optional[OpeningConfig] = None):
        cfg = cfg or CONFIG.opening
        self.enabled = cfg.enabled
        self.ply_limit = cfg.ply_limit
        self.entries: List[Tuple[int, int]] = [
            (chess.parse_square(src), chess.parse_square(dst)) for src, dst in cfg.moves
        ]

    def lookup(self, board: chess.Board, ply_count: Optional[int] = None) -> Optional[chess.Move]:
        """
        Return the first table move that is legal on `board`, or None.
        Only active while the game is younger than `ply_limit` plies. Without
        an explicit `ply_count` the game must have started from the standard
        position, so boards set up from an arbitrary FEN never use the table.
        """
        if not self.enabled:
            return None
        if ply_count is None:
            if board.root().board_fen() != chess.STARTING_BOARD_FEN:
                return None
            ply_count = board.ply()
        if ply_count >= self.ply_limit:
            return None

        legal = list(board.legal_moves)
        for src, dst in self.entries:
            for move in legal:
                if move.from_square == src and move.to_square == dst:
                    logger.debug("Opening table move: %s", move.uci())
                    return move
        return None
