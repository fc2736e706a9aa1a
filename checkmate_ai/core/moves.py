"""Move descriptors and notation parsing on top of python-chess."""

from dataclasses import dataclass
from typing import Optional

import chess

KINGSIDE_CASTLE = ("O-O", "0-0")
QUEENSIDE_CASTLE = ("O-O-O", "0-0-0")

# Characters trimmed from free-form move text ("Nf3.", "**e4**", "'O-O'")
_STRIP_CHARS = " \t\r\n.,;:!?*`'\"()[]+#"


@dataclass(frozen=True)
class MoveInfo:
    """A move plus the flags a UI needs, relative to the board it came from."""

    from_square: str
    to_square: str
    promotion: Optional[str]
    is_capture: bool
    is_castle_kingside: bool
    is_castle_queenside: bool
    san: str
    uci: str

    def to_dict(self) -> dict:
        return {
            "from": self.from_square,
            "to": self.to_square,
            "promotion": self.promotion,
            "is_capture": self.is_capture,
            "is_castle_kingside": self.is_castle_kingside,
            "is_castle_queenside": self.is_castle_queenside,
            "san": self.san,
            "uci": self.uci,
        }


def describe_move(board: chess.Board, move: chess.Move) -> MoveInfo:
    """Build a MoveInfo for a legal move on `board` (board is not modified)."""
    return MoveInfo(
        from_square=chess.square_name(move.from_square),
        to_square=chess.square_name(move.to_square),
        promotion=chess.piece_symbol(move.promotion) if move.promotion else None,
        is_capture=board.is_capture(move),
        is_castle_kingside=board.is_kingside_castling(move),
        is_castle_queenside=board.is_queenside_castling(move),
        san=board.san(move),
        uci=move.uci(),
    )


def _find_castle(board: chess.Board, kingside: bool) -> Optional[chess.Move]:
    for move in board.legal_moves:
        if kingside and board.is_kingside_castling(move):
            return move
        if not kingside and board.is_queenside_castling(move):
            return move
    return None


def parse_move_text(board: chess.Board, text: Optional[str]) -> Optional[chess.Move]:
    """
    Resolve SAN, UCI, "e2-e4" or castling text to a legal move on `board`.
    Returns None for anything that is not currently legal.
    """
    if not text:
        return None
    token = text.strip().split()[0] if text.strip() else ""
    token = token.strip(_STRIP_CHARS)
    if not token:
        return None

    if token.upper() in QUEENSIDE_CASTLE:
        return _find_castle(board, kingside=False)
    if token.upper() in KINGSIDE_CASTLE:
        return _find_castle(board, kingside=True)

    legal = list(board.legal_moves)
    compact = token.replace("-", "").lower()
    for move in legal:
        uci = move.uci()
        if uci == compact:
            return move
        # promotion omitted: default to queen
        if move.promotion == chess.QUEEN and uci[:4] == compact:
            return move
        if board.san(move) == token:
            return move

    try:
        move = board.parse_san(token)
    except ValueError:
        return None
    return move if move in legal else None
