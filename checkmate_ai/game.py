"""Game session over python-chess: move records, result detection and status text."""

import random
import re
import time
from dataclasses import dataclass
from typing import List, Optional

import chess

from checkmate_ai.config import CONFIG, Difficulty
from checkmate_ai.core.moves import MoveInfo, describe_move, parse_move_text
from checkmate_ai.errors import IllegalMoveRequested
from checkmate_ai.main import ChessAI

PLAYER = "Player"
AI = "AI"

_SQUARE_RE = re.compile(r"^[a-h][1-8]$")


@dataclass
class MoveRecord:
    info: MoveInfo
    fen: str  # position after the move
    player: str
    timestamp: float

    @property
    def uci(self) -> str:
        return self.info.uci

    @property
    def san(self) -> str:
        return self.info.san


@dataclass
class GameResult:
    kind: str  # checkmate | stalemate | insufficient | repetition | fifty_moves | draw
    winner: Optional[str] = None
    reason: Optional[str] = None


def color_name(color: chess.Color) -> str:
    return "White" if color == chess.WHITE else "Black"


def is_valid_square(square: str) -> bool:
    return bool(_SQUARE_RE.match(square))


def square_color(square: str) -> str:
    """'light' or 'dark'; a1 is dark."""
    if not is_valid_square(square):
        raise ValueError(f"Invalid square: {square!r}")
    sq = chess.parse_square(square)
    return "dark" if (chess.square_file(sq) + chess.square_rank(sq)) % 2 == 0 else "light"


def game_result(board: chess.Board) -> Optional[GameResult]:
    if board.is_checkmate():
        winner = color_name(not board.turn)
        return GameResult("checkmate", winner=winner, reason=f"{winner} delivered checkmate")
    if board.is_stalemate():
        return GameResult("stalemate", reason="Stalemate")
    if board.is_insufficient_material():
        return GameResult("insufficient", reason="Insufficient material")
    if board.is_repetition(3):
        return GameResult("repetition", reason="Threefold repetition")
    if board.is_fifty_moves():
        return GameResult("fifty_moves", reason="Fifty-move rule")
    if board.is_game_over():
        return GameResult("draw", reason="Draw")
    return None


def status_message(board: chess.Board) -> str:
    result = game_result(board)
    if result is not None:
        if result.kind == "checkmate":
            return f"Checkmate! {result.winner} wins!"
        if result.kind == "stalemate":
            return "Draw by stalemate"
        if result.kind == "insufficient":
            return "Draw by insufficient material"
        if result.kind == "repetition":
            return "Draw by threefold repetition"
        return "Draw"
    if board.is_check():
        return f"{color_name(board.turn)} is in check!"
    return f"{color_name(board.turn)} to move"


class Game:
    """One human-vs-computer game."""

    def __init__(self, player_color: str = "white", difficulty="intermediate",
                 ai: Optional[ChessAI] = None, fen: Optional[str] = None,
                 rng: Optional[random.Random] = None):
        color = player_color.lower()
        if color == "random":
            color = (rng or random).choice(["white", "black"])
        if color not in ("white", "black"):
            raise ValueError(f"Unknown player color: {player_color!r}")

        self.player_color = chess.WHITE if color == "white" else chess.BLACK
        if ai is not None:
            self.ai = ai
            self.difficulty = ai.difficulty
        else:
            self.difficulty = Difficulty.from_name(difficulty)
            self.ai = ChessAI(self.difficulty, cfg=CONFIG)
        self.board = chess.Board(fen) if fen else chess.Board()
        self.history: List[MoveRecord] = []

    @property
    def is_player_turn(self) -> bool:
        return self.board.turn == self.player_color

    def is_game_over(self) -> bool:
        return game_result(self.board) is not None

    def result(self) -> Optional[GameResult]:
        return game_result(self.board)

    def status_message(self) -> str:
        return status_message(self.board)

    def legal_moves(self) -> List[str]:
        return [m.uci() for m in self.board.legal_moves]

    def _record(self, move: chess.Move, player: str) -> MoveRecord:
        info = describe_move(self.board, move)
        self.board.push(move)
        record = MoveRecord(info, self.board.fen(), player, time.time())
        self.history.append(record)
        return record

    def player_move(self, text: str) -> MoveRecord:
        """Play the human's move given in SAN or UCI."""
        if self.is_game_over():
            raise IllegalMoveRequested("Game is already over")
        if not self.is_player_turn:
            raise IllegalMoveRequested("It is not the player's turn")
        move = parse_move_text(self.board, text)
        if move is None:
            raise IllegalMoveRequested(
                f"Illegal move: {text}", details={"legal_moves": self.legal_moves()}
            )
        return self._record(move, PLAYER)

    async def engine_move(self) -> Optional[MoveRecord]:
        """Let the engine reply; None when it is not its turn or the game is over."""
        if self.is_player_turn or self.is_game_over():
            return None
        move = await self.ai.get_move(self.board)
        if move is None:
            return None
        if move not in self.board.legal_moves:
            raise IllegalMoveRequested(f"Engine produced an illegal move: {move.uci()}")
        return self._record(move, AI)

    def undo(self) -> bool:
        """Take back the last player move and the engine's reply."""
        if len(self.history) < 2:
            return False
        for _ in range(2):
            self.board.pop()
            self.history.pop()
        return True
