"""Checkmate AI: the computer opponent of a human-vs-computer chess game."""

from checkmate_ai.config import CONFIG, Difficulty
from checkmate_ai.main import ChessAI
