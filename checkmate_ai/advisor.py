"""External move advisor.

The engine can ask a third-party service for a move suggestion. The contract
is deliberately narrow: an AdvisoryRequest goes out, a single move string in
SAN or coordinate notation comes back. Anything else is reported through the
engine's error taxonomy:

- AdvisoryUnavailable: transport failure, HTTP error, empty or malformed reply.
- AdvisoryQuotaExhausted: the service refused because of rate limits/quota.

GeminiAdvisor talks to the Gemini generateContent REST endpoint with httpx.
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import List, Optional

import chess
import httpx

from checkmate_ai.config import CONFIG, AdvisorConfig, Difficulty
from checkmate_ai.errors import (
    AdvisoryQuotaExhausted,
    AdvisoryUnavailable,
    is_quota_exceeded_error,
)

logger = logging.getLogger(__name__)


@dataclass
class AdvisoryRequest:
    """Everything the advisor gets to see about the position.

    Attributes:
        fen: Serialized position.
        history: Moves played so far, in SAN.
        legal_moves: Currently legal moves, in SAN.
        difficulty: Tier the engine is playing at.
    """

    fen: str
    history: List[str] = field(default_factory=list)
    legal_moves: List[str] = field(default_factory=list)
    difficulty: Difficulty = Difficulty.INTERMEDIATE

    @property
    def white_to_move(self) -> bool:
        return self.fen.split()[1] == "w"

    @classmethod
    def from_board(cls, board: chess.Board, difficulty: Difficulty) -> "AdvisoryRequest":
        return cls(
            fen=board.fen(),
            history=san_history(board),
            legal_moves=[board.san(m) for m in board.legal_moves],
            difficulty=difficulty,
        )


def san_history(board: chess.Board) -> List[str]:
    """Replay the move stack from the root to get SAN for every move."""
    replay = board.root()
    history = []
    for move in board.move_stack:
        history.append(replay.san(move))
        replay.push(move)
    return history


def build_prompt(request: AdvisoryRequest) -> str:
    return (
        "You are a chess AI assistant. Analyze the current position and suggest the best move.\n\n"
        f"Current position (FEN): {request.fen}\n"
        f"Move history: {', '.join(request.history)}\n"
        f"Current turn: {'White' if request.white_to_move else 'Black'}\n"
        f"Difficulty level: {request.difficulty.value}\n\n"
        f"Available moves: {', '.join(request.legal_moves)}\n\n"
        'Please respond with ONLY the best move in algebraic notation (e.g., "e4", "Nf3", "O-O", etc.).\n'
        "Consider the difficulty level:\n"
        "- Novice: Focus on basic principles and avoid blunders\n"
        "- Intermediate: Play solid moves with some tactical awareness\n"
        "- Master: Play the strongest move with deep calculation\n\n"
        "Respond with just the move notation, nothing else.\n"
    )


class Advisor(ABC):
    """A non-deterministic source of move suggestions."""

    name: str = "Advisor"

    @abstractmethod
    async def suggest(self, request: AdvisoryRequest) -> str:
        """Return a single move string, or raise AdvisoryUnavailable."""

    async def aclose(self) -> None:
        return None


class GeminiAdvisor(Advisor):
    """Gemini generateContent client.

    Example:
        advisor = GeminiAdvisor(api_key="...")
        text = await advisor.suggest(AdvisoryRequest.from_board(board, Difficulty.MASTER))
    """

    def __init__(self, api_key: str, cfg: Optional[AdvisorConfig] = None,
                 client: Optional[httpx.AsyncClient] = None) -> None:
        self._cfg = cfg or CONFIG.advisor
        self._api_key = api_key
        self._client = client
        self.name = self._cfg.source_name

    @property
    def url(self) -> str:
        return f"{self._cfg.base_url}/models/{self._cfg.model}:generateContent"

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(
                timeout=self._cfg.timeout,
                headers={"Content-Type": "application/json"},
            )
        return self._client

    async def suggest(self, request: AdvisoryRequest) -> str:
        payload = {"contents": [{"parts": [{"text": build_prompt(request)}]}]}
        try:
            response = await self._get_client().post(
                self.url, params={"key": self._api_key}, json=payload
            )
        except httpx.HTTPError as e:
            logger.warning("Advisor request failed: %s", e)
            raise AdvisoryUnavailable(f"Advisor request failed: {e}") from e

        return self._handle_response(response)

    def _handle_response(self, response: httpx.Response) -> str:
        if response.status_code == 429:
            raise AdvisoryQuotaExhausted(
                "Advisor quota exceeded (429)",
                details={"status_code": response.status_code},
            )
        if response.status_code != 200:
            detail = response.text
            error = AdvisoryUnavailable(
                f"Advisor returned {response.status_code}: {detail}",
                details={"status_code": response.status_code},
            )
            if is_quota_exceeded_error(error):
                raise AdvisoryQuotaExhausted(error.message, details=error.details)
            raise error

        try:
            data = response.json()
            text = data["candidates"][0]["content"]["parts"][0]["text"]
        except (ValueError, KeyError, IndexError, TypeError) as e:
            raise AdvisoryUnavailable(f"Malformed advisor response: {e}") from e

        text = text.strip()
        if not text:
            raise AdvisoryUnavailable("Advisor returned an empty move")
        return text

    async def aclose(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None


def advisor_from_config(cfg=CONFIG) -> Optional[Advisor]:
    """GeminiAdvisor when enabled and an API key is available, else None."""
    if not cfg.advisor.enabled:
        return None
    api_key = cfg.advisor_api_key()
    if not api_key:
        logger.info("No Gemini API key found, using custom algorithm only")
        return None
    logger.info("Gemini advisor initialized (%s)", cfg.advisor.model)
    return GeminiAdvisor(api_key, cfg.advisor)
