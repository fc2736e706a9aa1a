import asyncio
import logging
import random
from typing import List, Optional

import chess

from checkmate_ai.advisor import Advisor, AdvisoryRequest
from checkmate_ai.config import CONFIG, Config, Difficulty
from checkmate_ai.core.evaluator import Evaluator
from checkmate_ai.core.moves import parse_move_text
from checkmate_ai.core.opening import OpeningTable
from checkmate_ai.core.search import SearchEngine
from checkmate_ai.core.selector import CandidateMove, MoveSelector, build_profiles
from checkmate_ai.errors import (
    AdvisoryQuotaExhausted,
    AdvisoryUnavailable,
    is_quota_exceeded_error,
    quota_status_message,
)

logger = logging.getLogger(__name__)

SEARCH_SOURCE = "Custom Algorithm"
RANDOM_SOURCE = "Random Move"


class ChessAI:
    """
    Computer opponent for one game session.

    get_move() tries the opening table, then gathers candidates from the
    search engine, the optional advisor and (for the weaker tiers) a random
    legal move, and lets the difficulty policy pick one of them.
    """

    def __init__(self, difficulty="intermediate", advisor: Optional[Advisor] = None,
                 cfg: Optional[Config] = None, rng: Optional[random.Random] = None):
        self.cfg = cfg or CONFIG
        self.difficulty = Difficulty.from_name(difficulty)
        self.profile = build_profiles(self.cfg)[self.difficulty]
        self.search = SearchEngine(Evaluator(self.cfg.eval), self.cfg.search)
        self.opening = OpeningTable(self.cfg.opening)
        self.selector = MoveSelector(self.difficulty, self.profile, rng)

        self.advisor = advisor
        self.advisor_enabled = advisor is not None
        self.quota_exceeded = False

        self.thinking = False
        self.last_candidates: List[CandidateMove] = []

    async def get_move(self, board: chess.Board) -> Optional[chess.Move]:
        """Pick the engine's move; None when the side to move has no legal moves."""
        self.last_candidates = []
        if not any(board.generate_legal_moves()):
            return None

        book_move = self.opening.lookup(board)
        if book_move is not None:
            return book_move

        self.thinking = True
        try:
            candidates = await self._engine_candidates(board)
            advised = await self._advisor_candidate(board)
            if advised is not None:
                candidates.append(advised)
        finally:
            self.thinking = False

        self.last_candidates = candidates
        chosen = self.selector.select(candidates)
        if chosen is None:
            return None
        logger.info("Engine plays %s (%s)", chosen.move.uci(), chosen.source_name)
        return chosen.move

    async def _engine_candidates(self, board: chess.Board) -> List[CandidateMove]:
        candidates = []
        # worker thread, on a copy: the caller's board is never pushed/popped
        result = await asyncio.to_thread(
            self.search.search, board.copy(), self.profile.depth, self.profile.use_alpha_beta
        )
        if result.move is not None:
            candidates.append(
                CandidateMove(result.move, SEARCH_SOURCE, self.cfg.selector.search_confidence)
            )
        exploratory = self.selector.random_candidate(
            board, self.cfg.selector.random_confidence, RANDOM_SOURCE
        )
        if exploratory is not None:
            candidates.append(exploratory)
        return candidates

    async def _advisor_candidate(self, board: chess.Board) -> Optional[CandidateMove]:
        if not self.advisor_enabled or self.advisor is None:
            return None

        request = AdvisoryRequest.from_board(board, self.difficulty)
        try:
            text = await self.advisor.suggest(request)
        except AdvisoryQuotaExhausted as e:
            self._disable_advisor(e)
            return None
        except AdvisoryUnavailable as e:
            logger.warning("%s unavailable this turn: %s", self.advisor.name, e)
            return None
        except Exception as e:
            if is_quota_exceeded_error(e):
                self._disable_advisor(e)
            else:
                logger.exception("%s failed this turn", self.advisor.name)
            return None

        move = parse_move_text(board, text)
        if move is None:
            logger.warning("Discarding unparseable advisor reply: %r", text)
            return None
        return CandidateMove(move, self.advisor.name, self.cfg.advisor.confidence)

    def _disable_advisor(self, error: Exception) -> None:
        logger.warning("%s quota exceeded, falling back to custom algorithm: %s", self.advisor.name, error)
        logger.warning(quota_status_message(self.cfg.advisor.requests_per_day))
        self.advisor_enabled = False
        self.quota_exceeded = True

    @property
    def is_thinking(self) -> bool:
        return self.thinking

    def get_active_sources(self) -> List[str]:
        sources = []
        if self.advisor is not None and self.advisor_enabled:
            sources.append(self.advisor.name)
        sources.append(SEARCH_SOURCE)
        if self.profile.offer_random_move:
            sources.append(RANDOM_SOURCE)
        return sources

    def get_status_message(self) -> str:
        labels = self.get_active_sources()
        if self.quota_exceeded and self.advisor is not None:
            labels.insert(0, f"{self.advisor.name} (Quota Exceeded)")
        if self.thinking:
            return f"{self.profile.thinking_verb} with {', '.join(labels)}..."
        return f"Ready ({', '.join(labels)})"

    async def aclose(self) -> None:
        if self.advisor is not None:
            await self.advisor.aclose()
