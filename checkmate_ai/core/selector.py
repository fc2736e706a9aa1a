"""Difficulty tiers and the policy that turns ranked candidates into one move."""

import random
from dataclasses import dataclass
from typing import Dict, List, Optional

import chess

from checkmate_ai.config import CONFIG, Config, Difficulty


@dataclass(frozen=True)
class CandidateMove:
    move: chess.Move
    source_name: str
    confidence: float

    def __post_init__(self):
        if not 0.0 <= self.confidence <= 1.0:
            raise ValueError(f"confidence must be within [0, 1], got {self.confidence}")


@dataclass(frozen=True)
class TierProfile:
    depth: int
    use_alpha_beta: bool
    top_probability: float
    random_pool: Optional[int]  # None = every candidate
    offer_random_move: bool
    thinking_verb: str


def build_profiles(cfg: Config = CONFIG) -> Dict[Difficulty, TierProfile]:
    sel = cfg.selector
    return {
        Difficulty.NOVICE: TierProfile(
            depth=cfg.depth_for(Difficulty.NOVICE),
            use_alpha_beta=False,
            top_probability=sel.novice_top_probability,
            random_pool=None,
            offer_random_move=True,
            thinking_verb="Thinking",
        ),
        Difficulty.INTERMEDIATE: TierProfile(
            depth=cfg.depth_for(Difficulty.INTERMEDIATE),
            use_alpha_beta=False,
            top_probability=sel.intermediate_top_probability,
            random_pool=sel.intermediate_pool,
            offer_random_move=True,
            thinking_verb="Calculating",
        ),
        Difficulty.MASTER: TierProfile(
            depth=cfg.depth_for(Difficulty.MASTER),
            use_alpha_beta=cfg.search.master_alpha_beta,
            top_probability=1.0,
            random_pool=1,
            offer_random_move=False,
            thinking_verb="Analyzing",
        ),
    }


def rank_candidates(candidates: List[CandidateMove]) -> List[CandidateMove]:
    """Highest confidence first; equal confidences keep insertion order."""
    return sorted(candidates, key=lambda c: c.confidence, reverse=True)


class MoveSelector:
    def __init__(self, difficulty: Difficulty, profile: Optional[TierProfile] = None,
                 rng: Optional[random.Random] = None):
        self.difficulty = difficulty
        self.profile = profile or build_profiles()[difficulty]
        self.rng = rng or random.Random()

    def random_candidate(self, board: chess.Board, confidence: float,
                         source_name: str = "Random Move") -> Optional[CandidateMove]:
        """Exploratory candidate for tiers that play imperfectly on purpose."""
        if not self.profile.offer_random_move:
            return None
        moves = list(board.legal_moves)
        if not moves:
            return None
        return CandidateMove(self.rng.choice(moves), source_name, confidence)

    def select(self, candidates: List[CandidateMove]) -> Optional[CandidateMove]:
        if not candidates:
            return None
        ranked = rank_candidates(candidates)

        if self.profile.top_probability >= 1.0 or self.rng.random() < self.profile.top_probability:
            return ranked[0]

        pool = ranked if self.profile.random_pool is None else ranked[:self.profile.random_pool]
        return self.rng.choice(pool)
